"""Content and recency comparison between a source file and its backup."""

import hashlib
import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Union

from .models import ContentComparison, RecencyComparison
from .storage import Destination

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def sha256_stream(stream: BinaryIO) -> str:
    """Compute the hex SHA-256 digest of a binary stream."""
    digest = hashlib.sha256()
    for chunk in iter(lambda: stream.read(CHUNK_SIZE), b''):
        digest.update(chunk)
    return digest.hexdigest()


def sha256_file(path: Union[str, Path]) -> str:
    """Compute the hex SHA-256 digest of a file."""
    with open(path, 'rb') as stream:
        return sha256_stream(stream)


def source_modified_time(source_path: Union[str, Path],
                         resolution: timedelta = timedelta(0)) -> datetime:
    """Return the UTC modification time of a source file.

    Args:
        source_path: File to inspect.
        resolution: Granularity to truncate to, matching what the
            destination is able to store.

    Returns:
        Timezone-aware UTC datetime.
    """
    timestamp = os.stat(source_path).st_mtime
    step = resolution.total_seconds()
    if step > 0:
        timestamp -= timestamp % step
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def compare_content(source_path: Union[str, Path], destination: Destination) -> ContentComparison:
    """Compare source bytes with the destination copy by SHA-256 digest.

    Args:
        source_path: File being backed up.
        destination: Existing destination artifact.

    Returns:
        NO_MATCHING_ENTRY when an archive lacks a member named after the
        source, otherwise IDENTICAL or DIFFERENT.
    """
    name = os.path.basename(source_path)
    with destination.open_entry(name) as stream:
        if stream is None:
            logger.debug(f"{name} not present in {destination.path}")
            return ContentComparison.NO_MATCHING_ENTRY
        destination_digest = sha256_stream(stream)

    source_digest = sha256_file(source_path)
    logger.debug(f"SHA-256 {name}: source={source_digest} destination={destination_digest}")

    if source_digest == destination_digest:
        return ContentComparison.IDENTICAL
    return ContentComparison.DIFFERENT


def compare_recency(source_path: Union[str, Path], destination: Destination) -> RecencyComparison:
    """Compare source and destination modification times in UTC.

    Args:
        source_path: File being backed up.
        destination: Existing destination artifact.

    Returns:
        NO_MATCHING_ENTRY when an archive lacks a member named after the
        source, otherwise the ordering of the two timestamps.
    """
    name = os.path.basename(source_path)
    destination_time = destination.entry_modified_time(name)
    if destination_time is None:
        return RecencyComparison.NO_MATCHING_ENTRY

    source_time = source_modified_time(source_path, destination.timestamp_resolution)
    logger.debug(f"Modified {name}: source={source_time.isoformat()} "
                 f"destination={destination_time.isoformat()}")

    if source_time > destination_time:
        return RecencyComparison.SOURCE_NEWER
    if source_time < destination_time:
        return RecencyComparison.SOURCE_OLDER
    return RecencyComparison.EQUAL
