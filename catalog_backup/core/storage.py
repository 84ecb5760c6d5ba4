"""Plain-file and zip-archive destinations for catalog backups."""

import logging
import os
import shutil
import zipfile
import zlib
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

logger = logging.getLogger(__name__)

# Raised by zipfile while reading damaged, truncated or encrypted member data.
MEMBER_READ_ERRORS = (zlib.error, EOFError, RuntimeError, NotImplementedError)


class Destination(ABC):
    """Where one catalog entry is stored.

    Every destination exposes the same read and write capabilities so the
    comparator and the engine never branch on the storage format.
    """

    timestamp_resolution = timedelta(0)

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    @abstractmethod
    def open_entry(self, name: str):
        """Open the stored copy of ``name`` for reading.

        Used as a context manager yielding a binary stream, or None when
        the destination holds no such entry.
        """

    @abstractmethod
    def entry_modified_time(self, name: str) -> Optional[datetime]:
        """Return the UTC modification time of the stored copy of ``name``."""

    @abstractmethod
    def write_single_entry(self, name: str, source_path: Union[str, Path]) -> None:
        """Replace the destination with a copy of ``source_path`` stored as ``name``."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({str(self.path)!r})"


class PlainFileDestination(Destination):
    """A direct copy of the source file."""

    @contextmanager
    def open_entry(self, name: str) -> Iterator[Optional[BinaryIO]]:
        with open(self.path, 'rb') as stream:
            yield stream

    def entry_modified_time(self, name: str) -> Optional[datetime]:
        return datetime.fromtimestamp(os.stat(self.path).st_mtime, tz=timezone.utc)

    def write_single_entry(self, name: str, source_path: Union[str, Path]) -> None:
        logger.debug(f"Copying {source_path} to {self.path}")
        shutil.copy2(source_path, self.path)


class ArchiveDestination(Destination):
    """A zip archive holding one member named after the source file."""

    # Zip members store local time in even seconds.
    timestamp_resolution = timedelta(seconds=2)

    def _find_member(self, archive: zipfile.ZipFile, name: str) -> Optional[zipfile.ZipInfo]:
        for info in archive.infolist():
            if info.is_dir():
                continue
            if os.path.basename(info.filename.rstrip('/')) == name:
                return info
        return None

    @contextmanager
    def open_entry(self, name: str) -> Iterator[Optional[BinaryIO]]:
        with zipfile.ZipFile(self.path, 'r') as archive:
            info = self._find_member(archive, name)
            if info is None:
                yield None
                return
            try:
                with archive.open(info, 'r') as stream:
                    yield stream
            except MEMBER_READ_ERRORS as e:
                raise zipfile.BadZipFile(f"Cannot read {name} from {self.path}: {e}") from e

    def entry_modified_time(self, name: str) -> Optional[datetime]:
        with zipfile.ZipFile(self.path, 'r') as archive:
            info = self._find_member(archive, name)
        if info is None:
            return None
        # An ambiguous local time (DST fall-back hour) resolves to the earlier
        # instant, which at worst causes one extra overwrite.
        return datetime(*info.date_time, fold=0).astimezone(timezone.utc)

    def write_single_entry(self, name: str, source_path: Union[str, Path]) -> None:
        logger.debug(f"Writing {source_path} into archive {self.path} as {name}")
        with zipfile.ZipFile(self.path, 'w', compression=zipfile.ZIP_DEFLATED,
                             strict_timestamps=False) as archive:
            archive.write(source_path, arcname=name)


def open_destination(path: Union[str, Path], compress: bool) -> Destination:
    """Return the destination variant matching the compression setting."""
    if compress:
        return ArchiveDestination(path)
    return PlainFileDestination(path)
