"""Destination path resolution for catalog backups."""

from pathlib import Path
from typing import Union

from .models import CatalogEntry

ARCHIVE_EXTENSION = ".zip"


def resolve_destination(entry: CatalogEntry, compress: bool,
                        global_backup_directory: Union[str, Path]) -> Path:
    """Resolve where a catalog entry is backed up to.

    The custom backup directory of the entry wins over the global one.
    Nothing is checked on disk.

    Args:
        entry: Catalog entry to resolve.
        compress: Whether backups are stored as zip archives.
        global_backup_directory: Directory used when the entry has no override.

    Returns:
        Path of the destination file or archive.
    """
    if entry.has_custom_backup_directory:
        base_directory = Path(entry.custom_backup_directory)
    else:
        base_directory = Path(global_backup_directory)

    file_name = Path(entry.file_name)
    if compress:
        return base_directory / file_name.with_suffix(ARCHIVE_EXTENSION)
    return base_directory / file_name
