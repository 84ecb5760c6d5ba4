"""Shared test fixtures for catalog-backup tests."""

from __future__ import annotations

import os
import struct
import zipfile
from pathlib import Path

import pytest

from catalog_backup.core.models import BackupSettings, CatalogEntry

# Even number of seconds so zip timestamps round-trip exactly.
BASE_MTIME = 1_700_000_000


def set_mtime(path: Path, mtime: float) -> None:
    """Set both access and modification time of a file."""
    os.utime(path, (mtime, mtime))


def make_archive(path: Path, members: dict[str, bytes]) -> Path:
    """Create a zip archive with the given members."""
    with zipfile.ZipFile(path, "w") as archive:
        for name, data in members.items():
            archive.writestr(name, data)
    return path


def make_damaged_archive(path: Path, name: str, encrypted: bool = False) -> Path:
    """Create a well-formed zip whose single deflated member cannot be read.

    The headers stay intact; either the compressed bytes are scrambled or
    the member is flagged as encrypted.
    """
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(name, bytes(range(256)) * 64)

    data = bytearray(path.read_bytes())
    local = data.find(b"PK\x03\x04")
    central = data.find(b"PK\x01\x02")
    if encrypted:
        for flags_at in (local + 6, central + 8):
            (flags,) = struct.unpack_from("<H", data, flags_at)
            struct.pack_into("<H", data, flags_at, flags | 0x1)
    else:
        name_length, extra_length = struct.unpack_from("<HH", data, local + 26)
        start = local + 30 + name_length + extra_length + 2
        for i in range(start, start + 20):
            data[i] ^= 0xFF
    path.write_bytes(bytes(data))
    return path


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Return a catalog file with known content and modification time."""
    photos = tmp_path / "photos"
    photos.mkdir()
    catalog = photos / "Travel.lrcat"
    catalog.write_bytes(b"SQLite format 3\x00catalog v1")
    set_mtime(catalog, BASE_MTIME)
    return catalog


@pytest.fixture
def backup_dir(tmp_path: Path) -> Path:
    """Return an empty global backup directory."""
    backup = tmp_path / "backup"
    backup.mkdir()
    return backup


@pytest.fixture
def entry(catalog_file: Path) -> CatalogEntry:
    return CatalogEntry(source_path=str(catalog_file))


@pytest.fixture
def plain_settings(entry: CatalogEntry, backup_dir: Path) -> BackupSettings:
    return BackupSettings(
        global_backup_directory=str(backup_dir), compress=False, catalogs=[entry]
    )


@pytest.fixture
def archive_settings(entry: CatalogEntry, backup_dir: Path) -> BackupSettings:
    return BackupSettings(
        global_backup_directory=str(backup_dir), compress=True, catalogs=[entry]
    )
