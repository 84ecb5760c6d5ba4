"""Tests for catalog_backup.core.comparator and storage."""

from __future__ import annotations

import hashlib
import shutil
import zipfile
from pathlib import Path

import pytest

from catalog_backup.core.comparator import (
    compare_content,
    compare_recency,
    sha256_file,
    source_modified_time,
)
from catalog_backup.core.models import ContentComparison, RecencyComparison
from catalog_backup.core.storage import (
    ArchiveDestination,
    PlainFileDestination,
    open_destination,
)
from conftest import BASE_MTIME, make_archive, make_damaged_archive, set_mtime


def test_sha256_file_matches_hashlib(catalog_file: Path) -> None:
    expected = hashlib.sha256(catalog_file.read_bytes()).hexdigest()
    assert sha256_file(catalog_file) == expected


def test_open_destination_picks_variant(tmp_path: Path) -> None:
    assert isinstance(open_destination(tmp_path / "a.zip", True), ArchiveDestination)
    assert isinstance(open_destination(tmp_path / "a.lrcat", False), PlainFileDestination)


class TestPlainFileComparison:
    def test_identical_copy(self, catalog_file: Path, backup_dir: Path) -> None:
        copy = backup_dir / catalog_file.name
        shutil.copy2(catalog_file, copy)
        destination = PlainFileDestination(copy)

        assert compare_content(catalog_file, destination) is ContentComparison.IDENTICAL
        assert compare_recency(catalog_file, destination) is RecencyComparison.EQUAL

    def test_different_content(self, catalog_file: Path, backup_dir: Path) -> None:
        copy = backup_dir / catalog_file.name
        copy.write_bytes(b"stale")
        assert compare_content(catalog_file, PlainFileDestination(copy)) is ContentComparison.DIFFERENT

    def test_recency_ordering(self, catalog_file: Path, backup_dir: Path) -> None:
        copy = backup_dir / catalog_file.name
        copy.write_bytes(b"stale")
        destination = PlainFileDestination(copy)

        set_mtime(copy, BASE_MTIME - 60)
        assert compare_recency(catalog_file, destination) is RecencyComparison.SOURCE_NEWER

        set_mtime(copy, BASE_MTIME + 60)
        assert compare_recency(catalog_file, destination) is RecencyComparison.SOURCE_OLDER

    def test_comparison_does_not_modify_destination(self, catalog_file: Path, backup_dir: Path) -> None:
        copy = backup_dir / catalog_file.name
        copy.write_bytes(b"stale")
        set_mtime(copy, BASE_MTIME + 60)
        before = copy.stat().st_mtime_ns

        compare_content(catalog_file, PlainFileDestination(copy))
        compare_recency(catalog_file, PlainFileDestination(copy))

        assert copy.read_bytes() == b"stale"
        assert copy.stat().st_mtime_ns == before


class TestArchiveComparison:
    def test_missing_member(self, catalog_file: Path, backup_dir: Path) -> None:
        archive = make_archive(backup_dir / "Travel.zip", {"Other.lrcat": b"other"})
        destination = ArchiveDestination(archive)

        assert compare_content(catalog_file, destination) is ContentComparison.NO_MATCHING_ENTRY
        assert compare_recency(catalog_file, destination) is RecencyComparison.NO_MATCHING_ENTRY

    def test_member_found_by_basename(self, catalog_file: Path, backup_dir: Path) -> None:
        archive = make_archive(
            backup_dir / "Travel.zip",
            {f"nested/{catalog_file.name}": catalog_file.read_bytes()},
        )
        assert compare_content(catalog_file, ArchiveDestination(archive)) is ContentComparison.IDENTICAL

    def test_write_then_read_back(self, catalog_file: Path, backup_dir: Path) -> None:
        destination = ArchiveDestination(backup_dir / "Travel.zip")
        destination.write_single_entry(catalog_file.name, catalog_file)

        with zipfile.ZipFile(destination.path) as archive:
            assert archive.namelist() == [catalog_file.name]
            assert archive.read(catalog_file.name) == catalog_file.read_bytes()

        written = destination.entry_modified_time(catalog_file.name)
        assert written >= source_modified_time(catalog_file, destination.timestamp_resolution)
        assert compare_content(catalog_file, destination) is ContentComparison.IDENTICAL
        assert compare_recency(catalog_file, destination) is RecencyComparison.EQUAL

    def test_odd_second_source_is_not_older_than_its_archive(
        self, catalog_file: Path, backup_dir: Path
    ) -> None:
        set_mtime(catalog_file, BASE_MTIME + 1.5)
        destination = ArchiveDestination(backup_dir / "Travel.zip")
        destination.write_single_entry(catalog_file.name, catalog_file)

        assert compare_recency(catalog_file, destination) is RecencyComparison.EQUAL

    def test_recency_against_member(self, catalog_file: Path, backup_dir: Path) -> None:
        destination = ArchiveDestination(backup_dir / "Travel.zip")
        destination.write_single_entry(catalog_file.name, catalog_file)

        set_mtime(catalog_file, BASE_MTIME + 60)
        assert compare_recency(catalog_file, destination) is RecencyComparison.SOURCE_NEWER

        set_mtime(catalog_file, BASE_MTIME - 60)
        assert compare_recency(catalog_file, destination) is RecencyComparison.SOURCE_OLDER

    def test_write_replaces_existing_archive(self, catalog_file: Path, backup_dir: Path) -> None:
        archive = make_archive(backup_dir / "Travel.zip", {"Other.lrcat": b"other"})
        ArchiveDestination(archive).write_single_entry(catalog_file.name, catalog_file)

        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == [catalog_file.name]

    def test_corrupt_archive_raises(self, catalog_file: Path, backup_dir: Path) -> None:
        archive = backup_dir / "Travel.zip"
        archive.write_bytes(b"not a zip archive")

        with pytest.raises(zipfile.BadZipFile):
            compare_content(catalog_file, ArchiveDestination(archive))

    @pytest.mark.parametrize("encrypted", [False, True])
    def test_unreadable_member_raises_bad_zip(
        self, catalog_file: Path, backup_dir: Path, encrypted: bool
    ) -> None:
        archive = make_damaged_archive(backup_dir / "Travel.zip", catalog_file.name, encrypted=encrypted)

        with pytest.raises(zipfile.BadZipFile):
            compare_content(catalog_file, ArchiveDestination(archive))
