"""Data models for catalog backups."""

import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass
class CatalogEntry:
    """A source file tracked for backup, with an optional directory override."""
    source_path: str
    custom_backup_directory: str = ""

    @property
    def file_name(self) -> str:
        return os.path.basename(self.source_path)

    @property
    def has_custom_backup_directory(self) -> bool:
        return bool(self.custom_backup_directory and self.custom_backup_directory.strip())

    def __hash__(self) -> int:
        return hash((self.source_path, self.custom_backup_directory))

    def to_dict(self) -> Dict[str, str]:
        return {
            'pathToFile': self.source_path,
            'customBackupDirectory': self.custom_backup_directory,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CatalogEntry':
        return cls(
            source_path=data['pathToFile'],
            custom_backup_directory=data.get('customBackupDirectory') or "",
        )


@dataclass
class BackupSettings:
    """Global backup directory, compression switch and the ordered catalogs."""
    global_backup_directory: str
    compress: bool = False
    catalogs: List[CatalogEntry] = field(default_factory=list)

    def add_catalog(self, entry: CatalogEntry) -> bool:
        """Append a catalog entry.

        Args:
            entry: Entry to add.

        Returns:
            False if an identical entry is already configured.
        """
        if entry in self.catalogs:
            return False
        self.catalogs.append(entry)
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'globalBackupDirectory': self.global_backup_directory,
            'compress': self.compress,
            'catalogs': [catalog.to_dict() for catalog in self.catalogs],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BackupSettings':
        return cls(
            global_backup_directory=data['globalBackupDirectory'],
            compress=bool(data.get('compress', False)),
            catalogs=[CatalogEntry.from_dict(item) for item in data.get('catalogs') or []],
        )


class ContentComparison(Enum):
    """Outcome of comparing source and destination bytes."""
    IDENTICAL = "identical"
    DIFFERENT = "different"
    NO_MATCHING_ENTRY = "no_matching_entry"


class RecencyComparison(Enum):
    """Outcome of comparing source and destination modification times."""
    SOURCE_NEWER = "source_newer"
    EQUAL = "equal"
    SOURCE_OLDER = "source_older"
    NO_MATCHING_ENTRY = "no_matching_entry"


class BackupAction(Enum):
    SKIP = "skip"
    CREATE = "create"
    OVERWRITE = "overwrite"


class EntryOutcome(Enum):
    SKIPPED = "skipped"
    CREATED = "created"
    OVERWRITTEN = "overwritten"
    FAILED = "failed"


@dataclass
class BackupDecision:
    """Action chosen for one catalog entry before anything is written."""
    entry: CatalogEntry
    destination: Path
    action: BackupAction
    reason: Optional[str] = None


@dataclass
class BackupResult:
    """What happened to one catalog entry during a run."""
    entry: CatalogEntry
    destination: Optional[Path]
    outcome: EntryOutcome
    action: Optional[BackupAction] = None
    reason: Optional[str] = None
    error: Optional[str] = None
    dry_run: bool = False


@dataclass
class BackupReport:
    """Ordered per-entry results of one backup run."""
    results: List[BackupResult]
    dry_run: bool
    started: datetime
    finished: datetime

    def count(self, outcome: EntryOutcome) -> int:
        return sum(1 for result in self.results if result.outcome is outcome)

    @property
    def has_failures(self) -> bool:
        return self.count(EntryOutcome.FAILED) > 0

    def summary(self) -> Dict[str, int]:
        summary = {outcome.value: self.count(outcome) for outcome in EntryOutcome}
        summary['total'] = len(self.results)
        return summary
