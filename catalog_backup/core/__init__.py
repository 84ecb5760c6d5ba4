"""Core backup functionality."""

from .engine import BackupEngine
from .destination import resolve_destination, ARCHIVE_EXTENSION
from .comparator import compare_content, compare_recency
from .storage import Destination, PlainFileDestination, ArchiveDestination, open_destination
from .models import (
    BackupAction,
    BackupReport,
    BackupResult,
    BackupSettings,
    CatalogEntry,
    ContentComparison,
    EntryOutcome,
    RecencyComparison,
)

__all__ = [
    "BackupEngine", "resolve_destination", "ARCHIVE_EXTENSION",
    "compare_content", "compare_recency",
    "Destination", "PlainFileDestination", "ArchiveDestination", "open_destination",
    "BackupAction", "BackupReport", "BackupResult", "BackupSettings", "CatalogEntry",
    "ContentComparison", "EntryOutcome", "RecencyComparison",
]
