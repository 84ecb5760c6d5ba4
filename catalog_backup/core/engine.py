"""Backup decision engine."""

import logging
import zipfile
from datetime import datetime
from pathlib import Path
from typing import Optional

from .comparator import compare_content, compare_recency
from .destination import resolve_destination
from .models import (
    BackupAction,
    BackupDecision,
    BackupReport,
    BackupResult,
    BackupSettings,
    CatalogEntry,
    ContentComparison,
    EntryOutcome,
    RecencyComparison,
)
from .storage import Destination, open_destination

REASON_HASH_IDENTICAL = "hash identical"
REASON_OLDER = "older"
REASON_NOT_IN_ARCHIVE = "not found in archive"

# Errors that fail a single entry without stopping the run.
ENTRY_ERRORS = (OSError, ValueError, zipfile.BadZipFile, zipfile.LargeZipFile)

_WRITE_OUTCOMES = {
    BackupAction.CREATE: EntryOutcome.CREATED,
    BackupAction.OVERWRITE: EntryOutcome.OVERWRITTEN,
}


class BackupEngine:
    """Decides and performs the backup of every configured catalog."""

    def __init__(self, settings: BackupSettings, dry_run: bool = False):
        """Initialize backup engine.

        Args:
            settings: Validated backup settings.
            dry_run: If True, decisions are reported but nothing is written.
        """
        self.settings = settings
        self.dry_run = dry_run
        self.logger = logging.getLogger(__name__)

    def destination_for(self, entry: CatalogEntry) -> Path:
        return resolve_destination(entry, self.settings.compress,
                                   self.settings.global_backup_directory)

    def _open(self, destination: Path) -> Destination:
        return open_destination(destination, self.settings.compress)

    def evaluate(self, entry: CatalogEntry) -> BackupDecision:
        """Choose the action for one catalog entry without writing anything.

        Args:
            entry: Catalog entry to evaluate.

        Returns:
            The decision for the entry.

        Raises:
            OSError: If the source or destination cannot be read.
            zipfile.BadZipFile: If an existing archive is corrupt.
        """
        path = self.destination_for(entry)
        destination = self._open(path)

        if not destination.exists():
            return BackupDecision(entry, path, BackupAction.CREATE)

        content = compare_content(entry.source_path, destination)
        self.logger.debug(f"Content comparison for {entry.file_name}: {content.value}")

        if content is ContentComparison.IDENTICAL:
            return BackupDecision(entry, path, BackupAction.SKIP, REASON_HASH_IDENTICAL)
        if content is ContentComparison.NO_MATCHING_ENTRY:
            return BackupDecision(entry, path, BackupAction.CREATE, REASON_NOT_IN_ARCHIVE)

        recency = compare_recency(entry.source_path, destination)
        self.logger.debug(f"Recency comparison for {entry.file_name}: {recency.value}")

        if recency in (RecencyComparison.SOURCE_NEWER, RecencyComparison.EQUAL):
            return BackupDecision(entry, path, BackupAction.OVERWRITE)
        if recency is RecencyComparison.SOURCE_OLDER:
            return BackupDecision(entry, path, BackupAction.SKIP, REASON_OLDER)
        return BackupDecision(entry, path, BackupAction.CREATE, REASON_NOT_IN_ARCHIVE)

    def write(self, decision: BackupDecision) -> None:
        """Write the destination artifact for a CREATE or OVERWRITE decision."""
        destination = self._open(decision.destination)
        destination.write_single_entry(decision.entry.file_name, decision.entry.source_path)

    def process_entry(self, entry: CatalogEntry) -> BackupResult:
        """Evaluate one entry and, unless in dry-run mode, write it.

        Args:
            entry: Catalog entry to back up.

        Returns:
            Result for the entry. Errors are reported as FAILED, never raised.
        """
        try:
            decision = self.evaluate(entry)
        except ENTRY_ERRORS as e:
            self.logger.debug(f"Could not evaluate {entry.file_name}: {e}")
            return BackupResult(
                entry=entry,
                destination=self._safe_destination(entry),
                outcome=EntryOutcome.FAILED,
                error=str(e),
                dry_run=self.dry_run
            )

        if decision.action is BackupAction.SKIP:
            return BackupResult(
                entry=entry,
                destination=decision.destination,
                outcome=EntryOutcome.SKIPPED,
                action=decision.action,
                reason=decision.reason,
                dry_run=self.dry_run
            )

        if not self.dry_run:
            try:
                self.write(decision)
            except ENTRY_ERRORS as e:
                self.logger.debug(f"Could not write {decision.destination}: {e}")
                return BackupResult(
                    entry=entry,
                    destination=decision.destination,
                    outcome=EntryOutcome.FAILED,
                    action=decision.action,
                    reason=decision.reason,
                    error=str(e),
                    dry_run=self.dry_run
                )

        return BackupResult(
            entry=entry,
            destination=decision.destination,
            outcome=_WRITE_OUTCOMES[decision.action],
            action=decision.action,
            reason=decision.reason,
            dry_run=self.dry_run
        )

    def _safe_destination(self, entry: CatalogEntry) -> Optional[Path]:
        try:
            return self.destination_for(entry)
        except ValueError:
            return None

    def run(self) -> BackupReport:
        """Process every configured catalog in order.

        Returns:
            Report with one result per catalog entry.
        """
        started = datetime.now()
        self.logger.debug(f"Processing {len(self.settings.catalogs)} catalogs "
                          f"(compress={self.settings.compress}, dry_run={self.dry_run})")

        results = [self.process_entry(entry) for entry in self.settings.catalogs]

        return BackupReport(
            results=results,
            dry_run=self.dry_run,
            started=started,
            finished=datetime.now()
        )
