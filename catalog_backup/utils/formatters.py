"""Formatting utilities for backup log lines and summaries."""

from datetime import datetime

from ..core.models import BackupAction, BackupReport, BackupResult, EntryOutcome

DRY_RUN_PREFIX = "[DRY] "


def format_file_size(size_bytes: int) -> str:
    """Format file size in human readable format.

    Args:
        size_bytes: Size in bytes.

    Returns:
        Human readable size string.
    """
    if size_bytes < 1024:
        return f"{size_bytes}B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes // 1024}KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes // (1024 * 1024)}MB"
    else:
        return f"{size_bytes // (1024 * 1024 * 1024)}GB"


def format_date(dt: datetime, short: bool = False) -> str:
    """Format datetime for display.

    Args:
        dt: Datetime to format.
        short: If True, use short format.

    Returns:
        Formatted date string.
    """
    if short:
        return dt.strftime('%Y-%m-%d %H:%M')
    else:
        return dt.strftime('%Y-%m-%d %H:%M:%S')


def with_dry_run(message: str, dry_run: bool) -> str:
    return DRY_RUN_PREFIX + message if dry_run else message


def _write_verb(result: BackupResult, compress: bool) -> str:
    name = result.entry.file_name
    if compress:
        return f"Creating zip archive for {name}."
    return f"Copying {name}."


def format_result(result: BackupResult, compress: bool) -> str:
    """Describe what happened to one catalog entry.

    Args:
        result: Result returned by the engine.
        compress: Whether the run wrote zip archives.

    Returns:
        Log line for the entry, prefixed in dry-run mode.
    """
    name = result.entry.file_name

    if result.outcome is EntryOutcome.SKIPPED:
        message = f"Skipping {name}, {result.reason}."
    elif result.outcome is EntryOutcome.FAILED:
        if result.action is None:
            message = f"Error while checking {name}: {result.error}"
        elif compress:
            message = f"Error while creating zip archive for {name}: {result.error}"
        else:
            message = f"Error while copying {name}: {result.error}"
    elif result.action is BackupAction.CREATE and result.reason:
        message = f"{name} {result.reason}. {_write_verb(result, compress)}"
    else:
        message = _write_verb(result, compress)

    return with_dry_run(message, result.dry_run)


def format_summary(report: BackupReport) -> str:
    """Summarize a backup run in one line."""
    summary = report.summary()
    elapsed = (report.finished - report.started).total_seconds()
    message = (f"{summary['total']} catalogs: {summary['created']} created, "
               f"{summary['overwritten']} overwritten, {summary['skipped']} skipped, "
               f"{summary['failed']} failed ({elapsed:.1f}s)")
    return with_dry_run(message, report.dry_run)
