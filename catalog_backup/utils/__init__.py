"""Utility modules for catalog backup."""

from .formatters import format_file_size, format_date, format_result, format_summary, with_dry_run

__all__ = ["format_file_size", "format_date", "format_result", "format_summary", "with_dry_run"]
