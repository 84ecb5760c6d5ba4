"""
Catalog Backup - Back up Lightroom catalogs without redundant copies.

This package decides, for each configured catalog, whether its backup copy or
zip archive is already up to date, and copies or archives it when it is not.
"""

__version__ = "1.0.0"

from .core.engine import BackupEngine
from .core.models import BackupSettings, CatalogEntry
from .config.config_manager import ConfigManager

__all__ = ["BackupEngine", "BackupSettings", "CatalogEntry", "ConfigManager"]
