"""Configuration validation for catalog backup."""

import os
from typing import Dict, List, Any

from ..core.models import BackupSettings

CATALOG_EXTENSION = ".lrcat"


class ConfigValidator:
    """Validates catalog backup configuration."""

    REQUIRED_FIELDS = ['globalBackupDirectory']

    def validate(self, config: Dict[str, Any]) -> None:
        """Validate configuration structure.

        Args:
            config: Configuration dictionary to validate.

        Raises:
            ValueError: If configuration is invalid.
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")

        self._validate_structure(config)

        if 'compress' in config and not isinstance(config['compress'], bool):
            raise ValueError(f"compress must be true or false, got: {config['compress']!r}")

        catalogs = config.get('catalogs')
        self._validate_catalogs([] if catalogs is None else catalogs)

    def _validate_structure(self, config: Dict[str, Any]) -> None:
        """Validate required fields.

        Args:
            config: Configuration dictionary.

        Raises:
            ValueError: If required fields are missing or empty.
        """
        missing_fields = [field for field in self.REQUIRED_FIELDS if field not in config]
        if missing_fields:
            raise ValueError(f"Missing required configuration fields: {missing_fields}")

        directory = config['globalBackupDirectory']
        if not isinstance(directory, str) or not directory.strip():
            raise ValueError("globalBackupDirectory cannot be empty")

    def _validate_catalogs(self, catalogs: List[Dict[str, Any]]) -> None:
        """Validate catalog entries.

        Args:
            catalogs: List of catalog configurations.

        Raises:
            ValueError: If a catalog entry is malformed.
        """
        if not isinstance(catalogs, list):
            raise ValueError("catalogs must be a list")

        for i, catalog in enumerate(catalogs):
            if not isinstance(catalog, dict):
                raise ValueError(f"Catalog {i} must be a dictionary")

            path = catalog.get('pathToFile')
            if not isinstance(path, str) or not path:
                raise ValueError(f"Catalog {i} pathToFile cannot be empty")

            custom_directory = catalog.get('customBackupDirectory')
            if custom_directory is not None and not isinstance(custom_directory, str):
                raise ValueError(f"Catalog {i} customBackupDirectory must be a string")

    def check_paths(self, settings: BackupSettings) -> List[str]:
        """Check that every configured path exists on disk.

        Args:
            settings: Loaded backup settings.

        Returns:
            List of problems found, empty if the settings are usable.
        """
        errors = []

        if not os.path.isdir(settings.global_backup_directory):
            errors.append(f"Global backup directory does not exist: {settings.global_backup_directory}")

        for catalog in settings.catalogs:
            error = self.check_catalog(catalog.source_path)
            if error:
                errors.append(error)

            if catalog.has_custom_backup_directory and not os.path.isdir(catalog.custom_backup_directory):
                errors.append(f"Custom backup directory for {catalog.file_name} does not exist: "
                              f"{catalog.custom_backup_directory}")

        return errors

    def check_catalog(self, path: str) -> str:
        """Check that a path is an existing Lightroom catalog file.

        Returns:
            Error message, or an empty string if the catalog is usable.
        """
        if not os.path.isfile(path):
            return f"Catalog file does not exist: {path}"
        if os.path.splitext(path)[1] != CATALOG_EXTENSION:
            return f"Not a Lightroom catalog ({CATALOG_EXTENSION}): {path}"
        return ""
