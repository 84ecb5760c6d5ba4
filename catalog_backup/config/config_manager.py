"""Configuration management for the catalog backup system."""

import json
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from .config_validator import ConfigValidator
from ..core.models import BackupSettings, CatalogEntry

YAML_SUFFIXES = ('.yaml', '.yml')


class ConfigManager:
    """Manages loading, validation and saving of backup settings."""

    DEFAULT_CONFIG_LOCATIONS = [
        "config.json",
        "config.yaml",
        os.path.expanduser("~/.catalog-backup/config.json"),
        os.path.expanduser("~/.catalog-backup/config.yaml"),
    ]

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to config file. If not provided,
                        will search in default locations.
        """
        self.config_path = config_path
        self.config_data: Dict[str, Any] = {}
        self.validator = ConfigValidator()

    @property
    def target_path(self) -> Path:
        """Path a new configuration is written to."""
        return Path(self.config_path or self.DEFAULT_CONFIG_LOCATIONS[0])

    def exists(self) -> bool:
        """Check whether a configuration file can be found."""
        try:
            self._find_config_file()
        except FileNotFoundError:
            return False
        return True

    def load_config(self) -> BackupSettings:
        """Load backup settings from file.

        Returns:
            Backup settings built from the configuration file.

        Raises:
            FileNotFoundError: If config file cannot be found.
            ValueError: If config file is invalid.
        """
        config_file = self._find_config_file()

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                if config_file.endswith(YAML_SUFFIXES):
                    self.config_data = yaml.safe_load(f) or {}
                else:
                    self.config_data = json.load(f)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid config file {config_file}: {e}")
        except OSError as e:
            raise ValueError(f"Error reading config file {config_file}: {e}")

        # Validate configuration
        self.validator.validate(self.config_data)

        # Set defaults
        self._set_defaults()

        return BackupSettings.from_dict(self.config_data)

    def _find_config_file(self) -> str:
        """Find configuration file in default locations.

        Returns:
            Path to configuration file.

        Raises:
            FileNotFoundError: If no config file is found.
        """
        if self.config_path:
            if os.path.exists(self.config_path):
                return self.config_path
            else:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")

        for location in self.DEFAULT_CONFIG_LOCATIONS:
            if os.path.exists(location):
                return location

        raise FileNotFoundError(
            f"Configuration file not found in any of these locations:\n" +
            "\n".join(f"  - {loc}" for loc in self.DEFAULT_CONFIG_LOCATIONS) +
            "\n\nRun 'catalog-backup init <directory>' to create one."
        )

    def _set_defaults(self):
        """Set default values for optional configuration fields."""
        self.config_data.setdefault('compress', False)
        if not self.config_data.get('catalogs'):
            self.config_data['catalogs'] = []
        for catalog in self.config_data['catalogs']:
            if catalog.get('customBackupDirectory') is None:
                catalog['customBackupDirectory'] = ""

    def save_config(self, settings: BackupSettings, path: Optional[str] = None) -> Path:
        """Write backup settings to file.

        Args:
            settings: Settings to persist.
            path: Destination file. Defaults to the loaded file or the
                  first default location.

        Returns:
            Path the configuration was written to.
        """
        if path:
            config_file = Path(path)
        elif self.exists():
            config_file = Path(self._find_config_file())
        else:
            config_file = self.target_path

        config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(config_file, 'w', encoding='utf-8') as f:
            f.write(self.dump(settings, yaml_format=config_file.suffix in YAML_SUFFIXES))

        self.config_data = settings.to_dict()
        return config_file

    @staticmethod
    def dump(settings: BackupSettings, yaml_format: bool = False) -> str:
        """Serialize backup settings.

        Args:
            settings: Settings to serialize.
            yaml_format: Emit YAML instead of JSON.

        Returns:
            Serialized configuration text.
        """
        if yaml_format:
            return yaml.safe_dump(settings.to_dict(), sort_keys=False)
        return json.dumps(settings.to_dict(), indent=2) + "\n"

    @staticmethod
    def sample_settings() -> BackupSettings:
        """Build a sample configuration for the current user."""
        home = Path.home()
        settings = BackupSettings(
            global_backup_directory=str(home / "Documents"),
            compress=True
        )
        settings.add_catalog(CatalogEntry(
            source_path=str(home / "Pictures" / "Lightroom" / "Lightroom Catalog.lrcat")
        ))
        return settings
