"""Command-line interface for catalog backup."""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path
import click
from typing import Optional

from .config.config_manager import ConfigManager
from .core.engine import BackupEngine
from .core.models import BackupSettings, CatalogEntry, EntryOutcome
from .utils.formatters import (
    format_date,
    format_file_size,
    format_result,
    format_summary,
    with_dry_run,
)

EXIT_CONFIG_NOT_FOUND = 1
EXIT_CONFIG_UNREADABLE = 2
EXIT_CONFIG_INVALID = 3
EXIT_CONFIG_EXISTS = 4
EXIT_BACKUP_FAILED = 5

logger = logging.getLogger(__name__)


def setup_logging(level: str, log_file: Optional[str] = None):
    """Set up logging configuration."""
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            click.echo(f"Warning: Could not set up file logging: {e}", err=True)


def _load_settings(ctx, check_paths: bool = True) -> BackupSettings:
    """Load settings or exit with the matching configuration error code."""
    config_manager = ConfigManager(ctx.obj.get('config_path'))

    try:
        logger.info("Loading configuration.")
        settings = config_manager.load_config()
    except FileNotFoundError as e:
        logger.critical(str(e))
        sys.exit(EXIT_CONFIG_NOT_FOUND)
    except ValueError as e:
        logger.critical(f"Could not load configuration: {e}")
        sys.exit(EXIT_CONFIG_UNREADABLE)

    if check_paths:
        logger.info("Validating configuration.")
        errors = config_manager.validator.check_paths(settings)
        if errors:
            for error in errors:
                logger.critical(error)
            sys.exit(EXIT_CONFIG_INVALID)

    return settings


@click.group()
@click.option('--config', '-c', 'config_path',
              help='Path to configuration file')
@click.option('--log-level', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level')
@click.option('--log-file',
              help='Log file path')
@click.pass_context
def cli(ctx, config_path: Optional[str], log_level: str, log_file: Optional[str]):
    """Catalog Backup - Back up Lightroom catalogs, skipping up-to-date copies."""

    ctx.ensure_object(dict)

    setup_logging(log_level, log_file)

    ctx.obj['config_path'] = config_path


@cli.command()
@click.argument('global_backup_directory')
@click.option('--compress', is_flag=True, help='Store each catalog in a zip archive.')
@click.option('--force', '-f', is_flag=True, help='Overwrite existing configuration.')
@click.pass_context
def init(ctx, global_backup_directory: str, compress: bool, force: bool):
    """Create a new configuration file."""
    logger.info("Initialize configuration.")
    config_manager = ConfigManager(ctx.obj.get('config_path'))
    target = config_manager.target_path

    if target.exists() and not force:
        logger.critical(f"Configuration already exists: {target}")
        sys.exit(EXIT_CONFIG_EXISTS)

    if not os.path.isdir(global_backup_directory):
        logger.warning(f"Global backup directory does not exist yet: {global_backup_directory}")

    settings = BackupSettings(
        global_backup_directory=os.path.abspath(global_backup_directory),
        compress=compress
    )
    path = config_manager.save_config(settings, str(target))
    logger.info(f"Saved configuration to {path}.")


@cli.command('add-catalog')
@click.argument('path_to_catalog')
@click.option('--backup-dir', default='',
              help='Custom backup directory for this catalog only.')
@click.pass_context
def add_catalog(ctx, path_to_catalog: str, backup_dir: str):
    """Add a catalog to the configuration."""
    settings = _load_settings(ctx, check_paths=False)
    config_manager = ConfigManager(ctx.obj.get('config_path'))

    error = config_manager.validator.check_catalog(path_to_catalog)
    if error:
        raise click.BadParameter(error, param_hint='PATH_TO_CATALOG')

    if backup_dir and not os.path.isdir(backup_dir):
        raise click.BadParameter(f"Directory does not exist: {backup_dir}", param_hint='--backup-dir')

    entry = CatalogEntry(
        source_path=os.path.abspath(path_to_catalog),
        custom_backup_directory=os.path.abspath(backup_dir) if backup_dir else ""
    )
    if not settings.add_catalog(entry):
        logger.warning(f"{entry.file_name} is already configured.")
        return

    config_manager.save_config(settings)
    logger.info(f"Added catalog {entry.file_name}.")


@cli.command('show-config')
@click.pass_context
def show_config(ctx):
    """Show the current configuration."""
    settings = _load_settings(ctx, check_paths=False)
    click.echo(ConfigManager.dump(settings), nl=False)


@cli.command()
@click.option('--to-file', is_flag=True, help='Write the sample to a file.')
def sample(to_file: bool):
    """Show a sample configuration."""
    settings = ConfigManager.sample_settings()

    if to_file:
        path = Path.cwd() / f"sample_config-{datetime.now().strftime('%Y-%m-%dT%H-%M-%S')}.json"
        logger.info(f"Saving sample configuration to {path}.")
        ConfigManager().save_config(settings, str(path))
    else:
        click.echo(ConfigManager.dump(settings), nl=False)


@cli.command('validate-config')
@click.pass_context
def validate_config(ctx):
    """Validate the configuration file."""
    settings = _load_settings(ctx)

    click.echo("✅ Configuration loaded successfully")
    click.echo(f"\n📊 Configuration Summary:")
    click.echo(f"   Global backup directory: {settings.global_backup_directory}")
    click.echo(f"   Compress: {'yes' if settings.compress else 'no'}")
    click.echo(f"   Catalogs: {len(settings.catalogs)}")

    for i, catalog in enumerate(settings.catalogs, 1):
        stat = os.stat(catalog.source_path)
        modified = datetime.fromtimestamp(stat.st_mtime)
        click.echo(f"     {i}. {catalog.source_path} "
                   f"({format_file_size(stat.st_size)}, modified {format_date(modified, short=True)})")
        if catalog.has_custom_backup_directory:
            click.echo(f"        → {catalog.custom_backup_directory}")


@cli.command()
@click.option('--dry-run', is_flag=True, help='Report what would be done without writing.')
@click.option('--strict', is_flag=True, help='Exit with an error if any catalog fails.')
@click.pass_context
def backup(ctx, dry_run: bool, strict: bool):
    """Back up all configured catalogs."""
    settings = _load_settings(ctx)

    logger.info(with_dry_run("Starting backup procedure.", dry_run))

    engine = BackupEngine(settings, dry_run=dry_run)
    report = engine.run()

    for result in report.results:
        message = format_result(result, settings.compress)
        if result.outcome is EntryOutcome.FAILED:
            logger.error(message)
        else:
            logger.info(message)

    logger.info(with_dry_run("Backup finished.", dry_run))
    click.echo(format_summary(report))

    if strict and report.has_failures:
        sys.exit(EXIT_BACKUP_FAILED)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == '__main__':
    main()
