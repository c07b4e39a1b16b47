"""rspamdeck CLI - main entry point."""

from __future__ import annotations

from pathlib import Path

import click
from pydantic import ValidationError

from rspamdeck.models.state.app_settings import AppSettings
from rspamdeck.models.state.config_manager import ConfigLoadError, ConfigManager
from rspamdeck.utils.logging_config import setup_logging


def load_settings(
    config_path: Path | None,
    *,
    url: str | None = None,
    log_file: str | None = None,
    log_level: str | None = None,
) -> AppSettings:
    """Load stored settings and apply command-line overrides.

    Raises:
        click.ClickException: The settings file or an override is invalid.
    """
    try:
        settings = ConfigManager.load(config_path)
    except ConfigLoadError as exc:
        raise click.ClickException(str(exc)) from exc

    overrides = {
        key: value
        for key, value in {"base_url": url, "log_file": log_file, "log_level": log_level}.items()
        if value is not None
    }
    if not overrides:
        return settings
    try:
        return AppSettings.model_validate({**settings.model_dump(), **overrides})
    except ValidationError as exc:
        raise click.ClickException(f"Invalid option: {exc}") from exc


@click.command()
@click.version_option(package_name="rspamdeck")
@click.option("--url", help="Rspamd controller URL, e.g. http://localhost:11334/")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Settings file (default: ~/.config/rspamdeck/settings.yaml).",
)
@click.option("--log-file", help="Write logs to this file.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level.",
)
def main(
    url: str | None,
    config_path: Path | None,
    log_file: str | None,
    log_level: str | None,
) -> None:
    """rspamdeck: terminal admin console for Rspamd clusters.

    \b
    Quick Start:
      rspamdeck --url http://localhost:11334/
      rspamdeck --log-file ~/rspamdeck.log --log-level debug
    """
    settings = load_settings(config_path, url=url, log_file=log_file, log_level=log_level)
    logger = setup_logging(settings.log_level, settings.log_file or None)
    logger.info("Connecting to %s", settings.base_url)

    from rspamdeck.app import RspamdeckApp

    RspamdeckApp(settings=settings, config_path=config_path).run()


if __name__ == "__main__":
    main()
