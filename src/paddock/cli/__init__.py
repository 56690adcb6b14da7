"""CLI module for paddock."""

import logging
from pathlib import Path

import click

from paddock import __version__
from paddock.config import LoggingConfig, get_config
from paddock.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _configure_logging(config: LoggingConfig) -> None:
    """Configure logging from the resolved configuration."""
    from paddock.logging import configure_logging

    configure_logging(config)


@click.group()
@click.version_option(__version__, prog_name="paddock")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Config file (default: $PADDOCK_CONFIG_PATH or ./paddock.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: info).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.pass_context
def main(
    ctx: click.Context,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Paddock - declare feature toggles and check them per environment."""
    from paddock.cli.exit_codes import ExitCode

    ctx.ensure_object(dict)

    # An explicitly named config file must parse
    try:
        config = get_config(
            config_path,
            log_level=log_level,
            log_file=log_file,
            log_format="json" if log_json else None,
            strict=config_path is not None,
        )
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.CONFIG_ERROR) from e

    _configure_logging(config.logging)
    logger.debug(
        "paddock starting: environment=%s, features_file=%s",
        config.environment,
        config.features_file,
    )
    ctx.obj["config"] = config


# Defer import to avoid circular dependency
def _register_commands():
    from paddock.cli.features import check_command, list_command, validate_command

    main.add_command(list_command)
    main.add_command(check_command)
    main.add_command(validate_command)


_register_commands()
