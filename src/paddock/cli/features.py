"""CLI commands for inspecting feature declaration files.

Commands:
    paddock list      Show every declared feature and whether it is active
    paddock check     Resolve one feature (exit code reflects the decision)
    paddock validate  Validate a declaration file without resolving anything
"""

import json
import logging
from pathlib import Path

import click

from paddock.cli.exit_codes import ExitCode
from paddock.config.models import PaddockConfig
from paddock.declarations import load_declarations
from paddock.dsl import Paddock
from paddock.exceptions import DeclarationError, FeatureNotFoundError
from paddock.records import FeatureRecord

logger = logging.getLogger(__name__)

_file_option = click.option(
    "--file",
    "-f",
    "features_file",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Declaration file (default: $PADDOCK_FEATURES_FILE or config).",
)

_env_option = click.option(
    "--env",
    "-e",
    "environment",
    default=None,
    help="Environment to resolve against (default: $PADDOCK_ENV or config).",
)


def _get_config(ctx: click.Context) -> PaddockConfig:
    obj = ctx.find_root().obj or {}
    config = obj.get("config")
    return config if config is not None else PaddockConfig()


def _resolve_features_file(ctx: click.Context, features_file: Path | None) -> Path:
    """Pick the declaration file from the option or configuration."""
    path = features_file or _get_config(ctx).features_file
    if path is None:
        click.echo(
            "Error: No declaration file given. Use --file or set "
            "PADDOCK_FEATURES_FILE.",
            err=True,
        )
        raise SystemExit(ExitCode.FILE_NOT_FOUND)
    return path


def _load_paddock(
    ctx: click.Context,
    features_file: Path | None,
    environment: str | None,
) -> Paddock:
    """Build a Paddock configured from a declaration file."""
    path = _resolve_features_file(ctx, features_file)
    scope = environment or _get_config(ctx).environment

    paddock = Paddock(environment=scope)
    try:
        paddock.load(path, environment=scope)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.FILE_NOT_FOUND) from e
    except DeclarationError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.DECLARATION_ERROR) from e
    return paddock


def _record_to_dict(record: FeatureRecord, active: bool) -> dict:
    return {
        "name": record.name,
        "enabled": record.enabled,
        "environments": sorted(record.environments)
        if record.environments is not None
        else None,
        "active": active,
    }


@click.command("list")
@_file_option
@_env_option
@click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Output in JSON format.",
)
@click.pass_context
def list_command(
    ctx: click.Context,
    features_file: Path | None,
    environment: str | None,
    json_output: bool,
) -> None:
    """List declared features and whether each is active.

    Examples:

        # Features as they resolve in production
        paddock list -f features.yaml -e production

        # Output as JSON
        paddock list -f features.yaml --json
    """
    paddock = _load_paddock(ctx, features_file, environment)
    registry = paddock.registry
    records = registry.records()
    decisions = registry.evaluate_all()

    if json_output:
        data = {
            "environment": registry.environment,
            "features": [
                _record_to_dict(records[name], decisions[name]) for name in decisions
            ],
        }
        click.echo(json.dumps(data, indent=2))
        return

    if not decisions:
        click.echo("No features declared.")
        return

    click.echo(f"Environment: {registry.environment}")
    click.echo(f"{'NAME':<30} {'STATE':<9} {'ENVIRONMENTS':<30} {'ACTIVE':<6}")
    click.echo("-" * 78)
    for name, active in decisions.items():
        record = records[name]
        state = "enabled" if record.enabled else "disabled"
        envs = record.describe_environments()
        envs = envs[:30] if len(envs) > 30 else envs
        click.echo(
            f"{name:<30} {state:<9} {envs:<30} {'yes' if active else 'no':<6}"
        )


@click.command("check")
@click.argument("name")
@_file_option
@_env_option
@click.pass_context
def check_command(
    ctx: click.Context,
    name: str,
    features_file: Path | None,
    environment: str | None,
) -> None:
    """Check whether feature NAME is active.

    Exits 0 when the feature is active and 60 when it is inactive, so the
    command can gate shell scripts.

    Examples:

        paddock check perimeter_fence -f features.yaml -e production
    """
    paddock = _load_paddock(ctx, features_file, environment)

    try:
        active = paddock.is_enabled(name)
    except FeatureNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.FEATURE_NOT_FOUND) from e

    state = "active" if active else "inactive"
    click.echo(f"{name}: {state} in {paddock.environment}")
    raise SystemExit(ExitCode.SUCCESS if active else ExitCode.FEATURE_INACTIVE)


@click.command("validate")
@_file_option
@click.pass_context
def validate_command(ctx: click.Context, features_file: Path | None) -> None:
    """Validate a declaration file.

    Examples:

        paddock validate -f features.yaml
    """
    path = _resolve_features_file(ctx, features_file)

    try:
        records = load_declarations(path)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(ExitCode.FILE_NOT_FOUND) from e
    except DeclarationError as e:
        click.echo(f"Invalid: {e}", err=True)
        raise SystemExit(ExitCode.DECLARATION_ERROR) from e

    logger.debug("Validated %s", path)
    click.echo(f"Valid: {len(records)} feature(s) declared in {path}")
