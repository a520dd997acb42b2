"""Command line tools for inspecting and checking YAML environment files."""

import json
import sys
from pathlib import Path

import click

from yamlenv.errors import YamlenvError
from yamlenv.flattener import flatten
from yamlenv.loader import Loader
from yamlenv.observability.logging import configure_logging
from yamlenv.settings import get_settings
from yamlenv.validator import Validator


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--json-logs/--no-json-logs",
    default=None,
    help="Use JSON format for logs (default: YAMLENV_LOG_JSON).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging.",
)
def cli(json_logs: bool | None, verbose: bool) -> None:
    """Load YAML files into environment variables."""
    settings = get_settings()
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        output=sys.stderr,
        json_format=settings.log_json if json_logs is None else json_logs,
    )


def _resolve(path: Path | None) -> Path:
    return path if path is not None else Path(get_settings().default_file)


@cli.command("flatten")
@click.argument(
    "env_file",
    required=False,
    type=click.Path(path_type=Path),
)
@click.option(
    "--upper/--no-upper",
    default=None,
    help="Upper-case variable names (default: YAMLENV_CAST_TO_UPPER).",
)
def flatten_command(env_file: Path | None, upper: bool | None) -> None:
    """Print the variables a file would define, as JSON.

    The environment is not modified.
    """
    env_file = _resolve(env_file)
    cast_to_upper = get_settings().cast_to_upper if upper is None else upper

    try:
        document = Loader(env_file).read_document()
        variables = flatten(document, cast_to_upper)
    except YamlenvError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    click.echo(json.dumps(variables, sort_keys=True, indent=2))


@cli.command()
@click.argument(
    "env_file",
    required=False,
    type=click.Path(path_type=Path),
)
@click.option(
    "--require",
    "-r",
    "names",
    multiple=True,
    required=True,
    help="Variable that must be set (repeatable).",
)
@click.option("--not-empty", is_flag=True, help="Require non-empty values.")
@click.option("--integer", is_flag=True, help="Require integer values.")
@click.option(
    "--allowed",
    "allowed",
    multiple=True,
    help="Allowed value (repeatable).",
)
@click.option(
    "--upper/--no-upper",
    default=None,
    help="Upper-case variable names (default: YAMLENV_CAST_TO_UPPER).",
)
def check(  # noqa: PLR0913
    env_file: Path | None,
    names: tuple[str, ...],
    not_empty: bool,
    integer: bool,
    allowed: tuple[str, ...],
    upper: bool | None,
) -> None:
    """Load a file and check required variables.

    Variables already present in the environment take precedence over the
    file, as with an immutable load.
    """
    env_file = _resolve(env_file)
    cast_to_upper = get_settings().cast_to_upper if upper is None else upper
    loader = Loader(env_file, immutable=True, cast_to_upper=cast_to_upper)

    try:
        loader.load()
        validator = Validator(names, loader)
        if not_empty:
            validator.not_empty()
        if integer:
            validator.is_integer()
        if allowed:
            validator.allowed_values(allowed)
    except YamlenvError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    click.echo(f"All {len(names)} required variables are valid.")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
