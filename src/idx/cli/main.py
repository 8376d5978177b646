"""CLI commands for idx."""

import json
import logging
import sys
from pathlib import Path

import click

from idx.config import Config
from idx.decoder import IDDecoder
from idx.exceptions import InvalidFormatError
from idx.generator import IDGenerator
from idx.validator import IDValidator

logger = logging.getLogger(__name__)


def _load_config(path: str | None) -> Config:
    if path is not None:
        return Config.from_toml(Path(path))
    try:
        return Config.find_and_load()
    except FileNotFoundError:
        return Config()


@click.group()
@click.version_option(package_name="idx")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to idx.toml (default: search upwards from cwd)",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """idx - sortable 128-bit identifiers."""
    config = _load_config(config_path)
    logging.basicConfig(level=config.logging.level.upper(), format=config.logging.format)
    logger.info(f"Loaded configuration (storage format: {config.storage.format})")
    ctx.obj = config


@cli.command()
@click.option("--count", type=int, help="Number of IDs to generate")
@click.pass_obj
def generate(config: Config, count: int | None) -> None:
    """Generate new ID(s), one per line."""
    if count is None:
        count = config.cli.default_count

    if count < 1:
        click.echo("Error: --count must be at least 1", err=True)
        sys.exit(1)

    for id_ in IDGenerator().generate_batch(count):
        click.echo(str(id_))


@cli.command()
@click.argument("value")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def decode(config: Config, value: str, output_json: bool) -> None:
    """Decode ID into timestamp and randomness."""
    try:
        decoded = IDDecoder().decode(value)
    except InvalidFormatError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if output_json:
        payload = {"id": decoded.raw_id, **decoded.components}
        click.echo(json.dumps(payload, indent=config.cli.json_indent))
    else:
        click.echo(f"ID: {decoded.raw_id}")
        click.echo(f"  timestamp_ms: {decoded['timestamp_ms']}")
        click.echo(f"  datetime:     {decoded['datetime']}")
        click.echo(f"  randomness:   {decoded['randomness']}")
        click.echo(f"  hex:          {decoded['hex']}")


@cli.command()
@click.argument("value")
@click.option("--quiet", "-q", is_flag=True, help="Only output result (0=valid, 1=invalid)")
@click.option("--no-nil", is_flag=True, help="Treat the all-zero ID as invalid")
def validate(value: str, quiet: bool, no_nil: bool) -> None:
    """Validate ID text."""
    result = IDValidator(allow_nil=not no_nil).validate(value)

    if quiet:
        sys.exit(0 if result.valid else 1)

    if result.valid:
        click.echo(f"✓ Valid ID: {value}")
        for warning in result.warnings or []:
            click.echo(f"  warning: {warning}")
        sys.exit(0)
    else:
        click.echo(f"✗ Invalid ID: {result.error}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
