"""
forge-contracts CLI - Author, validate and evolve versioned schema contracts.

Commands:
    forge-contracts bump            Derive a new schema version from an existing one
    forge-contracts diff            Structural diff and ADDITIVE/BREAKING verdict
    forge-contracts compat-check    Replay an old fixture against a new schema
    forge-contracts validate        Validate a payload file against a schema
    forge-contracts list            List available schema identities
    forge-contracts check-fixtures  Validate every golden fixture against its schema
"""

import logging
from typing import Optional

import click

from forge_contracts.cli._context import CliContext
from forge_contracts.cli.evolution import bump, compat_check, diff
from forge_contracts.cli.validate import check_fixtures, list_schemas, validate
from forge_contracts.config import get_config


@click.group()
@click.version_option(package_name="forge-contracts")
@click.option("--schemas-dir", type=click.Path(file_okay=False), default=None,
              help="Schema directory (default: FORGE_CONTRACTS_SCHEMAS_DIR or ./schemas)")
@click.option("--fixtures-dir", type=click.Path(file_okay=False), default=None,
              help="Fixture directory (default: FORGE_CONTRACTS_FIXTURES_DIR or ./fixtures)")
@click.option("--log-level", type=click.Choice(["debug", "info", "warning", "error"]),
              default=None, help="Logging level (default: FORGE_CONTRACTS_LOG_LEVEL)")
@click.pass_context
def main(
    ctx: click.Context,
    schemas_dir: Optional[str],
    fixtures_dir: Optional[str],
    log_level: Optional[str],
):
    """forge-contracts - Versioned data contracts and schema evolution."""
    overrides = {}
    if schemas_dir:
        overrides["schemas_dir"] = schemas_dir
    if fixtures_dir:
        overrides["fixtures_dir"] = fixtures_dir
    if log_level:
        overrides["log_level"] = log_level
    config = get_config(**overrides)

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = CliContext(config)


# Evolution commands
main.add_command(bump)
main.add_command(diff)
main.add_command(compat_check, name="compat-check")

# Validation commands
main.add_command(validate)
main.add_command(list_schemas, name="list")
main.add_command(check_fixtures, name="check-fixtures")


if __name__ == "__main__":
    main()
