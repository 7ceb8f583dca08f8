"""forge-contracts CLI - Schema evolution commands (bump, diff, compat-check)."""

import json
import sys

import click

from forge_contracts.checker import CompatibilityChecker
from forge_contracts.cli._context import CliContext
from forge_contracts.errors import (
    BumpError,
    SchemaConfigurationError,
    SchemaNotFoundError,
)
from forge_contracts.evolution import EvolutionTracker, bump_schema, format_diff
from forge_contracts.types import Classification


def _fail(message: str) -> None:
    click.echo(message, err=True)
    sys.exit(1)


@click.command()
@click.argument("name")
@click.argument("from_version")
@click.argument("to_version")
@click.pass_obj
def bump(obj: CliContext, name: str, from_version: str, to_version: str):
    """Create NAME.TO_VERSION from NAME.FROM_VERSION.

    Rewrites the schema's $id, title and identity constant; everything
    else is copied unchanged.  Refuses to overwrite an existing version.

    Example:

        forge-contracts bump resolved_map v1 v2
    """
    repo = obj.repository
    src_file = repo.schema_path(name, from_version)
    dest_file = repo.schema_path(name, to_version)

    try:
        if not repo.has_schema(name, from_version):
            raise BumpError(f"Source schema not found: {src_file}")
        if repo.has_schema(name, to_version) or dest_file.exists():
            raise BumpError(f"Destination already exists: {dest_file}")
        schema = repo.load(name, from_version)
    except (BumpError, SchemaConfigurationError) as exc:
        _fail(str(exc))

    bumped = bump_schema(
        schema.document, name, from_version, to_version,
        identity_field=repo.identity_field,
    )
    dest_file.parent.mkdir(parents=True, exist_ok=True)
    with open(dest_file, "w", encoding="utf-8") as fh:
        fh.write(json.dumps(bumped, indent=2, ensure_ascii=False) + "\n")
    click.echo(f"Created {dest_file.name}")

    click.echo("\nManual steps:")
    click.echo(f"  1. Edit {dest_file.name} with your schema changes")
    click.echo(f"  2. Create {repo.fixture_path(name, to_version)}")
    click.echo(f"  3. Run: forge-contracts diff {name} {from_version} {to_version}")
    click.echo(f"  4. Run: forge-contracts compat-check {name} {from_version} {to_version}")
    click.echo("  5. Notify downstream consumers of the new version")


@click.command()
@click.argument("name")
@click.argument("from_version")
@click.argument("to_version")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.option("--fail-on-breaking", is_flag=True, help="Exit with error code 1 if the change is BREAKING")
@click.pass_obj
def diff(
    obj: CliContext,
    name: str,
    from_version: str,
    to_version: str,
    output_format: str,
    fail_on_breaking: bool,
):
    """Print the structural diff between two versions of NAME.

    Example:

        forge-contracts diff resolved_map v1 v2

        forge-contracts diff resolved_map v1 v2 --format json --fail-on-breaking
    """
    try:
        report = EvolutionTracker(obj.repository).compare(name, from_version, to_version)
    except (SchemaNotFoundError, SchemaConfigurationError) as exc:
        _fail(str(exc))

    if output_format == "json":
        click.echo(report.model_dump_json(indent=2))
    else:
        click.echo(f"Schema diff: {name}.{from_version} → {name}.{to_version}")
        click.echo("─" * 50)
        click.echo(format_diff(report.diff, report.classification))

    if fail_on_breaking and report.classification == Classification.BREAKING:
        sys.exit(1)


@click.command()
@click.argument("name")
@click.argument("from_version")
@click.argument("to_version")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.pass_obj
def compat_check(
    obj: CliContext,
    name: str,
    from_version: str,
    to_version: str,
    output_format: str,
):
    """Check that the FROM_VERSION fixture still validates against TO_VERSION.

    Exits 0 when compatible, 1 when breaking.

    Example:

        forge-contracts compat-check resolved_map v1 v2
    """
    checker = CompatibilityChecker(obj.repository, obj.engine)
    try:
        result = checker.check(name, from_version, to_version)
    except SchemaConfigurationError as exc:
        _fail(str(exc))

    if output_format == "json":
        click.echo(result.model_dump_json(indent=2))
    elif result.compatible:
        click.echo(
            f"PASS  {name}.{from_version} fixtures are compatible "
            f"with {name}.{to_version} schema"
        )
    else:
        click.echo(
            f"FAIL  BREAKING: {name}.{from_version} fixtures fail "
            f"against {name}.{to_version} schema"
        )
        for err in result.errors:
            click.echo(f"  {err}")

    sys.exit(0 if result.compatible else 1)
