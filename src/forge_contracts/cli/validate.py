"""forge-contracts CLI - Validation commands (validate, list, check-fixtures)."""

import json
import sys
from pathlib import Path

import click
import yaml

from forge_contracts.cli._context import CliContext
from forge_contracts.errors import SchemaConfigurationError
from forge_contracts.types import parse_identity


def _load_payload(payload_file: str):
    path = Path(payload_file)
    with open(path, encoding="utf-8") as fh:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(fh)
        return json.load(fh)


@click.command()
@click.argument("schema_identity")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.pass_obj
def validate(obj: CliContext, schema_identity: str, payload_file: str, output_format: str):
    """Validate a JSON or YAML payload against a schema.

    SCHEMA_IDENTITY is a schema name with its version, e.g. resolved_map.v1.

    Example:

        forge-contracts validate resolved_map.v1 payload.json

        forge-contracts validate zone.v1 zone.yaml --format json
    """
    try:
        payload = _load_payload(payload_file)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        click.echo(f"Error: {payload_file} is not valid JSON/YAML: {exc}", err=True)
        sys.exit(1)

    try:
        result = obj.engine.validate(schema_identity, payload)
    except SchemaConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(result.model_dump_json(indent=2))
    elif result.valid:
        click.echo(f"OK  {schema_identity} validation passed ({payload_file})")
    else:
        click.echo(f"FAIL  {schema_identity} validation failed ({payload_file})")
        for issue in result.errors:
            click.echo(f"  {issue}")

    if not result.valid:
        sys.exit(1)


@click.command()
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
@click.pass_obj
def list_schemas(obj: CliContext, output_format: str):
    """List schema identities in sorted order."""
    try:
        identities = obj.repository.list_all()
    except SchemaConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(identities, indent=2))
        return
    for identity in identities:
        click.echo(identity)


@click.command()
@click.option("--require-fixtures", is_flag=True,
              help="Fail when a schema has no golden fixture")
@click.pass_obj
def check_fixtures(obj: CliContext, require_fixtures: bool):
    """Validate every golden fixture against its own schema version.

    Example:

        forge-contracts check-fixtures --require-fixtures
    """
    repo = obj.repository
    try:
        schemas = repo.list_all()
        fixtures = repo.list_fixtures()
    except SchemaConfigurationError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)

    failures = 0
    for identity in fixtures:
        name, version = parse_identity(identity)
        try:
            fixture = repo.load_fixture(name, version)
            result = obj.engine.validate(identity, fixture.document)
        except SchemaConfigurationError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

        if result.valid:
            click.echo(f"OK    {identity}")
        else:
            failures += 1
            click.echo(f"FAIL  {identity}")
            for issue in result.errors:
                click.echo(f"  {issue}")

    missing = [identity for identity in schemas if identity not in set(fixtures)]
    for identity in missing:
        click.echo(f"{'FAIL' if require_fixtures else 'WARN'}  {identity} has no fixture")

    click.echo(f"\nFixtures checked: {len(fixtures)}")
    click.echo(f"Fixtures failed:  {failures}")
    if missing:
        click.echo(f"Schemas without fixture: {len(missing)}")

    if failures or (require_fixtures and missing):
        sys.exit(1)
