"""
Schema repository: storage behind ``(name, version)`` lookups.

``SchemaRepository`` is the small capability the engines depend on:
``load``, ``list_all``, ``load_all`` and ``load_fixture``.  Two
implementations ship:

- ``FileSchemaRepository`` reads the on-disk layout::

      schemas/{name}.{version}.schema.json     (or .schema.yaml / .schema.yml)
      fixtures/{name}.{version}.example.json   (or .example.yaml / .example.yml)

- ``InMemorySchemaRepository`` is backed by dicts, for tests and for
  embedding the engines without disk I/O.

Usage::

    from forge_contracts.repository import FileSchemaRepository

    repo = FileSchemaRepository("schemas", "fixtures")
    repo.list_all()                  # ["resolved_map.v1", "zone.v1"]
    schema = repo.load("zone", "v1")
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from forge_contracts._loader_base import DocumentLoader, JSON_SUFFIXES, YAML_SUFFIXES
from forge_contracts.config import ForgeContractsConfig
from forge_contracts.errors import (
    FixtureNotFoundError,
    SchemaConfigurationError,
    SchemaNotFoundError,
)
from forge_contracts.schema import Fixture, Schema
from forge_contracts.types import DEFAULT_IDENTITY_FIELD, parse_identity, schema_identity

logger = logging.getLogger(__name__)

SCHEMA_SUFFIX = ".schema"
FIXTURE_SUFFIX = ".example"
_DOCUMENT_EXTENSIONS = JSON_SUFFIXES + YAML_SUFFIXES


class SchemaRepository(ABC):
    """Loads schemas and golden fixtures addressed by name and version."""

    identity_field: str = DEFAULT_IDENTITY_FIELD

    @abstractmethod
    def list_all(self) -> list[str]:
        """Return every ``"name.version"`` identity, lexicographically sorted."""

    @abstractmethod
    def list_fixtures(self) -> list[str]:
        """Return every fixture identity, lexicographically sorted."""

    @abstractmethod
    def _read_schema(self, name: str, version: str) -> dict[str, Any]:
        """Return the raw schema document or raise ``SchemaNotFoundError``."""

    @abstractmethod
    def _read_fixture(self, name: str, version: str) -> dict[str, Any]:
        """Return the raw fixture document or raise ``FixtureNotFoundError``."""

    def load(self, name: str, version: str) -> Schema:
        """Load the schema for ``(name, version)``.

        Raises:
            SchemaNotFoundError: If no document exists for the pair.
            SchemaConfigurationError: If the document is malformed or its
                identity constant does not match the pair.
        """
        raw = self._read_schema(name, version)
        try:
            return Schema(
                name=name,
                version=version,
                document=raw,
                identity_field=self.identity_field,
            )
        except ValidationError as exc:
            raise SchemaConfigurationError(
                f"Invalid schema document {schema_identity(name, version)}: {exc}"
            ) from exc

    def load_all(self) -> dict[str, Schema]:
        """Load every schema, keyed by identity in sorted order."""
        schemas: dict[str, Schema] = {}
        for identity in self.list_all():
            name, version = parse_identity(identity)
            schemas[identity] = self.load(name, version)
        return schemas

    def load_fixture(self, name: str, version: str) -> Fixture:
        """Load the golden fixture recorded for ``(name, version)``.

        Raises:
            FixtureNotFoundError: If no fixture exists for the pair.
        """
        raw = self._read_fixture(name, version)
        return Fixture(name=name, version=version, document=raw)

    def has_schema(self, name: str, version: str) -> bool:
        return schema_identity(name, version) in self.list_all()


# ---------------------------------------------------------------------------
# File-system repository
# ---------------------------------------------------------------------------


class FileSchemaRepository(SchemaRepository):
    """Repository over a ``schemas/`` and ``fixtures/`` directory pair."""

    def __init__(
        self,
        schemas_dir: Union[str, Path],
        fixtures_dir: Union[str, Path, None] = None,
        identity_field: str = DEFAULT_IDENTITY_FIELD,
        loader: Optional[DocumentLoader] = None,
    ) -> None:
        self.schemas_dir = Path(schemas_dir)
        self.fixtures_dir = (
            Path(fixtures_dir)
            if fixtures_dir is not None
            else self.schemas_dir.parent / "fixtures"
        )
        self.identity_field = identity_field
        self._loader = loader or DocumentLoader()
        self._schemas: dict[str, Schema] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config: ForgeContractsConfig) -> "FileSchemaRepository":
        return cls(
            config.get_schemas_path(),
            config.get_fixtures_path(),
            identity_field=config.identity_field,
        )

    def schema_path(self, name: str, version: str) -> Path:
        """Canonical JSON path for a schema document (used by ``bump``)."""
        return self.schemas_dir / f"{name}.{version}{SCHEMA_SUFFIX}.json"

    def fixture_path(self, name: str, version: str) -> Path:
        """Canonical JSON path for a golden fixture."""
        return self.fixtures_dir / f"{name}.{version}{FIXTURE_SUFFIX}.json"

    def list_all(self) -> list[str]:
        return sorted(_scan(self.schemas_dir, SCHEMA_SUFFIX))

    def list_fixtures(self) -> list[str]:
        return sorted(_scan(self.fixtures_dir, FIXTURE_SUFFIX))

    def load(self, name: str, version: str) -> Schema:
        identity = schema_identity(name, version)
        with self._lock:
            cached = self._schemas.get(identity)
        if cached is not None:
            return cached

        schema = super().load(name, version)
        with self._lock:
            self._schemas.setdefault(identity, schema)
        logger.debug("Loaded schema %s from %s", identity, self.schemas_dir)
        return schema

    def _read_schema(self, name: str, version: str) -> dict[str, Any]:
        path = _locate(self.schemas_dir, name, version, SCHEMA_SUFFIX)
        if path is None:
            raise SchemaNotFoundError(name, version, str(self.schemas_dir))
        return self._loader.load(path)

    def _read_fixture(self, name: str, version: str) -> dict[str, Any]:
        path = _locate(self.fixtures_dir, name, version, FIXTURE_SUFFIX)
        if path is None:
            raise FixtureNotFoundError(name, version, str(self.fixtures_dir))
        return self._loader.load(path)


def _scan(directory: Path, marker: str) -> set[str]:
    """Collect identities of ``{identity}{marker}{ext}`` files in *directory*.

    Raises:
        SchemaConfigurationError: If one identity has several files.
    """
    if not directory.is_dir():
        return set()

    seen: dict[str, Path] = {}
    for path in directory.iterdir():
        if not path.is_file() or path.suffix.lower() not in _DOCUMENT_EXTENSIONS:
            continue
        stem = path.name[: -len(path.suffix)]
        if not stem.endswith(marker):
            continue
        identity = stem[: -len(marker)]
        try:
            parse_identity(identity)
        except ValueError:
            logger.debug("Skipping file without name.version identity: %s", path)
            continue
        if identity in seen:
            raise SchemaConfigurationError(
                f"Multiple documents for {identity}: {seen[identity].name}, {path.name}"
            )
        seen[identity] = path
    return set(seen)


def _locate(directory: Path, name: str, version: str, marker: str) -> Optional[Path]:
    matches = [
        directory / f"{name}.{version}{marker}{ext}"
        for ext in _DOCUMENT_EXTENSIONS
    ]
    found = [path for path in matches if path.is_file()]
    if len(found) > 1:
        raise SchemaConfigurationError(
            f"Multiple documents for {name}.{version}: "
            + ", ".join(path.name for path in found)
        )
    return found[0] if found else None


# ---------------------------------------------------------------------------
# In-memory repository
# ---------------------------------------------------------------------------


class InMemorySchemaRepository(SchemaRepository):
    """Repository backed by dicts keyed by ``"name.version"``."""

    def __init__(
        self,
        schemas: Optional[Mapping[str, dict[str, Any]]] = None,
        fixtures: Optional[Mapping[str, dict[str, Any]]] = None,
        identity_field: str = DEFAULT_IDENTITY_FIELD,
    ) -> None:
        self._schema_docs = dict(schemas or {})
        self._fixture_docs = dict(fixtures or {})
        self.identity_field = identity_field
        for identity in list(self._schema_docs) + list(self._fixture_docs):
            parse_identity(identity)

    def add_schema(self, name: str, version: str, document: dict[str, Any]) -> None:
        self._schema_docs[schema_identity(name, version)] = document

    def add_fixture(self, name: str, version: str, document: dict[str, Any]) -> None:
        self._fixture_docs[schema_identity(name, version)] = document

    def list_all(self) -> list[str]:
        return sorted(self._schema_docs)

    def list_fixtures(self) -> list[str]:
        return sorted(self._fixture_docs)

    def _read_schema(self, name: str, version: str) -> dict[str, Any]:
        try:
            return self._schema_docs[schema_identity(name, version)]
        except KeyError:
            raise SchemaNotFoundError(name, version) from None

    def _read_fixture(self, name: str, version: str) -> dict[str, Any]:
        try:
            return self._fixture_docs[schema_identity(name, version)]
        except KeyError:
            raise FixtureNotFoundError(name, version) from None
