"""
JSON Schema validation engine for versioned contracts.

Validates data instances against schemas held by a ``SchemaRepository`` and
returns a structured ``ValidationResult``:

- unknown schema identity → ``valid=False`` with exactly one issue naming it
- constraint violations → one issue per violated constraint, each with a
  JSON pointer into the instance (root is ``"/"``) and the jsonschema message

Every document is validated under one fixed dialect (JSON Schema 2020-12 by
default), whatever its own ``$schema`` says, so that diffing and
compatibility checks compare like with like.  All schemas of the repository
are registered together in one ``referencing.Registry`` before any
reference is resolved.

Compiled validators are cached per identity for the lifetime of the engine.
Compilation is serialized by a lock; compiled validators are read-only and
shared freely afterwards.

Usage::

    from forge_contracts.repository import FileSchemaRepository
    from forge_contracts.validation import ValidationEngine

    engine = ValidationEngine(FileSchemaRepository("schemas", "fixtures"))
    result = engine.validate("zone.v1", payload)
    if not result.valid:
        for issue in result.errors:
            print(issue)
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Optional

from jsonschema.exceptions import SchemaError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from referencing import Registry
from referencing.exceptions import Unresolvable
from referencing.jsonschema import UnknownDialect, specification_with

from forge_contracts.config import ForgeContractsConfig, get_config
from forge_contracts.errors import SchemaConfigurationError
from forge_contracts.otel import emit_validation_result
from forge_contracts.repository import FileSchemaRepository, SchemaRepository
from forge_contracts.schema import Schema, ValidationIssue, ValidationResult
from forge_contracts.types import DEFAULT_BASE_URI, DEFAULT_DIALECT

logger = logging.getLogger(__name__)


def _json_pointer(path: Iterable[str | int]) -> str:
    """Convert a jsonschema path deque to a JSON pointer string."""
    parts = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    if not parts:
        return "/"
    return "/" + "/".join(parts)


class ValidationEngine:
    """Compiles repository schemas lazily and validates instances against them."""

    def __init__(
        self,
        repository: SchemaRepository,
        dialect: str = DEFAULT_DIALECT,
        base_uri: str = DEFAULT_BASE_URI,
    ) -> None:
        validator_cls = validator_for({"$schema": dialect}, default=None)
        if validator_cls is None:
            raise SchemaConfigurationError(f"Unsupported JSON Schema dialect: {dialect}")
        try:
            self._specification = specification_with(dialect)
        except UnknownDialect as exc:
            raise SchemaConfigurationError(
                f"Unsupported JSON Schema dialect: {dialect}"
            ) from exc

        self._repository = repository
        self._dialect = dialect
        self._validator_cls = validator_cls
        self._base_uri = base_uri if base_uri.endswith("/") else base_uri + "/"
        self._lock = threading.Lock()
        self._schemas: Optional[dict[str, Schema]] = None
        self._registry: Optional[Registry] = None
        self._validators: dict[str, Validator] = {}

    @classmethod
    def from_config(
        cls,
        repository: SchemaRepository,
        config: Optional[ForgeContractsConfig] = None,
    ) -> "ValidationEngine":
        config = config or get_config()
        return cls(repository, dialect=config.dialect, base_uri=config.base_uri)

    @property
    def repository(self) -> SchemaRepository:
        return self._repository

    def schema_uri(self, schema: Schema) -> str:
        """Registry key of *schema*: its ``$id``, or one derived from the base URI."""
        return schema.schema_id or f"{self._base_uri}{schema.identity}.schema.json"

    def validate(self, schema_identity: str, instance: Any) -> ValidationResult:
        """Validate *instance* against the schema named *schema_identity*.

        Args:
            schema_identity: ``"name.version"`` of a repository schema.
            instance: Any JSON-compatible value.

        Returns:
            ``ValidationResult``; never raises for unknown schemas or
            constraint violations.

        Raises:
            SchemaConfigurationError: If the schema set is malformed or a
                ``$ref`` cannot be resolved.
        """
        validator = self._get_validator(schema_identity)
        if validator is None:
            logger.debug("Validation requested for unknown schema %s", schema_identity)
            result = ValidationResult(
                schema_identity=schema_identity,
                valid=False,
                errors=[ValidationIssue(message=f'Unknown schema: "{schema_identity}"')],
            )
            emit_validation_result(result)
            return result

        try:
            issues = [
                ValidationIssue(
                    location=_json_pointer(error.absolute_path),
                    message=error.message,
                )
                for error in validator.iter_errors(instance)
            ]
        except Unresolvable as exc:
            raise SchemaConfigurationError(
                f"Unresolvable reference while validating {schema_identity}: {exc}"
            ) from exc

        result = ValidationResult(
            schema_identity=schema_identity,
            valid=not issues,
            errors=issues,
        )
        if issues:
            logger.debug(
                "Validation failed for %s: %d error(s)", schema_identity, len(issues)
            )
        emit_validation_result(result)
        return result

    # -- internal helpers --------------------------------------------------

    def _get_validator(self, schema_identity: str) -> Optional[Validator]:
        with self._lock:
            cached = self._validators.get(schema_identity)
            if cached is not None:
                return cached

            schemas = self._ensure_registry()
            schema = schemas.get(schema_identity)
            if schema is None:
                return None

            validator = self._compile(schema)
            self._validators[schema_identity] = validator
            return validator

    def _ensure_registry(self) -> dict[str, Schema]:
        """Register every repository schema once.  Caller holds the lock."""
        if self._schemas is not None:
            return self._schemas

        schemas = self._repository.load_all()
        resources = []
        owners: dict[str, str] = {}
        for identity, schema in schemas.items():
            uri = self.schema_uri(schema)
            if uri in owners:
                raise SchemaConfigurationError(
                    f"Schemas {owners[uri]} and {identity} share the id {uri}"
                )
            owners[uri] = identity
            contents = self._in_dialect(schema.document)
            resources.append((uri, self._specification.create_resource(contents)))

        self._registry = Registry().with_resources(resources)
        self._schemas = schemas
        logger.debug("Registered %d schema(s) under %s", len(schemas), self._dialect)
        return schemas

    def _compile(self, schema: Schema) -> Validator:
        contents = self._in_dialect(schema.document)
        try:
            self._validator_cls.check_schema(contents)
        except SchemaError as exc:
            raise SchemaConfigurationError(
                f"Invalid schema document {schema.identity}: {exc.message}"
            ) from exc

        logger.debug("Compiled validator for %s", schema.identity)
        return self._validator_cls(
            contents,
            registry=self._registry,
            format_checker=self._validator_cls.FORMAT_CHECKER,
        )

    def _in_dialect(self, document: dict[str, Any]) -> dict[str, Any]:
        """Pin *document* to the engine dialect (shallow copy)."""
        return {**document, "$schema": self._dialect}


# ---------------------------------------------------------------------------
# Module-level convenience
# ---------------------------------------------------------------------------

_default_engine: Optional[ValidationEngine] = None
_default_lock = threading.Lock()


def default_engine() -> ValidationEngine:
    """Engine over the configured file repository, created on first use."""
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            config = get_config()
            _default_engine = ValidationEngine.from_config(
                FileSchemaRepository.from_config(config), config
            )
        return _default_engine


def reset_default_engine() -> None:
    """Drop the default engine and its caches (for testing)."""
    global _default_engine
    with _default_lock:
        _default_engine = None


def validate(schema_identity: str, instance: Any) -> ValidationResult:
    """
    Module-level convenience function.

    Equivalent to ``default_engine().validate(schema_identity, instance)``.
    """
    return default_engine().validate(schema_identity, instance)
