"""
Pydantic v2 models for contract documents and engine results.

``Schema`` and ``Fixture`` wrap externally authored documents addressed by
``(name, version)``.  ``SchemaDiff``, ``ValidationResult``,
``CompatibilityResult`` and ``DiffReport`` are transient results computed
per call and owned by the caller.

Result models use ``extra="forbid"`` so that JSON output stays stable.

Usage::

    from forge_contracts.schema import Schema

    schema = Schema(name="zone", version="v1", document=raw)
    schema.identity      # "zone.v1"
    schema.properties    # {"schema": {...}, ...}
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from forge_contracts.types import (
    DEFAULT_IDENTITY_FIELD,
    Classification,
    schema_identity,
)


# ---------------------------------------------------------------------------
# Authored documents
# ---------------------------------------------------------------------------


class _Document(BaseModel):
    """A parsed JSON/YAML document addressed by name and version."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    version: str = Field(..., min_length=1)
    document: dict[str, Any]

    @property
    def identity(self) -> str:
        return schema_identity(self.name, self.version)


class Schema(_Document):
    """A versioned JSON Schema document.

    When the document declares an identity constant, it must equal
    ``"{name}.{version}"``.
    """

    identity_field: str = Field(DEFAULT_IDENTITY_FIELD, exclude=True)

    @model_validator(mode="after")
    def _check_identity_constant(self) -> "Schema":
        declared = self.identity_constant
        if declared is not None and declared != self.identity:
            raise ValueError(
                f"Identity constant '{declared}' does not match "
                f"schema identity '{self.identity}'"
            )
        return self

    @property
    def schema_id(self) -> Optional[str]:
        value = self.document.get("$id")
        return value if isinstance(value, str) and value else None

    @property
    def properties(self) -> dict[str, Any]:
        props = self.document.get("properties")
        return props if isinstance(props, dict) else {}

    @property
    def required(self) -> list[str]:
        required = self.document.get("required")
        if not isinstance(required, list):
            return []
        return [field for field in required if isinstance(field, str)]

    @property
    def identity_constant(self) -> Optional[Any]:
        node = self.properties.get(self.identity_field)
        if isinstance(node, dict) and "const" in node:
            return node["const"]
        return None


class Fixture(_Document):
    """A golden example document recorded for one schema version."""


# ---------------------------------------------------------------------------
# Diff
# ---------------------------------------------------------------------------


class TypeChange(BaseModel):
    """A property present in both versions whose reduced kind differs."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    prop: str
    from_kind: str
    to_kind: str


class SchemaDiff(BaseModel):
    """Structural delta between two versions of one schema."""

    model_config = ConfigDict(extra="forbid")

    added: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)
    type_changed: list[TypeChange] = Field(default_factory=list)
    new_required: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.added or self.removed or self.type_changed or self.new_required
        )


class DiffReport(BaseModel):
    """A diff together with its classification, as printed by the CLI."""

    model_config = ConfigDict(extra="forbid")

    name: str
    from_version: str
    to_version: str
    classification: Classification
    diff: SchemaDiff


# ---------------------------------------------------------------------------
# Validation and compatibility results
# ---------------------------------------------------------------------------


class ValidationIssue(BaseModel):
    """One violated constraint: a JSON pointer into the instance and a message."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    location: str = "/"
    message: str

    def __str__(self) -> str:
        return f"{self.location}: {self.message}"


class ValidationResult(BaseModel):
    """Outcome of validating one instance against one schema."""

    model_config = ConfigDict(extra="forbid")

    schema_identity: str
    valid: bool
    errors: list[ValidationIssue] = Field(default_factory=list)

    def error_messages(self) -> list[str]:
        return [str(issue) for issue in self.errors]


class CompatibilityResult(BaseModel):
    """Outcome of replaying an old-version fixture against a new schema."""

    model_config = ConfigDict(extra="forbid")

    name: str
    from_version: str
    to_version: str
    compatible: bool
    errors: list[str] = Field(default_factory=list)
    message: str = ""
