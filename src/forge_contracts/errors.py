"""
Exception hierarchy for forge-contracts.

Two families matter to callers:

- **Configuration errors** (``SchemaConfigurationError``) mean the authoring
  environment is broken: an unparseable or invalid schema document, a
  duplicated ``$id``, a reference to a schema that is not loaded.  They abort
  the current operation.
- **Usage errors** (``SchemaNotFoundError``, ``FixtureNotFoundError``,
  ``BumpError``) mean the caller asked for something that does not exist or
  would collide.  They are recoverable by correcting the input.

Data errors (an instance failing its schema) are never raised; they come
back as ``ValidationResult`` / ``CompatibilityResult`` values.
"""

from __future__ import annotations


class ForgeContractsError(Exception):
    """Base class for all forge-contracts errors."""


class SchemaConfigurationError(ForgeContractsError):
    """A schema document or the schema set is unusable."""


class SchemaNotFoundError(ForgeContractsError, LookupError):
    """No schema document exists for a ``(name, version)`` pair."""

    kind = "Schema"

    def __init__(self, name: str, version: str, location: str = "") -> None:
        self.name = name
        self.version = version
        self.location = location
        message = f"{self.kind} not found: {name}.{version}"
        if location:
            message += f" ({location})"
        super().__init__(message)


class FixtureNotFoundError(SchemaNotFoundError):
    """No golden fixture exists for a ``(name, version)`` pair."""

    kind = "Fixture"


class BumpError(ForgeContractsError):
    """A version bump cannot proceed (missing source or existing target)."""
