"""
Core enums and identity helpers shared across forge-contracts.

A schema is addressed by the pair ``(name, version)``.  Its *identity* is
the string ``"{name}.{version}"``, which is also the value the schema's
identity field must carry.

Example:
    from forge_contracts.types import Classification, parse_identity

    name, version = parse_identity("resolved_map.v1")
    # ("resolved_map", "v1")
"""

from __future__ import annotations

from enum import Enum


class Classification(str, Enum):
    """Verdict of a structural schema diff."""

    ADDITIVE = "ADDITIVE"
    BREAKING = "BREAKING"


class DescriptorKind(str, Enum):
    """The five reduced shapes a property descriptor can take."""

    CONST = "const"
    ENUM = "enum"
    REF = "ref"
    ARRAY = "array"
    PRIMITIVE = "primitive"


# Values used as defaults when no config is supplied
DEFAULT_IDENTITY_FIELD = "schema"
DEFAULT_BASE_URI = "https://forge-contracts.amerzel.dev/"
DEFAULT_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def schema_identity(name: str, version: str) -> str:
    """Join a name/version pair into ``"name.version"``."""
    return f"{name}.{version}"


def parse_identity(identity: str) -> tuple[str, str]:
    """Split ``"name.version"`` on its last dot.

    Raises:
        ValueError: If *identity* has no dot or an empty half.
    """
    name, sep, version = identity.rpartition(".")
    if not sep or not name or not version:
        raise ValueError(
            f"Invalid schema identity '{identity}', expected 'name.version'"
        )
    return name, version
