"""
Schema evolution: structural diff, classification and version bumps.

Detects property-level changes between two versions of one schema and maps
them to a binary verdict:

- ``removed`` nonempty      → BREAKING
- ``type_changed`` nonempty → BREAKING
- ``new_required`` nonempty → BREAKING
- otherwise                 → ADDITIVE

The diff is intentionally shallow: only top-level properties are compared,
each through its reduced descriptor kind (see ``descriptors``), and a
``$ref`` counts as changed only when its target string changes.  Fields
that became *less* required are not reported.

The classification is a fast, explainable approximation.  The replay check
in ``checker`` is the authoritative compatibility signal.

Usage::

    from forge_contracts.evolution import EvolutionTracker, classify_diff, diff_schemas

    diff = diff_schemas(old_schema, new_schema)
    classify_diff(diff)  # Classification.ADDITIVE

    tracker = EvolutionTracker(repository)
    report = tracker.compare("resolved_map", "v1", "v2")
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Mapping, Union

from forge_contracts.descriptors import ConstDescriptor, reduce_descriptor
from forge_contracts.otel import emit_evolution_diff
from forge_contracts.repository import SchemaRepository
from forge_contracts.schema import DiffReport, Schema, SchemaDiff, TypeChange
from forge_contracts.types import DEFAULT_IDENTITY_FIELD, Classification, schema_identity

logger = logging.getLogger(__name__)

SchemaLike = Union[Schema, Mapping[str, Any]]


def _document(schema: SchemaLike) -> Mapping[str, Any]:
    if isinstance(schema, Schema):
        return schema.document
    return schema if isinstance(schema, Mapping) else {}


def _properties(document: Mapping[str, Any]) -> dict[str, Any]:
    props = document.get("properties")
    return props if isinstance(props, dict) else {}


def _required(document: Mapping[str, Any]) -> list[str]:
    required = document.get("required")
    if not isinstance(required, list):
        return []
    return [field for field in required if isinstance(field, str)]


# ---------------------------------------------------------------------------
# Diff and classification
# ---------------------------------------------------------------------------


def diff_schemas(
    old: SchemaLike,
    new: SchemaLike,
    identity_field: str = DEFAULT_IDENTITY_FIELD,
) -> SchemaDiff:
    """Collect property-level differences between two schema versions.

    Total: absent or malformed ``properties`` / ``required`` count as empty.

    The identity field is exempt from ``type_changed`` while both sides
    are constants, since a version bump moves its value but not its kind.
    """
    old_props = _properties(_document(old))
    new_props = _properties(_document(new))

    added = [prop for prop in new_props if prop not in old_props]
    removed = [prop for prop in old_props if prop not in new_props]

    type_changed: list[TypeChange] = []
    for prop, old_node in old_props.items():
        if prop not in new_props:
            continue
        old_desc = reduce_descriptor(old_node)
        new_desc = reduce_descriptor(new_props[prop])
        if (
            prop == identity_field
            and isinstance(old_desc, ConstDescriptor)
            and isinstance(new_desc, ConstDescriptor)
        ):
            continue
        old_kind = old_desc.describe()
        new_kind = new_desc.describe()
        if old_kind != new_kind:
            type_changed.append(TypeChange(prop=prop, from_kind=old_kind, to_kind=new_kind))

    old_required = set(_required(_document(old)))
    new_required = [
        field for field in _required(_document(new)) if field not in old_required
    ]

    return SchemaDiff(
        added=added,
        removed=removed,
        type_changed=type_changed,
        new_required=new_required,
    )


def classify_diff(diff: SchemaDiff) -> Classification:
    """Classify a diff as ADDITIVE or BREAKING."""
    if diff.removed:
        return Classification.BREAKING
    if diff.type_changed:
        return Classification.BREAKING
    if diff.new_required:
        return Classification.BREAKING
    return Classification.ADDITIVE


def format_diff(diff: SchemaDiff, classification: Classification) -> str:
    """Format a diff as a human-readable summary string."""
    lines = [f"Classification: {Classification(classification).value}", ""]

    if diff.added:
        lines.append("Added properties:")
        lines.extend(f"  + {prop}" for prop in diff.added)
    if diff.removed:
        lines.append("Removed properties:")
        lines.extend(f"  - {prop}" for prop in diff.removed)
    if diff.type_changed:
        lines.append("Type changes:")
        lines.extend(
            f"  ~ {change.prop}: {change.from_kind} → {change.to_kind}"
            for change in diff.type_changed
        )
    if diff.new_required:
        lines.append("New required fields:")
        lines.extend(f"  ! {field}" for field in diff.new_required)
    if diff.is_empty:
        lines.append("No property-level changes detected.")

    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Version bump
# ---------------------------------------------------------------------------


def bump_schema(
    document: Mapping[str, Any],
    name: str,
    from_version: str,
    to_version: str,
    identity_field: str = DEFAULT_IDENTITY_FIELD,
) -> dict[str, Any]:
    """Derive the next version's document from *document*.

    Returns a deep copy with ``name.from_version`` replaced by
    ``name.to_version`` in ``$id``, ``title`` and the identity constant.
    Keys that are absent are left absent; nothing else changes.
    """
    from_tag = schema_identity(name, from_version)
    to_tag = schema_identity(name, to_version)
    updated = copy.deepcopy(dict(document))

    for key in ("$id", "title"):
        value = updated.get(key)
        if isinstance(value, str):
            updated[key] = value.replace(from_tag, to_tag)

    identity_node = _properties(updated).get(identity_field)
    if isinstance(identity_node, dict) and isinstance(identity_node.get("const"), str):
        identity_node["const"] = identity_node["const"].replace(from_tag, to_tag)

    return updated


# ---------------------------------------------------------------------------
# Repository-backed comparison
# ---------------------------------------------------------------------------


class EvolutionTracker:
    """Compares stored schema versions and classifies the change."""

    def __init__(self, repository: SchemaRepository) -> None:
        self._repository = repository

    def compare(self, name: str, from_version: str, to_version: str) -> DiffReport:
        """Diff ``name.from_version`` against ``name.to_version``.

        Raises:
            SchemaNotFoundError: If either version is missing.
        """
        old = self._repository.load(name, from_version)
        new = self._repository.load(name, to_version)

        diff = diff_schemas(old, new, identity_field=self._repository.identity_field)
        report = DiffReport(
            name=name,
            from_version=from_version,
            to_version=to_version,
            classification=classify_diff(diff),
            diff=diff,
        )
        emit_evolution_diff(report)
        return report
