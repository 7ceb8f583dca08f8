"""
Fixture replay compatibility checker.

Proves backward compatibility empirically: the golden fixture recorded for
the old version is relabeled as the new version and validated against the
new schema.  Relabeling the identity field is the only mutation, so a pass
means "this exact old payload still satisfies the new contract".

This catches breakage the structural diff cannot see (a tightened
``minLength``, a new ``format``, an added ``const``/``enum`` on an
existing field) and is the authoritative compatibility signal.

Read-only: the stored fixture is never modified.

Usage::

    from forge_contracts.checker import CompatibilityChecker

    checker = CompatibilityChecker(repository)
    result = checker.check("resolved_map", "v1", "v2")
    if not result.compatible:
        for err in result.errors:
            print(err)
"""

from __future__ import annotations

import copy
import logging
from typing import Any, Optional

from forge_contracts.errors import FixtureNotFoundError
from forge_contracts.otel import emit_compatibility_check
from forge_contracts.repository import SchemaRepository
from forge_contracts.schema import CompatibilityResult, Fixture
from forge_contracts.types import schema_identity
from forge_contracts.validation import ValidationEngine

logger = logging.getLogger(__name__)


class CompatibilityChecker:
    """Replays old-version fixtures against newer schemas."""

    def __init__(
        self,
        repository: SchemaRepository,
        engine: Optional[ValidationEngine] = None,
    ) -> None:
        self._repository = repository
        self._engine = engine or ValidationEngine.from_config(repository)

    def check(self, name: str, from_version: str, to_version: str) -> CompatibilityResult:
        """Validate the ``from_version`` fixture, relabeled, against ``to_version``.

        Args:
            name: Base schema name (e.g. ``"resolved_map"``).
            from_version: Version the fixture was authored against.
            to_version: Version whose schema the fixture must satisfy.

        Returns:
            ``CompatibilityResult``; ``errors`` is the validation error list
            verbatim when incompatible.
        """
        try:
            fixture = self._repository.load_fixture(name, from_version)
        except FixtureNotFoundError as exc:
            result = CompatibilityResult(
                name=name,
                from_version=from_version,
                to_version=to_version,
                compatible=False,
                errors=[str(exc)],
                message=f"No golden fixture for {schema_identity(name, from_version)}",
            )
            emit_compatibility_check(result)
            return result

        target = schema_identity(name, to_version)
        patched = self.relabel(fixture, target)
        validation = self._engine.validate(target, patched)

        if validation.valid:
            message = (
                f"{fixture.identity} fixture is compatible with {target} schema"
            )
        else:
            message = (
                f"{fixture.identity} fixture fails against {target} schema "
                f"({len(validation.errors)} error(s))"
            )

        result = CompatibilityResult(
            name=name,
            from_version=from_version,
            to_version=to_version,
            compatible=validation.valid,
            errors=validation.error_messages(),
            message=message,
        )
        emit_compatibility_check(result)
        return result

    def relabel(self, fixture: Fixture, target_identity: str) -> dict[str, Any]:
        """Deep copy of the fixture with only its identity field rewritten."""
        patched = copy.deepcopy(fixture.document)
        patched[self._repository.identity_field] = target_identity
        return patched
