"""
OTel span event emission helpers for contract validation and evolution.

Usage::

    from forge_contracts.otel import (
        emit_validation_result,
        emit_evolution_diff,
        emit_compatibility_check,
    )

    emit_validation_result(result)
    emit_evolution_diff(report)
    emit_compatibility_check(compat_result)
"""

from __future__ import annotations

import logging

from forge_contracts._otel_helpers import add_span_event
from forge_contracts.schema import CompatibilityResult, DiffReport, ValidationResult
from forge_contracts.types import Classification

logger = logging.getLogger(__name__)


def emit_validation_result(result: ValidationResult) -> None:
    """Emit a span event for one validation.

    Event name: ``contract.validation.result``
    """
    attrs: dict[str, str | int | float | bool] = {
        "contract.schema": result.schema_identity,
        "contract.valid": result.valid,
        "contract.error_count": len(result.errors),
    }
    add_span_event("contract.validation.result", attrs)


def emit_evolution_diff(report: DiffReport) -> None:
    """Emit a span event for a structural diff and its classification.

    Event name: ``contract.evolution.diff``
    """
    diff = report.diff
    attrs: dict[str, str | int | float | bool] = {
        "contract.name": report.name,
        "contract.from_version": report.from_version,
        "contract.to_version": report.to_version,
        "contract.classification": report.classification.value,
        "contract.added_count": len(diff.added),
        "contract.removed_count": len(diff.removed),
        "contract.type_changed_count": len(diff.type_changed),
        "contract.new_required_count": len(diff.new_required),
    }

    if report.classification == Classification.BREAKING:
        logger.warning(
            "Breaking schema change: %s %s -> %s removed=%d type_changed=%d new_required=%d",
            report.name,
            report.from_version,
            report.to_version,
            len(diff.removed),
            len(diff.type_changed),
            len(diff.new_required),
        )
    else:
        logger.debug(
            "Additive schema change: %s %s -> %s added=%d",
            report.name,
            report.from_version,
            report.to_version,
            len(diff.added),
        )

    add_span_event("contract.evolution.diff", attrs)


def emit_compatibility_check(result: CompatibilityResult) -> None:
    """Emit a span event for a fixture replay compatibility check.

    Event name: ``contract.compatibility.check``
    """
    attrs: dict[str, str | int | float | bool] = {
        "contract.name": result.name,
        "contract.from_version": result.from_version,
        "contract.to_version": result.to_version,
        "contract.compatible": result.compatible,
        "contract.error_count": len(result.errors),
        "contract.message": result.message,
    }

    if result.compatible:
        logger.debug(
            "Compat check: %s %s -> %s compatible=True",
            result.name,
            result.from_version,
            result.to_version,
        )
    else:
        logger.warning(
            "Compat check FAILED: %s %s -> %s errors=%d",
            result.name,
            result.from_version,
            result.to_version,
            len(result.errors),
        )

    add_span_event("contract.compatibility.check", attrs)
