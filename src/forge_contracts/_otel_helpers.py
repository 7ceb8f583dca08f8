"""Span event helper shared by ``forge_contracts.otel``."""

from __future__ import annotations

from opentelemetry import trace as otel_trace


def add_span_event(
    name: str, attributes: dict[str, str | int | float | bool]
) -> None:
    """Attach *name* with *attributes* to the current span.

    Outside a recording span (no SDK installed, or sampling dropped the
    trace) nothing happens.
    """
    span = otel_trace.get_current_span()
    if span.is_recording():
        span.add_event(name=name, attributes=attributes)
