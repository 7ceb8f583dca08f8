"""
Document loader with per-path caching for JSON and YAML contract files.

Provides ``DocumentLoader``, the single place where schema and fixture
files are read from disk.  Centralises:

- Per-path caching (each loader instance owns its cache)
- File existence checks
- JSON / YAML parsing chosen by file suffix
- Mapping-root validation

Parse failures are configuration errors: a document that cannot be read
means the authoring environment is broken, not that the caller passed bad
input.

Usage::

    from forge_contracts._loader_base import DocumentLoader

    loader = DocumentLoader()
    raw = loader.load(Path("schemas/zone.v1.schema.json"))
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

import yaml

from forge_contracts.errors import SchemaConfigurationError

logger = logging.getLogger(__name__)

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")


class DocumentLoader:
    """Reads JSON/YAML documents and caches them by resolved path."""

    def __init__(self) -> None:
        self._cache: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def clear_cache(self) -> None:
        """Clear the document cache (useful in tests)."""
        with self._lock:
            self._cache.clear()

    def load(self, path: Path) -> dict[str, Any]:
        """Load a document from a JSON or YAML file.

        Args:
            path: Path to the document.

        Returns:
            The parsed mapping.  Callers must not mutate it.

        Raises:
            FileNotFoundError: If the file does not exist.
            SchemaConfigurationError: If the file cannot be parsed or its
                root is not a mapping.
        """
        key = str(path.resolve())
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Document cache hit: %s", key)
                return cached

            if not path.exists():
                raise FileNotFoundError(f"Document not found: {path}")

            raw = self._parse(path)
            self._cache[key] = raw

        logger.debug("Loaded document %s (%d top-level keys)", key, len(raw))
        return raw

    def load_from_string(self, text: str, fmt: str = "json") -> dict[str, Any]:
        """Parse a document from a string (convenience for testing).

        Args:
            text: Document content.
            fmt: ``"json"`` or ``"yaml"``.

        Raises:
            SchemaConfigurationError: If the text cannot be parsed or its
                root is not a mapping.
        """
        return _ensure_mapping(_parse_text(text, fmt, "<string>"), "<string>")

    @staticmethod
    def _parse(path: Path) -> dict[str, Any]:
        suffix = path.suffix.lower()
        fmt = "yaml" if suffix in YAML_SUFFIXES else "json"
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
        return _ensure_mapping(_parse_text(text, fmt, str(path)), str(path))


def _parse_text(text: str, fmt: str, origin: str) -> Any:
    try:
        if fmt == "yaml":
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise SchemaConfigurationError(f"Cannot parse {origin}: {exc}") from exc


def _ensure_mapping(raw: Any, origin: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise SchemaConfigurationError(
            f"Expected a mapping at root of {origin}, got {type(raw).__name__}"
        )
    return raw
