"""
Pytest configuration and fixtures for forge-contracts tests.
"""

from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Generator

import pytest

from forge_contracts.config import reset_config
from forge_contracts.repository import FileSchemaRepository, InMemorySchemaRepository
from forge_contracts.validation import reset_default_engine


BASE_URI = "https://forge-contracts.amerzel.dev/"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Strip FORGE_CONTRACTS_* variables and reset global singletons."""
    for key in list(os.environ):
        if key.startswith("FORGE_CONTRACTS_"):
            monkeypatch.delenv(key, raising=False)
    reset_config()
    reset_default_engine()
    yield
    reset_config()
    reset_default_engine()


# ============================================================================
# Document Fixtures
# ============================================================================


_ZONE_V1: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"{BASE_URI}zone.v1.schema.json",
    "title": "zone.v1",
    "description": "A named region of a map.",
    "type": "object",
    "required": ["schema", "id", "biome"],
    "properties": {
        "schema": {"const": "zone.v1"},
        "id": {"type": "string", "minLength": 1},
        "biome": {"enum": ["forest", "desert"]},
        "tags": {"type": "array", "items": {"type": "string"}},
    },
}

_RESOLVED_MAP_V1: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": f"{BASE_URI}resolved_map.v1.schema.json",
    "title": "resolved_map.v1",
    "description": "A resolved map and its zones.",
    "type": "object",
    "required": ["schema", "map_id", "seed", "zones"],
    "properties": {
        "schema": {"const": "resolved_map.v1"},
        "map_id": {"type": "string", "minLength": 1},
        "seed": {"type": "integer"},
        "zones": {
            "type": "array",
            "items": {"$ref": f"{BASE_URI}zone.v1.schema.json"},
        },
    },
}

_ZONE_V1_FIXTURE: Dict[str, Any] = {
    "schema": "zone.v1",
    "id": "whispering_woods",
    "biome": "forest",
    "tags": ["starter"],
}

_RESOLVED_MAP_V1_FIXTURE: Dict[str, Any] = {
    "schema": "resolved_map.v1",
    "map_id": "map_0001",
    "seed": 42,
    "zones": [
        {"schema": "zone.v1", "id": "whispering_woods", "biome": "forest"},
        {"schema": "zone.v1", "id": "sunscar_dunes", "biome": "desert"},
    ],
}


@pytest.fixture
def zone_v1() -> Dict[str, Any]:
    return copy.deepcopy(_ZONE_V1)


@pytest.fixture
def resolved_map_v1() -> Dict[str, Any]:
    return copy.deepcopy(_RESOLVED_MAP_V1)


@pytest.fixture
def zone_v1_fixture() -> Dict[str, Any]:
    return copy.deepcopy(_ZONE_V1_FIXTURE)


@pytest.fixture
def resolved_map_v1_fixture() -> Dict[str, Any]:
    return copy.deepcopy(_RESOLVED_MAP_V1_FIXTURE)


# ============================================================================
# Repository Fixtures
# ============================================================================


@pytest.fixture
def contract_dirs(
    tmp_path: Path,
    zone_v1: Dict[str, Any],
    resolved_map_v1: Dict[str, Any],
    zone_v1_fixture: Dict[str, Any],
    resolved_map_v1_fixture: Dict[str, Any],
) -> tuple[Path, Path]:
    """Write the sample schemas and fixtures into ``tmp_path``."""
    schemas_dir = tmp_path / "schemas"
    fixtures_dir = tmp_path / "fixtures"
    schemas_dir.mkdir()
    fixtures_dir.mkdir()

    for identity, doc in (("zone.v1", zone_v1), ("resolved_map.v1", resolved_map_v1)):
        (schemas_dir / f"{identity}.schema.json").write_text(json.dumps(doc, indent=2))
    for identity, doc in (
        ("zone.v1", zone_v1_fixture),
        ("resolved_map.v1", resolved_map_v1_fixture),
    ):
        (fixtures_dir / f"{identity}.example.json").write_text(json.dumps(doc, indent=2))

    return schemas_dir, fixtures_dir


@pytest.fixture
def file_repository(contract_dirs: tuple[Path, Path]) -> FileSchemaRepository:
    schemas_dir, fixtures_dir = contract_dirs
    return FileSchemaRepository(schemas_dir, fixtures_dir)


@pytest.fixture
def memory_repository(
    zone_v1: Dict[str, Any],
    resolved_map_v1: Dict[str, Any],
    zone_v1_fixture: Dict[str, Any],
    resolved_map_v1_fixture: Dict[str, Any],
) -> InMemorySchemaRepository:
    return InMemorySchemaRepository(
        schemas={"zone.v1": zone_v1, "resolved_map.v1": resolved_map_v1},
        fixtures={
            "zone.v1": zone_v1_fixture,
            "resolved_map.v1": resolved_map_v1_fixture,
        },
    )
