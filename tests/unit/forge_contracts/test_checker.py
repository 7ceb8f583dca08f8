"""Tests for the fixture replay compatibility checker."""

from __future__ import annotations

import copy

from forge_contracts.checker import CompatibilityChecker
from forge_contracts.evolution import bump_schema, classify_diff, diff_schemas
from forge_contracts.repository import InMemorySchemaRepository
from forge_contracts.types import Classification


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_x_repo(v2_required: list[str]) -> InMemorySchemaRepository:
    v1 = {
        "type": "object",
        "properties": {"schema": {"const": "x.v1"}, "a": {"type": "string"}},
        "required": ["schema", "a"],
    }
    v2 = {
        "type": "object",
        "properties": {
            "schema": {"const": "x.v2"},
            "a": {"type": "string"},
            "b": {"type": "string"},
        },
        "required": v2_required,
    }
    return InMemorySchemaRepository(
        schemas={"x.v1": v1, "x.v2": v2},
        fixtures={"x.v1": {"schema": "x.v1", "a": "hi"}},
    )


# ---------------------------------------------------------------------------
# CompatibilityChecker
# ---------------------------------------------------------------------------


class TestCompatibilityChecker:
    def test_same_version_is_compatible(self, memory_repository):
        result = CompatibilityChecker(memory_repository).check("zone", "v1", "v1")

        assert result.compatible is True
        assert result.errors == []
        assert "compatible" in result.message

    def test_bumped_version_is_compatible(self, memory_repository, resolved_map_v1):
        memory_repository.add_schema(
            "resolved_map", "v2", bump_schema(resolved_map_v1, "resolved_map", "v1", "v2")
        )
        result = CompatibilityChecker(memory_repository).check("resolved_map", "v1", "v2")
        assert result.compatible is True

    def test_optional_addition_is_compatible(self):
        result = CompatibilityChecker(_make_x_repo(["schema", "a"])).check("x", "v1", "v2")
        assert result.compatible is True

    def test_new_required_field_is_incompatible(self):
        result = CompatibilityChecker(_make_x_repo(["schema", "a", "b"])).check("x", "v1", "v2")

        assert result.name == "x"
        assert result.from_version == "v1"
        assert result.to_version == "v2"
        assert result.compatible is False
        assert len(result.errors) == 1
        assert "'b'" in result.errors[0]
        assert "fails" in result.message

    def test_detects_tightening_the_diff_misses(self, memory_repository, zone_v1):
        v2 = bump_schema(zone_v1, "zone", "v1", "v2")
        v2["properties"]["id"]["minLength"] = 100
        memory_repository.add_schema("zone", "v2", v2)

        diff = diff_schemas(zone_v1, v2)
        assert classify_diff(diff) == Classification.ADDITIVE

        result = CompatibilityChecker(memory_repository).check("zone", "v1", "v2")
        assert result.compatible is False
        assert result.errors[0].startswith("/id: ")

    def test_detects_added_format_on_unchanged_field(self):
        v1 = {
            "properties": {"schema": {"const": "x.v1"}, "home": {"type": "string"}},
        }
        v2 = {
            "properties": {
                "schema": {"const": "x.v2"},
                "home": {"type": "string", "format": "uri"},
            },
        }
        repo = InMemorySchemaRepository(
            schemas={"x.v1": v1, "x.v2": v2},
            fixtures={"x.v1": {"schema": "x.v1", "home": "not a uri at all"}},
        )

        assert classify_diff(diff_schemas(v1, v2)) == Classification.ADDITIVE

        result = CompatibilityChecker(repo).check("x", "v1", "v2")
        assert result.compatible is False
        assert len(result.errors) == 1
        assert result.errors[0].startswith("/home: ")

    def test_detects_bad_date_time_in_fixture(self, resolved_map_v1, zone_v1):
        v2 = bump_schema(resolved_map_v1, "resolved_map", "v1", "v2")
        v2["properties"]["generated_at"] = {"type": "string", "format": "date-time"}
        repo = InMemorySchemaRepository(
            schemas={"zone.v1": zone_v1, "resolved_map.v1": resolved_map_v1, "resolved_map.v2": v2},
            fixtures={
                "resolved_map.v1": {
                    "schema": "resolved_map.v1",
                    "map_id": "m",
                    "seed": 1,
                    "zones": [],
                    "generated_at": "not a timestamp",
                }
            },
        )

        result = CompatibilityChecker(repo).check("resolved_map", "v1", "v2")
        assert result.compatible is False
        assert result.errors[0].startswith("/generated_at: ")

    def test_missing_fixture_is_reported_as_data(self, zone_v1):
        repo = InMemorySchemaRepository(schemas={"zone.v1": zone_v1})
        result = CompatibilityChecker(repo).check("zone", "v1", "v1")

        assert result.compatible is False
        assert result.errors == ["Fixture not found: zone.v1"]
        assert "No golden fixture" in result.message

    def test_unknown_target_schema_is_incompatible(self, memory_repository):
        result = CompatibilityChecker(memory_repository).check("zone", "v1", "v9")

        assert result.compatible is False
        assert result.errors == ['/: Unknown schema: "zone.v9"']

    def test_stored_fixture_is_not_mutated(self, memory_repository, zone_v1):
        memory_repository.add_schema("zone", "v2", bump_schema(zone_v1, "zone", "v1", "v2"))
        before = copy.deepcopy(memory_repository.load_fixture("zone", "v1").document)

        CompatibilityChecker(memory_repository).check("zone", "v1", "v2")

        assert memory_repository.load_fixture("zone", "v1").document == before
        assert before["schema"] == "zone.v1"

    def test_relabel_only_touches_identity_field(self, memory_repository):
        checker = CompatibilityChecker(memory_repository)
        fixture = memory_repository.load_fixture("resolved_map", "v1")

        patched = checker.relabel(fixture, "resolved_map.v2")

        assert patched["schema"] == "resolved_map.v2"
        assert {k: v for k, v in patched.items() if k != "schema"} == {
            k: v for k, v in fixture.document.items() if k != "schema"
        }
        assert patched["zones"] is not fixture.document["zones"]

    def test_relabel_uses_repository_identity_field(self):
        repo = InMemorySchemaRepository(
            schemas={"x.v1": {"properties": {"kind": {"const": "x.v1"}}}},
            fixtures={"x.v1": {"kind": "x.v1"}},
            identity_field="kind",
        )
        checker = CompatibilityChecker(repo)
        patched = checker.relabel(repo.load_fixture("x", "v1"), "x.v2")
        assert patched == {"kind": "x.v2"}

    def test_shares_supplied_engine(self, memory_repository):
        from forge_contracts.validation import ValidationEngine

        engine = ValidationEngine(memory_repository)
        CompatibilityChecker(memory_repository, engine).check("zone", "v1", "v1")
        assert "zone.v1" in engine._validators
