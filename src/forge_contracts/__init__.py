"""
forge-contracts: versioned data contracts and their evolution.

Loads named, versioned JSON Schema documents, validates data instances
against them, and decides whether evolving a schema preserves backward
compatibility.

Public API::

    from forge_contracts import (
        # Storage
        SchemaRepository,
        FileSchemaRepository,
        InMemorySchemaRepository,
        # Validation
        ValidationEngine,
        validate,
        # Evolution
        diff_schemas,
        classify_diff,
        format_diff,
        bump_schema,
        EvolutionTracker,
        # Compatibility
        CompatibilityChecker,
    )
"""

from forge_contracts.checker import CompatibilityChecker
from forge_contracts.config import ForgeContractsConfig, get_config, reset_config
from forge_contracts.errors import (
    BumpError,
    FixtureNotFoundError,
    ForgeContractsError,
    SchemaConfigurationError,
    SchemaNotFoundError,
)
from forge_contracts.evolution import (
    EvolutionTracker,
    bump_schema,
    classify_diff,
    diff_schemas,
    format_diff,
)
from forge_contracts.repository import (
    FileSchemaRepository,
    InMemorySchemaRepository,
    SchemaRepository,
)
from forge_contracts.schema import (
    CompatibilityResult,
    DiffReport,
    Fixture,
    Schema,
    SchemaDiff,
    TypeChange,
    ValidationIssue,
    ValidationResult,
)
from forge_contracts.types import Classification, parse_identity, schema_identity
from forge_contracts.validation import ValidationEngine, validate

__version__ = "0.3.0"

__all__ = [
    # Config
    "ForgeContractsConfig",
    "get_config",
    "reset_config",
    # Errors
    "ForgeContractsError",
    "SchemaConfigurationError",
    "SchemaNotFoundError",
    "FixtureNotFoundError",
    "BumpError",
    # Models
    "Schema",
    "Fixture",
    "SchemaDiff",
    "TypeChange",
    "DiffReport",
    "ValidationIssue",
    "ValidationResult",
    "CompatibilityResult",
    "Classification",
    "schema_identity",
    "parse_identity",
    # Storage
    "SchemaRepository",
    "FileSchemaRepository",
    "InMemorySchemaRepository",
    # Validation
    "ValidationEngine",
    "validate",
    # Evolution
    "diff_schemas",
    "classify_diff",
    "format_diff",
    "bump_schema",
    "EvolutionTracker",
    # Compatibility
    "CompatibilityChecker",
]
