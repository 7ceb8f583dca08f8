"""Shared state handed to every CLI command through ``click.Context.obj``."""

from __future__ import annotations

from typing import Optional

from forge_contracts.config import ForgeContractsConfig
from forge_contracts.repository import FileSchemaRepository
from forge_contracts.validation import ValidationEngine


class CliContext:
    """Owns the repository and validation engine for one CLI invocation."""

    def __init__(self, config: ForgeContractsConfig) -> None:
        self.config = config
        self.repository = FileSchemaRepository.from_config(config)
        self._engine: Optional[ValidationEngine] = None

    @property
    def engine(self) -> ValidationEngine:
        if self._engine is None:
            self._engine = ValidationEngine.from_config(self.repository, self.config)
        return self._engine
