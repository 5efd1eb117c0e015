from __future__ import annotations

from pathlib import Path

import pytest

from symdoc.collector import SymbolTreeCollector
from symdoc.filters import InclusionFilter
from tests._fixtures.model_builder import ModelBuilder


@pytest.fixture
def model() -> ModelBuilder:
    """Provide a symbol model rooted at /repo."""
    return ModelBuilder("/repo")


@pytest.fixture
def collector(model: ModelBuilder) -> SymbolTreeCollector:
    """Collector documenting everything under the model's src/ directory."""
    return SymbolTreeCollector(InclusionFilter([model.src]))


@pytest.fixture
def project(tmp_path: Path) -> ModelBuilder:
    """Provide a symbol model rooted at a real temporary project directory."""
    root = tmp_path / "repo"
    root.mkdir()
    return ModelBuilder(str(root))
