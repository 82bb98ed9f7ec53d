# tests/conftest.py
"""Shared test fixtures and helpers.

Provides small in-memory schemas for unit tests and the path to the bundled
sample data model for loader and CLI tests.

Builders:
- make_attribute(): Attribute with sensible defaults and AttributeID coercion
- make_map(): SchemaMap from attribute records

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from portal_schema.contracts import Attribute, AttributeID
from portal_schema.core.graph import SchemaGraph
from portal_schema.core.schema_map import SchemaMap

REPO_ROOT = Path(__file__).resolve().parent.parent
SAMPLE_DIR = REPO_ROOT / "examples" / "sample_data_model"
SAMPLE_SCHEMA = SAMPLE_DIR / "data_model.jsonld"
SAMPLE_SETTINGS = SAMPLE_DIR / "settings.yaml"


def _ids(values: Iterable[str]) -> tuple[AttributeID, ...]:
    return tuple(AttributeID(v) for v in values)


def make_attribute(
    attr_id: str,
    *,
    attribute: str | None = None,
    label: str | None = None,
    description: str = "",
    required: bool = False,
    data_type: str = "string",
    requires: Iterable[str] = (),
    conditional: Iterable[str] = (),
    exclusive: Iterable[str] = (),
    valid_values: Iterable[str] = (),
    parents: Iterable[str] = (),
) -> Attribute:
    """Build an Attribute; name and label default to the id."""
    return Attribute(
        id=AttributeID(attr_id),
        attribute=attribute if attribute is not None else attr_id,
        label=label if label is not None else attr_id,
        description=description,
        required=required,
        data_type=data_type,
        required_dependencies=_ids(requires),
        conditional_dependencies=_ids(conditional),
        exclusive_conditional_dependencies=_ids(exclusive),
        valid_values=_ids(valid_values),
        parent_ids=_ids(parents),
    )


def make_map(*attributes: Attribute) -> SchemaMap:
    return SchemaMap.from_attributes(attributes)


@pytest.fixture(autouse=True)
def _reset_root_log_handlers() -> Iterator[None]:
    """Drop root log handlers after each test.

    configure_logging() binds its handler to whatever sys.stderr is at call
    time. Under CliRunner or capsys that stream is closed once the test ends,
    so a handler left behind would write to a dead stream in later tests.
    """
    yield
    logging.getLogger().handlers = []


@pytest.fixture
def sample_schema_path() -> Path:
    return SAMPLE_SCHEMA


@pytest.fixture
def sample_settings_path() -> Path:
    return SAMPLE_SETTINGS


@pytest.fixture
def manifest_map() -> SchemaMap:
    """Two manifests sharing a dependency, with one enumerated attribute.

    Layout:
        ManifestA --requires--> Shared, OnlyA
        ManifestB --requires--> Shared
        Shared    --conditional--> Detail
        Shared    --valid value--> ValueX, ValueY
    """
    return make_map(
        make_attribute("bts:Component", attribute="Component"),
        make_attribute("bts:ManifestA", attribute="Manifest A", requires=["bts:Shared", "bts:OnlyA"], parents=["bts:Component"]),
        make_attribute("bts:ManifestB", attribute="Manifest B", requires=["bts:Shared"], parents=["bts:Component"]),
        make_attribute(
            "bts:Shared",
            attribute="Shared",
            required=True,
            data_type="enum",
            conditional=["bts:Detail"],
            valid_values=["bts:ValueX", "bts:ValueY"],
        ),
        make_attribute("bts:OnlyA", attribute="Only A"),
        make_attribute("bts:Detail", attribute="Detail"),
        make_attribute("bts:ValueX", attribute="Value X"),
        make_attribute("bts:ValueY", attribute="Value Y"),
    )


@pytest.fixture
def manifest_graph(manifest_map: SchemaMap) -> SchemaGraph:
    return SchemaGraph(manifest_map)


# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
