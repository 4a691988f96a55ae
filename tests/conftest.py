"""Shared pytest fixtures and test helpers for propbind tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from propbind.domain.schema import FieldSchema
from propbind.infrastructure.catalog import build_catalog
from propbind.infrastructure.memory import ObjectRegistry
from propbind.infrastructure.registry import ClassRegistry
from propbind.services.binder import PropertyBinder
from propbind.services.coercion import ValueCoercer
from propbind.services.configure import ConfigurationService
from propbind.services.resolver import TYPE_CACHE, TypeResolver
from propbind.services.validator import SchemaValidator


@pytest.fixture(autouse=True)
def _fresh_type_cache() -> Generator[None]:
    """Each test starts from an empty process-wide type cache."""
    TYPE_CACHE.clear()
    yield
    TYPE_CACHE.clear()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None]:
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    package_level = logging.getLogger("propbind").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("propbind").setLevel(package_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty directory so no propbind.toml is discovered.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")`` on command test
    classes.
    """
    monkeypatch.delenv("PROPBIND_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def catalog() -> ClassRegistry:
    return build_catalog()


@pytest.fixture
def objects() -> ObjectRegistry:
    return ObjectRegistry()


@pytest.fixture
def resolver(catalog: ClassRegistry) -> TypeResolver:
    return TypeResolver(catalog)


@pytest.fixture
def coercer(resolver: TypeResolver, objects: ObjectRegistry) -> ValueCoercer:
    return ValueCoercer(resolver, objects)


@pytest.fixture
def validator(coercer: ValueCoercer) -> SchemaValidator:
    return SchemaValidator(coercer)


@pytest.fixture
def binder(resolver: TypeResolver, coercer: ValueCoercer) -> PropertyBinder:
    return PropertyBinder(resolver, coercer)


@pytest.fixture
def service(
    resolver: TypeResolver,
    coercer: ValueCoercer,
    validator: SchemaValidator,
    binder: PropertyBinder,
) -> ConfigurationService:
    return ConfigurationService(resolver, coercer, validator, binder)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def mover_schema() -> FieldSchema:
    """speed: required number in [0, 100]; loop: optional bool defaulting to False."""
    return FieldSchema.from_mapping(
        "mover",
        {
            "speed": {"kind": "number", "required": True, "range": [0, 100]},
            "loop": {"kind": "bool", "default": False},
        },
    )
