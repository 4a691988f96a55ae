"""Tests for the built-in schema registry."""

from __future__ import annotations

import pytest

from propbind.domain.builtin_schemas import (
    MATERIAL,
    PARTICLE_MAIN,
    PARTICLE_SYSTEM,
    SCHEMA_REGISTRY,
    register_schema,
)
from propbind.domain.schema import FieldSchema, SchemaEntry
from propbind.domain.values import Color, Vector3
from propbind.services.validator import SchemaValidator


class TestRegistry:
    def test_builtins_registered(self) -> None:
        for name in (
            "particle_system",
            "particle_system.main",
            "particle_system.emission",
            "particle_system.burst",
            "particle_system.shape",
            "particle_system.velocity_over_lifetime",
            "material",
            "component",
            "object",
        ):
            assert name in SCHEMA_REGISTRY

    def test_particle_system_nests_modules(self) -> None:
        main = PARTICLE_SYSTEM.entry("main")
        assert main is not None
        assert main.nested is PARTICLE_MAIN

    def test_register_duplicate_rejected(self) -> None:
        with pytest.raises(KeyError):
            register_schema(FieldSchema(name="material"))

    def test_register_and_replace(self) -> None:
        schema = FieldSchema(name="test_scratch", entries=(SchemaEntry(name="a", kind="number"),))
        try:
            assert register_schema(schema) is schema
            replacement = FieldSchema(name="test_scratch")
            register_schema(replacement, replace=True)
            assert SCHEMA_REGISTRY["test_scratch"] is replacement
        finally:
            SCHEMA_REGISTRY.pop("test_scratch", None)


class TestBuiltinDefaults:
    """Every declared default must survive its own validation."""

    @pytest.mark.parametrize("name", sorted(SCHEMA_REGISTRY))
    def test_defaults_are_valid(self, name: str, validator: SchemaValidator) -> None:
        schema = SCHEMA_REGISTRY[name]
        payload = {
            e.name: "x" if e.value_kind is not None and e.value_kind.value == "string" else "Empty"
            for e in schema.entries
            if e.required
        }
        result = validator.validate(payload, schema)
        assert result.ok, result.messages()

    def test_main_module_defaults(self, validator: SchemaValidator) -> None:
        result = validator.validate({"main": {}}, PARTICLE_SYSTEM)
        assert result.ok
        main = result.merged["main"]
        assert main["duration"] == 5.0
        assert main["maxParticles"] == 10
        assert main["startColor"] == Color(1.0, 1.0, 1.0, 1.0)

    def test_modules_without_payload_stay_absent(self, validator: SchemaValidator) -> None:
        result = validator.validate({}, PARTICLE_SYSTEM)
        assert result.ok
        assert result.merged == {}

    def test_material_emission_is_opaque(self, validator: SchemaValidator) -> None:
        result = validator.validate({"materialName": "Brick", "shaderName": "Standard"}, MATERIAL)
        assert result.ok
        assert result.merged["emission"] == Color(0.0, 0.0, 0.0, 1.0)

    def test_shape_vectors(self, validator: SchemaValidator) -> None:
        result = validator.validate({"shape": {"shapeType": "box"}}, PARTICLE_SYSTEM)
        assert result.ok
        assert result.merged["shape"]["shapeType"] == "Box"
        assert result.merged["shape"]["scale"] == Vector3(1.0, 1.0, 1.0)
