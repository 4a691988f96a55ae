"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, propbind.toml only contains
overrides. An empty file (or none at all) yields the stock engine.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from propbind.infrastructure.memory import MAX_LAYERS

# --- propbind.toml sections ---


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    suggestion_limit: int = Field(default=3, ge=1)
    aliases: dict[str, str] = Field(default_factory=dict)
    strip_prefixes: list[str] = Field(default_factory=lambda: ["UnityEngine."])


class LayersConfig(BaseModel):
    """[layers] section. Keys are layer slots, values layer names."""

    model_config = {"frozen": True}

    include_builtin: bool = True
    names: dict[int, str] = Field(default_factory=dict)

    @field_validator("names")
    @classmethod
    def _check_slots(cls, value: dict[int, str]) -> dict[int, str]:
        bad = sorted(i for i in value if not 0 <= i < MAX_LAYERS)
        if bad:
            msg = f"layer slots must be in [0, {MAX_LAYERS - 1}], got {bad}"
            raise ValueError(msg)
        return value


class ColorsConfig(BaseModel):
    """[colors] section. Extra named colors as 3 or 4 components."""

    model_config = {"frozen": True}

    named: dict[str, list[float]] = Field(default_factory=dict)

    @field_validator("named")
    @classmethod
    def _check_components(cls, value: dict[str, list[float]]) -> dict[str, list[float]]:
        for name, rgba in value.items():
            if len(rgba) not in (3, 4):
                msg = f"color '{name}' needs 3 or 4 components, got {len(rgba)}"
                raise ValueError(msg)
        return value


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    unknown_fields: Literal["warn", "error"] = "warn"


class PropbindConfig(BaseModel):
    """Root configuration composing all sections.

    ``schemas`` holds extra schemas in their declarative form, keyed by
    schema name (see :meth:`FieldSchema.from_mapping`).
    """

    model_config = {"frozen": True}

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    layers: LayersConfig = Field(default_factory=LayersConfig)
    colors: ColorsConfig = Field(default_factory=ColorsConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    schemas: dict[str, dict[str, Any]] = Field(default_factory=dict)
