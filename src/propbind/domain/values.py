"""Opaque engine value types.

Vectors, colors, quaternions, and layer masks are plain immutable records.
The engine never does math on them; it only builds them from untyped input
and hands them to the host.
"""

from __future__ import annotations

from dataclasses import astuple, dataclass
from enum import Enum


@dataclass(frozen=True)
class Vector2:
    x: float = 0.0
    y: float = 0.0

    def as_list(self) -> list[float]:
        return list(astuple(self))


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_list(self) -> list[float]:
        return list(astuple(self))


@dataclass(frozen=True)
class Vector4:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 0.0

    def as_list(self) -> list[float]:
        return list(astuple(self))


@dataclass(frozen=True)
class Quaternion:
    """Rotation stored as given; components are not re-normalized."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    w: float = 1.0

    def as_list(self) -> list[float]:
        return list(astuple(self))


@dataclass(frozen=True)
class Color:
    """RGBA color with components in [0, 1]."""

    r: float = 0.0
    g: float = 0.0
    b: float = 0.0
    a: float = 1.0

    def as_list(self) -> list[float]:
        return list(astuple(self))


@dataclass(frozen=True)
class LayerMask:
    """Bitmask over up to 32 named layers."""

    value: int = 0

    def includes(self, index: int) -> bool:
        return bool(self.value & (1 << index))

    def as_list(self) -> list[int]:
        return [i for i in range(32) if self.includes(i)]


VALUE_TYPES: tuple[type, ...] = (Vector2, Vector3, Vector4, Quaternion, Color, LayerMask)


def to_plain(value: object) -> object:
    """Convert engine value types into JSON-compatible data, recursively."""
    if isinstance(value, LayerMask):
        return value.value
    if isinstance(value, VALUE_TYPES):
        return value.as_list()  # type: ignore[attr-defined]
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, Enum):
        return value.value if isinstance(value, str) else value.name
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    # Host object references serialize by name.
    return str(getattr(value, "name", value))
