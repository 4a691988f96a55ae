"""ValueCoercer — untyped input to typed values, dispatched on value kind.

Each :class:`~propbind.domain.kinds.ValueKind` has exactly one routine here.
Routines return the typed value or a :class:`CoercionError`; they never
raise for bad input.

Already-typed input (a ``Vector3`` for a vector3 slot, an enum member, an
instance of the referenced type) passes through unchanged, so coercing a
coerced value is a no-op.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable, Mapping
from enum import Enum
from typing import TYPE_CHECKING, Any

from propbind.domain.colors import lookup_color, make_color
from propbind.domain.kinds import PRIMITIVE_KINDS, ValueKind, ValueSpec
from propbind.domain.values import Color, LayerMask, Quaternion, Vector2, Vector3, Vector4
from propbind.infrastructure.memory import MAX_LAYERS, StaticLayerTable
from propbind.services.result import CoercionError, TypeResolutionError

if TYPE_CHECKING:
    from propbind.domain.schema import FieldSchema
    from propbind.infrastructure.host import LayerTable, ObjectResolver
    from propbind.services.resolver import TypeResolver

logger = logging.getLogger(__name__)

_VECTORS: dict[ValueKind, tuple[type, tuple[str, ...]]] = {
    ValueKind.VECTOR2: (Vector2, ("x", "y")),
    ValueKind.VECTOR3: (Vector3, ("x", "y", "z")),
    ValueKind.VECTOR4: (Vector4, ("x", "y", "z", "w")),
}

_MASK_LIMIT = 1 << MAX_LAYERS

Handler = Callable[[Any, ValueSpec, str], Any]


class ValueCoercer:
    """Converts raw configuration values to the kind a slot declares.

    Args:
        resolver: Used to resolve reference and nested type names.
        objects: Host lookup for object references.
        layers: Layer-name table; defaults to the built-in layers.
        colors: Extra named colors, checked before the shared table.
    """

    def __init__(
        self,
        resolver: TypeResolver | None = None,
        objects: ObjectResolver | None = None,
        layers: LayerTable | None = None,
        colors: Mapping[str, Color] | None = None,
    ) -> None:
        self._resolver = resolver
        self._objects = objects
        self._layers = layers if layers is not None else StaticLayerTable()
        self._colors = {k.lower(): v for k, v in (colors or {}).items()}
        self._handlers: dict[ValueKind, Handler] = {
            ValueKind.INTEGER: self._integer,
            ValueKind.NUMBER: self._number,
            ValueKind.BOOLEAN: self._boolean,
            ValueKind.STRING: self._string,
            ValueKind.VECTOR2: self._vector,
            ValueKind.VECTOR3: self._vector,
            ValueKind.VECTOR4: self._vector,
            ValueKind.COLOR: self._color,
            ValueKind.QUATERNION: self._quaternion,
            ValueKind.ENUM: self._enum,
            ValueKind.LAYER_MASK: self._layer_mask,
            ValueKind.OBJECT_REFERENCE: self._reference,
            ValueKind.NESTED_OBJECT: self._nested,
            ValueKind.LIST: self._list,
        }

    def coerce(self, raw: Any, spec: ValueSpec, *, field: str = "value") -> Any | CoercionError:
        """Coerce *raw* to *spec*; *field* names the slot in errors."""
        if raw is None and spec.kind is not ValueKind.OBJECT_REFERENCE:
            return _fail(field, spec, raw, "null is only accepted for object references")
        return self._handlers[spec.kind](raw, spec, field)

    # ── primitives ───────────────────────────────────────────────────

    def _integer(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        if isinstance(raw, bool):
            return _fail(field, spec, raw, "booleans are not numbers")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, str):
            try:
                return int(raw.strip())
            except ValueError:
                pass
        number = _to_float(raw)
        if number is None:
            return _fail(field, spec, raw)
        if not number.is_integer():
            return _fail(field, spec, raw, "not an integral value")
        return int(number)

    def _number(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        number = _to_float(raw)
        if number is None:
            reason = "booleans are not numbers" if isinstance(raw, bool) else ""
            return _fail(field, spec, raw, reason)
        return number

    def _boolean(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str) and raw.strip().lower() in ("true", "false"):
            return raw.strip().lower() == "true"
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        return _fail(field, spec, raw, "expected true or false")

    def _string(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        if isinstance(raw, str):
            return raw
        if isinstance(raw, (int, float)) and not isinstance(raw, bool):
            return str(raw)
        return _fail(field, spec, raw)

    # ── engine value types ───────────────────────────────────────────

    def _vector(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        cls, names = _VECTORS[spec.kind]
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, (list, tuple)):
            if len(raw) != len(names):
                return _fail(field, spec, raw, f"expected {len(names)} components, got {len(raw)}")
            components = _floats(raw)
            if components is None:
                return _fail(field, spec, raw, "components must be numbers")
            return cls(*components)
        if isinstance(raw, Mapping):
            unknown = sorted(set(map(str, raw)) - set(names))
            if unknown:
                return _fail(field, spec, raw, f"unknown components {unknown}")
            # Missing components default to 0.
            components = _floats([raw.get(n, 0.0) for n in names])
            if components is None:
                return _fail(field, spec, raw, "components must be numbers")
            return cls(*components)
        return _fail(field, spec, raw)

    def _quaternion(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        if isinstance(raw, Quaternion):
            return raw
        if isinstance(raw, (list, tuple)):
            if len(raw) != 4:
                return _fail(field, spec, raw, f"expected 4 components, got {len(raw)}")
            components = _floats(raw)
        elif isinstance(raw, Mapping):
            if set(map(str, raw)) != {"x", "y", "z", "w"}:
                return _fail(field, spec, raw, "expected exactly x, y, z, w")
            components = _floats([raw[n] for n in ("x", "y", "z", "w")])
        else:
            return _fail(field, spec, raw, "Euler angles are not inferred")
        if components is None:
            return _fail(field, spec, raw, "components must be numbers")
        return Quaternion(*components)

    def _color(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        if isinstance(raw, Color):
            return raw
        if isinstance(raw, str):
            color = self._colors.get(raw.strip().lower()) or lookup_color(raw) or _hex_color(raw)
            if color is None:
                return _fail(field, spec, raw, "unknown color name")
            return color
        if isinstance(raw, (list, tuple)):
            if len(raw) not in (3, 4):
                return _fail(field, spec, raw, f"expected 3 or 4 components, got {len(raw)}")
            components = _floats(raw)
        elif isinstance(raw, Mapping):
            keys = set(map(str, raw))
            if not {"r", "g", "b"} <= keys or not keys <= {"r", "g", "b", "a"}:
                return _fail(field, spec, raw, "expected r, g, b and optional a")
            components = _floats([raw[n] for n in ("r", "g", "b")] + [raw.get("a", 1.0)])
        else:
            return _fail(field, spec, raw)
        if components is None:
            return _fail(field, spec, raw, "components must be numbers")
        # Out-of-range components are clamped, not rejected.
        return make_color(components)

    def _enum(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        enum_type = spec.enum_type
        names = spec.enum_names()
        valid = f"valid: {', '.join(names)}"
        if enum_type is not None and isinstance(raw, enum_type):
            return raw
        if isinstance(raw, str):
            text = raw.strip()
            if re.fullmatch(r"-?\d+", text, re.ASCII):
                return self._enum(int(text), spec, field)
            lowered = text.lower()
            for index, name in enumerate(names):
                if name.lower() == lowered:
                    return enum_type[name] if enum_type is not None else spec.choices[index]
            return _fail(field, spec, raw, valid)
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return _fail(field, spec, raw, valid)
        if isinstance(raw, float):
            if not raw.is_integer():
                return _fail(field, spec, raw, valid)
            raw = int(raw)
        if enum_type is not None and all(isinstance(m.value, int) for m in enum_type):
            try:
                return enum_type(raw)
            except ValueError:
                return _fail(field, spec, raw, valid)
        # Otherwise an integer is an ordinal index into the declared members.
        if not 0 <= raw < len(names):
            return _fail(field, spec, raw, valid)
        return enum_type[names[raw]] if enum_type is not None else spec.choices[raw]

    def _layer_mask(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        if isinstance(raw, LayerMask):
            return raw
        if isinstance(raw, int) and not isinstance(raw, bool):
            if not 0 <= raw < _MASK_LIMIT:
                return _fail(field, spec, raw, f"bitmask must be in [0, 2^{MAX_LAYERS})")
            return LayerMask(raw)
        if isinstance(raw, str):
            raw_names: list[Any] = [raw]
        elif isinstance(raw, (list, tuple)):
            raw_names = list(raw)
        else:
            return _fail(field, spec, raw)
        value = 0
        unknown: list[str] = []
        for name in raw_names:
            index = self._layers.index_of(name) if isinstance(name, str) else None
            if index is None:
                unknown.append(str(name))
                continue
            value |= 1 << index
        if unknown:
            reason = f"unknown layers {unknown}; valid: {', '.join(self._layers.names())}"
            return _fail(field, spec, raw, reason)
        return LayerMask(value)

    # ── references and structures ────────────────────────────────────

    def _reference(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        if raw is None:
            return None
        expected: type | None = None
        if spec.reference_type and self._resolver is not None:
            descriptor = self._resolver.resolve(spec.reference_type)
            if isinstance(descriptor, TypeResolutionError):
                return _fail(field, spec, raw, descriptor.message)
            expected = descriptor.type
        if expected is not None and isinstance(raw, expected):
            return raw
        if not isinstance(raw, str):
            return _fail(field, spec, raw, "expected an object identifier")
        if self._objects is None:
            return _fail(field, spec, raw, "no object resolver is configured")
        found = self._objects.find(raw, spec.reference_type)
        if found is None:
            return _fail(field, spec, raw, "object not found")
        if expected is not None and not isinstance(found, expected):
            reason = f"found {type(found).__name__}, not assignable to {spec.reference_type}"
            return _fail(field, spec, raw, reason)
        logger.debug("Resolved reference %s=%r -> %s", field, raw, type(found).__name__)
        return found

    def _nested(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        descriptor = None
        if spec.reference_type and self._resolver is not None:
            descriptor = self._resolver.resolve(spec.reference_type)
            if not isinstance(descriptor, TypeResolutionError) and isinstance(raw, descriptor.type):
                return raw
        if not isinstance(raw, Mapping):
            return _fail(field, spec, raw, "expected a mapping")
        schema: FieldSchema | None = spec.schema
        if schema is not None:
            return self._nested_by_schema(raw, spec, schema, field)
        if descriptor is not None:
            if isinstance(descriptor, TypeResolutionError):
                return _fail(field, spec, raw, descriptor.message)
            out: dict[str, Any] = {}
            for key, value in raw.items():
                member = descriptor.member(str(key))
                if member is None:
                    return _fail(field, spec, raw, f"unknown member '{key}'")
                coerced = self.coerce(value, member.spec, field=f"{field}.{key}")
                if isinstance(coerced, CoercionError):
                    return coerced
                out[str(key)] = coerced
            return out
        # Free-form mapping.
        return dict(raw)

    def _nested_by_schema(
        self, raw: Mapping[str, Any], spec: ValueSpec, schema: FieldSchema, field: str
    ) -> Any:
        out: dict[str, Any] = {}
        for key, value in raw.items():
            entry = schema.entry(str(key))
            if entry is None:
                return _fail(field, spec, raw, f"unknown field '{key}'")
            try:
                entry_spec = entry.to_spec()
            except ValueError as exc:
                return _fail(f"{field}.{key}", spec, value, str(exc))
            coerced = self.coerce(value, entry_spec, field=f"{field}.{key}")
            if isinstance(coerced, CoercionError):
                return coerced
            out[str(key)] = coerced
        return out

    def _list(self, raw: Any, spec: ValueSpec, field: str) -> Any:
        element = spec.element
        if isinstance(raw, (list, tuple)):
            items = list(raw)
        elif isinstance(raw, str) and (element is None or element.kind in PRIMITIVE_KINDS):
            items = [part.strip() for part in raw.split(",")] if raw.strip() else []
        else:
            items = [raw]
        if element is None:
            return items
        out: list[Any] = []
        for index, item in enumerate(items):
            coerced = self.coerce(item, element, field=f"{field}[{index}]")
            if isinstance(coerced, CoercionError):
                return coerced
            out.append(coerced)
        return out


def _fail(field: str, spec: ValueSpec, raw: Any, reason: str = "") -> CoercionError:
    return CoercionError(field=field, expected=spec.label, raw=raw, reason=reason)


def _to_float(raw: Any) -> float | None:
    if isinstance(raw, bool) or isinstance(raw, Enum):
        return None
    if not isinstance(raw, (int, float, str)):
        return None
    try:
        number = float(raw.strip() if isinstance(raw, str) else raw)
    except (ValueError, OverflowError):
        return None
    return number if math.isfinite(number) else None


def _floats(values: Any) -> list[float] | None:
    out: list[float] = []
    for value in values:
        number = _to_float(value)
        if number is None:
            return None
        out.append(number)
    return out


def _hex_color(text: str) -> Color | None:
    digits = text.strip().removeprefix("#")
    if not text.strip().startswith("#") or len(digits) not in (6, 8):
        return None
    try:
        channels = [int(digits[i : i + 2], 16) / 255 for i in range(0, len(digits), 2)]
    except ValueError:
        return None
    if len(channels) == 3:
        channels.append(1.0)
    return Color(*channels)
