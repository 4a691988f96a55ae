"""Value kinds and coercion targets.

A value kind tags how an untyped configuration value must be interpreted.
The set is closed: every kind has exactly one coercion routine in
:mod:`propbind.services.coercion`, and adding a kind means adding a case there.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Any


class ValueKind(StrEnum):
    """Closed set of value kinds understood by the engine."""

    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    VECTOR2 = "vector2"
    VECTOR3 = "vector3"
    VECTOR4 = "vector4"
    COLOR = "color"
    QUATERNION = "quaternion"
    ENUM = "enum"
    LAYER_MASK = "layer_mask"
    OBJECT_REFERENCE = "object_reference"
    NESTED_OBJECT = "nested_object"
    LIST = "list"


NUMERIC_KINDS: frozenset[ValueKind] = frozenset({ValueKind.INTEGER, ValueKind.NUMBER})

PRIMITIVE_KINDS: frozenset[ValueKind] = NUMERIC_KINDS | {ValueKind.BOOLEAN, ValueKind.STRING}

# Kinds whose values are copied on read; a dotted path cannot descend into them.
VALUE_TYPE_KINDS: frozenset[ValueKind] = PRIMITIVE_KINDS | {
    ValueKind.VECTOR2,
    ValueKind.VECTOR3,
    ValueKind.VECTOR4,
    ValueKind.COLOR,
    ValueKind.QUATERNION,
    ValueKind.ENUM,
    ValueKind.LAYER_MASK,
    ValueKind.LIST,
}

KIND_ALIASES: dict[str, ValueKind] = {
    "int": ValueKind.INTEGER,
    "long": ValueKind.INTEGER,
    "float": ValueKind.NUMBER,
    "double": ValueKind.NUMBER,
    "numeric": ValueKind.NUMBER,
    "bool": ValueKind.BOOLEAN,
    "str": ValueKind.STRING,
    "text": ValueKind.STRING,
    "vec2": ValueKind.VECTOR2,
    "vec3": ValueKind.VECTOR3,
    "vec4": ValueKind.VECTOR4,
    "rgba": ValueKind.COLOR,
    "colour": ValueKind.COLOR,
    "quat": ValueKind.QUATERNION,
    "layermask": ValueKind.LAYER_MASK,
    "layer": ValueKind.LAYER_MASK,
    "ref": ValueKind.OBJECT_REFERENCE,
    "reference": ValueKind.OBJECT_REFERENCE,
    "object": ValueKind.NESTED_OBJECT,
    "nested": ValueKind.NESTED_OBJECT,
    "array": ValueKind.LIST,
}


def parse_kind(raw: str | ValueKind) -> ValueKind | None:
    """Parse a declared kind name, accepting common aliases.

    Returns None for names that are not a known kind.

    Examples:
        >>> parse_kind("bool")
        <ValueKind.BOOLEAN: 'boolean'>
        >>> parse_kind("Vector3")
        <ValueKind.VECTOR3: 'vector3'>
        >>> parse_kind("matrix") is None
        True
    """
    if isinstance(raw, ValueKind):
        return raw
    key = raw.strip().lower().replace("-", "_")
    try:
        return ValueKind(key)
    except ValueError:
        pass
    compact = key.replace("_", "")
    for kind in ValueKind:
        if kind.value.replace("_", "") == compact:
            return kind
    return KIND_ALIASES.get(compact)


@dataclass(frozen=True)
class ValueSpec:
    """Everything the coercer needs to know about a target slot.

    Attributes:
        kind: The value kind to coerce to.
        enum_type: Python enum class for ``enum`` kinds backed by a real type.
        choices: Declared symbolic names for ``enum`` kinds without a type.
        reference_type: Canonical type name for ``object_reference`` kinds,
            or the nested type name for ``nested_object`` kinds.
        element: Spec of each element for ``list`` kinds.
        schema: Nested ``FieldSchema`` for schema-declared nested objects.
    """

    kind: ValueKind
    enum_type: type[Enum] | None = None
    choices: tuple[str, ...] = ()
    reference_type: str | None = None
    element: ValueSpec | None = None
    schema: Any = None

    @property
    def label(self) -> str:
        """Human-readable kind label used in error messages."""
        if self.kind is ValueKind.ENUM and self.enum_type is not None:
            return f"enum {self.enum_type.__name__}"
        if self.kind in (ValueKind.OBJECT_REFERENCE, ValueKind.NESTED_OBJECT) and self.reference_type:
            return f"{self.kind.value} {self.reference_type}"
        if self.kind is ValueKind.LIST and self.element is not None:
            return f"list[{self.element.label}]"
        return self.kind.value

    def enum_names(self) -> tuple[str, ...]:
        """Declared member names for enum kinds, in declaration order."""
        if self.enum_type is not None:
            return tuple(member.name for member in self.enum_type)
        return self.choices
