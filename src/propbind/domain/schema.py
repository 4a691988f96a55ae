"""Declared configuration schemas.

A :class:`FieldSchema` is the declared shape of one logical operation or
target type: an ordered set of named entries, each with a value kind, a
``required`` flag, an optional numeric range, and an optional default.

INVARIANT: A required entry has no default.
INVARIANT: A range is only declared on numeric kinds, and minimum <= maximum.

Violations are programmer errors and fail at schema definition time.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from propbind.domain.kinds import NUMERIC_KINDS, ValueKind, ValueSpec, parse_kind
from propbind.domain.members import TypeDescriptor


class SchemaEntry(BaseModel):
    """One named entry of a :class:`FieldSchema`.

    ``kind`` is kept as declared text so that a schema with an unknown kind
    can still be loaded and reported by validation instead of failing to
    parse.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    kind: str
    required: bool = False
    minimum: float | None = None
    maximum: float | None = None
    default: Any = None
    choices: tuple[str, ...] = ()
    enum_type: type[Enum] | None = None
    reference_type: str | None = None
    items: SchemaEntry | None = None
    nested: FieldSchema | None = None
    description: str = ""

    @model_validator(mode="after")
    def _check_invariants(self) -> SchemaEntry:
        if self.required and self.default is not None:
            msg = f"Entry '{self.name}' is required and cannot declare a default"
            raise ValueError(msg)
        if self.has_range:
            kind = parse_kind(self.kind)
            if kind is not None and kind not in NUMERIC_KINDS:
                msg = f"Entry '{self.name}' declares a range on non-numeric kind '{self.kind}'"
                raise ValueError(msg)
            if (
                self.minimum is not None
                and self.maximum is not None
                and self.minimum > self.maximum
            ):
                msg = f"Entry '{self.name}' has minimum {self.minimum} > maximum {self.maximum}"
                raise ValueError(msg)
        return self

    @property
    def value_kind(self) -> ValueKind | None:
        return parse_kind(self.kind)

    @property
    def has_range(self) -> bool:
        return self.minimum is not None or self.maximum is not None

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def to_spec(self) -> ValueSpec:
        """Build the coercion target for this entry.

        Raises:
            ValueError: If the declared kind is unknown.
        """
        kind = self.value_kind
        if kind is None:
            msg = f"unknown type-kind '{self.kind}'"
            raise ValueError(msg)
        return ValueSpec(
            kind=kind,
            enum_type=self.enum_type,
            choices=self.choices,
            reference_type=self.reference_type,
            element=self.items.to_spec() if self.items is not None else None,
            schema=self.nested,
        )


class FieldSchema(BaseModel):
    """Ordered, named set of :class:`SchemaEntry` objects."""

    model_config = ConfigDict(frozen=True)

    name: str
    entries: tuple[SchemaEntry, ...] = ()
    description: str = ""

    @model_validator(mode="after")
    def _check_unique(self) -> FieldSchema:
        seen: set[str] = set()
        for entry in self.entries:
            if entry.name in seen:
                msg = f"Schema '{self.name}' declares '{entry.name}' twice"
                raise ValueError(msg)
            seen.add(entry.name)
        return self

    def entry(self, name: str) -> SchemaEntry | None:
        for entry in self.entries:
            if entry.name == name:
                return entry
        return None

    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    def defaults(self) -> dict[str, Any]:
        """Raw declared defaults, in declaration order."""
        return {e.name: e.default for e in self.entries if e.has_default}

    @classmethod
    def from_mapping(cls, name: str, raw: Mapping[str, Any]) -> FieldSchema:
        """Parse the declarative JSON form of a schema.

        Each key maps to an entry description such as
        ``{"kind": "number", "required": true, "range": [0, 100]}``.
        ``kind`` may also be given as ``type``; nested objects may declare
        ``fields``; lists may declare ``items``.

        Examples:
            >>> s = FieldSchema.from_mapping("mover", {"speed": {"kind": "number"}})
            >>> s.names()
            ['speed']
        """
        return cls(name=name, entries=tuple(_parse_entry(k, v) for k, v in raw.items()))


def _parse_entry(name: str, raw: Mapping[str, Any]) -> SchemaEntry:
    data = dict(raw)
    kind = data.pop("kind", data.pop("type", "string"))
    bounds = data.pop("range", None)
    if bounds is not None:
        data["minimum"], data["maximum"] = bounds
    if "min" in data:
        data["minimum"] = data.pop("min")
    if "max" in data:
        data["maximum"] = data.pop("max")
    if "choices" in data:
        data["choices"] = tuple(data["choices"])
    items = data.pop("items", None)
    if isinstance(items, Mapping):
        data["items"] = _parse_entry(f"{name}[]", items)
    elif isinstance(items, str):
        data["items"] = SchemaEntry(name=f"{name}[]", kind=items)
    fields = data.pop("fields", None)
    if isinstance(fields, Mapping):
        data["nested"] = FieldSchema.from_mapping(name, fields)
    return SchemaEntry(name=name, kind=str(kind), **data)


def schema_for_type(descriptor: TypeDescriptor) -> FieldSchema:
    """Derive a permissive schema from a type's writable members.

    Every entry is optional and has no default, so validation only coerces
    and type-checks what the caller supplied.
    """
    entries = tuple(_entry_from_spec(m.name, m.spec) for m in descriptor.writable_members())
    return FieldSchema(name=descriptor.name, entries=entries)


def _entry_from_spec(name: str, spec: ValueSpec) -> SchemaEntry:
    return SchemaEntry(
        name=name,
        kind=spec.kind.value,
        choices=spec.choices,
        enum_type=spec.enum_type,
        reference_type=spec.reference_type,
        items=_entry_from_spec(f"{name}[]", spec.element) if spec.element else None,
    )


SchemaEntry.model_rebuild()
