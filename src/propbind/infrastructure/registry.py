"""ClassRegistry — a type universe over plain Python classes.

Member discovery uses class annotations for field-backed members and
``property`` objects for accessor-backed members. A field on a frozen
dataclass, or a property without a setter, is read-only.

Classes referenced from a registered class's annotations but not registered
themselves are registered on first sight as nested (non-reference) types,
so ``material.color`` style paths can descend into plain value holders.
Any other class passed to :meth:`ClassRegistry.describe_class` gets a
transient descriptor and is not registered.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import types
import typing
from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import Enum
from typing import Any, ClassVar, Union

from propbind.domain.kinds import ValueKind, ValueSpec
from propbind.domain.members import Backing, MemberDescriptor, TypeDescriptor
from propbind.domain.values import Color, LayerMask, Quaternion, Vector2, Vector3, Vector4

logger = logging.getLogger(__name__)

_SCALARS: dict[type, ValueKind] = {
    bool: ValueKind.BOOLEAN,
    int: ValueKind.INTEGER,
    float: ValueKind.NUMBER,
    str: ValueKind.STRING,
    Vector2: ValueKind.VECTOR2,
    Vector3: ValueKind.VECTOR3,
    Vector4: ValueKind.VECTOR4,
    Color: ValueKind.COLOR,
    Quaternion: ValueKind.QUATERNION,
    LayerMask: ValueKind.LAYER_MASK,
}


@dataclasses.dataclass(frozen=True)
class _Registration:
    cls: type
    name: str
    aliases: tuple[str, ...]
    reference: bool


class ClassRegistry:
    """In-process :class:`~propbind.infrastructure.host.TypeUniverse`.

    Usage::

        registry = ClassRegistry()
        registry.register(Rigidbody, aliases=("rb",))

        @registry.component(aliases=("audio",))
        class AudioSource: ...
    """

    def __init__(self) -> None:
        self._by_name: dict[str, _Registration] = {}
        self._by_class: dict[type, _Registration] = {}
        self._lock = threading.Lock()

    # ── registration ─────────────────────────────────────────────────

    def register(
        self,
        cls: type,
        *,
        name: str | None = None,
        aliases: Iterable[str] = (),
        reference: bool = True,
    ) -> type:
        """Register *cls* under *name* (default: the class name)."""
        canonical = name or cls.__name__
        reg = _Registration(cls, canonical, tuple(aliases), reference)
        with self._lock:
            existing = self._by_name.get(canonical)
            if existing is not None and existing.cls is not cls:
                msg = f"Type name '{canonical}' is already registered to {existing.cls!r}"
                raise ValueError(msg)
            self._by_name[canonical] = reg
            self._by_class[cls] = reg
        return cls

    def component(
        self,
        *,
        name: str | None = None,
        aliases: Iterable[str] = (),
        reference: bool = True,
    ) -> Callable[[type], type]:
        """Decorator form of :meth:`register`."""

        def decorate(cls: type) -> type:
            return self.register(cls, name=name, aliases=aliases, reference=reference)

        return decorate

    def registered(self, cls: type) -> bool:
        return cls in self._by_class

    # ── TypeUniverse ─────────────────────────────────────────────────

    def names(self) -> list[str]:
        return [name for name, reg in self._by_name.items() if reg.reference]

    def aliases(self) -> dict[str, str]:
        return {alias: reg.name for reg in self._by_name.values() for alias in reg.aliases}

    def describe_name(self, name: str) -> TypeDescriptor | None:
        reg = self._by_name.get(name)
        if reg is None:
            return None
        return self._describe(reg)

    def describe_class(self, cls: type) -> TypeDescriptor:
        reg = self._by_class.get(cls)
        if reg is None:
            # Transient; runtime values never add names to the universe.
            reg = _Registration(cls, cls.__name__, (), False)
        return self._describe(reg)

    # ── introspection ────────────────────────────────────────────────

    def _register_nested(self, cls: type) -> _Registration:
        with self._lock:
            reg = self._by_class.get(cls)
            if reg is None:
                name = cls.__name__ if cls.__name__ not in self._by_name else cls.__qualname__
                reg = _Registration(cls, name, (), False)
                self._by_name.setdefault(name, reg)
                self._by_class[cls] = reg
        return reg

    def _describe(self, reg: _Registration) -> TypeDescriptor:
        members = (*self._field_members(reg.cls), *self._accessor_members(reg.cls))
        return TypeDescriptor(
            name=reg.name,
            type=reg.cls,
            members=members,
            aliases=reg.aliases,
            reference=reg.reference,
        )

    def _field_members(self, cls: type) -> list[MemberDescriptor]:
        hints = _type_hints(cls)
        frozen = dataclasses.is_dataclass(cls) and cls.__dataclass_params__.frozen  # type: ignore[attr-defined]
        properties = _properties(cls)
        members: list[MemberDescriptor] = []
        for attr, annotation in hints.items():
            if attr.startswith("_") or attr in properties:
                continue
            if typing.get_origin(annotation) is ClassVar:
                continue
            spec = self.spec_for(annotation)
            if spec is None:
                logger.debug("Skipping %s.%s: unsupported annotation %r", cls.__name__, attr, annotation)
                continue
            members.append(
                MemberDescriptor(
                    name=attr,
                    spec=spec,
                    backing=Backing.FIELD,
                    writable=not frozen,
                    type_label=_label(annotation),
                )
            )
        return members

    def _accessor_members(self, cls: type) -> list[MemberDescriptor]:
        members: list[MemberDescriptor] = []
        for attr, prop in _properties(cls).items():
            annotation = _type_hints(prop.fget).get("return") if prop.fget else None
            spec = self.spec_for(annotation) if annotation is not None else None
            if spec is None:
                logger.debug("Skipping accessor %s.%s: no usable return annotation", cls.__name__, attr)
                continue
            members.append(
                MemberDescriptor(
                    name=attr,
                    spec=spec,
                    backing=Backing.ACCESSOR,
                    writable=prop.fset is not None,
                    type_label=_label(annotation),
                )
            )
        return members

    def spec_for(self, annotation: Any) -> ValueSpec | None:
        """Map a Python annotation onto a :class:`ValueSpec`, or None if unsupported."""
        annotation = _strip_optional(annotation)
        origin = typing.get_origin(annotation)
        if origin in (list, tuple, Sequence, Iterable):
            args = [a for a in typing.get_args(annotation) if a is not Ellipsis]
            element = self.spec_for(args[0]) if args else None
            return ValueSpec(kind=ValueKind.LIST, element=element)
        if origin in (dict, Mapping) or annotation in (dict, Mapping):
            return ValueSpec(kind=ValueKind.NESTED_OBJECT)
        if annotation in (list, tuple):
            return ValueSpec(kind=ValueKind.LIST)
        if not isinstance(annotation, type):
            return None
        if annotation in _SCALARS:
            return ValueSpec(kind=_SCALARS[annotation])
        if issubclass(annotation, Enum):
            return ValueSpec(kind=ValueKind.ENUM, enum_type=annotation)
        reg = self._by_class.get(annotation)
        if reg is not None and reg.reference:
            return ValueSpec(kind=ValueKind.OBJECT_REFERENCE, reference_type=reg.name)
        if reg is None and not _has_members(annotation):
            return None
        if reg is None:
            reg = self._register_nested(annotation)
        return ValueSpec(kind=ValueKind.NESTED_OBJECT, reference_type=reg.name)


def _type_hints(obj: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except (NameError, TypeError):
        logger.debug("Could not evaluate annotations of %r", obj, exc_info=True)
        return {}


def _properties(cls: type) -> dict[str, property]:
    found: dict[str, property] = {}
    for klass in reversed(cls.__mro__):
        for attr, value in vars(klass).items():
            if isinstance(value, property) and not attr.startswith("_"):
                found[attr] = value
    return found


def _strip_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in typing.get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _has_members(cls: type) -> bool:
    return bool(getattr(cls, "__annotations__", None)) or bool(_properties(cls))


def _label(annotation: Any) -> str:
    annotation = _strip_optional(annotation)
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")
