"""In-process host collaborators: object lookup, member mutation, layers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from propbind.domain.members import MemberDescriptor

BUILTIN_LAYERS: dict[int, str] = {
    0: "Default",
    1: "TransparentFX",
    2: "Ignore Raycast",
    4: "Water",
    5: "UI",
}

MAX_LAYERS = 32


class ObjectRegistry:
    """Named live objects, searched by exact name then case-insensitively.

    When the found object is a container (it exposes ``get_component``) and
    a different type was requested, the matching component is returned
    instead, mirroring how editors resolve "ObjectName" to one of its
    components.
    """

    def __init__(self, objects: dict[str, Any] | None = None) -> None:
        self._objects: dict[str, Any] = dict(objects or {})

    def add(self, identifier: str, obj: Any) -> Any:
        self._objects[identifier] = obj
        return obj

    def remove(self, identifier: str) -> None:
        self._objects.pop(identifier, None)

    def find(self, identifier: str, type_name: str | None = None) -> Any | None:
        found = self._objects.get(identifier)
        if found is None:
            lowered = identifier.lower()
            found = next(
                (obj for name, obj in self._objects.items() if name.lower() == lowered),
                None,
            )
        if found is None:
            return None
        if type_name and type(found).__name__ != type_name:
            get_component = getattr(found, "get_component", None)
            if callable(get_component):
                component = get_component(type_name)
                if component is not None:
                    return component
        return found


class AttributeMutationExecutor:
    """Reads and writes members with ``getattr``/``setattr``."""

    def read(self, target: Any, member: MemberDescriptor) -> Any:
        return getattr(target, member.name, None)

    def write(self, target: Any, member: MemberDescriptor, value: Any) -> None:
        setattr(target, member.name, value)


class StaticLayerTable:
    """Fixed table of up to 32 layer names, indexed by slot."""

    def __init__(self, layers: dict[int, str] | Iterable[str] | None = None) -> None:
        if layers is None:
            layers = BUILTIN_LAYERS
        if isinstance(layers, dict):
            slots = dict(layers)
        else:
            slots = dict(enumerate(layers))
        bad = [i for i in slots if not 0 <= i < MAX_LAYERS]
        if bad:
            msg = f"Layer indices must be in [0, {MAX_LAYERS - 1}], got {bad}"
            raise ValueError(msg)
        self._slots = {i: name for i, name in sorted(slots.items()) if name}

    def index_of(self, name: str) -> int | None:
        for index, layer in self._slots.items():
            if layer == name:
                return index
        lowered = name.lower()
        for index, layer in self._slots.items():
            if layer.lower() == lowered:
                return index
        return None

    def names(self) -> list[str]:
        return list(self._slots.values())
