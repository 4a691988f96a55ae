"""Host collaborator contracts.

The engine calls out to these; they never call into the engine. A host
editor integration supplies its own implementations; the modules next to
this one provide in-process implementations over plain Python objects.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from propbind.domain.members import MemberDescriptor, TypeDescriptor


@runtime_checkable
class TypeUniverse(Protocol):
    """Enumerates known types and builds their descriptors.

    INVARIANT: The universe must not change after the first resolution;
    the resolver caches descriptors for the life of the process.
    """

    def names(self) -> Iterable[str]:
        """Canonical names of every known type."""
        ...

    def aliases(self) -> Mapping[str, str]:
        """Alias -> canonical name pairs contributed by the host."""
        ...

    def describe_name(self, name: str) -> TypeDescriptor | None:
        """Descriptor for an exact canonical name, or None."""
        ...

    def describe_class(self, cls: type) -> TypeDescriptor:
        """Descriptor for a runtime class, registered or not."""
        ...


@runtime_checkable
class ObjectResolver(Protocol):
    """Looks up existing live objects by identifier. Never creates objects."""

    def find(self, identifier: str, type_name: str | None = None) -> Any | None: ...


@runtime_checkable
class MutationExecutor(Protocol):
    """Performs the actual member reads and writes on live objects."""

    def read(self, target: Any, member: MemberDescriptor) -> Any: ...

    def write(self, target: Any, member: MemberDescriptor, value: Any) -> None: ...


@runtime_checkable
class LayerTable(Protocol):
    """Named layers addressable by a layer mask (at most 32)."""

    def index_of(self, name: str) -> int | None: ...

    def names(self) -> list[str]: ...
