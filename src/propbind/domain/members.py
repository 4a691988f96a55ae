"""Type and member descriptors.

A :class:`TypeDescriptor` is the engine's view of a host type: its canonical
name, the runtime class, and the ordered table of assignable members. It is
built once per type by the type universe and cached by the resolver.

INVARIANT: Descriptors are immutable once constructed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from propbind.domain.kinds import ValueKind, ValueSpec


class Backing(StrEnum):
    """How a member is stored on the instance."""

    FIELD = "field"
    ACCESSOR = "accessor"


@dataclass(frozen=True)
class MemberDescriptor:
    """One assignable (or readable) member of a host type."""

    name: str
    spec: ValueSpec
    backing: Backing = Backing.FIELD
    writable: bool = True
    type_label: str = ""

    @property
    def kind(self) -> ValueKind:
        return self.spec.kind

    def summary(self) -> str:
        """``name (TypeLabel)`` as shown in available-member listings."""
        label = self.type_label or self.spec.label
        suffix = "" if self.writable else ", read-only"
        return f"{self.name} ({label}{suffix})"


@dataclass(frozen=True)
class TypeDescriptor:
    """Resolved runtime type handle with its member table."""

    name: str
    type: type
    members: tuple[MemberDescriptor, ...] = ()
    aliases: tuple[str, ...] = ()
    reference: bool = True
    _index: dict[tuple[str, Backing], MemberDescriptor] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        for member in self.members:
            self._index.setdefault((member.name, member.backing), member)

    def member(self, name: str) -> MemberDescriptor | None:
        """Find a member by exact name, preferring a field over an accessor."""
        return self._index.get((name, Backing.FIELD)) or self._index.get((name, Backing.ACCESSOR))

    def member_names(self) -> list[str]:
        seen: dict[str, None] = {}
        for member in self.members:
            seen.setdefault(member.name, None)
        return list(seen)

    def writable_members(self) -> list[MemberDescriptor]:
        return [m for m in self.members if m.writable]
