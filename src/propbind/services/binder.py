"""PropertyBinder — assigns values onto live objects by dotted path.

Each intermediate segment must name an object-valued member whose current
value is set; nothing is ever allocated on the way down. The terminal
member's declared kind drives coercion, and the write itself goes through
the host :class:`~propbind.infrastructure.host.MutationExecutor`. Host reads
and writes that raise become `read_failed` or `write_failed` errors.

A mapping bound onto a nested-object member that already holds an instance
is applied member by member onto that instance.

INVARIANT: Each bind is independent. A failed bind writes nothing for its
path; earlier successful binds in the same request are not rolled back.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from propbind.domain.distance import rank_suggestions
from propbind.domain.kinds import VALUE_TYPE_KINDS, ValueKind
from propbind.infrastructure.memory import AttributeMutationExecutor
from propbind.services.result import BindingError, BindingReason, Bound, CoercionError

if TYPE_CHECKING:
    from propbind.domain.members import MemberDescriptor, TypeDescriptor
    from propbind.infrastructure.host import MutationExecutor
    from propbind.services.coercion import ValueCoercer
    from propbind.services.resolver import TypeResolver

logger = logging.getLogger(__name__)


class PropertyBinder:
    """Binds coerced values onto members of a target object."""

    def __init__(
        self,
        resolver: TypeResolver,
        coercer: ValueCoercer,
        executor: MutationExecutor | None = None,
        *,
        suggestion_limit: int = 3,
    ) -> None:
        self._resolver = resolver
        self._coercer = coercer
        self._executor = executor if executor is not None else AttributeMutationExecutor()
        self._limit = suggestion_limit

    def bind(self, target: Any, path: str, value: Any) -> Bound | BindingError:
        """Assign *value* at dotted *path* under *target*."""
        return self._bind(target, path.split("."), path, value)

    def bind_many(self, target: Any, values: Mapping[str, Any]) -> dict[str, Bound | BindingError]:
        """Bind every ``path -> value`` pair independently, in order."""
        return {path: self.bind(target, path, value) for path, value in values.items()}

    # ── internals ────────────────────────────────────────────────────

    def _bind(self, target: Any, segments: list[str], path: str, value: Any) -> Bound | BindingError:
        if not all(segments):
            return BindingError(path=path, reason=BindingReason.EMPTY_PATH)

        current = target
        for segment in segments[:-1]:
            descriptor = self._resolver.describe(type(current))
            member = self._member(descriptor, segment, path)
            if isinstance(member, BindingError):
                return member
            if member.kind in VALUE_TYPE_KINDS:
                return BindingError(
                    path=path,
                    segment=segment,
                    reason=BindingReason.VALUE_TYPE_INTERMEDIATE,
                    owner=descriptor.name,
                    note=member.spec.label,
                )
            following = self._read(current, member, descriptor, path)
            if isinstance(following, BindingError):
                return following
            if following is None:
                return BindingError(
                    path=path,
                    segment=segment,
                    reason=BindingReason.NULL_INTERMEDIATE,
                    owner=descriptor.name,
                )
            current = following

        return self._assign(current, segments[-1], path, value)

    def _assign(self, obj: Any, segment: str, path: str, value: Any) -> Bound | BindingError:
        descriptor = self._resolver.describe(type(obj))
        member = self._member(descriptor, segment, path)
        if isinstance(member, BindingError):
            return member

        if member.kind is ValueKind.NESTED_OBJECT and isinstance(value, Mapping):
            existing = self._read(obj, member, descriptor, path)
            if isinstance(existing, BindingError):
                return existing
            if existing is None:
                return BindingError(
                    path=path,
                    segment=segment,
                    reason=BindingReason.NULL_INTERMEDIATE,
                    owner=descriptor.name,
                )
            if not isinstance(existing, Mapping):
                return self._assign_members(existing, path, value)

        if not member.writable:
            return BindingError(
                path=path,
                segment=segment,
                reason=BindingReason.READ_ONLY,
                owner=descriptor.name,
            )

        coerced = self._coercer.coerce(value, member.spec, field=path)
        if isinstance(coerced, CoercionError):
            return BindingError(
                path=path,
                segment=segment,
                reason=BindingReason.COERCION_FAILED,
                owner=descriptor.name,
                cause=coerced,
            )

        try:
            self._executor.write(obj, member, coerced)
        except Exception as exc:
            logger.debug("Write to %s failed", path, exc_info=True)
            return BindingError(
                path=path,
                segment=segment,
                reason=BindingReason.WRITE_FAILED,
                owner=descriptor.name,
                note=f"{type(exc).__name__}: {exc}",
            )
        return Bound(path=path, value=coerced)

    def _read(
        self, obj: Any, member: MemberDescriptor, descriptor: TypeDescriptor, path: str
    ) -> Any:
        try:
            return self._executor.read(obj, member)
        except Exception as exc:
            logger.debug("Read of %s.%s failed", descriptor.name, member.name, exc_info=True)
            return BindingError(
                path=path,
                segment=member.name,
                reason=BindingReason.READ_FAILED,
                owner=descriptor.name,
                note=f"{type(exc).__name__}: {exc}",
            )

    def _assign_members(self, instance: Any, path: str, values: Mapping[str, Any]) -> Bound | BindingError:
        failures: list[BindingError] = []
        for key, item in values.items():
            key = str(key)
            outcome = self._bind(instance, key.split("."), f"{path}.{key}", item)
            if isinstance(outcome, BindingError):
                failures.append(outcome)
        if failures:
            return BindingError(
                path=path,
                segment=path.rsplit(".", 1)[-1],
                reason=BindingReason.NESTED_FAILED,
                failed=tuple(f.path for f in failures),
                cause=failures[0],
            )
        return Bound(path=path, value=instance)

    def _member(self, descriptor: TypeDescriptor, segment: str, path: str) -> MemberDescriptor | BindingError:
        member = descriptor.member(segment)
        if member is not None:
            return member
        names = descriptor.member_names()
        ranked = rank_suggestions(segment, names, limit=len(names))
        summaries = {m.name: m.summary() for m in reversed(descriptor.members)}
        logger.debug("No member '%s' on %s", segment, descriptor.name)
        return BindingError(
            path=path,
            segment=segment,
            reason=BindingReason.UNKNOWN_MEMBER,
            owner=descriptor.name,
            suggestions=tuple(ranked[: self._limit]),
            available=tuple(summaries[name] for name in ranked),
        )
