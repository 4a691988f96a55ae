"""TypeResolver — type name to descriptor, with caching and suggestions.

Lookup order for a requested name:

1. strip a known namespace prefix (``UnityEngine.Rigidbody`` -> ``Rigidbody``)
2. exact canonical name
3. case-insensitive canonical name
4. alias table (case-insensitive)

A miss returns :class:`TypeResolutionError` carrying the closest canonical
names by edit distance. Hits are cached process-wide in :data:`TYPE_CACHE`,
keyed by canonical name, so an alias known to one resolver never resolves
through another.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from propbind.domain.distance import rank_suggestions
from propbind.services.result import TypeResolutionError

if TYPE_CHECKING:
    from propbind.domain.members import TypeDescriptor
    from propbind.infrastructure.host import TypeUniverse

logger = logging.getLogger(__name__)

DEFAULT_ALIASES: dict[str, str] = {
    "rigidbody": "Rigidbody",
    "rb": "Rigidbody",
    "collider": "BoxCollider",
    "boxcollider": "BoxCollider",
    "spherecollider": "SphereCollider",
    "capsulecollider": "CapsuleCollider",
    "meshcollider": "MeshCollider",
    "audiosource": "AudioSource",
    "audio": "AudioSource",
    "light": "Light",
    "camera": "Camera",
    "meshrenderer": "MeshRenderer",
    "renderer": "MeshRenderer",
    "meshfilter": "MeshFilter",
    "transform": "Transform",
    "animator": "Animator",
    "rigidbody2d": "Rigidbody2D",
    "rb2d": "Rigidbody2D",
    "collider2d": "BoxCollider2D",
    "boxcollider2d": "BoxCollider2D",
    "circlecollider2d": "CircleCollider2D",
    "particlesystem": "ParticleSystem",
    "particles": "ParticleSystem",
}

DEFAULT_STRIP_PREFIXES: tuple[str, ...] = ("UnityEngine.",)


class TypeCache:
    """Process-wide name -> descriptor map.

    INVARIANT: Write-once per key. The first resolution wins; later inserts
    for the same key return the stored descriptor. Reads take no lock.

    Keys are canonical type names, never raw query text.
    """

    def __init__(self) -> None:
        self._entries: dict[str, TypeDescriptor] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> TypeDescriptor | None:
        return self._entries.get(key)

    def insert(self, key: str, descriptor: TypeDescriptor) -> TypeDescriptor:
        with self._lock:
            return self._entries.setdefault(key, descriptor)

    def clear(self) -> None:
        """Drop every entry. Only meant for test isolation."""
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


TYPE_CACHE = TypeCache()


class AliasTable:
    """Case-insensitive alias -> canonical name table, extensible at runtime."""

    def __init__(self, aliases: Mapping[str, str] | None = None) -> None:
        self._table: dict[str, str] = {}
        self.update(DEFAULT_ALIASES if aliases is None else aliases)

    def add(self, alias: str, canonical: str) -> None:
        self._table[alias.lower()] = canonical

    def update(self, aliases: Mapping[str, str]) -> None:
        for alias, canonical in aliases.items():
            self.add(alias, canonical)

    def lookup(self, name: str) -> str | None:
        return self._table.get(name.lower())

    def as_dict(self) -> dict[str, str]:
        return dict(self._table)


class TypeResolver:
    """Resolves free-text type names against a :class:`TypeUniverse`.

    Args:
        universe: Host type universe. Must not change after first use.
        aliases: Extra aliases layered over :data:`DEFAULT_ALIASES` and the
            universe's own aliases.
        strip_prefixes: Namespace prefixes removed before lookup.
        suggestion_limit: Maximum suggestions on a miss.
        cache: Descriptor cache; defaults to the process-wide one.
    """

    def __init__(
        self,
        universe: TypeUniverse,
        *,
        aliases: Mapping[str, str] | None = None,
        strip_prefixes: Iterable[str] = DEFAULT_STRIP_PREFIXES,
        suggestion_limit: int = 3,
        cache: TypeCache | None = None,
    ) -> None:
        self._universe = universe
        self._strip_prefixes = tuple(strip_prefixes)
        self._limit = suggestion_limit
        self._cache = TYPE_CACHE if cache is None else cache
        self.aliases = AliasTable()
        self.aliases.update(universe.aliases())
        if aliases:
            self.aliases.update(aliases)

    @property
    def universe(self) -> TypeUniverse:
        return self._universe

    def resolve(self, name: str) -> TypeDescriptor | TypeResolutionError:
        """Resolve *name* to a descriptor, or an error with suggestions."""
        key = name.strip()
        canonical = self._canonical(self._strip(key))
        cached = self._cache.get(canonical)
        if cached is not None:
            return cached

        descriptor = self._universe.describe_name(canonical)
        if descriptor is None:
            suggestions = self.suggest(key)
            logger.debug("Type '%s' not found; suggestions=%s", key, suggestions)
            return TypeResolutionError(name=name, suggestions=tuple(suggestions))

        logger.debug("Resolved type '%s' -> %s", key, descriptor.name)
        return self._cache.insert(descriptor.name, descriptor)

    def describe(self, cls: type) -> TypeDescriptor:
        """Descriptor for a runtime class, cached under its canonical name."""
        cached = self._cache.get(cls.__name__)
        if cached is not None and cached.type is cls:
            return cached
        descriptor = self._universe.describe_class(cls)
        # Classes outside the universe get a transient descriptor.
        if (
            cached is None
            and descriptor.name == cls.__name__
            and self._universe.describe_name(descriptor.name) is not None
        ):
            return self._cache.insert(descriptor.name, descriptor)
        return descriptor

    def suggest(self, name: str) -> list[str]:
        canonical = list(self._universe.names())
        return rank_suggestions(
            self._strip(name),
            canonical,
            limit=self._limit,
            aliases=self.aliases.as_dict(),
        )

    def _strip(self, name: str) -> str:
        for prefix in self._strip_prefixes:
            if name.startswith(prefix):
                return name[len(prefix) :]
        return name

    def _canonical(self, name: str) -> str:
        known = list(self._universe.names())
        if name in known:
            return name
        lowered = name.lower()
        for canonical in known:
            if canonical.lower() == lowered:
                return canonical
        target = self.aliases.lookup(name)
        # Unmatched names go to the universe as is; it may know nested types.
        return target if target is not None else name
