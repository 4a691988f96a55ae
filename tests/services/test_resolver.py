"""Tests for TypeResolver, AliasTable, and the type cache."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

from propbind.domain.members import TypeDescriptor
from propbind.infrastructure.catalog import Light, Rigidbody
from propbind.infrastructure.registry import ClassRegistry
from propbind.services.resolver import TYPE_CACHE, AliasTable, TypeCache, TypeResolver
from propbind.services.result import TypeResolutionError


class TestResolve:
    def test_exact(self, resolver: TypeResolver) -> None:
        descriptor = resolver.resolve("Rigidbody")
        assert isinstance(descriptor, TypeDescriptor)
        assert descriptor.type is Rigidbody

    def test_case_insensitive(self, resolver: TypeResolver) -> None:
        assert resolver.resolve("audiosource").name == "AudioSource"  # type: ignore[union-attr]

    def test_namespace_prefix_stripped(self, resolver: TypeResolver) -> None:
        assert resolver.resolve("UnityEngine.Light").name == "Light"  # type: ignore[union-attr]

    def test_alias(self, resolver: TypeResolver) -> None:
        assert resolver.resolve("rb").name == "Rigidbody"  # type: ignore[union-attr]
        assert resolver.resolve("RB").name == "Rigidbody"  # type: ignore[union-attr]

    def test_default_alias_to_concrete_type(self, resolver: TypeResolver) -> None:
        assert resolver.resolve("collider").name == "BoxCollider"  # type: ignore[union-attr]
        assert resolver.resolve("collider2d").name == "BoxCollider2D"  # type: ignore[union-attr]

    def test_whitespace_ignored(self, resolver: TypeResolver) -> None:
        assert resolver.resolve("  Camera ").name == "Camera"  # type: ignore[union-attr]

    def test_extra_aliases(self, catalog: ClassRegistry) -> None:
        resolver = TypeResolver(catalog, aliases={"body": "Rigidbody"})
        assert resolver.resolve("BODY").name == "Rigidbody"  # type: ignore[union-attr]

    def test_no_prefix_stripping(self, catalog: ClassRegistry) -> None:
        resolver = TypeResolver(catalog, strip_prefixes=(), cache=TypeCache())
        assert isinstance(resolver.resolve("UnityEngine.Light"), TypeResolutionError)


class TestSuggestions:
    def test_misspelling_ranks_intended_type_first(self, resolver: TypeResolver) -> None:
        error = resolver.resolve("Rigidboddy")
        assert isinstance(error, TypeResolutionError)
        assert error.suggestions[0] == "Rigidbody"
        assert error.code == "type_not_found"
        assert "Did you mean: Rigidbody" in error.message

    def test_limit(self, catalog: ClassRegistry) -> None:
        resolver = TypeResolver(catalog, suggestion_limit=1)
        error = resolver.resolve("Lght")
        assert isinstance(error, TypeResolutionError)
        assert error.suggestions == ("Light",)

    def test_prefixed_misspelling(self, resolver: TypeResolver) -> None:
        error = resolver.resolve("UnityEngine.Camra")
        assert isinstance(error, TypeResolutionError)
        assert error.suggestions[0] == "Camera"
        assert error.name == "UnityEngine.Camra"

    def test_detail_is_json_ready(self, resolver: TypeResolver) -> None:
        error = resolver.resolve("Rigidboddy")
        assert isinstance(error, TypeResolutionError)
        detail = error.to_service_error().detail
        assert detail["name"] == "Rigidboddy"
        assert detail["suggestions"][0] == "Rigidbody"


class TestCaching:
    def test_hit_is_cached(self, resolver: TypeResolver) -> None:
        first = resolver.resolve("Light")
        assert "Light" in TYPE_CACHE
        assert resolver.resolve("Light") is first

    def test_miss_is_not_cached(self, resolver: TypeResolver) -> None:
        resolver.resolve("Nope")
        assert "Nope" not in TYPE_CACHE

    def test_cache_shared_across_resolvers(self, catalog: ClassRegistry) -> None:
        first = TypeResolver(catalog).resolve("Light")
        second = TypeResolver(catalog).resolve("Light")
        assert first is second

    def test_local_alias_does_not_leak(self, catalog: ClassRegistry) -> None:
        local = TypeResolver(catalog, aliases={"body": "Rigidbody"})
        assert local.resolve("body").name == "Rigidbody"  # type: ignore[union-attr]
        assert "body" not in TYPE_CACHE
        assert isinstance(TypeResolver(catalog).resolve("body"), TypeResolutionError)

    def test_alias_hit_cached_by_canonical_name(self, resolver: TypeResolver) -> None:
        descriptor = resolver.resolve("rb")
        assert TYPE_CACHE.get("Rigidbody") is descriptor
        assert resolver.resolve("Rigidbody") is descriptor

    def test_transient_class_not_cached(self, resolver: TypeResolver) -> None:
        resolver.describe(dict)
        assert "dict" not in TYPE_CACHE
        assert isinstance(resolver.resolve("dict"), TypeResolutionError)

    def test_describe_caches_by_class_name(self, resolver: TypeResolver) -> None:
        descriptor = resolver.describe(Light)
        assert TYPE_CACHE.get("Light") is descriptor
        assert resolver.describe(Light) is descriptor

    def test_concurrent_resolution_yields_one_descriptor(self, resolver: TypeResolver) -> None:
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: resolver.resolve("Camera"), range(32)))
        assert all(r is results[0] for r in results)


class TestTypeCache:
    def test_write_once(self, catalog: ClassRegistry) -> None:
        cache = TypeCache()
        first = catalog.describe_class(Light)
        second = catalog.describe_class(Light)
        assert cache.insert("Light", first) is first
        assert cache.insert("Light", second) is first
        assert len(cache) == 1

    def test_clear(self, catalog: ClassRegistry) -> None:
        cache = TypeCache()
        cache.insert("Light", catalog.describe_class(Light))
        cache.clear()
        assert cache.get("Light") is None


class TestAliasTable:
    def test_defaults(self) -> None:
        assert AliasTable().lookup("Particles") == "ParticleSystem"

    def test_empty(self) -> None:
        assert AliasTable({}).lookup("rb") is None

    def test_add(self) -> None:
        table = AliasTable({})
        table.add("Cam", "Camera")
        assert table.lookup("cam") == "Camera"
        assert table.as_dict() == {"cam": "Camera"}
