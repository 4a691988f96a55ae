"""Tests for the sample component catalog."""

from __future__ import annotations

from propbind.domain.kinds import ValueKind
from propbind.infrastructure.catalog import GameObject, MeshRenderer, build_catalog


class TestCatalog:
    def test_fresh_registry_each_call(self) -> None:
        assert build_catalog() is not build_catalog()

    def test_every_type_describable(self) -> None:
        registry = build_catalog()
        for name in registry.names():
            descriptor = registry.describe_name(name)
            assert descriptor is not None
            assert descriptor.members, name

    def test_renderer_starts_without_material(self) -> None:
        assert MeshRenderer().material is None

    def test_camera_aspect_read_only(self) -> None:
        camera = build_catalog().describe_name("Camera")
        assert camera is not None
        aspect = camera.member("aspect")
        assert aspect is not None
        assert aspect.writable is False

    def test_game_object_transform_reference(self) -> None:
        go = build_catalog().describe_name("GameObject")
        assert go is not None
        assert go.member("transform").kind is ValueKind.OBJECT_REFERENCE  # type: ignore[union-attr]
        assert GameObject().get_component("Transform") is not None
