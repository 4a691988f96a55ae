"""Tests for engine value types and plain serialization."""

from __future__ import annotations

from enum import Enum

import pytest

from propbind.domain.values import Color, LayerMask, Quaternion, Vector2, Vector3, to_plain


class _Mode(Enum):
    Fast = 1


class _Named:
    name = "Brick"


class TestValueTypes:
    def test_quaternion_identity_default(self) -> None:
        assert Quaternion().as_list() == [0.0, 0.0, 0.0, 1.0]

    def test_color_default_opaque_black(self) -> None:
        assert Color().as_list() == [0.0, 0.0, 0.0, 1.0]

    def test_frozen(self) -> None:
        with pytest.raises(AttributeError):
            Vector2().x = 1.0  # type: ignore[misc]

    def test_layer_mask_bits(self) -> None:
        mask = LayerMask(0b10001)
        assert mask.includes(0)
        assert mask.includes(4)
        assert not mask.includes(1)
        assert mask.as_list() == [0, 4]


class TestToPlain:
    def test_vector(self) -> None:
        assert to_plain(Vector3(1.0, 2.0, 3.0)) == [1.0, 2.0, 3.0]

    def test_layer_mask_is_int(self) -> None:
        assert to_plain(LayerMask(5)) == 5

    def test_enum_by_name(self) -> None:
        assert to_plain(_Mode.Fast) == "Fast"

    def test_nested_containers(self) -> None:
        data = {"main": {"startColor": Color(1.0, 0.0, 0.0, 1.0)}, "bursts": [Vector2(1.0, 2.0)]}
        assert to_plain(data) == {
            "main": {"startColor": [1.0, 0.0, 0.0, 1.0]},
            "bursts": [[1.0, 2.0]],
        }

    def test_host_object_by_name(self) -> None:
        assert to_plain(_Named()) == "Brick"

    def test_primitives_unchanged(self) -> None:
        assert to_plain(None) is None
        assert to_plain(True) is True
        assert to_plain("x") == "x"
