"""Named color lookup table.

Values follow the host editor's predefined colors. The table is
extensible at runtime via :func:`register_color` (and from the ``[colors]``
config section).
"""

from __future__ import annotations

from propbind.domain.values import Color

NAMED_COLORS: dict[str, Color] = {
    "red": Color(1.0, 0.0, 0.0, 1.0),
    "green": Color(0.0, 1.0, 0.0, 1.0),
    "blue": Color(0.0, 0.0, 1.0, 1.0),
    "white": Color(1.0, 1.0, 1.0, 1.0),
    "black": Color(0.0, 0.0, 0.0, 1.0),
    "yellow": Color(1.0, 0.92, 0.016, 1.0),
    "cyan": Color(0.0, 1.0, 1.0, 1.0),
    "magenta": Color(1.0, 0.0, 1.0, 1.0),
    "gray": Color(0.5, 0.5, 0.5, 1.0),
    "grey": Color(0.5, 0.5, 0.5, 1.0),
    "clear": Color(0.0, 0.0, 0.0, 0.0),
}


def lookup_color(name: str) -> Color | None:
    """Return the named color, ignoring case and surrounding whitespace."""
    return NAMED_COLORS.get(name.strip().lower())


def make_color(rgba: tuple[float, ...] | list[float]) -> Color:
    """Build a clamped color from 3 or 4 components. Three imply alpha 1."""
    components = [float(c) for c in rgba]
    if len(components) not in (3, 4):
        msg = f"A color needs 3 or 4 components, got {len(components)}"
        raise ValueError(msg)
    if len(components) == 3:
        components.append(1.0)
    return Color(*(min(1.0, max(0.0, c)) for c in components))


def register_color(name: str, rgba: tuple[float, ...] | list[float]) -> Color:
    """Add or replace a named color in the shared table."""
    color = make_color(rgba)
    NAMED_COLORS[name.strip().lower()] = color
    return color
