"""Edit distance and ranked name suggestions."""

from __future__ import annotations

from collections.abc import Iterable, Mapping


def levenshtein(a: str, b: str) -> int:
    """Classic Levenshtein distance (insert, delete, substitute all cost 1).

    Examples:
        >>> levenshtein("rigidboddy", "rigidbody")
        1
        >>> levenshtein("", "abc")
        3
    """
    if not a:
        return len(b)
    if not b:
        return len(a)
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            current.append(min(previous[j] + 1, current[j - 1] + 1, previous[j - 1] + cost))
        previous = current
    return previous[-1]


def rank_suggestions(
    query: str,
    candidates: Iterable[str],
    *,
    limit: int = 3,
    aliases: Mapping[str, str] | None = None,
) -> list[str]:
    """Rank *candidates* by case-insensitive edit distance to *query*.

    Each alias in *aliases* (alias -> canonical name) also scores its
    canonical name; a canonical name keeps its best score. Ties are broken
    by shorter name, then lexical order.
    """
    needle = query.lower()
    best: dict[str, int] = {}
    for name in candidates:
        best[name] = min(best.get(name, len(needle) + len(name)), levenshtein(needle, name.lower()))
    for alias, canonical in (aliases or {}).items():
        if canonical not in best:
            continue
        best[canonical] = min(best[canonical], levenshtein(needle, alias.lower()))
    ranked = sorted(best, key=lambda name: (best[name], len(name), name))
    return ranked[:limit]
