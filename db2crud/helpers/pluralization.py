"""Singular/plural spelling heuristics for table-name matching.

These are deliberately naive English rules. They only widen fuzzy matching;
irregular plurals (Person/People) are expected to miss and are handled by
explicit mappings.
"""

from __future__ import annotations

_VOWELS = frozenset("aeiouAEIOU")
_ES_SUFFIXES = ("s", "x", "z", "ch", "sh")


def _ends_with(name: str, suffix: str) -> bool:
    return name.lower().endswith(suffix)


def name_variations(name: str) -> list[str]:
    """Return candidate singular/plural spellings of ``name``.

    The result is de-duplicated and keeps generation order, so logs and
    matching are deterministic.

    Example:
        >>> name_variations("Categories")
        ['Categorie', 'Categori', 'Category']
        >>> name_variations("Box")
        ['Boxs', 'Boxes']
    """
    variations: list[str] = []
    if _ends_with(name, "s"):
        variations.append(name[:-1])
        if _ends_with(name, "es"):
            variations.append(name[:-2])
        if _ends_with(name, "ies") and len(name) > 3:
            variations.append(name[:-3] + "y")
    else:
        variations.append(name + "s")
        if any(_ends_with(name, suffix) for suffix in _ES_SUFFIXES):
            variations.append(name + "es")
        if _ends_with(name, "y") and len(name) > 1 and name[-2] not in _VOWELS:
            variations.append(name[:-1] + "ies")

    return list(dict.fromkeys(variations))


def fallback_singularize(name: str) -> str:
    """Best-effort singular form of a physical table name.

    Used only when no entity name is known for a table.
    """
    if not name or not name.strip():
        return name
    if _ends_with(name, "ies") and len(name) > 3:
        return name[:-3] + "y"
    if _ends_with(name, "ses"):
        return name[:-2]
    if _ends_with(name, "es"):
        return name[:-2]
    if _ends_with(name, "s"):
        return name[:-1]
    return name
