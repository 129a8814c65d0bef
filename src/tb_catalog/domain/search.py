"""Catalog text search and tag normalization."""

from collections.abc import Iterable

# Backslash is the default ILIKE escape character in PostgreSQL
_LIKE_SPECIALS = str.maketrans({"\\": "\\\\", "%": "\\%", "_": "\\_"})


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim, drop blanks and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned and cleaned not in seen:
            seen[cleaned] = None
    return list(seen)


def search_pattern(term: str | None) -> str | None:
    """ILIKE substring pattern for a free-text term, or None for no filter.

    The term is matched literally: LIKE wildcards typed by the user are escaped.
    """
    if term is None:
        return None
    needle = term.strip()
    if not needle:
        return None
    return f"%{needle.translate(_LIKE_SPECIALS)}%"
