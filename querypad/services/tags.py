"""Tag normalization applied before any query is stored."""

from collections.abc import Iterable

# Width of query_tags.tag.
TAG_MAX_LEN = 255


def normalize_tags(tags: Iterable[str] | None) -> list[str]:
    """
    Trim and lowercase tags, drop empties and duplicates.

    First-occurrence order is kept, e.g. [" SQL ", "sql", "", "Perf"] -> ["sql", "perf"].
    """
    if not tags:
        return []
    seen: set[str] = set()
    normalized: list[str] = []
    for tag in tags:
        value = tag.strip().lower()
        if value and value not in seen:
            seen.add(value)
            normalized.append(value)
    return normalized
