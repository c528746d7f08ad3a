"""Slug Derivation — natural keys derived from human-readable titles and names.

Invariants:
    - Output contains only [a-z0-9-], no leading/trailing hyphen, never empty
    - Runs of non-alphanumerics collapse to a single hyphen
    - Deterministic: same input always yields the same slug (upserts depend on it)
    - Text with no ASCII letter or digit has no slug: ValueError, so two such
      titles can never collide on ''
"""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(text: str) -> str:
    """'Task Manager 2.0' -> 'task-manager-2-0'. Raises ValueError if nothing is left."""
    slug = _NON_ALNUM.sub("-", text.lower()).strip("-")
    if not slug:
        raise ValueError(f"{text!r} must contain at least one ASCII letter or digit")
    return slug


def dedupe_keys(keys: list[str]) -> list[str]:
    """Strip, drop blanks, drop repeats. First occurrence keeps its position."""
    seen: set[str] = set()
    result = []
    for key in keys:
        key = key.strip()
        if key and key not in seen:
            seen.add(key)
            result.append(key)
    return result
