"""Search tag generation for catalog products."""

from __future__ import annotations

from typing import Dict, FrozenSet, List, Set

MIN_WORD_LENGTH = 3

TYPE_TAGS: Dict[str, List[str]] = {
    "pdf": ["document", "guide", "ebook", "tutorial", "pdf"],
    "code": ["programming", "developer", "source code", "github", "repository"],
    "zip": ["archive", "package", "bundle", "collection", "resources"],
    "image": ["photo", "picture", "graphic", "artwork", "visual"],
    "video": ["movie", "tutorial", "course", "lesson", "screencast"],
    "music": ["audio", "sound", "track", "melody", "song"],
}

# Misspellings and abbreviations shoppers type for the canonical tag.
COMMON_VARIATIONS: Dict[str, List[str]] = {
    "developer": ["dev", "develper", "devaloper", "devloper"],
    "javascript": ["js", "javscript", "javascrip"],
    "react": ["reakt", "reac"],
    "component": ["componant", "componnt"],
    "toolkit": ["tool kit", "toolket", "toolkt"],
    "digital": ["digetal", "dijital"],
    "resource": ["resourse", "resorces"],
    "template": ["templet", "templat"],
    "guide": ["gide", "guyde"],
    "course": ["corse", "coarse"],
}


def add_common_variations(tags: Set[str]) -> None:
    """Add the known variants of every canonical tag already in *tags*.

    Only tags present before the call are looked up; variants added here do
    not trigger further expansion.
    """

    for tag in list(tags):
        tags.update(COMMON_VARIATIONS.get(tag, ()))


def generate_search_tags(title: str, description: str, category: str) -> FrozenSet[str]:
    """Return the search tags for a product.

    Words longer than two characters from the title and description, the
    synonyms for the product's category and the misspelling variants of any
    of those.
    """

    tags: Set[str] = set()

    text = f"{title} {description}".lower()
    tags.update(word for word in text.split() if len(word) >= MIN_WORD_LENGTH)

    tags.update(TYPE_TAGS.get(category, ()))

    add_common_variations(tags)
    return frozenset(tags)
