"""Product records extracted from the storefront markup."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Optional


@dataclass(frozen=True)
class Product:
    """A single downloadable resource listed on the storefront.

    ``element`` points at the card node inside the parsed document the product
    was read from. The document owns it; search code only uses it to find the
    card again when rendering.
    """

    id: str
    title: str
    description: str
    category: str
    tags: FrozenSet[str] = frozenset()
    element: Optional[Any] = field(default=None, compare=False, repr=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "tags": sorted(self.tags),
        }
