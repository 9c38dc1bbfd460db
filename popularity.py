"""Explore-click popularity for storefront products.

Every click on a product's explore button bumps a counter. The grid is shown
most popular first, products with equal counts are shuffled so they take
turns at the top, and the three most explored products get a badge.
"""

from __future__ import annotations

import json
import logging
import random
import threading
from itertools import groupby
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from catalog.models import Product
from search import ProductDisplay

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
BADGE_LIMIT = 3


def popularity_key(product_id: str) -> str:
    return f"product-{product_id}-popularity"


class PopularityStore:
    """Explore counters kept in a JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = self._load()

    def _load(self) -> Dict[str, int]:
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable popularity store at %s", self.path)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring malformed popularity store at %s", self.path)
            return {}

        counts: Dict[str, int] = {}
        for key, value in data.items():
            try:
                counts[str(key)] = int(value)
            except (TypeError, ValueError):
                continue
        return counts

    def _save(self, counts: Dict[str, int]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(counts, indent=2, sort_keys=True), encoding="utf-8")

    def get(self, product_id: str) -> int:
        return self._counts.get(popularity_key(product_id), 0)

    def record_explore(self, product_id: str) -> int:
        with self._lock:
            key = popularity_key(product_id)
            counts = dict(self._counts)
            counts[key] = counts.get(key, 0) + 1
            try:
                self._save(counts)
            except OSError:
                logger.exception("Could not save popularity store to %s", self.path)
                raise
            self._counts = counts
            count = counts[key]

        logger.info("Product %s explored %d times", product_id, count)
        return count


def filter_products(products: Iterable[Product], category: str = ALL_CATEGORIES) -> List[Product]:
    if category == ALL_CATEGORIES:
        return list(products)
    return [product for product in products if product.category == category]


def reorder_by_popularity(
    products: Iterable[Product], store: PopularityStore, rng: Optional[random.Random] = None
) -> List[Product]:
    """Return *products* most explored first, shuffling equally popular ones."""

    rng = rng or random.Random()
    ranked = sorted(products, key=lambda product: -store.get(product.id))

    reordered: List[Product] = []
    for _, group in groupby(ranked, key=lambda product: store.get(product.id)):
        members = list(group)
        rng.shuffle(members)
        reordered.extend(members)
    return reordered


def popular_badges(
    products: Iterable[Product], store: PopularityStore, limit: int = BADGE_LIMIT
) -> List[str]:
    """Ids of the most explored products that have been explored at all."""

    ranked = sorted(products, key=lambda product: -store.get(product.id))
    return [product.id for product in ranked[:limit] if store.get(product.id) > 0]


def browse(
    products: Iterable[Product],
    store: PopularityStore,
    category: str = ALL_CATEGORIES,
    rng: Optional[random.Random] = None,
) -> ProductDisplay:
    """Grid layout for a category filter button: matching cards, most popular first."""

    products = list(products)
    shown = reorder_by_popularity(filter_products(products, category), store, rng)
    shown_ids = {product.id for product in shown}
    return ProductDisplay(
        visible=[product.id for product in shown],
        hidden=[product.id for product in products if product.id not in shown_ids],
    )
