"""Relevance scoring for storefront queries.

Every query term is scored against the product title, description, tags and
category. Terms found verbatim earn the field's full weight; misspelt terms
earn a share of it through :func:`fuzzy_match_score`. Queries that appear as a
phrase in the title or description get a one-off bonus on top.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from catalog.models import Product

TITLE_WEIGHT = 10
DESCRIPTION_WEIGHT = 5
TAG_WEIGHT = 7
CATEGORY_WEIGHT = 3

FUZZY_DISCOUNT = 0.8
MIN_FUZZY_TERM_LENGTH = 3
FUZZY_SCORE_THRESHOLD = 0.6
FUZZY_MATCH_THRESHOLD = 0.7

EXACT_PHRASE_BONUS = 15
ORDERED_PHRASE_BONUS = 12


@dataclass
class SearchResult:
    product: Product
    score: float
    matches: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.product.id,
            "title": self.product.title,
            "category": self.product.category,
            "score": round(self.score, 3),
            "matches": self.matches,
        }


def query_terms(query: str) -> List[str]:
    return query.lower().split()


def fuzzy_match_score(text: str, term: str) -> float:
    """Return how closely *term* can be traced through *text*, or 0.

    The scan walks *text* once with a cursor into *term*. Matching characters
    advance the cursor, a repeated term character counts half and a swapped
    pair counts 0.8. Similarities of 0.6 or less are reported as 0.
    """

    if len(term) < MIN_FUZZY_TERM_LENGTH:
        return 0.0

    match_count = 0.0
    term_index = 0

    for i, char in enumerate(text):
        if term_index >= len(term):
            break

        if char == term[term_index]:
            match_count += 1
            term_index += 1
        elif term_index > 0 and char == term[term_index - 1]:
            # double letters ("deveeloper")
            match_count += 0.5
        elif (
            i > 0
            and term_index > 0
            and text[i - 1] == term[term_index]
            and char == term[term_index - 1]
        ):
            match_count += 0.8
            term_index += 2

    similarity = match_count / len(term)
    return similarity if similarity > FUZZY_SCORE_THRESHOLD else 0.0


def term_score(text: str, term: str, weight: float) -> float:
    lower_text = text.lower()
    lower_term = term.lower()

    if lower_term in lower_text:
        return weight

    return fuzzy_match_score(lower_text, lower_term) * weight * FUZZY_DISCOUNT


def _words_in_order(phrase: str, words: Iterable[str]) -> bool:
    position = 0
    for word in words:
        index = phrase.find(word, position)
        if index == -1:
            return False
        position = index + len(word)
    return True


def phrase_score(product: Product, query: str) -> int:
    """Bonus for queries found as a phrase in the title or description."""

    lower_query = query.lower()
    # empty pieces from leading or trailing whitespace count as words and match anywhere
    words = re.split(r"\s+", lower_query)
    best = 0

    for phrase in (product.title.lower(), product.description.lower()):
        if lower_query in phrase:
            best = max(best, EXACT_PHRASE_BONUS)
        elif len(words) > 1 and _words_in_order(phrase, words):
            best = max(best, ORDERED_PHRASE_BONUS)

    return best


def relevance_score(product: Product, query: str) -> float:
    score = 0.0

    for term in query_terms(query):
        score += term_score(product.title, term, TITLE_WEIGHT)
        score += term_score(product.description, term, DESCRIPTION_WEIGHT)
        # sorted so float sums do not depend on set iteration order
        score += sum(term_score(tag, term, TAG_WEIGHT) for tag in sorted(product.tags))
        score += term_score(product.category, term, CATEGORY_WEIGHT)

    return score + phrase_score(product, query)


def has_match(text: str, term: str) -> bool:
    """Whether *term* should count as found in *text* for display purposes."""

    lower_text = text.lower()
    lower_term = term.lower()

    if lower_term in lower_text:
        return True

    if len(lower_term) >= MIN_FUZZY_TERM_LENGTH:
        return fuzzy_match_score(lower_text, lower_term) > FUZZY_MATCH_THRESHOLD

    return False


def find_matches(product: Product, query: str) -> Dict[str, List[str]]:
    matches: Dict[str, List[str]] = {"title": [], "description": [], "tags": []}

    for term in query_terms(query):
        if has_match(product.title, term):
            matches["title"].append(term)
        if has_match(product.description, term):
            matches["description"].append(term)
        for tag in sorted(product.tags):
            if has_match(tag, term):
                matches["tags"].append(term)

    return matches


def rank_products(
    products: Iterable[Product], query: str, limit: Optional[int] = None
) -> List[SearchResult]:
    """Score *products* for *query* and return the hits, best first.

    Products scoring 0 are dropped. Equal scores keep catalog order.
    """

    results = []
    for product in products:
        score = relevance_score(product, query)
        if score > 0:
            results.append(SearchResult(product, score, find_matches(product, query)))

    results.sort(key=lambda result: -result.score)
    return results[:limit] if limit is not None else results
