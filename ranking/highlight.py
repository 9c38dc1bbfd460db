"""Locate query terms inside product text for suggestion highlighting."""

from __future__ import annotations

import re
from typing import List, NamedTuple, Tuple

MIN_HIGHLIGHT_LENGTH = 2


class Segment(NamedTuple):
    text: str
    highlighted: bool


def find_spans(text: str, query: str) -> List[Tuple[int, int]]:
    """Return merged ``(start, end)`` spans of every query term in *text*."""

    spans = []
    for term in query.lower().split():
        if len(term) < MIN_HIGHLIGHT_LENGTH:
            continue
        pattern = re.compile(re.escape(term), re.IGNORECASE)
        spans.extend(match.span() for match in pattern.finditer(text))

    merged: List[Tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(end, merged[-1][1]))
        else:
            merged.append((start, end))
    return merged


def highlight_segments(text: str, query: str) -> List[Segment]:
    """Split *text* into plain and highlighted segments for *query*.

    Joining the segment texts gives back *text* unchanged.
    """

    segments: List[Segment] = []
    position = 0
    for start, end in find_spans(text, query):
        if start > position:
            segments.append(Segment(text[position:start], False))
        segments.append(Segment(text[start:end], True))
        position = end

    if position < len(text):
        segments.append(Segment(text[position:], False))
    return segments
