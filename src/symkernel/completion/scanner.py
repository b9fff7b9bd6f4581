"""Identifier scanning around a cursor offset."""

import string
from dataclasses import dataclass
from typing import Callable

IDENTIFIER_CHARS = frozenset(string.ascii_letters + "_")


def is_identifier_char(ch: str) -> bool:
    """Character class ``[a-zA-Z_]``."""
    return ch in IDENTIFIER_CHARS


@dataclass(frozen=True)
class Span:
    """Half-open range ``[low, high)`` of a string."""

    low: int
    high: int

    def extract(self, text: str) -> str:
        return text[self.low:self.high]

    def __len__(self) -> int:
        return self.high - self.low


def find_longest_matching_at(
    text: str,
    at: int,
    predicate: Callable[[str], bool] = is_identifier_char,
) -> Span | None:
    """
    Find the maximal run of predicate characters containing or ending at ``at``.

    ``at`` is a cursor offset (between characters) and is clamped to the text.

    Examples:
        >>> find_longest_matching_at("Sin[x]", 2)
        Span(low=0, high=3)
        >>> find_longest_matching_at("3+4", 1) is None
        True
    """
    at = max(0, min(at, len(text)))

    low = at
    while low > 0 and predicate(text[low - 1]):
        low -= 1

    high = at
    while high < len(text) and predicate(text[high]):
        high += 1

    if low == high:
        return None
    return Span(low, high)


__all__ = ["IDENTIFIER_CHARS", "Span", "find_longest_matching_at", "is_identifier_char"]
