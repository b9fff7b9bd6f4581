"""Tab completion: identifier scanning and keyword matching."""

from .autocompleter import AutoCompleter
from .scanner import IDENTIFIER_CHARS, Span, find_longest_matching_at, is_identifier_char

__all__ = [
    "AutoCompleter",
    "IDENTIFIER_CHARS",
    "Span",
    "find_longest_matching_at",
    "is_identifier_char",
]
