"""Longest-prefix keyword completion."""

from bisect import bisect_left
from typing import Iterable


class AutoCompleter:
    """
    Static prefix matcher over a fixed keyword set.

    Keywords are sorted once so a lookup is a binary search plus a scan of
    the matching block. With ``prefer_long`` the longest candidates come
    first; ties are alphabetical.

    Examples:
        >>> completer = AutoCompleter(["Sin", "Sinh", "Simplify", "Cos"])
        >>> completer.autocomplete("Si")
        ['Simplify', 'Sinh', 'Sin']
    """

    def __init__(self, *keyword_lists: Iterable[str], prefer_long: bool = True):
        keywords: set[str] = set()
        for keyword_list in keyword_lists:
            keywords.update(keyword_list)
        self._keywords: tuple[str, ...] = tuple(sorted(keywords))
        self.prefer_long = prefer_long

    @property
    def keywords(self) -> tuple[str, ...]:
        return self._keywords

    def autocomplete(self, prefix: str) -> list[str]:
        """Return every keyword starting with prefix, best candidates first."""
        if not prefix:
            return []

        matches = []
        for keyword in self._keywords[bisect_left(self._keywords, prefix):]:
            if not keyword.startswith(prefix):
                break
            matches.append(keyword)

        if self.prefer_long:
            matches.sort(key=lambda keyword: (-len(keyword), keyword))
        else:
            matches.sort(key=lambda keyword: (len(keyword), keyword))
        return matches

    def __len__(self) -> int:
        return len(self._keywords)

    def __contains__(self, keyword: str) -> bool:
        return keyword in self._keywords


__all__ = ["AutoCompleter"]
