# splendor_engine/tokens.py

"""
Defines GemTokens, the sparse token bag used for player holdings, the
shared supply, card costs and noble requirements.

A missing color reads as zero and zero counts are never stored, so two
bags compare equal exactly when every color count matches.
"""

import numbers
from collections.abc import Mapping
from typing import Iterator, Optional, Union

from .constants import GemColor, ALL_TOKEN_COLORS

ColorLike = Union[GemColor, str]


class GemTokens(Mapping):
    """
    Immutable color -> count mapping. Indexing a color that is not present
    returns 0 instead of raising.
    """

    __slots__ = ("_counts",)

    def __init__(self, counts: Optional[Mapping] = None, **kwargs: int):
        merged = {}
        pairs = list(counts.items()) if counts else []
        pairs.extend(kwargs.items())
        for color, count in pairs:
            color = GemColor(color)
            if not isinstance(count, numbers.Integral) or isinstance(count, bool):
                raise TypeError(f"Token count for {color.value} must be an int, got {type(count).__name__}")
            merged[color] = merged.get(color, 0) + int(count)
        # Canonical color order, zero entries dropped
        self._counts = {c: merged[c] for c in ALL_TOKEN_COLORS if merged.get(c, 0) != 0}

    def __getitem__(self, color: ColorLike) -> int:
        return self._counts.get(GemColor(color), 0)

    def __contains__(self, color: object) -> bool:
        try:
            return GemColor(color) in self._counts
        except ValueError:
            return False

    def __iter__(self) -> Iterator[GemColor]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __eq__(self, other: object) -> bool:
        """Compares per color; string keys such as "ruby" are accepted on the other side."""
        if not isinstance(other, Mapping):
            return NotImplemented
        if not isinstance(other, GemTokens):
            try:
                other = GemTokens(other)
            except (ValueError, TypeError):
                return False
        return self._counts == other._counts

    def __hash__(self) -> int:
        return hash(frozenset(self._counts.items()))

    def __add__(self, other: Mapping) -> "GemTokens":
        result = dict(self._counts)
        for color, count in other.items():
            color = GemColor(color)
            result[color] = result.get(color, 0) + count
        return GemTokens(result)

    def __sub__(self, other: Mapping) -> "GemTokens":
        """Subtracts without checking for negatives; callers validate first."""
        result = dict(self._counts)
        for color, count in other.items():
            color = GemColor(color)
            result[color] = result.get(color, 0) - count
        return GemTokens(result)

    def total(self) -> int:
        return sum(self._counts.values())

    def has_negative(self) -> bool:
        return any(count < 0 for count in self._counts.values())

    def as_dict(self) -> dict:
        """Plain {color_name: count} form, e.g. for logging or snapshots."""
        return {c.value: n for c, n in self._counts.items()}

    def __repr__(self) -> str:
        inner = ", ".join(f"{c.value}={n}" for c, n in self._counts.items())
        return f"GemTokens({inner})"


EMPTY_TOKENS = GemTokens()
