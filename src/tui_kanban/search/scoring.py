"""Fuzzy text similarity over character n-grams.

The index only depends on the Scorer protocol, so the n-gram measure
below can be swapped for another strategy without touching callers.

NGramScorer compares multisets of padded character n-grams using the
"warp" similarity popularised by the ngrammatic library:

    similarity = (all ** warp - diff ** warp) / all ** warp

where `all` is the number of grams in the union of both texts and
`diff` the number of grams not shared. warp=1 is plain Jaccard; higher
warps are more forgiving of the extra grams a typo introduces.
"""

from __future__ import annotations

import unicodedata
from collections import Counter
from dataclasses import dataclass
from typing import Protocol

from tui_kanban.core.constants import DEFAULT_GRAM_SIZE, DEFAULT_SEARCH_WARP

SUBSTRING_FLOOR = 0.9


def normalize(text: str) -> str:
    """NFKC-normalise, casefold and collapse whitespace."""
    return " ".join(unicodedata.normalize("NFKC", text).casefold().split())


@dataclass(frozen=True)
class PreparedText:
    """Normalised text with the grams a scorer needs, computed once."""
    text: str
    grams: Counter
    word_grams: tuple[Counter, ...] = ()

    @property
    def keys(self) -> set[str]:
        """Distinct grams, used for the inverted index."""
        return set(self.grams)


class Scorer(Protocol):
    """Similarity strategy used by the search index."""

    def prepare(self, text: str) -> PreparedText:
        ...

    def score(self, query: PreparedText, target: PreparedText) -> float:
        """Similarity in [0, 1]; 1 is an exact match."""
        ...


class NGramScorer:
    """Character n-gram similarity, tolerant of typos and transpositions."""

    def __init__(self, gram_size: int = DEFAULT_GRAM_SIZE, warp: float = DEFAULT_SEARCH_WARP) -> None:
        if gram_size < 1:
            raise ValueError("gram_size must be at least 1")
        if not 1.0 <= warp <= 3.0:
            raise ValueError("warp must be between 1.0 and 3.0")
        self.gram_size = gram_size
        self.warp = warp

    def grams(self, text: str) -> Counter:
        """Padded n-grams of already-normalised text."""
        if not text:
            return Counter()
        pad = " " * (self.gram_size - 1)
        padded = f"{pad}{text}{pad}"
        return Counter(
            padded[i:i + self.gram_size] for i in range(len(padded) - self.gram_size + 1)
        )

    def prepare(self, text: str) -> PreparedText:
        norm = normalize(text)
        words = norm.split()
        word_grams = tuple(self.grams(w) for w in words) if len(words) > 1 else ()
        return PreparedText(text=norm, grams=self.grams(norm), word_grams=word_grams)

    def similarity(self, a: Counter, b: Counter) -> float:
        union = sum((a | b).values())
        if union == 0:
            return 0.0
        shared = sum((a & b).values())
        diff = union - shared
        if self.warp == 1.0:
            return shared / union
        return (union ** self.warp - diff ** self.warp) / union ** self.warp

    def score(self, query: PreparedText, target: PreparedText) -> float:
        if not query.text or not target.text:
            return 0.0
        if query.text == target.text:
            return 1.0

        best = self.similarity(query.grams, target.grams)
        for grams in target.word_grams:
            best = max(best, self.similarity(query.grams, grams))
        if query.text in target.text:
            coverage = len(query.text) / len(target.text)
            best = max(best, SUBSTRING_FLOOR + (1.0 - SUBSTRING_FLOOR) * coverage)
        return min(best, 1.0)
