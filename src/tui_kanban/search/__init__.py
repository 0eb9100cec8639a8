"""Fuzzy search and autocomplete."""

from tui_kanban.search.index import EntityKind, SearchHit, SearchIndex
from tui_kanban.search.scoring import NGramScorer, PreparedText, Scorer, normalize

__all__ = [
    "EntityKind",
    "SearchHit",
    "SearchIndex",
    "NGramScorer",
    "PreparedText",
    "Scorer",
    "normalize",
]
