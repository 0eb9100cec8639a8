"""Incremental fuzzy search index over card and tag text."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from tui_kanban.core.constants import DEFAULT_SEARCH_LIMIT, DEFAULT_SEARCH_THRESHOLD
from tui_kanban.core.state import AppState
from tui_kanban.search.scoring import NGramScorer, PreparedText, Scorer, normalize

logger = logging.getLogger(__name__)

DESCRIPTION_WEIGHT = 0.8


class EntityKind(Enum):
    CARD = "card"
    TAG = "tag"


@dataclass(frozen=True)
class SearchHit:
    entity_id: int
    score: float
    kind: EntityKind


@dataclass
class _Entry:
    entity_id: int
    kind: EntityKind
    name: str
    fields: tuple[tuple[PreparedText, float], ...]
    stamp: int

    @property
    def keys(self) -> set[str]:
        keys: set[str] = set()
        for prepared, _ in self.fields:
            keys |= prepared.keys
        return keys


class SearchIndex:
    """
    Fuzzy index of card titles, card descriptions and tag names.

    Entries are keyed by entity id (ids are unique across kinds). An
    inverted map from gram to entity ids limits each query to entities
    sharing at least one gram with it. update() touches only the ids it
    is given, so the cost of keeping the index current does not grow
    with the number of cards.

    Each (re)indexed entry receives an increasing stamp; equal scores are
    ordered most recently indexed first.
    """

    def __init__(
        self,
        scorer: Scorer | None = None,
        threshold: float = DEFAULT_SEARCH_THRESHOLD,
    ) -> None:
        self.scorer: Scorer = scorer or NGramScorer()
        self.threshold = threshold
        self._entries: dict[int, _Entry] = {}
        self._postings: dict[str, set[int]] = defaultdict(set)
        self._stamp = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entity_id: int) -> bool:
        return entity_id in self._entries

    # -------------------------------------------------------------------------
    # Maintenance
    # -------------------------------------------------------------------------

    def rebuild(self, state: AppState) -> None:
        """Index everything from scratch (after a load)."""
        self._entries.clear()
        self._postings.clear()
        cards = sorted(state.cards.values(), key=lambda c: c.modified_at)
        self.update(state, [t.id for t in state.tags.values()] + [c.id for c in cards])
        logger.debug("Search index rebuilt with %d entries", len(self._entries))

    def update(self, state: AppState, entity_ids: Iterable[int]) -> None:
        """Re-index the given ids; ids no longer in the state are dropped."""
        for entity_id in entity_ids:
            card = state.cards.get(entity_id)
            if card is not None:
                self._put(entity_id, EntityKind.CARD, card.title,
                          ((card.title, 1.0), (card.description, DESCRIPTION_WEIGHT)))
                continue
            tag = state.tags.get(entity_id)
            if tag is not None:
                self._put(entity_id, EntityKind.TAG, tag.name, ((tag.name, 1.0),))
                continue
            self._remove(entity_id)

    def _put(
        self,
        entity_id: int,
        kind: EntityKind,
        name: str,
        texts: tuple[tuple[str, float], ...],
    ) -> None:
        fields = tuple(
            (self.scorer.prepare(text), weight) for text, weight in texts if text.strip()
        )
        current = self._entries.get(entity_id)
        if current is not None and current.kind == kind and current.fields == fields:
            return
        self._remove(entity_id)
        self._stamp += 1
        entry = _Entry(entity_id, kind, name, fields, self._stamp)
        self._entries[entity_id] = entry
        for key in entry.keys:
            self._postings[key].add(entity_id)

    def _remove(self, entity_id: int) -> None:
        entry = self._entries.pop(entity_id, None)
        if entry is None:
            return
        for key in entry.keys:
            ids = self._postings.get(key)
            if ids is None:
                continue
            ids.discard(entity_id)
            if not ids:
                del self._postings[key]

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def search(
        self,
        text: str,
        limit: int = DEFAULT_SEARCH_LIMIT,
        kinds: Iterable[EntityKind] | None = None,
    ) -> list[SearchHit]:
        """Best matches first; an empty query matches nothing."""
        if limit <= 0 or not normalize(text):
            return []
        wanted = set(kinds) if kinds is not None else set(EntityKind)
        query = self.scorer.prepare(text)

        candidates: set[int] = set()
        for key in query.keys:
            candidates |= self._postings.get(key, set())

        scored: list[tuple[float, int, _Entry]] = []
        for entity_id in candidates:
            entry = self._entries[entity_id]
            if entry.kind not in wanted:
                continue
            score = max(
                (self.scorer.score(query, prepared) * weight for prepared, weight in entry.fields),
                default=0.0,
            )
            if score >= self.threshold:
                scored.append((score, entry.stamp, entry))

        scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
        return [
            SearchHit(entry.entity_id, round(score, 6), entry.kind)
            for score, _, entry in scored[:limit]
        ]

    def complete(
        self,
        prefix: str,
        kinds: Iterable[EntityKind] = (EntityKind.TAG,),
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[SearchHit]:
        """
        Autocomplete candidates for a partially typed name.

        Names starting with the prefix come first (most recent first),
        followed by fuzzy matches that are not prefix matches.
        """
        wanted = set(kinds)
        needle = normalize(prefix)
        if not needle or limit <= 0:
            return []

        prefixed = sorted(
            (
                e for e in self._entries.values()
                if e.kind in wanted and normalize(e.name).startswith(needle)
            ),
            key=lambda e: e.stamp,
            reverse=True,
        )
        hits = [SearchHit(e.entity_id, 1.0, e.kind) for e in prefixed[:limit]]
        seen = {hit.entity_id for hit in hits}
        for hit in self.search(prefix, limit, wanted):
            if len(hits) >= limit:
                break
            if hit.entity_id not in seen:
                hits.append(hit)
                seen.add(hit.entity_id)
        return hits
