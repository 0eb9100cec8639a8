"""Tests for fuzzy search and autocomplete."""

import pytest

from tui_kanban.commands import CreateCard, CreateTag, DeleteCard, DeleteTag, EditCardFields
from tui_kanban.search import EntityKind, NGramScorer, SearchIndex, normalize


@pytest.fixture
def index(sample) -> SearchIndex:
    index = SearchIndex()
    index.rebuild(sample.state)
    return index


def ids(hits) -> list[int]:
    return [hit.entity_id for hit in hits]


class TestNormalize:
    """Tests for normalize()."""

    def test_casefold_and_whitespace(self) -> None:
        assert normalize("  Write\tSPEC \n") == "write spec"

    def test_compatibility_forms(self) -> None:
        assert normalize("ＷＲＩＴＥ") == "write"
        assert normalize("Straße") == "strasse"


class TestNGramScorer:
    """Tests for NGramScorer."""

    def test_exact_match(self) -> None:
        scorer = NGramScorer()
        assert scorer.score(scorer.prepare("Write Spec"), scorer.prepare("write spec")) == 1.0

    def test_substring_scores_high(self) -> None:
        scorer = NGramScorer()
        score = scorer.score(scorer.prepare("spe"), scorer.prepare("Write spec"))
        assert 0.9 <= score < 1.0

    def test_typo_still_similar(self) -> None:
        scorer = NGramScorer()
        typo = scorer.score(scorer.prepare("wriet"), scorer.prepare("Write spec"))
        unrelated = scorer.score(scorer.prepare("wriet"), scorer.prepare("Buy milk"))
        assert typo > 0.25
        assert unrelated == 0.0

    def test_empty_text(self) -> None:
        scorer = NGramScorer()
        assert scorer.score(scorer.prepare(""), scorer.prepare("anything")) == 0.0

    def test_warp_one_is_jaccard(self) -> None:
        scorer = NGramScorer(gram_size=1, warp=1.0)
        # grams {a, b} vs {a, c}: 1 shared of 3
        assert scorer.similarity(scorer.grams("ab"), scorer.grams("ac")) == pytest.approx(1 / 3)

    @pytest.mark.parametrize("kwargs", [{"gram_size": 0}, {"warp": 0.5}, {"warp": 3.5}])
    def test_rejects_bad_settings(self, kwargs) -> None:
        with pytest.raises(ValueError):
            NGramScorer(**kwargs)


class TestSearchIndex:
    """Tests for SearchIndex.search()."""

    def test_indexes_cards_and_tags(self, sample, index) -> None:
        assert len(index) == 4
        assert sample.tag_id in index

    def test_typo_finds_card(self, sample, index) -> None:
        hits = index.search("wriet")
        assert ids(hits)[0] == sample.card_ids[0]
        assert hits[0].kind is EntityKind.CARD
        assert sample.card_ids[2] not in ids(hits)

    def test_empty_query(self, index) -> None:
        assert index.search("") == []
        assert index.search("   ") == []

    def test_no_match(self, index) -> None:
        assert index.search("zzzz") == []

    def test_kind_filter(self, sample, index) -> None:
        assert ids(index.search("urgent", kinds=[EntityKind.TAG])) == [sample.tag_id]
        assert index.search("urgent", kinds=[EntityKind.CARD]) == []

    def test_limit(self, sample, index) -> None:
        for n in range(5):
            CreateCard(sample.done_id, f"Spec part {n}").apply(sample.state)
        index.update(sample.state, sample.state.drain_changes())
        assert len(index.search("spec", limit=3)) == 3
        assert index.search("spec", limit=0) == []

    def test_description_matches_weighted(self, sample, index) -> None:
        state = sample.state
        EditCardFields(sample.card_ids[2], description="write a spec first").apply(state)
        index.update(state, state.drain_changes())
        hits = index.search("write spec")
        assert ids(hits)[:2] == [sample.card_ids[0], sample.card_ids[2]]
        assert hits[1].score <= 0.8

    def test_unicode_query(self, sample, index) -> None:
        assert ids(index.search("ＷＲＩＴＥ"))[0] == sample.card_ids[0]

    def test_ties_prefer_recent(self, sample) -> None:
        state = sample.state
        first = CreateCard(sample.done_id, "Deploy").apply(state).card_id
        second = CreateCard(sample.done_id, "Deploy").apply(state).card_id
        state.drain_changes()

        index = SearchIndex()
        index.update(state, [first])
        index.update(state, [second])
        assert ids(index.search("deploy")) == [second, first]

        # Re-indexing unchanged text does not refresh the entry
        index.update(state, [first])
        assert ids(index.search("deploy")) == [second, first]

        EditCardFields(first, description="to staging").apply(state)
        index.update(state, state.drain_changes())
        assert ids(index.search("deploy")) == [first, second]


class TestIncrementalUpdate:
    """Tests for SearchIndex.update()."""

    def test_edit_is_reindexed(self, sample, index) -> None:
        state = sample.state
        EditCardFields(sample.card_ids[1], title="Merge branch").apply(state)
        index.update(state, state.drain_changes())
        assert ids(index.search("merge")) == [sample.card_ids[1]]
        assert sample.card_ids[1] not in ids(index.search("review"))

    def test_deleted_entities_are_dropped(self, sample, index) -> None:
        state = sample.state
        DeleteCard(sample.card_ids[0]).apply(state)
        DeleteTag(sample.tag_id).apply(state)
        index.update(state, state.drain_changes())
        assert sample.card_ids[0] not in index
        assert sample.tag_id not in index
        assert index.search("write spec") == []

    def test_rebuild_matches_incremental(self, sample, index) -> None:
        state = sample.state
        CreateTag("waiting").apply(state)
        EditCardFields(sample.card_ids[2], title="Buy oat milk").apply(state)
        index.update(state, state.drain_changes())

        fresh = SearchIndex()
        fresh.rebuild(state)
        for query in ("milk", "wait", "spec"):
            assert ids(index.search(query)) == ids(fresh.search(query))


class TestComplete:
    """Tests for SearchIndex.complete()."""

    def test_prefix_first(self, sample, index) -> None:
        state = sample.state
        urge = CreateTag("urge").apply(state).tag_id
        CreateTag("blurgent").apply(state)
        index.update(state, state.drain_changes())

        hits = index.complete("urg")
        assert ids(hits)[:2] == [urge, sample.tag_id]
        names = [state.tags[hit.entity_id].name for hit in hits]
        assert "blurgent" in names[2:]

    def test_only_tags_by_default(self, index) -> None:
        assert index.complete("wri") == []

    def test_empty_prefix(self, index) -> None:
        assert index.complete("") == []
