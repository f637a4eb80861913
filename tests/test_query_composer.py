from typing import List

import pytest
from whoosh.query import NullQuery, Or, Phrase, Term

from docsearch.config import RelevanceConfig
from docsearch.exceptions import InvalidQuery, InvalidRequest
from docsearch.search.composer import QueryComposer
from docsearch.search.schema import Language, analyze, language_analyzer

# ---------- Minimum-should-match threshold ----------


@pytest.mark.parametrize(
    "token_count,expected",
    [(0, 0), (1, 1), (2, 1), (3, 2), (6, 5), (7, 6), (8, 6), (14, 12)],
)
def test_required_matches_uses_six_sevenths(token_count: int, expected: int) -> None:
    assert QueryComposer().required_matches(token_count) == expected


def test_required_matches_follows_configured_ratio() -> None:
    composer = QueryComposer(RelevanceConfig(min_should_match_ratio=1.0))

    assert composer.required_matches(2) == 2
    assert composer.required_matches(7) == 7


# ---------- Clause construction ----------


def _phrases(query: Or) -> List[Phrase]:
    return [q for q in query.subqueries if isinstance(q, Phrase)]


def _terms(query: Or, fieldname: str) -> List[Term]:
    return [q for q in query.subqueries if isinstance(q, Term) and q.fieldname == fieldname]


def test_compose_builds_one_recall_clause_per_distinct_token() -> None:
    doc = QueryComposer().compose("news News memorials", Language.EN)

    assert len(doc.recall) == 2
    assert doc.minimum_should_match == 1
    assert not doc.matches_nothing


def test_compose_drops_stop_words_from_the_token_count() -> None:
    doc = QueryComposer().compose("the jefferson memorial", "en")

    assert len(doc.recall) == 2


def test_compose_matches_stemmed_and_literal_forms() -> None:
    doc = QueryComposer().compose("memorials", "en")
    stem = analyze(language_analyzer(Language.EN), "memorials")[0]

    assert [t.text for t in _terms(doc.scoring, "title_en")] == [stem]
    assert [t.text for t in _terms(doc.scoring, "description_en")] == [stem]
    assert [t.text for t in _terms(doc.scoring, "title")] == ["memorials"]
    assert [t.text for t in _terms(doc.scoring, "basename")] == ["memorials"]


def test_compose_uses_boosts_from_configuration() -> None:
    relevance = RelevanceConfig(title_boost=4.0, exact_boost=2.5, phrase_boost=7.0)
    doc = QueryComposer(relevance).compose("jefferson memorial", "en")

    assert {t.boost for t in _terms(doc.scoring, "title_en")} == {4.0}
    assert {t.boost for t in _terms(doc.scoring, "description")} == {2.5}
    boosts = {p.fieldname: p.boost for p in _phrases(doc.scoring)}
    assert boosts["title_en"] == 7.0
    assert boosts["title"] == 2.5 * 7.0


def test_compose_adds_phrase_clauses_for_multi_token_queries() -> None:
    single = QueryComposer().compose("jefferson", "en")
    multi = QueryComposer().compose("jefferson Memorial", "en")

    assert _phrases(single.scoring) == []
    phrases = {p.fieldname: list(p.words) for p in _phrases(multi.scoring)}
    assert set(phrases) == {"title_en", "description_en", "title", "description"}
    assert phrases["title"] == ["jefferson", "memorial"]


def test_compose_uses_language_specific_fields_and_filter() -> None:
    doc = QueryComposer().compose("america", "fr")

    assert doc.language is Language.FR
    assert doc.filter == Term("language", "fr")
    assert _terms(doc.scoring, "title_fr")
    assert not _terms(doc.scoring, "title_en")


def test_single_character_tokens_are_kept() -> None:
    doc = QueryComposer().compose("vitamin c 1", "en")

    assert len(doc.recall) == 3
    assert doc.minimum_should_match == 2
    assert "c" in [t.text for t in _terms(doc.scoring, "title_en")]


# ---------- Degenerate input ----------


@pytest.mark.parametrize("query", ["", "    ", "the of and"])
def test_compose_returns_a_query_matching_nothing(query: str) -> None:
    doc = QueryComposer().compose(query, "en")

    assert doc.matches_nothing
    assert doc.recall == ()
    assert doc.scoring is NullQuery


@pytest.mark.parametrize("query", [None, 7, ["common"], b"common"])
def test_compose_rejects_non_string_queries(query: object) -> None:
    with pytest.raises(InvalidQuery):
        QueryComposer().compose(query, "en")


def test_compose_rejects_unsupported_languages() -> None:
    with pytest.raises(InvalidRequest):
        QueryComposer().compose("common", "klingon")
