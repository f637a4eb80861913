"""Query composition for relevance-tuned document search.

`QueryComposer.compose()` turns free text into a `QueryDocument`: a Whoosh
scoring query (stemmed multi-field match, URL basename terms, phrase boosts and
literal-form boosts), one recall clause per distinct query token with the
number of them a document must satisfy, and the language filter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from fractions import Fraction
from typing import Any, List, Optional, Tuple

from whoosh.query import NullQuery, Or, Phrase, Query, Term

from docsearch.config import RelevanceConfig
from docsearch.exceptions import InvalidQuery
from docsearch.search.schema import (
    BASENAME_FIELD,
    LANGUAGE_FIELD,
    Language,
    analyze,
    exact_analyzer,
    language_analyzer,
    language_field,
)


@dataclass(frozen=True)
class QueryDocument:
    """Composed query handed to a search backend.

    Attributes
    ----------
    text: str
        The raw query text.
    language: Language
        Requested language; only documents tagged with it may match.
    scoring: Query
        Query whose score orders the hits.
    recall: tuple[Query, ...]
        One clause per distinct query token.
    minimum_should_match: int
        How many `recall` clauses a document must satisfy to be a hit.
    filter: Query
        Hard, non-scoring restriction (the language term).
    """

    text: str
    language: Language
    scoring: Query
    recall: Tuple[Query, ...]
    minimum_should_match: int
    filter: Query

    @property
    def matches_nothing(self) -> bool:
        return not self.recall or self.minimum_should_match <= 0


class QueryComposer:
    """Builds `QueryDocument`s using the boosts from `RelevanceConfig`."""

    def __init__(self, relevance: Optional[RelevanceConfig] = None) -> None:
        self.relevance = relevance or RelevanceConfig()
        # 6/7 as a float does not multiply back to whole numbers exactly
        self._ratio = Fraction(self.relevance.min_should_match_ratio).limit_denominator(1000)

    def required_matches(self, token_count: int) -> int:
        """Number of distinct tokens a document must contain out of `token_count`."""
        if token_count <= 0:
            return 0
        return max(1, math.floor(token_count * self._ratio))

    def compose(self, query: Any, language: Any) -> QueryDocument:
        if not isinstance(query, str):
            raise InvalidQuery(f"Query must be a string, got {type(query).__name__}")
        language = Language.parse(language)
        filter_q = Term(LANGUAGE_FIELD, language.value)

        tokens = self._distinct_tokens(query, language)
        if not tokens:
            return QueryDocument(
                text=query,
                language=language,
                scoring=NullQuery,
                recall=(),
                minimum_should_match=0,
                filter=filter_q,
            )

        return QueryDocument(
            text=query,
            language=language,
            scoring=self._scoring_query(query, language, tokens),
            recall=tuple(self._recall_clause(literal, stem, language) for literal, stem in tokens),
            minimum_should_match=self.required_matches(len(tokens)),
            filter=filter_q,
        )

    def _distinct_tokens(self, query: str, language: Language) -> List[Tuple[str, str]]:
        """Return (literal, stemmed) pairs, one per distinct non-stop-word token."""
        analyzer = language_analyzer(language)
        pairs: List[Tuple[str, str]] = []
        for literal in dict.fromkeys(analyze(exact_analyzer(), query)):
            stems = analyze(analyzer, literal)
            if stems:
                pairs.append((literal, stems[0]))
        return pairs

    def _recall_clause(self, literal: str, stem: str, language: Language) -> Query:
        return Or(
            [
                Term(language_field("title", language), stem),
                Term(language_field("description", language), stem),
                Term("title", literal),
                Term("description", literal),
                Term(BASENAME_FIELD, literal),
            ]
        )

    def _scoring_query(
        self, query: str, language: Language, tokens: List[Tuple[str, str]]
    ) -> Query:
        r = self.relevance
        title_field = language_field("title", language)
        description_field = language_field("description", language)

        clauses: List[Query] = []
        for literal, stem in tokens:
            clauses.append(Term(title_field, stem, boost=r.title_boost))
            clauses.append(Term(description_field, stem, boost=r.description_boost))
            clauses.append(Term("title", literal, boost=r.exact_boost))
            clauses.append(Term("description", literal, boost=r.exact_boost))
            clauses.append(Term(BASENAME_FIELD, literal, boost=r.basename_boost))

        stems = analyze(language_analyzer(language), query)
        if len(stems) > 1:
            clauses.append(Phrase(title_field, stems, boost=r.phrase_boost))
            clauses.append(Phrase(description_field, stems, boost=r.phrase_boost))

        literals = analyze(exact_analyzer(), query)
        if len(literals) > 1:
            literal_boost = r.exact_boost * r.phrase_boost
            clauses.append(Phrase("title", literals, boost=literal_boost))
            clauses.append(Phrase("description", literals, boost=literal_boost))

        return Or(clauses)
