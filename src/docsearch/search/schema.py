"""Document schema, analyzers and field naming shared by the composer and backend.

Every indexed document carries its text twice:

* ``title``/``description`` analyzed with the *exact* analyzer (tokenize +
  lowercase, no stop words, no stemming). These fields are stored and feed the
  literal-form boosts.
* ``title_<lang>``/``description_<lang>`` analyzed with the document language's
  stop words (one-character terms kept) and snowball stemmer. Only the field
  matching the document language is populated.

The URL path basename is indexed into ``basename`` with the exact analyzer so
queries such as "obama hud" reach ``/archives/obama-visits-hud.html``.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache
from typing import TYPE_CHECKING, Any, List
from urllib.parse import urlparse

from whoosh.analysis import LowercaseFilter, RegexTokenizer, StemFilter, StopFilter
from whoosh.fields import DATETIME, ID, KEYWORD, TEXT, Schema

from docsearch.exceptions import InvalidRequest

if TYPE_CHECKING:
    from whoosh.analysis import Analyzer

TEXT_FIELDS = ("title", "description")
BASENAME_FIELD = "basename"
LANGUAGE_FIELD = "language"
CORE_STORED_FIELDS = frozenset({"title", "description", "language", "path"})


class Language(str, Enum):
    """Languages with both a stop word list and a stemmer in Whoosh."""

    EN = "en"
    ES = "es"
    FR = "fr"
    DE = "de"
    IT = "it"
    PT = "pt"

    @classmethod
    def parse(cls, value: Any) -> "Language":
        """Accept a Language or a case-insensitive code such as "en" or "FR"."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        supported = ", ".join(lang.value for lang in cls)
        raise InvalidRequest(f"Unsupported language {value!r}. Supported: {supported}")


def language_field(base: str, language: Language) -> str:
    """Name of the stemmed variant of `base` for `language`, e.g. ``title_fr``."""
    return f"{base}_{language.value}"


@lru_cache(maxsize=None)
def exact_analyzer() -> Analyzer:
    return RegexTokenizer() | LowercaseFilter()


@lru_cache(maxsize=None)
def language_analyzer(language: Language) -> Analyzer:
    # minsize=1 keeps one-character terms such as "1" or "c" searchable
    return (
        RegexTokenizer()
        | LowercaseFilter()
        | StopFilter(lang=language.value, minsize=1)
        | StemFilter(lang=language.value)
    )


def analyze(analyzer: Analyzer, text: str) -> List[str]:
    """Run `analyzer` over `text` and return the token strings in order."""
    return [token.text for token in analyzer(text)]


_NON_WORD = re.compile(r"[\W_]+", re.UNICODE)


def path_basename_text(path: str) -> str:
    """Turn the last URL path segment into space-separated words.

    ``http://www.agency.gov/archives/obama-visits-hud.html`` -> ``obama visits hud``
    """
    if not path:
        return ""
    segment = urlparse(path).path.rstrip("/").rsplit("/", 1)[-1]
    if "." in segment:
        segment = segment.rsplit(".", 1)[0]
    return _NON_WORD.sub(" ", segment).strip()


def build_schema() -> Schema:
    exact = exact_analyzer()
    schema = Schema(
        id=ID(stored=True, unique=True),
        language=ID(stored=True),
        path=ID(stored=True),
        title=TEXT(stored=True, analyzer=exact),
        description=TEXT(stored=True, analyzer=exact),
        basename=TEXT(analyzer=exact),
        created=DATETIME(stored=True),
        changed=DATETIME(stored=True),
        tags=KEYWORD(stored=True, commas=True, lowercase=True),
    )
    for lang in Language:
        analyzer = language_analyzer(lang)
        for base in TEXT_FIELDS:
            schema.add(language_field(base, lang), TEXT(analyzer=analyzer))
    return schema
