"""
Frequency-based keyword extraction.

Relevance of a token is its frequency among the kept tokens, boosted when it
overlaps the searched keyword and, for Finnish, when it looks like a compound
word. Results are sorted by relevance with first-seen order kept for ties.
"""

import re
from collections import Counter
from typing import FrozenSet, List

from pydantic import BaseModel

from trend_monitor.types import ExtractedKeyword

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")

FINNISH_STOPWORDS = frozenset([
    "että", "olla", "se", "hän", "ja", "tämä", "kun", "niin", "kuin", "jos",
    "ei", "ole", "saada", "minä", "sinä", "me", "te", "he", "on", "en", "et",
    "emme", "ette", "eivät", "oli", "olit", "olimme", "olitte", "olivat",
    "olen", "olet", "olemme", "olette", "ovat", "mutta", "tai", "sekä",
    "vaan", "kuitenkin", "siis", "eli", "myös", "vielä", "jo", "aina",
    "koskaan", "joskus", "nyt", "sitten", "ensin", "vihdoin",
])

BASIC_STOPWORDS = frozenset([
    "että", "olla", "se", "hän", "ja", "tämä", "kun", "niin", "on", "ei",
    "ole", "the", "and", "is", "are", "this", "that", "with", "from", "have",
    "has", "was", "were", "will", "would", "about", "their", "there", "what",
    "when", "which", "your", "into", "than", "them", "been", "they",
])


class KeywordExtractionConfig(BaseModel):
    """Tuning constants for one keyword extractor variant."""

    name: str
    min_length: int
    keyword_boost: float
    compound_boost: float = 1.0
    compound_min_length: int = 10
    max_keywords: int
    stopwords: FrozenSet[str]

    class Config:
        frozen = True


BASIC_KEYWORDS = KeywordExtractionConfig(
    name="basic",
    min_length=3,
    keyword_boost=2.0,
    max_keywords=10,
    stopwords=BASIC_STOPWORDS,
)

FINNISH_KEYWORDS = KeywordExtractionConfig(
    name="fi",
    min_length=2,
    keyword_boost=2.5,
    compound_boost=1.5,
    max_keywords=15,
    stopwords=FINNISH_STOPWORDS,
)


def canonicalize_keyword(text: str) -> str:
    """Stripped, lower-cased keyword with inner whitespace collapsed."""
    return _WHITESPACE_RE.sub(" ", text.strip().lower())


class KeywordExtractor:
    """Keyword extractor parameterised by a ``KeywordExtractionConfig``."""

    def __init__(self, config: KeywordExtractionConfig = BASIC_KEYWORDS):
        self.config = config

    def tokenize(self, text: str) -> List[str]:
        """Lower-case tokens that pass the stopword and length filters."""
        cleaned = _PUNCTUATION_RE.sub(" ", text.lower())
        return [
            token
            for token in cleaned.split()
            if len(token) > self.config.min_length
            and token not in self.config.stopwords
        ]

    def extract(self, text: str, search_keyword: str) -> List[ExtractedKeyword]:
        if not text:
            return []

        tokens = self.tokenize(text)
        if not tokens:
            return []

        config = self.config
        searched = canonicalize_keyword(search_keyword or "")
        total = len(tokens)
        keywords = []

        for token, count in Counter(tokens).items():
            relevance = count / total
            if searched and (token in searched or searched in token):
                relevance *= config.keyword_boost
            is_compound = (
                config.compound_boost != 1.0 and len(token) > config.compound_min_length
            )
            if is_compound:
                relevance *= config.compound_boost
            keywords.append(
                ExtractedKeyword(keyword=token, relevance=relevance, is_compound=is_compound)
            )

        keywords.sort(key=lambda k: k.relevance, reverse=True)
        return keywords[: config.max_keywords]
