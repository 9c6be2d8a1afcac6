"""
Text analysis interface contracts.

Each analyzer is a swappable strategy: the orchestrator only depends on
these protocols, so a lexicon scorer can later be replaced by a model-based
one without touching the ingestion code.
"""

from abc import ABC, abstractmethod
from typing import List, Protocol

from trend_monitor.types import ExtractedKeyword, Language, SentimentResult


class SentimentScorer(Protocol):
    """Interface for sentiment and emotion scoring."""

    def score(self, text: str) -> SentimentResult:
        """
        Score the polarity and emotions of a text.

        Args:
            text: Text to analyze

        Returns:
            Sentiment, confidence in [0, 1], detected emotion labels
        """
        ...


class LanguageDetector(Protocol):
    """Interface for language detection."""

    def detect(self, text: str) -> Language:
        """
        Detect the language of a text.

        Args:
            text: Text to analyze

        Returns:
            Detected language
        """
        ...


class KeywordExtractionStrategy(Protocol):
    """Interface for keyword extraction."""

    def extract(self, text: str, search_keyword: str) -> List[ExtractedKeyword]:
        """
        Extract keywords from a text.

        Args:
            text: Text to analyze
            search_keyword: The keyword the user searched for

        Returns:
            Keywords ordered by descending relevance
        """
        ...


# ============================================================================
# Abstract Base Classes (for implementations)
# ============================================================================


class BaseSentimentScorer(ABC):
    """Abstract base class for sentiment scorers."""

    @abstractmethod
    def score(self, text: str) -> SentimentResult:
        pass


class BaseLanguageDetector(ABC):
    """Abstract base class for language detectors."""

    @abstractmethod
    def detect(self, text: str) -> Language:
        pass
