"""
Language detection for the analysis step.

The default detector counts indicator words for Finnish, Swedish and English.
An alternative detector uses the langdetect library and falls back to the
indicator counts for anything outside those three languages.
"""

import logging
import re
from typing import Dict, List, Optional

from langdetect import DetectorFactory, LangDetectException, detect_langs

from trend_monitor.processing.interfaces import BaseLanguageDetector
from trend_monitor.types import Language

# Set seed for reproducible results
DetectorFactory.seed = 0

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"\w+")

# Dict order is the tie-break order
LANGUAGE_INDICATORS: Dict[Language, List[str]] = {
    Language.FINNISH: [
        "että", "olla", "hän", "minä", "sinä", "kuitenkin", "siis",
        "ja", "ei", "ovat", "tämä", "mutta", "myös", "kanssa",
    ],
    Language.SWEDISH: [
        "att", "och", "är", "jag", "du", "han", "hon",
        "det", "inte", "som", "med", "för",
    ],
    Language.ENGLISH: [
        "the", "and", "is", "are", "that", "this", "with",
        "of", "for", "was", "have",
    ],
}


def tokenize(text: str) -> List[str]:
    """Lower-case word tokens of a text."""
    return _TOKEN_RE.findall(text.lower())


class IndicatorLanguageDetector(BaseLanguageDetector):
    """
    Indicator-word language detector.

    Scores each language by how many of the text's tokens are in its
    indicator list. The highest score wins; ties (including no indicators at
    all) resolve in the order fi, sv, en.
    """

    def __init__(self, indicators: Optional[Dict[Language, List[str]]] = None):
        indicators = indicators or LANGUAGE_INDICATORS
        self._indicators = {lang: set(words) for lang, words in indicators.items()}

    def scores(self, text: str) -> Dict[Language, int]:
        tokens = tokenize(text or "")
        return {
            lang: sum(1 for token in tokens if token in words)
            for lang, words in self._indicators.items()
        }

    def detect(self, text: str) -> Language:
        scores = self.scores(text)
        best = Language.FINNISH
        best_score = -1
        for lang, score in scores.items():
            if score > best_score:
                best, best_score = lang, score
        return best


class LangDetectLanguageDetector(BaseLanguageDetector):
    """
    Language detector backed by langdetect.

    Results other than fi, sv or en, and texts langdetect cannot handle, are
    decided by the indicator detector.
    """

    def __init__(self, fallback: Optional[BaseLanguageDetector] = None):
        self.fallback = fallback or IndicatorLanguageDetector()

    def detect(self, text: str) -> Language:
        if not text or len(text.strip()) < 3:
            return self.fallback.detect(text)

        try:
            langs = detect_langs(text)
        except LangDetectException as e:
            logger.debug(f"langdetect failed: {e}, using indicator words")
            return self.fallback.detect(text)

        for candidate in langs:
            try:
                return Language(candidate.lang)
            except ValueError:
                continue

        return self.fallback.detect(text)


def create_language_detector(name: str) -> BaseLanguageDetector:
    """
    Build a language detector by configuration name.

    Args:
        name: ``indicator`` or ``langdetect``

    Returns:
        Language detector instance

    Raises:
        ValueError: If the name is unknown
    """
    if name == "indicator":
        return IndicatorLanguageDetector()
    if name == "langdetect":
        return LangDetectLanguageDetector()
    raise ValueError(f"Unknown language detector: {name}")
