"""
Combined text analysis for one search result.

``TextAnalyzer`` detects the language first and then runs the sentiment
scorer and keyword extractor of that language's profile, plus location
detection. Finnish text gets the Finnish profile; everything else gets the
English one.
"""

import logging
from typing import Dict, Optional

from trend_monitor.config import Settings
from trend_monitor.processing.interfaces import (
    KeywordExtractionStrategy,
    LanguageDetector,
    SentimentScorer,
)
from trend_monitor.processing.keywords import BASIC_KEYWORDS, FINNISH_KEYWORDS, KeywordExtractor
from trend_monitor.processing.language import IndicatorLanguageDetector, create_language_detector
from trend_monitor.processing.location import detect_location
from trend_monitor.processing.sentiment import (
    ENGLISH_LEXICON,
    FINNISH_LEXICON,
    LexiconSentimentScorer,
)
from trend_monitor.types import AnalysisResult, Language

logger = logging.getLogger(__name__)


class AnalysisProfile:
    """Sentiment scorer and keyword extractor used for one language."""

    def __init__(self, sentiment: SentimentScorer, keywords: KeywordExtractionStrategy):
        self.sentiment = sentiment
        self.keywords = keywords


def finnish_profile() -> AnalysisProfile:
    return AnalysisProfile(
        sentiment=LexiconSentimentScorer(FINNISH_LEXICON),
        keywords=KeywordExtractor(FINNISH_KEYWORDS),
    )


def english_profile() -> AnalysisProfile:
    return AnalysisProfile(
        sentiment=LexiconSentimentScorer(ENGLISH_LEXICON),
        keywords=KeywordExtractor(BASIC_KEYWORDS),
    )


class TextAnalyzer:
    """
    Runs all text analyzers over a result's text.

    Args:
        language_detector: Detector deciding which profile to use
        profiles: Per-language profiles; languages without a profile use
            ``default_profile``
        default_profile: Profile for languages not in ``profiles``
    """

    def __init__(
        self,
        language_detector: Optional[LanguageDetector] = None,
        profiles: Optional[Dict[Language, AnalysisProfile]] = None,
        default_profile: Optional[AnalysisProfile] = None,
    ):
        self.language_detector = language_detector or IndicatorLanguageDetector()
        self.profiles = profiles if profiles is not None else {Language.FINNISH: finnish_profile()}
        self.default_profile = default_profile or english_profile()

    def profile_for(self, language: Language) -> AnalysisProfile:
        return self.profiles.get(language, self.default_profile)

    def analyze(self, text: str, keyword_text: str, search_keyword: str) -> AnalysisResult:
        """
        Analyze a result.

        Args:
            text: Text for sentiment, language and location (content or title)
            keyword_text: Text for keyword extraction (title and content)
            search_keyword: The keyword the user searched for

        Returns:
            Combined analysis result
        """
        language = self.language_detector.detect(text)
        profile = self.profile_for(language)

        sentiment = profile.sentiment.score(text)
        keywords = profile.keywords.extract(keyword_text, search_keyword)
        location = detect_location(text)

        logger.debug(
            f"Analyzed text: language={language.value}, "
            f"sentiment={sentiment.sentiment.value}, keywords={len(keywords)}"
        )

        return AnalysisResult(
            sentiment=sentiment.sentiment,
            confidence=sentiment.confidence,
            emotions=sentiment.emotions,
            intensity=sentiment.intensity,
            language=language,
            location=location,
            keywords=keywords,
        )


def create_analyzer(settings: Optional[Settings] = None) -> TextAnalyzer:
    """Build the default analyzer for the configured language detector."""
    detector_name = settings.language_detector if settings else "indicator"
    return TextAnalyzer(language_detector=create_language_detector(detector_name))
