"""
Text analysis for ingested content.

Heuristic sentiment, emotion, language, location and keyword analyzers, the
per-language ``TextAnalyzer`` that combines them, and a linear mention-count
forecast.
"""

from trend_monitor.processing.analyzer import (
    AnalysisProfile,
    TextAnalyzer,
    create_analyzer,
    english_profile,
    finnish_profile,
)
from trend_monitor.processing.forecast import predict_trend
from trend_monitor.processing.keywords import (
    BASIC_KEYWORDS,
    FINNISH_KEYWORDS,
    KeywordExtractionConfig,
    KeywordExtractor,
    canonicalize_keyword,
)
from trend_monitor.processing.language import (
    IndicatorLanguageDetector,
    LangDetectLanguageDetector,
    create_language_detector,
)
from trend_monitor.processing.location import FINNISH_REGIONS, detect_location
from trend_monitor.processing.sentiment import (
    ENGLISH_LEXICON,
    FINNISH_LEXICON,
    LexiconSentimentScorer,
    SentimentLexicon,
)

__all__ = [
    "AnalysisProfile",
    "TextAnalyzer",
    "create_analyzer",
    "english_profile",
    "finnish_profile",
    "predict_trend",
    "BASIC_KEYWORDS",
    "FINNISH_KEYWORDS",
    "KeywordExtractionConfig",
    "KeywordExtractor",
    "canonicalize_keyword",
    "IndicatorLanguageDetector",
    "LangDetectLanguageDetector",
    "create_language_detector",
    "FINNISH_REGIONS",
    "detect_location",
    "ENGLISH_LEXICON",
    "FINNISH_LEXICON",
    "LexiconSentimentScorer",
    "SentimentLexicon",
]
