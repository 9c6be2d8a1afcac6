"""
Lexicon-based sentiment and emotion scoring.

Sentiment is decided by counting positive and negative lexicon entries in the
lower-cased text:

    positive  if pos > neg
    negative  if neg > pos
    neutral   otherwise

    confidence = min(cap, 0.5 + 0.1 * |pos - neg|)

Lexicons that define intensifiers scale both counts by
``1 + 0.3 * (intensifiers present)`` before the comparison. Emotion labels
are detected independently; a text can carry any number of them.
"""

import logging
import re
from typing import Dict, List, Pattern

from pydantic import BaseModel, Field

from trend_monitor.processing.interfaces import BaseSentimentScorer
from trend_monitor.types import Sentiment, SentimentResult

logger = logging.getLogger(__name__)

BASE_CONFIDENCE = 0.5
CONFIDENCE_STEP = 0.1
INTENSIFIER_STEP = 0.3


class SentimentLexicon(BaseModel):
    """Word lists and constants for one language variant."""

    name: str
    positive: List[str]
    negative: List[str]
    emotions: Dict[str, List[str]] = Field(default_factory=dict)
    intensifiers: List[str] = Field(default_factory=list)
    confidence_cap: float = 0.9
    # Prefix matching tolerates inflected forms ("hyvää" matches "hyvä")
    whole_words: bool = True

    class Config:
        frozen = True


FINNISH_LEXICON = SentimentLexicon(
    name="fi",
    positive=[
        "hyvä", "loistava", "mahtava", "upea", "erinomainen", "fantastinen",
        "sairaan hyvä", "huippu", "kova", "siisti", "mukava", "kaunis",
        "ihana", "täydellinen", "hienoa", "positiivinen", "onnellinen",
    ],
    negative=[
        "huono", "kamala", "hirveä", "syvältä", "paska", "kurja", "perseestä",
        "älytön", "typerä", "säälittävä", "ikävä", "väärä", "vaikea",
        "surullinen", "vihainen", "pettynyt", "harmillinen",
    ],
    emotions={
        "sadness": ["surullinen", "murhe", "suru", "itku", "menetys", "kaiho"],
        "joy": ["iloinen", "onnellinen", "riemu", "nauru", "hymy", "riemastus"],
        "anger": ["vihainen", "suuttunut", "raivo", "ärsyttää", "kiukku", "ärtymys"],
        "fear": ["pelko", "pelottaa", "kauhu", "jännitys", "huoli", "ahdistus"],
        "surprise": ["yllätys", "hämmästys", "ihme", "uskomaton", "odottamaton"],
        "disgust": ["inho", "vastenmielinen", "kuvottava", "iljettävä", "ruma"],
    },
    intensifiers=[
        "sika", "tosi", "ihan", "aivan", "helvetin", "saatanan", "todella",
        "erittäin", "hyvin",
    ],
    confidence_cap=0.95,
    whole_words=False,
)

ENGLISH_LEXICON = SentimentLexicon(
    name="en",
    positive=[
        "good", "great", "excellent", "amazing", "awesome", "best", "love",
        "fantastic", "wonderful", "brilliant", "impressive", "outstanding",
        "perfect", "success", "innovative", "recommend",
    ],
    negative=[
        "bad", "terrible", "awful", "worst", "hate", "poor", "disappointing",
        "horrible", "failure", "broken", "useless", "scam", "boycott",
        "lawsuit", "recall",
    ],
    emotions={
        "joy": ["happy", "joy", "delighted", "excited", "glad", "thrilled"],
        "sadness": ["sad", "sorrow", "grief", "heartbroken", "unhappy"],
        "anger": ["angry", "furious", "outrage", "rage", "annoyed"],
        "fear": ["afraid", "fear", "scared", "worried", "anxious"],
        "surprise": ["surprised", "surprising", "unexpected", "shocking", "astonishing"],
        "disgust": ["disgusting", "gross", "revolting", "sickening"],
    },
    confidence_cap=0.9,
    whole_words=True,
)


def _compile(word: str, whole_word: bool) -> Pattern:
    pattern = r"(?<!\w)" + re.escape(word)
    if whole_word:
        pattern += r"(?!\w)"
    return re.compile(pattern)


class LexiconSentimentScorer(BaseSentimentScorer):
    """
    Sentiment scorer driven by a ``SentimentLexicon``.

    Stateless after construction; scoring the same text twice yields the
    same result.
    """

    def __init__(self, lexicon: SentimentLexicon):
        self.lexicon = lexicon
        self._positive = [_compile(w, lexicon.whole_words) for w in lexicon.positive]
        self._negative = [_compile(w, lexicon.whole_words) for w in lexicon.negative]
        self._intensifiers = [_compile(w, True) for w in lexicon.intensifiers]
        self._emotions = {
            label: [_compile(w, lexicon.whole_words) for w in words]
            for label, words in lexicon.emotions.items()
        }

    def score(self, text: str) -> SentimentResult:
        if not text or not text.strip():
            return SentimentResult()

        lowered = text.lower()

        intensity = 1.0 + INTENSIFIER_STEP * sum(
            1 for p in self._intensifiers if p.search(lowered)
        )
        positive = sum(len(p.findall(lowered)) for p in self._positive) * intensity
        negative = sum(len(p.findall(lowered)) for p in self._negative) * intensity

        emotions = [
            label
            for label, patterns in self._emotions.items()
            if any(p.search(lowered) for p in patterns)
        ]

        if positive > negative:
            sentiment = Sentiment.POSITIVE
        elif negative > positive:
            sentiment = Sentiment.NEGATIVE
        else:
            return SentimentResult(emotions=emotions, intensity=intensity)

        confidence = min(
            self.lexicon.confidence_cap,
            BASE_CONFIDENCE + CONFIDENCE_STEP * abs(positive - negative),
        )

        return SentimentResult(
            sentiment=sentiment,
            confidence=round(confidence, 4),
            emotions=emotions,
            intensity=intensity,
        )
