# analyzers/sentiment_analyzer.py
# Scores emotional / sensational tone from static word lists

import re
from typing import Mapping, Sequence, Tuple

import config
from models import PatternScore


class SentimentAnalyzer:
    """
    Weighted count of emotional vocabulary.

    Each whole-word, case-insensitive occurrence of a word adds the weight of
    its intensity level (extreme / high / moderate). The sum is capped at 1.0.
    """

    def __init__(self,
                 emotional_words: Mapping[str, Sequence[str]] = config.EMOTIONAL_WORDS,
                 weights: Mapping[str, float] = config.EMOTION_WEIGHTS,
                 labels: Sequence[Tuple[float, str]] = config.EMOTION_LABELS):
        self.weights = weights
        self.labels = labels
        self.patterns = {
            level: [(word, re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)) for word in words]
            for level, words in emotional_words.items()
        }

    def analyze(self, text: str) -> PatternScore:
        score = 0.0
        matched = []

        for level, patterns in self.patterns.items():
            weight = self.weights.get(level, 0.0)
            for word, pattern in patterns:
                occurrences = len(pattern.findall(text))
                if occurrences:
                    score += occurrences * weight
                    matched.append(word)

        score = round(min(score, 1.0), 3)
        return PatternScore(score=score, label=self.label_for(score), matches=tuple(matched))

    def label_for(self, score: float) -> str:
        for threshold, label in self.labels:
            if score > threshold:
                return label
        return "Neutral"
