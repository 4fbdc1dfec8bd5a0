# analyzers/clickbait_analyzer.py
# Detects sensational / clickbait phrasing

from typing import Mapping, Sequence

import config
from models import PatternScore


class ClickbaitAnalyzer:
    """
    Adds a fixed increment per phrase category match:
    - urgency phrases
    - exaggeration phrases
    - vague attribution phrases
    plus a penalty for excessive question marks.
    """

    def __init__(self,
                 phrases: Mapping[str, Sequence[str]] = config.CLICKBAIT_PHRASES,
                 weights: Mapping[str, float] = config.CLICKBAIT_WEIGHTS,
                 question_limit: int = config.CLICKBAIT_QUESTION_LIMIT,
                 question_penalty: float = config.CLICKBAIT_QUESTION_PENALTY):
        self.phrases = phrases
        self.weights = weights
        self.question_limit = question_limit
        self.question_penalty = question_penalty

    def analyze(self, text: str) -> PatternScore:
        lower = text.lower()
        score = 0.0
        matched = []

        for category, phrases in self.phrases.items():
            increment = self.weights.get(category, 0.0)
            for phrase in phrases:
                if phrase in lower:
                    score += increment
                    matched.append(phrase)

        if text.count('?') > self.question_limit:
            score += self.question_penalty

        score = round(min(score, 1.0), 3)
        return PatternScore(score=score, label=self._label(score), matches=tuple(matched))

    def _label(self, score: float) -> str:
        if score >= 0.5:
            return "Strong clickbait"
        elif score >= 0.25:
            return "Some clickbait"
        return "No clickbait"
