# analyzers/language_analyzer.py
# Analyzes writing patterns: citations, hedging, attribution, specificity

import re
from typing import List, Optional, Sequence

import config
from models import ContentQuality, CredibilityPatternScore

DATE_PATTERN = re.compile(
    r"\b(?:january|february|march|april|may|june|july|august|september|october|"
    r"november|december|monday|tuesday|wednesday|thursday|friday|saturday|sunday|"
    r"yesterday|today|this week|last week)\b|\b\d{4}-\d{2}-\d{2}\b",
    re.IGNORECASE,
)
QUOTE_PATTERN = re.compile(r"[\"“][^\"”]{10,}[\"”]")
NUMBER_PATTERN = re.compile(r"\d+")
CAPITALIZED_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)?\b")
SENTENCE_SPLIT = re.compile(r"[.!?]+")


class LanguageAnalyzer:
    """
    Analyzes article language based on:
    - Citation and attribution patterns
    - Passive voice and hedging
    - Shouting (ALL CAPS) and trailing ellipses
    - Specificity (numbers, names, dates) and evidence strength
    """

    def __init__(self,
                 citation_patterns: Sequence[str] = config.CITATION_PATTERNS,
                 hedging_words: Sequence[str] = config.HEDGING_WORDS,
                 vague_patterns: Sequence[str] = config.VAGUE_ATTRIBUTION_PATTERNS):
        self.citation_patterns = [re.compile(p, re.IGNORECASE) for p in citation_patterns]
        self.hedging_patterns = [re.compile(rf"\b{re.escape(w)}\b", re.IGNORECASE) for w in hedging_words]
        self.vague_patterns = [re.compile(p, re.IGNORECASE) for p in vague_patterns]
        self.passive_pattern = re.compile(config.PASSIVE_VOICE_PATTERN, re.IGNORECASE)
        self.caps_pattern = re.compile(config.ALL_CAPS_PATTERN)

    def analyze(self, text: str) -> CredibilityPatternScore:
        """
        Score credibility patterns starting from 1.0.

        Issues are recorded in check order so the explanation reads the same
        way every time.
        """
        score = 1.0
        issues: List[str] = []
        words = text.split()
        word_count = max(len(words), 1)

        citations = self._count_citations(text)
        if citations >= 2:
            score += 0.15
        elif citations == 0:
            score -= 0.15
            issues.append("No citations or attributed sources found")

        passive_ratio = len(self.passive_pattern.findall(text)) / word_count
        if passive_ratio > config.PASSIVE_VOICE_MAX_RATIO:
            score -= 0.10
            issues.append("Excessive passive voice obscures who did what")

        hedging = sum(1 for p in self.hedging_patterns if p.search(text))
        if hedging >= 2:
            score += 0.10

        if any(p.search(text) for p in self.vague_patterns):
            score -= 0.12
            issues.append("Vague attribution (e.g. 'they say', 'sources claim')")

        if len(self.caps_pattern.findall(text)) > config.ALL_CAPS_MAX_RUNS:
            score -= 0.10
            issues.append("Excessive use of ALL CAPS")

        if text.count('...') + text.count('…') > config.ELLIPSIS_MAX:
            score -= 0.08
            issues.append("Excessive ellipses")

        score = round(max(0.0, min(1.0, score)), 3)
        return CredibilityPatternScore(
            score=score,
            label=self._label(score),
            issues=tuple(issues),
            citation_count=citations,
            hedging_count=hedging,
            passive_ratio=round(passive_ratio, 3),
        )

    def score_content_quality(self, text: str, pattern_score: float,
                              grammar_issues: Optional[int] = None) -> ContentQuality:
        """Combine credibility patterns, specificity and evidence into one quality score."""
        specificity = self._score_specificity(text)
        evidence = self._score_evidence(text)

        overall = 0.4 * pattern_score + 0.3 * specificity + 0.3 * evidence
        if grammar_issues is not None:
            word_count = max(len(text.split()), 1)
            overall -= min(0.2, grammar_issues / word_count * 2)

        return ContentQuality(
            overall_score=round(max(0.0, min(1.0, overall)), 3),
            specificity=round(specificity, 3),
            specificity_label=self._specificity_label(specificity),
            evidence=round(evidence, 3),
            evidence_label=self._evidence_label(evidence),
            grammar_issues=grammar_issues,
        )

    def _count_citations(self, text: str) -> int:
        return sum(1 for p in self.citation_patterns if p.search(text))

    def _score_specificity(self, text: str) -> float:
        """Specific numbers, names and dates (0-1)"""
        numbers = len(NUMBER_PATTERN.findall(text))
        names = len(CAPITALIZED_PATTERN.findall(text))

        score = 0.3 + min(numbers / 10, 0.3) + min(names / 20, 0.2)
        if DATE_PATTERN.search(text):
            score += 0.2
        return max(0.0, min(1.0, score))

    def _score_evidence(self, text: str) -> float:
        """Citations and direct quotes (0-1)"""
        score = 0.2 + min(self._count_citations(text) * 0.2, 0.6)
        if QUOTE_PATTERN.search(text):
            score += 0.2
        return max(0.0, min(1.0, score))

    def _label(self, score: float) -> str:
        if score >= 0.85:
            return "Well sourced"
        elif score >= 0.6:
            return "Partially sourced"
        return "Poorly sourced"

    def _specificity_label(self, score: float) -> str:
        if score >= 0.7:
            return "Highly specific"
        elif score >= 0.45:
            return "Moderately specific"
        return "Vague"

    def _evidence_label(self, score: float) -> str:
        if score >= 0.7:
            return "Strong"
        elif score >= 0.4:
            return "Moderate"
        return "Weak"


def extract_claims(text: str, limit: int = config.MAX_CLAIMS) -> List[str]:
    """Candidate claims: sentences longer than 10 characters, in order."""
    claims = [s.strip() for s in SENTENCE_SPLIT.split(text) if len(s.strip()) > 10]
    return claims[:limit]
