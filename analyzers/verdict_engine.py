# analyzers/verdict_engine.py
# Fuses scorer outputs and optional model outputs into one verdict

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import config
from analyzers.factcheck_analyzer import top_claim_review
from models import (FAKE, MAX_CONFIDENCE, REAL, UNVERIFIED, AdapterResult,
                    EnsembleVote, FactCheckEntry, FusionOutcome)

FALSE_RATING = re.compile(r"\b(?:false|fake|wrong|untrue|not true|incorrect|misleading|pants on fire)\b")
TRUE_RATING = re.compile(r"\b(?:true|accurate|correct)\b")


def classify_rating(rating: str) -> str:
    """Map a fact-check rating onto a verdict. Negative wording is checked first."""
    lower = (rating or "").lower()
    if FALSE_RATING.search(lower):
        return FAKE
    if TRUE_RATING.search(lower):
        return REAL
    return UNVERIFIED


@dataclass(frozen=True)
class FusionSignals:
    """Everything the heuristic cascade looks at."""
    source_credibility: float
    content_length: int
    emotional_score: float
    clickbait_score: float
    pattern_score: float
    person_count: int = 0
    organization_count: int = 0
    fact_checks: Tuple[FactCheckEntry, ...] = ()

    @property
    def top_review(self) -> Optional[FactCheckEntry]:
        return top_claim_review(self.fact_checks)

    @property
    def has_fact_check(self) -> bool:
        return any(not entry.is_placeholder for entry in self.fact_checks)

    @property
    def review_verdict(self) -> Optional[str]:
        review = self.top_review
        return classify_rating(review.conclusion) if review else None


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: Callable[[FusionSignals], bool]
    verdict: str
    confidence: Union[int, Callable[[FusionSignals], int]]
    explanation: str

    def matches(self, signals: FusionSignals) -> bool:
        return self.predicate(signals)

    def confidence_for(self, signals: FusionSignals) -> int:
        if callable(self.confidence):
            return int(self.confidence(signals))
        return int(self.confidence)


def _fallthrough_confidence(s: FusionSignals) -> int:
    return max(50, round(55 + s.pattern_score * 20))


# First match wins. The order is the priority order.
HEURISTIC_RULES = (
    Rule("fact_check_true",
         lambda s: s.review_verdict == REAL,
         REAL, 90, "Verified and supported by trusted fact-check sources."),
    Rule("fact_check_false",
         lambda s: s.review_verdict == FAKE,
         FAKE, 85, "Disproved or flagged by verified fact-check sources."),
    Rule("trusted_detailed_calm",
         lambda s: (s.source_credibility >= 0.9 and s.content_length > 300
                    and s.emotional_score < 0.45 and s.pattern_score > 0.8),
         REAL, 90, "Published by a highly trusted outlet with detailed, balanced and well-sourced content."),
    Rule("sensational_unsourced",
         lambda s: s.source_credibility <= 0.5 and s.clickbait_score >= 0.35 and s.emotional_score >= 0.4,
         FAKE, 85, "Sensational, emotionally charged wording with no recognizable source."),
    Rule("clickbait_low_quality",
         lambda s: s.clickbait_score >= 0.5 and s.pattern_score < 0.6,
         FAKE, 78, "Heavy clickbait phrasing combined with poor sourcing."),
    Rule("trusted_detailed",
         lambda s: s.source_credibility >= 0.9 and s.content_length > 300 and s.emotional_score < 0.45,
         REAL, 86, "Published by a highly trusted outlet with detailed, calm reporting."),
    Rule("credible_balanced",
         lambda s: (s.source_credibility >= 0.85 and s.content_length > 300
                    and s.emotional_score < 0.5 and s.clickbait_score < 0.3),
         REAL, 82, "Reported by a credible source with detailed, balanced content."),
    Rule("low_credibility_emotional",
         lambda s: s.source_credibility < 0.4 and s.emotional_score > 0.6,
         FAKE, 80, "Low-credibility source with strong emotional tone."),
    Rule("unattributed",
         lambda s: (s.source_credibility <= 0.5 and s.person_count == 0
                    and s.organization_count == 0 and not s.has_fact_check),
         UNVERIFIED, lambda s: 50 + round(s.pattern_score * 5),
         "Lacks credible attribution or a clear factual basis."),
)

FALLTHROUGH_RULE = Rule("insufficient_data", lambda s: True, UNVERIFIED, _fallthrough_confidence,
                        "Insufficient data to confirm or refute this claim.")


def clamp_confidence(value: float) -> int:
    return int(max(0, min(MAX_CONFIDENCE, round(value))))


class VerdictEngine:
    """
    Decision order:
    1. Dual-engine ensemble (zero-shot + chat) when either engine is configured
       and at least one of them produced a verdict, refined by the top claim review
    2. Otherwise the ordered heuristic rules, falling through to UNVERIFIED
    Confidence is clamped to [0, 99] at the end regardless of branch.
    """

    def __init__(self, rules: Sequence[Rule] = HEURISTIC_RULES, fallthrough: Rule = FALLTHROUGH_RULE):
        self.rules = tuple(rules)
        self.fallthrough = fallthrough

    def decide(self, signals: FusionSignals,
               zero_shot: Optional[AdapterResult] = None,
               chat: Optional[AdapterResult] = None,
               ensemble_enabled: bool = False) -> FusionOutcome:
        outcome = None
        if ensemble_enabled:
            outcome = self.ensemble(signals, zero_shot, chat)
        if outcome is None:
            outcome = self.heuristic(signals)

        return FusionOutcome(
            verdict=outcome.verdict,
            confidence=clamp_confidence(outcome.confidence),
            explanation=outcome.explanation,
            rule=outcome.rule,
        )

    def heuristic(self, signals: FusionSignals) -> FusionOutcome:
        rule = next((r for r in self.rules if r.matches(signals)), self.fallthrough)
        return FusionOutcome(
            verdict=rule.verdict,
            confidence=rule.confidence_for(signals),
            explanation=rule.explanation,
            rule=rule.name,
        )

    def ensemble(self, signals: FusionSignals,
                 zero_shot: Optional[AdapterResult],
                 chat: Optional[AdapterResult]) -> Optional[FusionOutcome]:
        vote = tally_votes(zero_shot, chat)
        if vote.total == 0:
            return None

        verdict = vote.winner()
        parts = [f"Model ensemble ({', '.join(vote.engines)}) voted {verdict}."]
        if chat is not None and chat.ok and chat.value.get("reasoning"):
            parts.append(chat.value["reasoning"])

        review = signals.top_review
        if review:
            verdict = classify_rating(review.conclusion)
            reviewer = review.reviewer_name or "a fact-checker"
            parts.append(f'Fact-check by {reviewer} rated a related claim "{review.conclusion}".')

        return FusionOutcome(
            verdict=verdict,
            confidence=vote.confidence(),
            explanation=" ".join(parts),
            rule="ensemble",
        )


def tally_votes(zero_shot: Optional[AdapterResult], chat: Optional[AdapterResult]) -> EnsembleVote:
    vote = EnsembleVote()
    if zero_shot is not None and zero_shot.ok:
        vote.cast("zero-shot", zero_shot.value.get("label"), zero_shot.value.get("score", 0.0))
    if chat is not None and chat.ok:
        vote.cast("chat", chat.value.get("verdict"), chat.value.get("confidence", 0.0))
    return vote


# =============================================================================
# DISPLAY SCORES
# =============================================================================


def band(value: float, verdict: str, kind: str) -> int:
    """Clamp a 0-1 score, shown as 0-100, into the band of the verdict."""
    score = round(max(0.0, min(1.0, value)) * 100)
    bands = config.SCORE_BANDS.get(verdict)
    if not bands:
        return score
    low, high = bands[kind]
    return int(max(low, min(high, score)))


def credibility_label(verdict: str, score: int) -> str:
    if verdict == REAL:
        return "High credibility" if score > 85 else "Good credibility"
    if verdict == FAKE:
        return "Low credibility"
    return "Uncertain credibility"


def quality_label(verdict: str, score: int) -> str:
    if verdict == REAL:
        return "Strong evidence" if score > 85 else "Moderate evidence"
    if verdict == FAKE:
        return "Weak evidence"
    return "Mixed evidence"


def signal_notes(sentiment_label: str, clickbait_matches: Sequence[str],
                 issues: Sequence[str], source_label: str) -> List[str]:
    notes = [f"Source: {source_label}."]
    if sentiment_label and sentiment_label != "Neutral":
        notes.append(f"Tone: {sentiment_label.lower()}.")
    if clickbait_matches:
        notes.append("Clickbait phrases: " + ", ".join(f'"{m}"' for m in clickbait_matches[:3]) + ".")
    if issues:
        notes.append("Issues: " + "; ".join(issues[:2]) + ".")
    return notes


def build_source_links(fact_checks: Sequence[FactCheckEntry], related_sources, limit: int = 3) -> List[Dict[str, str]]:
    links: List[Dict[str, str]] = []
    seen = set()

    for entry in fact_checks:
        if len(links) >= limit:
            break
        if entry.source_url.startswith("http") and entry.source_url not in seen:
            seen.add(entry.source_url)
            links.append({"name": entry.reviewer_name or entry.claim[:60], "url": entry.source_url})

    for source in related_sources:
        if source.url not in seen:
            seen.add(source.url)
            links.append({"name": source.display_name, "url": source.url})

    return links
