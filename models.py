# models.py
# Data model shared by the analyzers, the pipeline and the history store

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from exceptions import AdapterError

TEXT = "text"
URL = "url"
FILE = "file"
INPUT_TYPES = (TEXT, URL, FILE)

REAL = "REAL"
FAKE = "FAKE"
UNVERIFIED = "UNVERIFIED"
ERROR = "ERROR"
UNKNOWN = "UNKNOWN"
VERDICTS = (REAL, FAKE, UNVERIFIED)

CLAIM_REVIEW = "claim_review"
NEWS = "news"
PLACEHOLDER = "placeholder"

MAX_CONFIDENCE = 99


@dataclass(frozen=True)
class AnalysisRequest:
    content: str
    input_type: str = TEXT
    file_name: Optional[str] = None


@dataclass(frozen=True)
class PatternScore:
    """Score in [0, 1] plus a label, produced by one scorer."""
    score: float
    label: str
    matches: Tuple[str, ...] = ()


@dataclass(frozen=True)
class CredibilityPatternScore(PatternScore):
    issues: Tuple[str, ...] = ()
    citation_count: int = 0
    hedging_count: int = 0
    passive_ratio: float = 0.0

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)


@dataclass(frozen=True)
class ContentQuality:
    overall_score: float
    specificity: float
    specificity_label: str
    evidence: float
    evidence_label: str
    grammar_issues: Optional[int] = None


@dataclass(frozen=True)
class Entities:
    persons: Tuple[str, ...] = ()
    organizations: Tuple[str, ...] = ()
    locations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "persons": list(self.persons),
            "organizations": list(self.organizations),
            "locations": list(self.locations),
        }


@dataclass(frozen=True)
class SourceMatch:
    domain: str
    display_name: str
    base_trust: float
    region: str
    bias: str = "Neutral"

    @property
    def url(self) -> str:
        return f"https://{self.domain}"


@dataclass(frozen=True)
class SourceResolution:
    credibility_score: float
    label: str
    canonical_url: str = ""
    match: Optional[SourceMatch] = None
    related_sources: Tuple[SourceMatch, ...] = ()
    host: str = ""

    @property
    def bias_rating(self) -> str:
        return self.match.bias if self.match else "Uncertain"


@dataclass(frozen=True)
class FactCheckEntry:
    claim: str
    conclusion: str
    source_url: str
    reviewer_name: str
    relevance: float
    kind: str = CLAIM_REVIEW
    similarity: Optional[float] = None

    @property
    def is_placeholder(self) -> bool:
        return self.kind == PLACEHOLDER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "claim": self.claim,
            "conclusion": self.conclusion,
            "source": self.source_url,
            "reviewer": self.reviewer_name,
            "relevance": round(self.relevance, 3),
            "kind": self.kind,
            "similarity": None if self.similarity is None else round(self.similarity, 3),
        }


@dataclass(frozen=True)
class AdapterResult:
    """Outcome of one optional remote call.

    ``value`` always holds something usable: the parsed response on success,
    the adapter's neutral fallback otherwise.
    """
    value: Any
    error: Optional[AdapterError] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.skipped


@dataclass
class EnsembleVote:
    """Tally of engine verdicts for the dual-engine ensemble."""
    votes: Dict[str, int] = field(default_factory=dict)
    confidences: List[float] = field(default_factory=list)
    engines: List[str] = field(default_factory=list)

    def cast(self, engine: str, verdict: str, confidence: float):
        if verdict not in VERDICTS:
            return
        self.votes[verdict] = self.votes.get(verdict, 0) + 1
        self.confidences.append(max(0.0, min(1.0, confidence)))
        self.engines.append(engine)

    @property
    def total(self) -> int:
        return sum(self.votes.values())

    def winner(self) -> str:
        if not self.votes:
            return UNVERIFIED
        ranked = sorted(self.votes.items(), key=lambda kv: kv[1], reverse=True)
        if len(ranked) > 1 and ranked[0][1] == ranked[1][1]:
            return UNVERIFIED
        return ranked[0][0]

    def confidence(self) -> int:
        if not self.confidences:
            return 0
        return round(sum(self.confidences) / len(self.confidences) * 100)


@dataclass(frozen=True)
class FusionOutcome:
    verdict: str
    confidence: int
    explanation: str
    rule: str


@dataclass(frozen=True)
class AnalysisResult:
    verdict: str
    confidence_score: int
    explanation: str
    reference: str = ""
    source_credibility: float = 0.0
    source_label: str = ""
    source_credibility_detailed: Dict[str, Any] = field(default_factory=dict)
    content_quality_detailed: Dict[str, Any] = field(default_factory=dict)
    sentiment: Dict[str, Any] = field(default_factory=dict)
    clickbait: Dict[str, Any] = field(default_factory=dict)
    credibility_patterns: Dict[str, Any] = field(default_factory=dict)
    key_entities: Dict[str, List[str]] = field(default_factory=dict)
    fact_check_results: List[Dict[str, Any]] = field(default_factory=list)
    source_links: List[Dict[str, str]] = field(default_factory=list)
    model_outputs: Dict[str, Any] = field(default_factory=dict)
    rule: str = ""

    @classmethod
    def error(cls, message: str) -> "AnalysisResult":
        return cls(verdict=ERROR, confidence_score=0, explanation=message)

    @property
    def is_error(self) -> bool:
        return self.verdict == ERROR

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["sentiment_score"] = self.sentiment.get("score", 0.0)
        data["sentiment_label"] = self.sentiment.get("label", "")
        return data
