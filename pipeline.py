# pipeline.py
# Validation -> fetch -> scorers -> concurrent remote calls -> verdict fusion

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Dict, List, Tuple

import config
from analyzers.clickbait_analyzer import ClickbaitAnalyzer
from analyzers.credibility_analyzer import CredibilityAnalyzer, is_well_formed_url
from analyzers.entity_extractor import EntityExtractor, merge_entities
from analyzers.factcheck_analyzer import FactCheckAnalyzer, main_claim_for
from analyzers.language_analyzer import LanguageAnalyzer, extract_claims
from analyzers.remote_models import RemoteModels
from analyzers.sentiment_analyzer import SentimentAnalyzer
from analyzers.verdict_engine import (FusionSignals, VerdictEngine, band, build_source_links,
                                      credibility_label, quality_label, signal_notes)
from exceptions import FetchError, InputError, PipelineError
from extractors.article_extractor import ArticleExtractor
from models import (INPUT_TYPES, TEXT, URL, AdapterResult, AnalysisRequest,
                    AnalysisResult, FactCheckEntry)

logger = logging.getLogger(__name__)

URL_PREFIX = re.compile(r"^https?://", re.IGNORECASE)
SENTENCE_SHAPE = re.compile(r"[A-Z][A-Za-z]*\s+\w+")
ASCII_LETTER = re.compile(r"[A-Za-z]")

MSG_NOT_TEXT = "Please enter a valid news article or statement."
MSG_NOT_URL = "Please enter a valid URL."
MSG_NOT_MEANINGFUL = "The input does not contain meaningful news content."
MSG_NOT_STRUCTURED = "Please enter structured and meaningful news content."
MSG_UNSUPPORTED = "Unsupported input type."

AUTHORITY_WEIGHT = 0.2


def validate_request(request: AnalysisRequest):
    """Raise InputError with a user-facing message when the request cannot be analyzed."""
    if request.input_type not in INPUT_TYPES:
        raise InputError(MSG_UNSUPPORTED)

    content = (request.content or "").strip()
    looks_like_url = bool(URL_PREFIX.match(content))

    if request.input_type == TEXT and looks_like_url:
        raise InputError(MSG_NOT_TEXT)

    if request.input_type == URL:
        if not looks_like_url:
            raise InputError(MSG_NOT_URL)
        return

    if len(content) < config.MIN_CONTENT_LENGTH or not ASCII_LETTER.search(content):
        raise InputError(MSG_NOT_MEANINGFUL)

    symbols = sum(1 for c in content if not c.isalnum() and not c.isspace())
    if (len(content.split()) < config.MIN_WORD_COUNT
            or symbols / len(content) > config.MAX_SYMBOL_RATIO
            or not SENTENCE_SHAPE.search(content)):
        raise InputError(MSG_NOT_STRUCTURED)


class AnalysisPipeline:
    """
    Runs one request end to end:
    1. Validation (no scorer or remote call happens for rejected input)
    2. Article fetch for well-formed URLs
    3. Local scorers: emotion, clickbait, credibility patterns, entities, source
    4. Fact-check lookup and every enabled remote adapter, in parallel
    5. Verdict fusion, then display scores banded to the verdict

    Input and fetch failures come back as an ERROR result. Anything else
    propagates to the caller.
    """

    def __init__(self, sentiment=None, clickbait=None, language=None, entities=None,
                 credibility=None, factcheck=None, remote=None, engine=None,
                 extractor=None, max_workers: int = config.MAX_ADAPTER_WORKERS):
        self.sentiment = sentiment or SentimentAnalyzer()
        self.clickbait = clickbait or ClickbaitAnalyzer()
        self.language = language or LanguageAnalyzer()
        self.entities = entities or EntityExtractor()
        self.credibility = credibility or CredibilityAnalyzer()
        self.factcheck = factcheck or FactCheckAnalyzer()
        self.remote = remote or RemoteModels()
        self.engine = engine or VerdictEngine()
        self.extractor = extractor or ArticleExtractor()
        self.max_workers = max_workers

    def integrations(self) -> Dict[str, bool]:
        status = {
            "fact_check": bool(self.factcheck.fact_check_key),
            "news_search": bool(self.factcheck.news_key),
        }
        status.update(self.remote.status())
        return status

    def analyze(self, request: AnalysisRequest) -> AnalysisResult:
        logger.info("🔍 Analyzing %s input (%d chars)", request.input_type, len(request.content or ""))
        try:
            validate_request(request)
            text = self._text_for(request)
        except (InputError, FetchError) as e:
            logger.info("⛔ Rejected %s input: %s", request.input_type, e)
            return AnalysisResult.error(str(e))

        result = self._score(request, text)
        logger.info("✅ Verdict %s (%d%%) via %s", result.verdict, result.confidence_score, result.rule)
        return result

    def _text_for(self, request: AnalysisRequest) -> str:
        content = request.content.strip()
        if request.input_type != URL:
            return content

        # A malformed URL is scored as the text it is
        if not is_well_formed_url(content):
            logger.info("⚠️ Malformed URL, scoring the submitted string as text")
            return content

        article = self.extractor.extract(content)
        text = " ".join(part for part in (article['title'], article['content']) if part).strip()
        if not text:
            raise InputError(MSG_NOT_MEANINGFUL)
        return text

    def _score(self, request: AnalysisRequest, text: str) -> AnalysisResult:
        emotion = self.sentiment.analyze(text)
        clickbait = self.clickbait.analyze(text)
        patterns = self.language.analyze(text)
        entities = self.entities.extract(text)
        source = self.credibility.analyze(request.content, request.input_type)
        claims = extract_claims(text)

        fact_checks, outputs = self._fan_out(text, claims, source.host)
        fact_checks, outputs['similarity'] = self._score_similarity(main_claim_for(text, claims), fact_checks)

        if outputs['ner'].ok:
            entities = merge_entities(entities, outputs['ner'].value)
        grammar_issues = outputs['grammar'].value.get("issues") if outputs['grammar'].ok else None
        quality = self.language.score_content_quality(text, patterns.score, grammar_issues)

        signals = FusionSignals(
            source_credibility=source.credibility_score,
            content_length=len(text),
            emotional_score=emotion.score,
            clickbait_score=clickbait.score,
            pattern_score=patterns.score,
            person_count=len(entities.persons),
            organization_count=len(entities.organizations),
            fact_checks=tuple(fact_checks),
        )
        try:
            outcome = self.engine.decide(signals, outputs['zero_shot'], outputs['chat'],
                                         ensemble_enabled=self.remote.ensemble_enabled)
        except Exception as e:
            raise PipelineError(f"verdict fusion failed: {e}") from e

        verdict = outcome.verdict
        authority = outputs['domain_authority'].value.get("authority") if outputs['domain_authority'].ok else None
        raw_credibility = source.credibility_score
        if authority is not None:
            raw_credibility = (1 - AUTHORITY_WEIGHT) * raw_credibility + AUTHORITY_WEIGHT * authority
        credibility_display = band(raw_credibility, verdict, 'credibility')
        quality_display = band(quality.overall_score, verdict, 'quality')

        notes = signal_notes(emotion.label, clickbait.matches, patterns.issues, source.label)
        model_sentiment = outputs['sentiment'].value.get("label") if outputs['sentiment'].ok else None

        return AnalysisResult(
            verdict=verdict,
            confidence_score=outcome.confidence,
            explanation=" ".join([outcome.explanation] + notes),
            reference=self._reference(fact_checks, source.canonical_url),
            source_credibility=round(source.credibility_score, 3),
            source_label=source.label,
            source_credibility_detailed={
                "credibility_score": credibility_display,
                "label": credibility_label(verdict, credibility_display),
                "bias_rating": source.bias_rating,
                "domain_authority": authority,
            },
            content_quality_detailed={
                "overall_score": quality_display,
                "label": quality_label(verdict, quality_display),
                "specificity": quality.specificity,
                "specificity_label": quality.specificity_label,
                "evidence_strength": quality.evidence,
                "evidence_strength_label": quality.evidence_label,
                "grammar_issues": quality.grammar_issues,
            },
            sentiment={
                "score": emotion.score,
                "label": emotion.label,
                "matches": list(emotion.matches),
                "model_label": model_sentiment,
            },
            clickbait={
                "score": clickbait.score,
                "label": clickbait.label,
                "matches": list(clickbait.matches),
            },
            credibility_patterns={
                "score": patterns.score,
                "label": patterns.label,
                "has_issues": patterns.has_issues,
                "issues": list(patterns.issues),
                "citation_count": patterns.citation_count,
                "hedging_count": patterns.hedging_count,
                "passive_ratio": patterns.passive_ratio,
            },
            key_entities=entities.to_dict(),
            fact_check_results=[entry.to_dict() for entry in fact_checks],
            source_links=build_source_links(fact_checks, source.related_sources),
            model_outputs={name: self._describe(result) for name, result in sorted(outputs.items())},
            rule=outcome.rule,
        )

    def _fan_out(self, text: str, claims: List[str], host: str) -> Tuple[List[FactCheckEntry], Dict[str, AdapterResult]]:
        """Fact-check lookup plus every enabled adapter, joined before fusion."""
        remote = self.remote
        calls = {
            "zero_shot": (remote.zero_shot, (text,)),
            "sentiment": (remote.sentiment, (text,)),
            "ner": (remote.ner, (text,)),
            "chat": (remote.chat, (text,)),
            "grammar": (remote.grammar, (text,)),
            "domain_authority": (remote.domain_authority, (host,)),
        }

        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            fact_future = pool.submit(self.factcheck.analyze, text, claims)
            futures = {
                name: pool.submit(adapter.run, *args)
                for name, (adapter, args) in calls.items()
                if adapter.enabled and all(args)
            }
            fact_checks = fact_future.result()
            outputs = {name: future.result() for name, future in futures.items()}

        for name, (adapter, _) in calls.items():
            outputs.setdefault(name, AdapterResult(adapter.fallback(), skipped=True))
        return fact_checks, outputs

    def _score_similarity(self, main_claim: str, fact_checks: List[FactCheckEntry]):
        adapter = self.remote.similarity
        candidates = [entry for entry in fact_checks if not entry.is_placeholder]
        if not adapter.enabled or not candidates:
            return fact_checks, AdapterResult(adapter.fallback(), skipped=True)

        result = adapter.run(main_claim, [entry.claim for entry in candidates])
        if not result.ok or len(result.value) != len(candidates):
            return fact_checks, result

        scores = dict(zip((id(entry) for entry in candidates), result.value))
        scored = [replace(entry, similarity=scores[id(entry)]) if id(entry) in scores else entry
                  for entry in fact_checks]
        return scored, result

    @staticmethod
    def _reference(fact_checks: List[FactCheckEntry], canonical_url: str) -> str:
        for entry in fact_checks:
            if not entry.is_placeholder and entry.source_url.startswith("http"):
                return entry.source_url
        return canonical_url

    @staticmethod
    def _describe(result: AdapterResult) -> Dict[str, Any]:
        return {
            "ok": result.ok,
            "skipped": result.skipped,
            "value": result.value,
            "error": result.error.reason if result.error else None,
        }
