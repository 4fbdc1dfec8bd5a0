# analyzers/factcheck_analyzer.py
# Looks up the main claim in claim-search and news-search APIs

import logging
import re
from typing import List, Optional, Sequence

import requests

import config
from models import CLAIM_REVIEW, NEWS, PLACEHOLDER, FactCheckEntry

logger = logging.getLogger(__name__)

TOKEN_SPLIT = re.compile(r"\W+")

NO_SOURCE = "Source not identified"


def tokenize(text: str) -> set:
    return {t for t in TOKEN_SPLIT.split((text or "").lower()) if t}


def compute_relevance(a: str, b: str) -> float:
    """Token overlap |A & B| / max(|A|, |B|), in [0, 1]."""
    tokens_a = tokenize(a)
    tokens_b = tokenize(b)
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / max(len(tokens_a), len(tokens_b))


def placeholder_entry() -> FactCheckEntry:
    return FactCheckEntry(
        claim="No verified sources found",
        conclusion="Manual verification required: please check official media outlets",
        source_url=NO_SOURCE,
        reviewer_name="",
        relevance=0.0,
        kind=PLACEHOLDER,
    )


class FactCheckAnalyzer:
    """
    Queries, in sequence:
    1. Claim search (Google Fact Check Tools) if a key is configured
    2. News search (NewsAPI) if a key is configured and fewer than 2 results so far

    Network failures are logged and skipped. The returned list is sorted by
    relevance and never empty.
    """

    def __init__(self,
                 fact_check_key: str = config.GOOGLE_FACT_CHECK_API_KEY,
                 news_key: str = config.NEWSAPI_KEY,
                 timeout: float = config.FACT_CHECK_TIMEOUT_SECONDS,
                 limit: int = config.FACT_CHECK_RESULT_LIMIT):
        self.fact_check_key = fact_check_key
        self.news_key = news_key
        self.timeout = timeout
        self.limit = limit

    @property
    def enabled(self) -> bool:
        return bool(self.fact_check_key or self.news_key)

    def analyze(self, content: str, claims: Sequence[str]) -> List[FactCheckEntry]:
        main_claim = main_claim_for(content, claims)
        results: List[FactCheckEntry] = []

        if self.fact_check_key:
            results.extend(self._search_claims(main_claim))

        if self.news_key and len(results) < 2:
            results.extend(self._search_news(main_claim))

        results.sort(key=lambda entry: entry.relevance, reverse=True)
        if not results:
            results.append(placeholder_entry())
        return results

    def _search_claims(self, main_claim: str) -> List[FactCheckEntry]:
        try:
            response = requests.get(
                config.FACT_CHECK_API_URL,
                params={"query": main_claim, "key": self.fact_check_key, "languageCode": "en"},
                timeout=self.timeout,
            )
            if response.status_code != 200:
                logger.warning("⚠️ Fact check API error %s", response.status_code)
                return []

            entries = []
            for claim in response.json().get("claims", [])[:self.limit]:
                review = (claim.get("claimReview") or [{}])[0]
                text = claim.get("text", "")
                entries.append(FactCheckEntry(
                    claim=text,
                    conclusion=review.get("textualRating") or "Unverified",
                    source_url=review.get("url") or NO_SOURCE,
                    reviewer_name=(review.get("publisher") or {}).get("name", ""),
                    relevance=compute_relevance(main_claim, text),
                    kind=CLAIM_REVIEW,
                ))
            return entries

        except requests.exceptions.RequestException as e:
            logger.warning("⚠️ Fact check request failed: %s", type(e).__name__)
        except (ValueError, TypeError, AttributeError, KeyError) as e:
            # Malformed or unexpectedly shaped reply
            logger.warning("⚠️ Fact check API returned an unexpected reply: %s", e)
        return []

    def _search_news(self, main_claim: str) -> List[FactCheckEntry]:
        keywords = " ".join(main_claim.split()[:8])
        try:
            response = requests.get(
                config.NEWSAPI_URL,
                params={"q": keywords, "language": "en", "sortBy": "relevancy", "apiKey": self.news_key},
                timeout=self.timeout,
            )
            if response.status_code != 200:
                logger.warning("⚠️ NewsAPI error %s", response.status_code)
                return []

            entries = []
            for article in response.json().get("articles", [])[:self.limit]:
                title = article.get("title") or ""
                entries.append(FactCheckEntry(
                    claim=title,
                    conclusion="From reputable source",
                    source_url=article.get("url") or NO_SOURCE,
                    reviewer_name=(article.get("source") or {}).get("name", ""),
                    relevance=compute_relevance(main_claim, title),
                    kind=NEWS,
                ))
            return entries

        except requests.exceptions.RequestException as e:
            logger.warning("⚠️ NewsAPI request failed: %s", type(e).__name__)
        except (ValueError, TypeError, AttributeError, KeyError) as e:
            logger.warning("⚠️ NewsAPI returned an unexpected reply: %s", e)
        return []


def main_claim_for(content: str, claims: Sequence[str],
                   fallback_chars: int = config.MAIN_CLAIM_FALLBACK_CHARS) -> str:
    if claims:
        return claims[0]
    return content.strip()[:fallback_chars]


def top_claim_review(entries: Sequence[FactCheckEntry]) -> Optional[FactCheckEntry]:
    """Highest-ranked entry that came from the claim-search API."""
    return next((entry for entry in entries if entry.kind == CLAIM_REVIEW), None)
