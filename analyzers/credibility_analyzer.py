# analyzers/credibility_analyzer.py
# Resolves the source of a submission against the known outlet table

import logging
import re
from typing import Optional, Sequence
from urllib.parse import urlparse

import config
from models import URL, SourceMatch, SourceResolution

logger = logging.getLogger(__name__)


class CredibilityAnalyzer:
    """
    Maps a URL host or an outlet mentioned in the text onto a known outlet
    with a hand-assigned trust score.
    """

    def __init__(self,
                 outlets: Sequence[config.Outlet] = config.NEWS_OUTLETS,
                 unknown_url_credibility: float = config.UNKNOWN_URL_CREDIBILITY,
                 no_source_credibility: float = config.NO_SOURCE_CREDIBILITY,
                 mention_max_trust: float = config.TEXT_MENTION_MAX_TRUST,
                 related_limit: int = config.RELATED_SOURCE_LIMIT):
        self.outlets = tuple(outlets)
        self.unknown_url_credibility = unknown_url_credibility
        self.no_source_credibility = no_source_credibility
        self.mention_max_trust = mention_max_trust
        self.related_limit = related_limit
        self._mention_patterns = [
            (outlet, re.compile(r"\b(?:%s)\b" % "|".join(re.escape(t) for t in self._mention_terms(outlet))))
            for outlet in self.outlets
        ]

        logger.debug("CredibilityAnalyzer: %d known outlets", len(self.outlets))

    def analyze(self, content: str, input_type: str) -> SourceResolution:
        """
        Resolve the source of ``content``.

        URL inputs are matched by host, URLs that fail to parse resolve to
        "no source detected". Text is scanned for outlet names.
        """
        text = content.strip()

        if input_type == URL or text.lower().startswith("http"):
            return self._resolve_url(text) or self._no_source()

        return self._resolve_mention(text)

    def _resolve_url(self, url: str) -> Optional[SourceResolution]:
        host = extract_domain(url)
        if not host:
            return None

        outlet = next((o for o in self.outlets if o.domain in host), None)
        if outlet:
            match = self._to_match(outlet)
            region = "Philippine news outlet" if outlet.region == "local" else "international source"
            return SourceResolution(
                credibility_score=outlet.trust,
                label=f"Verified {region}: {outlet.display_name}",
                canonical_url=url,
                match=match,
                related_sources=(match,) + self._top_outlets(exclude=outlet, limit=self.related_limit - 1),
                host=host,
            )

        return SourceResolution(
            credibility_score=self.unknown_url_credibility,
            label=f"Unverified or unknown source: {host}",
            canonical_url=url,
            related_sources=self._top_outlets(limit=self.related_limit),
            host=host,
        )

    def _resolve_mention(self, text: str) -> SourceResolution:
        lower = text.lower()
        for outlet, pattern in self._mention_patterns:
            if pattern.search(lower):
                match = self._to_match(outlet)
                region = "Philippine news outlet" if outlet.region == "local" else "international source"
                return SourceResolution(
                    credibility_score=min(outlet.trust, self.mention_max_trust),
                    label=f"Mentions {region}: {outlet.display_name}",
                    canonical_url=match.url,
                    match=match,
                    related_sources=(match,) + self._top_outlets(exclude=outlet, limit=self.related_limit - 1),
                )

        return self._no_source()

    def _no_source(self) -> SourceResolution:
        return SourceResolution(
            credibility_score=self.no_source_credibility,
            label="Unable to verify source",
            related_sources=self._top_outlets(limit=self.related_limit),
        )

    def _top_outlets(self, exclude: Optional[config.Outlet] = None, limit: int = 3):
        ranked = sorted((o for o in self.outlets if o is not exclude), key=lambda o: o.trust, reverse=True)
        return tuple(self._to_match(o) for o in ranked[:max(limit, 0)])

    @staticmethod
    def _mention_terms(outlet: config.Outlet):
        terms = [outlet.display_name.lower(), outlet.domain]
        terms.extend(a.lower() for a in outlet.aliases)
        return terms

    @staticmethod
    def _to_match(outlet: config.Outlet) -> SourceMatch:
        return SourceMatch(
            domain=outlet.domain,
            display_name=outlet.display_name,
            base_trust=outlet.trust,
            region=outlet.region,
            bias=outlet.bias,
        )


def extract_domain(url: str) -> str:
    """Extract clean host from URL, empty string when it cannot be parsed"""
    if any(c.isspace() for c in url):
        return ""
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return ""
    if host.startswith("www."):
        host = host[4:]
    return host if "." in host else ""


def is_well_formed_url(url: str) -> bool:
    """True when the URL has a dotted host and no whitespace"""
    return bool(extract_domain(url))
