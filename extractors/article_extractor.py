# extractors/article_extractor.py
# Fetches a URL and strips its markup down to article text

import logging
import re

import requests
from bs4 import BeautifulSoup

import config
from analyzers.credibility_analyzer import extract_domain
from exceptions import FetchError

logger = logging.getLogger(__name__)

HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'
}
NON_CONTENT_TAGS = ('script', 'style', 'noscript', 'nav', 'header', 'footer', 'aside', 'form')
MIN_PARAGRAPH_CHARS = 50


def strip_markup(html: str) -> str:
    """Plain text of an HTML document, whitespace collapsed."""
    soup = BeautifulSoup(html or "", 'html.parser')
    for tag in soup(NON_CONTENT_TAGS):
        tag.decompose()
    return re.sub(r"\s+", " ", soup.get_text(" ")).strip()


class ArticleExtractor:
    """Extracts article data from URLs"""

    def __init__(self, timeout: float = config.FETCH_TIMEOUT_SECONDS):
        self.timeout = timeout

    def extract(self, url: str) -> dict:
        """
        Extract article from URL

        Args:
            url: Article URL

        Returns:
            dict with url, title, content, source and domain

        Raises:
            FetchError: the URL is unreachable or answers with a non-2xx status
        """
        try:
            response = requests.get(url, headers=HEADERS, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.warning("⚠️ Fetch failed for %s: %s", url, type(e).__name__)
            raise FetchError("Unable to reach the provided URL.") from e

        if not 200 <= response.status_code < 300:
            logger.warning("⚠️ Fetch for %s returned HTTP %s", url, response.status_code)
            raise FetchError(f"Unable to fetch the article (HTTP {response.status_code}).",
                             status_code=response.status_code)

        return self.parse(url, response.text)

    def parse(self, url: str, html: str) -> dict:
        soup = BeautifulSoup(html or "", 'html.parser')
        domain = extract_domain(url)

        # Extract title
        title = ''
        title_tag = soup.find('h1') or soup.find('title')
        if title_tag:
            title = title_tag.get_text().strip()

        # Extract content from substantial paragraphs, whole page as fallback
        paragraphs = [p.get_text().strip() for p in soup.find_all('p')]
        content = ' '.join(p for p in paragraphs if len(p) > MIN_PARAGRAPH_CHARS)
        if not content:
            content = strip_markup(html)

        # Extract source
        meta_source = soup.find('meta', property='og:site_name')
        source = meta_source.get('content', '') if meta_source else domain

        return {
            'url': url,
            'title': title,
            'content': content,
            'source': source,
            'domain': domain,
        }
