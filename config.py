# config.py
# Configuration for the credibility detector

import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Tuple

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Database configuration
DATABASE_NAME = os.getenv('DATABASE_NAME', 'analysis_history.db')

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

CORS_ORIGINS = [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]

# =============================================================================
# INPUT VALIDATION
# =============================================================================

MIN_CONTENT_LENGTH = 20
MIN_WORD_COUNT = 5
MAX_SYMBOL_RATIO = 0.3
MAX_CLAIMS = 5

# =============================================================================
# KNOWN NEWS OUTLETS (source resolver)
# =============================================================================


@dataclass(frozen=True)
class Outlet:
    domain: str
    display_name: str
    trust: float
    region: str  # "local" | "international"
    bias: str = "Neutral"
    aliases: Tuple[str, ...] = ()


NEWS_OUTLETS = (
    # ===== Local (Philippine) outlets =====
    Outlet("rappler.com", "Rappler", 0.90, "local", aliases=("rappler",)),
    Outlet("gmanetwork.com", "GMA News", 0.92, "local", aliases=("gma news", "gma network")),
    Outlet("abs-cbn.com", "ABS-CBN News", 0.90, "local", aliases=("abs-cbn",)),
    Outlet("inquirer.net", "Philippine Daily Inquirer", 0.90, "local", aliases=("inquirer",)),
    Outlet("philstar.com", "The Philippine Star", 0.88, "local", aliases=("philstar", "philippine star")),
    Outlet("manilatimes.net", "The Manila Times", 0.85, "local", aliases=("manila times",)),
    Outlet("mb.com.ph", "Manila Bulletin", 0.85, "local", aliases=("manila bulletin",)),
    Outlet("pna.gov.ph", "Philippine News Agency", 0.90, "local", aliases=("philippine news agency",)),
    Outlet("sunstar.com.ph", "SunStar", 0.82, "local", aliases=("sunstar",)),
    Outlet("cnnphilippines.com", "CNN Philippines", 0.88, "local", aliases=("cnn philippines",)),

    # ===== International outlets =====
    Outlet("reuters.com", "Reuters", 0.97, "international", aliases=("reuters",)),
    Outlet("apnews.com", "Associated Press", 0.97, "international", aliases=("associated press", "apnews")),
    Outlet("bbc.com", "BBC News", 0.95, "international", aliases=("bbc",)),
    Outlet("npr.org", "NPR", 0.93, "international", aliases=("npr",)),
    Outlet("theguardian.com", "The Guardian", 0.92, "international", "Left-leaning", ("the guardian",)),
    Outlet("nytimes.com", "The New York Times", 0.93, "international", "Left-leaning", ("new york times", "nytimes")),
    Outlet("washingtonpost.com", "The Washington Post", 0.92, "international", "Left-leaning", ("washington post",)),
    Outlet("wsj.com", "The Wall Street Journal", 0.93, "international", "Right-leaning", ("wall street journal",)),
    Outlet("economist.com", "The Economist", 0.93, "international", aliases=("the economist",)),
    Outlet("bloomberg.com", "Bloomberg", 0.92, "international", aliases=("bloomberg",)),
    Outlet("aljazeera.com", "Al Jazeera", 0.88, "international", aliases=("al jazeera", "aljazeera")),
    Outlet("cnn.com", "CNN", 0.88, "international", "Left-leaning", ("cnn",)),
    Outlet("time.com", "TIME Magazine", 0.87, "international", aliases=("time magazine",)),
    Outlet("cnbc.com", "CNBC", 0.87, "international", aliases=("cnbc",)),
    Outlet("foxnews.com", "Fox News", 0.75, "international", "Right-leaning", ("fox news",)),
)

# Credibility assigned when a URL host matches no known outlet
UNKNOWN_URL_CREDIBILITY = 0.4
# Credibility assigned when nothing identifies a source
NO_SOURCE_CREDIBILITY = 0.5
# An outlet named in the text is weaker evidence than being published there
TEXT_MENTION_MAX_TRUST = 0.9
RELATED_SOURCE_LIMIT = 3

# =============================================================================
# SENTIMENT / EMOTION WORD LISTS
# =============================================================================

EMOTIONAL_WORDS = MappingProxyType({
    'extreme': ("shocking", "outrageous", "unbelievable", "evil", "exclusive",
                "breaking", "scandal", "bombshell", "horrifying"),
    'high': ("amazing", "terrible", "urgent", "alarming", "horrific", "disaster",
             "tragic", "furious", "devastating", "insane"),
    'moderate': ("important", "significant", "notable", "remarkable", "developing",
                 "concerning", "surprising", "unusual"),
})

EMOTION_WEIGHTS = MappingProxyType({
    'extreme': 0.20,
    'high': 0.10,
    'moderate': 0.05,
})

# (threshold, label), checked in order with ">"
EMOTION_LABELS = (
    (0.75, "Highly emotional"),
    (0.6, "Moderately emotional"),
    (0.4, "Slightly emotional"),
)

# =============================================================================
# CLICKBAIT PHRASE LISTS
# =============================================================================

CLICKBAIT_PHRASES = MappingProxyType({
    'urgency': ("act now", "before it's deleted", "share before", "breaking news",
                "just in", "must watch", "must read", "don't wait", "last chance",
                "right now"),
    'exaggeration': ("you won't believe", "will blow your mind", "what happens next",
                     "shocking truth", "miracle", "doctors hate", "secret they",
                     "jaw-dropping", "never seen before", "100% proof"),
    'vague_attribution': ("sources say", "they don't want you to know", "people are saying",
                          "experts are stunned", "insiders reveal", "rumors say",
                          "it is being reported"),
})

CLICKBAIT_WEIGHTS = MappingProxyType({
    'urgency': 0.16,
    'exaggeration': 0.13,
    'vague_attribution': 0.22,
})

CLICKBAIT_QUESTION_LIMIT = 4
CLICKBAIT_QUESTION_PENALTY = 0.12

# =============================================================================
# CREDIBILITY PATTERNS (citations, hedging, vague attribution)
# =============================================================================

CITATION_PATTERNS = (
    r"\baccording to\b",
    r"\bresearch (?:shows|found|suggests)\b",
    r"\bstudy (?:found|shows|published)\b",
    r"\bexperts? (?:say|said|says)\b",
    r"\b(?:said|told) (?:reporters|in a statement)\b",
    r"\breported by\b",
    r"\bpublished in\b",
    r"\bofficials? (?:said|confirmed|announced)\b",
    r"\bdata from\b",
)

HEDGING_WORDS = ("may", "might", "could", "possibly", "reportedly", "allegedly",
                 "appears", "suggests", "likely", "estimated")

VAGUE_ATTRIBUTION_PATTERNS = (
    r"\bthey say\b",
    r"\bsources claim\b",
    r"\bsome people say\b",
    r"\beveryone knows\b",
    r"\bit is said\b",
    r"\bmany believe\b",
)

PASSIVE_VOICE_PATTERN = r"\b(?:is|are|was|were|be|been|being)\s+\w+(?:ed|en)\b"
PASSIVE_VOICE_MAX_RATIO = 0.15
ALL_CAPS_PATTERN = r"\b[A-Z]{5,}(?:\s+[A-Z]{2,})*\b"
ALL_CAPS_MAX_RUNS = 2
ELLIPSIS_MAX = 3

# =============================================================================
# OPTIONAL EXTERNAL APIS
# =============================================================================

# Claim search (Google Fact Check Tools)
GOOGLE_FACT_CHECK_API_KEY = os.getenv('GOOGLE_FACT_CHECK_API_KEY', '')
FACT_CHECK_API_URL = "https://factchecktools.googleapis.com/v1alpha1/claims:search"
ENABLE_FACT_CHECK = bool(GOOGLE_FACT_CHECK_API_KEY)

# News search (NewsAPI)
NEWSAPI_KEY = os.getenv('NEWSAPI_KEY', '')
NEWSAPI_URL = "https://newsapi.org/v2/everything"
ENABLE_NEWS_SEARCH = bool(NEWSAPI_KEY)

FACT_CHECK_TIMEOUT_SECONDS = 10
FACT_CHECK_RESULT_LIMIT = 3
MAIN_CLAIM_FALLBACK_CHARS = 150

# Hosted inference (Hugging Face)
HF_API_KEY = os.getenv('HF_API_KEY', '')
HF_API_URL = os.getenv('HF_API_URL', "https://router.huggingface.co/hf-inference/models")
HF_ZERO_SHOT_MODEL = "facebook/bart-large-mnli"
HF_SENTIMENT_MODEL = "distilbert-base-uncased-finetuned-sst-2-english"
HF_NER_MODEL = "dslim/bert-base-NER"
HF_SIMILARITY_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
ZERO_SHOT_LABELS = MappingProxyType({
    "reliable news": "REAL",
    "fake news": "FAKE",
})
ENABLE_HF_MODELS = bool(HF_API_KEY)

# Chat completion (OpenAI)
OPENAI_API_KEY = os.getenv('OPENAI_API_KEY', '')
OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-4o-mini')
ENABLE_CHAT_MODEL = bool(OPENAI_API_KEY)

# Grammar check (LanguageTool premium)
GRAMMAR_API_KEY = os.getenv('GRAMMAR_API_KEY', '')
GRAMMAR_API_USERNAME = os.getenv('GRAMMAR_API_USERNAME', '')
GRAMMAR_API_URL = "https://api.languagetoolplus.com/v2/check"
ENABLE_GRAMMAR_CHECK = bool(GRAMMAR_API_KEY)

# Domain authority (Open PageRank)
DOMAIN_AUTHORITY_API_KEY = os.getenv('DOMAIN_AUTHORITY_API_KEY', '')
DOMAIN_AUTHORITY_API_URL = "https://openpagerank.com/api/v1.0/getPageRank"
ENABLE_DOMAIN_AUTHORITY = bool(DOMAIN_AUTHORITY_API_KEY)

HF_MAX_CHARS = 512
CHAT_MAX_CHARS = 1500

FETCH_TIMEOUT_SECONDS = 10
HF_TIMEOUT_SECONDS = 10
CHAT_TIMEOUT_SECONDS = 15
GRAMMAR_TIMEOUT_SECONDS = 10
DOMAIN_AUTHORITY_TIMEOUT_SECONDS = 5

MAX_ADAPTER_WORKERS = 8

# Feature flags
FEATURES = MappingProxyType({
    'fact_check': ENABLE_FACT_CHECK,
    'news_search': ENABLE_NEWS_SEARCH,
    'hf_models': ENABLE_HF_MODELS,
    'chat_model': ENABLE_CHAT_MODEL,
    'grammar_check': ENABLE_GRAMMAR_CHECK,
    'domain_authority': ENABLE_DOMAIN_AUTHORITY,
})

# =============================================================================
# DISPLAY SCORE BANDS (per verdict, 0-100)
# =============================================================================

SCORE_BANDS = MappingProxyType({
    'REAL': {'credibility': (70, 100), 'quality': (70, 100)},
    'FAKE': {'credibility': (0, 30), 'quality': (0, 40)},
    'UNVERIFIED': {'credibility': (30, 50), 'quality': (40, 60)},
})
