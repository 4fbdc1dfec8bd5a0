# analyzers/remote_models.py
# Optional hosted-model adapters (Hugging Face inference, OpenAI chat,
# LanguageTool grammar check, Open PageRank domain authority)

import json
import logging
import re
from typing import Any, Dict, List, Optional

import requests

import config
from exceptions import AdapterError
from models import FAKE, REAL, UNKNOWN, UNVERIFIED, AdapterResult

logger = logging.getLogger(__name__)

JSON_BLOCK = re.compile(r"\{.*\}", re.DOTALL)

CHAT_SYSTEM_PROMPT = (
    "You are a news credibility assistant. Judge whether the text is real news, "
    "fake news or cannot be verified. Reply ONLY with JSON: "
    '{"verdict": "REAL" | "FAKE" | "UNVERIFIED", "confidence": 0.0-1.0, '
    '"reasoning": "one or two sentences"}'
)


class RemoteAdapter:
    """
    Base class for one optional remote call.

    - No API key: no request is made, the fallback is returned as skipped
    - Input is truncated to ``max_chars`` before sending
    - Any failure is logged and converted to the fallback value
    """

    name = "remote"

    def __init__(self, api_key: str = "", timeout: float = config.HF_TIMEOUT_SECONDS,
                 max_chars: int = config.HF_MAX_CHARS):
        self.api_key = api_key
        self.timeout = timeout
        self.max_chars = max_chars

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    def fallback(self) -> Any:
        return None

    def run(self, *args) -> AdapterResult:
        if not self.enabled:
            return AdapterResult(self.fallback(), skipped=True)

        try:
            return AdapterResult(self._call(*args))

        except AdapterError as e:
            logger.warning("⚠️ %s unavailable: %s", self.name, e.reason)
            return AdapterResult(self.fallback(), error=e)

        except requests.exceptions.Timeout:
            logger.warning("⏱️ %s timeout (>%ss)", self.name, self.timeout)
            return AdapterResult(self.fallback(), error=AdapterError(self.name, "timeout"))

        except requests.exceptions.RequestException as e:
            logger.warning("⚠️ %s request failed: %s", self.name, type(e).__name__)
            return AdapterResult(self.fallback(), error=AdapterError(self.name, type(e).__name__))

        except Exception as e:
            logger.warning("⚠️ %s returned an unusable response: %s", self.name, e)
            return AdapterResult(self.fallback(), error=AdapterError(self.name, f"malformed response: {e}"))

    def truncate(self, text: str) -> str:
        return (text or "")[:self.max_chars]

    def _call(self, *args) -> Any:
        raise NotImplementedError

    def _check(self, response: requests.Response) -> Any:
        if response.status_code != 200:
            raise AdapterError(self.name, f"HTTP {response.status_code}", response.status_code)
        return response.json()


class HuggingFaceAdapter(RemoteAdapter):
    model = ""

    def __init__(self, api_key: str = config.HF_API_KEY, base_url: str = config.HF_API_URL,
                 timeout: float = config.HF_TIMEOUT_SECONDS, max_chars: int = config.HF_MAX_CHARS):
        super().__init__(api_key, timeout, max_chars)
        self.base_url = base_url.rstrip('/')

    def _infer(self, payload: Dict[str, Any]) -> Any:
        response = requests.post(
            f"{self.base_url}/{self.model}",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json=payload,
            timeout=self.timeout,
        )
        return self._check(response)


class ZeroShotClassifier(HuggingFaceAdapter):
    """Zero-shot REAL/FAKE classification via an NLI model."""

    name = "zero_shot"
    model = config.HF_ZERO_SHOT_MODEL

    def __init__(self, labels=config.ZERO_SHOT_LABELS, **kwargs):
        super().__init__(**kwargs)
        self.labels = dict(labels)

    def fallback(self) -> Dict[str, Any]:
        return {"label": UNKNOWN, "score": 0.0}

    def _call(self, text: str) -> Dict[str, Any]:
        data = self._infer({
            "inputs": self.truncate(text),
            "parameters": {"candidate_labels": list(self.labels)},
        })

        # Older deployments answer {"labels": [...], "scores": [...]}
        if isinstance(data, dict):
            ranked = list(zip(data["labels"], data["scores"]))
        else:
            ranked = [(item["label"], item["score"]) for item in data]
        top_label, top_score = max(ranked, key=lambda pair: pair[1])

        return {
            "label": self.labels.get(top_label, UNKNOWN),
            "score": float(top_score),
            "raw_label": top_label,
        }


class SentimentModel(HuggingFaceAdapter):
    name = "sentiment"
    model = config.HF_SENTIMENT_MODEL

    def fallback(self) -> Dict[str, Any]:
        return {"label": UNKNOWN, "positive": 0.0, "negative": 0.0}

    def _call(self, text: str) -> Dict[str, Any]:
        data = self._infer({"inputs": self.truncate(text)})
        scores = data[0] if data and isinstance(data[0], list) else data
        by_label = {item["label"].upper(): float(item["score"]) for item in scores}
        positive = by_label.get("POSITIVE", 0.0)
        negative = by_label.get("NEGATIVE", 0.0)
        return {
            "label": "POSITIVE" if positive > negative else "NEGATIVE",
            "positive": positive,
            "negative": negative,
        }


class EntityRecognizer(HuggingFaceAdapter):
    name = "ner"
    model = config.HF_NER_MODEL

    def fallback(self) -> List[Dict[str, Any]]:
        return []

    def _call(self, text: str) -> List[Dict[str, Any]]:
        data = self._infer({
            "inputs": self.truncate(text),
            "parameters": {"aggregation_strategy": "simple"},
        })
        return [
            {
                "word": entity["word"],
                "entity_group": entity.get("entity_group", "UNKNOWN"),
                "score": float(entity.get("score", 0.0)),
            }
            for entity in data
        ]


class SemanticSimilarity(HuggingFaceAdapter):
    name = "similarity"
    model = config.HF_SIMILARITY_MODEL

    def fallback(self) -> List[float]:
        return []

    def _call(self, source: str, candidates: List[str]) -> List[float]:
        if not candidates:
            return []
        data = self._infer({
            "inputs": {
                "source_sentence": self.truncate(source),
                "sentences": [self.truncate(c) for c in candidates],
            }
        })
        return [max(0.0, min(1.0, float(score))) for score in data]


class ChatVerdictModel(RemoteAdapter):
    """
    General-purpose chat completion asked for a JSON verdict.

    A reply that does not contain parseable JSON is not an error; it becomes
    an UNKNOWN verdict with zero confidence.
    """

    name = "chat"

    def __init__(self, api_key: str = config.OPENAI_API_KEY, model: str = config.OPENAI_MODEL,
                 url: str = config.OPENAI_API_URL, timeout: float = config.CHAT_TIMEOUT_SECONDS,
                 max_chars: int = config.CHAT_MAX_CHARS):
        super().__init__(api_key, timeout, max_chars)
        self.model = model
        self.url = url

    def fallback(self) -> Dict[str, Any]:
        return {"verdict": UNKNOWN, "confidence": 0.0, "reasoning": ""}

    def _call(self, text: str) -> Dict[str, Any]:
        response = requests.post(
            self.url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={
                "model": self.model,
                "temperature": 0,
                "messages": [
                    {"role": "system", "content": CHAT_SYSTEM_PROMPT},
                    {"role": "user", "content": self.truncate(text)},
                ],
            },
            timeout=self.timeout,
        )
        data = self._check(response)
        reply = data["choices"][0]["message"]["content"] or ""
        return parse_chat_verdict(reply)


def parse_chat_verdict(reply: str) -> Dict[str, Any]:
    """Pull the JSON verdict out of a free-text model reply."""
    unknown = {"verdict": UNKNOWN, "confidence": 0.0, "reasoning": ""}

    block = JSON_BLOCK.search(reply or "")
    if not block:
        return unknown
    try:
        payload = json.loads(block.group())
        confidence = float(payload.get("confidence", 0.0))
    except (ValueError, TypeError, AttributeError):
        return unknown

    verdict = str(payload.get("verdict", "")).strip().upper()
    if verdict not in (REAL, FAKE, UNVERIFIED):
        return unknown

    # Some models answer in percent
    if confidence > 1.0:
        confidence /= 100.0

    return {
        "verdict": verdict,
        "confidence": max(0.0, min(1.0, confidence)),
        "reasoning": str(payload.get("reasoning", "")),
    }


class GrammarChecker(RemoteAdapter):
    name = "grammar"

    def __init__(self, api_key: str = config.GRAMMAR_API_KEY, username: str = config.GRAMMAR_API_USERNAME,
                 url: str = config.GRAMMAR_API_URL, timeout: float = config.GRAMMAR_TIMEOUT_SECONDS,
                 max_chars: int = config.CHAT_MAX_CHARS):
        super().__init__(api_key, timeout, max_chars)
        self.username = username
        self.url = url

    def fallback(self) -> Dict[str, Optional[int]]:
        return {"issues": None}

    def _call(self, text: str) -> Dict[str, Optional[int]]:
        response = requests.post(
            self.url,
            data={
                "text": self.truncate(text),
                "language": "en-US",
                "username": self.username,
                "apiKey": self.api_key,
            },
            timeout=self.timeout,
        )
        data = self._check(response)
        return {"issues": len(data.get("matches", []))}


class DomainAuthority(RemoteAdapter):
    """Open PageRank score (0-10) rescaled to 0-1."""

    name = "domain_authority"

    def __init__(self, api_key: str = config.DOMAIN_AUTHORITY_API_KEY, url: str = config.DOMAIN_AUTHORITY_API_URL,
                 timeout: float = config.DOMAIN_AUTHORITY_TIMEOUT_SECONDS):
        super().__init__(api_key, timeout, max_chars=253)
        self.url = url

    def fallback(self) -> Dict[str, Any]:
        return {"domain": "", "authority": None}

    def _call(self, domain: str) -> Dict[str, Any]:
        response = requests.get(
            self.url,
            params={"domains[]": self.truncate(domain)},
            headers={"API-OPR": self.api_key},
            timeout=self.timeout,
        )
        data = self._check(response)
        entry = data["response"][0]
        if int(entry.get("status_code", 200)) != 200:
            raise AdapterError(self.name, f"unknown domain {domain}")
        return {
            "domain": domain,
            "authority": round(float(entry["page_rank_decimal"]) / 10.0, 3),
        }


class RemoteModels:
    """Bundle of every optional adapter, built from config by default."""

    def __init__(self, zero_shot=None, sentiment=None, ner=None, similarity=None,
                 chat=None, grammar=None, domain_authority=None):
        self.zero_shot = zero_shot or ZeroShotClassifier()
        self.sentiment = sentiment or SentimentModel()
        self.ner = ner or EntityRecognizer()
        self.similarity = similarity or SemanticSimilarity()
        self.chat = chat or ChatVerdictModel()
        self.grammar = grammar or GrammarChecker()
        self.domain_authority = domain_authority or DomainAuthority()

    @property
    def ensemble_enabled(self) -> bool:
        """The dual-engine ensemble runs when either engine has a key."""
        return self.zero_shot.enabled or self.chat.enabled

    def status(self) -> Dict[str, bool]:
        return {
            "zero_shot": self.zero_shot.enabled,
            "sentiment": self.sentiment.enabled,
            "ner": self.ner.enabled,
            "similarity": self.similarity.enabled,
            "chat": self.chat.enabled,
            "grammar": self.grammar.enabled,
            "domain_authority": self.domain_authority.enabled,
        }

    @classmethod
    def disabled(cls) -> "RemoteModels":
        """Every adapter without a key; nothing is ever called."""
        return cls(
            zero_shot=ZeroShotClassifier(api_key=""),
            sentiment=SentimentModel(api_key=""),
            ner=EntityRecognizer(api_key=""),
            similarity=SemanticSimilarity(api_key=""),
            chat=ChatVerdictModel(api_key=""),
            grammar=GrammarChecker(api_key=""),
            domain_authority=DomainAuthority(api_key=""),
        )
