from unittest.mock import patch

import pytest
import requests

from analyzers.remote_models import (ChatVerdictModel, DomainAuthority, EntityRecognizer, GrammarChecker,
                                     RemoteModels, SemanticSimilarity, SentimentModel, ZeroShotClassifier,
                                     parse_chat_verdict)
from models import FAKE, REAL, UNKNOWN

POST = "analyzers.remote_models.requests.post"
GET = "analyzers.remote_models.requests.get"


# =============================================================================
# Gating and failure containment
# =============================================================================

def test_missing_key_skips_without_calling():
    with patch(POST) as post:
        result = ZeroShotClassifier(api_key="").run("Some text")
    post.assert_not_called()
    assert result.skipped
    assert not result.ok
    assert result.value == {"label": UNKNOWN, "score": 0.0}


def test_non_200_becomes_fallback_with_error(make_response):
    with patch(POST, return_value=make_response(503)):
        result = SentimentModel(api_key="k").run("Some text")
    assert not result.ok
    assert result.error.status_code == 503
    assert result.error.adapter == "sentiment"
    assert result.value["label"] == UNKNOWN


def test_timeout_is_contained():
    with patch(POST, side_effect=requests.exceptions.Timeout()):
        result = EntityRecognizer(api_key="k").run("Some text")
    assert result.value == []
    assert result.error.reason == "timeout"


def test_connection_error_is_contained():
    with patch(POST, side_effect=requests.exceptions.ConnectionError()):
        result = ChatVerdictModel(api_key="k").run("Some text")
    assert result.value["verdict"] == UNKNOWN
    assert result.error.reason == "ConnectionError"


def test_malformed_body_is_contained(make_response):
    response = make_response(200)
    response.json.side_effect = ValueError("not json")
    with patch(POST, return_value=response):
        result = ZeroShotClassifier(api_key="k").run("Some text")
    assert not result.ok
    assert result.value["label"] == UNKNOWN


def test_input_is_truncated(make_response):
    body = [{"label": "reliable news", "score": 0.7}, {"label": "fake news", "score": 0.3}]
    with patch(POST, return_value=make_response(200, body)) as post:
        ZeroShotClassifier(api_key="k").run("x" * 2000)
    sent = post.call_args.kwargs["json"]["inputs"]
    assert len(sent) == 512
    assert post.call_args.kwargs["timeout"] == 10
    assert post.call_args.kwargs["headers"]["Authorization"] == "Bearer k"


# =============================================================================
# Response mapping
# =============================================================================

def test_zero_shot_list_response(make_response):
    body = [{"label": "fake news", "score": 0.8}, {"label": "reliable news", "score": 0.2}]
    with patch(POST, return_value=make_response(200, body)):
        result = ZeroShotClassifier(api_key="k").run("Some text")
    assert result.ok
    assert result.value["label"] == FAKE
    assert result.value["score"] == pytest.approx(0.8)


def test_zero_shot_dict_response(make_response):
    body = {"labels": ["reliable news", "fake news"], "scores": [0.65, 0.35]}
    with patch(POST, return_value=make_response(200, body)):
        result = ZeroShotClassifier(api_key="k").run("Some text")
    assert result.value["label"] == REAL


def test_sentiment_model(make_response):
    body = [[{"label": "POSITIVE", "score": 0.9}, {"label": "NEGATIVE", "score": 0.1}]]
    with patch(POST, return_value=make_response(200, body)):
        result = SentimentModel(api_key="k").run("Great news")
    assert result.value == {"label": "POSITIVE", "positive": 0.9, "negative": 0.1}


def test_entity_recognizer(make_response):
    body = [{"word": "Manila", "entity_group": "LOC", "score": 0.99, "start": 0, "end": 6}]
    with patch(POST, return_value=make_response(200, body)):
        result = EntityRecognizer(api_key="k").run("Manila is busy")
    assert result.value == [{"word": "Manila", "entity_group": "LOC", "score": 0.99}]


def test_similarity_scores_are_clamped(make_response):
    with patch(POST, return_value=make_response(200, [0.9, 1.2, -0.1])):
        result = SemanticSimilarity(api_key="k").run("claim", ["a", "b", "c"])
    assert result.value == [0.9, 1.0, 0.0]


def test_chat_verdict(make_response):
    body = {"choices": [{"message": {"content": 'Here you go: {"verdict": "fake", "confidence": 0.7, '
                                                '"reasoning": "No sources."}'}}]}
    with patch(POST, return_value=make_response(200, body)) as post:
        result = ChatVerdictModel(api_key="k").run("Some text")
    assert result.value == {"verdict": FAKE, "confidence": 0.7, "reasoning": "No sources."}
    assert post.call_args.kwargs["timeout"] == 15


def test_grammar_checker(make_response):
    with patch(POST, return_value=make_response(200, {"matches": [{}, {}, {}]})):
        result = GrammarChecker(api_key="k").run("Their is a error here")
    assert result.value == {"issues": 3}


def test_domain_authority(make_response):
    body = {"response": [{"status_code": 200, "page_rank_decimal": 7.5, "domain": "bbc.com"}]}
    with patch(GET, return_value=make_response(200, body)) as get:
        result = DomainAuthority(api_key="k").run("bbc.com")
    assert result.value == {"domain": "bbc.com", "authority": 0.75}
    assert get.call_args.kwargs["headers"] == {"API-OPR": "k"}


def test_domain_authority_unknown_domain(make_response):
    body = {"response": [{"status_code": 404, "page_rank_decimal": 0, "domain": "nope.xyz"}]}
    with patch(GET, return_value=make_response(200, body)):
        result = DomainAuthority(api_key="k").run("nope.xyz")
    assert not result.ok
    assert result.value["authority"] is None


# =============================================================================
# Chat reply parsing
# =============================================================================

@pytest.mark.parametrize("reply", [
    "I cannot answer that.",
    '{"verdict": "MAYBE", "confidence": 0.9}',
    '{"verdict": "REAL", "confidence": "high"}',
    '{"verdict": "REAL", ',
    "",
])
def test_unparseable_reply_is_unknown(reply):
    assert parse_chat_verdict(reply) == {"verdict": UNKNOWN, "confidence": 0.0, "reasoning": ""}


def test_percent_confidence_is_rescaled():
    parsed = parse_chat_verdict('```json\n{"verdict": "REAL", "confidence": 85, "reasoning": "ok"}\n```')
    assert parsed["verdict"] == REAL
    assert parsed["confidence"] == pytest.approx(0.85)


def test_confidence_is_clamped():
    assert parse_chat_verdict('{"verdict": "FAKE", "confidence": -3}')["confidence"] == 0.0


# =============================================================================
# Bundle
# =============================================================================

def test_disabled_bundle():
    models = RemoteModels.disabled()
    assert not models.ensemble_enabled
    assert not any(models.status().values())


def test_ensemble_enabled_by_either_engine():
    assert RemoteModels(zero_shot=ZeroShotClassifier(api_key="k"), chat=ChatVerdictModel(api_key="")).ensemble_enabled
    assert RemoteModels(zero_shot=ZeroShotClassifier(api_key=""), chat=ChatVerdictModel(api_key="k")).ensemble_enabled
