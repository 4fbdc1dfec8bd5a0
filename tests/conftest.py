# tests/conftest.py
# Shared fixtures: offline pipeline, temporary history database, Flask client

from unittest.mock import MagicMock

import pytest

from analyzers.factcheck_analyzer import FactCheckAnalyzer
from analyzers.remote_models import RemoteModels
from app import create_app
from database import AnalysisHistory
from extractors.article_extractor import ArticleExtractor
from pipeline import AnalysisPipeline

BBC_ARTICLE = (
    "Health officials in London confirmed on Tuesday that the new vaccination "
    "programme will reach 2,000 clinics by March. According to the Department "
    "of Health, the rollout follows a study published in The Lancet that found "
    "the vaccine reduced hospital admissions by 40 percent among adults over 65. "
    "Officials said the clinics would open in stages, beginning with rural "
    "districts where access to care has historically been limited. The agency "
    "expects to publish detailed regional figures next month."
)


def mock_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data if json_data is not None else {}
    response.text = text
    return response


@pytest.fixture
def offline_factcheck():
    return FactCheckAnalyzer(fact_check_key="", news_key="")


@pytest.fixture
def fake_extractor():
    """Extractor returning canned article text without touching the network."""
    extractor = MagicMock(spec=ArticleExtractor)
    extractor.extract.return_value = {
        'url': "https://www.bbc.com/news/health-123",
        'title': "Vaccination programme expands to 2,000 clinics",
        'content': BBC_ARTICLE,
        'source': "BBC News",
        'domain': "bbc.com",
    }
    return extractor


@pytest.fixture
def pipeline(offline_factcheck, fake_extractor):
    return AnalysisPipeline(
        factcheck=offline_factcheck,
        remote=RemoteModels.disabled(),
        extractor=fake_extractor,
    )


@pytest.fixture
def history(tmp_path):
    return AnalysisHistory(db_name=str(tmp_path / "history.db"))


@pytest.fixture
def client(pipeline, history):
    app = create_app(pipeline=pipeline, history=history)
    app.config['TESTING'] = True
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def make_response():
    return mock_response
