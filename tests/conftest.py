import json
import pytest
from unittest.mock import Mock
from apps.infrastructure.cache.factory import CacheStoreFactory
from apps.infrastructure.cache.memory_store import InMemoryAnalysisCacheStore


ACME_REPORT = (
    'Reporting Vendor Name is Acme Pets\n'
    'Monthly performance report 202506\n'
    'Impressions: 1000\n'
    'CTR: 2.5%\n'
)


def make_analysis(**overrides):
    analysis = {
        'executiveSummary': 'Acme Pets delivered 1000 Impressions at a 2.5% CTR.',
        'kpiHighlights': {
            'positive': ['CTR of 2.5% is strong'],
            'negative': ['Impressions volume of 1000 is modest'],
        },
        'benchmarkComparison': 'CTR of 2.5% sits above the 2.0% benchmark.',
        'kpiTrends': [
            {'metric': 'CTR', 'data': [{'period': '202506', 'value': 2.5}]},
        ],
        'topPerformers': [
            {'name': 'Chew Toy', 'metric': 'CTR', 'value': '3.1%', 'description': 'Highest CTR in the report'},
        ],
        'bottomPerformers': [
            {'name': 'Cat Bed', 'metric': 'CTR', 'value': '0.9%', 'description': 'Lowest CTR in the report'},
        ],
        'actionableRecommendations': ['Shift budget toward the Chew Toy creative'],
        'petcoContextualization': 'Summer seasonality lifted Impressions.',
    }
    analysis.update(overrides)
    return analysis


@pytest.fixture(autouse=True)
def analysis_settings(settings):
    settings.REDIS_URL = None
    settings.GEMINI_API_KEY = 'test-api-key'
    settings.GEMINI_MODEL = 'gemini-2.5-flash'
    settings.ANALYSIS_CACHE_TTL = 3600
    CacheStoreFactory().clear_cache()
    yield settings
    CacheStoreFactory().clear_cache()


@pytest.fixture
def clock():
    current = {'now': 1000.0}

    def now():
        return current['now']

    now.advance = lambda seconds: current.update(now=current['now'] + seconds)
    return now


@pytest.fixture
def memory_store(clock):
    return InMemoryAnalysisCacheStore(clock=clock)


@pytest.fixture
def clean_analysis():
    return make_analysis()


@pytest.fixture
def analyzer(clean_analysis):
    mock_analyzer = Mock()
    mock_analyzer.model_name = 'gemini-2.5-flash'
    mock_analyzer.generate.return_value = json.dumps(clean_analysis)
    return mock_analyzer
