import json
import math
import time
import hashlib
import logging
from typing import Dict, List, Optional, Sequence
from django.conf import settings
from apps.domain.models import (
    PERFORMER_COUNT,
    DocumentType,
    degraded_analysis_result,
)
from apps.domain.interfaces.analysis_cache_store import AnalysisCacheStore
from apps.application.services.content_classifier import classify_document_type
from apps.application.services.vocabulary_filter import TermWhitelist, build_term_whitelist
from apps.application.services.prompt_builder import (
    PROMPT_VERSION,
    build_analysis_prompt,
    build_retry_prompt,
    extract_brand_name,
)
from apps.infrastructure.cache.factory import CacheStoreFactory
from apps.infrastructure.services.gemini_analyzer import (
    DEFAULT_GEMINI_MODEL,
    GeminiAnalyzerService,
    GeminiParseError,
    extract_json_object,
)

logger = logging.getLogger('apps')

CACHE_KEY_PREFIX = 'analysis:'
DEFAULT_CACHE_TTL = 60 * 60 * 24 * 7


class InvalidReportInputError(ValueError):
    """Raised when the request carries no report text to analyze"""
    pass


class GroundingViolationError(Exception):
    """Raised when the model keeps using vocabulary absent from the uploaded reports"""

    def __init__(self, message: str, document_type: DocumentType, allowed: Sequence[str], cache_id: str):
        super().__init__(message)
        self.message = message
        self.document_type = document_type
        self.allowed = list(allowed)
        self.cache_id = cache_id

    def to_dict(self) -> Dict:
        return {
            'error': self.message,
            'documentType': DocumentType(self.document_type).value,
            'allowed': self.allowed,
            'cacheId': self.cache_id,
        }


def compute_cache_id(combined_content: str, document_type: str, model_name: str, prompt_version: str) -> str:
    fingerprint = f'{combined_content}|{document_type}|{model_name}|{prompt_version}'
    return hashlib.sha256(fingerprint.encode('utf-8')).hexdigest()


class ReportAnalysisService:
    """
    Turns uploaded report text into a grounded, cached analysis.

    Identical inputs (same text, document type, model and prompt version) are
    answered from the cache store. On a miss the model is called once, and a
    second time only if its answer uses vocabulary the reports never mention.
    """

    def __init__(
        self,
        cache_store: Optional[AnalysisCacheStore] = None,
        analyzer: Optional[GeminiAnalyzerService] = None,
        model_name: Optional[str] = None,
        cache_ttl: Optional[int] = None,
    ):
        self.cache_store = cache_store if cache_store is not None else CacheStoreFactory().get_store()
        self._analyzer = analyzer
        if model_name:
            self.model_name = model_name
        elif analyzer is not None:
            self.model_name = analyzer.model_name
        else:
            self.model_name = getattr(settings, 'GEMINI_MODEL', DEFAULT_GEMINI_MODEL)
        self.cache_ttl = cache_ttl or getattr(settings, 'ANALYSIS_CACHE_TTL', DEFAULT_CACHE_TTL)
        self.network = getattr(settings, 'RETAIL_MEDIA_NETWORK', 'Petco')

    @property
    def analyzer(self) -> GeminiAnalyzerService:
        # Built lazily so cache hits never need an API key
        if self._analyzer is None:
            self._analyzer = GeminiAnalyzerService(model_name=self.model_name)
        return self._analyzer

    def analyze(self, file_contents: Sequence[str]) -> Dict:
        """
        Analyze one or more report texts.

        Returns:
            The analysis dict with a 'cacheId' key

        Raises:
            InvalidReportInputError: When file_contents is not a non-empty list of strings
            GroundingViolationError: When the retry still violates the allowed vocabulary
            GeminiAPIError: When the model call itself fails
        """
        self._validate_input(file_contents)
        start_time = time.time()

        combined_content = '\n\n'.join(file_contents)
        document_type = classify_document_type(combined_content)
        whitelist = build_term_whitelist(combined_content)

        cache_id = compute_cache_id(combined_content, document_type.value, self.model_name, PROMPT_VERSION)
        cache_key = f'{CACHE_KEY_PREFIX}{cache_id}'

        cached = self._cache_lookup(cache_key)
        if cached is not None:
            logger.info(f'Cache hit for analysis {cache_id}')
            return {**cached, 'cacheId': cache_id}

        logger.info(
            f'Cache miss for analysis {cache_id}: {len(file_contents)} report(s), '
            f'document type {document_type.value}, allowed terms: {whitelist.allowed_list()}'
        )

        brand_name = extract_brand_name(combined_content)
        prompt = build_analysis_prompt(combined_content, brand_name, document_type, whitelist, self.network)

        analysis = self._generate_first_attempt(prompt)
        violations = whitelist.find_violations(self._serialize(analysis))
        if violations:
            logger.warning(f'Analysis {cache_id} uses forbidden terms {violations}, retrying once')
            analysis = self._generate_retry(prompt, whitelist, document_type, cache_id)

        if analysis.get('degraded'):
            logger.warning(f'Analysis {cache_id} is degraded, not caching it')
        else:
            self._cache_store(cache_key, analysis)

        logger.info(f'Analysis {cache_id} produced in {round(time.time() - start_time, 2)}s')
        return {**analysis, 'cacheId': cache_id}

    def get_cached_analysis(self, cache_id: str) -> Optional[Dict]:
        cached = self._cache_lookup(f'{CACHE_KEY_PREFIX}{cache_id}')
        if cached is None:
            return None
        return {**cached, 'cacheId': cache_id}

    def _validate_input(self, file_contents) -> None:
        if not isinstance(file_contents, (list, tuple)) or len(file_contents) == 0:
            raise InvalidReportInputError('File contents must be a non-empty array.')
        if not all(isinstance(content, str) for content in file_contents):
            raise InvalidReportInputError('Every file content must be a string.')

    def _generate_first_attempt(self, prompt: str) -> Dict:
        text = self.analyzer.generate(prompt)
        try:
            return self._structure_response(extract_json_object(text))
        except GeminiParseError as e:
            logger.error(f'Error parsing AI response: {str(e)}')
            logger.debug(f'Raw response: {text[:500]}')
            return degraded_analysis_result()

    def _generate_retry(
        self,
        prompt: str,
        whitelist: TermWhitelist,
        document_type: DocumentType,
        cache_id: str,
    ) -> Dict:
        retry_text = self.analyzer.generate(build_retry_prompt(prompt, whitelist.forbidden))

        try:
            analysis = self._structure_response(extract_json_object(retry_text))
        except GeminiParseError as e:
            logger.error(f'Retry for analysis {cache_id} returned no usable JSON: {str(e)}')
            raise GroundingViolationError(
                'Failed to produce analysis strictly grounded in uploaded documents',
                document_type, whitelist.allowed, cache_id,
            )

        violations = whitelist.find_violations(self._serialize(analysis))
        if violations:
            logger.error(f'Retry for analysis {cache_id} still uses forbidden terms {violations}')
            raise GroundingViolationError(
                'Generated analysis references terms not present in the uploaded documents',
                document_type, whitelist.allowed, cache_id,
            )

        return analysis

    def _cache_lookup(self, cache_key: str) -> Optional[Dict]:
        try:
            cached = self.cache_store.get(cache_key)
        except Exception as e:
            logger.warning(f'Cache lookup failed, proceeding to generate analysis: {str(e)}')
            return None
        return cached if isinstance(cached, dict) else None

    def _cache_store(self, cache_key: str, analysis: Dict) -> None:
        try:
            self.cache_store.set(cache_key, analysis, self.cache_ttl)
        except Exception as e:
            logger.error(f'Cache store failed: {str(e)}')

    def _serialize(self, analysis: Dict) -> str:
        return json.dumps(analysis, ensure_ascii=False)

    def _structure_response(self, analysis_data: Dict) -> Dict:
        """Fill in missing keys and coerce the model answer to the AnalysisResult shape"""
        highlights = analysis_data.get('kpiHighlights')
        if not isinstance(highlights, dict):
            highlights = {}

        result = {
            'executiveSummary': self._as_text(analysis_data.get('executiveSummary')),
            'kpiHighlights': {
                'positive': self._as_text_list(highlights.get('positive')),
                'negative': self._as_text_list(highlights.get('negative')),
            },
            'benchmarkComparison': self._as_text(analysis_data.get('benchmarkComparison')),
            'kpiTrends': self._structure_trends(analysis_data.get('kpiTrends')),
            'topPerformers': self._structure_performers(analysis_data.get('topPerformers')),
            'bottomPerformers': self._structure_performers(analysis_data.get('bottomPerformers')),
            'actionableRecommendations': self._as_text_list(analysis_data.get('actionableRecommendations')),
            'petcoContextualization': self._as_text(analysis_data.get('petcoContextualization')),
        }
        return result

    def _structure_trends(self, trends) -> List[Dict]:
        structured = []
        for trend in trends if isinstance(trends, list) else []:
            if not isinstance(trend, dict):
                continue
            points = []
            data = trend.get('data')
            for point in data if isinstance(data, list) else []:
                if not isinstance(point, dict):
                    continue
                value = self._as_number(point.get('value'))
                if value is None:
                    continue
                points.append({'period': self._as_text(point.get('period')), 'value': value})
            structured.append({'metric': self._as_text(trend.get('metric')), 'data': points})
        return structured

    def _structure_performers(self, performers) -> List[Dict]:
        structured = []
        for performer in performers if isinstance(performers, list) else []:
            if not isinstance(performer, dict):
                continue
            structured.append({
                'name': self._as_text(performer.get('name')),
                'metric': self._as_text(performer.get('metric')),
                'value': self._as_text(performer.get('value')),
                'description': self._as_text(performer.get('description')),
            })
        return structured[:PERFORMER_COUNT]

    @staticmethod
    def _as_text(value) -> str:
        if value is None:
            return ''
        return value if isinstance(value, str) else str(value)

    @classmethod
    def _as_text_list(cls, values) -> List[str]:
        if not isinstance(values, list):
            return []
        return [cls._as_text(value) for value in values if value is not None]

    @staticmethod
    def _as_number(value) -> Optional[float]:
        # NaN and Infinity are not valid JSON numbers
        if isinstance(value, bool):
            return None
        if isinstance(value, str):
            cleaned = value.replace(',', '').replace('$', '').replace('%', '').strip()
            try:
                value = float(cleaned)
            except ValueError:
                return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and math.isfinite(value):
            return value
        return None
