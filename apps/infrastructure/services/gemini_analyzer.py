import re
import json
import logging
from typing import Dict, Optional
from django.conf import settings
import google.generativeai as genai

logger = logging.getLogger('apps')

DEFAULT_GEMINI_MODEL = 'gemini-2.5-flash'

_FENCED_JSON_RE = re.compile(r'```json\n([\s\S]*?)\n```')
_BRACED_JSON_RE = re.compile(r'\{[\s\S]*\}')


class GeminiAPIError(Exception):
    """Base exception for Gemini API errors"""
    pass


class GeminiRateLimitError(GeminiAPIError):
    """Raised when rate limit is exceeded"""
    pass


class GeminiTimeoutError(GeminiAPIError):
    """Raised when request times out"""
    pass


class GeminiSafetyError(GeminiAPIError):
    """Raised when the prompt or the answer is blocked by safety settings"""
    pass


class GeminiParseError(GeminiAPIError):
    """Raised when JSON parsing fails"""
    pass


def extract_json_object(text: str) -> Dict:
    """
    Locate and parse the JSON object in a model answer.

    A fenced ```json block wins over a bare object; otherwise the span from the
    first '{' to the last '}' is parsed.

    Raises:
        GeminiParseError: When no JSON object can be found or decoded
    """
    text = text or ''
    fenced = _FENCED_JSON_RE.search(text)
    if fenced:
        json_string = fenced.group(1)
    else:
        braced = _BRACED_JSON_RE.search(text)
        if not braced:
            raise GeminiParseError('No valid JSON found in the response')
        json_string = braced.group(0)

    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise GeminiParseError(f'Invalid JSON response from Gemini: {str(e)}')

    if not isinstance(data, dict):
        raise GeminiParseError('Gemini response JSON is not an object')
    return data


class GeminiAnalyzerService:
    def __init__(self, model_name: Optional[str] = None):
        api_key = getattr(settings, 'GEMINI_API_KEY', None)
        if not api_key:
            raise ValueError('GEMINI_API_KEY not configured in settings')

        genai.configure(api_key=api_key)

        self.model_name = model_name or getattr(settings, 'GEMINI_MODEL', DEFAULT_GEMINI_MODEL)
        self.temperature = getattr(settings, 'GEMINI_TEMPERATURE', 0.2)
        self.max_output_tokens = getattr(settings, 'GEMINI_MAX_OUTPUT_TOKENS', 8192)
        self.timeout = getattr(settings, 'GEMINI_TIMEOUT', 120)

        try:
            self.model = genai.GenerativeModel(self.model_name)
            logger.info(f'Initialized Gemini model: {self.model_name}')
        except Exception as e:
            error_msg = str(e)
            logger.error(f'Error initializing Gemini model {self.model_name}: {error_msg}')
            if 'not found' in error_msg.lower() or '404' in error_msg:
                raise GeminiAPIError(f'Gemini model {self.model_name} not found')
            raise GeminiAPIError(f'Failed to initialize Gemini model: {error_msg}')

    def generate(self, prompt: str) -> str:
        """
        Send a prompt to Gemini asking for JSON output and return the raw answer text.

        Raises:
            GeminiRateLimitError: When rate limit is exceeded
            GeminiTimeoutError: When request times out
            GeminiSafetyError: When the request is blocked by safety settings
            GeminiAPIError: For other API errors
        """
        generation_config = {
            'temperature': self.temperature,
            'max_output_tokens': self.max_output_tokens,
            'response_mime_type': 'application/json',
        }

        try:
            response = self.model.generate_content(
                prompt,
                generation_config=generation_config,
                request_options={'timeout': self.timeout},
            )
            # Accessing .text raises ValueError when the candidate was blocked
            text = response.text
        except Exception as e:
            raise self._classify_error(e)

        if not text:
            raise GeminiAPIError('Empty response from Gemini API')

        tokens_used = None
        if hasattr(response, 'usage_metadata'):
            tokens_used = getattr(response.usage_metadata, 'total_token_count', None)
        logger.info(f'Gemini {self.model_name} answered with {len(text)} characters (tokens used: {tokens_used})')

        return text

    def _classify_error(self, error: Exception) -> GeminiAPIError:
        error_str = str(error).lower()

        if '429' in error_str or 'rate limit' in error_str or 'quota' in error_str or 'resource_exhausted' in error_str:
            logger.warning('Gemini rate limit reached')
            return GeminiRateLimitError('Gemini API rate limit exceeded')
        if 'timeout' in error_str or 'timed out' in error_str or 'deadline' in error_str:
            logger.warning(f'Gemini request timed out after {self.timeout}s')
            return GeminiTimeoutError('Gemini API request timed out')
        if 'safety' in error_str or 'blocked' in error_str:
            logger.warning(f'Gemini request blocked by safety settings: {str(error)}')
            return GeminiSafetyError('The request was blocked due to safety settings')

        logger.error(f'Gemini API error: {str(error)}')
        # Never expose API key in error messages
        return GeminiAPIError('Gemini API error occurred')
