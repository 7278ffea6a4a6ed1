import re
from typing import Iterable
from apps.domain.models import DocumentType
from apps.application.services.content_classifier import channel_directive
from apps.application.services.vocabulary_filter import TermWhitelist

# Bump whenever the prompt text changes, it is part of the analysis cache key
PROMPT_VERSION = 'v2-onsite-guardrails-2025-09-18'

DEFAULT_BRAND_NAME = 'the brand'

_BRAND_NAME_RE = re.compile(r'Brand\s+Name\s+is\s+([A-Za-z0-9\-\&_ ]+)', re.IGNORECASE)
_VENDOR_NAME_RE = re.compile(r'Reporting\s+Vendor\s+Name\s+is\s+([A-Za-z0-9\-\&_ ]+)', re.IGNORECASE)
_BRAND_GUESS_RE = re.compile(r'\b([A-Z][a-zA-Z0-9\-\&_]+)\b(?=.*Brand\s+ROAS)')

_JSON_SHAPE = '''{
  "executiveSummary": string,
  "kpiHighlights": { "positive": string[], "negative": string[] },
  "benchmarkComparison": string,
  "kpiTrends": [
    { "metric": string, "data": [ { "period": string, "value": number } ] }
  ],
  "topPerformers": [
    { "name": string, "metric": string, "value": string, "description": string }
  ],
  "bottomPerformers": [
    { "name": string, "metric": string, "value": string, "description": string }
  ],
  "actionableRecommendations": string[],
  "petcoContextualization": string
}'''


def extract_brand_name(text: str) -> str:
    """Find the advertised brand: explicit declarations first, then a name preceding 'Brand ROAS'."""
    for pattern in (_BRAND_NAME_RE, _VENDOR_NAME_RE, _BRAND_GUESS_RE):
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return DEFAULT_BRAND_NAME


def build_analysis_prompt(
    combined_content: str,
    brand_name: str,
    document_type: DocumentType,
    whitelist: TermWhitelist,
    network: str = 'Petco',
) -> str:
    vocabulary_constraints = (
        f'Document type: {DocumentType(document_type).value}\n'
        f'Allowed terms detected: {whitelist.allowed_list()}\n'
        'Instruction: Only use terms in Allowed list. Do not introduce any other vocabulary.'
    )

    return f"""
You are a senior retail media analyst. Analyze {network} Retail Media Network performance for the brand {brand_name}. Do NOT refer to {network} as the brand.

{vocabulary_constraints}

{channel_directive(document_type)}

Hard constraints:
- Ground every statement strictly in the provided input only. No assumptions.
- Use only terms from the Allowed list above.
- Quantify all claims with exact values and percentage deltas shown in the input (e.g., vs LM, vs benchmark).
- Call out week/campaign specifics where present with exact values and deltas vs benchmark.
- Provide concrete, tactical recommendations grounded in the observed data (budget reallocation, creative, targeting, bidding, keywords).
- List exactly 3 top performers and 3 bottom performers when the input has enough items.
- Return strictly valid JSON only (no markdown). Use the exact key names shown in the schema below.

JSON schema (shape only):
{_JSON_SHAPE}

Input reports (analyze only the following text; do not use external knowledge):
{combined_content}
"""


def build_retry_prompt(prompt: str, forbidden_terms: Iterable[str]) -> str:
    forbid_list = ', '.join(forbidden_terms)
    return (
        f'{prompt}\n\n'
        f'Critical rule: Do not use any of the following terms unless they appear verbatim in the input: {forbid_list}\n'
        'If any forbidden terms appear in your JSON, your response is invalid. '
        'Regenerate strictly using only allowed terms.'
    )
