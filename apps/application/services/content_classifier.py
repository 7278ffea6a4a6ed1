import re
from apps.domain.models import DocumentType

_ONSITE_PATTERNS = [
    re.compile(r'\bOn\s*site\b', re.IGNORECASE),
    re.compile(r'\bOnsite\b', re.IGNORECASE),
]
_OFFSITE_PATTERNS = [
    re.compile(r'\bOff\s*site\b', re.IGNORECASE),
    re.compile(r'\bOffsite\b', re.IGNORECASE),
]

_CHANNEL_DIRECTIVES = {
    DocumentType.ONSITE: (
        'For ONSITE documents, analyze by ad item types present in input (e.g., SPA, Catapult, Banner) '
        'and KPIs such as Attributed Sales and ROAS. Do NOT use offsite-specific terms unless they '
        'appear verbatim in the input.'
    ),
    DocumentType.OFFSITE: (
        'For OFFSITE documents, analyze by channel types present in input (e.g., Paid Social, Paid Search) '
        'and KPIs such as Brand Revenues and Brand ROAS. Do NOT use onsite-specific terms unless they '
        'appear verbatim in the input.'
    ),
    DocumentType.MIXED: (
        'For MIXED content, only use terms that appear verbatim in the input; '
        'do not introduce any unseen terminology.'
    ),
}


def classify_document_type(text: str) -> DocumentType:
    """Tag report text as ONSITE, OFFSITE or MIXED. Ambiguous or unmarked text is MIXED."""
    is_onsite = any(pattern.search(text) for pattern in _ONSITE_PATTERNS)
    is_offsite = any(pattern.search(text) for pattern in _OFFSITE_PATTERNS)

    if is_onsite and not is_offsite:
        return DocumentType.ONSITE
    if is_offsite and not is_onsite:
        return DocumentType.OFFSITE
    return DocumentType.MIXED


def channel_directive(document_type: DocumentType) -> str:
    return _CHANNEL_DIRECTIVES.get(document_type, _CHANNEL_DIRECTIVES[DocumentType.MIXED])
