from .document_type import DocumentType
from .analysis_result import PERFORMER_COUNT, degraded_analysis_result

__all__ = [
    'DocumentType',
    'PERFORMER_COUNT',
    'degraded_analysis_result',
]
