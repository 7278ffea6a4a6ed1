from typing import Dict

PERFORMER_COUNT = 3


def degraded_analysis_result() -> Dict:
    """Placeholder returned when the model output holds no parseable JSON."""
    return {
        'executiveSummary': 'We encountered an issue processing the AI analysis. Please try again or contact support.',
        'kpiHighlights': {
            'positive': ['Unable to process data'],
            'negative': ['Analysis error occurred'],
        },
        'benchmarkComparison': 'Unable to compare due to processing error',
        'kpiTrends': [],
        'topPerformers': [],
        'bottomPerformers': [],
        'actionableRecommendations': ['Please try uploading your files again'],
        'petcoContextualization': 'Unable to provide context due to processing error',
        'degraded': True,
    }
