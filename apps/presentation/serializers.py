from rest_framework import serializers
from apps.domain.models import DocumentType


class AnalyzeRequestSerializer(serializers.Serializer):
    fileContents = serializers.ListField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False),
        allow_empty=False,
        help_text='Extracted text of each uploaded report, one string per file. Must contain at least one item.'
    )


class AnalyzeUploadSerializer(serializers.Serializer):
    files = serializers.ListField(
        child=serializers.FileField(),
        allow_empty=False,
        help_text='One or more report files (PDF, CSV, TXT)'
    )


class KpiHighlightsSerializer(serializers.Serializer):
    positive = serializers.ListField(child=serializers.CharField(), help_text='Positive performance indicators')
    negative = serializers.ListField(child=serializers.CharField(), help_text='Areas for improvement')


class TrendDataPointSerializer(serializers.Serializer):
    period = serializers.CharField(help_text='Reporting period, e.g. 202506')
    value = serializers.FloatField(help_text='Metric value for the period')


class KpiTrendSerializer(serializers.Serializer):
    metric = serializers.CharField(help_text='KPI name, e.g. ROAS')
    data = TrendDataPointSerializer(many=True)


class PerformerSerializer(serializers.Serializer):
    name = serializers.CharField(help_text='Campaign, ad item or product name')
    metric = serializers.CharField(help_text='Metric used for ranking')
    value = serializers.CharField(help_text='Metric value as shown in the report')
    description = serializers.CharField(help_text='Why the item ranks here')


class AnalysisResultSerializer(serializers.Serializer):
    executiveSummary = serializers.CharField()
    kpiHighlights = KpiHighlightsSerializer()
    benchmarkComparison = serializers.CharField()
    kpiTrends = KpiTrendSerializer(many=True)
    topPerformers = PerformerSerializer(many=True, help_text='Top 3 performers')
    bottomPerformers = PerformerSerializer(many=True, help_text='Bottom 3 performers')
    actionableRecommendations = serializers.ListField(child=serializers.CharField())
    petcoContextualization = serializers.CharField()
    degraded = serializers.BooleanField(
        required=False,
        help_text='Present and true when the model answer could not be parsed and a placeholder is returned'
    )
    cacheId = serializers.CharField(help_text='SHA-256 fingerprint of the analyzed input, usable with /api/analysis/<cacheId>/')


class GroundingFailureSerializer(serializers.Serializer):
    error = serializers.CharField()
    documentType = serializers.ChoiceField(choices=DocumentType.choices)
    allowed = serializers.ListField(child=serializers.CharField(), help_text='Candidate terms found in the uploaded reports')
    cacheId = serializers.CharField()
