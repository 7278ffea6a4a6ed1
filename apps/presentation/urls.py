from django.urls import path
from rest_framework.parsers import MultiPartParser, FormParser
from .views import AnalysisViewSet, echo_request
from .health import health_check

urlpatterns = [
    path('analyze/', AnalysisViewSet.as_view({
        'post': 'create'
    }), name='analysis-create'),
    path('analyze/upload/', AnalysisViewSet.as_view({
        'post': 'upload'
    }, parser_classes=[MultiPartParser, FormParser]), name='analysis-upload'),
    path('analysis/<str:cache_id>/', AnalysisViewSet.as_view({
        'get': 'retrieve'
    }), name='analysis-detail'),
    path('test/', echo_request, name='echo'),
    path('health/', health_check, name='api-health'),
]
