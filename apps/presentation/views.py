import logging
from rest_framework import viewsets, status
from rest_framework.decorators import api_view, permission_classes, action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiExample
from drf_spectacular.types import OpenApiTypes
from apps.presentation.serializers import (
    AnalyzeRequestSerializer, AnalyzeUploadSerializer,
    AnalysisResultSerializer, GroundingFailureSerializer
)
from apps.application.services.report_analysis_service import (
    ReportAnalysisService,
    InvalidReportInputError,
    GroundingViolationError,
)
from apps.infrastructure.services.gemini_analyzer import GeminiAPIError, GeminiSafetyError
from apps.infrastructure.services.report_extractor import ReportTextExtractorService
from apps.presentation.utils import error_response

logger = logging.getLogger('apps')

ANALYSIS_FAILED_MESSAGE = 'Failed to analyze files'
SAFETY_BLOCKED_MESSAGE = 'The request was blocked due to safety settings. Please check your input data.'


class AnalysisViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]

    def _run_analysis(self, file_contents):
        try:
            service = ReportAnalysisService()
            result = service.analyze(file_contents)
            return Response(result, status=status.HTTP_200_OK)
        except InvalidReportInputError as e:
            return error_response(str(e), status.HTTP_400_BAD_REQUEST)
        except GroundingViolationError as e:
            logger.warning(f'Grounding failure for analysis {e.cache_id}: {e.message}')
            return Response(e.to_dict(), status=status.HTTP_422_UNPROCESSABLE_ENTITY)
        except GeminiSafetyError:
            return error_response(SAFETY_BLOCKED_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)
        except GeminiAPIError as e:
            return error_response(ANALYSIS_FAILED_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR, {'detail': str(e)})
        except ValueError as e:
            # Missing GEMINI_API_KEY and similar configuration problems
            logger.error(f'Analysis configuration error: {str(e)}')
            return error_response(ANALYSIS_FAILED_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR, {'detail': str(e)})
        except Exception:
            logger.exception('Error in analyze API')
            return error_response(ANALYSIS_FAILED_MESSAGE, status.HTTP_500_INTERNAL_SERVER_ERROR)

    @extend_schema(
        summary='Analyze reports',
        description='Analyzes the extracted text of one or more retail media reports with Google Gemini. '
                    'The answer is restricted to vocabulary found in the reports and cached by content fingerprint.',
        tags=['Analysis'],
        request=AnalyzeRequestSerializer,
        responses={
            200: AnalysisResultSerializer,
            400: OpenApiTypes.OBJECT,
            422: GroundingFailureSerializer,
            500: OpenApiTypes.OBJECT,
        },
        examples=[
            OpenApiExample(
                'Analyze one report',
                value={
                    'fileContents': [
                        'Reporting Vendor Name is Acme Pets\nImpressions: 1000\nCTR: 2.5%'
                    ]
                },
                request_only=True
            ),
        ],
    )
    def create(self, request):
        serializer = AnalyzeRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Invalid file contents provided', status.HTTP_400_BAD_REQUEST, serializer.errors)

        return self._run_analysis(serializer.validated_data['fileContents'])

    @extend_schema(
        summary='Analyze uploaded report files',
        description='Extracts text from uploaded PDF, CSV or TXT reports and analyzes it like /api/analyze/.',
        tags=['Analysis'],
        request={'multipart/form-data': AnalyzeUploadSerializer},
        responses={
            200: AnalysisResultSerializer,
            400: OpenApiTypes.OBJECT,
            422: GroundingFailureSerializer,
            500: OpenApiTypes.OBJECT,
        },
    )
    @action(detail=False, methods=['post'], parser_classes=[MultiPartParser, FormParser])
    def upload(self, request):
        serializer = AnalyzeUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response('Please select one or more report files first.', status.HTTP_400_BAD_REQUEST, serializer.errors)

        extractor = ReportTextExtractorService()
        file_contents = [extractor.extract_text(uploaded) for uploaded in serializer.validated_data['files']]
        logger.info(f'Extracted text from {len(file_contents)} uploaded report(s)')

        return self._run_analysis(file_contents)

    @extend_schema(
        summary='Get a stored analysis',
        description='Returns a previously produced analysis by its cacheId. Returns 404 once the entry expired or was never stored.',
        tags=['Analysis'],
        parameters=[
            OpenApiParameter('cache_id', OpenApiTypes.STR, location=OpenApiParameter.PATH, description='cacheId returned by the analyze endpoint'),
        ],
        responses={
            200: AnalysisResultSerializer,
            404: OpenApiTypes.OBJECT,
        },
    )
    def retrieve(self, request, cache_id=None):
        try:
            service = ReportAnalysisService()
            result = service.get_cached_analysis(cache_id)
        except Exception:
            logger.exception('Cache read failed')
            return error_response('Failed to read analysis', status.HTTP_500_INTERNAL_SERVER_ERROR)

        if result is None:
            return error_response('Not found', status.HTTP_404_NOT_FOUND, {'cacheId': cache_id})
        return Response(result, status=status.HTTP_200_OK)


@extend_schema(
    summary='Echo request',
    description='Returns the request body unchanged. Useful to check connectivity from the front end.',
    tags=['Health'],
    request=OpenApiTypes.OBJECT,
    responses={200: OpenApiTypes.OBJECT},
)
@api_view(['POST'])
@permission_classes([AllowAny])
def echo_request(request):
    logger.info(f'Test API hit with body: {request.data}')
    return Response({'message': 'Test successful', 'body': request.data}, status=status.HTTP_200_OK)
