from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework import status
from drf_spectacular.utils import extend_schema
from apps.infrastructure.cache.factory import CacheStoreFactory


@extend_schema(
    summary='Health Check',
    description='Checks that the API is running and that the analysis cache backend is reachable.',
    tags=['Health'],
    responses={
        200: {
            'type': 'object',
            'properties': {
                'status': {
                    'type': 'string',
                    'example': 'ok',
                    'description': 'Overall API status'
                },
                'message': {
                    'type': 'string',
                    'example': 'Server is running',
                },
                'cache': {
                    'type': 'object',
                    'properties': {
                        'backend': {'type': 'string', 'example': 'memory', 'description': 'memory or redis'},
                        'status': {'type': 'string', 'example': 'healthy', 'description': 'healthy/unhealthy'},
                    }
                }
            }
        }
    },
)
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    try:
        store = CacheStoreFactory().get_store()
        backend = store.backend_name
        cache_status = 'healthy' if store.ping() else 'unhealthy'
    except Exception:
        backend = 'unknown'
        cache_status = 'unhealthy'

    return Response({
        'status': 'ok',
        'message': 'Server is running',
        'cache': {
            'backend': backend,
            'status': cache_status,
        }
    }, status=status.HTTP_200_OK)
