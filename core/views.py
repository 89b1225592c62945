"""
Core API views: health check and JSON error handlers.
"""
from django.conf import settings
from django.db import connection
from django.http import JsonResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from .tasks import check_database


@api_view(['GET'])
def health_check(request):
    """
    GET /api/health

    Liveness plus database connection state. Returns 503 when the
    database does not answer.
    """
    db_status = check_database()
    healthy = db_status == 'connected'

    return Response(
        {
            'success': healthy,
            'status': 'OK' if healthy else 'DEGRADED',
            'message': 'Farm management API is running',
            'timestamp': timezone.now().isoformat(),
            'environment': settings.ENVIRONMENT,
            'database': {
                'status': db_status,
                'vendor': connection.vendor,
            },
        },
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    )


def endpoint_not_found(request, exception=None):
    """handler404: unmatched routes."""
    return JsonResponse(
        {'success': False, 'message': 'API endpoint not found'},
        status=404
    )


def server_error(request):
    """handler500: last-resort envelope when DEBUG is off."""
    return JsonResponse(
        {'success': False, 'message': 'Something went wrong!'},
        status=500
    )
