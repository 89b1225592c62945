"""
JSON error envelope for unhandled exceptions on API routes.
"""
import logging

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import Http404, JsonResponse

logger = logging.getLogger(__name__)


class JSONExceptionMiddleware:
    """
    Turn uncaught exceptions under ``/api/`` into a 500 envelope.

    The raw error message is echoed only when DEBUG is on.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith('/api/'):
            return None
        if isinstance(exception, (Http404, PermissionDenied)):
            return None

        logger.error(
            f"Unhandled error on {request.method} {request.path}: {exception}",
            exc_info=exception,
        )

        payload = {
            'success': False,
            'message': 'Something went wrong!',
        }
        if settings.DEBUG:
            payload['error'] = str(exception)
        return JsonResponse(payload, status=500)
