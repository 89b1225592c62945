"""
DRF exception handler producing the API envelope.

Every error leaving a DRF view has the shape
``{"success": false, "message": ..., "errors"?: {...}}``.
"""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework import exceptions
from rest_framework.serializers import as_serializer_error
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Format DRF-handled exceptions as envelope responses."""
    # Model.clean() errors raised from save paths become 400s
    if isinstance(exc, DjangoValidationError):
        exc = exceptions.ValidationError(detail=as_serializer_error(exc))

    view = context.get('view')
    is_missing_object = isinstance(exc, Http404)

    response = exception_handler(exc, context)
    if response is None:
        # Not an API exception; JSONExceptionMiddleware takes over
        return None

    if is_missing_object:
        payload = {
            'success': False,
            'message': getattr(view, 'not_found_message', 'Resource not found'),
        }
    elif isinstance(exc, exceptions.ValidationError):
        payload = {
            'success': False,
            'message': 'Validation error',
            'errors': response.data,
        }
    else:
        detail = response.data.get('detail') if isinstance(response.data, dict) else response.data
        payload = {
            'success': False,
            'message': str(detail),
        }

    if response.status_code >= 500:
        logger.error(f"API error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")

    response.data = payload
    return response
