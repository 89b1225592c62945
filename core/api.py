"""
Base API views for record endpoints.

Each entity router follows the same pattern:

    GET    /api/<entity>              paginated list (?page, ?limit, ?sort_by, ?sort_order, filters)
    POST   /api/<entity>              create (201)
    GET    /api/<entity>/<id>         single record or 404
    PUT    /api/<entity>/<id>         partial update
    DELETE /api/<entity>/<id>         delete

Responses use the envelope ``{success, data?, message?, errors?}``.
"""
import logging
from datetime import datetime

from django.db import IntegrityError, transaction
from django.urls import path
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.response import Response

from .filters import SortFilter

logger = logging.getLogger(__name__)


def with_trailing_slash(urlpatterns):
    """Register each route a second time with a trailing slash."""
    return urlpatterns + [
        path(f'{pattern.pattern}/', pattern.callback, kwargs=pattern.default_args)
        for pattern in urlpatterns
    ]


def missing_required_fields(data, required_fields):
    """Return the required fields that are absent or blank in ``data``."""
    missing = []
    for field in required_fields:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(field)
    return missing


def missing_fields_response(missing):
    return Response(
        {
            'success': False,
            'message': f"Please provide all required fields: {', '.join(missing)}",
            'errors': {field: ['This field is required.'] for field in missing},
        },
        status=status.HTTP_400_BAD_REQUEST
    )


def validation_error_response(errors):
    return Response(
        {
            'success': False,
            'message': 'Validation error',
            'errors': errors,
        },
        status=status.HTTP_400_BAD_REQUEST
    )


class DateRangeMixin:
    """Parse ``?start_date`` / ``?end_date`` (YYYY-MM-DD) query parameters."""

    def _parse_date(self, date_str):
        """Parse date string to date object."""
        if not date_str:
            return None
        try:
            return datetime.strptime(date_str, '%Y-%m-%d').date()
        except (ValueError, TypeError):
            return None

    def get_date_range(self, request):
        return (
            self._parse_date(request.query_params.get('start_date')),
            self._parse_date(request.query_params.get('end_date')),
        )

    def filter_date_range(self, queryset, request, field='date'):
        start_date, end_date = self.get_date_range(request)
        if start_date:
            queryset = queryset.filter(**{f'{field}__gte': start_date})
        if end_date:
            queryset = queryset.filter(**{f'{field}__lte': end_date})
        return queryset


class RecordListCreateView(generics.ListCreateAPIView):
    """
    List records with filtering, sorting and pagination, or create one.

    Subclasses set ``required_fields``, ``create_message`` and
    ``duplicate_message`` (returned when a unique constraint trips).
    """
    filter_backends = [DjangoFilterBackend, SortFilter]
    sort_fields = ('date', 'created_at')
    default_sort = 'date'

    required_fields = ()
    create_message = 'Record created successfully'
    duplicate_message = 'Record already exists'

    def create(self, request, *args, **kwargs):
        missing = missing_required_fields(request.data, self.required_fields)
        if missing:
            return missing_fields_response(missing)

        serializer = self.get_serializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        try:
            with transaction.atomic():
                self.perform_create(serializer)
        except IntegrityError as exc:
            logger.warning(f"{self.__class__.__name__}: duplicate rejected ({exc})")
            return Response(
                {'success': False, 'message': self.duplicate_message},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response(
            {
                'success': True,
                'message': self.create_message,
                'data': serializer.data,
            },
            status=status.HTTP_201_CREATED
        )


class RecordDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    Retrieve, partially update or delete a single record.

    PUT and PATCH both apply a partial update.
    """
    not_found_message = 'Record not found'
    update_message = 'Record updated successfully'
    delete_message = 'Record deleted successfully'
    duplicate_message = 'Record already exists'

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance)
        return Response({'success': True, 'data': serializer.data})

    def update(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer.errors)

        try:
            with transaction.atomic():
                self.perform_update(serializer)
        except IntegrityError as exc:
            logger.warning(f"{self.__class__.__name__}: duplicate rejected ({exc})")
            return Response(
                {'success': False, 'message': self.duplicate_message},
                status=status.HTTP_400_BAD_REQUEST
            )

        return Response({
            'success': True,
            'message': self.update_message,
            'data': serializer.data,
        })

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return Response({'success': True, 'message': self.delete_message})
