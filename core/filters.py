"""
Sorting backend for list endpoints.

Reads ``?sort_by=<field>&sort_order=asc|desc``. Views declare the fields
they allow in ``sort_fields`` and their default in ``default_sort``;
anything else falls back to the default.
"""
from rest_framework.filters import BaseFilterBackend


class SortFilter(BaseFilterBackend):
    sort_param = 'sort_by'
    order_param = 'sort_order'

    def filter_queryset(self, request, queryset, view):
        allowed = getattr(view, 'sort_fields', ())
        default = getattr(view, 'default_sort', None)

        sort_by = request.query_params.get(self.sort_param) or default
        if sort_by not in allowed:
            sort_by = default
        if not sort_by:
            return queryset

        default_order = getattr(view, 'default_sort_order', 'desc')
        sort_order = request.query_params.get(self.order_param, default_order).lower()
        prefix = '' if sort_order == 'asc' else '-'

        # Tie-break on creation time so pages stay stable
        return queryset.order_by(f'{prefix}{sort_by}', '-created_at')
