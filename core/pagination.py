"""
Pagination shared by every list endpoint.

Wraps a page of results in the API envelope with ``count`` (items on the
page), ``total`` (matching records), ``page`` and ``pages``.
"""
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class EnvelopePagination(PageNumberPagination):
    """Page-number pagination driven by ``?page=`` and ``?limit=``."""
    page_size = 10
    page_size_query_param = 'limit'
    max_page_size = 100

    def get_paginated_response_data(self, data):
        """Return pagination metadata with results."""
        return {
            'success': True,
            'count': len(data),
            'total': self.page.paginator.count,
            'page': self.page.number,
            'pages': self.page.paginator.num_pages,
            'data': data,
        }

    def get_paginated_response(self, data):
        return Response(self.get_paginated_response_data(data))
