"""Page-number pagination for list endpoints.

List endpoints never reject pagination input: missing or malformed values
fall back to the defaults and out-of-range values are clamped
(``page >= 1``, ``1 <= limit <= MAX_PAGE_SIZE``).  Repositories fetch the
page themselves, so this class only reads the request and shapes the
enveloped response.
"""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence, Tuple

from django.conf import settings
from rest_framework.pagination import PageNumberPagination
from rest_framework.request import Request
from rest_framework.response import Response

from modules.core.responses import success_response


def _to_int(value: Any) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class StandardResultsSetPagination(PageNumberPagination):
    page_size_query_param = "limit"
    results_key = "results"
    message = "Results retrieved successfully"

    def __init__(self) -> None:
        self.page_size = settings.DEFAULT_PAGE_SIZE
        self.max_page_size = settings.MAX_PAGE_SIZE
        self.page_number = 1
        self.limit = self.page_size

    def get_page_size(self, request: Request) -> int:
        limit = _to_int(request.query_params.get(self.page_size_query_param))
        if not limit:
            return self.page_size
        return min(self.max_page_size, max(1, limit))

    def get_page_number(self, request: Request, paginator=None) -> int:
        page = _to_int(request.query_params.get(self.page_query_param))
        return max(1, page or 1)

    def paginate_request(self, request: Request) -> Tuple[int, int]:
        """Read ``(page, limit)`` from the query string."""
        self.request = request
        self.page_number = self.get_page_number(request)
        self.limit = self.get_page_size(request)
        return self.page_number, self.limit

    def get_paginated_data(self, data: Sequence[Any], total: int) -> dict:
        return {
            "total": total,
            "page": self.page_number,
            "totalPages": math.ceil(total / self.limit),
            "limit": self.limit,
            self.results_key: list(data),
        }

    def get_paginated_response(self, data: Sequence[Any], total: int) -> Response:
        """Envelope one page of rendered items; ``total`` counts every match."""
        return success_response(self.message, self.get_paginated_data(data, total))
