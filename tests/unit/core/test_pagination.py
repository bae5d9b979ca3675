import pytest
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from modules.core.pagination import StandardResultsSetPagination

pytestmark = pytest.mark.unit

factory = APIRequestFactory()


def _request(**query) -> Request:
    return Request(factory.get("/items", query))


class TestPaginateRequest:
    @pytest.mark.parametrize(
        "query,expected",
        [
            ({}, (1, 10)),
            ({"page": "3", "limit": "25"}, (3, 25)),
            ({"page": "0"}, (1, 10)),
            ({"page": "-4"}, (1, 10)),
            ({"limit": "500"}, (1, 100)),
            ({"limit": "0"}, (1, 10)),
            ({"limit": "-2"}, (1, 1)),
            ({"page": "two", "limit": "ten"}, (1, 10)),
        ],
    )
    def test_clamps_instead_of_rejecting(self, query, expected):
        paginator = StandardResultsSetPagination()
        assert paginator.paginate_request(_request(**query)) == expected

    def test_limits_follow_settings(self, settings):
        settings.DEFAULT_PAGE_SIZE = 5
        settings.MAX_PAGE_SIZE = 20
        assert StandardResultsSetPagination().paginate_request(_request()) == (1, 5)
        assert StandardResultsSetPagination().paginate_request(
            _request(limit="50")
        ) == (1, 20)


class TestPaginatedResponse:
    def test_envelope(self):
        paginator = StandardResultsSetPagination()
        paginator.results_key = "orders"
        paginator.paginate_request(_request(page="2", limit="5"))

        response = paginator.get_paginated_response(["a", "b"], total=12)

        assert response.status_code == 200
        assert response.data == {
            "success": True,
            "message": "Results retrieved successfully",
            "data": {
                "total": 12,
                "page": 2,
                "totalPages": 3,
                "limit": 5,
                "orders": ["a", "b"],
            },
        }

    def test_no_matches_has_zero_pages(self):
        paginator = StandardResultsSetPagination()
        paginator.paginate_request(_request())
        data = paginator.get_paginated_data([], total=0)
        assert data["totalPages"] == 0
        assert data["results"] == []
