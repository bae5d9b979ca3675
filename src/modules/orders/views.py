"""Order API views.

Exposes ``OrderService`` over HTTP with a DRF ViewSet.  Views only
validate input, call the service and shape the envelope: domain
exceptions propagate to ``modules.core.exceptions`` untouched.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.core.responses import success_response
from modules.orders.constants import ORDER_ID_MIN_LENGTH
from modules.orders.dtos import ListOrdersDTO
from modules.orders.exceptions import InvalidOrderId
from modules.orders.filters import SORTABLE_FIELDS, OrderFilter, SortOrderingFilter
from modules.orders.identifiers import get_identifier_generator
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CancellationSerializer,
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderSerializer,
    UpdateOrderSerializer,
)
from modules.orders.services import OrderService
from modules.orders.validators import validate_cancel, validate_create, validate_update

TRUTHY = {"1", "true", "yes"}

LIST_PARAMETERS = [
    OpenApiParameter("page", OpenApiTypes.INT, description="Page number (>= 1)."),
    OpenApiParameter("limit", OpenApiTypes.INT, description="Page size (1-100)."),
    OpenApiParameter("status", OpenApiTypes.STR),
    OpenApiParameter("sortBy", OpenApiTypes.STR, description="Default createdAt."),
    OpenApiParameter("sortOrder", OpenApiTypes.STR, enum=["asc", "desc"]),
    OpenApiParameter("customerName", OpenApiTypes.STR),
    OpenApiParameter("product", OpenApiTypes.STR),
    OpenApiParameter("createdFrom", OpenApiTypes.DATE),
    OpenApiParameter("createdTo", OpenApiTypes.DATE),
]


class OrderPagination(StandardResultsSetPagination):
    results_key = "orders"
    message = "Orders retrieved successfully"


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Orders are addressed by their public ``orderId``.  All ORM access goes
    through the service/repository layer; ``queryset`` only describes the
    resource to DRF's ordering filter and the schema generator.
    """

    queryset = Order.objects.alive()
    lookup_field = "order_id"
    pagination_class = OrderPagination
    ordering_fields = list(SORTABLE_FIELDS.values())
    ordering = ["-created_at"]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            id_generator=get_identifier_generator(),
        )

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @extend_schema(request=CreateOrderSerializer, responses={201: OpenApiTypes.OBJECT})
    def create(self, request: Request) -> Response:
        """POST /orders"""
        dto = validate_create(request.data)
        order = self._service.create_order(dto)
        return success_response(
            "Order created successfully",
            OrderSerializer(order).data,
            status=status.HTTP_201_CREATED,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    @extend_schema(parameters=LIST_PARAMETERS, responses=OpenApiTypes.OBJECT)
    def list(self, request: Request) -> Response:
        """GET /orders

        Never rejects query parameters: bad pagination values fall back to
        defaults, unknown sort keys to ``createdAt``, unknown statuses are
        ignored.
        """
        query = request.query_params
        page, limit = self.paginator.paginate_request(request)
        (ordering,) = SortOrderingFilter().get_ordering(
            request, self.get_queryset(), self
        )
        params = ListOrdersDTO(
            page=page,
            limit=limit,
            sort_by=ordering.lstrip("-"),
            descending=ordering.startswith("-"),
            filters={
                name: query[name] for name in OrderFilter.base_filters if name in query
            },
        )

        orders, total = self._service.list_orders(params)
        return self.paginator.get_paginated_response(
            OrderSerializer(orders, many=True).data, total
        )

    @extend_schema(responses=OpenApiTypes.OBJECT)
    def retrieve(self, request: Request, order_id: str) -> Response:
        """GET /orders/{orderId}"""
        if len(order_id) < ORDER_ID_MIN_LENGTH:
            raise InvalidOrderId(order_id)
        order = self._service.get_order(order_id)
        return success_response(
            "Order retrieved successfully", OrderSerializer(order).data
        )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    @extend_schema(request=UpdateOrderSerializer, responses=OpenApiTypes.OBJECT)
    def partial_update(self, request: Request, order_id: str) -> Response:
        """PATCH /orders/{orderId}"""
        return self._update(request, order_id)

    @extend_schema(request=UpdateOrderSerializer, responses=OpenApiTypes.OBJECT)
    def update(self, request: Request, order_id: str) -> Response:
        """PUT /orders/{orderId}: same semantics as PATCH."""
        return self._update(request, order_id)

    def _update(self, request: Request, order_id: str) -> Response:
        dto = validate_update(request.data)
        order = self._service.update_order(order_id, dto)
        return success_response(
            "Order updated successfully", OrderSerializer(order).data
        )

    # ------------------------------------------------------------------
    # Cancel (dedicated action)
    # ------------------------------------------------------------------

    @extend_schema(request=CancelOrderSerializer, responses=OpenApiTypes.OBJECT)
    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, order_id: str) -> Response:
        """POST /orders/{orderId}/cancel"""
        dto = validate_cancel(request.data)
        order = self._service.cancel_order(order_id, dto)
        return success_response(
            "Order cancelled successfully", CancellationSerializer(order).data
        )

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    @extend_schema(
        parameters=[
            OpenApiParameter(
                "hard", OpenApiTypes.BOOL, description="Remove the row physically."
            )
        ],
        responses=OpenApiTypes.OBJECT,
    )
    def destroy(self, request: Request, order_id: str) -> Response:
        """DELETE /orders/{orderId}: soft delete unless ``?hard=true``."""
        hard = request.query_params.get("hard", "").lower() in TRUTHY
        self._service.delete_order(order_id, hard=hard)
        if hard:
            return success_response(
                "Order permanently deleted", {"orderId": order_id, "deleted": True}
            )
        return success_response(
            "Order deleted successfully", {"orderId": order_id, "isDeleted": True}
        )
