import django_filters
from rest_framework.filters import OrderingFilter

from modules.orders.constants import OrderStatus
from modules.orders.models import Order

# Public sort keys mapped to model fields.
SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "orderId": "order_id",
    "customerName": "customer_name",
    "product": "product",
    "quantity": "quantity",
    "status": "status",
}


class SortOrderingFilter(OrderingFilter):
    """``?sortBy=<key>&sortOrder=asc|desc`` on top of DRF's ordering filter.

    ``sortBy`` takes the public keys of ``SORTABLE_FIELDS``; unknown keys
    fall back to the view's default ordering field.  Anything but ``asc``
    sorts descending.
    """

    ordering_param = "sortBy"
    direction_param = "sortOrder"

    def get_ordering(self, request, queryset, view):
        default = self.get_default_ordering(view)[0].lstrip("-")
        field = SORTABLE_FIELDS.get(request.query_params.get(self.ordering_param, ""))
        term = field or default
        if request.query_params.get(self.direction_param) != "asc":
            term = f"-{term}"
        return self.remove_invalid_fields(queryset, [term], view, request) or [
            f"-{default}"
        ]


class OrderFilter(django_filters.FilterSet):
    status = django_filters.CharFilter(method="filter_status")
    customerName = django_filters.CharFilter(
        field_name="customer_name", lookup_expr="icontains"
    )
    product = django_filters.CharFilter(field_name="product", lookup_expr="icontains")
    createdFrom = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    createdTo = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")

    class Meta:
        model = Order
        fields = ["status", "customerName", "product", "createdFrom", "createdTo"]

    def filter_status(self, queryset, name, value):
        # Unknown status values are ignored rather than rejected.
        if value not in OrderStatus.values:
            return queryset
        return queryset.filter(status=value)
