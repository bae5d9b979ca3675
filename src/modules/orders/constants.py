"""Order domain constants.

Defines status choices, the valid status transitions of the order
state machine, field limits shared by the model and the validators,
and the default cancellation reasons per entry point.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    SHIPPED = "shipped", "Shipped"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


# Values are tuples so the allowed-target order is stable for clients.
VALID_TRANSITIONS: dict[str, tuple[str, ...]] = {
    OrderStatus.PENDING: (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.SHIPPED, OrderStatus.CANCELLED),
    OrderStatus.SHIPPED: (OrderStatus.DELIVERED, OrderStatus.CANCELLED),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}

# Default cancellation reasons, one per entry point.
DEFAULT_UPDATE_CANCELLATION_REASON = "Cancelled by user"
DEFAULT_CANCEL_REASON = "Cancelled by customer"

CUSTOMER_NAME_MIN_LENGTH = 2
CUSTOMER_NAME_MAX_LENGTH = 100
PHONE_MIN_DIGITS = 10
PHONE_MAX_LENGTH = 32
PRODUCT_MIN_LENGTH = 2
PRODUCT_MAX_LENGTH = 200
QUANTITY_MIN = 1
QUANTITY_MAX = 1000
NOTES_MAX_LENGTH = 1000
CANCELLATION_REASON_MAX_LENGTH = 500

ORDER_ID_MIN_LENGTH = 3
ORDER_ID_MAX_LENGTH = 32
ORDER_ID_SEQUENCE_NAME = "orderId"
