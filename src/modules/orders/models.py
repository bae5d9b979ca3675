"""Order and identifier Counter models.

Business rules implemented:
- ``order_id`` is a human-readable identifier (``ORD-<seq>``), unique and
  never reassigned; it is the only identifier exposed through the API.
- Status transitions are validated by ``state_machine`` before any write;
  the model only copies a decided outcome onto itself.
- ``cancelled_at`` / ``cancellation_reason`` are present iff the status is
  ``cancelled`` (DB check constraint as a backstop).
- ``version`` is an optimistic-concurrency token bumped on every mutation.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import SoftDeleteModel
from modules.orders import state_machine
from modules.orders.constants import (
    CANCELLATION_REASON_MAX_LENGTH,
    CUSTOMER_NAME_MAX_LENGTH,
    ORDER_ID_MAX_LENGTH,
    PHONE_MAX_LENGTH,
    PRODUCT_MAX_LENGTH,
    QUANTITY_MAX,
    QUANTITY_MIN,
    OrderStatus,
)
from shared.domain.events import DomainEventMixin

# Columns an update may write; identity and bookkeeping fields are excluded.
MUTABLE_FIELDS = (
    "customer_name",
    "phone",
    "product",
    "quantity",
    "status",
    "notes",
    "cancelled_at",
    "cancellation_reason",
)


class Order(DomainEventMixin, SoftDeleteModel):
    """Order aggregate root.

    ``order_id`` is assigned by the service through the configured
    identifier generator before the first insert.  The UUIDv7 ``id`` is
    internal only.
    """

    order_id: models.CharField = models.CharField(
        max_length=ORDER_ID_MAX_LENGTH, unique=True, editable=False
    )
    customer_name: models.CharField = models.CharField(
        max_length=CUSTOMER_NAME_MAX_LENGTH
    )
    phone: models.CharField = models.CharField(max_length=PHONE_MAX_LENGTH)
    product: models.CharField = models.CharField(max_length=PRODUCT_MAX_LENGTH)
    quantity: models.PositiveIntegerField = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(QUANTITY_MIN), MaxValueValidator(QUANTITY_MAX)],
    )
    status: models.CharField = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    cancelled_at: models.DateTimeField = models.DateTimeField(
        null=True, blank=True, default=None
    )
    cancellation_reason: models.CharField = models.CharField(  # noqa: DJ01
        max_length=CANCELLATION_REASON_MAX_LENGTH,
        null=True,
        blank=True,
        default=None,
    )
    notes: models.TextField = models.TextField(blank=True, default="")
    version: models.PositiveIntegerField = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="orders_status_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=QUANTITY_MIN)
                & models.Q(quantity__lte=QUANTITY_MAX),
                name="orders_quantity_range",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(
                        status=OrderStatus.CANCELLED,
                        cancelled_at__isnull=False,
                        cancellation_reason__isnull=False,
                    )
                    | (
                        ~models.Q(status=OrderStatus.CANCELLED)
                        & models.Q(
                            cancelled_at__isnull=True,
                            cancellation_reason__isnull=True,
                        )
                    )
                ),
                name="orders_cancellation_consistent",
            ),
        ]

    # ------------------------------------------------------------------
    # State Machine
    # ------------------------------------------------------------------

    def apply_transition(self, outcome: state_machine.TransitionOutcome) -> None:
        """Copy a decided transition onto this instance (no save)."""
        if not outcome.changed:
            return
        self.status = outcome.status
        self.cancelled_at = outcome.cancelled_at
        self.cancellation_reason = outcome.cancellation_reason

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.order_id} ({self.status})"


class Counter(models.Model):
    """Named monotonically increasing sequence.

    Backs ``DatabaseCounterBackend``; one row per sequence name.
    """

    name: models.CharField = models.CharField(max_length=50, primary_key=True)
    value: models.BigIntegerField = models.BigIntegerField(default=0)

    class Meta:
        db_table = "order_counters"

    def __str__(self) -> str:
        return f"{self.name}={self.value}"
