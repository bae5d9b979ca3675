"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the validators (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderDTO``: input for order creation.
- ``UpdateOrderDTO``: input for PATCH/PUT; only explicitly provided
  fields are applied (see ``provided_fields``).
- ``CancelOrderDTO``: input for the dedicated cancel action.
- ``ListOrdersDTO``: clamped pagination, sorting and raw filters.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field

from modules.orders.constants import OrderStatus

# UpdateOrderDTO fields that are not order attributes.
_CONTROL_FIELDS = frozenset({"version", "cancellation_reason"})


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests (already validated)."""

    model_config = ConfigDict(frozen=True)

    customer_name: str
    phone: str
    product: str
    quantity: int = 1
    notes: str = ""


class UpdateOrderDTO(BaseModel):
    """Immutable DTO for partial updates.

    Absent fields mean "leave unchanged"; an absent ``status`` means no
    status change was requested.  ``cancellation_reason`` is only used
    when the update transitions the order into ``cancelled``.
    """

    model_config = ConfigDict(frozen=True)

    status: Optional[OrderStatus] = None
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    product: Optional[str] = None
    quantity: Optional[int] = None
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    version: Optional[int] = None

    @property
    def provided_fields(self) -> FrozenSet[str]:
        """Order attributes the client explicitly sent."""
        return frozenset(self.model_fields_set) - _CONTROL_FIELDS

    def field_changes(self) -> Dict[str, Any]:
        """Plain attribute assignments, excluding ``status``."""
        changes: Dict[str, Any] = {}
        for name in self.provided_fields - {"status"}:
            value = getattr(self, name)
            if name == "notes":
                value = value or ""
            elif value is None:
                continue
            changes[name] = value
        return changes


class CancelOrderDTO(BaseModel):
    """Immutable DTO for cancel requests."""

    model_config = ConfigDict(frozen=True)

    reason: Optional[str] = None


class ListOrdersDTO(BaseModel):
    """Immutable DTO for list requests; page/limit are already clamped."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1)
    sort_by: str = "created_at"
    descending: bool = True
    filters: Dict[str, str] = Field(default_factory=dict)
