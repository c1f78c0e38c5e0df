"""
Pydantic Schemas for Request/Response Validation

JSON field names follow the other restaurant services (camelCase, e.g.
``orderedFood``, ``totalSum``, ``deliveryId``); snake_case names are
accepted as well. Guest, order, bill and item ids are coerced to int
here, so ``"3"`` and ``3`` always address the same guest.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing to camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# PRICING SERVICE SCHEMAS
# =============================================================================

class MenuItemPayload(BaseModel):
    """One entry of the pricing service's price list."""
    id: int
    price: float = Field(..., ge=0)


class MenuPayload(BaseModel):
    """Body of GET {pricing_endpoint}/prices."""
    food: List[MenuItemPayload] = Field(default_factory=list)
    drinks: List[MenuItemPayload] = Field(default_factory=list)


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class ItemRegistration(CamelModel):
    """Items delivered to a guest, sent by the delivery service."""
    guest: int = Field(..., examples=[1])
    order: int = Field(..., examples=[1])
    food: List[int] = Field(default_factory=list, examples=[[101, 102]])
    drinks: List[int] = Field(default_factory=list, examples=[[201]])
    delivery_id: Optional[int] = Field(None, examples=[7])


class OrderLineSchema(CamelModel):
    """Food and drink ids of one order."""
    order: int
    food: List[int] = Field(default_factory=list)
    drinks: List[int] = Field(default_factory=list)


class GuestOrders(CamelModel):
    """A guest's delivered, unpaid orders (one ledger entry)."""
    guest: int = Field(..., examples=[1])
    orders: List[OrderLineSchema] = Field(default_factory=list)


class PaymentRequest(CamelModel):
    """Payment of an open bill."""
    bill: int = Field(..., examples=[1])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class GuestBillResponse(CamelModel):
    """Bill as shown to the guest."""
    bill: int
    ordered_food: List[int]
    ordered_drinks: List[int]
    total_sum: float


class OpenBillResponse(CamelModel):
    """An open bill with its order lines."""
    bill: int
    guest: int
    orders: List[OrderLineSchema]
    total_sum: float


class PaidOrderResponse(CamelModel):
    order: int
    paid_food: List[int]
    paid_drinks: List[int]


class PaidBillResponse(CamelModel):
    """Receipt of a settled bill."""
    bill: int
    paid_orders: List[PaidOrderResponse]
    total_sum: float


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(CamelModel):
    """Health check response."""
    status: str
    menu_source: str
    menu_ready: bool
    menu_source_healthy: bool
    guests: int
    open_bills: int
    timestamp: datetime
