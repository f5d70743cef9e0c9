"""Pydantic request/response schemas for the Orders API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. JSON keys are camelCase on the wire; Python code
uses snake_case names.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {"alias_generator": to_camel, "populate_by_name": True}


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(CamelModel):
    # street and city are checked by the domain so the error names the field
    street: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None


class ItemInput(CamelModel):
    item_id: str
    name: str
    description: str | None = ""
    price: float
    quantity: int
    image: str | None = ""
    category: str | None = None


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class CreateFromCartRequest(CamelModel):
    restaurant_id: str
    delivery_address: AddressSchema
    special_instructions: str | None = Field(default=None, max_length=500)

    model_config = {
        **CamelModel.model_config,
        "json_schema_extra": {
            "examples": [
                {
                    "restaurantId": "rest-001",
                    "deliveryAddress": {"street": "12 MG Road", "city": "Bengaluru"},
                    "specialInstructions": "Less spicy",
                }
            ]
        },
    }


class CreateCustomOrderRequest(CamelModel):
    customer_id: str
    customer_name: str | None = None
    restaurant_id: str
    restaurant_name: str | None = None
    items: list[ItemInput]
    delivery_address: AddressSchema
    special_instructions: str | None = Field(default=None, max_length=500)
    estimated_delivery: str | None = None


class UpdateStatusRequest(CamelModel):
    status: str
    reason: str | None = None
    expected_revision: int | None = None


class CancelOrderRequest(CamelModel):
    reason: str | None = None
    expected_revision: int | None = None


class RefundRequest(CamelModel):
    refund_amount: float
    reason: str
    admin_note: str | None = None
    expected_revision: int | None = None


class DisputeRequest(CamelModel):
    action: str
    resolution: str
    admin_note: str | None = None
    expected_revision: int | None = None


class AddOrderItemRequest(CamelModel):
    item: ItemInput
    expected_revision: int | None = None


class UpdateOrderItemRequest(CamelModel):
    quantity: int
    expected_revision: int | None = None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CartItemData(CamelModel):
    item_id: str
    name: str
    description: str | None = ""
    price: float = Field(gt=0)
    quantity: int = Field(ge=1, default=1)
    image: str | None = ""
    category: str | None = ""


class AddCartItemRequest(CamelModel):
    restaurant_id: str
    item_data: CartItemData


class UpdateCartQuantityRequest(CamelModel):
    restaurant_id: str
    item_id: str
    quantity: int


class RemoveCartItemRequest(CamelModel):
    restaurant_id: str
    item_id: str


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderSummary(CamelModel):
    order_id: str
    order_number: str
    status: str
    total_amount: float


class OrderItemView(CamelModel):
    id: str
    item_id: str
    name: str
    description: str = ""
    price: float
    quantity: int
    image: str = ""
    category: str | None = None
    item_total: float | None = None


class OrderView(CamelModel):
    id: str
    order_number: str
    customer_id: str
    customer_name: str
    restaurant_id: str
    restaurant_name: str
    items: list[OrderItemView]
    item_count: int
    subtotal: float | None = None
    total_amount: float | None = None
    delivery_address: AddressSchema | None = None
    special_instructions: str | None = None
    status: str
    estimated_delivery: str | None = None
    ordered_at: str | None = None
    cancellation_reason: str | None = None
    cancelled_by: str | None = None
    cancelled_at: str | None = None
    refund_amount: float | None = None
    refund_reason: str | None = None
    refunded_by: str | None = None
    refunded_at: str | None = None
    dispute_status: str | None = None
    dispute_resolution: str | None = None
    dispute_resolved_by: str | None = None
    dispute_resolved_at: str | None = None
    admin_note: str | None = None
    is_archived: bool = False
    revision: int = 0
    created_at: str | None = None
    updated_at: str | None = None


class CartItemView(CamelModel):
    item_id: str
    name: str
    description: str | None = ""
    price: float
    quantity: int
    image: str | None = ""
    category: str | None = ""
    item_total: float | None = None


class CartView(CamelModel):
    id: str | None = None
    restaurant_id: str
    items: list[CartItemView] = []
    subtotal: float = 0.0
    total: float = 0.0
    item_count: int = 0
    revision: int = 0


class Envelope(CamelModel):
    success: bool = True
    message: str


class OrderSummaryResponse(Envelope):
    data: OrderSummary


class OrderResponse(Envelope):
    data: OrderView


class CartResponse(Envelope):
    data: CartView


class MessageResponse(Envelope):
    data: dict | None = None
