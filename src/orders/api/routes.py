"""FastAPI routes for the Orders context: carts and orders."""

import json

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from orders.access.guard import require_roles
from orders.access.port import Principal, PrincipalKind
from orders.api.schemas import (
    AddCartItemRequest,
    AddOrderItemRequest,
    CancelOrderRequest,
    CartItemView,
    CartResponse,
    CartView,
    CreateCustomOrderRequest,
    CreateFromCartRequest,
    DisputeRequest,
    MessageResponse,
    OrderResponse,
    OrderSummary,
    OrderSummaryResponse,
    OrderView,
    RefundRequest,
    RemoveCartItemRequest,
    UpdateCartQuantityRequest,
    UpdateOrderItemRequest,
    UpdateStatusRequest,
)
from orders.cart.cart import Cart
from orders.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from orders.errors import AuthorizationError
from orders.order.archival import ArchiveOrder
from orders.order.assembly import AssembleCustomOrder, AssembleOrderFromCart, checkout
from orders.order.disputes import HandleDispute
from orders.order.lifecycle import CancelOrder, UpdateOrderStatus
from orders.order.modification import AddOrderItem, RemoveOrderItem, UpdateOrderItemQuantity
from orders.order.order import CancellationActor, Order
from orders.order.refunds import ProcessRefund
from orders.order.views import order_detail

USER = PrincipalKind.USER.value
RESTAURANT = PrincipalKind.RESTAURANT.value
ADMIN = PrincipalKind.ADMIN.value

_CANCELLING_ACTOR = {
    USER: CancellationActor.CUSTOMER.value,
    RESTAURANT: CancellationActor.RESTAURANT.value,
    ADMIN: CancellationActor.SYSTEM.value,
}


def _load_order(order_id: str) -> Order:
    return current_domain.repository_for(Order).get(order_id)


def _ensure_access(principal: Principal, order: Order) -> None:
    """Admins see everything; customers and restaurants only their own live orders."""
    if principal.is_admin:
        return
    if order.is_archived:
        raise ObjectNotFoundError(f"Order {order.id} not found")
    owner = order.customer_id if principal.kind == USER else order.restaurant_id
    if str(owner) != principal.id:
        raise AuthorizationError("Access denied: order belongs to another account")


def _order_response(order: Order, message: str) -> OrderResponse:
    return OrderResponse(message=message, data=OrderView(**order_detail(order)))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("/create-from-cart", status_code=201, response_model=OrderSummaryResponse)
async def create_from_cart(
    body: CreateFromCartRequest,
    principal: Principal = Depends(require_roles(USER)),
) -> OrderSummaryResponse:
    """Place an order from the caller's cart at one restaurant, then empty the cart."""
    command = AssembleOrderFromCart(
        customer_id=principal.id,
        restaurant_id=body.restaurant_id,
        delivery_address=json.dumps(body.delivery_address.model_dump()),
        special_instructions=body.special_instructions,
    )
    summary = checkout(command)
    return OrderSummaryResponse(message="Order created successfully", data=OrderSummary(**summary))


@order_router.post("/create-custom", status_code=201, response_model=OrderSummaryResponse)
async def create_custom(
    body: CreateCustomOrderRequest,
    principal: Principal = Depends(require_roles(ADMIN, RESTAURANT, manages_orders=True)),
) -> OrderSummaryResponse:
    """Place an order from an explicit item list. Does not touch any cart."""
    if principal.kind == RESTAURANT and body.restaurant_id != principal.id:
        raise AuthorizationError("Restaurants can only create orders for themselves")

    command = AssembleCustomOrder(
        customer_id=body.customer_id,
        customer_name=body.customer_name,
        restaurant_id=body.restaurant_id,
        restaurant_name=body.restaurant_name,
        items=json.dumps([item.model_dump() for item in body.items]),
        delivery_address=json.dumps(body.delivery_address.model_dump()),
        special_instructions=body.special_instructions,
        estimated_delivery=body.estimated_delivery,
    )
    summary = current_domain.process(command, asynchronous=False)
    return OrderSummaryResponse(message="Order created successfully", data=OrderSummary(**summary))


@order_router.get("/number/{order_number}", response_model=OrderResponse)
async def get_order_by_number(
    order_number: str,
    principal: Principal = Depends(require_roles(USER, RESTAURANT, ADMIN)),
) -> OrderResponse:
    order = current_domain.repository_for(Order).find_by_order_number(order_number)
    _ensure_access(principal, order)
    return _order_response(order, "Order retrieved successfully")


@order_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    principal: Principal = Depends(require_roles(USER, RESTAURANT, ADMIN)),
) -> OrderResponse:
    order = _load_order(order_id)
    _ensure_access(principal, order)
    return _order_response(order, "Order retrieved successfully")


@order_router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    principal: Principal = Depends(require_roles(RESTAURANT, ADMIN, manages_orders=True)),
) -> OrderResponse:
    _ensure_access(principal, _load_order(order_id))
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        reason=body.reason,
        cancelled_by=_CANCELLING_ACTOR[principal.kind],
        expected_revision=body.expected_revision,
    )
    status = current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(order_id), f"Order status updated to {status} successfully")


@order_router.patch("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest,
    principal: Principal = Depends(require_roles(USER, RESTAURANT, ADMIN, manages_orders=True)),
) -> OrderResponse:
    _ensure_access(principal, _load_order(order_id))
    command = CancelOrder(
        order_id=order_id,
        reason=body.reason,
        cancelled_by=_CANCELLING_ACTOR[principal.kind],
        expected_revision=body.expected_revision,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(order_id), "Order cancelled successfully")


@order_router.put("/{order_id}/refund", response_model=OrderResponse)
async def process_refund(
    order_id: str,
    body: RefundRequest,
    principal: Principal = Depends(require_roles(ADMIN)),
) -> OrderResponse:
    command = ProcessRefund(
        order_id=order_id,
        refund_amount=body.refund_amount,
        reason=body.reason,
        admin_note=body.admin_note,
        refunded_by=principal.id,
        expected_revision=body.expected_revision,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(order_id), "Refund processed successfully")


@order_router.put("/{order_id}/dispute", response_model=OrderResponse)
async def handle_dispute(
    order_id: str,
    body: DisputeRequest,
    principal: Principal = Depends(require_roles(ADMIN)),
) -> OrderResponse:
    command = HandleDispute(
        order_id=order_id,
        action=body.action,
        resolution=body.resolution,
        admin_note=body.admin_note,
        resolved_by=principal.id,
        expected_revision=body.expected_revision,
    )
    status = current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(order_id), f"Dispute {status.removeprefix('dispute_')} successfully")


@order_router.delete("/{order_id}", response_model=MessageResponse)
async def archive_order(
    order_id: str,
    expected_revision: int | None = None,
    principal: Principal = Depends(require_roles(ADMIN)),
) -> MessageResponse:
    """Soft delete: the order stays in the store, flagged as archived."""
    current_domain.process(ArchiveOrder(order_id=order_id, expected_revision=expected_revision), asynchronous=False)
    return MessageResponse(message="Order deleted successfully", data={"orderId": order_id})


@order_router.post("/{order_id}/items", response_model=OrderResponse)
async def add_order_item(
    order_id: str,
    body: AddOrderItemRequest,
    principal: Principal = Depends(require_roles(ADMIN, RESTAURANT, manages_orders=True)),
) -> OrderResponse:
    _ensure_access(principal, _load_order(order_id))
    command = AddOrderItem(
        order_id=order_id,
        item=json.dumps(body.item.model_dump()),
        expected_revision=body.expected_revision,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(order_id), "Item added to order successfully")


@order_router.put("/{order_id}/items/{line_id}", response_model=OrderResponse)
async def update_order_item(
    order_id: str,
    line_id: str,
    body: UpdateOrderItemRequest,
    principal: Principal = Depends(require_roles(ADMIN, RESTAURANT, manages_orders=True)),
) -> OrderResponse:
    _ensure_access(principal, _load_order(order_id))
    command = UpdateOrderItemQuantity(
        order_id=order_id,
        line_id=line_id,
        quantity=body.quantity,
        expected_revision=body.expected_revision,
    )
    current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(order_id), "Item quantity updated successfully")


@order_router.delete("/{order_id}/items/{line_id}", response_model=OrderResponse)
async def remove_order_item(
    order_id: str,
    line_id: str,
    expected_revision: int | None = None,
    principal: Principal = Depends(require_roles(ADMIN, RESTAURANT, manages_orders=True)),
) -> OrderResponse:
    _ensure_access(principal, _load_order(order_id))
    command = RemoveOrderItem(order_id=order_id, line_id=line_id, expected_revision=expected_revision)
    current_domain.process(command, asynchronous=False)
    return _order_response(_load_order(order_id), "Item removed from order successfully")


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_response(customer_id: str, restaurant_id: str, message: str) -> CartResponse:
    cart = current_domain.repository_for(Cart).find_active_cart(customer_id, restaurant_id)
    if cart is None:
        return CartResponse(message="No cart found", data=CartView(restaurant_id=restaurant_id))

    return CartResponse(
        message=message,
        data=CartView(
            id=str(cart.id),
            restaurant_id=str(cart.restaurant_id),
            items=[
                CartItemView(
                    item_id=str(line.item_id),
                    name=line.name,
                    description=line.description,
                    price=line.price,
                    quantity=line.quantity,
                    image=line.image,
                    category=line.category,
                    item_total=line.item_total,
                )
                for line in cart.items
            ],
            subtotal=cart.subtotal or 0.0,
            total=cart.total or 0.0,
            item_count=cart.item_count,
            revision=cart.revision or 0,
        ),
    )


@cart_router.get("/{restaurant_id}", response_model=CartResponse)
async def get_cart(
    restaurant_id: str,
    principal: Principal = Depends(require_roles(USER)),
) -> CartResponse:
    return _cart_response(principal.id, restaurant_id, "Cart retrieved successfully")


@cart_router.post("/add-item", response_model=CartResponse)
async def add_item_to_cart(
    body: AddCartItemRequest,
    principal: Principal = Depends(require_roles(USER)),
) -> CartResponse:
    item = body.item_data
    command = AddToCart(
        customer_id=principal.id,
        restaurant_id=body.restaurant_id,
        item_id=item.item_id,
        name=item.name,
        description=item.description,
        price=item.price,
        quantity=item.quantity,
        image=item.image,
        category=item.category,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(principal.id, body.restaurant_id, "Item added to cart successfully")


@cart_router.put("/update-quantity", response_model=CartResponse)
async def update_cart_quantity(
    body: UpdateCartQuantityRequest,
    principal: Principal = Depends(require_roles(USER)),
) -> CartResponse:
    command = UpdateCartQuantity(
        customer_id=principal.id,
        restaurant_id=body.restaurant_id,
        item_id=body.item_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return _cart_response(principal.id, body.restaurant_id, "Item quantity updated successfully")


@cart_router.delete("/remove-item", response_model=CartResponse)
async def remove_cart_item(
    body: RemoveCartItemRequest,
    principal: Principal = Depends(require_roles(USER)),
) -> CartResponse:
    command = RemoveFromCart(customer_id=principal.id, restaurant_id=body.restaurant_id, item_id=body.item_id)
    current_domain.process(command, asynchronous=False)
    return _cart_response(principal.id, body.restaurant_id, "Item removed from cart successfully")


@cart_router.delete("/{restaurant_id}/clear", response_model=CartResponse)
async def clear_cart(
    restaurant_id: str,
    principal: Principal = Depends(require_roles(USER)),
) -> CartResponse:
    current_domain.process(ClearCart(customer_id=principal.id, restaurant_id=restaurant_id), asynchronous=False)
    return _cart_response(principal.id, restaurant_id, "Cart cleared successfully")
