"""Cart item management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from orders.cart.cart import Cart
from orders.directory.restaurant import Restaurant
from orders.domain import orders


@orders.command(part_of="Cart")
class AddToCart:
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = String(max_length=500)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)
    image = String(max_length=500)
    category = String(max_length=50)


@orders.command(part_of="Cart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    item_id = Identifier(required=True)
    # Zero or less removes the line
    quantity = Integer(required=True)


@orders.command(part_of="Cart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)
    item_id = Identifier(required=True)


@orders.command(part_of="Cart")
class ClearCart:
    customer_id = Identifier(required=True)
    restaurant_id = Identifier(required=True)


def _existing_cart(repo, customer_id, restaurant_id) -> Cart:
    cart = repo.find_active_cart(customer_id, restaurant_id)
    if cart is None:
        raise ObjectNotFoundError("No active cart found")
    return cart


@orders.command_handler(part_of=Cart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        # Raises ObjectNotFoundError for an unknown restaurant
        current_domain.repository_for(Restaurant).get(command.restaurant_id)

        repo = current_domain.repository_for(Cart)
        cart = repo.find_active_cart(command.customer_id, command.restaurant_id)
        if cart is None:
            cart = Cart.create(customer_id=command.customer_id, restaurant_id=command.restaurant_id)

        cart.add_item(
            item_id=command.item_id,
            name=command.name,
            price=command.price,
            quantity=command.quantity,
            description=command.description or "",
            image=command.image or "",
            category=command.category or "",
        )
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.customer_id, command.restaurant_id)
        cart.update_item_quantity(item_id=command.item_id, new_quantity=command.quantity)
        repo.add(cart)
        return str(cart.id)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.customer_id, command.restaurant_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)
        return str(cart.id)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(Cart)
        cart = _existing_cart(repo, command.customer_id, command.restaurant_id)
        cart.clear()
        repo.add(cart)
        return str(cart.id)
