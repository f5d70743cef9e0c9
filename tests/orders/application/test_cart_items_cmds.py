"""Tests for cart commands processed through the domain."""

import pytest
from orders.cart.cart import Cart
from orders.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartQuantity
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _add(customer_id, restaurant_id, item_id="item-thali", quantity=2):
    return _process(
        AddToCart(
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            item_id=item_id,
            name="Veg Thali",
            price=120.0,
            quantity=quantity,
        )
    )


def _set_quantity(customer_id, restaurant_id, quantity):
    _process(
        UpdateCartQuantity(
            customer_id=customer_id,
            restaurant_id=restaurant_id,
            item_id="item-thali",
            quantity=quantity,
        )
    )


def _cart(customer_id, restaurant_id):
    return current_domain.repository_for(Cart).find_active_cart(customer_id, restaurant_id)


class TestAddToCart:
    def test_creates_cart_on_first_add(self, customer, restaurant):
        cart_id = _add(customer.id, restaurant.id)
        cart = _cart(customer.id, restaurant.id)
        assert str(cart.id) == cart_id
        assert cart.total == 240.0

    def test_reuses_cart_per_restaurant(self, customer, restaurant):
        first = _add(customer.id, restaurant.id)
        second = _add(customer.id, restaurant.id, quantity=1)
        assert first == second
        assert _cart(customer.id, restaurant.id).items[0].quantity == 3

    def test_unknown_restaurant(self, customer):
        with pytest.raises(ObjectNotFoundError):
            _add(customer.id, "no-such-restaurant")

    def test_free_item_rejected(self, customer, restaurant):
        command = AddToCart(
            customer_id=customer.id,
            restaurant_id=restaurant.id,
            item_id="item-papad",
            name="Papad",
            price=0.0,
            quantity=1,
        )
        with pytest.raises(ValidationError):
            _process(command)
        assert _cart(customer.id, restaurant.id) is None


class TestChangeCart:
    def test_update_quantity(self, customer, restaurant):
        _add(customer.id, restaurant.id)
        _set_quantity(customer.id, restaurant.id, 4)
        assert _cart(customer.id, restaurant.id).total == 480.0

    def test_update_to_zero_removes_line(self, customer, restaurant):
        _add(customer.id, restaurant.id)
        _set_quantity(customer.id, restaurant.id, 0)
        assert _cart(customer.id, restaurant.id).is_empty

    def test_remove(self, customer, restaurant):
        _add(customer.id, restaurant.id)
        _add(customer.id, restaurant.id, item_id="item-dosa")
        _process(RemoveFromCart(customer_id=customer.id, restaurant_id=restaurant.id, item_id="item-dosa"))
        assert [i.item_id for i in _cart(customer.id, restaurant.id).items] == ["item-thali"]

    def test_clear(self, customer, restaurant):
        _add(customer.id, restaurant.id)
        _process(ClearCart(customer_id=customer.id, restaurant_id=restaurant.id))
        cart = _cart(customer.id, restaurant.id)
        assert cart.is_empty
        assert cart.subtotal == 0

    def test_no_cart(self, customer, restaurant):
        with pytest.raises(ObjectNotFoundError):
            _process(ClearCart(customer_id=customer.id, restaurant_id=restaurant.id))
