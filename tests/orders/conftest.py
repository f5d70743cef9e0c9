import pytest
from protean.integrations.pytest import DomainFixture
from protean.utils.globals import current_domain


@pytest.fixture(scope="session")
def orders_bed():
    from orders.domain import orders
    from orders.utils.db import drop_db, setup_db

    bed = DomainFixture(orders)
    bed.setup()
    setup_db(orders)
    yield bed
    drop_db(orders)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(orders_bed):
    from orders.access import reset_identity

    with orders_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()

    reset_identity()


# ---------------------------------------------------------------------------
# Directory records
# ---------------------------------------------------------------------------
def _persist(record):
    current_domain.repository_for(type(record)).add(record)
    return record


@pytest.fixture()
def customer():
    from orders.directory.customer import Customer

    return _persist(Customer(first_name="Asha", last_name="Rao", email="asha@example.com"))


@pytest.fixture()
def other_customer():
    from orders.directory.customer import Customer

    return _persist(Customer(first_name="Karan", last_name="Mehta", email="karan@example.com"))


@pytest.fixture()
def restaurant():
    from orders.directory.restaurant import Restaurant

    return _persist(
        Restaurant(
            business_name="Spice Route",
            first_name="Vikram",
            last_name="Shah",
            email="owner@spiceroute.example.com",
            is_approved=True,
        )
    )


@pytest.fixture()
def admin():
    from orders.directory.staff import Admin

    return _persist(Admin(name="Ops Admin", email="ops@example.com"))


@pytest.fixture()
def address():
    return {"street": "12 MG Road", "city": "Bengaluru", "state": "Karnataka", "postal_code": "560001"}


@pytest.fixture()
def thali():
    return {"item_id": "item-thali", "name": "Veg Thali", "price": 120.0, "quantity": 2, "category": "Meals"}


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
_FULFILMENT_PATH = ["pending", "confirmed", "preparing", "ready", "out_for_delivery", "delivered"]


@pytest.fixture()
def make_order(address, thali):
    """Factory for pending orders built in memory (not persisted)."""
    from orders.order.order import Order

    def _make(**overrides):
        data = {
            "order_number": "ORD123456001",
            "customer_id": "cust-001",
            "customer_name": "Asha Rao",
            "restaurant_id": "rest-001",
            "restaurant_name": "Spice Route",
            "items_data": [thali],
            "delivery_address": address,
        }
        data.update(overrides)
        order = Order.place(**data)
        order._events.clear()
        return order

    return _make


@pytest.fixture()
def advance():
    """Walk an order along the fulfilment path up to ``status``."""

    def _advance(order, status):
        start = _FULFILMENT_PATH.index(order.status) + 1
        for step in _FULFILMENT_PATH[start : _FULFILMENT_PATH.index(status) + 1]:
            order.update_status(step)
        order._events.clear()
        return order

    return _advance
