"""Tests for resolving bearer tokens against the directory."""

import pytest
from orders.access import get_identity, reset_identity, set_identity
from orders.access.directory_adapter import DirectoryIdentity
from orders.directory.customer import Customer
from orders.directory.restaurant import Restaurant
from orders.directory.staff import Admin, Driver
from orders.errors import AuthenticationError
from protean import current_domain


@pytest.fixture()
def identity():
    return DirectoryIdentity(secret="test-secret")


def _persist(record):
    current_domain.repository_for(type(record)).add(record)
    return record


class TestResolve:
    def test_customer(self, identity, customer):
        principal = identity.resolve(identity.issue_token(customer.id))
        assert principal.kind == "user"
        assert principal.role_name == "user"
        assert principal.id == str(customer.id)

    def test_admin_role_name(self, identity):
        admin = _persist(Admin(name="Root", email="root@example.com", role="super_admin"))
        principal = identity.resolve(identity.issue_token(admin.id))
        assert principal.kind == "admin"
        assert principal.role_name == "super_admin"
        assert principal.is_admin

    def test_restaurant(self, identity, restaurant):
        principal = identity.resolve(identity.issue_token(restaurant.id))
        assert principal.kind == "restaurant"
        assert principal.can_manage_orders

    def test_unapproved_restaurant_cannot_manage_orders(self, identity):
        restaurant = _persist(Restaurant(business_name="New Place", is_approved=False))
        principal = identity.resolve(identity.issue_token(restaurant.id))
        assert principal.kind == "restaurant"
        assert not principal.can_manage_orders

    def test_driver(self, identity):
        driver = _persist(Driver(first_name="Ravi"))
        assert identity.resolve(identity.issue_token(driver.id)).kind == "driver"

    def test_admin_directory_is_searched_first(self, identity):
        admin = _persist(Admin(name="Dual", email="dual@example.com"))
        _persist(Customer(id=admin.id, first_name="Dual"))
        assert identity.resolve(identity.issue_token(admin.id)).kind == "admin"


class TestRejected:
    def test_blocked_customer(self, identity):
        customer = _persist(Customer(first_name="Spam", is_blocked=True, blocked_reason="Abuse"))
        with pytest.raises(AuthenticationError):
            identity.resolve(identity.issue_token(customer.id))

    def test_inactive_customer(self, identity):
        customer = _persist(Customer(first_name="Gone", is_active=False))
        with pytest.raises(AuthenticationError):
            identity.resolve(identity.issue_token(customer.id))

    def test_inactive_admin(self, identity):
        admin = _persist(Admin(name="Former", email="former@example.com", is_active=False))
        with pytest.raises(AuthenticationError):
            identity.resolve(identity.issue_token(admin.id))

    def test_inactive_driver(self, identity):
        driver = _persist(Driver(first_name="Off", is_active=False))
        with pytest.raises(AuthenticationError):
            identity.resolve(identity.issue_token(driver.id))

    def test_tampered_signature(self, identity, customer):
        token = identity.issue_token(customer.id)
        with pytest.raises(AuthenticationError):
            identity.resolve(token[:-1] + ("0" if token[-1] != "0" else "1"))

    def test_token_signed_with_other_secret(self, identity, customer):
        foreign = DirectoryIdentity(secret="another-secret").issue_token(customer.id)
        with pytest.raises(AuthenticationError):
            identity.resolve(foreign)

    def test_unknown_subject(self, identity):
        with pytest.raises(AuthenticationError):
            identity.resolve(identity.issue_token("nobody"))

    def test_garbage(self, identity):
        with pytest.raises(AuthenticationError):
            identity.resolve("not-a-token")


class TestFactory:
    def test_defaults_to_directory(self):
        reset_identity()
        assert isinstance(get_identity(), DirectoryIdentity)

    def test_override(self, identity):
        set_identity(identity)
        assert get_identity() is identity
