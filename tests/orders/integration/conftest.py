import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from orders.access import get_identity
from orders.api.errors import register_error_handlers
from orders.api.routes import cart_router, order_router


@pytest.fixture()
def client():
    app = FastAPI()
    register_error_handlers(app)
    app.include_router(order_router)
    app.include_router(cart_router)
    return TestClient(app)


@pytest.fixture()
def auth():
    """Build an Authorization header for a directory record."""

    def _auth(record):
        return {"Authorization": f"Bearer {get_identity().issue_token(str(record.id))}"}

    return _auth
