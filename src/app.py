"""Orders FastAPI application.

Web server for cart checkout and order lifecycle. Commands are processed
synchronously; each request runs inside the orders domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from orders.domain import orders
from orders.utils.logging import add_context, clear_context, configure_logging

configure_logging()
orders.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Orders API",
    description="Food delivery carts, order assembly and order lifecycle",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the orders domain context and tag log lines with the request path."""
    add_context(method=request.method, path=request.url.path)
    try:
        with orders.domain_context():
            return await call_next(request)
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers and error handling
# ---------------------------------------------------------------------------
from orders.api.errors import register_error_handlers  # noqa: E402
from orders.api.routes import cart_router, order_router  # noqa: E402

register_error_handlers(app)
app.include_router(order_router)
app.include_router(cart_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": orders.name}})
