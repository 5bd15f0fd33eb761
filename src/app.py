"""Storefront FastAPI application.

Serves the shopping cart and checkout over HTTP, processing commands
synchronously. Each request under a domain prefix is wrapped in that
domain's context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# Domains are initialized at module level so uvicorn workers share them.
# PROTEAN_ENV selects the config overlay from domain.toml.
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from shared.http import ApiClient
from shopping.checkout.gateway import set_gateway
from shopping.checkout.gateway.http_adapter import HttpOrderGateway
from shopping.domain import logger, shopping
from shopping.utils.logging import add_context, clear_context

shopping.init()

# The fake order gateway stays active unless a real storefront API is configured.
if os.environ.get("STOREFRONT_API_BASE_URL"):
    set_gateway(HttpOrderGateway(client=ApiClient()))
    logger.info("Order gateway wired to storefront API", base_url=os.environ["STOREFRONT_API_BASE_URL"])

# ---------------------------------------------------------------------------
# Route-to-domain mapping
# ---------------------------------------------------------------------------
_ROUTE_DOMAIN_MAP = {
    "/carts": shopping,
}


def _resolve_domain(path: str):
    """Return the domain for the given request path, or None."""
    for prefix, domain in _ROUTE_DOMAIN_MAP.items():
        if path.startswith(prefix):
            return domain
    return None


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Shopping cart and checkout",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the correct Protean domain context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)

    domain = _resolve_domain(request.url.path)
    if domain is not None:
        with domain.domain_context():
            response = await call_next(request)
        return response
    # No domain match: pass through (health check, docs, etc.)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from shopping.api import cart_router  # noqa: E402

app.include_router(cart_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "shopping": {"name": shopping.name},
            },
        }
    )
