"""MediStock FastAPI application.

Serves the catalogue, account and order APIs. Commands are processed
synchronously inside each request, within the medistock domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
# PROTEAN_ENV selects the config overlay from domain.toml:
#   - unset        → in-memory stores
#   - "sqlite"     → file-backed sqlite
#   - "production" → postgresql at DATABASE_URL
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medistock.domain import medistock  # noqa: E402
from medistock.utils.logging import add_context, clear_context, get_logger

medistock.init()

logger = get_logger(__name__)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="MediStock API",
    description="Medical inventory: catalogue, accounts and orders",
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
    """Push the medistock domain context and bind request details for logging."""
    if not request.url.path.startswith("/api"):
        # Health check, docs and the like
        return await call_next(request)

    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    add_context(request_id=request_id, path=request.url.path, method=request.method)
    try:
        with medistock.domain_context():
            response = await call_next(request)
    finally:
        clear_context()

    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from medistock.api.auth import auth_router  # noqa: E402
from medistock.api.errors import register_error_handlers  # noqa: E402
from medistock.api.orders import order_router  # noqa: E402
from medistock.api.products import product_router  # noqa: E402
from medistock.api.users import user_router  # noqa: E402

app.include_router(auth_router)
app.include_router(product_router)
app.include_router(order_router)
app.include_router(user_router)
register_error_handlers(app)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": {"name": medistock.name}})
