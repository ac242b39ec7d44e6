from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from autosales.api.auth import admin_router
from autosales.api.auth import router as auth_router
from autosales.api.clients import router as clients_router
from autosales.api.invoices import router as invoices_router
from autosales.api.opportunities import router as opportunities_router
from autosales.api.products import router as products_router
from autosales.api.quotations import items_router as quotation_items_router
from autosales.api.quotations import router as quotations_router
from autosales.api.sales import router as sales_router
from autosales.api.stages import router as stages_router
from autosales.api.vehicles import router as vehicles_router
from autosales.db import SessionLocal, init_db
from autosales.errors import register_error_handlers
from autosales.logging import configure_logging, get_logger
from autosales.observability import ObservabilityMiddleware
from autosales.services import auth as auth_service
from autosales.telemetry import setup_otel

logger = get_logger(__name__)

app = FastAPI(title="autosales API")

configure_logging()
setup_otel(app)
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


# Authorization is declared per route; each router mixes several policies.
_include_api_router(auth_router)
_include_api_router(admin_router)
_include_api_router(clients_router)
_include_api_router(vehicles_router)
_include_api_router(stages_router)
_include_api_router(opportunities_router)
_include_api_router(quotations_router)
_include_api_router(quotation_items_router)
_include_api_router(invoices_router)
_include_api_router(products_router)
_include_api_router(sales_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.head("/health")
def head_health():
    return Response(status_code=200)


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)


@app.on_event("startup")
def _seed_identity():
    init_db()
    db = SessionLocal()
    try:
        auth_service.seed_roles(db)
        auth_service.ensure_bootstrap_admin(db)
    finally:
        db.close()
    logger.info("startup_complete")
