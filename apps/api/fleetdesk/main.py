import time
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import Response

from fleetdesk.config import allowed_origins, ensure_secure_runtime_settings, settings
from fleetdesk.db.migration_check import prepare_database
from fleetdesk.db.session import engine
from fleetdesk.errors import register_exception_handlers
from fleetdesk.observability import configure_logging, log_event, metrics_store, set_request_id
from fleetdesk.routers.customers import router as customers_router
from fleetdesk.routers.dispatch import router as dispatch_router
from fleetdesk.routers.employees import router as employees_router
from fleetdesk.routers.health import router as health_router
from fleetdesk.routers.metrics import router as metrics_router
from fleetdesk.routers.orders import router as orders_router
from fleetdesk.routers.tracking import router as tracking_router
from fleetdesk.routers.units import router as units_router
from fleetdesk.routers.vehicles import router as vehicles_router


@asynccontextmanager
async def lifespan(_app: FastAPI):
    import fleetdesk.models  # noqa: F401 (register all SQLAlchemy models)

    ensure_secure_runtime_settings()
    configure_logging()
    prepare_database(engine)
    yield


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="FleetDesk back-office API: customers, fleet, employees, orders and dispatch",
    lifespan=lifespan,
)


def custom_openapi():
    """Advertise HTTP Bearer (JWT) auth so Swagger UI sends the Authorization header."""
    if app.openapi_schema:
        return app.openapi_schema

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    components = openapi_schema.setdefault("components", {})
    components.setdefault("securitySchemes", {})["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    openapi_schema["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


app.openapi = custom_openapi

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("X-Request-ID") or str(uuid4())
    set_request_id(request_id)

    start = time.perf_counter()
    response = await call_next(request)
    elapsed = time.perf_counter() - start

    response.headers["X-Request-ID"] = request_id
    metrics_store.increment("http_requests_total")
    metrics_store.observe("http_request_duration_seconds", elapsed)
    log_event(
        f"http_request {request.method} {request.url.path} status={response.status_code}",
        order_id=request.path_params.get("order_id"),
    )
    return response


register_exception_handlers(app)

app.include_router(health_router)
app.include_router(metrics_router)
app.include_router(customers_router)
app.include_router(vehicles_router)
app.include_router(employees_router)
app.include_router(units_router)
app.include_router(orders_router)
app.include_router(dispatch_router)
app.include_router(tracking_router)
