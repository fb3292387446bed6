from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tableside.api.error_handling import register_exception_handlers
from tableside.api.middleware.access_log import AccessLogMiddleware
from tableside.api.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from tableside.api.routes.admin import router as admin_router
from tableside.api.routes.health import router as health_router
from tableside.api.routes.menu import router as menu_router
from tableside.api.routes.metrics import router as metrics_router
from tableside.api.routes.orders import router as orders_router
from tableside.api.routes.tables import router as tables_router
from tableside.infrastructure import config
from tableside.infrastructure.observability.logging_config import configure_logging
from tableside.infrastructure.observability.otel import configure_otel

_ROUTERS = (
    health_router,
    metrics_router,
    menu_router,
    orders_router,
    tables_router,
    admin_router,
)


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="Tableside Ordering Backend", version="0.1.0")
    register_exception_handlers(app)
    for router in _ROUTERS:
        app.include_router(router)

    # Starlette runs the last added middleware first.
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins(),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    configure_otel(app)
    return app


app = create_app()
