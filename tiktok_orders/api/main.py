"""Order dashboard application module.

This module builds the FastAPI application and configures
middleware, routers and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from tiktok_orders.api.dashboard import router as dashboard_router
from tiktok_orders.api.health import router as health_router
from tiktok_orders.api.middleware import setup_middleware
from tiktok_orders.api.orders import router as orders_router
from tiktok_orders.api.proxy import router as proxy_router
from tiktok_orders.application.order_store import OrderStore
from tiktok_orders.application.sync_service import OrderSyncService
from tiktok_orders.infrastructure.config import Settings, settings as default_settings
from tiktok_orders.infrastructure.logging_config import configure_logging
from tiktok_orders.infrastructure.order_client import OrderAPIClient

logger = structlog.get_logger()


def create_app(
    app_settings: Settings | None = None,
    api_client: OrderAPIClient | None = None,
) -> FastAPI:
    """Create the dashboard application.

    Args:
        app_settings: Settings to use; defaults to the environment.
        api_client: Backend client; built from settings when omitted.

    Returns:
        Configured FastAPI application.
    """
    app_settings = app_settings or default_settings
    client = api_client or OrderAPIClient(
        base_url=app_settings.order_api_url,
        order_list_path=app_settings.order_list_path,
        order_sync_path=app_settings.order_sync_path,
        timeout=app_settings.request_timeout,
    )
    store = OrderStore(client)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Fetch orders on startup and close the backend client on shutdown."""
        logger.info(
            "Starting order dashboard",
            version=app_settings.api_version,
            order_api_url=app_settings.order_api_url,
        )

        # A failed first fetch is logged and shown on the page; startup continues.
        await store.refresh()

        yield

        logger.info("Shutting down order dashboard")
        await client.close()

    app = FastAPI(
        title="TikTok Orders Dashboard",
        description="Order list, statistics and manual sync",
        version=app_settings.api_version,
        lifespan=lifespan,
        debug=app_settings.debug,
    )

    app.state.settings = app_settings
    app.state.api_client = client
    app.state.order_store = store
    app.state.sync_service = OrderSyncService(client, store)

    setup_middleware(app)

    app.include_router(health_router, tags=["Health"])
    app.include_router(dashboard_router)
    app.include_router(orders_router)
    app.include_router(proxy_router)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with consistent format."""
        request_id = getattr(request.state, "request_id", None)

        detail = exc.detail
        if isinstance(detail, dict):
            error_code = detail.get("error_code", "ERROR")
            message = detail.get("message", str(detail))
            details = detail.get("details", [])
        else:
            error_code = "ERROR"
            message = str(detail)
            details = []

        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error_code": error_code,
                "message": message,
                "details": details,
                "request_id": request_id,
            },
        )

    return app


def run() -> None:
    """Serve the dashboard with uvicorn."""
    import uvicorn

    configure_logging(default_settings.log_level)
    uvicorn.run(
        create_app(),
        host=default_settings.dashboard_host,
        port=default_settings.dashboard_port,
    )


app = create_app()
