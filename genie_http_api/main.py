"""
FastAPI Application Entry Point.
Owns: App factory, middleware setup, plugin wiring.
"""

from fastapi import FastAPI

from genie_http_api.config import Settings, get_settings
from genie_http_api.errors import register_exception_handlers
from genie_http_api.middleware import LoggingMiddleware, RequestIdMiddleware
from genie_http_api.plugin import HttpApiPlugin
from genie_http_api.routes import health_router
from genie_http_api.services.admitter import Router
from genie_http_api.services.echo_router import EchoRouter
from genie_http_api.shared.logging import configure_root_logger


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    configure_root_logger("http-api", settings.log_level)


def create_app(settings: Settings | None = None, router: Router | None = None) -> FastAPI:
    """
    Build the app and bind the HTTP API plugin to it.

    The message endpoint is bound once a router is attached: ``router``
    here, the echo router when ROUTER_BACKEND=echo, or later through
    ``app.state.plugin.start_client``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Genie HTTP API",
        version="1.0.0",
        docs_url="/docs" if settings.service_env != "prod" else None,
        redoc_url="/redoc" if settings.service_env != "prod" else None,
        openapi_url="/openapi.json" if settings.service_env != "prod" else None,
    )

    # Middleware (order matters: last added = outermost)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIdMiddleware)

    register_exception_handlers(app)
    app.include_router(health_router)

    plugin = HttpApiPlugin()
    app.state.plugin = plugin
    app.state.http_api = plugin.http_api
    plugin.start_http(settings, app)

    if router is None and settings.router_backend == "echo":
        router = EchoRouter(delay_ms=settings.echo_delay_ms)
    if router is not None:
        client = plugin.start_client(settings, router)
        if isinstance(router, EchoRouter):
            router.attach(client.speak)

    return app


configure_logging()
app = create_app()
