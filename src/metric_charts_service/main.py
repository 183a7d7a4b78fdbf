"""aiohttp application entrypoint."""
from __future__ import annotations

from aiohttp import web
from aiohttp_cors import ResourceOptions, setup as cors_setup

from metric_charts_service.api.middleware import create_trace_middleware, error_middleware
from metric_charts_service.api.routes import badges, metrics, namespaces
from metric_charts_service.logging_config import configure_logging
from metric_charts_service.services.dependencies import close_repository, init_repository
from metric_charts_service.settings import settings

# Configure structured logging
configure_logging()


async def healthcheck(_request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "service": settings.app_name, "env": settings.env})


def create_app() -> web.Application:
    app = web.Application(
        middlewares=[create_trace_middleware(settings.app_name), error_middleware],
    )

    cors = cors_setup(
        app,
        defaults={
            origin: ResourceOptions(
                allow_credentials=True,
                expose_headers="*",
                allow_headers="*",
                allow_methods="*",
            )
            for origin in settings.cors_allowed_origins
        },
    )

    # /health must be registered before the /{namespace} catch-all
    app.router.add_get("/health", healthcheck)
    app.add_routes(badges.routes)
    app.add_routes(metrics.routes)
    app.add_routes(namespaces.routes)

    app.on_startup.append(init_repository)
    app.on_cleanup.append(close_repository)

    for route in list(app.router.routes()):
        cors.add(route)

    return app


def main() -> None:
    web.run_app(create_app(), host=settings.host, port=settings.port, access_log=None)


if __name__ == "__main__":
    main()
