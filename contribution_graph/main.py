from fastapi import FastAPI

from contribution_graph.api.routes.graph import router
from contribution_graph.core.middleware import GraphRateLimitMiddleware
from contribution_graph.core.observability import configure_logging
from contribution_graph.core.observability import init_sentry
from contribution_graph.settings import Settings


def create_app() -> FastAPI:
    """Build the FastAPI application from current environment settings."""

    app_settings = Settings()
    configure_logging(app_settings)
    init_sentry(app_settings)

    application = FastAPI(title="Contribution Graph")
    application.add_middleware(
        GraphRateLimitMiddleware,
        requests_per_window=app_settings.rate_limit_per_minute,
        window_seconds=app_settings.rate_limit_window_seconds,
    )
    application.include_router(router)
    return application


app = create_app()
