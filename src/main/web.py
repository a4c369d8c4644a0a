import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.asgi import SentryAsgiMiddleware

from loggers import get_logger
from src.core.middleware import register_middlewares
from src.main.config import AppConfig, Config, config
from src.main.lifespan import lifespan
from src.main.presentation import include_exceptions_handlers, include_routers
from src.main.route_logging import log_routes_summary

# request lines come from the timing middleware instead
logging.getLogger("uvicorn.access").disabled = True
logger = get_logger(__name__)

OPENAPI_TAGS = [
    {
        "name": "Users",
        "description": "Registration, login and the refresh-token lifecycle.",
    },
    {
        "name": "Tasks",
        "description": "Tasks of the authenticated user (bearer token or X-API-Key).",
    },
    {"name": "System", "description": "Liveness and database reachability."},
]


def add_cors(application: FastAPI, app_config: AppConfig) -> None:
    application.add_middleware(
        CORSMiddleware,  # noqa
        allow_origins=app_config.CORS_ALLOWED_ORIGINS,
        allow_credentials=app_config.CORS_ALLOW_CREDENTIALS,
        allow_methods=app_config.CORS_ALLOWED_METHODS,
        allow_headers=app_config.CORS_ALLOWED_HEADERS,
        expose_headers=app_config.CORS_EXPOSE_HEADERS,
    )


def get_application(settings: Config = config) -> FastAPI:
    """
    Build the ASGI application.

    Middlewares added later wrap the earlier ones, so Sentry sees every request
    first and the error middlewares sit closest to the routes.
    """
    application = FastAPI(
        title=settings.app.PROJECT_NAME,
        version=settings.app.VERSION,
        debug=settings.app.DEBUG,
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
    )

    register_middlewares(application)
    add_cors(application, settings.app)
    include_exceptions_handlers(application)
    include_routers(application)
    application.add_middleware(SentryAsgiMiddleware)

    log_routes_summary(application, include_debug_list=settings.app.DEBUG)
    return application


app = get_application()
