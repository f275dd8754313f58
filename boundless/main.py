# boundless/main.py
import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from boundless.config import Settings, load_settings
from boundless.data_client.document_store import DocumentStore, create_store
from boundless.data_client.notification_client import NotificationClient
from boundless.errors import (
    AuthenticationRequiredError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    StateError,
    ValidationError,
)
from boundless.metrics import REGISTRY
from boundless.routes import routers

logger = logging.getLogger("boundless-api")


# ----------------------------------------------------------------------
# Logger configuration
# ----------------------------------------------------------------------
def configure_logging(level: str = "INFO") -> None:
    logger.setLevel(level)
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
    handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(handler)
    else:
        for h in logger.handlers:
            h.setFormatter(formatter)


def _error(status_code: int, code: str, detail: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "detail": detail, **extra})


# ----------------------------------------------------------------------
# Exception handlers
# ----------------------------------------------------------------------
def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}\n{traceback.format_exc()}"
        )
        detail = str(exc) if app.debug else "Internal server error"
        return _error(500, "internal_server_error", detail)

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        logger.info(f"Validation error on {request.url.path}: {exc.message}")
        return _error(400, "validation_error", exc.message, errors=exc.errors)

    @app.exception_handler(StateError)
    async def state_error_handler(request: Request, exc: StateError):
        logger.info(f"State error on {request.url.path}: {exc}")
        return _error(409, "invalid_state", str(exc))

    @app.exception_handler(ConflictError)
    async def conflict_error_handler(request: Request, exc: ConflictError):
        logger.warning(f"Conflict on {request.url.path}: {exc}")
        return _error(409, "conflict", str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(404, "not_found", str(exc))

    @app.exception_handler(PermissionDeniedError)
    async def forbidden_handler(request: Request, exc: PermissionDeniedError):
        return _error(403, "forbidden", str(exc))

    @app.exception_handler(AuthenticationRequiredError)
    async def auth_required_handler(request: Request, exc: AuthenticationRequiredError):
        return _error(401, "authentication_required", str(exc))


# ----------------------------------------------------------------------
# App factory
# ----------------------------------------------------------------------
def create_app(
    settings: Optional[Settings] = None,
    store: Optional[DocumentStore] = None,
    notifier: Optional[NotificationClient] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Boundless API", debug=settings.debug)
    app.state.settings = settings
    app.state.store = store or create_store(settings.data_root)
    app.state.notifier = notifier or NotificationClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Routers (single source of truth: boundless/routes/__init__.py)
    for r in routers:
        app.include_router(r)

    app.mount("/metrics", make_asgi_app(registry=REGISTRY))
    register_exception_handlers(app)

    logger.info(
        f"Boundless API ready (env={settings.app_env}, "
        f"storage={'file' if settings.data_root else 'memory'}, notify={settings.notify_provider})"
    )
    return app


app = create_app()
