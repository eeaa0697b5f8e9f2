"""
Remindme - personal reminders and tasks
FastAPI Application Entry Point
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from remindme import __version__
from remindme.api import folders, reminders, bulk, stats, backups, external
from remindme.api.deps import authenticate, extract_token, get_current_user
from remindme.config import Settings, settings
from remindme.core.periodic import start_periodic_task, stop_periodic_tasks
from remindme.errors import AuthenticationError, RemindmeError
from remindme.services.backup import BackupService
from remindme.services.identity import IdentityService
from remindme.store import Store


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _start_background_tasks(app: FastAPI, app_settings: Settings) -> None:
    store: Store = app.state.store
    backup_service: BackupService = app.state.backups
    repo = store.repository

    async def auto_save() -> None:
        store.save_if_dirty()

    async def reset_recurring() -> None:
        repo.reset_recurring()

    async def rebuild_tags() -> None:
        if repo.rebuild_tags():
            store.save()

    async def scheduled_backup() -> None:
        await backup_service.run()

    start_periodic_task(
        app, name="auto-save",
        interval_seconds=app_settings.auto_save_interval_seconds, func=auto_save,
    )
    start_periodic_task(
        app, name="recurrence",
        interval_seconds=app_settings.recurrence_interval_seconds, func=reset_recurring,
    )
    start_periodic_task(
        app, name="tag-rebuild",
        interval_seconds=app_settings.tag_rebuild_interval_seconds, func=rebuild_tags,
    )
    start_periodic_task(
        app, name="backup",
        interval_seconds=app_settings.backup_interval_seconds, func=scheduled_backup,
    )


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AuthenticationError)
    async def authentication_error_handler(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=status.HTTP_401_UNAUTHORIZED,
            content={"detail": exc.message, "loginUrl": exc.login_url},
        )

    @app.exception_handler(RemindmeError)
    async def remindme_error_handler(request: Request, exc: RemindmeError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the application around one store, backup service and identity client."""
    backup_service = BackupService(
        data_file=app_settings.data_file,
        backup_dir=app_settings.backup_dir,
        retention_days=app_settings.backup_retention_days,
        remote=app_settings.backup_remote,
        rclone_binary=app_settings.rclone_binary,
        timeout_seconds=app_settings.backup_timeout_seconds,
    )
    store = Store(
        data_file=app_settings.data_file,
        backup_dir=app_settings.backup_dir,
        on_saved=backup_service.trigger,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events."""
        # Startup
        store.load()
        store.save_if_dirty()
        _start_background_tasks(app, app_settings)
        logger.info("Remindme started with data file %s", app_settings.data_file)
        yield
        # Shutdown
        await stop_periodic_tasks(app)
        store.save_if_dirty()
        if backup_service.current_task is not None and not backup_service.current_task.done():
            await asyncio.wait([backup_service.current_task], timeout=app_settings.backup_timeout_seconds)

    app = FastAPI(
        title="Remindme API",
        description="Personal reminders with folders, sub-tasks, tags and recurrence",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.store = store
    app.state.backups = backup_service
    app.state.identity = (
        IdentityService(app_settings.auth_verify_url, app_settings.auth_timeout_seconds)
        if app_settings.auth_enabled
        else None
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_exception_handlers(app)

    # Include routers
    gated = [Depends(get_current_user)]
    app.include_router(folders.router, prefix="/api/folders", tags=["Folders"], dependencies=gated)
    app.include_router(reminders.router, prefix="/api/reminders", tags=["Reminders"], dependencies=gated)
    app.include_router(bulk.router, prefix="/api", tags=["Bulk"], dependencies=gated)
    app.include_router(stats.router, prefix="/api", tags=["Stats"], dependencies=gated)
    app.include_router(backups.router, prefix="/api", tags=["Backups"], dependencies=gated)
    app.include_router(external.router, prefix="/api/external", tags=["Assistant"])

    static_dir = Path(app_settings.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    @app.get("/", include_in_schema=False)
    async def index(request: Request):
        """Front end page; unauthenticated visitors are sent to the login page."""
        if await authenticate(request) is None:
            return RedirectResponse(app_settings.auth_login_url, status_code=status.HTTP_302_FOUND)
        index_file = static_dir / "index.html"
        if not index_file.is_file():
            return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "No front end installed"})
        return FileResponse(index_file)

    @app.get("/health")
    async def health_check():
        """Detailed health check."""
        return {
            "status": "healthy",
            "service": "Remindme API",
            "version": __version__,
            "folders": len(store.repository.folders),
            "reminders": len(store.repository.reminders),
            "lastSaved": store.last_saved,
            "unsavedChanges": store.dirty,
            "lastBackupError": backup_service.last_error,
        }

    @app.get("/auth-debug")
    async def auth_debug(request: Request):
        """What the auth gate sees for this request, without any secret values."""
        header = request.headers.get("Authorization", "")
        return {
            "authEnabled": app_settings.auth_enabled,
            "loginUrl": app_settings.auth_login_url,
            "cookieName": app_settings.auth_cookie_name,
            "hasCookie": app_settings.auth_cookie_name in request.cookies,
            "hasBearer": header.lower().startswith("bearer "),
            "tokenFound": extract_token(request, app_settings.auth_cookie_name) is not None,
            "externalSecretConfigured": bool(app_settings.external_secret),
        }

    return app


configure_logging(settings.log_level)
app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("remindme.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
