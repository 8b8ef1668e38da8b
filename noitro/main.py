from pathlib import Path
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from noitro.core.config import Settings, get_settings
from noitro.core.exceptions import AppError
from noitro.core.storage import ObjectStorage
from noitro.db.init_db import create_all_tables
from noitro.db.session import Database
from noitro.middleware.request_logging import RequestLoggingMiddleware
from noitro.modules.identity.api.router import router as identity_router
from noitro.modules.posts.api.router import router as posts_router
from noitro.modules.posts.comments.api.router import router as comments_router
from noitro.modules.posts.reactions.api.router import router as reactions_router
from noitro.modules.search.api.router import router as search_router
from noitro.modules.stats.api.router import router as stats_router
from noitro.modules.media.router import router as media_router

logger = logging.getLogger("noitro")

def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return _failure(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info(f"Invalid request on {request.url.path}: {exc.errors()}")
        return _failure(400, "Dữ liệu không hợp lệ")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _failure(exc.status_code, str(exc.detail))

    @app.exception_handler(OperationalError)
    async def database_unavailable_handler(request: Request, exc: OperationalError):
        logger.error(f"Database unavailable on {request.url.path}: {exc}")
        return _failure(503, "Cơ sở dữ liệu tạm thời không khả dụng")

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error(f"Database error on {request.url.path}: {exc}")
        return _failure(500, "Lỗi hệ thống, vui lòng thử lại sau")

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.url.path}: {exc}")
        return _failure(500, "Lỗi hệ thống, vui lòng thử lại sau")

def create_app(
    settings: Settings = None,
    database: Database = None,
    object_storage: ObjectStorage = None,
) -> FastAPI:
    """
    Build the application around an explicitly constructed database.

    Tests pass their own ``Database``; otherwise one is built from
    ``DATABASE_URL``.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title=settings.PROJECT_NAME,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        debug=settings.DEBUG,
        description="Community blog API for Vietnamese home-makers",
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings
    app.state.database = database or Database(settings.DATABASE_URL)
    app.state.object_storage = object_storage or ObjectStorage(settings)

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting server in {settings.ENVIRONMENT} mode")
        create_all_tables(app.state.database)

    @app.on_event("shutdown")
    async def shutdown_event():
        app.state.database.dispose()

    register_exception_handlers(app)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    prefix = settings.API_PREFIX
    app.include_router(posts_router, prefix=f"{prefix}/posts", tags=["posts"])
    app.include_router(comments_router, prefix=f"{prefix}/comments", tags=["comments"])
    app.include_router(reactions_router, prefix=f"{prefix}/reactions", tags=["reactions"])
    app.include_router(search_router, prefix=f"{prefix}/search", tags=["search"])
    app.include_router(identity_router, prefix=f"{prefix}/anonymous", tags=["anonymous"])
    app.include_router(stats_router, prefix=f"{prefix}/stats", tags=["stats"])
    app.include_router(media_router, prefix=prefix, tags=["media"])

    upload_dir = Path(settings.UPLOAD_DIRECTORY)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    @app.get(f"{prefix}/health")
    def health_check():
        database_status = "accessible"
        try:
            with app.state.database.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Health check database error: {e}")
            database_status = "error"
        return {
            "status": "ok" if database_status == "accessible" else "degraded",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "database": database_status,
        }

    @app.get("/")
    async def root():
        return {
            "message": "Chào mừng đến với Blog Nội Trợ",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "documentation": "/docs" if settings.DEBUG else None,
        }

    return app
