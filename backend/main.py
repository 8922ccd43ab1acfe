# backend/main.py
import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from config import Settings
from context import build_context
from database import init_db
from utils.bootstrap import ensure_admin
from utils.errors import IntakeError

load_dotenv()

# Routers
from routes.auth import router as auth_router
from routes.requests import router as requests_router
from routes.files import router as files_router
from routes.health import router as health_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=logging.DEBUG if settings.is_development else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(IntakeError)
    async def intake_error_handler(request: Request, exc: IntakeError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def storage_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    # Database, file store and admin account
    ctx = build_context(settings)
    init_db(ctx.engine)
    ensure_admin(ctx)

    logger.info("Starting in %s mode", settings.ENVIRONMENT)
    logger.info("Upload directory: %s", ctx.files.directory.resolve())
    logger.info("Max file size: %.1fMB", settings.MAX_FILE_SIZE / 1024 / 1024)
    logger.info("CORS allowed origins: %s", settings.cors_origins)

    app = FastAPI(title="Logistics Intake API", version="1.0.0")
    app.state.context = ctx

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    # Router registration
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(requests_router)
    app.include_router(files_router)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = Settings()
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.PORT)
