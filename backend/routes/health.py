# backend/routes/health.py
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from context import AppContext, get_context

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


def _payload(ctx: AppContext) -> dict:
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": ctx.settings.ENVIRONMENT,
        "uptime": ctx.uptime,
    }


@router.get("/health")
def health(ctx: AppContext = Depends(get_context)):
    return _payload(ctx)


@router.get("/api/health")
def api_health(ctx: AppContext = Depends(get_context)):
    payload = _payload(ctx)
    try:
        with ctx.engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        payload["database"] = "Connected"
    except SQLAlchemyError as e:
        logger.warning("Health check could not reach the database: %s", e)
        payload["database"] = "Unavailable"
    payload["message"] = "Logistics Intake API is running"
    return payload


@router.get("/")
def read_root():
    return {
        "message": "Logistics Request Backend API",
        "version": "1.0.0",
        "endpoints": {
            "POST /api/register": "Register admin user",
            "POST /api/login": "Admin login",
            "POST /api/requests": "Submit logistics request",
            "GET /api/requests": "Get all requests (admin)",
            "GET /api/requests/export": "Export requests to Excel (admin)",
            "GET /api/files/{filename}": "Get uploaded file (token)",
        },
    }
