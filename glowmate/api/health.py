"""Health check endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from glowmate.config import Settings, get_settings
from glowmate.database import get_db

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
def health_check(settings: Annotated[Settings, Depends(get_settings)]):
    """Health check endpoint."""
    return {"status": "healthy", "environment": settings.environment}


@router.get("/db")
def database_health_check(db: Annotated[Session, Depends(get_db)]):
    """Check that the database answers a trivial query."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": "disconnected"},
        )
    return {"status": "ok", "database": "connected"}
