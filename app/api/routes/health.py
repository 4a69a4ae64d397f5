"""
Health check routes for monitoring and service discovery.
Reports service identity, in-memory form count and database connectivity.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlmodel import Session, select

from app.core.config import settings
from app.db.session import get_session
from app.models.quote import Quote
from app.ui import state as form_store

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> dict:
    """
    Basic health check endpoint.

    Returns:
        Service status, version and number of forms being edited
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "active_forms": len(form_store.list_form_ids()),
    }


@router.get("/health/db")
def database_health_check(session: Session = Depends(get_session)) -> dict:
    """
    Database health check endpoint.
    Counts saved quotes, which also proves the quote tables exist.
    """
    try:
        saved = session.exec(select(func.count()).select_from(Quote)).one()
        return {
            "status": "healthy",
            "database": "ok",
            "saved_quotes": int(saved),
        }
    except Exception as e:
        return {
            "status": "unhealthy",
            "database": "error",
            "error": str(e),
        }
