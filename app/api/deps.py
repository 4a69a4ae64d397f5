"""
API dependencies for FastAPI dependency injection.
Provides the active quote form and upload helpers to routes.
"""

from fastapi import HTTPException, UploadFile, status

from app.core.config import settings
from app.core.logging import get_logger
from app.services.ingestion import ScanLimits
from app.ui import state as form_store
from app.ui.viewmodels import QuoteFormState

logger = get_logger(__name__)


def get_form_state(form_id: str) -> QuoteFormState:
    """
    Dependency to load an active quote form.

    Raises:
        HTTPException: If no form with this id is in memory
    """
    form = form_store.get_state(form_id)
    if form is None:
        logger.warning(f"Quote form {form_id} not found")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote form not found")
    return form


def get_scan_limits() -> ScanLimits:
    """Ingestion scan limits from settings."""
    return ScanLimits.from_settings(settings)


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an uploaded file, enforcing MAX_UPLOAD_SIZE_MB.

    Raises:
        HTTPException: 413 when the file is too large
    """
    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    content = await file.read()
    if len(content) > max_bytes:
        logger.warning(f"Rejected upload {file.filename}: {len(content)} bytes")
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB} MB upload limit",
        )
    return content
