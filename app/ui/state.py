"""
Server-side state management for quote forms.
Forms being edited live in memory; saving goes through QuoteService.
"""

from typing import Dict, List, Optional
from datetime import datetime, timezone
from app.ui.viewmodels import QuoteFormState
from app.core.logging import get_logger

logger = get_logger(__name__)

# Active quote forms, keyed by form id
_quote_forms: Dict[str, QuoteFormState] = {}

# Ingestion warnings from the last import/paste into each form
_form_warnings: Dict[str, List[str]] = {}


def set_state(form_id: str, state: QuoteFormState) -> None:
    """Store a quote form state."""
    _quote_forms[form_id] = state
    state.modified_at = datetime.now(timezone.utc).isoformat()
    logger.info(f"Stored quote form {form_id} with {state.total_items} BOM items")


def get_state(form_id: str) -> Optional[QuoteFormState]:
    """Retrieve a quote form state, or None if unknown."""
    return _quote_forms.get(form_id)


def touch(form_id: str) -> None:
    """Mark a form as modified."""
    state = _quote_forms.get(form_id)
    if state:
        state.modified_at = datetime.now(timezone.utc).isoformat()


def clear_state(form_id: Optional[str] = None) -> bool:
    """
    Clear a specific form or all forms if no ID provided.
    Returns True if something was cleared.
    """
    if form_id:
        if form_id in _quote_forms:
            del _quote_forms[form_id]
            _form_warnings.pop(form_id, None)
            logger.info(f"Cleared quote form {form_id}")
            return True
        return False

    had_data = len(_quote_forms) > 0
    _quote_forms.clear()
    _form_warnings.clear()
    if had_data:
        logger.info("Cleared all quote forms")
    return had_data


def list_form_ids() -> List[str]:
    """List all stored form IDs."""
    return list(_quote_forms.keys())


def set_warnings(form_id: str, warnings: List[str]) -> None:
    """Store ingestion warnings for a form."""
    _form_warnings[form_id] = list(warnings)
    logger.info(f"Stored {len(warnings)} warnings for form {form_id}")


def get_warnings(form_id: str) -> List[str]:
    """Get ingestion warnings for a form."""
    return _form_warnings.get(form_id, [])
