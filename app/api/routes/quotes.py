"""
Saved quote routes: create, list, load, overwrite and delete.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from app.db.session import get_session
from app.schemas.quote import QuoteSummary
from app.services.quote_service import QuoteService
from app.ui.viewmodels import QuoteFormState

router = APIRouter(prefix="/quotes", tags=["quotes"])


@router.post("", response_model=QuoteFormState, status_code=status.HTTP_201_CREATED)
def create_quote(
    form: QuoteFormState,
    session: Annotated[Session, Depends(get_session)],
) -> QuoteFormState:
    """
    Save a quote form as a new quote.

    Returns:
        The saved quote, reloaded from the database
    """
    quote = QuoteService.create(session, form)
    return QuoteService.get(session, quote.id)


@router.get("", response_model=List[QuoteSummary])
def list_quotes(
    session: Annotated[Session, Depends(get_session)],
    limit: int = 100,
    offset: int = 0,
) -> List[QuoteSummary]:
    """List saved quotes, most recently updated first."""
    return [QuoteSummary.model_validate(q, from_attributes=True) for q in QuoteService.list_all(session, limit, offset)]


@router.get("/{quote_id}", response_model=QuoteFormState)
def get_quote(
    quote_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> QuoteFormState:
    form = QuoteService.get(session, quote_id)
    if form is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
    return form


@router.put("/{quote_id}", response_model=QuoteFormState)
def update_quote(
    quote_id: str,
    form: QuoteFormState,
    session: Annotated[Session, Depends(get_session)],
) -> QuoteFormState:
    """Overwrite a saved quote, replacing all of its line items."""
    updated = QuoteService.update(session, quote_id, form)
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
    return updated


@router.delete("/{quote_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quote(
    quote_id: str,
    session: Annotated[Session, Depends(get_session)],
) -> None:
    if not QuoteService.delete(session, quote_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Quote not found")
