"""
Quote service layer: saves and loads quote forms.
Separates persistence from API routes and the in-memory form state.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlmodel import Session, select

from app.core.logging import get_logger
from app.models.quote import Quote, QuoteBomItem, QuoteCostItem
from app.ui.viewmodels import (
    BomGroup,
    BomItem,
    ColumnVisibility,
    CostItem,
    QuoteFormState,
    QuoteHeader,
)

logger = get_logger(__name__)

HEADER_FIELDS = (
    "quote_subject",
    "customer_company",
    "customer_logo",
    "sales_person_name",
    "date",
    "version",
    "payment_terms",
    "currency",
)


class QuoteService:
    """Service class for quote persistence."""

    @staticmethod
    def _apply_form(quote: Quote, form: QuoteFormState) -> None:
        for name in HEADER_FIELDS:
            setattr(quote, name, getattr(form.header, name))
        quote.bom_enabled = form.bom_enabled
        quote.costs_enabled = form.costs_enabled
        quote.column_visibility = form.column_visibility.model_dump()
        quote.source_file = form.source_file

    @staticmethod
    def _add_line_items(session: Session, quote_id: str, form: QuoteFormState) -> None:
        for group_order, group in enumerate(form.bom_groups):
            for sort_order, item in enumerate(group.items):
                session.add(QuoteBomItem(
                    quote_id=quote_id,
                    group_id=group.id,
                    group_name=group.name,
                    group_title=group.title,
                    group_order=group_order,
                    sort_order=sort_order,
                    no=item.no,
                    part_number=item.part_number,
                    product_description=item.product_description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    total_price=item.total_price,
                ))
        for sort_order, item in enumerate(form.cost_items):
            session.add(QuoteCostItem(
                quote_id=quote_id,
                sort_order=sort_order,
                product_description=item.product_description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
                is_discount=item.is_discount,
            ))

    @staticmethod
    def _delete_line_items(session: Session, quote_id: str) -> None:
        for model in (QuoteBomItem, QuoteCostItem):
            for row in session.exec(select(model).where(model.quote_id == quote_id)):
                session.delete(row)

    @staticmethod
    def create(session: Session, form: QuoteFormState) -> Quote:
        """
        Persist a form as a new quote.

        Args:
            session: Database session
            form: Form state to save

        Returns:
            Created quote header row
        """
        quote = Quote()
        QuoteService._apply_form(quote, form)
        session.add(quote)
        session.flush()
        QuoteService._add_line_items(session, quote.id, form)
        session.commit()
        session.refresh(quote)

        logger.info(f"Created quote {quote.id} with {form.total_items} BOM items and {len(form.cost_items)} cost items")
        return quote

    @staticmethod
    def get(session: Session, quote_id: str) -> Optional[QuoteFormState]:
        """
        Load a saved quote as form state.

        Returns:
            QuoteFormState if found, None otherwise
        """
        quote = session.get(Quote, quote_id)
        if not quote:
            return None

        bom_rows = session.exec(
            select(QuoteBomItem)
            .where(QuoteBomItem.quote_id == quote_id)
            .order_by(QuoteBomItem.group_order, QuoteBomItem.sort_order)
        ).all()
        cost_rows = session.exec(
            select(QuoteCostItem)
            .where(QuoteCostItem.quote_id == quote_id)
            .order_by(QuoteCostItem.sort_order)
        ).all()

        groups: Dict[str, BomGroup] = {}
        for row in bom_rows:
            group = groups.get(row.group_id)
            if group is None:
                group = BomGroup(id=row.group_id, name=row.group_name, title=row.group_title)
                groups[row.group_id] = group
            group.items.append(BomItem(
                no=row.no,
                part_number=row.part_number,
                product_description=row.product_description,
                quantity=row.quantity,
                unit_price=row.unit_price,
                total_price=row.total_price,
            ))

        form = QuoteFormState(
            quote_id=quote.id,
            header=QuoteHeader(**{name: getattr(quote, name) for name in HEADER_FIELDS}),
            bom_enabled=quote.bom_enabled,
            costs_enabled=quote.costs_enabled,
            cost_items=[
                CostItem(
                    product_description=row.product_description,
                    quantity=row.quantity,
                    unit_price=row.unit_price,
                    total_price=row.total_price,
                    is_discount=row.is_discount,
                )
                for row in cost_rows
            ],
            column_visibility=ColumnVisibility(**(quote.column_visibility or {})),
            created_at=quote.created_at.isoformat(),
            modified_at=quote.updated_at.isoformat(),
            source_file=quote.source_file,
        )
        if groups:
            form.bom_groups = list(groups.values())
        return form

    @staticmethod
    def list_all(session: Session, limit: int = 100, offset: int = 0) -> List[Quote]:
        """Saved quotes, most recently updated first."""
        statement = select(Quote).order_by(Quote.updated_at.desc()).offset(offset).limit(limit)
        return list(session.exec(statement))

    @staticmethod
    def update(session: Session, quote_id: str, form: QuoteFormState) -> Optional[QuoteFormState]:
        """
        Overwrite a saved quote; line items are replaced wholesale.

        Returns:
            Reloaded form state, or None when the quote does not exist
        """
        quote = session.get(Quote, quote_id)
        if not quote:
            return None

        QuoteService._apply_form(quote, form)
        quote.updated_at = datetime.now(timezone.utc)
        session.add(quote)
        QuoteService._delete_line_items(session, quote_id)
        QuoteService._add_line_items(session, quote_id, form)
        session.commit()

        logger.info(f"Updated quote {quote_id}")
        return QuoteService.get(session, quote_id)

    @staticmethod
    def delete(session: Session, quote_id: str) -> bool:
        """
        Delete a quote and its line items.

        Returns:
            True if deleted, False if not found
        """
        quote = session.get(Quote, quote_id)
        if not quote:
            return False

        QuoteService._delete_line_items(session, quote_id)
        session.flush()
        session.delete(quote)
        session.commit()

        logger.info(f"Deleted quote {quote_id}")
        return True
