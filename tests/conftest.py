"""
Pytest configuration and fixtures.
Provides test database, client, and common test utilities.
"""

import subprocess
import sys
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from app.core.config import settings
from app.db.session import get_session
from app.main import app
from app.ui import state as form_store
from app.ui.viewmodels import BomGroup, BomItem, ColumnVisibility, CostItem, QuoteFormState, QuoteHeader

FIXTURE_WORKBOOKS = (
    "multi_group_quote.xlsx",
    "single_sheet_bom.xlsx",
    "messy_bom.xlsx",
    "headerless_bom.xlsx",
)


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    """
    Create a test database session.
    Uses an in-memory SQLite database for fast tests.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with dependency overrides.
    """

    def get_session_override() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = get_session_override

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clear_forms() -> Generator[None, None, None]:
    """Each test starts with an empty in-memory form store."""
    form_store.clear_state()
    yield
    form_store.clear_state()


@pytest.fixture(name="test_data_dir", scope="session")
def test_data_dir_fixture() -> Path:
    """Directory of generated fixture workbooks, generated on first use."""
    test_data_dir = Path(__file__).parent / "test_data"
    if not all((test_data_dir / name).exists() for name in FIXTURE_WORKBOOKS):
        subprocess.run([sys.executable, str(test_data_dir / "generate_test_files.py")], check=True)
    return test_data_dir


@pytest.fixture(name="api")
def api_prefix() -> str:
    return settings.API_V1_PREFIX


@pytest.fixture(name="priced_form")
def priced_form_fixture() -> QuoteFormState:
    """A form with two priced groups and a cost/discount pair."""
    return QuoteFormState(
        header=QuoteHeader(quote_subject="Branch Office Refresh", customer_company="Northwind Traders"),
        column_visibility=ColumnVisibility(unit_price=True, total_price=True),
        bom_groups=[
            BomGroup(id="bom-1", name="BOM 1", title="Switching", items=[
                BomItem(no=1, part_number="C9300-48P", product_description="Catalyst 9300 48-port", quantity=2,
                        unit_price=2500.0, total_price=5000.0),
                BomItem(no=2, part_number="PWR-C1-715WAC", product_description="Power Supply 715W AC", quantity=2,
                        unit_price=400.0, total_price=800.0),
                BomItem(no=3, part_number="C9300-NM-8X", product_description="Network Module 8x10G", quantity=1,
                        unit_price=1200.0, total_price=1200.0),
            ]),
            BomGroup(id="bom-2", name="BOM 2", title="Cabling", items=[
                BomItem(no=1, part_number="CAB-ETH-S-RJ45", product_description="Ethernet Cable 1M", quantity=8,
                        unit_price=15.0, total_price=120.0),
            ]),
        ],
        cost_items=[
            CostItem(product_description="Installation Services", quantity=1, unit_price=500.0, total_price=500.0),
            CostItem(product_description="Loyalty Discount", quantity=1, unit_price=150.0, total_price=150.0,
                     is_discount=True),
        ],
    )
