"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient
from dhanrakshak.api.main import create_app
from dhanrakshak.api.dependencies import get_ai_client
from dhanrakshak.domain.extraction import TransactionTextExtractor
from dhanrakshak.domain.models import Asset, BankAccount, FixedDeposit, TransactionRecord
from dhanrakshak.domain.patterns import build_pattern_library


@pytest.fixture
def extractor() -> TransactionTextExtractor:
    """Extractor over a freshly compiled pattern library"""
    return TransactionTextExtractor(build_pattern_library())


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with the AI collaborator switched off"""
    app = create_app()
    app.dependency_overrides[get_ai_client] = lambda: None
    return TestClient(app)


@pytest.fixture
def sample_assets() -> list[Asset]:
    """Salaried investor: equity-heavy with retirement savings and some gold"""
    return [
        Asset("STOCK", current_value=300000, invested_amount=250000, name="Nifty basket"),
        Asset("MUTUAL_FUND", current_value=200000, invested_amount=180000, name="Flexicap fund"),
        Asset("EPF", current_value=100000, invested_amount=100000, name="EPF"),
        Asset("PPF", current_value=50000, invested_amount=45000, name="PPF"),
        Asset("GOLD", current_value=50000, invested_amount=40000, name="SGB 2028"),
    ]


@pytest.fixture
def sample_bank_accounts() -> list[BankAccount]:
    return [
        BankAccount("HDFC", balance=80000, account_last4="1234"),
        BankAccount("SBI", balance=20000, account_last4="9876"),
    ]


@pytest.fixture
def sample_deposits() -> list[FixedDeposit]:
    return [FixedDeposit("SBI", principal=95000, current_value=100000, interest_rate=6.8, tenure_months=24)]


@pytest.fixture
def sample_expenses() -> list[TransactionRecord]:
    """One month of spend: rent, groceries and an income entry that must be ignored"""
    return [
        TransactionRecord("EXPENSE", 25000, "Rent", date(2024, 1, 1)),
        TransactionRecord("EXPENSE", 15000, "Groceries", date(2024, 1, 10)),
        TransactionRecord("INCOME", 120000, "Salary", date(2024, 1, 1)),
    ]
