"""Pytest fixtures for testing"""

import asyncio
import pytest
from datetime import datetime
from typing import Dict, Generator, List, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from finhealth_gateway.api.main import create_app
from finhealth_gateway.domain.models import LedgerEntry
from finhealth_gateway.domain.summary import (
    BillSummaryInput,
    BudgetUtilisation,
    CoreTotals,
    Recurring,
    Volatility,
)
from finhealth_gateway.infrastructure.database.models import Base
from finhealth_gateway.infrastructure.storage.report_cache import ReportCacheManager
from finhealth_gateway.infrastructure.storage.store import InMemoryStore


# Fixed "now": Saturday 14 March 2026, noon local time
NOW = datetime(2026, 3, 14, 12, 0, 0)

# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_summary(
    total_expense: float = 500,
    start_date: str = "2026-03-01",
    end_date: str = "2026-03-31",
    usage_pct: float = 50,
    volatility_pct: float = 20,
    cover_days: float = 70,
    period: str = "monthly",
) -> BillSummaryInput:
    return BillSummaryInput(
        period=period,
        start_date=start_date,
        end_date=end_date,
        core_totals=CoreTotals(total_expense=total_expense),
        budget_utilisation=BudgetUtilisation(overall_budget=1000, usage_pct=usage_pct),
        volatility=Volatility(volatility_pct=volatility_pct),
        recurring=Recurring(recurring_cover_days=cover_days),
    )


def make_report(generated_at: datetime, score: int = 80, **extra) -> dict:
    return {
        "generatedAt": generated_at.isoformat(),
        "healthScore": {"score": score, "status": "Good", "subScores": {}},
        "insights": [],
        **extra,
    }


class FakeReportClient:
    """Stands in for ReportClient; fetches can be held open per cache key"""

    def __init__(self, cache: ReportCacheManager, clock=lambda: NOW, error: Optional[Exception] = None):
        self.cache = cache
        self.clock = clock
        self.error = error
        self.calls: List[str] = []
        self.gates: Dict[str, asyncio.Event] = {}

    def hold(self, summary: BillSummaryInput) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[self.cache.key_for(summary)] = gate
        return gate

    async def fetch(self, summary: BillSummaryInput) -> dict:
        key = self.cache.key_for(summary)
        self.calls.append(key)
        gate = self.gates.get(key)
        if gate is not None:
            await gate.wait()
        if self.error is not None:
            raise self.error
        data = make_report(self.clock(), key=key)
        await self.cache.write(key, data)
        return data


async def wait_for_calls(client: FakeReportClient, count: int = 1) -> None:
    """Yield to the loop until the client has been called `count` times"""
    for _ in range(100):
        if len(client.calls) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError("fetch was never started")


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def cache(store: InMemoryStore) -> ReportCacheManager:
    return ReportCacheManager(store)


@pytest.fixture
def session_factory() -> Generator[sessionmaker, None, None]:
    """Create test database and session factory"""
    Base.metadata.create_all(bind=engine)
    try:
        yield TestingSessionLocal
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client"""
    return TestClient(create_app())


@pytest.fixture
def sample_entries() -> list[LedgerEntry]:
    """March 2026 ledger: bills without kind, transactions with kind"""
    return [
        LedgerEntry(id="b1", amount=120.0, category="food", date=datetime(2026, 3, 2, 9, 30)),
        LedgerEntry(id="b2", amount=80.0, category="transport", date=datetime(2026, 3, 9, 18, 0)),
        LedgerEntry(id="t1", amount=300.0, category="rent", date=datetime(2026, 3, 1, 0, 0), kind="expense"),
        LedgerEntry(id="t2", amount=2000.0, category="salary", date=datetime(2026, 3, 5, 8, 0), kind="income"),
        LedgerEntry(id="t3", amount=45.5, category="food", date=datetime(2026, 3, 13, 20, 15), kind="expense"),
        # Previous month, never counted for March
        LedgerEntry(id="b3", amount=999.0, category="food", date=datetime(2026, 2, 28, 23, 59)),
    ]
