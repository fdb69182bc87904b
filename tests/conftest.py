"""Shared fixtures: a fresh ledger and app per test."""

import pytest
from fastapi.testclient import TestClient

from persona_ledger.config import Settings
from persona_ledger.handlers import TransactionProcessor
from persona_ledger.main import create_app
from persona_ledger.state import LedgerState


@pytest.fixture
def settings() -> Settings:
    return Settings(initial_height=1000, list_includes_created=False, did_fallback=True)


@pytest.fixture
def state(settings: Settings) -> LedgerState:
    return LedgerState(settings)


@pytest.fixture
def processor(state: LedgerState) -> TransactionProcessor:
    return TransactionProcessor(state)


@pytest.fixture
def client(settings: Settings, state: LedgerState) -> TestClient:
    return TestClient(create_app(settings=settings, state=state))
