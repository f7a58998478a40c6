"""Shared test fixtures for LotLedger test suite.

Provides the session-scoped config fixture and a function-scoped
classification record factory.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Callable

import pytest

from lotledger.config import load_config
from lotledger.models import (
    Category,
    ClassificationRecord,
    ClassificationState,
    LedgerConfig,
    PalletEntry,
    ReturnEntry,
    WasteEntry,
)


@pytest.fixture(scope="session")
def ledger_config() -> LedgerConfig:
    """Load the project's config/ledger.yaml once per test session."""
    config_dir = Path(__file__).parent.parent / "config"
    return load_config(config_dir)


@pytest.fixture()
def make_record() -> Callable[..., ClassificationRecord]:
    """Factory fixture for ClassificationRecord instances.

    Weights and prices may be given as int, str, or Decimal.

    Returns:
        Callable with signature
        make_record(record_id=1, expected=100, pallets=None, waste=None,
        returns=None, prices=None, lot="L-001", state=Open).
        ``pallets`` is a list of (category name, weight) pairs; ``waste``
        and ``returns`` are lists of weights; ``prices`` maps lowercase
        category names (and "return") to unit prices.
    """

    def _make_record(
        record_id: int = 1,
        expected: object = 100,
        pallets: list[tuple[str, object]] | None = None,
        waste: list[object] | None = None,
        returns: list[object] | None = None,
        prices: dict[str, object] | None = None,
        lot: str = "L-001",
        state: ClassificationState = ClassificationState.OPEN,
    ) -> ClassificationRecord:
        prices = prices or {}
        return ClassificationRecord(
            id=record_id,
            lot=lot,
            expected_weight=Decimal(str(expected)),
            pallets=[
                PalletEntry(category=Category(cat), weight=Decimal(str(w)))
                for cat, w in (pallets or [])
            ],
            waste=[
                WasteEntry(weight=Decimal(str(w)), waste_type="damaged")
                for w in (waste or [])
            ],
            returns=[
                ReturnEntry(weight=Decimal(str(w)), number=f"R-{i}")
                for i, w in enumerate(returns or [], start=1)
            ],
            xl_price=Decimal(str(prices.get("xl", 0))),
            l_price=Decimal(str(prices.get("l", 0))),
            m_price=Decimal(str(prices.get("m", 0))),
            s_price=Decimal(str(prices.get("s", 0))),
            return_price=Decimal(str(prices.get("return", 0))),
            state=state,
        )

    return _make_record
