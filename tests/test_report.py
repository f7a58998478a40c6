"""Tests for lotledger.report."""

from __future__ import annotations

import logging

import pytest

from lotledger.aggregate import aggregate
from lotledger.finalize import classification_status, evaluate_finalization
from lotledger.limits import validate_operation
from lotledger.pricing import price_statistics, value_by_category
from lotledger.report import (
    print_ledger_summary,
    print_price_statistics,
    print_validation,
)


def _summarize(records) -> None:
    totals = aggregate(records)
    finalization = evaluate_finalization(records)
    print_ledger_summary(
        totals,
        value_by_category(records),
        finalization,
        classification_status(records, finalization),
    )


def test_summary_ready_record(caplog: pytest.LogCaptureFixture, make_record) -> None:
    records = [make_record(expected=100, pallets=[("XL", 100)], prices={"xl": 10})]
    with caplog.at_level(logging.INFO, logger="lotledger.report"):
        _summarize(records)

    text = caplog.text
    assert "CLASSIFICATION LEDGER SUMMARY" in text
    assert "100.00 kg" in text
    assert "Ready to finalize" in text
    assert "1000.00" in text
    assert "FINALIZATION BLOCKED" not in text


def test_summary_blocked_lists_issues(
    caplog: pytest.LogCaptureFixture, make_record
) -> None:
    records = [make_record(expected=100, pallets=[("XL", 40)])]
    with caplog.at_level(logging.INFO, logger="lotledger.report"):
        _summarize(records)

    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert warnings[0] == "FINALIZATION BLOCKED:"
    assert any("ERR_042" in w and "XL price" in w for w in warnings)
    assert any("ERR_043" in w for w in warnings)


@pytest.mark.parametrize(
    ("existing", "candidate", "level", "marker"),
    [
        (10, 5, logging.INFO, "ACCEPTED"),
        (90, 6, logging.WARNING, "ACCEPTED [ATT_001]"),
        (90, 20, logging.ERROR, "REJECTED [ERR_030]"),
    ],
)
def test_print_validation_level_follows_outcome(
    caplog: pytest.LogCaptureFixture,
    make_record,
    existing: int,
    candidate: int,
    level: int,
    marker: str,
) -> None:
    records = [make_record(expected=100, pallets=[("L", existing)])]
    result = validate_operation(candidate, "pallet", records)
    caplog.clear()
    with caplog.at_level(logging.INFO, logger="lotledger.report"):
        print_validation("Add pallet", result)

    matching = [r for r in caplog.records if marker in r.getMessage()]
    assert matching and matching[0].levelno == level
    assert "Remaining:" in caplog.text


def test_print_price_statistics(caplog: pytest.LogCaptureFixture, make_record) -> None:
    record = make_record(prices={"xl": 10, "l": 8, "m": 6, "s": 4, "return": 2})
    with caplog.at_level(logging.INFO, logger="lotledger.report"):
        print_price_statistics("L-001", price_statistics(record))

    assert caplog.records[-1].getMessage() == (
        "Prices L-001: mean 6.00, min 2.00, max 10.00, spread 8.00, std dev 2.83"
    )
