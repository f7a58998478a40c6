"""Tests for lotledger.indicators."""

from __future__ import annotations

from decimal import Decimal

from lotledger.aggregate import aggregate
from lotledger.indicators import (
    compute_progress,
    exact_progress,
    progress,
    remaining_weight,
)
from lotledger.models import LedgerConfig


def test_compute_progress_rounds_to_three_places() -> None:
    assert compute_progress(Decimal("1"), Decimal("3")) == Decimal("33.333")
    assert compute_progress(Decimal("2"), Decimal("3")) == Decimal("66.667")


def test_compute_progress_honours_config() -> None:
    config = LedgerConfig(progress_decimals=1)
    assert compute_progress(Decimal("2"), Decimal("3"), config) == Decimal("66.7")


def test_compute_progress_zero_expected() -> None:
    assert compute_progress(Decimal("5"), Decimal("0")) == Decimal("0")


def test_progress_not_clamped_above_hundred(make_record) -> None:
    totals = aggregate([make_record(expected=80, pallets=[("XL", 100)])])
    assert progress(totals) == Decimal("125.000")


def test_remaining_weight(make_record) -> None:
    totals = aggregate([make_record(expected=100, pallets=[("L", 62.5)], waste=[7])])
    assert remaining_weight(totals) == Decimal("30.5")


def test_remaining_weight_floors_at_zero(make_record) -> None:
    totals = aggregate([make_record(expected=50, pallets=[("L", 60)])])
    assert remaining_weight(totals) == Decimal("0")


def test_exact_progress_is_not_rounded(make_record) -> None:
    totals = aggregate([make_record(expected=100, pallets=[("XL", "99.9996")])])
    assert exact_progress(totals) == Decimal("99.9996")
    assert progress(totals) == Decimal("100.000")


def test_exact_progress_zero_expected(make_record) -> None:
    totals = aggregate([make_record(expected=0, waste=[4])])
    assert exact_progress(totals) == Decimal("0")
