"""Tests for lotledger.aggregate."""

from __future__ import annotations

import random
from decimal import Decimal

import pytest

from lotledger.aggregate import aggregate, aggregate_by_record, classified_categories
from lotledger.errors import LedgerInputError
from lotledger.models import Category


class TestAggregate:
    """Tests for aggregate()."""

    def test_single_record_totals(self, make_record) -> None:
        record = make_record(
            expected=200,
            pallets=[("XL", 40), ("XL", "10.5"), ("M", 30)],
            waste=[5, "2.5"],
            returns=[12],
        )
        totals = aggregate([record])

        assert totals.category_weights == {
            Category.XL: Decimal("50.5"),
            Category.L: Decimal("0"),
            Category.M: Decimal("30"),
            Category.S: Decimal("0"),
        }
        assert totals.waste_weight == Decimal("7.5")
        assert totals.return_weight == Decimal("12")
        assert totals.classified_weight == Decimal("100")
        assert totals.expected_weight == Decimal("200")
        assert totals.progress == Decimal("50.000")

    def test_empty_set_is_all_zero(self) -> None:
        totals = aggregate([])
        assert set(totals.category_weights) == set(Category)
        assert all(w == 0 for w in totals.category_weights.values())
        assert totals.classified_weight == 0
        assert totals.expected_weight == 0
        assert totals.progress == 0

    def test_batch_sums_expected_weights(self, make_record) -> None:
        records = [
            make_record(record_id=1, expected=100, pallets=[("L", 60)]),
            make_record(record_id=2, expected=50, pallets=[("L", 15)], waste=[5]),
        ]
        totals = aggregate(records)
        assert totals.expected_weight == Decimal("150")
        assert totals.category_weights[Category.L] == Decimal("75")
        assert totals.classified_weight == Decimal("80")

    def test_order_independent(self, make_record) -> None:
        records = [
            make_record(record_id=i, expected=30, pallets=[("S", i)], returns=[1])
            for i in range(1, 6)
        ]
        shuffled = list(records)
        random.Random(7).shuffle(shuffled)
        assert aggregate(records) == aggregate(shuffled)

    def test_idempotent(self, make_record) -> None:
        records = [make_record(pallets=[("XL", 33)], waste=[2])]
        assert aggregate(records) == aggregate(records)

    def test_accepts_mappings(self) -> None:
        totals = aggregate(
            [
                {
                    "id": 1,
                    "expected_weight": 10,
                    "pallets": [{"category": "S", "weight": 4}],
                    "waste": [{"weight": 1}],
                    "returns": [{"weight": 1}],
                }
            ]
        )
        assert totals.classified_weight == Decimal("6")
        assert totals.progress == Decimal("60.000")

    def test_zero_expected_has_zero_progress(self, make_record) -> None:
        totals = aggregate([make_record(expected=0, pallets=[("XL", 10)])])
        assert totals.classified_weight == Decimal("10")
        assert totals.progress == Decimal("0")

    def test_malformed_record_raises(self) -> None:
        with pytest.raises(LedgerInputError) as exc_info:
            aggregate([{"id": 1, "expected_weight": "lots"}])
        assert exc_info.value.code == "ERR_010"


class TestAggregateByRecord:
    def test_keyed_by_id(self, make_record) -> None:
        records = [
            make_record(record_id=1, expected=100, pallets=[("XL", 25)]),
            make_record(record_id=2, expected=40, pallets=[("S", 40)]),
        ]
        per_record = aggregate_by_record(records)
        assert list(per_record) == [1, 2]
        assert per_record[1].progress == Decimal("25.000")
        assert per_record[2].progress == Decimal("100.000")


class TestClassifiedCategories:
    def test_canonical_order(self, make_record) -> None:
        records = [
            make_record(record_id=1, pallets=[("S", 1), ("XL", 1)]),
            make_record(record_id=2, pallets=[("M", 1)]),
        ]
        assert classified_categories(records) == [Category.XL, Category.M, Category.S]

    def test_none_classified(self, make_record) -> None:
        assert classified_categories([make_record(pallets=[], waste=[3])]) == []
