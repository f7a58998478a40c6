"""Submission workflow for LotLedger.

Connects the pure validators to the collaborator that owns the records.
Each submission fetches a fresh snapshot, runs the matching validator, and
calls the store only after acceptance. A session allows at most one
submission in flight at a time; a second submission made while one is
outstanding is rejected without touching the store.

Reason codes produced by this module:
    ERR_024: another submission is still in flight.
    ERR_046: the store failed partway through finalizing an order.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from decimal import Decimal
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict

from lotledger.adjustment import validate_adjustment
from lotledger.config import DEFAULT_CONFIG
from lotledger.errors import (
    ErrorCode,
    LedgerInputError,
    PartialFinalizationError,
)
from lotledger.finalize import evaluate_finalization
from lotledger.limits import validate_operation
from lotledger.models import (
    Category,
    ClassificationRecord,
    ClassificationState,
    FinalizationChecks,
    FinalizationIssue,
    FinalizationResult,
    LedgerConfig,
    OperationKind,
    Outcome,
    PalletEntry,
    ReturnEntry,
    ValidationResult,
    WasteEntry,
)
from lotledger.utils import ZERO, coerce_records, parse_category, to_decimal

logger = logging.getLogger(__name__)

_BUSY_MESSAGE = "Another submission is still being saved; try again when it completes"


class LedgerStore(Protocol):
    """Persistence capability supplied by the surrounding system."""

    def fetch_records(
        self, order_id: int
    ) -> Sequence[ClassificationRecord | Mapping[str, Any]]: ...

    def create_pallet(self, classification_id: int, entry: PalletEntry) -> Any: ...

    def create_waste(self, classification_id: int, entry: WasteEntry) -> Any: ...

    def create_return(self, classification_id: int, entry: ReturnEntry) -> Any: ...

    def apply_adjustment(
        self, classification_id: int, deltas: dict[Category, Decimal]
    ) -> Any: ...

    def set_state(
        self, classification_id: int, state: ClassificationState
    ) -> Any: ...


class Submission(BaseModel):
    """Outcome of one submission attempt.

    Attributes:
        result: The validator decision the submission was gated on.
        saved: Whatever the store returned, None when nothing was persisted.
        persisted: True when the store was called.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    result: ValidationResult | FinalizationResult
    saved: Any = None
    persisted: bool = False


class ClassificationSession:
    """Gate and persist mutations for the classifications of one order.

    Args:
        store: Collaborator that fetches records and persists mutations.
        order_id: Order whose classifications this session edits.
        config: Ledger thresholds; DEFAULT_CONFIG when None.
    """

    def __init__(
        self,
        store: LedgerStore,
        order_id: int,
        config: LedgerConfig | None = None,
    ) -> None:
        self.store = store
        self.order_id = order_id
        self.config = config or DEFAULT_CONFIG
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        """True while a submission is outstanding."""
        return self._in_flight.locked()

    def add_pallet(
        self,
        classification_id: int,
        category: Category | str,
        weight: Decimal | int | float | str,
        pallet_id: int | None = None,
    ) -> Submission:
        """Validate and persist a classified pallet."""
        entry_category = parse_category(category)

        def build() -> PalletEntry:
            return PalletEntry(
                category=entry_category,
                weight=to_decimal(weight, "weight"),
                pallet_id=pallet_id,
            )

        return self._submit_entry(
            classification_id, weight, OperationKind.PALLET,
            build, self.store.create_pallet,
        )

    def add_waste(
        self,
        classification_id: int,
        weight: Decimal | int | float | str,
        waste_type: str = "",
        notes: str | None = None,
    ) -> Submission:
        """Validate and persist a waste entry."""

        def build() -> WasteEntry:
            return WasteEntry(
                weight=to_decimal(weight, "weight"),
                waste_type=waste_type,
                notes=notes,
            )

        return self._submit_entry(
            classification_id, weight, OperationKind.WASTE,
            build, self.store.create_waste,
        )

    def add_return(
        self,
        classification_id: int,
        weight: Decimal | int | float | str,
        number: str = "",
        notes: str | None = None,
    ) -> Submission:
        """Validate and persist a return entry."""

        def build() -> ReturnEntry:
            return ReturnEntry(
                weight=to_decimal(weight, "weight"),
                number=number,
                notes=notes,
            )

        return self._submit_entry(
            classification_id, weight, OperationKind.RETURN,
            build, self.store.create_return,
        )

    def adjust_weights(
        self,
        classification_id: int,
        deltas: Mapping[Category | str, Decimal | int | float | str | None],
    ) -> Submission:
        """Validate a multi-category correction and forward its non-zero deltas."""
        if not self._in_flight.acquire(blocking=False):
            return Submission(result=_busy_validation())
        try:
            records = self._snapshot(classification_id)
            result = validate_adjustment(
                deltas, records, self.config, target_id=classification_id
            )
            if not result.accepted:
                return Submission(result=result)
            saved = self.store.apply_adjustment(
                classification_id, dict(result.accepted_deltas)
            )
            logger.info(
                "Adjustment saved for classification %d", classification_id
            )
            return Submission(result=result, saved=saved, persisted=True)
        finally:
            self._in_flight.release()

    def finalize(self) -> Submission:
        """Finalize every classification of the order if the gate allows it.

        Classifications are moved to Finalized one at a time. If the store
        fails partway, the ones already saved stay Finalized.

        Returns:
            Submission whose ``saved`` is the list of store responses, one
            per classification, when finalization went through.

        Raises:
            PartialFinalizationError: ERR_046 when ``set_state`` raises,
                naming the ids already finalized and those still open.
        """
        if not self._in_flight.acquire(blocking=False):
            return Submission(result=_busy_finalization())
        try:
            records = coerce_records(self.store.fetch_records(self.order_id))
            result = evaluate_finalization(records, config=self.config)
            if not result.can_finalize:
                return Submission(result=result)
            saved = self._finalize_each(records)
            logger.info(
                "Order %d finalized (%d classification(s))",
                self.order_id,
                len(records),
            )
            return Submission(result=result, saved=saved, persisted=True)
        finally:
            self._in_flight.release()

    def _finalize_each(self, records: list[ClassificationRecord]) -> list[Any]:
        """Call set_state for each record, reporting partial progress on failure."""
        saved: list[Any] = []
        finalized_ids: list[int] = []
        for index, record in enumerate(records):
            try:
                saved.append(
                    self.store.set_state(record.id, ClassificationState.FINALIZED)
                )
            except Exception as exc:
                error = PartialFinalizationError(
                    finalized_ids, [r.id for r in records[index:]]
                )
                logger.error("[%s] %s", error.code, error.message)
                raise error from exc
            finalized_ids.append(record.id)
        return saved

    def _submit_entry(
        self,
        classification_id: int,
        weight: Decimal | int | float | str,
        kind: OperationKind,
        build: Callable[[], BaseModel],
        create: Callable[[int, Any], Any],
    ) -> Submission:
        """Run validate-then-create for a pallet, waste, or return entry."""
        if not self._in_flight.acquire(blocking=False):
            return Submission(result=_busy_validation())
        try:
            records = self._snapshot(classification_id)
            result = validate_operation(weight, kind, records, self.config)
            if not result.accepted:
                return Submission(result=result)
            saved = create(classification_id, build())
            logger.info(
                "%s of %s kg saved for classification %d",
                kind.value,
                weight,
                classification_id,
            )
            return Submission(result=result, saved=saved, persisted=True)
        finally:
            self._in_flight.release()

    def _snapshot(self, classification_id: int) -> list[ClassificationRecord]:
        """Fetch the order's records and check the target belongs to it.

        Raises:
            LedgerInputError: ERR_010 if ``classification_id`` is not part
                of the order.
        """
        records = coerce_records(self.store.fetch_records(self.order_id))
        if not any(record.id == classification_id for record in records):
            raise LedgerInputError(
                code=ErrorCode.ERR_010,
                message=(
                    f"Classification {classification_id} is not part of "
                    f"order {self.order_id}"
                ),
                field="classification_id",
                record_id=classification_id,
            )
        return records


def _busy_validation() -> ValidationResult:
    logger.warning("[%s] %s", ErrorCode.ERR_024.value, _BUSY_MESSAGE)
    return ValidationResult(
        outcome=Outcome.REJECTED,
        code=ErrorCode.ERR_024,
        message=_BUSY_MESSAGE,
        remaining_weight=ZERO,
        current_progress=ZERO,
        projected_progress=ZERO,
    )


def _busy_finalization() -> FinalizationResult:
    logger.warning("[%s] %s", ErrorCode.ERR_024.value, _BUSY_MESSAGE)
    return FinalizationResult(
        can_finalize=False,
        issues=[FinalizationIssue(code=ErrorCode.ERR_024, message=_BUSY_MESSAGE)],
        classified_categories=[],
        unclassified_categories=[],
        checks=FinalizationChecks(
            has_classified_categories=False,
            prices_set=False,
            progress_complete=False,
        ),
        progress=ZERO,
    )
