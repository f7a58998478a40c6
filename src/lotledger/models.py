"""Pydantic data models for LotLedger.

Defines all data entities used across the ledger engine:
Category, OperationKind, ClassificationState, Outcome, PalletEntry,
WasteEntry, ReturnEntry, ClassificationRecord, AggregatedTotals,
ValidationResult, FinalizationIssue, FinalizationChecks,
FinalizationResult, Valuation, PriceStatistics, LedgerConfig.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """Size bucket a pallet is classified into.

    Declaration order is the canonical display order (XL, L, M, S).
    """

    XL = "XL"
    L = "L"
    M = "M"
    S = "S"


class OperationKind(str, Enum):
    """Kind of weight addition competing for a lot's budget."""

    PALLET = "Pallet"
    WASTE = "Waste"
    RETURN = "Return"


class ClassificationState(str, Enum):
    """Lifecycle state of a classification. Open -> Finalized, one way."""

    OPEN = "Open"
    FINALIZED = "Finalized"


class Outcome(str, Enum):
    """Tagged decision returned by the operation and adjustment validators."""

    ACCEPTED = "Accepted"
    ACCEPTED_WITH_WARNING = "AcceptedWithWarning"
    REJECTED = "Rejected"


class PalletEntry(BaseModel):
    """One pallet of classified product.

    Attributes:
        category: Size bucket the pallet belongs to.
        weight: Net weight in kg, never negative.
        pallet_id: Identifier assigned by the pallet registration flow.
    """

    model_config = ConfigDict(frozen=True)

    category: Category
    weight: Decimal = Field(ge=0)
    pallet_id: int | None = None


class WasteEntry(BaseModel):
    """Weight discarded during classification (merma).

    Counts toward the lot budget but not toward any category.
    """

    model_config = ConfigDict(frozen=True)

    weight: Decimal = Field(ge=0)
    waste_type: str = ""
    notes: str | None = None
    entry_id: int | None = None


class ReturnEntry(BaseModel):
    """Weight returned or rejected (retorno).

    Counts toward the lot budget but not toward any category.
    """

    model_config = ConfigDict(frozen=True)

    weight: Decimal = Field(ge=0)
    number: str = ""
    notes: str | None = None
    entry_id: int | None = None


class ClassificationRecord(BaseModel):
    """A lot under classification, as supplied by the record-fetch collaborator.

    Read-only to the engine. The surrounding system creates it when an
    order enters classification, adds entries to it, and freezes it once
    finalized.

    Attributes:
        id: Classification identifier used by persistence calls.
        lot: Lot code.
        expected_weight: Target total weight fixed at order intake.
        pallets: Classified pallets.
        waste: Waste entries.
        returns: Return entries.
        xl_price: Unit price per kg for XL.
        l_price: Unit price per kg for L.
        m_price: Unit price per kg for M.
        s_price: Unit price per kg for S.
        return_price: Unit price per kg for returned product.
        state: Open or Finalized.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    lot: str = ""
    expected_weight: Decimal = Field(ge=0)
    pallets: list[PalletEntry] = Field(default_factory=list)
    waste: list[WasteEntry] = Field(default_factory=list)
    returns: list[ReturnEntry] = Field(default_factory=list)
    xl_price: Decimal = Field(default=Decimal("0"), ge=0)
    l_price: Decimal = Field(default=Decimal("0"), ge=0)
    m_price: Decimal = Field(default=Decimal("0"), ge=0)
    s_price: Decimal = Field(default=Decimal("0"), ge=0)
    return_price: Decimal = Field(default=Decimal("0"), ge=0)
    state: ClassificationState = ClassificationState.OPEN

    def price_for(self, category: Category) -> Decimal:
        """Return the unit price configured for ``category``."""
        prices = {
            Category.XL: self.xl_price,
            Category.L: self.l_price,
            Category.M: self.m_price,
            Category.S: self.s_price,
        }
        return prices[category]

    @property
    def is_finalized(self) -> bool:
        return self.state == ClassificationState.FINALIZED


class AggregatedTotals(BaseModel):
    """Weight totals derived from a set of classification records.

    Pure projection, recomputed on every evaluation and never stored.

    Attributes:
        category_weights: Pallet weight per category. Always holds all
            four categories, zero when a category has no pallets.
        waste_weight: Sum of all waste entries.
        return_weight: Sum of all return entries.
        classified_weight: Categories + waste + returns.
        expected_weight: Sum of expected weights across records.
        progress: classified_weight / expected_weight * 100, 0 when
            expected_weight is 0.
    """

    model_config = ConfigDict(frozen=True)

    category_weights: dict[Category, Decimal]
    waste_weight: Decimal
    return_weight: Decimal
    classified_weight: Decimal
    expected_weight: Decimal
    progress: Decimal

    @property
    def pallet_weight(self) -> Decimal:
        """Weight in categories only, excluding waste and returns."""
        return sum(self.category_weights.values(), Decimal("0"))


class ValidationResult(BaseModel):
    """Decision for a proposed weight addition or adjustment.

    Attributes:
        outcome: Accepted, AcceptedWithWarning, or Rejected.
        code: ERR_xxx for rejections, ATT_xxx for warnings, None otherwise.
        message: Operator-facing text, empty when accepted silently.
        remaining_weight: Budget left before the operation, never negative.
        current_progress: Progress before the operation.
        projected_progress: Progress if the operation were applied.
        accepted_deltas: For adjustments, the non-zero deltas to forward to
            persistence. Empty for rejections and single operations.
    """

    model_config = ConfigDict(frozen=True)

    outcome: Outcome
    code: str | None = None
    message: str = ""
    remaining_weight: Decimal
    current_progress: Decimal
    projected_progress: Decimal
    accepted_deltas: dict[Category, Decimal] = Field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return self.outcome != Outcome.REJECTED

    @property
    def has_warning(self) -> bool:
        return self.outcome == Outcome.ACCEPTED_WITH_WARNING


class FinalizationIssue(BaseModel):
    """One outstanding reason blocking finalization."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    category: Category | None = None
    record_id: int | None = None


class FinalizationChecks(BaseModel):
    """Per-criterion outcome of the finalization gate."""

    model_config = ConfigDict(frozen=True)

    has_classified_categories: bool
    prices_set: bool
    progress_complete: bool


class FinalizationResult(BaseModel):
    """Multi-criterion decision on whether a classification may finalize.

    Attributes:
        can_finalize: True only when every criterion holds.
        issues: All blocking reasons with their codes, in evaluation order.
        classified_categories: Categories with at least one pallet.
        unclassified_categories: Categories with no pallets (price exempt).
        checks: Per-criterion summary.
        progress: Progress value the decision was made against.
    """

    model_config = ConfigDict(frozen=True)

    can_finalize: bool
    issues: list[FinalizationIssue]
    classified_categories: list[Category]
    unclassified_categories: list[Category]
    checks: FinalizationChecks
    progress: Decimal

    @property
    def blocking_reasons(self) -> list[str]:
        return [issue.message for issue in self.issues]


class Valuation(BaseModel):
    """Monetary value of classified weight (weight x unit price per category)."""

    model_config = ConfigDict(frozen=True)

    category_values: dict[Category, Decimal]
    total_value: Decimal


class PriceStatistics(BaseModel):
    """Summary statistics over a record's five unit prices.

    Attributes:
        mean: Arithmetic mean.
        maximum: Highest price.
        minimum: Lowest price.
        spread: maximum - minimum.
        total: Sum of prices.
        std_dev: Population standard deviation.
    """

    model_config = ConfigDict(frozen=True)

    mean: Decimal
    maximum: Decimal
    minimum: Decimal
    spread: Decimal
    total: Decimal
    std_dev: Decimal


class LedgerConfig(BaseModel):
    """Engine thresholds, loaded from ledger.yaml or left at defaults.

    Attributes:
        warning_threshold: Projected fraction of the budget above which an
            accepted operation carries a near-completion warning.
        progress_decimals: Decimal places progress is rounded to.
        message_decimals: Decimal places used for kg values in messages.
        max_progress: Progress above which finalization is blocked as
            out of range.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    warning_threshold: Decimal = Field(default=Decimal("0.95"), gt=0, le=1)
    progress_decimals: int = Field(default=3, ge=0, le=10)
    message_decimals: int = Field(default=2, ge=0, le=6)
    max_progress: Decimal = Field(default=Decimal("150"), ge=100)
