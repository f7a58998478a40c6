"""Error types and reason code enums for LotLedger.

Defines ErrorCode (ERR_001-ERR_046), WarningCode (ATT_001), and the
LedgerInputError, ConfigError and PartialFinalizationError exceptions.

Rejections and blocked finalizations are returned as values carrying these
codes. The exceptions are reserved for malformed input, bad config, and a
store failure in the middle of finalizing an order.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Reason codes for rejected operations and blocked finalizations.

    Each member's string value equals its name (e.g., ErrorCode.ERR_001 == "ERR_001").
    Codes are grouped by phase:
        ERR_001-003: Config errors
        ERR_010-011: Malformed input shape
        ERR_020-024: Invalid operation input
        ERR_030: Budget errors
        ERR_040-045: Finalization blockers
        ERR_046: Finalization interrupted by the store
    """

    # Config errors
    ERR_001 = "ERR_001"
    ERR_002 = "ERR_002"
    ERR_003 = "ERR_003"

    # Malformed input shape
    ERR_010 = "ERR_010"
    ERR_011 = "ERR_011"

    # Invalid operation input
    ERR_020 = "ERR_020"
    ERR_021 = "ERR_021"
    ERR_022 = "ERR_022"
    ERR_023 = "ERR_023"
    ERR_024 = "ERR_024"

    # Budget errors
    ERR_030 = "ERR_030"

    # Finalization blockers
    ERR_040 = "ERR_040"
    ERR_041 = "ERR_041"
    ERR_042 = "ERR_042"
    ERR_043 = "ERR_043"
    ERR_044 = "ERR_044"
    ERR_045 = "ERR_045"
    ERR_046 = "ERR_046"

    def __str__(self) -> str:
        return self.value


class WarningCode(str, Enum):
    """Advisory codes attached to accepted operations."""

    ATT_001 = "ATT_001"

    def __str__(self) -> str:
        return self.value


class LedgerInputError(Exception):
    """Exception raised when engine input has the wrong shape.

    This signals a programming error in the caller (missing fields, wrong
    types), never a user-facing condition.

    Attributes:
        code: The ERR_NNN code string (ERR_010 or ERR_011).
        message: Human-readable description of the problem.
        field: Field or key involved, if known.
        record_id: Id of the offending classification record, if known.
    """

    def __init__(
        self,
        code: str,
        message: str,
        field: str | None = None,
        record_id: int | None = None,
    ) -> None:
        """Initialize a LedgerInputError.

        Args:
            code: The ERR_NNN code string.
            message: Human-readable description of the problem.
            field: Field or key involved.
            record_id: Id of the offending classification record.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field
        self.record_id = record_id


class ConfigError(Exception):
    """Exception raised for invalid ledger configuration.

    Raised only by config.py. Caught by cli.py which exits with code 2.

    Attributes:
        code: The ERR_NNN error code string (ERR_001 through ERR_003).
        message: Human-readable description of the config problem.
        path: Path to the config file that caused the error.
    """

    def __init__(
        self,
        code: str,
        message: str,
        path: str | None = None,
    ) -> None:
        """Initialize a ConfigError.

        Args:
            code: The ERR_NNN error code string.
            message: Human-readable description of the config problem.
            path: Path to the config file that caused the error.
        """
        super().__init__(message)
        self.code = code
        self.message = message
        self.path = path


class PartialFinalizationError(Exception):
    """Exception raised when the store fails partway through finalizing an order.

    The store's own exception is chained as ``__cause__``.

    Attributes:
        code: Always ERR_046.
        message: Human-readable description naming both id lists.
        finalized_ids: Classifications already moved to Finalized.
        pending_ids: Classifications still Open, the failing one first.
    """

    def __init__(self, finalized_ids: list[int], pending_ids: list[int]) -> None:
        message = (
            f"Finalization stopped: finalized {finalized_ids}, "
            f"still open {pending_ids}"
        )
        super().__init__(message)
        self.code = ErrorCode.ERR_046
        self.message = message
        self.finalized_ids = finalized_ids
        self.pending_ids = pending_ids
