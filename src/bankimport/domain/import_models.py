"""Data types exchanged by the CSV import workflow."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Optional

from bankimport.domain.errors import ErrorKind


@dataclass(frozen=True)
class TransactionCandidate:
    """A parsed row that has not been persisted yet."""

    row_index: int
    transaction_date: date
    amount: Decimal
    description: str
    category_name: Optional[str] = None
    category_id: Optional[int] = None

    @property
    def transaction_type(self) -> str:
        return "INCOME" if self.amount >= 0 else "EXPENSE"


@dataclass(frozen=True)
class FieldError:
    """Why one field of a row could not be parsed."""

    field: str
    kind: ErrorKind
    message: str
    raw_value: str


# Row outcomes form a closed set of variants; each carries only what is
# meaningful for it.


@dataclass(frozen=True)
class ValidRow:
    candidate: TransactionCandidate

    @property
    def row_index(self) -> int:
        return self.candidate.row_index


@dataclass(frozen=True)
class InvalidRow:
    row_index: int
    errors: tuple[FieldError, ...]


@dataclass(frozen=True)
class DuplicateRow:
    candidate: TransactionCandidate
    existing_transaction_id: int

    @property
    def row_index(self) -> int:
        return self.candidate.row_index


RowOutcome = ValidRow | InvalidRow | DuplicateRow


@dataclass(frozen=True)
class RowCorrection:
    """Manual overrides for one row; None leaves the CSV value in place."""

    corrected_date: Optional[str] = None
    corrected_amount: Optional[str] = None
    corrected_description: Optional[str] = None
    category_id: Optional[int] = None


@dataclass(frozen=True)
class ImportDecision:
    """The user's verdict on each row, supplied once at commit time."""

    approved_rows: frozenset[int] = frozenset()
    rejected_rows: frozenset[int] = frozenset()
    corrections: dict[int, RowCorrection] = field(default_factory=dict)


@dataclass(frozen=True)
class UploadResult:
    session_id: str
    headers: list[str]
    preview_rows: list[list[str]]
    total_rows: int


@dataclass(frozen=True)
class TransactionPreview:
    row_index: int
    transaction_date: date
    amount: Decimal
    description: str
    category: Optional[str]
    transaction_type: str


@dataclass(frozen=True)
class PreviewError:
    row_index: int
    kind: ErrorKind
    field: str
    error: str
    raw_data: str


@dataclass(frozen=True)
class DuplicateWarning:
    row_index: int
    transaction_date: date
    amount: Decimal
    description: str
    existing_transaction_id: int


@dataclass(frozen=True)
class PreviewResult:
    session_id: str
    valid_transactions: list[TransactionPreview]
    validation_errors: list[PreviewError]
    duplicate_warnings: list[DuplicateWarning]
    total_processed: int
    valid_count: int
    error_count: int
    duplicate_count: int


@dataclass(frozen=True)
class ImportResult:
    session_id: str
    total_processed: int
    successful_imports: int
    skipped_rows: int
    failed_imports: int
    errors: list[str]
    imported_transaction_ids: list[int]
