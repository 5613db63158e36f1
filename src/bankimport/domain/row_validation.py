"""Row validation and duplicate detection for mapped CSV rows."""

from datetime import timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from bankimport.database.base import Database
from bankimport.domain.column_mapping import ColumnMapping, SignedAmount
from bankimport.domain.errors import ErrorKind
from bankimport.domain.import_models import (
    DuplicateRow,
    FieldError,
    InvalidRow,
    RowCorrection,
    RowOutcome,
    TransactionCandidate,
    ValidRow,
)
from bankimport.domain.intake import sanitize_cell
from bankimport.domain.session_store import RawRow
from bankimport.utils.amount_parser import parse_amount
from bankimport.utils.date_parser import parse_statement_date

CENTS = Decimal("0.01")


def parse_row(
    raw_row: RawRow,
    mapping: ColumnMapping,
    correction: Optional[RowCorrection] = None,
) -> ValidRow | InvalidRow:
    """Turn one raw row into a transaction candidate.

    Every field is checked so that all problems of a row are reported
    together. Corrected values, when given, replace the CSV cells before
    parsing; a corrected amount is always read as a signed amount.

    Args:
        raw_row: Tokenized row
        mapping: Column mapping bound to the session
        correction: Optional manual overrides

    Returns:
        ValidRow with the candidate, or InvalidRow with field errors
    """
    errors: list[FieldError] = []

    date_raw = raw_row.cell(mapping.date_column)
    if correction is not None and correction.corrected_date is not None:
        date_raw = correction.corrected_date
    try:
        transaction_date = parse_statement_date(date_raw)
    except ValueError:
        transaction_date = None
        errors.append(
            FieldError("date", ErrorKind.INVALID_DATE, f"Invalid date '{date_raw}'", date_raw)
        )

    if correction is not None and correction.corrected_amount is not None:
        amount = _parse_signed(correction.corrected_amount, errors)
    elif isinstance(mapping.amount, SignedAmount):
        amount = _parse_signed(raw_row.cell(mapping.amount.column), errors)
    else:
        amount = _resolve_debit_credit(
            raw_row.cell(mapping.amount.debit_column),
            raw_row.cell(mapping.amount.credit_column),
            errors,
        )

    description_raw = raw_row.cell(mapping.description_column)
    if correction is not None and correction.corrected_description is not None:
        description_raw = correction.corrected_description
    description = sanitize_cell(description_raw)
    if not description:
        errors.append(
            FieldError(
                "description",
                ErrorKind.INVALID_DESCRIPTION,
                "Description is empty",
                description_raw,
            )
        )

    if errors:
        return InvalidRow(row_index=raw_row.row_index, errors=tuple(errors))

    category_name = None
    if mapping.category_column is not None:
        category_name = sanitize_cell(raw_row.cell(mapping.category_column)) or None

    return ValidRow(
        candidate=TransactionCandidate(
            row_index=raw_row.row_index,
            transaction_date=transaction_date,
            amount=amount,
            description=description,
            category_name=category_name,
            category_id=correction.category_id if correction is not None else None,
        )
    )


def _parse_cents(raw: str) -> Decimal:
    """Parse an amount that must fit in whole cents.

    Raises:
        ValueError: If the amount cannot be parsed or has more than two
            decimal places
    """
    amount = parse_amount(raw)
    try:
        fits = amount == amount.quantize(CENTS)
    except InvalidOperation:
        fits = False
    if not fits:
        raise ValueError(f"Amount '{raw}' has more than two decimal places")
    return amount


def _parse_signed(raw: str, errors: list[FieldError]) -> Optional[Decimal]:
    try:
        return _parse_cents(raw)
    except ValueError:
        errors.append(
            FieldError("amount", ErrorKind.INVALID_AMOUNT, f"Invalid amount '{raw}'", raw)
        )
        return None


def _parse_optional(raw: str, field: str, errors: list[FieldError]) -> Optional[Decimal]:
    """Parse a debit or credit cell; blank means no value."""
    if not raw.strip():
        return None
    try:
        return _parse_cents(raw)
    except ValueError:
        errors.append(
            FieldError(field, ErrorKind.INVALID_AMOUNT, f"Invalid {field} amount '{raw}'", raw)
        )
        return None


def _resolve_debit_credit(
    debit_raw: str, credit_raw: str, errors: list[FieldError]
) -> Optional[Decimal]:
    """Combine debit and credit cells into one signed amount.

    Debits are money out and become negative, credits become positive,
    whatever sign the bank wrote in the cell.
    """
    error_count = len(errors)
    debit = _parse_optional(debit_raw, "debit", errors)
    credit = _parse_optional(credit_raw, "credit", errors)
    if len(errors) > error_count:
        return None

    has_debit = debit is not None and debit != 0
    has_credit = credit is not None and credit != 0
    if has_debit == has_credit:
        reason = (
            "Both debit and credit are filled in"
            if has_debit
            else "Neither debit nor credit holds an amount"
        )
        errors.append(
            FieldError("amount", ErrorKind.AMBIGUOUS_AMOUNT, reason, f"{debit_raw},{credit_raw}")
        )
        return None

    if has_debit:
        return -abs(debit)
    return abs(credit)


def normalize_description(text: Optional[str]) -> str:
    """Case-fold and collapse whitespace for description comparison."""
    if not text:
        return ""
    return " ".join(text.split()).casefold()


class DuplicateDetector:
    """Flags candidates that match transactions already stored."""

    def __init__(self, db: Database, window_days: int = 1):
        """Initialize duplicate detector.

        Args:
            db: Database instance
            window_days: Allowed date difference, in days, for a match
        """
        self.db = db
        self.window_days = window_days

    def find_duplicates(
        self, account_id: int, candidates: Sequence[TransactionCandidate]
    ) -> dict[int, int]:
        """Match candidates against existing transactions of an account.

        A candidate matches when the dates are within the window, the
        amounts are equal and the normalized descriptions are equal. The
        lowest matching transaction ID is reported.

        Returns:
            Mapping of row index to existing transaction ID
        """
        if not candidates:
            return {}

        window = timedelta(days=self.window_days)
        existing = self.db.list_transactions(
            account_id=account_id,
            start_date=min(c.transaction_date for c in candidates) - window,
            end_date=max(c.transaction_date for c in candidates) + window,
        )

        by_key: dict[tuple[Decimal, str], list] = {}
        for txn in sorted(existing, key=lambda t: t.id):
            key = (txn.amount, normalize_description(txn.description))
            by_key.setdefault(key, []).append(txn)

        matches = {}
        for candidate in candidates:
            key = (candidate.amount, normalize_description(candidate.description))
            for txn in by_key.get(key, []):
                if abs((txn.date - candidate.transaction_date).days) <= self.window_days:
                    matches[candidate.row_index] = txn.id
                    break
        return matches


def classify_rows(
    raw_rows: Sequence[RawRow],
    mapping: ColumnMapping,
    detector: DuplicateDetector,
    account_id: int,
) -> list[RowOutcome]:
    """Validate every row and mark likely duplicates.

    Returns:
        One outcome per row, in row order
    """
    parsed = [parse_row(row, mapping) for row in raw_rows]
    candidates = [outcome.candidate for outcome in parsed if isinstance(outcome, ValidRow)]
    duplicates = detector.find_duplicates(account_id, candidates)

    outcomes: list[RowOutcome] = []
    for outcome in parsed:
        if isinstance(outcome, ValidRow) and outcome.row_index in duplicates:
            outcomes.append(
                DuplicateRow(
                    candidate=outcome.candidate,
                    existing_transaction_id=duplicates[outcome.row_index],
                )
            )
        else:
            outcomes.append(outcome)
    return outcomes
