"""CSV import domain service.

Imports run as a session-scoped wizard:

1. ``upload`` validates and tokenizes the file and opens a session
2. ``map_columns`` (or ``apply_template``) binds a column mapping
3. ``preview`` validates every row and flags likely duplicates
4. ``commit`` applies the user's approvals, rejections and corrections,
   persists the approved rows and closes the session

Row problems never abort a run; they are returned as data so every row is
accounted for.
"""

from pathlib import Path
from typing import Optional, Sequence

import structlog

from bankimport.config import ImportSettings
from bankimport.database.base import Database
from bankimport.domain.account import AccountService
from bankimport.domain.category import CategoryService
from bankimport.domain.column_mapping import ColumnMapper, ColumnMapping
from bankimport.domain.errors import (
    AccountNotFoundError,
    ErrorKind,
    IntakeError,
    MappingError,
    account_not_found,
)
from bankimport.domain.import_models import (
    DuplicateRow,
    DuplicateWarning,
    ImportDecision,
    ImportResult,
    InvalidRow,
    PreviewError,
    PreviewResult,
    RowOutcome,
    TransactionCandidate,
    TransactionPreview,
    UploadResult,
)
from bankimport.domain.intake import read_upload, sanitize_cell, validate_upload
from bankimport.domain.mapping_template import MappingTemplateService
from bankimport.domain.row_validation import DuplicateDetector, classify_rows, parse_row
from bankimport.domain.session_store import ImportSession, ImportSessionStore
from bankimport.domain.tokenizer import tokenize
from bankimport.domain.transaction import TransactionService

logger = structlog.get_logger(__name__)


class CSVImportService:
    """Service for importing CSV bank statements."""

    def __init__(
        self,
        db: Database,
        store: Optional[ImportSessionStore] = None,
        settings: Optional[ImportSettings] = None,
    ):
        """Initialize CSV import service.

        Args:
            db: Database instance
            store: Session store shared by every request of this process;
                a private one is created when omitted
            settings: Import limits and policies
        """
        self.db = db
        self.settings = settings if settings is not None else ImportSettings()
        self.store = store if store is not None else ImportSessionStore(ttl=self.settings.session_ttl)
        self.transaction_service = TransactionService(db)
        self.account_service = AccountService(db)
        self.category_service = CategoryService(db)
        self.template_service = MappingTemplateService(db)
        self.mapper = ColumnMapper(self.store, self.template_service)
        self.duplicate_detector = DuplicateDetector(db, self.settings.duplicate_window_days)

    def upload(
        self,
        file_bytes: bytes,
        file_name: str,
        account_id: int,
        content_type: Optional[str] = None,
    ) -> UploadResult:
        """Validate an uploaded file and open an import session.

        Args:
            file_bytes: Raw file content
            file_name: Name declared by the client
            account_id: Account the transactions will be imported into
            content_type: Declared MIME type, if any

        Returns:
            UploadResult with the session ID, headers and capped preview rows

        Raises:
            IntakeError: If the file is rejected; no session is created
        """
        validate_upload(
            file_bytes, file_name, content_type, max_file_size=self.settings.max_file_size
        )

        tokenized = tokenize(file_bytes, preview_limit=self.settings.preview_row_limit)
        if not tokenized.headers:
            raise IntakeError(ErrorKind.INVALID_CSV_FORMAT, "File has no header row")

        session = self.store.create(
            headers=tokenized.headers,
            rows=tokenized.rows,
            account_id=account_id,
            file_name=file_name,
        )
        logger.info(
            "csv_uploaded",
            session_id=session.session_id,
            file_name=file_name,
            total_rows=tokenized.total_rows,
        )

        return UploadResult(
            session_id=session.session_id,
            headers=[sanitize_cell(h) for h in tokenized.headers],
            preview_rows=[[sanitize_cell(c) for c in row] for row in tokenized.preview_rows],
            total_rows=tokenized.total_rows,
        )

    def upload_file(
        self, csv_file_path: str | Path, account_id: int, content_type: Optional[str] = None
    ) -> UploadResult:
        """Read a CSV file from disk and upload it.

        Raises:
            IntakeError: FILE_READ_ERROR if the file cannot be read, or any
                other intake failure
        """
        file_bytes = read_upload(csv_file_path)
        return self.upload(file_bytes, Path(csv_file_path).name, account_id, content_type)

    def map_columns(self, session_id: str, mapping: ColumnMapping) -> None:
        """Bind a column mapping to a session.

        Raises:
            SessionNotFoundError: If the session is unknown or expired
            MappingError: If the mapping is invalid or the session is already mapped
        """
        self.mapper.apply_mapping(session_id, mapping)

    def apply_template(self, session_id: str, bank_name: str) -> ColumnMapping:
        """Map a session with the saved template of a bank.

        Returns:
            The mapping that was applied

        Raises:
            SessionNotFoundError: If the session is unknown or expired
            TemplateNotFoundError: If the bank has no template
            MappingError: If the template does not fit this file
        """
        self.store.get(session_id)
        mapping = self.template_service.get_mapping(bank_name)
        self.mapper.apply_mapping(session_id, mapping)
        return mapping

    def preview(self, session_id: str) -> PreviewResult:
        """Validate every row of a mapped session.

        Running it again on an unchanged session gives the same result.

        Raises:
            SessionNotFoundError: If the session is unknown or expired
            MappingError: MAPPING_NOT_SET if no mapping is bound yet
            AccountNotFoundError: If the session's account no longer exists
        """
        session = self._mapped_session(session_id)
        self._require_account(session.account_id)

        outcomes = classify_rows(
            session.raw_rows,
            session.column_mapping,
            self.duplicate_detector,
            session.account_id,
        )
        result = build_preview(session_id, outcomes)
        self.store.store_preview(session_id, result)

        logger.info(
            "csv_previewed",
            session_id=session_id,
            valid=result.valid_count,
            errors=result.error_count,
            duplicates=result.duplicate_count,
        )
        return result

    def commit(self, session_id: str, decision: ImportDecision) -> ImportResult:
        """Persist the approved rows of a session and close it.

        Each row ends up in exactly one bucket: skipped (rejected or not
        approved), imported, or failed (invalid after corrections, or the
        write failed). A failed row does not undo rows already imported.

        Args:
            session_id: Import session ID
            decision: Approved/rejected row indices and manual corrections

        Returns:
            ImportResult accounting for every row

        Raises:
            SessionNotFoundError: If the session is unknown or expired
            MappingError: MAPPING_NOT_SET if no mapping is bound yet
            AccountNotFoundError: If the session's account no longer exists
        """
        checked = self._mapped_session(session_id)
        self._require_account(checked.account_id)

        # Taken out of the store so the same id cannot be committed twice
        session = self.store.take(session_id)
        approved, rejected = self._resolve_decision(decision)
        mapping = session.column_mapping

        successful = 0
        skipped = 0
        failed = 0
        errors: list[str] = []
        imported_ids: list[int] = []

        for raw_row in session.raw_rows:
            row_index = raw_row.row_index
            if row_index in rejected or row_index not in approved:
                skipped += 1
                continue

            outcome = parse_row(raw_row, mapping, decision.corrections.get(row_index))
            if isinstance(outcome, InvalidRow):
                failed += 1
                reasons = "; ".join(error.message for error in outcome.errors)
                errors.append(f"Row {row_index}: {reasons}")
                continue

            try:
                transaction_id = self._persist(session.account_id, outcome.candidate)
            except Exception as e:
                failed += 1
                errors.append(f"Row {row_index}: {e}")
                logger.warning(
                    "row_import_failed", session_id=session_id, row_index=row_index, error=str(e)
                )
                continue

            imported_ids.append(transaction_id)
            successful += 1

        logger.info(
            "csv_committed",
            session_id=session_id,
            imported=successful,
            skipped=skipped,
            failed=failed,
        )

        return ImportResult(
            session_id=session_id,
            total_processed=session.total_rows,
            successful_imports=successful,
            skipped_rows=skipped,
            failed_imports=failed,
            errors=errors,
            imported_transaction_ids=imported_ids,
        )

    def cancel(self, session_id: str) -> bool:
        """Discard a session without importing. Returns True if it existed."""
        return self.store.remove(session_id)

    def _mapped_session(self, session_id: str) -> ImportSession:
        session = self.store.get(session_id)
        if session.column_mapping is None:
            raise MappingError(
                ErrorKind.MAPPING_NOT_SET, "Map the CSV columns before previewing or importing"
            )
        return session

    def _require_account(self, account_id: int) -> None:
        if self.account_service.get_account(account_id) is None:
            raise AccountNotFoundError(account_not_found(account_id))

    def _resolve_decision(self, decision: ImportDecision) -> tuple[set[int], set[int]]:
        """Settle rows that are both approved and rejected."""
        approved = set(decision.approved_rows)
        rejected = set(decision.rejected_rows)
        overlap = approved & rejected
        if overlap:
            if self.settings.rejection_takes_precedence:
                approved -= overlap
            else:
                rejected -= overlap
        return approved, rejected

    def _persist(self, account_id: int, candidate: TransactionCandidate) -> int:
        category_id = candidate.category_id
        if category_id is None and candidate.category_name:
            category = self.category_service.find_by_name(candidate.category_name)
            if category is not None:
                category_id = category.id

        return self.transaction_service.create_transaction(
            account_id=account_id,
            date=candidate.transaction_date,
            amount=candidate.amount,
            description=candidate.description,
            category_id=category_id,
        )


def build_preview(session_id: str, outcomes: Sequence[RowOutcome]) -> PreviewResult:
    """Project row outcomes into the preview response."""
    valid: list[TransactionPreview] = []
    validation_errors: list[PreviewError] = []
    duplicates: list[DuplicateWarning] = []
    error_rows = 0

    for outcome in outcomes:
        if isinstance(outcome, InvalidRow):
            error_rows += 1
            for error in outcome.errors:
                validation_errors.append(
                    PreviewError(
                        row_index=outcome.row_index,
                        kind=error.kind,
                        field=error.field,
                        error=error.message,
                        raw_data=error.raw_value,
                    )
                )
            continue

        candidate = outcome.candidate
        valid.append(
            TransactionPreview(
                row_index=candidate.row_index,
                transaction_date=candidate.transaction_date,
                amount=candidate.amount,
                description=candidate.description,
                category=candidate.category_name,
                transaction_type=candidate.transaction_type,
            )
        )
        if isinstance(outcome, DuplicateRow):
            duplicates.append(
                DuplicateWarning(
                    row_index=candidate.row_index,
                    transaction_date=candidate.transaction_date,
                    amount=candidate.amount,
                    description=candidate.description,
                    existing_transaction_id=outcome.existing_transaction_id,
                )
            )

    return PreviewResult(
        session_id=session_id,
        valid_transactions=valid,
        validation_errors=validation_errors,
        duplicate_warnings=duplicates,
        total_processed=len(outcomes),
        valid_count=len(valid),
        error_count=error_rows,
        duplicate_count=len(duplicates),
    )
