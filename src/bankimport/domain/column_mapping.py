"""Column mapping: which CSV columns feed which transaction fields."""

from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

import structlog

from bankimport.domain.errors import (
    ErrorKind,
    MappingError,
    column_index_out_of_range,
)

if TYPE_CHECKING:
    from bankimport.domain.mapping_template import MappingTemplateService
    from bankimport.domain.session_store import ImportSessionStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SignedAmount:
    """A single column holding signed amounts (expenses negative)."""

    column: int


@dataclass(frozen=True)
class DebitCredit:
    """Separate debit (money out) and credit (money in) columns."""

    debit_column: int
    credit_column: int


AmountColumns = SignedAmount | DebitCredit


@dataclass(frozen=True)
class ColumnMapping:
    """User-declared mapping from CSV column positions to fields.

    Build it with ``from_indices`` when starting from flat, optional column
    indices; that is where the single-amount versus debit/credit choice is
    enforced.
    """

    date_column: int
    description_column: int
    amount: AmountColumns
    category_column: Optional[int] = None
    bank_name: Optional[str] = None
    persist_as_template: bool = False

    @classmethod
    def from_indices(
        cls,
        date_column: int,
        description_column: int,
        amount_column: Optional[int] = None,
        debit_column: Optional[int] = None,
        credit_column: Optional[int] = None,
        category_column: Optional[int] = None,
        bank_name: Optional[str] = None,
        persist_as_template: bool = False,
    ) -> "ColumnMapping":
        """Create a mapping from flat column indices.

        Raises:
            MappingError: AMBIGUOUS_AMOUNT_COLUMNS unless exactly one of
                ``amount_column`` or the full debit/credit pair is given
        """
        has_pair_part = debit_column is not None or credit_column is not None

        if amount_column is not None and has_pair_part:
            raise MappingError(
                ErrorKind.AMBIGUOUS_AMOUNT_COLUMNS,
                "Map either a single amount column or debit/credit columns, not both",
            )

        amount: AmountColumns
        if amount_column is not None:
            amount = SignedAmount(column=amount_column)
        elif debit_column is not None and credit_column is not None:
            amount = DebitCredit(debit_column=debit_column, credit_column=credit_column)
        elif has_pair_part:
            raise MappingError(
                ErrorKind.AMBIGUOUS_AMOUNT_COLUMNS,
                "Debit and credit columns must be mapped together",
            )
        else:
            raise MappingError(
                ErrorKind.AMBIGUOUS_AMOUNT_COLUMNS,
                "An amount column or a debit/credit column pair is required",
            )

        return cls(
            date_column=date_column,
            description_column=description_column,
            amount=amount,
            category_column=category_column,
            bank_name=bank_name,
            persist_as_template=persist_as_template,
        )

    @property
    def amount_column(self) -> Optional[int]:
        return self.amount.column if isinstance(self.amount, SignedAmount) else None

    @property
    def debit_column(self) -> Optional[int]:
        return self.amount.debit_column if isinstance(self.amount, DebitCredit) else None

    @property
    def credit_column(self) -> Optional[int]:
        return self.amount.credit_column if isinstance(self.amount, DebitCredit) else None

    def referenced_columns(self) -> dict[str, int]:
        """Return every mapped field with its column index."""
        columns = {"date": self.date_column, "description": self.description_column}
        if isinstance(self.amount, SignedAmount):
            columns["amount"] = self.amount.column
        else:
            columns["debit"] = self.amount.debit_column
            columns["credit"] = self.amount.credit_column
        if self.category_column is not None:
            columns["category"] = self.category_column
        return columns


def validate_mapping(mapping: ColumnMapping, header_count: int) -> None:
    """Check that every mapped column exists in the header.

    Raises:
        MappingError: INVALID_COLUMN_INDEX for the first out-of-range column
    """
    for field, index in mapping.referenced_columns().items():
        if not 0 <= index < header_count:
            raise MappingError(
                ErrorKind.INVALID_COLUMN_INDEX,
                column_index_out_of_range(field, index, header_count),
            )


class ColumnMapper:
    """Binds validated mappings to import sessions."""

    def __init__(
        self,
        store: "ImportSessionStore",
        templates: Optional["MappingTemplateService"] = None,
    ):
        """Initialize column mapper.

        Args:
            store: Session store holding the uploaded rows
            templates: Optional template service for ``persist_as_template``
        """
        self.store = store
        self.templates = templates

    def apply_mapping(self, session_id: str, mapping: ColumnMapping) -> None:
        """Validate a mapping and bind it to a session.

        Args:
            session_id: Import session ID
            mapping: Column mapping chosen by the user

        Raises:
            SessionNotFoundError: If the session is unknown or expired
            MappingError: If the mapping is invalid or already set
        """
        session = self.store.get(session_id)
        validate_mapping(mapping, len(session.raw_headers))
        self.store.bind_mapping(session_id, mapping)
        logger.info("mapping_bound", session_id=session_id, columns=mapping.referenced_columns())

        if mapping.persist_as_template:
            self._save_template(mapping)

    def _save_template(self, mapping: ColumnMapping) -> None:
        if not mapping.bank_name or not mapping.bank_name.strip():
            logger.warning("template_not_saved", reason="missing bank name")
            return
        if self.templates is None:
            logger.warning("template_not_saved", reason="no template storage")
            return

        # Templates are a convenience; the session is already mapped
        try:
            self.templates.save_template(mapping.bank_name, mapping)
        except Exception:
            logger.warning(
                "template_save_failed", bank_name=mapping.bank_name, exc_info=True
            )
