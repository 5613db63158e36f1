"""Shared domain error messages and error types."""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Machine-readable error kinds surfaced by the import workflow."""

    # Intake: the whole file is rejected before a session exists
    EMPTY_FILE = "EMPTY_FILE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    INVALID_FILE_NAME = "INVALID_FILE_NAME"
    INVALID_CONTENT_TYPE = "INVALID_CONTENT_TYPE"
    INVALID_CSV_FORMAT = "INVALID_CSV_FORMAT"
    MALICIOUS_CONTENT = "MALICIOUS_CONTENT"
    FILE_READ_ERROR = "FILE_READ_ERROR"

    # Session
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    SESSION_EXPIRED = "SESSION_EXPIRED"

    # Mapping
    INVALID_COLUMN_INDEX = "INVALID_COLUMN_INDEX"
    AMBIGUOUS_AMOUNT_COLUMNS = "AMBIGUOUS_AMOUNT_COLUMNS"
    MAPPING_NOT_SET = "MAPPING_NOT_SET"
    MAPPING_ALREADY_SET = "MAPPING_ALREADY_SET"

    # Collaborators
    ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"

    # Row level (reported as data, never raised)
    INVALID_DATE = "INVALID_DATE"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    AMBIGUOUS_AMOUNT = "AMBIGUOUS_AMOUNT"
    INVALID_DESCRIPTION = "INVALID_DESCRIPTION"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling. ``kind`` is set when the
    error maps onto one of the workflow's ``ErrorKind`` values.
    """

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str = "", kind: Optional[ErrorKind] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class IntakeError(ValidationError):
    """Uploaded file rejected before parsing."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message, kind=kind)


class MappingError(ValidationError):
    """Column mapping rejected; the session stays usable."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message, kind=kind)


class SessionNotFoundError(NotFoundError):
    """Import session id is unknown."""

    kind = ErrorKind.SESSION_NOT_FOUND


class SessionExpiredError(SessionNotFoundError):
    """Import session existed but has been idle past its lifetime."""

    kind = ErrorKind.SESSION_EXPIRED


class AccountNotFoundError(NotFoundError):
    kind = ErrorKind.ACCOUNT_NOT_FOUND


class TemplateNotFoundError(NotFoundError):
    kind = ErrorKind.TEMPLATE_NOT_FOUND


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def session_not_found(session_id: str) -> str:
    """Return message for an unknown import session."""
    return f"Import session '{session_id}' not found"


def session_expired(session_id: str) -> str:
    """Return message for an import session that timed out."""
    return f"Import session '{session_id}' has expired; upload the file again"


def template_not_found(bank_name: str) -> str:
    """Return message for a missing mapping template."""
    return f"No mapping template saved for bank '{bank_name}'"


def column_index_out_of_range(field: str, index: int, header_count: int) -> str:
    """Return message for a mapped column outside the header."""
    return (
        f"Column index {index} for '{field}' is out of range; "
        f"the file has {header_count} column{'s' if header_count != 1 else ''}"
    )
