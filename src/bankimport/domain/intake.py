"""Upload intake checks for CSV statements.

Every upload goes through ``validate_upload`` before any parsing happens. The
checks run in a fixed order and stop at the first failure, each failure
carrying its own ``ErrorKind`` so callers can tell a bad file name from a
suspicious payload.
"""

from pathlib import Path
from typing import Optional

from bankimport.config import DEFAULT_MAX_FILE_SIZE
from bankimport.domain.errors import ErrorKind, IntakeError

ALLOWED_CONTENT_TYPES = frozenset({"text/csv", "application/csv", "text/plain"})

# Inspected prefix of the file for shape and formula checks
SNIFF_BYTES = 1024

FORMULA_MARKERS = ("=cmd", "=exec", "@sum", "=sum(")

FORMULA_PREFIXES = ("=", "@", "+", "-")


def validate_upload(
    file_bytes: bytes,
    file_name: Optional[str],
    content_type: Optional[str] = None,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> None:
    """Validate an uploaded CSV file.

    Args:
        file_bytes: Raw file content
        file_name: Name declared by the client
        content_type: Declared MIME type, or None if the client sent none
        max_file_size: Largest accepted size in bytes

    Raises:
        IntakeError: On the first failed check
    """
    if not file_bytes:
        raise IntakeError(ErrorKind.EMPTY_FILE, "File cannot be empty")

    if len(file_bytes) > max_file_size:
        limit_mb = max_file_size / (1024 * 1024)
        raise IntakeError(
            ErrorKind.FILE_TOO_LARGE, f"File size cannot exceed {limit_mb:g}MB"
        )

    _check_file_name(file_name)
    _check_content_type(content_type)

    head = file_bytes[:SNIFF_BYTES].decode("utf-8", errors="replace")
    if "," not in head and ";" not in head:
        raise IntakeError(
            ErrorKind.INVALID_CSV_FORMAT, "File does not appear to be a valid CSV"
        )

    folded = head.casefold()
    if any(marker in folded for marker in FORMULA_MARKERS):
        raise IntakeError(
            ErrorKind.MALICIOUS_CONTENT, "File contains potentially malicious formulas"
        )


def _check_file_name(file_name: Optional[str]) -> None:
    if not file_name or not file_name.lower().endswith(".csv"):
        raise IntakeError(ErrorKind.INVALID_FILE_TYPE, "Only CSV files are allowed")

    if ".." in file_name or "/" in file_name or "\\" in file_name:
        raise IntakeError(ErrorKind.INVALID_FILE_NAME, "Invalid file name")


def _check_content_type(content_type: Optional[str]) -> None:
    # Some clients send no content type for CSV at all
    if content_type is None or not content_type.strip():
        return

    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type not in ALLOWED_CONTENT_TYPES:
        raise IntakeError(
            ErrorKind.INVALID_CONTENT_TYPE, f"Invalid file content type '{content_type}'"
        )


def read_upload(path: str | Path) -> bytes:
    """Read an upload from disk.

    Raises:
        IntakeError: FILE_READ_ERROR if the file cannot be read
    """
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise IntakeError(ErrorKind.FILE_READ_ERROR, f"Could not read file content: {e}")


def sanitize_cell(raw: Optional[str]) -> Optional[str]:
    """Neutralize a cell value for display or storage.

    Trims whitespace and prefixes a single quote when the value starts with
    a character a spreadsheet would treat as a formula.
    """
    if raw is None:
        return None

    sanitized = raw.strip()
    if sanitized.startswith(FORMULA_PREFIXES):
        sanitized = "'" + sanitized
    return sanitized
