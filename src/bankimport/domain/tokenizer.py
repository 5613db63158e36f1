"""Split raw CSV bytes into a header and data rows."""

import codecs
import csv
from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TokenizedCsv:
    """Result of tokenizing an upload.

    ``rows`` holds every data row; ``preview_rows`` is capped for display and
    ``total_rows`` always reflects the full count.
    """

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    preview_rows: tuple[tuple[str, ...], ...]
    total_rows: int
    delimiter: str


def decode_bytes(file_bytes: bytes) -> str:
    """Decode upload bytes, dropping a UTF-8 byte-order mark."""
    if file_bytes.startswith(codecs.BOM_UTF8):
        file_bytes = file_bytes[len(codecs.BOM_UTF8):]

    try:
        return file_bytes.decode("utf-8")
    except UnicodeDecodeError:
        # Legacy bank exports are frequently Latin-1
        return file_bytes.decode("latin-1")


def detect_delimiter(header_line: str) -> str:
    """Pick the delimiter from the header line.

    Comma wins whenever the header contains one; semicolon and tab are
    fallbacks.
    """
    if "," in header_line:
        return ","
    if ";" in header_line:
        return ";"
    if "\t" in header_line:
        return "\t"
    return ","


def split_line(line: str, delimiter: str) -> tuple[str, ...]:
    """Split one physical line into trimmed cells.

    Quotes follow the ``csv`` module rules within the line. A line the
    ``csv`` module cannot parse, such as one with an oversized quoted field,
    is split on the bare delimiter instead.
    """
    try:
        record = next(csv.reader([line], delimiter=delimiter), [])
    except csv.Error:
        logger.debug("csv_line_fallback_split", length=len(line))
        record = line.split(delimiter)
    return tuple(cell.strip() for cell in record)


def tokenize(file_bytes: bytes, preview_limit: int = 10) -> TokenizedCsv:
    """Tokenize CSV content into headers and rows.

    The text is split into physical lines first, so a quote left open on
    one line never absorbs the lines after it. The first non-blank line is
    the header. Fully blank lines are dropped. Rows whose column count
    differs from the header are kept as they are; the row validator decides
    what to do with them.

    Args:
        file_bytes: Raw file content
        preview_limit: Maximum number of rows in ``preview_rows``

    Returns:
        TokenizedCsv
    """
    text = decode_bytes(file_bytes)
    lines = text.splitlines()

    header_line = next((line for line in lines if line.strip()), "")
    delimiter = detect_delimiter(header_line)

    parsed: list[tuple[str, ...]] = []
    for line in lines:
        cells = split_line(line, delimiter)
        if not any(cells):
            continue
        parsed.append(cells)

    if not parsed:
        return TokenizedCsv(
            headers=(), rows=(), preview_rows=(), total_rows=0, delimiter=delimiter
        )

    headers, rows = parsed[0], tuple(parsed[1:])
    logger.debug(
        "csv_tokenized",
        delimiter=delimiter,
        columns=len(headers),
        rows=len(rows),
    )

    return TokenizedCsv(
        headers=headers,
        rows=rows,
        preview_rows=rows[:preview_limit],
        total_rows=len(rows),
        delimiter=delimiter,
    )
