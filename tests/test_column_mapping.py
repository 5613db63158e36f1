"""Tests for column mapping."""

import pytest

from bankimport.domain.column_mapping import (
    ColumnMapper,
    ColumnMapping,
    DebitCredit,
    SignedAmount,
    validate_mapping,
)
from bankimport.domain.errors import (
    ErrorKind,
    MappingError,
    SessionNotFoundError,
)


class RecordingTemplates:
    """Template storage stand-in that records calls and can fail."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.saved = []

    def save_template(self, bank_name, mapping):
        self.saved.append((bank_name, mapping))
        if self.error is not None:
            raise self.error
        return 1


HEADERS = ("Date", "Description", "Debit", "Credit", "Category")
ROWS = (("2024-01-15", "Coffee", "4.50", "", "Food"),)


def test_from_indices_signed_amount():
    mapping = ColumnMapping.from_indices(date_column=0, description_column=1, amount_column=2)

    assert mapping.amount == SignedAmount(column=2)
    assert mapping.amount_column == 2
    assert mapping.debit_column is None
    assert mapping.referenced_columns() == {"date": 0, "description": 1, "amount": 2}


def test_from_indices_debit_credit():
    mapping = ColumnMapping.from_indices(
        date_column=0, description_column=1, debit_column=2, credit_column=3, category_column=4
    )

    assert mapping.amount == DebitCredit(debit_column=2, credit_column=3)
    assert mapping.amount_column is None
    assert mapping.referenced_columns() == {
        "date": 0,
        "description": 1,
        "debit": 2,
        "credit": 3,
        "category": 4,
    }


@pytest.mark.parametrize(
    "amount_columns",
    [
        {"amount_column": 2, "debit_column": 3, "credit_column": 4},
        {"amount_column": 2, "debit_column": 3},
        {"debit_column": 2},
        {"credit_column": 3},
        {},
    ],
)
def test_from_indices_requires_exactly_one_amount_source(amount_columns):
    with pytest.raises(MappingError) as excinfo:
        ColumnMapping.from_indices(date_column=0, description_column=1, **amount_columns)

    assert excinfo.value.kind == ErrorKind.AMBIGUOUS_AMOUNT_COLUMNS


@pytest.mark.parametrize("index", [-1, 5, 99])
def test_validate_mapping_out_of_range(index):
    mapping = ColumnMapping.from_indices(date_column=0, description_column=1, amount_column=index)

    with pytest.raises(MappingError) as excinfo:
        validate_mapping(mapping, header_count=len(HEADERS))

    assert excinfo.value.kind == ErrorKind.INVALID_COLUMN_INDEX
    assert "amount" in str(excinfo.value)


def test_mapper_binds_mapping(session_store):
    session = session_store.create(HEADERS, ROWS, 1, "s.csv")
    mapping = ColumnMapping.from_indices(
        date_column=0, description_column=1, debit_column=2, credit_column=3
    )

    ColumnMapper(session_store).apply_mapping(session.session_id, mapping)

    assert session_store.get(session.session_id).column_mapping == mapping


def test_mapper_rejects_invalid_mapping_and_keeps_session_unmapped(session_store):
    """A rejected mapping leaves the session usable for another attempt."""
    session = session_store.create(HEADERS, ROWS, 1, "s.csv")
    mapper = ColumnMapper(session_store)

    with pytest.raises(MappingError):
        mapper.apply_mapping(
            session.session_id,
            ColumnMapping.from_indices(date_column=9, description_column=1, amount_column=2),
        )

    assert session_store.get(session.session_id).column_mapping is None
    mapper.apply_mapping(
        session.session_id,
        ColumnMapping.from_indices(date_column=0, description_column=1, amount_column=2),
    )


def test_mapper_unknown_session(session_store):
    mapping = ColumnMapping.from_indices(date_column=0, description_column=1, amount_column=2)

    with pytest.raises(SessionNotFoundError):
        ColumnMapper(session_store).apply_mapping("missing", mapping)


def test_mapper_saves_template(session_store, template_service):
    session = session_store.create(HEADERS, ROWS, 1, "s.csv")
    mapping = ColumnMapping.from_indices(
        date_column=0,
        description_column=1,
        debit_column=2,
        credit_column=3,
        bank_name="Chase",
        persist_as_template=True,
    )

    ColumnMapper(session_store, template_service).apply_mapping(session.session_id, mapping)

    template = template_service.get_template("Chase")
    assert template is not None
    assert (template.debit_column, template.credit_column) == (2, 3)


def test_template_failure_does_not_fail_mapping(session_store):
    """Saving the template is best-effort."""
    session = session_store.create(HEADERS, ROWS, 1, "s.csv")
    templates = RecordingTemplates(error=RuntimeError("disk full"))
    mapping = ColumnMapping.from_indices(
        date_column=0,
        description_column=1,
        amount_column=2,
        bank_name="Chase",
        persist_as_template=True,
    )

    ColumnMapper(session_store, templates).apply_mapping(session.session_id, mapping)

    assert templates.saved == [("Chase", mapping)]
    assert session_store.get(session.session_id).column_mapping == mapping


def test_template_not_saved_without_flag(session_store):
    session = session_store.create(HEADERS, ROWS, 1, "s.csv")
    templates = RecordingTemplates()
    mapping = ColumnMapping.from_indices(
        date_column=0, description_column=1, amount_column=2, bank_name="Chase"
    )

    ColumnMapper(session_store, templates).apply_mapping(session.session_id, mapping)

    assert templates.saved == []
