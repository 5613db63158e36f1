"""CSV import command."""

import click
from bankimport.domain.account import AccountService
from bankimport.domain.category import CategoryService
from bankimport.domain.column_mapping import ColumnMapping
from bankimport.domain.csv_import import CSVImportService
from bankimport.domain.errors import DomainError
from bankimport.domain.import_models import (
    ImportDecision,
    ImportResult,
    PreviewResult,
    RowCorrection,
)
from bankimport.cli.account_resolution import resolve_account_or_exit
from bankimport.cli.error_handling import handle_domain_error

ALL_VALID = "all-valid"
CORRECTION_FIELDS = ("date", "amount", "description", "category")


def parse_row_list(ctx, param, value: str | None) -> frozenset[int] | None:
    """Parse a row list such as ``0,2,5-7`` into row indices."""
    if value is None or value == ALL_VALID:
        return None

    rows: set[int] = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                first, last = part.split("-", 1)
                start, end = int(first), int(last)
                if start > end:
                    raise ValueError(part)
                rows.update(range(start, end + 1))
            else:
                rows.add(int(part))
        except ValueError:
            raise click.BadParameter(f"'{part}' is not a row index or range (e.g. 3 or 2-5)")
    return frozenset(rows)


def parse_corrections(ctx, param, values: tuple[str, ...]) -> dict[int, dict[str, str]]:
    """Parse ``ROW:field=value`` options, merging several for the same row."""
    corrections: dict[int, dict[str, str]] = {}
    for raw in values:
        row_part, sep, assignment = raw.partition(":")
        field, eq, field_value = assignment.partition("=")
        field = field.strip().lower()
        if not sep or not eq:
            raise click.BadParameter(f"'{raw}' must look like ROW:field=value")
        try:
            row_index = int(row_part)
        except ValueError:
            raise click.BadParameter(f"'{row_part}' is not a row index")
        if field not in CORRECTION_FIELDS:
            raise click.BadParameter(
                f"Unknown field '{field}' (expected one of: {', '.join(CORRECTION_FIELDS)})"
            )
        corrections.setdefault(row_index, {})[field] = field_value
    return corrections


def resolve_column(value: str | None, headers: list[str], option: str) -> int | None:
    """Resolve a column given as a 0-based index or a header name.

    Raises:
        click.UsageError: If the value is neither an index nor a header name
    """
    if value is None:
        return None
    value = value.strip()
    if value.isdigit():
        return int(value)

    wanted = value.casefold()
    for index, header in enumerate(headers):
        if header is not None and header.strip().casefold() == wanted:
            return index
    raise click.UsageError(f"{option}: no column named '{value}' in this file")


def _build_corrections(
    raw: dict[int, dict[str, str]], category_service: CategoryService
) -> dict[int, RowCorrection]:
    corrections = {}
    for row_index, fields in raw.items():
        category_id = None
        category = fields.get("category")
        if category is not None:
            if category.strip().isdigit():
                category_id = int(category)
            else:
                found = category_service.find_by_name(category)
                if found is None:
                    raise click.UsageError(f"Row {row_index}: category '{category}' not found")
                category_id = found.id
        corrections[row_index] = RowCorrection(
            corrected_date=fields.get("date"),
            corrected_amount=fields.get("amount"),
            corrected_description=fields.get("description"),
            category_id=category_id,
        )
    return corrections


def print_preview(preview: PreviewResult) -> None:
    """Print validated rows, duplicate warnings and row errors."""
    duplicates = {w.row_index: w.existing_transaction_id for w in preview.duplicate_warnings}

    click.echo(
        f"\nPreview: {preview.valid_count} valid, {preview.error_count} with errors, "
        f"{preview.duplicate_count} possible duplicates ({preview.total_processed} rows)"
    )

    if preview.valid_transactions:
        click.echo("-" * 100)
        click.echo(f"{'Row':<5} {'Date':<12} {'Amount':>12} {'Type':<8} {'Category':<16} Description")
        click.echo("-" * 100)
        for txn in preview.valid_transactions:
            line = (
                f"{txn.row_index:<5} {str(txn.transaction_date):<12} {txn.amount:>12,.2f} "
                f"{txn.transaction_type:<8} {(txn.category or ''):<16} {txn.description[:30]}"
            )
            if txn.row_index in duplicates:
                line += f"  [possible duplicate of #{duplicates[txn.row_index]}]"
            click.echo(line)

    if preview.validation_errors:
        click.echo("\nRows with errors:")
        for error in preview.validation_errors:
            click.echo(f"  Row {error.row_index}: {error.field}: {error.error} (value: '{error.raw_data}')")


def print_result(result: ImportResult) -> None:
    """Print the final accounting of a commit."""
    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.successful_imports} transactions")
    click.echo(f"  Skipped: {result.skipped_rows} rows")
    click.echo(f"  Failed: {result.failed_imports} rows")
    for error in result.errors:
        click.echo(f"    {error}", err=True)


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID to import into")
@click.option("--date-col", help="Date column (0-based index or header name)")
@click.option("--description-col", help="Description column (0-based index or header name)")
@click.option("--amount-col", help="Signed amount column (expenses negative)")
@click.option("--debit-col", help="Debit (money out) column; use with --credit-col")
@click.option("--credit-col", help="Credit (money in) column; use with --debit-col")
@click.option("--category-col", help="Optional category column")
@click.option("--template", "template_bank", help="Map columns with the template saved for BANK")
@click.option("--save-template", "save_template_bank", help="Save this mapping as the template for BANK")
@click.option(
    "--approve",
    default=ALL_VALID,
    show_default=True,
    callback=parse_row_list,
    help="Rows to import, e.g. '0,2,5-7'; by default every valid and every corrected row",
)
@click.option("--reject", callback=parse_row_list, help="Rows to skip, e.g. '1,4'")
@click.option(
    "--correct",
    "corrections",
    multiple=True,
    callback=parse_corrections,
    help="Correct a row before import: ROW:field=value with field one of date, amount, description, category",
)
@click.option("--dry-run", is_flag=True, help="Show the preview, then discard the import")
@click.option("--yes", is_flag=True, help="Import without asking for confirmation")
@click.pass_context
def import_csv(
    ctx,
    csv_file: str,
    account: str,
    date_col: str | None,
    description_col: str | None,
    amount_col: str | None,
    debit_col: str | None,
    credit_col: str | None,
    category_col: str | None,
    template_bank: str | None,
    save_template_bank: str | None,
    approve: frozenset[int] | None,
    reject: frozenset[int] | None,
    corrections: dict[int, dict[str, str]],
    dry_run: bool,
    yes: bool,
):
    """Import transactions from a CSV bank statement.

    Columns are given as 0-based indices or header names. Rows are numbered
    from 0, starting with the first line after the header.

    Examples:
        bankimport import statement.csv --account Checking --date-col 0 --description-col 1 --amount-col 2
        bankimport import statement.csv --account Checking --template "Chase" --reject 3 --yes
    """
    db = ctx.obj["db"]
    service = CSVImportService(db, settings=ctx.obj.get("settings"))
    account_service = AccountService(db)
    category_service = CategoryService(db)

    mapping_options = (date_col, description_col, amount_col, debit_col, credit_col, category_col)
    if template_bank is not None and (any(o is not None for o in mapping_options) or save_template_bank):
        raise click.UsageError("--template cannot be combined with column options or --save-template")
    if template_bank is None and (date_col is None or description_col is None):
        raise click.UsageError("Give --date-col and --description-col, or use --template")

    account_id = resolve_account_or_exit(ctx, account_service, account)
    row_corrections = _build_corrections(corrections, category_service)

    session_id = None
    try:
        upload = service.upload_file(csv_file, account_id=account_id)
        session_id = upload.session_id
        click.echo(f"Read {upload.total_rows} rows with columns: {', '.join(upload.headers)}")

        if template_bank is not None:
            service.apply_template(session_id, template_bank)
            click.echo(f"Applied mapping template for '{template_bank}'")
        else:
            headers = upload.headers
            mapping = ColumnMapping.from_indices(
                date_column=resolve_column(date_col, headers, "--date-col"),
                description_column=resolve_column(description_col, headers, "--description-col"),
                amount_column=resolve_column(amount_col, headers, "--amount-col"),
                debit_column=resolve_column(debit_col, headers, "--debit-col"),
                credit_column=resolve_column(credit_col, headers, "--credit-col"),
                category_column=resolve_column(category_col, headers, "--category-col"),
                bank_name=save_template_bank,
                persist_as_template=save_template_bank is not None,
            )
            service.map_columns(session_id, mapping)

        preview = service.preview(session_id)
        print_preview(preview)

        if dry_run:
            service.cancel(session_id)
            click.echo("\nDry run: nothing was imported.")
            return

        if approve is None:
            approved = frozenset(t.row_index for t in preview.valid_transactions) | frozenset(
                row_corrections
            )
        else:
            approved = approve
        rejected = reject or frozenset()

        if service.settings.rejection_takes_precedence:
            to_import = len(approved - rejected)
        else:
            to_import = len(approved)
        if not yes and not click.confirm(f"\nImport {to_import} row(s)?", default=True):
            service.cancel(session_id)
            click.echo("Import cancelled.")
            return

        result = service.commit(
            session_id,
            ImportDecision(approved_rows=approved, rejected_rows=rejected, corrections=row_corrections),
        )
    except DomainError as e:
        if session_id is not None:
            service.cancel(session_id)
        handle_domain_error(ctx, e)
        return

    print_result(result)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
