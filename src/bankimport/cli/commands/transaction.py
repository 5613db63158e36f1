"""Transaction listing command."""

import click
from bankimport.domain.transaction import TransactionService
from bankimport.domain.category import CategoryService
from bankimport.domain.account import AccountService
from bankimport.cli.account_resolution import resolve_account_or_exit
from bankimport.utils.date_parser import parse_date


@click.command("transactions")
@click.option("--account", help="Account name or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.pass_context
def list_transactions(ctx, account: str | None, start_date: str | None, end_date: str | None):
    """List imported transactions, oldest first."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)
    account_service = AccountService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    start = None
    if start_date:
        try:
            start = parse_date(start_date)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    end = None
    if end_date:
        try:
            end = parse_date(end_date)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    transactions = service.list_transactions(account_id=account_id, start_date=start, end_date=end)
    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}
    categories = {cat.id: cat.name for cat in category_service.list_categories()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':>12} {'Type':<8} {'Account':<18} {'Category':<16} Description"
    )
    click.echo("-" * 100)

    for txn in transactions:
        account_name = accounts.get(txn.account_id, "Unknown")
        category_name = categories.get(txn.category_id, "") if txn.category_id else ""
        description = (txn.description or "")[:30]

        click.echo(
            f"{txn.id:<6} {str(txn.date):<12} {txn.amount:>12,.2f} {txn.transaction_type:<8} "
            f"{account_name:<18} {category_name:<16} {description}"
        )


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(list_transactions)
