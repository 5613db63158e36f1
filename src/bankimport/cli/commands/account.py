"""Account management commands."""

import click
from bankimport.domain.account import AccountService
from bankimport.domain.errors import DomainError
from bankimport.cli.error_handling import handle_domain_error


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name (defaults to account name if not provided)")
@click.pass_context
def create_account(ctx, name: str, bank: str | None):
    """Create a new account.

    If --bank is not provided, the bank name will be set to the account name.
    The bank name is also the default key for saved column mapping templates.

    Examples:
        bankimport account create "Checking"
        bankimport account create "My Checking" --bank "Chase"
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    bank_name = bank if bank is not None else name

    try:
        account_id = service.create_account(name=name, bank_name=bank_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created account '{name}' (ID: {account_id})")
    if bank is None:
        click.echo(f"Bank name set to '{bank_name}'")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | Bank: {acc.bank_name}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
