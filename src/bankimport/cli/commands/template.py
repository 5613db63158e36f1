"""Column mapping template commands."""

import click
from bankimport.domain.mapping_template import MappingTemplateService
from bankimport.domain.errors import DomainError
from bankimport.cli.error_handling import handle_domain_error


def _column(value: int | None) -> str:
    return "-" if value is None else str(value)


@click.group()
def template_group():
    """Manage saved column mapping templates."""
    pass


@template_group.command("list")
@click.pass_context
def list_templates(ctx):
    """List saved templates, one per bank."""
    db = ctx.obj["db"]
    service = MappingTemplateService(db)

    templates = service.list_templates()
    if not templates:
        click.echo("No mapping templates found.")
        return

    click.echo("\nMapping templates:")
    click.echo("-" * 60)
    for tpl in templates:
        updated = tpl.updated_at or tpl.created_at
        click.echo(f"{tpl.bank_name:30s} | Updated: {updated:%Y-%m-%d %H:%M}")


@template_group.command("show")
@click.argument("bank_name")
@click.pass_context
def show_template(ctx, bank_name: str):
    """Show the column indices saved for a bank."""
    db = ctx.obj["db"]
    service = MappingTemplateService(db)

    template = service.get_template(bank_name)
    if template is None:
        click.echo(f"Error: No mapping template found for bank '{bank_name}'", err=True)
        ctx.exit(1)

    click.echo(f"\nTemplate: {template.bank_name}")
    click.echo(f"  Date column: {template.date_column}")
    click.echo(f"  Description column: {template.description_column}")
    if template.amount_column is not None:
        click.echo(f"  Amount column: {template.amount_column}")
    else:
        click.echo(f"  Debit column: {_column(template.debit_column)}")
        click.echo(f"  Credit column: {_column(template.credit_column)}")
    click.echo(f"  Category column: {_column(template.category_column)}")


@template_group.command("delete")
@click.argument("bank_name")
@click.option("--yes", is_flag=True, help="Delete without asking for confirmation")
@click.pass_context
def delete_template(ctx, bank_name: str, yes: bool):
    """Delete the template saved for a bank."""
    db = ctx.obj["db"]
    service = MappingTemplateService(db)

    if not yes and not click.confirm(f"Delete the mapping template for '{bank_name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_template(bank_name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted mapping template for '{bank_name}'")


def register_commands(cli):
    """Register template commands with main CLI."""
    cli.add_command(template_group, name="template")
