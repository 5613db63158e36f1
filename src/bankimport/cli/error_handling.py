"""CLI error handling helpers."""

import click

from bankimport.domain.errors import DomainError


def format_domain_error(error: DomainError | ValueError) -> str:
    """Render a domain error, prefixed with its kind when it has one."""
    kind = getattr(error, "kind", None)
    if kind is not None:
        return f"Error [{kind.value}]: {error}"
    return f"Error: {error}"


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(format_domain_error(error), err=True)
    ctx.exit(1)
