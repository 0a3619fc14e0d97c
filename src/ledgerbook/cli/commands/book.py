"""Book management commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.domain.book import BookService, DEFAULT_CURRENCY
from ledgerbook.domain.errors import DomainError


@click.group()
def book_group():
    """Manage books."""
    pass


@book_group.command("create")
@click.argument("name", metavar="BOOK_NAME")
@click.option("--currency", default=DEFAULT_CURRENCY, show_default=True, help="ISO 4217 currency code")
@click.option("--empty", is_flag=True, help="Do not seed the default Cash account and categories")
@click.pass_context
def create_book(ctx, name: str, currency: str, empty: bool):
    """Create a new book.

    A new book starts with a Cash account and default income and expense
    categories unless --empty is given.

    Examples:
        ledgerbook book create "Household"
        ledgerbook book create "Warung" --currency IDR
    """
    service = BookService(ctx.obj["db"])

    try:
        book_id = service.create_book(name=name, currency=currency, seed_defaults=not empty)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created book '{name}' (ID: {book_id})")


@book_group.command("list")
@click.pass_context
def list_books(ctx):
    """List all books."""
    service = BookService(ctx.obj["db"])

    books = service.list_books()
    if not books:
        click.echo("No books found.")
        return

    click.echo("\nBooks:")
    click.echo("-" * 40)
    for b in books:
        click.echo(f"ID: {b.id:3d} | {b.name:25s} | {b.currency}")


def register_commands(cli):
    """Register book commands with main CLI."""
    cli.add_command(book_group, name="book")
