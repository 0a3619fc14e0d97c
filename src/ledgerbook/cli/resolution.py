"""CLI helpers for resolving the active book, accounts and categories."""

from __future__ import annotations

import click
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.book import BookService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import Book
from ledgerbook.domain.errors import NotFoundError
from ledgerbook.utils.resolvers import resolve_account, resolve_book, resolve_category


def require_book_or_exit(ctx: click.Context) -> Book:
    """Return the book selected with --book, or exit with a CLI error.

    Without --book the only existing book is used.
    """
    service = BookService(ctx.obj["db"])
    selected = ctx.obj.get("book")
    if selected is None:
        books = service.list_books()
        if len(books) == 1:
            return books[0]
        if not books:
            click.echo("Error: No books found. Create one with 'book create'.", err=True)
        else:
            click.echo("Error: Several books exist; choose one with --book.", err=True)
        ctx.exit(1)

    try:
        return resolve_book(service, selected)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, book_id: int, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(account_service, book_id, account)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, book_id: int, category: str | int
) -> int:
    """Resolve category path or ID, or exit with a CLI error."""
    try:
        return resolve_category(category_service, book_id, category)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
