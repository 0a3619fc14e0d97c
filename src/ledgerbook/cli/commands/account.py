"""Account management commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.resolution import require_book_or_exit, resolve_account_or_exit
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.entities import AccountKind
from ledgerbook.domain.errors import DomainError
from ledgerbook.utils.amount_parser import currency_exponent, format_amount


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--kind",
    type=click.Choice([k.value for k in AccountKind], case_sensitive=False),
    default=AccountKind.ASSET.value,
    show_default=True,
    help="Account kind",
)
@click.option("--bank", help="Bank name")
@click.option("--number", help="Account number")
@click.pass_context
def create_account(ctx, name: str, kind: str, bank: str | None, number: str | None):
    """Create a new account in the selected book.

    Examples:
        ledgerbook account create "Checking" --bank "Chase"
        ledgerbook account create "Credit Card" --kind liability
    """
    book = require_book_or_exit(ctx)
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(
            book_id=book.id, name=name, kind=AccountKind(kind.upper()), bank_name=bank, account_number=number
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.option("--all", "include_archived", is_flag=True, help="Include archived accounts")
@click.pass_context
def list_accounts(ctx, include_archived: bool):
    """List accounts with their balances."""
    book = require_book_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    exponent = currency_exponent(book.currency)

    accounts = service.list_accounts(book.id, include_archived=include_archived)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo(f"\nAccounts in '{book.name}':")
    click.echo("-" * 72)
    for acc in accounts:
        archived = " (archived)" if acc.is_archived else ""
        balance = format_amount(acc.balance, exponent)
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {acc.kind.value:9s} | {balance:>15s} {book.currency}{archived}")


@account_group.command("rename")
@click.argument("account", metavar="ACCOUNT")
@click.argument("new_name", metavar="NEW_NAME")
@click.option("--bank", help="New bank name (optional)")
@click.pass_context
def rename_account(ctx, account: str, new_name: str, bank: str | None) -> None:
    """Rename an account.

    ACCOUNT can be an account name or ID.

    Examples:
        ledgerbook account rename "Checking" "Joint Checking"
        ledgerbook account rename 1 "Wallet" --bank "None"
    """
    book = require_book_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, book.id, account)

    try:
        service.rename_account(account_id=account_id, name=new_name, bank_name=bank)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Renamed account to '{new_name}'")


@account_group.command("archive")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def archive_account(ctx, account: str) -> None:
    """Hide an account from default listings."""
    book = require_book_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, book.id, account)

    service.archive_account(account_id)
    click.echo(f"Archived account {account_id}")


@account_group.command("unarchive")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def unarchive_account(ctx, account: str) -> None:
    """Show an archived account again."""
    book = require_book_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, book.id, account)

    service.unarchive_account(account_id)
    click.echo(f"Unarchived account {account_id}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID.

    The account can only be deleted while its balance is zero and no
    transaction posts to it. Archive it instead to keep its history.
    """
    book = require_book_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, book.id, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


@account_group.command("verify")
@click.pass_context
def verify_accounts(ctx) -> None:
    """Check stored balances against a replay of every posting."""
    book = require_book_or_exit(ctx)
    service = AccountService(ctx.obj["db"])
    exponent = currency_exponent(book.currency)

    mismatches = service.verify_balances(book.id)
    if not mismatches:
        click.echo("All account balances match their postings.")
        return

    for m in mismatches:
        click.echo(
            f"Account {m.account_id} '{m.name}': stored {format_amount(m.stored, exponent)}, "
            f"expected {format_amount(m.expected, exponent)}",
            err=True,
        )
    ctx.exit(1)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
