"""Transaction management commands."""

import click
from ledgerbook.cli.date_filters import PERIODS, resolve_cli_date_range
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.resolution import (
    require_book_or_exit,
    resolve_account_or_exit,
    resolve_category_or_exit,
)
from ledgerbook.domain.account import AccountService
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.csv_import import CSVImportService
from ledgerbook.domain.entities import (
    Transaction,
    TransactionIntent,
    TransactionPatch,
    TransactionType,
)
from ledgerbook.domain.errors import DomainError
from ledgerbook.domain.splits import read_posting
from ledgerbook.domain.transaction import TransactionService
from ledgerbook.utils.amount_parser import currency_exponent, format_amount, parse_amount
from ledgerbook.utils.date_parser import parse_date

TYPE_CHOICE = click.Choice([t.value for t in TransactionType], case_sensitive=False)


def _parse_amount_or_exit(ctx: click.Context, amount: str, exponent: int) -> int:
    try:
        return parse_amount(amount, exponent)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def _parse_date_or_exit(ctx: click.Context, value: str):
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def _accounts_line(txn: Transaction, accounts: dict[int, str]) -> str:
    """Describe which account(s) a transaction moves money through."""
    _, source_id, destination_id, _ = read_posting(txn.transaction_type, txn.splits)
    if destination_id is None:
        return accounts.get(source_id, "Unknown")
    return f"{accounts.get(source_id, 'Unknown')} -> {accounts.get(destination_id, 'Unknown')}"


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.option("--type", "transaction_type", type=TYPE_CHOICE, required=True, help="Transaction type")
@click.option("--amount", required=True, help="Amount as a positive decimal (e.g., 123.45)")
@click.option("--account", required=True, help="Account name or ID (source account for transfers)")
@click.option("--to-account", help="Destination account name or ID (transfers only)")
@click.option("--category", help="Category path or ID (e.g., 'Food & Dining > Groceries')")
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--date",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--counterparty", help="Who the money came from or went to")
@click.option("--notes", help="Notes")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    amount: str,
    account: str,
    to_account: str | None,
    category: str | None,
    description: str,
    date: str,
    counterparty: str | None,
    notes: str | None,
    tags: tuple[str, ...],
):
    """Record a transaction.

    Examples:
        ledgerbook transaction add --type expense --amount 12.50 --account Cash --category "Food & Dining" --description "Lunch"
        ledgerbook transaction add --type transfer --amount 200 --account Checking --to-account Cash --description "ATM"
    """
    db = ctx.obj["db"]
    book = require_book_or_exit(ctx)
    account_service = AccountService(db)
    category_service = CategoryService(db)

    source_id = resolve_account_or_exit(ctx, account_service, book.id, account)
    destination_id = None
    if to_account is not None:
        destination_id = resolve_account_or_exit(ctx, account_service, book.id, to_account)
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, category_service, book.id, category)

    intent = TransactionIntent(
        book_id=book.id,
        transaction_type=TransactionType(transaction_type.upper()),
        amount=_parse_amount_or_exit(ctx, amount, currency_exponent(book.currency)),
        source_account_id=source_id,
        description=description,
        transaction_date=_parse_date_or_exit(ctx, date),
        destination_account_id=destination_id,
        category_id=category_id,
        counterparty=counterparty,
        notes=notes,
        tags=tags,
    )

    try:
        txn = TransactionService(db).create_transaction(intent, creator=ctx.obj["creator"])
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Type: {txn.transaction_type.value}")
    click.echo(f"  Date: {txn.transaction_date}")
    click.echo(f"  Amount: {format_amount(txn.amount, currency_exponent(book.currency))} {book.currency}")
    click.echo(f"  Description: {txn.description}")


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show a transaction with its splits."""
    db = ctx.obj["db"]
    book = require_book_or_exit(ctx)
    exponent = currency_exponent(book.currency)

    txn = TransactionService(db).get_transaction(transaction_id)
    if txn is None or txn.book_id != book.id:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    accounts = {acc.id: acc.name for acc in AccountService(db).list_accounts(book.id, include_archived=True)}
    category_service = CategoryService(db)

    click.echo(f"\nTransaction ID: {txn.id}")
    click.echo(f"  Type: {txn.transaction_type.value}")
    click.echo(f"  Date: {txn.transaction_date}")
    click.echo(f"  Amount: {format_amount(txn.amount, exponent)} {book.currency}")
    click.echo(f"  Description: {txn.description}")
    if txn.counterparty:
        click.echo(f"  Counterparty: {txn.counterparty}")
    if txn.notes:
        click.echo(f"  Notes: {txn.notes}")
    if txn.tags:
        click.echo(f"  Tags: {', '.join(txn.tags)}")
    click.echo(f"  Created by: {txn.created_by} at {txn.created_at}")
    if txn.updated_by:
        click.echo(f"  Updated by: {txn.updated_by} at {txn.updated_at}")

    click.echo("  Splits:")
    for split in txn.splits:
        category_name = category_service.format_category_path(split.category_id) if split.category_id else ""
        click.echo(
            f"    {split.direction.value:<6} {format_amount(split.amount, exponent):>15} "
            f"{accounts.get(split.account_id, 'Unknown'):<20} {category_name}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--type", "transaction_type", type=TYPE_CHOICE, help="Transaction type")
@click.option("--amount", help="Amount as a positive decimal")
@click.option("--account", help="Account name or ID")
@click.option("--to-account", help="Destination account name or ID (transfers only)")
@click.option("--category", help="Category path or ID, or empty string to clear")
@click.option("--description", help="Transaction description")
@click.option("--date", help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')")
@click.option("--counterparty", help="Counterparty, or empty string to clear")
@click.option("--notes", help="Notes, or empty string to clear")
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable)")
@click.option("--clear-tags", is_flag=True, help="Remove all tags")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    transaction_type: str | None,
    amount: str | None,
    account: str | None,
    to_account: str | None,
    category: str | None,
    description: str | None,
    date: str | None,
    counterparty: str | None,
    notes: str | None,
    tags: tuple[str, ...],
    clear_tags: bool,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Balances are recalculated
    from the new values.

    Examples:
        ledgerbook transaction update 1 --amount 80.00
        ledgerbook transaction update 1 --category ""  # Clear category
        ledgerbook transaction update 1 --type transfer --to-account Savings
    """
    db = ctx.obj["db"]
    book = require_book_or_exit(ctx)
    account_service = AccountService(db)
    category_service = CategoryService(db)

    if tags and clear_tags:
        click.echo("Error: --tag cannot be combined with --clear-tags.", err=True)
        ctx.exit(1)

    changes = {}
    if transaction_type is not None:
        changes["transaction_type"] = TransactionType(transaction_type.upper())
        # Drop the fields the new type forbids unless they are given explicitly
        if changes["transaction_type"] == TransactionType.TRANSFER and category is None:
            changes["category_id"] = None
        if changes["transaction_type"] != TransactionType.TRANSFER and to_account is None:
            changes["destination_account_id"] = None
    if amount is not None:
        changes["amount"] = _parse_amount_or_exit(ctx, amount, currency_exponent(book.currency))
    if account is not None:
        changes["source_account_id"] = resolve_account_or_exit(ctx, account_service, book.id, account)
    if to_account is not None:
        changes["destination_account_id"] = (
            resolve_account_or_exit(ctx, account_service, book.id, to_account) if to_account else None
        )
    if category is not None:
        changes["category_id"] = (
            resolve_category_or_exit(ctx, category_service, book.id, category) if category else None
        )
    if description is not None:
        changes["description"] = description
    if date is not None:
        changes["transaction_date"] = _parse_date_or_exit(ctx, date)
    if counterparty is not None:
        changes["counterparty"] = counterparty or None
    if notes is not None:
        changes["notes"] = notes or None
    if tags:
        changes["tags"] = tags
    elif clear_tags:
        changes["tags"] = ()

    service = TransactionService(db)
    existing = service.get_transaction(transaction_id)
    if existing is None or existing.book_id != book.id:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    try:
        service.amend_transaction(transaction_id, TransactionPatch(**changes), editor=ctx.obj["creator"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction and reverse its effect on balances.

    Examples:
        ledgerbook transaction delete 1
    """
    db = ctx.obj["db"]
    book = require_book_or_exit(ctx)
    transaction_service = TransactionService(db)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id, book_id=book.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--type", "transaction_type", type=TYPE_CHOICE, help="Only this transaction type")
@click.option("--account", help="Account name or ID")
@click.option("--category", help="Category path or ID")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIODS, case_sensitive=False), help="Named date range")
@click.pass_context
def list_transactions(
    ctx,
    transaction_type: str | None,
    account: str | None,
    category: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """View transactions with optional filters, newest first."""
    db = ctx.obj["db"]
    book = require_book_or_exit(ctx)
    account_service = AccountService(db)
    category_service = CategoryService(db)
    exponent = currency_exponent(book.currency)

    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)
    account_id = resolve_account_or_exit(ctx, account_service, book.id, account) if account else None
    category_id = resolve_category_or_exit(ctx, category_service, book.id, category) if category else None

    transactions = TransactionService(db).list_transactions(
        book_id=book.id,
        start_date=start,
        end_date=end,
        transaction_type=TransactionType(transaction_type.upper()) if transaction_type else None,
        account_id=account_id,
        category_id=category_id,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts(book.id, include_archived=True)}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 100)
    click.echo(f"{'ID':<6} {'Date':<12} {'Type':<9} {'Amount':>14} {'Account':<28} {'Description':<30}")
    click.echo("-" * 100)

    totals = {t: 0 for t in TransactionType}
    for txn in transactions:
        totals[txn.transaction_type] += txn.amount
        click.echo(
            f"{txn.id:<6} {str(txn.transaction_date):<12} {txn.transaction_type.value:<9} "
            f"{format_amount(txn.amount, exponent):>14} {_accounts_line(txn, accounts)[:28]:<28} "
            f"{txn.description[:30]:<30}"
        )

    click.echo("-" * 100)
    click.echo(
        f"Income: {format_amount(totals[TransactionType.INCOME], exponent)} | "
        f"Expenses: {format_amount(totals[TransactionType.EXPENSE], exponent)} | "
        f"Transfers: {format_amount(totals[TransactionType.TRANSFER], exponent)} | "
        f"Count: {len(transactions)}"
    )


@transaction_group.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_transactions(ctx, csv_file: str) -> None:
    """Import transactions from a CSV file.

    The file needs the columns date, type, amount, account and description;
    to_account, category, counterparty, notes and tags (separated by ';')
    are optional. Either every row is imported or none is.
    """
    db = ctx.obj["db"]
    book = require_book_or_exit(ctx)

    try:
        created = CSVImportService(db).import_csv(csv_file, book.id, creator=ctx.obj["creator"])
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Imported {len(created)} transaction(s)")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
