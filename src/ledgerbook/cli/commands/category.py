"""Category management commands."""

import click
from ledgerbook.cli.error_handling import handle_domain_error
from ledgerbook.cli.resolution import require_book_or_exit
from ledgerbook.domain.category import CategoryService
from ledgerbook.domain.entities import CategoryType
from ledgerbook.domain.errors import DomainError


def print_category_tree(categories: list[dict], indent: int = 0) -> None:
    """Recursively print category tree."""
    for cat in categories:
        prefix = "  " * indent
        click.echo(f"{prefix}{cat['name']} [{cat['category_type'].value}] (ID: {cat['id']})")
        if cat.get("children"):
            print_category_tree(cat["children"], indent + 1)


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.pass_context
def list_categories(ctx):
    """List all categories in tree format."""
    book = require_book_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])

    tree = service.get_category_tree(book.id)
    if not tree:
        click.echo("No categories found.")
        return

    click.echo("\nCategories:")
    print_category_tree(tree)


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice([t.value for t in CategoryType], case_sensitive=False),
    default=CategoryType.EXPENSE.value,
    show_default=True,
    help="Category type",
)
@click.option("--parent", help="Parent category path (e.g., 'Food & Dining')")
@click.pass_context
def create_category(ctx, name: str, category_type: str, parent: str | None):
    """Create a new category."""
    book = require_book_or_exit(ctx)
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(
            book_id=book.id, name=name, category_type=CategoryType(category_type.upper()), parent_path=parent
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    parent_str = f" under '{parent}'" if parent else ""
    click.echo(f"Created category '{name}'{parent_str} (ID: {category_id})")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
