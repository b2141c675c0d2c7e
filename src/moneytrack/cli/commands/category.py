"""Category management commands."""

import click
from moneytrack.cli.resolution import resolve_category_or_exit
from moneytrack.domain.category import CategoryService
from moneytrack.domain.entities import CategoryType

UNTAGGED = "untagged"


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(["income", "expense", UNTAGGED], case_sensitive=False),
    help="Only show categories of this type",
)
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories."""
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = CategoryService(store)

    if category_type is None:
        categories = service.list_categories(uid)
    elif category_type.lower() == UNTAGGED:
        categories = service.list_untagged_categories(uid)
    else:
        categories = service.list_categories(uid, CategoryType(category_type.lower()))

    if not categories:
        click.echo("No categories found. Run 'init-defaults' to create default categories.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        type_str = cat.type.value if cat.type is not None else UNTAGGED
        click.echo(f"{cat.name:30s} [{type_str}] (ID: {cat.id})")


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice(["expense", "income", UNTAGGED], case_sensitive=False),
    default="expense",
    help="Category type (default: expense)",
)
@click.option("--icon", help="Icon name")
@click.pass_context
def create_category(ctx, name: str, category_type: str, icon: str | None):
    """Create a new category."""
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = CategoryService(store)

    resolved_type = None if category_type.lower() == UNTAGGED else CategoryType(category_type.lower())

    try:
        category_id = service.create_category(uid, name=name, category_type=resolved_type, icon=icon)
        click.echo(f"Created category '{name}' (ID: {category_id})")
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


@category_group.command("migrate-types")
@click.option(
    "--income",
    "income",
    multiple=True,
    help="Untagged category (name or ID) to mark as income; may be repeated",
)
@click.pass_context
def migrate_types(ctx, income: tuple[str, ...]):
    """Give every untagged category a type.

    Categories named with --income become income categories, every other
    untagged category becomes an expense category.

    Examples:
        moneytrack category migrate-types
        moneytrack category migrate-types --income "Salário" --income "Freelance"
    """
    store = ctx.obj["store"]
    uid = ctx.obj["uid"]
    service = CategoryService(store)

    untagged = service.list_untagged_categories(uid)
    if not untagged:
        click.echo("All categories already have a type.")
        return

    income_ids = [resolve_category_or_exit(ctx, service, uid, name) for name in income]

    try:
        counts = service.migrate_category_types(uid, income_ids, [c.id for c in untagged])
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    click.echo(
        f"Migrated {len(untagged)} categories: "
        f"{counts[CategoryType.INCOME]} income, {counts[CategoryType.EXPENSE]} expense"
    )


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
