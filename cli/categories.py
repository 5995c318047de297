#!/usr/bin/env python3

from logger import get_logger

logger = get_logger()


def cmd_list(args, services):
    """List categories of the user."""
    categories = services.categories.find_all(args.user, type=args.type)

    if not categories:
        logger.info("No categories found.")
        return

    logger.info("\nCategories:")
    logger.info("=" * 80)
    for category in categories:
        logger.info(f"ID: {category.id}")
        logger.info(f"Name: {category.name}")
        logger.info(f"Type: {category.type}")
        logger.info(f"Color: {category.color}  Icon: {category.icon}")
        logger.info("-" * 80)

    logger.info(f"\nTotal categories: {len(categories)}")


def cmd_create(args, services):
    """Create a category with explicit display data."""
    category = services.categories.create(
        args.user, args.type, args.name, color=args.color, icon=args.icon
    )
    logger.info(f"\n✓ Category created successfully with ID: {category.id}")
    logger.info(f"  Name: {category.name} ({category.type})")


def cmd_quick_add(args, services):
    """Create a category with default display data."""
    category = services.categories.quick_create(args.user, args.type, args.name)
    logger.info(f"✓ Category created with ID: {category.id}")


def cmd_update(args, services):
    """Update a category's name or display data."""
    category = services.categories.update(
        args.user, args.category_id, name=args.name, color=args.color, icon=args.icon
    )
    logger.info(f"✓ Category {category.id} updated: {category.name}")


def cmd_delete(args, services):
    """Delete an unused category."""
    services.categories.delete(args.user, args.category_id)
    logger.info(f"✓ Category {args.category_id} deleted")


def setup_parser(subparsers):
    """Setup categories subcommand parser.

    Args:
        subparsers: The subparsers object from the main CLI
    """
    parser = subparsers.add_parser(
        "categories",
        help="Manage categories",
        description="Manage income and expense categories",
    )

    categories_subparsers = parser.add_subparsers(
        title="subcommands",
        description="Available category commands",
        dest="subcommand",
        required=True,
    )

    list_parser = categories_subparsers.add_parser("list", help="List categories")
    list_parser.add_argument("--type", choices=["income", "expense"])
    list_parser.set_defaults(func=cmd_list)

    create_parser = categories_subparsers.add_parser("create", help="Create a category")
    create_parser.add_argument("type", choices=["income", "expense"])
    create_parser.add_argument("name", help="Category name (e.g., Groceries)")
    create_parser.add_argument("--color", help="Colour class or hex code")
    create_parser.add_argument("--icon", help="Icon name")
    create_parser.set_defaults(func=cmd_create)

    quick_parser = categories_subparsers.add_parser(
        "quick-add", help="Create a category with default colour and icon"
    )
    quick_parser.add_argument("type", choices=["income", "expense"])
    quick_parser.add_argument("name")
    quick_parser.set_defaults(func=cmd_quick_add)

    update_parser = categories_subparsers.add_parser("update", help="Edit a category")
    update_parser.add_argument("category_id")
    update_parser.add_argument("--name")
    update_parser.add_argument("--color")
    update_parser.add_argument("--icon")
    update_parser.set_defaults(func=cmd_update)

    delete_parser = categories_subparsers.add_parser(
        "delete", help="Delete a category no transaction uses"
    )
    delete_parser.add_argument("category_id")
    delete_parser.set_defaults(func=cmd_delete)
