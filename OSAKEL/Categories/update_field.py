# Categories/update_field.py
import logging
from typing import Any, Dict, List

import typer

from OSAKEL.core.cli import run_command, usage_error
from OSAKEL.core.config import CATEGORIES

logger = logging.getLogger("categories.update_field")
logger.setLevel(logging.INFO)

cli = typer.Typer(help="categories collection maintenance", no_args_is_help=True)

USAGE = (
    "Usage ID mode:   osakel categories update-field <categoryId> <fieldName> <item1> <item2> ...\n"
    "Usage Name mode: osakel categories update-field --name <categoryName> <fieldName> <item1> <item2> ..."
)


def _validate(target: str, field_name: str, values: List[Any]) -> None:
    if not target or not field_name or not isinstance(values, list):
        raise ValueError("Invalid parameters: category and field name must be non-empty strings, values must be a list")


def update_category_field(db, category_id: str, field_name: str, values: List[Any]) -> Dict[str, Any]:
    """Merge ``{field_name: values}`` into ``categories/{category_id}``."""
    _validate(category_id, field_name, values)

    update = {field_name: values}
    db.collection(CATEGORIES).document(category_id).set(update, merge=True)
    logger.info('Updated field "%s" for category "%s": %s', field_name, category_id, values)
    return {
        "success": True,
        "message": f'Field "{field_name}" updated successfully for category "{category_id}"',
        "data": update,
        "categoryId": category_id,
        "newCategory": False,
    }


def update_category_field_by_name(db, category_name: str, field_name: str, values: List[Any]) -> Dict[str, Any]:
    """
    Find the category whose ``name`` matches and merge the field into it.
    A new category is created when none matches.
    """
    _validate(category_name, field_name, values)

    categories_ref = db.collection(CATEGORIES)
    match = next(iter(categories_ref.where("name", "==", category_name).limit(1).stream()), None)

    if match is None:
        logger.info('No category named "%s". Creating a new category...', category_name)
        new_ref = categories_ref.document()
        data = {"name": category_name, field_name: values}
        new_ref.set(data)
        return {
            "success": True,
            "message": f'Created new category "{category_name}" with field "{field_name}"',
            "data": data,
            "categoryId": new_ref.id,
            "newCategory": True,
        }

    update = {field_name: values}
    categories_ref.document(match.id).set(update, merge=True)
    logger.info('Updated field "%s" for category "%s" (ID: %s)', field_name, category_name, match.id)
    return {
        "success": True,
        "message": f'Field "{field_name}" updated successfully for category "{category_name}" (ID: {match.id})',
        "data": update,
        "categoryId": match.id,
        "newCategory": False,
    }


@cli.command("update-field")
def update_field_command(
    ctx: typer.Context,
    args: List[str] = typer.Argument(None, help="<category> <fieldName> <item1> <item2> ..."),
    by_name: bool = typer.Option(False, "--name", "-n", help="Look the category up by its name field"),
):
    """Store a list of values in one field of a category document."""
    args = args or []
    if len(args) < 3:
        usage_error("Missing arguments", USAGE)

    target, field_name, values = args[0], args[1], list(args[2:])
    if by_name:
        result = run_command(ctx, "categories update-field",
                             lambda db: update_category_field_by_name(db, target, field_name, values))
    else:
        result = run_command(ctx, "categories update-field",
                             lambda db: update_category_field(db, target, field_name, values))
    typer.echo(f"✅ {result['message']}")
    typer.echo(f"Updated data: {values}")
