# Drinks/migrate.py
"""
Duplicate every drink into ``{id}_duplicated`` with a ``subcategories`` list.

The originals are left untouched. The copy picks two random subcategories of
the drink's category (or all of them when the category has fewer than two)
and keeps the drink's existing ``subcategoryId`` in the list.
"""

import random
import logging
from typing import Any, Dict, List, Optional, Tuple

import typer

from OSAKEL.core.batching import BatchResult, check_batch_size, write_in_batches
from OSAKEL.core.cli import run_command, usage_error
from OSAKEL.core.config import CATEGORIES, DRINKS, DUPLICATE_SUFFIX, MIGRATION_BATCH_SIZE

logger = logging.getLogger("drinks.migrate")
logger.setLevel(logging.INFO)

cli = typer.Typer(help="drinks collection migrations", no_args_is_help=True)

SUBCATEGORIES_PER_DRINK = 2


# ==============================
# Transform
# ==============================
def subcategory_id(sub: Any) -> str:
    if isinstance(sub, dict):
        return str(sub.get("id") or "")
    return str(sub)


def load_category_subcategories(db) -> Dict[str, List[Any]]:
    category_map = {}
    for doc in db.collection(CATEGORIES).stream():
        data = doc.to_dict() or {}
        category_map[doc.id] = data.get("subcategories") or []
        logger.info("Category %s has %d subcategories", doc.id, len(category_map[doc.id]))
    return category_map


def pick_subcategories(available: List[Any], existing: Optional[Any], rng: random.Random) -> List[str]:
    if len(available) >= SUBCATEGORIES_PER_DRINK:
        selected = [subcategory_id(s) for s in rng.sample(list(available), SUBCATEGORIES_PER_DRINK)]
    else:
        selected = [subcategory_id(s) for s in available]

    if existing and str(existing) not in selected:
        selected.append(str(existing))
    return selected


def duplicated_id(doc_id: str) -> str:
    return f"{doc_id}{DUPLICATE_SUFFIX}"


def build_drink_copy(doc_id: str, drink: dict, category_map: Dict[str, List[Any]],
                     rng: random.Random) -> Tuple[str, dict]:
    category_id = drink.get("categoryId") or drink.get("category") or ""
    available = category_map.get(category_id, [])
    selected = pick_subcategories(available, drink.get("subcategoryId"), rng)
    return duplicated_id(doc_id), {**drink, "subcategories": selected}


# ==============================
# Migration
# ==============================
def migrate_drinks(
    db,
    rng: Optional[random.Random] = None,
    batch_size: int = MIGRATION_BATCH_SIZE,
    skip_duplicated: bool = False,
) -> BatchResult:
    """
    Copy each drink to ``{id}_duplicated`` with ``subcategories`` filled in.
    Copies are written with ``set`` so a re-run overwrites the same ids.
    """
    check_batch_size(batch_size)
    rng = rng or random.Random()

    logger.info("Fetching categories...")
    category_map = load_category_subcategories(db)

    logger.info("Fetching existing drinks...")
    drinks = list(db.collection(DRINKS).stream())
    logger.info("Found %d drinks to migrate.", len(drinks))

    drinks_ref = db.collection(DRINKS)

    def transform(doc):
        if skip_duplicated and doc.id.endswith(DUPLICATE_SUFFIX):
            return None
        new_id, data = build_drink_copy(doc.id, doc.to_dict() or {}, category_map, rng)
        return drinks_ref.document(new_id), data

    result = write_in_batches(db, drinks, transform, batch_size=batch_size, label="drinks")
    logger.info("Successfully migrated and duplicated %d drinks in %d batches.", result.written, result.batches)
    return result


@cli.command("migrate")
def migrate_command(
    ctx: typer.Context,
    seed: Optional[int] = typer.Option(None, help="Seed for a reproducible run"),
    batch_size: int = typer.Option(MIGRATION_BATCH_SIZE, help="Documents per commit (max 500)"),
    skip_duplicated: bool = typer.Option(False, help="Ignore drinks that are already copies"),
):
    """Duplicate drinks into {id}_duplicated with a subcategories list."""
    try:
        check_batch_size(batch_size)
    except ValueError as e:
        usage_error(str(e))

    rng = random.Random(seed)
    result = run_command(
        ctx, "drinks migrate",
        lambda db: migrate_drinks(db, rng, batch_size=batch_size, skip_duplicated=skip_duplicated),
    )
    typer.echo(f"✅ Migrated {result.written} drinks in {result.batches} batches")
