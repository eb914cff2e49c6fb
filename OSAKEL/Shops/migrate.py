# Shops/migrate.py
import random
import logging
from typing import List, Optional

import typer

from OSAKEL.core.batching import BatchResult, check_batch_size, write_in_batches
from OSAKEL.core.cli import run_command, usage_error
from OSAKEL.core.config import CATEGORIES, DUPLICATE_SUFFIX, MIGRATION_BATCH_SIZE, SHOPS
from OSAKEL.Drinks.migrate import duplicated_id

logger = logging.getLogger("shops.migrate")
logger.setLevel(logging.INFO)

cli = typer.Typer(help="shops collection maintenance", no_args_is_help=True)

MIN_DRINK_CATEGORIES = 2
MAX_DRINK_CATEGORIES = 3


def pick_drink_categories(category_ids: List[str], rng: random.Random) -> List[str]:
    """2-3 distinct category ids, or every id when there are fewer."""
    count = rng.randint(MIN_DRINK_CATEGORIES, MAX_DRINK_CATEGORIES)
    return rng.sample(list(category_ids), min(count, len(category_ids)))


def migrate_shops(
    db,
    rng: Optional[random.Random] = None,
    batch_size: int = MIGRATION_BATCH_SIZE,
    skip_duplicated: bool = False,
) -> BatchResult:
    """
    Copy each shop to ``{id}_duplicated`` with a random ``drink_categories`` list.
    """
    check_batch_size(batch_size)
    rng = rng or random.Random()

    logger.info("Fetching categories...")
    category_ids = [doc.id for doc in db.collection(CATEGORIES).select([]).stream()]
    logger.info("Found %d categories: %s", len(category_ids), ", ".join(category_ids))

    logger.info("Fetching existing shops...")
    shops = list(db.collection(SHOPS).stream())
    logger.info("Found %d shops to migrate.", len(shops))

    shops_ref = db.collection(SHOPS)

    def transform(doc):
        if skip_duplicated and doc.id.endswith(DUPLICATE_SUFFIX):
            return None
        shop = doc.to_dict() or {}
        selected = pick_drink_categories(category_ids, rng)
        logger.info('Shop "%s" will have categories: [%s]', shop.get("name", "Unknown"), ", ".join(selected))
        return shops_ref.document(duplicated_id(doc.id)), {**shop, "drink_categories": selected}

    result = write_in_batches(db, shops, transform, batch_size=batch_size, label="shops")
    logger.info("Successfully migrated and duplicated %d shops in %d batches.", result.written, result.batches)
    return result


@cli.command("migrate")
def migrate_command(
    ctx: typer.Context,
    seed: Optional[int] = typer.Option(None, help="Seed for a reproducible run"),
    batch_size: int = typer.Option(MIGRATION_BATCH_SIZE, help="Documents per commit (max 500)"),
    skip_duplicated: bool = typer.Option(False, help="Ignore shops that are already copies"),
):
    """Duplicate shops into {id}_duplicated with 2-3 drink_categories."""
    try:
        check_batch_size(batch_size)
    except ValueError as e:
        usage_error(str(e))

    rng = random.Random(seed)
    result = run_command(
        ctx, "shops migrate",
        lambda db: migrate_shops(db, rng, batch_size=batch_size, skip_duplicated=skip_duplicated),
    )
    typer.echo(f"✅ Migration completed: {result.written} shops in {result.batches} batches")
    typer.echo("🏷️  Each copy now has a 'drink_categories' field with 2-3 category document IDs")
