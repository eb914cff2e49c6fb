# Links/links.py
import time
import random
import logging
from typing import Dict, List, Optional

import typer
from google.cloud import firestore

from OSAKEL.core.batching import BatchResult, check_batch_size, drain_collection, write_in_batches
from OSAKEL.core.cli import MigrationError, run_command, usage_error
from OSAKEL.core.config import (
    BATCH_PAUSE_SECONDS,
    DELETE_PAGE_SIZE,
    DRINK_SHOP_LINKS,
    DRINKS,
    LINK_BATCH_SIZE,
    SHOPS,
)
from OSAKEL.Links.generator import generate_links
from OSAKEL.Links.models import LinkGenerationConfig

logger = logging.getLogger("links")
logger.setLevel(logging.INFO)

cli = typer.Typer(help="drink_shop_links generation and cleanup", no_args_is_help=True)


# ==============================
# Helpers
# ==============================
def count_documents(db, collection: str) -> int:
    results = db.collection(collection).count().get()
    try:
        return int(results[0][0].value or 0)
    except (IndexError, TypeError):
        return 0


def collection_stats(db) -> Dict[str, int]:
    return {
        "shops": count_documents(db, SHOPS),
        "drinks": count_documents(db, DRINKS),
        "links": count_documents(db, DRINK_SHOP_LINKS),
    }


def all_document_ids(db, collection: str) -> List[str]:
    # empty projection: ids only, no field data
    return [doc.id for doc in db.collection(collection).select([]).stream()]


# ==============================
# Populate
# ==============================
def populate_links(
    db,
    config: LinkGenerationConfig,
    rng: Optional[random.Random] = None,
    batch_size: int = LINK_BATCH_SIZE,
    pause_seconds: float = BATCH_PAUSE_SECONDS,
    sleep=time.sleep,
) -> BatchResult:
    """
    Generate drink_shop_links for every shop and write them in batches.
    Existing links with the same drinkId_shopId are overwritten.
    """
    shop_ids = all_document_ids(db, SHOPS)
    drink_ids = all_document_ids(db, DRINKS)
    logger.info("📦 Loaded shops=%d drinks=%d", len(shop_ids), len(drink_ids))
    if not shop_ids or not drink_ids:
        raise MigrationError("shops or drinks collection is empty")

    links = generate_links(shop_ids, drink_ids, config, rng)
    logger.info("🎯 Generated %d links", len(links))

    links_ref = db.collection(DRINK_SHOP_LINKS)

    def to_write(link):
        data = link.model_dump()
        data["createdAt"] = firestore.SERVER_TIMESTAMP
        data["updatedAt"] = firestore.SERVER_TIMESTAMP
        return links_ref.document(link.id), data

    return write_in_batches(db, links, to_write, batch_size=batch_size,
                            pause_seconds=pause_seconds, sleep=sleep, label="link")


# ==============================
# Delete
# ==============================
def delete_all_links(db, page_size: int = DELETE_PAGE_SIZE,
                     pause_seconds: float = BATCH_PAUSE_SECONDS, sleep=time.sleep) -> BatchResult:
    return drain_collection(db, DRINK_SHOP_LINKS, page_size=page_size,
                            pause_seconds=pause_seconds, sleep=sleep)


# ==============================
# Commands
# ==============================
@cli.command("populate")
def populate_command(
    ctx: typer.Context,
    mode: str = typer.Option("random", help="random (3-8 per shop) | all | custom"),
    min_drinks: Optional[int] = typer.Option(None, "--min", help="Minimum drinks per shop (custom mode only)"),
    max_drinks: Optional[int] = typer.Option(None, "--max", help="Maximum drinks per shop (custom mode only)"),
    seed: Optional[int] = typer.Option(None, help="Seed for a reproducible run"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Generate drink_shop_links from the existing shops and drinks."""
    if mode not in ("random", "all", "custom"):
        usage_error(f"Invalid mode: {mode}", "Usage: osakel links populate --mode random|all|custom")
    if mode != "custom" and (min_drinks is not None or max_drinks is not None):
        usage_error("--min/--max only apply to --mode custom",
                    "Usage: osakel links populate --mode custom --min N --max M")
    try:
        if mode == "custom":
            config = LinkGenerationConfig(mode=mode, min_drinks_per_shop=min_drinks,
                                          max_drinks_per_shop=max_drinks)
        else:
            config = LinkGenerationConfig(mode=mode)
    except ValueError as e:
        usage_error(str(e), "Usage: osakel links populate --mode custom --min N --max M")

    rng = random.Random(seed)

    def operation(db):
        stats = collection_stats(db)
        typer.echo(f"📊 shops={stats['shops']} drinks={stats['drinks']} drink_shop_links={stats['links']}")
        if stats["shops"] == 0 or stats["drinks"] == 0:
            raise MigrationError("shops or drinks collection is empty")

        estimate = config.estimated_total(stats["shops"], stats["drinks"])
        if config.mode == "all" and not yes:
            if not typer.confirm(f"⚠️ About {int(estimate):,} links will be written. Continue?"):
                return None
        typer.echo(f"🔗 Generating about {int(estimate):,} links...")
        return populate_links(db, config, rng)

    result = run_command(ctx, "links populate", operation)
    if result is None:
        typer.echo("❌ Cancelled.")
        return
    typer.echo(f"✅ Saved {result.written} links in {result.batches} batches")


@cli.command("delete")
def delete_command(
    ctx: typer.Context,
    page_size: int = typer.Option(DELETE_PAGE_SIZE, help="Documents deleted per batch"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete every document in drink_shop_links. This cannot be undone."""
    try:
        check_batch_size(page_size)
    except ValueError as e:
        usage_error(str(e))

    def operation(db):
        if not yes:
            total = count_documents(db, DRINK_SHOP_LINKS)
            typer.echo(f"⚠️  This cannot be undone. {DRINK_SHOP_LINKS}: {total} documents")
            if not typer.confirm("Delete them all?"):
                return None
        return delete_all_links(db, page_size=page_size)

    result = run_command(ctx, "links delete", operation)
    if result is None:
        typer.echo("❌ Cancelled.")
        return
    typer.echo(f"✅ Deleted {result.written} links in {result.batches} batches")
