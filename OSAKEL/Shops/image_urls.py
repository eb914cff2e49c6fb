# Shops/image_urls.py
import logging
from typing import Dict, List

import typer
from google.cloud import firestore

from OSAKEL.core.batching import BatchResult, BatchedWriter
from OSAKEL.core.cli import run_command, usage_error
from OSAKEL.core.config import MIGRATION_BATCH_SIZE, SHOPS
from OSAKEL.Shops.migrate import cli

logger = logging.getLogger("shops.image_urls")
logger.setLevel(logging.INFO)


def update_shop_image_urls(db, image_url: str, batch_size: int = MIGRATION_BATCH_SIZE) -> BatchResult:
    """Replace every shop's ``imageUrls`` with ``[image_url]``."""
    shops = list(db.collection(SHOPS).stream())
    if not shops:
        logger.warning("⚠️ No documents found in %s", SHOPS)
        return BatchResult()

    logger.info("📊 Documents to update: %d", len(shops))
    with BatchedWriter(db, batch_size, label="imageUrls") as writer:
        for doc in shops:
            current = (doc.to_dict() or {}).get("imageUrls") or []
            logger.info("📄 %s current imageUrls: %s", doc.id, current)
            writer.update(doc.reference, {
                "imageUrls": [image_url],
                "updatedAt": firestore.SERVER_TIMESTAMP,
            })
    return writer.result


def preview_image_urls(db, limit: int = 3) -> Dict[str, List[str]]:
    return {
        doc.id: (doc.to_dict() or {}).get("imageUrls") or []
        for doc in db.collection(SHOPS).limit(limit).stream()
    }


@cli.command("update-images")
def update_images_command(
    ctx: typer.Context,
    image_url: str = typer.Argument(..., help="URL every shop's imageUrls is set to"),
):
    """Set imageUrls of every shop to a single URL."""
    if not image_url.startswith(("http://", "https://")):
        usage_error(f"Not a URL: {image_url}", "Usage: osakel shops update-images <https://...>")

    def operation(db):
        result = update_shop_image_urls(db, image_url)
        return result, preview_image_urls(db)

    result, preview = run_command(ctx, "shops update-images", operation)
    typer.echo(f"✅ Updated {result.written} shops")
    for doc_id, urls in preview.items():
        typer.echo(f"🔍 {doc_id}: {urls}")
