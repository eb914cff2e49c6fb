# Shops/seed.py
import logging
from typing import List, Tuple

import typer
from google.cloud import firestore

from OSAKEL.core.batching import BatchResult, write_in_batches
from OSAKEL.core.cli import run_command
from OSAKEL.core.config import DRINK_SHOP_LINKS, SHOPS
from OSAKEL.Links.models import DrinkShopLink
from OSAKEL.Shops.migrate import cli
from OSAKEL.Shops.models import Shop

logger = logging.getLogger("shops.seed")
logger.setLevel(logging.INFO)

SEKIME_DRINK_ID = "oZTuXXMx1WaErBoCzYa1_duplicated"

# ✅ Sample shops around Sekime, Joto-ku, Osaka
SEKIME_SHOPS = [
    Shop(
        id="osaka_sekime_bar_001",
        name="関目バー OSAKEL",
        address="大阪府大阪市城東区関目2-1-15",
        lat=34.7024, lng=135.5538,
        category="バー",
        openTime="18:00", openHours="18:00 - 02:00",
        imageUrl="https://example.com/osaka_sekime_bar.jpg",
        imageUrls=[f"https://example.com/osaka_sekime_bar_{i}.jpg" for i in range(1, 4)],
        drink_categories=["0FavGaP6R45vr9DZLvrX", "8bXjiNMhwduF1pJv5Q8D"],
    ),
    Shop(
        id="osaka_sekime_izakaya_002",
        name="関目居酒屋 かんもく",
        address="大阪府大阪市城東区関目3-5-8",
        lat=34.7031, lng=135.5545,
        category="居酒屋",
        openTime="17:00", openHours="17:00 - 24:00",
        imageUrl="https://example.com/osaka_sekime_izakaya.jpg",
        imageUrls=[f"https://example.com/osaka_sekime_izakaya_{i}.jpg" for i in range(1, 3)],
        drink_categories=["8bXjiNMhwduF1pJv5Q8D", "bkEjjwPNtBsjqhOXGVoe"],
    ),
    Shop(
        id="osaka_sekime_wine_003",
        name="ワインバー セキメ",
        address="大阪府大阪市城東区関目1-12-3",
        lat=34.7018, lng=135.5532,
        category="ワインバー",
        openTime="19:00", openHours="19:00 - 01:00",
        imageUrl="https://example.com/osaka_sekime_wine.jpg",
        imageUrls=[f"https://example.com/osaka_sekime_wine_{i}.jpg" for i in range(1, 5)],
        drink_categories=["0FavGaP6R45vr9DZLvrX", "2UHznlDW1nePaUxo5a0A"],
    ),
    Shop(
        id="osaka_sekime_sake_004",
        name="関目日本酒バル 和",
        address="大阪府大阪市城東区関目4-7-20",
        lat=34.7038, lng=135.5552,
        category="日本酒バル",
        openTime="18:30", openHours="18:30 - 23:30",
        imageUrl="https://example.com/osaka_sekime_sake.jpg",
        imageUrls=[f"https://example.com/osaka_sekime_sake_{i}.jpg" for i in range(1, 3)],
        drink_categories=["8bXjiNMhwduF1pJv5Q8D", "VNlK61wmGhxtcn9wqjBv"],
    ),
    Shop(
        id="osaka_sekime_beer_005",
        name="クラフトビール 関目ブルワリー",
        address="大阪府大阪市城東区関目5-3-12",
        lat=34.7045, lng=135.5559,
        category="ビアバー",
        openTime="16:00", openHours="16:00 - 24:00",
        imageUrl="https://example.com/osaka_sekime_beer.jpg",
        imageUrls=[f"https://example.com/osaka_sekime_beer_{i}.jpg" for i in range(1, 6)],
        drink_categories=["bkEjjwPNtBsjqhOXGVoe", "2UHznlDW1nePaUxo5a0A"],
    ),
]

# Price (yen) of the seeded drink at each shop
SEKIME_PRICES = {
    "osaka_sekime_bar_001": 850,
    "osaka_sekime_izakaya_002": 720,
    "osaka_sekime_wine_003": 950,
    "osaka_sekime_sake_004": 680,
    "osaka_sekime_beer_005": 780,
}


def sekime_links(drink_id: str = SEKIME_DRINK_ID) -> List[DrinkShopLink]:
    return [
        DrinkShopLink(
            id=DrinkShopLink.build_id(drink_id, shop_id),
            drinkId=drink_id,
            shopId=shop_id,
            price=price,
        )
        for shop_id, price in SEKIME_PRICES.items()
    ]


def seed_sekime_shops(db, drink_id: str = SEKIME_DRINK_ID) -> Tuple[BatchResult, BatchResult]:
    """
    Write the Sekime sample shops (with a geo-point ``location``) and link
    each of them to ``drink_id``.
    """
    shops_ref = db.collection(SHOPS)
    links_ref = db.collection(DRINK_SHOP_LINKS)

    def shop_write(shop: Shop):
        data = shop.model_dump()
        data["drinkIds"] = [drink_id]
        data["location"] = firestore.GeoPoint(shop.lat, shop.lng)
        logger.info("  ✅ %s", shop.name)
        return shops_ref.document(shop.id), data

    def link_write(link: DrinkShopLink):
        logger.info("  🔗 %s (¥%d)", link.shopId, link.price)
        return links_ref.document(link.id), {"drinkId": link.drinkId, "shopId": link.shopId, "price": link.price}

    logger.info("📍 Adding shops...")
    shops_result = write_in_batches(db, SEKIME_SHOPS, shop_write, label="shops")
    logger.info("🔗 Adding drink_shop_links...")
    links_result = write_in_batches(db, sekime_links(drink_id), link_write, label="links")
    return shops_result, links_result


@cli.command("seed-sekime")
def seed_sekime_command(
    ctx: typer.Context,
    drink_id: str = typer.Option(SEKIME_DRINK_ID, help="Drink linked to every seeded shop"),
):
    """Create the Sekime (Osaka) sample shops and their drink links."""
    typer.echo(f"🏪 shops: {len(SEKIME_SHOPS)}, drink_shop_links: {len(SEKIME_PRICES)}, drinkId: {drink_id}")
    for index, shop in enumerate(SEKIME_SHOPS, start=1):
        typer.echo(f"{index}. {shop.name} ({shop.address})")

    shops_result, links_result = run_command(ctx, "shops seed-sekime", lambda db: seed_sekime_shops(db, drink_id))
    typer.echo(f"🎉 Added {shops_result.written} shops and {links_result.written} drink_shop_links")
