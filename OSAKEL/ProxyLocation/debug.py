# ProxyLocation/debug.py
"""
Read-only reports used to track down why the app shows no shops near the
user: which drinks and links exist, which shops sit in the area, how far
they are from a test location, and whether they are linked to the drink
being searched.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import typer

from OSAKEL.core.cli import run_command
from OSAKEL.core.config import DRINK_SHOP_LINKS, DRINKS, SHOPS
from OSAKEL.Links.links import collection_stats
from OSAKEL.ProxyLocation.geo import ProximityMatch, classify_by_distance, shop_coordinates
from OSAKEL.Shops.seed import SEKIME_DRINK_ID

logger = logging.getLogger("proxylocation.debug")
logger.setLevel(logging.INFO)

cli = typer.Typer(help="read-only debug reports", no_args_is_help=True)

# ✅ Reference points
TOKYO_STATION = (35.6812, 139.7671)
SEKIME = (34.7024, 135.5538)
DEFAULT_AREA_KEYWORD = "大阪"
DEFAULT_RADIUS_KM = 5.0


# ==============================
# Drinks / links
# ==============================
@dataclass
class DrinkLinkReport:
    drinks: List[Dict] = field(default_factory=list)
    links: List[Dict] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)
    test_drink_id: Optional[str] = None
    test_drink_links: List[Dict] = field(default_factory=list)


def links_for_drink(db, drink_id: str) -> List[Dict]:
    return [doc.to_dict() or {} for doc in db.collection(DRINK_SHOP_LINKS).where("drinkId", "==", drink_id).stream()]


def inspect_drink_links(db, sample_size: int = 10) -> DrinkLinkReport:
    report = DrinkLinkReport()
    for doc in db.collection(DRINKS).limit(sample_size).stream():
        data = doc.to_dict() or {}
        report.drinks.append({"id": doc.id, "name": data.get("name")})
    for doc in db.collection(DRINK_SHOP_LINKS).limit(sample_size).stream():
        data = doc.to_dict() or {}
        report.links.append({
            "id": doc.id,
            "drinkId": data.get("drinkId"),
            "shopId": data.get("shopId"),
            "price": data.get("price"),
        })
    report.counts = collection_stats(db)

    if report.drinks:
        report.test_drink_id = report.drinks[0]["id"]
        report.test_drink_links = links_for_drink(db, report.test_drink_id)
    return report


# ==============================
# Location
# ==============================
@dataclass
class LocationReport:
    drink_ids: List[str] = field(default_factory=list)
    total_shops: int = 0
    area_shops: List[Dict] = field(default_factory=list)
    linked_shop_ids: List[str] = field(default_factory=list)
    origin_distances: List[ProximityMatch] = field(default_factory=list)
    nearby: List[ProximityMatch] = field(default_factory=list)
    distances: List[ProximityMatch] = field(default_factory=list)
    diagnosis: str = ""

    @property
    def linked_nearby(self) -> List[ProximityMatch]:
        return [m for m in self.nearby if m.id in self.linked_shop_ids]


def diagnose(report: LocationReport) -> str:
    if not report.area_shops:
        return "❌ No shops found in the area"
    if not report.nearby:
        return "❌ No shops within range of the reference point"
    if not report.linked_shop_ids:
        return "❌ drink_shop_links has no links for this drink"
    if not report.linked_nearby:
        return "❌ Shops in range are not linked to this drink"
    return f"✅ Data looks fine: {len(report.linked_nearby)} shops should be shown, check the app search logic"


def debug_location(
    db,
    drink_id: str = SEKIME_DRINK_ID,
    area_keyword: str = DEFAULT_AREA_KEYWORD,
    reference: Tuple[float, float] = SEKIME,
    origin: Tuple[float, float] = TOKYO_STATION,
    radius_km: float = DEFAULT_RADIUS_KM,
) -> LocationReport:
    report = LocationReport()
    report.drink_ids = [doc.id for doc in db.collection(DRINKS).select([]).limit(5).stream()]

    for doc in db.collection(SHOPS).stream():
        report.total_shops += 1
        shop = doc.to_dict() or {}
        if area_keyword not in (shop.get("address") or ""):
            continue
        coords = shop_coordinates(shop)
        report.area_shops.append({
            "id": doc.id,
            "name": shop.get("name", ""),
            "address": shop.get("address"),
            "lat": coords[0] if coords else None,
            "lng": coords[1] if coords else None,
        })

    report.linked_shop_ids = [link.get("shopId") for link in links_for_drink(db, drink_id)]
    report.origin_distances = classify_by_distance(origin, report.area_shops, radius_km)
    report.distances = classify_by_distance(reference, report.area_shops, radius_km)
    report.nearby = [m for m in report.distances if m.within_range]
    report.diagnosis = diagnose(report)
    return report


# ==============================
# Commands
# ==============================
@cli.command("drinks")
def debug_drinks_command(ctx: typer.Context):
    """Show sample drinks and drink_shop_links plus collection counts."""
    report = run_command(ctx, "debug drinks", inspect_drink_links)

    typer.echo("📊 drinks:")
    for index, drink in enumerate(report.drinks, start=1):
        typer.echo(f"   {index}. ID: {drink['id']}  name: {drink['name'] or '-'}")
    typer.echo("🔗 drink_shop_links:")
    for index, link in enumerate(report.links, start=1):
        typer.echo(f"   {index}. ID: {link['id']}  drinkId: {link['drinkId']}  shopId: {link['shopId']}  price: {link['price']}")
    typer.echo("📈 counts: " + ", ".join(f"{k}={v}" for k, v in report.counts.items()))
    if report.test_drink_id:
        typer.echo(f"🧪 drinkId {report.test_drink_id}: {len(report.test_drink_links)} shops")
        for link in report.test_drink_links:
            typer.echo(f"     shopId: {link.get('shopId')}, price: {link.get('price')}")


@cli.command("location")
def debug_location_command(
    ctx: typer.Context,
    drink_id: str = typer.Option(SEKIME_DRINK_ID, help="Drink whose links are checked"),
    area: str = typer.Option(DEFAULT_AREA_KEYWORD, help="Substring matched against shop addresses"),
    radius: float = typer.Option(DEFAULT_RADIUS_KM, help="Search radius in km"),
):
    """Check why shops near the reference point do not show up for a drink."""
    report = run_command(ctx, "debug location", lambda db: debug_location(db, drink_id, area, radius_km=radius))

    typer.echo(f"📋 drinkIds: {', '.join(report.drink_ids) or '-'}")
    typer.echo(f"🏪 shops: {report.total_shops}, in area '{area}': {len(report.area_shops)}")
    typer.echo(f"🔗 links for {drink_id}: {len(report.linked_shop_ids)}")
    typer.echo("📍 distance from test origin:")
    for match in report.origin_distances:
        typer.echo(f"   - {match.name}: {match.distance_km:.2f}km")
    typer.echo(f"🎯 within {radius}km of reference:")
    for match in report.distances:
        mark = "✅" if match.within_range else "❌"
        linked = "🔗" if match.id in report.linked_shop_ids else ""
        typer.echo(f"   - {match.name}: {match.distance_km:.2f}km {mark}{linked}")
    typer.echo(report.diagnosis)
