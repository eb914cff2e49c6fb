# Links/generator.py
import random
from typing import List, Optional, Sequence

from OSAKEL.Links.models import DrinkShopLink, LinkGenerationConfig

# ==============================
# Synthetic attributes
# ==============================
PRICE_MIN = 300
PRICE_MAX = 2000
AVAILABILITY_PROBABILITY = 0.9

LINK_NOTES = [
    "",
    "おすすめ",
    "限定品",
    "人気商品",
    "季節限定",
    "新商品",
    "セール中",
]


def random_price(rng: random.Random) -> int:
    """Yen, inclusive on both ends."""
    return rng.randint(PRICE_MIN, PRICE_MAX)


def random_availability(rng: random.Random) -> bool:
    return rng.random() < AVAILABILITY_PROBABILITY


def random_note(rng: random.Random) -> str:
    return rng.choice(LINK_NOTES)


def pick_drinks_for_shop(drink_ids: Sequence[str], config: LinkGenerationConfig,
                         rng: random.Random) -> List[str]:
    if config.mode == "all":
        return list(drink_ids)

    low, high = config.bounds(len(drink_ids))
    count = min(rng.randint(low, high), len(drink_ids))
    return rng.sample(list(drink_ids), count)


def generate_links(
    shop_ids: Sequence[str],
    drink_ids: Sequence[str],
    config: LinkGenerationConfig,
    rng: Optional[random.Random] = None,
) -> List[DrinkShopLink]:
    """
    Link each shop to a set of drinks with a random price, availability and note.
    Pass a seeded ``random.Random`` to reproduce a run.
    """
    rng = rng or random.Random()
    links = []
    for shop_id in shop_ids:
        for drink_id in pick_drinks_for_shop(drink_ids, config, rng):
            links.append(DrinkShopLink(
                id=DrinkShopLink.build_id(drink_id, shop_id),
                drinkId=drink_id,
                shopId=shop_id,
                price=random_price(rng),
                isAvailable=random_availability(rng),
                note=random_note(rng),
            ))
    return links
