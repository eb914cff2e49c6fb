"""drink_shop_links generation, population and deletion."""

import math
import random
from collections import Counter

import pytest
from google.cloud import firestore

from OSAKEL.core.cli import MigrationError
from OSAKEL.Links.generator import LINK_NOTES, PRICE_MAX, PRICE_MIN, generate_links
from OSAKEL.Links.links import all_document_ids, collection_stats, delete_all_links, populate_links
from OSAKEL.Links.models import DrinkShopLink, LinkGenerationConfig

SHOPS = [f"shop{i}" for i in range(25)]
DRINKS = [f"drink{i}" for i in range(12)]


# ============================================================================
# Config
# ============================================================================


class TestLinkGenerationConfig:
    def test_random_preset(self):
        config = LinkGenerationConfig(mode="random")
        assert config.bounds(12) == (3, 8)

    def test_custom_defaults_to_every_drink(self):
        config = LinkGenerationConfig(mode="custom")
        assert config.bounds(12) == (1, 12)

    def test_min_over_max_rejected(self):
        with pytest.raises(ValueError):
            LinkGenerationConfig(mode="custom", min_drinks_per_shop=5, max_drinks_per_shop=2)

    def test_non_positive_bounds_rejected(self):
        with pytest.raises(ValueError):
            LinkGenerationConfig(mode="custom", min_drinks_per_shop=0)

    def test_estimated_total(self):
        assert LinkGenerationConfig(mode="all").estimated_total(4, 10) == 40
        assert LinkGenerationConfig(mode="random").estimated_total(2, 10) == 11


# ============================================================================
# Generator
# ============================================================================


class TestGenerateLinks:
    def test_counts_within_bounds(self):
        config = LinkGenerationConfig(mode="custom", min_drinks_per_shop=2, max_drinks_per_shop=5)
        links = generate_links(SHOPS, DRINKS, config, random.Random(1))

        per_shop = Counter(link.shopId for link in links)
        assert set(per_shop) == set(SHOPS)
        assert all(2 <= count <= 5 for count in per_shop.values())

    def test_random_mode_bounds_over_many_seeds(self):
        config = LinkGenerationConfig(mode="random")
        for seed in range(20):
            links = generate_links(SHOPS[:3], DRINKS, config, random.Random(seed))
            per_shop = Counter(link.shopId for link in links)
            assert all(3 <= count <= 8 for count in per_shop.values())

    def test_all_mode_links_every_pair(self):
        links = generate_links(SHOPS[:3], DRINKS[:4], LinkGenerationConfig(mode="all"), random.Random(0))
        assert {(l.shopId, l.drinkId) for l in links} == {(s, d) for s in SHOPS[:3] for d in DRINKS[:4]}

    def test_drinks_are_distinct_per_shop(self):
        links = generate_links(SHOPS, DRINKS, LinkGenerationConfig(mode="random"), random.Random(3))
        pairs = [(l.shopId, l.drinkId) for l in links]
        assert len(pairs) == len(set(pairs))

    def test_count_capped_at_available_drinks(self):
        config = LinkGenerationConfig(mode="custom", min_drinks_per_shop=5, max_drinks_per_shop=9)
        links = generate_links(["s1"], ["d1", "d2"], config, random.Random(0))
        assert sorted(l.drinkId for l in links) == ["d1", "d2"]

    def test_synthetic_attributes(self):
        links = generate_links(SHOPS, DRINKS, LinkGenerationConfig(mode="all"), random.Random(11))
        assert all(PRICE_MIN <= l.price <= PRICE_MAX for l in links)
        assert all(l.note in LINK_NOTES for l in links)
        assert all(l.id == f"{l.drinkId}_{l.shopId}" for l in links)
        available = sum(l.isAvailable for l in links) / len(links)
        assert 0.8 < available < 0.97

    def test_same_seed_reproduces_run(self):
        config = LinkGenerationConfig(mode="random")
        first = generate_links(SHOPS, DRINKS, config, random.Random(42))
        second = generate_links(SHOPS, DRINKS, config, random.Random(42))
        assert [l.model_dump() for l in first] == [l.model_dump() for l in second]

    def test_build_id(self):
        assert DrinkShopLink.build_id("d1_duplicated", "shop9") == "d1_duplicated_shop9"


# ============================================================================
# Firestore operations
# ============================================================================


def _seeded_db(make_db, shops=5, drinks=6):
    return make_db({
        "shops": {f"shop{i}": {"name": f"Shop {i}"} for i in range(shops)},
        "drinks": {f"drink{i}": {"name": f"Drink {i}"} for i in range(drinks)},
    })


class TestPopulateLinks:
    def test_writes_all_generated_links(self, make_db, no_sleep):
        sleep, _ = no_sleep
        db = _seeded_db(make_db)

        result = populate_links(db, LinkGenerationConfig(mode="all"), random.Random(0), sleep=sleep)

        links = db.docs("drink_shop_links")
        assert result.written == 30
        assert len(links) == 30
        link = links["drink2_shop3"]
        assert link["drinkId"] == "drink2"
        assert link["shopId"] == "shop3"
        assert link["createdAt"] is firestore.SERVER_TIMESTAMP
        assert link["updatedAt"] is firestore.SERVER_TIMESTAMP

    def test_batches_of_link_batch_size(self, make_db, no_sleep):
        sleep, calls = no_sleep
        db = _seeded_db(make_db, shops=40, drinks=30)

        result = populate_links(db, LinkGenerationConfig(mode="all"), random.Random(0), sleep=sleep)

        assert result.written == 1200
        assert result.batches == math.ceil(1200 / 500)
        assert db.commits == [500, 500, 200]
        assert len(calls) == 3

    def test_empty_source_raises(self, make_db):
        db = _seeded_db(make_db, shops=0)
        with pytest.raises(MigrationError):
            populate_links(db, LinkGenerationConfig(mode="random"), random.Random(0))
        assert db.commits == []


class TestDeleteAllLinks:
    def test_drains_collection(self, make_db, no_sleep):
        sleep, _ = no_sleep
        db = make_db({"drink_shop_links": {f"l{i}": {"price": i} for i in range(1100)}})

        result = delete_all_links(db, sleep=sleep)

        assert result.batches == 3
        assert result.written == 1100
        assert db.docs("drink_shop_links") == {}


def test_collection_stats(make_db):
    db = _seeded_db(make_db, shops=2, drinks=3)
    db.data["drink_shop_links"] = {"x": {}}
    assert collection_stats(db) == {"shops": 2, "drinks": 3, "links": 1}


def test_all_document_ids_reads_ids_only(make_db):
    db = _seeded_db(make_db, shops=3, drinks=1)

    assert all_document_ids(db, "shops") == ["shop0", "shop1", "shop2"]
    assert db.projections == [("shops", ())]
    assert [doc.to_dict() for doc in db.collection("shops").select([]).stream()] == [{}, {}, {}]


def test_populate_fetches_source_ids_with_empty_projection(make_db, no_sleep):
    sleep, _ = no_sleep
    db = _seeded_db(make_db, shops=2, drinks=2)

    populate_links(db, LinkGenerationConfig(mode="all"), random.Random(0), sleep=sleep)

    assert ("shops", ()) in db.projections
    assert ("drinks", ()) in db.projections
