"""Category field updates by id and by name."""

import pytest

from OSAKEL.Categories.update_field import update_category_field, update_category_field_by_name


@pytest.fixture
def db(make_db):
    return make_db({"categories": {"beer": {"name": "Beer", "subcategories": ["ipa"]}}})


def test_update_by_id_merges_field(db):
    result = update_category_field(db, "beer", "tags", ["craft", "draft"])

    assert result["success"] is True
    assert result["categoryId"] == "beer"
    assert db.docs("categories")["beer"] == {
        "name": "Beer",
        "subcategories": ["ipa"],
        "tags": ["craft", "draft"],
    }


def test_update_by_id_creates_missing_document(db):
    update_category_field(db, "sake", "tags", ["junmai"])
    assert db.docs("categories")["sake"] == {"tags": ["junmai"]}


def test_update_by_name_existing(db):
    result = update_category_field_by_name(db, "Beer", "subcategories", ["ipa", "stout"])

    assert result["newCategory"] is False
    assert result["categoryId"] == "beer"
    assert db.docs("categories")["beer"]["subcategories"] == ["ipa", "stout"]


def test_update_by_name_creates_category(db):
    result = update_category_field_by_name(db, "Whisky", "subcategories", ["scotch"])

    assert result["newCategory"] is True
    created = db.docs("categories")[result["categoryId"]]
    assert created == {"name": "Whisky", "subcategories": ["scotch"]}
    assert len(db.docs("categories")) == 2


@pytest.mark.parametrize("target,field,values", [
    ("", "tags", ["a"]),
    ("beer", "", ["a"]),
    ("beer", "tags", "not-a-list"),
])
def test_invalid_parameters_rejected_before_any_call(make_db, target, field, values):
    db = make_db()
    with pytest.raises(ValueError):
        update_category_field(db, target, field, values)
    with pytest.raises(ValueError):
        update_category_field_by_name(db, target, field, values)
    assert db.reads == []
    assert db.data == {}
