import pytest
from sqlalchemy.exc import OperationalError

from models.portfolio import PortfolioItem
from utils.catalog import ALL_CATEGORY, FeedFetchError
from utils.feed import fetch_page, public_category_names, serialize_entry

from conftest import BASE_TIME, make_category, make_items


def _ids(page):
    return [i["id"] for i in page.items]


def test_featured_first_then_newest(db):
    make_category(db, "Food", 1)
    make_items(db, "Food", 5, featured=(1,))
    page = fetch_page(db, "Food", 0)
    assert _ids(page) == ["food-001", "food-004", "food-003", "food-002", "food-000"]
    assert not page.has_more


def test_fifteen_entries_paginate_twelve_then_three(db):
    make_category(db, "Food", 1)
    make_items(db, "Food", 15)
    first = fetch_page(db, "Food", 0)
    second = fetch_page(db, "Food", 1)
    assert len(first.items) == 12 and first.has_more
    assert len(second.items) == 3 and not second.has_more
    assert set(_ids(first)).isdisjoint(_ids(second))


def test_exact_multiple_needs_one_empty_page(db):
    make_category(db, "Food", 1)
    make_items(db, "Food", 24)
    pages = [fetch_page(db, "Food", i) for i in range(3)]
    assert [len(p.items) for p in pages] == [12, 12, 0]
    assert [p.has_more for p in pages] == [True, True, False]
    seen = _ids(pages[0]) + _ids(pages[1])
    assert len(seen) == len(set(seen)) == 24


def test_same_timestamp_breaks_ties_by_id(db):
    make_category(db, "Food", 1)
    for n in range(14):
        db.add(PortfolioItem(
            id=f"tie-{n:02d}",
            title=f"tie {n}",
            category="Food",
            image_url="https://cdn.example.com/x.jpg",
            created_at=BASE_TIME,
        ))
    db.commit()
    combined = _ids(fetch_page(db, "Food", 0)) + _ids(fetch_page(db, "Food", 1))
    assert combined == [f"tie-{n:02d}" for n in range(14)]


def test_all_excludes_protected_and_inactive(db):
    make_category(db, "Real Estate", 1)
    make_category(db, "Medical", 2, password="abc123")
    make_category(db, "Retired", 3, active=False)
    make_items(db, "Real Estate", 2)
    make_items(db, "Medical", 2)
    make_items(db, "Retired", 2)

    assert sorted(public_category_names(db)) == ["Real Estate"]
    page = fetch_page(db, ALL_CATEGORY, 0)
    assert {i["category"] for i in page.items} == {"Real Estate"}


def test_all_with_no_public_categories_is_empty(db):
    make_category(db, "Medical", 1, password="abc123")
    make_items(db, "Medical", 3)
    page = fetch_page(db, ALL_CATEGORY, 0)
    assert page.items == [] and not page.has_more


def test_explicit_protected_category_is_served(db):
    make_category(db, "Medical", 1, password="abc123")
    make_items(db, "Medical", 3)
    assert len(fetch_page(db, "Medical", 0).items) == 3


def test_unknown_category_is_empty(db):
    assert fetch_page(db, "Nope", 0).items == []


def test_negative_page_rejected(db):
    with pytest.raises(ValueError):
        fetch_page(db, ALL_CATEGORY, -1)


def test_storage_failure_is_not_an_empty_page():
    class BrokenSession:
        def query(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("database is down"))

    with pytest.raises(FeedFetchError):
        fetch_page(BrokenSession(), "Food", 0)


def test_serialized_entry_carries_media(db):
    make_category(db, "Food", 1)
    [rec] = make_items(db, "Food", 1)
    rec.video_url = "https://youtu.be/dQw4w9WgXcQ"
    db.commit()
    data = serialize_entry(rec)
    assert data["imageUrl"] == rec.image_url
    assert data["media"]["kind"] == "image"
    assert data["videoMedia"]["kind"] == "youtube"
    assert "password_hash" not in data
