# tests/test_filters.py
import pytest

from product_api.errors import InvalidQueryError
from product_api.filters import MAX_SKIP, Bounds, build_product_query


def test_no_params_gives_defaults():
    q = build_product_query({})
    assert q.to_mongo() == {}
    assert q.sort_spec() == [("createdAt", -1), ("_id", -1)]
    assert (q.page, q.limit, q.skip) == (1, 10, 0)


def test_all_filters_render_as_mongo_document():
    q = build_product_query({
        "category": "Computers",
        "inStock": "true",
        "minPrice": "1000",
        "maxPrice": "2000",
        "minQuantity": "5",
        "name": "MacBook",
        "description": "chip",
    })
    assert q.to_mongo() == {
        "category": "Computers",
        "inStock": True,
        "price": {"$gte": 1000.0, "$lte": 2000.0},
        "quantity": {"$gte": 5.0},
        "name": {"$regex": "MacBook", "$options": "i"},
        "description": {"$regex": "chip", "$options": "i"},
    }


def test_substring_terms_are_escaped():
    q = build_product_query({"name": "a.b*"})
    assert q.to_mongo()["name"]["$regex"] == "a\\.b\\*"


def test_in_stock_anything_but_true_is_false():
    assert build_product_query({"inStock": "false"}).in_stock is False
    assert build_product_query({"inStock": "1"}).in_stock is False
    assert build_product_query({"inStock": "true"}).in_stock is True


def test_empty_strings_are_ignored():
    q = build_product_query({"category": "", "minPrice": "", "page": "", "sortBy": ""})
    assert q.to_mongo() == {}
    assert q.page == 1
    assert q.sort_by == "createdAt"


def test_ascending_sort():
    q = build_product_query({"sortBy": "price", "sortOrder": "asc"})
    assert q.sort_spec() == [("price", 1), ("_id", 1)]
    assert build_product_query({"sortOrder": "ASC"}).descending is True


def test_skip_from_page_and_limit():
    q = build_product_query({"page": "3", "limit": "25"})
    assert q.skip == 50
    assert q.total_pages(51) == 3
    assert q.total_pages(50) == 2


@pytest.mark.parametrize("raw, expected", [("0", 10), ("-2", 10), ("x", 10), ("1.5", 10), ("250", 100), ("7", 7)])
def test_limit_guard(raw, expected):
    assert build_product_query({"limit": raw}).limit == expected


@pytest.mark.parametrize("param", ["minPrice", "maxPrice", "minQuantity", "maxQuantity"])
@pytest.mark.parametrize("raw", ["abc", "nan", "inf"])
def test_bad_numeric_bounds_rejected(param, raw):
    with pytest.raises(InvalidQueryError) as excinfo:
        build_product_query({param: raw})
    assert excinfo.value.param == param
    assert excinfo.value.status_code == 400


def test_unknown_sort_field_rejected():
    with pytest.raises(InvalidQueryError):
        build_product_query({"sortBy": "$where"})


def test_matches_document():
    doc = {
        "name": "Test MacBook",
        "description": "High-end laptop with M1 chip",
        "price": 1499.99,
        "category": "Computers",
        "inStock": True,
        "quantity": 30,
    }
    assert build_product_query({"name": "macbook", "maxPrice": "1500"}).matches(doc)
    assert build_product_query({"description": "M1 CHIP"}).matches(doc)
    assert not build_product_query({"category": "computers"}).matches(doc)
    assert not build_product_query({"inStock": "false"}).matches(doc)
    assert not build_product_query({"minQuantity": "31"}).matches(doc)


def test_bounds_inclusive():
    b = Bounds(gte=10, lte=20)
    assert b.contains(10) and b.contains(20)
    assert not b.contains(9.99) and not b.contains(20.01)
    assert Bounds(lte=5).to_mongo() == {"$lte": 5}


def test_page_beyond_int64_offset_falls_back():
    q = build_product_query({"page": "99999999999999999999"})
    assert q.page == 1
    assert q.skip == 0

    q = build_product_query({"page": str(MAX_SKIP // 100 + 1), "limit": "100"})
    assert q.skip <= MAX_SKIP
    assert q.page > 1


def test_substring_match_uses_simple_lowercase():
    doc = {"name": "Straße Bike", "description": "Rennrad"}
    assert build_product_query({"name": "straße"}).matches(doc)
    assert not build_product_query({"name": "STRASSE"}).matches(doc)
