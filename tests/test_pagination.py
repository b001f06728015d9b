"""tests/test_pagination.py: Page math and PaginatedCollection."""

import json

import pytest
from jsondb.collection import Collection
from jsondb.pagination import PageBounds, PaginatedCollection, page_bounds


class TestPageBounds:
    def test_first_page(self):
        assert page_bounds(25, 10, 1) == PageBounds(current_page=1, start=1, end=10, last_page=3)

    def test_last_partial_page(self):
        b = page_bounds(25, 10, 3)
        assert (b.start, b.end) == (21, 25)

    def test_page_is_clamped_to_one(self):
        assert page_bounds(5, 10, 0).current_page == 1
        assert page_bounds(5, 10, -4).current_page == 1

    def test_empty_total_has_one_page(self):
        b = page_bounds(0, 10, 1)
        assert b.last_page == 1
        assert b.end < b.start

    def test_page_past_the_end_is_empty(self):
        b = page_bounds(5, 10, 4)
        assert b.start == 31
        assert b.end == 5

    def test_exact_multiple(self):
        assert page_bounds(20, 10, 1).last_page == 2

    def test_invalid_per_page(self):
        with pytest.raises(ValueError):
            page_bounds(10, 0, 1)


class TestPaginatedCollection:
    def test_data_keys(self):
        p = PaginatedCollection(Collection(list(range(12))), per_page=5, page=2)
        assert p.data == {
            "current_page": 2,
            "data": [5, 6, 7, 8, 9],
            "from": 6,
            "total": 12,
            "last_page": 3,
            "per_page": 5,
            "to": 10,
        }

    def test_page_past_the_end(self):
        p = PaginatedCollection(Collection([1, 2]), per_page=5, page=3)
        assert p.is_empty()
        assert p.data["data"] == []

    def test_sparse_collection(self):
        c = Collection([1, 2, 3, 4])
        c.forget(0)
        p = PaginatedCollection(c, per_page=2, page=1)
        assert p.data["data"] == [2, 3]
        assert p.data["total"] == 3

    def test_extend(self):
        p = PaginatedCollection(Collection([1]))
        assert p.extend("path", "/users") is p
        assert p.to_array()["path"] == "/users"

    def test_to_json(self):
        p = PaginatedCollection(Collection([{"id": 1}]), per_page=1)
        assert json.loads(p.to_json())["data"] == [{"id": 1}]
