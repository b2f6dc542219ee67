"""
Tests for page/size to offset/limit mapping.
"""

import pytest

from todokit.pagination import MAX_PAGE, MAX_PAGE_SIZE, PaginationRequest
from todokit.query_builder import QueryBuilder


class TestPaginationRequest:
    """Test cases for PaginationRequest"""

    def test_first_page(self):
        assert PaginationRequest(page=1, size=10).window() == (0, 10)

    def test_third_page(self):
        pagination = PaginationRequest(page=3, size=20)

        assert pagination.offset == 40
        assert pagination.limit == 20

    def test_defaults(self):
        assert PaginationRequest().window() == (0, 10)

    @pytest.mark.parametrize("page", [0, -5])
    def test_page_clamped_to_one(self, page):
        assert PaginationRequest(page=page, size=10).page == 1

    @pytest.mark.parametrize("size", [0, -1])
    def test_size_clamped_to_one(self, size):
        assert PaginationRequest(page=1, size=size).size == 1

    def test_size_clamped_to_ceiling(self):
        assert PaginationRequest(page=1, size=10_000).size == MAX_PAGE_SIZE

    def test_garbage_input_uses_defaults(self):
        pagination = PaginationRequest(page="abc", size=None)

        assert pagination.window() == (0, 10)

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_input_uses_defaults(self, value):
        pagination = PaginationRequest(page=value, size=value)

        assert pagination.window() == (0, 10)

    def test_huge_page_keeps_offset_in_bigint_range(self):
        pagination = PaginationRequest(page=10**20, size=MAX_PAGE_SIZE)

        assert pagination.page == MAX_PAGE
        assert pagination.offset <= 2**63 - 1

    def test_numeric_strings_accepted(self):
        assert PaginationRequest(page="2", size="5").window() == (5, 5)

    def test_capped(self):
        assert PaginationRequest(page=2, size=50).capped(20).window() == (20, 20)


class TestBuilderPaginate:
    """Test cases for QueryBuilder.paginate"""

    def test_paginate_basic(self):
        query, _ = QueryBuilder("todos").paginate(page=1, per_page=10).build()

        assert query == "SELECT * FROM todos LIMIT 10 OFFSET 0"

    def test_paginate_clamps(self):
        query, _ = QueryBuilder("todos").paginate(page=0, per_page=0).build()

        assert query == "SELECT * FROM todos LIMIT 1 OFFSET 0"

    def test_paginate_non_finite_input(self):
        query, _ = QueryBuilder("todos").paginate(float("inf"), float("nan")).build()

        assert query == "SELECT * FROM todos LIMIT 10 OFFSET 0"

    def test_limit_and_offset(self):
        query, _ = QueryBuilder("todos").limit(5).offset(15).build()

        assert query == "SELECT * FROM todos LIMIT 5 OFFSET 15"
