"""
Tests for listing criteria parsing and query composition.
"""

import pytest

from catalogo.services import product_filters as filters
from catalogo.services.product_filters import FilterCriteria, apply_filters

from conftest import InMemoryRepository, SAMPLE_ROWS


def _run(args, rows=SAMPLE_ROWS):
    repo = InMemoryRepository(rows)
    query = apply_filters(repo.products_query(), FilterCriteria.from_args(args))
    return query, query.execute()


class TestFilterCriteria:

    def test_defaults_when_nothing_is_given(self):
        criteria = FilterCriteria.from_args({})
        assert criteria.category is None
        assert criteria.store is None
        assert criteria.term is None
        assert criteria.fuzzy is False
        assert criteria.page == 1
        assert criteria.page_size == 1000
        assert criteria.order_by == "nome_asc"
        assert criteria.window == (0, 999)

    def test_text_values_are_trimmed_and_blank_means_no_filter(self):
        criteria = FilterCriteria.from_args({"categoria": "  bebidas ", "loja": "   ", "termo": ""})
        assert criteria.category == "bebidas"
        assert criteria.store is None
        assert criteria.term is None

    @pytest.mark.parametrize("raw, expected", [
        ("true", True),
        ("TRUE", True),
        ("True", True),
        ("false", False),
        ("1", False),
        ("yes", False),
        ("", False),
        (" true", False),
        ("true ", False),
    ])
    def test_fuzzy_flag_only_accepts_true(self, raw, expected):
        assert FilterCriteria.from_args({"fuzzy": raw}).fuzzy is expected

    @pytest.mark.parametrize("page, limit, expected_page, expected_size", [
        ("2", "50", 2, 50),
        ("abc", "xyz", 1, 1000),
        ("0", "0", 1, 1000),
        ("-3", "-10", 1, 1000),
        ("1", "5000", 1, 1000),
        ("3", "1000", 3, 1000),
        (" 4 ", " 25 ", 4, 25),
        ("2.5", "50.9", 2, 50),
        ("3abc", "20px", 3, 20),
        ("+2", "+30", 2, 30),
        ("px2", "abc20", 1, 1000),
        ("0.9", "-0", 1, 1000),
    ])
    def test_pagination_parsing(self, page, limit, expected_page, expected_size):
        criteria = FilterCriteria.from_args({"page": page, "limit": limit})
        assert criteria.page == expected_page
        assert criteria.page_size == expected_size

    def test_window_is_inclusive(self):
        criteria = FilterCriteria.from_args({"page": "3", "limit": "20"})
        assert criteria.offset == 40
        assert criteria.window == (40, 59)

    def test_order_by_is_kept_but_never_applied(self):
        query, _ = _run({"orderBy": "preco_desc"})
        assert FilterCriteria.from_args({"orderBy": "preco_desc"}).order_by == "preco_desc"
        assert ("order", "nome", True) in query.calls
        assert all(call[0] != "order" or call[1] == "nome" for call in query.calls)


class TestApplyFilters:

    def test_no_filters_only_orders_and_paginates(self):
        query, rows = _run({})
        assert query.calls == [("order", "nome", True), ("range", 0, 999)]
        assert len(rows) == len(SAMPLE_ROWS)

    def test_exact_category_uses_equality(self):
        query, rows = _run({"categoria": "bebidas"})
        assert ("eq", "categoria", "bebidas") in query.calls
        # "Bebidas Quentes" is a superstring and must not match in exact mode
        assert [r["id"] for r in rows] == [2]

    def test_fuzzy_category_matches_substring_case_insensitively(self):
        query, rows = _run({"categoria": "bebidas", "fuzzy": "true"})
        assert ("ilike", "categoria", "bebidas") in query.calls
        assert {r["id"] for r in rows} == {1, 2, 4}

    def test_exact_store_does_not_match_partial_names(self):
        _, rows = _run({"loja": "MercadoX"})
        assert {r["id"] for r in rows} == {1, 4}

    def test_fuzzy_flag_is_shared_by_category_and_store(self):
        query, rows = _run({"categoria": "quentes", "loja": "mercadox", "fuzzy": "true"})
        assert ("ilike", "categoria", "quentes") in query.calls
        assert ("ilike", "loja", "mercadox") in query.calls
        assert {r["id"] for r in rows} == {1, 4}

    @pytest.mark.parametrize("fuzzy", ["true", "false", None])
    def test_term_is_always_substring_over_name_or_description(self, fuzzy):
        args = {"termo": "CHOCOLATE"}
        if fuzzy is not None:
            args["fuzzy"] = fuzzy
        query, rows = _run(args)
        assert ("or_ilike", ("nome", "descricao"), "CHOCOLATE") in query.calls
        # id 3 matches on descricao, id 4 on nome
        assert {r["id"] for r in rows} == {3, 4}

    def test_filters_are_combined_with_and(self):
        _, rows = _run({"categoria": "Bebidas Quentes", "loja": "MercadoX", "termo": "café"})
        assert [r["id"] for r in rows] == [1]

    def test_results_are_sorted_by_name(self):
        _, rows = _run({"loja": "MercadoX"})
        assert [r["nome"] for r in rows] == ["Café Torrado", "Chocolate Quente"]

    def test_page_window_is_applied(self):
        query, rows = _run({"page": "2", "limit": "1", "loja": "MercadoX"})
        assert ("range", 1, 1) in query.calls
        assert [r["id"] for r in rows] == [4]

    def test_no_match_yields_empty_list(self):
        _, rows = _run({"categoria": "inexistente"})
        assert rows == []

    def test_limit_is_capped(self):
        query, _ = _run({"limit": "99999"})
        assert ("range", 0, filters.MAX_PAGE_SIZE - 1) in query.calls
