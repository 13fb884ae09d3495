from datetime import date

import pytest

from pagewalk import Filter, FilterOperator, QuerySpec, Record, SortDirection, between_dates


class TestFilter:
    def test_symbolic_operator(self):
        f = Filter("status", "==", "approved")
        assert f.operator is FilterOperator.EQUALS

    def test_list_values_become_hashable(self):
        f = Filter("strand", "in", ["STEM", "ABM"])
        assert f.value == ("STEM", "ABM")
        assert hash(f)

    def test_unknown_operator_raises(self):
        with pytest.raises(ValueError):
            Filter("status", "~=", "x")


class TestQuerySpec:
    def test_invalid_page_size_raises(self):
        with pytest.raises(ValueError, match="page_size must be >= 1"):
            QuerySpec(order_by_field="id", page_size=0)

    def test_direction_from_string(self):
        spec = QuerySpec(order_by_field="createdAt", order_direction="desc")
        assert spec.order_direction is SortDirection.DESCENDING

    def test_filters_from_tuples(self):
        spec = QuerySpec(order_by_field="id", filters=[("grade", ">", 10)])
        assert spec.filters == (Filter("grade", FilterOperator.GREATER_THAN, 10),)

    def test_search_only_change_is_equivalent(self):
        spec = QuerySpec(order_by_field="id", search_fields={"name"})
        assert spec.equivalent(spec.with_search("ana"))

    def test_other_changes_are_not_equivalent(self):
        spec = QuerySpec(order_by_field="id", page_size=10)
        assert not spec.equivalent(spec.with_order("name"))
        assert not spec.equivalent(spec.with_order("id", SortDirection.DESCENDING))
        assert not spec.equivalent(spec.with_filters(("strand", "==", "STEM")))
        assert not spec.equivalent(QuerySpec(order_by_field="id", page_size=20))
        assert not spec.equivalent(None)

    def test_search_active(self):
        spec = QuerySpec(order_by_field="id")
        assert not spec.with_search("ana").search_active
        with_fields = QuerySpec(order_by_field="id", search_fields={"name"})
        assert not with_fields.with_search("   ").search_active
        assert with_fields.with_search("ana").search_active

    def test_immutability(self):
        spec = QuerySpec(order_by_field="id")
        searched = spec.with_search("ana")
        assert spec.search_term == ""
        assert searched is not spec

    def test_for_record(self):
        class Enrollee(Record):
            name: str

            class Settings:
                order_by = "-createdAt"
                search_fields = ("name", "email")
                page_size = 5

        spec = QuerySpec.for_record(Enrollee, search_term="ana")
        assert spec.order_by_field == "createdAt"
        assert spec.order_direction is SortDirection.DESCENDING
        assert spec.page_size == 5
        assert spec.search_fields == frozenset({"name", "email"})
        assert spec.search_term == "ana"


class TestBetweenDates:
    def test_covers_whole_days(self):
        start, end = between_dates("date", date(2024, 6, 1), "2024-06-30")
        assert start == Filter("date", ">=", "2024-06-01T00:00:00.000")
        assert end == Filter("date", "<=", "2024-06-30T23:59:59.999")

    def test_reversed_range_raises(self):
        with pytest.raises(ValueError):
            between_dates("date", "2024-06-30", "2024-06-01")
