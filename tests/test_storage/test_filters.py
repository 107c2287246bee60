"""
Tests for in-memory filter matching.
"""
from datetime import datetime

import pytest
from bson import ObjectId

from backlog.storage.filters import UnsupportedFilterError, matches, sort_key


DOC = {"title": "Dune", "category": "book", "rating": 5, "status": None}


class TestMatches:
    """Tests for matches()."""

    def test_empty_filter_matches_everything(self):
        """{} matches any document."""
        assert matches(DOC, {})

    def test_equality(self):
        """Every clause must match."""
        assert matches(DOC, {"title": "Dune", "category": "book"})
        assert not matches(DOC, {"title": "Dune", "category": "movie"})

    def test_missing_field_does_not_equal_value(self):
        """Equality on an absent field never matches a non-null value."""
        assert not matches(DOC, {"author": "Frank Herbert"})

    def test_nested_document_equality(self):
        """A plain dict condition is compared as a value."""
        doc = {"meta": {"source": "import"}}
        assert matches(doc, {"meta": {"source": "import"}})

    def test_bool_is_not_number(self):
        """True does not equal 1 the way it does in Python."""
        assert not matches({"flag": True}, {"flag": 1})
        assert matches({"flag": True}, {"flag": True})

    @pytest.mark.parametrize("condition,expected", [
        ({"$eq": 5}, True),
        ({"$ne": 5}, False),
        ({"$in": [4, 5]}, True),
        ({"$nin": [4, 5]}, False),
        ({"$exists": True}, True),
    ])
    def test_operators(self, condition, expected):
        """Each supported operator on a present scalar field."""
        assert matches(DOC, {"rating": condition}) is expected

    def test_operators_on_missing_field(self):
        """Operators against a field the document does not have."""
        assert matches(DOC, {"author": {"$exists": False}})
        assert matches(DOC, {"author": {"$ne": "x"}})
        assert not matches(DOC, {"author": {"$in": ["x"]}})

    def test_unsupported_operator_raises(self):
        """Operators outside the supported set are rejected."""
        with pytest.raises(UnsupportedFilterError):
            matches(DOC, {"title": {"$regex": "^D"}})

    def test_top_level_operator_raises(self):
        """Top-level logical operators are rejected."""
        with pytest.raises(UnsupportedFilterError):
            matches(DOC, {"$or": [{"title": "Dune"}]})

    def test_in_requires_array(self):
        """$in with a scalar operand is rejected."""
        with pytest.raises(UnsupportedFilterError):
            matches(DOC, {"rating": {"$in": 5}})


class TestNullMatching:
    """A None operand treats missing fields like explicit nulls."""

    @pytest.mark.parametrize("doc", [{"title": "Dune"}, {"title": "Dune", "status": None}])
    def test_none_equality_matches_missing_and_null(self, doc):
        """{"f": None} and $eq None match both missing and null."""
        assert matches(doc, {"status": None})
        assert matches(doc, {"status": {"$eq": None}})

    @pytest.mark.parametrize("doc", [{"title": "Dune"}, {"title": "Dune", "status": None}])
    def test_negated_none_rejects_missing_and_null(self, doc):
        """$ne None and $nin [None] reject both missing and null."""
        assert not matches(doc, {"status": {"$ne": None}})
        assert not matches(doc, {"status": {"$nin": [None, "done"]}})

    def test_in_none_matches_missing(self):
        """$in with None among its values accepts a missing field."""
        assert matches({"title": "Dune"}, {"status": {"$in": [None, "done"]}})

    def test_none_does_not_match_present_value(self):
        """A present non-null value is not None."""
        assert not matches({"status": "todo"}, {"status": None})
        assert matches({"status": "todo"}, {"status": {"$ne": None}})

    def test_none_matches_array_holding_null(self):
        """An array containing null matches a None operand."""
        assert matches({"tags": ["a", None]}, {"tags": None})


class TestArrayMatching:
    """A scalar operand matches an array field if any element does."""

    DOC = {"tags": ["roguelike", "indie"]}

    def test_equality_matches_any_element(self):
        """Plain equality and $eq look inside arrays."""
        assert matches(self.DOC, {"tags": "roguelike"})
        assert matches(self.DOC, {"tags": {"$eq": "indie"}})
        assert not matches(self.DOC, {"tags": "strategy"})

    def test_whole_array_equality(self):
        """An array operand still matches the whole array."""
        assert matches(self.DOC, {"tags": ["roguelike", "indie"]})
        assert not matches(self.DOC, {"tags": ["indie", "roguelike"]})

    def test_in_matches_any_element(self):
        """$in succeeds if any element is listed."""
        assert matches(self.DOC, {"tags": {"$in": ["strategy", "indie"]}})
        assert not matches(self.DOC, {"tags": {"$in": ["strategy"]}})

    def test_negated_operators_reject_any_element(self):
        """$ne and $nin fail if any element matches."""
        assert not matches(self.DOC, {"tags": {"$ne": "indie"}})
        assert not matches(self.DOC, {"tags": {"$nin": ["indie"]}})
        assert matches(self.DOC, {"tags": {"$ne": "strategy"}})
        assert matches(self.DOC, {"tags": {"$nin": ["strategy"]}})


class TestSortKey:
    """Tests for sort_key()."""

    def test_missing_and_none_sort_first(self):
        """Absent and null values sort together, before numbers."""
        docs = [{"rating": 3}, {}, {"rating": None}, {"rating": 1}]

        ordered = sorted(docs, key=sort_key("rating"))

        assert [d.get("rating") for d in ordered] == [None, None, 1, 3]

    def test_mixed_types_follow_type_order(self):
        """Values of different types sort by type rank without error."""
        oid = ObjectId()
        when = datetime(2024, 1, 1)
        docs = [
            {"v": True},
            {"v": "five"},
            {"v": when},
            {"v": {"a": 1}},
            {"v": 5},
            {"v": oid},
            {"v": None},
            {"v": 2.5},
        ]

        ordered = [d["v"] for d in sorted(docs, key=sort_key("v"))]

        assert ordered == [None, 2.5, 5, "five", {"a": 1}, oid, True, when]

    def test_array_sorts_by_smallest_element(self):
        """An array sorts ascending by its smallest element."""
        docs = [{"v": 4}, {"v": [9, 2]}, {"v": "a"}, {"v": []}]

        ordered = [d["v"] for d in sorted(docs, key=sort_key("v"))]

        assert ordered == [[], [9, 2], 4, "a"]
