"""Integration tests для TermQuery backend."""

import pytest

from wpmodel.query import TermQuery

pytestmark = pytest.mark.integration


@pytest.fixture
def query(wordpress):
    """TermQuery for the "genre" taxonomy."""
    return TermQuery({"taxonomy": "genre", "hide_empty": False}).set_object_type("genre")


class TestTermQuery:
    """Tests для TermQuery CRUD and queries."""

    def test_insert_requires_name(self, query):
        """Test: attributes without "name" → None."""
        assert query.insert({"slug": "drama"}) is None

    def test_insert_and_get_by_id(self, query):
        """Test: insert → term_id, get_by_id scoped to the taxonomy."""
        # Act
        term_id = query.insert({"name": "Drama", "description": "Serious"})
        term = query.get_by_id(term_id)

        # Assert
        assert term_id == 1
        assert term["name"] == "Drama"
        assert term["description"] == "Serious"
        assert query.get_by_id(0) is None
        assert TermQuery().set_object_type("category").get_by_id(term_id) is None

    def test_insert_duplicate_returns_none(self, query):
        """Test: WPError(term_exists) → None."""
        query.insert({"name": "Drama"})

        assert query.insert({"name": "Drama"}) is None

    def test_update(self, query):
        """Test: update → term_id, WPError → False."""
        term_id = query.insert({"name": "Drama"})

        assert query.update(term_id, {"name": "Tragedy"}) == term_id
        assert query.get_by_id(term_id)["name"] == "Tragedy"
        assert query.update(999, {"name": "x"}) is False

    def test_delete(self, query):
        """Test: delete → True, then False for the missing term."""
        term_id = query.insert({"name": "Drama"})

        assert query.delete(term_id) is True
        assert query.get_by_id(term_id) is None
        assert query.delete(term_id) is False

    def test_do_query_with_translated_vars(self, query):
        """Test: limit → number, select → fields."""
        # Arrange
        for name in ("Drama", "Action", "Comedy"):
            query.insert({"name": name})

        query.apply_query_var("limit", 2)
        query.apply_query_var("select", "names")

        # Act
        result = query.do_query(query.get_query_vars())

        # Assert
        assert query.extract_items(result) == ["Action", "Comedy"]
