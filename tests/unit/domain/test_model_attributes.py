"""Tests для Model attribute access, identity and serialization.

Жодного backend-у: тільки in-memory стан моделі.
"""

import json

import pytest

from wpmodel.domain.collection import Collection
from wpmodel.domain.model import Model


class Book(Model):
    object_type = "book"
    table = "books"


class Genre(Model):
    object_type = "genre"
    table = "genres"
    primary_key = "genre_id"


class TestModelConstruction:
    """Tests для construction / fill."""

    def test_new_model_does_not_exist(self):
        """Test: fresh model is not persisted."""
        book = Book()

        assert book.exists is False
        assert book.recently_created is False
        assert book.get_key() is None
        assert book.get_id() is None

    def test_constructor_attributes_are_dirty(self):
        """Test: attributes passed to the constructor stay dirty until saved."""
        # Arrange & Act
        book = Book({"title": "Dune", "year": 1965})

        # Assert
        assert book.is_dirty() is True
        assert book.get_dirty() == {"title": "Dune", "year": 1965}

    def test_fill_is_fluent(self):
        """Test: fill() повертає model."""
        book = Book()

        assert book.fill({"title": "Dune"}) is book
        assert book.title == "Dune"


class TestModelAttributeAccess:
    """Tests для attribute / item access."""

    def test_attribute_access_routes_to_store(self):
        """Test: model.x = v пише в attributes, model.x читає."""
        # Arrange
        book = Book()

        # Act
        book.title = "Dune"

        # Assert
        assert book.title == "Dune"
        assert book.get_attribute("title") == "Dune"
        assert "title" in book.get_attributes()

    def test_missing_attribute_reads_none(self):
        """Test: unknown attribute → None, not AttributeError."""
        book = Book()

        assert book.anything is None
        assert book["anything"] is None

    def test_item_access(self):
        """Test: model["x"] mirrors attribute access."""
        # Arrange
        book = Book()

        # Act
        book["title"] = "Dune"

        # Assert
        assert book["title"] == "Dune"
        assert "title" in book
        assert "missing" not in book

        del book["title"]
        assert book.title is None

    def test_delattr_removes_attribute(self):
        """Test: del model.x removes the attribute."""
        book = Book({"title": "Dune"})

        del book.title

        assert "title" not in book.get_attributes()

    def test_state_flags_are_not_attributes(self):
        """Test: exists / recently_created не потрапляють в attributes."""
        book = Book()

        book.exists = True

        assert book.exists is True
        assert "exists" not in book.get_attributes()

    def test_private_names_raise_attribute_error(self):
        """Test: _private lookups are not routed to attributes."""
        book = Book()

        with pytest.raises(AttributeError):
            book._missing_private

    def test_id_reads_primary_key(self):
        """Test: model.id returns the value of primary_key."""
        genre = Genre()
        genre.genre_id = "12"

        assert genre.id == "12"
        assert genre.get_key_name() == "genre_id"
        assert genre.get_id() == 12

    def test_only_returns_subset(self):
        """Test: only() returns a subset of attributes."""
        book = Book({"title": "Dune", "year": 1965, "pages": 412})

        assert book.only("title", "pages") == {"title": "Dune", "pages": 412}

    def test_sanitize_attribute_filter(self, dispatcher):
        """Test: "sanitize_attribute" filter receives value, key and model."""
        # Arrange
        seen = []

        def strip_strings(value, key, model):
            seen.append((key, type(model).__name__))
            return value.strip() if isinstance(value, str) else value

        Book.on("sanitize_attribute", strip_strings)

        # Act
        book = Book({"title": "  Dune  "})

        # Assert
        assert book.title == "Dune"
        assert seen == [("title", "Book")]

    def test_revert_attribute(self):
        """Test: revert_attribute() restores original value."""
        # Arrange
        book = Book().set_raw_attributes({"ID": 1, "title": "Dune"}, sync=True)
        book.title = "Other"

        # Act
        book.revert_attribute("title")

        # Assert
        assert book.title == "Dune"
        assert book.is_clean() is True


class TestModelHydration:
    """Tests для new_from_builder / new_collection."""

    def test_new_from_builder_is_existing_and_clean(self):
        """Test: hydrated model exists and has nothing dirty."""
        # Arrange
        prototype = Book()

        # Act
        book = prototype.new_from_builder({"ID": "3", "title": "Dune"})

        # Assert
        assert book.exists is True
        assert book.is_clean() is True
        assert book.get_id() == 3
        assert book.get_original("title") == "Dune"

    def test_new_from_builder_with_bare_id(self):
        """Test: fields="ids" rows (bare IDs) become {primary_key: id}."""
        book = Book().new_from_builder(7)

        assert book.get_attributes() == {"ID": 7}

    def test_new_from_builder_fires_retrieved(self, dispatcher):
        """Test: "retrieved" fires for every hydrated model."""
        # Arrange
        retrieved = []
        Book.retrieved(lambda model: retrieved.append(model.get_id()))

        # Act
        Book().new_from_builder({"ID": 1})
        Book().new_from_builder({"ID": 2})

        # Assert
        assert retrieved == [1, 2]

    def test_new_collection_maps_into_model(self):
        """Test: new_collection(map=True) wraps raw attributes into models."""
        # Arrange
        prototype = Book()

        # Act
        collection = prototype.new_collection([{"title": "A"}, {"title": "B"}], map=True)

        # Assert
        assert isinstance(collection, Collection)
        assert [book.title for book in collection] == ["A", "B"]
        assert all(isinstance(book, Book) for book in collection)

    def test_get_key_for_save_uses_original_key(self):
        """Test: changed primary key still saves the original row."""
        book = Book().new_from_builder({"ID": 5})

        book.ID = 6

        assert book.get_key_for_save() == 5


class TestModelIdentity:
    """Tests для __eq__ / __hash__ / serialization."""

    def test_same_class_same_key_is_equal(self):
        """Test: models with the same class and key are equal."""
        first = Book().new_from_builder({"ID": 1})
        second = Book().new_from_builder({"ID": "1"})

        assert first == second
        assert hash(first) == hash(second)

    def test_different_classes_are_not_equal(self):
        """Test: same key, different class → not equal."""
        assert Book().new_from_builder({"ID": 1}) != Genre().new_from_builder({"genre_id": 1})

    def test_new_models_equal_only_to_themselves(self):
        """Test: models without a key are compared by identity."""
        first = Book()
        second = Book()

        assert first == first
        assert first != second

    def test_to_array_and_to_json(self):
        """Test: to_array() is a copy, to_json() is JSON of attributes."""
        # Arrange
        book = Book({"title": "Dune", "year": 1965})

        # Act
        array = book.to_array()
        array["title"] = "changed"

        # Assert
        assert book.title == "Dune"
        assert json.loads(book.to_json()) == {"title": "Dune", "year": 1965}
        assert json.loads(str(book)) == {"title": "Dune", "year": 1965}

    def test_repr(self):
        """Test: repr shows class, key and exists flag."""
        book = Book().new_from_builder({"ID": 4})

        assert repr(book) == "Book(ID=4, exists=True)"

    def test_default_table_and_internal_type(self):
        """Test: models without a table use "posts"."""

        class Untitled(Model):
            pass

        model = Untitled()

        assert model.get_table() == "posts"
        assert model.resolve_internal_type() == "post"
        assert model.get_object_type() is None
