"""Integration tests для HasMetadata mixin and the Metadata relation."""

import pytest

from wpmodel import HasMetadata, Metadata, Post, Term
from wpmodel.domain.concerns import normalize_mapping

pytestmark = pytest.mark.integration


class Product(HasMetadata, Post):
    object_type = "product"
    maps = {"price": "_price", "gallery": "gallery"}


class Genre(HasMetadata, Term):
    object_type = "genre"
    maps = ["icon"]


class TestNormalizeMapping:
    """Tests для maps normalization."""

    def test_forms(self):
        """Test: dict, list of names and mixed lists."""
        assert normalize_mapping({"price": "_price"}) == {"price": "_price"}
        assert normalize_mapping(["icon"]) == {"icon": "icon"}
        assert normalize_mapping(["gallery", {"price": "_price"}]) == {"gallery": "gallery", "price": "_price"}
        assert normalize_mapping(None) == {}


class TestMetaCrud:
    """Tests для get/add/update/delete_meta on models."""

    def test_meta_type_follows_model(self, wordpress):
        """Test: posts use "post" meta, terms use "term" meta."""
        assert Product().get_meta_type() == "post"
        assert Genre().get_meta_type() == "term"

    def test_update_and_get_meta(self, wordpress):
        """Test: update_meta writes, get_meta reads, missing key → None."""
        # Arrange
        product = Product({"post_title": "Lamp"})
        product.save()

        # Act
        updated = product.update_meta("color", "red")

        # Assert
        assert updated is True
        assert product.get_meta("color") == "red"
        assert product.get_meta("missing") is None
        assert wordpress.meta.get_metadata("post", product.get_id(), "color", single=True) == "red"

    def test_add_meta_is_unique(self, wordpress):
        """Test: second add_meta of the same key → False."""
        product = Product({"post_title": "Lamp"})
        product.save()

        assert isinstance(product.add_meta("color", "red"), int)
        assert product.add_meta("color", "blue") is False
        assert product.get_meta("color") == "red"

    def test_delete_meta(self, wordpress):
        """Test: delete_meta removes the key, missing key → False."""
        product = Product({"post_title": "Lamp"})
        product.save()
        product.update_meta("color", "red")

        assert product.delete_meta("color") is True
        assert product.get_meta("color") is None
        assert product.delete_meta("color") is False

    def test_meta_on_unsaved_model_fails(self, wordpress):
        """Test: model without ID cannot have meta."""
        product = Product({"post_title": "Lamp"})

        assert product.update_meta("color", "red") is False
        assert product.get_meta("color") is None


class TestMappedAttributes:
    """Tests для attribute ↔ meta key mapping."""

    def test_mapping_helpers(self, wordpress):
        """Test: has_mapping / get_mapping_metakey / get_mapping_attribute."""
        product = Product()

        assert product.has_mapping() is True
        assert product.has_mapping("price") is True
        assert product.has_mapping(["post_title", "gallery"]) is True
        assert product.has_mapping("post_title") is False
        assert product.get_mapping_metakey("price") == "_price"
        assert product.get_mapping_attribute("_price") == "price"
        assert product.get_mapping_attribute("unknown") is None

    def test_insert_writes_mapped_meta(self, wordpress):
        """Test: mapped attributes are saved as meta right after insert."""
        # Arrange
        product = Product({"post_title": "Lamp", "price": "9.99", "gallery": [1, 2]})

        # Act
        saved = product.save()

        # Assert
        assert saved is True
        assert wordpress.meta.get_metadata("post", product.get_id(), "_price", single=True) == "9.99"
        assert wordpress.meta.get_metadata("post", product.get_id(), "gallery", single=True) == [1, 2]
        assert product.is_clean() is True

    def test_hydration_loads_mapped_meta(self, wordpress):
        """Test: find() fills mapped attributes from meta, model stays clean."""
        # Arrange
        product = Product({"post_title": "Lamp", "price": "9.99"})
        product.save()

        # Act
        found = Product.find(product.get_id())

        # Assert
        assert found.price == "9.99"
        assert found.gallery is None
        assert found.is_clean() is True

    def test_update_writes_only_changed_meta(self, wordpress):
        """Test: changed mapped attribute is written on save."""
        # Arrange
        product = Product({"post_title": "Lamp", "price": "9.99"})
        product.save()
        found = Product.find(product.get_id())

        # Act
        found.price = "12.50"
        saved = found.save()

        # Assert
        assert saved is True
        assert found.is_clean() is True
        assert Product.find(product.get_id()).price == "12.50"

    def test_update_meta_syncs_mapped_attribute(self, wordpress):
        """Test: update_meta of a mapped key updates the attribute, clean."""
        product = Product({"post_title": "Lamp"})
        product.save()

        product.update_meta("_price", "5.00")

        assert product.price == "5.00"
        assert product.is_clean("price") is True

    def test_term_mapping(self, wordpress):
        """Test: HasMetadata on terms uses termmeta."""
        # Arrange
        genre = Genre({"name": "Drama", "icon": "mask"})

        # Act
        genre.save()
        found = Genre.find(genre.get_id())

        # Assert
        assert wordpress.meta.get_metadata("term", genre.get_id(), "icon", single=True) == "mask"
        assert found.icon == "mask"


class TestMetadataRelation:
    """Tests для Metadata relation."""

    def test_relation_is_cached_and_works(self, wordpress):
        """Test: meta() returns the same Metadata with the model meta type."""
        # Arrange
        product = Product({"post_title": "Lamp"})
        product.save()

        # Act
        relation = product.meta()
        relation.update_meta("color", "red")

        # Assert
        assert isinstance(relation, Metadata)
        assert product.meta() is relation
        assert relation.meta_type == "post"
        assert relation.get_meta("color") == "red"
        assert relation.add_meta("color", "blue") is False
        assert relation.delete_meta("color") is True
        assert relation.get_meta("color") == ""
