"""Tests для Collection."""

import json

from wpmodel.domain.collection import Collection


class Item:
    def __init__(self, name):
        self.name = name

    def to_array(self):
        return {"name": self.name}


class TestCollection:
    """Tests для list helpers."""

    def test_first_and_last(self):
        """Test: first/last return items or the default."""
        collection = Collection([1, 2, 3])

        assert collection.first() == 1
        assert collection.last() == 3
        assert Collection().first("none") == "none"
        assert Collection().last() is None

    def test_is_empty(self):
        """Test: is_empty()."""
        assert Collection().is_empty() is True
        assert Collection([1]).is_empty() is False

    def test_map_and_filter_return_collections(self):
        """Test: map/filter return new Collection instances."""
        # Arrange
        collection = Collection([1, 2, 3, 4])

        # Act
        doubled = collection.map(lambda item: item * 2)
        even = collection.filter(lambda item: item % 2 == 0)
        truthy = Collection([0, 1, "", "a"]).filter()

        # Assert
        assert isinstance(doubled, Collection)
        assert doubled == [2, 4, 6, 8]
        assert even == [2, 4]
        assert truthy == [1, "a"]

    def test_map_into(self):
        """Test: map_into(cls) wraps every item."""
        collection = Collection(["a", "b"]).map_into(Item)

        assert [item.name for item in collection] == ["a", "b"]

    def test_pluck_from_dicts_and_objects(self):
        """Test: pluck reads keys from mappings and attributes from objects."""
        assert Collection([{"ID": 1}, {"ID": 2}]).pluck("ID") == [1, 2]
        assert Collection([Item("a"), Item("b")]).pluck("name") == ["a", "b"]

    def test_slice_returns_collection(self):
        """Test: collection[1:] is a Collection, collection[0] an item."""
        collection = Collection([1, 2, 3])

        assert isinstance(collection[1:], Collection)
        assert collection[1:] == [2, 3]
        assert collection[0] == 1

    def test_to_array_and_to_json(self):
        """Test: items with to_array() are serialized, others kept."""
        # Arrange
        collection = Collection([Item("a"), 5])

        # Act
        array = collection.to_array()

        # Assert
        assert array == [{"name": "a"}, 5]
        assert json.loads(collection.to_json()) == [{"name": "a"}, 5]

    def test_repr(self):
        """Test: repr."""
        assert repr(Collection([1])) == "Collection([1])"
