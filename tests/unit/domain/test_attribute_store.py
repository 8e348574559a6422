"""Tests для AttributeStore.

Dirty tracking: original snapshot, numeric equivalence, changes.
"""

import pytest

from wpmodel.domain.concerns.attributes import AttributeStore, is_numeric


class TestIsNumeric:
    """Tests для is_numeric helper."""

    @pytest.mark.parametrize("value", [1, 1.5, "10", " 7 ", "-3", "1e3", ".5"])
    def test_numeric_values(self, value):
        """Test: numbers and numeric strings are numeric."""
        assert is_numeric(value) is True

    @pytest.mark.parametrize("value", [True, False, None, "abc", "", "0x1A", [1]])
    def test_non_numeric_values(self, value):
        """Test: booleans, None and other strings are not numeric."""
        assert is_numeric(value) is False


class TestAttributeStoreReadWrite:
    """Tests для get/set/only."""

    def test_set_then_get_returns_value(self):
        """Test: set(k, v) then get(k) returns v."""
        # Arrange
        store = AttributeStore()

        # Act
        store.set("post_title", "Hello")

        # Assert
        assert store.get("post_title") == "Hello"

    def test_get_missing_returns_none(self):
        """Test: absent key reads as None."""
        store = AttributeStore()
        assert store.get("missing") is None

    def test_id_is_redirected_to_primary_key(self):
        """Test: "id" reads the primary key attribute."""
        store = AttributeStore({"term_id": 12}, key_name="term_id")

        assert store.get("id") == 12
        assert store.get_key() == 12

    def test_sanitizer_applied_on_set(self):
        """Test: set() runs the sanitizer, set_raw() does not."""
        # Arrange
        store = AttributeStore(sanitizer=lambda key, value: value.strip() if isinstance(value, str) else value)

        # Act
        store.set("post_title", "  Hello  ")
        raw = AttributeStore(sanitizer=lambda key, value: "sanitized")
        raw.set_raw({"post_title": "  Raw  "})

        # Assert
        assert store.get("post_title") == "Hello"
        assert raw.get("post_title") == "  Raw  "

    def test_only_returns_requested_keys(self):
        """Test: only() returns requested keys, None for absent ones."""
        # Arrange
        store = AttributeStore({"a": 1, "b": 2, "c": 3})

        # Act & Assert
        assert store.only("a", "b") == {"a": 1, "b": 2}
        assert store.only(["a", "x"]) == {"a": 1, "x": None}

    def test_has_and_remove(self):
        """Test: has() sees keys set to None, remove() drops them."""
        store = AttributeStore({"a": None})

        assert store.has("a") is True

        store.remove("a")
        assert store.has("a") is False


class TestAttributeStoreDirtyTracking:
    """Tests для dirty/clean state machine."""

    def test_synced_hydration_is_clean(self):
        """Test: set_raw(..., sync=True) leaves nothing dirty."""
        # Arrange
        store = AttributeStore()

        # Act
        store.set_raw({"ID": 1, "post_title": "Hi", "meta": {"a": [1, 2]}}, sync=True)

        # Assert
        assert store.is_dirty() is False
        assert store.is_clean() is True
        assert store.get_dirty() == {}

    def test_unsynced_attributes_are_dirty(self):
        """Test: key absent from original is dirty."""
        store = AttributeStore()
        store.set("post_title", "Hi")

        assert store.is_dirty("post_title") is True
        assert store.get_dirty() == {"post_title": "Hi"}

    def test_dirty_after_change_and_clean_after_sync(self):
        """Test: change → dirty, sync_original → clean."""
        # Arrange
        store = AttributeStore()
        store.set_raw({"post_title": "Hi"}, sync=True)

        # Act
        store.set("post_title", "Bye")
        dirty_before_sync = store.is_dirty("post_title")
        store.sync_original()

        # Assert
        assert dirty_before_sync is True
        assert store.is_clean("post_title") is True

    def test_numeric_string_equivalent_to_number(self):
        """Test: "10" і 10 equivalent, "10" і 11 ні."""
        # Arrange
        store = AttributeStore()
        store.set_raw({"menu_order": "10", "post_parent": 5}, sync=True)

        # Act
        store.set("menu_order", 10)
        store.set("post_parent", "5")

        # Assert
        assert store.is_dirty() is False

        store.set("menu_order", 11)
        assert store.is_dirty("menu_order") is True

    def test_whitespace_in_numeric_string_is_a_change(self):
        """Test: "5" → " 5" is dirty (strings compare as is)."""
        store = AttributeStore()
        store.set_raw({"menu_order": "5"}, sync=True)

        store.set("menu_order", " 5")

        assert store.is_dirty("menu_order") is True
        assert store.get_dirty() == {"menu_order": " 5"}

    @pytest.mark.parametrize(("original", "current"), [(1, 1.0), ("1", 1.0), (2.0, "2")])
    def test_integral_float_equivalent_to_integer(self, original, current):
        """Test: 1.0 renders as "1", so it equals 1 and "1"."""
        store = AttributeStore()
        store.set_raw({"menu_order": original}, sync=True)

        store.set("menu_order", current)

        assert store.is_clean("menu_order") is True

    def test_fractional_float_is_a_change(self):
        """Test: 1 vs 1.5 is dirty."""
        store = AttributeStore()
        store.set_raw({"menu_order": 1}, sync=True)

        store.set("menu_order", 1.5)

        assert store.is_dirty("menu_order") is True

    def test_none_only_equivalent_to_none(self):
        """Test: None vs "" / 0 is a change."""
        # Arrange
        store = AttributeStore()
        store.set_raw({"a": None, "b": 0}, sync=True)

        # Act
        store.set("a", "")
        store.set("b", None)

        # Assert
        assert store.is_dirty("a") is True
        assert store.is_dirty("b") is True

    def test_boolean_is_not_numeric_equivalent(self):
        """Test: True vs 1 is a change (booleans are not numeric)."""
        store = AttributeStore()
        store.set_raw({"flag": 1}, sync=True)

        store.set("flag", True)

        assert store.is_dirty("flag") is True

    def test_mutating_attribute_does_not_touch_original(self):
        """Test: original is a deep copy."""
        # Arrange
        store = AttributeStore()
        store.set_raw({"tags": ["a"]}, sync=True)

        # Act
        store.get("tags").append("b")

        # Assert
        assert store.get_original("tags") == ["a"]
        assert store.is_dirty("tags") is True

    def test_is_dirty_with_several_keys_is_any(self):
        """Test: is_dirty(a, b) is True if any of them is dirty."""
        # Arrange
        store = AttributeStore()
        store.set_raw({"a": 1, "b": 2}, sync=True)

        # Act
        store.set("b", 3)

        # Assert
        assert store.is_dirty("a", "b") is True
        assert store.is_dirty(["a", "b"]) is True
        assert store.is_dirty("a") is False
        assert store.is_clean("a", "b") is False
        assert store.is_clean("a") is True

    @pytest.mark.parametrize("keys", [(), ("a",), ("b",), ("a", "b"), (["a", "c"],)])
    def test_is_clean_is_complement_of_is_dirty(self, keys):
        """Test: is_clean(keys) == not is_dirty(keys)."""
        store = AttributeStore()
        store.set_raw({"a": 1, "b": 2}, sync=True)
        store.set("a", 5)

        assert store.is_clean(*keys) is (not store.is_dirty(*keys))

    def test_sync_original_attribute_only_syncs_one_key(self):
        """Test: sync_original_attribute(k) cleans only k."""
        store = AttributeStore()
        store.set("a", 1)
        store.set("b", 2)

        store.sync_original_attribute("a")

        assert store.get_dirty() == {"b": 2}

    def test_was_changed_reflects_last_sync_changes(self):
        """Test: was_changed() checks the snapshot taken by sync_changes()."""
        # Arrange
        store = AttributeStore()
        store.set_raw({"a": 1, "b": 2}, sync=True)
        store.set("a", 10)

        # Act
        store.sync_changes()
        store.sync_original()

        # Assert
        assert store.was_changed() is True
        assert store.was_changed("a") is True
        assert store.was_changed("b") is False
        assert store.get_changes() == {"a": 10}
        assert store.is_dirty() is False

    def test_revert_restores_original_value(self):
        """Test: revert(k) restores original, drops keys that were not there."""
        # Arrange
        store = AttributeStore()
        store.set_raw({"a": 1}, sync=True)
        store.set("a", 2)
        store.set("new", "x")

        # Act
        store.revert("a")
        store.revert("new")
        store.revert("never_set")

        # Assert
        assert store.get("a") == 1
        assert store.has("new") is False
        assert store.is_dirty() is False
