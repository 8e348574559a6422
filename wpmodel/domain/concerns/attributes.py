"""Attribute Store - dirty tracking for model attributes.

Store тримає три мапи:
- attributes: поточні значення
- original: snapshot після construction / hydration / успішного save
- changes: що змінив останній успішний update (не те, що dirty зараз)

Dirty rule:
    key dirty якщо його немає в original, або значення не "equivalent"
    оригіналу. Equivalent = exact match (same type, equal), або обидва
    значення numeric і їх string form однакова ("1" == 1). None equivalent
    тільки None.

Numeric-string rule потрібен бо ID та counters приходять з БД як strings:
без нього кожен round trip позначав би поля як dirty.
"""

import copy
import re
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

Sanitizer = Callable[[str, Any], Any]

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")


def is_numeric(value: Any) -> bool:
    """Check if value is a number or a numeric string.

    Booleans are not numeric.

    Example:
        >>> is_numeric("42"), is_numeric(" 1.5e3"), is_numeric("0x1A"), is_numeric(True)
        (True, True, False, False)
    """
    if isinstance(value, bool):
        return False

    if isinstance(value, (int, float, Decimal)):
        return True

    if isinstance(value, str):
        return _NUMERIC_RE.match(value) is not None

    return False


def _identity(key: str, value: Any) -> Any:
    return value


def _normalize_keys(keys: tuple[Any, ...]) -> list[str]:
    """Accept both is_dirty("a", "b") and is_dirty(["a", "b"])."""
    if len(keys) == 1 and isinstance(keys[0], (list, tuple, set, frozenset)):
        return list(keys[0])
    return [key for key in keys if key is not None]


class AttributeStore:
    """Per-instance attribute storage with dirty tracking.

    Example:
        >>> store = AttributeStore(key_name="ID")
        >>> store.set_raw({"ID": "5", "post_title": "Hello"}, sync=True)
        >>> store.set("ID", 5)
        >>> store.is_dirty("ID")  # "5" і 5 - equivalent
        False
        >>> store.set("post_title", "Bye")
        >>> store.get_dirty()
        {'post_title': 'Bye'}
    """

    def __init__(
        self,
        attributes: Mapping[str, Any] | None = None,
        *,
        key_name: str = "ID",
        sanitizer: Sanitizer | None = None,
    ) -> None:
        """Initialize attribute store.

        Args:
            attributes: Initial raw attributes (not sanitized, not synced).
            key_name: Name of the primary key attribute ("id" redirects to it).
            sanitizer: Hook applied on every set(), identity by default.
        """
        self.key_name = key_name
        self._sanitizer: Sanitizer = sanitizer or _identity
        self._attributes: dict[str, Any] = dict(attributes or {})
        self._original: dict[str, Any] = {}
        self._changes: dict[str, Any] = {}

    # ==================== Read ====================

    def get(self, key: str) -> Any:
        """Get current value, None if absent.

        The reserved "id" key returns the primary key value.
        """
        if key == "id":
            return self.get_key()

        return self._attributes.get(key)

    def get_key(self) -> Any:
        """Get the primary key value or None."""
        return self._attributes.get(self.key_name)

    def has(self, key: str) -> bool:
        """Check if attribute key was ever set (even to None)."""
        return key in self._attributes

    def all(self) -> dict[str, Any]:
        """Get all current attributes (live dict)."""
        return self._attributes

    def only(self, *keys: Any) -> dict[str, Any]:
        """Get a subset of attributes, None for absent keys."""
        return {key: self.get(key) for key in _normalize_keys(keys)}

    def get_original(self, key: str | None = None, default: Any = None) -> Any:
        """Get original snapshot or one original value."""
        if key is None:
            return self._original

        return self._original.get(key, default)

    def get_changes(self) -> dict[str, Any]:
        """Get attributes changed by the last successful update."""
        return self._changes

    # ==================== Write ====================

    def set(self, key: str, value: Any) -> None:
        """Set attribute value through the sanitizer."""
        self._attributes[key] = self._sanitizer(key, value)

    def remove(self, key: str) -> None:
        """Remove attribute if present."""
        self._attributes.pop(key, None)

    def set_raw(self, attributes: Mapping[str, Any], sync: bool = False) -> None:
        """Replace all attributes, bypassing the sanitizer.

        Args:
            attributes: New attributes.
            sync: Snapshot them as original (fresh data from storage).
        """
        self._attributes = dict(attributes)

        if sync:
            self.sync_original()

    def set_sanitizer(self, sanitizer: Sanitizer | None) -> None:
        self._sanitizer = sanitizer or _identity

    # ==================== Sync ====================

    def sync_original(self) -> None:
        """Snapshot current attributes as original."""
        self._original = copy.deepcopy(self._attributes)

    def sync_original_attribute(self, key: str) -> None:
        """Snapshot a single attribute as original."""
        if key in self._attributes:
            self._original[key] = copy.deepcopy(self._attributes[key])

    def sync_changes(self) -> None:
        """Snapshot the current dirty set as "changes"."""
        self._changes = copy.deepcopy(self.get_dirty())

    def revert(self, key: str) -> None:
        """Restore one attribute to its original value.

        Key, якого не було в original, просто видаляється.
        """
        if key not in self._attributes:
            return

        if key in self._original:
            self._attributes[key] = copy.deepcopy(self._original[key])
        else:
            del self._attributes[key]

    # ==================== Dirty tracking ====================

    def get_dirty(self) -> dict[str, Any]:
        """Get attributes changed since last sync (recomputed every call)."""
        return {
            key: value
            for key, value in self._attributes.items()
            if not self.original_is_equivalent(key, value)
        }

    def is_dirty(self, *keys: Any) -> bool:
        """Check if any (or any of the given) attributes are dirty."""
        return self._has_changes(self.get_dirty(), _normalize_keys(keys))

    def is_clean(self, *keys: Any) -> bool:
        """Inverse of is_dirty() for the same keys."""
        return not self.is_dirty(*keys)

    def was_changed(self, *keys: Any) -> bool:
        """Check if any (or any of the given) attributes changed in the last save."""
        return self._has_changes(self._changes, _normalize_keys(keys))

    def original_is_equivalent(self, key: str, current: Any) -> bool:
        """Check if current value is equivalent to the original one."""
        if key not in self._original:
            return False

        original = self._original[key]

        if current is original:
            return True

        if type(current) is type(original) and current == original:
            return True

        if current is None or original is None:
            return False

        # Numeric compare by string form ("10" vs 10)
        return is_numeric(current) and is_numeric(original) and (
            _numeric_str(current) == _numeric_str(original)
        )

    @staticmethod
    def _has_changes(changes: Mapping[str, Any], keys: Iterable[str]) -> bool:
        keys = list(keys)

        # No keys - any change counts
        if not keys:
            return len(changes) > 0

        return any(key in changes for key in keys)

    def __copy__(self) -> "AttributeStore":
        clone = AttributeStore(key_name=self.key_name, sanitizer=self._sanitizer)
        clone._attributes = copy.deepcopy(self._attributes)
        clone._original = copy.deepcopy(self._original)
        clone._changes = copy.deepcopy(self._changes)
        return clone

    def __repr__(self) -> str:
        return f"AttributeStore(attributes={self._attributes!r}, dirty={list(self.get_dirty())!r})"


def _numeric_str(value: Any) -> str:
    """String form used for numeric comparison, strings are taken as is.

    Integral floats render without the fraction: 1.0 → "1".
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
