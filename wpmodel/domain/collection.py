"""Collection - ordered list of models."""

import json
from typing import Any, Callable


class Collection(list):
    """List of models with a few query-result helpers.

    Example:
        >>> pages = Page.query().limit(3).get()
        >>> pages.pluck("post_title")
        ['About', 'Contact', 'Home']
        >>> pages.map_into(PageView)
    """

    def first(self, default: Any = None) -> Any:
        return self[0] if self else default

    def last(self, default: Any = None) -> Any:
        return self[-1] if self else default

    def is_empty(self) -> bool:
        return len(self) == 0

    def map(self, callback: Callable[[Any], Any]) -> "Collection":
        return Collection(callback(item) for item in self)

    def filter(self, callback: Callable[[Any], bool] | None = None) -> "Collection":
        callback = callback or bool
        return Collection(item for item in self if callback(item))

    def map_into(self, cls: Callable[[Any], Any]) -> "Collection":
        """Wrap every item into a new instance of cls."""
        return self.map(cls)

    def pluck(self, key: str) -> list[Any]:
        """Get one attribute of every item."""
        return [item[key] if _is_subscriptable(item) else getattr(item, key, None) for item in self]

    def to_array(self) -> list[Any]:
        return [item.to_array() if callable(getattr(type(item), "to_array", None)) else item for item in self]

    def to_json(self, **kwargs: Any) -> str:
        return json.dumps(self.to_array(), default=str, **kwargs)

    def __getitem__(self, index: Any) -> Any:
        result = super().__getitem__(index)
        return Collection(result) if isinstance(index, slice) else result

    def __repr__(self) -> str:
        return f"Collection({list.__repr__(self)})"


def _is_subscriptable(item: Any) -> bool:
    return callable(getattr(type(item), "__getitem__", None))
