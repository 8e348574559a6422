"""QueryVars - dynamic bag of query parameters.

Один dict, до якого можна звертатися трьома способами:
    vars["post_type"]            # item access
    vars.post_type               # attribute access
    vars.set("post_type", "page")  # fluent
"""

import copy
from typing import Any, Iterator, Mapping, MutableMapping


class QueryVars(MutableMapping):
    """Mutable mapping of query vars with attribute and fluent access.

    Missing keys read as None (item and attribute access alike).

    Example:
        >>> query_vars = QueryVars({"post_type": "page"})
        >>> query_vars.set("posts_per_page", 5).set("ignore_sticky_posts")
        >>> query_vars.to_array()
        {'post_type': 'page', 'posts_per_page': 5, 'ignore_sticky_posts': True}
    """

    __slots__ = ("_vars",)

    def __init__(self, query_vars: Mapping[str, Any] | None = None) -> None:
        object.__setattr__(self, "_vars", dict(query_vars or {}))

    # ==================== Fluent ====================

    def set(self, name: str, *value: Any) -> "QueryVars":
        """Set a query var, True when called without a value."""
        self._vars[name] = value[0] if value else True
        return self

    def with_(self, query_vars: Mapping[str, Any]) -> "QueryVars":
        """Merge query vars (last write wins)."""
        self._vars.update(query_vars)
        return self

    def to_array(self) -> dict[str, Any]:
        return self._vars

    # ==================== Mapping ====================

    def get(self, key: str, default: Any = None) -> Any:
        return self._vars.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._vars.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self._vars[key] = value

    def __delitem__(self, key: str) -> None:
        self._vars.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return self._vars.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    # ==================== Attributes ====================

    def __getattr__(self, key: str) -> Any:
        if key.startswith("__"):
            raise AttributeError(key)
        return self._vars.get(key)

    def __setattr__(self, key: str, value: Any) -> None:
        self._vars[key] = value

    def __delattr__(self, key: str) -> None:
        self._vars.pop(key, None)

    # ==================== Copying ====================

    def __copy__(self) -> "QueryVars":
        return QueryVars(self._vars)

    def __deepcopy__(self, memo: dict) -> "QueryVars":
        return QueryVars(copy.deepcopy(self._vars, memo))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryVars):
            return self._vars == other._vars
        if isinstance(other, Mapping):
            return self._vars == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"QueryVars({self._vars!r})"
