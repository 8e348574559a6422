"""Query - abstract backend behind the Builder.

Backend відповідає за:
- var store (QueryVars або TableQuery), до якого Builder пише filters
- translation generic verbs → backend keywords ("limit" → "posts_per_page")
- raw rows: get_by_id(), do_query(), extract_items()
- persistence primitives: insert(), update(), delete() (у concrete backends)

Concrete backends: DBQuery, PostQuery, TermQuery.
"""

import copy
from abc import ABC, abstractmethod
from collections.abc import MutableMapping
from typing import Any, ClassVar, Mapping

from wpmodel.config import get_logger
from wpmodel.domain.exceptions import UnsupportedQueryError
from wpmodel.query.query_vars import QueryVars

logger = get_logger(__name__)


class Query(ABC):
    """Abstract query backend.

    Subclasses declare ``trans_query_vars`` - mapping generic query var
    names to the names their var store understands.

    Example:
        >>> class PageQuery(PostQuery):
        ...     trans_query_vars = {**PostQuery.trans_query_vars, "author": "author_name"}
    """

    trans_query_vars: ClassVar[dict[str, str]] = {}

    def __init__(self, main_query: Mapping[str, Any] | QueryVars | None = None) -> None:
        """Initialize query.

        Args:
            main_query: Initial query vars.
        """
        self._query_vars: Any = main_query if isinstance(main_query, QueryVars) else QueryVars(main_query)

        self.table: str | None = None
        self.primary_key: str | None = None
        self.object_type: str | None = None

    # ==================== Wiring ====================

    def set_table(self, table: str | None) -> "Query":
        self.table = table
        return self

    def set_primary_key(self, primary_key: str | None) -> "Query":
        self.primary_key = primary_key
        return self

    def set_object_type(self, object_type: str | None) -> "Query":
        self.object_type = object_type
        return self

    # ==================== Raw rows ====================

    @abstractmethod
    def get_by_id(self, id: Any) -> dict[str, Any] | None:
        """Get one raw row by primary key.

        Returns:
            Row dict або None якщо не знайдено.
        """
        pass

    @abstractmethod
    def do_query(self, query_vars: Any) -> Any:
        """Execute the query and return the backend's raw result handle."""
        pass

    def extract_items(self, items: Any) -> list[Any]:
        """Extract row list from the raw result handle."""
        return items

    # ==================== Query vars ====================

    def get_query_vars(self) -> Any:
        return self._query_vars

    def apply_query_var(self, name: str, *parameters: Any) -> None:
        """Apply one query var to the var store.

        Mapping store: translated key = first parameter (True без параметрів).
        Інший store: викликаємо його method з тим самим ім'ям.

        Raises:
            UnsupportedQueryError: If the store supports neither.
        """
        name = self.translate_query_var(name)
        store = self._query_vars

        if isinstance(store, MutableMapping):
            store[name] = parameters[0] if parameters else True
            return

        if callable(getattr(type(store), name, None)):
            getattr(store, name)(*parameters)
            return

        logger.debug("query.unsupported_var", query_var=name, backend=type(self).__name__)
        raise UnsupportedQueryError(f"Unsupported query [{name}]", query_var=name, backend=type(self).__name__)

    def apply_query_vars(self, query_vars: Mapping[str, Any]) -> "Query":
        """Apply several query vars at once."""
        for name, value in dict(query_vars).items():
            self.apply_query_var(name, value)
        return self

    def translate_query_var(self, key: str) -> str:
        return self.trans_query_vars.get(key, key)

    def to_array(self) -> dict[str, Any]:
        return self._query_vars.to_array()

    # ==================== Copying ====================

    def clone(self) -> "Query":
        """Copy of the backend with an independent var store."""
        clone = self.__class__.__new__(self.__class__)
        clone.__dict__.update(self.__dict__)
        clone._query_vars = copy.deepcopy(self._query_vars)
        return clone

    def __copy__(self) -> "Query":
        return self.clone()

    def __deepcopy__(self, memo: dict) -> "Query":
        return self.clone()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(object_type={self.object_type!r}, query_vars={self.to_array()!r})"
