"""Builder - fluent model query over any Query backend.

Builder знає про model (hydration) і про backend (raw rows). Все, чого
Builder сам не вміє, делегується:

1. method backend-у з таким ім'ям → повертаємо його результат
2. method var store-у (QueryVars / TableQuery) → викликаємо, повертаємо builder
3. інакше apply_query_var(name, *args) → повертаємо builder

Example:
    >>> Page.query().status("publish").limit(5).get()
    >>> Page.query().ignore_sticky_posts().orderby("menu_order", "ASC").first()
"""

from typing import TYPE_CHECKING, Any, Callable, Iterable

from wpmodel.domain.exceptions import ModelNotDefinedError
from wpmodel.query.base import Query

if TYPE_CHECKING:
    from wpmodel.domain.collection import Collection
    from wpmodel.domain.model import Model


class Builder:
    """Fluent query builder bound to a model class."""

    def __init__(self, query: Query) -> None:
        """Initialize builder.

        Args:
            query: Query backend.
        """
        self._query = query
        self._model: "Model | None" = None

    # ==================== Fetching ====================

    def raw(self, id: Any) -> dict[str, Any] | None:
        """Get the raw row by primary key (no hydration)."""
        return self._query.get_by_id(id)

    def find(self, id: Any) -> "Model | None":
        """Find a model by its primary key.

        Raises:
            ModelNotDefinedError: If no model is bound.
        """
        model = self.get_model()
        result = self._query.get_by_id(id)

        if not result:
            return None

        return model.new_from_builder(result)

    def get(self) -> "Collection":
        """Execute the query and hydrate a collection of models."""
        model = self.get_model()
        query_vars = self._query.get_query_vars()

        items = self._query.extract_items(self._query.do_query(query_vars))

        return model.new_collection(self.hydrate(items))

    def first(self) -> "Model | None":
        return self.limit(1).get().first()

    # ==================== Query vars ====================

    def select(self, column: Any = "*") -> "Builder":
        self._query.apply_query_var("select", column)
        return self

    def take(self, value: int) -> "Builder":
        return self.limit(value)

    def limit(self, limit: int) -> "Builder":
        """Set the limit (-1 requests all models)."""
        self._query.apply_query_var("limit", int(limit))
        return self

    def skip(self, value: int) -> "Builder":
        return self.offset(value)

    def offset(self, offset: int) -> "Builder":
        self._query.apply_query_var("offset", max(0, int(offset)))
        return self

    def orderby(self, orderby: str, order: str = "DESC") -> "Builder":
        self._query.apply_query_var("orderby", orderby, order)
        return self

    def for_page(self, page: int, per_page: int = 15) -> "Builder":
        """Set offset + limit for a page (pages start at 1)."""
        return self.skip((page - 1) * per_page).take(per_page)

    # ==================== Model ====================

    def hydrate(self, items: Iterable[Any]) -> list["Model"]:
        model = self.get_model()
        return [model.new_from_builder(item) for item in items]

    def get_model(self) -> "Model":
        if self._model is None:
            raise ModelNotDefinedError("The model is not defined.", backend=type(self._query).__name__)

        return self._model

    def set_model(self, model: "Model") -> "Builder":
        """Bind a model and wire its table, key and object type into the backend."""
        self._model = model

        self._query.set_table(model.get_table())
        self._query.set_primary_key(model.get_key_name())
        self._query.set_object_type(model.get_object_type())

        return self

    def get_query(self) -> Query:
        return self._query

    # ==================== Delegation ====================

    def __getattr__(self, name: str) -> Callable[..., Any]:
        # Private names / dunder lookups (copy, pickle) не делегуються
        if name.startswith("_"):
            raise AttributeError(name)

        query = self._query

        if callable(getattr(type(query), name, None)):
            return getattr(query, name)

        query_vars = query.get_query_vars()

        if callable(getattr(type(query_vars), name, None)):
            method = getattr(query_vars, name)

            def call_query_vars(*args: Any, **kwargs: Any) -> "Builder":
                method(*args, **kwargs)
                return self

            return call_query_vars

        def apply_query_var(*args: Any) -> "Builder":
            query.apply_query_var(name, *args)
            return self

        return apply_query_var

    # ==================== Copying ====================

    def clone(self) -> "Builder":
        """Copy of the builder with an independent backend."""
        clone = Builder(self._query.clone())
        clone._model = self._model
        return clone

    def __copy__(self) -> "Builder":
        return self.clone()

    def __deepcopy__(self, memo: dict) -> "Builder":
        return self.clone()

    def __repr__(self) -> str:
        model = type(self._model).__name__ if self._model is not None else None
        return f"Builder(model={model}, query={self._query!r})"
