"""DBQuery - backend над TableQuery (direct SQL)."""

from typing import Any, Mapping

from sqlalchemy.exc import SQLAlchemyError

from wpmodel.config import get_logger
from wpmodel.domain.exceptions import InvalidQueryError
from wpmodel.infrastructure.sql_builder import TableQuery
from wpmodel.query.base import Query

logger = get_logger(__name__)


class DBQuery(Query):
    """Query backend for custom tables.

    Var store тут - сам SQL builder: Builder.where(), Builder.limit()
    потрапляють у TableQuery methods.

    Example:
        >>> query = DBQuery(db.table("posts")).set_primary_key("ID")
        >>> query.get_by_id(100)
        {'ID': 100, 'post_title': 'Hello', ...}
    """

    trans_query_vars = {
        "orderby": "order_by",
    }

    def __init__(self, query: TableQuery) -> None:
        """Initialize DB query.

        Args:
            query: SQL builder for the model table.

        Raises:
            InvalidQueryError: If query is not a TableQuery.
        """
        if not isinstance(query, TableQuery):
            raise InvalidQueryError(
                f"The query must be instance of the [{TableQuery.__name__}]",
                given=type(query).__name__,
            )

        super().__init__()
        self._query_vars = query
        self.table = query.name

    @property
    def key_name(self) -> str:
        return self.primary_key or "ID"

    def get_by_id(self, id: Any) -> dict[str, Any] | None:
        # Clone: lookup не повинен залишати where() у var store
        return self._query_vars.clone().where(self.key_name, id).first()

    def do_query(self, query: Any) -> list[dict[str, Any]]:
        """Execute the SQL builder.

        Raises:
            InvalidQueryError: If query is not a TableQuery.
        """
        if not isinstance(query, TableQuery):
            raise InvalidQueryError(
                f"The query must be instance of the [{TableQuery.__name__}]",
                given=type(query).__name__,
            )

        return query.get()

    def apply_query_vars(self, query_vars: Mapping[str, Any]) -> "DBQuery":
        """Mapping vars become equality wheres."""
        for name, value in dict(query_vars).items():
            self._query_vars.where(name, value)
        return self

    # ==================== Persistence ====================

    def insert(self, attributes: Mapping[str, Any]) -> int | None:
        try:
            return self._table_query().insert_get_id(attributes, self.key_name)
        except SQLAlchemyError as e:
            logger.error("query.db_insert_failed", table=self.table, error=str(e))
            return None

    def update(self, id: Any, dirty: Mapping[str, Any]) -> int | bool:
        """Update row, return affected rows (0 is still a success) or False."""
        try:
            updated = self._query_for_save(id).update(dirty)
        except SQLAlchemyError as e:
            logger.error("query.db_update_failed", table=self.table, id=id, error=str(e))
            return False

        return updated if isinstance(updated, int) else False

    def delete(self, id: Any, force: bool = False) -> bool:
        # Рядки з таблиці видаляються завжди, force нічого не змінює
        try:
            return bool(self._query_for_save(id).delete())
        except SQLAlchemyError as e:
            logger.error("query.db_delete_failed", table=self.table, id=id, error=str(e))
            return False

    def _table_query(self) -> TableQuery:
        return self._query_vars.database.table(self.table or self._query_vars.name)

    def _query_for_save(self, id: Any) -> TableQuery:
        return self._table_query().where(self.key_name, "=", id)

    def to_array(self) -> dict[str, Any]:
        return {
            "sql": self._query_vars.to_sql(),
            "bindings": self._query_vars.get_bindings(),
        }
