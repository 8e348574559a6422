"""TableQuery - fluent SQL builder on SQLAlchemy Core.

Mutable builder (як Laravel/wpdb builders): where(), order_by(), limit()
змінюють builder і повертають self. Для незалежної копії - clone().

Example:
    >>> query = db.table("users").where("ID", ">=", 100).or_where("ID", "<=", 10)
    >>> query.to_sql()
    'SELECT ... FROM wp_users WHERE wp_users."ID" >= ? OR wp_users."ID" <= ?'
    >>> query.get_bindings()
    [100, 10]
"""

import operator as op
from typing import TYPE_CHECKING, Any, Callable, Iterable, Mapping

from sqlalchemy import ColumnElement, Select, Table, and_, column, delete, func, insert, or_, select, update
from sqlalchemy.sql.expression import ColumnClause

from wpmodel.config import get_logger

if TYPE_CHECKING:
    from wpmodel.infrastructure.database import Database

logger = get_logger(__name__)

_MISSING = object()

OPERATORS: dict[str, Callable[[Any, Any], ColumnElement]] = {
    "=": op.eq,
    "==": op.eq,
    "!=": op.ne,
    "<>": op.ne,
    "<": op.lt,
    "<=": op.le,
    ">": op.gt,
    ">=": op.ge,
    "like": lambda col, value: col.like(value),
    "not like": lambda col, value: col.not_like(value),
    "in": lambda col, value: col.in_(list(value)),
    "not in": lambda col, value: col.not_in(list(value)),
}


class TableQuery:
    """Fluent query against one table.

    Wheres зберігаються як (boolean, clause). При компіляції
    AND має вищий пріоритет за OR - так само як у SQL.
    """

    def __init__(self, database: "Database", table: Table) -> None:
        """Initialize table query.

        Args:
            database: Database owning the engine.
            table: SQLAlchemy table to query.
        """
        self._database = database
        self._table = table
        self._columns: list[str] = []
        self._wheres: list[tuple[str, ColumnElement]] = []
        self._orders: list[tuple[str, str]] = []
        self._limit: int | None = None
        self._offset: int | None = None

    @property
    def database(self) -> "Database":
        return self._database

    @property
    def table(self) -> Table:
        return self._table

    @property
    def name(self) -> str:
        return self._table.name

    # ==================== Building ====================

    def select(self, *columns: str | Iterable[str]) -> "TableQuery":
        """Set selected columns ("*" selects all)."""
        names: list[str] = []
        for item in columns:
            if isinstance(item, str):
                names.append(item)
            else:
                names.extend(item)

        self._columns = [name for name in names if name != "*"]
        return self

    def where(
        self,
        column_name: str,
        operator: Any = _MISSING,
        value: Any = _MISSING,
        boolean: str = "and",
    ) -> "TableQuery":
        """Add a where clause.

        where("ID", 5) is where("ID", "=", 5).
        """
        if value is _MISSING:
            operator, value = "=", operator

        if value is _MISSING:
            raise ValueError(f"Missing value for where clause on [{column_name}]")

        self._wheres.append((boolean, self._compare(column_name, operator, value)))
        return self

    def or_where(self, column_name: str, operator: Any = _MISSING, value: Any = _MISSING) -> "TableQuery":
        return self.where(column_name, operator, value, boolean="or")

    def where_in(self, column_name: str, values: Iterable[Any]) -> "TableQuery":
        return self.where(column_name, "in", list(values))

    def where_not_in(self, column_name: str, values: Iterable[Any]) -> "TableQuery":
        return self.where(column_name, "not in", list(values))

    def order_by(self, column_name: str, direction: str = "asc") -> "TableQuery":
        direction = str(direction).lower()
        if direction not in ("asc", "desc"):
            raise ValueError(f"Order direction must be 'asc' or 'desc', got [{direction}]")

        self._orders.append((column_name, direction))
        return self

    def limit(self, value: int | None) -> "TableQuery":
        """Set limit. Negative value (-1) removes the limit."""
        self._limit = None if value is None or int(value) < 0 else int(value)
        return self

    def offset(self, value: int | None) -> "TableQuery":
        self._offset = None if value is None else max(0, int(value))
        return self

    # ==================== Compiling ====================

    def _column(self, name: str) -> ColumnElement | ColumnClause:
        if name in self._table.c:
            return self._table.c[name]
        return column(name)

    def _compare(self, column_name: str, operator: Any, value: Any) -> ColumnElement:
        key = str(operator).lower()

        if key not in OPERATORS:
            raise ValueError(f"Unsupported operator [{operator}]")

        return OPERATORS[key](self._column(column_name), value)

    def _where_clause(self) -> ColumnElement | None:
        if not self._wheres:
            return None

        # Split into AND-groups separated by OR
        groups: list[list[ColumnElement]] = [[]]
        for boolean, clause in self._wheres:
            if boolean == "or" and groups[-1]:
                groups.append([])
            groups[-1].append(clause)

        conjunctions = [group[0] if len(group) == 1 else and_(*group) for group in groups]
        return conjunctions[0] if len(conjunctions) == 1 else or_(*conjunctions)

    def to_statement(self) -> Select:
        """Build SQLAlchemy Select statement."""
        if self._columns:
            stmt = select(*[self._column(name) for name in self._columns])
        else:
            stmt = select(self._table)

        where = self._where_clause()
        if where is not None:
            stmt = stmt.where(where)

        for name, direction in self._orders:
            col = self._column(name)
            stmt = stmt.order_by(col.desc() if direction == "desc" else col.asc())

        if self._limit is not None:
            stmt = stmt.limit(self._limit)

        if self._offset:
            stmt = stmt.offset(self._offset)

        return stmt

    def to_sql(self) -> str:
        """Compiled SQL with placeholders for the database dialect."""
        return str(self.to_statement().compile(dialect=self._database.engine.dialect))

    def get_bindings(self) -> list[Any]:
        """Bound parameter values in placeholder order."""
        compiled = self.to_statement().compile(dialect=self._database.engine.dialect)
        params = compiled.params

        if compiled.positiontup:
            return [params[name] for name in compiled.positiontup]

        return list(params.values())

    # ==================== Executing ====================

    def get(self) -> list[dict[str, Any]]:
        """Execute select and return rows as dicts."""
        with self._database.connect() as connection:
            result = connection.execute(self.to_statement())
            return [dict(row) for row in result.mappings()]

    def first(self) -> dict[str, Any] | None:
        rows = self.clone().limit(1).get()
        return rows[0] if rows else None

    def count(self) -> int:
        stmt = select(func.count()).select_from(self._table)

        where = self._where_clause()
        if where is not None:
            stmt = stmt.where(where)

        with self._database.connect() as connection:
            return int(connection.execute(stmt).scalar_one())

    def insert_get_id(self, values: Mapping[str, Any], sequence: str | None = None) -> int | None:
        """Insert a row and return its primary key.

        Args:
            values: Column values.
            sequence: Name of the key column (defaults to table primary key).

        Returns:
            New row ID or None if the database did not report one.
        """
        with self._database.begin() as connection:
            result = connection.execute(insert(self._table).values(**dict(values)))

            if sequence and sequence in values and values[sequence]:
                return int(values[sequence])

            primary_key = result.inserted_primary_key
            if primary_key and primary_key[0] is not None:
                return int(primary_key[0])

            return result.lastrowid

    def update(self, values: Mapping[str, Any]) -> int:
        """Update matched rows, return affected row count."""
        stmt = update(self._table).values(**dict(values))

        where = self._where_clause()
        if where is not None:
            stmt = stmt.where(where)

        with self._database.begin() as connection:
            rowcount = connection.execute(stmt).rowcount

        logger.debug("sql.updated", table=self.name, rows=rowcount)
        return rowcount

    def delete(self) -> int:
        """Delete matched rows, return affected row count."""
        stmt = delete(self._table)

        where = self._where_clause()
        if where is not None:
            stmt = stmt.where(where)

        with self._database.begin() as connection:
            rowcount = connection.execute(stmt).rowcount

        logger.debug("sql.deleted", table=self.name, rows=rowcount)
        return rowcount

    # ==================== Copying ====================

    def clone(self) -> "TableQuery":
        """Independent copy (shares database and table, not the state)."""
        clone = TableQuery(self._database, self._table)
        clone._columns = list(self._columns)
        clone._wheres = list(self._wheres)
        clone._orders = list(self._orders)
        clone._limit = self._limit
        clone._offset = self._offset
        return clone

    def __copy__(self) -> "TableQuery":
        return self.clone()

    def __deepcopy__(self, memo: dict) -> "TableQuery":
        # Engine не копіюємо
        return self.clone()

    def __repr__(self) -> str:
        return f"TableQuery(table={self.name!r}, sql={self.to_sql()!r})"
