"""Database - SQLAlchemy engine + WordPress table registry.

Database тримає engine, table prefix і MetaData з core таблицями.
Будь-яку іншу таблицю (custom plugin tables) reflect-имо при першому зверненні.

Example:
    >>> db = Database.from_settings()
    >>> db.create_schema()
    >>> db.table("posts").where("post_type", "page").limit(5).get()
"""

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

from sqlalchemy import Connection, Engine, Table, create_engine
from sqlalchemy.pool import StaticPool

from wpmodel.config import Settings, get_logger, get_settings
from wpmodel.infrastructure.schema import CORE_TABLES, build_metadata

if TYPE_CHECKING:
    from wpmodel.infrastructure.sql_builder import TableQuery

logger = get_logger(__name__)


class Database:
    """WordPress database handle (аналог $wpdb).

    Відповідальності:
    - Керування SQLAlchemy engine
    - Prefixed table names ("posts" → "wp_posts")
    - Table lookup / reflection
    - Transaction scopes for writes
    """

    def __init__(self, engine: Engine, prefix: str = "wp_") -> None:
        """Initialize database handle.

        Args:
            engine: SQLAlchemy engine.
            prefix: WordPress table prefix.
        """
        self.engine = engine
        self.prefix = prefix
        self.metadata = build_metadata(prefix)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "Database":
        """Create database from settings.

        In-memory SQLite використовує StaticPool, щоб усі connections
        бачили одну й ту саму базу.
        """
        settings = settings or get_settings()
        url = settings.database_url

        if url.startswith("sqlite") and (":memory:" in url or url.rstrip("/") == "sqlite:"):
            engine = create_engine(
                url,
                echo=settings.db_echo,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            engine = create_engine(url, echo=settings.db_echo, pool_pre_ping=True)

        return cls(engine, prefix=settings.table_prefix)

    def table_name(self, name: str) -> str:
        """Get prefixed table name."""
        if name.startswith(self.prefix):
            return name
        return f"{self.prefix}{name}"

    def get_table(self, name: str) -> Table:
        """Get table by short or prefixed name, reflecting unknown tables."""
        full_name = self.table_name(name)

        if full_name not in self.metadata.tables:
            logger.debug("database.reflecting_table", table=full_name)
            return Table(full_name, self.metadata, autoload_with=self.engine)

        return self.metadata.tables[full_name]

    def table(self, name: str) -> "TableQuery":
        """Begin a fluent query against a table."""
        from wpmodel.infrastructure.sql_builder import TableQuery

        return TableQuery(self, self.get_table(name))

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """Read-only connection scope."""
        with self.engine.connect() as connection:
            yield connection

    @contextmanager
    def begin(self) -> Iterator[Connection]:
        """Transaction scope: commit on success, rollback on exception."""
        with self.engine.begin() as connection:
            yield connection

    def create_schema(self) -> None:
        """Create the WordPress core tables if they do not exist."""
        core = [self.metadata.tables[self.table_name(name)] for name in CORE_TABLES]
        self.metadata.create_all(self.engine, tables=core)
        logger.info("database.schema_created", prefix=self.prefix)

    def drop_schema(self) -> None:
        core = [self.metadata.tables[self.table_name(name)] for name in CORE_TABLES]
        self.metadata.drop_all(self.engine, tables=core)

    def dispose(self) -> None:
        self.engine.dispose()

    def __repr__(self) -> str:
        return f"Database(url={self.engine.url!r}, prefix={self.prefix!r})"


# Singleton instance (можна замінити через set_database)
_database_instance: Database | None = None


def get_database() -> Database:
    """Get singleton database instance (created from settings on first use)."""
    global _database_instance
    if _database_instance is None:
        _database_instance = Database.from_settings()
    return _database_instance


def set_database(database: Database) -> None:
    """Replace the singleton database instance."""
    global _database_instance
    _database_instance = database


def reset_database() -> None:
    """Dispose and forget the singleton database (for testing)."""
    global _database_instance
    if _database_instance is not None:
        _database_instance.dispose()
    _database_instance = None
