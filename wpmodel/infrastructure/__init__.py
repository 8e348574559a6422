"""Infrastructure layer - database, SQL builder, WordPress data functions, events."""

from .database import Database, get_database, reset_database, set_database
from .sql_builder import TableQuery

__all__ = [
    "Database",
    "get_database",
    "set_database",
    "reset_database",
    "TableQuery",
]
