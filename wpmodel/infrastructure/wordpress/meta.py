"""Metadata API - get/add/update/delete_metadata для posts і terms.

Values зберігаються як text (maybe_serialize): scalars як str,
dict/list як JSON. При читанні JSON arrays/objects розпаковуються назад.
"""

import json
from typing import TYPE_CHECKING, Any

from sqlalchemy import Table, delete, insert, select, update

from wpmodel.config import get_logger
from wpmodel.utils import parse_object_id

if TYPE_CHECKING:
    from wpmodel.infrastructure.database import Database

logger = get_logger(__name__)

# meta_type → (table, object id column)
META_TABLES = {
    "post": ("postmeta", "post_id"),
    "term": ("termmeta", "term_id"),
}


def maybe_serialize(value: Any) -> str:
    """Serialize a meta value for storage.

    Example:
        >>> maybe_serialize(True), maybe_serialize(10), maybe_serialize({"a": 1})
        ('1', '10', '{"a": 1}')
    """
    if value is None or value is False:
        return ""

    if value is True:
        return "1"

    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value)

    return str(value)


def maybe_unserialize(value: Any) -> Any:
    """Unserialize a stored meta value (JSON arrays/objects only)."""
    if not isinstance(value, str):
        return value

    stripped = value.strip()
    if stripped[:1] in ("{", "[") and stripped[-1:] in ("}", "]"):
        try:
            return json.loads(stripped)
        except ValueError:
            return value

    return value


class MetadataAPI:
    """Metadata CRUD over {prefix}postmeta / {prefix}termmeta.

    Example:
        >>> meta = MetadataAPI(db)
        >>> meta.update_metadata("post", 100, "color", "red")
        >>> meta.get_metadata("post", 100, "color", single=True)
        'red'
    """

    def __init__(self, database: "Database") -> None:
        self._database = database

    def _resolve(self, meta_type: str) -> tuple[Table, str] | None:
        if meta_type not in META_TABLES:
            return None

        table_name, column_name = META_TABLES[meta_type]
        return self._database.get_table(table_name), column_name

    def get_metadata(
        self,
        meta_type: str,
        object_id: Any,
        meta_key: str = "",
        single: bool = False,
    ) -> Any:
        """Get metadata of an object.

        Args:
            meta_type: "post" or "term".
            object_id: Object ID.
            meta_key: Meta key. Empty returns all keys of the object.
            single: Return only the first value.

        Returns:
            False for invalid meta type / ID. Without meta_key: dict key →
            list of values. With meta_key: list of values, or the first value
            ("" when missing) if single.
        """
        resolved = self._resolve(meta_type)
        object_id = parse_object_id(object_id)

        if resolved is None or object_id is None:
            return False

        table, column_name = resolved
        stmt = (
            select(table.c.meta_key, table.c.meta_value)
            .where(table.c[column_name] == object_id)
            .order_by(table.c.meta_id.asc())
        )

        if meta_key:
            stmt = stmt.where(table.c.meta_key == meta_key)

        with self._database.connect() as connection:
            rows = connection.execute(stmt).all()

        if not meta_key:
            grouped: dict[str, list[Any]] = {}
            for key, value in rows:
                grouped.setdefault(key, []).append(maybe_unserialize(value))
            return grouped

        values = [maybe_unserialize(value) for _, value in rows]

        if single:
            return values[0] if values else ""

        return values

    def metadata_exists(self, meta_type: str, object_id: Any, meta_key: str) -> bool:
        """Check if the object has at least one value for meta_key."""
        resolved = self._resolve(meta_type)
        object_id = parse_object_id(object_id)

        if resolved is None or object_id is None or not meta_key:
            return False

        table, column_name = resolved
        stmt = (
            select(table.c.meta_id)
            .where(table.c[column_name] == object_id, table.c.meta_key == meta_key)
            .limit(1)
        )

        with self._database.connect() as connection:
            return connection.execute(stmt).first() is not None

    def add_metadata(
        self,
        meta_type: str,
        object_id: Any,
        meta_key: str,
        meta_value: Any,
        unique: bool = False,
    ) -> int | bool:
        """Add a meta row.

        Returns:
            New meta_id, or False (invalid input / unique key already present).
        """
        resolved = self._resolve(meta_type)
        object_id = parse_object_id(object_id)

        if resolved is None or object_id is None or not meta_key:
            return False

        if unique and self.metadata_exists(meta_type, object_id, meta_key):
            return False

        table, column_name = resolved
        stmt = insert(table).values(
            {column_name: object_id, "meta_key": meta_key, "meta_value": maybe_serialize(meta_value)}
        )

        with self._database.begin() as connection:
            meta_id = connection.execute(stmt).inserted_primary_key[0]

        logger.debug("metadata.added", meta_type=meta_type, object_id=object_id, meta_key=meta_key)
        return int(meta_id)

    def update_metadata(
        self,
        meta_type: str,
        object_id: Any,
        meta_key: str,
        meta_value: Any,
        prev_value: Any = "",
    ) -> int | bool:
        """Update meta value, adding it when the key does not exist yet.

        Returns:
            meta_id when the value was added, True when updated,
            False on invalid input or when the value is unchanged.
        """
        resolved = self._resolve(meta_type)
        object_id = parse_object_id(object_id)

        if resolved is None or object_id is None or not meta_key:
            return False

        if not self.metadata_exists(meta_type, object_id, meta_key):
            return self.add_metadata(meta_type, object_id, meta_key, meta_value)

        table, column_name = resolved
        serialized = maybe_serialize(meta_value)
        conditions = [table.c[column_name] == object_id, table.c.meta_key == meta_key]

        if prev_value not in ("", None):
            conditions.append(table.c.meta_value == maybe_serialize(prev_value))
        else:
            current = self.get_metadata(meta_type, object_id, meta_key)
            if len(current) == 1 and maybe_serialize(current[0]) == serialized:
                return False

        stmt = update(table).where(*conditions).values(meta_value=serialized)

        with self._database.begin() as connection:
            count = connection.execute(stmt).rowcount

        return count > 0

    def delete_metadata(
        self,
        meta_type: str,
        object_id: Any,
        meta_key: str,
        meta_value: Any = "",
        delete_all: bool = False,
    ) -> bool:
        """Delete meta rows of a key.

        Args:
            meta_value: Only delete rows with this value ("" matches any).
            delete_all: Delete the key for every object, not only object_id.
        """
        resolved = self._resolve(meta_type)
        object_id = parse_object_id(object_id)

        if resolved is None or not meta_key or (object_id is None and not delete_all):
            return False

        table, column_name = resolved
        conditions = [table.c.meta_key == meta_key]

        if not delete_all:
            conditions.append(table.c[column_name] == object_id)

        if meta_value not in ("", None):
            conditions.append(table.c.meta_value == maybe_serialize(meta_value))

        with self._database.begin() as connection:
            count = connection.execute(delete(table).where(*conditions)).rowcount

        return count > 0

    def delete_object_metadata(self, meta_type: str, object_id: Any) -> int:
        """Delete every meta row of an object (used when the object is deleted)."""
        resolved = self._resolve(meta_type)
        object_id = parse_object_id(object_id)

        if resolved is None or object_id is None:
            return 0

        table, column_name = resolved
        with self._database.begin() as connection:
            return connection.execute(delete(table).where(table.c[column_name] == object_id)).rowcount
