"""Posts API - get_post, wp_insert_post, WP_Query і т.д. на SQLAlchemy.

Поведінка повторює WordPress data functions:
- not found → None
- failed write → WPError
- wp_delete_post() без force відправляє post/page у trash
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from sqlalchemy import case, func, or_, select, update
from sqlalchemy.exc import SQLAlchemyError

from wpmodel.config import Settings, get_logger, get_settings
from wpmodel.infrastructure.wordpress.errors import WPError
from wpmodel.infrastructure.wordpress.meta import MetadataAPI
from wpmodel.utils import parse_id_list, parse_list, parse_object_id, sanitize_title

if TYPE_CHECKING:
    from wpmodel.infrastructure.database import Database

logger = get_logger(__name__)

# Statuses without a public slug (wp_insert_post не генерує post_name)
DRAFT_STATUSES = ("draft", "pending", "auto-draft")

# Statuses excluded by post_status="any"
EXCLUDED_FROM_ANY = ("trash", "auto-draft")

TRASH_SUFFIX = "__trashed"

# WP_Query orderby keywords → posts columns
ORDERBY_COLUMNS = {
    "ID": "ID",
    "id": "ID",
    "author": "post_author",
    "date": "post_date",
    "title": "post_title",
    "name": "post_name",
    "modified": "post_modified",
    "parent": "post_parent",
    "type": "post_type",
    "menu_order": "menu_order",
    "comment_count": "comment_count",
}


@dataclass
class PostQueryResult:
    """Result of query_posts() (the parts of WP_Query the backends use)."""

    posts: list[Any] = field(default_factory=list)
    found_posts: int = 0
    query_vars: dict[str, Any] = field(default_factory=dict)

    @property
    def post_count(self) -> int:
        return len(self.posts)


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class PostsAPI:
    """Post CRUD and queries over {prefix}posts.

    Example:
        >>> posts = PostsAPI(db, MetadataAPI(db))
        >>> post_id = posts.insert_post({"post_title": "Hello", "post_type": "page"})
        >>> posts.get_post_type(post_id)
        'page'
    """

    def __init__(
        self,
        database: "Database",
        meta: MetadataAPI,
        settings: Settings | None = None,
    ) -> None:
        self._database = database
        self._meta = meta
        self._settings = settings

    @property
    def settings(self) -> Settings:
        return self._settings or get_settings()

    @property
    def table(self):
        return self._database.get_table("posts")

    # ==================== Read ====================

    def get_post(self, post: Any) -> dict[str, Any] | None:
        """Get raw post row by ID (or anything parse_object_id understands)."""
        post_id = parse_object_id(post)
        if post_id is None:
            return None

        stmt = select(self.table).where(self.table.c.ID == post_id)

        with self._database.connect() as connection:
            row = connection.execute(stmt).mappings().first()

        return dict(row) if row is not None else None

    def get_post_type(self, post: Any) -> str | None:
        row = self.get_post(post)
        return row["post_type"] if row else None

    def get_post_status(self, post: Any) -> str | None:
        row = self.get_post(post)
        return row["post_status"] if row else None

    def post_exists(self, post: Any) -> bool:
        return self.get_post(post) is not None

    # ==================== Write ====================

    def insert_post(self, postarr: dict[str, Any]) -> int | WPError:
        """Insert a post (wp_insert_post).

        Args:
            postarr: Post fields. Unknown keys are ignored, ID is ignored.

        Returns:
            New post ID or WPError.
        """
        now = _now()
        columns = self.table.c

        data: dict[str, Any] = {
            "post_author": 0,
            "post_content": "",
            "post_content_filtered": "",
            "post_title": "",
            "post_excerpt": "",
            "post_status": "draft",
            "post_type": "post",
            "comment_status": "open",
            "ping_status": "open",
            "post_password": "",
            "to_ping": "",
            "pinged": "",
            "post_parent": 0,
            "menu_order": 0,
            "guid": "",
            "post_mime_type": "",
        }
        data.update({key: value for key, value in postarr.items() if key in columns and key != "ID"})

        if not data.get("post_type"):
            return WPError("invalid_post_type", "Invalid post type.")

        data.setdefault("post_date", now)
        data.setdefault("post_date_gmt", data["post_date"])
        data["post_modified"] = now
        data["post_modified_gmt"] = now

        if data["post_status"] not in DRAFT_STATUSES or data.get("post_name"):
            slug = sanitize_title(data.get("post_name") or data["post_title"])
            data["post_name"] = self._unique_slug(slug, data["post_type"]) if slug else ""

        try:
            post_id = self._database.table("posts").insert_get_id(data, "ID")
        except SQLAlchemyError as e:
            logger.error("wordpress.insert_post_failed", post_type=data["post_type"], error=str(e))
            return WPError("db_insert_error", "Could not insert post into the database.", data=str(e))

        if not post_id:
            return WPError("db_insert_error", "Could not insert post into the database.")

        logger.debug("wordpress.post_inserted", post_id=post_id, post_type=data["post_type"])
        return post_id

    def update_post(self, post: Any, postarr: dict[str, Any]) -> int | WPError:
        """Update a post (wp_update_post).

        Returns:
            Post ID or WPError("invalid_post").
        """
        current = self.get_post(post)
        if current is None:
            return WPError("invalid_post", "Invalid post ID.")

        values = {key: value for key, value in postarr.items() if key in self.table.c and key != "ID"}

        now = _now()
        values.setdefault("post_modified", now)
        values.setdefault("post_modified_gmt", now)

        if "post_name" in values and values["post_name"]:
            values["post_name"] = self._unique_slug(
                sanitize_title(values["post_name"]),
                values.get("post_type", current["post_type"]),
                exclude_id=current["ID"],
            )

        try:
            self._database.table("posts").where("ID", current["ID"]).update(values)
        except SQLAlchemyError as e:
            logger.error("wordpress.update_post_failed", post_id=current["ID"], error=str(e))
            return WPError("db_update_error", "Could not update post in the database.", data=str(e))

        return current["ID"]

    def trash_post(self, post: Any) -> dict[str, Any] | bool | None:
        """Move a post to the trash (wp_trash_post).

        Returns:
            Trashed post row, False if already trashed, None if not found.
            When trash is disabled, the post is deleted permanently.
        """
        if not self.settings.trash_enabled:
            return self.delete_post(post, force=True)

        current = self.get_post(post)
        if current is None:
            return None

        if current["post_status"] == "trash":
            return False

        post_id = current["ID"]
        self._meta.add_metadata("post", post_id, "_wp_trash_meta_status", current["post_status"])
        self._meta.add_metadata("post", post_id, "_wp_trash_meta_time", int(_now().timestamp()))

        values: dict[str, Any] = {"post_status": "trash"}
        if current["post_name"] and not current["post_name"].endswith(TRASH_SUFFIX):
            values["post_name"] = current["post_name"] + TRASH_SUFFIX

        self._database.table("posts").where("ID", post_id).update(values)
        logger.info("wordpress.post_trashed", post_id=post_id)
        return self.get_post(post_id)

    def untrash_post(self, post: Any) -> dict[str, Any] | bool | None:
        """Restore a post from the trash (wp_untrash_post).

        Returns:
            Restored post row, False if not trashed, None if not found.
        """
        current = self.get_post(post)
        if current is None:
            return None

        if current["post_status"] != "trash":
            return False

        post_id = current["ID"]
        status = self._meta.get_metadata("post", post_id, "_wp_trash_meta_status", single=True) or "draft"

        values: dict[str, Any] = {"post_status": status}
        if current["post_name"].endswith(TRASH_SUFFIX):
            values["post_name"] = current["post_name"][: -len(TRASH_SUFFIX)]

        self._database.table("posts").where("ID", post_id).update(values)
        self._meta.delete_metadata("post", post_id, "_wp_trash_meta_status")
        self._meta.delete_metadata("post", post_id, "_wp_trash_meta_time")

        logger.info("wordpress.post_untrashed", post_id=post_id, post_status=status)
        return self.get_post(post_id)

    def delete_post(self, post: Any, force: bool = False) -> dict[str, Any] | bool | None:
        """Delete a post (wp_delete_post).

        Без force posts і pages йдуть у trash (якщо trash увімкнений і
        post ще не в trash).

        Returns:
            Deleted (or trashed) post row, None if not found.
        """
        current = self.get_post(post)
        if current is None:
            return None

        if (
            not force
            and self.settings.trash_enabled
            and current["post_type"] in ("post", "page")
            and current["post_status"] != "trash"
        ):
            return self.trash_post(current["ID"])

        post_id = current["ID"]
        table = self.table

        with self._database.begin() as connection:
            # Children переходять до parent видаленого post
            connection.execute(
                update(table)
                .where(table.c.post_parent == post_id, table.c.post_type == current["post_type"])
                .values(post_parent=current["post_parent"])
            )
            connection.execute(table.delete().where(table.c.ID == post_id))

        self._meta.delete_object_metadata("post", post_id)

        logger.info("wordpress.post_deleted", post_id=post_id, post_type=current["post_type"])
        return current

    # ==================== Query ====================

    def query_posts(self, query_vars: dict[str, Any]) -> PostQueryResult:
        """Run a post query (WP_Query).

        Supported vars: p, name, post_type, post_status, post__in,
        post__not_in, post_parent, post_parent__in, author, s, orderby,
        order, posts_per_page, nopaging, offset, paged, fields, no_found_rows.
        """
        q = dict(query_vars)
        table = self.table
        conditions = []

        # post_type ("any" = всі типи)
        post_types = parse_list(q.get("post_type", "post"))
        if post_types and "any" not in post_types:
            conditions.append(table.c.post_type.in_(post_types))

        # post_status ("publish" by default, "any" = все, крім trash/auto-draft)
        statuses = parse_list(q.get("post_status")) or ["publish"]
        if "any" in statuses:
            conditions.append(table.c.post_status.not_in(EXCLUDED_FROM_ANY))
        else:
            conditions.append(table.c.post_status.in_(statuses))

        if q.get("p"):
            conditions.append(table.c.ID == parse_object_id(q["p"]))

        if q.get("name"):
            conditions.append(table.c.post_name == sanitize_title(q["name"]))

        post_in = parse_id_list(q.get("post__in"))
        if "post__in" in q and q["post__in"] not in (None, "") and not post_in:
            # post__in: [] нічого не знаходить
            return PostQueryResult(query_vars=q)

        if post_in:
            conditions.append(table.c.ID.in_(post_in))

        post_not_in = parse_id_list(q.get("post__not_in"))
        if post_not_in:
            conditions.append(table.c.ID.not_in(post_not_in))

        if q.get("post_parent") not in (None, ""):
            conditions.append(table.c.post_parent == int(q["post_parent"]))

        parent_in = parse_list(q.get("post_parent__in"))
        if parent_in:
            conditions.append(table.c.post_parent.in_([int(item) for item in parent_in]))

        authors = parse_list(q.get("author"))
        if authors:
            conditions.append(table.c.post_author.in_([int(item) for item in authors]))

        if q.get("s"):
            like = f"%{q['s']}%"
            conditions.append(or_(table.c.post_title.like(like), table.c.post_content.like(like)))

        stmt = select(table).where(*conditions)

        for clause in self._order_clauses(q, post_in):
            stmt = stmt.order_by(clause)

        # Paging
        per_page = q.get("posts_per_page", self.settings.posts_per_page)
        per_page = -1 if q.get("nopaging") else int(per_page if per_page not in (None, "") else -1)

        offset = q.get("offset")
        if offset in (None, "") and per_page > 0 and int(q.get("paged") or 1) > 1:
            offset = (int(q["paged"]) - 1) * per_page

        if per_page >= 0:
            stmt = stmt.limit(per_page)

        if offset not in (None, "") and int(offset) > 0:
            stmt = stmt.offset(int(offset))

        with self._database.connect() as connection:
            rows = [dict(row) for row in connection.execute(stmt).mappings()]

            found_posts = len(rows)
            if not q.get("no_found_rows") and per_page >= 0:
                count_stmt = select(func.count()).select_from(table).where(*conditions)
                found_posts = int(connection.execute(count_stmt).scalar_one())

        fields = q.get("fields", "")
        if fields == "ids":
            posts: list[Any] = [row["ID"] for row in rows]
        elif fields == "id=>parent":
            posts = [{"ID": row["ID"], "post_parent": row["post_parent"]} for row in rows]
        else:
            posts = rows

        return PostQueryResult(posts=posts, found_posts=found_posts, query_vars=q)

    def _order_clauses(self, q: dict[str, Any], post_in: list[int]) -> list[Any]:
        table = self.table
        default_order = str(q.get("order") or "DESC").upper()
        default_order = default_order if default_order in ("ASC", "DESC") else "DESC"

        orderby = q.get("orderby", "date")

        if orderby in ("none", None, ""):
            return []

        if orderby == "post__in":
            if not post_in:
                return []
            return [case({pid: index for index, pid in enumerate(post_in)}, value=table.c.ID)]

        if isinstance(orderby, dict):
            pairs = [(key, str(direction).upper()) for key, direction in orderby.items()]
        else:
            pairs = [(key, default_order) for key in str(orderby).replace(",", " ").split()]

        clauses = []
        for key, direction in pairs:
            name = ORDERBY_COLUMNS.get(key) or ORDERBY_COLUMNS.get(key.removeprefix("post_"))
            if name is None and key in table.c:
                name = key
            if name is None:
                continue

            column = table.c[name]
            clauses.append(column.asc() if direction == "ASC" else column.desc())

        return clauses

    # ==================== Helpers ====================

    def _unique_slug(self, slug: str, post_type: str, exclude_id: int | None = None) -> str:
        """Append -2, -3... until the slug is free within the post type."""
        table = self.table
        candidate, suffix = slug, 2

        with self._database.connect() as connection:
            while True:
                stmt = select(table.c.ID).where(table.c.post_name == candidate, table.c.post_type == post_type)
                if exclude_id is not None:
                    stmt = stmt.where(table.c.ID != exclude_id)

                if connection.execute(stmt.limit(1)).first() is None:
                    return candidate

                candidate = f"{slug}-{suffix}"
                suffix += 1
