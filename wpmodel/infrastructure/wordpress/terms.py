"""Terms API - get_term, wp_insert_term, WP_Term_Query і т.д.

Term = row у {prefix}terms + row у {prefix}term_taxonomy.
Один term_id може належати кільком taxonomies, тому більшість операцій
scoped по taxonomy.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from sqlalchemy import case, delete, func, insert, select, update
from sqlalchemy.exc import SQLAlchemyError

from wpmodel.config import get_logger
from wpmodel.infrastructure.wordpress.errors import WPError
from wpmodel.infrastructure.wordpress.meta import MetadataAPI
from wpmodel.utils import parse_id_list, parse_list, parse_object_id, sanitize_title

if TYPE_CHECKING:
    from wpmodel.infrastructure.database import Database

logger = get_logger(__name__)

# WP_Term_Query orderby keywords → (table, column)
ORDERBY_COLUMNS = {
    "name": ("terms", "name"),
    "slug": ("terms", "slug"),
    "term_group": ("terms", "term_group"),
    "term_id": ("terms", "term_id"),
    "id": ("terms", "term_id"),
    "ID": ("terms", "term_id"),
    "description": ("term_taxonomy", "description"),
    "parent": ("term_taxonomy", "parent"),
    "count": ("term_taxonomy", "count"),
    "term_taxonomy_id": ("term_taxonomy", "term_taxonomy_id"),
}


@dataclass
class TermQueryResult:
    """Result of query_terms() (the parts of WP_Term_Query the backends use)."""

    terms: Any = field(default_factory=list)
    query_vars: dict[str, Any] = field(default_factory=dict)


class TermsAPI:
    """Term CRUD and queries over {prefix}terms + {prefix}term_taxonomy.

    Example:
        >>> terms = TermsAPI(db, MetadataAPI(db))
        >>> terms.insert_term("News", "category")
        {'term_id': 1, 'term_taxonomy_id': 1}
    """

    def __init__(self, database: "Database", meta: MetadataAPI) -> None:
        self._database = database
        self._meta = meta

    @property
    def terms_table(self):
        return self._database.get_table("terms")

    @property
    def taxonomy_table(self):
        return self._database.get_table("term_taxonomy")

    def _select(self):
        terms, tt = self.terms_table, self.taxonomy_table
        return select(
            terms.c.term_id,
            terms.c.name,
            terms.c.slug,
            terms.c.term_group,
            tt.c.term_taxonomy_id,
            tt.c.taxonomy,
            tt.c.description,
            tt.c.parent,
            tt.c.count,
        ).select_from(terms.join(tt, tt.c.term_id == terms.c.term_id))

    # ==================== Read ====================

    def get_term(self, term: Any, taxonomy: str = "") -> dict[str, Any] | WPError | None:
        """Get a term row.

        Returns:
            Term dict, None if not found, WPError("invalid_term") for empty ID.
        """
        term_id = parse_object_id(term)
        if term_id is None:
            return WPError("invalid_term", "Empty Term.")

        stmt = self._select().where(self.terms_table.c.term_id == term_id)
        if taxonomy:
            stmt = stmt.where(self.taxonomy_table.c.taxonomy == taxonomy)

        with self._database.connect() as connection:
            row = connection.execute(stmt.limit(1)).mappings().first()

        return dict(row) if row is not None else None

    # ==================== Write ====================

    def insert_term(self, term: Any, taxonomy: str, args: dict[str, Any] | None = None) -> dict[str, int] | WPError:
        """Insert a term (wp_insert_term).

        Args:
            term: Term name.
            taxonomy: Taxonomy name.
            args: slug, description, parent, term_group. Other keys are ignored.

        Returns:
            {"term_id": ..., "term_taxonomy_id": ...} or WPError.
        """
        args = dict(args or {})

        if not taxonomy:
            return WPError("invalid_taxonomy", "Invalid taxonomy.")

        name = str(term if term is not None else "").strip()
        if not name:
            return WPError("empty_term_name", "A name is required for this term.")

        parent = int(args.get("parent") or 0)
        if parent and not isinstance(self.get_term(parent, taxonomy), dict):
            return WPError("missing_parent", "Parent term does not exist.")

        existing = self._find_by_name(name, taxonomy, parent)
        if existing is not None:
            return WPError("term_exists", "A term with the name provided already exists.", data=existing)

        slug = sanitize_title(args.get("slug") or name, fallback=name.lower())
        slug = self._unique_slug(slug, taxonomy)

        try:
            with self._database.begin() as connection:
                term_id = connection.execute(
                    insert(self.terms_table).values(
                        name=name,
                        slug=slug,
                        term_group=int(args.get("term_group") or 0),
                    )
                ).inserted_primary_key[0]

                term_taxonomy_id = connection.execute(
                    insert(self.taxonomy_table).values(
                        term_id=term_id,
                        taxonomy=taxonomy,
                        description=str(args.get("description") or ""),
                        parent=parent,
                        count=0,
                    )
                ).inserted_primary_key[0]
        except SQLAlchemyError as e:
            logger.error("wordpress.insert_term_failed", taxonomy=taxonomy, error=str(e))
            return WPError("db_insert_error", "Could not insert term into the database.", data=str(e))

        logger.debug("wordpress.term_inserted", term_id=term_id, taxonomy=taxonomy)
        return {"term_id": int(term_id), "term_taxonomy_id": int(term_taxonomy_id)}

    def update_term(self, term: Any, taxonomy: str, args: dict[str, Any]) -> dict[str, int] | WPError:
        """Update a term (wp_update_term).

        Returns:
            {"term_id": ..., "term_taxonomy_id": ...} or WPError.
        """
        if not taxonomy:
            return WPError("invalid_taxonomy", "Invalid taxonomy.")

        current = self.get_term(term, taxonomy)
        if not isinstance(current, dict):
            return WPError("invalid_term", "Empty Term.")

        term_values: dict[str, Any] = {}
        taxonomy_values: dict[str, Any] = {}

        if "name" in args:
            name = str(args["name"] if args["name"] is not None else "").strip()
            if not name:
                return WPError("empty_term_name", "A name is required for this term.")
            term_values["name"] = name

        if "parent" in args:
            parent = int(args["parent"] or 0)
            if parent and (parent == current["term_id"] or not isinstance(self.get_term(parent, taxonomy), dict)):
                return WPError("missing_parent", "Parent term does not exist.")
            taxonomy_values["parent"] = parent

        if args.get("slug"):
            slug = sanitize_title(args["slug"])
            if self._slug_taken(slug, taxonomy, exclude_id=current["term_id"]):
                return WPError("duplicate_term_slug", f'The slug "{slug}" is already in use by another term.')
            term_values["slug"] = slug

        if "term_group" in args:
            term_values["term_group"] = int(args["term_group"] or 0)

        if "description" in args:
            taxonomy_values["description"] = str(args["description"] or "")

        terms, tt = self.terms_table, self.taxonomy_table

        try:
            with self._database.begin() as connection:
                if term_values:
                    connection.execute(
                        update(terms).where(terms.c.term_id == current["term_id"]).values(**term_values)
                    )
                if taxonomy_values:
                    connection.execute(
                        update(tt)
                        .where(tt.c.term_taxonomy_id == current["term_taxonomy_id"])
                        .values(**taxonomy_values)
                    )
        except SQLAlchemyError as e:
            logger.error("wordpress.update_term_failed", term_id=current["term_id"], error=str(e))
            return WPError("db_update_error", "Could not update term in the database.", data=str(e))

        return {"term_id": current["term_id"], "term_taxonomy_id": current["term_taxonomy_id"]}

    def delete_term(self, term: Any, taxonomy: str) -> bool | WPError:
        """Delete a term from a taxonomy (wp_delete_term).

        Children переходять до parent видаленого term. Row у {prefix}terms
        видаляється, коли term більше не належить жодній taxonomy.

        Returns:
            True on success, False if the term does not exist, or WPError.
        """
        if not taxonomy:
            return WPError("invalid_taxonomy", "Invalid taxonomy.")

        current = self.get_term(term, taxonomy)
        if current is None:
            return False

        if isinstance(current, WPError):
            return current

        terms, tt = self.terms_table, self.taxonomy_table
        term_id = current["term_id"]

        with self._database.begin() as connection:
            connection.execute(
                update(tt)
                .where(tt.c.parent == term_id, tt.c.taxonomy == taxonomy)
                .values(parent=current["parent"])
            )
            connection.execute(delete(tt).where(tt.c.term_taxonomy_id == current["term_taxonomy_id"]))

            remaining = connection.execute(
                select(func.count()).select_from(tt).where(tt.c.term_id == term_id)
            ).scalar_one()

            if not remaining:
                connection.execute(delete(terms).where(terms.c.term_id == term_id))

        if not remaining:
            self._meta.delete_object_metadata("term", term_id)

        logger.info("wordpress.term_deleted", term_id=term_id, taxonomy=taxonomy)
        return True

    # ==================== Query ====================

    def query_terms(self, query_vars: dict[str, Any]) -> TermQueryResult:
        """Run a term query (WP_Term_Query).

        Supported vars: taxonomy, include, exclude, parent, slug, name,
        search, hide_empty, orderby, order, number, offset, fields.
        """
        q = dict(query_vars)
        terms, tt = self.terms_table, self.taxonomy_table
        stmt = self._select()

        taxonomies = parse_list(q.get("taxonomy"))
        if taxonomies:
            stmt = stmt.where(tt.c.taxonomy.in_(taxonomies))

        include = parse_id_list(q.get("include"))
        if include:
            stmt = stmt.where(terms.c.term_id.in_(include))

        exclude = parse_id_list(q.get("exclude"))
        if exclude:
            stmt = stmt.where(terms.c.term_id.not_in(exclude))

        if q.get("parent") not in (None, ""):
            stmt = stmt.where(tt.c.parent == int(q["parent"]))

        slugs = parse_list(q.get("slug"))
        if slugs:
            stmt = stmt.where(terms.c.slug.in_([sanitize_title(slug) for slug in slugs]))

        names = parse_list(q.get("name"))
        if names:
            stmt = stmt.where(terms.c.name.in_(names))

        if q.get("search"):
            like = f"%{q['search']}%"
            stmt = stmt.where(terms.c.name.like(like) | terms.c.slug.like(like))

        if q.get("hide_empty", True):
            stmt = stmt.where(tt.c.count > 0)

        stmt = self._apply_order(stmt, q, include)

        number = int(q.get("number") or 0)
        if number > 0:
            stmt = stmt.limit(number)

        offset = int(q.get("offset") or 0)
        if offset > 0:
            stmt = stmt.offset(offset)

        with self._database.connect() as connection:
            rows = [dict(row) for row in connection.execute(stmt).mappings()]

        fields = q.get("fields") or "all"
        if fields == "ids":
            result: Any = [row["term_id"] for row in rows]
        elif fields == "names":
            result = [row["name"] for row in rows]
        elif fields == "slugs":
            result = [row["slug"] for row in rows]
        elif fields == "count":
            result = len(rows)
        else:
            result = rows

        return TermQueryResult(terms=result, query_vars=q)

    def _apply_order(self, stmt, q: dict[str, Any], include: list[int]):
        orderby = q.get("orderby", "name")
        order = str(q.get("order") or "ASC").upper()
        order = order if order in ("ASC", "DESC") else "ASC"

        if orderby in ("none", None, ""):
            return stmt

        if orderby == "include" and include:
            return stmt.order_by(
                case({tid: index for index, tid in enumerate(include)}, value=self.terms_table.c.term_id)
            )

        table_name, column_name = ORDERBY_COLUMNS.get(str(orderby), ("terms", "name"))
        table = self.terms_table if table_name == "terms" else self.taxonomy_table
        column = table.c[column_name]

        return stmt.order_by(column.asc() if order == "ASC" else column.desc())

    # ==================== Helpers ====================

    def _find_by_name(self, name: str, taxonomy: str, parent: int) -> int | None:
        terms, tt = self.terms_table, self.taxonomy_table
        stmt = (
            select(terms.c.term_id)
            .select_from(terms.join(tt, tt.c.term_id == terms.c.term_id))
            .where(tt.c.taxonomy == taxonomy, tt.c.parent == parent, terms.c.name == name)
            .limit(1)
        )

        with self._database.connect() as connection:
            return connection.execute(stmt).scalar()

    def _slug_taken(self, slug: str, taxonomy: str, exclude_id: int | None = None) -> bool:
        terms, tt = self.terms_table, self.taxonomy_table
        stmt = (
            select(terms.c.term_id)
            .select_from(terms.join(tt, tt.c.term_id == terms.c.term_id))
            .where(tt.c.taxonomy == taxonomy, terms.c.slug == slug)
        )
        if exclude_id is not None:
            stmt = stmt.where(terms.c.term_id != exclude_id)

        with self._database.connect() as connection:
            return connection.execute(stmt.limit(1)).first() is not None

    def _unique_slug(self, slug: str, taxonomy: str) -> str:
        candidate, suffix = slug, 2
        while self._slug_taken(candidate, taxonomy):
            candidate = f"{slug}-{suffix}"
            suffix += 1
        return candidate
