"""WordPress core tables - SQLAlchemy Core mapping.

Тільки таблиці, з якими працюють posts/terms backends та metadata.
Це ТІЛЬКИ схема для персистенції, БЕЗ логіки (логіка у wordpress/ facade).
Column defaults повторюють wp-admin/includes/schema.php.
"""

from sqlalchemy import (
    BigInteger,
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
)

# SQLite автоінкрементує тільки INTEGER PRIMARY KEY
_ID = BigInteger().with_variant(Integer, "sqlite")

CORE_TABLES = ("posts", "postmeta", "terms", "term_taxonomy", "termmeta")


def build_metadata(prefix: str = "wp_") -> MetaData:
    """Build MetaData with the WordPress core tables for a table prefix.

    Args:
        prefix: WordPress table prefix ("wp_" by default).

    Returns:
        MetaData containing {prefix}posts, {prefix}postmeta, {prefix}terms,
        {prefix}term_taxonomy and {prefix}termmeta.
    """
    metadata = MetaData()

    Table(
        f"{prefix}posts",
        metadata,
        Column("ID", _ID, primary_key=True, autoincrement=True),
        Column("post_author", BigInteger, nullable=False, default=0),
        Column("post_date", DateTime, nullable=True),
        Column("post_date_gmt", DateTime, nullable=True),
        Column("post_content", Text, nullable=False, default=""),
        Column("post_title", Text, nullable=False, default=""),
        Column("post_excerpt", Text, nullable=False, default=""),
        Column("post_status", String(20), nullable=False, default="publish"),
        Column("comment_status", String(20), nullable=False, default="open"),
        Column("ping_status", String(20), nullable=False, default="open"),
        Column("post_password", String(255), nullable=False, default=""),
        Column("post_name", String(200), nullable=False, default=""),
        Column("to_ping", Text, nullable=False, default=""),
        Column("pinged", Text, nullable=False, default=""),
        Column("post_modified", DateTime, nullable=True),
        Column("post_modified_gmt", DateTime, nullable=True),
        Column("post_content_filtered", Text, nullable=False, default=""),
        Column("post_parent", BigInteger, nullable=False, default=0),
        Column("guid", String(255), nullable=False, default=""),
        Column("menu_order", Integer, nullable=False, default=0),
        Column("post_type", String(20), nullable=False, default="post"),
        Column("post_mime_type", String(100), nullable=False, default=""),
        Column("comment_count", BigInteger, nullable=False, default=0),
        # Query: WP_Query по type/status/date (type_status_date в WordPress)
        Index(f"{prefix}posts_type_status_date", "post_type", "post_status", "post_date", "ID"),
        Index(f"{prefix}posts_post_parent", "post_parent"),
        Index(f"{prefix}posts_post_name", "post_name"),
    )

    Table(
        f"{prefix}postmeta",
        metadata,
        Column("meta_id", _ID, primary_key=True, autoincrement=True),
        Column("post_id", BigInteger, nullable=False, default=0, index=True),
        Column("meta_key", String(255), nullable=True, index=True),
        Column("meta_value", Text, nullable=True),
    )

    Table(
        f"{prefix}terms",
        metadata,
        Column("term_id", _ID, primary_key=True, autoincrement=True),
        Column("name", String(200), nullable=False, default=""),
        Column("slug", String(200), nullable=False, default="", index=True),
        Column("term_group", BigInteger, nullable=False, default=0),
    )

    Table(
        f"{prefix}term_taxonomy",
        metadata,
        Column("term_taxonomy_id", _ID, primary_key=True, autoincrement=True),
        Column("term_id", BigInteger, nullable=False, default=0),
        Column("taxonomy", String(32), nullable=False, default="", index=True),
        Column("description", Text, nullable=False, default=""),
        Column("parent", BigInteger, nullable=False, default=0),
        Column("count", BigInteger, nullable=False, default=0),
        UniqueConstraint("term_id", "taxonomy", name=f"{prefix}term_id_taxonomy"),
    )

    Table(
        f"{prefix}termmeta",
        metadata,
        Column("meta_id", _ID, primary_key=True, autoincrement=True),
        Column("term_id", BigInteger, nullable=False, default=0, index=True),
        Column("meta_key", String(255), nullable=True, index=True),
        Column("meta_value", Text, nullable=True),
    )

    return metadata
