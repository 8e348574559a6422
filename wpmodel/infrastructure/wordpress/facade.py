"""WordPress facade - один entry point для posts, terms і metadata APIs."""

from wpmodel.config import Settings, get_logger
from wpmodel.infrastructure.database import Database, get_database
from wpmodel.infrastructure.wordpress.meta import MetadataAPI
from wpmodel.infrastructure.wordpress.posts import PostsAPI
from wpmodel.infrastructure.wordpress.terms import TermsAPI

logger = get_logger(__name__)


class WordPress:
    """WordPress data functions bound to one database.

    Example:
        >>> wp = WordPress(get_database())
        >>> post_id = wp.posts.insert_post({"post_title": "Hi", "post_type": "page"})
        >>> wp.meta.update_metadata("post", post_id, "color", "red")
    """

    def __init__(self, database: Database, settings: Settings | None = None) -> None:
        self.database = database
        self.meta = MetadataAPI(database)
        self.posts = PostsAPI(database, self.meta, settings)
        self.terms = TermsAPI(database, self.meta)

    def __repr__(self) -> str:
        return f"WordPress(database={self.database!r})"


# Singleton instance, rebuilt when the database singleton is replaced
_wordpress_instance: WordPress | None = None


def get_wordpress() -> WordPress:
    """Get WordPress facade bound to the current database singleton."""
    global _wordpress_instance
    database = get_database()

    if _wordpress_instance is None or _wordpress_instance.database is not database:
        _wordpress_instance = WordPress(database)
        logger.debug("wordpress.facade_created", database=repr(database))

    return _wordpress_instance


def set_wordpress(wordpress: WordPress) -> None:
    """Replace the facade (e.g. bound to a database with custom settings)."""
    global _wordpress_instance
    _wordpress_instance = wordpress


def reset_wordpress() -> None:
    """Forget the facade instance (for testing)."""
    global _wordpress_instance
    _wordpress_instance = None
