"""PostQuery - backend над WordPress posts (get_post, WP_Query)."""

from typing import Any, Mapping

from wpmodel.config import get_logger
from wpmodel.infrastructure.wordpress import PostQueryResult, WordPress, get_wordpress, is_wp_error
from wpmodel.query.base import Query
from wpmodel.query.query_vars import QueryVars
from wpmodel.utils import parse_object_id

logger = get_logger(__name__)


class PostQuery(Query):
    """Query backend for post types.

    Example:
        >>> query = PostQuery({"post_type": "page"}).set_object_type("page")
        >>> query.apply_query_var("limit", 5)
        >>> query.to_array()
        {'post_type': 'page', 'posts_per_page': 5}
    """

    # Generic verbs → WP_Query vars
    trans_query_vars = {
        "select": "fields",
        "limit": "posts_per_page",
        "parent": "post_parent",
        "status": "post_status",
        "include": "post__in",
        "exclude": "post__not_in",
    }

    def __init__(
        self,
        main_query: Mapping[str, Any] | QueryVars | None = None,
        wordpress: WordPress | None = None,
    ) -> None:
        super().__init__(main_query)
        self._wordpress = wordpress

    @property
    def wordpress(self) -> WordPress:
        return self._wordpress or get_wordpress()

    def get_by_id(self, id: Any) -> dict[str, Any] | None:
        """Get post row, None when missing or of another post type."""
        post = self.wordpress.posts.get_post(parse_object_id(id))

        if not post or post["post_type"] != self.object_type:
            return None

        return post

    def do_query(self, query_vars: Any) -> PostQueryResult:
        if isinstance(query_vars, QueryVars):
            query_vars = query_vars.to_array()

        return self.wordpress.posts.query_posts(dict(query_vars))

    def extract_items(self, the_query: PostQueryResult) -> list[Any]:
        return the_query.posts

    def apply_query_var(self, name: str, *parameters: Any) -> None:
        # orderby завжди встановлює пару orderby + order
        if name == "orderby" and parameters:
            self._query_vars["orderby"] = parameters[0]
            self._query_vars["order"] = parameters[1] if len(parameters) > 1 else "DESC"
            return

        super().apply_query_var(name, *parameters)

    # ==================== Persistence ====================

    def insert(self, attributes: Mapping[str, Any]) -> int | None:
        """Insert post (post_type defaults to the backend object type)."""
        attributes = dict(attributes)
        if self.object_type:
            attributes.setdefault("post_type", self.object_type)

        post_id = self.wordpress.posts.insert_post(attributes)

        if is_wp_error(post_id):
            logger.warning("query.post_insert_failed", post_type=self.object_type, error=str(post_id))
            return None

        return post_id

    def update(self, id: Any, dirty: Mapping[str, Any]) -> bool:
        posts = self.wordpress.posts

        if not dirty or not posts.post_exists(id):
            return False

        updated = posts.update_post(id, dict(dirty))

        if is_wp_error(updated):
            logger.warning("query.post_update_failed", post_id=id, error=str(updated))
            return False

        return updated not in (0, None)

    def delete(self, id: Any, force: bool = False) -> bool:
        """Trash the post, or delete it permanently.

        Permanent delete: force, trash disabled (empty_trash_days = 0),
        або post вже у trash.
        """
        posts = self.wordpress.posts

        if not force and posts.settings.trash_enabled and posts.get_post_status(id) != "trash":
            deleted = posts.trash_post(id)
        else:
            deleted = posts.delete_post(id, force=True)

        return deleted is not None and deleted is not False and not is_wp_error(deleted)
