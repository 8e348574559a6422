"""Post - base model for WordPress post types."""

from typing import ClassVar

from wpmodel.domain.model import Model
from wpmodel.query.post_query import PostQuery


class Post(Model):
    """Model backed by {prefix}posts through the WordPress posts API.

    Subclass per post type:

    Example:
        >>> class Page(Post):
        ...     object_type = "page"
        >>> page = Page({"post_title": "About", "post_status": "publish"})
        >>> page.save()
        True
        >>> Page.query().orderby("ID", "ASC").limit(10).get()
    """

    object_type: ClassVar[str | None] = "post"
    table: ClassVar[str | None] = "posts"
    primary_key: ClassVar[str] = "ID"

    def new_query(self) -> PostQuery:
        # Всі posts цього типу; статус за замовчуванням - як у WP_Query ("publish")
        return PostQuery({"post_type": self.get_object_type(), "posts_per_page": -1})

    def resolve_internal_type(self) -> str:
        return "post"

    @property
    def is_trashed(self) -> bool:
        return self.get_attribute("post_status") == "trash"
