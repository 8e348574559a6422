"""WordPress data functions (posts, terms, metadata) on SQLAlchemy."""

from .errors import WPError, is_wp_error
from .facade import WordPress, get_wordpress, reset_wordpress, set_wordpress
from .meta import MetadataAPI, maybe_serialize, maybe_unserialize
from .posts import PostQueryResult, PostsAPI
from .terms import TermQueryResult, TermsAPI

__all__ = [
    "WPError",
    "is_wp_error",
    "WordPress",
    "get_wordpress",
    "set_wordpress",
    "reset_wordpress",
    "MetadataAPI",
    "maybe_serialize",
    "maybe_unserialize",
    "PostsAPI",
    "PostQueryResult",
    "TermsAPI",
    "TermQueryResult",
]
