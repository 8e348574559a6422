"""wp-model - ORM layer for WordPress content.

Posts, terms and plain table rows as attribute-bearing models with dirty
tracking, lifecycle events and a fluent query builder.

Usage:
    from wpmodel import Post

    class Page(Post):
        object_type = "page"

    page = Page({"post_title": "About"})
    page.save()
    Page.query().orderby("ID", "ASC").limit(10).get()
"""

from wpmodel.domain.collection import Collection
from wpmodel.domain.concerns import AttributeStore, HasMetadata, Metadata
from wpmodel.domain.exceptions import (
    InvalidQueryError,
    ModelException,
    ModelNotDefinedError,
    UnsupportedActionError,
    UnsupportedQueryError,
)
from wpmodel.domain.model import Model
from wpmodel.domain.post import Post
from wpmodel.domain.term import Term
from wpmodel.infrastructure.messaging import EventOutcome
from wpmodel.query import Builder, DBQuery, PostQuery, Query, QueryVars, TermQuery
from wpmodel.utils import class_basename, parse_object_id, post_exists, snake_case

__version__ = "0.1.0"

__all__ = [
    "Model",
    "Post",
    "Term",
    "Collection",
    "AttributeStore",
    "HasMetadata",
    "Metadata",
    "EventOutcome",
    "Builder",
    "Query",
    "QueryVars",
    "DBQuery",
    "PostQuery",
    "TermQuery",
    "ModelException",
    "ModelNotDefinedError",
    "UnsupportedActionError",
    "UnsupportedQueryError",
    "InvalidQueryError",
    "parse_object_id",
    "post_exists",
    "class_basename",
    "snake_case",
]
