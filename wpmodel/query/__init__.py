"""Query layer - backends, query vars and the model query builder."""

from .query_vars import QueryVars
from .base import Query
from .db_query import DBQuery
from .post_query import PostQuery
from .term_query import TermQuery
from .builder import Builder

__all__ = [
    "QueryVars",
    "Query",
    "DBQuery",
    "PostQuery",
    "TermQuery",
    "Builder",
]
