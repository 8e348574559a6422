"""Term - base model for WordPress taxonomies."""

from typing import ClassVar

from wpmodel.domain.model import Model
from wpmodel.query.term_query import TermQuery


class Term(Model):
    """Model backed by {prefix}terms + {prefix}term_taxonomy.

    ``object_type`` is the taxonomy name.

    Example:
        >>> class Genre(Term):
        ...     object_type = "genre"
        >>> Genre({"name": "Sci-Fi"}).save()
        True
    """

    object_type: ClassVar[str | None] = "category"
    table: ClassVar[str | None] = "terms"
    primary_key: ClassVar[str] = "term_id"

    def new_query(self) -> TermQuery:
        return TermQuery({"taxonomy": self.get_object_type(), "hide_empty": False})

    def resolve_internal_type(self) -> str:
        return "term"
