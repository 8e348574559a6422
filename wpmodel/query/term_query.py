"""TermQuery - backend над WordPress terms (get_term, WP_Term_Query)."""

from typing import Any, Mapping

from wpmodel.config import get_logger
from wpmodel.infrastructure.wordpress import TermQueryResult, WordPress, get_wordpress, is_wp_error
from wpmodel.query.base import Query
from wpmodel.query.query_vars import QueryVars
from wpmodel.utils import parse_object_id

logger = get_logger(__name__)


class TermQuery(Query):
    """Query backend for taxonomies (object_type = taxonomy name)."""

    trans_query_vars = {
        "select": "fields",
        "limit": "number",
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
        term = self.wordpress.terms.get_term(parse_object_id(id), self.object_type or "")

        if term is None or is_wp_error(term):
            return None

        return term

    def do_query(self, query_vars: Any) -> TermQueryResult:
        if isinstance(query_vars, QueryVars):
            query_vars = query_vars.to_array()

        return self.wordpress.terms.query_terms(dict(query_vars))

    def extract_items(self, term_query: TermQueryResult) -> list[Any]:
        return term_query.terms

    def apply_query_var(self, name: str, *parameters: Any) -> None:
        if name == "orderby" and parameters:
            self._query_vars["orderby"] = parameters[0]
            self._query_vars["order"] = parameters[1] if len(parameters) > 1 else "DESC"
            return

        super().apply_query_var(name, *parameters)

    # ==================== Persistence ====================

    def insert(self, attributes: Mapping[str, Any]) -> int | None:
        """Insert term, None when "name" is missing or WordPress rejects it."""
        if "name" not in attributes:
            return None

        response = self.wordpress.terms.insert_term(attributes["name"], self.object_type or "", dict(attributes))

        if is_wp_error(response):
            logger.warning("query.term_insert_failed", taxonomy=self.object_type, error=str(response))
            return None

        return response["term_id"]

    def update(self, id: Any, dirty: Mapping[str, Any]) -> int | bool:
        updated = self.wordpress.terms.update_term(id, self.object_type or "", dict(dirty))

        if is_wp_error(updated):
            logger.warning("query.term_update_failed", term_id=id, error=str(updated))
            return False

        return updated["term_id"]

    def delete(self, id: Any, force: bool = False) -> bool:
        deleted = self.wordpress.terms.delete_term(id, self.object_type or "")

        return not is_wp_error(deleted) and deleted is True
