"""Small helpers shared by models, backends and the WordPress facade."""

import re
import unicodedata
from collections.abc import Mapping
from typing import Any

_SNAKE_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def parse_object_id(obj: Any) -> int | None:
    """Resolve a WordPress object ID from an int, numeric string, row or model.

    Example:
        >>> parse_object_id("100"), parse_object_id({"term_id": 7}), parse_object_id("-1")
        (100, 7, None)
    """
    if isinstance(obj, bool) or obj is None:
        return None

    if isinstance(obj, int):
        return obj if obj > 0 else None

    if isinstance(obj, float):
        return int(obj) if obj > 0 else None

    if isinstance(obj, str):
        value = obj.strip()
        if value.isdigit() and int(value) > 0:
            return int(value)
        return None

    # Models: get_id() береться раніше за mapping access
    get_id = getattr(type(obj), "get_id", None)
    if callable(get_id):
        return parse_object_id(obj.get_id())

    if isinstance(obj, Mapping):
        for key in ("ID", "term_id"):
            if obj.get(key):
                return parse_object_id(obj[key])
        return None

    for key in ("ID", "term_id"):
        value = getattr(obj, key, None)
        if value:
            return parse_object_id(value)

    return None


def sanitize_title(title: Any, fallback: str = "") -> str:
    """Build a URL slug from a title (sanitize_title_with_dashes).

    Example:
        >>> sanitize_title("Héllo, World!")
        'hello-world'
    """
    text = unicodedata.normalize("NFKD", str(title or ""))
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    text = re.sub(r"[^a-z0-9_\s-]", "", text)
    text = re.sub(r"[\s_-]+", "-", text).strip("-")
    return text or fallback


def snake_case(name: str) -> str:
    """Convert CamelCase to snake_case ("HasMetadata" → "has_metadata")."""
    return _SNAKE_RE.sub("_", name).lower()


def class_basename(obj: Any) -> str:
    """Get the class name without module of an object or class."""
    cls = obj if isinstance(obj, type) else type(obj)
    return cls.__name__


def parse_list(value: Any) -> list[Any]:
    """Normalize a list-like query var (wp_parse_list).

    Example:
        >>> parse_list("a, b"), parse_list(["a"]), parse_list(5), parse_list(None)
        (['a', 'b'], ['a'], [5], [])
    """
    if value is None or value == "":
        return []

    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]

    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)

    return [value]


def parse_id_list(value: Any) -> list[int]:
    """Normalize a list of object IDs, dropping invalid ones (wp_parse_id_list)."""
    ids = (parse_object_id(item) for item in parse_list(value))
    return [object_id for object_id in ids if object_id]


def post_exists(post: Any) -> bool:
    """Check if a post with the given ID exists in the database."""
    from wpmodel.infrastructure.wordpress import get_wordpress

    return isinstance(get_wordpress().posts.get_post_status(post), str)
