"""WPError - structured error value (аналог WP_Error).

WordPress data functions не кидають exceptions: вони повертають
WPError / None / False. Backends (wpmodel.query) перекладають ці
sentinels у None (absence) або False (failed mutation).
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class WPError:
    """Error value returned by the WordPress collaborators.

    Example:
        >>> error = WPError("empty_term_name", "A name is required for this term.")
        >>> is_wp_error(error)
        True
    """

    code: str
    message: str = ""
    data: Any = field(default=None, compare=False)

    def __bool__(self) -> bool:
        # WPError - завжди "failure", навіть у boolean context
        return False

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}" if self.message else self.code


def is_wp_error(value: Any) -> bool:
    """Check if value is a WPError."""
    return isinstance(value, WPError)
