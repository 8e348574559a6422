"""Domain Layer - models, collections and their concerns.

Models import the query layer, so this package only re-exports the
exceptions. Import models from wpmodel (or wpmodel.domain.model).
"""

from .exceptions import (
    InvalidQueryError,
    ModelException,
    ModelNotDefinedError,
    UnsupportedActionError,
    UnsupportedQueryError,
)

__all__ = [
    "ModelException",
    "ModelNotDefinedError",
    "UnsupportedActionError",
    "UnsupportedQueryError",
    "InvalidQueryError",
]
