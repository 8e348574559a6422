"""Model layer exceptions.

Тут тільки programming errors - помилки, які caller не може "обробити" і
продовжити. Absence (запис не знайдено) повертається як None, soft failure
(подію скасовано, backend відхилив зміну) повертається як False.
"""

from typing import Any


class ModelException(Exception):
    """Base exception for all model layer errors.

    Example:
        >>> raise ModelException("Something is wrong with the model", model="Page")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """Initialize model exception.

        Args:
            message: Human-readable error message.
            **context: Additional context (model class, query var, etc).
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context.

        Returns:
            Error message with context if available.
        """
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ModelNotDefinedError(ModelException, RuntimeError):
    """Raised when a builder needs a bound model but has none.

    Example:
        >>> Builder(PostQuery()).find(100)
        Traceback (most recent call last):
        ModelNotDefinedError: The model is not defined.
    """

    pass


class UnsupportedActionError(ModelException, RuntimeError):
    """Raised when neither the model nor its backend handles an action.

    Example:
        >>> raise UnsupportedActionError(
        ...     'The "restore" action is not supported in the [Page]',
        ...     action="restore",
        ...     model="Page",
        ... )
    """

    pass


class UnsupportedQueryError(ModelException, ValueError):
    """Raised when a query var cannot be applied to the backend var store."""

    pass


class InvalidQueryError(ModelException, TypeError):
    """Raised when a backend receives a query object of the wrong type."""

    pass
