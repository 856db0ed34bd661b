"""Argument guards shared by the comment clients."""

from typing import Any


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an argument that can never succeed."""

    def __init__(self, argument: str, message: str) -> None:
        """Record the offending argument name alongside the message."""
        super().__init__(f"{message} (argument: {argument})")
        self.argument = argument


def argument_not_none(value: Any, name: str) -> None:
    """Reject ``None`` for a required argument."""
    if value is None:
        raise InvalidArgumentError(name, "Value cannot be None")


def argument_not_none_or_empty_string(value: str | None, name: str) -> None:
    """Reject ``None``, empty and whitespace-only strings."""
    argument_not_none(value, name)
    if not str(value).strip():
        raise InvalidArgumentError(name, "String cannot be empty")
