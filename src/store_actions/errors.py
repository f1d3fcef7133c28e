"""Exceptions raised by store_actions."""

from typing import Any

ASSERT_STORE = "store_actions must be passed as a plugin to one store"
ASSERT_IS_INVALID = "Cached action is_invalid must be a function."
ASSERT_GET_KEY = "Cached action get_key must be a function."
ASSERT_GET_RESULT_KEY = "Cached action get_result_key must be a function."
ASSERT_ACTION_INVALID = "An action passed is not a valid action."
ASSERT_ROUTE_ACTION = "Invalid action name or function."


class StoreActionsError(Exception):
    """Base class for every error raised by store_actions."""


class ConfigurationError(StoreActionsError, TypeError):
    """A required callback was not callable."""


class BindingError(StoreActionsError, RuntimeError):
    """A store was bound twice, or was needed before one was bound."""


class InvalidActionError(StoreActionsError, TypeError):
    """An action table entry is neither a handler nor an action object."""


class ActionRejected(StoreActionsError):
    """A protected action returned a falsy value."""

    def __init__(self, reason: Any) -> None:
        super().__init__(f"Action rejected with {reason!r}")
        self.reason = reason


def require_callable(value: Any, message: str) -> None:
    """Raise ConfigurationError unless value is callable."""
    if not callable(value):
        raise ConfigurationError(message)
