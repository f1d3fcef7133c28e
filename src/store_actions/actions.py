"""Action normalization.

Every decorator is built on ``transform_actions``: it accepts the two legal
action shapes (a bare handler, or an object carrying a handler and an
optional root flag) and rebuilds the same shape around a new handler.
"""

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from store_actions.errors import ASSERT_ACTION_INVALID, InvalidActionError
from store_actions.types import (
    ActionEntry,
    ActionHandler,
    ActionHandlerTransform,
    ActionObject,
    ActionTree,
)

S = TypeVar("S")
E = TypeVar("E")


def is_action_handler(entry: Any) -> bool:
    """Check if entry is a plain handler function."""
    return callable(entry) and not isinstance(entry, ActionObject)


def is_action_object(entry: Any) -> bool:
    """Check if entry carries a callable handler (and maybe a root flag)."""
    if isinstance(entry, ActionObject):
        return callable(entry.handler)
    return isinstance(entry, Mapping) and callable(entry.get("handler"))


def is_action(entry: Any) -> bool:
    return is_action_handler(entry) or is_action_object(entry)


def get_handler(entry: ActionEntry) -> ActionHandler:
    """Return the handler of an action entry."""
    if isinstance(entry, ActionObject):
        return entry.handler
    if isinstance(entry, Mapping) and callable(entry.get("handler")):
        return entry["handler"]
    if callable(entry):
        return entry
    raise InvalidActionError(ASSERT_ACTION_INVALID)


def transform_action(
    entry: ActionEntry, key: str, transform: ActionHandlerTransform
) -> ActionEntry:
    """Rebuild an action entry around transform(handler, key)."""
    if isinstance(entry, ActionObject):
        return ActionObject(handler=transform(entry.handler, key), root=entry.root)

    if isinstance(entry, Mapping):
        if not callable(entry.get("handler")):
            raise InvalidActionError(ASSERT_ACTION_INVALID)
        return {**entry, "handler": transform(entry["handler"], key)}

    if callable(entry):
        return transform(entry, key)

    raise InvalidActionError(ASSERT_ACTION_INVALID)


def transform_actions(
    actions: Mapping[str, ActionEntry], transform: ActionHandlerTransform
) -> ActionTree:
    """Rebuild every entry of an action table around a transformed handler."""
    return remap(actions, lambda entry, key: transform_action(entry, key, transform))


def remap(mapping: Mapping[str, S], mapper: Callable[[S, str], E]) -> dict[str, E]:
    """Build a new dict by mapping every (value, key) pair."""
    return {key: mapper(value, key) for key, value in mapping.items()}


__all__ = [
    "get_handler",
    "is_action",
    "is_action_handler",
    "is_action_object",
    "remap",
    "transform_action",
    "transform_actions",
]
