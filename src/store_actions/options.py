"""Plugin options and per-call overrides."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from typing import Any


def create_cache_key(value: Any) -> str:
    """Serialize a key value to a canonical string."""
    return json.dumps(value, sort_keys=True, default=str)


def _noop(*args: Any) -> None:
    return None


@dataclass(frozen=True, slots=True)
class ActionsOptions:
    """Lifecycle callbacks and cache key creation.

    Callbacks receive:
        on_action_start(action, num, context, payload)
        on_action_reject(action, num, context, payload, reason)
        on_action_resolve(action, num, context, payload, resolved)
        on_action_end(action, num, context, payload, result, resolved)
        on_actions_done(context)
    """

    on_action_start: Callable[..., Any] = _noop
    on_action_reject: Callable[..., Any] = _noop
    on_action_resolve: Callable[..., Any] = _noop
    on_action_end: Callable[..., Any] = _noop
    on_actions_done: Callable[..., Any] = _noop
    create_cache_key: Callable[[Any], str] = create_cache_key

    def merge(self, **overrides: Callable[..., Any] | None) -> ActionsOptions:
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown options: {', '.join(sorted(unknown))}")

        changes = {name: fn for name, fn in overrides.items() if fn is not None}
        if not changes:
            return self
        return replace(self, **changes)


def default_options() -> ActionsOptions:
    """Options with no-op callbacks and JSON cache keys."""
    return ActionsOptions()


__all__ = ["ActionsOptions", "create_cache_key", "default_options"]
