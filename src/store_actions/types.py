"""Core types for store_actions."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import (
    Any,
    Protocol,
    TypeAlias,
    runtime_checkable,
)

# handler(context, payload) -> immediate value or awaitable
ActionHandler: TypeAlias = Callable[[Any, Any], Any]

# (handler, action name) -> decorated handler
ActionHandlerTransform: TypeAlias = Callable[[ActionHandler, str], ActionHandler]

# on_free(store, evicted result)
FreeCallback: TypeAlias = Callable[[Any, Any], Any]

# (context, payload) -> anything that create_cache_key can stringify
KeyFunction: TypeAlias = Callable[[Any, Any], Any]

# (context, loading) -> None
LoadingHandler: TypeAlias = Callable[[Any, bool], Any]


class _Unset:
    """Marker for a cache slot that holds nothing yet."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()


@dataclass(frozen=True, slots=True)
class ActionObject:
    """An action with an optional root flag."""

    handler: ActionHandler
    root: bool = False


# A bare handler, an ActionObject, or a mapping with a callable "handler".
ActionEntry: TypeAlias = ActionHandler | ActionObject | Mapping[str, Any]

ActionTree: TypeAlias = dict[str, ActionEntry]


@dataclass(frozen=True, slots=True)
class ConditionalAction:
    """An action cached until is_invalid(context, payload) returns true."""

    action: ActionEntry
    is_invalid: Callable[[Any, Any], Any]
    on_free: FreeCallback | None = None


@dataclass(frozen=True, slots=True)
class CachedAction:
    """An action cached until the key from get_key changes."""

    action: ActionEntry
    get_key: KeyFunction
    on_free: FreeCallback | None = None


@dataclass(frozen=True, slots=True)
class CachedResultsAction:
    """An action caching one result per result key within a scope key."""

    action: ActionEntry
    get_result_key: KeyFunction
    get_key: KeyFunction | None = None
    on_free: FreeCallback | None = None


@dataclass(slots=True)
class WatchCounters:
    """Call numbers handed out and calls completed within one scope."""

    call_number: int = 0
    completed_count: int = 0

    def next_number(self) -> int:
        self.call_number += 1
        return self.call_number

    def complete(self) -> int:
        self.completed_count += 1
        return self.completed_count


@runtime_checkable
class HostStore(Protocol):
    """The store the runtime is bound to."""

    def dispatch(self, name: str, payload: Any = None) -> Any:
        """Dispatch an action, returning an awaitable."""
        ...

    def commit(self, name: str, payload: Any = None) -> None:
        """Commit a mutation."""
        ...
