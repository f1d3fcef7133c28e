"""Route guards that wait on store actions.

A guard has the shape ``guard(to, from_, proceed)``. Calling ``proceed()``
continues navigation; calling it with a value redirects (a route) or aborts
(``False``).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from store_actions.deferred import Pending, classify, when_settled
from store_actions.errors import ASSERT_ROUTE_ACTION, InvalidActionError
from store_actions.types import HostStore

if TYPE_CHECKING:
    from store_actions.runtime import ActionRuntime

RouteGuard = Callable[[Any, Any, Callable[..., Any]], None]

# (to, from_, store) -> action name
RouteNameCallback = Callable[[Any, Any, HostStore], str]

# (to, from_, reject_reason, store, action) -> where to go instead
RouteOtherwise = Callable[[Any, Any, Any, HostStore, str], Any]


def default_otherwise(to: Any, from_: Any, reason: Any, *args: Any) -> Any:
    """Stop navigation."""
    return False


def to_action(
    action: str | RouteNameCallback, to: Any, from_: Any, store: HostStore
) -> str:
    """Resolve a route action input to an action name."""
    if isinstance(action, str):
        return action
    if callable(action):
        return action(to, from_, store)
    raise InvalidActionError(ASSERT_ROUTE_ACTION)


def _dispatch(
    store: HostStore,
    action: str,
    to: Any,
    from_: Any,
    on_resolve: Callable[[Any], Any],
    on_reject: Callable[[Any], Any],
) -> None:
    outcome = classify(store.dispatch(action, {"to": to, "from": from_}))
    if isinstance(outcome, Pending):
        when_settled(outcome.future, on_resolve, on_reject)
    else:
        on_resolve(outcome.value)


def action_before_route(
    runtime: ActionRuntime,
    action: str | RouteNameCallback,
    get_otherwise: RouteOtherwise = default_otherwise,
) -> dict[str, RouteGuard]:
    """Guards that enter a route only once the action resolves.

    On rejection, navigation proceeds to
    ``get_otherwise(to, from_, reason, store, action)``.
    """

    def guard(to: Any, from_: Any, proceed: Callable[..., Any]) -> None:
        store = runtime.require_store()
        name = to_action(action, to, from_, store)

        def resolved(_: Any) -> None:
            proceed()

        def rejected(reason: Any) -> None:
            proceed(get_otherwise(to, from_, reason, store, name))

        _dispatch(store, name, to, from_, resolved, rejected)

    return {
        "before_route_enter": guard,
        "before_route_update": guard,
    }


def action_before_leave(
    runtime: ActionRuntime,
    action: str | RouteNameCallback,
    wait_for_finish: bool = False,
) -> dict[str, RouteGuard]:
    """Guard that dispatches an action when leaving a route.

    Unless ``wait_for_finish`` is set, navigation proceeds immediately.
    """

    def guard(to: Any, from_: Any, proceed: Callable[..., Any]) -> None:
        store = runtime.require_store()
        name = to_action(action, to, from_, store)

        def finish(_: Any) -> None:
            if wait_for_finish:
                proceed()

        _dispatch(store, name, to, from_, finish, finish)

        if not wait_for_finish:
            proceed()

    return {"before_route_leave": guard}


__all__ = [
    "RouteGuard",
    "action_before_leave",
    "action_before_route",
    "default_otherwise",
    "to_action",
]
