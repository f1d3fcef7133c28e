"""Minimal host store - state, mutations, actions and plugins.

Actions decorated by store_actions work with any host exposing
``dispatch``/``commit``; this one exists so they can be used without a
framework, and so the decorators can be tested against a real dispatcher.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from store_actions.actions import get_handler, is_action
from store_actions.errors import ASSERT_ACTION_INVALID, InvalidActionError
from store_actions.types import ActionEntry

Mutation = Callable[[Any, Any], None]
Plugin = Callable[["Store"], Any]


class ActionContext:
    """What every action handler receives as its first argument."""

    __slots__ = ("_store",)

    def __init__(self, store: Store) -> None:
        self._store = store

    @property
    def state(self) -> Any:
        return self._store.state

    def commit(self, name: str, payload: Any = None) -> None:
        self._store.commit(name, payload)

    def dispatch(self, name: str, payload: Any = None) -> asyncio.Future[Any]:
        return self._store.dispatch(name, payload)


class Store:
    """A store whose dispatch always returns a future.

    Usage:
        runtime = ActionRuntime()
        store = Store(
            state=State(),
            mutations={"set_loading": set_loading},
            actions={**runtime.actions_loading("set_loading", {"load": load})},
            plugins=[runtime.plugin()],
        )
        await store.dispatch("load")
    """

    def __init__(
        self,
        *,
        state: Any = None,
        mutations: Mapping[str, Mutation] | None = None,
        actions: Mapping[str, ActionEntry] | None = None,
        plugins: Iterable[Plugin] = (),
    ) -> None:
        self.state = state
        self._mutations = dict(mutations or {})
        self._actions: dict[str, ActionEntry] = {}
        for name, entry in (actions or {}).items():
            if not is_action(entry):
                raise InvalidActionError(f"{ASSERT_ACTION_INVALID} ({name!r})")
            self._actions[name] = entry
        self._context = ActionContext(self)

        for plugin in plugins:
            plugin(self)

    def commit(self, name: str, payload: Any = None) -> None:
        """Apply a mutation to the state."""
        try:
            mutation = self._mutations[name]
        except KeyError:
            raise KeyError(f"Unknown mutation: {name!r}") from None
        mutation(self.state, payload)

    def dispatch(self, name: str, payload: Any = None) -> asyncio.Future[Any]:
        """Run an action, returning its result as a future.

        Must be called while an event loop is running.
        """
        try:
            entry = self._actions[name]
        except KeyError:
            raise KeyError(f"Unknown action: {name!r}") from None

        result = get_handler(entry)(self._context, payload)
        if inspect.isawaitable(result):
            return asyncio.ensure_future(result)

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        future.set_result(result)
        return future


__all__ = ["ActionContext", "Store"]
