"""ActionRuntime - the binding state shared by every decorator.

The runtime holds the bound store, the active options, the shared watch
counters and every registered cache. Construct one per store (and one per
test); ``destroy()`` resets it so it can be bound again.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from functools import wraps
from typing import Any

from store_actions.actions import remap, transform_actions
from store_actions.caches import (
    ConditionalCache,
    Disposable,
    KeyedCache,
    ResultsCache,
)
from store_actions.deferred import action_optional, protect_result
from store_actions.errors import ASSERT_STORE, BindingError
from store_actions.guards import (
    RouteGuard,
    RouteNameCallback,
    RouteOtherwise,
    action_before_leave,
    action_before_route,
    default_otherwise,
)
from store_actions.loading import LoadingTracker
from store_actions.options import ActionsOptions, default_options
from store_actions.types import (
    ActionEntry,
    ActionHandler,
    ActionTree,
    CachedAction,
    CachedResultsAction,
    ConditionalAction,
    HostStore,
    LoadingHandler,
    WatchCounters,
)
from store_actions.watch import ActionWatcher

logger = logging.getLogger(__name__)

Hook = Callable[..., Any]


class ActionRuntime:
    """Decorates store actions with caching, watching, protection and loading."""

    def __init__(self, options: ActionsOptions | None = None) -> None:
        self._options = options if options is not None else default_options()
        self._store: HostStore | None = None
        self._counters = WatchCounters()
        self._disposables: list[Disposable] = []

    @property
    def store(self) -> HostStore | None:
        """The bound store, or None before plugin registration."""
        return self._store

    @property
    def options(self) -> ActionsOptions:
        return self._options

    @property
    def counters(self) -> WatchCounters:
        """Counters shared by watchers without their own on_actions_done."""
        return self._counters

    # -------------------------------------------------------------------------
    # Binding
    # -------------------------------------------------------------------------

    def plugin(
        self,
        *,
        on_action_start: Hook | None = None,
        on_action_reject: Hook | None = None,
        on_action_resolve: Hook | None = None,
        on_action_end: Hook | None = None,
        on_actions_done: Hook | None = None,
        create_cache_key: Callable[[Any], str] | None = None,
    ) -> Callable[[HostStore], None]:
        """Apply global options and return the store plugin.

        Usage:
            runtime = ActionRuntime()
            store = Store(plugins=[runtime.plugin(on_action_end=log_end)], ...)
        """
        self._options = self._options.merge(
            on_action_start=on_action_start,
            on_action_reject=on_action_reject,
            on_action_resolve=on_action_resolve,
            on_action_end=on_action_end,
            on_actions_done=on_actions_done,
            create_cache_key=create_cache_key,
        )
        return self.bind

    def bind(self, store: HostStore) -> None:
        """Bind the one store this runtime serves."""
        if self._store is not None:
            raise BindingError(ASSERT_STORE)
        logger.debug("Binding %r", store)
        self._store = store

    def require_store(self) -> HostStore:
        if self._store is None:
            raise BindingError(ASSERT_STORE)
        return self._store

    def destroy(self) -> None:
        """Reset the runtime so it can be bound to another store.

        Caches are freed while the old store is still bound.
        """
        logger.debug("Destroying runtime bound to %r", self._store)
        self.destroy_cache()
        self._store = None
        self._options = default_options()
        self._counters.call_number = 0
        self._counters.completed_count = 0

    # -------------------------------------------------------------------------
    # Caching
    # -------------------------------------------------------------------------

    def register_disposable(self, disposable: Disposable) -> None:
        self._disposables.append(disposable)

    def destroy_cache(self) -> None:
        """Free every cached result of every cached action.

        Useful for things like signing out.
        """
        disposables, self._disposables = self._disposables, []
        logger.debug("Destroying %d caches", len(disposables))
        for disposable in disposables:
            disposable.dispose()

    def action_cached_conditional(
        self, definition: ConditionalAction, *, name: str = ""
    ) -> ActionEntry:
        """Cache an action's result until is_invalid(context, payload) is true.

        The action always runs the first time.
        """
        cache = ConditionalCache(
            self, definition.is_invalid, on_free=definition.on_free
        )
        return cache.wrap(definition.action, name)

    def actions_cached_conditional(
        self, actions: Mapping[str, ConditionalAction]
    ) -> ActionTree:
        return remap(
            actions,
            lambda definition, name: self.action_cached_conditional(
                definition, name=name
            ),
        )

    def action_cached(
        self,
        definition: CachedAction,
        *,
        name: str = "",
        create_cache_key: Callable[[Any], str] | None = None,
    ) -> ActionEntry:
        """Cache an action's result until the key from definition.get_key changes.

        ``create_cache_key`` overrides the runtime's key serialization for
        this action only.
        """
        cache = KeyedCache(
            self,
            definition.get_key,
            create_cache_key=create_cache_key,
            on_free=definition.on_free,
        )
        return cache.wrap(definition.action, name)

    def actions_cached(
        self,
        actions: Mapping[str, CachedAction],
        *,
        create_cache_key: Callable[[Any], str] | None = None,
    ) -> ActionTree:
        return remap(
            actions,
            lambda definition, name: self.action_cached(
                definition, name=name, create_cache_key=create_cache_key
            ),
        )

    def action_cached_results(
        self,
        definition: CachedResultsAction,
        *,
        name: str = "",
        create_cache_key: Callable[[Any], str] | None = None,
    ) -> ActionEntry:
        """Cache one result per result key until the scope key changes."""
        cache = ResultsCache(
            self,
            definition.get_result_key,
            get_key=definition.get_key,
            create_cache_key=create_cache_key,
            on_free=definition.on_free,
        )
        return cache.wrap(definition.action, name)

    def actions_cached_results(
        self,
        actions: Mapping[str, CachedResultsAction],
        *,
        create_cache_key: Callable[[Any], str] | None = None,
    ) -> ActionTree:
        return remap(
            actions,
            lambda definition, name: self.action_cached_results(
                definition, name=name, create_cache_key=create_cache_key
            ),
        )

    # -------------------------------------------------------------------------
    # Watching, protection, loading
    # -------------------------------------------------------------------------

    def actions_watch(
        self,
        actions: Mapping[str, ActionEntry],
        *,
        on_action_start: Hook | None = None,
        on_action_reject: Hook | None = None,
        on_action_resolve: Hook | None = None,
        on_action_end: Hook | None = None,
        on_actions_done: Hook | None = None,
    ) -> ActionTree:
        """Report the lifecycle of the given actions.

        Hooks not passed here fall back to the runtime's options as they are
        when each action is dispatched. Passing ``on_actions_done`` gives
        these actions their own call counters; otherwise they share the
        runtime's, and done fires once all shared watched work has finished.
        """
        hooks = {
            "on_action_start": on_action_start,
            "on_action_reject": on_action_reject,
            "on_action_resolve": on_action_resolve,
            "on_action_end": on_action_end,
            "on_actions_done": on_actions_done,
        }
        counters = WatchCounters() if on_actions_done is not None else self._counters
        watcher = ActionWatcher(lambda: self._options.merge(**hooks), counters)
        return watcher.wrap(actions)

    def actions_protect(self, actions: Mapping[str, ActionEntry]) -> ActionTree:
        """Turn truthy/falsy results into resolved/rejected futures.

        Awaitable results pass through and decide for themselves.
        """

        def protect(handler: ActionHandler, name: str) -> ActionHandler:
            @wraps(handler)
            def protected(context: Any, payload: Any = None) -> Any:
                return protect_result(handler(context, payload))

            return protected

        return transform_actions(actions, protect)

    def actions_loading(
        self, signal: str | LoadingHandler, actions: Mapping[str, ActionEntry]
    ) -> ActionTree:
        """Signal loading while any of the given actions is pending.

        ``signal`` is a mutation name committed with True/False, or a
        callback invoked with (context, loading).
        """
        return LoadingTracker(self, signal).wrap(actions)

    # -------------------------------------------------------------------------
    # Routing
    # -------------------------------------------------------------------------

    def action_before_route(
        self,
        action: str | RouteNameCallback,
        get_otherwise: RouteOtherwise = default_otherwise,
    ) -> dict[str, RouteGuard]:
        return action_before_route(self, action, get_otherwise)

    def action_before_leave(
        self, action: str | RouteNameCallback, wait_for_finish: bool = False
    ) -> dict[str, RouteGuard]:
        return action_before_leave(self, action, wait_for_finish)

    @staticmethod
    def action_optional(
        awaitable: Awaitable[Any], resolve_on_reject: Callable[[], Any] = lambda: None
    ) -> Awaitable[Any]:
        return action_optional(awaitable, resolve_on_reject)


def create_runtime(
    *,
    on_action_start: Hook | None = None,
    on_action_reject: Hook | None = None,
    on_action_resolve: Hook | None = None,
    on_action_end: Hook | None = None,
    on_actions_done: Hook | None = None,
    create_cache_key: Callable[[Any], str] | None = None,
) -> ActionRuntime:
    """Create a runtime with the given global options.

    Returns:
        ActionRuntime whose ``bind`` (or ``plugin()``) attaches a store
    """
    options = default_options().merge(
        on_action_start=on_action_start,
        on_action_reject=on_action_reject,
        on_action_resolve=on_action_resolve,
        on_action_end=on_action_end,
        on_actions_done=on_actions_done,
        create_cache_key=create_cache_key,
    )
    return ActionRuntime(options)


__all__ = ["ActionRuntime", "create_runtime"]
