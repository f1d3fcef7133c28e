"""Busy-state aggregation across a table of asynchronous actions."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import wraps
from typing import TYPE_CHECKING, Any

from store_actions.actions import transform_actions
from store_actions.deferred import Pending, classify, when_settled
from store_actions.errors import ConfigurationError
from store_actions.types import ActionEntry, ActionHandler, ActionTree, LoadingHandler

if TYPE_CHECKING:
    from store_actions.runtime import ActionRuntime

logger = logging.getLogger(__name__)


class LoadingTracker:
    """Signals loading while any of its actions has a pending result.

    The signal is either a mutation name, committed on the bound store with
    the new boolean, or a callback invoked with (context, loading). It fires
    only when the loading state flips.
    """

    def __init__(self, runtime: ActionRuntime, signal: str | LoadingHandler) -> None:
        if not isinstance(signal, str) and not callable(signal):
            raise ConfigurationError(
                "Loading signal must be a mutation name or a function, "
                f"got {type(signal)}"
            )
        self._runtime = runtime
        self._signal = signal
        self._in_flight = 0
        self._loading = False

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def loading(self) -> bool:
        return self._loading

    def wrap(self, actions: Mapping[str, ActionEntry]) -> ActionTree:
        return transform_actions(actions, self._decorate)

    def _check(self, context: Any) -> None:
        loading_now = self._in_flight > 0
        if loading_now == self._loading:
            return

        if isinstance(self._signal, str):
            store = self._runtime.require_store()
            self._loading = loading_now
            logger.debug("Committing %s(%s)", self._signal, loading_now)
            store.commit(self._signal, loading_now)
        else:
            self._loading = loading_now
            self._signal(context, loading_now)

    def _decorate(self, handler: ActionHandler, name: str) -> ActionHandler:
        @wraps(handler)
        def tracked(context: Any, payload: Any = None) -> Any:
            if isinstance(self._signal, str):
                self._runtime.require_store()
            outcome = classify(handler(context, payload))

            if not isinstance(outcome, Pending):
                return outcome.value

            def finished(_: Any) -> None:
                self._in_flight -= 1
                self._check(context)

            self._in_flight += 1
            when_settled(outcome.future, finished, finished)
            self._check(context)
            return outcome.future

        return tracked


__all__ = ["LoadingTracker"]
