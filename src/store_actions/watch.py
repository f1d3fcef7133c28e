"""Lifecycle watcher - start/resolve/reject/end/done notifications."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import wraps
from typing import Any

from store_actions.actions import transform_actions
from store_actions.deferred import Pending, classify, when_settled
from store_actions.options import ActionsOptions
from store_actions.types import ActionEntry, ActionHandler, ActionTree, WatchCounters


class ActionWatcher:
    """Reports the lifecycle of every dispatch of a watched action table.

    Each dispatch gets the next call number from ``counters``. When a call
    completes and the completed count catches up with the last number handed
    out, ``on_actions_done`` fires. Watchers that share counters therefore
    report done once all of their combined work has finished, whatever order
    the calls finish in.

    ``get_options`` is called once per dispatch, so hooks registered after
    the table was decorated still apply.
    """

    def __init__(
        self, get_options: Callable[[], ActionsOptions], counters: WatchCounters
    ) -> None:
        self._get_options = get_options
        self._counters = counters

    @property
    def counters(self) -> WatchCounters:
        return self._counters

    def wrap(self, actions: Mapping[str, ActionEntry]) -> ActionTree:
        return transform_actions(actions, self._decorate)

    def _check_done(self, options: ActionsOptions, context: Any) -> None:
        if self._counters.complete() == self._counters.call_number:
            options.on_actions_done(context)

    def _decorate(self, handler: ActionHandler, name: str) -> ActionHandler:
        @wraps(handler)
        def watched(context: Any, payload: Any = None) -> Any:
            options = self._get_options()
            outcome = classify(handler(context, payload))
            num = self._counters.next_number()

            options.on_action_start(name, num, context, payload)

            if isinstance(outcome, Pending):

                def resolved(value: Any) -> None:
                    options.on_action_resolve(name, num, context, payload, value)
                    options.on_action_end(name, num, context, payload, value, True)
                    self._check_done(options, context)

                def rejected(reason: BaseException) -> None:
                    options.on_action_reject(name, num, context, payload, reason)
                    options.on_action_end(name, num, context, payload, reason, False)
                    self._check_done(options, context)

                when_settled(outcome.future, resolved, rejected)
                return outcome.future

            options.on_action_end(name, num, context, payload, outcome.value, True)
            self._check_done(options, context)
            return outcome.value

        return watched


__all__ = ["ActionWatcher"]
