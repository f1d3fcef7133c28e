"""Cache holding one result per result key, cleared when the scope key changes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from store_actions.caches.base import CacheEngine
from store_actions.deferred import schedule
from store_actions.errors import ASSERT_GET_RESULT_KEY, require_callable
from store_actions.types import UNSET, ActionHandler, FreeCallback, KeyFunction

if TYPE_CHECKING:
    from store_actions.runtime import ActionRuntime

logger = logging.getLogger(__name__)


class ResultsCache(CacheEngine):
    """Caches every distinct result key of an action within one scope.

    Example: cache "comment X" per post; when the post (scope key) changes,
    every cached comment is freed and the next dispatch for any comment
    runs the handler again.
    """

    def __init__(
        self,
        runtime: ActionRuntime,
        get_result_key: KeyFunction,
        *,
        get_key: KeyFunction | None = None,
        create_cache_key: Callable[[Any], str] | None = None,
        on_free: FreeCallback | None = None,
    ) -> None:
        require_callable(get_result_key, ASSERT_GET_RESULT_KEY)
        super().__init__(runtime, on_free, create_cache_key)
        self._get_result_key = get_result_key
        self._get_key = get_key
        self._scope: Any = UNSET
        self._results: dict[str, Any] = {}

    def __len__(self) -> int:
        return len(self._results)

    def dispose(self) -> None:
        for result in self._results.values():
            self._free(result)
        self._scope = UNSET
        self._results = {}

    def _decorate(self, handler: ActionHandler, name: str) -> ActionHandler:
        @wraps(handler)
        def cached(context: Any, payload: Any = None) -> Any:
            scope = (
                self._cache_key(self._get_key(context, payload))
                if self._get_key is not None
                else UNSET
            )
            if scope != self._scope:
                if self._results:
                    logger.debug(
                        "Scope of %r changed to %s, freeing %d results",
                        name,
                        scope,
                        len(self._results),
                    )
                self.dispose()
                self._scope = scope

            result_key = self._cache_key(self._get_result_key(context, payload))
            if result_key not in self._results:
                self._results[result_key] = schedule(handler(context, payload))

            return self._results[result_key]

        return cached
