"""Cache invalidated when the action's key changes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from store_actions.caches.base import CacheEngine
from store_actions.deferred import schedule
from store_actions.errors import ASSERT_GET_KEY, require_callable
from store_actions.types import UNSET, ActionHandler, FreeCallback, KeyFunction

if TYPE_CHECKING:
    from store_actions.runtime import ActionRuntime

logger = logging.getLogger(__name__)


class KeyedCache(CacheEngine):
    """Keeps one result for as long as create_cache_key(get_key(...)) is unchanged."""

    def __init__(
        self,
        runtime: ActionRuntime,
        get_key: KeyFunction,
        *,
        create_cache_key: Callable[[Any], str] | None = None,
        on_free: FreeCallback | None = None,
    ) -> None:
        require_callable(get_key, ASSERT_GET_KEY)
        super().__init__(runtime, on_free, create_cache_key)
        self._get_key = get_key
        self._key: Any = UNSET
        self._result: Any = UNSET

    @property
    def key(self) -> str | None:
        """The key of the cached result, if any."""
        return None if self._key is UNSET else self._key

    def dispose(self) -> None:
        if self._result is not UNSET:
            self._free(self._result)
        self._key = UNSET
        self._result = UNSET

    def _decorate(self, handler: ActionHandler, name: str) -> ActionHandler:
        @wraps(handler)
        def cached(context: Any, payload: Any = None) -> Any:
            key = self._cache_key(self._get_key(context, payload))

            if self._key is UNSET or key != self._key:
                if self._key is not UNSET:
                    logger.debug("Cache key for %r changed to %s", name, key)
                self.dispose()
                result = schedule(handler(context, payload))
                self._key = key
                self._result = result

            return self._result

        return cached
