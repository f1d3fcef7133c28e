"""Cache invalidated by a caller-supplied predicate."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Any

from store_actions.caches.base import CacheEngine
from store_actions.deferred import schedule
from store_actions.errors import ASSERT_IS_INVALID, require_callable
from store_actions.types import UNSET, ActionHandler, FreeCallback

if TYPE_CHECKING:
    from store_actions.runtime import ActionRuntime


class ConditionalCache(CacheEngine):
    """Keeps one result until is_invalid(context, payload) returns true.

    The handler always runs on the first dispatch.
    """

    def __init__(
        self,
        runtime: ActionRuntime,
        is_invalid: Callable[[Any, Any], Any],
        *,
        on_free: FreeCallback | None = None,
    ) -> None:
        require_callable(is_invalid, ASSERT_IS_INVALID)
        super().__init__(runtime, on_free)
        self._is_invalid = is_invalid
        self._result: Any = UNSET

    def dispose(self) -> None:
        if self._result is not UNSET:
            self._free(self._result)
        self._result = UNSET

    def _decorate(self, handler: ActionHandler, name: str) -> ActionHandler:
        @wraps(handler)
        def cached(context: Any, payload: Any = None) -> Any:
            if self._result is UNSET or self._is_invalid(context, payload):
                self.dispose()
                self._result = schedule(handler(context, payload))
            return self._result

        return cached
