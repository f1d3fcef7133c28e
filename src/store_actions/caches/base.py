"""Base class and protocol shared by the cache engines."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from store_actions.actions import transform_action
from store_actions.types import ActionEntry, ActionHandler, FreeCallback

if TYPE_CHECKING:
    from store_actions.runtime import ActionRuntime

logger = logging.getLogger(__name__)


@runtime_checkable
class Disposable(Protocol):
    """Anything the runtime can tear down with destroy_cache()."""

    def dispose(self) -> None:
        """Free every live cached value and reset to empty."""
        ...


class CacheEngine(ABC):
    """A cache owning the record for one action.

    The engine registers itself with the runtime on construction so that
    ``ActionRuntime.destroy_cache()`` reaches it. Without a
    ``create_cache_key`` of its own, keys are serialized with the runtime's
    current options at dispatch time.
    """

    def __init__(
        self,
        runtime: ActionRuntime,
        on_free: FreeCallback | None,
        create_cache_key: Callable[[Any], str] | None = None,
    ) -> None:
        self._runtime = runtime
        self._on_free = on_free
        self._create_cache_key = create_cache_key
        self._name = ""
        runtime.register_disposable(self)

    def wrap(self, action: ActionEntry, name: str = "") -> ActionEntry:
        """Return the action with its handler decorated by this cache."""
        self._name = name
        return transform_action(action, name, self._decorate)

    @abstractmethod
    def dispose(self) -> None:
        """Free every cached result and reset the record."""

    @abstractmethod
    def _decorate(self, handler: ActionHandler, name: str) -> ActionHandler: ...

    def _cache_key(self, value: Any) -> str:
        if self._create_cache_key is not None:
            return self._create_cache_key(value)
        return self._runtime.options.create_cache_key(value)

    def _free(self, result: Any) -> None:
        """Hand an evicted result to on_free with the bound store."""
        if self._on_free is not None:
            logger.debug("Freeing cached result of %r", self._name)
            self._on_free(self._runtime.store, result)
