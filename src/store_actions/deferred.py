"""Deferred results - Immediate values and Pending futures.

A handler may return a plain value or any awaitable. Awaitables are
scheduled with ``asyncio.ensure_future`` as soon as a decorator sees them:
a coroutine can only be awaited once, while a future can be observed,
cached and awaited any number of times.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from store_actions.errors import ActionRejected

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Immediate(Generic[T]):
    """A result that was available when the handler returned."""

    value: T


@dataclass(frozen=True, slots=True)
class Pending(Generic[T]):
    """A result that settles later."""

    future: asyncio.Future[T]


Outcome = Immediate[Any] | Pending[Any]


def classify(result: Any) -> Outcome:
    """Wrap a handler result as Immediate or Pending."""
    if inspect.isawaitable(result):
        return Pending(asyncio.ensure_future(result))
    return Immediate(result)


def schedule(result: Any) -> Any:
    """Return the result unchanged, or as a future when it is awaitable."""
    outcome = classify(result)
    if isinstance(outcome, Pending):
        return outcome.future
    return outcome.value


def when_settled(
    future: asyncio.Future[Any],
    on_resolve: Callable[[Any], Any],
    on_reject: Callable[[BaseException], Any],
) -> None:
    """Call on_resolve(value) or on_reject(reason) once future settles.

    A cancelled future is reported as rejected with CancelledError.
    """

    def settled(done: asyncio.Future[Any]) -> None:
        if done.cancelled():
            on_reject(asyncio.CancelledError())
            return
        error = done.exception()
        if error is not None:
            on_reject(error)
        else:
            on_resolve(done.result())

    future.add_done_callback(settled)


def protect_result(result: Any) -> asyncio.Future[Any]:
    """Coerce a handler result into a resolved or rejected future.

    Awaitables pass through. A truthy value resolves with itself; a falsy
    value rejects with ActionRejected carrying that value as its reason.
    """
    outcome = classify(result)
    if isinstance(outcome, Pending):
        return outcome.future

    future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
    if outcome.value:
        future.set_result(outcome.value)
    else:
        future.set_exception(ActionRejected(outcome.value))
    return future


async def action_optional(
    awaitable: Awaitable[T],
    resolve_on_reject: Callable[[], Any] = lambda: None,
) -> Any:
    """Await a dispatch that is allowed to fail.

    Returns the awaited value, or resolve_on_reject() if it raised.
    """
    try:
        return await awaitable
    except Exception:
        return resolve_on_reject()


__all__ = [
    "Immediate",
    "Outcome",
    "Pending",
    "action_optional",
    "classify",
    "protect_result",
    "schedule",
    "when_settled",
]
