"""State, mutations and action handlers shared by the tests."""

import asyncio
from dataclasses import dataclass
from typing import Any


@dataclass
class CounterState:
    times: int = 0
    id: str = "x"
    loading: bool = False


def add_times(state: CounterState, _: Any) -> None:
    state.times += 1


def set_times(state: CounterState, times: int) -> None:
    state.times = times


def set_id(state: CounterState, id: str) -> None:
    state.id = id


def set_loading(state: CounterState, loading: bool) -> None:
    state.loading = loading


MUTATIONS = {
    "add_times": add_times,
    "set_times": set_times,
    "set_id": set_id,
    "set_loading": set_loading,
}


def action_timeout(delay: float, value: Any = None):
    """An action handler that resolves with value after delay seconds."""

    async def handler(context: Any, payload: Any) -> Any:
        await asyncio.sleep(delay)
        return value

    return handler


def action_failing(delay: float, error: Exception):
    """An action handler that raises error after delay seconds."""

    async def handler(context: Any, payload: Any) -> Any:
        await asyncio.sleep(delay)
        raise error

    return handler
