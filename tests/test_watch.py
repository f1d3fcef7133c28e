"""Tests for actions_watch."""

import asyncio
from typing import Any

import pytest
from helpers import action_failing, action_timeout

from store_actions import ActionRuntime, CachedAction, Store


class TestWatchLifecycle:
    """Tests for start/resolve/reject/end notifications."""

    async def test_immediate_and_promised(self, runtime: ActionRuntime) -> None:
        """Test start and end counts for immediate and pending results."""
        started = 0
        ended = 0

        def on_start(action: str, num: int, context: Any, payload: Any) -> None:
            nonlocal started
            started += 1

        def on_end(action: str, num: int, *args: Any) -> None:
            nonlocal ended
            ended += 1

        store = Store(
            plugins=[runtime.plugin(on_action_start=on_start, on_action_end=on_end)],
            actions=runtime.actions_watch(
                {
                    "immediate": lambda context, payload: 456,
                    "promised": action_timeout(0.01),
                }
            ),
        )

        assert (started, ended) == (0, 0)

        assert await store.dispatch("immediate") == 456
        assert (started, ended) == (1, 1)

        pending = store.dispatch("promised")
        assert (started, ended) == (2, 1)

        await pending
        assert (started, ended) == (2, 2)

    async def test_resolve_then_end(self, runtime: ActionRuntime) -> None:
        """Test that resolve fires before end."""
        events: list[tuple] = []

        actions = runtime.actions_watch(
            {"load": action_timeout(0, "value")},
            on_action_start=lambda action, num, c, p: events.append(("start", action, num)),
            on_action_resolve=lambda action, num, c, p, value: events.append(
                ("resolve", action, value)
            ),
            on_action_end=lambda action, num, c, p, result, resolved: events.append(
                ("end", action, result, resolved)
            ),
        )

        result = await actions["load"]("context", "payload")

        assert result == "value"
        assert events == [
            ("start", "load", 1),
            ("resolve", "load", "value"),
            ("end", "load", "value", True),
        ]

    async def test_reject_then_end(self, runtime: ActionRuntime) -> None:
        """Test that reject fires before end."""
        events: list[tuple] = []
        error = ValueError("nope")

        actions = runtime.actions_watch(
            {"load": action_failing(0, error)},
            on_action_reject=lambda action, num, c, p, reason: events.append(
                ("reject", reason)
            ),
            on_action_end=lambda action, num, c, p, result, resolved: events.append(
                ("end", result, resolved)
            ),
        )

        with pytest.raises(ValueError):
            await actions["load"](None, None)

        assert events == [("reject", error), ("end", error, False)]

    async def test_call_numbers_increase(self, runtime: ActionRuntime) -> None:
        """Test that call numbers increase with every dispatch."""
        numbers: list[int] = []

        actions = runtime.actions_watch(
            {"a": lambda c, p: 1, "b": lambda c, p: 2},
            on_action_start=lambda action, num, c, p: numbers.append(num),
        )
        actions["a"](None, None)
        actions["b"](None, None)
        actions["a"](None, None)

        assert numbers == [1, 2, 3]

    async def test_hooks_registered_after_decoration_apply(
        self, runtime: ActionRuntime
    ) -> None:
        """Test that plugin hooks reach actions watched before registration."""
        started: list[str] = []

        store = Store(
            actions=runtime.actions_watch({"now": lambda context, payload: 1}),
            plugins=[
                runtime.plugin(
                    on_action_start=lambda action, *args: started.append(action)
                )
            ],
        )

        assert await store.dispatch("now") == 1
        assert started == ["now"]

    async def test_local_hooks_win_over_later_plugin_hooks(
        self, runtime: ActionRuntime
    ) -> None:
        """Test that per-call hooks override later plugin hooks."""
        calls: list[str] = []

        actions = runtime.actions_watch(
            {"now": lambda context, payload: 1},
            on_action_end=lambda *args: calls.append("local"),
        )
        runtime.plugin(on_action_end=lambda *args: calls.append("global"))

        actions["now"](None, None)
        assert calls == ["local"]


class TestWatchDone:
    """Tests for on_actions_done accounting."""

    @pytest.mark.parametrize("first_delay,second_delay", [(0.02, 0.01), (0.01, 0.02)])
    async def test_done_fires_once_after_both_end(
        self, runtime: ActionRuntime, first_delay: float, second_delay: float
    ) -> None:
        """Test that done fires once after two overlapping calls end."""
        events: list[str] = []

        store = Store(
            plugins=[
                runtime.plugin(
                    on_action_end=lambda action, *args: events.append(f"end:{action}"),
                    on_actions_done=lambda context: events.append("done"),
                )
            ],
            actions=runtime.actions_watch(
                {
                    "first": action_timeout(first_delay),
                    "second": action_timeout(second_delay),
                }
            ),
        )

        await asyncio.gather(store.dispatch("first"), store.dispatch("second"))

        assert events.count("done") == 1
        assert events[-1] == "done"
        assert sorted(events[:2]) == ["end:first", "end:second"]

    @pytest.mark.parametrize(
        "delays,end_order",
        [
            ((0.03, 0.01, 0.02), ["end:b", "end:c", "end:a"]),
            ((0.02, 0.03, 0.01), ["end:c", "end:a", "end:b"]),
        ],
    )
    async def test_done_fires_once_after_three_overlapping_calls(
        self, runtime: ActionRuntime, delays: tuple, end_order: list[str]
    ) -> None:
        """Test that done fires once after the last of three calls ends."""
        events: list[str] = []

        actions = runtime.actions_watch(
            {name: action_timeout(delay) for name, delay in zip("abc", delays)},
            on_action_end=lambda action, *args: events.append(f"end:{action}"),
            on_actions_done=lambda context: events.append("done"),
        )

        await asyncio.gather(*(actions[name](None, None) for name in "abc"))

        assert events == [*end_order, "done"]

    async def test_watchers_share_global_counters(self, runtime: ActionRuntime) -> None:
        """Test that watchers without on_actions_done share counters."""
        done = 0

        def on_done(context: Any) -> None:
            nonlocal done
            done += 1

        runtime.plugin(on_actions_done=on_done)
        page = runtime.actions_watch({"page": action_timeout(0.02)})
        user = runtime.actions_watch({"user": action_timeout(0.01)})

        await asyncio.gather(page["page"](None, None), user["user"](None, None))

        assert done == 1
        assert runtime.counters.call_number == 2
        assert runtime.counters.completed_count == 2

    async def test_local_done_uses_private_counters(self, runtime: ActionRuntime) -> None:
        """Test that a local on_actions_done gets private counters."""
        local_done = 0
        global_done = 0

        def on_local(context: Any) -> None:
            nonlocal local_done
            local_done += 1

        def on_global(context: Any) -> None:
            nonlocal global_done
            global_done += 1

        runtime.plugin(on_actions_done=on_global)
        local = runtime.actions_watch(
            {"load": action_timeout(0.01)}, on_actions_done=on_local
        )
        shared = runtime.actions_watch({"other": action_timeout(0.03)})

        other = shared["other"](None, None)
        await local["load"](None, None)

        assert local_done == 1
        assert global_done == 0
        assert runtime.counters.call_number == 1

        await other
        assert global_done == 1

    async def test_done_for_each_sequential_batch(self, runtime: ActionRuntime) -> None:
        """Test that done fires after each non-overlapping call."""
        done = 0

        def on_done(context: Any) -> None:
            nonlocal done
            done += 1

        actions = runtime.actions_watch(
            {"load": action_timeout(0), "now": lambda c, p: True},
            on_actions_done=on_done,
        )

        await actions["load"](None, None)
        actions["now"](None, None)
        await actions["load"](None, None)

        assert done == 3


class TestWatchComposition:
    """Watching cached actions."""

    async def test_cache_hits_are_still_watched(self, runtime: ActionRuntime) -> None:
        """Test that cache hits are still reported."""
        fetch_count = 0
        ends: list[int] = []

        async def fetch(context: Any, payload: Any) -> str:
            nonlocal fetch_count
            fetch_count += 1
            await asyncio.sleep(0)
            return "data"

        actions = runtime.actions_watch(
            runtime.actions_cached(
                {"load": CachedAction(action=fetch, get_key=lambda c, p: p)}
            ),
            on_action_end=lambda action, num, *args: ends.append(num),
        )

        first = actions["load"](None, "k")
        second = actions["load"](None, "k")

        assert first is second
        assert await first == "data"
        assert fetch_count == 1
        assert ends == [1, 2]
