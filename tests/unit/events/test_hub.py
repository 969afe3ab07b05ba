"""Tests for PushEventHub fan-out and scoped subscriptions."""

import asyncio
import logging

import pytest

from clipdeck.events.hub import PushEventHub
from clipdeck.events.types import ENTRY_ADDED, HISTORY_SYNC, WINDOW_SHOWN


class TestSubscribe:
    def test_requires_event_type(self):
        hub = PushEventHub()
        with pytest.raises(ValueError):
            hub.subscribe()

    def test_unsubscribe_cleans_up(self):
        hub = PushEventHub()
        queue = hub.subscribe(ENTRY_ADDED, HISTORY_SYNC)
        assert hub.subscriber_count(ENTRY_ADDED) == 1
        assert hub.subscriber_count(HISTORY_SYNC) == 1

        hub.unsubscribe(queue)
        hub.unsubscribe(queue)

        assert hub.subscriber_count(ENTRY_ADDED) == 0
        assert hub.subscriber_count(HISTORY_SYNC) == 0

    @pytest.mark.asyncio
    async def test_scoped_subscription(self):
        hub = PushEventHub()
        async with hub.subscription(WINDOW_SHOWN) as queue:
            assert hub.subscriber_count(WINDOW_SHOWN) == 1
            await hub.publish({"type": WINDOW_SHOWN})
            event = queue.get_nowait()
            assert event["type"] == WINDOW_SHOWN

        assert hub.subscriber_count(WINDOW_SHOWN) == 0

    @pytest.mark.asyncio
    async def test_scoped_subscription_released_on_error(self):
        hub = PushEventHub()
        with pytest.raises(RuntimeError):
            async with hub.subscription(WINDOW_SHOWN):
                raise RuntimeError("handler failed")

        assert hub.subscriber_count(WINDOW_SHOWN) == 0


class TestPublish:
    @pytest.mark.asyncio
    async def test_routes_by_type(self):
        hub = PushEventHub()
        history = hub.subscribe(ENTRY_ADDED, HISTORY_SYNC)
        window = hub.subscribe(WINDOW_SHOWN)

        await hub.publish({"type": ENTRY_ADDED, "data": {"id": "a"}})
        await hub.publish({"type": WINDOW_SHOWN})
        await hub.publish({"type": "unknown"})

        assert history.qsize() == 1
        assert window.qsize() == 1

    @pytest.mark.asyncio
    async def test_events_are_copied_and_sequenced(self):
        hub = PushEventHub()
        queue = hub.subscribe(ENTRY_ADDED)
        original = {"type": ENTRY_ADDED}

        await hub.publish(original)
        await hub.publish({"type": ENTRY_ADDED})

        first, second = queue.get_nowait(), queue.get_nowait()
        assert "seq" not in original
        assert second["seq"] == first["seq"] + 1

    @pytest.mark.asyncio
    async def test_full_queue_drops_and_warns(self, caplog):
        hub = PushEventHub(max_queue_size=1)
        slow = hub.subscribe(ENTRY_ADDED)
        fast = hub.subscribe(ENTRY_ADDED)

        await hub.publish({"type": ENTRY_ADDED})
        fast.get_nowait()
        with caplog.at_level(logging.WARNING, logger="clipdeck.events.hub"):
            await hub.publish({"type": ENTRY_ADDED})

        assert hub.dropped == 1
        assert slow.qsize() == 1
        assert fast.qsize() == 1
        assert "slow subscriber" in caplog.text

    @pytest.mark.asyncio
    async def test_overflow_reported_once_per_queue(self):
        hub = PushEventHub(max_queue_size=1)
        slow = hub.subscribe(ENTRY_ADDED)
        fast = hub.subscribe(ENTRY_ADDED)

        await hub.publish({"type": ENTRY_ADDED})
        fast.get_nowait()
        await hub.publish({"type": ENTRY_ADDED})

        assert hub.take_overflow(slow) is True
        assert hub.take_overflow(slow) is False
        assert hub.take_overflow(fast) is False

    @pytest.mark.asyncio
    async def test_unsubscribe_forgets_overflow(self):
        hub = PushEventHub(max_queue_size=1)
        queue = hub.subscribe(ENTRY_ADDED)
        await hub.publish({"type": ENTRY_ADDED})
        await hub.publish({"type": ENTRY_ADDED})

        hub.unsubscribe(queue)

        assert hub.take_overflow(queue) is False

    @pytest.mark.asyncio
    async def test_pump_publishes_stream(self):
        hub = PushEventHub()
        queue = hub.subscribe(HISTORY_SYNC)

        async def stream():
            for i in range(3):
                yield {"type": HISTORY_SYNC, "data": [], "n": i}

        await asyncio.wait_for(hub.pump(stream()), timeout=1)

        assert [queue.get_nowait()["n"] for _ in range(3)] == [0, 1, 2]
