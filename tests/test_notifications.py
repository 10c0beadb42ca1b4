# tests/test_notifications.py

from __future__ import annotations

import asyncio
import threading

import pytest

from taskwatch.tasks.notifications import (
    NotificationChannel,
    ProgressChanged,
    RunningChanged,
    StatusChanged,
)


class _Consumer:
    """Records notifications and the thread they arrived on."""

    def __init__(self) -> None:
        self.notes: list = []
        self.threads: set[threading.Thread] = set()
        self.terminal = asyncio.Event()

    def __call__(self, note) -> None:
        self.notes.append(note)
        self.threads.add(threading.current_thread())
        if note == RunningChanged(False):
            self.terminal.set()


@pytest.mark.asyncio
async def test_channel_delivers_on_loop_thread_in_order() -> None:
    consumer = _Consumer()
    channel = NotificationChannel(asyncio.get_running_loop(), consumer, coalesce_progress=False)

    sent = [
        RunningChanged(True),
        StatusChanged("one"),
        ProgressChanged(1),
        ProgressChanged(2),
        StatusChanged("two"),
        ProgressChanged(3),
        RunningChanged(False),
    ]

    def worker() -> None:
        for note in sent:
            channel.publish(note)

    await asyncio.to_thread(worker)
    await asyncio.wait_for(consumer.terminal.wait(), timeout=2.0)

    assert consumer.notes == sent
    assert consumer.threads == {threading.current_thread()}


@pytest.mark.asyncio
async def test_progress_is_coalesced_but_latest_value_precedes_terminal() -> None:
    consumer = _Consumer()
    channel = NotificationChannel(asyncio.get_running_loop(), consumer)

    def worker() -> None:
        channel.publish(RunningChanged(True))
        for i in range(100):
            channel.publish(ProgressChanged(i))
            if i % 10 == 0:
                channel.publish(StatusChanged(f"step {i}"))
        channel.publish(RunningChanged(False))

    await asyncio.to_thread(worker)
    await asyncio.wait_for(consumer.terminal.wait(), timeout=2.0)

    progress = [n.percent for n in consumer.notes if isinstance(n, ProgressChanged)]
    statuses = [n.text for n in consumer.notes if isinstance(n, StatusChanged)]

    assert progress, "at least one progress value must be delivered"
    assert progress == sorted(progress)
    assert len(progress) == len(set(progress))
    assert progress[-1] == 99
    # Status changes are never coalesced.
    assert statuses == [f"step {i}" for i in range(0, 100, 10)]
    assert consumer.notes[0] == RunningChanged(True)
    assert consumer.notes[-1] == RunningChanged(False)


@pytest.mark.asyncio
async def test_closed_channel_drops_notifications() -> None:
    consumer = _Consumer()
    channel = NotificationChannel(asyncio.get_running_loop(), consumer)

    channel.publish(StatusChanged("queued before close"))
    channel.close()
    channel.publish(StatusChanged("after close"))

    await asyncio.sleep(0.01)
    assert consumer.notes == []
    assert channel.closed


@pytest.mark.asyncio
async def test_consumer_error_does_not_stop_later_deliveries() -> None:
    received = []
    done = asyncio.Event()

    def consumer(note) -> None:
        if isinstance(note, StatusChanged):
            raise RuntimeError("consumer bug")
        received.append(note)
        if note == RunningChanged(False):
            done.set()

    channel = NotificationChannel(asyncio.get_running_loop(), consumer)
    channel.publish(StatusChanged("explodes"))
    channel.publish(RunningChanged(False))

    await asyncio.wait_for(done.wait(), timeout=2.0)
    assert received == [RunningChanged(False)]


def test_notifications_are_immutable() -> None:
    note = ProgressChanged(5)
    with pytest.raises(AttributeError):
        note.percent = 6  # type: ignore[misc]
    assert note.property_name == "progress"
    assert note.value == 5
    assert RunningChanged(True).property_name == "running"
    assert StatusChanged("x").property_name == "status"
