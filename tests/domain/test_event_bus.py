"""Tests for the session event bus."""

import pytest

from deskpilot.domain.events import EventBus, PaletteToggled, SelectionMoved


def test_publish_reaches_subscribers_of_that_type_only():
    bus = EventBus()
    toggles, moves = [], []
    bus.subscribe(PaletteToggled, toggles.append)
    bus.subscribe(SelectionMoved, moves.append)

    bus.publish(PaletteToggled(visible=True))

    assert [e.visible for e in toggles] == [True]
    assert moves == []
    assert toggles[0].timestamp > 0


def test_async_handlers_are_rejected():
    bus = EventBus()

    async def handler(event):
        pass

    with pytest.raises(TypeError):
        bus.subscribe(PaletteToggled, handler)


def test_failing_handler_does_not_stop_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("render failed")

    bus.subscribe(PaletteToggled, broken)
    bus.subscribe(PaletteToggled, received.append)

    bus.publish(PaletteToggled(visible=False))

    assert len(received) == 1


def test_duplicate_subscription_delivers_once():
    bus = EventBus()
    received = []
    bus.subscribe(PaletteToggled, received.append)
    bus.subscribe(PaletteToggled, received.append)

    bus.publish(PaletteToggled(visible=True))

    assert len(received) == 1


def test_publish_without_subscribers_is_a_no_op():
    EventBus().publish(SelectionMoved(index=0, total=1))
