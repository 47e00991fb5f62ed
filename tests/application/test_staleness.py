"""Tests for generation-based stale result suppression."""

import asyncio

import pytest

from deskpilot.application.staleness import GenerationGuard
from deskpilot.domain.candidates import QueryMode, ResultSet
from deskpilot.domain.events import SuggestionsUpdated
from tests.conftest import EventRecorder, FakeGenerator


def _result(generation):
    return ResultSet(candidates=(), generation=generation, mode=QueryMode.SEARCH)


class TestGenerationGuard:
    def test_advance_is_monotonic(self):
        guard = GenerationGuard()
        assert [guard.advance() for _ in range(3)] == [1, 2, 3]
        assert guard.current == 3

    def test_accepts_only_current_generation(self):
        guard = GenerationGuard()
        applied = []
        first = guard.advance()
        second = guard.advance()

        assert guard.accept(_result(second), applied.append)
        assert not guard.accept(_result(first), applied.append)
        assert [r.generation for r in applied] == [second]


@pytest.mark.asyncio
async def test_late_older_result_never_overwrites_newer(make_session):
    generator = FakeGenerator(
        suggestions=lambda message: [f"{message} answer"],
        delays={"suggest": lambda message, *rest: 0.2 if message == "slow" else 0.01},
    )
    session = make_session(generator=generator)
    await session.load()
    recorder = EventRecorder(session.event_bus)

    session.on_text_changed("/")
    await session.settle()

    slow = asyncio.create_task(session.query("slow"))
    await asyncio.sleep(0)
    fast = asyncio.create_task(session.query("fast"))
    slow_result, fast_result = await asyncio.gather(slow, fast)

    assert slow_result.generation < fast_result.generation
    assert session.result_set.generation == fast_result.generation
    assert "fast answer" in [c.body for c in session.result_set]

    displayed = [event.result_set.generation for event in recorder.of(SuggestionsUpdated)]
    assert slow_result.generation not in displayed
    assert displayed[-1] == fast_result.generation


@pytest.mark.asyncio
async def test_result_arriving_after_palette_closed_is_not_displayed(make_session):
    generator = FakeGenerator(delays={"suggest": 0.1})
    session = make_session(generator=generator)
    await session.load()

    session.on_text_changed("/")
    await session.settle()
    pending = asyncio.create_task(session.query("routing"))
    await asyncio.sleep(0)
    session.close_palette()
    await pending

    assert session.result_set is None
    assert not session.selection.is_open
