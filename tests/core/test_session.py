from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from path_picker.core.candidates import path_completion
from path_picker.core.environment import Environment
from path_picker.core.models import Candidate, CandidateKind
from path_picker.core.session import (
    CompletionSession,
    SessionState,
    autocompleted_input,
    default_finish_condition,
)


def _candidate(label: str) -> Candidate:
    return Candidate(label=label, detail=f"Open {label}", kind=CandidateKind.FILE)


class TestDefaultFinishCondition:
    def test_nothing_selected_finishes(self, fake_surface):
        fake_surface.value = "anything"
        fake_surface.selected_index = None

        assert default_finish_condition(fake_surface) is True
        assert fake_surface.value == "anything"

    def test_selection_equal_to_value_finishes(self, fake_surface):
        fake_surface.items = [_candidate("/tmp/x")]
        fake_surface.value = "/tmp/x"

        assert default_finish_condition(fake_surface) is True

    def test_other_selection_autocompletes_and_defers(self, fake_surface):
        fake_surface.items = [_candidate("/tmp/x"), _candidate("/tmp/y")]
        fake_surface.value = "/tmp"
        fake_surface.select("/tmp/y")

        assert default_finish_condition(fake_surface) is False
        assert fake_surface.value == "/tmp/y"


async def _run_in_background(coro):
    task = asyncio.ensure_future(coro)
    await asyncio.sleep(0)
    return task


class TestCompletionSession:
    @pytest.mark.asyncio
    async def test_drill_in_then_accept(self, tree: Path, fake_surface):
        env = Environment(workspace_root=tree)
        task = await _run_in_background(
            autocompleted_input(path_completion(env=env), lambda: fake_surface)
        )
        assert fake_surface.shown
        assert fake_surface.can_select_many is False

        fake_surface.type(str(tree))
        labels = [c.label for c in fake_surface.items]
        assert labels[0] == str(tree)
        assert str(tree / "a.txt") in labels and str(tree / "sub") in labels

        fake_surface.select(str(tree / "sub"))
        fake_surface.accept()
        # Not final yet: value auto-completed and candidates regenerated.
        assert fake_surface.value == str(tree / "sub")
        assert fake_surface.items[0].label == str(tree / "sub")
        assert not fake_surface.hidden
        assert not task.done()

        fake_surface.selected_index = 0
        fake_surface.accept()

        assert await task == str(tree / "sub")
        assert fake_surface.disposed

    @pytest.mark.asyncio
    async def test_hide_without_accept_cancels(self, tree: Path, fake_surface):
        env = Environment(workspace_root=tree)
        task = await _run_in_background(
            autocompleted_input(path_completion(env=env), lambda: fake_surface)
        )
        fake_surface.type(str(tree / "sub"))
        fake_surface.select(str(tree / "sub" / "inner.txt"))
        fake_surface.accept()  # auto-completes only

        fake_surface.hide()

        assert await task is None
        assert fake_surface.disposed

    @pytest.mark.asyncio
    async def test_outcome_waits_for_hide(self, fake_surface):
        fake_surface.hide = lambda: setattr(fake_surface, "hidden", True)
        session = CompletionSession(fake_surface, lambda value: [])
        task = await _run_in_background(session.run())

        fake_surface.selected_index = None
        fake_surface.accept()
        await asyncio.sleep(0)

        assert session.accepted
        assert fake_surface.hidden
        assert not task.done()

        fake_surface.on_did_hide.fire(None)

        assert await task == ""
        assert session.state is SessionState.DISPOSED
        assert session.outcome_state is SessionState.ACCEPTED

    @pytest.mark.asyncio
    async def test_second_hide_is_ignored(self, fake_surface):
        session = CompletionSession(fake_surface, lambda value: [])
        task = await _run_in_background(session.run())

        fake_surface.on_did_hide.fire(None)
        fake_surface.on_did_hide.fire(None)

        assert await task is None
        assert session.outcome_state is SessionState.CANCELLED

    @pytest.mark.asyncio
    async def test_custom_stop_when_is_honoured(self, fake_surface):
        seen = []

        def stop_when(surface):
            seen.append(surface.value)
            return surface.value.endswith(".txt")

        completion = lambda value: [_candidate(value + "/next")]
        task = await _run_in_background(
            autocompleted_input(completion, lambda: fake_surface, stop_when=stop_when)
        )

        fake_surface.type("/data")
        fake_surface.accept()
        # The default condition would have auto-completed to "/data/next".
        assert fake_surface.value == "/data"
        assert not task.done()

        fake_surface.type("/data/report.txt")
        fake_surface.accept()

        assert await task == "/data/report.txt"
        assert seen == ["/data", "/data/report.txt"]

    @pytest.mark.asyncio
    async def test_with_self_runs_before_wiring(self, fake_surface):
        regenerated = []

        def completion(value):
            regenerated.append(value)
            return []

        def seed(surface):
            assert surface.on_did_change_value.listener_count == 0
            surface.value = "/seeded"

        task = await _run_in_background(
            autocompleted_input(completion, lambda: fake_surface, with_self=seed)
        )

        assert fake_surface.value == "/seeded"
        assert regenerated == []
        fake_surface.hide()
        assert await task is None

    @pytest.mark.asyncio
    async def test_subscriptions_released_after_outcome(self, fake_surface):
        task = await _run_in_background(
            autocompleted_input(lambda value: [], lambda: fake_surface)
        )
        assert fake_surface.on_did_accept.listener_count == 1

        fake_surface.hide()
        await task

        assert fake_surface.on_did_change_value.listener_count == 0
        assert fake_surface.on_did_accept.listener_count == 0
        assert fake_surface.on_did_hide.listener_count == 0

    @pytest.mark.asyncio
    async def test_subscriptions_released_when_awaiter_is_cancelled(self, fake_surface):
        task = await _run_in_background(
            autocompleted_input(lambda value: [], lambda: fake_surface)
        )

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert fake_surface.on_did_hide.listener_count == 0

    @pytest.mark.asyncio
    async def test_handler_errors_propagate_to_dispatcher(self, fake_surface):
        def broken(value):
            raise RuntimeError("boom")

        task = await _run_in_background(autocompleted_input(broken, lambda: fake_surface))

        with pytest.raises(RuntimeError):
            fake_surface.type("/x")

        fake_surface.hide()
        assert await task is None

    @pytest.mark.asyncio
    async def test_run_twice_is_rejected(self, fake_surface):
        session = CompletionSession(fake_surface, lambda value: [])
        task = await _run_in_background(session.run())
        fake_surface.hide()
        await task

        with pytest.raises(RuntimeError):
            await session.run()
