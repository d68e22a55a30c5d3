"""Interactive completion loop: drill into candidates until a final value."""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Callable, Iterable

from path_picker.core.models import Candidate
from path_picker.core.surface import CompletionSurface, Subscription

logger = logging.getLogger(__name__)

Completion = Callable[[str], Iterable[Candidate]]
FinishCondition = Callable[[CompletionSurface], bool]


def default_finish_condition(surface: CompletionSurface) -> bool:
    """Decide whether an accept finishes the session; auto-complete if not.

    Finished when nothing is selected or the top selection already equals
    the typed value. Otherwise the top selection's label is written into
    the value (which triggers regeneration) and False is returned, so the
    next accept decides again.
    """
    selected = surface.selected_items
    if not selected or selected[0].label == surface.value:
        return True
    surface.value = selected[0].label
    return False


class SessionState(enum.Enum):
    IDLE = "idle"
    SHOWN = "shown"
    REFINING = "refining"
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"
    DISPOSED = "disposed"


class CompletionSession:
    """One run of the completion loop over a single surface.

    Three handlers drive the state machine: value changed, accept and
    hidden. The outcome is resolved from the hidden handler only, so it
    never precedes the surface going away.
    """

    def __init__(
        self,
        surface: CompletionSurface,
        completion: Completion,
        stop_when: FinishCondition | None = None,
    ):
        self.surface = surface
        self.completion = completion
        self.finish_condition: FinishCondition = stop_when or default_finish_condition
        self.state = SessionState.IDLE
        self.result: str | None = None
        self.accepted = False
        self._subscriptions: list[Subscription] = []
        self._outcome: asyncio.Future[str | None] | None = None
        self._terminal_state = SessionState.CANCELLED

    def _transition(self, state: SessionState) -> None:
        if state is not self.state:
            logger.debug("session %s -> %s", self.state.value, state.value)
            self.state = state

    def handle_value_changed(self, value: str) -> None:
        if self.state is SessionState.DISPOSED:
            return
        self.surface.items = list(self.completion(value))
        self._transition(SessionState.REFINING)

    def handle_accept(self, _event: object = None) -> None:
        if self.state is SessionState.DISPOSED or self.accepted:
            return
        if self.finish_condition(self.surface):
            self.result = self.surface.value
            self.accepted = True
            self.surface.hide()
        else:
            self._transition(SessionState.REFINING)

    def handle_hide(self, _event: object = None) -> None:
        if self.state is SessionState.DISPOSED:
            return
        self.surface.dispose()
        if self.accepted:
            outcome = self.result
            self._terminal_state = SessionState.ACCEPTED
        else:
            outcome = None
            self._terminal_state = SessionState.CANCELLED
        self._transition(self._terminal_state)
        self._transition(SessionState.DISPOSED)
        if self._outcome is not None and not self._outcome.done():
            self._outcome.set_result(outcome)

    @property
    def outcome_state(self) -> SessionState:
        """ACCEPTED or CANCELLED once the session has ended."""
        return self._terminal_state

    def _wire(self) -> None:
        self._subscriptions.extend(
            [
                self.surface.on_did_change_value.subscribe(self.handle_value_changed),
                self.surface.on_did_accept.subscribe(self.handle_accept),
                self.surface.on_did_hide.subscribe(self.handle_hide),
            ]
        )

    def _release(self) -> None:
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()

    async def run(self) -> str | None:
        """Show the surface and wait for the single outcome.

        Returns the accepted value, or None when the surface was hidden
        without an accept.
        """
        if self.state is not SessionState.IDLE:
            raise RuntimeError("CompletionSession.run() may only be called once")
        self._outcome = asyncio.get_running_loop().create_future()
        try:
            self._wire()
            self._transition(SessionState.SHOWN)
            self.surface.show()
            return await self._outcome
        finally:
            self._release()


async def autocompleted_input(
    completion: Completion,
    surface_factory: Callable[[], CompletionSurface],
    with_self: Callable[[CompletionSurface], object] | None = None,
    stop_when: FinishCondition | None = None,
) -> str | None:
    """Run one completion session on a fresh surface.

    *with_self* is called with the surface before any event is wired, so
    it can seed the value, items or title without triggering handlers.
    *stop_when* replaces default_finish_condition when given.
    """
    surface = surface_factory()
    surface.can_select_many = False
    if with_self is not None:
        with_self(surface)
    session = CompletionSession(surface, completion, stop_when=stop_when)
    return await session.run()
