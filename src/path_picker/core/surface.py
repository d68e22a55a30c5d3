"""The interactive-list collaborator a completion session drives."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Generic, Protocol, TypeVar

from path_picker.core.models import Candidate

T = TypeVar("T")


class Subscription:
    """Handle returned by EventEmitter.subscribe(); dispose() detaches it."""

    def __init__(self, emitter: EventEmitter, listener: Callable):
        self._emitter = emitter
        self._listener = listener
        self.disposed = False

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self._emitter._remove(self._listener)


class EventEmitter(Generic[T]):
    """Minimal synchronous event source.

    Listeners run in subscription order inside fire(). Exceptions raised
    by a listener propagate to whoever fired the event.
    """

    def __init__(self):
        self._listeners: list[Callable[[T], object]] = []

    def subscribe(self, listener: Callable[[T], object]) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def fire(self, event: T) -> None:
        for listener in list(self._listeners):
            listener(event)

    def clear(self) -> None:
        self._listeners.clear()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _remove(self, listener: Callable) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass  # already cleared by the owner


class CompletionSurface(Protocol):
    """What a completion session needs from a list widget.

    on_did_change_value fires with the new value whenever it changes,
    including programmatic assignments. on_did_accept fires on the
    user's confirm gesture, on_did_hide once the surface is gone.
    """

    value: str
    items: Sequence[Candidate]
    can_select_many: bool

    @property
    def selected_items(self) -> Sequence[Candidate]: ...

    @property
    def on_did_change_value(self) -> EventEmitter[str]: ...

    @property
    def on_did_accept(self) -> EventEmitter[None]: ...

    @property
    def on_did_hide(self) -> EventEmitter[None]: ...

    def show(self) -> None: ...

    def hide(self) -> None: ...

    def dispose(self) -> None: ...
