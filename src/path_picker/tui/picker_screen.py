from __future__ import annotations

from collections.abc import Sequence

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.screen import ModalScreen
from textual.widgets import Input, OptionList, Static
from textual.widgets.option_list import Option

from path_picker.core.models import Candidate, CandidateKind
from path_picker.core.surface import EventEmitter

_GLYPHS = {
    CandidateKind.DIRECTORY: "▸",
    CandidateKind.FILE: "•",
    CandidateKind.CREATE: "+",
}


def render_candidate(candidate: Candidate) -> Text:
    """Option prompt: kind glyph, path, and the dimmed detail."""
    return Text.assemble(
        (f"{_GLYPHS[candidate.kind]} ", "bold"),
        candidate.label,
        "  ",
        (candidate.detail, "dim"),
    )


class PathPickerScreen(ModalScreen[None]):
    """Modal input + candidate list, usable as a CompletionSurface.

    The highlighted option is the (single) selection. Enter in the input or
    picking an option fires on_did_accept; Escape hides the screen, which
    fires on_did_hide once Textual has dismissed it.
    """

    DEFAULT_CSS = """
    PathPickerScreen {
        align: center top;
        background: $background 60%;
    }

    PathPickerScreen #picker_container {
        width: 90%;
        max-width: 120;
        height: auto;
        max-height: 80%;
        margin-top: 2;
        border: thick $accent;
        background: $surface;
        padding: 0 1;
    }

    PathPickerScreen #picker_heading {
        text-style: bold;
    }

    PathPickerScreen #picker_list {
        height: auto;
        max-height: 20;
        border: none;
    }

    PathPickerScreen #picker_hint {
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("up", "cursor_up", "Up", show=False),
    ]

    def __init__(self, host: App, heading: str = "", placeholder: str = ""):
        super().__init__()
        self._host_app = host
        self.heading = heading
        self.placeholder = placeholder
        self.can_select_many = False
        self._value = ""
        self._items: list[Candidate] = []
        self._shown = False
        self._disposed = False
        self._on_did_change_value: EventEmitter[str] = EventEmitter()
        self._on_did_accept: EventEmitter[None] = EventEmitter()
        self._on_did_hide: EventEmitter[None] = EventEmitter()

    # -- CompletionSurface -------------------------------------------------

    @property
    def on_did_change_value(self) -> EventEmitter[str]:
        return self._on_did_change_value

    @property
    def on_did_accept(self) -> EventEmitter[None]:
        return self._on_did_accept

    @property
    def on_did_hide(self) -> EventEmitter[None]:
        return self._on_did_hide

    @property
    def value(self) -> str:
        inp = self._input()
        return inp.value if inp is not None else self._value

    @value.setter
    def value(self, value: str) -> None:
        self._value = value
        inp = self._input()
        if inp is not None and inp.value != value:
            inp.value = value  # posts Input.Changed
            inp.action_end()

    @property
    def items(self) -> Sequence[Candidate]:
        return self._items

    @items.setter
    def items(self, items: Sequence[Candidate]) -> None:
        self._items = list(items)
        self._rebuild_list()

    @property
    def selected_items(self) -> Sequence[Candidate]:
        option_list = self._option_list()
        if option_list is None:
            index = 0 if self._items else None
        else:
            index = option_list.highlighted
        if index is None or index >= len(self._items):
            return []
        return [self._items[index]]

    def show(self) -> None:
        if self._shown:
            return
        self._shown = True
        self._host_app.push_screen(self, callback=self._on_dismissed)

    def hide(self) -> None:
        if self.is_active:
            self.dismiss(None)

    def dispose(self) -> None:
        self._disposed = True
        for emitter in (
            self._on_did_change_value,
            self._on_did_accept,
            self._on_did_hide,
        ):
            emitter.clear()

    # -- Textual -----------------------------------------------------------

    def compose(self) -> ComposeResult:
        with Vertical(id="picker_container"):
            if self.heading:
                yield Static(self.heading, id="picker_heading")
            yield Input(
                value=self._value,
                placeholder=self.placeholder,
                id="picker_input",
            )
            yield OptionList(id="picker_list")
            yield Static(
                "Enter to accept · ↑/↓ to choose · Escape to cancel",
                id="picker_hint",
            )

    def on_mount(self) -> None:
        option_list = self.query_one("#picker_list", OptionList)
        option_list.can_focus = False
        self._rebuild_list()
        inp = self.query_one("#picker_input", Input)
        inp.focus()
        inp.action_end()

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        self._value = event.value
        if not self._disposed:
            self._on_did_change_value.fire(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        if not self._disposed:
            self._on_did_accept.fire(None)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if not self._disposed:
            self._on_did_accept.fire(None)

    def action_cancel(self) -> None:
        self.hide()

    def action_cursor_down(self) -> None:
        option_list = self._option_list()
        if option_list is not None:
            option_list.action_cursor_down()

    def action_cursor_up(self) -> None:
        option_list = self._option_list()
        if option_list is not None:
            option_list.action_cursor_up()

    # -- helpers -----------------------------------------------------------

    def _input(self) -> Input | None:
        if not self.is_mounted:
            return None
        try:
            return self.query_one("#picker_input", Input)
        except NoMatches:
            return None

    def _option_list(self) -> OptionList | None:
        if not self.is_mounted:
            return None
        try:
            return self.query_one("#picker_list", OptionList)
        except NoMatches:
            return None

    def _rebuild_list(self) -> None:
        """Replace all options; the first one becomes the selection."""
        option_list = self._option_list()
        if option_list is None:
            return
        option_list.clear_options()
        option_list.add_options([Option(render_candidate(c)) for c in self._items])
        if self._items:
            option_list.highlighted = 0

    def _on_dismissed(self, _result: None) -> None:
        if not self._disposed:
            self._on_did_hide.fire(None)
