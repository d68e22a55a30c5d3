from __future__ import annotations

from pathlib import Path

import pytest

from path_picker.core.environment import Environment
from path_picker.core.models import Candidate
from path_picker.core.surface import EventEmitter


class FakeSurface:
    """In-memory CompletionSurface.

    Programmatic value changes fire on_did_change_value synchronously, the
    way a real list widget reports them. The first item is the selection
    unless `selected_index` says otherwise.
    """

    def __init__(self):
        self._value = ""
        self.items: list[Candidate] = []
        self.can_select_many = True
        self.selected_index: int | None = 0
        self.shown = False
        self.hidden = False
        self.disposed = False
        self.on_did_change_value: EventEmitter[str] = EventEmitter()
        self.on_did_accept: EventEmitter[None] = EventEmitter()
        self.on_did_hide: EventEmitter[None] = EventEmitter()

    @property
    def value(self) -> str:
        return self._value

    @value.setter
    def value(self, value: str) -> None:
        self._value = value
        self.on_did_change_value.fire(value)

    @property
    def selected_items(self) -> list[Candidate]:
        if self.selected_index is None or self.selected_index >= len(self.items):
            return []
        return [self.items[self.selected_index]]

    def select(self, label: str) -> None:
        self.selected_index = [c.label for c in self.items].index(label)

    def type(self, value: str) -> None:
        self.selected_index = 0
        self.value = value

    def accept(self) -> None:
        self.on_did_accept.fire(None)

    def show(self) -> None:
        self.shown = True

    def hide(self) -> None:
        self.hidden = True
        self.on_did_hide.fire(None)

    def dispose(self) -> None:
        self.disposed = True


@pytest.fixture
def fake_surface() -> FakeSurface:
    return FakeSurface()


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    """tmp_path/a.txt, tmp_path/b.md, tmp_path/sub/, tmp_path/sub/inner.txt, tmp_path/other/"""
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    (tmp_path / "b.md").write_text("b", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "inner.txt").write_text("inner", encoding="utf-8")
    (tmp_path / "other").mkdir()
    return tmp_path


@pytest.fixture
def env(tree: Path) -> Environment:
    return Environment(workspace_root=tree)
