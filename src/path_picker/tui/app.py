from __future__ import annotations

import logging

from textual.app import App

from path_picker.config import PickerConfig
from path_picker.core.candidates import path_completion
from path_picker.core.environment import Environment
from path_picker.core.session import FinishCondition, autocompleted_input
from path_picker.core.surface import CompletionSurface
from path_picker.tui.picker_screen import PathPickerScreen

logger = logging.getLogger(__name__)


class PathPickerApp(App[str | None]):
    """Runs a single completion session and exits with its outcome."""

    TITLE = "Path Picker"

    def __init__(
        self,
        config: PickerConfig,
        start: str = "",
        env: Environment | None = None,
        stop_when: FinishCondition | None = None,
    ):
        super().__init__()
        self.config = config
        self.start = start
        self.env = env or Environment.from_config(config)
        self.stop_when = stop_when
        self.completion = path_completion(config.kind, self.env)

    def on_mount(self) -> None:
        self.run_worker(self._pick(), exclusive=True)

    def _seed(self, surface: CompletionSurface) -> None:
        """Show the start value and its candidates before the first keystroke."""
        surface.value = self.start
        surface.items = list(self.completion(self.start))

    def _make_surface(self) -> PathPickerScreen:
        return PathPickerScreen(
            self,
            heading=self.config.title,
            placeholder=self.config.placeholder,
        )

    async def _pick(self) -> None:
        result = await autocompleted_input(
            self.completion,
            self._make_surface,
            with_self=self._seed,
            stop_when=self.stop_when,
        )
        logger.debug("picker finished with %r", result)
        self.exit(result)
