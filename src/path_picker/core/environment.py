"""Base-directory resolution for relative input paths."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from path_picker.config import PickerConfig


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


@dataclass
class Environment:
    """Where relative paths are anchored.

    The workspace root wins when set; otherwise the user's home directory.
    Both may be unavailable, in which case base_dir() returns None.
    """

    workspace_root: Path | None = None
    home: Callable[[], Path | None] = field(default=_home_dir)

    def base_dir(self) -> str | None:
        if self.workspace_root is not None:
            return os.path.abspath(self.workspace_root)
        home = self.home()
        if home is None or home == Path(""):
            return None
        return str(home)

    @classmethod
    def from_config(cls, config: PickerConfig) -> Environment:
        return cls(workspace_root=config.workspace_root)
