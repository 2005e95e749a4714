from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from .datamodels import Story


# --- Screen modes ---
@dataclass(frozen=True)
class Loading:
    progress: int = 0


@dataclass(frozen=True)
class Stories:
    pass


@dataclass(frozen=True)
class Error:
    message: str


ScreenMode = Union[Loading, Stories, Error]


class AppState:
    """Stories, selection cursor and screen mode of the running client.

    Only the orchestrator mutates this object; the renderer reads it.
    """

    def __init__(self) -> None:
        self.stories: List[Story] = []
        self.selected = 0
        self.mode: ScreenMode = Loading()

    @property
    def loading_progress(self) -> int:
        return self.mode.progress if isinstance(self.mode, Loading) else 0

    def select_next(self) -> None:
        if self.stories and self.selected < len(self.stories) - 1:
            self.selected += 1

    def select_previous(self) -> None:
        if self.selected > 0:
            self.selected -= 1

    def current_selection(self) -> Optional[Story]:
        if 0 <= self.selected < len(self.stories):
            return self.stories[self.selected]
        return None

    def replace_stories(self, stories: Iterable[Story]) -> None:
        self.stories = list(stories)
        self.selected = 0
        self.mode = Stories()

    def set_error(self, message: str) -> None:
        self.mode = Error(message)

    def update_progress(self, percent: int) -> None:
        # Late progress must not bring back a finished loading screen
        if isinstance(self.mode, Loading):
            self.mode = Loading(max(0, min(100, percent)))

    def begin_loading(self) -> None:
        self.stories = []
        self.selected = 0
        self.mode = Loading()
