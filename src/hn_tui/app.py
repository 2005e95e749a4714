from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Static

from .config import DEFAULT_THEME, POLL_INTERVAL, load_themes
from .fetcher import StoryFetcher
from .orchestrator import Command, Orchestrator
from .render import render
from .state import AppState

logger = logging.getLogger("hn")


class HackerNewsApp(App):
    TITLE = "Hacker News"
    SUB_TITLE = "Top stories"

    CSS_PATH = "app.css"

    BINDINGS = [
        Binding("q,Q,escape", "quit", "Quit"),
        Binding("r,R", "refresh", "Refresh / Retry"),
        Binding("enter,o", "open", "Open Link"),
        Binding("up,k", "cursor_up", "Up", show=False),
        Binding("down,j", "cursor_down", "Down", show=False),
    ]

    def __init__(
        self,
        fetcher: StoryFetcher,
        theme: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ):
        super().__init__(**kwargs)
        self._theme_name = theme or DEFAULT_THEME
        self.config = config or {}
        self.orchestrator = Orchestrator(fetcher, notify=self._notify_error)

    @property
    def state(self) -> AppState:
        return self.orchestrator.state

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(id="screen")
        yield Footer()

    def on_mount(self) -> None:
        for theme in load_themes(self.config).values():
            self.register_theme(theme)
        try:
            self.theme = self._theme_name
        except Exception as e:
            logger.warning("Unknown theme '%s', keeping default: %s", self._theme_name, e)

        self.orchestrator.start()
        self.tick()
        # The timer is what picks up background progress between key presses
        self.set_interval(POLL_INTERVAL, self.tick)

    def tick(self) -> None:
        self.orchestrator.drain()
        self.redraw()

    def redraw(self) -> None:
        screen = self.query_one("#screen", Static)
        height = screen.size.height or None
        screen.update(render(self.state, height=height))

    def _dispatch(self, command: Command) -> None:
        if not self.orchestrator.handle(command):
            self.exit()
            return
        self.redraw()

    def _notify_error(self, message: str) -> None:
        self.notify(message, title="Open link failed", severity="error")

    async def action_quit(self) -> None:
        self._dispatch(Command.QUIT)

    def action_refresh(self) -> None:
        self._dispatch(Command.REFRESH)

    def action_open(self) -> None:
        self._dispatch(Command.OPEN)

    def action_cursor_up(self) -> None:
        self._dispatch(Command.UP)

    def action_cursor_down(self) -> None:
        self._dispatch(Command.DOWN)
