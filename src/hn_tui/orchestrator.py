from __future__ import annotations

import enum
import logging
import queue
import threading
import webbrowser
from typing import Any, Callable, Optional

from .errors import IndexUnavailable, OpenLinkFailed
from .fetcher import StoryFetcher
from .messages import FetchFailed, FetchMessage, FetchProgress, StoriesLoaded
from .state import AppState, Error, Loading, Stories

logger = logging.getLogger("hn")

Opener = Callable[[str], bool]
Spawner = Callable[[Callable[[], None], str], Any]


class Command(enum.Enum):
    UP = "up"
    DOWN = "down"
    OPEN = "open"
    REFRESH = "refresh"
    QUIT = "quit"


def spawn_daemon_thread(target: Callable[[], None], name: str) -> threading.Thread:
    # Daemon threads are abandoned at exit instead of being joined
    thread = threading.Thread(target=target, name=name, daemon=True)
    thread.start()
    return thread


class Orchestrator:
    """Runs fetch tasks in the background and applies their results.

    Every spawned fetch gets a new generation id. Messages from any other
    generation are dropped when the channel is drained, so a superseded fetch
    can never overwrite the state of a newer one.
    """

    def __init__(
        self,
        fetcher: StoryFetcher,
        state: Optional[AppState] = None,
        opener: Opener = webbrowser.open,
        spawn: Spawner = spawn_daemon_thread,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.fetcher = fetcher
        self.state = state or AppState()
        self.opener = opener
        self.spawn = spawn
        self.notify = notify
        self.channel: "queue.SimpleQueue[FetchMessage]" = queue.SimpleQueue()
        self.generation = 0
        self.task: Any = None

    def start(self) -> None:
        """Enter Loading and spawn a fresh fetch task."""
        self.state.begin_loading()
        self.generation += 1
        generation = self.generation
        logger.info("Starting fetch generation %d", generation)
        self.task = self.spawn(
            lambda: self._run_fetch(generation), f"fetch-{generation}"
        )

    def _run_fetch(self, generation: int) -> None:
        # Runs on the fetch thread: only ever talks to the channel
        send = self.channel.put

        def progress(percent: int) -> None:
            send(FetchProgress(generation, percent))

        try:
            stories = self.fetcher.fetch_top_stories(progress)
        except IndexUnavailable as e:
            send(FetchFailed(generation, str(e)))
        except Exception as e:
            logger.exception("Fetch generation %d crashed", generation)
            send(FetchFailed(generation, f"Unexpected error: {e}"))
        else:
            send(StoriesLoaded(generation, stories))

    def drain(self) -> bool:
        """Apply every queued message without blocking.

        Returns True if any message of the current generation was applied.
        """
        applied = False
        while True:
            try:
                msg = self.channel.get_nowait()
            except queue.Empty:
                return applied
            if msg.generation != self.generation:
                logger.debug(
                    "Dropping stale %s from generation %d",
                    type(msg).__name__,
                    msg.generation,
                )
                continue
            self._apply(msg)
            applied = True

    def _apply(self, msg: FetchMessage) -> None:
        if isinstance(msg, FetchProgress):
            self.state.update_progress(msg.percent)
        elif isinstance(msg, StoriesLoaded):
            self.state.replace_stories(msg.stories)
        elif isinstance(msg, FetchFailed):
            self.state.set_error(msg.message)
        else:
            raise TypeError(f"Unknown message: {msg!r}")

    def handle(self, command: Command) -> bool:
        """Apply a user command. Returns False when the program should quit."""
        if command is Command.QUIT:
            return False

        mode = self.state.mode
        if isinstance(mode, Loading):
            pass
        elif isinstance(mode, Stories):
            if command is Command.UP:
                self.state.select_previous()
            elif command is Command.DOWN:
                self.state.select_next()
            elif command is Command.OPEN:
                self.open_selected()
            elif command is Command.REFRESH:
                self.start()
        elif isinstance(mode, Error):
            if command is Command.REFRESH:
                self.start()
        else:
            raise TypeError(f"Unknown screen mode: {mode!r}")
        return True

    def open_selected(self) -> None:
        story = self.state.current_selection()
        if story is None or not story.url:
            return
        try:
            self._open(story.url)
        except OpenLinkFailed as e:
            logger.error("%s", e)
            if self.notify is not None:
                self.notify(str(e))

    def _open(self, url: str) -> None:
        logger.debug("Opening %s", url)
        try:
            opened = self.opener(url)
        except Exception as e:
            raise OpenLinkFailed(f"Could not open {url}: {e}") from e
        if not opened:
            raise OpenLinkFailed(f"Could not open {url}: no browser available")
