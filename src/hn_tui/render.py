from __future__ import annotations

from typing import List, Optional

from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.progress_bar import ProgressBar
from rich.text import Text

from .datamodels import Story, format_age
from .state import AppState, Error, Loading, Stories

STORY_LINES = 3
STORIES_CONTROLS = "↑↓ Navigate • Enter Open Link • R Refresh • Q Quit"
ERROR_CONTROLS = "Press 'R' to retry or 'Q' to quit"


def render(
    state: AppState, height: Optional[int] = None, now: Optional[float] = None
) -> RenderableType:
    """Draw the current screen. Reads ``state`` and never changes it."""
    mode = state.mode
    if isinstance(mode, Loading):
        return render_loading(mode.progress)
    if isinstance(mode, Stories):
        return render_stories(state, height, now)
    if isinstance(mode, Error):
        return render_error(mode.message)
    raise TypeError(f"Unknown screen mode: {mode!r}")


def render_loading(progress: int) -> RenderableType:
    bar = ProgressBar(total=100, completed=progress, width=40)
    return Group(
        Panel(Align.center(Text("Hacker News TUI", style="bold cyan")), title="Welcome"),
        Panel(
            Group(Align.center(bar), Align.center(Text(f"{progress}%", style="bold"))),
            title="Loading Stories...",
        ),
    )


def render_error(message: str) -> RenderableType:
    body = Text.assemble(("Connection Failed", "bold red"), "\n\n", message)
    return Group(
        Panel(Align.center(body), title="Error", border_style="red"),
        Panel(Align.center(Text(ERROR_CONTROLS, style="bold")), title="Controls"),
    )


def visible_window(selected: int, count: int, height: Optional[int]) -> range:
    """Indices of the stories that fit on screen, paged so ``selected`` shows."""
    if height is None:
        return range(count)
    per_page = max(1, (height - 2) // STORY_LINES)
    start = (selected // per_page) * per_page
    return range(start, min(count, start + per_page))


def render_story(rank: int, story: Story, selected: bool, now: Optional[float]) -> Text:
    marker = "➤ " if selected else "  "
    title_style = "bold black on yellow" if selected else "bold"
    line = Text(marker)
    line.append(f"{rank:2}. ", style="bold bright_black")
    line.append(story.title, style=title_style)
    if story.domain:
        line.append(f" ({story.domain})", style="italic blue")
    line.append("\n      ")
    line.append(f"▲ {story.score:3}", style="bold green")
    line.append(" │ ", style="bright_black")
    line.append(f"by {story.by}", style="magenta")
    line.append(" │ ", style="bright_black")
    line.append(f"{story.descendants:2} comments", style="cyan")
    line.append(" │ ", style="bright_black")
    line.append(format_age(story.time, now), style="yellow")
    line.append("\n")
    return line


def render_stories(
    state: AppState, height: Optional[int] = None, now: Optional[float] = None
) -> RenderableType:
    footer = Panel(Align.center(Text(STORIES_CONTROLS, style="bold")), title="Controls")
    if not state.stories:
        empty = Panel(
            Align.center(Text("No stories available", style="bold yellow")),
            title="Stories",
        )
        return Group(empty, footer)

    # Leave room for the controls panel below the list
    list_height = None if height is None else max(STORY_LINES + 2, height - 3)
    window = visible_window(state.selected, len(state.stories), list_height)
    lines: List[RenderableType] = [
        render_story(i + 1, state.stories[i], i == state.selected, now) for i in window
    ]
    title = f"Stories ({state.selected + 1}/{len(state.stories)})"
    return Group(Panel(Group(*lines), title=title), footer)
