from __future__ import annotations

import pytest
from rich.console import Console

from hn_tui.datamodels import Story
from hn_tui.render import render, visible_window
from hn_tui.state import AppState

NOW = 1_700_000_000


def as_text(renderable) -> str:
    console = Console(width=100, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


def make_state(n):
    state = AppState()
    state.replace_stories(
        Story(
            title=f"Story number {i}",
            score=10 * i,
            by=f"user{i}",
            time=NOW - 7200,
            url=f"https://site{i}.example/post" if i % 2 else None,
            descendants=i,
            id=i,
        )
        for i in range(1, n + 1)
    )
    return state


def test_loading_screen_shows_progress():
    state = AppState()
    state.update_progress(45)
    text = as_text(render(state))
    assert "Loading Stories..." in text
    assert "45%" in text


def test_error_screen_shows_message():
    state = AppState()
    state.set_error("Could not fetch top stories: timed out")
    text = as_text(render(state))
    assert "Connection Failed" in text
    assert "timed out" in text
    assert "Press 'R' to retry" in text


def test_stories_screen_lists_stories():
    state = make_state(3)
    state.select_next()
    text = as_text(render(state, now=NOW))
    assert "Stories (2/3)" in text
    assert " 1. Story number 1 (site1.example)" in text
    assert "Story number 2" in text
    assert "(None)" not in text
    assert "by user3" in text
    assert "2h" in text
    assert "➤ " in text


def test_empty_stories_screen():
    state = make_state(0)
    assert "No stories available" in as_text(render(state))


def test_render_does_not_touch_state():
    state = make_state(5)
    state.select_next()
    before = (list(state.stories), state.selected, state.mode)
    render(state, height=10, now=NOW)
    assert (state.stories, state.selected, state.mode) == before


def test_window_pages_to_the_selection():
    state = make_state(30)
    for _ in range(12):
        state.select_next()
    text = as_text(render(state, height=20, now=NOW))
    assert "Story number 13 " in text
    assert "Story number 1 " not in text


@pytest.mark.parametrize(
    "selected, count, height, expected",
    [
        (0, 5, None, range(0, 5)),
        (0, 30, 17, range(0, 5)),
        (7, 30, 17, range(5, 10)),
        (29, 30, 17, range(25, 30)),
        (0, 3, 1, range(0, 1)),
    ],
)
def test_visible_window(selected, count, height, expected):
    assert visible_window(selected, count, height) == expected
