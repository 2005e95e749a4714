from __future__ import annotations

import asyncio
import threading
from unittest.mock import MagicMock

import pytest

from hn_tui.app import HackerNewsApp
from hn_tui.datamodels import Story
from hn_tui.state import Loading, Stories


def story(i, url=None):
    return Story(title=f"Story {i}", score=i, by="a", time=0, url=url, id=i)


STORIES = [story(1), story(2, "https://x/y"), story(3)]


def ready_fetcher(stories=STORIES):
    fetcher = MagicMock()
    fetcher.fetch_top_stories.return_value = list(stories)
    return fetcher


@pytest.fixture
def blocked_fetcher():
    release = threading.Event()
    fetcher = MagicMock()

    def fetch(progress):
        release.wait(5)
        return []

    fetcher.fetch_top_stories.side_effect = fetch
    yield fetcher
    release.set()


async def wait_for_stories(app, pilot):
    for _ in range(40):
        if isinstance(app.state.mode, Stories):
            return
        await pilot.pause(0.05)


@pytest.mark.parametrize("key", ["q", "escape"])
def test_quit_while_fetch_is_blocked(blocked_fetcher, key):
    async def scenario():
        app = HackerNewsApp(blocked_fetcher)
        async with app.run_test() as pilot:
            assert isinstance(app.state.mode, Loading)
            await pilot.press(key)
            assert not app.is_running

    asyncio.run(scenario())


def test_timer_applies_results_without_input():
    async def scenario():
        app = HackerNewsApp(ready_fetcher())
        async with app.run_test() as pilot:
            await wait_for_stories(app, pilot)
            assert app.state.mode == Stories()
            assert app.state.stories == STORIES

    asyncio.run(scenario())


def test_keys_reach_the_orchestrator():
    async def scenario():
        fetcher = ready_fetcher()
        app = HackerNewsApp(fetcher)
        opener = MagicMock(return_value=True)
        app.orchestrator.opener = opener
        async with app.run_test() as pilot:
            await wait_for_stories(app, pilot)

            await pilot.press("down", "j")
            assert app.state.selected == 2
            await pilot.press("up", "k")
            assert app.state.selected == 0

            await pilot.press("down", "enter")
            opener.assert_called_once_with("https://x/y")

            await pilot.press("r")
            assert app.orchestrator.generation == 2
            await wait_for_stories(app, pilot)
            assert fetcher.fetch_top_stories.call_count == 2
            assert app.state.selected == 0

    asyncio.run(scenario())


def test_keys_other_than_quit_are_ignored_while_loading(blocked_fetcher):
    async def scenario():
        app = HackerNewsApp(blocked_fetcher)
        async with app.run_test() as pilot:
            await pilot.press("down", "enter", "r")
            assert isinstance(app.state.mode, Loading)
            assert app.orchestrator.generation == 1
            assert app.is_running

    asyncio.run(scenario())


def test_retry_from_error_screen():
    async def scenario():
        fetcher = MagicMock()
        fetcher.fetch_top_stories.side_effect = [RuntimeError("offline"), list(STORIES)]
        app = HackerNewsApp(fetcher)
        async with app.run_test() as pilot:
            for _ in range(40):
                if not isinstance(app.state.mode, Loading):
                    break
                await pilot.pause(0.05)
            assert app.state.mode.message == "Unexpected error: offline"

            await pilot.press("r")
            await wait_for_stories(app, pilot)
            assert app.state.stories == STORIES

    asyncio.run(scenario())
