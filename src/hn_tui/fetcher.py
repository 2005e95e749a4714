from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import (
    HTTP_TIMEOUT,
    ITEM_URL,
    MAX_STORIES,
    REQUEST_HEADERS,
    RETRY_ATTEMPTS,
    RETRY_BACKOFF,
    TOP_STORIES_URL,
)
from .datamodels import Story
from .errors import IndexUnavailable, ItemUnavailable

logger = logging.getLogger("hn")

ProgressSink = Callable[[int], None]


class StoryFetcher:
    """Resolves the Hacker News top stories over a shared HTTP session.

    Use it as a context manager so the session is closed on every exit path.
    """

    def __init__(
        self,
        timeout: float = HTTP_TIMEOUT,
        workers: int = 1,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.workers = max(1, workers)
        self.session = session or self._create_session()

    def __enter__(self) -> "StoryFetcher":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        retries = Retry(
            total=RETRY_ATTEMPTS,
            backoff_factor=RETRY_BACKOFF,
            status_forcelist=[429, 500, 502, 503, 504],
        )
        adapter = HTTPAdapter(max_retries=retries)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def _get_json(self, url: str) -> Any:
        logger.debug("Fetching %s", url)
        resp = self.session.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.json()

    def fetch_top_story_ids(self) -> List[int]:
        try:
            data = self._get_json(TOP_STORIES_URL)
        except (requests.RequestException, ValueError) as e:
            logger.error("Top stories request failed: %s", e)
            raise IndexUnavailable(f"Could not fetch top stories: {e}") from e
        if not isinstance(data, list) or not all(
            isinstance(i, int) and not isinstance(i, bool) and i >= 0 for i in data
        ):
            logger.error("Unexpected top stories payload: %.200r", data)
            raise IndexUnavailable("Could not fetch top stories: malformed response")
        return data[:MAX_STORIES]

    def fetch_item(self, item_id: int) -> Story:
        try:
            data = self._get_json(ITEM_URL.format(id=item_id))
            return Story.from_json(data)
        except (requests.RequestException, ValueError) as e:
            raise ItemUnavailable(item_id, str(e)) from e

    def fetch_top_stories(self, progress: Optional[ProgressSink] = None) -> List[Story]:
        """Fetch up to MAX_STORIES top stories in rank order.

        Items that fail are logged and left out. Raises IndexUnavailable when
        the id list itself can't be retrieved. ``progress`` receives a
        non-decreasing percentage ending at 100.
        """

        def report(percent: int) -> None:
            if progress is None:
                return
            try:
                progress(percent)
            except Exception as e:
                logger.debug("Progress sink raised, ignoring: %s", e)

        report(10)
        ids = self.fetch_top_story_ids()
        report(20)
        logger.info("Resolving %d stories with %d worker(s)", len(ids), self.workers)

        slots: List[Optional[Story]] = [None] * len(ids)
        total = len(ids)
        if self.workers == 1:
            for index, item_id in enumerate(ids):
                slots[index] = self._fetch_or_skip(item_id)
                report(20 + int(index / total * 70))
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                future_to_index = {
                    executor.submit(self._fetch_or_skip, item_id): index
                    for index, item_id in enumerate(ids)
                }
                for done, future in enumerate(as_completed(future_to_index)):
                    slots[future_to_index[future]] = future.result()
                    report(20 + int(done / total * 70))

        stories = [s for s in slots if s is not None]
        report(100)
        logger.info("Fetched %d of %d stories", len(stories), total)
        return stories

    def _fetch_or_skip(self, item_id: int) -> Optional[Story]:
        try:
            return self.fetch_item(item_id)
        except ItemUnavailable as e:
            logger.warning("%s", e)
            return None
