from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Optional

from textual.theme import Theme

# --- Configuration ---
API_BASE = "https://hacker-news.firebaseio.com/v0"
TOP_STORIES_URL = f"{API_BASE}/topstories.json"
ITEM_URL = API_BASE + "/item/{id}.json"
HTTP_TIMEOUT = 10
MAX_STORIES = 30
POLL_INTERVAL = 0.1
DEFAULT_THEME = "dracula"

CONFIG_PATH = os.path.expanduser("~/.config/hn/config.json")

REQUEST_HEADERS = {
    "User-Agent": "hn-tui/0.1 (+https://news.ycombinator.com)",
    "Accept": "application/json",
}
RETRY_ATTEMPTS = 2
RETRY_BACKOFF = 0.3

# --- Logging ---
logger = logging.getLogger("hn")


def setup_logging(debug: bool = False) -> Optional[str]:
    """Silence logging, or with ``debug`` send everything to a file under /tmp.

    Returns the debug log path, if any.
    """
    if not debug:
        logging.basicConfig(level=logging.CRITICAL, handlers=[logging.NullHandler()])
        return None

    ts = datetime.now().strftime("%Y%m%dT%H%M%S")
    pid = os.getpid()
    debug_path = f"/tmp/hn_debug_{ts}_{pid}.log"

    # The TUI owns the terminal, so debug output only ever goes to a file
    logging.basicConfig(
        level=logging.DEBUG,
        filename=debug_path,
        filemode="a",
        format="%(asctime)s - %(levelname)s - %(name)s - %(threadName)s - %(message)s",
    )

    logger.debug(
        "hn-tui debug log %s (pid %d, api %s, timeout %ss, top %d)",
        debug_path,
        pid,
        API_BASE,
        HTTP_TIMEOUT,
        MAX_STORIES,
    )
    return debug_path


def load_config() -> Dict[str, Any]:
    """Load the user configuration file, or an empty config if there is none."""
    if not os.path.exists(CONFIG_PATH):
        logger.debug("No config file at %s, using defaults.", CONFIG_PATH)
        return {}
    try:
        with open(CONFIG_PATH, "r") as f:
            config = json.load(f)
    except (IOError, json.JSONDecodeError) as e:
        logger.error("Failed to load config from %s: %s", CONFIG_PATH, e)
        return {}
    if not isinstance(config, dict):
        logger.error("Ignoring config at %s: expected a JSON object.", CONFIG_PATH)
        return {}
    logger.info("Loaded config from %s", CONFIG_PATH)
    return config


def load_themes(config: Dict[str, Any]) -> Dict[str, Theme]:
    """Build the user-defined themes found under the ``themes`` key."""
    themes: Dict[str, Theme] = {}
    for name, definition in config.get("themes", {}).items():
        try:
            themes[name] = Theme(name=name, **definition)
        except Exception as e:
            logger.warning("Ignoring invalid theme definition for '%s': %s", name, e)
    return themes


def get_int(config: Dict[str, Any], key: str, default: int, minimum: int = 1) -> int:
    """Read a positive integer setting, falling back to ``default``."""
    value = config.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < minimum:
        logger.warning("Invalid value %r for '%s', using %s", value, key, default)
        return default
    return int(value)
