#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .app import HackerNewsApp
from .config import DEFAULT_THEME, HTTP_TIMEOUT, get_int, load_config, setup_logging
from .errors import TerminalSetupFailed
from .fetcher import StoryFetcher

logger = logging.getLogger("hn")


def ensure_terminal() -> None:
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise TerminalSetupFailed("hn-tui needs an interactive terminal")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hacker News top stories in your terminal")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--theme", type=str, help="Textual theme to use for this run")
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of parallel item requests (default: 1, sequential)",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        help=f"Per-request timeout in seconds (default: {HTTP_TIMEOUT})",
    )
    return parser


# --- Entrypoint ---
def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    if args.workers is not None:
        config["workers"] = args.workers
    if args.timeout is not None:
        config["http_timeout"] = args.timeout
    theme_name = args.theme or config.get("theme") or DEFAULT_THEME
    logger.info("Using theme: %s", theme_name)

    try:
        ensure_terminal()
    except TerminalSetupFailed as e:
        logger.error("Terminal setup failed: %s", e)
        print(f"Terminal setup failed: {e}", file=sys.stderr)
        return

    try:
        with StoryFetcher(
            timeout=get_int(config, "http_timeout", HTTP_TIMEOUT),
            workers=get_int(config, "workers", 1),
        ) as fetcher:
            app = HackerNewsApp(fetcher, theme=theme_name, config=config)
            app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)


if __name__ == "__main__":
    main()
