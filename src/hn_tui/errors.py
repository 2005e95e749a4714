from __future__ import annotations


class HNError(Exception):
    """Base class for hn-tui errors."""


class FetchError(HNError):
    pass


class IndexUnavailable(FetchError):
    """The ranked list of story ids could not be fetched or parsed."""


class ItemUnavailable(FetchError):
    """A single story could not be fetched or parsed."""

    def __init__(self, item_id: int, reason: str):
        super().__init__(f"Failed to fetch item {item_id}: {reason}")
        self.item_id = item_id
        self.reason = reason


class OpenLinkFailed(HNError):
    pass


class TerminalSetupFailed(HNError):
    pass
