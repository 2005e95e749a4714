from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from .datamodels import Story


# Messages sent from a fetch task to the UI loop. Each carries the generation
# of the fetch that produced it.
@dataclass(frozen=True)
class FetchProgress:
    generation: int
    percent: int


@dataclass(frozen=True)
class StoriesLoaded:
    generation: int
    stories: List[Story]


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    message: str


FetchMessage = Union[FetchProgress, StoriesLoaded, FetchFailed]
