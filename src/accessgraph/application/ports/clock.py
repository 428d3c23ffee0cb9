"""Clock port - source of the evaluation time."""

from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Returns the current timezone-aware time."""

    def __call__(self) -> datetime: ...
