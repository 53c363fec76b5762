"""Interleave occurrence streams from all income and bill items."""

from itertools import chain
from operator import attrgetter
from typing import Iterable

from .models import Occurrence


def merge(sequences: Iterable[Iterable[Occurrence]]) -> list[Occurrence]:
    """Combine occurrence sequences into one list sorted by date.

    The sort is stable and keeps duplicates: two items landing on the same
    date both appear. Ordering within a single day is left to the simulator.
    """
    return sorted(chain.from_iterable(sequences), key=attrgetter("date"))


__all__ = ["merge"]
