"""
Data model
==========

Each row of the NCHS CSV becomes a `MortalityRecord`. Records are frozen so
that filters and sorts always build new lists instead of editing data.

`Scene` is the three-position index the navigation buttons move through.
"""

from dataclasses import dataclass
from enum import IntEnum


@dataclass(frozen=True)
class MortalityRecord:
    """Immutable record for one (year, cause) row."""
    year: int
    cause: str
    # Age Adjusted Death Rate, per 100,000 population
    rate: float


class Scene(IntEnum):
    OVERVIEW = 0
    TOP_FIVE = 1
    ALL_CAUSES = 2

    @property
    def label(self) -> str:
        return {
            Scene.OVERVIEW: "Overview",
            Scene.TOP_FIVE: "Top five",
            Scene.ALL_CAUSES: "All causes",
        }[self]
