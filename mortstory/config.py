"""
Configuration
=============

Plain dataclasses holding the knobs of the story. Defaults reproduce the
published layout: an 800x400 frame with 60/20/60/70 margins, so the plot
area is 710x280 pixels.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Tuple

DEFAULT_DATA_PATH = "data/nchs-age-adjusted-death-rates-for-selected-major-causes-of-death.csv"


@dataclass(frozen=True)
class Margins:
    top: int = 60
    right: int = 20
    bottom: int = 60
    left: int = 70


@dataclass(frozen=True)
class FrameConfig:
    """Total drawing surface size (pixels) and the margins around the plot area."""
    width: int = 800
    height: int = 400
    margins: Margins = field(default_factory=Margins)

    @property
    def plot_width(self) -> int:
        return self.width - self.margins.left - self.margins.right

    @property
    def plot_height(self) -> int:
        return self.height - self.margins.top - self.margins.bottom


@dataclass
class StoryConfig:
    """High-level knobs for the three scenes."""
    data_path: str = DEFAULT_DATA_PATH
    frame: FrameConfig = field(default_factory=FrameConfig)

    # Rows at or above this rate are treated as data artifacts
    rate_ceiling: float = 2000.0

    # Scene 1
    focus_causes: Tuple[str, ...] = ("Heart Disease", "Cancer")
    annotation_cause: str = "Heart Disease"
    annotation_year: int = 1960

    # Scene 2
    top_year: int = 2017
    top_n: int = 5

    # Pixels per inch used when the frame is turned into a matplotlib figure
    dpi: int = 100
