"""
Scales
======

A scale maps a data domain onto a pixel range:

- `LinearScale`: continuous (year -> x pixel, rate -> y pixel)
- `BandScale`: categorical slots (cause -> x pixel + bar width)
- `OrdinalScale`: categorical colors (cause -> hex color)

Tick positions come from matplotlib's `MaxNLocator`, restricted to the
"nice" steps 1, 2, 5 and 10.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple
import math

from matplotlib import colormaps
from matplotlib.colors import to_hex
from matplotlib.ticker import MaxNLocator

# Same ten colors as d3.schemeCategory10
CATEGORY10: Tuple[str, ...] = tuple(to_hex(c) for c in colormaps["tab10"].colors)


class LinearScale:
    """Continuous linear map from `domain` (d0, d1) to `range` (r0, r1)."""

    def __init__(self, domain: Tuple[float, float], range: Tuple[float, float]):
        self.domain = (float(domain[0]), float(domain[1]))
        self.range = (float(range[0]), float(range[1]))

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            # degenerate domain maps everything to the middle of the range
            return (r0 + r1) / 2
        return r0 + (float(value) - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (float(pixel) - r0) / (r1 - r0) * (d1 - d0)

    def ticks(self, count: int = 10) -> List[float]:
        lo, hi = sorted(self.domain)
        if lo == hi:
            return [lo]
        locator = MaxNLocator(nbins=count, steps=[1, 2, 5, 10])
        eps = (hi - lo) * 1e-9
        return [float(t) for t in locator.tick_values(lo, hi) if lo - eps <= t <= hi + eps]

    def tick_step(self, count: int = 10) -> Optional[float]:
        t = self.ticks(count)
        return t[1] - t[0] if len(t) > 1 else None

    def tick_format(self, value: float, count: int = 10) -> str:
        """Format a tick with thousands separators and just enough decimals."""
        step = self.tick_step(count)
        decimals = 0
        if step and step < 1:
            step = round(step, 12)
            decimals = max(0, -int(math.floor(math.log10(step))))
        return f"{value:,.{decimals}f}"


class BandScale:
    """Split `range` into one equal band per category, with padding between."""

    def __init__(self, domain: Sequence[str], range: Tuple[float, float], padding: float = 0.3):
        # duplicates collapse onto the first slot
        self.domain: List[str] = list(dict.fromkeys(domain))
        self.range = (float(range[0]), float(range[1]))
        self.padding = padding

    @property
    def step(self) -> float:
        r0, r1 = self.range
        n = len(self.domain)
        return (r1 - r0) / max(1.0, n - self.padding + self.padding * 2)

    @property
    def bandwidth(self) -> float:
        return self.step * (1 - self.padding)

    def __call__(self, value: str) -> Optional[float]:
        if value not in self.domain:
            return None
        r0, r1 = self.range
        n = len(self.domain)
        start = r0 + (r1 - r0 - self.step * (n - self.padding)) * 0.5
        return start + self.step * self.domain.index(value)

    def center(self, value: str) -> Optional[float]:
        left = self(value)
        return None if left is None else left + self.bandwidth / 2


class OrdinalScale:
    """Category -> color. Unknown categories take the next palette color."""

    def __init__(self, palette: Sequence[str] = CATEGORY10, domain: Sequence[str] = ()):
        self.palette = tuple(palette)
        self._index: Dict[str, int] = {}
        for name in domain:
            self(name)

    @property
    def domain(self) -> List[str]:
        return list(self._index)

    def __call__(self, name: str) -> str:
        if name not in self._index:
            self._index[name] = len(self._index)
        return self.palette[self._index[name] % len(self.palette)]
