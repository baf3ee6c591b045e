"""
Chart canvas
============

`ChartCanvas` owns one matplotlib Axes and draws on it in *pixel frame*
coordinates: (0, 0) is the top-left corner of the plot area, x grows to the
right, y grows downward, and the margins sit at negative coordinates or
beyond (W, H). This is the same frame an SVG `<g transform=translate(...)>`
would give, so every scene positions things in plain pixels.

Besides the matplotlib artists, every drawing call appends a `Mark` to
`canvas.marks`. The marks list is what is currently "on screen" and is what
`clear()` resets.

Hover tooltips: `draw_markers` registers hover targets; `pointer_move(x, y)`
hit-tests them and keeps at most one tooltip alive. The topmost (last drawn)
marker under the pointer owns the tooltip.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple, Union
import logging

import numpy as np
from matplotlib.figure import Figure
from matplotlib.patches import Circle, Rectangle

from .config import FrameConfig
from .loader import max_rate, year_extent
from .models import MortalityRecord
from .scales import BandScale, LinearScale, OrdinalScale

logger = logging.getLogger(__name__)

Point = Tuple[float, float]
# (key, x, y, width, height, color) in pixel frame coordinates
Bar = Tuple[str, float, float, float, float, str]

DEFAULT_X_LABEL = "Year"
DEFAULT_Y_LABEL = "Death Rate (per 100,000)"
HOVER_RADIUS = 3.0
TOOLTIP_OFFSET = (5.0, -30.0)

# y-domain headroom above the max rate
LINE_HEADROOM = 1.05
BAR_HEADROOM = 1.1


@dataclass(frozen=True)
class Mark:
    """One element currently drawn on the canvas."""
    kind: str
    key: str = ""
    color: Optional[str] = None
    points: Tuple[Point, ...] = ()
    labels: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChartFrame:
    """Frame geometry plus the scales of one render pass."""
    frame: FrameConfig
    x: Union[LinearScale, BandScale]
    y: LinearScale
    color: OrdinalScale

    @property
    def width(self) -> int:
        return self.frame.plot_width

    @property
    def height(self) -> int:
        return self.frame.plot_height


@dataclass
class _HoverTarget:
    key: str
    points: np.ndarray
    texts: List[str] = field(default_factory=list)


class ChartCanvas:
    """Drawing surface for the scenes (see module docstring)."""

    def __init__(self, ax=None, frame: Optional[FrameConfig] = None,
                 color: Optional[OrdinalScale] = None, dpi: int = 100):
        self.frame = frame or FrameConfig()
        self.dpi = dpi
        if ax is None:
            fig = Figure(figsize=(self.frame.width / dpi, self.frame.height / dpi), dpi=dpi)
            ax = fig.add_axes((0, 0, 1, 1))
        self.ax = ax
        self.figure = ax.figure
        # one color scale per session so a cause keeps its color across scenes
        self.color = color or OrdinalScale()
        self.marks: List[Mark] = []
        self._hover: List[_HoverTarget] = []
        self._tooltip = None
        self._tooltip_text: Optional[str] = None
        self._setup()

    # ---------------- Frame ----------------
    @property
    def width(self) -> int:
        return self.frame.plot_width

    @property
    def height(self) -> int:
        return self.frame.plot_height

    def _setup(self) -> None:
        m = self.frame.margins
        self.ax.set_axis_off()
        self.ax.set_xlim(-m.left, self.width + m.right)
        # inverted: pixel y grows downward
        self.ax.set_ylim(self.height + m.bottom, -m.top)
        self.ax.set_autoscale_on(False)

    def _pt(self, px: float) -> float:
        """Pixels -> points (matplotlib sizes fonts and strokes in points)."""
        return px * 72.0 / self.dpi

    def clear(self) -> None:
        """Remove everything drawn so far. Safe to call repeatedly."""
        self.ax.cla()
        self.marks.clear()
        self._hover.clear()
        self._tooltip = None
        self._tooltip_text = None
        self._setup()

    def marks_of(self, kind: str) -> List[Mark]:
        return [m for m in self.marks if m.kind == kind]

    # ---------------- Scales ----------------
    def scales(self, records: Sequence[MortalityRecord], mode: str = "line") -> ChartFrame:
        """
        Build the scales for `records`.

        mode="line": x linear over the year extent, y = [0, 1.05 x max rate]
        mode="bar":  x banded over causes (record order), y = [0, 1.1 x max rate]
        """
        rate = max_rate(records)
        if mode == "line":
            extent = year_extent(records) or (0, 1)
            x = LinearScale(extent, (0, self.width))
            top = rate * LINE_HEADROOM if rate else 1.0
        elif mode == "bar":
            x = BandScale([r.cause for r in records], (0, self.width), padding=0.3)
            top = rate * BAR_HEADROOM if rate else 1.0
        else:
            raise ValueError("mode must be 'line' or 'bar'")
        y = LinearScale((0, top), (self.height, 0))
        return ChartFrame(frame=self.frame, x=x, y=y, color=self.color)

    # ---------------- Text ----------------
    def draw_title(self, text: str) -> None:
        self.ax.text(self.width / 2, -self.frame.margins.top / 2, text,
                     ha="center", va="center", fontsize=self._pt(18), fontweight="bold")
        self.marks.append(Mark(kind="title", key=text))

    def draw_axes(self, x: Union[LinearScale, BandScale], y: LinearScale,
                  x_label: str = DEFAULT_X_LABEL, y_label: str = DEFAULT_Y_LABEL) -> None:
        m = self.frame.margins
        W, H = self.width, self.height
        ax = self.ax
        font = self._pt(10)
        stroke = dict(color="black", linewidth=self._pt(1))

        # left axis
        ax.plot([0, 0], [y.range[0], y.range[1]], **stroke)
        y_labels: List[str] = []
        for t in y.ticks():
            py = y(t)
            label = y.tick_format(t)
            ax.plot([-6, 0], [py, py], **stroke)
            ax.text(-9, py, label, ha="right", va="center", fontsize=font)
            y_labels.append(label)
        self.marks.append(Mark(kind="axis", key="y", labels=tuple(y_labels)))

        # bottom axis
        ax.plot([0, W], [H, H], **stroke)
        x_labels: List[str] = []
        if isinstance(x, BandScale):
            ticks = [(x.center(c), c) for c in x.domain]
        else:
            # years: integers, no thousands separator
            ticks = [(x(t), f"{int(round(t))}") for t in x.ticks()]
        for px, label in ticks:
            ax.plot([px, px], [H, H + 6], **stroke)
            ax.text(px, H + 9, label, ha="center", va="top", fontsize=font)
            x_labels.append(label)
        self.marks.append(Mark(kind="axis", key="x", labels=tuple(x_labels)))

        ax.text(W / 2, H + m.bottom - 10, x_label, ha="center", va="baseline", fontsize=self._pt(12))
        ax.text(-m.left + 20, H / 2, y_label, ha="center", va="baseline",
                rotation=90, fontsize=self._pt(12))
        self.marks.append(Mark(kind="axis-label", key="x", labels=(x_label,)))
        self.marks.append(Mark(kind="axis-label", key="y", labels=(y_label,)))

    # ---------------- Marks ----------------
    def draw_line(self, key: str, points: Sequence[Point], color: str, width: float = 2.0) -> None:
        pts = tuple((float(px), float(py)) for px, py in points)
        xs = [p[0] for p in pts]
        ys = [p[1] for p in pts]
        self.ax.plot(xs, ys, color=color, linewidth=self._pt(width), solid_joinstyle="round")
        self.marks.append(Mark(kind="line", key=key, color=color, points=pts))

    def draw_bars(self, bars: Sequence[Bar]) -> None:
        for key, x, y, w, h, color in bars:
            self.ax.add_patch(Rectangle((x, y), w, h, facecolor=color, edgecolor="none"))
            self.marks.append(Mark(kind="bar", key=key, color=color,
                                   points=((x, y), (x + w, y + h))))

    def draw_legend(self, entries: Sequence[Tuple[str, str]], x: float, y: float) -> None:
        """Color-keyed legend: one 12px swatch + label per (name, color), 20px apart."""
        for i, (name, color) in enumerate(entries):
            top = y + i * 20
            self.ax.add_patch(Rectangle((x, top), 12, 12, facecolor=color, edgecolor="none"))
            self.ax.text(x + 16, top + 10, name, ha="left", va="baseline",
                         fontsize=self._pt(12), color="black")
            self.marks.append(Mark(kind="legend", key=name, color=color, points=((x, top),)))

    def draw_annotation(self, px: float, py: float, text: str,
                        dx: float = -30, dy: float = -40) -> None:
        """Leader line from (px, py) to (px+dx, py+dy), a small ring on the point, and a label."""
        self.ax.plot([px, px + dx], [py, py + dy], color="black", linewidth=self._pt(1))
        self.ax.add_patch(Circle((px, py), 2, facecolor="none", edgecolor="black"))
        self.ax.text(px + dx - 5, py + dy - 5, text, ha="right", va="baseline",
                     fontsize=self._pt(10), color="black")
        self.marks.append(Mark(kind="annotation", key=text, points=((px, py), (px + dx, py + dy))))

    def draw_markers(self, key: str, points: Sequence[Point], texts: Sequence[str],
                     radius: float = HOVER_RADIUS) -> None:
        """Invisible hover markers; `texts[i]` is the tooltip for `points[i]`."""
        if len(points) != len(texts):
            raise ValueError("points and texts must have the same length")
        arr = np.asarray(points, dtype=float).reshape(-1, 2)
        # s is an area in points^2
        size = (2 * self._pt(radius)) ** 2
        self.ax.scatter(arr[:, 0], arr[:, 1], s=size, facecolors="none", edgecolors="none")
        self._hover.append(_HoverTarget(key=key, points=arr, texts=list(texts)))
        self.marks.append(Mark(kind="markers", key=key,
                               points=tuple((float(a), float(b)) for a, b in arr)))

    # ---------------- Tooltip ----------------
    @property
    def tooltip_text(self) -> Optional[str]:
        return self._tooltip_text

    def show_tooltip(self, x: float, y: float, text: str) -> None:
        self.hide_tooltip()
        self._tooltip = self.ax.text(
            x, y, text, ha="left", va="top", fontsize=self._pt(12),
            bbox=dict(boxstyle="round,pad=0.4", facecolor="white", edgecolor="#999999", alpha=0.95),
            zorder=10,
        )
        self._tooltip_text = text
        self.marks.append(Mark(kind="tooltip", key=text, points=((x, y),)))

    def hide_tooltip(self) -> None:
        if self._tooltip is not None:
            self._tooltip.remove()
        self._tooltip = None
        self._tooltip_text = None
        self.marks = [m for m in self.marks if m.kind != "tooltip"]

    def hit_test(self, x: float, y: float) -> Optional[str]:
        """Tooltip text of the topmost marker within its radius of (x, y), if any."""
        for target in reversed(self._hover):
            if not len(target.points):
                continue
            d2 = (target.points[:, 0] - x) ** 2 + (target.points[:, 1] - y) ** 2
            hits = np.nonzero(d2 <= HOVER_RADIUS ** 2)[0]
            if hits.size:
                return target.texts[int(hits[-1])]
        return None

    def pointer_move(self, x: float, y: float) -> Optional[str]:
        """Pointer moved to (x, y): show, replace or remove the tooltip."""
        text = self.hit_test(x, y)
        if text is None:
            if self._tooltip is not None:
                self.hide_tooltip()
        elif text != self._tooltip_text:
            dx, dy = TOOLTIP_OFFSET
            self.show_tooltip(x + dx, y + dy, text)
        return self._tooltip_text

    def pointer_leave(self) -> None:
        self.hide_tooltip()

    def attach(self, figure: Optional[Figure] = None) -> int:
        """Route matplotlib pointer motion over the axes into `pointer_move`."""
        fig = figure or self.figure

        def _on_motion(event) -> None:
            if event.inaxes is not self.ax or event.xdata is None:
                if self._tooltip is not None:
                    self.pointer_leave()
                    fig.canvas.draw_idle()
                return
            before = self._tooltip_text
            if self.pointer_move(event.xdata, event.ydata) != before:
                fig.canvas.draw_idle()

        return fig.canvas.mpl_connect("motion_notify_event", _on_motion)

    # ---------------- Output ----------------
    def save(self, path, fmt: Optional[str] = None) -> str:
        self.figure.savefig(path, dpi=self.dpi, format=fmt)
        return str(path)
