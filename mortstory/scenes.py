"""
Scene renderers
===============

Three stateless functions, one per scene. Each takes the loaded records and
a cleared `ChartCanvas` and draws a complete chart:

1) Overview   - Heart Disease vs. Cancer over time, annotated at 1960
2) Top five   - the five highest death rates in 2017, as bars
3) All causes - every cause over time, with hover tooltips

Missing data never raises out of a renderer: the affected part of the chart
is skipped and a warning is logged.
"""

from __future__ import annotations
from typing import Callable, Dict, Optional, Sequence
import logging

from .canvas import ChartCanvas
from .config import StoryConfig
from .errors import DataAbsenceError
from .loader import causes, find_record, records_for_year, series_for, top_records, year_extent
from .models import MortalityRecord, Scene

logger = logging.getLogger(__name__)

Renderer = Callable[..., None]


def _format_rate(rate: float) -> str:
    return f"{rate:g}"


def tooltip_text(record: MortalityRecord) -> str:
    return f"{record.cause}\nYear: {record.year}\nRate: {_format_rate(record.rate)}"


def render_overview(records: Sequence[MortalityRecord], canvas: ChartCanvas,
                    config: Optional[StoryConfig] = None) -> None:
    config = config or StoryConfig()
    focus = list(config.focus_causes)
    # y-domain comes from the whole dataset so scenes 1 and 3 share it
    chart = canvas.scales(records, "line")

    extent = year_extent(records)
    span = f" ({extent[0]}–{extent[1]})" if extent else ""
    canvas.draw_title(" vs. ".join(focus) + span)
    canvas.draw_axes(chart.x, chart.y)

    for cause in focus:
        series = series_for(records, cause)
        if not series:
            logger.warning("No records for %r; line skipped", cause)
            continue
        canvas.draw_line(cause, [(chart.x(r.year), chart.y(r.rate)) for r in series],
                         chart.color(cause), width=2)

    try:
        anchor = find_record(records, config.annotation_cause, config.annotation_year)
    except DataAbsenceError as e:
        logger.warning("Annotation skipped: %s", e)
    else:
        canvas.draw_annotation(chart.x(anchor.year), chart.y(anchor.rate),
                               f"{anchor.cause} peaks ({anchor.year})")

    canvas.draw_legend([(c, chart.color(c)) for c in focus], chart.width - 120, 20)


def render_top_five(records: Sequence[MortalityRecord], canvas: ChartCanvas,
                    config: Optional[StoryConfig] = None) -> None:
    config = config or StoryConfig()
    year = config.top_year
    top = top_records(records_for_year(records, year), config.top_n)
    if not top:
        logger.warning("No records for %d; drawing empty chart", year)

    canvas.draw_title(f"Top {config.top_n} Causes of Death in {year}")
    chart = canvas.scales(top, "bar")
    canvas.draw_axes(chart.x, chart.y, "Cause", "Death Rate (per 100,000)")

    bars = []
    for r in top:
        y = chart.y(r.rate)
        bars.append((r.cause, chart.x(r.cause), y, chart.x.bandwidth,
                     chart.height - y, chart.color(r.cause)))
    canvas.draw_bars(bars)


def render_all_causes(records: Sequence[MortalityRecord], canvas: ChartCanvas,
                      config: Optional[StoryConfig] = None) -> None:
    canvas.draw_title("All Causes Over Time (Hover for details)")
    chart = canvas.scales(records, "line")
    canvas.draw_axes(chart.x, chart.y)

    for cause in causes(records):
        series = series_for(records, cause)
        points = [(chart.x(r.year), chart.y(r.rate)) for r in series]
        canvas.draw_line(cause, points, chart.color(cause), width=1.2)
        canvas.draw_markers(cause, points, [tooltip_text(r) for r in series])


SCENE_RENDERERS: Dict[Scene, Renderer] = {
    Scene.OVERVIEW: render_overview,
    Scene.TOP_FIVE: render_top_five,
    Scene.ALL_CAUSES: render_all_causes,
}


def render_scene(scene: Scene, records: Sequence[MortalityRecord], canvas: ChartCanvas,
                 config: Optional[StoryConfig] = None) -> None:
    """Clear the canvas and draw `scene` on it."""
    canvas.clear()
    SCENE_RENDERERS[Scene(scene)](records, canvas, config)
