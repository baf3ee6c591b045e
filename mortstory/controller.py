"""
Controller
==========

Wires the "back" / "next" buttons to a `SceneModel` and redraws the active
scene on every transition:

1) button click -> SceneModel.advance() / retreat()
2) canvas.clear() + the matching scene renderer
3) back is shown only after the first scene, next only before the last

The figure is 50px taller than the chart frame; the extra strip at the
bottom holds the two buttons.
"""

from __future__ import annotations
from typing import Optional, Sequence
import logging

from matplotlib.figure import Figure
from matplotlib.widgets import Button

from .canvas import ChartCanvas
from .config import StoryConfig
from .models import MortalityRecord, Scene
from .scales import OrdinalScale
from .scenes import render_scene
from .state import SceneModel

logger = logging.getLogger(__name__)

BUTTON_STRIP = 50
BUTTON_WIDTH = 90
BUTTON_HEIGHT = 30


def story_canvas(config: StoryConfig, ax=None) -> ChartCanvas:
    """Canvas whose color scale hands the focus causes the first palette colors."""
    return ChartCanvas(ax=ax, frame=config.frame,
                       color=OrdinalScale(domain=config.focus_causes), dpi=config.dpi)


class Controller:
    """Owns the scene state, the canvas and the two navigation buttons."""

    def __init__(self, records: Sequence[MortalityRecord], config: Optional[StoryConfig] = None,
                 figure: Optional[Figure] = None, model: Optional[SceneModel] = None):
        self.records = records
        self.config = config or StoryConfig()
        self.model = model or SceneModel()

        frame = self.config.frame
        dpi = self.config.dpi
        total_h = frame.height + BUTTON_STRIP
        if figure is None:
            figure = Figure(figsize=(frame.width / dpi, total_h / dpi), dpi=dpi)
        else:
            figure.set_size_inches(frame.width / dpi, total_h / dpi)
        self.figure = figure

        # [left, bottom, width, height] as fractions of the figure
        chart_ax = figure.add_axes((0, BUTTON_STRIP / total_h, 1, frame.height / total_h))
        self.canvas = story_canvas(self.config, ax=chart_ax)
        self.canvas.attach(figure)

        pad = (BUTTON_STRIP - BUTTON_HEIGHT) / 2
        bh, bw = BUTTON_HEIGHT / total_h, BUTTON_WIDTH / frame.width
        self.back_ax = figure.add_axes((frame.margins.left / frame.width, pad / total_h, bw, bh))
        self.next_ax = figure.add_axes(
            ((frame.width - frame.margins.right - BUTTON_WIDTH) / frame.width, pad / total_h, bw, bh))
        self.back_button = Button(self.back_ax, "Back")
        self.next_button = Button(self.next_ax, "Next")
        self.back_button.on_clicked(lambda _event: self.retreat())
        self.next_button.on_clicked(lambda _event: self.advance())

        self.render()

    # ---------------- Navigation ----------------
    @property
    def scene(self) -> Scene:
        return self.model.current()

    def advance(self) -> Scene:
        self.model.advance()
        self.render()
        return self.scene

    def retreat(self) -> Scene:
        self.model.retreat()
        self.render()
        return self.scene

    def goto(self, index: int) -> Scene:
        self.model.goto(index)
        self.render()
        return self.scene

    # ---------------- Drawing ----------------
    @property
    def back_visible(self) -> bool:
        return self.back_ax.get_visible()

    @property
    def next_visible(self) -> bool:
        return self.next_ax.get_visible()

    def _update_buttons(self) -> None:
        back, nxt = self.model.can_retreat, self.model.can_advance
        self.back_ax.set_visible(back)
        self.back_button.set_active(back)
        self.next_ax.set_visible(nxt)
        self.next_button.set_active(nxt)

    def render(self) -> None:
        logger.debug("Rendering scene %d (%s)", self.scene, self.scene.label)
        render_scene(self.scene, self.records, self.canvas, self.config)
        self._update_buttons()
        self.figure.canvas.draw_idle()
