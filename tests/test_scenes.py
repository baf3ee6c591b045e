"""Tests for the three scene renderers."""

import logging

import pytest

from mortstory.config import StoryConfig
from mortstory.models import MortalityRecord, Scene
from mortstory.scenes import (
    SCENE_RENDERERS,
    render_all_causes,
    render_overview,
    render_scene,
    render_top_five,
    tooltip_text,
)


def _kinds(canvas):
    return {m.kind for m in canvas.marks}


class TestOverview:
    def test_two_lines_in_year_order(self, canvas, records):
        render_overview(records, canvas)
        lines = canvas.marks_of("line")
        assert [m.key for m in lines] == ["Heart Disease", "Cancer"]
        hd = lines[0]
        xs = [p[0] for p in hd.points]
        assert all(a < b for a, b in zip(xs, xs[1:]))
        assert len(hd.points) == 5

    def test_y_domain_uses_whole_dataset(self, canvas, records):
        render_overview(records, canvas)
        chart = canvas.scales(records, "line")
        # Heart Disease 1950 (586.8) is the global max; its point sits at the 1.05 headroom
        hd = canvas.marks_of("line")[0]
        assert hd.points[0][1] == pytest.approx(chart.y(586.8))
        assert chart.y.domain[1] == pytest.approx(586.8 * 1.05)

    def test_annotation_at_1960(self, canvas, records):
        render_overview(records, canvas)
        chart = canvas.scales(records, "line")
        (note,) = canvas.marks_of("annotation")
        assert note.key == "Heart Disease peaks (1960)"
        px, py = chart.x(1960), chart.y(559.0)
        assert note.points[0] == (pytest.approx(px), pytest.approx(py))
        assert note.points[1] == (pytest.approx(px - 30), pytest.approx(py - 40))

    def test_missing_anchor_skips_annotation(self, canvas, records, caplog):
        without = [r for r in records if not (r.cause == "Heart Disease" and r.year == 1960)]
        with caplog.at_level(logging.WARNING):
            render_overview(without, canvas)
        assert canvas.marks_of("annotation") == []
        assert len(canvas.marks_of("line")) == 2
        assert "Annotation skipped" in caplog.text

    def test_legend_top_right(self, canvas, records):
        render_overview(records, canvas)
        legend = canvas.marks_of("legend")
        assert [m.key for m in legend] == ["Heart Disease", "Cancer"]
        assert legend[0].points[0] == (canvas.width - 120, 20)
        assert legend[0].color == canvas.color("Heart Disease")

    def test_title_uses_year_extent(self, canvas, records):
        render_overview(records, canvas)
        (title,) = canvas.marks_of("title")
        assert title.key == "Heart Disease vs. Cancer (1950–2017)"


class TestTopFive:
    @pytest.fixture()
    def year_2017(self):
        rates = {"A": 50, "B": 80, "C": 30, "D": 90, "E": 10, "F": 5}
        rows = [MortalityRecord(2017, c, float(v)) for c, v in rates.items()]
        rows.append(MortalityRecord(2016, "G", 500.0))
        return rows

    def test_top_five_descending(self, canvas, year_2017):
        render_top_five(year_2017, canvas)
        assert [m.key for m in canvas.marks_of("bar")] == ["D", "B", "A", "C", "E"]

    def test_bar_geometry(self, canvas, year_2017):
        render_top_five(year_2017, canvas)
        bars = canvas.marks_of("bar")
        # y-domain is 1.1 x the top rate (90): the tallest bar stops short of the top
        (x0, y0), (x1, y1) = bars[0].points
        assert y1 == pytest.approx(canvas.height)
        assert y0 == pytest.approx(canvas.height - canvas.height * 90 / 99)
        # bars sit left to right in rank order
        lefts = [b.points[0][0] for b in bars]
        assert lefts == sorted(lefts)

    def test_band_axis_and_title(self, canvas, year_2017):
        render_top_five(year_2017, canvas)
        (title,) = canvas.marks_of("title")
        assert title.key == "Top 5 Causes of Death in 2017"
        (x_axis,) = [m for m in canvas.marks_of("axis") if m.key == "x"]
        assert x_axis.labels == ("D", "B", "A", "C", "E")

    def test_missing_year_renders_empty_chart(self, canvas, records):
        config = StoryConfig(top_year=1800)
        render_top_five(records, canvas, config)
        assert canvas.marks_of("bar") == []
        assert canvas.marks_of("title")

    def test_colors_from_shared_scale(self, canvas, year_2017):
        render_top_five(year_2017, canvas)
        for bar in canvas.marks_of("bar"):
            assert bar.color == canvas.color(bar.key)


class TestAllCauses:
    def test_one_line_per_cause(self, canvas, records):
        render_all_causes(records, canvas)
        lines = canvas.marks_of("line")
        assert len(lines) == len({r.cause for r in records})
        assert [m.key for m in lines] == ["Heart Disease", "Cancer", "Stroke", "Influenza and Pneumonia"]

    def test_hover_markers_per_point(self, canvas, records):
        render_all_causes(records, canvas)
        markers = canvas.marks_of("markers")
        assert sum(len(m.points) for m in markers) == len(records)

    def test_hover_shows_details(self, canvas, records):
        render_all_causes(records, canvas)
        chart = canvas.scales(records, "line")
        text = canvas.pointer_move(chart.x(1980), chart.y(96.2))
        assert text == "Stroke\nYear: 1980\nRate: 96.2"
        assert canvas.pointer_move(-50, -50) is None

    def test_tooltip_text(self):
        assert tooltip_text(MortalityRecord(1960, "Cancer", 193.9)) == "Cancer\nYear: 1960\nRate: 193.9"


class TestSceneSwitching:
    def test_no_residue_between_scenes(self, canvas, records):
        render_scene(Scene.ALL_CAUSES, records, canvas)
        render_scene(Scene.OVERVIEW, records, canvas)
        assert "markers" not in _kinds(canvas)
        assert [m.key for m in canvas.marks_of("line")] == ["Heart Disease", "Cancer"]
        assert len(canvas.marks_of("title")) == 1
        assert len(canvas.ax.collections) == 0

        render_scene(Scene.TOP_FIVE, records, canvas)
        assert _kinds(canvas) == {"title", "axis", "axis-label", "bar"}

    def test_same_scene_twice_is_identical(self, canvas, records):
        render_scene(Scene.OVERVIEW, records, canvas)
        first = list(canvas.marks)
        render_scene(Scene.OVERVIEW, records, canvas)
        assert canvas.marks == first

    def test_color_consistency_across_scenes(self, canvas, records):
        seen = {}
        for scene in (Scene.OVERVIEW, Scene.TOP_FIVE, Scene.ALL_CAUSES, Scene.OVERVIEW):
            render_scene(scene, records, canvas)
            for m in canvas.marks:
                if m.kind in ("line", "bar", "legend"):
                    assert seen.setdefault(m.key, m.color) == m.color

    def test_every_scene_has_a_renderer(self):
        assert set(SCENE_RENDERERS) == set(Scene)
