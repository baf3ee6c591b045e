from __future__ import annotations

"""
Story export
------------
Writes the three scenes out of the interactive window:

- `export_scenes`: one image file per scene (PNG, SVG or PDF)
- `generate_docx_report`: a DOCX document telling the story scene by scene

The DOCX dependency is imported lazily so the interactive story runs
without python-docx installed.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple
import logging
import os
import tempfile

from .config import StoryConfig
from .controller import story_canvas
from .loader import causes, count_by_cause, records_for_year, top_records, year_extent
from .models import MortalityRecord, Scene
from .scenes import render_scene

logger = logging.getLogger(__name__)

# Narrative shown under each scene in the report
SCENE_CAPTIONS = {
    Scene.OVERVIEW: (
        "Heart disease and cancer have been the two leading causes of death for most "
        "of the period. Heart disease mortality peaked around 1960 and has fallen steadily since."
    ),
    Scene.TOP_FIVE: (
        "The five causes with the highest age-adjusted death rate in the featured year."
    ),
    Scene.ALL_CAUSES: (
        "Every cause in the dataset over time. In the interactive version, hovering a point "
        "shows the cause, year and rate."
    ),
}


# -----------------------------
# Configuration / citation types
# -----------------------------

@dataclass
class DatasetCitation:
    """Minimal dataset citation metadata for the DOCX report."""
    database_name: str = "NCHS - Age-adjusted Death Rates for Selected Major Causes of Death"
    institutional_author: str = "National Center for Health Statistics"
    website: str = "https://data.cdc.gov"
    file_name: Optional[str] = None


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Causes of Death in the United States"
    subtitle: str = "A three-scene story of age-adjusted death rates"
    citation: DatasetCitation = field(default_factory=DatasetCitation)

    # Rows in the "leading causes" table
    top_n: int = 10

    # Optional: REPL commands that led to this report
    command_log: Optional[List[str]] = None


# -----------------------------
# Image export
# -----------------------------

def export_scenes(
    records: Sequence[MortalityRecord],
    out_dir,
    *,
    config: Optional[StoryConfig] = None,
    fmt: str = "png",
    scenes: Sequence[Scene] = tuple(Scene),
) -> List[str]:
    """Render each scene to `<out_dir>/scene<N>_<name>.<fmt>` and return the paths."""
    config = config or StoryConfig()
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    # one canvas for every scene keeps cause colors consistent across files
    canvas = story_canvas(config)
    paths: List[str] = []
    for scene in scenes:
        render_scene(scene, records, canvas, config)
        path = out / f"scene{int(scene) + 1}_{scene.name.lower()}.{fmt}"
        paths.append(canvas.save(path, fmt=fmt))
        logger.info("Wrote %s", path)
    return paths


# -----------------------------
# DOCX report
# -----------------------------

def generate_docx_report(
    records: Sequence[MortalityRecord],
    out_path: str,
    *,
    config: Optional[ReportConfig] = None,
    story: Optional[StoryConfig] = None,
) -> str:
    """Generate a DOCX report with one section (image + caption) per scene."""
    config = config or ReportConfig()
    story = story or StoryConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    if not records:
        raise ValueError("No records to report on (dataset is empty).")

    tmpdir = tempfile.mkdtemp(prefix="mortstory_report_")
    images = export_scenes(records, tmpdir, config=story, fmt="png")
    sections: List[Tuple[Scene, str]] = list(zip(Scene, images))

    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    extent = year_extent(records)
    _kv("Dataset", config.citation.database_name)
    _kv("Records", str(len(records)))
    _kv("Causes", str(len(causes(records))))
    if extent:
        _kv("Years", f"{extent[0]} to {extent[1]}")

    doc.add_heading("Dataset citation", level=1)
    cit = config.citation
    if cit.file_name:
        doc.add_paragraph(f"Data file used: {cit.file_name}")
    doc.add_paragraph(f"{cit.institutional_author}. {cit.database_name}. {cit.website}.")
    doc.add_paragraph(
        f"Rows with an age-adjusted death rate of {story.rate_ceiling:g} or more are "
        "treated as data artifacts and excluded."
    )

    # The story itself
    for scene, path in sections:
        doc.add_heading(f"Scene {int(scene) + 1}: {scene.label}", level=1)
        doc.add_picture(path, width=Inches(6.5))
        doc.add_paragraph(SCENE_CAPTIONS[scene])

    # Leading causes in the featured year
    leading = top_records(records_for_year(records, story.top_year), config.top_n)
    if leading:
        doc.add_heading(f"Leading causes in {story.top_year}", level=1)
        t = doc.add_table(rows=1, cols=3)
        h = t.rows[0].cells
        h[0].text = "Rank"
        h[1].text = "Cause"
        h[2].text = "Rate (per 100,000)"
        for i, r in enumerate(leading, start=1):
            row = t.add_row().cells
            row[0].text = str(i)
            row[1].text = r.cause
            row[2].text = f"{r.rate:,.1f}"

    # Coverage per cause
    doc.add_heading("Years of data per cause", level=1)
    t2 = doc.add_table(rows=1, cols=2)
    t2.rows[0].cells[0].text = "Cause"
    t2.rows[0].cells[1].text = "Years"
    for cause, n in count_by_cause(records).items():
        row = t2.add_row().cells
        row[0].text = cause
        row[1].text = str(n)

    # Reproducibility footer
    from datetime import datetime as _dt
    from . import __version__

    doc.add_heading("Reproducibility footer", level=1)
    doc.add_paragraph(f"mortstory version: {__version__}")
    doc.add_paragraph(f"Report generated at: {_dt.now().isoformat(timespec='seconds')}")
    if config.command_log:
        doc.add_paragraph("Commands used (log):")
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path
