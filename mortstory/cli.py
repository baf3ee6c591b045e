"""
Mortality Story Command Line Interface (CLI)
============================================

Run it like:

    python -m mortstory.cli --csv "data/nchs-...-causes-of-death.csv" --gui

Modes:
- `--gui`            open the interactive window (back/next buttons, hover)
- `--export DIR`     write one image per scene and exit
- `--report OUT`     write the DOCX story and exit
- (none of these)    start a REPL that walks the scenes without a window

The dataset is loaded once; a failed load ends the program with status 1.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
import argparse, logging, os, shlex

from .config import DEFAULT_DATA_PATH, StoryConfig
from .controller import Controller, story_canvas
from .canvas import ChartCanvas
from .errors import LoadError
from .loader import DataSource, causes, year_extent
from .models import MortalityRecord
from .scenes import render_scene
from .state import SceneModel

logger = logging.getLogger(__name__)

HELP_TEXT = """
Mortality Story commands
------------------------

1) Navigate
   next | back
   goto <1-3>                      (example: goto 2)

2) Inspect
   show                            what is drawn in the current scene
   stats                           dataset summary
   causes                          list causes

3) Output
   save "<file>"                   current scene as an image (example: save "scene.png")
   export "<dir>" [png|svg|pdf]    all scenes as images
   report "<out.docx>"             DOCX story

4) Window
   gui                             open the interactive window at the current scene

5) Exit
   quit
"""


@dataclass
class Session:
    """REPL state: records, current scene and a headless canvas."""
    records: Sequence[MortalityRecord]
    config: StoryConfig
    model: SceneModel = field(default_factory=SceneModel)
    canvas: Optional[ChartCanvas] = None
    dataset_path: Optional[str] = None
    # Commands that changed the output (reproducibility in reports)
    command_log: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.canvas is None:
            self.canvas = story_canvas(self.config)
        self.render()

    def render(self) -> None:
        render_scene(self.model.current(), self.records, self.canvas, self.config)


def open_window(records: Sequence[MortalityRecord], config: StoryConfig,
                model: Optional[SceneModel] = None) -> Controller:
    """Show the interactive story and block until the window is closed."""
    import matplotlib.pyplot as plt

    fig = plt.figure()
    fig.canvas.manager.set_window_title("Mortality Story")
    ctl = Controller(records, config, figure=fig, model=model)
    plt.show()
    return ctl


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the CLI.

    1) Load dataset
    2) Export / report / open the window, or start the REPL
    """
    ap = argparse.ArgumentParser(prog="mortstory", description="Three-scene story of US death rates")
    ap.add_argument("--csv", default=DEFAULT_DATA_PATH, help="Path to the NCHS CSV (or .xlsx) export")
    ap.add_argument("--scene", type=int, default=1, choices=(1, 2, 3), help="Scene to start on")
    ap.add_argument("--gui", action="store_true", help="Open the interactive window")
    ap.add_argument("--export", metavar="DIR", help="Write every scene as an image into DIR")
    ap.add_argument("--format", default="png", choices=("png", "svg", "pdf"), help="Image format for --export")
    ap.add_argument("--report", metavar="OUT", help="Write a DOCX report to OUT")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = StoryConfig(data_path=args.csv)
    print("Loading dataset...")
    try:
        records = DataSource(config.data_path, config.rate_ceiling).records
    except LoadError as e:
        print(f"Error: {e}")
        return 1
    print(f"Loaded {len(records)} records.")

    model = SceneModel()
    model.goto(args.scene - 1)

    if args.export or args.report:
        from .report import DatasetCitation, ReportConfig, export_scenes, generate_docx_report
        try:
            if args.export:
                for p in export_scenes(records, args.export, config=config, fmt=args.format):
                    print(f"Wrote {p}")
            if args.report:
                cfg = ReportConfig(citation=DatasetCitation(file_name=os.path.basename(args.csv)))
                generate_docx_report(records, args.report, config=cfg, story=config)
                print(f"Report written to {args.report}")
        except (ValueError, OSError, ImportError) as e:
            print(f"Error: {e}")
            return 1
        return 0

    if args.gui:
        open_window(records, config, model)
        return 0

    session = Session(records=records, config=config, model=model, dataset_path=args.csv)
    print("Type 'help' for commands.")
    while True:
        try:
            line = input(f"mortstory[{session.model.current() + 1}]> ")
        except EOFError:
            break
        line = line.strip()
        if not line:
            continue
        if line.lower() in ("quit", "exit"):
            break
        try:
            handle(session, line)
        except (ValueError, OSError, ImportError) as e:
            print(f"Error: {e}")
    return 0


def handle(session: Session, line: str) -> None:
    """Handle one REPL command line."""
    parts = shlex.split(line)
    cmd = parts[0].lower()
    model = session.model

    if cmd == "help":
        print(HELP_TEXT)
        return

    if cmd in ("next", "back", "goto"):
        if cmd == "next":
            model.advance()
        elif cmd == "back":
            model.retreat()
        else:
            if len(parts) < 2:
                raise ValueError("Usage: goto <1-3>")
            model.goto(int(parts[1]) - 1)
        session.command_log.append(line)
        session.render()
        scene = model.current()
        print(f"Scene {scene + 1}/3: {scene.label}")
        return

    if cmd == "show":
        scene = model.current()
        canvas = session.canvas
        print(f"Scene {scene + 1}/3: {scene.label}")
        for m in canvas.marks_of("title"):
            print(f"  title: {m.key}")
        for kind in ("line", "bar", "legend", "annotation"):
            keys = [m.key for m in canvas.marks_of(kind)]
            if keys:
                print(f"  {kind}s ({len(keys)}): {', '.join(keys)}")
        return

    if cmd == "stats":
        extent = year_extent(session.records)
        print(f"Records: {len(session.records)}")
        print(f"Causes: {len(causes(session.records))}")
        if extent:
            print(f"Years: {extent[0]}-{extent[1]}")
        return

    if cmd == "causes":
        for c in causes(session.records):
            print(c)
        return

    if cmd == "save":
        if len(parts) < 2:
            raise ValueError('Usage: save "<file>"')
        session.canvas.save(parts[1])
        print(f"Saved scene {model.current() + 1} to {parts[1]}")
        return

    if cmd == "export":
        from .report import export_scenes
        if len(parts) < 2:
            raise ValueError('Usage: export "<dir>" [png|svg|pdf]')
        fmt = parts[2].lower() if len(parts) >= 3 else "png"
        if fmt not in ("png", "svg", "pdf"):
            raise ValueError("format must be: png | svg | pdf")
        paths = export_scenes(session.records, parts[1], config=session.config, fmt=fmt)
        for p in paths:
            print(f"Wrote {p}")
        return

    if cmd == "report":
        from .report import DatasetCitation, ReportConfig, generate_docx_report
        if len(parts) < 2:
            raise ValueError('Usage: report "<out.docx>"')
        fn = os.path.basename(session.dataset_path) if session.dataset_path else None
        cfg = ReportConfig(citation=DatasetCitation(file_name=fn), command_log=session.command_log)
        generate_docx_report(session.records, parts[1], config=cfg, story=session.config)
        print(f"Report written to {parts[1]}")
        return

    if cmd == "gui":
        ctl = open_window(session.records, session.config, SceneModel(model.current()))
        model.goto(ctl.scene)
        session.render()
        return

    print("Unknown command. Type 'help'.")


if __name__ == "__main__":
    raise SystemExit(main())
