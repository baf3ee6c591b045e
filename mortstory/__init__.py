"""
Mortality Story package
=======================

A three-scene narrative over the NCHS age-adjusted death rates dataset.

- The CLI entry point is in `mortstory/cli.py`.
- Dataset loading is in `mortstory/loader.py`.
- Scene drawing is in `mortstory/scenes.py` (on top of `mortstory/canvas.py`).
- Button navigation is in `mortstory/controller.py`.
"""

__version__ = '0.1.0'
