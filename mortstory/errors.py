"""
Error types
===========

- `LoadError`: the dataset could not be read. Nothing can be drawn without it.
- `DataAbsenceError`: a subset a scene expects is empty (for example no
  records for the featured year). Scenes catch it and draw what they can.
"""


class MortStoryError(Exception):
    """Base class for all mortstory errors."""


class LoadError(MortStoryError):
    """Dataset file is missing, unreadable, or lacks a required column."""


class DataAbsenceError(MortStoryError):
    """An expected record (or subset of records) is not in the dataset."""
