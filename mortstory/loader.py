"""
Dataset loader (CSV -> MortalityRecord list)
============================================

This module reads the NCHS "age-adjusted death rates for selected major
causes of death" export and converts each row into a `MortalityRecord`.

Key ideas:
- Required columns are found by exact name first, then by a normalized name
  (so "age_adjusted_death_rate" still matches "Age Adjusted Death Rate").
- Rows with a rate at or above the ceiling (2000) are data artifacts and are
  dropped at load time.
- The loader returns an immutable tuple; `DataSource` loads it exactly once.
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple
import logging
import re
import zipfile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from .errors import DataAbsenceError, LoadError
from .models import MortalityRecord

logger = logging.getLogger(__name__)

YEAR_COLUMN = "Year"
CAUSE_COLUMN = "Cause"
RATE_COLUMN = "Age Adjusted Death Rate"
RATE_CEILING = 2000.0


def _to_int(x) -> Optional[int]:
    """Convert a cell to int, returning None if missing/invalid."""
    if pd.isna(x): return None
    try: v = float(x)
    except (TypeError, ValueError): return None
    # 1960.7 is not a year
    return int(v) if v.is_integer() else None

def _to_float(x) -> Optional[float]:
    """Convert a cell to float, returning None if missing/invalid."""
    if pd.isna(x): return None
    try: return float(str(x).replace(",", ""))
    except (TypeError, ValueError): return None

def _to_str(x) -> str:
    if pd.isna(x): return ""
    return str(x).strip()

def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())

def _col(df: pd.DataFrame, name: str) -> str:
    cols = list(df.columns)
    if name in cols:
        return name
    norm_map = {_norm(c): c for c in cols}
    if _norm(name) in norm_map:
        return norm_map[_norm(name)]
    raise LoadError(f"Missing required column {name!r}. Available={cols}")


def _read_frame(path: Path) -> pd.DataFrame:
    try:
        if path.suffix.lower() in (".xlsx", ".xlsm"):
            return pd.read_excel(path, engine="openpyxl")
        return pd.read_csv(path)
    except FileNotFoundError as e:
        raise LoadError(f"Dataset not found: {path}") from e
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError, ValueError,
            zipfile.BadZipFile, InvalidFileException) as e:
        raise LoadError(f"Could not parse dataset {path}: {e}") from e
    except OSError as e:
        raise LoadError(f"Could not read dataset {path}: {e}") from e


def load_records(path, rate_ceiling: float = RATE_CEILING) -> Tuple[MortalityRecord, ...]:
    """
    Read the dataset at `path` and return its records.

    Rows without a rate or a cause are skipped; rows whose rate is >= `rate_ceiling`
    are discarded. A row with an unreadable year or rate raises LoadError,
    as does a missing file or a missing column.
    """
    path = Path(path)
    df = _read_frame(path)
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)

    year_col = _col(df, YEAR_COLUMN)
    cause_col = _col(df, CAUSE_COLUMN)
    rate_col = _col(df, RATE_COLUMN)

    records: List[MortalityRecord] = []
    blank = dropped = 0
    for i, row in df.iterrows():
        raw_rate = row[rate_col]
        cause = _to_str(row[cause_col])
        if pd.isna(raw_rate) or not cause:
            blank += 1
            continue
        year = _to_int(row[year_col])
        rate = _to_float(raw_rate)
        if year is None or rate is None:
            raise LoadError(f"Malformed row {i} in {path}: year={row[year_col]!r} rate={raw_rate!r}")
        if rate >= rate_ceiling:
            dropped += 1
            continue
        records.append(MortalityRecord(year=year, cause=cause, rate=rate))

    logger.info("Loaded %d records from %s (dropped %d above %.0f, %d without a rate or cause)",
                len(records), path, dropped, rate_ceiling, blank)
    return tuple(records)


class DataSource:
    """Loads the dataset once and hands out the same records afterwards."""

    def __init__(self, path, rate_ceiling: float = RATE_CEILING):
        self.path = Path(path)
        self.rate_ceiling = rate_ceiling
        self._records: Optional[Tuple[MortalityRecord, ...]] = None

    @property
    def loaded(self) -> bool:
        return self._records is not None

    @property
    def records(self) -> Tuple[MortalityRecord, ...]:
        if self._records is None:
            self._records = load_records(self.path, self.rate_ceiling)
        return self._records


# ---------------- Queries ----------------

def causes(records: Sequence[MortalityRecord]) -> List[str]:
    """Distinct causes in order of first appearance."""
    return list(dict.fromkeys(r.cause for r in records))

def series_for(records: Sequence[MortalityRecord], cause: str) -> List[MortalityRecord]:
    """All records of one cause, sorted by year ascending."""
    return sorted((r for r in records if r.cause == cause), key=lambda r: r.year)

def records_for_year(records: Sequence[MortalityRecord], year: int) -> List[MortalityRecord]:
    return [r for r in records if r.year == year]

def top_records(records: Sequence[MortalityRecord], n: int) -> List[MortalityRecord]:
    """The `n` highest-rate records, highest first (stable for ties)."""
    return sorted(records, key=lambda r: r.rate, reverse=True)[:n]

def find_record(records: Sequence[MortalityRecord], cause: str, year: int) -> MortalityRecord:
    for r in records:
        if r.cause == cause and r.year == year:
            return r
    raise DataAbsenceError(f"No record for cause={cause!r} year={year}")

def year_extent(records: Sequence[MortalityRecord]) -> Optional[Tuple[int, int]]:
    if not records:
        return None
    years = [r.year for r in records]
    return min(years), max(years)

def max_rate(records: Sequence[MortalityRecord], strict: bool = False) -> Optional[float]:
    """Highest rate, or None for no records (DataAbsenceError when `strict`)."""
    if not records:
        if strict:
            raise DataAbsenceError("No records to take a maximum rate from")
        return None
    return max(r.rate for r in records)

def count_by_cause(records: Sequence[MortalityRecord]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for r in records:
        out[r.cause] = out.get(r.cause, 0) + 1
    return out
