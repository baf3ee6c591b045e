"""Shared test fixtures for mortstory tests."""

import matplotlib

matplotlib.use("Agg")

import pytest

from mortstory.config import StoryConfig
from mortstory.controller import story_canvas
from mortstory.models import MortalityRecord


def _rec(year, cause, rate):
    return MortalityRecord(year=year, cause=cause, rate=float(rate))


@pytest.fixture()
def records():
    """Small dataset: 4 causes over 1950-2017, Heart Disease peaking in 1960."""
    rows = []
    hd = {1950: 586.8, 1960: 559.0, 1980: 412.1, 2000: 257.6, 2017: 165.0}
    cancer = {1950: 193.9, 1960: 193.9, 1980: 207.9, 2000: 199.6, 2017: 152.5}
    stroke = {1950: 180.7, 1960: 177.9, 1980: 96.2, 2000: 60.9, 2017: 37.6}
    flu = {1950: 48.1, 1960: 53.7, 1980: 31.4, 2000: 23.7, 2017: 14.3}
    # Deliberately out of year order for Heart Disease
    for y in (2000, 1950, 2017, 1960, 1980):
        rows.append(_rec(y, "Heart Disease", hd[y]))
    for name, series in (("Cancer", cancer), ("Stroke", stroke), ("Influenza and Pneumonia", flu)):
        for y, v in series.items():
            rows.append(_rec(y, name, v))
    return tuple(rows)


@pytest.fixture()
def config():
    return StoryConfig()


@pytest.fixture()
def canvas(config):
    return story_canvas(config)


@pytest.fixture()
def csv_path(tmp_path):
    """CSV in the published column layout, with one artifact row above 2000."""
    p = tmp_path / "deaths.csv"
    p.write_text(
        "Year,Cause,Age Adjusted Death Rate\n"
        "1960,Heart Disease,559.0\n"
        "1961,Heart Disease,545.3\n"
        "1960,Cancer,193.9\n"
        "1918,Influenza and Pneumonia,2017.0\n"
        "1961,Cancer,193.4\n"
        "1961,Stroke,\n"
    )
    return p
