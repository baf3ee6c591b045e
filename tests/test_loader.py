"""Tests for the dataset loader and its query helpers."""

import pandas as pd
import pytest

from mortstory import loader
from mortstory.errors import DataAbsenceError, LoadError
from mortstory.loader import (
    DataSource,
    causes,
    find_record,
    load_records,
    max_rate,
    records_for_year,
    series_for,
    top_records,
    year_extent,
)
from mortstory.models import MortalityRecord


class TestLoadRecords:
    def test_types_and_filter(self, csv_path):
        records = load_records(csv_path)
        assert len(records) == 4
        assert all(isinstance(r, MortalityRecord) for r in records)
        assert all(isinstance(r.year, int) and isinstance(r.rate, float) for r in records)
        assert all(r.rate < 2000 for r in records)

    def test_artifact_row_dropped(self, csv_path):
        records = load_records(csv_path)
        assert "Influenza and Pneumonia" not in causes(records)

    def test_blank_rate_skipped(self, csv_path):
        assert "Stroke" not in causes(load_records(csv_path))

    def test_blank_cause_skipped(self, tmp_path):
        p = tmp_path / "deaths.csv"
        p.write_text("Year,Cause,Age Adjusted Death Rate\n2017,,99.0\n2017,Cancer,152.5\n")
        assert causes(load_records(p)) == ["Cancer"]

    def test_whole_float_year_accepted(self, tmp_path):
        p = tmp_path / "deaths.csv"
        p.write_text("Year,Cause,Age Adjusted Death Rate\n1960.0,Cancer,193.9\n")
        assert load_records(p)[0].year == 1960

    def test_returns_immutable_tuple(self, csv_path):
        records = load_records(csv_path)
        assert isinstance(records, tuple)
        with pytest.raises(AttributeError):
            records[0].rate = 1.0

    def test_custom_ceiling(self, csv_path):
        records = load_records(csv_path, rate_ceiling=500)
        assert {r.cause for r in records} == {"Cancer"}

    def test_normalized_column_names(self, tmp_path):
        p = tmp_path / "alt.csv"
        p.write_text("year,cause,age_adjusted_death_rate\n2017,Cancer,152.5\n")
        (r,) = load_records(p)
        assert r == MortalityRecord(year=2017, cause="Cancer", rate=152.5)

    def test_xlsx(self, tmp_path):
        p = tmp_path / "deaths.xlsx"
        pd.DataFrame({
            "Year": [2016, 2017],
            "Cause": ["Cancer", "Cancer"],
            "Age Adjusted Death Rate": [155.8, 152.5],
        }).to_excel(p, index=False)
        records = load_records(p)
        assert [r.year for r in records] == [2016, 2017]


class TestLoadErrors:
    def test_missing_file(self, tmp_path):
        with pytest.raises(LoadError, match="not found"):
            load_records(tmp_path / "nope.csv")

    def test_missing_column(self, tmp_path):
        p = tmp_path / "bad.csv"
        p.write_text("Year,Cause\n2017,Cancer\n")
        with pytest.raises(LoadError, match="Age Adjusted Death Rate"):
            load_records(p)

    def test_malformed_year(self, tmp_path):
        p = tmp_path / "bad.csv"
        p.write_text("Year,Cause,Age Adjusted Death Rate\nabc,Cancer,150.0\n")
        with pytest.raises(LoadError, match="Malformed"):
            load_records(p)

    def test_empty_file(self, tmp_path):
        p = tmp_path / "empty.csv"
        p.write_text("")
        with pytest.raises(LoadError):
            load_records(p)

    def test_corrupt_xlsx(self, tmp_path):
        p = tmp_path / "broken.xlsx"
        p.write_text("Year,Cause,Age Adjusted Death Rate\n2017,Cancer,152.5\n")
        with pytest.raises(LoadError, match="Could not parse"):
            load_records(p)

    def test_fractional_year(self, tmp_path):
        p = tmp_path / "bad.csv"
        p.write_text("Year,Cause,Age Adjusted Death Rate\n1960.7,Cancer,150.0\n")
        with pytest.raises(LoadError, match="Malformed"):
            load_records(p)


class TestDataSource:
    def test_loads_once(self, csv_path, monkeypatch):
        calls = []
        real = loader.load_records

        def counting(path, rate_ceiling):
            calls.append(path)
            return real(path, rate_ceiling)

        monkeypatch.setattr(loader, "load_records", counting)
        source = DataSource(csv_path)
        assert not source.loaded
        first = source.records
        second = source.records
        assert first is second
        assert len(calls) == 1
        assert source.loaded

    def test_load_error_propagates(self, tmp_path):
        with pytest.raises(LoadError):
            DataSource(tmp_path / "missing.csv").records


class TestQueries:
    def test_causes_first_appearance_order(self, records):
        assert causes(records) == ["Heart Disease", "Cancer", "Stroke", "Influenza and Pneumonia"]

    def test_series_sorted_by_year(self, records):
        years = [r.year for r in series_for(records, "Heart Disease")]
        assert years == sorted(years)
        assert years == [1950, 1960, 1980, 2000, 2017]

    def test_top_records(self, records):
        top = top_records(records_for_year(records, 2017), 2)
        assert [r.cause for r in top] == ["Heart Disease", "Cancer"]

    def test_find_record(self, records):
        assert find_record(records, "Heart Disease", 1960).rate == 559.0
        with pytest.raises(DataAbsenceError):
            find_record(records, "Heart Disease", 1961)

    def test_extent_and_max(self, records):
        assert year_extent(records) == (1950, 2017)
        assert max_rate(records) == 586.8
        assert year_extent(()) is None
        assert max_rate(()) is None

    def test_max_rate_strict(self, records):
        assert max_rate(records, strict=True) == 586.8
        with pytest.raises(DataAbsenceError):
            max_rate((), strict=True)
