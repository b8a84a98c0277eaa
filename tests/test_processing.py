"""Tests for statistics cleaning and the geometry/statistics join.

These run on in-memory documents, without network access.
"""

from __future__ import annotations

import logging

import pandas as pd
import pytest
from pydantic import ValidationError

from choropleth.processing.cleaner import (
    clean_statistics,
    drop_duplicate_ids,
    normalize_percentages,
    records_to_frame,
    strip_names,
)
from choropleth.processing.joiner import features_to_frame, join_features
from choropleth.schemas import StatisticRecord, parse_statistics, parse_topology


def _record(fips, pct, name="Somewhere", state="ZZ"):
    return StatisticRecord(id=fips, area_name=name, state_name=state, percentage=pct)


# ── Schema tests ──────────────────────────────────────────────────────────

class TestSchemas:
    def test_wire_names_are_aliases(self, raw_statistics):
        record = parse_statistics(raw_statistics)[0]
        assert record.id == 1001
        assert record.area_name == "A"
        assert record.state_name == "X"
        assert record.percentage == 10.0

    def test_missing_id_rejected(self):
        with pytest.raises(ValidationError):
            parse_statistics([{"state": "X", "area_name": "A", "bachelorsOrHigher": 1.0}])

    def test_null_values_accepted(self):
        record = parse_statistics([{"fips": 1, "state": None, "area_name": "A", "bachelorsOrHigher": None}])[0]
        assert record.percentage is None
        assert record.state_name is None

    def test_absent_percentage_accepted(self):
        assert parse_statistics([{"fips": 1, "state": "X", "area_name": "A"}])[0].percentage is None

    def test_non_list_rejected(self):
        with pytest.raises(ValidationError):
            parse_statistics({"fips": 1})

    def test_topology_accepted(self, topology):
        assert parse_topology(topology) is topology

    def test_not_a_topology(self, topology):
        topology["type"] = "FeatureCollection"
        with pytest.raises(ValidationError):
            parse_topology(topology)

    def test_missing_states_object(self, topology):
        del topology["objects"]["states"]
        with pytest.raises(ValueError):
            parse_topology(topology)


# ── Cleaner tests ─────────────────────────────────────────────────────────

class TestCleaner:
    def test_records_to_frame_keeps_order(self, records):
        df = records_to_frame(records)
        assert list(df.columns) == ["id", "area_name", "state_name", "percentage"]
        assert df["id"].tolist() == [1001, 1002]

    def test_empty_records(self):
        df = clean_statistics([])
        assert df.empty
        assert "percentage" in df.columns

    def test_strip_names(self):
        df = records_to_frame([_record(1, 10.0, "  Autauga County ", " AL"), _record(2, 20.0, None, None)])
        result = strip_names(df)
        assert result["area_name"].tolist()[0] == "Autauga County"
        assert result["state_name"].tolist()[0] == "AL"
        assert result["area_name"].tolist()[1] is None

    def test_all_null_percentages_become_nan(self, caplog):
        caplog.set_level(logging.INFO)
        df = records_to_frame([_record(1, None), _record(2, None)])
        result = normalize_percentages(df)
        assert result["percentage"].dtype == "float64"
        assert result["percentage"].isna().all()
        assert "2 records have no percentage" in caplog.text

    def test_duplicate_ids_keep_first(self):
        df = records_to_frame([_record(1, 10.0, "First"), _record(1, 50.0, "Second"), _record(2, 20.0)])
        result = drop_duplicate_ids(df)
        assert len(result) == 2
        assert result[result["id"] == 1].iloc[0]["area_name"] == "First"

    def test_clean_statistics_integration(self):
        records = [_record(1, 10.0, " A "), _record(1, 99.0, "dup"), _record(2, 30.0, "B")]
        result = clean_statistics(records)
        assert result["area_name"].tolist() == ["A", "B"]
        assert result.index.tolist() == [0, 1]


# ── Joiner tests ──────────────────────────────────────────────────────────

class TestJoinFeatures:
    def test_one_feature_per_geometry(self, topology, records):
        features = join_features(topology, clean_statistics(records))
        assert [f.id for f in features] == [1001, 1002]

    def test_statistics_merged(self, topology, records):
        first = join_features(topology, clean_statistics(records))[0]
        assert first.area_name == "A"
        assert first.state_name == "X"
        assert first.percentage == 10.0
        assert first.matched
        assert first.geometry["type"] == "Polygon"

    def test_unmatched_geometry_has_missing_fields(self, topology, records):
        features = join_features(topology, clean_statistics(records[:1]))
        second = features[1]
        assert second.id == 1002
        assert second.area_name is None
        assert second.state_name is None
        assert second.percentage is None
        assert not second.matched

    def test_orphan_records_dropped(self, topology, records, caplog):
        caplog.set_level(logging.DEBUG, logger="choropleth.processing.joiner")
        extra = records + [_record(9999, 55.0)]
        features = join_features(topology, clean_statistics(extra))
        assert len(features) == 2
        assert 9999 not in [f.id for f in features]
        orphan_logs = [
            r for r in caplog.records
            if r.name == "choropleth.processing.joiner" and r.levelno == logging.DEBUG
        ]
        assert [r.getMessage() for r in orphan_logs] == ["1 statistics records match no geometry"]

    def test_null_percentage_keeps_match(self, topology):
        features = join_features(topology, clean_statistics([_record(1001, None, "A", "X"), _record(1002, 90.0)]))
        first = features[0]
        assert first.matched
        assert first.area_name == "A"
        assert first.percentage is None
        assert features[1].percentage == 90.0

    def test_first_record_wins(self, topology):
        stats = pd.DataFrame({
            "id": [1001, 1001],
            "area_name": ["First", "Second"],
            "state_name": ["X", "X"],
            "percentage": [1.0, 2.0],
        })
        first = join_features(topology, stats)[0]
        assert first.area_name == "First"
        assert first.percentage == 1.0

    def test_no_statistics(self, topology):
        features = join_features(topology, clean_statistics([]))
        assert len(features) == 2
        assert all(f.percentage is None for f in features)

    def test_geojson_view(self, topology, records):
        feat = join_features(topology, clean_statistics(records))[0].to_geojson()
        assert feat["type"] == "Feature"
        assert feat["properties"]["percentage"] == 10.0

    def test_features_to_frame(self, topology, records):
        df = features_to_frame(join_features(topology, clean_statistics(records[:1])))
        assert len(df) == 2
        assert pd.isna(df.iloc[1]["percentage"])
