"""Shared test fixtures."""

import sys
from pathlib import Path

import pytest
import respx

# Add src/ to path so tests can import grazeplan
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from grazeplan.core import config  # noqa: E402
from grazeplan.plan.entries import new_entry  # noqa: E402


def square(lng: float, lat: float, size: float = 0.01) -> list:
    """Closed square ring with its south-west corner at (lng, lat)."""
    return [
        [lng, lat],
        [lng + size, lat],
        [lng + size, lat + size],
        [lng, lat + size],
        [lng, lat],
    ]


def polygon_feature(name: str, lng: float, lat: float, key: str = "name") -> dict:
    return {
        "type": "Feature",
        "properties": {key: name},
        "geometry": {"type": "Polygon", "coordinates": [square(lng, lat)]},
    }


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Point the data directory at a fresh temp dir."""
    monkeypatch.setattr(config.settings, "grazeplan_data_dir", tmp_path)
    config.get_data_dir.cache_clear()
    yield tmp_path
    config.get_data_dir.cache_clear()


@pytest.fixture
def mock_boundaries():
    """Mock a remote GeoJSON host."""
    with respx.mock(base_url="https://maps.example.com") as mock:
        yield mock


@pytest.fixture
def sample_entries():
    """Three entries with 10, 0 and 5 grazing days."""
    return [
        new_entry(pasture="North", acreage=100, herd_size=50, grazing_days=10),
        new_entry(pasture="Creek", acreage=40, herd_size=50, grazing_days=0),
        new_entry(pasture="South", acreage=250, herd_size=50, grazing_days=5),
    ]


@pytest.fixture
def sample_feature_collection():
    """Four square pastures laid out west to east, plus two unusable features."""
    return {
        "type": "FeatureCollection",
        "features": [
            polygon_feature("North", -105.00, 40.00),
            polygon_feature("Creek", -104.98, 40.00, key="Pasture"),
            polygon_feature("South", -104.96, 40.00, key="UNIT"),
            polygon_feature("HQ", -104.94, 40.00, key="paddock"),
            {"type": "Feature", "properties": {}, "geometry": None},
            {
                "type": "Feature",
                "properties": {"owner": "county"},
                "geometry": {"type": "Polygon", "coordinates": [square(-104.9, 40.0)]},
            },
        ],
    }
