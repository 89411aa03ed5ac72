"""
Pasture boundary import from GeoJSON.

A boundary file is a FeatureCollection whose features carry the pasture
name in a property called pasture, name, unit, past or paddock (any case).
Features without a usable name are dropped; the rest are keyed by
normalized name so plan entries can find their polygon.
"""

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from grazeplan.core.client import http_get_with_retry
from grazeplan.plan.entries import normalize_name

NAME_KEY_RE = re.compile(r"^(pasture|name|unit|past|paddock)$", re.IGNORECASE)


class BoundaryImportError(Exception):
    """Raised when a boundary file is not a usable GeoJSON FeatureCollection."""

    pass


@dataclass(frozen=True)
class FeatureSet:
    """Imported pasture features, in file order and by normalized name."""

    features: tuple[dict, ...] = ()
    by_name: Mapping[str, dict] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "features", tuple(self.features))
        object.__setattr__(self, "by_name", MappingProxyType(dict(self.by_name)))

    def __len__(self) -> int:
        return len(self.features)

    def get(self, name) -> dict | None:
        """Look up a feature by pasture name (any case/whitespace)."""
        return self.by_name.get(normalize_name(name))

    def to_geojson(self) -> dict:
        return {"type": "FeatureCollection", "features": list(self.features)}


def find_name_key(properties: Mapping | None) -> str | None:
    """Find the property holding a feature's pasture name."""
    for key in properties or {}:
        if NAME_KEY_RE.match(str(key)):
            return key
    return None


def feature_name(feature: Mapping) -> str:
    """Get a feature's pasture name as written in the file, or ""."""
    properties = feature.get("properties") or {}
    key = find_name_key(properties)
    if key is None:
        return ""
    value = properties.get(key)
    return "" if value is None else str(value).strip()


def parse_feature_collection(data, verbose: bool = False) -> FeatureSet:
    """
    Build a FeatureSet from a parsed GeoJSON object.

    Args:
        data: Parsed GeoJSON
        verbose: Print a note for every dropped feature

    Returns:
        FeatureSet of the named features

    Raises:
        BoundaryImportError: If data is not a FeatureCollection
    """
    if not isinstance(data, Mapping) or data.get("type") != "FeatureCollection":
        raise BoundaryImportError("Please provide a GeoJSON FeatureCollection.")
    raw_features = data.get("features")
    if not isinstance(raw_features, list):
        raise BoundaryImportError("Please provide a GeoJSON FeatureCollection.")

    features = []
    by_name = {}
    for i, feature in enumerate(raw_features, 1):
        if not isinstance(feature, Mapping) or not feature.get("properties"):
            if verbose:
                print(f"  feature {i}: skipped (no properties)")
            continue
        name = feature_name(feature)
        if not name:
            if verbose:
                print(f"  feature {i}: skipped (no pasture name)")
            continue
        feature = dict(feature)
        by_name[normalize_name(name)] = feature
        features.append(feature)

    return FeatureSet(features=features, by_name=by_name)


def load_features(path: Path, verbose: bool = False) -> FeatureSet:
    """Load pasture features from a GeoJSON file."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise BoundaryImportError(f"GeoJSON parse error: {e}") from e
    return parse_feature_collection(data, verbose=verbose)


async def fetch_features(url: str, verbose: bool = False) -> FeatureSet:
    """Download pasture features from a GeoJSON URL."""
    response = await http_get_with_retry(url)
    try:
        data = response.json()
    except ValueError as e:
        raise BoundaryImportError(f"GeoJSON parse error: {e}") from e
    return parse_feature_collection(data, verbose=verbose)


async def read_features(source: str, verbose: bool = False) -> FeatureSet:
    """Load features from a local path or an http(s) URL."""
    if re.match(r"^https?://", source, re.IGNORECASE):
        return await fetch_features(source, verbose=verbose)
    return load_features(Path(source), verbose=verbose)


def to_shape(feature: Mapping) -> BaseGeometry | None:
    """Build a shapely geometry for a feature, or None if it has none usable."""
    geometry = feature.get("geometry")
    if not geometry:
        return None
    try:
        geom = shape(geometry)
    except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError):
        return None
    return None if geom.is_empty else geom
