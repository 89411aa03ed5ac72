"""
Planar projection for the schematic pasture map.

One spherical-Mercator transform is fitted to the bounding box of every
feature, padded by PAD_FRACTION on each side, scaled by the same factor on
both axes so the padded box fits the canvas, and centered. Y is flipped so
north is up. Only relative distances matter; this is not a survey-grade
projection.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from grazeplan.core.config import settings
from grazeplan.mapping.features import to_shape

# Sphere radius (m); any constant works since only ratios are drawn
EARTH_RADIUS = 6378137

# Latitude limit of the Mercator formula (degrees)
MAX_LATITUDE = 85.0511287798

PAD_FRACTION = 0.06


class EmptyFeatureSetError(Exception):
    """Raised when there are no feature coordinates to fit a projection to."""

    pass


def mercator(lng: float, lat: float) -> tuple[float, float]:
    """Project longitude/latitude (degrees) to Mercator x/y (meters)."""
    lat = max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))
    x = EARTH_RADIUS * math.radians(lng)
    y = EARTH_RADIUS * math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))
    return x, y


@dataclass(frozen=True)
class Projection:
    """Affine map from Mercator space onto the drawing canvas."""

    x0: float  # padded left edge (Mercator x)
    y1: float  # padded top edge (Mercator y)
    scale: float
    ox: float  # horizontal centering offset (px)
    oy: float  # vertical centering offset (px)
    width: int
    height: int

    def __call__(self, lng: float, lat: float) -> tuple[float, float]:
        mx, my = mercator(lng, lat)
        x = self.ox + (mx - self.x0) * self.scale
        y = self.oy + (self.y1 - my) * self.scale  # flip y
        return x, y

    def ring(self, coords: Iterable[Sequence[float]]) -> tuple[tuple[float, float], ...]:
        """Project every position of a GeoJSON ring."""
        return tuple(self(p[0], p[1]) for p in coords if len(p) >= 2)


def bounding_box(features: Iterable[dict]) -> tuple[float, float, float, float]:
    """
    Get (min_lng, min_lat, max_lng, max_lat) over all feature geometries.

    Raises:
        EmptyFeatureSetError: If no feature has a usable geometry
    """
    bounds = [geom.bounds for geom in (to_shape(f) for f in features) if geom is not None]
    if not bounds:
        raise EmptyFeatureSetError("No feature geometry to project")
    return (
        min(b[0] for b in bounds),
        min(b[1] for b in bounds),
        max(b[2] for b in bounds),
        max(b[3] for b in bounds),
    )


def _fit_ratio(size: int, span: float) -> float:
    return size / span if span > 0 else math.inf


def project(
    features: Iterable[dict],
    width: int | None = None,
    height: int | None = None,
    pad_frac: float = PAD_FRACTION,
) -> Projection:
    """
    Fit a projection to a set of features.

    Args:
        features: GeoJSON features (Polygon/MultiPolygon)
        width: Canvas width (default: settings.canvas_width)
        height: Canvas height (default: settings.canvas_height)
        pad_frac: Padding added to each side, as a fraction of the span

    Returns:
        Projection callable as projection(lng, lat) -> (x, y)

    Raises:
        EmptyFeatureSetError: If no feature has a usable geometry
    """
    if width is None:
        width = settings.canvas_width
    if height is None:
        height = settings.canvas_height

    min_lng, min_lat, max_lng, max_lat = bounding_box(features)
    min_x, min_y = mercator(min_lng, min_lat)
    max_x, max_y = mercator(max_lng, max_lat)

    dx, dy = max_x - min_x, max_y - min_y
    x0, x1 = min_x - dx * pad_frac, max_x + dx * pad_frac
    y0, y1 = min_y - dy * pad_frac, max_y + dy * pad_frac

    # A single point or a perfectly flat box has no span on one axis;
    # fit the other axis, or draw at unit scale if both are flat.
    scale = min(_fit_ratio(width, x1 - x0), _fit_ratio(height, y1 - y0))
    if math.isinf(scale):
        scale = 1.0

    ox = (width - scale * (x1 - x0)) / 2
    oy = (height - scale * (y1 - y0)) / 2
    return Projection(x0=x0, y1=y1, scale=scale, ox=ox, oy=oy, width=width, height=height)


def polygon_rings(geometry: Mapping | None) -> list[list]:
    """Coordinate rings of each polygon in a Polygon or MultiPolygon geometry."""
    geometry = geometry or {}
    coords = geometry.get("coordinates") or []
    if geometry.get("type") == "Polygon":
        return [coords]
    if geometry.get("type") == "MultiPolygon":
        return [rings or [] for rings in coords]
    return []


def ring_paths(geometry: Mapping | None, projection: Projection) -> list[tuple[tuple[float, float], ...]]:
    """Project every ring of a Polygon, or of each MultiPolygon member, at full resolution."""
    return [projection.ring(ring) for rings in polygon_rings(geometry) for ring in rings if ring]
