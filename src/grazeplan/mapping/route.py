"""
Route scene for the schematic pasture map.

build_scene() turns the rotation order and the imported boundaries into a
Scene: polygon outlines, numbered arrows between consecutive grazed
pastures, and text labels. The scene is plain data; grazeplan.mapping.render
turns it into SVG/PNG.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass

from grazeplan.core.config import settings
from grazeplan.mapping.features import FeatureSet, feature_name, to_shape
from grazeplan.mapping.projection import EmptyFeatureSetError, Projection, polygon_rings, project, ring_paths
from grazeplan.plan.derive import to_num
from grazeplan.plan.entries import Entry, normalize_name

# Arrow tails start this far (px) from the source label, toward the target
SHIFT_FROM_TEXT = 10

Point = tuple[float, float]


def _fmt(value: float) -> str:
    return f"{value:.2f}"


@dataclass(frozen=True)
class PolygonOutline:
    """One polygon (exterior ring plus holes) in canvas coordinates."""

    name: str
    rings: tuple[tuple[Point, ...], ...]

    @property
    def path_data(self) -> str:
        parts = []
        for ring in self.rings:
            if not ring:
                continue
            head, *tail = ring
            d = f"M {_fmt(head[0])} {_fmt(head[1])}"
            d += "".join(f" L {_fmt(x)} {_fmt(y)}" for x, y in tail)
            parts.append(d + " Z")
        return " ".join(parts)


@dataclass(frozen=True)
class Anchor:
    """Label anchor of one route stop."""

    name: str
    x: float
    y: float


@dataclass(frozen=True)
class RouteSegment:
    """Directed arrow between two consecutive route stops."""

    start: Point
    end: Point
    number: int
    label_pos: Point

    @property
    def path_data(self) -> str:
        return f"M {_fmt(self.start[0])} {_fmt(self.start[1])} L {_fmt(self.end[0])} {_fmt(self.end[1])}"


@dataclass(frozen=True)
class Label:
    """A text label centered on a point."""

    text: str
    x: float
    y: float


@dataclass(frozen=True)
class Scene:
    """Everything the map draws, in canvas coordinates."""

    width: int
    height: int
    outlines: tuple[PolygonOutline, ...] = ()
    segments: tuple[RouteSegment, ...] = ()
    route_labels: tuple[Label, ...] = ()
    plain_labels: tuple[Label, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.outlines or self.route_labels or self.plain_labels)


# -----------------------------------------------------------------------------
# Building Blocks
# -----------------------------------------------------------------------------


def select_features(entries: list[Entry], feature_set: FeatureSet) -> list[dict]:
    """
    Pick the features to draw.

    Features matched by entry name, in entry order (each feature once).
    If no entry matches, every loaded feature.
    """
    picked = []
    seen = set()
    for entry in entries:
        feature = feature_set.get(entry.pasture)
        if feature is not None and id(feature) not in seen:
            seen.add(id(feature))
            picked.append(feature)
    return picked if picked else list(feature_set.features)


def polygon_outlines(feature: Mapping, projection: Projection) -> list[PolygonOutline]:
    """Trace a Polygon, or each member of a MultiPolygon, at full resolution."""
    name = feature_name(feature)
    outlines = []
    for rings in polygon_rings(feature.get("geometry")):
        projected = tuple(ring_paths({"type": "Polygon", "coordinates": rings}, projection))
        if projected:
            outlines.append(PolygonOutline(name=name, rings=projected))
    return outlines


def representative_point(feature: Mapping) -> tuple[float, float] | None:
    """Center of mass (lng, lat) of a feature's geometry, or None."""
    geom = to_shape(feature)
    if geom is None:
        return None
    centroid = geom.centroid
    if centroid.is_empty:
        return None
    return centroid.x, centroid.y


def route_anchors(entries: list[Entry], feature_set: FeatureSet, projection: Projection) -> list[Anchor]:
    """
    Label anchors of the route, in rotation order.

    Only entries with grazing days > 0 are route stops. A stop with no
    matching feature (or no usable geometry) is left out.
    """
    anchors = []
    for entry in entries:
        if to_num(entry.grazing_days) <= 0:
            continue
        feature = feature_set.get(entry.pasture)
        if feature is None:
            continue
        point = representative_point(feature)
        if point is None:
            continue
        x, y = projection(*point)
        anchors.append(Anchor(name=entry.pasture, x=x, y=y))
    return anchors


def shift_towards(a: Point, b: Point, distance: float) -> Point:
    """Move point a toward b by a fixed distance."""
    dx, dy = b[0] - a[0], b[1] - a[1]
    length = math.hypot(dx, dy) or 1
    return (a[0] + dx / length * distance, a[1] + dy / length * distance)


def route_segments(anchors: list[Anchor], shift: float = SHIFT_FROM_TEXT) -> list[RouteSegment]:
    """Arrows between consecutive anchors, numbered from 1."""
    segments = []
    for i, (a, b) in enumerate(zip(anchors, anchors[1:])):
        start = shift_towards((a.x, a.y), (b.x, b.y), shift)
        end = (b.x, b.y)
        midpoint = ((start[0] + end[0]) / 2, (start[1] + end[1]) / 2)
        segments.append(RouteSegment(start=start, end=end, number=i + 1, label_pos=midpoint))
    return segments


def plain_labels(features: list[dict], route_names: set[str], projection: Projection) -> list[Label]:
    """Unnumbered labels for drawn features that are not on the route."""
    labels = []
    for feature in features:
        name = feature_name(feature)
        if not name or normalize_name(name) in route_names:
            continue
        point = representative_point(feature)
        if point is None:
            continue
        x, y = projection(*point)
        labels.append(Label(text=name, x=x, y=y))
    return labels


# -----------------------------------------------------------------------------
# Scene
# -----------------------------------------------------------------------------


def build_scene(
    entries: list[Entry],
    feature_set: FeatureSet,
    width: int | None = None,
    height: int | None = None,
) -> Scene:
    """
    Build the route map scene.

    Args:
        entries: Entries in rotation order
        feature_set: Imported pasture boundaries
        width: Canvas width (default: settings.canvas_width)
        height: Canvas height (default: settings.canvas_height)

    Returns:
        Scene; empty (just the canvas) when there is nothing to draw
    """
    if width is None:
        width = settings.canvas_width
    if height is None:
        height = settings.canvas_height

    features = select_features(entries, feature_set)
    try:
        projection = project(features, width, height)
    except EmptyFeatureSetError:
        return Scene(width=width, height=height)

    outlines = [outline for f in features for outline in polygon_outlines(f, projection)]
    anchors = route_anchors(entries, feature_set, projection)
    route_names = {normalize_name(a.name) for a in anchors}

    return Scene(
        width=width,
        height=height,
        outlines=tuple(outlines),
        segments=tuple(route_segments(anchors)),
        route_labels=tuple(Label(text=a.name, x=a.x, y=a.y) for a in anchors),
        plain_labels=tuple(plain_labels(features, route_names, projection)),
    )
