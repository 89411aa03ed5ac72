"""Schematic route map: boundaries, projection, scene and export."""

from grazeplan.mapping.features import (
    BoundaryImportError,
    FeatureSet,
    load_features,
    parse_feature_collection,
    read_features,
)
from grazeplan.mapping.projection import EmptyFeatureSetError, Projection, project, ring_paths
from grazeplan.mapping.render import SceneNotReadyError, render_png, render_svg, write_png, write_svg
from grazeplan.mapping.route import Scene, build_scene

__all__ = [
    "BoundaryImportError",
    "FeatureSet",
    "load_features",
    "parse_feature_collection",
    "read_features",
    "EmptyFeatureSetError",
    "Projection",
    "project",
    "ring_paths",
    "Scene",
    "build_scene",
    "SceneNotReadyError",
    "render_svg",
    "render_png",
    "write_svg",
    "write_png",
]
