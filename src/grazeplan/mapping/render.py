"""
Scene export: SVG via svgwrite, PNG via cairosvg.

Drawing order, back to front:
- background
- pasture polygons
- route arrows
- move-number badges
- route labels, then labels of pastures not on the route
"""

from pathlib import Path

import svgwrite

from grazeplan.core.config import settings
from grazeplan.mapping.route import Label, Scene

# =============================================================================
# Style
# =============================================================================

BACKGROUND = "#f8fafc"
POLYGON_FILL = "#93c5fd"
POLYGON_STROKE = "#475569"
ROUTE_COLOR = "#2563eb"
INK = "#0f172a"
HALO = "#ffffff"
FONT_FAMILY = "system-ui, sans-serif"

LABEL_FONT_SIZE = 12
BADGE_RADIUS = 10
BADGE_FONT_SIZE = 11


class SceneNotReadyError(Exception):
    """Raised when an export is requested before a scene has been built."""

    pass


def _xy(x: float, y: float) -> tuple[float, float]:
    return (round(x, 2), round(y, 2))


def _add_label(dwg: svgwrite.Drawing, group, label: Label, font_weight: int) -> None:
    """Label text with a white halo underneath so it reads over polygon fill."""
    common = {
        "insert": _xy(label.x, label.y),
        "text_anchor": "middle",
        "dominant_baseline": "central",
        "font_size": LABEL_FONT_SIZE,
        "font_weight": font_weight,
        "font_family": FONT_FAMILY,
    }
    item = dwg.g()
    item.add(dwg.text(label.text, stroke=HALO, stroke_width=3, paint_order="stroke", **common))
    item.add(dwg.text(label.text, fill=INK, **common))
    group.add(item)


def build_drawing(scene: Scene | None) -> svgwrite.Drawing:
    """
    Build the svgwrite drawing for a scene.

    Raises:
        SceneNotReadyError: If scene is None (nothing rendered yet)
    """
    if scene is None:
        raise SceneNotReadyError("Map not ready. Load boundaries and render the map first.")

    width, height = scene.width, scene.height
    # debug=False: paint-order is not in svgwrite's SVG 1.1 attribute tables
    dwg = svgwrite.Drawing(size=(width, height), viewBox=f"0 0 {width} {height}", profile="full", debug=False)

    arrowhead = dwg.marker(id="arrowhead", insert=(6, 2), size=(6, 4), orient="auto", markerUnits="strokeWidth")
    arrowhead.add(dwg.polygon(points=[(0, 0), (6, 2), (0, 4)], fill=ROUTE_COLOR))
    dwg.defs.add(arrowhead)

    dwg.add(dwg.rect(insert=(0, 0), size=(width, height), fill=BACKGROUND))

    pastures = dwg.g(id="pastures")
    for outline in scene.outlines:
        pastures.add(
            dwg.path(
                d=outline.path_data,
                fill=POLYGON_FILL,
                fill_opacity=0.18,
                stroke=POLYGON_STROKE,
                stroke_width=1.25,
            )
        )
    dwg.add(pastures)

    # arrows behind labels
    arrows = dwg.g(id="route")
    for segment in scene.segments:
        arrows.add(
            dwg.path(
                d=segment.path_data,
                fill="none",
                stroke=ROUTE_COLOR,
                stroke_width=2,
                marker_end="url(#arrowhead)",
            )
        )
    dwg.add(arrows)

    badges = dwg.g(id="moves")
    for segment in scene.segments:
        x, y = segment.label_pos
        badge = dwg.g()
        badge.add(dwg.circle(center=_xy(x, y), r=BADGE_RADIUS, fill=HALO, stroke=INK, stroke_width=1.5))
        badge.add(
            dwg.text(
                str(segment.number),
                insert=_xy(x, y),
                text_anchor="middle",
                dominant_baseline="central",
                font_size=BADGE_FONT_SIZE,
                font_weight=700,
                font_family=FONT_FAMILY,
                fill=INK,
            )
        )
        badges.add(badge)
    dwg.add(badges)

    route_labels = dwg.g(id="route-labels")
    for label in scene.route_labels:
        _add_label(dwg, route_labels, label, font_weight=700)
    dwg.add(route_labels)

    other_labels = dwg.g(id="pasture-labels")
    for label in scene.plain_labels:
        _add_label(dwg, other_labels, label, font_weight=600)
    dwg.add(other_labels)

    return dwg


def render_svg(scene: Scene | None) -> str:
    """Serialize a scene to an SVG document string."""
    return build_drawing(scene).tostring()


def write_svg(scene: Scene | None, path: Path) -> Path:
    """Write a scene as an SVG file."""
    path = Path(path)
    build_drawing(scene).saveas(str(path))
    return path


def _check_scale(scale) -> int:
    if isinstance(scale, bool) or not isinstance(scale, int) or scale < 1:
        raise ValueError(f"PNG scale must be a positive integer, got {scale!r}")
    return scale


def _svg2png(**kwargs) -> bytes:
    # cairosvg loads the native cairo library on import
    import cairosvg

    return cairosvg.svg2png(**kwargs)


def render_png(scene: Scene | None, scale: int | None = None) -> bytes:
    """
    Rasterize a scene to PNG.

    Args:
        scene: Scene to draw
        scale: Integer magnification (default: settings.png_scale)

    Returns:
        PNG bytes of size (width * scale) x (height * scale)
    """
    if scale is None:
        scale = settings.png_scale
    scale = _check_scale(scale)
    svg_text = render_svg(scene)
    return _svg2png(
        bytestring=svg_text.encode("utf-8"),
        output_width=scene.width * scale,
        output_height=scene.height * scale,
    )


def write_png(scene: Scene | None, path: Path, scale: int | None = None) -> Path:
    """Write a scene as a PNG file."""
    path = Path(path)
    path.write_bytes(render_png(scene, scale))
    return path
