"""Command-line front end for pasture boundaries and the route map."""

import argparse
import asyncio
from datetime import date
from pathlib import Path

from grazeplan.core.client import ExternalAPIError, RetryableError
from grazeplan.core.config import settings
from grazeplan.data.store import load_boundaries, load_plan, save_boundaries
from grazeplan.mapping.features import BoundaryImportError, read_features
from grazeplan.mapping.render import SceneNotReadyError, write_png, write_svg
from grazeplan.mapping.route import build_scene


def default_map_name(extension: str, today: date | None = None) -> str:
    """Get the default export file name, e.g. grazing_route_map_2025-03-01.svg."""
    if today is None:
        today = date.today()
    return f"grazing_route_map_{today.isoformat()}.{extension}"


async def cmd_boundaries(args: argparse.Namespace) -> None:
    """Import pasture boundaries from a GeoJSON file or URL."""
    print(f"Reading boundaries from {args.source}...")
    try:
        feature_set = await read_features(args.source, verbose=args.verbose)
    except BoundaryImportError as e:
        print(f"Error: {e}")
        return
    except (RetryableError, ExternalAPIError) as e:
        print(f"Error downloading boundaries: {e}")
        return
    except OSError as e:
        print(f"Error reading {args.source}: {e}")
        return

    path = save_boundaries(feature_set)
    print(f"Loaded {len(feature_set)} named pasture features -> {path}")

    entries, _ = load_plan()
    missing = [e.pasture for e in entries if e.key and feature_set.get(e.pasture) is None]
    if missing and len(feature_set):
        print(f"No boundary for {len(missing)} plan entries: {', '.join(missing)}")


async def cmd_render(args: argparse.Namespace) -> None:
    """Render the route map to SVG and/or PNG."""
    feature_set = load_boundaries()
    entries, _ = load_plan()

    scene = build_scene(entries, feature_set, width=args.width, height=args.height) if len(feature_set) else None
    if scene is not None and scene.is_empty:
        scene = None

    want_svg = args.svg or not args.png
    outputs = []
    try:
        if want_svg:
            outputs.append(write_svg(scene, Path(args.svg or default_map_name("svg"))))
        if args.png:
            outputs.append(write_png(scene, Path(args.png), scale=args.scale))
    except SceneNotReadyError as e:
        print(str(e))
        return
    except ValueError as e:
        print(f"Error: {e}")
        return

    print(f"Route: {len(scene.route_labels)} stops, {len(scene.segments)} moves")
    for path in outputs:
        print(f"  wrote {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grazeplan-map",
        description="Pasture boundaries and route map",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  grazeplan-map boundaries pastures.geojson          Import boundaries from a file
  grazeplan-map boundaries https://host/p.geojson    Download boundaries
  grazeplan-map render                               Write grazing_route_map_<today>.svg
  grazeplan-map render --png route.png --scale 3     PNG at 3x resolution
""",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    boundaries_parser = subparsers.add_parser("boundaries", help="Import pasture boundaries (GeoJSON)")
    boundaries_parser.add_argument("source", help="GeoJSON file path or http(s) URL")
    boundaries_parser.add_argument("--verbose", "-v", action="store_true", help="Report skipped features")

    render_parser = subparsers.add_parser("render", help="Render the route map")
    render_parser.add_argument("--svg", metavar="PATH", help="SVG output file")
    render_parser.add_argument("--png", metavar="PATH", help="PNG output file")
    render_parser.add_argument(
        "--scale", type=int, default=settings.png_scale, help=f"PNG magnification (default: {settings.png_scale})"
    )
    render_parser.add_argument("--width", type=int, default=settings.canvas_width, help="Canvas width")
    render_parser.add_argument("--height", type=int, default=settings.canvas_height, help="Canvas height")

    return parser


async def cli_main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "boundaries":
        await cmd_boundaries(args)
    elif args.command == "render":
        await cmd_render(args)
    else:
        parser.print_help()


def cli() -> None:
    """CLI entry point."""
    asyncio.run(cli_main())


if __name__ == "__main__":
    cli()
