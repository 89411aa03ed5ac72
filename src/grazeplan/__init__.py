"""Grazing rotation planner.

Plans sequential pasture rotations: per-pasture inputs in, stocking
density (animal-days per acre) and a back-to-back grazing calendar out,
plus a schematic route map of the rotation order.

Subpackages:
- grazeplan.core: Configuration, units and HTTP client
- grazeplan.plan: Entries, schedule derivation, CSV import/export
- grazeplan.mapping: Boundary import, projection, route scene, SVG/PNG export
- grazeplan.data: Saved plan, previous-season tables and drafts
"""

# Re-export common items for convenience
from grazeplan.core import get_data_dir, settings
from grazeplan.plan import Entry, RotationPlan, derive_schedule, stocking_density

__all__ = [
    "settings",
    "get_data_dir",
    "Entry",
    "RotationPlan",
    "derive_schedule",
    "stocking_density",
]

__version__ = "0.1.0"
