"""Unit conversion utilities using pint.

All entry data is stored in the units ranchers plan in:
- Area: acres
- Stocking density: animal-days per acre (ADA)

Display units are controlled by settings.display_units:
- "imperial": Display as stored (ac, ADA)
- "metric": Convert to hectares and animal-days per hectare
"""

import pint

from grazeplan.core.config import settings

# Create a unit registry (lazily initialized)
_ureg: pint.UnitRegistry | None = None


def get_ureg() -> pint.UnitRegistry:
    """Get the pint unit registry (lazily initialized)."""
    global _ureg
    if _ureg is None:
        _ureg = pint.UnitRegistry()
    return _ureg


# =============================================================================
# Area Conversions
# =============================================================================


def acres_to_hectares(acres: float) -> float:
    """Convert acres to hectares."""
    ureg = get_ureg()
    return (acres * ureg.acre).to(ureg.hectare).magnitude


def hectares_to_acres(hectares: float) -> float:
    """Convert hectares to acres."""
    ureg = get_ureg()
    return (hectares * ureg.hectare).to(ureg.acre).magnitude


def area_to_display(acres: float) -> tuple[float, str]:
    """Convert acres to display units.

    Args:
        acres: Area in acres

    Returns:
        Tuple of (value, unit_symbol) in display units
    """
    if settings.display_units == "metric":
        return (acres_to_hectares(acres), "ha")
    return (acres, "ac")


def format_area(acres: float, decimals: int = 1) -> str:
    """Format an area for display, like "156.0 ac" or "63.1 ha"."""
    value, unit = area_to_display(acres)
    return f"{value:.{decimals}f} {unit}"


# =============================================================================
# Stocking Density Conversions
# =============================================================================


def density_to_display(ada: float) -> tuple[float, str]:
    """Convert animal-days per acre to display units.

    A per-acre density is multiplied by acres per hectare to get the
    per-hectare figure.

    Args:
        ada: Stocking density in animal-days per acre

    Returns:
        Tuple of (value, unit_label) in display units
    """
    if settings.display_units == "metric":
        return (ada * hectares_to_acres(1.0), "AD/ha")
    return (ada, "ADA")


def format_density(ada: float | None, decimals: int = 2) -> str:
    """Format a stocking density for display.

    Returns "—" for a missing value so imported-but-absent metrics
    line up in tables.
    """
    if ada is None:
        return "—"
    value, _ = density_to_display(ada)
    return f"{value:.{decimals}f}"


# =============================================================================
# Display Unit Info
# =============================================================================


def get_area_unit() -> str:
    """Get the area unit symbol for current display settings."""
    return "ha" if settings.display_units == "metric" else "ac"


def get_density_unit() -> str:
    """Get the density unit label for current display settings."""
    return "AD/ha" if settings.display_units == "metric" else "ADA"


def is_imperial() -> bool:
    """Check if display units are imperial."""
    return settings.display_units == "imperial"
