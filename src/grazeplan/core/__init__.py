"""Core module - configuration, units and HTTP client."""

from grazeplan.core import client, units
from grazeplan.core.client import (
    ExternalAPIError,
    RetryableError,
    http_get,
    http_get_with_retry,
)
from grazeplan.core.config import get_data_dir, settings
from grazeplan.core.units import (
    acres_to_hectares,
    area_to_display,
    density_to_display,
    format_area,
    format_density,
    get_area_unit,
    get_density_unit,
    hectares_to_acres,
    is_imperial,
)

__all__ = [
    "client",
    "units",
    "settings",
    "get_data_dir",
    "http_get",
    "http_get_with_retry",
    "RetryableError",
    "ExternalAPIError",
    # Unit conversion helpers
    "acres_to_hectares",
    "hectares_to_acres",
    "area_to_display",
    "density_to_display",
    "format_area",
    "format_density",
    "get_area_unit",
    "get_density_unit",
    "is_imperial",
]
