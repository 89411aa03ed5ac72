from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# .env file is in the project root (parent of src/)
# Only use if it exists (CI uses environment variables directly)
# Path: core/config.py -> grazeplan -> src -> project root -> .env
_ENV_FILE = Path(__file__).parent.parent.parent.parent / ".env"
_ENV_FILE = _ENV_FILE if _ENV_FILE.exists() else None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Where plan.json, drafts.json etc. live
    # If not set, .grazeplan/ next to the project's .git directory is used
    grazeplan_data_dir: Path | None = None

    # Map canvas (SVG user units) and PNG magnification
    canvas_width: int = 1000
    canvas_height: int = 700
    png_scale: int = 2

    # Herd size used for the built-in pasture list
    default_herd_size: int = 110

    # Display units for CLI output ("imperial" = acres/ADA, "metric" = ha/AD per ha)
    # Note: entries always store acreage in acres
    display_units: Literal["imperial", "metric"] = "imperial"

    # Timeout for remote boundary downloads (seconds)
    http_timeout: float = 30


settings = Settings()


@lru_cache
def get_data_dir() -> Path:
    """Get the data directory holding the saved plan, drafts and boundaries.

    Uses settings.grazeplan_data_dir when set. Otherwise looks for the
    project root by finding a .git directory and returns .grazeplan/
    within that root.
    """
    if settings.grazeplan_data_dir is not None:
        data_dir = Path(settings.grazeplan_data_dir).expanduser()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    current = Path.cwd().resolve()
    for parent in (current, *current.parents):
        if (parent / ".git").exists():
            data_dir = parent / ".grazeplan"
            data_dir.mkdir(exist_ok=True)
            return data_dir
    # Fallback to current working directory
    data_dir = Path.cwd() / ".grazeplan"
    data_dir.mkdir(exist_ok=True)
    return data_dir
