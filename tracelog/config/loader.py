"""Locate the TOML files settings are read from.

``default.toml`` is always read. ``{TRACELOG_ENV}.toml`` in the same
directory is layered on top of it when present; pydantic-settings merges
the two table by table.
"""

import os
from pathlib import Path

DEFAULT_CONFIG_DIR = Path("config")
DEFAULT_ENVIRONMENT = "development"


def config_dir() -> Path:
    """Directory holding the TOML files.

    ``TRACELOG_CONFIG_DIR`` overrides the ``config/`` directory of the
    working directory.
    """
    override = os.environ.get("TRACELOG_CONFIG_DIR")
    if not override:
        return DEFAULT_CONFIG_DIR

    path = Path(override)
    if not path.is_dir():
        raise FileNotFoundError(f"Config directory not found: {override}")
    return path


def environment() -> str:
    """Deployment environment selecting the overlay file."""
    return os.environ.get("TRACELOG_ENV") or DEFAULT_ENVIRONMENT


def config_files(directory: Path | None = None, env: str | None = None) -> list[Path]:
    """TOML files to read, the environment overlay before the defaults.

    Args:
        directory: Config directory; resolved with config_dir() when omitted
        env: Environment name; resolved with environment() when omitted

    Raises:
        FileNotFoundError: If default.toml is missing
    """
    directory = directory or config_dir()

    default = directory / "default.toml"
    if not default.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default}. "
            "Create config/default.toml or set TRACELOG_CONFIG_DIR."
        )

    overlay = directory / f"{env or environment()}.toml"
    if overlay.is_file():
        return [overlay, default]
    return [default]
