"""Path resolution utility for packaged resources and user data files.

Resources shipped with the package (config.json) are read from the package
directory. Files written at runtime (log files) go to a platform-specific
user data directory, which can be overridden with MOVETREE_DATA_DIR.
"""

import os
import sys
from pathlib import Path


APP_NAME = "movetree"


def get_package_root() -> Path:
    """Get the directory of the movetree package.

    Returns:
        Path to the directory containing the movetree subpackages.
    """
    return Path(__file__).parent.parent


def get_package_resource_path(relative_path: str) -> Path:
    """Get the path to a read-only resource shipped with the package.

    Args:
        relative_path: Relative path from the package root (e.g., "config/config.json").

    Returns:
        Path to the resource file.
    """
    return get_package_root() / relative_path


def get_user_data_directory() -> Path:
    """Get the platform-specific user data directory.

    Returns:
        Path to the user data directory for movetree.
    """
    override = os.getenv("MOVETREE_DATA_DIR")
    if override:
        return Path(override)

    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        if appdata:
            return Path(appdata) / APP_NAME
        return Path.home() / "AppData" / "Roaming" / APP_NAME
    elif sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        xdg_data_home = os.getenv("XDG_DATA_HOME")
        if xdg_data_home:
            return Path(xdg_data_home) / APP_NAME
        return Path.home() / ".local" / "share" / APP_NAME


def resolve_data_file_path(filename: str) -> Path:
    """Resolve the path for a file written at runtime (e.g., a log file).

    The parent directory is not created here; callers create it when they
    actually write.

    Args:
        filename: Name of the data file (e.g., "movetree_2025-01-01.log").

    Returns:
        Path inside the user data directory.
    """
    return get_user_data_directory() / filename
