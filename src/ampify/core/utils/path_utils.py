# src/ampify/core/utils/path_utils.py
from typing import Optional, Union

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving package and project paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_package_root() -> Path:
        """Returns the absolute path of the installed 'ampify' package."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_package_root() / "settings.json"

    @staticmethod
    def get_assets_dir() -> Path:
        return PathUtils.get_package_root() / "assets"

    @staticmethod
    def get_preload_shim() -> Path:
        """Returns the browser-side script that promotes preload links to stylesheets."""
        return PathUtils.get_assets_dir() / "preload.js"

    # --- Project specific paths ---

    @staticmethod
    def get_project_root(root: Optional[Union[str, Path]] = None) -> Path:
        """
        Returns the absolute path of the site being built.
        Defaults to the current working directory.
        """
        return Path(root).resolve() if root else Path.cwd().resolve()

    @staticmethod
    def resolve_project_path(root: Path, relative: Union[str, Path]) -> Path:
        """
        Resolves a configured path against the project root.
        Absolute paths are returned unchanged.
        """
        path = Path(relative)
        if path.is_absolute():
            return path
        return root / path
