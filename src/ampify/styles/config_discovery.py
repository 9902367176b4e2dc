# src/ampify/styles/config_discovery.py
import json
import logging
from pathlib import Path
from typing import Optional, Union

from ampify.styles.model import StyleConfig

logger = logging.getLogger(__name__)

# Checked in this order inside every directory.
CONFIG_FILENAMES = (".stylesrc", ".stylesrc.json", "stylesrc.json")


def find_config_file(start_path: Union[str, Path]) -> Optional[Path]:
    """
    Searches upwards from start_path for the nearest style configuration file.
    A file path starts the search in its parent directory.
    """
    current = Path(start_path).resolve()
    if not current.is_dir():
        current = current.parent

    while True:
        for name in CONFIG_FILENAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        if current == current.parent:
            return None
        current = current.parent


def discover_config(start_path: Union[str, Path]) -> Optional[StyleConfig]:
    """
    Returns the nearest StyleConfig above start_path, or None when there is none.

    Raises:
        ValueError: The file exists but is not valid JSON or has the wrong shape
                    (json.JSONDecodeError and pydantic.ValidationError both qualify).
    """
    config_file = find_config_file(start_path)
    if config_file is None:
        logger.debug("No style configuration found above %s", start_path)
        return None

    with open(config_file, "r", encoding="utf-8") as f:
        raw = json.load(f)
    if not isinstance(raw, dict):
        raise ValueError(f"{config_file} must contain a JSON object")

    logger.debug("Using style configuration %s", config_file)
    return StyleConfig(source=config_file, plugins=raw.get("plugins"))
