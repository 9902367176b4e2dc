# src/ampify/model.py (Build Layer)
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError

from ampify.core.utils.path_utils import PathUtils
from ampify.errors import ConfigError

logger = logging.getLogger(__name__)


class MinifyOptions(BaseModel):
    """Switches for HtmlMinifier. Defaults match the packaged settings.json."""
    case_sensitive: bool = True
    collapse_boolean_attributes: bool = True
    collapse_whitespace: bool = True
    html5: bool = True
    remove_attribute_quotes: bool = True
    remove_comments: bool = True
    remove_empty_attributes: bool = True
    remove_script_type_attributes: bool = True
    sort_attributes: bool = True
    sort_class_name: bool = True


class AnalyticsSettings(BaseModel):
    type: str = "googleanalytics"
    account: str = "UA-89846829-2"


class BuildSettings(BaseModel):
    """Everything one build needs, resolved to absolute paths."""
    source: Path
    stylesheet: Path
    output: Path
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    minifier: MinifyOptions = Field(default_factory=MinifyOptions)
    max_style_bytes: int = 75000

    @classmethod
    def from_config(cls, config: Any, root: Optional[Path] = None, **overrides: Any) -> "BuildSettings":
        """
        Builds settings from a ConfigManager-like object.

        Args:
            config: Anything exposing get_nested(key_path, default).
            root: Project root the configured paths are relative to.
            **overrides: Explicit source/stylesheet/output paths (e.g. from the CLI);
                         None values are ignored.

        Raises:
            ConfigError: a configured value has the wrong type.
        """
        project_root = PathUtils.get_project_root(root)
        paths: Dict[str, Any] = {
            "source": config.get_nested("paths.source", "index.html"),
            "stylesheet": config.get_nested("paths.stylesheet", "styles/main.css"),
            "output": config.get_nested("paths.output", "amp/index.html"),
        }
        paths.update({k: v for k, v in overrides.items() if k in paths and v is not None})
        resolved = {k: PathUtils.resolve_project_path(project_root, v) for k, v in paths.items()}

        try:
            settings = cls(
                **resolved,
                analytics=AnalyticsSettings(**(config.get_nested("analytics", {}) or {})),
                minifier=MinifyOptions(**(config.get_nested("minifier", {}) or {})),
                max_style_bytes=int(config.get_nested("styles.max_bytes", 75000)),
            )
        except (TypeError, ValueError, ValidationError) as e:
            raise ConfigError(f"Invalid build configuration: {e}") from e
        logger.debug("Resolved build settings: %s", settings)
        return settings


class BuildResult(BaseModel):
    output: Path
    bytes_written: int
    duration_s: float
