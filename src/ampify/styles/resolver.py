# src/ampify/styles/resolver.py
from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

from ampify.errors import StyleCompileError
from ampify.styles.config_discovery import discover_config
from ampify.styles.model import StyleConfig
from ampify.styles.registry import StylePluginRegistry

logger = logging.getLogger(__name__)

CHARSET_RE = re.compile(r'@charset\s+[^;]*;')


def strip_charset(css: str) -> str:
    """Removes the first @charset directive; it is not allowed inside a document."""
    return CHARSET_RE.sub('', css, count=1)


class StyleResolver:
    """
    Produces the text of the <style amp-custom> element from one stylesheet.

    The stylesheet is read once, run through the plugins configured in the
    nearest style configuration file and stripped of its @charset directive.
    Nothing is cached between invocations.
    """

    def __init__(self, stylesheet: Path, *, max_bytes: Optional[int] = None) -> None:
        self.stylesheet = Path(stylesheet)
        self.max_bytes = max_bytes

    def _load_config(self) -> StyleConfig:
        try:
            config = discover_config(self.stylesheet)
        except (OSError, ValueError) as e:
            raise StyleCompileError(f"Invalid style configuration near {self.stylesheet}: {e}") from e
        if config is None:
            raise StyleCompileError(f"No style configuration found for {self.stylesheet}")
        return config

    async def read(self) -> str:
        """Reads the raw stylesheet text. Safe to run ahead of resolve()."""
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, self.stylesheet.read_bytes)
        except OSError as e:
            raise StyleCompileError(f"Cannot read stylesheet {self.stylesheet}: {e}") from e
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise StyleCompileError(f"Stylesheet {self.stylesheet} is not valid UTF-8: {e}") from e

    def _apply_plugins(self, css: str, config: StyleConfig) -> str:
        for spec in config.plugins:
            plugin = StylePluginRegistry.get_plugin(spec.name)
            if plugin is None:
                raise StyleCompileError(
                    f"Unknown style plugin '{spec.name}' in {config.source} "
                    f"(available: {', '.join(StylePluginRegistry.get_all_names())})"
                )
            try:
                css = plugin(css, spec.options)
            except Exception as e:
                raise StyleCompileError(f"Style plugin '{spec.name}' failed: {e}") from e
            logger.debug("Applied style plugin %s (%d chars)", spec.name, len(css))
        return css

    async def resolve(self, css: Optional[str] = None) -> str:
        """
        Returns the compiled CSS text.

        Args:
            css: Stylesheet text obtained earlier through read(). When omitted
                 the stylesheet is read here.

        Raises:
            StyleCompileError: missing configuration, unreadable stylesheet,
                               unknown plugin or plugin failure.
        """
        config = self._load_config()
        if css is None:
            css = await self.read()
        css = strip_charset(self._apply_plugins(css, config))

        size = len(css.encode("utf-8"))
        if self.max_bytes is not None and size > self.max_bytes:
            logger.warning(
                "Custom CSS is %d bytes, above the %d byte budget for amp-custom styles.",
                size, self.max_bytes
            )
        logger.info("Compiled %s (%d bytes) using %s", self.stylesheet.name, size, config.source)
        return css
