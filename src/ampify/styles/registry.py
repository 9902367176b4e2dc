# src/ampify/styles/registry.py
import importlib
import pkgutil
import logging
from typing import Dict, List, Optional

from .core import StylePlugin

logger = logging.getLogger(__name__)


class StylePluginRegistry:
    """
    Central registry for stylesheet transform plugins.

    Dynamically discovers modules in the 'ampify.styles.plugins' package that
    expose a `PLUGIN` attribute (instance of `StylePlugin`).
    """

    _plugins: Dict[str, StylePlugin] = {}
    _loaded: bool = False

    @classmethod
    def discover(cls) -> None:
        """
        Imports every module of `ampify.styles.plugins` and registers its PLUGIN.
        Modules that fail to import are logged and skipped.
        """
        if cls._loaded:
            return

        try:
            import ampify.styles.plugins as plugins_pkg

            for _, name, _ in pkgutil.iter_modules(plugins_pkg.__path__):
                full_name = f"ampify.styles.plugins.{name}"
                try:
                    module = importlib.import_module(full_name)
                    plugin = getattr(module, "PLUGIN", None)
                    if isinstance(plugin, StylePlugin):
                        cls.register(plugin)
                except Exception as e:
                    logger.error(f"Error loading style plugin module {name}: {e}")

            cls._loaded = True
        except ImportError as e:
            logger.error(f"Could not find style plugins package: {e}")

    @classmethod
    def register(cls, plugin: StylePlugin) -> None:
        cls._plugins[plugin.name] = plugin
        logger.debug(f"Style plugin loaded: {plugin.name}")

    @classmethod
    def get_plugin(cls, name: str) -> Optional[StylePlugin]:
        """Retrieves a plugin by its configuration name."""
        cls.discover()
        return cls._plugins.get(name)

    @classmethod
    def get_all_names(cls) -> List[str]:
        cls.discover()
        return sorted(cls._plugins)
