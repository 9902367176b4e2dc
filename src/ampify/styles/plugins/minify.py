import re
from typing import Any, Dict

from ..core import StylePlugin


def minify_css(css: str, options: Dict[str, Any]) -> str:
    """
    Light minification: collapse whitespace, drop the spaces around
    syntax characters and the last semicolon of every block.
    """
    css = re.sub(r'\s+', ' ', css)
    css = re.sub(r' ?([{};:,>]) ?', r'\1', css)
    css = css.replace(';}', '}')
    return css.strip()


PLUGIN = StylePlugin(
    name="minify",
    transform=minify_css,
    description="Collapse whitespace and redundant separators.",
)
