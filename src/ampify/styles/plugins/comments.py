import re
from typing import Any, Dict

from ..core import StylePlugin

# /*! ... */ marks a comment that has to survive (licenses).
COMMENT_RE = re.compile(r'/\*(?!!)[\s\S]*?\*/')


def strip_comments(css: str, options: Dict[str, Any]) -> str:
    """Removes block comments, keeping the ones starting with '/*!'."""
    if options.get("all"):
        return re.sub(r'/\*[\s\S]*?\*/', '', css)
    return COMMENT_RE.sub('', css)


PLUGIN = StylePlugin(
    name="comments",
    transform=strip_comments,
    description="Strip /* */ comments (set 'all' to drop /*! */ ones too).",
)
