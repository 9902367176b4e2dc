import re
from typing import Any, Dict, List

from ..core import StylePlugin

DEFAULT_PREFIXES: Dict[str, List[str]] = {
    "appearance": ["-webkit-", "-moz-"],
    "backdrop-filter": ["-webkit-"],
    "hyphens": ["-webkit-", "-ms-"],
    "text-size-adjust": ["-webkit-", "-moz-", "-ms-"],
    "user-select": ["-webkit-", "-moz-", "-ms-"],
}


def add_prefixes(css: str, options: Dict[str, Any]) -> str:
    """
    Inserts vendor-prefixed copies in front of every declaration whose
    property is listed in the prefix table.

    options:
        properties: replaces the default {property: [prefix, ...]} table.
    """
    table: Dict[str, List[str]] = options.get("properties") or DEFAULT_PREFIXES
    if not table:
        return css

    names = "|".join(re.escape(name) for name in sorted(table, key=len, reverse=True))
    # Not preceded by a word character or '-', so prefixed declarations are left alone.
    declaration_re = re.compile(rf'(?<![\w-])({names})\s*:\s*([^;{{}}]+)')

    def expand(match: re.Match) -> str:
        prop, value = match.group(1), match.group(2).strip()
        prefixed = "".join(f"{prefix}{prop}:{value};" for prefix in table[prop])
        return f"{prefixed}{prop}:{value}"

    return declaration_re.sub(expand, css)


PLUGIN = StylePlugin(
    name="autoprefix",
    transform=add_prefixes,
    description="Add vendor-prefixed declarations for a fixed property table.",
)
