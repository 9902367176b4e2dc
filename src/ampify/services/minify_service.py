# src/ampify/services/minify_service.py
from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from bs4 import BeautifulSoup, Tag
from bs4.builder import ParserRejectedMarkup
from bs4.element import (
    CData,
    Comment,
    Declaration,
    Doctype,
    NavigableString,
    PageElement,
    ProcessingInstruction,
)

from ampify.errors import MinifyError
from ampify.model import MinifyOptions

logger = logging.getLogger(__name__)

VOID_ELEMENTS = {
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
}
RAW_TEXT_ELEMENTS = {"script", "style"}
WHITESPACE_PRESERVING = {"pre", "textarea"}

# Elements whose surrounding whitespace is significant.
INLINE_ELEMENTS = {
    "a", "abbr", "acronym", "b", "bdi", "bdo", "big", "button", "cite", "code",
    "del", "dfn", "em", "font", "i", "img", "input", "ins", "kbd", "label", "map",
    "mark", "math", "nobr", "object", "output", "progress", "q", "rp", "rt", "samp",
    "select", "small", "span", "strike", "strong", "sub", "sup", "svg", "textarea",
    "time", "tt", "u", "var",
}

BOOLEAN_ATTRIBUTES = {
    "allowfullscreen", "async", "autofocus", "autoplay", "checked", "compact",
    "controls", "declare", "default", "defaultchecked", "defaultmuted",
    "defaultselected", "defer", "disabled", "enabled", "formnovalidate", "hidden",
    "indeterminate", "inert", "ismap", "itemscope", "loop", "multiple", "muted",
    "nohref", "noresize", "noshade", "novalidate", "nowrap", "open", "pauseonexit",
    "readonly", "required", "reversed", "scoped", "seamless", "selected",
    "sortable", "truespeed", "typemustmatch", "visible",
}

EXECUTABLE_SCRIPT_TYPES = {
    "", "text/javascript", "text/ecmascript", "text/jscript",
    "application/javascript", "application/x-javascript", "application/ecmascript",
}

# Attributes that carry no meaning when empty.
EMPTY_ATTRIBUTE_RE = re.compile(
    r'^(?:class|id|style|title|lang|dir|on(?:focus|blur|change|click|dblclick|'
    r'mouse(?:down|up|over|move|out)|key(?:press|down|up)))$'
)
UNQUOTED_VALUE_RE = re.compile(r'^[^ \t\n\f\r"\'`=<>]+$')
# \s would also match U+00A0, which is content
WHITESPACE_RE = re.compile(r'[ \t\n\r\f]+')


def _escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attribute(value: str) -> str:
    return value.replace("&", "&amp;").replace('"', "&quot;")


class HtmlMinifier:
    """
    Re-renders an HTML text compactly.

    The text is parsed with BeautifulSoup and written back element by element,
    applying the switches of MinifyOptions. Script and style content is copied
    verbatim.
    """

    def __init__(self, options: Optional[MinifyOptions] = None) -> None:
        self.options = options or MinifyOptions()

    def minify(self, html: str) -> str:
        """
        Raises:
            MinifyError: the text could not be parsed or rendered.
        """
        try:
            soup = BeautifulSoup(html, "html.parser", multi_valued_attributes=None)
            output = self._render_children(soup, preserve_whitespace=False)
        except (ParserRejectedMarkup, RecursionError, ValueError) as e:
            raise MinifyError(f"Minification failed: {e}") from e
        logger.debug("Minified %d -> %d chars", len(html), len(output))
        return output

    # --- Attributes ---

    def _can_drop_attribute(self, tag_name: str, name: str, value: str) -> bool:
        opts = self.options
        if opts.remove_script_type_attributes and tag_name == "script" and name == "type":
            if value.strip().lower() in EXECUTABLE_SCRIPT_TYPES:
                return True
        if opts.remove_empty_attributes and not value.strip():
            return (tag_name == "input" and name == "value") or bool(EMPTY_ATTRIBUTE_RE.match(name))
        return False

    def _attributes(self, tag: Tag) -> List[Tuple[str, str]]:
        attrs: List[Tuple[str, str]] = []
        for name, value in tag.attrs.items():
            if isinstance(value, list):
                value = " ".join(value)
            value = "" if value is None else str(value)
            if self._can_drop_attribute(tag.name, name, value):
                continue
            if name == "class" and self.options.sort_class_name:
                value = " ".join(sorted(value.split()))
            attrs.append((name, value))
        if self.options.sort_attributes:
            attrs.sort(key=lambda item: item[0])
        return attrs

    def _render_attribute(self, name: str, value: str) -> str:
        opts = self.options
        if opts.collapse_boolean_attributes and name.lower() in BOOLEAN_ATTRIBUTES:
            return name
        if value == "":
            return f'{name}=""'
        if opts.remove_attribute_quotes and opts.html5 and UNQUOTED_VALUE_RE.match(value):
            return f"{name}={value.replace('&', '&amp;')}"
        return f'{name}="{_escape_attribute(value)}"'

    # --- Tree ---

    def _tag_name(self, tag: Tag) -> str:
        return tag.name if self.options.case_sensitive else tag.name.lower()

    def _render_tag(self, tag: Tag, preserve_whitespace: bool) -> str:
        name = self._tag_name(tag)
        parts = [name] + [self._render_attribute(n, v) for n, v in self._attributes(tag)]
        opening = "<" + " ".join(parts)

        if name.lower() in VOID_ELEMENTS:
            return opening + (">" if self.options.html5 else "/>")

        preserve = preserve_whitespace or name.lower() in WHITESPACE_PRESERVING
        if name.lower() in RAW_TEXT_ELEMENTS:
            inner = "".join(str(child) for child in tag.children)
        else:
            inner = self._render_children(tag, preserve)
        return f"{opening}>{inner}</{name}>"

    def _is_skipped(self, node: PageElement) -> bool:
        return isinstance(node, Comment) and self.options.remove_comments

    def _neighbour(self, node: PageElement, forward: bool) -> Optional[PageElement]:
        sibling = node.next_sibling if forward else node.previous_sibling
        while sibling is not None and self._is_skipped(sibling):
            sibling = sibling.next_sibling if forward else sibling.previous_sibling
        return sibling

    @staticmethod
    def _is_boundary(node: Optional[PageElement], parent: PageElement) -> bool:
        """True when whitespace next to node can be dropped."""
        if node is None:
            return not (isinstance(parent, Tag) and parent.name in INLINE_ELEMENTS)
        if isinstance(node, Tag):
            return node.name not in INLINE_ELEMENTS
        return isinstance(node, (Doctype, Declaration, ProcessingInstruction))

    def _render_text(self, node: NavigableString, preserve_whitespace: bool) -> str:
        if preserve_whitespace or not self.options.collapse_whitespace:
            return _escape_text(str(node))
        text = WHITESPACE_RE.sub(" ", str(node))
        if text.startswith(" ") and self._is_boundary(self._neighbour(node, False), node.parent):
            text = text.lstrip(" ")
        if text.endswith(" ") and self._is_boundary(self._neighbour(node, True), node.parent):
            text = text.rstrip(" ")
        return _escape_text(text)

    def _render_node(self, node: PageElement, preserve_whitespace: bool) -> str:
        if isinstance(node, Tag):
            return self._render_tag(node, preserve_whitespace)
        if isinstance(node, Doctype):
            return f"<!DOCTYPE {node}>"
        if isinstance(node, Comment):
            return "" if self.options.remove_comments else f"<!--{node}-->"
        if isinstance(node, CData):
            return f"<![CDATA[{node}]]>"
        if isinstance(node, ProcessingInstruction):
            return f"<?{node}>"
        if isinstance(node, Declaration):
            return f"<!{node}>"
        return self._render_text(node, preserve_whitespace)

    def _render_children(self, parent: PageElement, preserve_whitespace: bool) -> str:
        pieces: List[str] = []
        for child in parent.children:
            piece = self._render_node(child, preserve_whitespace)
            if not piece:
                continue
            # Text on both sides of a dropped comment must not leave a double space
            if (not preserve_whitespace and pieces and pieces[-1].endswith(" ")
                    and piece.startswith(" ") and isinstance(child, NavigableString)):
                piece = piece[1:]
            pieces.append(piece)
        return "".join(pieces)
