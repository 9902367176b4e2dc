# src/ampify/dom/builder.py
import copy
import logging
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ampify.errors import ParseError, StyleCompileError
from ampify.styles.resolver import StyleResolver
from .core import create_element, shallow_copy
from .elements.analytics import generate_analytics
from .elements.boilerplate import (
    generate_boilerplate,
    generate_boilerplate_for_noscript,
    generate_custom_style,
    generate_loader_scripts,
)
from .elements.head import (
    extract_canonical,
    extract_structured_data,
    extract_title,
    generate_canonical,
    generate_charset,
    generate_structured_data,
    generate_title,
    generate_viewport,
)
from .models import AnalyticsConfig

logger = logging.getLogger(__name__)

AMP_MARKER = "amp"


class HeadBuilder:
    """
    Builds a new AMP <head> from the source document.

    The element order is part of the AMP contract: the boilerplate styles
    have to precede the custom style, and the loaders come last.
    """

    def __init__(self, style_resolver: StyleResolver):
        self.style_resolver = style_resolver
        self._stylesheet_text: Optional[str] = None
        self._read_error: Optional[StyleCompileError] = None

    async def prefetch_styles(self) -> None:
        """
        Reads the stylesheet ahead of build(), e.g. while the source is being read.

        A read failure is kept and raised at the custom style step, so earlier
        head steps still fail first.
        """
        try:
            self._stylesheet_text = await self.style_resolver.read()
        except StyleCompileError as e:
            self._read_error = e

    async def _custom_style(self) -> str:
        css, error = self._stylesheet_text, self._read_error
        self._stylesheet_text, self._read_error = None, None
        if error is not None:
            raise error
        return await self.style_resolver.resolve(css)

    async def build(self, document: BeautifulSoup) -> Tag:
        """
        Returns a detached <head>. Nothing is returned when a step fails.

        Raises:
            DataError: a structured-data block is malformed.
            StyleCompileError: the custom stylesheet could not be compiled.
        """
        head = create_element(document, "head")
        head.append(generate_charset(document))
        head.append(generate_viewport(document))

        canonical = generate_canonical(document, extract_canonical(document))
        if canonical is not None:
            head.append(canonical)
        else:
            logger.debug("Source has no canonical link; none emitted.")

        head.append(generate_title(document, extract_title(document)))

        blocks = extract_structured_data(document)
        for block in blocks:
            head.append(generate_structured_data(document, block))
        logger.debug("Copied %d structured data block(s).", len(blocks))

        head.append(generate_boilerplate(document))
        head.append(generate_boilerplate_for_noscript(document))
        head.append(generate_custom_style(document, await self._custom_style()))

        for script in generate_loader_scripts(document):
            head.append(script)
        return head


class BodyBuilder:
    """
    Copies the source <body>, drops every <script> in it and appends the
    analytics instrumentation.
    """

    def __init__(self, analytics: AnalyticsConfig, vendor: str = "googleanalytics"):
        self.analytics = analytics
        self.vendor = vendor

    def build(self, document: BeautifulSoup) -> Tag:
        if document.body is None:
            raise ParseError("Source document has no <body>")

        # copy.copy on a Tag copies the whole subtree, detached from the source
        body = copy.copy(document.body)
        scripts = body.find_all("script")
        for script in scripts:
            script.decompose()
        logger.debug("Removed %d script element(s) from body.", len(scripts))

        body.append(generate_analytics(document, self.analytics, self.vendor))
        return body


class DocumentAssembler:
    """Places the built head and body under a copy of the source root element."""

    @staticmethod
    def assemble(document: BeautifulSoup, head: Tag, body: Tag) -> Tag:
        source_root = document.find("html")
        html = shallow_copy(document, source_root) if source_root else create_element(document, "html")
        html[AMP_MARKER] = ""
        html.append(head)
        html.append(body)
        return html
