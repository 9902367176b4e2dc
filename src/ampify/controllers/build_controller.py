from __future__ import annotations

import asyncio
import logging
import time
from typing import Optional

from tqdm.auto import tqdm

from ampify.dom.builder import BodyBuilder, DocumentAssembler, HeadBuilder
from ampify.dom.models import AnalyticsConfig
from ampify.model import BuildResult, BuildSettings
from ampify.services.document_loader_service import DocumentLoaderService
from ampify.services.file_writer_service import FileWriterService
from ampify.services.minify_service import HtmlMinifier
from ampify.services.serialize_service import collapse_marker_attribute, serialize
from ampify.styles.resolver import StyleResolver

logger = logging.getLogger(__name__)

STAGES = ("load", "head", "body", "assemble", "minify", "write")


class BuildController:
    """
    Orchestrates one AMP build: load -> head/body -> assemble -> minify -> write.

    Every stage raises its own AmpifyError subclass and nothing is retried;
    the output file is only written once the whole document is ready.
    """

    def __init__(
            self,
            settings: BuildSettings,
            *,
            loader: Optional[DocumentLoaderService] = None,
            writer: Optional[FileWriterService] = None,
            style_resolver: Optional[StyleResolver] = None,
    ) -> None:
        self.settings = settings
        self.loader = loader or DocumentLoaderService()
        self.writer = writer or FileWriterService()
        resolver = style_resolver or StyleResolver(settings.stylesheet, max_bytes=settings.max_style_bytes)
        self.head_builder = HeadBuilder(resolver)
        self.body_builder = BodyBuilder(
            AnalyticsConfig.for_account(settings.analytics.account),
            vendor=settings.analytics.type,
        )
        self.minifier = HtmlMinifier(settings.minifier)

    async def render(self, progress: Optional[tqdm] = None) -> str:
        """Produces the final document text without writing it."""

        def advance(stage: str) -> None:
            logger.debug("Stage '%s' done.", stage)
            if progress is not None:
                progress.set_postfix_str(stage)
                progress.update(1)

        # The source and the stylesheet are independent reads.
        document, _ = await asyncio.gather(
            self.loader.load(self.settings.source),
            self.head_builder.prefetch_styles(),
        )
        advance("load")

        head = await self.head_builder.build(document)
        advance("head")

        body = self.body_builder.build(document)
        advance("body")

        root = DocumentAssembler.assemble(document, head, body)
        advance("assemble")

        html = collapse_marker_attribute(self.minifier.minify(serialize(root)))
        advance("minify")
        return html

    async def run(self, show_progress: bool = False) -> BuildResult:
        """Builds and writes the AMP page. Returns statistics about the written file."""
        start = time.perf_counter()
        logger.info("Building %s -> %s", self.settings.source, self.settings.output)

        with tqdm(total=len(STAGES), desc="AMP build", unit="stage", disable=not show_progress, leave=False) as bar:
            html = await self.render(progress=bar)
            data = html.encode("utf-8")
            await self.writer.write(self.settings.output, data)
            bar.set_postfix_str("write")
            bar.update(1)

        dur = time.perf_counter() - start
        logger.info("Wrote %s (%d bytes) in %.3fs", self.settings.output, len(data), dur)
        return BuildResult(output=self.settings.output, bytes_written=len(data), duration_s=round(dur, 3))
