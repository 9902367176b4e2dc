from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from ampify.errors import LoadError, ParseError

logger = logging.getLogger(__name__)


class DocumentLoaderService:
    """
    Reads the source page and parses it into a BeautifulSoup tree.
    Stateless; one instance can load any number of documents.
    """

    def __init__(self, parser: str = "html.parser") -> None:
        self.parser = parser

    async def read(self, path: Path) -> bytes:
        loop = asyncio.get_running_loop()
        try:
            data = await loop.run_in_executor(None, Path(path).read_bytes)
        except OSError as e:
            raise LoadError(f"Cannot read source document {path}: {e}") from e
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def parse(self, data: bytes) -> BeautifulSoup:
        try:
            html = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ParseError(f"Source document is not valid UTF-8: {e}") from e

        try:
            document = BeautifulSoup(html, self.parser)
        except ParserRejectedMarkup as e:
            raise ParseError(f"Source document was rejected by the parser: {e}") from e

        if document.body is None:
            raise ParseError("Source document has no <body>")
        return document

    async def load(self, path: Path) -> BeautifulSoup:
        return self.parse(await self.read(path))
