from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ampify.errors import WriteError

logger = logging.getLogger(__name__)


class FileWriterService:
    """Writes build output, creating parent directories as needed."""

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def write(self, path: Path, data: bytes) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._write, Path(path), data)
        except OSError as e:
            raise WriteError(f"Cannot write {path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(data), path)
