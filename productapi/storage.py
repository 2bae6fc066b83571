"""Staging of uploaded files on local disk.

Uploaded parts are copied into the upload directory under a per-request
unique name, handed to the media client by path, and removed afterwards.
"""

import asyncio
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Union

logger = logging.getLogger(__name__)


class TempStorage:
    def __init__(self, upload_dir: Union[str, Path] = "uploads"):
        self.upload_dir = Path(upload_dir)

    def staged_name(self, filename: str) -> str:
        # basename only
        base = os.path.basename(filename or "") or "upload"
        return f"{uuid.uuid4().hex}-{base}"

    def _write(self, path: Path, fileobj: BinaryIO) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as out:
            shutil.copyfileobj(fileobj, out)

    async def write(self, filename: str, fileobj: BinaryIO) -> Path:
        """Copy ``fileobj`` to a new staged file and return its path."""
        path = self.upload_dir / self.staged_name(filename)
        await asyncio.to_thread(self._write, path, fileobj)
        logger.debug("staged %s as %s", filename, path)
        return path

    def delete(self, path: Union[str, Path]) -> bool:
        """Remove a staged file. Failures are logged, never raised."""
        try:
            os.remove(path)
        except OSError as e:
            logger.warning("could not delete staged file %s: %s", path, e)
            return False
        logger.info("deleted staged file %s", path)
        return True
