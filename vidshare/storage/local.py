"""File storage — local filesystem implementation."""

import asyncio
import logging
import os
import time
from pathlib import Path

from vidshare.domain.errors import StoragePromotionError, StorageWriteError
from vidshare.domain.ports import StoragePort

logger = logging.getLogger(__name__)


class LocalStorage(StoragePort):
    """
    Stores files on the local filesystem.

    Uploads land in ``<base>/staging`` and are moved into ``<base>/videos``
    on promotion. Durable refs are paths relative to ``base``.
    """

    STAGING_DIR = "staging"
    DURABLE_DIR = "videos"

    def __init__(self, base: Path):
        self.base = Path(base)
        self.staging = self.base / self.STAGING_DIR
        self.staging.mkdir(parents=True, exist_ok=True)
        (self.base / self.DURABLE_DIR).mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        return self.base / key

    def durable_ref(self, filename: str) -> str:
        return f"{self.DURABLE_DIR}/{filename}"

    async def stage_locally(self, data: bytes, target_name: str) -> str:
        dest = self.staging / Path(target_name).name
        try:
            await asyncio.to_thread(self._write_exclusive, dest, data)
        except OSError as e:
            logger.error("Failed to stage %s: %s", dest, e)
            raise StorageWriteError(f"Could not stage file '{target_name}'") from e
        return str(dest)

    @staticmethod
    def _write_exclusive(dest: Path, data: bytes) -> None:
        # "xb" fails if the name is already taken.
        with open(dest, "xb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())

    async def promote_to_durable(self, staged_path: str, durable_ref: str) -> bool:
        staged = Path(staged_path)
        dest = self._resolve(durable_ref)
        if not staged.exists() and dest.exists():
            return True
        try:
            await asyncio.to_thread(self._promote, staged, dest)
        except OSError as e:
            logger.error("Failed to promote %s -> %s: %s", staged, durable_ref, e)
            raise StoragePromotionError(f"Could not promote file to '{durable_ref}'") from e
        return True

    def _promote(self, staged: Path, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        os.replace(staged, dest)

    async def retrieve(self, durable_ref: str) -> Path:
        path = self._resolve(durable_ref)
        if not path.exists():
            raise FileNotFoundError(f"Storage key not found: {durable_ref}")
        return path

    async def delete(self, durable_ref: str) -> None:
        self._resolve(durable_ref).unlink(missing_ok=True)

    def list_durable_refs(self) -> list[str]:
        root = self._resolve(self.DURABLE_DIR)
        if not root.exists():
            return []
        return sorted(self.durable_ref(p.name) for p in root.iterdir() if p.is_file())

    def purge_staged(self, max_age_seconds: float) -> int:
        cutoff = time.time() - max_age_seconds
        removed = 0
        for item in self.staging.iterdir():
            if not item.is_file():
                continue
            try:
                if item.stat().st_mtime < cutoff:
                    item.unlink()
                    removed += 1
                    logger.info("Removed stale staged file: %s", item.name)
            except OSError as e:
                logger.warning("Failed to clean %s: %s", item, e)
        return removed
