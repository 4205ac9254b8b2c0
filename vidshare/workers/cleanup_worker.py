"""
Periodic cleanup worker — removes abandoned staged uploads and durable
files that no video row points to any more.
Can be run as a cron job or scheduled task.
"""

import asyncio
import logging
import time

from rich.console import Console

from vidshare.config import Settings, settings
from vidshare.db.session import Database
from vidshare.domain.ports import StoragePort
from vidshare.repositories.sql_repository import SqlRepository
from vidshare.storage.factory import create_storage

logger = logging.getLogger(__name__)
console = Console()

# Durable files younger than this may belong to an upload whose row is not
# committed yet.
ORPHAN_GRACE_SECONDS = 3600


def cleanup_staged_files(storage: StoragePort, max_age_hours: float) -> int:
    """Remove staged files older than ``max_age_hours``. Returns count removed."""
    return storage.purge_staged(max_age_hours * 3600)


async def cleanup_orphaned_videos(
    storage: StoragePort,
    database: Database,
    grace_seconds: float = ORPHAN_GRACE_SECONDS,
) -> int:
    """Delete durable files with no matching video row."""
    async with database.session_factory() as session:
        known = await SqlRepository(session).all_storage_paths()

    cutoff = time.time() - grace_seconds
    removed = 0
    for ref in storage.list_durable_refs():
        if ref in known:
            continue
        try:
            path = await storage.retrieve(ref)
        except FileNotFoundError:
            continue
        if path.stat().st_mtime >= cutoff:
            continue
        await storage.delete(ref)
        removed += 1
        logger.info("Removed orphaned video file: %s", ref)
    return removed


async def run_cleanup(app_settings: Settings = settings) -> tuple[int, int]:
    """Run all cleanup tasks against the configured storage and database."""
    storage = create_storage(app_settings)
    database = Database.from_settings(app_settings)
    try:
        logger.info("Starting cleanup...")
        staged = cleanup_staged_files(storage, app_settings.STAGED_FILE_MAX_AGE_HOURS)
        orphaned = await cleanup_orphaned_videos(storage, database)
    finally:
        await database.dispose()
    logger.info("Cleanup complete: %d staged files removed, %d orphaned videos removed", staged, orphaned)
    return staged, orphaned


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    staged_count, orphan_count = asyncio.run(run_cleanup())
    console.print(
        f"[green]✓[/] Cleanup finished: [bold]{staged_count}[/] staged, "
        f"[bold]{orphan_count}[/] orphaned files removed"
    )
