"""Picks the storage backend named in settings."""

import logging

from vidshare.config import Settings
from vidshare.domain.ports import StoragePort
from vidshare.storage.bucket import BucketStorage
from vidshare.storage.local import LocalStorage

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> StoragePort:
    backend = settings.STORAGE_BACKEND.lower()
    if backend == "local":
        logger.info("Using local storage at %s", settings.STORAGE_LOCAL_PATH)
        return LocalStorage(settings.STORAGE_LOCAL_PATH)
    if backend == "bucket":
        logger.info("Using bucket storage at %s", settings.STORAGE_BUCKET_PATH)
        return BucketStorage(
            settings.STORAGE_LOCAL_PATH,
            settings.STORAGE_BUCKET_PATH,
        )
    raise ValueError(f"Unknown storage backend: {settings.STORAGE_BACKEND}")
