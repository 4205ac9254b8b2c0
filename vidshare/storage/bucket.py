"""File storage — object-store bucket mounted on the filesystem."""

import logging
import shutil
from pathlib import Path

from vidshare.storage.local import LocalStorage

logger = logging.getLogger(__name__)


class BucketStorage(LocalStorage):
    """
    Stages uploads on local disk and promotes them into an object-store
    bucket mounted at ``bucket_path`` (s3fs, gcsfuse and the like).

    The bucket usually sits on another filesystem, so promotion copies the
    file and then drops the staged copy.
    """

    def __init__(self, staging_base: Path, bucket_path: Path):
        super().__init__(staging_base)
        self.bucket = Path(bucket_path)
        self.bucket.mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        return self.bucket / key

    def _promote(self, staged: Path, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        partial = dest.with_name(dest.name + ".part")
        shutil.copyfile(staged, partial)
        partial.replace(dest)
        staged.unlink()
        logger.debug("Copied %s into bucket as %s", staged.name, dest.name)
