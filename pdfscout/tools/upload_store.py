"""Per-upload isolated scratch storage."""
import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Iterator, Optional

logger = logging.getLogger(__name__)


def safe_filename(filename: str) -> str:
    """Strip any directory components a client may have sent."""
    name = PureWindowsPath(PurePosixPath(filename or "").name).name
    return name or "upload"


class UploadStore:
    """Gives every upload its own temporary directory, removed afterwards."""

    def __init__(self, root: Optional[Path] = None) -> None:
        self.root = Path(root) if root is not None else None
        if self.root is not None:
            self.root.mkdir(parents=True, exist_ok=True)

    @contextmanager
    def isolated(self, filename: str) -> Iterator[Path]:
        """
        Yield a fresh path for filename inside a unique directory.

        The directory and everything in it is deleted on exit, whether or
        not processing succeeded.
        """
        slot = Path(tempfile.mkdtemp(prefix="upload-", dir=self.root))
        try:
            yield slot / safe_filename(filename)
        finally:
            shutil.rmtree(slot, ignore_errors=True)
            logger.debug(f"Removed upload slot {slot}")
