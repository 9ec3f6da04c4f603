"""File-system implementation of BlobStore.

Each entry is one file ``<cache_dir>/<key><extension>``. Writes go to a
temporary file in the same directory and are moved into place with
``os.replace`` so readers never see a partial entry.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path
from stat import S_ISREG

from cat_cache.config import Settings
from cat_cache.entities import BlobResult
from cat_cache.exceptions import InvalidKeyError

logger = logging.getLogger(__name__)

_TEMP_PREFIX = ".tmp-"


class FileBlobRepository:
    """Directory-backed entry storage.

    This class satisfies the BlobStore protocol through structural
    typing - no explicit inheritance needed.

    Blocking file I/O runs in worker threads via ``asyncio.to_thread``.
    """

    def __init__(self, cache_dir: Path | str, extension: str = ".jpg") -> None:
        """Initialize the repository and create the cache directory.

        Args:
            cache_dir: Directory holding the cache files.
            extension: Suffix appended to every key to form the file name.

        Raises:
            OSError: If the directory cannot be created.
        """
        self._cache_dir = Path(cache_dir)
        self._extension = extension
        self._init_cache_dir()

    @classmethod
    def create(cls, settings: Settings) -> "FileBlobRepository":
        """Factory method to create FileBlobRepository from settings.

        Args:
            settings: Application settings.

        Returns:
            Configured FileBlobRepository
        """
        return cls(cache_dir=settings.cache_dir, extension=settings.cache_file_extension)

    def _init_cache_dir(self) -> None:
        """Create the cache directory if it doesn't exist."""
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"[FileStore] Cache directory: {self._cache_dir}")

    def path_for(self, key: str) -> Path:
        """Get the file path for a key.

        Raises:
            InvalidKeyError: If the key cannot be used as a single file name.
        """
        if key in ("", ".", ".."):
            raise InvalidKeyError(key, "not a usable file name")
        if "/" in key or "\\" in key or "\x00" in key:
            raise InvalidKeyError(key, "contains a path separator or NUL")
        if key.startswith(_TEMP_PREFIX):
            raise InvalidKeyError(key, f"prefix {_TEMP_PREFIX!r} is reserved")
        return self._cache_dir / f"{key}{self._extension}"

    async def get(self, key: str) -> BlobResult:
        """Read an entry from disk."""
        try:
            path = self.path_for(key)
            data = await asyncio.to_thread(path.read_bytes)
        except FileNotFoundError:
            return BlobResult.not_found()
        except (OSError, InvalidKeyError) as e:
            return BlobResult.failed(e)
        return BlobResult.ok(data)

    async def put(self, key: str, data: bytes) -> BlobResult:
        """Atomically write an entry to disk."""
        try:
            path = self.path_for(key)
            await asyncio.to_thread(self._write_atomic, path, data)
        except (OSError, InvalidKeyError) as e:
            return BlobResult.failed(e)
        return BlobResult.ok()

    async def delete(self, key: str) -> BlobResult:
        """Remove an entry from disk."""
        try:
            path = self.path_for(key)
            await asyncio.to_thread(path.unlink)
        except FileNotFoundError:
            return BlobResult.not_found()
        except (OSError, InvalidKeyError) as e:
            return BlobResult.failed(e)
        return BlobResult.ok()

    def _write_atomic(self, path: Path, data: bytes) -> None:
        fd, tmp_name = tempfile.mkstemp(prefix=_TEMP_PREFIX, dir=self._cache_dir)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            # Leave no temp file behind, then re-raise
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise

    async def health_check(self) -> bool:
        """Check that the cache directory exists and is writable."""
        return self._cache_dir.is_dir() and os.access(self._cache_dir, os.W_OK)

    async def get_stats(self) -> dict:
        """Get repository statistics.

        Returns:
            Dictionary with backend, directory, entry count and total bytes
        """
        return await asyncio.to_thread(self._collect_stats)

    def _collect_stats(self) -> dict:
        entries = 0
        total_bytes = 0
        for path in self._cache_dir.glob(f"*{self._extension}"):
            if path.name.startswith(_TEMP_PREFIX):
                continue
            try:
                info = path.stat()
            except FileNotFoundError:
                # Removed since the glob
                continue
            if not S_ISREG(info.st_mode):
                continue
            entries += 1
            total_bytes += info.st_size
        return {
            "backend": "file",
            "cache_dir": str(self._cache_dir),
            "total_entries": entries,
            "total_bytes": total_bytes,
        }

    @property
    def cache_dir(self) -> Path:
        """Get the cache directory."""
        return self._cache_dir
