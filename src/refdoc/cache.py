"""
Disk cache for extracted source snippets.

Records are read-only, so source code read out of the source tree is kept
here instead of being written back. Entries are tagged with their file so
all snippets of one file can be dropped together.

    cache = SourceCache(".refdoc-cache")
    code = cache.fetch(path, 10, 42, strip_indent=True, read=lambda: ...)
"""

import hashlib
from pathlib import Path
from typing import Callable, Optional

from diskcache import Cache

from .logging_config import get_logger

logger = get_logger(__name__)


class SourceCache:
    """
    diskcache-backed store of source snippets.

    The key covers the file's path, modification time and size plus the
    line range and indent handling, so editing a file never serves a
    stale snippet. A disabled cache stores nothing and misses every lookup.
    """

    def __init__(self, cache_dir: str = ".refdoc-cache", ttl_hours: int = 24, enabled: bool = True):
        self.enabled = enabled
        self.ttl_seconds = ttl_hours * 3600
        self.cache: Optional[Cache] = Cache(cache_dir) if enabled else None
        logger.debug(
            f"Source cache at {cache_dir} (TTL={ttl_hours}h)" if enabled else "Source cache disabled"
        )

    def __enter__(self) -> "SourceCache":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    @staticmethod
    def snippet_key(path: Path, start: int, end: int, strip_indent: bool) -> str:
        try:
            stat = path.stat()
            state = f"{stat.st_mtime_ns}:{stat.st_size}"
        except OSError:
            state = "unknown"
        key_data = f"{path}:{state}:{start}-{end}:{int(strip_indent)}"
        return hashlib.sha256(key_data.encode()).hexdigest()

    def get(self, key: str) -> Optional[str]:
        if self.cache is None:
            return None
        try:
            return self.cache.get(key)
        except Exception as e:
            logger.warning(f"Source cache read failed: {e}")
            return None

    def set(self, key: str, code: str, path: Optional[Path] = None) -> None:
        if self.cache is None:
            return
        try:
            self.cache.set(
                key,
                code,
                expire=self.ttl_seconds or None,
                tag=str(path) if path is not None else None,
            )
        except Exception as e:
            logger.warning(f"Source cache write failed: {e}")

    def fetch(
        self,
        path: Path,
        start: int,
        end: int,
        strip_indent: bool,
        read: Callable[[], str],
        force: bool = False,
    ) -> str:
        """Cached snippet for a line range, calling ``read`` on a miss.

        ``force`` skips the lookup but still stores the fresh snippet.
        """
        key = self.snippet_key(path, start, end, strip_indent)
        if not force:
            cached = self.get(key)
            if cached is not None:
                logger.debug(f"Source cache hit: {path}:{start}-{end}")
                return cached
        code = read()
        self.set(key, code, path)
        return code

    def invalidate(self, path: Path) -> int:
        """Drop every snippet of one file. Returns the number removed."""
        if self.cache is None:
            return 0
        return self.cache.evict(str(path))

    def clear(self) -> int:
        """Drop everything. Returns the number of entries removed."""
        if self.cache is None:
            return 0
        removed = self.cache.clear()
        logger.info(f"Source cache cleared ({removed} entries)")
        return removed

    def stats(self) -> dict:
        if self.cache is None:
            return {"enabled": False}
        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
            }
        except Exception as e:
            logger.warning(f"Source cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        if self.cache is not None:
            self.cache.close()
