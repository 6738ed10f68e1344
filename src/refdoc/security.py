"""
Source path checks.

Source file names are copied from parsed records, so they are untrusted:
a name must resolve to a regular file inside the configured source root.
"""

from pathlib import Path
from typing import Iterable, Optional

from .exceptions import InvalidPathError, SecurityError


class PathValidator:
    """
    Maps record source file names onto files below ``root_dir``.

    Rejected: names escaping the root (``../``, symlinks pointing out),
    hidden path segments unless ``allow_hidden``, and suffixes outside
    ``suffixes`` when one is given.
    """

    def __init__(
        self,
        root_dir: Path,
        allow_hidden: bool = False,
        suffixes: Optional[Iterable[str]] = None,
    ):
        self.root_dir = Path(root_dir).expanduser().resolve()
        self.allow_hidden = allow_hidden
        self.suffixes = frozenset(s.lower() for s in suffixes) if suffixes else None

    def resolve(self, source_file: str) -> Path:
        """
        Absolute path of a record's source file.

        Leading slashes are ignored: parsers store names relative to the
        import root even when they begin with one.

        Raises:
            SecurityError: The name points outside the root or at a hidden
                or disallowed file.
            InvalidPathError: Nothing readable exists there.
        """
        candidate = self.root_dir / source_file.lstrip("/\\")
        try:
            path = candidate.resolve()
        except (OSError, RuntimeError) as e:
            raise InvalidPathError(candidate, f"Cannot resolve path: {e}")

        parts = self._parts_below_root(path)
        if not self.allow_hidden and any(part.startswith(".") for part in parts):
            raise SecurityError("Access to hidden file/directory blocked", path)
        if self.suffixes is not None and path.suffix.lower() not in self.suffixes:
            raise SecurityError(f"File type {path.suffix or '(none)'} not allowed", path)
        if not path.is_file():
            raise InvalidPathError(path, "Path does not exist or is not a file")
        return path

    def is_readable(self, source_file: str) -> bool:
        try:
            self.resolve(source_file)
        except (SecurityError, InvalidPathError):
            return False
        return True

    def _parts_below_root(self, path: Path) -> tuple[str, ...]:
        # path is already resolved, so symlinks out of the root fail here too
        try:
            return path.relative_to(self.root_dir).parts
        except ValueError:
            raise SecurityError("Path traversal detected: path is outside root directory", path)
