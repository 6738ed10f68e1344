"""
Source code extraction.

Reads the line range a record was parsed from out of the source tree the
parser ran against. Extracted snippets are cached on disk; the records
themselves are never written to.
"""

import re
from pathlib import Path
from typing import Optional, Union

from ..cache import SourceCache
from ..exceptions import InvalidPathError, SecurityError
from ..logging_config import get_logger
from ..security import PathValidator

logger = get_logger(__name__)

_LEADING_WS = re.compile(r"^\s*")


class SourceExtractor:
    """Extract line ranges from files under an import root."""

    def __init__(
        self,
        root: Union[str, Path],
        cache: Optional[SourceCache] = None,
        strip_indent: bool = True,
    ):
        self.validator = PathValidator(Path(root))
        self.cache = cache
        self.strip_indent = strip_indent

    @property
    def root(self) -> Path:
        return self.validator.root_dir

    def extract(self, source_file: str, start: int, end: int, force: bool = False) -> str:
        """
        Return lines ``start``..``end`` (1-indexed, inclusive) of a source file.

        A last line consisting of ``endif;`` is dropped; the parser includes
        the closing endif of pluggable functions wrapped in if/endif. With
        ``strip_indent`` the first line's indentation is removed from every
        line that starts with it.

        Returns an empty string for a missing or unsafe file, or an invalid
        line range.
        """
        if not source_file or start < 1 or end < 1 or start > end:
            return ""

        try:
            path = self.validator.resolve(source_file)
        except SecurityError as e:
            logger.warning(f"Refusing to read source file {source_file}: {e}")
            return ""
        except InvalidPathError as e:
            logger.debug(f"Source file unavailable: {e}")
            return ""

        try:
            if self.cache is None:
                return self._read_range(path, start, end)
            return self.cache.fetch(
                path,
                start,
                end,
                self.strip_indent,
                lambda: self._read_range(path, start, end),
                force=force,
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {path}: {e}")
            return ""

    def _read_range(self, path: Path, start: int, end: int) -> str:
        lines = []
        whitespace = ""
        with open(path, "r", encoding="utf-8") as f:
            for number, line in enumerate(f, start=1):
                if number > end:
                    break
                if number < start:
                    continue
                if number == end and line.strip() == "endif;":
                    continue
                if number == start and self.strip_indent:
                    whitespace = _LEADING_WS.match(line).group(0).rstrip("\r\n")
                if whitespace and line.startswith(whitespace):
                    line = line[len(whitespace):]
                lines.append(line)
        return "".join(lines)
