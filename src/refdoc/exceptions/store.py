"""Record store exceptions: lookups, malformed exports."""

from pathlib import Path
from typing import Union

from .base import RefdocError


class RecordStoreError(RefdocError):
    """Base class for record store errors."""
    pass


class RecordNotFoundError(RecordStoreError):
    """Raised when a record id is not present in the store."""

    def __init__(self, record_id: Union[int, str]):
        super().__init__(
            f"Record not found: {record_id}",
            details={"record_id": str(record_id)},
        )
        self.record_id = record_id


class ExportFormatError(RecordStoreError):
    """Raised when a parser export cannot be loaded."""

    def __init__(self, path: Path, reason: str):
        super().__init__(
            f"Invalid export file: {path}",
            details={"path": str(path), "reason": reason},
        )
        self.path = path
        self.reason = reason
