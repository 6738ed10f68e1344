"""Load a parser export (JSON) into a MemoryRecordStore.

Export layout::

    {
      "records": [
        {"id": 1, "type": "function", "title": "get_the_title", ...,
         "meta": {"tags": [...], "args": [...]},
         "terms": {"since": [{"id": 10, "name": "2.5.0"}]}}
      ],
      "connections": [
        {"type": "functions_to_functions", "from": 1, "to": 2}
      ]
    }
"""

import json
from pathlib import Path
from typing import Any, Union

from ..exceptions import ExportFormatError
from ..logging_config import get_logger
from ..models import Record, Term
from .memory import MemoryRecordStore

logger = get_logger(__name__)


def load_export(path: Union[str, Path]) -> MemoryRecordStore:
    """Read an export file and build a store from it.

    Raises:
        ExportFormatError: If the file is missing, not JSON, or malformed.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ExportFormatError(path, f"cannot read file: {e}")
    except json.JSONDecodeError as e:
        raise ExportFormatError(path, f"not valid JSON: {e}")

    store = build_store(data, path)
    logger.debug("Loaded %d records from %s", len(store), path)
    return store


def build_store(data: Any, source: Union[str, Path] = "<memory>") -> MemoryRecordStore:
    """Build a store from an already-decoded export mapping."""
    path = Path(source)
    if not isinstance(data, dict) or not isinstance(data.get("records"), list):
        raise ExportFormatError(path, "expected an object with a 'records' list")

    store = MemoryRecordStore()
    for raw in data["records"]:
        try:
            record = Record.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            raise ExportFormatError(path, f"bad record {raw!r}: {e}")
        store.add(record)

        for taxonomy, terms in (raw.get("terms") or {}).items():
            for term in terms:
                try:
                    store.add_term(record.id, Term.from_dict(term, taxonomy=taxonomy))
                except (KeyError, TypeError, ValueError) as e:
                    raise ExportFormatError(path, f"bad term on record {record.id}: {e}")

    for raw in data.get("connections") or []:
        try:
            store.connect(str(raw["type"]), int(raw["from"]), int(raw["to"]))
        except (KeyError, TypeError, ValueError) as e:
            raise ExportFormatError(path, f"bad connection {raw!r}: {e}")

    return store
