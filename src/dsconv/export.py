"""
export.py — Write selected declarations as JSONL.

Outputs one JSON object per declaration:

    {"target": "tables.c", "ordinal": 2, "type": "int", "name": "a",
     "size": 3, "values": ["1", "2", "3"], "value_count": 3,
     "excess_values": [], "terminated": true, "malformed_values": false,
     "span": "int a[3] = {1,2,3};"}

Values stay strings so literal text (leading zeros, sign) survives.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional

import orjson

from dsconv.scanner import Matched

logger = logging.getLogger(__name__)


def declaration_to_dict(matched: Matched, target: str) -> dict:
    """Flatten a matched declaration into a JSON-ready dict."""
    entry = {'target': target, 'ordinal': matched.ordinal}
    entry.update(matched.record.to_dict())
    return entry


class JsonlExporter:
    """
    Context manager appending declarations to a JSONL file.

    Usage:
        with JsonlExporter(path) as exporter:
            exporter.write(matched, target="tables.c")
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self.count = 0
        self._file: Optional[BinaryIO] = None

    def __enter__(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.path, 'wb')
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._file is not None:
            self._file.close()
            self._file = None
            logger.info(f"Wrote {self.count:,} declarations to {self.path}")
        return False

    def write(self, matched: Matched, target: str) -> None:
        if self._file is None:
            raise RuntimeError("JsonlExporter used outside of its context")
        self._file.write(orjson.dumps(declaration_to_dict(matched, target)) + b'\n')
        self.count += 1
