from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from ..tags.record import TagBlock


@dataclass
class WriteResult:
    path: Path
    bytes_written: int
    bodies: int


def read_blocks(path: Path, encoding: str = "utf-8") -> List[TagBlock]:
    """Load tag blocks from a tokenizer dump.

    Accepts either a single block object or a list of them. Raises ``OSError``
    when the file cannot be read and ``ValueError`` when it is not valid JSON
    or not shaped like a block.
    """
    data = json.loads(path.read_text(encoding=encoding))
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError(f"{path}: expected a block object or a list of block objects")
    return [TagBlock.from_dict(item) for item in data]


def write_bodies(path: Path, bodies: Sequence[str], encoding: str = "utf-8") -> WriteResult:
    """Write rendered bodies as a JSON array, in block order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data = (json.dumps(list(bodies), indent=2, ensure_ascii=False) + "\n").encode(encoding)
    path.write_bytes(data)
    return WriteResult(path=path, bytes_written=len(data), bodies=len(bodies))
