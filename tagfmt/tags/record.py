from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple


@dataclass(frozen=True)
class TagRecord:
    """One tag of a documentation block.

    An empty ``title`` marks the block's leading free text. ``source`` keeps the
    raw comment lines the tokenizer read the tag from.
    """

    title: str = ""
    type: str = ""
    name: str = ""
    description: str = ""
    optional: bool = False
    default: Optional[str] = None
    source: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TagRecord":
        default = data.get("default")
        return cls(
            title=str(data.get("tag") or data.get("title") or ""),
            type=str(data.get("type") or ""),
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            optional=bool(data.get("optional", False)),
            default=None if default is None else str(default),
            source=tuple(str(line) for line in data.get("source") or ()),
        )


@dataclass(frozen=True)
class TagBlock:
    tags: Tuple[TagRecord, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, tags: Iterable[TagRecord], description: str = "") -> "TagBlock":
        records = list(tags)
        if description:
            records.insert(0, TagRecord(description=description))
        return cls(tags=tuple(records))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TagBlock":
        tags = [TagRecord.from_dict(item) for item in data.get("tags") or []]
        return cls.of(tags, description=str(data.get("description") or ""))
