from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional


# Letters and digits only, so the markdown parser keeps it as one text run.
TABLE_PLACEHOLDER = "TAGFMTxTABLExe7c1f94b"

_fenced_code_re = re.compile(r"```\S*?\n[\s\S]+?```")
_indented_code_re = re.compile(r"^\r?\n^(?:(?:(?:[ ]{4}|\t).*(?:\r?\n|$))+)", flags=re.MULTILINE)
_table_re = re.compile(r"((\n|^)\|[\s\S]*?)((\n[^|])|\Z)")
_dash_list_start_re = re.compile(r"^(\d+)-[\s|]+")
_dash_list_re = re.compile(r"\n+(\s*\d+)-\s+")


@dataclass(frozen=True)
class ProtectedRegion:
    kind: str  # "fenced", "indented" or "table"
    start: int
    length: int
    content: str
    placeholder: Optional[str] = None

    @property
    def end(self) -> int:
        return self.start + self.length

    def contains(self, start: int, end: int) -> bool:
        return self.start <= start and end <= self.end


@dataclass
class ProtectedText:
    text: str
    tables: Deque[str] = field(default_factory=deque)
    regions: List[ProtectedRegion] = field(default_factory=list)


def normalize_dash_lists(text: str) -> str:
    """Rewrite ``1- item`` as ``1. item`` so it parses as an ordered list."""
    text = _dash_list_start_re.sub(r"\1. ", text, count=1)
    return _dash_list_re.sub(r"\n\1. ", text)


def find_code_regions(text: str) -> List[ProtectedRegion]:
    regions = [ProtectedRegion("fenced", m.start(), len(m.group(0)), m.group(0)) for m in _fenced_code_re.finditer(text)]
    regions += [
        ProtectedRegion("indented", m.start(), len(m.group(0)), m.group(0)) for m in _indented_code_re.finditer(text)
    ]
    return regions


def protect_tables(text: str) -> ProtectedText:
    """Swap every pipe table outside code for a placeholder paragraph.

    The removed tables are queued in encounter order; the renderer pops one for
    each placeholder it meets.
    """
    regions = find_code_regions(text)
    tables: Deque[str] = deque()
    table_regions: List[ProtectedRegion] = []

    def repl(m: re.Match) -> str:
        block = m.group(0)
        offs = m.start()
        for region in regions:
            if region.contains(offs + 1, offs + len(block) + 1):
                return block
        follower = m.group(4)
        if follower:
            # the first character of the next line was swallowed; give it back
            block = block[:-1]
        tables.append(block)
        table_regions.append(ProtectedRegion("table", offs, len(block), block, TABLE_PLACEHOLDER))
        return f"\n\n{TABLE_PLACEHOLDER}\n\n" + (follower[1:] if follower else "")

    text = _table_re.sub(repl, text)
    return ProtectedText(text=text, tables=tables, regions=regions + table_regions)


def collapse_indent(text: str, indent: str) -> str:
    """Remove one ``indent`` from the start of every continuation line.

    Lines inside a code region keep their columns unless the whole region
    carries the indent (on top of the four columns of indented code), which is
    how the region looks after it has been rendered once.
    """
    if not indent:
        return text
    lines = text.split("\n")
    starts: List[int] = []
    pos = 0
    for line in lines:
        starts.append(pos)
        pos += len(line) + 1

    frozen = set()
    for region in find_code_regions(text):
        covered = [i for i, start in enumerate(starts) if region.start < start < region.end]
        need = indent + " " * 4 if region.kind == "indented" else indent
        if not all(not lines[i].strip() or lines[i].startswith(need) for i in covered):
            frozen.update(covered)

    return "\n".join(
        line[len(indent) :] if i and i not in frozen and line.startswith(indent) else line
        for i, line in enumerate(lines)
    )
