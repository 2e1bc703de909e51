from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class FormatOptions:
    print_width: int = 80  # usable columns inside the comment
    spaces: int = 1  # gap between tag columns
    vertical_alignment: bool = False
    description_tag: bool = False  # always print "@description"
    separate_tag_groups: bool = False
    prefer_code_fences: bool = False
    description_with_dot: bool = False
    sort_tags: bool = True
    parser: Optional[str] = None  # dialect of the host source, preferred for code blocks

    @property
    def gap(self) -> str:
        return " " * self.spaces
