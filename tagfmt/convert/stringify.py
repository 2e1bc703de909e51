from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..options import FormatOptions
from ..tags.record import TagRecord
from ..tags.roles import BLANK_SEPARATOR, DESCRIPTION, is_known, kind_of
from .delegate import CodeFormatter
from .reflow import reflow


_object_literal_re = re.compile(r"^\{.*[A-Za-z0-9_]+ ?:.*\}$")
_object_semicolon_re = re.compile(r"; ([A-Za-z0-9_])")
_first_word_re = re.compile(r"^\s*(\S+)")
_leading_blank_re = re.compile(r"^\n\s+\n")


@dataclass(frozen=True)
class LayoutMetrics:
    """Widest title, rendered type and name within one aligned tag group."""

    title: int = 0
    type: int = 0
    name: int = 0


NO_ALIGNMENT = LayoutMetrics()


def render_type(tag: TagRecord) -> str:
    if not tag.type:
        return ""
    if not kind_of(tag.title).default_value:
        return f"{{{tag.type}}}"
    # default values print bare
    if tag.type == "[]":
        return "[ ]"
    if tag.type == "{}":
        return "{ }"
    if _object_literal_re.match(tag.type):
        return _object_semicolon_re.sub(r", \1", tag.type)
    return tag.type


def compute_layout_metrics(tags: Sequence[TagRecord], options: FormatOptions) -> List[LayoutMetrics]:
    """Measure each run of consecutive alignable tags.

    Returns one entry per tag; tags outside a run, or every tag when vertical
    alignment is off, get zero metrics.
    """
    metrics = [NO_ALIGNMENT] * len(tags)
    if not options.vertical_alignment:
        return metrics

    start = 0
    while start < len(tags):
        if not kind_of(tags[start].title).align:
            start += 1
            continue
        end = start
        while end < len(tags) and kind_of(tags[end].title).align:
            end += 1
        group = tags[start:end]
        measured = LayoutMetrics(
            title=max(len(tag.title) for tag in group),
            type=max(len(render_type(tag)) for tag in group),
            name=max(len(tag.name) for tag in group),
        )
        metrics[start:end] = [measured] * len(group)
        start = end
    return metrics


async def stringify(
    tag: TagRecord,
    index: int,
    count: int,
    metrics: LayoutMetrics,
    options: FormatOptions,
    formatter: Optional[CodeFormatter] = None,
) -> str:
    """Render one tag as ``@title {type} name description``.

    The result starts with a newline so tags can be concatenated in order.
    """
    out = "\n"
    if tag.title == BLANK_SEPARATOR:
        return out

    kind = kind_of(tag.title)
    gap = options.gap
    aligned = options.vertical_alignment and kind.align
    type_text = render_type(tag)

    use_title = tag.title != DESCRIPTION or options.description_tag
    header = ""
    if use_title:
        header += f"@{tag.title}"
        if aligned:
            header += " " * (metrics.title - len(tag.title))
    if type_text:
        header += gap + type_text
        if aligned:
            header += " " * (metrics.type - len(type_text))
    elif aligned and metrics.type:
        header += " " * (metrics.type + len(gap))
    if tag.name:
        header += gap + tag.name
        if aligned:
            header += " " * (metrics.name - len(tag.name))
    elif aligned and metrics.name:
        header += " " * (metrics.name + len(gap))

    if not tag.description:
        out += header.rstrip()
    else:
        if use_title:
            header += gap
        description = await _description(tag, header, options, formatter)
        if options.separate_tag_groups:
            description = description.rstrip()
        if description.startswith("\n"):
            out += header.rstrip() + _leading_blank_re.sub("\n", description, count=1)
        else:
            out += header + description.lstrip()

    if kind.separate_after and index != count - 1:
        out += "\n"
    return out


async def _description(tag: TagRecord, header: str, options: FormatOptions, formatter: Optional[CodeFormatter]) -> str:
    kind = kind_of(tag.title)
    if not kind.reflow or not is_known(tag.title):
        return tag.description

    indent = "  " if kind.hanging_indent else ""
    m = _first_word_re.match(tag.description)
    first_word = m.group(1) if m else ""
    own_line = kind.own_paragraph or (tag.title != DESCRIPTION and len(header) + len(first_word) > options.print_width)
    if own_line:
        text = await reflow(tag.title, tag.description, options, indent=indent, formatter=formatter)
        return f"\n{indent}{text}"
    return await reflow(tag.title, tag.description, options, indent=indent, offset=len(header), formatter=formatter)
