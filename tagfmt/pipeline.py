from __future__ import annotations

import asyncio
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, List, Optional

from .convert.delegate import CodeFormatter, FormatError, default_formatter
from .convert.stringify import compute_layout_metrics, stringify
from .normalize.defaults import mark_optional, modernize_type, resolve_name_defaults
from .normalize.tags import drop_incomplete, insert_group_separators, merge_descriptions, normalize_tags, order_tags
from .options import FormatOptions
from .tags.record import TagBlock, TagRecord
from .tags.roles import kind_of
from .utils.io import read_blocks, write_bodies
from .utils.logging import get_logger


logger = get_logger(__name__)


def prepare_tags(block: TagBlock, options: FormatOptions) -> List[TagRecord]:
    """Normalize a block's tags into the order and shape they are printed in."""
    tags = normalize_tags(block.tags)
    _, tags = merge_descriptions(tags)
    tags = [resolve_name_defaults(modernize_type(mark_optional(tag))) for tag in tags]
    tags = drop_incomplete(tags)
    if options.sort_tags:
        tags = order_tags(tags)
    if options.separate_tag_groups:
        tags = insert_group_separators(tags)
    return tags


async def _format_type(tag: TagRecord, options: FormatOptions, formatter: CodeFormatter) -> TagRecord:
    if not tag.type or kind_of(tag.title).default_value:
        return tag
    try:
        return replace(tag, type=await formatter.format_type(tag.type, options))
    except FormatError as e:
        logger.debug(f"Keeping type {tag.type!r} verbatim: {e}")
        return tag


async def format_types(
    tags: Iterable[TagRecord], options: FormatOptions, formatter: Optional[CodeFormatter] = None
) -> List[TagRecord]:
    """Pretty-print every type column; a type the formatter rejects stays as written."""
    formatter = formatter or default_formatter()
    return list(await asyncio.gather(*(_format_type(tag, options, formatter) for tag in tags)))


async def format_block(block: TagBlock, options: FormatOptions, formatter: Optional[CodeFormatter] = None) -> str:
    """Render one block to the body of its comment, without the ``*`` gutter."""
    tags = await format_types(prepare_tags(block, options), options, formatter)
    metrics = compute_layout_metrics(tags, options)
    count = len(tags)
    parts = await asyncio.gather(
        *(stringify(tag, index, count, metrics[index], options, formatter) for index, tag in enumerate(tags))
    )
    return "".join(parts).rstrip().lstrip("\n")


async def format_blocks(
    blocks: Iterable[TagBlock], options: FormatOptions, formatter: Optional[CodeFormatter] = None
) -> List[str]:
    return list(await asyncio.gather(*(format_block(block, options, formatter) for block in blocks)))


@dataclass
class RunConfig:
    input: Path
    output: Optional[Path] = None
    print_width: int = 80
    spaces: int = 1
    vertical_alignment: bool = False
    description_tag: bool = False
    separate_tag_groups: bool = False
    prefer_code_fences: bool = False
    description_with_dot: bool = False
    sort_tags: bool = True
    parser: Optional[str] = None
    log_level: str = "INFO"

    def format_options(self) -> FormatOptions:
        return FormatOptions(
            print_width=self.print_width,
            spaces=self.spaces,
            vertical_alignment=self.vertical_alignment,
            description_tag=self.description_tag,
            separate_tag_groups=self.separate_tag_groups,
            prefer_code_fences=self.prefer_code_fences,
            description_with_dot=self.description_with_dot,
            sort_tags=self.sort_tags,
            parser=self.parser,
        )


def run(cfg: RunConfig) -> List[str]:
    """Format every block of ``cfg.input``; bodies are written to ``cfg.output`` as a JSON array."""
    blocks = read_blocks(cfg.input)
    logger.info(f"Source: {cfg.input} ({len(blocks)} blocks)")

    bodies = asyncio.run(format_blocks(blocks, cfg.format_options()))

    if cfg.output:
        written = write_bodies(cfg.output, bodies)
        logger.info(f"Saved: {written.path} ({written.bytes_written} bytes)")
    return bodies
