from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Deque, List, Optional, assert_never

from ..options import FormatOptions
from ..tags.roles import DESCRIPTION, kind_of
from ..utils.logging import get_logger
from .delegate import CodeFormatter, FormatError, default_formatter, indent_block, resolve_dialect
from .mdtree import (
    Blockquote,
    Break,
    Code,
    Definition,
    Emphasis,
    Heading,
    Html,
    Image,
    InlineCode,
    Link,
    LinkReference,
    ListItem,
    MdList,
    Node,
    Paragraph,
    Root,
    Strong,
    TablePlaceholder,
    Text,
    ThematicBreak,
    parse_markdown,
)
from .protect import collapse_indent, normalize_dash_lists, protect_tables
from .wrap import add_trailing_dot, break_lines, collapse_whitespace, restore_links, shield_links


logger = get_logger(__name__)

HARD_BREAK = "\\\n"


class DescriptionRenderer:
    """Turns a parsed description back into width-bounded markdown.

    ``tables`` holds the literal tables cut out before parsing, consumed in the
    order their placeholders are met. ``offset`` is the number of columns
    already used on the first line and only applies to a leading paragraph.
    """

    def __init__(
        self,
        title: str,
        options: FormatOptions,
        tables: Optional[Deque[str]] = None,
        formatter: Optional[CodeFormatter] = None,
        offset: int = 0,
    ):
        self.title = title
        self.options = options
        self.tables: Deque[str] = tables if tables is not None else deque()
        self.formatter = formatter or default_formatter()
        self.offset = offset

    async def render(self, root: Root, indent: str) -> str:
        return await self._children(root, root.children, indent)

    async def _children(self, parent: Node, children: List, indent: str) -> str:
        parts: List[str] = []
        for index, child in enumerate(children):
            parts.append(await self._node(child, indent, parent, index))
        return "".join(parts)

    async def _inline(self, children: List, indent: str) -> str:
        return await self._children(Paragraph(), children, indent)

    async def _node(self, node: Node, indent: str, parent: Optional[Node] = None, index: int = 0) -> str:
        if isinstance(node, Root):
            return await self._children(node, node.children, indent)
        if isinstance(node, Paragraph):
            first = isinstance(parent, Root) and index == 0
            return await self._paragraph(node, indent, self.offset if first else 0)
        if isinstance(node, MdList):
            end = ""
            # keep the next tag from abutting a closing list
            if self.title != DESCRIPTION and isinstance(parent, Root) and index == len(parent.children) - 1:
                end = "\n"
            return "\n" + await self._list(node, indent) + end
        if isinstance(node, ListItem):
            return await self._children(node, node.children, indent)
        if isinstance(node, Heading):
            return f"\n\n{indent}{'#' * node.depth} {await self._inline(node.children, indent)}"
        if isinstance(node, Blockquote):
            return await self._blockquote(node, indent)
        if isinstance(node, Code):
            return await self._code(node, indent)
        if isinstance(node, TablePlaceholder):
            return await self._table(node, indent)
        if isinstance(node, Definition):
            return f"\n\n[{node.label}]: {node.url}"
        if isinstance(node, ThematicBreak):
            return f"\n\n{indent}---"
        if isinstance(node, Html):
            if node.block:
                return "\n\n" + "\n".join(f"{indent}{line}" for line in node.value.split("\n"))
            return node.value
        if isinstance(node, Text):
            return node.value
        if isinstance(node, InlineCode):
            return f"`{node.value}`"
        if isinstance(node, Break):
            return HARD_BREAK
        if isinstance(node, Strong):
            return f"**{await self._inline(node.children, indent)}**"
        if isinstance(node, Emphasis):
            return f"_{await self._inline(node.children, indent)}_"
        if isinstance(node, Link):
            return f"[{await self._inline(node.children, indent)}]({node.url})"
        if isinstance(node, Image):
            return f"[{node.alt}]({node.url})"
        if isinstance(node, LinkReference):
            return f"[{await self._inline(node.children, indent)}][{node.label}]"
        assert_never(node)

    async def _paragraph(self, node: Paragraph, indent: str, offset: int) -> str:
        text = await self._inline(node.children, indent)
        segments: List[str] = []
        for i, segment in enumerate(text.split(HARD_BREAK)):
            segment, targets = shield_links(segment)
            segment = collapse_whitespace(segment)
            if self.options.description_with_dot:
                segment = add_trailing_dot(segment)
            wrapped = break_lines(segment, self.options.print_width, indent, offset if i == 0 else 0)
            segments.append(restore_links(wrapped, targets))
        return "\n\n" + HARD_BREAK.join(segments)

    async def _list(self, node: MdList, indent: str) -> str:
        parts: List[str] = []
        for index, item in enumerate(node.children):
            marker = f"{node.start + index}. " if node.ordered else "- "
            body = (await self._children(item, item.children, indent + " " * len(marker))).strip()
            parts.append(f"\n{indent}{marker}{body}" if body else f"\n{indent}{marker.rstrip()}")
        return "".join(parts)

    async def _blockquote(self, node: Blockquote, indent: str) -> str:
        prefix = f"{indent}> "
        narrow = replace(self.options, print_width=max(self.options.print_width - len(prefix), 1))
        quoted = DescriptionRenderer(self.title, narrow, self.tables, self.formatter)
        inner = (await quoted._children(node, node.children, "")).strip()
        lines = [f"{indent}> {line}" if line.strip() else f"{indent}>" for line in inner.split("\n")]
        return "\n\n" + "\n".join(lines)

    async def _code(self, node: Code, indent: str) -> str:
        fenced = self.options.prefer_code_fences or bool(node.lang)
        code_indent = indent if fenced else indent + " " * 4
        result = ""
        if node.value:
            dialect = resolve_dialect(node.lang, self.options.parser)
            try:
                result = await self.formatter.format(node.value, code_indent, dialect, self.options)
            except FormatError as e:
                logger.debug(f"Keeping {dialect} code block verbatim: {e}")
                result = indent_block(node.value, code_indent)
        if not result:
            return ""
        if fenced:
            return f"\n\n{code_indent}```{node.lang or ''}{result}```"
        return f"\n{result.rstrip()}"

    async def _table(self, node: TablePlaceholder, indent: str) -> str:
        if not self.tables:
            logger.debug("Table placeholder without a captured table")
            return f"\n\n{indent}{node.value}"
        table = self.tables.popleft()
        try:
            result = await self.formatter.format_table(table, self.options)
        except FormatError as e:
            logger.debug(f"Keeping table verbatim: {e}")
            result = table.strip()
        return f"\n\n{indent}" + result.replace("\n", f"\n{indent}")


async def reflow(
    title: str,
    text: str,
    options: FormatOptions,
    indent: str = "",
    offset: int = 0,
    formatter: Optional[CodeFormatter] = None,
) -> str:
    """Re-wrap a tag description as markdown within ``options.print_width``.

    ``indent`` prefixes every continuation line and ``offset`` is how many
    columns the tag's title, type and name already take on the first line.
    Descriptions of preformatted and unknown tags come back untouched. When the
    description does not open with a paragraph the result starts with a newline
    so the block begins on a line of its own.
    """
    if not text or not kind_of(title).reflow:
        return text

    text = normalize_dash_lists(text)
    text = collapse_indent(text, indent)
    protected = protect_tables(text)
    text = protected.text

    root = parse_markdown(text)
    renderer = DescriptionRenderer(title, options, protected.tables, formatter, offset)
    result = await renderer.render(root, indent)
    if root.children and not isinstance(root.children[0], Paragraph):
        return "\n" + result.lstrip("\n")
    return result.lstrip()
