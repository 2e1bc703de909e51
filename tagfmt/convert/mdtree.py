from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from markdown_it import MarkdownIt
from markdown_it.common.utils import normalizeReference
from markdown_it.tree import SyntaxTreeNode

from .protect import TABLE_PLACEHOLDER


# Block nodes


@dataclass
class Root:
    children: List["Block"] = field(default_factory=list)


@dataclass
class Paragraph:
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Heading:
    depth: int
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Blockquote:
    children: List["Block"] = field(default_factory=list)


@dataclass
class ListItem:
    children: List["Block"] = field(default_factory=list)


@dataclass
class MdList:
    ordered: bool
    start: int = 1
    children: List[ListItem] = field(default_factory=list)


@dataclass
class Code:
    value: str
    lang: Optional[str] = None


@dataclass
class TablePlaceholder:
    value: str = TABLE_PLACEHOLDER


@dataclass
class Definition:
    label: str
    url: str


@dataclass
class ThematicBreak:
    pass


@dataclass
class Html:
    value: str
    block: bool = False


# Inline nodes


@dataclass
class Text:
    value: str


@dataclass
class InlineCode:
    value: str


@dataclass
class Break:
    pass


@dataclass
class Strong:
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Emphasis:
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Link:
    url: str
    children: List["Inline"] = field(default_factory=list)


@dataclass
class Image:
    url: str
    alt: str = ""


@dataclass
class LinkReference:
    label: str
    children: List["Inline"] = field(default_factory=list)


Block = Union[Paragraph, Heading, Blockquote, MdList, ListItem, Code, TablePlaceholder, Definition, ThematicBreak, Html]
Inline = Union[Text, InlineCode, Break, Strong, Emphasis, Link, Image, LinkReference, Html]
Node = Union[Root, Block, Inline]


# text_join would fold escapes and entities into plain text and lose their source spelling
_md = MarkdownIt("commonmark", {"store_labels": True, "inline_definitions": True}).disable("text_join")
_definition_re = re.compile(r"\s*\[((?:[^\]\\]|\\.)+)\]:\s*(<[^>]*>|\S+)")
_label_re = re.compile(r"^ {0,3}\[((?:[^\]\\]|\\.)+)\]:", flags=re.MULTILINE)


def parse_markdown(text: str) -> Root:
    """Parse a description into the node set the reflow renderer knows."""
    tree = SyntaxTreeNode(_md.parse(text))
    lines = text.split("\n")
    # reference labels come back case-folded; keep the spelling of their definitions
    labels = {normalizeReference(m.group(1)): m.group(1) for m in _label_re.finditer(text)}
    return Root(children=_blocks(tree.children, lines, labels))


def _blocks(nodes: List[SyntaxTreeNode], lines: List[str], labels: Dict[str, str]) -> List[Block]:
    out: List[Block] = []
    for node in nodes:
        block = _block(node, lines, labels)
        if block is not None:
            out.append(block)
    return out


def _block(node: SyntaxTreeNode, lines: List[str], labels: Dict[str, str]) -> Optional[Block]:
    t = node.type
    if t == "paragraph":
        children = _inline_of(node, labels)
        if _is_table_placeholder(children):
            return TablePlaceholder()
        return Paragraph(children=children)
    if t == "heading":
        return Heading(depth=int(node.tag[1:]), children=_inline_of(node, labels))
    if t == "blockquote":
        return Blockquote(children=_blocks(node.children, lines, labels))
    if t in ("bullet_list", "ordered_list"):
        items = [ListItem(children=_blocks(item.children, lines, labels)) for item in node.children]
        start = int(node.attrs.get("start", 1)) if t == "ordered_list" else 1
        return MdList(ordered=t == "ordered_list", start=start, children=items)
    if t == "list_item":
        return ListItem(children=_blocks(node.children, lines, labels))
    if t == "fence":
        info = node.info.strip()
        return Code(value=_strip_final_newline(node.content), lang=info.split()[0] if info else None)
    if t == "code_block":
        return Code(value=_strip_final_newline(node.content))
    if t == "definition":
        return _definition(node, lines)
    if t == "hr":
        return ThematicBreak()
    if t == "html_block":
        return Html(value=node.content.rstrip("\n"), block=True)
    if node.content:
        return Paragraph(children=[Text(value=node.content)])
    return None


def _definition(node: SyntaxTreeNode, lines: List[str]) -> Definition:
    meta = node.meta or {}
    if node.map:
        source = "\n".join(lines[node.map[0] : node.map[1]])
        m = _definition_re.match(source)
        if m:
            return Definition(label=m.group(1), url=m.group(2))
    return Definition(label=str(meta.get("label") or meta.get("id") or ""), url=str(meta.get("url") or ""))


def _inline_of(node: SyntaxTreeNode, labels: Dict[str, str]) -> List[Inline]:
    out: List[Inline] = []
    for child in node.children:
        if child.type == "inline":
            out.extend(_inlines(child.children, labels))
    return out


def _inlines(nodes: List[SyntaxTreeNode], labels: Dict[str, str]) -> List[Inline]:
    out: List[Inline] = []
    for node in nodes:
        t = node.type
        if t == "text":
            out.append(Text(value=node.content))
        elif t == "text_special":
            out.append(Text(value=node.markup or node.content))
        elif t == "softbreak":
            out.append(Text(value="\n"))
        elif t == "hardbreak":
            out.append(Break())
        elif t == "code_inline":
            out.append(InlineCode(value=node.content))
        elif t == "strong":
            out.append(Strong(children=_inlines(node.children, labels)))
        elif t == "em":
            out.append(Emphasis(children=_inlines(node.children, labels)))
        elif t == "link":
            label = (node.meta or {}).get("label")
            if label:
                label = labels.get(str(label), str(label))
                out.append(LinkReference(label=label, children=_inlines(node.children, labels)))
            else:
                out.append(Link(url=str(node.attrs.get("href", "")), children=_inlines(node.children, labels)))
        elif t == "image":
            out.append(Image(url=str(node.attrs.get("src", "")), alt=node.content))
        elif t == "html_inline":
            out.append(Html(value=node.content))
        else:
            out.append(Text(value=node.content))
    return out


def _is_table_placeholder(children: List[Inline]) -> bool:
    if not children or not all(isinstance(child, Text) for child in children):
        return False
    return "".join(child.value for child in children).strip() == TABLE_PLACEHOLDER


def _strip_final_newline(value: str) -> str:
    return value[:-1] if value.endswith("\n") else value
