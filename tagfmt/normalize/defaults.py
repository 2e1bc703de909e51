from __future__ import annotations

import re
from dataclasses import replace
from typing import List

from ..tags.record import TagRecord
from ..tags.roles import kind_of


_default_re = re.compile(
    r"@default(?:Value)? (\[.*\]|\{.*\}|\(.*\)|'.*'|\".*\"|`.*`|\w+)( ((?!\*/).+))?",
    flags=re.IGNORECASE,
)
_string_re = re.compile(r"""(["'`])(?:\\.|(?!\1).)*\1""")
_masked_re = re.compile(r"\x00(\d+)\x00")
_array_re = re.compile(r"(^|[^$\w\u00A0-\uFFFF])Array\s*<((?:[^<>=]|=>|=(?!>))+)>")
_simple_type_re = re.compile(r"[\w$.]+(?:\[\])*")
_nullable_prefix_re = re.compile(r"^\?\s*(\w+)$")
_nullable_suffix_re = re.compile(r"^(\w+)\s*\?$")


def mark_optional(tag: TagRecord) -> TagRecord:
    """Turn the legacy ``{Type=}`` spelling into the optional flag."""
    if tag.type.endswith("="):
        return replace(tag, type=tag.type[:-1].rstrip(), optional=True)
    return tag


def _array_shorthand(m: re.Match) -> str:
    inner = m.group(2).strip()
    if not _simple_type_re.fullmatch(inner):
        inner = f"({inner})"
    return f"{m.group(1)}{inner}[]"


def modern_type(type_: str) -> str:
    """Rewrite legacy type syntax: ``Foo.<T>``, ``*``, ``?T`` and ``Array<T>``.

    Quoted string literals are left alone.
    """
    strings: List[str] = []

    def mask(m: re.Match) -> str:
        strings.append(m.group(0))
        return f"\x00{len(strings) - 1}\x00"

    text = _string_re.sub(mask, type_.strip())
    text = text.replace(".<", "<").replace("*", "any")
    text = _nullable_prefix_re.sub(r"\1 | null", text)
    text = _nullable_suffix_re.sub(r"\1 | null", text)
    while True:
        text, count = _array_re.subn(_array_shorthand, text)
        if not count:
            break
    return _masked_re.sub(lambda m: strings[int(m.group(1))], text)


def modernize_type(tag: TagRecord) -> TagRecord:
    if not tag.type or kind_of(tag.title).default_value:
        return tag
    return replace(tag, type=modern_type(tag.type))


def _source_line(tag: TagRecord) -> str:
    marker = f"@{tag.title}".lower()
    for line in tag.source:
        if marker in line.lower():
            return line
    return ""


def resolve_name_defaults(tag: TagRecord) -> TagRecord:
    """Fold optional and default markers into the name or type columns.

    Default-value tags are re-read from their source line because the upstream
    tokenizer stops at the first unbalanced bracket; the literal moves into the
    type slot and whatever follows it becomes the description.
    """
    if kind_of(tag.title).default_value:
        m = _default_re.search(_source_line(tag))
        if not m:
            return tag
        return replace(tag, type=m.group(1), name="", description=m.group(3) or "")

    if not tag.optional:
        return tag
    if tag.name:
        if tag.default:
            return replace(tag, name=f"[{tag.name}={tag.default}]")
        return replace(tag, name=f"[{tag.name}]")
    if tag.type:
        return replace(tag, type=f"{tag.type} | undefined")
    return tag
