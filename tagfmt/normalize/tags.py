from __future__ import annotations

from dataclasses import replace
from typing import Iterable, List, Tuple

from ..tags.record import TagRecord
from ..tags.roles import BLANK_SEPARATOR, DESCRIPTION, canonical_title, kind_of, order_index


def _split_sticky_type(title: str, type_: str) -> Tuple[str, str]:
    # "@param{string}" arrives with the type glued to the title
    brace = title.find("{")
    if brace != -1 and title.endswith("}"):
        return title[:brace], title[brace + 1 : -1] + " " + type_
    return title, type_


def normalize_tag(tag: TagRecord) -> TagRecord:
    title, type_ = _split_sticky_type(tag.title or "", tag.type or "")
    title = canonical_title(title.strip())
    type_ = type_.strip()
    name = (tag.name or "").strip()
    description = (tag.description or "").strip()
    default = tag.default.strip() if tag.default is not None else None

    kind = kind_of(title)
    if title and name and not kind.named:
        description = f"{name} {description}".strip()
        name = ""
    if title and type_ and not kind.typed:
        description = f"{{{type_}}} {description}".strip()
        type_ = ""

    return replace(tag, title=title, type=type_, name=name, description=description, default=default)


def normalize_tags(tags: Iterable[TagRecord]) -> List[TagRecord]:
    """Fix casing, synonyms, glued types and misassigned names/types."""
    return [normalize_tag(tag) for tag in tags]


def _is_description(tag: TagRecord) -> bool:
    return tag.title == "" or tag.title.lower() == DESCRIPTION


def merge_descriptions(tags: Iterable[TagRecord]) -> Tuple[str, List[TagRecord]]:
    """Fold the free text and every description tag into one leading record."""
    parts: List[str] = []
    rest: List[TagRecord] = []
    for tag in tags:
        if _is_description(tag):
            if tag.description.strip():
                parts.append(tag.description)
        else:
            rest.append(tag)

    description = "\n\n".join(parts)
    if description:
        rest.insert(0, TagRecord(title=DESCRIPTION, description=description))
    return description, rest


def drop_incomplete(tags: Iterable[TagRecord]) -> List[TagRecord]:
    return [tag for tag in tags if tag.description or not kind_of(tag.title).needs_description]


def order_tags(tags: Iterable[TagRecord]) -> List[TagRecord]:
    """Stable sort by canonical order; the description record stays first."""
    tags = list(tags)
    head = [tag for tag in tags[:1] if tag.title == DESCRIPTION]
    body = tags[len(head) :]
    return head + sorted(body, key=lambda tag: order_index(tag.title))


def insert_group_separators(tags: Iterable[TagRecord]) -> List[TagRecord]:
    out: List[TagRecord] = []
    for tag in tags:
        if out:
            prev = out[-1]
            if prev.title != tag.title and not kind_of(prev.title).separate_after:
                out.append(TagRecord(title=BLANK_SEPARATOR))
        out.append(tag)
    return out
