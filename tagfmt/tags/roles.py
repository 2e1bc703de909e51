from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


ABSTRACT = "abstract"
ASYNC = "async"
AUGMENTS = "augments"
AUTHOR = "author"
BORROWS = "borrows"
CALLBACK = "callback"
CATEGORY = "category"
CLASS = "class"
CONSTANT = "constant"
DEFAULT = "default"
DEFAULT_VALUE = "defaultValue"
DEPRECATED = "deprecated"
DESCRIPTION = "description"
EXAMPLE = "example"
EXTENDS = "extends"
EXTERNAL = "external"
FILE = "file"
FIRES = "fires"
FLOW = "flow"
FUNCTION = "function"
IGNORE = "ignore"
IMPORT = "import"
LICENSE = "license"
MEMBER = "member"
MEMBEROF = "memberof"
MODULE = "module"
NAMESPACE = "namespace"
OVERLOAD = "overload"
OVERRIDE = "override"
PARAM = "param"
PRIVATE = "private"
PRIVATE_REMARKS = "privateRemarks"
PROPERTY = "property"
PROVIDES_MODULE = "providesModule"
REMARKS = "remarks"
RETURNS = "returns"
SATISFIES = "satisfies"
SEE = "see"
SINCE = "since"
TEMPLATE = "template"
THROWS = "throws"
TODO = "todo"
TYPE = "type"
TYPE_PARAM = "typeParam"
TYPEDEF = "typedef"
VERSION = "version"
YIELDS = "yields"

# Titles are trimmed during normalization, so a padded title never collides.
BLANK_SEPARATOR = " blank-line "


@dataclass(frozen=True)
class TagKind:
    """What a tag title means for normalization and layout.

    named / typed: the tag carries a name / type column; otherwise a captured
    value is folded back into the description.
    needs_description: the tag is dropped when its description is empty.
    reflow: the description goes through the markdown reflow engine.
    align: the tag takes part in vertical column alignment.
    default_value: the type slot holds a literal default value.
    own_paragraph: the description always starts on its own line.
    hanging_indent: continuation lines are indented by two spaces.
    separate_after: a blank line follows the tag unless it is the last one.
    """

    named: bool = True
    typed: bool = True
    needs_description: bool = False
    reflow: bool = True
    align: bool = False
    default_value: bool = False
    own_paragraph: bool = False
    hanging_indent: bool = True
    separate_after: bool = False


_FLAG = TagKind(named=False, typed=False)
_PROSE = TagKind(named=False, typed=False, needs_description=True, own_paragraph=True, hanging_indent=False)
_VERBATIM = TagKind(named=False, typed=False, needs_description=True, reflow=False, align=True)
_TYPED = TagKind(named=False, align=True)
_NAMED = TagKind(align=True)
_DEFAULT = TagKind(named=False, default_value=True)

# Key order is the canonical tag order.
TAG_KINDS: Dict[str, TagKind] = {
    REMARKS: _PROSE,
    PRIVATE_REMARKS: _PROSE,
    PROVIDES_MODULE: _FLAG,
    MODULE: TagKind(named=False, typed=False, align=True),
    LICENSE: TagKind(named=False, typed=False, reflow=False),
    FLOW: TagKind(named=False, typed=False, reflow=False),
    ASYNC: _FLAG,
    PRIVATE: _FLAG,
    IGNORE: _FLAG,
    MEMBEROF: TagKind(typed=False),
    VERSION: TagKind(named=False, typed=False, align=True),
    FILE: _FLAG,
    AUTHOR: TagKind(named=False, typed=False, align=True),
    DEPRECATED: TagKind(named=False, typed=False, align=True),
    SINCE: TagKind(named=False, typed=False, needs_description=True, align=True),
    CATEGORY: _VERBATIM,
    DESCRIPTION: TagKind(named=False, typed=False, needs_description=True, hanging_indent=False, separate_after=True),
    EXAMPLE: TagKind(
        named=False, typed=False, needs_description=True, reflow=False, hanging_indent=False, separate_after=True
    ),
    ABSTRACT: _FLAG,
    AUGMENTS: _TYPED,
    CONSTANT: TagKind(),
    DEFAULT: _DEFAULT,
    DEFAULT_VALUE: _DEFAULT,
    EXTERNAL: TagKind(typed=False),
    OVERLOAD: _FLAG,
    FIRES: TagKind(typed=False),
    TEMPLATE: _NAMED,
    TYPE_PARAM: _NAMED,
    FUNCTION: TagKind(typed=False),
    NAMESPACE: TagKind(typed=False),
    BORROWS: _VERBATIM,
    CLASS: TagKind(),
    EXTENDS: _TYPED,
    MEMBER: TagKind(),
    TYPEDEF: _NAMED,
    TYPE: _TYPED,
    SATISFIES: TagKind(named=False),
    PROPERTY: _NAMED,
    CALLBACK: TagKind(typed=False),
    PARAM: _NAMED,
    YIELDS: _TYPED,
    RETURNS: _TYPED,
    THROWS: _TYPED,
    IMPORT: TagKind(reflow=False),
    SEE: TagKind(named=False, typed=False, align=True),
    TODO: TagKind(named=False, typed=False, needs_description=True, align=True, separate_after=True),
    OVERRIDE: _FLAG,
}

TAGS_ORDER: Tuple[str, ...] = tuple(TAG_KINDS)

TAG_SYNONYMS: Dict[str, str] = {
    "arg": PARAM,
    "argument": PARAM,
    "params": PARAM,
    "prop": PROPERTY,
    "return": RETURNS,
    "exception": THROWS,
    "yield": YIELDS,
    "desc": DESCRIPTION,
    "examples": EXAMPLE,
    "emits": FIRES,
    "extend": EXTENDS,
    "fileoverview": FILE,
    "overview": FILE,
    "func": FUNCTION,
    "method": FUNCTION,
    "const": CONSTANT,
    "constructor": CLASS,
    "host": EXTERNAL,
    "var": MEMBER,
    "virtual": ABSTRACT,
    "hidden": IGNORE,
}

# Unknown and custom tags keep their text untouched.
UNKNOWN_KIND = TagKind(reflow=False)
BLANK_KIND = TagKind(named=False, typed=False, reflow=False)

_ORDER_LOWER: Dict[str, str] = {title.lower(): title for title in TAGS_ORDER}


def canonical_title(title: str) -> str:
    """Resolve casing and synonyms; unknown titles are returned unchanged."""
    lower = title.lower()
    if lower in _ORDER_LOWER:
        return _ORDER_LOWER[lower]
    return TAG_SYNONYMS.get(lower, title)


def kind_of(title: str) -> TagKind:
    if title == BLANK_SEPARATOR:
        return BLANK_KIND
    return TAG_KINDS.get(title, UNKNOWN_KIND)


def is_known(title: str) -> bool:
    return title in TAG_KINDS


def order_index(title: str) -> int:
    try:
        return TAGS_ORDER.index(title)
    except ValueError:
        return len(TAGS_ORDER)
