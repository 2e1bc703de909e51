from __future__ import annotations

import re
from collections import deque
from typing import List, Tuple


_link_re = re.compile(r"\{@(link|linkcode|linkplain)\s([^{}]*)\}")
_shielded_link_re = re.compile(r"\{@(link|linkcode|linkplain)(_+)\}")
_space_re = re.compile(r"\s+")


def break_lines(text: str, width: int, indent: str = "", offset: int = 0) -> str:
    """Greedy word wrap of a single-line text.

    Every line is prefixed with ``indent``. The first line has ``width - offset``
    columns when ``offset`` is given (the caller already printed that much on
    the line), ``width - len(indent)`` otherwise. A word longer than the line
    stays whole.
    """
    rest = text.strip()
    if not rest:
        return rest

    lines: List[str] = []
    budget = max(width - (offset or len(indent)), 0)
    current = rest
    prefix = ""
    while len(current) > budget:
        cut = current.rfind(" ", 0, budget + 1)
        if cut <= len(prefix):
            cut = current.find(" ", len(prefix) + 1)
        if cut == -1:
            break
        lines.append(current[:cut])
        current = indent + current[cut + 1 :]
        budget = width
        prefix = indent
    lines.append(current)
    return indent + "\n".join(lines)


def shield_links(text: str) -> Tuple[str, List[str]]:
    """Replace ``{@link target}`` targets with underscores of equal length.

    Returns the shielded text and the captured targets in encounter order.
    """
    targets: List[str] = []

    def repl(m: re.Match) -> str:
        target = " ".join(m.group(2).split())
        targets.append(target)
        return "{@" + m.group(1) + "_" * len(target) + "}"

    return _link_re.sub(repl, text), targets


def restore_links(text: str, targets: List[str]) -> str:
    queue = deque(targets)

    def repl(m: re.Match) -> str:
        if queue and len(queue[0]) == len(m.group(2)):
            return "{@" + m.group(1) + " " + queue.popleft() + "}"
        return m.group(0)

    return _shielded_link_re.sub(repl, text)


def collapse_whitespace(text: str) -> str:
    return _space_re.sub(" ", text)


def add_trailing_dot(text: str) -> str:
    text = text.rstrip()
    if text and re.search(r"\w$", text):
        return text + "."
    return text
