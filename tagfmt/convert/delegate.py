from __future__ import annotations

import asyncio
import json
import re
import shutil
from functools import lru_cache
from typing import Dict, Optional, Tuple

import black
import mdformat

from ..options import FormatOptions


class FormatError(Exception):
    """Raised when embedded code or a table cannot be formatted."""


# Language tag aliases -> dialects the delegates accept, preferred first.
DIALECT_ALIASES: Dict[str, Tuple[str, ...]] = {
    "js": ("babel", "babel-flow", "vue"),
    "javascript": ("babel", "babel-flow", "vue"),
    "jsx": ("babel", "babel-flow", "vue"),
    "mjs": ("babel", "babel-flow", "vue"),
    "ts": ("typescript", "babel-ts", "angular"),
    "typescript": ("typescript", "babel-ts", "angular"),
    "tsx": ("typescript", "babel-ts", "angular"),
    "json": ("json",),
    "css": ("css",),
    "less": ("less",),
    "scss": ("scss",),
    "html": ("html",),
    "yaml": ("yaml",),
    "yml": ("yaml",),
    "py": ("python",),
    "python": ("python",),
    "python3": ("python",),
    "md": ("markdown",),
    "markdown": ("markdown",),
}

PLAIN = "text"

# types are formatted as the right-hand side of an alias declaration
TYPE_START = "type name = "
_array_suffix_re = re.compile(r"\[\s*\]$")

PRETTIER_DIALECTS = frozenset(
    {"babel", "babel-flow", "babel-ts", "flow", "typescript", "vue", "angular", "css", "less", "scss", "html", "yaml"}
)


def resolve_dialect(lang: Optional[str], preferred: Optional[str] = None) -> str:
    """Map a code fence language tag to a delegate dialect.

    ``preferred`` (the host source dialect) wins when it belongs to the same
    alias group; unknown languages are treated as plain text.
    """
    if not lang:
        return preferred or PLAIN
    candidates = DIALECT_ALIASES.get(lang.lower())
    if not candidates:
        return PLAIN
    if preferred in candidates:
        return preferred
    return candidates[0]


def indent_block(code: str, indent: str) -> str:
    """Indent every non-blank line; the result opens and closes on a new line."""
    lines = code.strip("\n").split("\n")
    body = "\n".join(f"{indent}{line}" if line.strip() else "" for line in lines)
    return f"\n{body}\n{indent}"


class CodeFormatter:
    """Formats code blocks and tables embedded in descriptions.

    Python goes through black, JSON through the json module, markdown through
    mdformat and the web dialects through a ``prettier`` executable when one is
    on PATH. Any failure surfaces as :class:`FormatError`.
    """

    def __init__(self, prettier: Optional[str] = None):
        self.prettier = prettier or shutil.which("prettier")

    async def format(self, code: str, indent: str, dialect: str, options: FormatOptions) -> str:
        width = max(options.print_width - len(indent), 1)
        formatted = await self.format_source(code, dialect, width)
        return indent_block(formatted, indent)

    async def format_source(self, code: str, dialect: str, width: int) -> str:
        if dialect == PLAIN:
            return code
        if dialect == "python":
            return await asyncio.to_thread(_format_python, code, width)
        if dialect == "json":
            return _format_json(code)
        if dialect == "markdown":
            return await asyncio.to_thread(_format_markdown, code, None)
        if dialect in PRETTIER_DIALECTS:
            return await self._prettier(code, dialect, width)
        raise FormatError(f"no formatter for dialect {dialect!r}")

    async def format_table(self, table: str, options: FormatOptions) -> str:
        formatted = await asyncio.to_thread(_format_markdown, table, {"tables"})
        return formatted.strip()

    async def format_type(self, type_: str, options: FormatOptions) -> str:
        """Pretty-print a type expression as TypeScript would.

        Rest types (``...T``) are formatted as ``T[]`` and given back their
        ``...``. Raises :class:`FormatError` when no TypeScript formatter runs.
        """
        rest = type_.startswith("...")
        source = f"({type_[3:]})[]" if rest else type_
        out = await self._prettier(TYPE_START + source, "typescript", options.print_width)
        if not out.startswith(TYPE_START.rstrip()):
            raise FormatError(f"unexpected type output {out!r}")
        pretty = out[len(TYPE_START.rstrip()) :].strip().rstrip(";").strip()
        if pretty.startswith("|"):
            pretty = pretty[1:].strip()
        # the header keeps the type on one line
        pretty = " ".join(pretty.split())
        if rest:
            pretty = "..." + _array_suffix_re.sub("", pretty)
        return pretty

    async def _prettier(self, code: str, dialect: str, width: int) -> str:
        if not self.prettier:
            raise FormatError("prettier not found on PATH")
        try:
            proc = await asyncio.create_subprocess_exec(
                self.prettier,
                "--parser",
                dialect,
                "--print-width",
                str(width),
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            out, err = await proc.communicate(code.encode("utf-8"))
        except OSError as e:
            raise FormatError(f"prettier: {e}") from e
        if proc.returncode != 0:
            raise FormatError(err.decode("utf-8", errors="replace").strip() or f"prettier exited {proc.returncode}")
        return out.decode("utf-8")


def _format_python(code: str, width: int) -> str:
    try:
        return black.format_str(code, mode=black.Mode(line_length=width))
    except Exception as e:
        raise FormatError(f"black: {e}") from e


def _format_json(code: str) -> str:
    try:
        return json.dumps(json.loads(code), indent=2, ensure_ascii=False)
    except ValueError as e:
        raise FormatError(f"json: {e}") from e


def _format_markdown(text: str, extensions: Optional[set]) -> str:
    try:
        return mdformat.text(text, extensions=extensions or ())
    except Exception as e:
        raise FormatError(f"mdformat: {e}") from e


@lru_cache(maxsize=None)
def default_formatter() -> CodeFormatter:
    return CodeFormatter()
