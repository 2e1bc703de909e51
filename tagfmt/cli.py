from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from .version import __version__
from .utils.logging import get_logger, setup_logger
from .pipeline import RunConfig, run


app = typer.Typer(add_completion=False, help="Normalize and re-wrap documentation tag blocks.")


@app.command()
def main(
    input: Optional[Path] = typer.Option(None, "-i", "--input", help="Tag blocks JSON from the tokenizer", envvar="TAGFMT_INPUT"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write bodies as a JSON array here", envvar="TAGFMT_OUTPUT"),
    print_width: int = typer.Option(80, "--print-width", help="Usable columns inside the comment", envvar="TAGFMT_PRINT_WIDTH"),
    spaces: int = typer.Option(1, "--spaces", help="Gap between tag columns", envvar="TAGFMT_SPACES"),
    vertical_alignment: bool = typer.Option(
        False, "--vertical-alignment/--no-vertical-alignment", help="Align title, type and name columns", envvar="TAGFMT_VERTICAL_ALIGNMENT"
    ),
    description_tag: bool = typer.Option(False, "--description-tag", help="Always print @description", envvar="TAGFMT_DESCRIPTION_TAG"),
    separate_tag_groups: bool = typer.Option(
        False, "--separate-tag-groups", help="Blank line between groups of different tags", envvar="TAGFMT_SEPARATE_TAG_GROUPS"
    ),
    prefer_code_fences: bool = typer.Option(
        False, "--prefer-code-fences", help="Fence unlabeled code instead of indenting it", envvar="TAGFMT_PREFER_CODE_FENCES"
    ),
    description_with_dot: bool = typer.Option(
        False, "--description-with-dot", help="End descriptions with a period", envvar="TAGFMT_DESCRIPTION_WITH_DOT"
    ),
    sort_tags: bool = typer.Option(True, "--sort-tags/--no-sort-tags", help="Reorder tags canonically", envvar="TAGFMT_SORT_TAGS"),
    parser: Optional[str] = typer.Option(None, "--parser", help="Dialect of the host source (babel, typescript, ...)", envvar="TAGFMT_PARSER"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level", envvar="TAGFMT_LOG_LEVEL"),
    version: bool = typer.Option(False, "--version", help="Print version and exit"),
):
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)
    if input is None:
        raise typer.BadParameter("an input file is required", param_hint="--input")

    setup_logger(log_level)
    cfg = RunConfig(
        input=input,
        output=output,
        print_width=print_width,
        spaces=spaces,
        vertical_alignment=vertical_alignment,
        description_tag=description_tag,
        separate_tag_groups=separate_tag_groups,
        prefer_code_fences=prefer_code_fences,
        description_with_dot=description_with_dot,
        sort_tags=sort_tags,
        parser=parser,
        log_level=log_level,
    )
    try:
        bodies = run(cfg)
    except (OSError, ValueError) as e:
        get_logger().error(f"Cannot format {input}: {e}")
        raise typer.Exit(code=1)
    if output is None:
        typer.echo(json.dumps(bodies, indent=2, ensure_ascii=False))


def entrypoint():
    # Load environment variables from .env if present, before flags read TAGFMT_*
    load_dotenv()
    app()

if __name__ == "__main__":
    entrypoint()
