from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from tagfmt.options import FormatOptions
from tagfmt.pipeline import format_blocks
from tagfmt.tags.record import TagBlock, TagRecord
from tagfmt.utils.io import read_blocks, write_bodies
from tagfmt.utils.logging import setup_logger


SAMPLE = TagBlock.of(
    [
        TagRecord(title="Param", type="string", name="name", description="the user name, shown in the greeting"),
        TagRecord(title="arg", type="number=", name="count", description="how many times to greet"),
        TagRecord(title="return", type="string", description="the greeting"),
        TagRecord(title="example", description="greet('Ada', 2)"),
    ],
    description="Build a greeting.\n\n1- pick a salutation\n2- repeat it",
)


def main():
    p = argparse.ArgumentParser(description="Demo runner for tagfmt")
    p.add_argument("--input", help="Tag blocks JSON; a built-in sample is used when omitted")
    p.add_argument("--width", action="append", type=int, help="Print width to render at (repeatable)")
    p.add_argument("--outdir", default="demo_outputs", help="Output directory")
    p.add_argument("--log-level", default="INFO", help="Log level")
    args = p.parse_args()

    setup_logger(args.log_level)
    blocks = read_blocks(Path(args.input)) if args.input else [SAMPLE]
    outdir = Path(args.outdir)
    outdir.mkdir(parents=True, exist_ok=True)

    for width in args.width or [80, 40]:
        for aligned in (False, True):
            options = FormatOptions(print_width=width, vertical_alignment=aligned)
            name = f"width{width}{'.aligned' if aligned else ''}.json"
            print(f"[demo] {name}")
            write_bodies(outdir / name, asyncio.run(format_blocks(blocks, options)))


if __name__ == "__main__":
    main()
