import asyncio

from tagfmt.options import FormatOptions
from tagfmt.pipeline import format_block, format_blocks, prepare_tags
from tagfmt.tags.record import TagBlock, TagRecord


def block(*tags, description=""):
    return TagBlock.of(tags, description=description)


def fmt(b, **options):
    return asyncio.run(format_block(b, FormatOptions(**options)))


def test_description_then_tags_in_canonical_order():
    b = block(
        TagRecord(title="return", type="string", description="The greeting"),
        TagRecord(title="arg", type="string", name="name", description="The name"),
        description="Build a greeting",
    )
    assert fmt(b) == "Build a greeting\n\n@param {string} name The name\n@returns {string} The greeting"


def test_sorting_can_be_turned_off():
    b = block(TagRecord(title="returns", type="string"), TagRecord(title="param", name="x"))
    assert fmt(b, sort_tags=False) == "@returns {string}\n@param x"


def test_incomplete_tags_are_dropped():
    b = block(TagRecord(title="since"), TagRecord(title="example"), TagRecord(title="param", name="x"))
    assert fmt(b) == "@param x"


def test_optional_param_with_default():
    b = block(TagRecord(title="param", type="number", name="count", optional=True, default="0", description="How many"))
    assert fmt(b) == "@param {number} [count=0] How many"


def test_default_tag_from_source_line():
    tag = TagRecord(title="default", description="[", source=(" * @default [] the list",))
    assert fmt(block(tag)) == "@default [ ] the list"


def test_tag_groups_can_be_separated():
    b = block(
        TagRecord(title="param", type="string", name="a", description="A"),
        TagRecord(title="param", type="string", name="b", description="B"),
        TagRecord(title="returns", type="string", description="R"),
    )
    assert fmt(b, separate_tag_groups=True) == "@param {string} a A\n@param {string} b B\n\n@returns {string} R"


def test_no_separator_after_description():
    b = block(TagRecord(title="param", name="x", description="X"), description="Hello")
    tags = prepare_tags(b, FormatOptions(separate_tag_groups=True))
    assert [t.title for t in tags] == ["description", "param"]
    assert fmt(b, separate_tag_groups=True) == "Hello\n\n@param x X"


def test_dash_list_in_description():
    b = block(TagRecord(title="param", name="x", description="X"), description="Steps:\n\n1- first\n2- second")
    assert fmt(b) == "Steps:\n\n1. first\n2. second\n\n@param x X"


def test_blocks_keep_their_order():
    blocks = [block(description=f"Block {i}") for i in range(5)]
    out = asyncio.run(format_blocks(blocks, FormatOptions()))
    assert out == [f"Block {i}" for i in range(5)]


def test_empty_block():
    assert fmt(block()) == ""


def test_indented_code_in_param_description():
    b = block(TagRecord(title="param", name="x", description="Intro text.\n\n    raw  code\n\nAfter."))
    assert fmt(b) == "@param x Intro text.\n\n      raw  code\n\n  After."
