import asyncio

from tagfmt.convert.reflow import reflow
from tagfmt.options import FormatOptions


LONG = (
    "This is a very long description that should be wrapped into multiple lines because it exceeds "
    "the configured print width by quite a margin."
)


def run_reflow(text, title="description", **kwargs):
    options = kwargs.pop("options", FormatOptions())
    return asyncio.run(reflow(title, text, options, **kwargs))


def test_dash_list_becomes_ordered_list():
    assert run_reflow("1- first\n2- second").strip() == "1. first\n2. second"


def test_ordered_list_keeps_its_start():
    assert run_reflow("3. a\n4. b").strip() == "3. a\n4. b"


def test_bullet_list_after_paragraph():
    assert run_reflow("Steps:\n\n* one\n* two") == "Steps:\n\n- one\n- two"


def test_final_list_gets_trailing_blank_for_tags():
    out = run_reflow("Steps:\n\n- one", title="param", indent="  ")
    assert out == "Steps:\n\n  - one\n"


def test_paragraph_respects_width():
    out = run_reflow(LONG, options=FormatOptions(print_width=30))
    lines = out.splitlines()
    assert len(lines) > 1
    assert all(len(line) <= 30 for line in lines)
    assert " ".join(lines) == LONG


def test_first_line_leaves_room_for_offset():
    out = run_reflow(LONG, title="param", indent="  ", offset=20, options=FormatOptions(print_width=40))
    lines = out.splitlines()
    assert len(lines[0]) <= 20
    assert all(line.startswith("  ") and len(line) <= 40 for line in lines[1:])


def test_reflow_is_idempotent():
    text = f"{LONG}\n\n- one\n- two\n\n```js\nconst a = 1;\n```"
    options = FormatOptions(print_width=40)
    once = run_reflow(text, options=options)
    assert run_reflow(once, options=options) == once


def test_dot_is_added_when_requested():
    assert run_reflow("Does things", options=FormatOptions(description_with_dot=True)) == "Does things."


def test_emphasis_strong_and_inline_code():
    assert run_reflow("a *b* __c__ `d`") == "a _b_ **c** `d`"


def test_links_and_references():
    text = "see [docs](https://example.com) and [ref][r]\n\n[r]: https://example.org"
    assert run_reflow(text) == "see [docs](https://example.com) and [ref][r]\n\n[r]: https://example.org"


def test_code_fence_kept_verbatim_when_formatter_fails(failing_formatter):
    out = run_reflow("Intro.\n\n```js\nconst  a=1\n```", formatter=failing_formatter)
    assert out == "Intro.\n\n```js\nconst  a=1\n```"


def test_python_code_goes_through_black():
    out = run_reflow("Intro.\n\n```python\nx=1\n```")
    assert out == "Intro.\n\n```python\nx = 1\n```"


def test_unlabeled_code_is_indented_or_fenced():
    text = "Intro.\n\n```\nraw  text\n```"
    assert run_reflow(text) == "Intro.\n\n    raw  text"
    assert run_reflow(text, options=FormatOptions(prefer_code_fences=True)) == "Intro.\n\n```\nraw  text\n```"


def test_blockquote_and_heading_start_on_new_line():
    assert run_reflow("> quoted text") == "\n> quoted text"
    assert run_reflow("# Title\n\nBody") == "\n# Title\n\nBody"


def test_preformatted_and_unknown_tags_pass_through():
    text = "keep   this\n  as is"
    assert run_reflow(text, title="example") == text
    assert run_reflow(text, title="custom") == text


def test_indented_code_under_hanging_indent_stays_code():
    text = "Intro.\n\n    raw  code\n    more"
    once = run_reflow(text, title="param", indent="  ")
    assert once == "Intro.\n\n      raw  code\n      more"
    assert run_reflow(once, title="param", indent="  ") == once


def test_fenced_code_keeps_inner_indent_under_hanging_indent(failing_formatter):
    text = "Intro.\n\n```py\nif x:\n    y\n```"
    once = run_reflow(text, title="param", indent="  ", formatter=failing_formatter)
    assert once == "Intro.\n\n  ```py\n  if x:\n      y\n  ```"
    assert run_reflow(once, title="param", indent="  ", formatter=failing_formatter) == once


def test_code_and_tables_survive_in_order_under_indent(failing_formatter):
    text = (
        "Intro.\n\n```python\nx=1\n```\n\n| a |\n|---|\n| 1 |\n\nMiddle.\n\n"
        "    keep  this\n\n| b |\n|---|\n| 2 |"
    )
    once = run_reflow(text, title="param", indent="  ", formatter=failing_formatter)
    assert once == (
        "Intro.\n\n  ```python\n  x=1\n  ```\n\n  | a |\n  |---|\n  | 1 |\n\n  Middle.\n\n"
        "      keep  this\n\n  | b |\n  |---|\n  | 2 |"
    )
    assert run_reflow(once, title="param", indent="  ", formatter=failing_formatter) == once


def test_escaped_characters_survive_reflow():
    text = "Match \\*a\\* literally, snake\\_case, \\[not a link\\] and a &amp; b"
    once = run_reflow(text)
    assert once == text
    assert run_reflow(once) == once


def test_blockquote_lines_respect_width():
    words = " ".join(["word"] * 30)
    for title, indent in (("description", ""), ("param", "  ")):
        out = run_reflow(f"> {words}", title=title, indent=indent, options=FormatOptions(print_width=40))
        lines = [line for line in out.split("\n") if line]
        assert len(lines) > 1
        assert all(len(line) <= 40 and line.startswith(f"{indent}> ") for line in lines)
        assert " ".join(line[len(indent) + 2 :] for line in lines) == words
