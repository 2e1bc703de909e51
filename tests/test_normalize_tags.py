from tagfmt.normalize.defaults import mark_optional, modern_type, modernize_type, resolve_name_defaults
from tagfmt.normalize.tags import drop_incomplete, merge_descriptions, normalize_tag, normalize_tags, order_tags
from tagfmt.tags.record import TagBlock, TagRecord


def test_sticky_type_is_split_from_title():
    tag = normalize_tag(TagRecord(title="param{string}", name="x"))
    assert (tag.title, tag.type, tag.name) == ("param", "string", "x")


def test_titles_resolve_casing_and_synonyms():
    titles = [t.title for t in normalize_tags(TagRecord(title=t) for t in ["arg", "Return", "PARAM", "typeparam", "custom"])]
    assert titles == ["param", "returns", "param", "typeParam", "custom"]


def test_nameless_tag_moves_name_into_description():
    tag = normalize_tag(TagRecord(title="returns", type="string", name="the", description="value"))
    assert tag.name == ""
    assert tag.description == "the value"


def test_typeless_tag_moves_type_into_description():
    tag = normalize_tag(TagRecord(title="see", type="Foo", description="docs"))
    assert tag.type == ""
    assert tag.description == "{Foo} docs"


def test_merge_descriptions_folds_free_text_and_description_tags():
    tags = normalize_tags(
        [
            TagRecord(description="A"),
            TagRecord(title="param", name="x", description="y"),
            TagRecord(title="Description", description="B"),
            TagRecord(title="desc", description="  "),
        ]
    )
    description, rest = merge_descriptions(tags)
    assert description == "A\n\nB"
    assert [t.title for t in rest] == ["description", "param"]
    assert rest[0].description == "A\n\nB"


def test_merge_descriptions_without_text_adds_nothing():
    description, rest = merge_descriptions([TagRecord(title="param", name="x")])
    assert description == ""
    assert [t.title for t in rest] == ["param"]


def test_drop_incomplete_removes_tags_that_need_text():
    tags = [TagRecord(title="since"), TagRecord(title="async"), TagRecord(title="since", description="1.2")]
    assert [(t.title, t.description) for t in drop_incomplete(tags)] == [("async", ""), ("since", "1.2")]


def test_order_tags_is_stable_and_keeps_description_first():
    tags = [
        TagRecord(title="description", description="d"),
        TagRecord(title="returns"),
        TagRecord(title="custom"),
        TagRecord(title="param", name="b"),
        TagRecord(title="param", name="a"),
    ]
    ordered = order_tags(tags)
    assert [(t.title, t.name) for t in ordered] == [
        ("description", ""),
        ("param", "b"),
        ("param", "a"),
        ("returns", ""),
        ("custom", ""),
    ]


def test_optional_name_with_default():
    tag = resolve_name_defaults(TagRecord(title="param", type="number", name="count", optional=True, default="0"))
    assert tag.name == "[count=0]"


def test_legacy_equals_marks_optional():
    tag = resolve_name_defaults(mark_optional(TagRecord(title="param", type="number=", name="count")))
    assert tag.type == "number"
    assert tag.name == "[count]"


def test_optional_without_name_widens_type():
    tag = resolve_name_defaults(TagRecord(title="returns", type="string", optional=True))
    assert tag.type == "string | undefined"


def test_default_literal_is_read_from_source_line():
    tag = TagRecord(title="default", description="[", source=(" * @default [] the list",))
    tag = resolve_name_defaults(tag)
    assert (tag.type, tag.name, tag.description) == ("[]", "", "the list")


def test_default_bare_word_and_object_literals():
    word = resolve_name_defaults(TagRecord(title="defaultValue", source=("@defaultValue 42 the answer",)))
    assert (word.type, word.description) == ("42", "the answer")
    obj = resolve_name_defaults(TagRecord(title="default", source=("@default {a: 1}",)))
    assert (obj.type, obj.description) == ("{a: 1}", "")


def test_default_without_match_is_untouched():
    tag = TagRecord(title="default", type="x", description="y")
    assert resolve_name_defaults(tag) == tag


def test_block_from_dict_puts_free_text_first():
    block = TagBlock.from_dict({"description": "Hi", "tags": [{"tag": "param", "name": "x", "optional": True}]})
    assert [t.title for t in block.tags] == ["", "param"]
    assert block.tags[0].description == "Hi"
    assert block.tags[1].optional is True


def test_modern_type_rewrites_legacy_syntax():
    assert modern_type("Array.<string>") == "string[]"
    assert modern_type("Array<Array<number>>") == "number[][]"
    assert modern_type("Array<string | number>") == "(string | number)[]"
    assert modern_type("Array<() => void>") == "(() => void)[]"
    assert modern_type("Object.<string, *>") == "Object<string, any>"
    assert modern_type("?number") == "number | null"
    assert modern_type("number?") == "number | null"


def test_modern_type_leaves_string_literals_alone():
    assert modern_type("'Array.<x>' | \"*\"") == "'Array.<x>' | \"*\""
    assert modern_type("MyArray<string>") == "MyArray<string>"


def test_modernize_type_skips_default_literals():
    assert modernize_type(TagRecord(title="param", type="Array.<T>")).type == "T[]"
    assert modernize_type(TagRecord(title="default", type="*")).type == "*"
