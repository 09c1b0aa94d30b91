import pytest

from xcstrings_gen.models import PlaceholderKind
from xcstrings_gen.specifier import iter_specifiers, kind_of, match_specifier


@pytest.mark.parametrize(
    "spec, kind",
    [
        ("%@", PlaceholderKind.OBJECT),
        ("%d", PlaceholderKind.INT),
        ("%i", PlaceholderKind.INT),
        ("%lld", PlaceholderKind.INT),
        ("%hhd", PlaceholderKind.INT),
        ("%zd", PlaceholderKind.INT),
        ("%u", PlaceholderKind.UINT),
        ("%lu", PlaceholderKind.UINT),
        ("%x", PlaceholderKind.UINT),
        ("%o", PlaceholderKind.UINT),
        ("%f", PlaceholderKind.DOUBLE),
        ("%.2f", PlaceholderKind.DOUBLE),
        ("%e", PlaceholderKind.DOUBLE),
        ("%g", PlaceholderKind.DOUBLE),
        ("%a", PlaceholderKind.DOUBLE),
        ("%c", PlaceholderKind.CHAR),
        ("%s", PlaceholderKind.CSTRING),
        ("%p", PlaceholderKind.POINTER),
    ],
)
def test_kind_from_conversion(spec, kind):
    assert kind_of(spec) == kind


def test_length_modifiers_do_not_change_kind():
    kinds = {kind_of(f"%{mod}d") for mod in ["", "h", "hh", "l", "ll", "q", "z", "t", "j"]}
    assert kinds == {PlaceholderKind.INT}
    kinds = {kind_of(f"%{mod}x") for mod in ["", "h", "hh", "l", "ll", "q", "z", "t", "j"]}
    assert kinds == {PlaceholderKind.UINT}


def test_full_grammar_match():
    m = match_specifier("%12$-5.3lld rest")
    assert m is not None
    assert m.specifier == "%12$-5.3lld"
    assert m.position == 12
    assert m.kind == PlaceholderKind.INT
    assert (m.start, m.end) == (0, len("%12$-5.3lld"))

    # width 只支持一位数字
    assert match_specifier("%12d") is None


def test_match_at_offset():
    text = "Total: %1$.2f USD"
    m = match_specifier(text, text.index("%"))
    assert m.specifier == "%1$.2f"
    assert m.position == 1
    assert m.kind == PlaceholderKind.DOUBLE


@pytest.mark.parametrize("text", ["%", "%%", "%k", "%l", "%0$d", "%.f", "%hf"])
def test_unclassifiable_occurrence_is_not_a_match(text):
    assert match_specifier(text) is None


def test_flags():
    for flag in "-+# 0":
        m = match_specifier(f"%{flag}d")
        assert m is not None and m.kind == PlaceholderKind.INT


def test_iter_specifiers_left_to_right_non_overlapping():
    found = list(iter_specifiers("%@ and %2$d, %lu%%"))
    assert [m.specifier for m in found] == ["%@", "%2$d", "%lu"]
    assert [m.position for m in found] == [None, 2, None]


def test_variant_marker_token_is_object_like():
    # 未展开的 %#@x@ 前半段会被识别成 "%#@"（flag # + @）
    found = list(iter_specifiers("%#@count@"))
    assert [m.specifier for m in found] == ["%#@"]


@pytest.mark.parametrize("text, position, kind", [
    ("%01$d", 1, PlaceholderKind.INT),
    ("%001$@", 1, PlaceholderKind.OBJECT),
    ("%010$lld", 10, PlaceholderKind.INT),
])
def test_leading_zeros_in_position(text, position, kind):
    m = match_specifier(text)
    assert m is not None
    assert m.specifier == text
    assert m.position == position
    assert m.kind == kind


def test_all_zero_position_is_still_rejected():
    assert match_specifier("%00$d") is None
