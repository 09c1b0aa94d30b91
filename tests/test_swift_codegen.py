import pytest

from xcstrings_gen.catalog import parse_catalog
from xcstrings_gen.errors import NamespaceCollisionError
from xcstrings_gen.extractor import extract_resources
from xcstrings_gen.parser import scan
from xcstrings_gen.swift_codegen import (
    ACCESS_LEVEL_ENV,
    AccessLevel,
    default_value_literal,
    generate_source,
    write_source,
)


def resources_of(strings):
    catalog = parse_catalog({
        "sourceLanguage": "en",
        "strings": {k: {"localizations": {"en": {"stringUnit": {"value": v}}}} for k, v in strings.items()},
    })
    result = extract_resources(catalog, strict=True)
    return result.resources


def test_generate_source_layout():
    text = generate_source(resources_of({"hello": "Hello, %@!", "home.title": "Home"}))
    assert text == "\n".join([
        "// swiftlint:disable all",
        "",
        "// Generated using xcstrings_gen from Localizable.xcstrings",
        "",
        "import Foundation",
        "",
        "extension LocalizationKey {",
        "  internal enum home {",
        "    /// Home",
        "    internal static var title: LocalizationKey {",
        '      LocalizationKey("home.title")',
        "    }",
        "  }",
        "",
        "  /// Hello, %@!",
        "  internal static func hello(_ arg1: String) -> LocalizationKey {",
        '    LocalizationKey("hello", arguments: [arg1])',
        "  }",
        "}",
        "",
        "// swiftlint:enable all",
        "",
    ])


def test_argument_types_follow_positions():
    text = generate_source(
        resources_of({"stats": "%2$.1f%% of %1$lld"}),
        access_level=AccessLevel.PUBLIC,
        type_name="L10nKey",
    )
    assert "public static func stats(_ arg1: Int, _ arg2: Double) -> L10nKey {" in text
    assert 'L10nKey("stats", arguments: [arg1, arg2])' in text
    assert "extension L10nKey {" in text


def test_keyword_and_multiline_comment():
    text = generate_source(resources_of({"default": "Line one\nLine two"}))
    assert "internal static var `default`: LocalizationKey {" in text
    assert "/// Line one\n" in text
    assert "/// Line two\n" in text


def test_include_default_value():
    text = generate_source(resources_of({"done": "%d%% done\tnow"}), include_default_value=True)
    assert 'defaultValue: ###"\\###(arg1)% done\\###tnow"###' in text


def test_default_value_literal_with_explicit_positions():
    literal = default_value_literal(scan('%2$@ says "%1$@"'))
    assert literal == '###"\\###(arg2) says "\\###(arg1)""###'


def test_generated_lines_never_break_inside_literals():
    text = generate_source(
        resources_of({"weird": "a b\rc\x0bd"}),
        include_default_value=True,
    )
    for line in text.split("\n"):
        assert line.count('"') % 2 == 0


def test_collision_stops_generation():
    with pytest.raises(NamespaceCollisionError):
        generate_source(resources_of({"settings": "Settings", "settings.title": "Title"}))


def test_access_level_resolution(monkeypatch):
    monkeypatch.delenv(ACCESS_LEVEL_ENV, raising=False)
    assert AccessLevel.resolve() == AccessLevel.INTERNAL
    assert AccessLevel.resolve(config="public") == AccessLevel.PUBLIC

    monkeypatch.setenv(ACCESS_LEVEL_ENV, "package")
    assert AccessLevel.resolve(config="public") == AccessLevel.PACKAGE
    assert AccessLevel.resolve(cli="Public", config="internal") == AccessLevel.PUBLIC

    with pytest.raises(ValueError):
        AccessLevel.parse("private")


def test_write_source_skips_unchanged(tmp_path):
    out = tmp_path / "Generated" / "Strings.swift"
    assert write_source(out, "a\n", dry_run=True)
    assert not out.exists()

    assert write_source(out, "a\n")
    assert out.read_text(encoding="utf-8") == "a\n"
    assert not write_source(out, "a\n")
    assert not (tmp_path / "Generated" / "Strings.swift.tmp").exists()


def test_default_value_delimiter_grows_when_text_contains_terminator():
    literal = default_value_literal(scan('ends with "### here %@'))
    assert literal == '####"ends with "### here \\####(arg1)"####'


def test_empty_text_still_gets_doc_comment():
    text = generate_source(resources_of({"blank": ""}))
    assert "  ///\n  internal static var blank: LocalizationKey {" in text
