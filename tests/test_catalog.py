import json

import pytest

from conftest import unit, write_catalog
from xcstrings_gen.catalog import Substitution, load_catalog, parse_catalog
from xcstrings_gen.errors import CatalogError


def test_load_simple_catalog(tmp_path):
    path = write_catalog(tmp_path / "Localizable.xcstrings", {"hello": "Hello, %@!", "bye": "Bye"})
    catalog = load_catalog(path)
    assert catalog.source_language == "en"
    assert catalog.table_name == "Localizable"
    assert catalog.keys == ("hello", "bye")
    assert catalog.entries[0].value == "Hello, %@!"


def test_missing_source_localization_uses_key():
    catalog = parse_catalog({
        "sourceLanguage": "en",
        "strings": {
            "Welcome back": {},
            "only.fr": {"localizations": {"fr": unit("Bonjour")}},
        },
    })
    assert [e.default_text() for e in catalog.entries] == ["Welcome back", "only.fr"]
    assert catalog.entries[0].base_texts() == ["Welcome back"]


def test_nested_variations_are_flattened():
    catalog = parse_catalog({
        "sourceLanguage": "en",
        "strings": {
            "inbox": {
                "localizations": {
                    "en": {
                        "variations": {
                            "device": {
                                "iphone": {
                                    "variations": {
                                        "plural": {
                                            "one": unit("%lld message"),
                                            "other": unit("%lld messages"),
                                        }
                                    }
                                },
                                "other": unit("%lld messages on this device"),
                            }
                        }
                    }
                }
            }
        },
    })
    entry = catalog.entries[0]
    assert entry.value is None
    assert entry.variations == (
        ("device.iphone.plural.one", "%lld message"),
        ("device.iphone.plural.other", "%lld messages"),
        ("device.other", "%lld messages on this device"),
    )
    # default 取第一个 label 末段为 other 的分支
    assert entry.default_text() == "%lld messages"


def test_substitutions():
    catalog = parse_catalog({
        "sourceLanguage": "en",
        "strings": {
            "cart.count": {
                "comment": "Cart badge",
                "localizations": {
                    "en": {
                        "stringUnit": {"state": "new", "value": "%#@count@ in cart"},
                        "substitutions": {
                            "count": {
                                "argNum": 1,
                                "formatSpecifier": "lld",
                                "variations": {
                                    "plural": {
                                        "one": unit("%arg item"),
                                        "other": unit("%arg items"),
                                    }
                                },
                            }
                        },
                    }
                },
            }
        },
    })
    entry = catalog.entries[0]
    assert entry.comment == "Cart badge"
    (sub,) = entry.substitutions
    assert sub == Substitution(
        name="count",
        format_specifier="lld",
        arg_num=1,
        variations=(("plural.one", "%arg item"), ("plural.other", "%arg items")),
    )
    assert sub.texts() == ["%lld item", "%lld items"]
    assert sub.texts(positional=True) == ["%1$lld item", "%1$lld items"]
    assert sub.primary_text() == "%lld items"


def test_substitution_without_other_uses_last_case():
    sub = Substitution(name="n", format_specifier="d", variations=(("plural.zero", "none"), ("plural.few", "%arg few")))
    assert sub.primary_text() == "%d few"
    assert Substitution(name="n").primary_text() is None


def test_stale_flag():
    catalog = parse_catalog({
        "sourceLanguage": "en",
        "strings": {"old": {"extractionState": "stale", "localizations": {"en": unit("Old")}}},
    })
    assert catalog.entries[0].is_stale


@pytest.mark.parametrize(
    "obj",
    [
        [],
        {"strings": {}},
        {"sourceLanguage": "en", "strings": []},
        {"sourceLanguage": "en", "strings": {"k": {"localizations": {"en": {"stringUnit": {"value": 1}}}}}},
        {"sourceLanguage": "en", "strings": {"k": {"localizations": {"en": {
            "stringUnit": {"value": "%#@n@"},
            "substitutions": {"n": {"argNum": 0}},
        }}}}},
    ],
)
def test_malformed_catalog(obj):
    with pytest.raises(CatalogError):
        parse_catalog(obj)


def test_load_errors_mention_path(tmp_path):
    with pytest.raises(CatalogError):
        load_catalog(tmp_path / "missing.xcstrings")

    bad = tmp_path / "Bad.xcstrings"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError) as ei:
        load_catalog(bad)
    assert "Bad.xcstrings" in str(ei.value)


def test_catalog_keeps_file_order(tmp_path):
    path = tmp_path / "L.xcstrings"
    path.write_text(json.dumps({
        "sourceLanguage": "de",
        "strings": {"z": {}, "a": {}, "m": {}},
    }), encoding="utf-8")
    assert load_catalog(path).keys == ("z", "a", "m")
