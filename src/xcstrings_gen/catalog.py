from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from .errors import CatalogError


# =========================
# Models
# =========================

ARG_TOKEN = "%arg"


@dataclass(frozen=True)
class Substitution:
    """
    One `substitutions.<name>` block of a source localization.
    variations 里的文本仍保留 `%arg`，由 resolve() 按需替换成具体 specifier。
    """
    name: str
    format_specifier: str = "@"
    arg_num: Optional[int] = None
    variations: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)  # (label, text)

    def specifier(self, positional: bool = False) -> str:
        if positional and self.arg_num:
            return f"%{self.arg_num}${self.format_specifier}"
        return f"%{self.format_specifier}"

    def resolve(self, text: str, positional: bool = False) -> str:
        return text.replace(ARG_TOKEN, self.specifier(positional))

    def texts(self, positional: bool = False) -> List[str]:
        return [self.resolve(t, positional) for _label, t in self.variations]

    def primary_text(self, positional: bool = False) -> Optional[str]:
        """The `other` case if there is one, else the last case."""
        if not self.variations:
            return None
        for label, text in self.variations:
            if label.rsplit(".", 1)[-1] == "other":
                return self.resolve(text, positional)
        return self.resolve(self.variations[-1][1], positional)


@dataclass(frozen=True)
class CatalogEntry:
    key: str
    value: Optional[str] = None
    variations: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)  # (label, text)
    substitutions: Tuple[Substitution, ...] = field(default_factory=tuple)
    comment: Optional[str] = None
    extraction_state: Optional[str] = None

    @property
    def is_stale(self) -> bool:
        return self.extraction_state == "stale"

    def default_text(self) -> str:
        """value > variations 中的 other > 第一个 variation > key 本身"""
        if self.value is not None:
            return self.value
        for label, text in self.variations:
            if label.rsplit(".", 1)[-1] == "other":
                return text
        if self.variations:
            return self.variations[0][1]
        return self.key

    def base_texts(self) -> List[str]:
        """Every top-level text of the entry: its value, or each variation."""
        if self.value is not None:
            return [self.value]
        if self.variations:
            return [t for _label, t in self.variations]
        return [self.key]


@dataclass(frozen=True)
class Catalog:
    source_language: str
    entries: Tuple[CatalogEntry, ...] = field(default_factory=tuple)
    version: str = "1.0"
    path: Optional[Path] = None

    @property
    def table_name(self) -> str:
        return self.path.stem if self.path else "Localizable"

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(e.key for e in self.entries)


# =========================
# Parsing
# =========================

def _where(source: Optional[Path]) -> str:
    return f"{source}: " if source else ""


def _as_dict(obj: Any, what: str, source: Optional[Path]) -> Dict[str, Any]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise CatalogError(f"{_where(source)}{what} 必须是 object，实际是 {type(obj).__name__}")
    return obj


def _string_unit_value(node: Dict[str, Any], what: str, source: Optional[Path]) -> Optional[str]:
    unit = _as_dict(node.get("stringUnit"), f"{what}.stringUnit", source)
    if not unit:
        return None
    value = unit.get("value")
    if not isinstance(value, str):
        raise CatalogError(f"{_where(source)}{what}.stringUnit.value 必须是字符串")
    return value


def _flatten_variations(
        variations: Dict[str, Any],
        *,
        what: str,
        source: Optional[Path],
        prefix: str = "",
) -> List[Tuple[str, str]]:
    """
    plural / device 可以互相嵌套，这里拍平成 (label, text)：
      {"device": {"iphone": {"variations": {"plural": {"one": ...}}}}}
      -> [("device.iphone.plural.one", "...")]
    """
    out: List[Tuple[str, str]] = []
    for axis, cases in variations.items():
        cases = _as_dict(cases, f"{what}.variations.{axis}", source)
        for case, node in cases.items():
            label = f"{prefix}{axis}.{case}"
            node = _as_dict(node, f"{what}.{label}", source)
            value = _string_unit_value(node, f"{what}.{label}", source)
            if value is not None:
                out.append((label, value))
            nested = _as_dict(node.get("variations"), f"{what}.{label}.variations", source)
            if nested:
                out.extend(_flatten_variations(nested, what=what, source=source, prefix=label + "."))
    return out


def _parse_substitution(name: str, obj: Any, *, what: str, source: Optional[Path]) -> Substitution:
    obj = _as_dict(obj, f"{what}.substitutions.{name}", source)

    arg_num = obj.get("argNum")
    if arg_num is not None and (not isinstance(arg_num, int) or isinstance(arg_num, bool) or arg_num < 1):
        raise CatalogError(f"{_where(source)}{what}.substitutions.{name}.argNum 必须是正整数")

    fmt = obj.get("formatSpecifier") or "@"
    if not isinstance(fmt, str):
        raise CatalogError(f"{_where(source)}{what}.substitutions.{name}.formatSpecifier 必须是字符串")

    variations = _flatten_variations(
        _as_dict(obj.get("variations"), f"{what}.substitutions.{name}.variations", source),
        what=f"{what}.substitutions.{name}",
        source=source,
    )
    return Substitution(name=name, format_specifier=fmt, arg_num=arg_num, variations=tuple(variations))


def _parse_entry(key: str, obj: Any, *, source_language: str, source: Optional[Path]) -> CatalogEntry:
    obj = _as_dict(obj, f"strings[{key!r}]", source)
    what = f"strings[{key!r}].localizations.{source_language}"

    comment = obj.get("comment")
    if comment is not None and not isinstance(comment, str):
        comment = str(comment)

    localizations = _as_dict(obj.get("localizations"), f"strings[{key!r}].localizations", source)
    loc = _as_dict(localizations.get(source_language), what, source)

    # 源语言没有 localization：Xcode 约定 key 即文案
    if not loc:
        return CatalogEntry(key=key, comment=comment, extraction_state=obj.get("extractionState"))

    value = _string_unit_value(loc, what, source)
    variations = _flatten_variations(_as_dict(loc.get("variations"), f"{what}.variations", source), what=what, source=source)
    subs = _as_dict(loc.get("substitutions"), f"{what}.substitutions", source)
    substitutions = tuple(_parse_substitution(n, s, what=what, source=source) for n, s in subs.items())

    return CatalogEntry(
        key=key,
        value=value,
        variations=tuple(variations),
        substitutions=substitutions,
        comment=comment,
        extraction_state=obj.get("extractionState"),
    )


def parse_catalog(obj: Any, source: Optional[Path] = None) -> Catalog:
    """Turn the decoded `.xcstrings` JSON into a Catalog (source language only)."""
    obj = _as_dict(obj, "catalog", source)

    source_language = obj.get("sourceLanguage")
    if not isinstance(source_language, str) or not source_language.strip():
        raise CatalogError(f"{_where(source)}缺少 sourceLanguage")

    strings = _as_dict(obj.get("strings"), "strings", source)
    entries = tuple(
        _parse_entry(key, entry, source_language=source_language, source=source)
        for key, entry in strings.items()
    )
    return Catalog(
        source_language=source_language,
        entries=entries,
        version=str(obj.get("version") or "1.0"),
        path=source,
    )


def load_catalog(path: Path) -> Catalog:
    path = Path(path)
    if not path.exists():
        raise CatalogError(f"未找到 String Catalog：{path}")
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CatalogError(f"{path}: 解析失败：{e}") from e
    return parse_catalog(obj, source=path)
