from __future__ import annotations

from typing import List

# Swift 保留字：作为标识符时需要反引号包裹
SWIFT_KEYWORDS = frozenset({
    "associatedtype", "class", "deinit", "enum", "extension", "fileprivate", "func",
    "import", "init", "inout", "internal", "let", "open", "operator", "private",
    "precedencegroup", "protocol", "public", "rethrows", "static", "struct", "subscript",
    "typealias", "var", "break", "case", "catch", "continue", "default", "defer", "do",
    "else", "fallthrough", "for", "guard", "if", "in", "repeat", "return", "throw",
    "switch", "where", "while", "Any", "as", "await", "false", "is", "nil", "self",
    "Self", "super", "throws", "true", "try", "package",
})


def _words(s: str) -> List[str]:
    """按非字母数字字符分词（'.', '_', '-', 空格 等都视为分隔符）。"""
    words: List[str] = []
    cur = ""
    for ch in s:
        if ch.isalnum():
            cur += ch
        elif cur:
            words.append(cur)
            cur = ""
    if cur:
        words.append(cur)
    return words


def _finish(out: str) -> str:
    if not out:
        return "_"
    # Swift 标识符不能以数字开头
    if out[0].isdigit():
        out = "_" + out
    if out in SWIFT_KEYWORDS:
        out = f"`{out}`"
    return out


def variable_identifier(component: str) -> str:
    """
    lowerCamelCase name for a static var/func, e.g. "item_count" -> "itemCount",
    "Title" -> "title". Existing camel humps are kept ("historyLocations").
    """
    words = _words(component)
    if not words:
        return _finish("")
    first = words[0]
    out = first[:1].lower() + first[1:]
    for w in words[1:]:
        out += w[:1].upper() + w[1:]
    return _finish(out)


def type_identifier(component: str) -> str:
    """Name for a nested enum; separators are dropped, casing is kept as written."""
    words = _words(component)
    out = words[0] if words else ""
    for w in words[1:]:
        out += w[:1].upper() + w[1:]
    return _finish(out)


def bare(identifier: str) -> str:
    """Identifier without keyword backticks, used when comparing names."""
    return identifier.strip("`")
