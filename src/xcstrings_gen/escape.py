from __future__ import annotations

from typing import List

# Swift 视为换行的全部 scalar（写进单行字面量会把生成文件断行）
_NEWLINES = frozenset("\n\r\x0b\x0c\x85\u2028\u2029")

_SHORT_CODES = {
    "\r": "r",
    "\n": "n",
    "\t": "t",
    "\0": "0",
}


def _is_printable_ascii(ch: str) -> bool:
    # U+20 之前的不可见字符、以及 U+7F(DEL) 及以上都不算
    return 0x20 <= ord(ch) < 0x7F


def needs_escaping(ch: str, multiline: bool = False) -> bool:
    if ch in _NEWLINES:
        return True
    if ord(ch) > 0x7F or _is_printable_ascii(ch):
        return False
    if ch == "\t":
        # 单行字面量里 tab 必须转义；多行字面量可以保留
        return not multiline
    return True


def escape_for_string_literal(text: str, delimiter: str = "", multiline: bool = False) -> str:
    """
    Replace line breaks and ASCII control characters with `\\<delimiter><code>`
    escapes (`r`, `n`, `t`, `0` or `u{hex}`).

    Works per code point, so "\\r\\n" becomes two escapes. Everything else,
    non-ASCII included, is copied unchanged.
    """
    out: List[str] = []
    for ch in text:
        if not needs_escaping(ch, multiline):
            out.append(ch)
            continue
        code = _SHORT_CODES.get(ch) or f"u{{{ord(ch):x}}}"
        out.append(f"\\{delimiter}{code}")
    return "".join(out)


def raw_delimiter(text: str, minimum: str = "#") -> str:
    """
    Shortest run of '#' (at least `minimum`) that `text` cannot terminate or
    escape inside a raw literal: neither `"<delim>` nor `\\<delim>` may occur.
    """
    delimiter = minimum
    while f'"{delimiter}' in text or f"\\{delimiter}" in text:
        delimiter += "#"
    return delimiter


def swift_string_literal(text: str, delimiter: str = "") -> str:
    """
    Complete single-line Swift string literal for `text`.
    - delimiter 非空：raw string（#"..."#），反斜杠与引号无需转义；
      文本里出现 `"#` 之类时自动加长分隔符
    - delimiter 为空：普通字符串，先转义反斜杠和双引号
    """
    if delimiter:
        delimiter = raw_delimiter(text, delimiter)
        body = escape_for_string_literal(text, delimiter=delimiter)
        return f'{delimiter}"{body}"{delimiter}'

    # 顺序很重要：先转义反斜杠
    body = text.replace("\\", "\\\\").replace('"', '\\"')
    body = escape_for_string_literal(body)
    return f'"{body}"'
