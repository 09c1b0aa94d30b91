from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, Optional

from .models import PlaceholderKind


# printf 风格占位符（Apple String Format Specifiers 的子集）：
#   %[n$][flag][width][.precision]conversion
# - 位置只接受正整数，允许前导 0（%01$d 即位置 1；%0$d 不算占位符）
# - width / precision 只支持一位数字
# - conversion 决定 PlaceholderKind；长度修饰符只对整数族有效
SPECIFIER_RE = re.compile(
    r"""
    %
    (?:(?P<position>0*[1-9][0-9]*)\$)?
    (?P<flag>[-+\# 0])?
    (?P<width>[0-9])?
    (?:\.(?P<precision>[0-9]))?
    (?P<conversion>
        @
      | (?:hh|h|ll|l|q|z|t|j)?[dioux]
      | [aefg]
      | [csp]
    )
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class SpecifierMatch:
    specifier: str
    position: Optional[int]
    kind: PlaceholderKind
    start: int
    end: int


def _to_match(m: "re.Match[str]") -> SpecifierMatch:
    kind = PlaceholderKind.from_conversion(m.group("conversion"))
    if kind is None:  # pragma: no cover - regex 只放行已知字母
        raise AssertionError(f"unclassified conversion: {m.group(0)!r}")
    pos = m.group("position")
    return SpecifierMatch(
        specifier=m.group(0),
        position=int(pos) if pos else None,
        kind=kind,
        start=m.start(),
        end=m.end(),
    )


def match_specifier(text: str, pos: int = 0) -> Optional[SpecifierMatch]:
    """
    Try to match one specifier that starts exactly at `pos` (which must be a '%').
    Returns None when the occurrence cannot be classified; the caller keeps it as text.
    """
    m = SPECIFIER_RE.match(text, pos)
    if not m:
        return None
    return _to_match(m)


def iter_specifiers(text: str) -> Iterator[SpecifierMatch]:
    """All non-overlapping specifier matches, left to right."""
    for m in SPECIFIER_RE.finditer(text):
        yield _to_match(m)


def kind_of(specifier: str) -> Optional[PlaceholderKind]:
    """Kind of a complete specifier string such as "%1$lld"; None if it is not one."""
    m = SPECIFIER_RE.fullmatch(specifier)
    if not m:
        return None
    return PlaceholderKind.from_conversion(m.group("conversion"))
