from __future__ import annotations

from typing import List, Mapping, Optional

from .errors import SubstitutionOverlapError
from .models import Literal, Placeholder, Segment
from .specifier import iter_specifiers


def substitution_token(name: str) -> str:
    return f"%#@{name}@"


def expand_substitutions(text: str, substitutions: Optional[Mapping[str, str]]) -> str:
    """
    把 %#@name@ 原样替换为对应文本（纯字符串替换，不走正则）。

    替换文本里如果又出现了同一张表里的 marker，结果会依赖替换顺序，
    这里直接报 SubstitutionOverlapError。
    """
    if not substitutions:
        return text

    tokens = {name: substitution_token(name) for name in substitutions}
    for name, replacement in substitutions.items():
        for token in tokens.values():
            if token in replacement:
                raise SubstitutionOverlapError(name, token)

    for name, replacement in substitutions.items():
        text = text.replace(tokens[name], replacement)
    return text


def _trailing_percent_count(s: str) -> int:
    return len(s) - len(s.rstrip("%"))


def scan(text: str, substitutions: Optional[Mapping[str, str]] = None) -> List[Segment]:
    """
    Split `text` into Literal / Placeholder segments after expanding substitutions.

    A match whose preceding text ends with an odd run of '%' is the tail of a
    `%%` escape, so its specifier text is folded into the literal instead.
    """
    text = expand_substitutions(text, substitutions)

    segments: List[Segment] = []
    pending = ""  # 尚未输出的文本（可能吸收了被转义的 specifier）
    last = 0

    for m in iter_specifiers(text):
        prefix = text[last:m.start]
        last = m.end

        if _trailing_percent_count(pending + prefix) % 2 == 1:
            pending += prefix + m.specifier
            continue

        pending += prefix
        if pending:
            segments.append(Literal(pending))
            pending = ""
        segments.append(Placeholder(kind=m.kind, specifier=m.specifier, position=m.position))

    pending += text[last:]
    if pending:
        segments.append(Literal(pending))

    return segments
