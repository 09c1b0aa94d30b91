from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union


# =========================
# Placeholder kinds
# =========================

class PlaceholderKind(str, Enum):
    """Semantic argument type implied by a format specifier's conversion letter."""
    OBJECT = "object"
    INT = "int"
    UINT = "uint"
    DOUBLE = "double"
    CHAR = "char"
    CSTRING = "cstring"
    POINTER = "pointer"

    @classmethod
    def from_conversion(cls, conversion: str) -> Optional["PlaceholderKind"]:
        """
        conversion 为匹配到的转换部分（含长度修饰符），例如 "@", "lld", "hhx", "f"。
        长度修饰符不影响 kind，只看最后一个字母。
        """
        if not conversion:
            return None
        return _KIND_BY_LETTER.get(conversion[-1])

    @property
    def family(self) -> str:
        return _FAMILY_BY_KIND[self]


_KIND_BY_LETTER: Dict[str, PlaceholderKind] = {
    "@": PlaceholderKind.OBJECT,
    "d": PlaceholderKind.INT,
    "i": PlaceholderKind.INT,
    "o": PlaceholderKind.UINT,
    "u": PlaceholderKind.UINT,
    "x": PlaceholderKind.UINT,
    "a": PlaceholderKind.DOUBLE,
    "e": PlaceholderKind.DOUBLE,
    "f": PlaceholderKind.DOUBLE,
    "g": PlaceholderKind.DOUBLE,
    "c": PlaceholderKind.CHAR,
    "s": PlaceholderKind.CSTRING,
    "p": PlaceholderKind.POINTER,
}

_FAMILY_BY_KIND: Dict[PlaceholderKind, str] = {
    PlaceholderKind.OBJECT: "object",
    PlaceholderKind.INT: "integer",
    PlaceholderKind.UINT: "integer",
    PlaceholderKind.DOUBLE: "float",
    PlaceholderKind.CHAR: "string",
    PlaceholderKind.CSTRING: "string",
    PlaceholderKind.POINTER: "string",
}


# =========================
# Segments
# =========================

@dataclass(frozen=True)
class Literal:
    """Plain text between placeholders. `%%` pairs are kept verbatim in `text`."""
    text: str

    @property
    def content(self) -> str:
        return self.text

    @property
    def rendered(self) -> str:
        # String(format:) 输出时 %% 会变成单个 %
        return self.text.replace("%%", "%")


@dataclass(frozen=True)
class Placeholder:
    """
    One format placeholder occurrence.
    - specifier: exact matched substring, e.g. "%1$.2f"
    - position: explicit 1-based index ("%2$d" -> 2), None for implicit numbering
    """
    kind: PlaceholderKind
    specifier: str
    position: Optional[int] = None

    @property
    def content(self) -> str:
        return self.specifier


Segment = Union[Literal, Placeholder]


def segments_text(segments: Tuple[Segment, ...]) -> str:
    """Rebuild the (expanded) source text from its segments."""
    return "".join(s.content for s in segments)


# =========================
# Resources
# =========================

@dataclass(frozen=True)
class Argument:
    name: str
    kind: PlaceholderKind
    position: int
    label: Optional[str] = None


@dataclass(frozen=True)
class Resource:
    """One catalog key reduced to what the emitter needs."""
    key: str
    identifier: str
    key_components: Tuple[str, ...]
    default_value: Tuple[Segment, ...] = field(default_factory=tuple)
    arguments: Tuple[Argument, ...] = field(default_factory=tuple)
    comment: Optional[str] = None

    @property
    def has_arguments(self) -> bool:
        return bool(self.arguments)


@dataclass(frozen=True)
class NamespaceNode:
    """
    Tree node grouping resources by shared dot-delimited key prefix.
    - children: sorted by name (case-sensitive)
    - strings: sorted case-insensitively by full key
    """
    name: str
    children: Tuple["NamespaceNode", ...] = field(default_factory=tuple)
    strings: Tuple[Resource, ...] = field(default_factory=tuple)

    def child(self, name: str) -> Optional["NamespaceNode"]:
        for c in self.children:
            if c.name == name:
                return c
        return None


# =========================
# Reporting Models (extract/validate output)
# =========================

class IssueLevel(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


class IssueCode(str, Enum):
    TYPE_CONFLICT = "type_conflict"
    POSITION_GAP = "position_gap"
    SUBSTITUTION_OVERLAP = "substitution_overlap"
    STALE_KEY = "stale_key"


@dataclass(frozen=True)
class Issue:
    level: IssueLevel
    code: IssueCode
    message: str

    # Optional context
    key: Optional[str] = None
    path: Optional[Path] = None

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ExtractionResult:
    """Resources that survived extraction plus everything worth reporting."""
    resources: Tuple[Resource, ...] = field(default_factory=tuple)
    issues: Tuple[Issue, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return all(i.level != IssueLevel.ERROR for i in self.issues)

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(r.key for r in self.resources)

    def counts_by_level(self) -> Dict[str, int]:
        d: Dict[str, int] = {"info": 0, "warn": 0, "error": 0}
        for i in self.issues:
            d[i.level.value] = d.get(i.level.value, 0) + 1
        return d
