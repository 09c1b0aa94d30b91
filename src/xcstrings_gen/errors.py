from __future__ import annotations

from typing import Iterable, Sequence, Tuple

from .models import PlaceholderKind


# =========================
# I/O / setup errors
# =========================

class CatalogError(RuntimeError):
    """`.xcstrings` 文件无法读取或结构不合法。"""
    pass


class ConfigError(RuntimeError):
    """用于启动阶段的配置错误（更友好的报错与解决建议）"""
    pass


# =========================
# Generation errors
# =========================

class GenerationError(ValueError):
    """Base class for everything that makes a resource (or a run) ungeneratable."""
    pass


class TypeConflictError(GenerationError):
    def __init__(self, key: str, position: int, kinds: Iterable[PlaceholderKind]):
        self.key = key
        self.position = position
        self.kinds: Tuple[PlaceholderKind, ...] = tuple(sorted(set(kinds), key=lambda k: k.value))
        names = ", ".join(k.value for k in self.kinds)
        super().__init__(f"'{key}': argument {position} is used with conflicting types ({names})")


class PositionCollisionError(TypeConflictError):
    """Implicit and explicit numbering claimed the same slot inside one variant."""

    def __init__(self, key: str, position: int, kinds: Iterable[PlaceholderKind], text: str = ""):
        super().__init__(key, position, kinds)
        self.text = text
        self.args = (
            f"'{key}': argument {position} is addressed both implicitly and explicitly in {text!r}",
        )


class GapError(GenerationError):
    def __init__(self, key: str, positions: Sequence[int]):
        self.key = key
        self.positions: Tuple[int, ...] = tuple(sorted(positions))
        expected = set(range(1, max(self.positions) + 1)) if self.positions else set()
        self.missing: Tuple[int, ...] = tuple(sorted(expected - set(self.positions)))
        super().__init__(
            f"'{key}': argument positions {list(self.positions)} are not contiguous "
            f"(missing {list(self.missing)})"
        )


class NamespaceCollisionError(GenerationError):
    def __init__(self, path: Sequence[str], names: Sequence[str]):
        self.path: Tuple[str, ...] = tuple(path)
        self.names: Tuple[str, ...] = tuple(names)
        where = ".".join(self.path) or "<root>"
        super().__init__(f"{where}: generated names collide: {list(self.names)}")


class SubstitutionOverlapError(GenerationError):
    def __init__(self, key: str, token: str):
        self.key = key
        self.token = token
        super().__init__(
            f"substitution '{key}' expands to text containing another substitution marker {token!r}"
        )


class DuplicateKeyError(GenerationError):
    def __init__(self, duplicates: Sequence[str], sources: Sequence[str] = ()):
        self.duplicates: Tuple[str, ...] = tuple(duplicates)
        self.sources: Tuple[str, ...] = tuple(sources)
        where = f" ({', '.join(self.sources)})" if self.sources else ""
        super().__init__(f"duplicate keys{where}: {list(self.duplicates)}")


class InvalidKeyError(GenerationError):
    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"invalid key {key!r}: {reason}")
