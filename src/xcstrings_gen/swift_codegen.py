from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .arguments import argument_name, effective_positions
from .escape import escape_for_string_literal, raw_delimiter, swift_string_literal
from .identifiers import type_identifier
from .models import Literal, NamespaceNode, PlaceholderKind, Resource, Segment, segments_text
from .tree import build_tree, check_collisions


ACCESS_LEVEL_ENV = "XCSTRINGS_GEN_ACCESS_LEVEL"
DEFAULT_TYPE_NAME = "LocalizationKey"

# defaultValue 使用的 raw string 分隔符
RAW_DELIMITER = "###"

SWIFT_TYPES: Dict[PlaceholderKind, str] = {
    PlaceholderKind.OBJECT: "String",
    PlaceholderKind.INT: "Int",
    PlaceholderKind.UINT: "UInt",
    PlaceholderKind.DOUBLE: "Double",
    PlaceholderKind.CHAR: "CChar",
    PlaceholderKind.CSTRING: "UnsafePointer<CChar>",
    PlaceholderKind.POINTER: "UnsafeRawPointer",
}


class AccessLevel(str, Enum):
    INTERNAL = "internal"
    PUBLIC = "public"
    PACKAGE = "package"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["AccessLevel"]:
        s = (value or "").strip().lower()
        if not s:
            return None
        for lv in cls:
            if lv.value == s:
                return lv
        raise ValueError(f"未知 access level：{value}（可选：{', '.join(x.value for x in cls)}）")

    @classmethod
    def resolve(cls, cli: Optional[str] = None, config: Optional[str] = None) -> "AccessLevel":
        """命令行 > 环境变量 > 配置 > internal"""
        for candidate in (cli, os.environ.get(ACCESS_LEVEL_ENV), config):
            lv = cls.parse(candidate)
            if lv is not None:
                return lv
        return cls.INTERNAL


# ----------------------------
# Resource -> Swift 片段
# ----------------------------

def doc_comment_lines(resource: Resource) -> List[str]:
    """原文（含 specifier）按行拆成 /// 注释；空文案也保留一行 `///`。"""
    text = segments_text(resource.default_value)
    return [f"/// {line}".rstrip() for line in text.splitlines() or [""]]


def default_value_literal(segments: Sequence[Segment], delimiter: str = RAW_DELIMITER) -> str:
    """
    Interpolated raw literal reproducing the default text, e.g.
    `###"Hello, \\###(arg1)!"###`. The delimiter grows when the text itself
    contains `"###` or `\\###`.
    """
    delimiter = raw_delimiter(
        "".join(seg.rendered for seg in segments if isinstance(seg, Literal)),
        delimiter,
    )
    positions = iter(effective_positions(segments))
    parts: List[str] = []
    for seg in segments:
        if isinstance(seg, Literal):
            parts.append(escape_for_string_literal(seg.rendered, delimiter=delimiter))
        else:
            _placeholder, pos = next(positions)
            parts.append(f"\\{delimiter}({argument_name(pos)})")
    return f'{delimiter}"{"".join(parts)}"{delimiter}'


def _constructor_call(resource: Resource, type_name: str, include_default_value: bool) -> str:
    args = [swift_string_literal(resource.key)]
    if resource.arguments:
        args.append("arguments: [" + ", ".join(a.name for a in resource.arguments) + "]")
    if include_default_value:
        args.append("defaultValue: " + default_value_literal(resource.default_value))
    return f"{type_name}({', '.join(args)})"


def resource_declaration(
        resource: Resource,
        *,
        access_level: AccessLevel,
        type_name: str = DEFAULT_TYPE_NAME,
        include_default_value: bool = False,
        indent: str = "  ",
) -> List[str]:
    lines = doc_comment_lines(resource)

    if not resource.arguments:
        lines.append(f"{access_level.value} static var {resource.identifier}: {type_name} {{")
    else:
        params = ", ".join(f"_ {a.name}: {SWIFT_TYPES[a.kind]}" for a in resource.arguments)
        lines.append(f"{access_level.value} static func {resource.identifier}({params}) -> {type_name} {{")

    lines.append(indent + _constructor_call(resource, type_name, include_default_value))
    lines.append("}")
    return lines


# ----------------------------
# 树 -> Swift 源文件
# ----------------------------

def _node_block(
        node: NamespaceNode,
        *,
        access_level: AccessLevel,
        type_name: str,
        include_default_value: bool,
        indent: str,
) -> List[str]:
    """Members of one node: nested enums first, then the node's own resources."""
    blocks: List[List[str]] = []

    for child in node.children:
        block = [f"{access_level.value} enum {type_identifier(child.name)} {{"]
        for line in _node_block(
                child,
                access_level=access_level,
                type_name=type_name,
                include_default_value=include_default_value,
                indent=indent,
        ):
            block.append(indent + line if line else "")
        block.append("}")
        blocks.append(block)

    for r in node.strings:
        blocks.append(resource_declaration(
            r,
            access_level=access_level,
            type_name=type_name,
            include_default_value=include_default_value,
            indent=indent,
        ))

    lines: List[str] = []
    for i, block in enumerate(blocks):
        if i:
            lines.append("")
        lines.extend(block)
    return lines


def generate_source(
        resources: Sequence[Resource],
        *,
        table_name: str = "Localizable",
        access_level: AccessLevel = AccessLevel.INTERNAL,
        type_name: str = DEFAULT_TYPE_NAME,
        include_default_value: bool = False,
        indent: int = 2,
) -> str:
    """
    Swift source for `resources`, grouped into nested enums by key prefix.
    Raises NamespaceCollisionError before emitting anything.
    """
    tree = build_tree(resources)
    check_collisions(tree)

    pad = " " * indent
    lines: List[str] = []
    lines.append("// swiftlint:disable all")
    lines.append("")
    lines.append(f"// Generated using xcstrings_gen from {table_name}.xcstrings")
    lines.append("")
    lines.append("import Foundation")
    lines.append("")
    lines.append(f"extension {type_name} {{")
    for line in _node_block(
            tree,
            access_level=access_level,
            type_name=type_name,
            include_default_value=include_default_value,
            indent=pad,
    ):
        lines.append(pad + line if line else "")
    lines.append("}")
    lines.append("")
    lines.append("// swiftlint:enable all")
    lines.append("")
    return "\n".join(lines)


def write_source(path: Path, text: str, *, dry_run: bool = False) -> bool:
    """写入生成结果；内容未变化时不写（返回 False）。"""
    path = Path(path)
    if path.exists() and path.read_text(encoding="utf-8") == text:
        return False
    if dry_run:
        return True

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp.write_text(text, encoding="utf-8")
        tmp.replace(path)
    finally:
        if tmp.exists():
            tmp.unlink()
    return True
