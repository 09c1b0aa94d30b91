from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

from .errors import NamespaceCollisionError
from .identifiers import bare, type_identifier
from .models import NamespaceNode, Resource


def build_tree(resources: Sequence[Resource], key_path: Tuple[str, ...] = ()) -> NamespaceNode:
    """
    Group resources by their dot-delimited key components.

    - leaves at this level: sorted case-insensitively by full key
    - child groups: sorted by component name (case-sensitive)
    """
    depth = len(key_path)

    strings = sorted(
        (r for r in resources if len(r.key_components) == depth + 1),
        key=lambda r: r.key.lower(),
    )

    grouped: Dict[str, List[Resource]] = {}
    for r in resources:
        if len(r.key_components) > depth + 1:
            grouped.setdefault(r.key_components[depth], []).append(r)

    children = tuple(
        build_tree(grouped[name], key_path + (name,))
        for name in sorted(grouped)
    )

    return NamespaceNode(
        name=key_path[-1] if key_path else "",
        children=children,
        strings=tuple(strings),
    )


def iter_resources(node: NamespaceNode, path: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], Resource]]:
    """Depth-first (path, resource) pairs in emission order: child groups first, then leaves."""
    for child in node.children:
        yield from iter_resources(child, path + (child.name,))
    for r in node.strings:
        yield path, r


def find_collisions(node: NamespaceNode, path: Tuple[str, ...] = ()) -> List[NamespaceCollisionError]:
    """
    同一层里 enum 名与 static 成员名（驼峰化后）撞名会导致 Swift 编译失败，
    这里把所有冲突都收集出来（按树的遍历顺序）。
    """
    found: List[NamespaceCollisionError] = []

    bucket: Dict[str, List[str]] = {}
    for child in node.children:
        bucket.setdefault(bare(type_identifier(child.name)), []).append(child.name)
    for r in node.strings:
        bucket.setdefault(bare(r.identifier), []).append(r.key)

    for name in sorted(bucket):
        sources = bucket[name]
        if len(sources) >= 2:
            found.append(NamespaceCollisionError(path + (name,), sources))

    for child in node.children:
        found.extend(find_collisions(child, path + (child.name,)))
    return found


def check_collisions(node: NamespaceNode) -> None:
    collisions = find_collisions(node)
    if collisions:
        raise collisions[0]
