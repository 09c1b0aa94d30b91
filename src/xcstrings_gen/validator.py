from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from .errors import DuplicateKeyError, InvalidKeyError
from .models import Resource


def find_duplicate_keys(catalogs: Mapping[str, Sequence[Resource]]) -> Dict[str, List[str]]:
    """
    扫描多个 catalog 中重复出现的 key。
    返回：{key: [catalog1, catalog2, ...]}（仅保留重复项；同一 catalog 内重复也算）
    """
    seen: Dict[str, List[str]] = {}
    for name, resources in catalogs.items():
        for r in resources:
            seen.setdefault(r.key, []).append(name)
    return {k: v for k, v in sorted(seen.items()) if len(v) >= 2}


def validate_resources(resources: Sequence[Resource], source: Optional[Path] = None) -> None:
    """
    生成前的防爆：key 必须每段非空、且不能重复（否则 Swift 编译炸）。
    """
    for r in resources:
        if not r.key:
            raise InvalidKeyError(r.key, "key is empty")
        if any(not c for c in r.key_components):
            raise InvalidKeyError(r.key, "key has an empty component (leading, trailing or double '.')")

    name = str(source) if source else "<resources>"
    dups = find_duplicate_keys({name: resources})
    if dups:
        raise DuplicateKeyError(sorted(dups), sources=[name])
