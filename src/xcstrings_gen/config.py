from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .errors import ConfigError
from .swift_codegen import DEFAULT_TYPE_NAME, AccessLevel


CONFIG_FILE = "xcstrings_gen.yaml"

_TYPE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


# =========================
# Models
# =========================

@dataclass(frozen=True)
class Options:
    include_default_value: bool = False
    strict: bool = False
    skip_stale: bool = False
    indent: int = 2


@dataclass(frozen=True)
class DiffTarget:
    input: Path
    output: Path


@dataclass(frozen=True)
class XcstringsGenConfig:
    """Normalized config loaded from xcstrings_gen.yaml (paths are absolute)."""
    project_root: Path
    input: Path
    output: Path
    access_level: Optional[AccessLevel] = None
    type_name: str = DEFAULT_TYPE_NAME
    options: Options = field(default_factory=Options)
    diffs: Tuple[DiffTarget, ...] = field(default_factory=tuple)


# =========================
# Helpers
# =========================

def _pkg_file(name: str) -> Path:
    # 内置模板与 config.py 放在同一目录
    return Path(__file__).with_name(name)


def _as_str(x: object, default: str = "") -> str:
    if x is None:
        return default
    s = str(x).strip()
    return s if s else default


def _as_bool(raw: Dict[str, Any], key: str, default: bool) -> bool:
    v = raw.get(key, default)
    if not isinstance(v, bool):
        raise ConfigError(f"options.{key} 必须是 true/false")
    return v


def _resolve(root: Path, p: str) -> Path:
    path = Path(p).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


# =========================
# YAML load / validate
# =========================

def load_config_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigError(
            f"配置文件不存在：{path}\n"
            f"解决方法：运行 `xcstrings_gen init` 生成默认配置，或直接用 --input/--output。"
        )
    try:
        obj = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(
            f"配置文件无法解析为 YAML：{path}\n"
            f"原因：{e}\n"
            f"解决方法：修复 YAML 格式或运行 `xcstrings_gen init` 重新生成。"
        ) from e
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ConfigError("配置文件格式错误：顶层必须是 mapping/object")
    return obj


def parse_config_dict(*, root_dir: Path, raw: Dict[str, Any]) -> XcstringsGenConfig:
    """将 YAML dict 解析为强类型 Config（做字段/类型校验，不检查文件是否存在）。"""
    root_dir = root_dir.resolve()

    for k in ("input", "output"):
        if not isinstance(raw.get(k), str) or not raw[k].strip():
            raise ConfigError(f"{k} 必须是非空字符串")

    try:
        access_level = AccessLevel.parse(_as_str(raw.get("access_level")))
    except ValueError as e:
        raise ConfigError(str(e)) from e

    type_name = _as_str(raw.get("type_name"), DEFAULT_TYPE_NAME)
    if not _TYPE_NAME_RE.match(type_name):
        raise ConfigError(f"type_name 不是合法的 Swift 类型名：{type_name}")

    opt_raw = raw.get("options") or {}
    if not isinstance(opt_raw, dict):
        raise ConfigError("options 必须是 object")
    indent = opt_raw.get("indent", 2)
    if not isinstance(indent, int) or isinstance(indent, bool) or not 1 <= indent <= 8:
        raise ConfigError("options.indent 必须是 1~8 的整数")
    options = Options(
        include_default_value=_as_bool(opt_raw, "include_default_value", False),
        strict=_as_bool(opt_raw, "strict", False),
        skip_stale=_as_bool(opt_raw, "skip_stale", False),
        indent=indent,
    )

    diffs_raw = raw.get("diffs") or []
    if not isinstance(diffs_raw, list):
        raise ConfigError("diffs 必须是数组 list")
    diffs: List[DiffTarget] = []
    for i, item in enumerate(diffs_raw):
        if not isinstance(item, dict):
            raise ConfigError(f"diffs[{i}] 必须是 object")
        d_in = _as_str(item.get("input"))
        d_out = _as_str(item.get("output"))
        if not d_in or not d_out:
            raise ConfigError(f"diffs[{i}] 需要同时提供 input 和 output")
        diffs.append(DiffTarget(input=_resolve(root_dir, d_in), output=_resolve(root_dir, d_out)))

    return XcstringsGenConfig(
        project_root=root_dir,
        input=_resolve(root_dir, raw["input"]),
        output=_resolve(root_dir, raw["output"]),
        access_level=access_level,
        type_name=type_name,
        options=options,
        diffs=tuple(diffs),
    )


def read_config(cfg_path: Path, *, project_root: Optional[Path] = None) -> XcstringsGenConfig:
    cfg_path = cfg_path.resolve()
    root = (project_root or cfg_path.parent).resolve()
    raw = load_config_yaml(cfg_path)
    try:
        return parse_config_dict(root_dir=root, raw=raw)
    except ConfigError as e:
        raise ConfigError(
            f"配置文件校验失败：{cfg_path}\n"
            f"原因：{e}\n"
            f"解决方法：修复配置字段/类型，或运行 `xcstrings_gen init` 重新生成。"
        ) from e


# =========================
# init
# =========================

def init_config(cfg_path: Path) -> bool:
    """
    cfg 不存在：用内置模板生成（保留注释），返回 True；
    cfg 已存在：只校验，返回 False。
    """
    cfg_path = cfg_path.resolve()
    if cfg_path.exists():
        read_config(cfg_path)
        return False

    tpl = _pkg_file(CONFIG_FILE)
    if not tpl.exists():
        raise FileNotFoundError(f"内置默认配置模板不存在：{tpl}")

    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(tpl.read_text(encoding="utf-8"), encoding="utf-8")
    return True
