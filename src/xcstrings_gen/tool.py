#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
xcstrings_gen tool.py
CLI 入口：参数解析 + action 路由 + exit code
commands：
- init / doctor / generate
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from . import __version__
from .catalog import load_catalog
from .config import CONFIG_FILE, DiffTarget, Options, XcstringsGenConfig, init_config, read_config
from .errors import CatalogError, ConfigError, GenerationError
from .extractor import extract_resources
from .models import Issue, Resource
from .swift_codegen import ACCESS_LEVEL_ENV, AccessLevel, generate_source, write_source
from .tree import build_tree, find_collisions
from .validator import find_duplicate_keys, validate_resources


EXIT_OK = 0
EXIT_FAIL = 1
EXIT_BAD = 2


MENU = [
    ("generate", "从 .xcstrings 生成 Swift LocalizationKey 访问代码"),
    ("doctor",   "环境/配置/catalog 诊断（不写文件）"),
    ("init",     "生成/校验配置 xcstrings_gen.yaml"),
]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="xcstrings_gen",
        description="String Catalog(.xcstrings) -> Swift 强类型 LocalizationKey 生成",
    )
    p.add_argument("action", nargs="?", choices=[k for k, _ in MENU], help="命令（不填则打印可选命令）")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--project-root", default=".", help="项目根目录（默认当前目录）")
    p.add_argument("--config", default=CONFIG_FILE, help=f"配置文件路径（默认 {CONFIG_FILE}，基于 project-root）")

    # 不用配置文件时可直接指定
    p.add_argument("--input", default=None, help="String Catalog 路径（覆盖配置 input）")
    p.add_argument("--output", default=None, help="Swift 输出路径（覆盖配置 output）")
    p.add_argument(
        "--diff",
        nargs=2,
        action="append",
        metavar=("INPUT", "OUTPUT"),
        default=None,
        help="差异 catalog 及其输出路径（可重复；覆盖配置 diffs）",
    )
    p.add_argument(
        "--access-level",
        default=None,
        choices=[x.value for x in AccessLevel],
        help="生成代码的访问控制（默认 internal）",
    )
    p.add_argument("--strict", action="store_true", help="任一 key 无法生成即失败（默认跳过并提示）")
    p.add_argument("--include-default-value", action="store_true", help="生成 defaultValue 参数")
    p.add_argument("--dry-run", action="store_true", help="预览模式（不写入任何文件）")
    return p


# ----------------------------
# 配置合并：配置文件 + 命令行
# ----------------------------

def resolve_settings(args: argparse.Namespace, project_root: Path, cfg_path: Path) -> XcstringsGenConfig:
    """
    命令行优先：
    - 给了 --input：可不需要配置文件（此时 --output 必填）
    - 否则读取配置文件
    """
    if cfg_path.exists():
        cfg = read_config(cfg_path, project_root=project_root)
    elif args.input:
        if not args.output:
            raise ConfigError("使用 --input 且没有配置文件时，必须同时提供 --output")
        cfg = XcstringsGenConfig(
            project_root=project_root,
            input=(project_root / args.input).resolve(),
            output=(project_root / args.output).resolve(),
        )
    else:
        cfg = read_config(cfg_path, project_root=project_root)  # 抛出带解决方法的 ConfigError

    changes: Dict[str, object] = {}
    if args.input:
        changes["input"] = (project_root / args.input).resolve()
    if args.output:
        changes["output"] = (project_root / args.output).resolve()
    if args.diff:
        changes["diffs"] = tuple(
            DiffTarget(input=(project_root / i).resolve(), output=(project_root / o).resolve())
            for i, o in args.diff
        )
    # 命令行 > 环境变量 > 配置 > internal，这里一次性定下来
    try:
        changes["access_level"] = AccessLevel.resolve(
            cli=args.access_level,
            config=cfg.access_level.value if cfg.access_level else None,
        )
    except ValueError as e:
        raise ConfigError(
            f"{e}\n"
            f"解决方法：检查 --access-level 或环境变量 {ACCESS_LEVEL_ENV}。"
        ) from e
    if args.strict or args.include_default_value:
        changes["options"] = dataclasses.replace(
            cfg.options,
            strict=cfg.options.strict or bool(args.strict),
            include_default_value=cfg.options.include_default_value or bool(args.include_default_value),
        )
    return dataclasses.replace(cfg, **changes)


# ----------------------------
# generate
# ----------------------------

def _print_issues(issues: Sequence[Issue]) -> None:
    for issue in issues:
        prefix = {"error": "❌", "warn": "⚠️", "info": "ℹ️"}[issue.level.value]
        where = f"{issue.path.name}: " if issue.path else ""
        print(f"{prefix} {where}{issue.message}")


def _extract(path: Path, options: Options) -> Tuple[Tuple[str, ...], Tuple[Resource, ...]]:
    catalog = load_catalog(path)
    result = extract_resources(catalog, strict=options.strict, skip_stale=options.skip_stale)
    _print_issues(result.issues)
    skipped = result.counts_by_level()["error"]
    if skipped:
        print(f"⚠️ {path.name}: {skipped} 个 key 无法生成，已跳过（--strict 可改为直接失败）")
    return catalog.keys, result.resources


def _emit(resources: Sequence[Resource], *, table_name: str, out: Path, cfg: XcstringsGenConfig, dry_run: bool) -> None:
    source = generate_source(
        resources,
        table_name=table_name,
        access_level=cfg.access_level or AccessLevel.INTERNAL,
        type_name=cfg.type_name,
        include_default_value=cfg.options.include_default_value,
        indent=cfg.options.indent,
    )
    changed = write_source(out, source, dry_run=dry_run)
    if not changed:
        print(f"✅ 无变化：{out}（{len(resources)} keys）")
    elif dry_run:
        print(f"（dry-run：未写入）{out}（{len(resources)} keys）")
    else:
        print(f"✅ 已生成：{out}（{len(resources)} keys）")


def run_generate(cfg: XcstringsGenConfig, *, dry_run: bool = False) -> None:
    main_keys, main_resources = _extract(cfg.input, cfg.options)
    validate_resources(main_resources, source=cfg.input)
    _emit(main_resources, table_name=cfg.input.stem, out=cfg.output, cfg=cfg, dry_run=dry_run)

    # 差异 catalog：只保留主 catalog 里没有的 key
    known = set(main_keys)
    diff_resources: Dict[str, List[Resource]] = {}
    for diff in cfg.diffs:
        _keys, resources = _extract(diff.input, cfg.options)
        kept = [r for r in resources if r.key not in known]
        if len(kept) != len(resources):
            print(f"ℹ️ {diff.input.name}: {len(resources) - len(kept)} 个 key 已在 {cfg.input.name} 中，跳过")
        validate_resources(kept, source=diff.input)
        diff_resources[diff.input.name] = kept
        _emit(kept, table_name=cfg.input.stem, out=diff.output, cfg=cfg, dry_run=dry_run)

    for key, names in find_duplicate_keys(diff_resources).items():
        print(f"⚠️ key '{key}' 同时出现在多个差异 catalog：{names}")


# ----------------------------
# doctor
# ----------------------------

def doctor(cfg_path: Path, project_root: Path) -> int:
    ok = True

    try:
        import yaml  # noqa: F401
        print("✅ PyYAML OK")
    except ImportError:
        ok = False
        print("❌ PyYAML 不可用：pip install 'PyYAML>=6.0'")

    try:
        cfg = read_config(cfg_path, project_root=project_root)
        print(f"✅ {cfg_path.name} OK (input={cfg.input} output={cfg.output} diffs={len(cfg.diffs)})")
    except ConfigError as e:
        print(f"❌ {e}")
        return EXIT_BAD

    for path in [cfg.input] + [d.input for d in cfg.diffs]:
        try:
            catalog = load_catalog(path)
        except CatalogError as e:
            ok = False
            print(f"❌ {e}")
            continue

        result = extract_resources(catalog, skip_stale=cfg.options.skip_stale)
        _print_issues(result.issues)
        collisions = find_collisions(build_tree(result.resources))
        for c in collisions:
            print(f"❌ {path.name}: {c}")
        try:
            validate_resources(result.resources, source=path)
        except GenerationError as e:
            ok = False
            print(f"❌ {e}")

        if collisions or not result.ok:
            ok = False
        else:
            print(f"✅ {path.name} OK（{len(result.resources)} keys，sourceLanguage={catalog.source_language}）")

    if not ok:
        return EXIT_BAD
    print("✅ doctor 完成")
    return EXIT_OK


# ----------------------------
# main
# ----------------------------

def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    args = build_parser().parse_args(argv)

    project_root = Path(args.project_root).expanduser().resolve()

    cfg_path = Path(args.config).expanduser()
    if not cfg_path.is_absolute():
        cfg_path = (project_root / cfg_path).resolve()

    action = args.action
    if not action:
        print("❌ 请指定 action。可选：")
        for k, desc in MENU:
            print(f"  - {k:<10} {desc}")
        return EXIT_BAD

    if action == "init":
        try:
            created = init_config(cfg_path)
        except ConfigError as e:
            print(f"❌ {e}")
            return EXIT_BAD
        if created:
            print(f"✅ 已生成配置：{cfg_path}")
        else:
            print(f"✅ 配置已存在且校验通过：{cfg_path}")
        return EXIT_OK

    if action == "doctor":
        return doctor(cfg_path, project_root)

    try:
        cfg = resolve_settings(args, project_root, cfg_path)
    except ConfigError as e:
        print(f"❌ {e}")
        return EXIT_BAD

    try:
        run_generate(cfg, dry_run=bool(args.dry_run))
    except CatalogError as e:
        print(f"❌ {e}")
        return EXIT_BAD
    except (GenerationError, OSError) as e:
        print(f"❌ generate 失败：{e}")
        return EXIT_FAIL
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
