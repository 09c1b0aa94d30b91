import json
import sys
from pathlib import Path

import pytest


# Ensure 'src/' is on sys.path so 'xcstrings_gen' can be imported when running tests from repo root.
REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))


@pytest.fixture
def chdir_tmp(tmp_path, monkeypatch):
    """切到临时目录执行（避免污染仓库）。"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def unit(value: str) -> dict:
    return {"stringUnit": {"state": "translated", "value": value}}


def write_catalog(path: Path, strings: dict, source_language: str = "en") -> Path:
    """
    strings: {key: value_or_localization}
    - str：直接作为源语言 stringUnit
    - dict：作为源语言 localization 原样写入
    - None：不写 localization（key 即文案）
    """
    out = {}
    for key, loc in strings.items():
        if loc is None:
            out[key] = {}
        elif isinstance(loc, str):
            out[key] = {"localizations": {source_language: unit(loc)}}
        else:
            out[key] = {"localizations": {source_language: loc}}

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps({"sourceLanguage": source_language, "strings": out, "version": "1.0"}, ensure_ascii=False),
        encoding="utf-8",
    )
    return path
