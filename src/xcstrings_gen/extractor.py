from __future__ import annotations

from typing import Dict, List, Sequence, Tuple

from .arguments import reconcile
from .catalog import ARG_TOKEN, Catalog, CatalogEntry
from .errors import GapError, GenerationError, SubstitutionOverlapError, TypeConflictError
from .identifiers import variable_identifier
from .models import ExtractionResult, Issue, IssueCode, IssueLevel, Resource, Segment
from .parser import scan
from .specifier import iter_specifiers


def _uses_explicit_positions(texts: Sequence[str]) -> bool:
    return any(m.position is not None for t in texts for m in iter_specifiers(t))


def substitution_maps(entry: CatalogEntry) -> List[Dict[str, str]]:
    """
    第一个 map 为“主” map（每个 substitution 取 other）；
    之后每个 map 只把一个 substitution 换成它的另一个分支，其它保持主 map。

    主文本用了 %n$ 时，%arg 也展开成带位置的 specifier（依赖 argNum）。
    """
    positional = _uses_explicit_positions(entry.base_texts())

    primary: Dict[str, str] = {}
    for sub in entry.substitutions:
        text = sub.primary_text(positional)
        if text is not None:
            primary[sub.name] = text

    maps = [primary]
    for sub in entry.substitutions:
        for _label, raw in sub.variations:
            # 隐式编号下，没有 %arg 的分支（如 zero: "No files"）不占参数位，
            # 单独作为 variant 会把后面的占位符挤到前一个位置
            if not positional and ARG_TOKEN not in raw:
                continue
            text = sub.resolve(raw, positional)
            if text == primary.get(sub.name):
                continue
            alt = dict(primary)
            alt[sub.name] = text
            if alt not in maps:
                maps.append(alt)
    return maps


def variant_segments(entry: CatalogEntry) -> List[List[Segment]]:
    """Segment lists for every (base text x substitution map) combination, in catalog order."""
    out: List[List[Segment]] = []
    seen: List[Tuple[str, Dict[str, str]]] = []
    for text in entry.base_texts():
        for subs in substitution_maps(entry):
            if (text, subs) in seen:
                continue
            seen.append((text, subs))
            out.append(scan(text, subs))
    return out


def extract_resource(entry: CatalogEntry) -> Resource:
    """Build one Resource; raises GenerationError when its variants disagree."""
    components = tuple(entry.key.split("."))
    maps = substitution_maps(entry)

    arguments = reconcile(variant_segments(entry), key=entry.key)
    default_value = tuple(scan(entry.default_text(), maps[0]))

    return Resource(
        key=entry.key,
        identifier=variable_identifier(components[-1]),
        key_components=components,
        default_value=default_value,
        arguments=arguments,
        comment=entry.comment,
    )


def _issue_code(e: GenerationError) -> IssueCode:
    if isinstance(e, TypeConflictError):
        return IssueCode.TYPE_CONFLICT
    if isinstance(e, GapError):
        return IssueCode.POSITION_GAP
    return IssueCode.SUBSTITUTION_OVERLAP


def extract_resources(catalog: Catalog, *, strict: bool = False, skip_stale: bool = False) -> ExtractionResult:
    """
    Extract every entry of `catalog`.

    A resource that cannot be generated is reported as an ERROR issue and left
    out; with strict=True the first such error is raised instead.
    """
    resources: List[Resource] = []
    issues: List[Issue] = []

    for entry in catalog.entries:
        if skip_stale and entry.is_stale:
            issues.append(Issue(
                level=IssueLevel.INFO,
                code=IssueCode.STALE_KEY,
                message=f"'{entry.key}': stale，已跳过",
                key=entry.key,
                path=catalog.path,
            ))
            continue

        try:
            resources.append(extract_resource(entry))
        except GenerationError as e:
            if strict:
                raise
            msg = str(e)
            if isinstance(e, SubstitutionOverlapError):
                msg = f"'{entry.key}': {msg}"
            issues.append(Issue(
                level=IssueLevel.ERROR,
                code=_issue_code(e),
                message=msg,
                key=entry.key,
                path=catalog.path,
            ))

    return ExtractionResult(resources=tuple(resources), issues=tuple(issues))
