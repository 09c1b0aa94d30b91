from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Set, Tuple

from .errors import GapError, PositionCollisionError, TypeConflictError
from .models import Argument, Placeholder, PlaceholderKind, Segment, segments_text


def argument_name(position: int) -> str:
    return f"arg{position}"


def effective_positions(segments: Sequence[Segment], key: str = "") -> List[Tuple[Placeholder, int]]:
    """
    Assign every placeholder of one variant its 1-based slot.

    Explicit "%n$" wins; otherwise an implicit counter (starting at 1, untouched by
    explicit positions) is used. A slot claimed both implicitly and explicitly is a
    PositionCollisionError.
    """
    out: List[Tuple[Placeholder, int]] = []
    implicit_next = 1
    explicit_slots: Dict[int, PlaceholderKind] = {}
    implicit_slots: Dict[int, PlaceholderKind] = {}

    for seg in segments:
        if not isinstance(seg, Placeholder):
            continue

        if seg.position is not None:
            pos = seg.position
            explicit_slots.setdefault(pos, seg.kind)
            other = implicit_slots.get(pos)
        else:
            pos = implicit_next
            implicit_next += 1
            implicit_slots[pos] = seg.kind
            other = explicit_slots.get(pos)

        if other is not None:
            raise PositionCollisionError(key, pos, {other, seg.kind}, text=segments_text(tuple(segments)))
        out.append((seg, pos))

    return out


def reconcile(variant_segment_lists: Iterable[Sequence[Segment]], key: str = "") -> Tuple[Argument, ...]:
    """
    Merge the placeholders of every variant of one resource into a dense, typed
    argument list (arg1..argN).

    Raises TypeConflictError when one slot is used with different kinds and
    GapError when slots 1..N are not all used.
    """
    kinds_by_position: Dict[int, Set[PlaceholderKind]] = {}

    for segments in variant_segment_lists:
        for placeholder, pos in effective_positions(segments, key=key):
            kinds_by_position.setdefault(pos, set()).add(placeholder.kind)

    for pos in sorted(kinds_by_position):
        kinds = kinds_by_position[pos]
        if len(kinds) > 1:
            raise TypeConflictError(key, pos, kinds)

    positions = sorted(kinds_by_position)
    if positions and positions != list(range(1, len(positions) + 1)):
        raise GapError(key, positions)

    return tuple(
        Argument(name=argument_name(pos), kind=next(iter(kinds_by_position[pos])), position=pos)
        for pos in positions
    )
