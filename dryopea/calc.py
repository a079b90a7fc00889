"""Field placement inside fixed-size database records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

_ALIGNMENTS = (8, 4, 2, 1)


@dataclass(frozen=True)
class Layout:
    """Result of placing the fields of a record."""

    positions: list[int] = field(default_factory=list)
    size: int = 0
    alignment: int = 0


def calculate_positions(
    fields: Iterable[tuple[int, int]],
    vector: bool,
    sub: bool,
) -> Layout:
    """Place fields given as (size, alignment) pairs inside a record.

    ``vector``: the record lives inside a vector, so no room is kept for the
    record length. ``sub``: the record is part of a polymorphic structure and
    its first byte holds the record type.
    """
    fields = list(fields)
    # The only gaps allowed are the ones caused by alignment.
    gaps: dict[int, int] = {}
    positions: dict[int, int] = {}
    pos = 0
    size = 0
    alignment = 0
    if vector:
        if sub:
            pos = 8
            gaps[1] = 7
    else:
        pos = 8
        if sub:
            gaps[3] = 3
        else:
            gaps[4] = 4

    for al in _ALIGNMENTS:
        for nr, (field_size, align) in enumerate(fields):
            if align != al:
                continue
            alignment = max(alignment, al)
            first, first_size = 0, 0
            for gap_pos in sorted(gaps):
                if gaps[gap_pos] >= field_size:
                    first, first_size = gap_pos, gaps[gap_pos]
                    break
            if first_size == field_size:
                gaps.pop(first, None)
                positions[nr] = first
                size = max(size, first + field_size)
            elif first_size > field_size:
                # Claim the back side of the gap.
                new_size = first_size - field_size
                gaps[first] = new_size
                positions[nr] = first + new_size
                size = max(size, first + new_size + field_size)
            else:
                positions[nr] = pos
                pos += field_size
                size = pos

    return Layout(
        positions=[positions[nr] for nr in sorted(positions)],
        size=size,
        alignment=alignment,
    )