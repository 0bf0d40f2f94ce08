"""
Rank assignment for a fully entered hand.

Players are ordered by points and split into tie groups. A group spans the
rank positions its members would occupy if the tie were broken, e.g. two
players tied behind the leader span ranks 2..3.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from scoresheet.logic.enums import PlayerSlot


@dataclass(frozen=True)
class TieGroup:
    """A maximal run of players with identical points."""

    start_rank: int
    points: int
    slots: tuple[PlayerSlot, ...]

    @property
    def end_rank(self) -> int:
        return self.start_rank + len(self.slots) - 1

    @property
    def rank_range(self) -> range:
        return range(self.start_rank, self.end_rank + 1)

    @property
    def is_tie(self) -> bool:
        return len(self.slots) > 1


def build_tie_groups(points: Mapping[PlayerSlot, int], slots: Sequence[PlayerSlot]) -> list[TieGroup]:
    """
    Sort slots by points (descending) and partition them into tie groups.

    Equal points keep seat order inside a group, so the result is
    deterministic for any input.
    """
    ordered = sorted(slots, key=lambda slot: (-points[slot], slots.index(slot)))

    groups: list[TieGroup] = []
    position = 1
    i = 0
    while i < len(ordered):
        value = points[ordered[i]]
        j = i
        while j < len(ordered) and points[ordered[j]] == value:
            j += 1
        groups.append(TieGroup(start_rank=position, points=value, slots=tuple(ordered[i:j])))
        position += j - i
        i = j
    return groups


def resolve_manual_group(
    group: TieGroup,
    manual_ranks: Mapping[PlayerSlot, int],
) -> dict[PlayerSlot, int] | None:
    """
    Validate hand-picked ranks for a tie group.

    Every member needs a rank inside the group's span and no two members may
    share one. Returns None when the assignment is incomplete or invalid.
    """
    assigned: dict[PlayerSlot, int] = {}
    for slot in group.slots:
        rank = manual_ranks.get(slot)
        if rank is None or rank not in group.rank_range:
            return None
        if rank in assigned.values():
            return None
        assigned[slot] = rank
    return assigned
