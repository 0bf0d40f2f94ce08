"""Point-sum sanity check for a hand.

A hand whose points don't add up to a known table total was most likely
mistyped. The check never blocks scoring; display layers use it to decide
whether to show the computed scores.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from scoresheet.logic.enums import GameMode, TotalCheck, active_slots
from scoresheet.logic.rules import default_points

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scoresheet.logic.enums import PlayerSlot

# four-player sheets were recorded under both 25000 and 30000 starting points
LEGACY_YONMA_TOTALS = frozenset({100000, 120000})


def expected_totals(game_mode: GameMode, start_points: int | None = None) -> frozenset[int]:
    """Return the point sums accepted for a hand in the given mode."""
    player_count = len(active_slots(game_mode))
    if game_mode == GameMode.YONMA:
        if start_points is None:
            return LEGACY_YONMA_TOTALS
        return LEGACY_YONMA_TOTALS | {start_points * player_count}

    if start_points is None:
        start_points, _ = default_points(game_mode)
    return frozenset({start_points * player_count})


def check_total(
    points: Mapping[PlayerSlot, int | None],
    game_mode: GameMode,
    start_points: int | None = None,
) -> TotalCheck:
    """
    Compare the sum of the active slots' points against the expected total.

    UNKNOWN while any active slot is unset. The accepted totals come from
    expected_totals(), so a sanma match with custom start points is checked
    against its own table total.
    """
    values = [points.get(slot) for slot in active_slots(game_mode)]
    if any(value is None for value in values):
        return TotalCheck.UNKNOWN

    total = sum(value for value in values if value is not None)
    accepted = expected_totals(game_mode, start_points)
    return TotalCheck.OK if total in accepted else TotalCheck.NG
