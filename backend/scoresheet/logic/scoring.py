"""
Rank and score resolution for a single hand.

Converts raw point totals into ranks and uma/oka/tobi-adjusted scores.
Scores are expressed in thousands of points and carry one decimal place.
"""

from __future__ import annotations

import math
from statistics import fmean
from typing import TYPE_CHECKING

import structlog

from scoresheet.logic.enums import TieRankMode
from scoresheet.logic.ranking import TieGroup, build_tie_groups, resolve_manual_group
from scoresheet.logic.rules import RuleConfig, resolve_uma
from scoresheet.logic.types import HandResult

if TYPE_CHECKING:
    from collections.abc import Mapping

    from scoresheet.logic.enums import PlayerSlot

logger = structlog.get_logger()

SCORE_UNIT = 1000


def round_score(value: float) -> float:
    """
    Round to one decimal place, halves toward positive infinity.

    Matches the score sheet's historical rounding: 2.25 -> 2.3, -2.25 -> -2.2.
    """
    return math.floor(value * 10 + 0.5) / 10


def _base_score(points: int, return_points: int, uma: float) -> float:
    return round_score((points - return_points) / SCORE_UNIT + uma)


def _score_shared_group(
    group: TieGroup,
    uma: tuple[float, ...],
    config: RuleConfig,
    ranks: dict[PlayerSlot, int],
    scores: dict[PlayerSlot, float],
) -> None:
    """All members take the group's first rank and split its uma/oka evenly."""
    shared_uma = fmean(uma[rank - 1] for rank in group.rank_range)
    oka_share = config.oka / len(group.slots) if group.start_rank == 1 else 0.0

    for slot in group.slots:
        ranks[slot] = group.start_rank
        score = _base_score(group.points, config.return_points, shared_uma)
        scores[slot] = round_score(score + oka_share)


def _score_manual_group(
    group: TieGroup,
    uma: tuple[float, ...],
    config: RuleConfig,
    manual_tie_ranks: Mapping[PlayerSlot, int],
    ranks: dict[PlayerSlot, int],
    scores: dict[PlayerSlot, float],
) -> None:
    """Members take their hand-picked ranks; an invalid pick zeroes the whole group."""
    assigned = resolve_manual_group(group, manual_tie_ranks)
    if assigned is None:
        logger.debug(
            "manual tie ranks incomplete",
            slots=[slot.value for slot in group.slots],
            rank_range=[group.start_rank, group.end_rank],
        )
        for slot in group.slots:
            ranks[slot] = 0
            scores[slot] = 0.0
        return

    for slot, rank in assigned.items():
        ranks[slot] = rank
        score = _base_score(group.points, config.return_points, uma[rank - 1])
        if rank == 1:
            score = round_score(score + config.oka)
        scores[slot] = score


def _tobi_losers(
    ranks: Mapping[PlayerSlot, int],
    tobi_player: PlayerSlot,
    config: RuleConfig,
) -> list[PlayerSlot]:
    """Return the last-place slots that pay the tobi bonus."""
    if config.tie_rank_mode == TieRankMode.MANUAL_ORDER:
        last_rank = config.player_count
    else:
        last_rank = max(ranks.values())
    return [slot for slot, rank in ranks.items() if rank == last_rank and slot != tobi_player]


def _apply_tobi(
    points: Mapping[PlayerSlot, int],
    config: RuleConfig,
    tobi_player: PlayerSlot | None,
    ranks: dict[PlayerSlot, int],
    scores: dict[PlayerSlot, float],
) -> None:
    """
    Move the tobi bonus from last place to the player credited with the bust.

    Only fires when the bonus is positive, somebody finished below zero and a
    tobi player is designated. Under shared_split tied last-place players split
    the penalty; under manual_order each pays it in full. Unresolved (rank 0)
    players are left untouched.
    """
    if config.tobi_bonus <= 0 or tobi_player is None or tobi_player not in ranks:
        return
    if not any(value < 0 for value in points.values()):
        return
    if ranks[tobi_player] == 0:
        return

    scores[tobi_player] = round_score(scores[tobi_player] + config.tobi_bonus)

    resolved = {slot: rank for slot, rank in ranks.items() if rank > 0}
    losers = _tobi_losers(resolved, tobi_player, config)
    if not losers:
        return

    if config.tie_rank_mode == TieRankMode.SHARED_SPLIT:
        penalty = round_score(config.tobi_bonus / len(losers))
    else:
        penalty = float(config.tobi_bonus)
    for slot in losers:
        scores[slot] = round_score(scores[slot] - penalty)

    logger.debug(
        "tobi applied",
        tobi_player=tobi_player.value,
        losers=[slot.value for slot in losers],
        penalty=penalty,
    )


def resolve_hand(
    points: Mapping[PlayerSlot, int | None],
    config: RuleConfig,
    tobi_player: PlayerSlot | None = None,
    manual_tie_ranks: Mapping[PlayerSlot, int] | None = None,
) -> HandResult:
    """
    Resolve ranks and scores for one hand.

    A hand with any active slot unset is not scorable yet: every slot gets
    rank 0 and score 0. Slots outside the game mode are ignored. Never raises
    for rule variation; degenerate input yields zero results.
    """
    slots = config.slots
    filled: dict[PlayerSlot, int] = {}
    for slot in slots:
        value = points.get(slot)
        if value is None:
            return HandResult.empty(slots)
        filled[slot] = value

    uma = resolve_uma(config.uma, config.game_mode)
    manual = manual_tie_ranks or {}

    ranks: dict[PlayerSlot, int] = dict.fromkeys(slots, 0)
    scores: dict[PlayerSlot, float] = dict.fromkeys(slots, 0.0)

    for group in build_tie_groups(filled, slots):
        if group.is_tie and config.tie_rank_mode == TieRankMode.MANUAL_ORDER:
            _score_manual_group(group, uma, config, manual, ranks, scores)
        else:
            _score_shared_group(group, uma, config, ranks, scores)

    _apply_tobi(filled, config, tobi_player, ranks, scores)

    return HandResult(ranks=ranks, scores=scores)
