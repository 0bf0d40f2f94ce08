"""
Score sheet operations over the hands of one match.

Hands are immutable; every edit returns a new HandEntry already re-resolved
against the match's rules. Changing the rules is followed by an explicit
recompute_hands() call rather than implicit re-derivation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scoresheet.logic.enums import TotalCheck
from scoresheet.logic.exceptions import InvalidHandEditError
from scoresheet.logic.rules import RuleConfig, resolve_chip_value
from scoresheet.logic.scoring import SCORE_UNIT, resolve_hand, round_score
from scoresheet.logic.types import HandEntry, MatchPlayerStats
from scoresheet.logic.validation import check_total

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from scoresheet.logic.enums import PlayerSlot

logger = structlog.get_logger()


def resolve_entry(hand: HandEntry, config: RuleConfig) -> HandEntry:
    """Return the hand with ranks/scores recomputed under the given rules."""
    result = resolve_hand(hand.points, config, hand.tobi_player, hand.manual_tie_ranks)
    return hand.model_copy(update={"ranks": dict(result.ranks), "scores": dict(result.scores)})


def recompute_hands(hands: Sequence[HandEntry], config: RuleConfig) -> list[HandEntry]:
    """Re-resolve every hand of a match, e.g. after its rules were edited."""
    recomputed = [resolve_entry(hand, config) for hand in hands]
    logger.info(
        "hands recomputed",
        hands=len(recomputed),
        complete=sum(1 for hand in recomputed if hand.is_filled(config.slots)),
        game_mode=config.game_mode,
    )
    return recomputed


def _require_active(slot: PlayerSlot, config: RuleConfig) -> None:
    if slot not in config.slots:
        raise InvalidHandEditError(slot=slot.value, reason=f"not an active seat in {config.game_mode.value}")


def update_hand_points(
    hand: HandEntry,
    slot: PlayerSlot,
    value: int | None,
    config: RuleConfig,
) -> HandEntry:
    """Set (or clear, with None) one seat's points and re-resolve the hand."""
    _require_active(slot, config)
    edited = hand.model_copy(update={"points": {**hand.points, slot: value}})
    return resolve_entry(edited, config)


def set_tobi_player(hand: HandEntry, slot: PlayerSlot | None, config: RuleConfig) -> HandEntry:
    """Credit a seat with the bust (None clears it) and re-resolve the hand."""
    if slot is not None:
        _require_active(slot, config)
    return resolve_entry(hand.model_copy(update={"tobi_player": slot}), config)


def set_manual_tie_rank(
    hand: HandEntry,
    slot: PlayerSlot,
    rank: int | None,
    config: RuleConfig,
) -> HandEntry:
    """Pick (or clear, with None) a tied seat's rank and re-resolve the hand."""
    _require_active(slot, config)
    manual = dict(hand.manual_tie_ranks)
    if rank is None:
        manual.pop(slot, None)
    elif not 1 <= rank <= config.player_count:
        raise InvalidHandEditError(slot=slot.value, reason=f"rank {rank} outside 1..{config.player_count}")
    else:
        manual[slot] = rank
    return resolve_entry(hand.model_copy(update={"manual_tie_ranks": manual}), config)


def hand_check(hand: HandEntry, config: RuleConfig) -> TotalCheck:
    return check_total(hand.points, config.game_mode, config.start_points)


def visible_scores(hand: HandEntry, config: RuleConfig) -> dict[PlayerSlot, float] | None:
    """Scores to display for a hand, or None when its points don't add up."""
    if hand_check(hand, config) == TotalCheck.NG:
        return None
    return {slot: hand.scores.get(slot, 0.0) for slot in config.slots}


def match_totals(hands: Sequence[HandEntry], config: RuleConfig) -> dict[PlayerSlot, float]:
    """Sum each seat's scores across the match, rounding at every step."""
    totals = dict.fromkeys(config.slots, 0.0)
    for hand in hands:
        for slot in config.slots:
            totals[slot] = round_score(totals[slot] + hand.scores.get(slot, 0.0))
    return totals


def totals_with_chips(
    totals: Mapping[PlayerSlot, float],
    chip_counts: Mapping[PlayerSlot, float | None],
    config: RuleConfig,
) -> dict[PlayerSlot, float]:
    """Add chip settlements to match totals. Seats without a chip count are unchanged."""
    chip_value = resolve_chip_value(config.chip_value)
    result: dict[PlayerSlot, float] = {}
    for slot in config.slots:
        chips = chip_counts.get(slot)
        bonus = chips * chip_value / SCORE_UNIT if chips is not None else 0.0
        result[slot] = round_score(totals.get(slot, 0.0) + bonus)
    return result


def match_player_stats(hands: Sequence[HandEntry], config: RuleConfig) -> list[MatchPlayerStats]:
    """Per-seat rank statistics over the complete hands of a match."""
    slots = config.slots
    player_count = config.player_count
    completed = [hand for hand in hands if hand.is_filled(slots)]
    games = len(completed)

    stats: list[MatchPlayerStats] = []
    for slot in slots:
        if games == 0:
            stats.append(MatchPlayerStats(slot=slot, rank_distribution=(0,) * player_count))
            continue

        ranks = [hand.ranks.get(slot, 0) for hand in completed]
        distribution = [0] * player_count
        for rank in ranks:
            if 1 <= rank <= player_count:
                distribution[rank - 1] += 1
        busted = sum(
            1 for hand in completed if hand.has_negative(slots) and hand.ranks.get(slot) == player_count
        )
        stats.append(
            MatchPlayerStats(
                slot=slot,
                games=games,
                avg_rank=sum(ranks) / games,
                top_rate=ranks.count(1) / games,
                renpai_rate=sum(1 for rank in ranks if 1 <= rank <= 2) / games,
                rank_distribution=tuple(distribution),
                tobi_rate=busted / games,
            ),
        )
    return stats
