"""
Cross-match statistics keyed by player name.

Works on the ranks/scores stored with each record; callers that want the
numbers under changed rules rescore the records first. Players are matched
by their stripped display name, so the same person can sit in different
seats across matches.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from scoresheet.logic.rules import resolve_chip_value
from scoresheet.logic.scoring import round_score
from scoresheet.logic.types import AggregatePlayerStats, HeadToHeadRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from scoresheet.logic.records import MatchRecord

MAX_RANKS = 4
DEFAULT_HISTORY_LENGTH = 50


@dataclass
class _PlayerTally:
    games: int = 0
    total_score: float = 0.0
    sum_rank: int = 0
    rank_distribution: list[int] = field(default_factory=lambda: [0] * MAX_RANKS)
    tobi_count: int = 0
    games_with_tobi_rule: int = 0
    chip_sum: float = 0.0
    chip_games: int = 0

    def to_stats(self, name: str) -> AggregatePlayerStats:
        games = self.games
        return AggregatePlayerStats(
            name=name,
            games=games,
            total_score=self.total_score,
            sum_rank=self.sum_rank,
            rank_distribution=tuple(self.rank_distribution),
            tobi_count=self.tobi_count,
            games_with_tobi_rule=self.games_with_tobi_rule,
            chip_sum=self.chip_sum,
            chip_games=self.chip_games,
            avg_rank=self.sum_rank / games if games else 0.0,
            rank_pct=tuple(count / games * 100 if games else 0.0 for count in self.rank_distribution),
            tobi_rate=self.tobi_count / self.games_with_tobi_rule * 100 if self.games_with_tobi_rule else 0.0,
            avg_chip=self.chip_sum / self.chip_games if self.chip_games else None,
        )


def _tally_record(record: MatchRecord, tallies: dict[str, _PlayerTally]) -> None:
    slots = record.slots
    player_count = len(slots)
    has_tobi_rule = record.rules.tobi_bonus > 0

    for hand in record.hands:
        if not hand.is_filled(slots):
            continue
        busted = hand.has_negative(slots)

        for slot in slots:
            tally = tallies.setdefault(record.player_name(slot), _PlayerTally())
            rank = hand.ranks.get(slot, 0)
            if not 1 <= rank <= player_count:
                continue
            tally.games += 1
            tally.total_score += hand.scores.get(slot, 0.0)
            tally.sum_rank += rank
            tally.rank_distribution[rank - 1] += 1
            if has_tobi_rule:
                tally.games_with_tobi_rule += 1
                if busted and rank == player_count:
                    tally.tobi_count += 1

    if resolve_chip_value(record.rules.chip_value) <= 0:
        return
    for slot in slots:
        tally = tallies.get(record.player_name(slot))
        chips = record.chip_totals.get(slot)
        if tally is None or not chips:
            continue
        tally.chip_sum += chips
        tally.chip_games += 1


def build_aggregate_stats(records: Iterable[MatchRecord]) -> dict[str, AggregatePlayerStats]:
    """Aggregate games, scores, rank distribution, tobi and chip figures per player name."""
    tallies: dict[str, _PlayerTally] = {}
    for record in records:
        _tally_record(record, tallies)
    return {name: tally.to_stats(name) for name, tally in tallies.items()}


@dataclass(frozen=True)
class RankHistoryItem:
    """One ranked hand in a player's history, with where it came from."""

    rank: int
    record: MatchRecord
    hand_index: int


def _chronological(records: Iterable[MatchRecord]) -> list[MatchRecord]:
    return sorted(records, key=lambda record: record.created_at.timestamp() if record.created_at else 0.0)


def extract_rank_history_with_context(
    records: Iterable[MatchRecord],
    player_name: str,
    max_games: int = DEFAULT_HISTORY_LENGTH,
) -> list[RankHistoryItem]:
    """
    Return a player's most recent ranked hands, oldest first.

    Hands without a valid rank are skipped. At most max_games items are kept.
    """
    name = player_name.strip()
    if not name or max_games <= 0:
        return []

    items: list[RankHistoryItem] = []
    for record in _chronological(records):
        slot = record.slot_for(name)
        if slot is None:
            continue
        for index, hand in enumerate(record.hands):
            rank = hand.ranks.get(slot, 0)
            if 1 <= rank <= len(record.slots):
                items.append(RankHistoryItem(rank=rank, record=record, hand_index=index))
    return items[-max_games:]


def extract_rank_history(
    records: Iterable[MatchRecord],
    player_name: str,
    max_games: int = DEFAULT_HISTORY_LENGTH,
) -> list[int]:
    return [item.rank for item in extract_rank_history_with_context(records, player_name, max_games)]


def head_to_head(records: Sequence[MatchRecord], player: str, opponent: str) -> HeadToHeadRecord:
    """
    Compare two players over every hand they both finished with a valid rank.

    A lower rank number wins the hand; equal ranks are a draw. score_diff is
    the player's summed score minus the opponent's.
    """
    player, opponent = player.strip(), opponent.strip()
    hands = wins = losses = draws = 0
    score_diff = 0.0

    for record in records:
        slot = record.slot_for(player)
        other = record.slot_for(opponent)
        if slot is None or other is None or slot == other:
            continue
        for hand in record.hands:
            rank, other_rank = hand.ranks.get(slot, 0), hand.ranks.get(other, 0)
            if rank <= 0 or other_rank <= 0:
                continue
            hands += 1
            if rank < other_rank:
                wins += 1
            elif rank > other_rank:
                losses += 1
            else:
                draws += 1
            score_diff += hand.scores.get(slot, 0.0) - hand.scores.get(other, 0.0)

    return HeadToHeadRecord(
        player=player,
        opponent=opponent,
        hands=hands,
        wins=wins,
        losses=losses,
        draws=draws,
        score_diff=round_score(score_diff),
    )
