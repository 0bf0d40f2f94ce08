"""
Pydantic models for hands, resolved results and statistics.

Mappings are keyed by PlayerSlot and only carry the slots active for the
match's game mode.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from scoresheet.logic.enums import PlayerSlot


class HandResult(BaseModel):
    """Ranks and scores resolved for one hand. Rank 0 means unresolved."""

    model_config = ConfigDict(frozen=True)

    ranks: dict[PlayerSlot, int]
    scores: dict[PlayerSlot, float]

    @classmethod
    def empty(cls, slots: Iterable[PlayerSlot]) -> HandResult:
        slots = tuple(slots)
        return cls(ranks=dict.fromkeys(slots, 0), scores=dict.fromkeys(slots, 0.0))

    @property
    def is_complete(self) -> bool:
        return bool(self.ranks) and all(rank > 0 for rank in self.ranks.values())


class HandEntry(BaseModel):
    """One row of the score sheet: raw points plus the resolved ranks/scores."""

    model_config = ConfigDict(frozen=True)

    points: dict[PlayerSlot, int | None] = Field(default_factory=dict)
    tobi_player: PlayerSlot | None = None
    manual_tie_ranks: dict[PlayerSlot, int] = Field(default_factory=dict)
    ranks: dict[PlayerSlot, int] = Field(default_factory=dict)
    scores: dict[PlayerSlot, float] = Field(default_factory=dict)

    @classmethod
    def blank(cls, slots: Iterable[PlayerSlot]) -> HandEntry:
        slots = tuple(slots)
        return cls(
            points=dict.fromkeys(slots),
            ranks=dict.fromkeys(slots, 0),
            scores=dict.fromkeys(slots, 0.0),
        )

    def is_filled(self, slots: Iterable[PlayerSlot]) -> bool:
        """True when every given slot has points entered."""
        return all(self.points.get(slot) is not None for slot in slots)

    def has_negative(self, slots: Iterable[PlayerSlot]) -> bool:
        """True when any given slot finished the hand below zero."""
        return any((self.points.get(slot) or 0) < 0 for slot in slots)


class MatchPlayerStats(BaseModel):
    """Per-seat summary over the complete hands of a single match."""

    model_config = ConfigDict(frozen=True)

    slot: PlayerSlot
    games: int = 0
    avg_rank: float = 0.0
    top_rate: float = 0.0
    renpai_rate: float = 0.0  # share of hands finished in the top two
    rank_distribution: tuple[int, ...] = ()
    tobi_rate: float = 0.0


class AggregatePlayerStats(BaseModel):
    """Cross-match totals for one named player."""

    model_config = ConfigDict(frozen=True)

    name: str
    games: int
    total_score: float
    sum_rank: int
    rank_distribution: tuple[int, int, int, int]
    tobi_count: int
    games_with_tobi_rule: int
    chip_sum: float
    chip_games: int
    avg_rank: float
    rank_pct: tuple[float, float, float, float]
    tobi_rate: float  # percent of hands played under a tobi rule
    avg_chip: float | None


class HeadToHeadRecord(BaseModel):
    """How one player fared against another in hands they both played."""

    model_config = ConfigDict(frozen=True)

    player: str
    opponent: str
    hands: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    score_diff: float = 0.0
