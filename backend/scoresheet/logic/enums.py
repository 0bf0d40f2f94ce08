"""Enumerations shared across the scoresheet engine."""

from enum import StrEnum


class GameMode(StrEnum):
    """Number of players at the table."""

    YONMA = "yonma"  # four players
    SANMA = "sanma"  # three players


class PlayerSlot(StrEnum):
    """Seat identifier on the score sheet."""

    A = "A"
    B = "B"
    C = "C"
    D = "D"


class TieRankMode(StrEnum):
    """How players with identical points are ranked."""

    SHARED_SPLIT = "shared_split"  # same rank, uma/oka averaged across the span
    MANUAL_ORDER = "manual_order"  # distinct ranks picked by hand


class UmaPreset(StrEnum):
    TEN_TWENTY = "10-20"
    TEN_THIRTY = "10-30"
    FIVE_TEN = "5-10"


class UmaKind(StrEnum):
    PRESET = "preset"
    CUSTOM = "custom"


class ChipTier(StrEnum):
    """Named chip valuations (points per chip)."""

    NONE = "none"
    FIVE_HUNDRED = "500"
    ONE_THOUSAND = "1000"


class ChipKind(StrEnum):
    TIER = "tier"
    CUSTOM = "custom"


class TotalCheck(StrEnum):
    """Outcome of the hand point-sum sanity check."""

    OK = "OK"
    NG = "NG"
    UNKNOWN = "unknown"


SLOTS_BY_MODE: dict[GameMode, tuple[PlayerSlot, ...]] = {
    GameMode.YONMA: (PlayerSlot.A, PlayerSlot.B, PlayerSlot.C, PlayerSlot.D),
    GameMode.SANMA: (PlayerSlot.A, PlayerSlot.B, PlayerSlot.C),
}


def active_slots(game_mode: GameMode) -> tuple[PlayerSlot, ...]:
    return SLOTS_BY_MODE[game_mode]
