"""Per-match rule configuration and the lookups that turn it into numbers."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from scoresheet.logic.enums import (
    ChipKind,
    ChipTier,
    GameMode,
    PlayerSlot,
    TieRankMode,
    UmaKind,
    UmaPreset,
    active_slots,
)
from scoresheet.logic.exceptions import UnsupportedRulesError

UMA_TABLES: dict[GameMode, dict[UmaPreset, tuple[int, ...]]] = {
    GameMode.YONMA: {
        UmaPreset.TEN_TWENTY: (20, 10, -10, -20),
        UmaPreset.TEN_THIRTY: (30, 10, -10, -30),
        UmaPreset.FIVE_TEN: (10, 5, -5, -10),
    },
    GameMode.SANMA: {
        UmaPreset.TEN_TWENTY: (20, 0, -20),
        UmaPreset.TEN_THIRTY: (30, 0, -30),
        UmaPreset.FIVE_TEN: (10, 0, -10),
    },
}
FALLBACK_UMA_PRESET = UmaPreset.TEN_THIRTY

CHIP_TIER_VALUES: dict[ChipTier, int] = {
    ChipTier.NONE: 0,
    ChipTier.FIVE_HUNDRED: 500,
    ChipTier.ONE_THOUSAND: 1000,
}

# (start_points, return_points)
DEFAULT_POINTS: dict[GameMode, tuple[int, int]] = {
    GameMode.YONMA: (25000, 30000),
    GameMode.SANMA: (35000, 40000),
}


class PresetUma(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[UmaKind.PRESET] = UmaKind.PRESET
    preset: UmaPreset = FALLBACK_UMA_PRESET


class CustomUma(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[UmaKind.CUSTOM] = UmaKind.CUSTOM
    values: tuple[float, ...]


UmaSource = Annotated[PresetUma | CustomUma, Field(discriminator="kind")]


class TierChipValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ChipKind.TIER] = ChipKind.TIER
    tier: ChipTier = ChipTier.NONE


class CustomChipValue(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal[ChipKind.CUSTOM] = ChipKind.CUSTOM
    value: int


ChipValue = Annotated[TierChipValue | CustomChipValue, Field(discriminator="kind")]


def default_points(game_mode: GameMode) -> tuple[int, int]:
    """Return the conventional (start_points, return_points) for a game mode."""
    return DEFAULT_POINTS[game_mode]


class RuleConfig(BaseModel):
    """
    Scoring rules for one match.

    A match keeps its own copy so historical hands stay reproducible when the
    process-wide defaults change. start_points/return_points default to the
    game mode's conventional values when omitted.
    """

    model_config = ConfigDict(frozen=True)

    game_mode: GameMode = GameMode.YONMA
    start_points: int
    return_points: int
    uma: UmaSource = PresetUma()
    tobi_bonus: int = Field(default=20, ge=0)
    tie_rank_mode: TieRankMode = TieRankMode.SHARED_SPLIT
    chip_value: ChipValue = TierChipValue()

    @model_validator(mode="before")
    @classmethod
    def _fill_mode_points(cls, data: Any) -> Any:
        if isinstance(data, dict):
            start, ret = default_points(GameMode(data.get("game_mode", GameMode.YONMA)))
            data = {"start_points": start, "return_points": ret, **data}
        return data

    @property
    def slots(self) -> tuple[PlayerSlot, ...]:
        return active_slots(self.game_mode)

    @property
    def player_count(self) -> int:
        return len(self.slots)

    @property
    def oka(self) -> float:
        """Top-rank bonus pool in score units (thousands of points)."""
        return (self.return_points - self.start_points) * self.player_count / 1000


def resolve_uma(source: PresetUma | CustomUma, game_mode: GameMode) -> tuple[float, ...]:
    """
    Resolve an uma source into a per-rank table sized to the player count.

    Index 0 holds the value for rank 1. A custom table with the wrong length is
    padded from (or truncated to) the fallback preset for the mode.
    """
    fallback = UMA_TABLES[game_mode][FALLBACK_UMA_PRESET]
    match source:
        case PresetUma(preset=preset):
            return tuple(float(v) for v in UMA_TABLES[game_mode][preset])
        case CustomUma(values=values):
            return tuple(float(values[i]) if i < len(values) else float(fallback[i]) for i in range(len(fallback)))
    raise AssertionError(f"unexpected uma source: {source!r}")  # pragma: no cover


def resolve_chip_value(chip_value: TierChipValue | CustomChipValue) -> int:
    """Resolve a chip valuation into points per chip (never negative)."""
    match chip_value:
        case TierChipValue(tier=tier):
            return CHIP_TIER_VALUES[tier]
        case CustomChipValue(value=value):
            return max(0, value)
    raise AssertionError(f"unexpected chip value: {chip_value!r}")  # pragma: no cover


def validate_rules(config: RuleConfig) -> None:
    """Validate that a rule configuration is internally consistent.

    Raises UnsupportedRulesError listing every problem found. The resolver
    tolerates all of these; this is for input layers that want to reject them.
    """
    errors: list[str] = []

    if isinstance(config.uma, CustomUma) and len(config.uma.values) != config.player_count:
        errors.append(
            f"custom uma has {len(config.uma.values)} entries, expected {config.player_count} "
            f"for {config.game_mode.value}",
        )

    if config.return_points < config.start_points:
        errors.append(
            f"return_points={config.return_points} is below start_points={config.start_points}",
        )

    if isinstance(config.chip_value, CustomChipValue) and config.chip_value.value < 0:
        errors.append(f"custom chip value {config.chip_value.value} must be non-negative")

    if errors:
        raise UnsupportedRulesError("; ".join(errors))
