"""
Stored match records and normalisation of legacy snapshots.

A record keeps the raw points, the resolved ranks/scores, tobi and manual tie
picks for every hand together with the full rule set used, so an old match
can be re-opened and re-scored exactly as it was played.

Older snapshots predate several rule options (three-player mode, tie modes,
start/return points) and stored numbers as loosely typed strings;
MatchRecord.from_snapshot() fills those gaps with the defaults in force when
the snapshot was written.
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from scoresheet.logic.enums import ChipTier, GameMode, PlayerSlot, TieRankMode, UmaPreset, active_slots
from scoresheet.logic.match import recompute_hands
from scoresheet.logic.rules import (
    UMA_TABLES,
    CustomChipValue,
    CustomUma,
    PresetUma,
    RuleConfig,
    TierChipValue,
    default_points,
)
from scoresheet.logic.types import HandEntry

_LEADING_INT = re.compile(r"^[+-]?\d+")
_BLANK_MARKERS = {"", "-"}
_CUSTOM = "custom"


def _parse_int(value: Any, default: int = 0) -> int:
    """Parse an integer the way the sheet's inputs were stored: leading digits win."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    match = _LEADING_INT.match(str(value).strip())
    return int(match.group()) if match else default


def _parse_number(value: Any) -> float | None:
    """Parse a numeric cell. Blank, '-' and garbage become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value) if math.isfinite(value) else None
    text = str(value).strip()
    if text in _BLANK_MARKERS:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def _parse_slot(value: Any) -> PlayerSlot | None:
    if value in (None, ""):
        return None
    try:
        return PlayerSlot(value)
    except ValueError:
        return None


def _slot_map(raw: Any) -> dict[PlayerSlot, Any]:
    if not isinstance(raw, dict):
        return {}
    return {slot: raw[slot.value] for slot in PlayerSlot if slot.value in raw}


def _infer_game_mode(snapshot: dict[str, Any]) -> GameMode:
    """Snapshots without gameMode are four-player if seat D was ever ranked or named."""
    raw_mode = snapshot.get("gameMode")
    if raw_mode in (GameMode.YONMA.value, GameMode.SANMA.value):
        return GameMode(raw_mode)

    for row in snapshot.get("rows") or []:
        if not isinstance(row, dict):
            continue
        rank_d = _slot_map(row.get("ranks")).get(PlayerSlot.D)
        if isinstance(rank_d, int | float) and rank_d > 0:
            return GameMode.YONMA

    name_d = _slot_map(snapshot.get("playerNames")).get(PlayerSlot.D)
    if name_d and name_d != PlayerSlot.D.value:
        return GameMode.YONMA
    return GameMode.SANMA


def _uma_from_snapshot(snapshot: dict[str, Any], game_mode: GameMode) -> PresetUma | CustomUma:
    uma_type = snapshot.get("umaType")
    if uma_type in {preset.value for preset in UmaPreset}:
        return PresetUma(preset=UmaPreset(uma_type))
    if uma_type != _CUSTOM:
        return PresetUma()

    # non-numeric custom cells fall back to the 10-30 value at that position
    fallback = UMA_TABLES[game_mode][UmaPreset.TEN_THIRTY]
    raw = list(snapshot.get("customUma") or [])
    values = []
    for i, default in enumerate(fallback):
        parsed = _parse_number(raw[i]) if i < len(raw) else None
        values.append(default if parsed is None else parsed)
    return CustomUma(values=tuple(values))


def _chip_value_from_snapshot(snapshot: dict[str, Any]) -> TierChipValue | CustomChipValue:
    chip_type = snapshot.get("chipValueType")
    if chip_type == _CUSTOM:
        return CustomChipValue(value=max(0, _parse_int(snapshot.get("chipCustomValue"))))
    if chip_type in {tier.value for tier in ChipTier}:
        return TierChipValue(tier=ChipTier(chip_type))
    return TierChipValue()


def _legacy_start_points(snapshot: dict[str, Any], return_points: int, player_count: int) -> int | None:
    """
    Derive start points from the flat oka of sheets that predate startPoints.

    Those sheets scored against the return points and added a hand-entered
    oka to first place, so the start that reproduces that oka is
    return - oka * 1000 / player_count.
    """
    oka = _parse_number(snapshot.get("oka"))
    if oka is None:
        return None
    return return_points - round(oka * 1000 / player_count)


def _rules_from_snapshot(snapshot: dict[str, Any]) -> RuleConfig:
    game_mode = _infer_game_mode(snapshot)
    start, ret = default_points(game_mode)
    ret = _parse_int(snapshot.get("returnPoints"), ret)
    if snapshot.get("startPoints") not in (None, ""):
        start = _parse_int(snapshot.get("startPoints"), start)
    elif (legacy_start := _legacy_start_points(snapshot, ret, len(active_slots(game_mode)))) is not None:
        start = legacy_start
    raw_tie_mode = snapshot.get("tieRankMode")
    tie_modes = {mode.value for mode in TieRankMode}
    tie_mode = TieRankMode(raw_tie_mode) if raw_tie_mode in tie_modes else TieRankMode.SHARED_SPLIT
    return RuleConfig(
        game_mode=game_mode,
        start_points=start,
        return_points=ret,
        uma=_uma_from_snapshot(snapshot, game_mode),
        tobi_bonus=max(0, _parse_int(snapshot.get("tobiBonus"))),
        tie_rank_mode=tie_mode,
        chip_value=_chip_value_from_snapshot(snapshot),
    )


def _hand_from_row(row: dict[str, Any], slots: tuple[PlayerSlot, ...]) -> HandEntry:
    points = _slot_map(row.get("points"))
    ranks = _slot_map(row.get("ranks"))
    scores = _slot_map(row.get("scores"))
    manual = {
        slot: rank
        for slot, raw in _slot_map(row.get("manualTieRanks")).items()
        if slot in slots and (rank := _parse_int(raw)) > 0
    }
    parsed_points = {slot: _parse_number(points.get(slot)) for slot in slots}
    return HandEntry(
        points={slot: None if value is None else int(value) for slot, value in parsed_points.items()},
        tobi_player=_parse_slot(row.get("tobiPlayer")),
        manual_tie_ranks=manual,
        ranks={slot: _parse_int(ranks.get(slot)) for slot in slots},
        scores={slot: _parse_number(scores.get(slot)) or 0.0 for slot in slots},
    )


class MatchRecord(BaseModel):
    """One persisted match: players, rules, hands and chip counts."""

    model_config = ConfigDict(frozen=True)

    match_id: str | None = None
    created_at: datetime | None = None
    game_date: str = ""
    player_names: dict[PlayerSlot, str] = Field(default_factory=dict)
    rules: RuleConfig = Field(default_factory=RuleConfig)
    hands: list[HandEntry] = Field(default_factory=list)
    chip_totals: dict[PlayerSlot, float | None] = Field(default_factory=dict)
    owner_user_id: str | None = None
    owner_display_name: str | None = None
    is_shared: bool = False

    @property
    def slots(self) -> tuple[PlayerSlot, ...]:
        return self.rules.slots

    def player_name(self, slot: PlayerSlot) -> str:
        """Display name for a seat, stripped; falls back to the seat letter."""
        return (self.player_names.get(slot) or slot.value).strip()

    def slot_for(self, name: str) -> PlayerSlot | None:
        """Find the active seat a (stripped) player name sat in."""
        wanted = name.strip()
        for slot in self.slots:
            if self.player_name(slot) == wanted:
                return slot
        return None

    def rescored(self, rules: RuleConfig | None = None) -> MatchRecord:
        """Return the record with every hand recomputed, optionally under new rules."""
        rules = rules or self.rules
        return self.model_copy(update={"rules": rules, "hands": recompute_hands(self.hands, rules)})

    @classmethod
    def from_snapshot(
        cls,
        snapshot: dict[str, Any],
        *,
        match_id: str | None = None,
        created_at: datetime | None = None,
        is_shared: bool = False,
    ) -> MatchRecord:
        """Build a record from a stored camelCase snapshot, filling legacy gaps."""
        rules = _rules_from_snapshot(snapshot)
        slots = active_slots(rules.game_mode)

        raw_names = _slot_map(snapshot.get("playerNames"))
        player_names = {slot: str(raw_names.get(slot) or slot.value) for slot in slots}
        raw_chips = _slot_map(snapshot.get("chipTotals"))
        chip_totals = {slot: _parse_number(raw_chips.get(slot)) for slot in slots}

        return cls(
            match_id=match_id,
            created_at=created_at,
            game_date=str(snapshot.get("gameDate") or ""),
            player_names=player_names,
            rules=rules,
            hands=[_hand_from_row(row, slots) for row in snapshot.get("rows") or [] if isinstance(row, dict)],
            chip_totals=chip_totals,
            owner_user_id=snapshot.get("ownerUserId"),
            owner_display_name=snapshot.get("ownerDisplayName"),
            is_shared=is_shared,
        )
