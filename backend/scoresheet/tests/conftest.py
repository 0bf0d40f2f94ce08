from __future__ import annotations

from typing import TYPE_CHECKING, Any

from scoresheet.logic.enums import GameMode, PlayerSlot
from scoresheet.logic.match import resolve_entry
from scoresheet.logic.records import MatchRecord
from scoresheet.logic.rules import RuleConfig
from scoresheet.logic.types import HandEntry

if TYPE_CHECKING:
    from datetime import datetime

# ============================================================================
# Test Builder Helpers
# ============================================================================


def make_points(**values: int | None) -> dict[PlayerSlot, int | None]:
    """Build a slot-keyed points mapping: make_points(A=35000, B=28000, ...)."""
    return {PlayerSlot(key): value for key, value in values.items()}


def make_hand(
    config: RuleConfig,
    *,
    tobi: str | None = None,
    manual: dict[str, int] | None = None,
    **values: int | None,
) -> HandEntry:
    """Build a hand entry already resolved under the given rules."""
    hand = HandEntry(
        points=make_points(**values),
        tobi_player=PlayerSlot(tobi) if tobi else None,
        manual_tie_ranks={PlayerSlot(k): v for k, v in (manual or {}).items()},
    )
    return resolve_entry(hand, config)


def make_record(
    names: dict[str, str],
    hands: list[dict[str, int]],
    *,
    rules: RuleConfig | None = None,
    chips: dict[str, float | None] | None = None,
    created_at: datetime | None = None,
    **fields: Any,
) -> MatchRecord:
    """Build a resolved match record from plain seat-letter dicts."""
    rules = rules or RuleConfig()
    return MatchRecord(
        created_at=created_at,
        player_names={PlayerSlot(k): v for k, v in names.items()},
        rules=rules,
        hands=[make_hand(rules, **points) for points in hands],
        chip_totals={PlayerSlot(k): v for k, v in (chips or {}).items()},
        **fields,
    )


def sanma_rules(**overrides: Any) -> RuleConfig:
    return RuleConfig(game_mode=GameMode.SANMA, **overrides)
