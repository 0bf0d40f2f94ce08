"""Re-score a stored match record and print its standings.

Reads a match snapshot (the camelCase JSON stored with each match), resolves
every hand again and prints per-hand ranks/scores plus match totals.

Usage:
    uv run python bin/rescore_match.py path/to/match.json
    uv run python bin/rescore_match.py path/to/match.json --default-rules
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

import structlog

from scoresheet.logic.match import hand_check, match_player_stats, match_totals, totals_with_chips
from scoresheet.logic.records import MatchRecord
from scoresheet.settings import ScoresheetSettings
from shared.logging import setup_logging

logger = structlog.get_logger()


def _print_hands(record: MatchRecord) -> None:
    slots = record.slots
    print("hand  " + "  ".join(f"{record.player_name(slot):>12}" for slot in slots) + "  check")
    for index, hand in enumerate(record.hands, start=1):
        cells = []
        for slot in slots:
            rank = hand.ranks.get(slot, 0)
            cells.append(f"{hand.scores.get(slot, 0.0):>8.1f} ({rank or '-'})")
        print(f"{index:>4}  " + "  ".join(f"{cell:>12}" for cell in cells) + f"  {hand_check(hand, record.rules)}")


def _print_totals(record: MatchRecord) -> None:
    totals = match_totals(record.hands, record.rules)
    with_chips = totals_with_chips(totals, record.chip_totals, record.rules)
    stats = {item.slot: item for item in match_player_stats(record.hands, record.rules)}

    print()
    for slot in record.slots:
        item = stats[slot]
        print(
            f"{record.player_name(slot):>12}  total {totals[slot]:>7.1f}  with chips {with_chips[slot]:>7.1f}"
            f"  avg rank {item.avg_rank:.2f}  top {item.top_rate:.0%}  tobi {item.tobi_rate:.0%}",
        )


def main() -> int:
    parser = argparse.ArgumentParser(description="Re-score a stored match record.")
    parser.add_argument("snapshot", type=Path, help="path to the match snapshot JSON")
    parser.add_argument(
        "--default-rules",
        action="store_true",
        help="score with the current SCORESHEET_* defaults instead of the record's own rules",
    )
    args = parser.parse_args()

    settings = ScoresheetSettings()
    setup_logging(log_dir=settings.log_dir)

    try:
        snapshot = json.loads(args.snapshot.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("cannot read snapshot", path=str(args.snapshot), error=str(e))
        return 1

    record = MatchRecord.from_snapshot(snapshot)
    with structlog.contextvars.bound_contextvars(snapshot=args.snapshot.name):
        record = record.rescored(settings.default_rules() if args.default_rules else None)

    _print_hands(record)
    _print_totals(record)
    return 0


if __name__ == "__main__":
    sys.exit(main())
