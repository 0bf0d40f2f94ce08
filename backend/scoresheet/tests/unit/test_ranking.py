from scoresheet.logic.enums import PlayerSlot
from scoresheet.logic.ranking import TieGroup, build_tie_groups, resolve_manual_group

A, B, C, D = PlayerSlot.A, PlayerSlot.B, PlayerSlot.C, PlayerSlot.D
SLOTS = (A, B, C, D)


class TestBuildTieGroups:
    def test_no_ties(self):
        groups = build_tie_groups({A: 15000, B: 35000, C: 22000, D: 28000}, SLOTS)

        assert [g.slots for g in groups] == [(B,), (D,), (C,), (A,)]
        assert [g.start_rank for g in groups] == [1, 2, 3, 4]
        assert not any(g.is_tie for g in groups)

    def test_tie_group_spans_positions(self):
        groups = build_tie_groups({A: 40000, B: 25000, C: 25000, D: 10000}, SLOTS)

        assert len(groups) == 3
        tie = groups[1]
        assert tie.slots == (B, C)
        assert tie.start_rank == 2
        assert tie.end_rank == 3
        assert list(tie.rank_range) == [2, 3]
        assert groups[2].start_rank == 4

    def test_tied_slots_keep_seat_order(self):
        groups = build_tie_groups({A: 20000, B: 30000, C: 20000, D: 30000}, SLOTS)
        assert [g.slots for g in groups] == [(B, D), (A, C)]

    def test_three_slots(self):
        groups = build_tie_groups({A: 35000, B: 35000, C: 35000}, (A, B, C))
        assert groups == [TieGroup(start_rank=1, points=35000, slots=(A, B, C))]


class TestResolveManualGroup:
    GROUP = TieGroup(start_rank=2, points=25000, slots=(B, C))

    def test_valid_assignment(self):
        assert resolve_manual_group(self.GROUP, {B: 3, C: 2}) == {B: 3, C: 2}

    def test_missing_member(self):
        assert resolve_manual_group(self.GROUP, {B: 2}) is None

    def test_rank_outside_span(self):
        assert resolve_manual_group(self.GROUP, {B: 1, C: 2}) is None
        assert resolve_manual_group(self.GROUP, {B: 4, C: 2}) is None

    def test_duplicate_rank(self):
        assert resolve_manual_group(self.GROUP, {B: 2, C: 2}) is None

    def test_other_slots_ignored(self):
        assert resolve_manual_group(self.GROUP, {A: 2, B: 2, C: 3}) == {B: 2, C: 3}
