from scoresheet.logic.enums import GameMode, TotalCheck
from scoresheet.logic.validation import LEGACY_YONMA_TOTALS, check_total, expected_totals
from scoresheet.tests.conftest import make_points


class TestCheckTotal:
    def test_yonma_25000_table(self):
        points = make_points(A=35000, B=28000, C=22000, D=15000)
        assert check_total(points, GameMode.YONMA) == TotalCheck.OK

    def test_yonma_30000_table(self):
        points = make_points(A=45000, B=30000, C=25000, D=20000)
        assert check_total(points, GameMode.YONMA) == TotalCheck.OK

    def test_yonma_mistyped(self):
        points = make_points(A=35000, B=28000, C=22000, D=1500)
        assert check_total(points, GameMode.YONMA) == TotalCheck.NG

    def test_unset_slot_is_unknown(self):
        points = make_points(A=35000, B=28000, C=22000, D=None)
        assert check_total(points, GameMode.YONMA) == TotalCheck.UNKNOWN

    def test_sanma_default_total(self):
        points = make_points(A=50000, B=35000, C=20000)
        assert check_total(points, GameMode.SANMA) == TotalCheck.OK

    def test_sanma_rejects_yonma_total(self):
        points = make_points(A=50000, B=30000, C=20000)
        assert check_total(points, GameMode.SANMA) == TotalCheck.NG

    def test_sanma_ignores_seat_d(self):
        points = make_points(A=50000, B=35000, C=20000, D=12345)
        assert check_total(points, GameMode.SANMA) == TotalCheck.OK

    def test_sanma_custom_start_points(self):
        points = make_points(A=40000, B=30000, C=20000)
        assert check_total(points, GameMode.SANMA, start_points=30000) == TotalCheck.OK
        assert check_total(points, GameMode.SANMA) == TotalCheck.NG

    def test_yonma_custom_start_points_keeps_legacy_totals(self):
        odd_table = make_points(A=40000, B=30000, C=20000, D=18000)
        assert check_total(odd_table, GameMode.YONMA, start_points=27000) == TotalCheck.OK
        legacy = make_points(A=35000, B=28000, C=22000, D=15000)
        assert check_total(legacy, GameMode.YONMA, start_points=27000) == TotalCheck.OK


class TestExpectedTotals:
    def test_yonma_legacy(self):
        assert expected_totals(GameMode.YONMA) == LEGACY_YONMA_TOTALS == {100000, 120000}

    def test_sanma(self):
        assert expected_totals(GameMode.SANMA) == {105000}
        assert expected_totals(GameMode.SANMA, 40000) == {120000}
