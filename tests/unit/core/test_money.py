from decimal import Decimal

import pytest

from modules.core.money import MONEY_LIMIT, ZERO, fits_money_field

pytestmark = pytest.mark.unit


class TestFitsMoneyField:
    @pytest.mark.parametrize("value", ["0", "1.5", "19.99", "100", "1E+3"])
    def test_accepts_two_places_or_fewer(self, value):
        assert fits_money_field(Decimal(value))

    def test_trailing_zeros_do_not_count(self):
        assert fits_money_field(Decimal("2.5000"))

    def test_rejects_three_places(self):
        assert not fits_money_field(Decimal("0.001"))

    @pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity"])
    def test_rejects_non_finite(self, value):
        assert not fits_money_field(Decimal(value))

    def test_zero_has_two_places(self):
        assert ZERO == Decimal("0.00")
        assert str(ZERO) == "0.00"


class TestMoneyColumnLimit:
    def test_largest_storable_amount_fits(self):
        assert fits_money_field(Decimal("9999999999.99"))

    @pytest.mark.parametrize("value", ["10000000000", "99999999999999.99", "-10000000000.00"])
    def test_amounts_beyond_twelve_digits_rejected(self, value):
        assert not fits_money_field(Decimal(value))

    def test_limit_value(self):
        assert MONEY_LIMIT == Decimal("10000000000")
