"""
Тесты для Bonding Curve — curve_price / inverse_curve / pool_value

Проверяемые инварианты:
1. Конкретные сценарии цены и inverse (scale 10**6, знаменатель 3)
2. Аддитивность: цена партии равна сумме цен любого её разбиения
3. Монотонность по amount и по supply
4. Round-trip: inverse(price(a, s), s) отстаёт от a не более чем на 1 unit
5. Покупка inverse(v, s) units стоит не больше v
6. Переполнение → ArithmeticOverflow, никогда не wrap-around
"""

import random

import pytest

from cubic_issuance.core.errors import ArithmeticOverflow, BelowMinimum
from cubic_issuance.core.math import bonding_curve
from cubic_issuance.core.math.bonding_curve import (
    SCALE,
    curve_price,
    inverse_curve,
    pool_value,
)
from cubic_issuance.core.math.uint256 import UINT256_MAX


# =============================================================================
# ТЕСТЫ: pool_value
# =============================================================================


class TestPoolValue:
    """Интеграл кривой от нуля: (s + 1) ** 3 // 3."""

    def test_small_values(self):
        assert [pool_value(s) for s in range(6)] == [0, 2, 9, 21, 41, 72]

    def test_truncation(self):
        assert pool_value(99) == 333333
        assert pool_value(100) == 343433

    def test_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            pool_value(2**86)


# =============================================================================
# ТЕСТЫ: curve_price
# =============================================================================


class TestCurvePriceScenarios:
    """Конкретные сценарии цены."""

    def test_hundred_units_from_zero(self):
        assert curve_price(100, 0) == 343433000000

    def test_fifty_units_at_hundred(self):
        """pool_value(150) - pool_value(100) = 1147650 - 343433."""
        assert curve_price(50, 100) == 804217000000

    def test_large_batch(self):
        assert curve_price(20000, 1000) == 3087106686667000000

    def test_telescoping_vs_rounding_after_subtraction(self):
        # Округление после вычитания, ((s+a+1)**3 - (s+1)**3) // 3, даёт
        # 804216000000 и 3087106686666000000. Разность pool_value на единицу
        # кривой больше, зато последовательные покупки складываются точно.
        for amount, supply, rounded_late in (
            (50, 100, 804216000000),
            (20000, 1000, 3087106686666000000),
        ):
            assert ((supply + amount + 1) ** 3 - (supply + 1) ** 3) // 3 * SCALE == rounded_late
            assert curve_price(amount, supply) == rounded_late + SCALE

    def test_single_units_from_zero(self):
        assert curve_price(1, 0) == 2 * SCALE
        assert curve_price(1, 1) == 7 * SCALE
        assert curve_price(1, 2) == 12 * SCALE
        assert curve_price(3, 0) == 21 * SCALE

    def test_zero_amount_is_free(self):
        assert curve_price(0, 0) == 0
        assert curve_price(0, 123456) == 0

    def test_custom_scale(self):
        assert curve_price(100, 0, scale=1) == 343433
        assert curve_price(100, 0, scale=10**18) == 343433 * 10**18

    def test_collected_value_is_price_from_zero(self):
        """curve_price(supply, 0) — value, собранное за весь supply."""
        assert curve_price(150, 0) == curve_price(100, 0) + curve_price(50, 100)


class TestCurvePriceAdditivity:
    """Цена партии равна сумме цен последовательных покупок частей."""

    def test_three_single_purchases_equal_one_batch(self):
        total = curve_price(1, 0) + curve_price(1, 1) + curve_price(1, 2)
        assert total == curve_price(3, 0)

    @pytest.mark.parametrize("supply", [0, 1, 2, 3, 100, 1001, 99999])
    def test_all_splits_of_small_batch(self, supply):
        amount = 17
        batch = curve_price(amount, supply)
        for a1 in range(amount + 1):
            a2 = amount - a1
            assert curve_price(a1, supply) + curve_price(a2, supply + a1) == batch

    def test_random_splits(self):
        rng = random.Random(31337)
        for _ in range(500):
            supply = rng.randrange(0, 10**7)
            a1 = rng.randrange(0, 10**5)
            a2 = rng.randrange(0, 10**5)
            assert curve_price(a1 + a2, supply) == (
                curve_price(a1, supply) + curve_price(a2, supply + a1)
            )

    def test_many_way_partition(self):
        rng = random.Random(99)
        supply = 4242
        parts = [rng.randrange(0, 50) for _ in range(40)]

        sequential = 0
        cursor = supply
        for part in parts:
            sequential += curve_price(part, cursor)
            cursor += part

        assert sequential == curve_price(sum(parts), supply)


class TestCurvePriceMonotonicity:
    """Цена не убывает ни по amount, ни по supply."""

    def test_non_decreasing_in_amount(self):
        for supply in (0, 1, 2, 50, 1000):
            prices = [curve_price(a, supply) for a in range(200)]
            assert prices == sorted(prices)

    def test_non_decreasing_in_supply(self):
        for amount in (0, 1, 2, 3, 7, 100):
            prices = [curve_price(amount, s) for s in range(300)]
            assert prices == sorted(prices)

    def test_random_pairs(self):
        rng = random.Random(5)
        for _ in range(300):
            a = rng.randrange(0, 10**6)
            s = rng.randrange(0, 10**8)
            da = rng.randrange(0, 1000)
            ds = rng.randrange(0, 1000)
            assert curve_price(a + da, s) >= curve_price(a, s)
            assert curve_price(a, s + ds) >= curve_price(a, s)


class TestCurvePriceOverflow:
    """Переполнение проверяется явно."""

    def test_cube_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            curve_price(1, 2**86)

    def test_scale_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            curve_price(2**80, 0)

    def test_same_batch_fits_without_scale(self):
        assert curve_price(2**80, 0, scale=1) == (2**80 + 1) ** 3 // 3

    def test_sum_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            curve_price(UINT256_MAX, 1)


class TestCurvePriceValidation:
    """Невалидные аргументы — ошибка вызова, не доменная ошибка."""

    def test_negative_amount(self):
        with pytest.raises(ValueError, match="amount must be non-negative"):
            curve_price(-1, 0)

    def test_negative_supply(self):
        with pytest.raises(ValueError, match="supply must be non-negative"):
            curve_price(1, -5)

    def test_zero_scale(self):
        with pytest.raises(ValueError, match="scale must be positive"):
            curve_price(1, 0, scale=0)

    def test_float_rejected(self):
        with pytest.raises(ValueError, match="must be an int"):
            curve_price(1.5, 0)


# =============================================================================
# ТЕСТЫ: inverse_curve
# =============================================================================


class TestInverseCurveScenarios:
    """Конкретные сценарии inverse."""

    def test_one_quintillion_from_zero(self):
        assert inverse_curve(1_000_000_000_000_000_000, 0) == 14421

    def test_half_quintillion_at_hundred(self):
        assert inverse_curve(500_000_000_000_000_000, 100) == 11346

    def test_sub_scale_value_buys_nothing(self):
        """Остаток меньше одной единицы scale отбрасывается."""
        assert inverse_curve(0, 0) == 0
        assert inverse_curve(SCALE - 1, 0) == 0

    def test_truncation_rounds_down(self):
        """price(2, 0) == 9 * SCALE: на единицу меньше — только 1 unit."""
        assert curve_price(2, 0) == 9 * SCALE
        assert inverse_curve(9 * SCALE, 0) == 2
        assert inverse_curve(9 * SCALE - 1, 0) == 1

    def test_custom_scale(self):
        assert inverse_curve(10**12, 0, scale=1) == inverse_curve(10**18, 0)


class TestInverseCurveBounds:
    """Round-trip и affordability."""

    def test_round_trip_within_one_unit(self):
        for supply in range(0, 60):
            for amount in range(0, 60):
                recovered = inverse_curve(curve_price(amount, supply), supply)
                assert recovered in (amount, amount - 1) or (amount == 0 and recovered == 0)

    def test_round_trip_exact_for_multiples_of_three(self):
        """(s + a + 1) ≡ (s + 1) mod 3 → truncation обеих границ совпадает."""
        rng = random.Random(3)
        for _ in range(300):
            supply = rng.randrange(0, 10**6)
            amount = 3 * rng.randrange(0, 10**4)
            assert inverse_curve(curve_price(amount, supply), supply) == amount

    def test_round_trip_under_returns_single_unit_at_zero(self):
        """price(1, 0) = 2 * SCALE, но 2 * 3 + 1 = 7 < 2 ** 3."""
        assert inverse_curve(curve_price(1, 0), 0) == 0

    def test_inverse_amount_is_affordable(self):
        rng = random.Random(42)
        for _ in range(500):
            supply = rng.randrange(0, 10**6)
            value = rng.randrange(0, 10**24)
            amount = inverse_curve(value, supply)
            assert curve_price(amount, supply) <= value

    def test_inverse_under_returns_at_most_one_unit(self):
        rng = random.Random(43)
        for _ in range(500):
            supply = rng.randrange(0, 10**6)
            value = rng.randrange(0, 10**24)
            amount = inverse_curve(value, supply)
            assert curve_price(amount + 2, supply) > value

    def test_inverse_never_over_returns_exact_payment(self):
        rng = random.Random(44)
        for _ in range(300):
            supply = rng.randrange(0, 10**6)
            amount = rng.randrange(0, 10**5)
            assert inverse_curve(curve_price(amount, supply), supply) <= amount


class TestInverseCurveErrors:
    """BelowMinimum и переполнение."""

    def test_below_minimum_when_root_below_supply(self, monkeypatch):
        monkeypatch.setattr(bonding_curve, "integer_nth_root", lambda x, n: 5)
        with pytest.raises(BelowMinimum, match="root 5 < supply \\+ 1 = 11"):
            inverse_curve(10**9, 10)

    def test_root_at_supply_plus_one_is_zero_units(self, monkeypatch):
        monkeypatch.setattr(bonding_curve, "integer_nth_root", lambda x, n: 11)
        assert inverse_curve(10**9, 10) == 0

    def test_radicand_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            inverse_curve(UINT256_MAX, 0, scale=1)

    def test_supply_cube_overflow(self):
        with pytest.raises(ArithmeticOverflow):
            inverse_curve(0, 2**86)

    def test_max_value_with_default_scale_fits(self):
        amount = inverse_curve(UINT256_MAX, 0)
        assert curve_price(amount, 0) <= UINT256_MAX

    def test_negative_value(self):
        with pytest.raises(ValueError, match="value must be non-negative"):
            inverse_curve(-1, 0)
