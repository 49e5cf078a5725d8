"""
Bonding Curve — кубическая кривая выпуска

Чистые, детерминированные функции ценообразования без скрытого состояния:
- pool_value(s): интеграл кривой от нуля до supply s в curve units
- curve_price(amount, supply): стоимость выпуска amount units при supply
- inverse_curve(value, supply): сколько units можно выпустить на value

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Только целочисленная арифметика в 256-битном конверте (без float)
2. Округление вниз и для цены, и для inverse (solvency эмитента)
3. Аддитивность: curve_price(a1 + a2, s) == curve_price(a1, s) + curve_price(a2, s + a1)
   точно, несмотря на truncation (цена — разность значений pool_value)
4. Переполнение → ArithmeticOverflow, никогда не wrap-around

ФОРМУЛЫ:
    pool_value(s) = (s + 1) ** 3 // 3
    curve_price(a, s) = (pool_value(s + a) - pool_value(s)) * SCALE
    inverse_curve(v, s) = nth_root((v // SCALE) * 3 + (s + 1) ** 3, 3) - s - 1
"""

from typing import Final

from cubic_issuance.core.errors import BelowMinimum
from cubic_issuance.core.math.integer_roots import integer_nth_root
from cubic_issuance.core.math.uint256 import (
    checked_add,
    checked_mul,
    checked_pow,
    checked_sub,
    validate_uint256,
)

# =============================================================================
# ПАРАМЕТРЫ КРИВОЙ
# =============================================================================

# Масштаб: перевод curve units в минимальную деноминацию value
SCALE: Final[int] = 10**6

# Степень кривой (интеграл квадратичной цены → куб)
CURVE_EXPONENT: Final[int] = 3

# Знаменатель интеграла
CURVE_DENOMINATOR: Final[int] = 3


def _validate_scale(scale: int) -> int:
    validate_uint256(scale, "scale")
    if scale == 0:
        raise ValueError("scale must be positive, got 0")
    return scale


# =============================================================================
# ИНТЕГРАЛ КРИВОЙ
# =============================================================================


def pool_value(supply: int) -> int:
    """
    Интеграл кривой от нуля до supply (в curve units, без масштаба).

    pool_value(s) = (s + 1) ** 3 // 3 — truncating integer division.

    Raises:
        ArithmeticOverflow: Если (supply + 1) ** 3 не помещается в uint256
    """
    validate_uint256(supply, "supply")
    shifted = checked_add(supply, 1)
    return checked_pow(shifted, CURVE_EXPONENT) // CURVE_DENOMINATOR


def curve_price(amount: int, supply: int, scale: int = SCALE) -> int:
    """
    Стоимость выпуска amount дополнительных units при текущем supply.

    Определённый интеграл кривой между supply и supply + amount, умноженный
    на scale. Результат монотонно не убывает и по amount, и по supply.

    Args:
        amount: Количество units для оценки (uint256)
        supply: Текущий outstanding supply (uint256)
        scale: Масштаб curve units → value (default: SCALE = 10**6)

    Returns:
        Цена в минимальных единицах value

    Raises:
        ValueError: Если аргументы вне uint256 или scale == 0
        ArithmeticOverflow: Если куб или масштабирование переполняют uint256

    Examples:
        >>> curve_price(100, 0)
        343433000000
        >>> curve_price(0, 500)
        0
    """
    validate_uint256(amount, "amount")
    validate_uint256(supply, "supply")
    _validate_scale(scale)

    upper = pool_value(checked_add(supply, amount))
    lower = pool_value(supply)

    return checked_mul(checked_sub(upper, lower), scale)


def inverse_curve(value: int, supply: int, scale: int = SCALE) -> int:
    """
    Количество units, которое можно выпустить на value при текущем supply.

    value сначала делится на scale с усечением к нулю: остаток меньше одной
    единицы scale не даёт дополнительных units (округление в пользу эмитента).

    Args:
        value: Внесённое value (uint256)
        supply: Текущий outstanding supply (uint256)
        scale: Масштаб curve units → value (default: SCALE)

    Returns:
        Количество units, цена которых не превышает value

    Raises:
        BelowMinimum: Если корень меньше supply + 1
        ArithmeticOverflow: Если промежуточные значения переполняют uint256

    Examples:
        >>> inverse_curve(10**18, 0)
        14421
    """
    validate_uint256(value, "value")
    validate_uint256(supply, "supply")
    _validate_scale(scale)

    shifted = checked_add(supply, 1)
    radicand = checked_add(
        checked_mul(value // scale, CURVE_DENOMINATOR),
        checked_pow(shifted, CURVE_EXPONENT),
    )
    root = integer_nth_root(radicand, CURVE_EXPONENT)

    if root < shifted:
        raise BelowMinimum(
            f"Value {value} cannot cover issuance at supply {supply}: "
            f"root {root} < supply + 1 = {shifted}"
        )

    return root - shifted
