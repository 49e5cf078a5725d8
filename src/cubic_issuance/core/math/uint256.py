"""
UInt256 — Checked Integer Arithmetic

Модуль задаёт 256-битный беззнаковый конверт для всей математики кривой:
- Валидация входов (int, не bool, в диапазоне [0, UINT256_MAX])
- Checked add/sub/mul/pow: выход за конверт → ArithmeticOverflow
- Saturating pow для сравнений (binary search в integer_nth_root)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Никакого float: все операции только над int
2. Переполнение никогда не заворачивается (wrap-around запрещён)
3. Все операции детерминированы и воспроизводимы
"""

from typing import Final

from cubic_issuance.core.errors import ArithmeticOverflow

# =============================================================================
# КОНВЕРТ
# =============================================================================

UINT256_BITS: Final[int] = 256

UINT256_MAX: Final[int] = (1 << UINT256_BITS) - 1


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_uint256(value: int, name: str) -> int:
    """
    Валидация, что значение — беззнаковое 256-битное целое.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)

    Returns:
        value без изменений

    Raises:
        ValueError: Если value не int, bool, отрицательное или > UINT256_MAX
    """
    # bool является подклассом int, но как количество units это ошибка вызова
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")

    if value > UINT256_MAX:
        raise ValueError(f"{name} must be <= UINT256_MAX, got {value}")

    return value


def require_in_range(value: int, what: str) -> int:
    """
    Проверка, что результат операции остался в конверте.

    Raises:
        ArithmeticOverflow: Если value вне [0, UINT256_MAX]
    """
    if value < 0 or value > UINT256_MAX:
        raise ArithmeticOverflow(f"{what} overflows uint256 envelope")
    return value


# =============================================================================
# CHECKED ARITHMETIC
# =============================================================================


def checked_add(a: int, b: int) -> int:
    """a + b с проверкой переполнения."""
    return require_in_range(a + b, f"{a} + {b}")


def checked_sub(a: int, b: int) -> int:
    """a - b; отрицательный результат трактуется как underflow."""
    return require_in_range(a - b, f"{a} - {b}")


def checked_mul(a: int, b: int) -> int:
    """a * b с проверкой переполнения."""
    return require_in_range(a * b, f"{a} * {b}")


def checked_pow(base: int, exponent: int) -> int:
    """
    base ** exponent с проверкой переполнения.

    Переполнение определяется до возведения в степень по длине в битах,
    поэтому огромные промежуточные числа не строятся.

    Raises:
        ArithmeticOverflow: Если результат > UINT256_MAX
    """
    result = saturating_pow(base, exponent)
    if result > UINT256_MAX:
        raise ArithmeticOverflow(f"{base} ** {exponent} overflows uint256 envelope")
    return result


def saturating_pow(base: int, exponent: int) -> int:
    """
    base ** exponent, насыщающийся на UINT256_MAX + 1.

    Любой результат, не помещающийся в конверт, возвращается как
    UINT256_MAX + 1. Этого достаточно для сравнений "mid ** n <= x"
    при x <= UINT256_MAX.

    Args:
        base: Основание (>= 0)
        exponent: Показатель (>= 0)

    Returns:
        Точное значение степени или UINT256_MAX + 1 при переполнении

    Examples:
        >>> saturating_pow(10, 3)
        1000
        >>> saturating_pow(2, 256) == UINT256_MAX + 1
        True
    """
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")

    if exponent == 0:
        return 1

    if base <= 1:
        return base

    # base >= 2: (bit_length - 1) * exponent есть нижняя граница длины результата
    if (base.bit_length() - 1) * exponent >= UINT256_BITS:
        return UINT256_MAX + 1

    result = base**exponent
    if result > UINT256_MAX:
        return UINT256_MAX + 1
    return result
