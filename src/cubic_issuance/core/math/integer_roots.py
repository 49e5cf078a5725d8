"""
Integer Roots — целочисленный корень n-й степени

floor-корень через binary search с saturating возведением в степень.
Используется inverse curve для восстановления supply по накопленному value.
"""

from cubic_issuance.core.math.uint256 import saturating_pow, validate_uint256


def integer_nth_root(x: int, n: int) -> int:
    """
    Наибольшее целое y такое, что y ** n <= x.

    Алгоритм: binary search по [1, hi], где hi = min(x, 2 ** (bitlen(x) // n + 1)).
    На каждом шаге mid ** n сравнивается с x через saturating pow, поэтому
    переполнение конверта трактуется как "слишком большое" и не строит
    огромных промежуточных чисел. По завершении возвращается left - 1.

    x == 0 обрабатывается до цикла; при x >= 1 левая граница стартует с 1
    (1 ** n <= x), поэтому left - 1 никогда не уходит в underflow.

    Args:
        x: Подкоренное значение (uint256)
        n: Степень корня (>= 1)

    Returns:
        floor(x ** (1/n))

    Raises:
        ValueError: Если n < 1 или x вне uint256

    Examples:
        >>> integer_nth_root(1000, 3)
        10
        >>> integer_nth_root(999, 3)
        9
        >>> integer_nth_root(1000000000000, 5)
        251
    """
    validate_uint256(x, "x")
    if isinstance(n, bool) or not isinstance(n, int) or n < 1:
        raise ValueError(f"n must be an int >= 1, got {n}")

    if x == 0:
        return 0

    if n == 1:
        return x

    left = 1
    right = min(x, 1 << (x.bit_length() // n + 1))

    while left <= right:
        mid = (left + right) // 2
        if saturating_pow(mid, n) <= x:
            left = mid + 1
        else:
            right = mid - 1

    return left - 1
