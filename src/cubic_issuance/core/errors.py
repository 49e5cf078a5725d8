"""
Issuance Errors — таксономия ошибок issuance engine

Все ошибки локальные и синхронные: фатальны только для вызова, который их
вызвал. Перед тем как ошибка дойдёт до вызывающего, все мутации состояния,
сделанные в рамках этого вызова, откатываются (atomic all-or-nothing).

Каждое исключение несёт машинно-читаемый `reason` (snake_case), который
используется в логах и в диагностике.
"""


class IssuanceError(Exception):
    """
    Базовый класс для всех ошибок issuance engine.

    Attributes:
        reason: Машинно-читаемая причина отказа
    """

    reason: str = "issuance_error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.reason)


class ZeroAmount(IssuanceError):
    """Запрошено нулевое количество units."""

    reason = "zero_amount"


class AmountTooHigh(IssuanceError):
    """Количество units превышает per-call лимит покупки."""

    reason = "amount_too_high"


class InsufficientFunds(IssuanceError):
    """
    Недостаточно value.

    Покрывает оба случая:
    - value не приложено вовсе (deposited_value == 0)
    - value меньше вычисленной цены по кривой
    """

    reason = "insufficient_funds"


class InsufficientAmount(IssuanceError):
    """Баланс продавца меньше запрошенного количества units."""

    reason = "insufficient_amount"


class SupplyCeilingReached(IssuanceError):
    """Новый supply превышает сконфигурированный потолок."""

    reason = "supply_ceiling_reached"


class BelowMinimum(IssuanceError):
    """
    Inverse curve: value не покрывает даже нулевой выпуск при текущем supply.

    Возникает только из-за truncating деления value // scale.
    """

    reason = "below_minimum"


class ArithmeticOverflow(IssuanceError, OverflowError):
    """
    Переполнение 256-битного конверта в вычислениях кривой или корня.

    Никогда не "заворачивается" молча: результат за пределами
    [0, UINT256_MAX] всегда приводит к этому исключению.
    """

    reason = "overflow"


class ReentrantCall(IssuanceError):
    """Повторный вход в buy/sell во время выполнения другого buy/sell."""

    reason = "reentrant_call"
