"""
Collaborators — capability interfaces внешних компонентов

IssuanceLedger зависит только от этих интерфейсов и никогда от конкретной
реализации ledger'а:
- UnitLedger: балансы units (balance_of / mint / burn / transfer + receive hook)
- ValueTransfer: приём value, приложенного к buy, и выплаты эмитента

Любой вызов в коллабораторе может синхронно вызвать код получателя
(notification hook), поэтому IssuanceLedger держит reentrancy guard на всё
время buy/sell.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional

# Callback, вызываемый ledger'ом после transfer на адрес эмитента: (sender, amount)
UnitsReceivedHook = Callable[[str, int], None]

# Callback, вызываемый транспортом после поступления value на адрес эмитента: (sender, value)
ValueReceivedHook = Callable[[str, int], None]


class UnitLedger(ABC):
    """
    Внешний ledger fungible units.

    Хранение балансов, allowance и уведомления получателей — ответственность
    реализации. Для переводов на адрес эмитента реализация обязана вызвать
    зарегистрированный receive hook.
    """

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Текущий баланс units account'а."""

    @abstractmethod
    def mint(self, account: str, amount: int) -> None:
        """Начисление amount units account'у."""

    @abstractmethod
    def burn(self, account: str, amount: int) -> None:
        """Списание amount units с account'а."""

    @abstractmethod
    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        """
        Перевод units между адресами.

        Returns:
            True при успехе
        """

    @abstractmethod
    def set_receive_hook(self, issuer: str, hook: Optional[UnitsReceivedHook]) -> None:
        """Регистрация hook'а для переводов на адрес issuer."""


class ValueTransfer(ABC):
    """
    Внешний транспорт value.

    send() может синхронно исполнить код получателя (аналог fallback'а
    контракта), поэтому вызывается только последним шагом перехода.
    """

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Текущий баланс value account'а."""

    @abstractmethod
    def set_receive_hook(self, issuer: str, hook: Optional[ValueReceivedHook]) -> None:
        """Регистрация hook'а для value, поступающего на адрес issuer."""

    @abstractmethod
    def send(self, sender: str, recipient: str, amount: int) -> None:
        """
        Перевод amount value от sender к recipient.

        Raises:
            InsufficientFunds: Если у sender недостаточно value
        """

    @abstractmethod
    def collect(self, payer: str, recipient: str, amount: int) -> None:
        """
        Списание amount value с payer в пользу recipient без вызова hook'ов.

        Используется ledger'ом для приёма value, приложенного к buy, и для
        его возврата при откате.

        Raises:
            InsufficientFunds: Если у payer недостаточно value
        """
