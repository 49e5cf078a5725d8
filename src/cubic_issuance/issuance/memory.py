"""
In-memory collaborators — эталонные реализации UnitLedger и ValueTransfer

Балансы хранятся в dict (account → amount). Hook'и получателей позволяют
моделировать "контракты", исполняющие код при получении units или value,
включая попытки повторного входа в IssuanceLedger.

Если hook получателя бросает исключение, перевод откатывается и исключение
пробрасывается вызывающему (перевод либо прошёл целиком, либо не прошёл).
"""

import logging
from typing import Callable, Dict, Optional

from cubic_issuance.core.errors import InsufficientAmount, InsufficientFunds
from cubic_issuance.core.math.uint256 import validate_uint256
from cubic_issuance.issuance.collaborators import (
    UnitLedger,
    UnitsReceivedHook,
    ValueReceivedHook,
    ValueTransfer,
)

logger = logging.getLogger(__name__)

# Hook получателя: (sender, amount)
RecipientHook = Callable[[str, int], None]


class InMemoryUnitLedger(UnitLedger):
    """
    Dict-of-balances ledger units.

    Переводы на адрес эмитента маршрутизируются в receive hook
    (on_units_received_by_self). Для остальных адресов можно
    зарегистрировать recipient hook, вызываемый после transfer.
    mint и burn hook'ов не вызывают.
    """

    def __init__(self):
        self.accounts: Dict[str, int] = {}
        self._issuer: Optional[str] = None
        self._issuer_hook: Optional[UnitsReceivedHook] = None
        self._recipient_hooks: Dict[str, RecipientHook] = {}

    @property
    def total(self) -> int:
        """Сумма всех балансов (включая holding эмитента)."""
        return sum(self.accounts.values())

    def balance_of(self, account: str) -> int:
        return self.accounts.get(account, 0)

    def mint(self, account: str, amount: int) -> None:
        validate_uint256(amount, "amount")
        self.accounts[account] = self.balance_of(account) + amount

    def burn(self, account: str, amount: int) -> None:
        validate_uint256(amount, "amount")
        balance = self.balance_of(account)
        if balance < amount:
            raise InsufficientAmount(f"{account}: balance {balance} < {amount}")
        self.accounts[account] = balance - amount

    def transfer(self, sender: str, recipient: str, amount: int) -> bool:
        validate_uint256(amount, "amount")
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientAmount(f"{sender}: balance {balance} < {amount}")

        self.accounts[sender] = balance - amount
        self.accounts[recipient] = self.balance_of(recipient) + amount

        if recipient == self._issuer and self._issuer_hook is not None:
            hook: Optional[RecipientHook] = self._issuer_hook
        else:
            hook = self._recipient_hooks.get(recipient)

        if hook is not None:
            try:
                hook(sender, amount)
            except Exception:
                logger.warning(f"Unit transfer {sender} -> {recipient} ({amount}) reverted by recipient hook")
                self.accounts[recipient] -= amount
                self.accounts[sender] += amount
                raise

        return True

    def set_receive_hook(self, issuer: str, hook: Optional[UnitsReceivedHook]) -> None:
        self._issuer = issuer
        self._issuer_hook = hook

    def set_recipient_hook(self, account: str, hook: Optional[RecipientHook]) -> None:
        """Регистрация (или снятие при hook=None) hook'а получателя units."""
        if hook is None:
            self._recipient_hooks.pop(account, None)
        else:
            self._recipient_hooks[account] = hook


class InMemoryValueVault(ValueTransfer):
    """
    Dict-of-balances транспорт value.

    send() на адрес с зарегистрированным hook'ом исполняет этот hook
    синхронно, как fallback контракта-получателя. collect() списывает
    value, приложенное к buy, без hook'ов: им же ledger возвращает
    депозит при откате.
    """

    def __init__(self):
        self.balances: Dict[str, int] = {}
        self._hooks: Dict[str, RecipientHook] = {}

    def balance_of(self, account: str) -> int:
        return self.balances.get(account, 0)

    def fund(self, account: str, amount: int) -> None:
        """Начисление value account'у извне системы."""
        validate_uint256(amount, "amount")
        self.balances[account] = self.balance_of(account) + amount

    def send(self, sender: str, recipient: str, amount: int) -> None:
        self._move(sender, recipient, amount)

        hook = self._hooks.get(recipient)
        if hook is None:
            return

        try:
            hook(sender, amount)
        except Exception:
            logger.warning(f"Value transfer {sender} -> {recipient} ({amount}) reverted by recipient hook")
            self._move(recipient, sender, amount)
            raise

    def collect(self, payer: str, recipient: str, amount: int) -> None:
        self._move(payer, recipient, amount)
        logger.debug(f"Collected {amount} from {payer} to {recipient}")

    def set_receive_hook(self, issuer: str, hook: Optional[ValueReceivedHook]) -> None:
        self.set_hook(issuer, hook)

    def set_hook(self, account: str, hook: Optional[RecipientHook]) -> None:
        """Регистрация (или снятие при hook=None) hook'а получателя value."""
        if hook is None:
            self._hooks.pop(account, None)
        else:
            self._hooks[account] = hook

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        validate_uint256(amount, "amount")
        balance = self.balance_of(sender)
        if balance < amount:
            raise InsufficientFunds(f"{sender}: value balance {balance} < {amount}")
        self.balances[sender] = balance - amount
        self.balances[recipient] = self.balance_of(recipient) + amount
