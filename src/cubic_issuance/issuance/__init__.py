"""Issuance — stateful buy/sell переходы по кривой выпуска.

- IssuanceLedger: единственный компонент, меняющий supply
- Capability interfaces внешних коллабораторов (UnitLedger, ValueTransfer)
- In-memory эталонные коллабораторы
- Reentrancy guard и журнал компенсаций
"""

from .collaborators import UnitLedger, ValueTransfer
from .guard import ReentrancyGuard, TransitionJournal
from .ledger import BuyResult, IssuanceLedger, LedgerConfig, SellResult
from .memory import InMemoryUnitLedger, InMemoryValueVault

__all__ = [
    "IssuanceLedger",
    "LedgerConfig",
    "BuyResult",
    "SellResult",
    "UnitLedger",
    "ValueTransfer",
    "InMemoryUnitLedger",
    "InMemoryValueVault",
    "ReentrancyGuard",
    "TransitionJournal",
]
