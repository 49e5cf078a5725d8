"""
Events — наблюдаемые события issuance engine

Bought(account, amount) и Sold(account, amount) эмитятся только после
успешного завершения перехода. При откате события не публикуются.
"""

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, Field, field_serializer, field_validator

from cubic_issuance.core.math.uint256 import validate_uint256


# =============================================================================
# ENUMS
# =============================================================================


class EventKind(str, Enum):
    """Тип события."""

    BOUGHT = "Bought"
    SOLD = "Sold"


# =============================================================================
# EVENT MODELS
# =============================================================================


class Bought(BaseModel):
    """Units выпущены account'у за value."""

    kind: Literal[EventKind.BOUGHT] = EventKind.BOUGHT
    account: str = Field(..., min_length=1, description="Адрес покупателя")
    amount: int = Field(..., gt=0, description="Выпущенные units")

    model_config = {"frozen": True}

    @field_validator("amount")
    @classmethod
    def validate_uint256_range(cls, v: int) -> int:
        return validate_uint256(v, "amount")

    @field_serializer("amount", when_used="json")
    def _serialize_amount(self, v: int) -> str:
        return str(v)


class Sold(BaseModel):
    """Units погашены account'ом за payout."""

    kind: Literal[EventKind.SOLD] = EventKind.SOLD
    account: str = Field(..., min_length=1, description="Адрес продавца")
    amount: int = Field(..., gt=0, description="Погашенные units")

    model_config = {"frozen": True}

    @field_validator("amount")
    @classmethod
    def validate_uint256_range(cls, v: int) -> int:
        return validate_uint256(v, "amount")

    @field_serializer("amount", when_used="json")
    def _serialize_amount(self, v: int) -> str:
        return str(v)


LedgerEvent = Union[Bought, Sold]
