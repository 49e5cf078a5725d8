"""
Requests — эфемерные запросы на покупку и продажу units

Immutable Pydantic модели. Не персистятся: живут только в рамках одного
вызова buy/sell. JSON-представление описано схемами
purchase_request.json и sale_request.json (amounts как десятичные строки).
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, ValidationInfo, field_serializer, field_validator

from cubic_issuance.core.contracts import validate_purchase_request, validate_sale_request
from cubic_issuance.core.math.uint256 import validate_uint256


class PurchaseRequest(BaseModel):
    """
    Запрос на покупку: (requester, amount, deposited_value).

    deposited_value — value, приложенное к вызову; излишек над ценой
    возвращается requester'у.
    """

    requester: str = Field(..., min_length=1, description="Адрес покупателя")
    amount: int = Field(..., ge=0, description="Количество units")
    deposited_value: int = Field(
        ..., ge=0, description="Приложенное value (минимальные единицы)"
    )

    model_config = {"frozen": True}

    @field_validator("amount", "deposited_value")
    @classmethod
    def validate_uint256_range(cls, v: int, info: ValidationInfo) -> int:
        """Проверка 256-битного конверта."""
        return validate_uint256(v, info.field_name)

    @field_serializer("amount", "deposited_value", when_used="json")
    def _serialize_uint(self, v: int) -> str:
        return str(v)


class SaleRequest(BaseModel):
    """Запрос на продажу: (requester, amount)."""

    requester: str = Field(..., min_length=1, description="Адрес продавца")
    amount: int = Field(..., ge=0, description="Количество units")

    model_config = {"frozen": True}

    @field_validator("amount")
    @classmethod
    def validate_uint256_range(cls, v: int) -> int:
        """Проверка 256-битного конверта."""
        return validate_uint256(v, "amount")

    @field_serializer("amount", when_used="json")
    def _serialize_uint(self, v: int) -> str:
        return str(v)


# =============================================================================
# JSON PAYLOADS
# =============================================================================


def purchase_request_from_payload(payload: Dict[str, Any]) -> PurchaseRequest:
    """
    Построение PurchaseRequest из JSON payload.

    Payload сначала проверяется по схеме purchase_request.json
    (amounts — десятичные строки), затем конвертируется в модель.

    Raises:
        jsonschema.ValidationError: Если payload не соответствует схеме
    """
    validate_purchase_request(payload)
    return PurchaseRequest(
        requester=payload["requester"],
        amount=int(payload["amount"]),
        deposited_value=int(payload["deposited_value"]),
    )


def sale_request_from_payload(payload: Dict[str, Any]) -> SaleRequest:
    """
    Построение SaleRequest из JSON payload.

    Raises:
        jsonschema.ValidationError: Если payload не соответствует схеме
    """
    validate_sale_request(payload)
    return SaleRequest(requester=payload["requester"], amount=int(payload["amount"]))
