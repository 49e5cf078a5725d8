"""
Contract Validation Module

Модуль для валидации JSON контрактов issuance engine.
"""

from .validators import (
    SCHEMA_NAMES,
    SchemaLoader,
    validate_contract,
    validate_ledger_config,
    validate_ledger_event,
    validate_purchase_request,
    validate_sale_request,
    validator_for,
)

__all__ = [
    "SCHEMA_NAMES",
    "SchemaLoader",
    "validator_for",
    "validate_contract",
    "validate_purchase_request",
    "validate_sale_request",
    "validate_ledger_event",
    "validate_ledger_config",
]
