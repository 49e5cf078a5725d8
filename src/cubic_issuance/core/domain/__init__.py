"""
Domain models and value objects.

Contains the ephemeral purchase/sale requests and the observable ledger events.
"""

from cubic_issuance.core.domain.events import Bought, EventKind, LedgerEvent, Sold
from cubic_issuance.core.domain.requests import (
    PurchaseRequest,
    SaleRequest,
    purchase_request_from_payload,
    sale_request_from_payload,
)

__all__ = [
    # Requests
    "PurchaseRequest",
    "SaleRequest",
    "purchase_request_from_payload",
    "sale_request_from_payload",
    # Events
    "Bought",
    "EventKind",
    "LedgerEvent",
    "Sold",
]
