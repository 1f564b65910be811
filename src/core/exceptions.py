"""
Domain exceptions raised while retrieving account data from the aggregation provider.

Each exception carries a `details` dict with the context needed to report it
(requisition status, linked accounts, provider response). None of them is
retryable by this package; the error classifier relabels them for the caller.
"""
from typing import Any, Dict, Optional


class BankSyncError(Exception):
    """Base class for all classified failures."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.details = details or {}
        super().__init__(message)


class RequisitionNotLinked(BankSyncError):
    """
    Raised when the requisition is not in the linked state
    (created, expired, rejected, suspended, or any other provider status).
    """

    def __init__(self, requisition_id: str, requisition_status: Any, details: Optional[Dict[str, Any]] = None):
        self.requisition_id = requisition_id
        self.requisition_status = getattr(requisition_status, 'value', requisition_status)
        merged = {'requisitionId': requisition_id, 'requisitionStatus': self.requisition_status}
        merged.update(details or {})
        super().__init__(
            f"Requisition {requisition_id} is not linked (status: {self.requisition_status})",
            merged,
        )


class AccountNotLinkedToRequisition(BankSyncError):
    """Raised when a linked requisition does not include the requested account."""

    def __init__(self, requisition_id: str, account_id: str, details: Optional[Dict[str, Any]] = None):
        self.requisition_id = requisition_id
        self.account_id = account_id
        merged = {'requisitionId': requisition_id, 'accountId': account_id}
        merged.update(details or {})
        super().__init__(
            f"Account {account_id} is not linked to requisition {requisition_id}",
            merged,
        )


class GenericProviderError(BankSyncError):
    """
    Structured failure reported by the provider client.

    `details["response"]` may hold {"status": int, "headers": dict, "data": Any}.
    """


class RateLimitError(GenericProviderError):
    """The provider refused the call because a rate limit was exceeded."""
