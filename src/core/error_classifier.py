"""
Error Classifier

Relabels any failure raised while retrieving account data into a closed
taxonomy with a fixed error_type/error_code vocabulary, so callers always get
a structured payload instead of a bare exception. Nothing here retries.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx

from src.common.settings import DEFAULT_RATE_LIMIT_PREFIXES
from .exceptions import (
    AccountNotLinkedToRequisition,
    BankSyncError,
    GenericProviderError,
    RateLimitError,
    RequisitionNotLinked,
)


class ErrorKind(str, Enum):
    REQUISITION_NOT_LINKED = "RequisitionNotLinked"
    ACCOUNT_NOT_LINKED = "AccountNotLinkedToRequisition"
    RATE_LIMIT = "RateLimitError"
    PROVIDER_ERROR = "GenericProviderError"
    TRANSPORT_ERROR = "TransportError"
    UNKNOWN = "UnknownError"


# kind -> (error_type, error_code, status, reason)
CATEGORIES = {
    ErrorKind.REQUISITION_NOT_LINKED: (
        'ITEM_ERROR', 'ITEM_LOGIN_REQUIRED', 'expired',
        'Access to account has expired as set in End User Agreement',
    ),
    ErrorKind.ACCOUNT_NOT_LINKED: (
        'INVALID_INPUT', 'INVALID_ACCESS_TOKEN', 'rejected',
        'Account not linked with this requisition',
    ),
    ErrorKind.RATE_LIMIT: (
        'RATE_LIMIT_EXCEEDED', 'NORDIGEN_ERROR', 'rejected', 'Rate limit exceeded',
    ),
    ErrorKind.PROVIDER_ERROR: ('SYNC_ERROR', 'NORDIGEN_ERROR', None, None),
    ErrorKind.TRANSPORT_ERROR: ('SYNC_ERROR', 'NORDIGEN_ERROR', None, None),
    ErrorKind.UNKNOWN: ('UNKNOWN', 'UNKNOWN', None, 'Something went wrong'),
}


@dataclass(frozen=True)
class ClassifiedError:
    kind: ErrorKind
    error_type: str
    error_code: str
    message: str
    status: Optional[str] = None
    reason: Optional[str] = None
    http_status: Optional[int] = None
    rate_limit_headers: Dict[str, Any] = field(default_factory=dict)
    details: Dict[str, Any] = field(default_factory=dict)

    def to_payload(self) -> dict:
        payload = {'error_type': self.error_type, 'error_code': self.error_code}
        if self.status is not None:
            payload['status'] = self.status
        if self.reason is not None:
            payload['reason'] = self.reason
        if self.details:
            payload['details'] = self.details
        payload['rateLimitHeaders'] = dict(self.rate_limit_headers)
        return payload


def _response_headers(error: BaseException) -> Mapping:
    details = getattr(error, 'details', None)
    if isinstance(details, Mapping):
        response = details.get('response')
        if isinstance(response, Mapping) and isinstance(response.get('headers'), Mapping):
            return response['headers']

    response = getattr(error, 'response', None)
    headers = getattr(response, 'headers', None)
    if isinstance(headers, Mapping):
        return headers
    return {}


def _response_status(error: BaseException) -> Optional[int]:
    details = getattr(error, 'details', None)
    if isinstance(details, Mapping):
        response = details.get('response')
        if isinstance(response, Mapping) and isinstance(response.get('status'), int):
            return response['status']

    response = getattr(error, 'response', None)
    status = getattr(response, 'status_code', None)
    return status if isinstance(status, int) else None


def extract_rate_limit_headers(
    error: BaseException,
    prefixes: Sequence[str] = DEFAULT_RATE_LIMIT_PREFIXES,
) -> Dict[str, Any]:
    """Rate-limit headers of the failed response, copied verbatim."""
    prefixes = tuple(p.lower() for p in prefixes)
    return {
        key: value
        for key, value in _response_headers(error).items()
        if str(key).lower().startswith(prefixes)
    }


def error_kind(error: BaseException) -> ErrorKind:
    """Structured failures by type first, then transport failures by HTTP status."""
    if isinstance(error, RequisitionNotLinked):
        return ErrorKind.REQUISITION_NOT_LINKED
    if isinstance(error, AccountNotLinkedToRequisition):
        return ErrorKind.ACCOUNT_NOT_LINKED
    if isinstance(error, RateLimitError):
        return ErrorKind.RATE_LIMIT
    if isinstance(error, GenericProviderError):
        return ErrorKind.PROVIDER_ERROR
    if isinstance(error, httpx.HTTPError):
        if _response_status(error) == 429:
            return ErrorKind.RATE_LIMIT
        return ErrorKind.TRANSPORT_ERROR
    return ErrorKind.UNKNOWN


def classify_error(
    error: BaseException,
    rate_limit_prefixes: Sequence[str] = DEFAULT_RATE_LIMIT_PREFIXES,
) -> ClassifiedError:
    kind = error_kind(error)
    error_type, error_code, status, reason = CATEGORIES[kind]

    details = {}
    if isinstance(error, BankSyncError):
        details = dict(error.details)

    return ClassifiedError(
        kind=kind,
        error_type=error_type,
        error_code=error_code,
        message=str(error) or type(error).__name__,
        status=status,
        reason=reason,
        http_status=_response_status(error),
        rate_limit_headers=extract_rate_limit_headers(error, rate_limit_prefixes),
        details=details,
    )
