"""
Requisition state checks.

The requisition lifecycle (created -> linked -> expired/rejected/suspended) is
driven by the provider; this module only decides whether an account of a
requisition can be used to fetch transactions.
"""
from typing import Any, Mapping, Union

from src.common.models import Requisition
from .exceptions import AccountNotLinkedToRequisition, RequisitionNotLinked


def _as_requisition(requisition: Union[Requisition, Mapping[str, Any]]) -> Requisition:
    if isinstance(requisition, Requisition):
        return requisition
    return Requisition.from_provider(requisition)


def ensure_account_linked(requisition: Union[Requisition, Mapping[str, Any]], account_id: str) -> Requisition:
    """
    Validates that `account_id` can be synced through `requisition`.

    Returns:
        The parsed Requisition

    Raises:
        RequisitionNotLinked: status is anything but linked
        AccountNotLinkedToRequisition: linked, but the account is not part of it
    """
    req = _as_requisition(requisition)

    if not req.is_linked:
        raise RequisitionNotLinked(req.id, req.status)

    if str(account_id) not in req.accounts:
        raise AccountNotLinkedToRequisition(
            req.id, account_id, {'linkedAccounts': len(req.accounts)}
        )

    return req


def is_account_usable(requisition: Union[Requisition, Mapping[str, Any]], account_id: str) -> bool:
    try:
        ensure_account_linked(requisition, account_id)
    except (RequisitionNotLinked, AccountNotLinkedToRequisition):
        return False
    return True
