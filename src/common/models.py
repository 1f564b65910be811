from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

# Provider transactions are plain mappings; normalization returns new dicts.
RawTransaction = Mapping[str, Any]
NormalizedTransaction = Dict[str, Any]


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    Converts a provider amount ("-8.00", 12, Decimal) to Decimal.
    Returns None when the value cannot be represented exactly.
    """
    if value is None or isinstance(value, (bool, float)):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def transaction_amount(transaction: RawTransaction) -> Optional[Decimal]:
    """Signed amount of a raw or normalized transaction."""
    amount_field = transaction.get('transactionAmount')
    if isinstance(amount_field, Mapping):
        return parse_amount(amount_field.get('amount'))
    return parse_amount(transaction.get('amount'))


class RequisitionStatus(str, Enum):
    CREATED = "created"
    LINKED = "linked"
    EXPIRED = "expired"
    REJECTED = "rejected"
    SUSPENDED = "suspended"

    @classmethod
    def parse(cls, value: Any) -> Union["RequisitionStatus", str]:
        """
        Accepts long names ("linked") and provider codes ("LN").
        Unknown statuses are returned unchanged as strings.
        """
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        code = _STATUS_CODES.get(text.upper())
        if code is not None:
            return code
        try:
            return cls(text.lower())
        except ValueError:
            return text


_STATUS_CODES = {
    "CR": RequisitionStatus.CREATED,
    "LN": RequisitionStatus.LINKED,
    "EX": RequisitionStatus.EXPIRED,
    "RJ": RequisitionStatus.REJECTED,
    "SU": RequisitionStatus.SUSPENDED,
}


@dataclass(frozen=True)
class Account:
    id: str
    institution_id: str
    iban: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_provider(cls, payload: Mapping[str, Any]) -> "Account":
        return cls(
            id=str(payload.get('id', '')),
            institution_id=str(payload.get('institution_id') or payload.get('institutionId') or ''),
            iban=payload.get('iban'),
        )


@dataclass(frozen=True)
class Requisition:
    id: str
    status: Union[RequisitionStatus, str]
    accounts: Tuple[str, ...] = ()

    @classmethod
    def from_provider(cls, payload: Mapping[str, Any]) -> "Requisition":
        return cls(
            id=str(payload.get('id', '')),
            status=RequisitionStatus.parse(payload.get('status')),
            accounts=tuple(str(a) for a in payload.get('accounts') or ()),
        )

    @property
    def is_linked(self) -> bool:
        return self.status is RequisitionStatus.LINKED


@dataclass(frozen=True)
class BalanceSnapshot:
    """
    A balance reported by the provider for one account.

    Attributes:
        amount: exact signed balance
        currency: ISO 4217 code
        balance_type: provider type ("interimAvailable", "expected", "closingBooked", ...)
        account_id: account the balance belongs to
        reference_date: date the provider computed the balance for, if given
    """
    amount: Decimal
    currency: str
    balance_type: str
    account_id: Optional[str] = None
    reference_date: Optional[str] = None

    @classmethod
    def from_provider(cls, payload: Mapping[str, Any], account_id: Optional[str] = None) -> Optional["BalanceSnapshot"]:
        """Returns None when the payload has no usable amount."""
        balance_amount = payload.get('balanceAmount') or {}
        amount = parse_amount(balance_amount.get('amount'))
        if amount is None:
            return None
        return cls(
            amount=amount,
            currency=str(balance_amount.get('currency') or ''),
            balance_type=str(payload.get('balanceType') or ''),
            account_id=account_id,
            reference_date=payload.get('referenceDate'),
        )

    def to_dict(self):
        return {
            'balanceAmount': {'amount': str(self.amount), 'currency': self.currency},
            'balanceType': self.balance_type,
            'referenceDate': self.reference_date,
        }


@dataclass(frozen=True)
class NormalizationResult:
    """A normalized transaction plus the name of the rule that produced it."""
    transaction: NormalizedTransaction
    rule: str
