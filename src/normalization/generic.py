"""
Generic Normalizer

Default behavior for institutions without specific rules, and the fallback
every institution normalizer delegates to when none of its rules match.
"""
from typing import Any, Mapping, Optional

from src.common.models import NormalizationResult, RawTransaction, transaction_amount
from .base import BankNormalizer, build_normalized, title_case

GENERIC_RULE = 'generic'

# Free-text fields tried in order when no counterparty name is available
FREE_TEXT_FIELDS = (
    'remittanceInformationUnstructured',
    'remittanceInformationUnstructuredArray',
    'remittanceInformationStructured',
    'remittanceInformationStructuredArray',
    'additionalInformation',
)


def mask_iban(iban: str) -> str:
    """'IT60 X054 2811 1010 0000 0123 456' -> '(IT60 XXX 3456)'"""
    compact = "".join(str(iban).split())
    if len(compact) < 8:
        return ""
    return f"({compact[:4]} XXX {compact[-4:]})"


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple)):
        return " ".join(str(v).strip() for v in value if v).strip()
    return ""


class GenericNormalizer(BankNormalizer):

    institution_ids = ()

    def apply(self, transaction: RawTransaction, booked: bool) -> NormalizationResult:
        return NormalizationResult(
            build_normalized(transaction, self.payee_name(transaction)),
            GENERIC_RULE,
        )

    def payee_name(self, transaction: RawTransaction) -> str:
        """
        Counterparty name (debtor for incoming money, creditor for outgoing),
        followed by the masked counterparty IBAN when known. Without a
        counterparty the first free-text field is title-cased.
        """
        counterparty = self._counterparty(transaction)
        if counterparty:
            return counterparty

        for field in FREE_TEXT_FIELDS:
            text = _text(transaction.get(field))
            if text:
                return title_case(text)
        return ''

    def _counterparty(self, transaction: RawTransaction) -> Optional[str]:
        amount = transaction_amount(transaction)
        sides = ('debtor', 'creditor') if amount is not None and amount > 0 else ('creditor', 'debtor')

        for side in sides:
            name = _text(transaction.get(f'{side}Name'))
            if not name:
                continue
            parts = [title_case(name)]
            account = transaction.get(f'{side}Account')
            if isinstance(account, Mapping) and account.get('iban'):
                masked = mask_iban(account['iban'])
                if masked:
                    parts.append(masked)
            return " ".join(parts)
        return None
