"""
Base Classes for Normalization Module

Every institution normalizer implements BankNormalizer. Normalizers are pure:
they never mutate the provider record and never raise, so a sync always yields
a canonical transaction for every raw one.
"""
from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import date, datetime
from string import capwords
from typing import Optional, Tuple

import pandas as pd

from src.common.models import NormalizationResult, NormalizedTransaction, RawTransaction

# Source date fields, highest precedence first
DATE_FIELDS = ('bookingDate', 'bookingDateTime', 'valueDate', 'valueDateTime')


def resolve_date(transaction: RawTransaction) -> Optional[str]:
    """
    Returns the transaction's calendar date as YYYY-MM-DD.

    The first date field (in DATE_FIELDS order) that parses wins; datetime
    variants keep the wall-clock date they were reported with.
    Returns None when no field is present or parseable.
    """
    for field in DATE_FIELDS:
        value = transaction.get(field)
        if not value or not isinstance(value, (str, date, datetime)):
            continue
        # keywords such as "now" or "today" parse to the current clock
        if isinstance(value, str) and not value.strip()[:1].isdigit():
            continue
        try:
            ts = pd.Timestamp(value)
        except (ValueError, TypeError, OverflowError):
            continue
        if pd.isna(ts):
            continue
        return ts.strftime('%Y-%m-%d')
    return None


def title_case(text: str) -> str:
    """'BONIFICO ordinario' -> 'Bonifico Ordinario' (whitespace collapsed)."""
    return capwords(text.strip())


def build_normalized(transaction: RawTransaction, payee_name: str) -> NormalizedTransaction:
    """Copies every provider field and adds payeeName and date."""
    normalized = deepcopy(dict(transaction))
    normalized['payeeName'] = payee_name or ''
    normalized['date'] = resolve_date(transaction)
    return normalized


class BankNormalizer(ABC):
    """
    Capability implemented once per institution.

    Attributes:
        institution_ids: provider institution identifiers served by this normalizer
    """

    institution_ids: Tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def normalize(self, transaction: RawTransaction, booked: bool) -> NormalizedTransaction:
        """Normalize one raw transaction into the canonical shape."""
        return self.apply(transaction, booked).transaction

    @abstractmethod
    def apply(self, transaction: RawTransaction, booked: bool) -> NormalizationResult:
        """
        Same as normalize(), but also reports which rule produced the payee.
        Must be implemented by subclasses.
        """
        raise NotImplementedError
