"""
Unit tests for GenericNormalizer and the shared date/payee helpers.
"""
from datetime import date

import pytest

from src.normalization.base import DATE_FIELDS, resolve_date, title_case
from src.normalization.generic import GenericNormalizer, GENERIC_RULE, mask_iban


@pytest.fixture
def normalizer():
    return GenericNormalizer()


# =============================================================================
# DATE PRECEDENCE
# =============================================================================

def test_date_precedence_order():
    assert DATE_FIELDS == ('bookingDate', 'bookingDateTime', 'valueDate', 'valueDateTime')


@pytest.mark.parametrize("fields, expected", [
    ({'bookingDate': '2025-10-28', 'valueDate': '2025-10-30'}, '2025-10-28'),
    ({'bookingDateTime': '2025-10-27T23:10:00+01:00', 'valueDate': '2025-10-30'}, '2025-10-27'),
    ({'valueDate': '2025-10-30', 'valueDateTime': '2025-10-31T08:00:00Z'}, '2025-10-30'),
    ({'valueDateTime': '2025-10-31T08:00:00Z'}, '2025-10-31'),
    ({'bookingDate': '', 'valueDate': '2025-01-05'}, '2025-01-05'),
    ({'bookingDate': 'not a date', 'valueDate': '2025-01-05'}, '2025-01-05'),
    ({'bookingDate': date(2024, 2, 29)}, '2024-02-29'),
    ({'bookingDate': 'now', 'valueDate': '2025-01-05'}, '2025-01-05'),
    ({'bookingDateTime': 'today'}, None),
    ({'valueDate': ' Now '}, None),
])
def test_resolve_date(fields, expected):
    assert resolve_date(fields) == expected


def test_missing_dates_do_not_crash(normalizer, tx):
    normalized = normalizer.normalize(tx('-1.00', 'Something'), True)

    assert normalized['date'] is None
    assert normalized['payeeName'] == 'Something'


# =============================================================================
# PAYEE
# =============================================================================

def test_title_cases_free_text(normalizer, tx):
    result = normalizer.apply(tx('-10.00', 'Bonifico ordinario', bookingDate='2025-10-28'), True)

    assert result.rule == GENERIC_RULE
    assert result.transaction['payeeName'] == 'Bonifico Ordinario'
    assert result.transaction['date'] == '2025-10-28'


def test_outgoing_uses_creditor(normalizer, tx):
    normalized = normalizer.normalize(
        tx('-25.00', 'ignored', creditorName='ACME SPA', debtorName='MARIO ROSSI'), True
    )

    assert normalized['payeeName'] == 'Acme Spa'


def test_incoming_uses_debtor_with_masked_iban(normalizer, tx):
    normalized = normalizer.normalize(
        tx(
            '1200.00',
            'Stipendio',
            debtorName='ACME SPA',
            debtorAccount={'iban': 'IT60 X054 2811 1010 0000 0123 456'},
        ),
        True,
    )

    assert normalized['payeeName'] == 'Acme Spa (IT60 XXX 3456)'


def test_falls_back_to_the_other_counterparty(normalizer, tx):
    normalized = normalizer.normalize(tx('-5.00', None, debtorName='me'), False)

    assert normalized['payeeName'] == 'Me'


def test_unstructured_array_is_joined(normalizer, tx):
    normalized = normalizer.normalize(
        tx('-5.00', None, remittanceInformationUnstructuredArray=['CARD PAYMENT', 'coffee shop']), True
    )

    assert normalized['payeeName'] == 'Card Payment Coffee Shop'


def test_empty_payee_when_nothing_is_known(normalizer, tx):
    normalized = normalizer.normalize(tx('-5.00'), True)

    assert normalized['payeeName'] == ''


def test_normalization_is_idempotent(normalizer, tx):
    raw = tx('-10.00', 'Bonifico ordinario', valueDateTime='2025-10-28T10:00:00Z')

    once = normalizer.normalize(raw, True)
    twice = normalizer.normalize(once, True)

    assert (twice['payeeName'], twice['date']) == (once['payeeName'], once['date'])
    assert normalizer.normalize(raw, True) == once


def test_helpers():
    assert title_case('  BONIFICO   ordinario ') == 'Bonifico Ordinario'
    assert mask_iban('DE89370400440532013000') == '(DE89 XXX 3000)'
    assert mask_iban('short') == ''
