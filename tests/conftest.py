"""
Shared fixtures: provider payload builders and an in-memory provider client.
"""
import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.common.settings import Settings


class FakeProviderClient:
    """In-memory ProviderClient. Any attribute set to an exception is raised on call."""

    def __init__(self, requisition=None, account=None, booked=None, pending=None, balances=None):
        self.requisition = requisition or {
            'id': 'req-1',
            'status': 'LN',
            'accounts': ['acc-1'],
        }
        self.account = account or {
            'id': 'acc-1',
            'institution_id': 'WIDIBA_WIDIITMM',
            'iban': 'IT60X0542811101000000123456',
        }
        self.booked = booked if booked is not None else []
        self.pending = pending if pending is not None else []
        self.balances = balances if balances is not None else []
        self.errors = {}
        self.calls = []

    def _maybe_raise(self, name):
        self.calls.append(name)
        if name in self.errors:
            raise self.errors[name]

    def get_requisition(self, requisition_id):
        self._maybe_raise('get_requisition')
        return self.requisition

    def get_account(self, account_id):
        self._maybe_raise('get_account')
        return self.account

    def get_transactions(self, account_id, start_date, end_date):
        self._maybe_raise('get_transactions')
        return {'transactions': {'booked': self.booked, 'pending': self.pending}}

    def get_balances(self, account_id):
        self._maybe_raise('get_balances')
        return {'balances': self.balances}


def make_transaction(amount, remittance=None, **fields):
    tx = {'transactionAmount': {'amount': amount, 'currency': 'EUR'}}
    if remittance is not None:
        tx['remittanceInformationUnstructured'] = remittance
    tx.update(fields)
    return tx


def make_balance(amount, balance_type='interimAvailable', currency='EUR'):
    return {
        'balanceAmount': {'amount': amount, 'currency': currency},
        'balanceType': balance_type,
        'referenceDate': '2025-10-31',
    }


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def tx():
    """Factory for raw provider transactions."""
    return make_transaction


@pytest.fixture
def balance():
    """Factory for raw provider balances."""
    return make_balance


@pytest.fixture
def provider_client():
    return FakeProviderClient()


@pytest.fixture
def settings():
    return Settings(log_level="DEBUG", log_file=None)
