from dataclasses import dataclass
from decimal import Decimal, localcontext
from itertools import groupby
from typing import Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from src.common.models import BalanceSnapshot, NormalizedTransaction, transaction_amount
from src.common.settings import DEFAULT_BALANCE_TYPES


@dataclass(frozen=True)
class ReconciledWindow:
    """
    Booked and pending transactions of one account, merged into a single
    timeline and anchored to the provider's balance.

    Attributes:
        institution_id: institution the account belongs to
        starting_balance: balance before the first booked transaction, None without balance data
        booked: settled transactions, as received
        pending: unsettled transactions, as received
        all: booked + pending ascending by date, booked first on equal dates
        balance: snapshot the starting balance was derived from
        diagnostics: problems found while reconciling (e.g. unparseable amounts)
    """
    institution_id: Optional[str]
    starting_balance: Optional[Decimal]
    booked: Tuple[NormalizedTransaction, ...]
    pending: Tuple[NormalizedTransaction, ...]
    all: Tuple[NormalizedTransaction, ...]
    balance: Optional[BalanceSnapshot] = None
    diagnostics: Tuple[str, ...] = ()

    def balance_history(self) -> List[Tuple[str, Decimal]]:
        """
        End-of-day balance for every date with booked transactions, ascending.
        Empty when the starting balance is unknown. Undated transactions are
        part of the starting balance but have no day of their own.
        """
        if self.starting_balance is None:
            return []

        dated = sorted(
            (tx['date'], amount)
            for tx in self.booked
            if tx.get('date')
            for amount in (transaction_amount(tx),)
            if amount is not None
        )
        history = []
        running = self.starting_balance
        for day, entries in groupby(dated, key=lambda e: e[0]):
            running += sum((amount for _, amount in entries), Decimal(0))
            history.append((day, running))
        return history

    def to_payload(self, include_balance: bool = True) -> dict:
        """JSON-ready representation; decimals are rendered as strings."""
        data = {'institutionId': self.institution_id}
        if include_balance and self.starting_balance is not None:
            data['startingBalance'] = str(self.starting_balance)
            data['balanceHistory'] = [
                {'date': day, 'balance': str(amount)}
                for day, amount in self.balance_history()
            ]
        data['transactions'] = {
            'booked': list(self.booked),
            'pending': list(self.pending),
            'all': list(self.all),
        }
        return data


class Reconciler:
    """
    Computes the starting balance of a window and the merged transaction order.
    Pure: performs no I/O and never raises for malformed transactions.
    """

    def __init__(self, preferred_balance_types: Sequence[str] = DEFAULT_BALANCE_TYPES):
        self.preferred_balance_types = tuple(preferred_balance_types)

    def select_balance(self, balances: Iterable[Optional[BalanceSnapshot]]) -> Optional[BalanceSnapshot]:
        """
        Returns the snapshot of the most preferred balance type, or None when the
        provider reported none of the configured types.
        """
        by_type = {}
        for snapshot in balances:
            if snapshot is not None and snapshot.balance_type not in by_type:
                by_type[snapshot.balance_type] = snapshot

        for balance_type in self.preferred_balance_types:
            if balance_type in by_type:
                return by_type[balance_type]
        return None

    def reconcile(
        self,
        current_balance: Optional[BalanceSnapshot],
        booked: Sequence[NormalizedTransaction],
        pending: Sequence[NormalizedTransaction],
        institution_id: Optional[str] = None,
    ) -> ReconciledWindow:
        booked = tuple(booked)
        pending = tuple(pending)
        diagnostics = []

        total = Decimal(0)
        with localcontext() as ctx:
            ctx.prec = 60
            for i, tx in enumerate(booked):
                amount = transaction_amount(tx)
                if amount is None:
                    diagnostics.append(f"booked[{i}]: unparseable amount, excluded from starting balance")
                    continue
                total += amount

            starting_balance = None
            if current_balance is not None:
                starting_balance = current_balance.amount - total

        return ReconciledWindow(
            institution_id=institution_id,
            starting_balance=starting_balance,
            booked=booked,
            pending=pending,
            all=self.merge(booked, pending),
            balance=current_balance,
            diagnostics=tuple(diagnostics),
        )

    def merge(
        self,
        booked: Sequence[NormalizedTransaction],
        pending: Sequence[NormalizedTransaction],
    ) -> Tuple[NormalizedTransaction, ...]:
        """
        Stable merge: ascending date, booked before pending on the same date,
        original order otherwise. Undated transactions go last. A transaction
        whose transactionId was already seen (booked first, then pending) is
        left out.
        """
        records = []
        seen_ids = set()
        for rank, transactions in ((0, booked), (1, pending)):
            for tx in transactions:
                tx_id = tx.get('transactionId')
                if tx_id:
                    if tx_id in seen_ids:
                        continue
                    seen_ids.add(tx_id)
                records.append((tx, rank))

        if not records:
            return ()

        df = pd.DataFrame(
            {
                'undated': [not tx.get('date') for tx, _ in records],
                'date': [tx.get('date') or '' for tx, _ in records],
                'settled_rank': [rank for _, rank in records],
                'position': range(len(records)),
            }
        )
        df = df.sort_values(by=['undated', 'date', 'settled_rank', 'position'], kind='mergesort')

        return tuple(records[i][0] for i in df['position'])
