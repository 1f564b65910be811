"""
Transaction Service

Runs one account sync against an injected provider client:
requisition check -> normalization -> reconciliation, and turns every failure
into a classified payload. This is the only layer that logs; the normalizers
and the reconciler report diagnostics as values.
"""
from collections import Counter
from typing import Any, List, Mapping, Optional, Protocol, Tuple

from src.common.logging_config import get_logger
from src.common.models import Account, BalanceSnapshot
from src.common.settings import Settings, load_settings
from src.core.error_classifier import ErrorKind, classify_error
from src.core.reconciler import Reconciler, ReconciledWindow
from src.core.requisition import ensure_account_linked
from src.normalization.registry import BankRegistry, default_registry

logger = get_logger(__name__)


class ProviderClient(Protocol):
    """
    Aggregation provider client (token handling, HTTP calls and retries live there).

    Payload shapes follow the provider API:
        get_requisition -> {"id", "status", "accounts": [...]}
        get_account -> {"id", "institution_id", "iban", ...}
        get_transactions -> {"transactions": {"booked": [...], "pending": [...]}}
        get_balances -> {"balances": [{"balanceAmount": {...}, "balanceType": ...}]}
    """

    def get_requisition(self, requisition_id: str) -> Mapping[str, Any]: ...

    def get_account(self, account_id: str) -> Mapping[str, Any]: ...

    def get_transactions(self, account_id: str, start_date: Optional[str], end_date: Optional[str]) -> Mapping[str, Any]: ...

    def get_balances(self, account_id: str) -> Mapping[str, Any]: ...


class TransactionService:

    def __init__(
        self,
        client: ProviderClient,
        registry: Optional[BankRegistry] = None,
        reconciler: Optional[Reconciler] = None,
        settings: Optional[Settings] = None,
    ):
        self.client = client
        self.settings = settings or load_settings()
        self.registry = registry or default_registry()
        self.reconciler = reconciler or Reconciler(self.settings.preferred_balance_types)

    def fetch_window(
        self,
        requisition_id: str,
        account_id: str,
        start_date: Optional[str],
        end_date: Optional[str],
        include_balance: bool = True,
    ) -> Tuple[ReconciledWindow, List[BalanceSnapshot]]:
        """
        Fetches, normalizes and reconciles the transactions of one account.

        Raises:
            RequisitionNotLinked, AccountNotLinkedToRequisition, or whatever the
            provider client raises.
        """
        ensure_account_linked(self.client.get_requisition(requisition_id), account_id)

        account = Account.from_provider(self.client.get_account(account_id))
        normalizer = self.registry.resolve(account.institution_id)

        payload = self.client.get_transactions(account_id, start_date, end_date)
        transactions = payload.get('transactions') or {}

        rules = Counter()
        booked, pending = [], []
        for raw_list, is_booked, target in (
            (transactions.get('booked') or [], True, booked),
            (transactions.get('pending') or [], False, pending),
        ):
            for raw in raw_list:
                result = normalizer.apply(raw, is_booked)
                rules[result.rule] += 1
                target.append(result.transaction)

        logger.debug(
            "Transactions normalized.",
            account_id=account_id,
            institution_id=account.institution_id,
            normalizer=normalizer.name,
            rules=dict(rules),
        )

        balances: List[BalanceSnapshot] = []
        snapshot = None
        if include_balance:
            balance_payload = self.client.get_balances(account_id)
            for entry in balance_payload.get('balances') or []:
                parsed = BalanceSnapshot.from_provider(entry, account_id)
                if parsed is not None:
                    balances.append(parsed)
            snapshot = self.reconciler.select_balance(balances)
            if snapshot is None:
                logger.warning(
                    "No balance of a configured type, starting balance omitted.",
                    account_id=account_id,
                    reported_types=[b.balance_type for b in balances],
                )

        window = self.reconciler.reconcile(snapshot, booked, pending, institution_id=account.institution_id)
        if window.diagnostics:
            logger.warning("Reconciliation diagnostics.", account_id=account_id, diagnostics=list(window.diagnostics))

        return window, balances

    def get_transactions(
        self,
        requisition_id: str,
        account_id: str,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        include_balance: bool = True,
    ) -> dict:
        """
        Response envelope for a transactions request. Classified failures are
        returned as data, never raised.
        """
        logger.info(
            f"Fetching transactions for account {account_id} under requisition {requisition_id}",
            start_date=start_date,
            end_date=end_date,
            include_balance=include_balance,
        )

        try:
            window, balances = self.fetch_window(
                requisition_id, account_id, start_date, end_date, include_balance
            )
        except Exception as e:
            classified = classify_error(e, self.settings.rate_limit_header_prefixes)
            logger.error(
                "Transaction fetch failed",
                requisition_id=requisition_id,
                account_id=account_id,
                error_kind=classified.kind.value,
                error_type=classified.error_type,
                error_code=classified.error_code,
                reason=classified.reason,
                error_message=classified.message,
                http_status=classified.http_status,
                rateLimitHeaders=classified.rate_limit_headers,
                exc_info=classified.kind is ErrorKind.UNKNOWN,
            )
            return {'status': 'ok', 'data': classified.to_payload()}

        data = window.to_payload(include_balance)
        if include_balance:
            data['balances'] = [b.to_dict() for b in balances]

        logger.info(
            "Transactions fetched successfully",
            account_id=account_id,
            booked=len(window.booked),
            pending=len(window.pending),
            starting_balance=data.get('startingBalance'),
        )
        return {'status': 'ok', 'data': data}
