from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.common.logging_config import get_logger
from src.services.transactions import TransactionService

logger = get_logger(__name__)
router = APIRouter()


class ProviderNotConfigured(RuntimeError):
    pass


class TransactionsRequest(BaseModel):
    requisitionId: str
    accountId: str
    startDate: Optional[str] = None
    endDate: Optional[str] = None
    includeBalance: bool = True


def get_transaction_service(request: Request) -> TransactionService:
    service = getattr(request.app.state, "transaction_service", None)
    if service is None:
        raise ProviderNotConfigured("Provider client is not configured")
    return service


@router.get("/status")
def status(request: Request):
    configured = getattr(request.app.state, "transaction_service", None) is not None
    return {"status": "ok", "data": {"configured": configured}}


@router.post("/transactions")
def transactions(req: TransactionsRequest, request: Request):
    service = get_transaction_service(request)
    return service.get_transactions(
        requisition_id=req.requisitionId,
        account_id=req.accountId,
        start_date=req.startDate,
        end_date=req.endDate,
        include_balance=req.includeBalance,
    )
