"""Transaction router - Admin-only ledger endpoints"""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ...auth import get_current_admin
from ...database import get_db
from ...models import User
from .schemas import TransactionCreate, TransactionResponse, TransactionUpdate
from .service import TransactionService, transaction_to_dict

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


def get_transaction_service(db: Session = Depends(get_db)) -> TransactionService:
    return TransactionService(db)


@router.get("", response_model=list[TransactionResponse])
async def get_transactions(
    _admin: User = Depends(get_current_admin),
    service: TransactionService = Depends(get_transaction_service),
):
    return [transaction_to_dict(t) for t in service.get_transactions()]


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: int,
    _admin: User = Depends(get_current_admin),
    service: TransactionService = Depends(get_transaction_service),
):
    return transaction_to_dict(service.get_transaction(transaction_id))


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    data: TransactionCreate,
    _admin: User = Depends(get_current_admin),
    service: TransactionService = Depends(get_transaction_service),
):
    return transaction_to_dict(service.create_transaction(data))


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def update_transaction(
    transaction_id: int,
    data: TransactionUpdate,
    _admin: User = Depends(get_current_admin),
    service: TransactionService = Depends(get_transaction_service),
):
    return transaction_to_dict(service.update_transaction(transaction_id, data))


@router.delete("/{transaction_id}", status_code=204)
async def delete_transaction(
    transaction_id: int,
    _admin: User = Depends(get_current_admin),
    service: TransactionService = Depends(get_transaction_service),
):
    service.delete_transaction(transaction_id)
    return Response(status_code=204)
