"""Transaction service - Business logic for the admin ledger"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Appointment, Transaction
from .repository import TransactionRepository
from .schemas import TransactionCreate, TransactionUpdate

logger = logging.getLogger(__name__)

FIELD_MAP = {
    "appointmentId": "appointment_id",
    "type": "type",
    "amount": "amount",
    "description": "description",
    "date": "date",
}


def transaction_to_dict(transaction: Transaction) -> dict:
    return {
        "id": transaction.id,
        "appointmentId": transaction.appointment_id,
        "type": transaction.type,
        "amount": transaction.amount,
        "description": transaction.description,
        "date": transaction.date,
        "createdAt": transaction.created_at,
    }


class TransactionService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = TransactionRepository()

    def _ensure_appointment(self, appointment_id: Optional[int]) -> None:
        if appointment_id is None:
            return
        if not self.db.query(Appointment.id).filter(Appointment.id == appointment_id).first():
            raise HTTPException(status_code=404, detail="Appointment not found")

    def get_transactions(self) -> list[Transaction]:
        return self.repo.get_all(self.db)

    def get_transaction(self, transaction_id: int) -> Transaction:
        transaction = self.repo.get_by_id(self.db, transaction_id)
        if not transaction:
            raise HTTPException(status_code=404, detail="Transaction not found")
        return transaction

    def create_transaction(self, data: TransactionCreate) -> Transaction:
        self._ensure_appointment(data.appointmentId)
        transaction = self.repo.create(
            self.db,
            appointment_id=data.appointmentId,
            type=data.type,
            amount=data.amount,
            description=data.description,
            date=data.date,
        )
        logger.info(f"💰 Transaction {transaction.id} recorded: {transaction.type} {transaction.amount:.2f}")
        return transaction

    def update_transaction(self, transaction_id: int, data: TransactionUpdate) -> Transaction:
        transaction = self.get_transaction(transaction_id)

        updates = {}
        for field in data.model_fields_set:
            value = getattr(data, field)
            # Only the appointment link can be cleared
            if value is None and field != "appointmentId":
                continue
            updates[FIELD_MAP[field]] = value

        if "appointment_id" in updates:
            self._ensure_appointment(updates["appointment_id"])

        return self.repo.update(self.db, transaction, **updates)

    def delete_transaction(self, transaction_id: int) -> None:
        transaction = self.get_transaction(transaction_id)
        self.repo.delete(self.db, transaction)
        logger.info(f"🗑️ Transaction deleted: {transaction_id}")
