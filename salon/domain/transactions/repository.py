"""Transaction repository - Database operations for income and expense entries"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Transaction


class TransactionRepository:
    """Repository for transaction database operations"""

    @staticmethod
    def get_all(db: Session) -> list[Transaction]:
        return db.query(Transaction).order_by(Transaction.date.desc(), Transaction.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, transaction_id: int) -> Optional[Transaction]:
        return db.query(Transaction).filter(Transaction.id == transaction_id).first()

    @staticmethod
    def create(db: Session, **data) -> Transaction:
        transaction = Transaction(**data)
        db.add(transaction)
        db.commit()
        db.refresh(transaction)
        return transaction

    @staticmethod
    def update(db: Session, transaction: Transaction, **updates) -> Transaction:
        for key, value in updates.items():
            if hasattr(transaction, key):
                setattr(transaction, key, value)

        db.commit()
        db.refresh(transaction)
        return transaction

    @staticmethod
    def delete(db: Session, transaction: Transaction) -> None:
        db.delete(transaction)
        db.commit()
