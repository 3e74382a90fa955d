"""Transaction schemas"""

import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_required

TransactionType = Literal["income", "expense"]


class TransactionCreate(BaseModel):
    appointmentId: Optional[int] = None
    type: TransactionType
    amount: float = Field(..., gt=0)
    description: str = Field(..., max_length=500)
    date: dt.date

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        return validate_required(v)


class TransactionUpdate(BaseModel):
    appointmentId: Optional[int] = None
    type: Optional[TransactionType] = None
    amount: Optional[float] = Field(None, gt=0)
    description: Optional[str] = Field(None, max_length=500)
    date: Optional[dt.date] = None

    @field_validator("description")
    @classmethod
    def validate_description(cls, v):
        if v is None:
            return v
        return validate_required(v)


class TransactionResponse(BaseModel):
    id: int
    appointmentId: Optional[int] = None
    type: str
    amount: float
    description: str
    date: dt.date
    createdAt: Optional[dt.datetime] = None
