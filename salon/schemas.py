from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from .shared.validators import validate_br_phone, validate_email, validate_required


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def validate_not_empty(cls, v):
        return validate_required(v)


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(validate_required(v))

    @field_validator("password", "name")
    @classmethod
    def validate_not_empty(cls, v):
        return validate_required(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_br_phone(v)
        return v


class SessionUser(BaseModel):
    id: int
    email: str
    name: str
    role: str


class SessionResponse(BaseModel):
    user: SessionUser


class UserUpdate(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    instagram: Optional[str] = None
    profile_picture: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_br_phone(v)
        return v


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    role: str
    instagram: Optional[str] = None
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str
