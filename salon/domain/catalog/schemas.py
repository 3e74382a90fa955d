"""Catalog domain schemas - Pydantic models for professionals and services"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_br_phone, validate_cpf, validate_email, validate_required


class ProfessionalCreate(BaseModel):
    """Schema for creating a new professional"""

    name: str
    phone: str
    email: str
    cpf: str
    address: str
    profilePicture: Optional[str] = None
    active: bool = True

    @field_validator("name", "address")
    @classmethod
    def validate_not_empty(cls, v):
        return validate_required(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return validate_br_phone(validate_required(v))

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(validate_required(v))

    @field_validator("cpf")
    @classmethod
    def validate_cpf_field(cls, v):
        return validate_cpf(validate_required(v))


class ProfessionalUpdate(BaseModel):
    """Schema for updating an existing professional"""

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    cpf: Optional[str] = None
    address: Optional[str] = None
    profilePicture: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        if v:
            return validate_br_phone(v)
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        if v:
            return validate_email(v)
        return v

    @field_validator("cpf")
    @classmethod
    def validate_cpf_field(cls, v):
        if v:
            return validate_cpf(v)
        return v


class ProfessionalResponse(BaseModel):
    """Schema for professional response"""

    id: int
    name: str
    phone: str
    email: str
    cpf: str
    address: str
    profilePicture: Optional[str] = None
    active: bool

    class Config:
        from_attributes = True


class ServiceCreate(BaseModel):
    """Schema for creating a new service"""

    name: str
    description: Optional[str] = None
    duration: int = Field(..., gt=0, le=24 * 60, description="Duration in minutes")
    price: float = Field(..., ge=0)
    active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return validate_required(v)


class ServiceUpdate(BaseModel):
    """Schema for updating an existing service"""

    name: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(None, gt=0, le=24 * 60)
    price: Optional[float] = Field(None, ge=0)
    active: Optional[bool] = None


class ServiceResponse(BaseModel):
    """Schema for service response"""

    id: int
    name: str
    description: Optional[str] = None
    duration: int
    price: float
    active: bool

    class Config:
        from_attributes = True


class ProfessionalServiceCreate(BaseModel):
    """Schema for linking a service to a professional"""

    professionalId: int
    serviceId: int
    commission: float = Field(0, ge=0)


class ProfessionalServiceDelete(BaseModel):
    professionalId: int
    serviceId: int


class ProfessionalServiceResponse(BaseModel):
    id: int
    professionalId: int
    serviceId: int
    commission: float
