from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

APPOINTMENT_STATUSES = ("scheduled", "completed", "cancelled", "no-show")
# Statuses that keep a slot occupied on the professional's agenda
OCCUPYING_STATUSES = ("scheduled", "completed", "no-show")
TRANSACTION_TYPES = ("income", "expense")
USER_ROLES = ("client", "admin")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    auth_uid = Column(String(255), unique=True, index=True, nullable=True)  # Supabase Auth user id
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default="client")  # client, admin
    instagram = Column(String(255), nullable=True)
    profile_picture = Column(String(500), nullable=True)  # R2 key
    created_at = Column(DateTime, server_default=func.now())

    appointments = relationship("Appointment", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    cpf = Column(String(14), unique=True, nullable=False)  # digits only
    address = Column(String(500), nullable=False)
    profile_picture = Column(String(500), nullable=True)  # R2 key
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())

    work_schedules = relationship(
        "WorkSchedule", back_populates="professional", cascade="all, delete-orphan"
    )
    service_links = relationship(
        "ProfessionalService", back_populates="professional", cascade="all, delete-orphan"
    )
    appointments = relationship("Appointment", back_populates="professional")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False)  # in minutes
    price = Column(Float, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, server_default=func.now())

    professional_links = relationship(
        "ProfessionalService", back_populates="service", cascade="all, delete-orphan"
    )


class ProfessionalService(Base):
    __tablename__ = "professional_services"
    __table_args__ = (
        UniqueConstraint("professional_id", "service_id", name="uq_professional_service"),
    )

    id = Column(Integer, primary_key=True, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    commission = Column(Float, nullable=False, default=0)  # BRL per service performed

    professional = relationship("Professional", back_populates="service_links")
    service = relationship("Service", back_populates="professional_links")


class WorkSchedule(Base):
    __tablename__ = "work_schedules"

    id = Column(Integer, primary_key=True, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0-6 for Sunday-Saturday
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    lunch_start_time = Column(String(5), nullable=True)
    lunch_end_time = Column(String(5), nullable=True)

    professional = relationship("Professional", back_populates="work_schedules")


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # One live booking per professional and start time; cancelled rows free the slot
        Index(
            "uq_appointments_professional_slot",
            "professional_id",
            "date",
            "start_time",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
        Index("ix_appointments_professional_date", "professional_id", "date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    professional_id = Column(Integer, ForeignKey("professionals.id"), nullable=False)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    status = Column(String(20), nullable=False, default="scheduled")
    notes = Column(String(1000), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="appointments")
    professional = relationship("Professional", back_populates="appointments")
    service = relationship("Service")
    transactions = relationship("Transaction", back_populates="appointment")


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=True)
    type = Column(String(20), nullable=False)  # income, expense
    amount = Column(Float, nullable=False)
    description = Column(String(500), nullable=False)
    date = Column(Date, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    appointment = relationship("Appointment", back_populates="transactions")
