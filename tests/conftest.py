"""Shared test fixtures."""
import os

# Settings are read at import time, so they must be in place before the app loads
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["SUPABASE_URL"] = "https://project.supabase.test"
os.environ["SUPABASE_ANON_KEY"] = "test-anon-key"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SLOT_CONFLICT_MODE"] = "overlap"
os.environ["SLOT_INTERVAL_MINUTES"] = "30"

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi import Depends  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from salon.auth import get_optional_user  # noqa: E402
from salon.database import Base, build_engine, get_db  # noqa: E402
from salon.main import app  # noqa: E402
from salon.models import (  # noqa: E402
    Appointment,
    Professional,
    ProfessionalService,
    Service,
    User,
    WorkSchedule,
)

# 2025-06-02 is a Monday (day_of_week == 1)
MONDAY = date(2025, 6, 2)

VALID_CPF = "52998224725"
OTHER_VALID_CPF = "11144477735"


@pytest.fixture
def engine():
    """In-memory SQLite shared by every session of one test."""
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(engine):
    """TestClient wired to the test database (lifespan is not run)."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login_as():
    """Authenticate requests as the given user without going through the auth provider."""

    def _login(user_id: int):
        async def override_optional_user(db: Session = Depends(get_db)):
            return db.query(User).filter(User.id == user_id).first()

        app.dependency_overrides[get_optional_user] = override_optional_user

    return _login


@pytest.fixture
def make_user(db):
    counter = {"value": 0}

    def _make(role: str = "client", **fields) -> User:
        counter["value"] += 1
        n = counter["value"]
        user = User(
            name=fields.pop("name", f"User {n}"),
            email=fields.pop("email", f"user{n}@example.com"),
            role=role,
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def admin(make_user):
    return make_user(role="admin", name="Admin", email="admin@example.com")


@pytest.fixture
def customer(make_user):
    return make_user(role="client", name="Maria Silva", email="maria@example.com")


@pytest.fixture
def make_professional(db):
    cpfs = iter([VALID_CPF, OTHER_VALID_CPF])

    def _make(**fields) -> Professional:
        professional = Professional(
            name=fields.pop("name", "Ana Souza"),
            phone=fields.pop("phone", "+5511987654321"),
            email=fields.pop("email", "ana@example.com"),
            cpf=fields.pop("cpf", None) or next(cpfs),
            address=fields.pop("address", "Rua das Flores, 100"),
            active=fields.pop("active", True),
            **fields,
        )
        db.add(professional)
        db.commit()
        db.refresh(professional)
        return professional

    return _make


@pytest.fixture
def make_service(db):
    def _make(duration: int = 60, **fields) -> Service:
        service = Service(
            name=fields.pop("name", f"Service {duration}min"),
            duration=duration,
            price=fields.pop("price", 80.0),
            active=fields.pop("active", True),
            **fields,
        )
        db.add(service)
        db.commit()
        db.refresh(service)
        return service

    return _make


@pytest.fixture
def make_schedule(db):
    def _make(professional, day_of_week: int = 1, start="09:00", end="18:00", **fields) -> WorkSchedule:
        schedule = WorkSchedule(
            professional_id=professional.id,
            day_of_week=day_of_week,
            start_time=start,
            end_time=end,
            **fields,
        )
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        return schedule

    return _make


@pytest.fixture
def make_appointment(db):
    def _make(user, professional, service, start, end, day=MONDAY, status="scheduled") -> Appointment:
        appointment = Appointment(
            user_id=user.id,
            professional_id=professional.id,
            service_id=service.id,
            date=day,
            start_time=start,
            end_time=end,
            status=status,
        )
        db.add(appointment)
        db.commit()
        db.refresh(appointment)
        return appointment

    return _make


@pytest.fixture
def link_service(db):
    def _link(professional, service, commission: float = 0) -> ProfessionalService:
        link = ProfessionalService(
            professional_id=professional.id, service_id=service.id, commission=commission
        )
        db.add(link)
        db.commit()
        db.refresh(link)
        return link

    return _link
