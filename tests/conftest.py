import os
import uuid
from decimal import Decimal

# Settings and the module-level engine are built at import time.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import autosales.models  # noqa: E402,F401
from autosales.db import Base, get_db  # noqa: E402
from autosales.models.client import Client  # noqa: E402
from autosales.models.opportunity import Opportunity  # noqa: E402
from autosales.models.quotation import Quotation  # noqa: E402
from autosales.models.stage import Stage  # noqa: E402
from autosales.models.vehicle import Vehicle  # noqa: E402
from autosales.services import auth as auth_service  # noqa: E402

TEST_PASSWORD = "Secret123"


@pytest.fixture(scope="session")
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return engine


@pytest.fixture()
def db_session(engine):
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(bind=connection, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture()
def roles(db_session):
    auth_service.seed_roles(db_session)


@pytest.fixture()
def make_user(db_session, roles):
    def _make_user(role: str = "vendedor", username: str | None = None, **overrides):
        username = username or f"user-{uuid.uuid4().hex[:10]}"
        return auth_service.create_user(
            db_session,
            username=username,
            password=overrides.pop("password", TEST_PASSWORD),
            first_name=overrides.pop("first_name", "Test"),
            last_name=overrides.pop("last_name", role.title()),
            email=overrides.pop("email", f"{username}@example.com"),
            role=role,
        )

    return _make_user


@pytest.fixture()
def admin_user(make_user):
    return make_user("admin")


@pytest.fixture()
def manager_user(make_user):
    return make_user("gerente")


@pytest.fixture()
def seller_user(make_user):
    return make_user("vendedor")


@pytest.fixture()
def assistant_user(make_user):
    return make_user("asistente")


@pytest.fixture()
def inventory_user(make_user):
    return make_user("inventario")


@pytest.fixture()
def auth_headers():
    def _auth_headers(user) -> dict[str, str]:
        token, _ = auth_service.create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture()
def client(db_session):
    from autosales.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def crm_client(db_session):
    client = Client(
        name="Transportes Andinos",
        tax_id=f"NIT-{uuid.uuid4().hex[:8]}",
        address="Av. Principal 123",
        email="compras@andinos.example.com",
    )
    db_session.add(client)
    db_session.commit()
    db_session.refresh(client)
    return client


@pytest.fixture()
def vehicle(db_session):
    vehicle = Vehicle(make="Toyota", model="Hilux", year=2024, price=Decimal("35000.00"))
    db_session.add(vehicle)
    db_session.commit()
    db_session.refresh(vehicle)
    return vehicle


@pytest.fixture()
def stage(db_session):
    stage = Stage(name="Prospecting", order=1)
    db_session.add(stage)
    db_session.commit()
    db_session.refresh(stage)
    return stage


@pytest.fixture()
def opportunity(db_session, crm_client, seller_user, vehicle, stage):
    opportunity = Opportunity(
        client_id=crm_client.id,
        user_id=seller_user.id,
        vehicle_id=vehicle.id,
        stage_id=stage.id,
    )
    db_session.add(opportunity)
    db_session.commit()
    db_session.refresh(opportunity)
    return opportunity


@pytest.fixture()
def quotation(db_session, opportunity):
    quotation = Quotation(opportunity_id=opportunity.id, is_active=True, total=Decimal("0.00"))
    db_session.add(quotation)
    db_session.commit()
    db_session.refresh(quotation)
    return quotation
