"""Shared test fixtures: in-memory database, sessions, app client, users and tokens."""

import os

# Must be set before labtrack.core.config builds its module-level settings
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

from collections.abc import Generator
from types import SimpleNamespace

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from labtrack.core.config import Settings
from labtrack.core.security import Actor, create_access_token, hash_password
from labtrack.db.session import Database
from labtrack.main import create_app
from labtrack.models.location import Location
from labtrack.models.region import Region
from labtrack.models.school import School
from labtrack.models.user import User, UserRole


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        DATABASE_URL="sqlite://",
        JWT_SECRET="test-secret-key-not-for-production",
        JWT_ALGORITHM="HS256",
        JWT_EXPIRY_MINUTES=30,
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture
def database(settings: Settings) -> Generator[Database, None, None]:
    """A fresh in-memory SQLite database per test."""
    database = Database.from_settings(settings)
    database.create_all()
    yield database
    database.drop_all()
    database.dispose()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    session = database.session()
    yield session
    session.close()


@pytest.fixture
def app(settings: Settings, database: Database) -> FastAPI:
    return create_app(settings, database)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def hierarchy(db: Session) -> SimpleNamespace:
    """One region > two schools > one location each."""
    region = Region(name="North Region", description="Northern district schools")
    db.add(region)
    db.flush()
    school = School(name="Lincoln High School", address="1 Lincoln Way", region_id=region.id)
    other_school = School(name="Jefferson Elementary", address="2 Jefferson Rd", region_id=region.id)
    db.add_all([school, other_school])
    db.flush()
    lab = Location(name="Computer Lab A", floor=1, building="Main", school_id=school.id)
    other_lab = Location(name="Computer Lab B", floor=2, building="Main", school_id=school.id)
    foreign_lab = Location(name="Media Center", school_id=other_school.id)
    db.add_all([lab, other_lab, foreign_lab])
    db.commit()
    return SimpleNamespace(
        region=region,
        school=school,
        other_school=other_school,
        lab=lab,
        other_lab=other_lab,
        foreign_lab=foreign_lab,
    )


def _make_user(db: Session, name: str, email: str, role: UserRole) -> User:
    user = User(
        name=name,
        email=email,
        hashed_password=hash_password("password123"),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db: Session) -> User:
    return _make_user(db, "Admin User", "admin@school.edu", UserRole.admin)


@pytest.fixture
def engineer_user(db: Session) -> User:
    return _make_user(db, "Engineer User", "engineer@school.edu", UserRole.engineer)


@pytest.fixture
def faculty_user(db: Session) -> User:
    return _make_user(db, "Faculty User", "faculty@school.edu", UserRole.faculty)


@pytest.fixture
def admin(admin_user: User) -> Actor:
    return Actor(id=admin_user.id, role=UserRole.admin)


@pytest.fixture
def engineer(engineer_user: User) -> Actor:
    return Actor(id=engineer_user.id, role=UserRole.engineer)


@pytest.fixture
def faculty(faculty_user: User) -> Actor:
    return Actor(id=faculty_user.id, role=UserRole.faculty)


def bearer(user: User, settings: Settings) -> dict:
    token = create_access_token({"sub": str(user.id), "role": user.role.value}, settings)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User, settings: Settings) -> dict:
    return bearer(admin_user, settings)


@pytest.fixture
def engineer_headers(engineer_user: User, settings: Settings) -> dict:
    return bearer(engineer_user, settings)


@pytest.fixture
def faculty_headers(faculty_user: User, settings: Settings) -> dict:
    return bearer(faculty_user, settings)
