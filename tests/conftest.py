"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Seed companies and jobs
- Admin / non-admin tokens
"""

import os

# Keep the app's own engine off PostgreSQL; every test uses the in-memory engine below
os.environ.setdefault("SQLALCHEMY_DATABASE_URI", "sqlite://")
os.environ.setdefault("JSON_LOGS", "false")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from jobly.core.database import Base, enable_sqlite_foreign_keys, get_db
from jobly.core.security import create_access_token
from jobly.crud import CompanyRepository, JobRepository
from jobly.models import Company, Job
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session():
    """
    Create a fresh database for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def company_repo(db_session):
    return CompanyRepository(db_session)


@pytest.fixture
def job_repo(db_session):
    return JobRepository(db_session)


@pytest.fixture
def seeded(db_session):
    """
    Three companies and three jobs:

    c1 (1 employee):  J1 salary 100 equity 0.1, J2 salary 200 equity 0
    c2 (2 employees): J3 salary 300 no equity
    c3 (3 employees): no jobs

    Returns the job ids in insertion order.
    """
    db_session.add_all([
        Company(handle="c1", name="C1", description="Desc1", num_employees=1, logo_url="http://c1.img"),
        Company(handle="c2", name="C2", description="Desc2", num_employees=2, logo_url="http://c2.img"),
        Company(handle="c3", name="C3", description="Desc3", num_employees=3, logo_url="http://c3.img"),
    ])
    db_session.flush()

    jobs = [
        Job(title="J1", salary=100, equity=Decimal("0.1"), company_handle="c1"),
        Job(title="J2", salary=200, equity=Decimal("0"), company_handle="c1"),
        Job(title="J3", salary=300, equity=None, company_handle="c2"),
    ]
    db_session.add_all(jobs)
    db_session.commit()

    return [job.id for job in jobs]


@pytest.fixture
def admin_headers():
    token = create_access_token({"username": "admin", "isAdmin": True})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user_headers():
    token = create_access_token({"username": "u1", "isAdmin": False})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sample_company_data():
    """Sample company payload for testing"""
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 10,
        "logoUrl": "http://new.img",
    }
