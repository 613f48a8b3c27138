import os
import time

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sewn.database import Base, get_db
from sewn.main import app
from sewn.models import Contract, ExpertProfile, Project, Proposal, User

TEST_JWT_SECRET = "test-jwt-secret"


def make_token(user_id: str, email: str = None, expires_in: int = 3600, **claims) -> str:
    now = int(time.time())
    payload = {
        "sub": user_id,
        "email": email or f"{user_id}@example.com",
        "aud": "authenticated",
        "iat": now,
        "exp": now + expires_in,
        **claims,
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {make_token(user.id, user.email)}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(engine):
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(user_type: str = "client", name: str = None, **fields) -> User:
        counter["n"] += 1
        user = User(
            email=f"{user_type}{counter['n']}@example.com",
            user_type=user_type,
            name=name or f"{user_type.title()} {counter['n']}",
            **fields,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_expert(db_session, make_user):
    def _make_expert(name: str = None, **profile_fields) -> ExpertProfile:
        user = make_user("expert", name=name)
        profile = ExpertProfile(user_id=user.id, **profile_fields)
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make_expert


@pytest.fixture
def make_project(db_session):
    def _make_project(client_user: User, **fields) -> Project:
        fields.setdefault("title", "Spring collection sample")
        fields.setdefault("description", "Need three jacket samples")
        fields.setdefault("status", "open")
        project = Project(client_id=client_user.id, **fields)
        db_session.add(project)
        db_session.commit()
        db_session.refresh(project)
        return project

    return _make_project


@pytest.fixture
def make_contract(db_session, make_user, make_expert, make_project):
    """A contract between a fresh client and expert, with its proposal accepted"""

    def _make_contract(status: str = "pending_payment", agreed_amount: int = 1000000, **fields):
        client_user = make_user("client")
        expert = make_expert()
        project = make_project(client_user, status="in_progress")
        proposal = Proposal(
            project_id=project.id,
            expert_id=expert.id,
            cover_letter="I can do it",
            proposed_rate=agreed_amount,
            status="accepted",
        )
        db_session.add(proposal)
        db_session.flush()
        contract = Contract(
            project_id=project.id,
            client_id=client_user.id,
            expert_id=expert.user_id,
            proposal_id=proposal.id,
            agreed_amount=agreed_amount,
            platform_fee_rate=0.10,
            status=status,
            **fields,
        )
        db_session.add(contract)
        db_session.commit()
        db_session.refresh(contract)
        return contract

    return _make_contract
