import os

# Keep bcrypt fast and avoid touching the on-disk database
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.database import get_db, init_db, make_engine
from schemas.user import Account, Identity, Role
from utils.authenticator import Authenticator
from utils.content_manager import ContentManager
from utils.forum_service import ForumService
from utils.invitation_manager import InvitationManager
from utils.registration import RegistrationService
from utils.user_manager import UserManager


@pytest.fixture
def engine():
    engine = make_engine("sqlite://", poolclass=StaticPool)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def users(db):
    return UserManager(db)


@pytest.fixture
def invitations(db):
    return InvitationManager(db)


@pytest.fixture
def content(db):
    return ContentManager(db)


@pytest.fixture
def authenticator(users):
    return Authenticator(users)


@pytest.fixture
def registration(users, invitations):
    return RegistrationService(users, invitations)


@pytest.fixture
def forum(content):
    return ForumService(content)


@pytest.fixture
def make_account(users):
    def _make(username, password="pw", **flags):
        return users.register(Account(username=username, **flags), password)

    return _make


@pytest.fixture
def admin_identity():
    return Identity(username="root", roles=frozenset({Role.ADMIN}), active_role=Role.ADMIN)


@pytest.fixture
def alice_identity():
    return Identity(username="alice", roles=frozenset({Role.ROLE1}), active_role=Role.ROLE1)


@pytest.fixture
def bob_identity():
    return Identity(username="bob", roles=frozenset({Role.ROLE2}), active_role=Role.ROLE2)


@pytest.fixture
def client(session_factory):
    from app import app

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
