"""
pytest configuration – point the service at a throwaway database and log
directory, create tables once, and give every test a fresh app (and with it
a fresh login limiter).
"""
import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="userdir-tests-")
os.environ.setdefault("USERDIR_DATABASE_URL", f"sqlite:///{os.path.join(_TMP, 'userdir.db')}")
os.environ.setdefault("USERDIR_LOG_DIR", os.path.join(_TMP, "logs"))
os.environ.setdefault("USERDIR_LOG_FORMAT", "text")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from userdir.database import Base, db_session, engine, init_db  # noqa: E402
from userdir.main import create_app  # noqa: E402
from userdir.models import Note, User  # noqa: E402


@pytest.fixture(autouse=True, scope="session")
def create_tables():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def clean_tables():
    """Notes first: the foreign key refuses to drop users that still own notes."""
    with db_session() as session:
        session.query(Note).delete()
        session.query(User).delete()
    yield


@pytest.fixture
def app():
    application = create_app()
    yield application
    application.state.limiter.reset()


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
