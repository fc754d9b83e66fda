from dataclasses import dataclass

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.deps import get_db
from app.core.security import create_access_token
from app.db.models import Base, Project, User
from app.db.session import enable_sqlite_foreign_keys
from app.main import app


@dataclass
class Env:
    client: TestClient
    session_factory: sessionmaker
    alice_id: str
    bob_id: str
    carol_id: str
    project_id: str

    def headers(self, user_id: str) -> dict[str, str]:
        token = create_access_token(subject=user_id)
        return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def env():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    Base.metadata.create_all(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    client = TestClient(app)

    db = TestingSessionLocal()
    alice = User(email="alice@flowboard.test", name="Alice Chen", role="admin")
    bob = User(email="bob@flowboard.test", name="Bob Martinez", role="member")
    carol = User(email="carol@flowboard.test", name="Carol Williams", role="member")
    db.add_all([alice, bob, carol])
    db.flush()
    project = Project(name="Seed Project", owner_id=alice.id)
    db.add(project)
    db.commit()

    seeded = Env(
        client=client,
        session_factory=TestingSessionLocal,
        alice_id=alice.id,
        bob_id=bob.id,
        carol_id=carol.id,
        project_id=project.id,
    )
    db.close()

    yield seeded

    app.dependency_overrides.clear()
    engine.dispose()
