import os
import sys
from pathlib import Path
import pytest

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from httpx import AsyncClient, ASGITransport

# 테스트용 환경 변수 세팅 (app 모듈 임포트 전에 적용)
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_LEVEL", "WARNING")

# sys.path에 backend 추가하여 'app' 패키지 검색 가능하게 함
repo_root = Path(__file__).resolve().parents[2]
backend_path = repo_root / "backend"
if str(backend_path) not in sys.path:
    sys.path.insert(0, str(backend_path))

from app.main import app
from app.database import Base
from app.database import get_db as real_get_db
from app.auth.service import create_access_token
from app.users.schema import UserCreate
from app.users import service as user_service


@pytest.fixture()
async def test_engine():
    # 메모리 SQLite (테스트마다 새 DB, 단일 커넥션 공유)
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
async def db(test_engine):
    async_session = sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


@pytest.fixture(autouse=True)
async def override_db(db):
    async def _get_db():
        yield db
    app.dependency_overrides[real_get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def make_user(db):
    async def _make(username: str = "alice", email: str | None = None, password: str = "password123", **extra):
        data = UserCreate(
            username=username,
            email=email or f"{username}@example.com",
            password=password,
            **extra,
        )
        return await user_service.create_user(data, db)
    return _make


@pytest.fixture()
def headers_for():
    async def _headers(user) -> dict:
        token = await create_access_token(user)
        return {"Authorization": f"Bearer {token}"}
    return _headers


@pytest.fixture()
async def alice(make_user):
    return await make_user("alice")


@pytest.fixture()
async def bob(make_user):
    return await make_user("bob")
