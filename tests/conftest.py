# tests/conftest.py

import os
from typing import AsyncGenerator, Awaitable, Callable, Optional

# 앱 설정은 임포트 시점에 로드되므로, app 모듈을 임포트하기 전에 테스트용 환경 변수를 지정합니다.
os.environ["APP_ENV"] = "testing"
os.environ["AUTH_STRATEGY"] = "jwt"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402
from sqlmodel.ext.asyncio.session import AsyncSession  # noqa: E402

from app.main import app as main_app  # noqa: E402
from app.core import dependencies as deps  # noqa: E402
from app.core.database import get_session  # noqa: E402
from app.core.security import StubAuthenticationStrategy, get_auth_strategy, get_password_hash  # noqa: E402
from app.domains.usr import models as usr_models  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"
STUB_IDENTITY = "test@test.com"


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    테스트 함수마다 빈 인메모리 SQLite 데이터베이스를 만들고 모든 테이블을 생성합니다.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # 인메모리 DB를 하나의 연결로 공유
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSession(test_engine, expire_on_commit=False) as session:
        yield session


# --- 사용자 픽스처 ---
@pytest.fixture(scope="function")
def user_factory(db_session: AsyncSession) -> Callable[..., Awaitable[usr_models.User]]:
    """
    사용자(및 선택적으로 자격증명)를 데이터베이스에 직접 생성하는 팩토리 함수를 반환합니다.
    """
    async def _create_user(
        email: str,
        password: Optional[str] = None,
        **kwargs,
    ) -> usr_models.User:
        user = usr_models.User(email=email, **kwargs)
        db_session.add(user)
        if password is not None:
            db_session.add(usr_models.UserCredentials(user_id=email, password=get_password_hash(password)))
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_user(user_factory: Callable) -> usr_models.User:
    """비밀번호 'lovelace123'을 가진 일반 사용자를 생성합니다."""
    return await user_factory("ada@example.com", "lovelace123", first_name="Ada", last_name="Lovelace")


# --- 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    인증되지 않은 AsyncClient를 생성하고, 테스트용 비동기 DB 세션을 주입합니다.
    """
    def override_get_session():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    try:
        main_app.dependency_overrides[get_session] = override_get_session
        main_app.dependency_overrides[deps.get_db_session] = override_get_session

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


@pytest_asyncio.fixture(scope="function")
async def authorized_client(client: AsyncClient, test_user: usr_models.User) -> AsyncClient:
    """
    /users/login으로 실제 로그인하여 받은 Bearer 토큰을 헤더에 넣은 클라이언트를 반환합니다.
    """
    res = await client.post("/users/login", json={"email": test_user.email, "password": "lovelace123"})
    assert res.status_code == 200, f"Login failed: {res.text}"
    client.headers["Authorization"] = f"Bearer {res.json()['token']}"
    return client


@pytest_asyncio.fixture(scope="function")
async def stub_client(client: AsyncClient) -> AsyncClient:
    """
    stub 인증 전략을 사용하는 클라이언트를 반환합니다. 토큰 없이도 항상 인증됩니다.
    """
    main_app.dependency_overrides[get_auth_strategy] = lambda: StubAuthenticationStrategy(STUB_IDENTITY)
    return client
