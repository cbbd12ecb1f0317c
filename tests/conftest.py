# tests/conftest.py

import os
from datetime import datetime, timedelta, UTC
from typing import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

# app 모듈 임포트 전에 테스트용 환경 변수를 설정합니다.
# (엔진은 만들어지지만 테스트에서는 연결하지 않고, 아래의 메모리 DB로 교체합니다)
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./dfms_unused_test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-magic-links")

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app
from app.core import dependencies as deps
from app.core.database import get_session
from app.core.ids import IdGenerator

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하려면
#  모든 모델 클래스가 한 번 이상 임포트되어야 합니다.
from app.domains.models import *    # noqa: F401, F403

from app.domains.usr import models as usr_models


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 새 메모리 SQLite DB를 사용합니다. (StaticPool: 하나의 연결을 공유해야 메모리 DB가 유지됨)
TEST_DATABASE_URL = "sqlite+aiosqlite://"


class SequentialIdGenerator(IdGenerator):
    """생성 순서대로 증가하는 결정적 ID 생성기 (정렬 순서 = 생성 순서)"""
    def __init__(self):
        self.counter = 0

    def new_id(self) -> str:
        self.counter += 1
        return f"{self.counter:032x}"


class MutableClock:
    """테스트 중 현재 시각을 옮길 수 있는 시계"""
    def __init__(self, now: datetime):
        self.now = now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


# --- 데이터베이스 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    각 테스트 함수마다 새 메모리 DB에 모든 테이블을 만들고,
    그 DB에 연결된 비동기 세션을 제공합니다.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        await session.close()
        await test_engine.dispose()


@pytest.fixture(scope="function")
def id_gen() -> SequentialIdGenerator:
    return SequentialIdGenerator()


@pytest.fixture(scope="function")
def clock() -> MutableClock:
    """현재 시각으로 시작하는 테스트 시계. 레코드 생성 시각(created_at)과 같은 기준을 씁니다."""
    return MutableClock(datetime.now(UTC))


@pytest_asyncio.fixture(scope="function", autouse=True)
async def override_dependencies(
    db_session: AsyncSession, id_gen: SequentialIdGenerator, clock: MutableClock
) -> AsyncGenerator[None, None]:
    """
    DB 세션, ID 생성기, 현재 시각 의존성을 테스트용으로 교체합니다.
    """
    async def override_get_session():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()
    main_app.dependency_overrides.update({
        get_session: override_get_session,
        deps.get_db_session: override_get_session,
        deps.get_id_generator: lambda: id_gen,
        deps.get_now: lambda: clock.now,
    })
    try:
        yield
    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- 사용자/세션 픽스처 ---
# 역할: 테스트 DB의 users 테이블에 사용자를 만들고, 그 사용자의 세션을 만들어 Bearer 토큰으로 사용합니다.
@pytest.fixture(scope="function")
def user_factory(
    db_session: AsyncSession, id_gen: SequentialIdGenerator
) -> Callable[..., Awaitable[usr_models.User]]:
    """역할을 지정하여 테스트 사용자를 생성하는 팩토리 함수를 반환합니다."""
    async def _create_user(email: str, role: usr_models.UserRole) -> usr_models.User:
        user = usr_models.User(id=id_gen.new_id(), email=email, role=role)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user
    return _create_user


@pytest.fixture(scope="function")
def session_factory(
    db_session: AsyncSession, id_gen: SequentialIdGenerator, clock: MutableClock
) -> Callable[..., Awaitable[usr_models.Session]]:
    """사용자의 세션을 만듭니다. 기본 만료 시각은 현재(테스트 시계) + 24시간입니다."""
    async def _create_session(user: usr_models.User, expires_in: timedelta = timedelta(hours=24)) -> usr_models.Session:
        db_obj = usr_models.Session(id=id_gen.new_id(), user_id=user.id, expiry=clock.now + expires_in)
        db_session.add(db_obj)
        await db_session.commit()
        await db_session.refresh(db_obj)
        return db_obj
    return _create_session


@pytest_asyncio.fixture(scope="function")
async def test_owner(user_factory: Callable) -> usr_models.User:
    return await user_factory("owner@example.com", usr_models.UserRole.OWNER)


@pytest_asyncio.fixture(scope="function")
async def test_editor(user_factory: Callable) -> usr_models.User:
    return await user_factory("editor@example.com", usr_models.UserRole.EDITOR)


@pytest_asyncio.fixture(scope="function")
async def test_reporter(user_factory: Callable) -> usr_models.User:
    return await user_factory("reporter@example.com", usr_models.UserRole.REPORTER)


@pytest_asyncio.fixture(scope="function")
async def test_viewer(user_factory: Callable) -> usr_models.User:
    return await user_factory("viewer@example.com", usr_models.UserRole.VIEWER)


# --- 인증 클라이언트 픽스처 ---
@pytest.fixture(scope="function")
def authorized_client_factory(
    session_factory: Callable,
) -> Callable[[usr_models.User], AsyncGenerator[AsyncClient, None]]:
    """
    특정 사용자의 실제 세션 ID를 Bearer 토큰으로 사용하는 AsyncClient를 만드는 팩토리입니다.
    """
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
        db_obj = await session_factory(user)
        transport = ASGITransport(app=main_app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            client.headers["Authorization"] = f"Bearer {db_obj.id}"
            print(f"DEBUG IN FACTORY: Client for '{user.email}' ({user.role.value}) created with session {db_obj.id}")
            yield client
    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def client() -> AsyncGenerator[AsyncClient, None]:
    """인증 헤더가 없는 클라이언트"""
    transport = ASGITransport(app=main_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def owner_client(authorized_client_factory: Callable, test_owner: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_owner) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def editor_client(authorized_client_factory: Callable, test_editor: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_editor) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def reporter_client(authorized_client_factory: Callable, test_reporter: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_reporter) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def viewer_client(authorized_client_factory: Callable, test_viewer: usr_models.User) -> AsyncGenerator[AsyncClient, None]:
    async with authorized_client_factory(test_viewer) as ac:
        yield ac
