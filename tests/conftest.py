"""
测试配置和 fixtures

每个测试使用独立的内存 SQLite 数据库（aiosqlite + StaticPool）
"""

import os

os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sitebuilder.core.security import create_access_token
from sitebuilder.database.base import Base
from sitebuilder.database.engine import get_db
from sitebuilder.database.models import Site, User
from sitebuilder.main import create_app
from sitebuilder.services.container import SiteBuilderServices, build_services
from sitebuilder.services.notifier import SendResult

TEST_DATABASE_URL = "sqlite+aiosqlite://"


class RecordingNotifier:
    """记录发送内容的通知器，fail=True 时模拟发送失败"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict] = []

    async def send(self, recipient: str, subject: str, body: str) -> SendResult:
        if self.fail:
            return SendResult(success=False, error="smtp unavailable")
        self.sent.append({"recipient": recipient, "subject": subject, "body": body})
        return SendResult(success=True)


@pytest_asyncio.fixture
async def test_engine():
    """创建测试数据库引擎"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """创建测试数据库会话"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def services(notifier: RecordingNotifier) -> SiteBuilderServices:
    return build_services(notifier=notifier)


async def make_user(
    db: AsyncSession,
    email: str = "owner@example.com",
    first_name: str = "Ada",
    last_name: str = "Owner",
) -> User:
    """直接落库一个用户（跳过密码哈希）"""
    user = User(
        email=email,
        hashed_password="not-a-real-hash",
        first_name=first_name,
        last_name=last_name,
    )
    db.add(user)
    await db.commit()
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest_asyncio.fixture
async def owner(db_session: AsyncSession) -> User:
    return await make_user(db_session)


@pytest_asyncio.fixture
async def site(db_session: AsyncSession, services: SiteBuilderServices, owner: User) -> Site:
    """不含主题与页面的空站点"""
    return await services.registry.create(db_session, owner.id, "Blank", "blank.example.com")


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession,
    services: SiteBuilderServices,
) -> AsyncGenerator[AsyncClient, None]:
    """创建测试客户端"""
    app = create_app(services)

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def tree(depth: int, type_prefix: str = "section", props: Optional[dict] = None) -> list[dict]:
    """构造一条深度为 depth 的单链组件树"""
    root: dict = {"type": f"{type_prefix}-0", "props": dict(props or {}), "children": []}
    node = root
    for level in range(1, depth):
        child = {"type": f"{type_prefix}-{level}", "props": {"level": level}, "children": []}
        node["children"].append(child)
        node = child
    return [root]


@pytest.fixture
def user_factory(db_session: AsyncSession):
    """按邮箱创建额外用户"""

    async def _make(email: str, **kwargs) -> User:
        return await make_user(db_session, email=email, **kwargs)

    return _make


@pytest.fixture
def make_tree():
    return tree


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def failing_notifier() -> RecordingNotifier:
    return RecordingNotifier(fail=True)
