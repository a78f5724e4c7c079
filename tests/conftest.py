"""
Shared test fixtures
In-memory SQLite database, a fake identity provider and row factories
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("FIREBASE_PROJECT_ID", "floortrack-test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from itertools import count
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from floortrack import models  # noqa: F401
from floortrack.core.config import settings
from floortrack.core.database import Base, enable_sqlite_foreign_keys, get_db
from floortrack.core.errors import (
    ConflictError,
    IdentityProviderError,
    UnauthenticatedError,
)
from floortrack.core.roles import ROLE_REFERENCE_ROWS, Role
from floortrack.main import app
from floortrack.models import (
    AccessPoint,
    Building,
    ClientDevice,
    Floor,
    GlobalPermission,
    Group,
    User,
    UserGroup,
    UserOwnedDevice,
)
from floortrack.models.role import Role as RoleRow
from floortrack.services.identity import AppUser
from floortrack.services.identity_provider import IdentityProvider, IdentityRecord, get_identity_provider

ROLE_IDS = {role: role_id for role_id, role in ROLE_REFERENCE_ROWS}


class FakeIdentityProvider(IdentityProvider):
    """In-memory identity store; a session token is the uid it belongs to"""

    def __init__(self):
        self.accounts: dict[str, tuple[str, str]] = {}
        self.known_uids: set[str] = set()
        self.deleted: list[str] = []
        self.verification_requests: list[str] = []
        self.reset_requests: list[str] = []
        self.fail_delete = False
        self._ids = count(1)

    def allow(self, uid: str) -> None:
        self.known_uids.add(uid)

    async def verify_token(self, raw_token: str) -> IdentityRecord:
        if raw_token not in self.known_uids:
            raise UnauthenticatedError("Invalid session")
        return IdentityRecord(uid=raw_token, email="", id_token=raw_token)

    async def sign_up(self, email: str, password: str) -> IdentityRecord:
        if email in self.accounts:
            raise ConflictError("Email already registered")
        uid = f"fake-uid-{next(self._ids)}"
        self.accounts[email] = (uid, password)
        self.known_uids.add(uid)
        return IdentityRecord(uid=uid, email=email, id_token=uid)

    async def sign_in(self, email: str, password: str) -> IdentityRecord:
        account = self.accounts.get(email)
        if account is None or account[1] != password:
            raise UnauthenticatedError("Invalid email or password")
        return IdentityRecord(uid=account[0], email=email, id_token=account[0])

    async def send_email_verification(self, id_token: str) -> None:
        self.verification_requests.append(id_token)

    async def send_password_reset(self, email: str) -> None:
        self.reset_requests.append(email)

    async def delete_identity(self, uid: str, id_token: Optional[str] = None) -> None:
        if self.fail_delete:
            raise IdentityProviderError()
        self.deleted.append(uid)
        self.known_uids.discard(uid)


class Factory:
    """Creates committed rows; users come back as request-style AppUser snapshots"""

    def __init__(self, db: AsyncSession, provider: FakeIdentityProvider):
        self.db = db
        self.provider = provider
        self._seq = count(1)

    async def _save(self, obj):
        self.db.add(obj)
        await self.db.commit()
        return obj

    async def group(self, name: Optional[str] = None) -> Group:
        return await self._save(Group(name=name or f"group-{next(self._seq)}"))

    async def user(
        self,
        role: Role = Role.VIEWER,
        groups: tuple = (),
        *,
        uid: Optional[str] = None,
        email: Optional[str] = None,
    ) -> AppUser:
        n = next(self._seq)
        uid = uid or f"uid-{n}"
        user = User(
            firebase_uid=uid,
            email=email or f"user{n}@example.com",
            first_name="Test",
            last_name=f"User{n}",
            role_id=ROLE_IDS[role],
        )
        self.db.add(user)
        await self.db.flush()
        self.db.add_all([UserGroup(user_id=user.id, group_id=g.id) for g in groups])
        await self.db.commit()
        self.provider.allow(uid)

        return AppUser(
            id=user.id,
            firebase_uid=uid,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            role=role,
            role_id=ROLE_IDS[role],
            group_ids=tuple(sorted(g.id for g in groups)),
        )

    async def building(self, name: str = "HQ") -> Building:
        return await self._save(Building(name=name))

    async def floor(self, building: Building, name: str = "Ground") -> Floor:
        return await self._save(Floor(name=name, building_id=building.id, svg_map="<svg/>"))

    async def access_point(self, floor: Floor, name: str = "AP", cx: float = 1.0, cy: float = 2.0) -> AccessPoint:
        return await self._save(AccessPoint(name=name, cx=cx, cy=cy, floor_id=floor.id))

    async def client_device(self, ap: AccessPoint, mac: str) -> ClientDevice:
        return await self._save(ClientDevice(mac=mac, ap_id=ap.id))

    async def owned_device(self, user: AppUser, mac: str, name: str = "Laptop") -> UserOwnedDevice:
        return await self._save(UserOwnedDevice(name=name, mac=mac, user_id=user.id))

    async def grant(self, group: Group, floor: Floor) -> GlobalPermission:
        return await self._save(
            GlobalPermission(group_id=group.id, building_id=floor.building_id, floor_id=floor.id)
        )


@pytest_asyncio.fixture
async def engine():
    """One in-memory database per test, shared by every session"""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(test_engine, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        session.add_all([RoleRow(id=role_id, name=role.value) for role_id, role in ROLE_REFERENCE_ROWS])
        await session.commit()

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def provider():
    return FakeIdentityProvider()


@pytest.fixture
def factory(db, provider):
    return Factory(db, provider)


@pytest_asyncio.fixture
async def client(session_factory, provider):
    """HTTP client against the app with the test database and fake provider"""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: provider

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
def sign_in(client):
    """Attach a user's session cookie to the client"""

    def _sign_in(user: AppUser) -> None:
        client.cookies.set(settings.SESSION_COOKIE_NAME, user.firebase_uid)

    return _sign_in
