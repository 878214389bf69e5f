import os
import threading

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
import redis.exceptions
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tinylink.main import app
from tinylink.core.config import Settings
from tinylink.db.Models.models import Base
from tinylink.db.Connection import database
from tinylink.services.cache_store import RedisCacheStore
from tinylink.services.counter import CounterAllocator
from tinylink.services.link_service import LinkService


# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeRedis:
    """In-process stand-in for the redis-py calls RedisCacheStore makes.

    Every command runs under one lock, like a single Redis server, and
    expiry is driven by a manual clock (see ``advance``).
    """

    def __init__(self):
        self._data = {}
        self._expires = {}
        self._lock = threading.RLock()
        self.clock = 0.0
        self.commands = []
        self.down = False
        self.failing = set()

    def advance(self, seconds):
        self.clock += seconds

    def ttl(self, name):
        with self._lock:
            if name not in self._expires:
                return None
            return self._expires[name] - self.clock

    def _check(self, command, name=None):
        if self.down:
            raise redis.exceptions.ConnectionError("Connection refused")
        if command in self.failing:
            raise redis.exceptions.ConnectionError(f"{command} failed")
        self.commands.append((command, name))
        if name is not None and name in self._expires and self._expires[name] <= self.clock:
            self._data.pop(name, None)
            self._expires.pop(name, None)

    def count(self, command, name=None):
        return sum(1 for c, n in self.commands if c == command and (name is None or n == name))

    def ping(self):
        if self.down:
            raise redis.exceptions.ConnectionError("Connection refused")
        return True

    def exists(self, name):
        with self._lock:
            self._check("exists", name)
            return int(name in self._data)

    def get(self, name):
        with self._lock:
            self._check("get", name)
            return self._data.get(name)

    def set(self, name, value, ex=None, nx=False):
        with self._lock:
            self._check("set", name)
            if nx and name in self._data:
                return None
            self._data[name] = str(value)
            if ex:
                self._expires[name] = self.clock + ex
            else:
                self._expires.pop(name, None)
            return True

    def incr(self, name, amount=1):
        with self._lock:
            self._check("incr", name)
            try:
                value = int(self._data.get(name, 0)) + amount
            except ValueError:
                raise redis.exceptions.ResponseError("value is not an integer or out of range")
            self._data[name] = str(value)
            return value

    def expire(self, name, time, nx=False):
        with self._lock:
            self._check("expire", name)
            if name not in self._data:
                return False
            if nx and name in self._expires:
                return False
            self._expires[name] = self.clock + time
            return True

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def delete(self, *names):
        with self._lock:
            removed = 0
            for name in names:
                self._check("delete", name)
                if self._data.pop(name, None) is not None:
                    removed += 1
                self._expires.pop(name, None)
            return removed

    def flushdb(self):
        with self._lock:
            self._check("flushdb")
            self._data.clear()
            self._expires.clear()
            return True


class FakePipeline:
    """MULTI/EXEC: queued commands run together or, if one is failing, not at all."""

    def __init__(self, server):
        self.server = server
        self.queued = []

    def incr(self, name, amount=1):
        self.queued.append(("incr", (name, amount), {}))
        return self

    def expire(self, name, time, nx=False):
        self.queued.append(("expire", (name, time), {"nx": nx}))
        return self

    def execute(self):
        with self.server._lock:
            for command, _, _ in self.queued:
                if self.server.down or command in self.server.failing:
                    raise redis.exceptions.ConnectionError(f"{command} failed")
            results = [getattr(self.server, command)(*args, **kwargs) for command, args, kwargs in self.queued]
        self.queued = []
        return results


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    return RedisCacheStore(fake_redis)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def counter(cache, settings):
    allocator = CounterAllocator(cache, key=settings.URL_COUNTER_KEY, initial_value=settings.INITIAL_URL_COUNTER)
    allocator.initialize()
    return allocator


@pytest.fixture
def link_service(cache, settings):
    service = LinkService(cache, settings)
    service.counter.initialize()
    return service


@pytest.fixture
def db_session():
    """Creates a fresh database for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session, cache):
    """Creates a test client with overridden database and cache dependencies."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database.get_db] = override_get_db
    app.dependency_overrides[database.get_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_urls():
    """Provides sample URLs for testing."""
    return [
        "https://example.com/test1",
        "https://google.com/search?q=test",
        "https://github.com/user/repo",
    ]
