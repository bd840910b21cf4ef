"""Shared fixtures: isolated settings, in-memory store, simulated backend."""

from typing import Optional

import pytest

from familyhome.config import Settings
from familyhome.exceptions import RemoteOperationError
from familyhome.services.app_state import AppStateManager
from familyhome.services.persistence import MemoryKeyValueStore, PersistenceAdapter
from familyhome.services.remote_facade import SimulatedFacade


class CountingStore(MemoryKeyValueStore):
    """Memory store that records every write."""

    def __init__(self):
        super().__init__()
        self.writes: list[str] = []

    def set(self, key: str, value: bytes) -> None:
        self.writes.append(key)
        super().set(key, value)


class FailingFacade(SimulatedFacade):
    """Simulated backend whose remote calls all fail."""

    def _fail(self):
        raise RemoteOperationError("backend down", status_code=503)

    async def sign_up(self, name, email, password, avatar):
        self._fail()

    async def sign_in(self, email, password):
        self._fail()

    async def sign_out(self):
        self._fail()

    async def create_family(self, name, created_by):
        self._fail()

    async def join_family(self, invite_code, user):
        self._fail()

    async def fetch_family(self, family_id):
        self._fail()

    async def send_message(self, family_id: Optional[str], message):
        self._fail()

    async def upload_avatar(self, user_id, image_data):
        self._fail()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        db_path=tmp_path / "test.db",
        simulated_delay=0,
        message_delay=0,
        session_secret="test-secret",
        animation_reset_seconds=0.1,
    )


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def persistence(store):
    return PersistenceAdapter(store)


@pytest.fixture
def facade(settings):
    return SimulatedFacade(settings)


@pytest.fixture
def manager(settings, facade, persistence):
    m = AppStateManager(settings, facade, persistence)
    m.load()
    yield m
    m.shutdown()


@pytest.fixture
def failing_facade(settings):
    return FailingFacade(settings)


@pytest.fixture
def failing_manager(settings, failing_facade, persistence):
    m = AppStateManager(settings, failing_facade, persistence)
    m.load()
    yield m
    m.shutdown()
