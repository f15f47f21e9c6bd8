"""Shared fixtures: a throwaway SQLite store and zero-delay settings."""

from typing import Callable, Dict

import httpx
import pytest
import pytest_asyncio
from aiohttp.test_utils import TestClient, TestServer

from api.commands import CommandHandler
from api.server import ApiServer
from config.settings import (
    DatabaseSettings,
    LoggingSettings,
    MonitoringSettings,
    Settings,
)
from database.manager import DatabaseManager
from monitoring.executor import PingExecutor
from monitoring.registry import TargetRegistry
from monitoring.scheduler import PingScheduler


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        environment="testing",
        database=DatabaseSettings(type="sqlite", sqlite_path=tmp_path / "keepalive.db"),
        monitoring=MonitoringSettings(
            pacing_delay=0,
            settle_delay=0,
            run_on_start=False,
            request_timeout=5,
        ),
        logging=LoggingSettings(file_enabled=False, console_enabled=False),
    )


@pytest_asyncio.fixture
async def db_manager(settings):
    manager = DatabaseManager(settings)
    await manager.initialize()
    yield manager
    await manager.close()


@pytest_asyncio.fixture
async def registry(db_manager, settings) -> TargetRegistry:
    return TargetRegistry(db_manager, settings)


@pytest.fixture
def responses() -> Dict[str, int]:
    """URL → status code served by the mock transport. Missing URLs fail to connect."""
    return {}


@pytest.fixture
def mock_transport(responses) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if url not in responses:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(responses[url], text="pong")

    return httpx.MockTransport(handler)


@pytest.fixture
def executor(registry, settings, mock_transport) -> PingExecutor:
    return PingExecutor(registry, settings, transport=mock_transport)


@pytest.fixture
def scheduler(registry, executor, settings) -> PingScheduler:
    return PingScheduler(registry, executor, settings)


@pytest.fixture
def make_executor(registry, settings) -> Callable[[Callable], PingExecutor]:
    """Build an executor around an arbitrary httpx handler function."""
    def factory(handler: Callable) -> PingExecutor:
        return PingExecutor(registry, settings, transport=httpx.MockTransport(handler))

    return factory


@pytest_asyncio.fixture
async def api_client(settings, registry, db_manager, scheduler):
    server = ApiServer(
        settings,
        CommandHandler(registry),
        db_manager=db_manager,
        scheduler=scheduler,
    )
    client = TestClient(TestServer(server.app))
    await client.start_server()
    yield client
    await client.close()
