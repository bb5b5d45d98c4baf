import asyncio
from typing import Dict, List
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio


# Skip integration tests unless explicitly enabled
def pytest_addoption(parser):
    parser.addoption("--integration", action="store_true", default=False, help="Run integration tests")


def pytest_configure(config):
    config.addinivalue_line("markers", "integration: needs a reachable NUT server")


def pytest_collection_modifyitems(config, items):
    if not config.getoption("--integration"):
        skip_integration = pytest.mark.skip(reason="need --integration option to run")
        for item in items:
            if "integration" in item.keywords:
                item.add_marker(skip_integration)


@pytest.fixture
def nut_streams():
    """
    Factory for a (reader, writer) pair where the reader replays canned
    NUT server output. Must be called from inside a running event loop.
    """
    def factory(*lines: str, eof: bool = True):
        reader = asyncio.StreamReader()
        reader.feed_data("".join(f"{line}\n" for line in lines).encode())
        if eof:
            reader.feed_eof()
        writer = MagicMock()
        writer.drain = AsyncMock()
        writer.wait_closed = AsyncMock()
        return reader, writer
    return factory


class FakeNUTServer:
    """A minimal in-process upsd answering each request from a fixed table."""

    def __init__(self, replies: Dict[str, List[str]]):
        self.replies = replies
        self.requests: List[str] = []
        self.connections = 0
        self.disconnected = asyncio.Event()
        self.port = 0
        self._server = None

    @property
    def address(self) -> str:
        return f"127.0.0.1:{self.port}"

    async def start(self) -> None:
        self._server = await asyncio.start_server(self._handle, "127.0.0.1", 0)
        self.port = self._server.sockets[0].getsockname()[1]

    async def stop(self) -> None:
        self._server.close()
        await self._server.wait_closed()

    async def _handle(self, reader, writer) -> None:
        self.connections += 1
        try:
            while True:
                line = await reader.readline()
                if not line:
                    break
                request = line.decode().rstrip("\n")
                self.requests.append(request)
                for reply in self.replies.get(request, ["ERR UNKNOWN-COMMAND"]):
                    writer.write(f"{reply}\n".encode())
                await writer.drain()
        finally:
            writer.close()
            self.disconnected.set()


@pytest_asyncio.fixture
async def fake_nut_server():
    """Start FakeNUTServer instances on free local ports; stopped after the test."""
    servers = []

    async def factory(replies: Dict[str, List[str]]) -> FakeNUTServer:
        server = FakeNUTServer(replies)
        await server.start()
        servers.append(server)
        return server

    yield factory
    for server in servers:
        await server.stop()
