"""Tests for MongoHealthCheck with a mocked client."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from mongobundle.infra.db.health import MongoHealthCheck


def _handle(command: AsyncMock) -> MagicMock:
    db = MagicMock()
    db.command = command
    handle = MagicMock()
    handle.client.__getitem__.return_value = db
    return handle


class TestMongoHealthCheck:
    @pytest.mark.asyncio
    async def test_reachable(self, mongo_config):
        command = AsyncMock(return_value={"ok": 1.0})
        handle = _handle(command)
        result = await MongoHealthCheck(handle, mongo_config).check()
        assert result.ok is True
        assert "app" in result.message
        handle.client.__getitem__.assert_called_with("app")
        command.assert_awaited_once_with("ping")

    @pytest.mark.asyncio
    async def test_transport_failure_is_unhealthy(self, mongo_config):
        command = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        result = await MongoHealthCheck(_handle(command), mongo_config).check()
        assert result.ok is False
        assert "ServerSelectionTimeoutError" in result.message
        assert "no servers" in result.message

    @pytest.mark.asyncio
    async def test_unexpected_error_is_unhealthy(self, mongo_config):
        command = AsyncMock(side_effect=RuntimeError("weird"))
        result = await MongoHealthCheck(_handle(command), mongo_config).check()
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_timeout(self, mongo_config):
        async def _hang(*args):
            await asyncio.sleep(10)

        check = MongoHealthCheck(_handle(AsyncMock(side_effect=_hang)), mongo_config)
        result = await check.check(timeout=0.01)
        assert result.ok is False
        assert "timed out" in result.message

    @pytest.mark.asyncio
    async def test_default_timeout(self, mongo_config):
        async def _hang(*args):
            await asyncio.sleep(10)

        check = MongoHealthCheck(_handle(AsyncMock(side_effect=_hang)), mongo_config, timeout=0.01)
        result = await check.check()
        assert result.ok is False

    @pytest.mark.asyncio
    async def test_concurrent_checks(self, mongo_config):
        command = AsyncMock(return_value={"ok": 1.0})
        check = MongoHealthCheck(_handle(command), mongo_config)
        results = await asyncio.gather(*(check.check() for _ in range(5)))
        assert all(r.ok for r in results)
        assert command.await_count == 5
