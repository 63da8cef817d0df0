"""Shared fixtures."""

from __future__ import annotations

import pytest

from mongobundle.config import CredentialsConfig, MongoConfig, SeedConfig


@pytest.fixture
def mongo_config():
    return MongoConfig(
        seeds=(SeedConfig("db1", 27017), SeedConfig("db2", 27017)),
        credentials=CredentialsConfig(username="svc", password="pw"),
        database="app",
        write_concern="MAJORITY",
    )


@pytest.fixture
def anonymous_config():
    return MongoConfig(seeds=(SeedConfig("localhost"),), database="app")


@pytest.fixture(autouse=True)
def _clear_mongo_env(monkeypatch):
    for name in (
        "MONGO_SEEDS",
        "MONGO_DATABASE",
        "MONGO_USERNAME",
        "MONGO_PASSWORD",
        "MONGO_WRITE_CONCERN",
        "MONGO_AUTH_MECHANISM",
    ):
        monkeypatch.delenv(name, raising=False)
