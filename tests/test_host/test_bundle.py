"""Tests for MongoBundle wiring and state transitions."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import patch

import pytest
from pymongo.write_concern import WriteConcern

from mongobundle.bundle import BundleState, MongoBundle
from mongobundle.errors import ConfigurationError, MongoBundleError, NotYetInitializedError
from mongobundle.host.environment import Bootstrap, Environment
from mongobundle.infra.db.health import MongoHealthCheck
from mongobundle.infra.db.managed import MongoClientManager


@pytest.fixture
def motor_cls():
    with patch("motor.motor_asyncio.AsyncIOMotorClient") as cls:
        yield cls


def _accessor(config):
    return config["mongo"]


class TestConstruction:
    def test_accessor_required(self):
        with pytest.raises(ConfigurationError, match="accessor is required"):
            MongoBundle(None)

    def test_accessor_callable(self):
        with pytest.raises(ConfigurationError, match="callable"):
            MongoBundle("not a function")

    def test_default_health_check_name(self):
        assert MongoBundle(_accessor).health_check_name == "mongo"

    def test_empty_health_check_name(self):
        with pytest.raises(ConfigurationError):
            MongoBundle(_accessor, health_check_name="")

    def test_bad_timeout(self):
        with pytest.raises(ConfigurationError):
            MongoBundle(_accessor, health_check_timeout=0)


class TestRun:
    def test_client_before_run(self):
        bundle = MongoBundle(_accessor)
        assert bundle.state is BundleState.UNINITIALIZED
        with pytest.raises(NotYetInitializedError):
            bundle.get_client()

    def test_initialize_does_nothing(self):
        bundle = MongoBundle(_accessor)
        Bootstrap().add_bundle(bundle)
        assert bundle.state is BundleState.UNINITIALIZED

    def test_run_registers_manager_and_health_check(self, mongo_config, motor_cls):
        env = Environment()
        bundle = MongoBundle(_accessor, health_check_name="primary-db")
        bundle.run({"mongo": mongo_config}, env)

        assert bundle.state is BundleState.RUNNING
        managed = env.lifecycle.managed_objects
        assert len(managed) == 1
        assert isinstance(managed[0], MongoClientManager)
        assert env.health_checks.names() == ["primary-db"]
        assert isinstance(env.health_checks.get("primary-db"), MongoHealthCheck)

        client = bundle.get_client()
        assert client is bundle.client
        assert len(client.seeds) == 2
        assert client.credentials[0].username == "svc"
        assert client.credentials[0].source == "app"
        assert client.write_concern == WriteConcern(w="majority")

    def test_run_twice(self, mongo_config, motor_cls):
        bundle = MongoBundle(_accessor)
        bundle.run({"mongo": mongo_config}, Environment())
        with pytest.raises(MongoBundleError):
            bundle.run({"mongo": mongo_config}, Environment())

    def test_bad_config_aborts(self, mongo_config, motor_cls):
        env = Environment()
        bundle = MongoBundle(_accessor)
        with pytest.raises(ConfigurationError):
            bundle.run({"mongo": replace(mongo_config, write_concern="BOGUS")}, env)
        assert bundle.state is BundleState.UNINITIALIZED
        assert env.lifecycle.managed_objects == []
        assert env.health_checks.names() == []
        motor_cls.assert_not_called()

    def test_accessor_returns_none(self, motor_cls):
        with pytest.raises(ConfigurationError):
            MongoBundle(lambda c: None).run({}, Environment())

    def test_registration_failure_closes_client(self, mongo_config, motor_cls):
        env = Environment()
        MongoBundle(_accessor).run({"mongo": mongo_config}, env)
        second = MongoBundle(_accessor)
        with pytest.raises(ValueError, match="already registered"):
            second.run({"mongo": mongo_config}, env)
        assert second.state is BundleState.UNINITIALIZED
        assert motor_cls.return_value.close.call_count == 1
        assert len(env.lifecycle.managed_objects) == 1
        assert env.health_checks.names() == ["mongo"]

    def test_lifecycle_failure_unregisters_health_check(self, mongo_config, motor_cls):
        env = Environment()
        bundle = MongoBundle(_accessor)
        with patch.object(env.lifecycle, "manage", side_effect=TypeError("not managed")):
            with pytest.raises(TypeError):
                bundle.run({"mongo": mongo_config}, env)
        assert bundle.state is BundleState.UNINITIALIZED
        assert env.health_checks.names() == []
        assert env.lifecycle.managed_objects == []
        motor_cls.return_value.close.assert_called_once()


class TestStop:
    @pytest.mark.asyncio
    async def test_stop_twice(self, mongo_config, motor_cls):
        bundle = MongoBundle(_accessor)
        bundle.run({"mongo": mongo_config}, Environment())
        await bundle.stop()
        await bundle.stop()
        assert bundle.state is BundleState.STOPPED
        motor_cls.return_value.close.assert_called_once()
        with pytest.raises(NotYetInitializedError):
            bundle.get_client()

    @pytest.mark.asyncio
    async def test_stop_before_run(self):
        bundle = MongoBundle(_accessor)
        await bundle.stop()
        assert bundle.state is BundleState.UNINITIALIZED

    @pytest.mark.asyncio
    async def test_host_lifecycle_stops_bundle(self, mongo_config, motor_cls):
        env = Environment()
        bundle = MongoBundle(_accessor)
        bundle.run({"mongo": mongo_config}, env)
        await env.lifecycle.start_all()
        assert bundle.state is BundleState.RUNNING
        await env.lifecycle.stop_all()
        assert bundle.state is BundleState.STOPPED
        with pytest.raises(NotYetInitializedError, match="closed"):
            bundle.get_client()
        await bundle.stop()
        motor_cls.return_value.close.assert_called_once()
