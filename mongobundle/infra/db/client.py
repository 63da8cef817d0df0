"""Motor async MongoDB client construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import motor.motor_asyncio
from pymongo.errors import ConfigurationError as DriverConfigurationError
from pymongo.errors import PyMongoError
from pymongo.write_concern import WriteConcern

from mongobundle.config import MongoConfig
from mongobundle.errors import ConfigurationError, MongoConnectionError
from mongobundle.infra.db.write_concern import client_options, resolve_write_concern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MongoCredential:
    """A credential attached to the client. The password is not kept here."""

    username: str
    source: str
    mechanism: str | None = None


class MongoClient:
    """Thin wrapper around Motor's async MongoDB client.

    Records the seeds, credentials and write concern it was built with so
    callers can inspect the client without reaching into driver internals.
    """

    def __init__(
        self,
        client: motor.motor_asyncio.AsyncIOMotorClient,
        database: str,
        seeds: tuple[tuple[str, int], ...],
        credentials: tuple[MongoCredential, ...],
        write_concern: WriteConcern,
    ) -> None:
        self._client = client
        self._db = client[database]
        self._database = database
        self._seeds = seeds
        self._credentials = credentials
        self._write_concern = write_concern
        self._closed = False

    @property
    def db(self) -> motor.motor_asyncio.AsyncIOMotorDatabase:
        return self._db

    @property
    def client(self) -> motor.motor_asyncio.AsyncIOMotorClient:
        return self._client

    @property
    def database(self) -> str:
        return self._database

    @property
    def seeds(self) -> tuple[tuple[str, int], ...]:
        return self._seeds

    @property
    def credentials(self) -> tuple[MongoCredential, ...]:
        return self._credentials

    @property
    def write_concern(self) -> WriteConcern:
        return self._write_concern

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """Release the driver's sockets and monitors. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._client.close()
        logger.info("MongoDB client closed")


def build_client(config: MongoConfig, log: logging.Logger | None = None) -> MongoClient:
    """Create a MongoClient from validated configuration.

    Validation and write concern lookup happen before the driver is touched,
    so configuration errors never open a connection. The driver connects
    lazily on first use.
    """
    log = log or logger
    config.validate()
    write_concern = resolve_write_concern(config.write_concern)

    seeds = tuple((seed.host.strip("[]"), seed.port) for seed in config.seeds)
    addresses = [seed.address for seed in config.seeds]
    log.info("Found %d mongo seed servers", len(seeds))
    for address in addresses:
        log.info("Found mongo seed server %s", address)

    kwargs: dict = client_options(write_concern)
    credentials: tuple[MongoCredential, ...] = ()
    if config.credentials is None:
        log.info("Found %d mongo credentials.", 0)
    else:
        credential = MongoCredential(
            username=config.credentials.username,
            source=config.database,
            mechanism=config.auth_mechanism,
        )
        credentials = (credential,)
        kwargs.update(
            username=config.credentials.username,
            password=config.credentials.password,
            authSource=config.database,
        )
        if config.auth_mechanism:
            kwargs["authMechanism"] = config.auth_mechanism
        log.info(
            "Found mongo credential for %s on database %s.",
            credential.username,
            credential.source,
        )

    log.info("Mongo database is %s", config.database)

    try:
        motor_client = motor.motor_asyncio.AsyncIOMotorClient(
            addresses,
            **kwargs,
        )
    except DriverConfigurationError as e:
        raise ConfigurationError(f"Invalid MongoDB client options: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Invalid mongo seed list {addresses}: {e}") from e
    except PyMongoError as e:
        raise MongoConnectionError("Could not configure MongoDB client.") from e

    return MongoClient(
        client=motor_client,
        database=config.database,
        seeds=seeds,
        credentials=credentials,
        write_concern=write_concern,
    )
