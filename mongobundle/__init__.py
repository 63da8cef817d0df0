"""MongoDB client bundle: configuration, lifecycle management and health checks."""

from __future__ import annotations

from mongobundle.bundle import BundleState, MongoBundle
from mongobundle.config import CredentialsConfig, MongoConfig, SeedConfig
from mongobundle.errors import (
    ConfigurationError,
    MongoBundleError,
    MongoConnectionError,
    NotYetInitializedError,
)
from mongobundle.models.health import HealthResult

__all__ = [
    "BundleState",
    "ConfigurationError",
    "CredentialsConfig",
    "HealthResult",
    "MongoBundle",
    "MongoBundleError",
    "MongoConfig",
    "MongoConnectionError",
    "NotYetInitializedError",
    "SeedConfig",
]
