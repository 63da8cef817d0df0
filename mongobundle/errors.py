"""Exception types raised by the bundle."""

from __future__ import annotations


class MongoBundleError(Exception):
    """Base class for bundle errors."""


class ConfigurationError(MongoBundleError, ValueError):
    """Missing or malformed Mongo configuration. Aborts startup."""


class MongoConnectionError(MongoBundleError):
    """The driver could not be set up against the configured seeds."""


class NotYetInitializedError(MongoBundleError):
    """The client was requested before the bundle was running."""
