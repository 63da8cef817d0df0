"""Configuration loading: TOML file + environment variable overlay."""

from __future__ import annotations

import ipaddress
import os
from dataclasses import dataclass, field
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from mongobundle.errors import ConfigurationError
from mongobundle.infra.db.write_concern import canonical_name

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "mongobundle"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.toml"

DEFAULT_PORT = 27017
DEFAULT_WRITE_CONCERN = "ACKNOWLEDGED"

DEFAULT_CONFIG_TOML = """\
[mongo]
database = "app"
writeConcern = "ACKNOWLEDGED"

[[mongo.seeds]]
host = "localhost"
port = 27017

# [mongo.credentials]
# userName = "svc"
# password = "secret"
"""


@dataclass(frozen=True)
class SeedConfig:
    host: str
    port: int = DEFAULT_PORT

    @property
    def address(self) -> str:
        host = self.host.strip("[]")
        if _is_ipv6_literal(host):
            return f"[{host}]:{self.port}"
        return f"{host}:{self.port}"


def _is_ipv6_literal(host: str) -> bool:
    try:
        return ipaddress.ip_address(host.strip("[]")).version == 6
    except ValueError:
        return False


# Characters the driver treats as separators in a host list or URI
_RESERVED_HOST_CHARS = ",/@?#"


def _validate_host(host: str) -> None:
    """Reject hosts the driver would split, misparse or not resolve as one address.

    IPv6 literals are accepted bare (``::1``) or bracketed (``[::1]``).
    """
    if _is_ipv6_literal(host):
        return
    if any(c in host for c in _RESERVED_HOST_CHARS) or any(c.isspace() for c in host):
        raise ConfigurationError(f"mongo seed host {host!r} must be a single host name.")
    if ":" in host or "[" in host or "]" in host:
        raise ConfigurationError(
            f"mongo seed host {host!r} must not include a port; set the port separately."
        )


@dataclass(frozen=True)
class CredentialsConfig:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class MongoConfig:
    """Connection settings for one Mongo client.

    Immutable once built. ``validate()`` enforces the invariants; it is run by
    ``parse_mongo_config`` and again when the client is built.
    """

    seeds: tuple[SeedConfig, ...] = ()
    database: str = ""
    credentials: CredentialsConfig | None = None
    write_concern: str = DEFAULT_WRITE_CONCERN
    auth_mechanism: str | None = None

    def validate(self) -> MongoConfig:
        if not self.seeds:
            raise ConfigurationError("at least one mongo seed server is required.")
        for seed in self.seeds:
            if not isinstance(seed.host, str) or not seed.host.strip():
                raise ConfigurationError("mongo seed host must be a non-empty string.")
            _validate_host(seed.host)
            if isinstance(seed.port, bool) or not isinstance(seed.port, int):
                raise ConfigurationError(f"mongo seed port for {seed.host} must be an integer.")
            if not 0 < seed.port < 65536:
                raise ConfigurationError(f"mongo seed port {seed.port} for {seed.host} is out of range.")
        addresses = [seed.address.lower() for seed in self.seeds]
        for i, address in enumerate(addresses):
            if address in addresses[:i]:
                raise ConfigurationError(f"mongo seed server {address} is listed more than once.")
        if not isinstance(self.database, str) or not self.database:
            raise ConfigurationError("mongo database name is required.")
        if self.credentials is not None:
            if not self.credentials.username:
                raise ConfigurationError("mongo credentials require a user name.")
            if not self.credentials.password:
                raise ConfigurationError("mongo credentials require a password.")
        canonical_name(self.write_concern)
        return self


@dataclass
class AppConfig:
    mongo: MongoConfig = field(default_factory=MongoConfig)
    config_path: Path = DEFAULT_CONFIG_PATH


def _pick(data: dict, *keys: str, default=None):
    for key in keys:
        if key in data:
            return data[key]
    return default


def _parse_seed(entry) -> SeedConfig:
    if isinstance(entry, str):
        return _parse_seed_address(entry)
    if not isinstance(entry, dict):
        raise ConfigurationError(f"invalid mongo seed entry: {entry!r}")
    port = entry.get("port", DEFAULT_PORT)
    if isinstance(port, str) and port.isdigit():
        port = int(port)
    return SeedConfig(host=entry.get("host", ""), port=port)


def _parse_seed_address(address: str) -> SeedConfig:
    address = address.strip()
    if _is_ipv6_literal(address):
        return SeedConfig(host=address.strip("[]"))
    host, sep, port = address.rpartition(":")
    if not sep:
        return SeedConfig(host=address)
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    if not port.isdigit():
        raise ConfigurationError(f"invalid mongo seed address: {address!r}")
    return SeedConfig(host=host, port=int(port))


def _parse_credentials(data) -> CredentialsConfig | None:
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigurationError("mongo credentials must be a table with userName and password.")
    return CredentialsConfig(
        username=_pick(data, "userName", "username", "user_name", default=""),
        password=_pick(data, "password", default=""),
    )


def parse_mongo_config(data: dict) -> MongoConfig:
    """Build and validate a MongoConfig from a raw mapping.

    Accepts the camelCase keys of the host configuration (``writeConcern``,
    ``userName``) as well as snake_case.
    """
    seeds_raw = data.get("seeds") or []
    if not isinstance(seeds_raw, list):
        raise ConfigurationError("mongo seeds must be a list.")
    config = MongoConfig(
        seeds=tuple(_parse_seed(s) for s in seeds_raw),
        database=data.get("database", ""),
        credentials=_parse_credentials(data.get("credentials")),
        write_concern=_pick(data, "writeConcern", "write_concern", default=DEFAULT_WRITE_CONCERN),
        auth_mechanism=_pick(data, "authMechanism", "auth_mechanism"),
    )
    return config.validate()


def _env_overlay(raw: dict) -> None:
    """Override raw mongo values with environment variables where applicable."""
    if seeds := os.environ.get("MONGO_SEEDS"):
        raw["seeds"] = [s for s in seeds.split(",") if s.strip()]
    if db := os.environ.get("MONGO_DATABASE"):
        raw["database"] = db
    if user := os.environ.get("MONGO_USERNAME"):
        raw["credentials"] = {
            "userName": user,
            "password": os.environ.get("MONGO_PASSWORD", ""),
        }
    if wc := os.environ.get("MONGO_WRITE_CONCERN"):
        raw["writeConcern"] = wc
    if mechanism := os.environ.get("MONGO_AUTH_MECHANISM"):
        raw["authMechanism"] = mechanism


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from TOML file with env var overlay."""
    path = config_path or DEFAULT_CONFIG_PATH

    if path.exists():
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    else:
        raw = tomllib.loads(DEFAULT_CONFIG_TOML)

    mongo_raw = dict(raw.get("mongo", {}))
    _env_overlay(mongo_raw)

    return AppConfig(mongo=parse_mongo_config(mongo_raw), config_path=path)


def init_config(config_path: Path | None = None) -> Path:
    """Create default config file."""
    path = config_path or DEFAULT_CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG_TOML)
    return path
