"""Named write concerns and their pymongo settings."""

from __future__ import annotations

from pymongo.write_concern import WriteConcern

from mongobundle.errors import ConfigurationError

WRITE_CONCERNS: dict[str, dict] = {
    "ACKNOWLEDGED": {"w": 1},
    "W1": {"w": 1},
    "W2": {"w": 2},
    "W3": {"w": 3},
    "UNACKNOWLEDGED": {"w": 0},
    "JOURNALED": {"w": 1, "j": True},
    "FSYNCED": {"w": 1, "fsync": True},
    "MAJORITY": {"w": "majority"},
}

# Names from the older driver constant set
LEGACY_ALIASES: dict[str, str] = {
    "SAFE": "ACKNOWLEDGED",
    "NORMAL": "UNACKNOWLEDGED",
    "JOURNAL_SAFE": "JOURNALED",
    "FSYNC_SAFE": "FSYNCED",
    "REPLICAS_SAFE": "W2",
}


def known_write_concerns() -> list[str]:
    """Return every accepted identifier, canonical names first."""
    return list(WRITE_CONCERNS) + list(LEGACY_ALIASES)


def canonical_name(name: str) -> str:
    """Normalize an identifier to its canonical upper-case name."""
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"Unknown mongo write concern {name!r}")
    key = name.strip().upper()
    key = LEGACY_ALIASES.get(key, key)
    if key not in WRITE_CONCERNS:
        raise ConfigurationError(f"Unknown mongo write concern {name}")
    return key


def resolve_write_concern(name: str) -> WriteConcern:
    """Look up a write concern by name (case-insensitive)."""
    return WriteConcern(**WRITE_CONCERNS[canonical_name(name)])


def client_options(write_concern: WriteConcern) -> dict:
    """Translate a WriteConcern into MongoClient keyword options."""
    doc = write_concern.document
    opts: dict = {}
    if "w" in doc:
        opts["w"] = doc["w"]
    if doc.get("j"):
        opts["journal"] = True
    if doc.get("fsync"):
        opts["fsync"] = True
    return opts
