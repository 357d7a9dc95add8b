"""Realm persistence: flat JSON snapshots."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .exceptions import MalformedRealmError
from .invariants import check_realm
from .types import Realm

logger = logging.getLogger(__name__)

# Top-level fields every realm document must carry (seatOfPower may be null)
REQUIRED_FIELDS = ("hexes", "seatOfPower")


def realm_to_dict(realm: Realm) -> dict[str, Any]:
    """Convert a realm to its JSON document structure.

    Field names use the camelCase spelling of the editor's file format.
    Unset optional hex fields are omitted; ``seatOfPower`` is always present.
    """
    data = realm.model_dump(mode="json", by_alias=True, exclude_none=True)
    data["seatOfPower"] = (
        None
        if realm.seat_of_power is None
        else {"q": realm.seat_of_power.q, "r": realm.seat_of_power.r}
    )
    return data


def upgrade_legacy_myths(hexes: list[Any]) -> list[dict[str, Any]]:
    """Rebuild myth records from hex ``myth`` fields.

    Older documents stored only a myth id on each hex. Each one becomes a
    record named ``Myth #<id>`` at that hex, in hex order.
    """
    myths = []
    for h in hexes:
        if isinstance(h, dict) and h.get("myth") is not None:
            myth_id = h["myth"]
            myths.append({"id": myth_id, "name": f"Myth #{myth_id}", "q": h.get("q"), "r": h.get("r")})
    return myths


def realm_from_dict(data: Any) -> Realm:
    """Build a realm from a parsed JSON document.

    Args:
        data: Parsed document.

    Returns:
        Validated Realm.

    Raises:
        MalformedRealmError: If required fields are missing, a field fails
            validation, or the realm breaks a consistency invariant.
    """
    if not isinstance(data, dict):
        raise MalformedRealmError("Realm document must be a JSON object")

    missing = [name for name in REQUIRED_FIELDS if name not in data]
    if missing:
        raise MalformedRealmError(f"Realm document missing required fields: {', '.join(missing)}")
    if not isinstance(data["hexes"], list):
        raise MalformedRealmError("Realm document field 'hexes' must be a list")

    data = dict(data)
    if data.get("myths") is None:
        data["myths"] = upgrade_legacy_myths(data["hexes"])
        if data["myths"]:
            logger.info(f"Upgraded legacy realm: rebuilt {len(data['myths'])} myth records")

    try:
        realm = Realm.model_validate(data)
    except ValidationError as e:
        raise MalformedRealmError(f"Invalid realm document: {e}") from e

    violations = check_realm(realm)
    if violations:
        raise MalformedRealmError(f"Inconsistent realm document: {'; '.join(violations)}")

    return realm


def dumps_realm(realm: Realm, indent: int | None = 2) -> str:
    """Serialize a realm to a JSON string."""
    return json.dumps(realm_to_dict(realm), indent=indent)


def loads_realm(text: str) -> Realm:
    """Parse a realm from a JSON string.

    Raises:
        MalformedRealmError: If the text is not valid JSON or not a valid realm.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedRealmError(f"Realm document is not valid JSON: {e}") from e
    return realm_from_dict(data)


def save_realm(path: Path, realm: Realm) -> None:
    """Write a realm to a JSON file.

    Args:
        path: Output path (should end with .json).
        realm: Realm to save.
    """
    path.write_text(dumps_realm(realm), encoding="utf-8")
    logger.info(f"Saved realm to {path} ({len(realm.hexes):,} hexes)")


def load_realm(path: Path) -> Realm:
    """Load a realm from a JSON file.

    Args:
        path: Path to a realm JSON file.

    Returns:
        Validated Realm.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        MalformedRealmError: If the file is not a valid realm document.
    """
    if not path.exists():
        raise FileNotFoundError(f"Realm file not found: {path}")

    realm = loads_realm(path.read_text(encoding="utf-8"))
    logger.info(f"Loaded {realm.shape.value} realm from {path}: {len(realm.hexes):,} hexes")
    return realm
