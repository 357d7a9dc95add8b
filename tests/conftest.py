"""Shared test fixtures for realm tests."""

import pytest

from hexrealm.generation.config import GenerationOptions
from hexrealm.generation.grid import create_hexagonal_grid
from hexrealm.types import AxialCoord, Myth, Realm, RealmShape


@pytest.fixture
def small_realm() -> Realm:
    """Radius 2 hex realm, all plain, nothing placed."""
    return Realm(shape=RealmShape.HEX, radius=2, hexes=create_hexagonal_grid(2))


@pytest.fixture
def populated_realm(small_realm: Realm) -> Realm:
    """Radius 2 realm with a castle seat, a town, a ruin and one myth.

    Layout:
        (0, 0)   castle, seat of power
        (1, 0)   town
        (-1, 0)  ruins
        (0, 2)   myth 1
    """
    small_realm.get_hex((0, 0)).holding = "castle"
    small_realm.get_hex((1, 0)).holding = "town"
    small_realm.get_hex((-1, 0)).landmark = "ruins"
    small_realm.get_hex((0, 2)).myth = 1
    small_realm.myths.append(Myth(id=1, name="The Drowned King", q=0, r=2))
    small_realm.seat_of_power = AxialCoord(q=0, r=0)
    return small_realm


@pytest.fixture
def quiet_options() -> GenerationOptions:
    """Options that place nothing, for terrain-only checks."""
    return GenerationOptions(
        num_holdings=0,
        num_myths=0,
        landmarks={},
    )
