"""Hex-tiled fantasy realm core."""

from .exceptions import InvalidOptionsError, MalformedRealmError, RealmError
from .invariants import check_realm
from .mutator import MutationResult, PaintSession, RealmMutator, RejectionReason
from .persistence import (
    dumps_realm,
    load_realm,
    loads_realm,
    realm_from_dict,
    realm_to_dict,
    save_realm,
)
from .terrain_types import DEFAULT_TILE_SET, Tile, TileSet
from .topology import (
    AXIAL_DIRECTIONS,
    axial_distance,
    axial_to_pixel,
    barrier_path,
    closest_edge,
    edge_between,
    hex_corners,
    neighbor,
    neighbors,
    opposite_edge,
    pixel_to_axial,
)
from .types import (
    AxialCoord,
    Hex,
    HighlandFormation,
    Myth,
    Orientation,
    PoiKind,
    Point,
    Realm,
    RealmShape,
)

__all__ = [
    # Types
    "AxialCoord",
    "Hex",
    "Myth",
    "Realm",
    "Point",
    "RealmShape",
    "Orientation",
    "HighlandFormation",
    "PoiKind",
    # Tiles
    "Tile",
    "TileSet",
    "DEFAULT_TILE_SET",
    # Topology
    "AXIAL_DIRECTIONS",
    "axial_distance",
    "axial_to_pixel",
    "pixel_to_axial",
    "hex_corners",
    "closest_edge",
    "barrier_path",
    "edge_between",
    "neighbor",
    "neighbors",
    "opposite_edge",
    # Editing
    "RealmMutator",
    "MutationResult",
    "RejectionReason",
    "PaintSession",
    "check_realm",
    # Persistence
    "realm_to_dict",
    "realm_from_dict",
    "dumps_realm",
    "loads_realm",
    "save_realm",
    "load_realm",
    # Exceptions
    "RealmError",
    "MalformedRealmError",
    "InvalidOptionsError",
]
