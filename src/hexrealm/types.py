"""Core types for realm data."""

from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_serializer,
    field_validator,
    model_validator,
)

EDGE_COUNT = 6

# Hashable (q, r) key used for hex lookups
Coordinate = tuple[int, int]


class RealmShape(str, Enum):
    """Bounding shape of a realm grid."""

    HEX = "hex"
    SQUARE = "square"


class Orientation(str, Enum):
    """Hex orientation used for pixel projection."""

    POINTY = "pointy"
    FLAT = "flat"


class HighlandFormation(str, Enum):
    """Shape that biases where highlands form during generation."""

    RANDOM = "random"
    LINEAR = "linear"
    CIRCLE = "circle"
    TRIANGLE = "triangle"


class PoiKind(str, Enum):
    """Kinds of point of interest that occupy a hex exclusively."""

    HOLDING = "holding"
    LANDMARK = "landmark"


class Point(BaseModel, frozen=True):
    """2D point in pixel space."""

    x: float
    y: float


class AxialCoord(BaseModel, frozen=True):
    """Immutable axial hex coordinate."""

    q: int
    r: int

    @property
    def s(self) -> int:
        return -self.q - self.r

    @property
    def key(self) -> Coordinate:
        return (self.q, self.r)

    def __hash__(self) -> int:
        return hash((self.q, self.r))

    def __str__(self) -> str:
        return f"({self.q}, {self.r})"


def coord_key(coord: Any) -> Coordinate:
    """Normalize a coordinate-like value to a (q, r) tuple.

    Accepts (q, r) tuples and any object exposing ``q`` and ``r``
    (AxialCoord, Hex, Myth).
    """
    if isinstance(coord, tuple):
        q, r = coord
        return (int(q), int(r))
    return (coord.q, coord.r)


class Hex(BaseModel):
    """A single realm cell.

    Mutable: the RealmMutator edits hexes in place. Holding and landmark are
    mutually exclusive.
    """

    model_config = ConfigDict(populate_by_name=True)

    q: int
    r: int
    s: int
    terrain: str = ""
    barrier_edges: set[int] = Field(default_factory=set, alias="barrierEdges")
    holding: str | None = None
    landmark: str | None = None
    myth: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _derive_s(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("s") is None and "q" in data and "r" in data:
            data = dict(data)
            data["s"] = -data["q"] - data["r"]
        return data

    @field_validator("barrier_edges")
    @classmethod
    def _check_edges(cls, edges: set[int]) -> set[int]:
        for edge in edges:
            if not 0 <= edge < EDGE_COUNT:
                raise ValueError(f"barrier edge {edge} out of range 0..5")
        return edges

    @model_validator(mode="after")
    def _check_invariants(self) -> "Hex":
        if self.q + self.r + self.s != 0:
            raise ValueError(
                f"axial coordinates violate q + r + s = 0: ({self.q}, {self.r}, {self.s})"
            )
        if self.holding is not None and self.landmark is not None:
            raise ValueError("a hex cannot carry both a holding and a landmark")
        return self

    @field_serializer("barrier_edges")
    def _serialize_edges(self, edges: set[int]) -> list[int]:
        return sorted(edges)

    @property
    def key(self) -> Coordinate:
        return (self.q, self.r)

    @property
    def coord(self) -> AxialCoord:
        return AxialCoord(q=self.q, r=self.r)

    @property
    def is_occupied(self) -> bool:
        """Whether a holding, landmark or myth sits on this hex."""
        return (
            self.holding is not None
            or self.landmark is not None
            or self.myth is not None
        )

    def __repr__(self) -> str:
        base = f"Hex(q={self.q}, r={self.r}, terrain={self.terrain!r}"
        if self.barrier_edges:
            base += f", barriers={sorted(self.barrier_edges)}"
        if self.holding:
            base += f", holding={self.holding!r}"
        if self.landmark:
            base += f", landmark={self.landmark!r}"
        if self.myth is not None:
            base += f", myth={self.myth}"
        return base + ")"


class Myth(BaseModel):
    """A hidden, named point of interest."""

    id: int
    name: str
    q: int
    r: int

    @property
    def key(self) -> Coordinate:
        return (self.q, self.r)


class Realm(BaseModel):
    """A complete realm snapshot.

    Hexes are kept in a list for serialization and indexed by (q, r) for
    lookups. Call ``reindex`` after replacing entries of ``hexes``.
    """

    model_config = ConfigDict(populate_by_name=True)

    shape: RealmShape
    radius: int | None = Field(default=None, ge=0)
    width: int | None = Field(default=None, ge=0)
    height: int | None = Field(default=None, ge=0)
    hexes: list[Hex] = Field(default_factory=list)
    myths: list[Myth] = Field(default_factory=list)
    seat_of_power: AxialCoord | None = Field(default=None, alias="seatOfPower")

    _index: dict[Coordinate, Hex] = PrivateAttr(default_factory=dict)

    @field_validator("hexes")
    @classmethod
    def _check_unique(cls, hexes: list[Hex]) -> list[Hex]:
        seen: set[Coordinate] = set()
        for h in hexes:
            if h.key in seen:
                raise ValueError(f"duplicate hex at ({h.q}, {h.r})")
            seen.add(h.key)
        return hexes

    @model_validator(mode="after")
    def _check_shape(self) -> "Realm":
        if self.shape == RealmShape.HEX and self.radius is None:
            raise ValueError("hex-shaped realm requires a radius")
        if self.shape == RealmShape.SQUARE and (self.width is None or self.height is None):
            raise ValueError("square-shaped realm requires width and height")
        return self

    def model_post_init(self, __context: Any) -> None:
        self.reindex()

    def reindex(self) -> None:
        """Rebuild the (q, r) -> Hex lookup from ``hexes``."""
        self._index = {h.key: h for h in self.hexes}

    def get_hex(self, coord: Any) -> Hex | None:
        """Get the hex at a coordinate, or None if outside the realm."""
        return self._index.get(coord_key(coord))

    def has_hex(self, coord: Any) -> bool:
        return coord_key(coord) in self._index

    def get_myth(self, myth_id: int) -> Myth | None:
        for myth in self.myths:
            if myth.id == myth_id:
                return myth
        return None

    @property
    def seat_hex(self) -> Hex | None:
        """The hex designated as seat of power, if any."""
        if self.seat_of_power is None:
            return None
        return self.get_hex(self.seat_of_power)
