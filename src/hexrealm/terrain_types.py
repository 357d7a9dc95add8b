"""Standard terrain, holding and landmark ids and their generation defaults."""

from pydantic import BaseModel, Field

# Standard terrain ids. Custom terrains may be added by users, so terrain
# ids are plain strings everywhere else.
TERRAIN_TYPES: tuple[str, ...] = (
    "marsh",
    "heath",
    "crags",
    "peaks",
    "forest",
    "valley",
    "hills",
    "meadow",
    "bog",
    "lakes",
    "glades",
    "plain",
)

# Highest elevation first
DEFAULT_TERRAIN_HEIGHT_ORDER: tuple[str, ...] = (
    "peaks",
    "crags",
    "hills",
    "heath",
    "forest",
    "meadow",
    "plain",
    "glades",
    "valley",
    "marsh",
    "bog",
    "lakes",
)

DEFAULT_TERRAIN_BIASES: dict[str, float] = {
    "marsh": 5,
    "heath": 10,
    "crags": 5,
    "peaks": 5,
    "forest": 15,
    "valley": 5,
    "hills": 15,
    "meadow": 10,
    "bog": 5,
    "lakes": 5,
    "glades": 5,
    "plain": 10,
}

HOLDING_TYPES: tuple[str, ...] = ("castle", "city", "town", "village")
LANDMARK_TYPES: tuple[str, ...] = (
    "dwelling",
    "sanctum",
    "monument",
    "hazard",
    "curse",
    "ruins",
)

# Terrains considered unsuitable for generated holdings
DEFAULT_HOLDING_EXCLUDED_TERRAINS: tuple[str, ...] = (
    "peaks",
    "crags",
    "bog",
    "lakes",
    "marsh",
)

# Probability that any given pair of adjacent hexes is separated by a barrier
BARRIER_CHANCE = 1 / 6

# Clustering affinity levels
AFFINITY_SELF = 0.75
AFFINITY_STRONG = 0.6
AFFINITY_MODERATE = 0.4
AFFINITY_WEAK = 0.2
AFFINITY_NONE = 0.0

_AFFINITY_OVERRIDES: tuple[tuple[str, str, float], ...] = (
    ("peaks", "crags", AFFINITY_STRONG),
    ("peaks", "hills", AFFINITY_MODERATE),
    ("crags", "hills", AFFINITY_STRONG),
    ("lakes", "marsh", AFFINITY_STRONG),
    ("lakes", "bog", AFFINITY_MODERATE),
    ("marsh", "bog", AFFINITY_STRONG),
    ("plain", "meadow", AFFINITY_STRONG),
    ("plain", "heath", AFFINITY_STRONG),
    ("plain", "valley", AFFINITY_MODERATE),
    ("meadow", "glades", AFFINITY_MODERATE),
    ("valley", "hills", AFFINITY_MODERATE),
    ("forest", "hills", AFFINITY_MODERATE),
    ("forest", "glades", AFFINITY_STRONG),
    ("forest", "valley", AFFINITY_MODERATE),
    ("hills", "plain", AFFINITY_MODERATE),
    ("hills", "meadow", AFFINITY_MODERATE),
    ("peaks", "marsh", AFFINITY_NONE),
    ("peaks", "bog", AFFINITY_NONE),
    ("peaks", "lakes", AFFINITY_NONE),
    ("crags", "lakes", AFFINITY_NONE),
)


def default_clustering_matrix() -> dict[str, dict[str, float]]:
    """Build the symmetric default terrain clustering matrix.

    Every pair starts at weak affinity, the diagonal at self affinity, then
    related terrains are pulled together or kept apart.
    """
    matrix = {
        t1: {t2: (AFFINITY_SELF if t1 == t2 else AFFINITY_WEAK) for t2 in TERRAIN_TYPES}
        for t1 in TERRAIN_TYPES
    }
    for t1, t2, level in _AFFINITY_OVERRIDES:
        matrix[t1][t2] = level
        matrix[t2][t1] = level
    return matrix


class Tile(BaseModel):
    """A paintable or placeable item as presented to the editor."""

    id: str
    label: str
    icon: str
    color: str | None = None


class TileSet(BaseModel):
    """All available tiles, grouped by category."""

    terrain: list[Tile] = Field(default_factory=list)
    holding: list[Tile] = Field(default_factory=list)
    landmark: list[Tile] = Field(default_factory=list)

    def terrain_ids(self) -> list[str]:
        return [t.id for t in self.terrain]

    def poi_ids(self, kind: str) -> list[str]:
        """Ids of the holding or landmark tiles."""
        tiles = self.holding if kind == "holding" else self.landmark
        return [t.id for t in tiles]


_TERRAIN_ICONS = {
    "marsh": "droplet",
    "heath": "leaf",
    "crags": "triangle",
    "peaks": "mountains",
    "forest": "trees",
    "valley": "curve",
    "hills": "hill",
    "meadow": "flower",
    "bog": "droplets",
    "lakes": "waves",
    "glades": "sun",
    "plain": "wind",
}

DEFAULT_TILE_SET = TileSet(
    terrain=[
        Tile(id=t, label=t.capitalize(), icon=_TERRAIN_ICONS[t]) for t in TERRAIN_TYPES
    ],
    holding=[Tile(id=h, label=h.capitalize(), icon=h) for h in HOLDING_TYPES],
    landmark=[Tile(id=lm, label=lm.capitalize(), icon=lm) for lm in LANDMARK_TYPES],
)
