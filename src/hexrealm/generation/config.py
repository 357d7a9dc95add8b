"""Realm generation configuration models."""

import tomllib
from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from ..exceptions import InvalidOptionsError
from ..terrain_types import (
    DEFAULT_HOLDING_EXCLUDED_TERRAINS,
    DEFAULT_TERRAIN_BIASES,
    DEFAULT_TERRAIN_HEIGHT_ORDER,
    LANDMARK_TYPES,
    default_clustering_matrix,
)
from ..types import HighlandFormation, RealmShape


def _alias(python_name: str, json_name: str) -> AliasChoices:
    return AliasChoices(python_name, json_name)


class HexShape(BaseModel, frozen=True):
    """Hexagonal realm of a given radius."""

    shape: RealmShape = RealmShape.HEX
    radius: int = Field(default=12, ge=0, description="Rings around the center hex")


class SquareShape(BaseModel, frozen=True):
    """Rectangular realm tiled with hexes."""

    shape: RealmShape = RealmShape.SQUARE
    width: int = Field(default=12, ge=0, description="Columns of hexes")
    height: int = Field(default=12, ge=0, description="Rows of hexes")


ShapeDescriptor = HexShape | SquareShape


class GenerationOptions(BaseModel):
    """All user-adjustable parameters of realm generation.

    Field names accept both the Python spelling and the camelCase spelling
    used in realm editor settings files.
    """

    model_config = ConfigDict(populate_by_name=True)

    num_holdings: int = Field(
        default=4,
        ge=0,
        validation_alias=_alias("num_holdings", "numHoldings"),
        description="Number of holdings to place",
    )
    num_myths: int = Field(
        default=6,
        ge=0,
        validation_alias=_alias("num_myths", "numMyths"),
        description="Number of myths to place",
    )
    myth_min_distance: int = Field(
        default=3,
        ge=0,
        validation_alias=_alias("myth_min_distance", "mythMinDistance"),
        description="Minimum hex distance between any two myths",
    )
    landmarks: dict[str, int] = Field(
        default_factory=lambda: {lm: 3 for lm in LANDMARK_TYPES},
        description="Requested count per landmark type",
    )
    generate_barriers: bool = Field(
        default=False,
        validation_alias=_alias("generate_barriers", "generateBarriers"),
        description="Randomly wall off adjacent hexes",
    )
    highland_formation: HighlandFormation = Field(
        default=HighlandFormation.LINEAR,
        validation_alias=_alias("highland_formation", "highlandFormation"),
    )
    strength: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        validation_alias=_alias("strength", "highlandFormationStrength"),
        description="Influence of the formation shape on elevation",
    )
    rotation: float = Field(
        default=0.0,
        validation_alias=_alias("rotation", "highlandFormationRotation"),
        description="Formation rotation in degrees, 0 points north",
    )
    inverse: bool = Field(
        default=False,
        validation_alias=_alias("inverse", "highlandFormationInverse"),
        description="Swap highland and lowland placement",
    )
    terrain_roughness: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        validation_alias=_alias("terrain_roughness", "terrainRoughness"),
        description="0 = smooth formation-dominated regions, 1 = chaotic noise",
    )
    terrain_clustering_matrix: dict[str, dict[str, float]] = Field(
        default_factory=default_clustering_matrix,
        validation_alias=_alias("terrain_clustering_matrix", "terrainClusteringMatrix"),
    )
    terrain_biases: dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_TERRAIN_BIASES),
        validation_alias=_alias("terrain_biases", "terrainBiases"),
    )
    terrain_height_order: list[str] = Field(
        default_factory=lambda: list(DEFAULT_TERRAIN_HEIGHT_ORDER),
        validation_alias=_alias("terrain_height_order", "terrainHeightOrder"),
    )
    holding_excluded_terrains: list[str] = Field(
        default_factory=lambda: list(DEFAULT_HOLDING_EXCLUDED_TERRAINS),
        validation_alias=_alias("holding_excluded_terrains", "holdingExcludedTerrains"),
        description="Terrains on which generated holdings are never placed",
    )
    holding_min_distance: int = Field(
        default=0,
        ge=0,
        validation_alias=_alias("holding_min_distance", "holdingMinDistance"),
        description="Minimum hex distance between generated holdings",
    )

    @property
    def effective_rotation(self) -> float:
        """Rotation normalized for the active formation.

        The triangle formation repeats every 120 degrees, every other
        formation every 360.
        """
        period = 120.0 if self.highland_formation == HighlandFormation.TRIANGLE else 360.0
        return self.rotation % period

    def terrain_ids(self) -> list[str]:
        """Terrain ids in use, i.e. every terrain that has a bias entry."""
        return sorted(self.terrain_biases)


def load_options(path: Path) -> GenerationOptions:
    """Load generation options from a TOML file.

    Args:
        path: Path to the TOML options file.

    Returns:
        Parsed and validated GenerationOptions.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If a field has the wrong type or range.
        InvalidOptionsError: If the options are internally inconsistent.
    """
    from .validation import validate_options

    with open(path, "rb") as f:
        data = tomllib.load(f)
    options = GenerationOptions.model_validate(data)
    errors = validate_options(options)
    if errors:
        raise InvalidOptionsError(errors)
    return options
