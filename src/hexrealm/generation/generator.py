"""Main realm generation orchestration."""

import logging
from collections import Counter
from pathlib import Path

import numpy as np

from ..persistence import save_realm
from ..types import Realm
from .classification import classify_terrain
from .config import GenerationOptions, HexShape, ShapeDescriptor
from .grid import create_grid
from .placement import (
    add_barriers,
    choose_seat_of_power,
    place_holdings,
    place_landmarks,
    place_myths,
)
from .validation import OptionError, validate_options

logger = logging.getLogger(__name__)


class GenerationResult:
    """Result of realm generation.

    ``realm`` is None when the options were rejected; ``errors`` then names
    each offending field. ``warnings`` lists non-fatal shortfalls.
    """

    def __init__(
        self,
        realm: Realm | None,
        errors: list[OptionError] | None = None,
        warnings: list[str] | None = None,
    ):
        self.realm = realm
        self.errors = errors or []
        self.warnings = warnings or []

    @property
    def passed(self) -> bool:
        return self.realm is not None and not self.errors


def generate(
    shape: ShapeDescriptor,
    options: GenerationOptions,
    seed: int,
) -> GenerationResult:
    """Generate a complete realm.

    Deterministic for fixed inputs. The realm is built as a fresh snapshot,
    so callers never observe a partially generated realm.

    Args:
        shape: Hex or square shape descriptor.
        options: Generation options.
        seed: Seed for noise and placement.

    Returns:
        GenerationResult with the realm, or with errors if the options are
        inconsistent.
    """
    errors = validate_options(options)
    if errors:
        logger.warning(f"Generation rejected: {len(errors)} invalid options")
        return GenerationResult(realm=None, errors=errors)

    rng = np.random.default_rng(seed)
    warnings: list[str] = []

    logger.info(f"Generating {_describe(shape)} realm with seed {seed}")

    # Stage A: Grid
    logger.info("Stage A: Building grid...")
    hexes = create_grid(shape)

    # Stage B: Terrain
    logger.info("Stage B: Classifying terrain...")
    terrain = classify_terrain(hexes, options, seed)
    for hex_ in hexes:
        hex_.terrain = terrain[hex_.key]

    # Stage C: Barriers
    if options.generate_barriers:
        logger.info("Stage C: Adding barriers...")
        barrier_count = add_barriers(hexes, rng)
        logger.info(f"Added {barrier_count} barriers")

    # Stage D: Holdings and seat of power
    logger.info("Stage D: Placing holdings...")
    holdings, holding_result = place_holdings(
        hexes,
        options.num_holdings,
        rng,
        excluded_terrains=options.holding_excluded_terrains,
        min_distance=options.holding_min_distance,
    )
    warnings.extend(holding_result.warnings)
    seat_of_power = choose_seat_of_power(holdings)
    if seat_of_power is None and options.num_holdings > 0:
        warnings.append("No holding could be placed, realm has no seat of power")

    # Stage E: Landmarks
    logger.info("Stage E: Placing landmarks...")
    landmark_result = place_landmarks(hexes, options.landmarks, rng)
    warnings.extend(landmark_result.warnings)

    # Stage F: Myths
    logger.info("Stage F: Placing myths...")
    myths, myth_result = place_myths(
        hexes, options.num_myths, options.myth_min_distance, rng
    )
    warnings.extend(myth_result.warnings)

    if isinstance(shape, HexShape):
        realm = Realm(
            shape=shape.shape,
            radius=shape.radius,
            hexes=hexes,
            myths=myths,
            seat_of_power=seat_of_power,
        )
    else:
        realm = Realm(
            shape=shape.shape,
            width=shape.width,
            height=shape.height,
            hexes=hexes,
            myths=myths,
            seat_of_power=seat_of_power,
        )

    for warning in warnings:
        logger.warning(warning)
    _log_realm_stats(realm)

    return GenerationResult(realm=realm, warnings=warnings)


def generate_and_save_realm(
    shape: ShapeDescriptor,
    options: GenerationOptions,
    seed: int,
    save_path: Path,
) -> GenerationResult:
    """Generate a realm and write it as JSON when generation succeeds.

    Args:
        shape: Hex or square shape descriptor.
        options: Generation options.
        seed: Seed for noise and placement.
        save_path: Path of the JSON file to write.

    Returns:
        The GenerationResult, saved or not.
    """
    result = generate(shape, options, seed)
    if result.realm is not None:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        save_realm(save_path, result.realm)
    return result


def _describe(shape: ShapeDescriptor) -> str:
    if isinstance(shape, HexShape):
        return f"radius {shape.radius} hex"
    return f"{shape.width}x{shape.height} square"


def _log_realm_stats(realm: Realm) -> None:
    """Log realm generation statistics."""
    total = len(realm.hexes)
    counts = Counter(h.terrain for h in realm.hexes)

    logger.info(f"Realm stats ({total:,} hexes):")
    for name, count in sorted(counts.items()):
        pct = count / total * 100 if total else 0.0
        logger.info(f"  {name}: {count:,} ({pct:.1f}%)")

    holdings = sum(1 for h in realm.hexes if h.holding)
    landmarks = sum(1 for h in realm.hexes if h.landmark)
    barriers = sum(len(h.barrier_edges) for h in realm.hexes) // 2
    logger.info(
        f"  holdings: {holdings}, landmarks: {landmarks}, "
        f"myths: {len(realm.myths)}, barriers: {barriers}"
    )
