"""Semantic validation of generation options.

Field level types and ranges are enforced by the pydantic model; this module
checks that the terrain tables agree with each other before any generation
stage runs.
"""

import logging
import math
from dataclasses import dataclass

from .config import GenerationOptions

logger = logging.getLogger(__name__)

# Tolerance for matrix symmetry checks
SYMMETRY_TOLERANCE = 1e-9


@dataclass(frozen=True)
class OptionError:
    """A single validation failure naming the offending option field."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


def validate_options(options: GenerationOptions) -> list[OptionError]:
    """Check generation options for internal consistency.

    Args:
        options: Options to validate.

    Returns:
        List of OptionError, empty when the options are usable.
    """
    errors: list[OptionError] = []

    _check_biases(options, errors)
    _check_height_order(options, errors)
    _check_clustering_matrix(options, errors)
    _check_landmarks(options, errors)

    for error in errors:
        logger.warning(f"Invalid generation option {error}")

    return errors


def _check_biases(options: GenerationOptions, errors: list[OptionError]) -> None:
    if not options.terrain_biases:
        errors.append(OptionError("terrain_biases", "at least one terrain is required"))
        return
    for terrain, bias in sorted(options.terrain_biases.items()):
        if not math.isfinite(bias) or bias < 0:
            errors.append(
                OptionError("terrain_biases", f"bias for '{terrain}' must be a non-negative number")
            )


def _check_height_order(options: GenerationOptions, errors: list[OptionError]) -> None:
    order = options.terrain_height_order
    in_use = set(options.terrain_biases)

    duplicates = sorted({t for t in order if order.count(t) > 1})
    if duplicates:
        errors.append(
            OptionError("terrain_height_order", f"duplicate terrains: {', '.join(duplicates)}")
        )

    missing = sorted(in_use - set(order))
    if missing:
        errors.append(
            OptionError("terrain_height_order", f"missing terrains: {', '.join(missing)}")
        )

    unknown = sorted(set(order) - in_use)
    if unknown:
        errors.append(
            OptionError(
                "terrain_height_order",
                f"terrains without a bias entry: {', '.join(unknown)}",
            )
        )


def _check_clustering_matrix(options: GenerationOptions, errors: list[OptionError]) -> None:
    matrix = options.terrain_clustering_matrix
    in_use = sorted(options.terrain_biases)

    missing = [t for t in in_use if t not in matrix]
    if missing:
        errors.append(
            OptionError(
                "terrain_clustering_matrix",
                f"missing rows for terrains: {', '.join(missing)}",
            )
        )

    missing_cells = [
        f"{t1}/{t2}" for t1 in in_use if t1 in matrix for t2 in in_use if t2 not in matrix[t1]
    ]
    if missing_cells:
        errors.append(
            OptionError(
                "terrain_clustering_matrix",
                f"missing affinities: {', '.join(missing_cells)}",
            )
        )

    for t1, row in sorted(matrix.items()):
        for t2, affinity in sorted(row.items()):
            if not math.isfinite(affinity) or not 0.0 <= affinity <= 1.0:
                errors.append(
                    OptionError(
                        "terrain_clustering_matrix",
                        f"affinity {t1}/{t2} must be within [0, 1], got {affinity}",
                    )
                )
                continue
            mirrored = matrix.get(t2, {}).get(t1)
            if t1 < t2 and mirrored is not None and abs(mirrored - affinity) > SYMMETRY_TOLERANCE:
                errors.append(
                    OptionError(
                        "terrain_clustering_matrix",
                        f"affinity {t1}/{t2} ({affinity}) differs from {t2}/{t1} ({mirrored})",
                    )
                )


def _check_landmarks(options: GenerationOptions, errors: list[OptionError]) -> None:
    for landmark, count in sorted(options.landmarks.items()):
        if count < 0:
            errors.append(
                OptionError("landmarks", f"count for '{landmark}' must not be negative")
            )
