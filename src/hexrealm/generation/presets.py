"""Named generation templates."""

from typing import Any

from ..terrain_types import DEFAULT_TERRAIN_BIASES
from .config import GenerationOptions

TERRAIN_TEMPLATES: dict[str, dict[str, Any]] = {
    "balanced": {
        "name": "Balanced Realm",
        "options": {
            "highland_formation": "linear",
            "strength": 0.7,
            "rotation": 0,
            "terrain_roughness": 0.5,
            "terrain_biases": dict(DEFAULT_TERRAIN_BIASES),
        },
    },
    "jagged": {
        "name": "Jagged Peaks",
        "options": {
            "highland_formation": "circle",
            "strength": 1.0,
            "rotation": 0,
            "terrain_roughness": 0.8,
            "terrain_biases": {
                "marsh": 1,
                "heath": 2,
                "crags": 20,
                "peaks": 25,
                "forest": 5,
                "valley": 3,
                "hills": 20,
                "meadow": 2,
                "bog": 1,
                "lakes": 1,
                "glades": 2,
                "plain": 5,
            },
        },
    },
    "lush": {
        "name": "Lush Lowlands",
        "options": {
            "highland_formation": "linear",
            "strength": 0.5,
            "rotation": 180,
            "terrain_roughness": 0.25,
            "terrain_biases": {
                "marsh": 15,
                "heath": 5,
                "crags": 1,
                "peaks": 1,
                "forest": 25,
                "valley": 10,
                "hills": 5,
                "meadow": 8,
                "bog": 10,
                "lakes": 10,
                "glades": 8,
                "plain": 12,
            },
        },
    },
    "sunken_caldera": {
        "name": "Sunken Caldera",
        "options": {
            "highland_formation": "circle",
            "strength": 1.0,
            "inverse": True,
            "terrain_roughness": 0.75,
            "terrain_biases": {
                "marsh": 5,
                "heath": 2,
                "crags": 20,
                "peaks": 25,
                "forest": 3,
                "valley": 5,
                "hills": 15,
                "meadow": 1,
                "bog": 10,
                "lakes": 15,
                "glades": 1,
                "plain": 2,
            },
        },
    },
}


def list_presets() -> list[str]:
    """Available preset names."""
    return sorted(TERRAIN_TEMPLATES)


def apply_preset(options: GenerationOptions, name: str) -> GenerationOptions:
    """Return a copy of ``options`` with a preset's fields overlaid.

    Args:
        options: Base options.
        name: Preset name from TERRAIN_TEMPLATES.

    Returns:
        New, re-validated GenerationOptions.

    Raises:
        KeyError: If the preset does not exist.
    """
    if name not in TERRAIN_TEMPLATES:
        raise KeyError(f"Unknown preset '{name}'. Available presets: {list_presets()}")
    data = options.model_dump()
    data.update(TERRAIN_TEMPLATES[name]["options"])
    return GenerationOptions.model_validate(data)
