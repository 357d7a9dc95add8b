"""Tests for named generation presets."""

import pytest

from hexrealm.generation.config import GenerationOptions
from hexrealm.generation.presets import TERRAIN_TEMPLATES, apply_preset, list_presets
from hexrealm.generation.validation import validate_options
from hexrealm.terrain_types import DEFAULT_TERRAIN_BIASES
from hexrealm.types import HighlandFormation


class TestPresets:
    """Tests for preset application."""

    def test_list(self) -> None:
        """All presets are listed by name."""
        assert list_presets() == ["balanced", "jagged", "lush", "sunken_caldera"]

    @pytest.mark.parametrize("name", sorted(TERRAIN_TEMPLATES))
    def test_presets_valid(self, name: str) -> None:
        """Every preset yields consistent options."""
        assert validate_options(apply_preset(GenerationOptions(), name)) == []

    def test_overlay_keeps_other_fields(self) -> None:
        """Fields the preset does not mention are kept."""
        base = GenerationOptions(num_holdings=9)
        options = apply_preset(base, "sunken_caldera")
        assert options.num_holdings == 9
        assert options.highland_formation == HighlandFormation.CIRCLE
        assert options.inverse is True
        assert options.terrain_biases["peaks"] == 25
        assert base.inverse is False

    def test_balanced_restores_default_biases(self) -> None:
        """Balanced after another preset brings the default biases back."""
        jagged = apply_preset(GenerationOptions(), "jagged")
        assert jagged.terrain_biases["crags"] == 20
        options = apply_preset(jagged, "balanced")
        assert options.terrain_biases == DEFAULT_TERRAIN_BIASES
        assert options.highland_formation == HighlandFormation.LINEAR
        assert options.terrain_roughness == 0.5

    def test_unknown(self) -> None:
        """Unknown names raise KeyError."""
        with pytest.raises(KeyError):
            apply_preset(GenerationOptions(), "volcanic")
