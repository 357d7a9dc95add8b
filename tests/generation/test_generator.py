"""Tests for realm generation orchestration."""

import itertools
from pathlib import Path

import pytest

from hexrealm.generation.config import GenerationOptions, HexShape, SquareShape
from hexrealm.generation.generator import generate, generate_and_save_realm
from hexrealm.invariants import check_realm
from hexrealm.persistence import dumps_realm, load_realm
from hexrealm.topology import axial_distance
from hexrealm.types import RealmShape


class TestGenerate:
    """Tests for generate()."""

    def test_radius_zero(self) -> None:
        """A radius 0 realm is exactly the origin hex."""
        result = generate(HexShape(radius=0), GenerationOptions(), seed=1)
        assert result.passed
        assert len(result.realm.hexes) == 1
        h = result.realm.hexes[0]
        assert (h.q, h.r, h.s) == (0, 0, 0)

    def test_deterministic(self) -> None:
        """Same shape, options and seed give identical realms."""
        options = GenerationOptions(generate_barriers=True)
        first = generate(HexShape(radius=6), options, seed=21)
        second = generate(HexShape(radius=6), options, seed=21)
        assert dumps_realm(first.realm) == dumps_realm(second.realm)
        assert first.warnings == second.warnings

    def test_seed_changes_realm(self) -> None:
        """Different seeds give different realms."""
        a = generate(HexShape(radius=6), GenerationOptions(), seed=1)
        b = generate(HexShape(radius=6), GenerationOptions(), seed=2)
        assert dumps_realm(a.realm) != dumps_realm(b.realm)

    @pytest.mark.parametrize("seed", [3, 4, 5])
    def test_invariants_hold(self, seed: int) -> None:
        """Generated realms satisfy every consistency invariant."""
        options = GenerationOptions(generate_barriers=True)
        realm = generate(HexShape(radius=7), options, seed=seed).realm
        assert check_realm(realm) == []
        assert any(h.barrier_edges for h in realm.hexes)

    def test_seat_of_power_is_holding(self) -> None:
        """The seat of power is one of the placed holdings."""
        realm = generate(HexShape(radius=8), GenerationOptions(), seed=8).realm
        assert realm.seat_hex is not None
        assert realm.seat_hex.holding is not None

    def test_placement_counts(self) -> None:
        """Default options place 4 holdings, 18 landmarks and 6 myths on a roomy realm."""
        realm = generate(HexShape(radius=10), GenerationOptions(myth_min_distance=2), seed=12).realm
        assert sum(1 for h in realm.hexes if h.holding) == 4
        assert sum(1 for h in realm.hexes if h.landmark) == 18
        assert len(realm.myths) == 6

    @pytest.mark.parametrize("seed", range(4))
    def test_myth_distance_or_warning(self, seed: int) -> None:
        """Myths keep the minimum distance, or the result warns."""
        options = GenerationOptions(num_myths=10, myth_min_distance=5)
        result = generate(HexShape(radius=6), options, seed=seed)
        for a, b in itertools.combinations(result.realm.myths, 2):
            assert axial_distance(a, b) >= 5
        assert len(result.realm.myths) == 10 or any("myths" in w for w in result.warnings)

    def test_square_shape(self) -> None:
        """Square realms carry their size and hex count."""
        realm = generate(SquareShape(width=9, height=7), GenerationOptions(), seed=5).realm
        assert realm.shape == RealmShape.SQUARE
        assert (realm.width, realm.height, realm.radius) == (9, 7, None)
        assert len(realm.hexes) == 63

    def test_crowded_realm_warns(self) -> None:
        """Requests that cannot fit produce warnings, not errors."""
        options = GenerationOptions(num_holdings=20)
        result = generate(HexShape(radius=1), options, seed=1)
        assert result.passed
        assert result.warnings
        assert check_realm(result.realm) == []

    def test_invalid_options_rejected(self) -> None:
        """Inconsistent options fail before any stage runs."""
        options = GenerationOptions(terrain_height_order=["peaks", "plain"])
        result = generate(HexShape(radius=3), options, seed=1)
        assert not result.passed
        assert result.realm is None
        assert {e.field for e in result.errors} == {"terrain_height_order"}


class TestGenerateAndSave:
    """Tests for generate_and_save_realm()."""

    def test_writes_file(self, tmp_path: Path) -> None:
        """A successful run writes a loadable realm."""
        path = tmp_path / "out" / "realm.json"
        result = generate_and_save_realm(HexShape(radius=3), GenerationOptions(), 4, path)
        assert result.passed
        assert dumps_realm(load_realm(path)) == dumps_realm(result.realm)

    def test_no_file_on_failure(self, tmp_path: Path) -> None:
        """Rejected options write nothing."""
        path = tmp_path / "realm.json"
        options = GenerationOptions(terrain_biases={"plain": -1}, terrain_height_order=["plain"])
        result = generate_and_save_realm(HexShape(radius=3), options, 4, path)
        assert not result.passed
        assert not path.exists()
