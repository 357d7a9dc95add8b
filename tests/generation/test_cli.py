"""Tests for the generation command line."""

from pathlib import Path

from hexrealm.generation.cli import main
from hexrealm.persistence import load_realm
from hexrealm.types import RealmShape


class TestCli:
    """Smoke tests for hexrealm-generate."""

    def test_generates_hex_realm(self, tmp_path: Path) -> None:
        """A hex realm is written to the output path."""
        output = tmp_path / "realm.json"
        code = main(["--radius", "4", "--seed", "7", "-o", str(output)])
        assert code == 0
        realm = load_realm(output)
        assert realm.shape == RealmShape.HEX
        assert len(realm.hexes) == 61

    def test_square_with_preset(self, tmp_path: Path) -> None:
        """Shape and preset flags are honored."""
        output = tmp_path / "square.json"
        code = main(
            [
                "--shape", "square",
                "--width", "5",
                "--height", "3",
                "--preset", "lush",
                "-o", str(output),
            ]
        )
        assert code == 0
        realm = load_realm(output)
        assert (realm.width, realm.height) == (5, 3)

    def test_options_file(self, tmp_path: Path) -> None:
        """Options are read from TOML."""
        opts = tmp_path / "opts.toml"
        opts.write_text("num_holdings = 0\nnum_myths = 0\n\n[landmarks]\n")
        output = tmp_path / "realm.json"
        assert main(["--radius", "2", "--options", str(opts), "-o", str(output)]) == 0
        realm = load_realm(output)
        assert realm.myths == []
        assert realm.seat_of_power is None

    def test_bad_options_file(self, tmp_path: Path, capsys) -> None:
        """Inconsistent options exit non-zero without writing."""
        opts = tmp_path / "opts.toml"
        opts.write_text('terrain_height_order = ["plain"]\n')
        output = tmp_path / "realm.json"
        assert main(["--options", str(opts), "-o", str(output)]) == 1
        assert not output.exists()
        assert "terrain_height_order" in capsys.readouterr().err
