"""Tests for the command-line interface."""

from pathlib import Path

import numpy as np

from worldslice.cli import main
from worldslice.persistence import load_world

CONFIGS_DIR = Path(__file__).parent.parent / "src" / "worldslice" / "configs"


class TestMain:
    """Tests for the CLI entry point."""

    def test_generate_and_save(self, tmp_path: Path, capsys) -> None:
        """CLI generates a world and writes both outputs."""
        output = tmp_path / "world.npz"
        image = tmp_path / "world.png"
        main(
            [
                "--config",
                str(CONFIGS_DIR / "small.toml"),
                "--seed",
                "21",
                "--width",
                "150",
                "--output",
                str(output),
                "--image",
                str(image),
            ]
        )

        assert output.exists()
        assert image.exists()
        grid, elevations, metadata = load_world(output)
        assert grid.shape == (120, 150)
        assert metadata["seed"] == 21
        assert elevations.dtype == np.int32

        out = capsys.readouterr().out
        assert "Progress: 100.0%" in out
        assert "with seed 21" in out
