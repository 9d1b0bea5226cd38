"""Tests for the render_spheres example script.

The script lives outside the package, so it is loaded from its path.
main() is not called in-process because it initializes Taichi itself; the
session fixture has already done that. The command-line test runs the script
in a fresh interpreter instead.
"""

import argparse
import importlib.util
import math
import os
import subprocess
import sys
from pathlib import Path

import pytest
from PIL import Image as PILImage

SCRIPT_PATH = Path(__file__).resolve().parent.parent / "examples" / "render_spheres.py"
SRC_PATH = SCRIPT_PATH.parent.parent / "src"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("render_spheres", SCRIPT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestParseGrid:
    """Tests for the --aa-grid argument type."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("4", (4, 4)),
            ("2x3", (2, 3)),
            ("8X1", (8, 1)),
        ],
    )
    def test_valid(self, script, value, expected):
        assert script.parse_grid(value) == expected

    @pytest.mark.parametrize("value", ["", "x", "2x", "axb", "1x2x3"])
    def test_invalid(self, script, value):
        with pytest.raises(argparse.ArgumentTypeError):
            script.parse_grid(value)


class TestParseArgs:
    """Tests for command-line parsing."""

    def test_defaults(self, script):
        args = script.parse_args([])

        assert (args.width, args.height) == (1920, 1080)
        assert args.fov == 45.0
        assert args.aa_grid == (4, 4)
        assert args.depth == 8
        assert args.output == "-"
        assert not args.show

    def test_verbose_and_quiet_are_exclusive(self, script):
        with pytest.raises(SystemExit):
            script.parse_args(["--verbose", "--quiet"])


class TestRenderSpheres:
    """Tests for the render driver."""

    def test_writes_png(self, script, tmp_path):
        output_path = tmp_path / "spheres.png"
        args = script.parse_args(
            ["--width", "16", "--height", "9", "--aa-grid", "1", "--depth", "1", "--output", str(output_path)]
        )

        result = script.render_spheres(args)

        assert result == output_path
        with PILImage.open(output_path) as img:
            assert img.size == (16, 9)

    def test_writes_ppm_to_stdout(self, script, capsys):
        args = script.parse_args(["--width", "4", "--height", "2", "--aa-grid", "1", "--fov", str(math.degrees(0.5))])

        assert script.render_spheres(args) is None

        out = capsys.readouterr().out.splitlines()
        assert out[:3] == ["P3", "4 2", "255"]
        assert len(out) == 3 + 8


class TestCommandLine:
    """Tests that run the script as a separate process."""

    def test_stdout_holds_only_the_image(self):
        """Test that Taichi's startup banners do not end up in the PPM stream."""
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(p for p in (str(SRC_PATH), env.get("PYTHONPATH")) if p)

        completed = subprocess.run(
            [
                sys.executable,
                str(SCRIPT_PATH),
                "--width",
                "4",
                "--height",
                "2",
                "--aa-grid",
                "1",
                "--depth",
                "1",
                "--arch",
                "cpu",
                "--quiet",
            ],
            capture_output=True,
            text=True,
            env=env,
            timeout=600,
        )

        assert completed.returncode == 0, completed.stderr
        lines = completed.stdout.splitlines()
        assert lines[:3] == ["P3", "4 2", "255"]
        assert len(lines) == 3 + 8
        assert all(len(line.split()) == 3 for line in lines[3:])
        assert "[Taichi]" in completed.stderr
