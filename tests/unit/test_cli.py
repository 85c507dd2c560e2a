"""
Tests for the command-line interface.
"""

from click.testing import CliRunner

from rapidgen import __version__
from rapidgen.cli import main


class TestCli:
    """Tests for the rapidgen commands."""

    def test_version(self):
        """Test the version option."""
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_presets(self):
        """Test listing the presets."""
        result = CliRunner().invoke(main, ["presets"])
        assert result.exit_code == 0
        assert "IRB140" in result.output

    def test_forward(self):
        """Test forward kinematics at home position."""
        result = CliRunner().invoke(main, ["fk", "IRB140", "0", "0", "0", "0", "0", "0"])
        assert result.exit_code == 0
        assert "515" in result.output

    def test_forward_unknown_preset(self):
        """Test that an unknown preset exits with an error."""
        result = CliRunner().invoke(main, ["fk", "IRB9999", "0", "0", "0", "0", "0", "0"])
        assert result.exit_code == 1

    def test_inverse(self):
        """Test inverse kinematics of a reachable point."""
        result = CliRunner().invoke(main, ["ik", "IRB2600ID-15/1.85", "1000", "0", "1000"])
        assert result.exit_code == 0
        assert "Axis configuration" in result.output

    def test_generate(self, job_file, temp_dir):
        """Test generating the modules of a job file."""
        out = temp_dir / "out"
        result = CliRunner().invoke(main, ["generate", str(job_file), "-o", str(out)])
        assert result.exit_code == 0, result.output

        program = (out / "main_T.mod").read_text()
        system = (out / "BASE.sys").read_text()
        assert program.startswith("MODULE Weld\n")
        assert "\t\tMoveLDO seam_start, v50, zone2, torch\\WObj:=wobj0, do_arc, 1;" in program
        assert "PERS tooldata torch := [TRUE, [[0, 0, 200], [1, 0, 0, 0]]," in system

    def test_generate_invalid_job(self, temp_dir):
        """Test that an invalid job exits with an error."""
        path = temp_dir / "job.yaml"
        path.write_text("actions:\n  - {type: teleport}\n")
        result = CliRunner().invoke(main, ["generate", str(path), "-o", str(temp_dir)])
        assert result.exit_code == 1
        assert not (temp_dir / "main_T.mod").exists()
