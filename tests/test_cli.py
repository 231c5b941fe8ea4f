# =============================================================================
# test_cli.py - sicasm Command-Line Tests
# =============================================================================
# Tests for the sicasm command, run through click's CliRunner.
# =============================================================================

from click.testing import CliRunner

from sicxe_asm import __version__
from sicxe_asm.cli.errors import ExitCode
from sicxe_asm.cli.sicasm import main


class TestSicasm:
    """Test the sicasm command."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Assemble SIC/XE source code" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_default_output_name(self, copy_file, copy_object):
        """Without -o the object program goes next to the source."""
        runner = CliRunner()
        result = runner.invoke(main, [str(copy_file)])
        assert result.exit_code == ExitCode.SUCCESS
        assert copy_file.with_suffix(".obj").read_text() == copy_object

    def test_output_option(self, copy_file, copy_object, tmp_path):
        out = tmp_path / "out.obj"
        runner = CliRunner()
        result = runner.invoke(main, [str(copy_file), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text() == copy_object

    def test_symbols_and_intermediate(self, copy_file, tmp_path):
        sym = tmp_path / "copy.sym"
        inter = tmp_path / "copy.int"
        runner = CliRunner()
        result = runner.invoke(main, [str(copy_file), "-s", str(sym), "-i", str(inter)])
        assert result.exit_code == 0
        assert "FIRST 000000" in sym.read_text()
        assert '"sicxe-intermediate"' in inter.read_text()

    def test_from_intermediate(self, copy_file, copy_object, tmp_path):
        """Pass 2 alone reproduces the object program."""
        inter = tmp_path / "copy.int"
        out = tmp_path / "again.obj"
        runner = CliRunner()
        runner.invoke(main, [str(copy_file), "-i", str(inter)])
        result = runner.invoke(main, ["--from-intermediate", str(inter), "-o", str(out)])
        assert result.exit_code == 0
        assert out.read_text() == copy_object

    def test_bad_intermediate(self, tmp_path):
        inter = tmp_path / "bad.int"
        inter.write_text("not json")
        runner = CliRunner()
        result = runner.invoke(main, ["--from-intermediate", str(inter)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "Assembly error" in result.output

    def test_errors_still_write_object(self, tmp_path):
        """Errors are reported, the object file is written, exit code is 1."""
        source = tmp_path / "bad.asm"
        source.write_text("P  START 0\n   LDZ #1\n   RSUB\n   END P\n")
        runner = CliRunner()
        result = runner.invoke(main, [str(source)])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "unknown operation 'LDZ'" in result.output
        assert source.with_suffix(".obj").read_text().startswith("HP     000000000003")

    def test_max_errors(self, tmp_path):
        source = tmp_path / "bad.asm"
        source.write_text("   LDZ\n   LDZ\n   LDZ\n")
        runner = CliRunner()
        result = runner.invoke(main, [str(source), "--max-errors", "1"])
        assert result.exit_code == ExitCode.BUILD_ERROR
        assert "too many errors" in result.output

    def test_missing_input(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.asm")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_verbose(self, copy_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(copy_file), "-v"])
        assert result.exit_code == 0
        assert "Assembly complete: 4215 bytes at 000000" in result.output

    def test_warnings_printed(self, tmp_path):
        """Warnings are shown but do not fail the run."""
        source = tmp_path / "far.asm"
        source.write_text("P  START 0\n   LDA TARGET\n   RESB 5000\nTARGET WORD 1\n")
        runner = CliRunner()
        result = runner.invoke(main, [str(source)])
        assert result.exit_code == ExitCode.SUCCESS
        assert "warning:" in result.output
        assert "truncated to 12 bits" in result.output
