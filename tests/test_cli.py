"""Tests for the CLI commands using Click's CliRunner."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from xmldoc_md.cli.commands import xmldoc


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner."""
    return CliRunner()


@pytest.fixture
def sample_project(tmp_path: Path, calculator_source: str) -> Path:
    """Create a sample C# project for CLI testing."""
    (tmp_path / "Calculator.cs").write_text(calculator_source, encoding="utf-8")
    obj = tmp_path / "obj"
    obj.mkdir()
    (obj / "AssemblyInfo.cs").write_text("class AssemblyInfo {}\n", encoding="utf-8")
    return tmp_path


class TestXmldocGroup:
    """Tests for the main xmldoc command group."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(xmldoc, ["--help"])
        assert result.exit_code == 0
        assert "XML Documentation to Markdown Converter" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(xmldoc, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_custom_config(
        self, runner: CliRunner, sample_project: Path, tmp_path: Path
    ) -> None:
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("output:\n  title: Calculator API\n")
        output_path = sample_project / "api.md"
        result = runner.invoke(
            xmldoc,
            [
                "--config",
                str(config_file),
                "generate",
                str(sample_project),
                "-o",
                str(output_path),
            ],
        )
        assert result.exit_code == 0
        assert output_path.read_text(encoding="utf-8").startswith("# Calculator API\n")


class TestGenerateCommand:
    """Tests for the 'generate' command."""

    def test_generate_help(self, runner: CliRunner) -> None:
        result = runner.invoke(xmldoc, ["generate", "--help"])
        assert result.exit_code == 0
        assert "Generate a consolidated Markdown file" in result.output

    def test_generate_writes_default_output(
        self, runner: CliRunner, sample_project: Path
    ) -> None:
        result = runner.invoke(xmldoc, ["generate", str(sample_project)])
        assert result.exit_code == 0
        assert "Found 1 source files" in result.output
        assert "Successfully generated Markdown documentation" in result.output

        content = (sample_project / "documentation.md").read_text(encoding="utf-8")
        assert "# File: `Calculator.cs`" in content
        assert "## `Calculator.Add(int, int)`" in content
        assert "AssemblyInfo" not in content

    def test_generate_single_file(
        self, runner: CliRunner, sample_project: Path
    ) -> None:
        source = sample_project / "Calculator.cs"
        result = runner.invoke(xmldoc, ["generate", str(source)])
        assert result.exit_code == 0
        assert "Found 1 source files" in result.output

        content = (sample_project / "documentation.md").read_text(encoding="utf-8")
        assert "# File: `Calculator.cs`" in content
        assert "## `Calculator.Add(int, int)`" in content

    def test_generate_custom_output(
        self, runner: CliRunner, sample_project: Path
    ) -> None:
        output_path = sample_project / "docs" / "api.md"
        result = runner.invoke(
            xmldoc, ["generate", str(sample_project), "--output", str(output_path)]
        )
        assert result.exit_code == 0
        assert output_path.exists()

    def test_generate_dry_run(self, runner: CliRunner, sample_project: Path) -> None:
        result = runner.invoke(xmldoc, ["generate", str(sample_project), "--dry-run"])
        assert result.exit_code == 0
        assert "Would process" in result.output
        assert "Dry run complete" in result.output
        assert not (sample_project / "documentation.md").exists()

    def test_generate_no_files(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(xmldoc, ["generate", str(tmp_path)])
        assert result.exit_code == 0
        assert "No C# source files found" in result.output

    def test_generate_nonexistent_path(self, runner: CliRunner) -> None:
        result = runner.invoke(xmldoc, ["generate", "/nonexistent/path"])
        assert result.exit_code != 0

    @patch("xmldoc_md.cli.commands.DocumentAssembler")
    def test_generate_unexpected_error(
        self,
        mock_assembler_cls: MagicMock,
        runner: CliRunner,
        sample_project: Path,
    ) -> None:
        mock_assembler = MagicMock()
        mock_assembler.write.side_effect = RuntimeError("disk full")
        mock_assembler_cls.return_value = mock_assembler

        result = runner.invoke(xmldoc, ["generate", str(sample_project)])
        assert result.exit_code == 1
        assert "An unexpected error occurred: disk full" in result.output


class TestMembersCommand:
    """Tests for the 'members' command."""

    def test_members_help(self, runner: CliRunner) -> None:
        result = runner.invoke(xmldoc, ["members", "--help"])
        assert result.exit_code == 0
        assert "List documented members" in result.output

    def test_members_listing(self, runner: CliRunner, sample_project: Path) -> None:
        result = runner.invoke(xmldoc, ["members", str(sample_project)])
        assert result.exit_code == 0
        assert "Calculator  [T:Demo.Math.Calculator]" in result.output
        assert "(line 8)" in result.output
        assert (
            "Calculator.Add(int, int)  "
            "[M:Demo.Math.Calculator.Add(System.Int32,System.Int32)]"
        ) in result.output
        assert "Calculator.Last  [P:Demo.Math.Calculator.Last]" in result.output
        assert "Total: 3 documented members" in result.output
