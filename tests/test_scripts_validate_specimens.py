"""Tests for the wols-validate command."""

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from wols.scripts.validate_specimens import main


@pytest.fixture
def specimen_dir(tmp_path: Path, valid_specimen_data: dict[str, Any]) -> Path:
    """Directory with one valid and one invalid specimen."""
    (tmp_path / "good.json").write_text(json.dumps(valid_specimen_data), encoding="utf-8")
    bad = dict(valid_specimen_data, type="JAR")
    (tmp_path / "bad.json").write_text(json.dumps(bad), encoding="utf-8")
    return tmp_path


def write(path: Path, data: dict[str, Any]) -> str:
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


class TestValidateSpecimensCli:
    """Tests for the validate_specimens click command."""

    def test_valid_file(self, tmp_path: Path, valid_specimen_data: dict[str, Any]) -> None:
        """Test a valid file exits cleanly."""
        result = CliRunner().invoke(main, [write(tmp_path / "good.json", valid_specimen_data)])
        assert result.exit_code == 0
        assert "VALIDATION REPORT" in result.output
        assert "Documents checked: 1" in result.output
        assert "Valid documents:   1" in result.output

    def test_invalid_file_exits_nonzero(self, tmp_path: Path, valid_specimen_data: dict[str, Any]) -> None:
        """Test errors give exit status 1."""
        valid_specimen_data["type"] = "JAR"
        result = CliRunner().invoke(main, [write(tmp_path / "bad.json", valid_specimen_data)])
        assert result.exit_code == 1
        assert "ERRORS (1):" in result.output
        assert "WOLS_INVALID_SPECIMEN_TYPE" in result.output

    def test_requires_input(self) -> None:
        """Test calling without files or --dir is a usage error."""
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 2
        assert "Specify one or more FILES or --dir" in result.output

    def test_directory(self, specimen_dir: Path) -> None:
        """Test --dir validates every JSON file."""
        result = CliRunner().invoke(main, ["--dir", str(specimen_dir)])
        assert result.exit_code == 1
        assert "Validating all specimens in" in result.output
        assert "Documents checked: 2" in result.output
        assert "Valid documents:   1" in result.output

    def test_lenient(self, tmp_path: Path, valid_specimen_data: dict[str, Any]) -> None:
        """Test --lenient downgrades unknown stages to warnings."""
        valid_specimen_data["stage"] = "SPROUTING"
        path = write(tmp_path / "stage.json", valid_specimen_data)

        strict = CliRunner().invoke(main, [path])
        lenient = CliRunner().invoke(main, [path, "--lenient"])

        assert strict.exit_code == 1
        assert lenient.exit_code == 0
        assert "WARNINGS (1):" in lenient.output

    def test_id_mode(self, tmp_path: Path, valid_specimen_data: dict[str, Any]) -> None:
        """Test --id-mode selects the id pattern."""
        valid_specimen_data["id"] = "wemush:01ARZ3NDEKTSV4RRFFQ69G5FAV"
        path = write(tmp_path / "ulid.json", valid_specimen_data)

        assert CliRunner().invoke(main, [path]).exit_code == 1
        assert CliRunner().invoke(main, [path, "--id-mode", "ulid"]).exit_code == 0

    def test_id_mode_from_environment(self, tmp_path: Path, valid_specimen_data: dict[str, Any]) -> None:
        """Test WOLS_ID_MODE supplies the default id mode."""
        valid_specimen_data["id"] = "wemush:550e8400-e29b-41d4-a716-446655440000"
        path = write(tmp_path / "uuid.json", valid_specimen_data)

        result = CliRunner(env={"WOLS_ID_MODE": "uuid"}).invoke(main, [path])
        assert result.exit_code == 0

    def test_unknown_fields(self, tmp_path: Path, valid_specimen_data: dict[str, Any]) -> None:
        """Test --allow-unknown-fields suppresses warnings."""
        valid_specimen_data["color"] = "blue"
        path = write(tmp_path / "extra.json", valid_specimen_data)

        default = CliRunner().invoke(main, [path])
        allowed = CliRunner().invoke(main, [path, "--allow-unknown-fields"])

        assert "WARNINGS (1):" in default.output
        assert "WARNINGS" not in allowed.output

    def test_verbose_summary(self, specimen_dir: Path) -> None:
        """Test --verbose prints the per-code summary."""
        result = CliRunner().invoke(main, ["--dir", str(specimen_dir), "--verbose"])
        assert "Summary by code:" in result.output
        assert "WOLS_INVALID_SPECIMEN_TYPE: 1" in result.output

    def test_export(self, specimen_dir: Path, tmp_path: Path) -> None:
        """Test --output writes a JSON report."""
        output = tmp_path / "reports" / "report.json"
        result = CliRunner().invoke(main, ["--dir", str(specimen_dir), "-o", str(output)])

        assert "Exported report to" in result.output
        data = json.loads(output.read_text(encoding="utf-8"))
        assert data["documents_checked"] == ["bad.json", "good.json"]
        assert data["valid_count"] == 1
        assert data["stats"] == {"WOLS_INVALID_SPECIMEN_TYPE": 1}
