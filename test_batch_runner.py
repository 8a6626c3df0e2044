"""Tests for the folder batch runner, option files and logging setup."""

import json
import logging

import pytest
from jsonkit import BatchRunner, BatchReport, LogLevel, SchemaDraft, configure_logging, load_options


SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {"name": {"type": "string"}},
}


@pytest.fixture
def workspace(tmp_path):
    schema_path = tmp_path / "schema.yaml"
    schema_path.write_text("type: object\nrequired: [name]\nproperties:\n  name:\n    type: string\n")

    data = tmp_path / "data"
    data.mkdir()
    (data / "a_valid.json").write_text(json.dumps({"name": "x"}))
    (data / "b_missing.json").write_text("{}")
    (data / "c_wrong.yml").write_text("name: 5\n")
    (data / "d_broken.yaml").write_text("{bad: [")
    (data / "notes.txt").write_text("ignored")
    return schema_path, data


class TestBatchRunner:
    """Test validating a folder of documents."""

    def test_run_collects_all_data_files(self, workspace):
        """Test that json, yaml and yml files are validated in name order."""
        schema_path, data = workspace

        report = BatchRunner(str(schema_path), str(data)).run()
        assert [r.file_name for r in report.results] == [
            "a_valid.json", "b_missing.json", "c_wrong.yml", "d_broken.yaml",
        ]
        assert report.total == 4
        assert report.valid == 1
        assert report.invalid == 3

    def test_report_categories(self, workspace):
        """Test aggregated error categories."""
        schema_path, data = workspace

        report = BatchRunner.run_folder(str(schema_path), str(data))
        assert report.errors_by_category == {"required": 1, "type": 1, "custom": 1}

    def test_report_to_dict(self, workspace):
        """Test report serialization."""
        schema_path, data = workspace

        report = BatchRunner.run_folder(str(schema_path), str(data))
        output = report.to_dict()
        assert output["summary"]["totalFiles"] == 4
        assert output["summary"]["passRate"] == "25.0%"
        assert output["results"][0]["fileName"] == "a_valid.json"
        assert output["timestamp"].endswith("Z")

    def test_print_summary(self, workspace, capsys):
        """Test the printed report."""
        schema_path, data = workspace

        BatchRunner.run_folder(str(schema_path), str(data), print_report=True)
        out = capsys.readouterr().out
        assert "VALID: a_valid.json" in out
        assert "INVALID: b_missing.json" in out
        assert "Validation Results: 1/4 valid (25.0%)" in out

    def test_options_mapping(self, workspace):
        """Test options given as a mapping."""
        schema_path, data = workspace

        runner = BatchRunner(str(schema_path), str(data), {"allErrors": False})
        assert runner.validator.options.all_errors is False

    def test_missing_schema(self, tmp_path):
        """Test that a missing schema file raises."""
        (tmp_path / "data").mkdir()
        with pytest.raises(FileNotFoundError):
            BatchRunner(str(tmp_path / "none.json"), str(tmp_path / "data")).run()

    def test_missing_folder(self, tmp_path):
        """Test that a missing data folder raises."""
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(json.dumps(SCHEMA))
        with pytest.raises(FileNotFoundError):
            BatchRunner(str(schema_path), str(tmp_path / "none")).run()

    def test_empty_report(self):
        """Test pass rate of an empty report."""
        assert BatchReport().pass_rate == "0.0%"


class TestLoadOptions:
    """Test option files."""

    def test_yaml_options(self, tmp_path):
        """Test camelCase keys in a YAML file."""
        path = tmp_path / "options.yaml"
        path.write_text("strict: true\nallErrors: false\ndraft: draft-04\nmaxDepth: 10\n")

        options = load_options(path)
        assert options.strict is True
        assert options.all_errors is False
        assert options.draft == SchemaDraft.DRAFT_04
        assert options.max_depth == 10

    def test_non_mapping_rejected(self, tmp_path):
        """Test that a list is not an options file."""
        path = tmp_path / "options.json"
        path.write_text("[1, 2]")
        with pytest.raises(ValueError):
            load_options(path)


class TestLogging:
    """Test package logging setup."""

    def test_configure_level(self):
        """Test explicit levels and handler replacement."""
        logger = configure_logging(LogLevel.DEBUG)
        assert logger.name == "jsonkit"
        assert logger.level == logging.DEBUG

        logger = configure_logging("error")
        assert logger.level == logging.ERROR
        assert len(logger.handlers) == 1

    def test_level_from_environment(self, monkeypatch):
        """Test the JSONKIT_LOG_LEVEL variable."""
        monkeypatch.setenv("JSONKIT_LOG_LEVEL", "WARNING")
        assert configure_logging().level == logging.WARNING


class TestUnreadableFiles:
    """Test that one bad data file does not stop a folder run."""

    def setup_method(self):
        self.schema = json.dumps(SCHEMA)

    def test_non_utf8_file_becomes_parse_failure(self, tmp_path):
        """Test that undecodable bytes give a parse result for that file only."""
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(self.schema)
        data = tmp_path / "data"
        data.mkdir()
        (data / "a.json").write_text(json.dumps({"name": "x"}))
        (data / "b.json").write_bytes(b"\xff\xfe")

        report = BatchRunner.run_folder(str(schema_path), str(data))

        assert report.total == 2
        assert report.valid == 1
        assert report.invalid == 1
        failed = report.results[1]
        assert failed.file_name == "b.json"
        assert failed.result.errors[0].keyword == "parse"
        assert "b.json" in failed.result.errors[0].message
        assert report.errors_by_category == {"custom": 1}

    def test_validate_path(self, tmp_path):
        """Test validating a single readable file."""
        schema_path = tmp_path / "schema.json"
        schema_path.write_text(self.schema)
        path = tmp_path / "doc.json"
        path.write_text("{}")

        entry = BatchRunner(str(schema_path), str(tmp_path)).validate_path(path)
        assert entry.file_name == "doc.json"
        assert entry.result.errors[0].keyword == "required"
