"""Batch runner that validates a folder of documents against a schema file."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .models import BatchFile, BatchValidationResult, ValidatorOptions
from .validator import EnhancedJsonSchemaValidator

logger = logging.getLogger(__name__)

DATA_FILE_PATTERNS = ("*.json", "*.yaml", "*.yml")


def load_options(path: Union[str, Path]) -> ValidatorOptions:
    """
    Load ValidatorOptions from a YAML or JSON file.

    Keys may be camelCase or snake_case; unknown keys are ignored.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Options file not found: {path}")

    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()

    # JSON is valid YAML
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse options file: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Options file must contain a mapping: {path}")

    return ValidatorOptions.from_dict(data)


@dataclass
class BatchReport:
    """Outcome of validating every document in a folder."""
    total: int = 0
    valid: int = 0
    invalid: int = 0
    results: list[BatchValidationResult] = field(default_factory=list)
    errors_by_category: dict[str, int] = field(default_factory=dict)
    timestamp: str = ""

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')

    def add(self, entry: BatchValidationResult):
        self.results.append(entry)
        self.total += 1
        if entry.result.is_valid:
            self.valid += 1
        else:
            self.invalid += 1
        for category, count in entry.result.summary.errors_by_category.items():
            self.errors_by_category[category] = self.errors_by_category.get(category, 0) + count

    @property
    def pass_rate(self) -> str:
        return f"{(self.valid / self.total * 100):.1f}%" if self.total > 0 else "0.0%"

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "summary": {
                "totalFiles": self.total,
                "valid": self.valid,
                "invalid": self.invalid,
                "passRate": self.pass_rate,
            },
            "errorsByCategory": self.errors_by_category,
            "results": [r.to_dict() for r in self.results],
        }

    def print_summary(self):
        print(f"\nValidation Results: {self.valid}/{self.total} valid ({self.pass_rate})")
        if self.invalid > 0:
            print(f"  Invalid: {self.invalid}")
            for entry in self.results:
                if not entry.result.is_valid:
                    print(f"    {entry.file_name}: {entry.result.summary.total_errors} errors")

        if self.errors_by_category:
            print(f"\nIssues by category:")
            for category, count in sorted(self.errors_by_category.items()):
                print(f"  {category}: {count}")


class BatchRunner:
    """
    Loads a schema file and validates every data file in a folder.

    Usage:
        runner = BatchRunner("schema.yaml", "data/")
        report = runner.run()

    Or as a one-liner:
        report = BatchRunner.run_folder("schema.yaml", "data/")
    """

    def __init__(
        self,
        schema_path: str,
        data_folder: str,
        options: Optional[Union[ValidatorOptions, dict[str, Any]]] = None
    ):
        """
        Initialize the runner.

        Args:
            schema_path: Path to a YAML/JSON schema file
            data_folder: Folder holding *.json, *.yaml and *.yml documents
            options: ValidatorOptions, or a mapping of option overrides
        """
        self.schema_path = Path(schema_path)
        self.data_folder = Path(data_folder)
        if isinstance(options, dict):
            options = ValidatorOptions.from_dict(options)
        self.validator = EnhancedJsonSchemaValidator(options)
        self._schema_text: Optional[str] = None

    @property
    def schema_text(self) -> str:
        """Load and cache the schema text from file."""
        if self._schema_text is None:
            if not self.schema_path.exists():
                raise FileNotFoundError(f"Schema file not found: {self.schema_path}")
            self._schema_text = self.schema_path.read_text(encoding='utf-8')
        return self._schema_text

    def collect_paths(self) -> list[Path]:
        """List the data files in the folder, sorted by file name."""
        if not self.data_folder.exists():
            raise FileNotFoundError(f"Data folder not found: {self.data_folder}")

        paths = set()
        for pattern in DATA_FILE_PATTERNS:
            paths.update(self.data_folder.glob(pattern))

        return sorted(paths, key=lambda p: p.name)

    def validate_path(self, path: Path) -> BatchValidationResult:
        """Read and validate one data file; an unreadable file becomes a parse failure."""
        start_time = time.perf_counter()
        try:
            content = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", path, e)
            result = EnhancedJsonSchemaValidator._failure_result(
                "parse",
                f"Failed to read {path.name}: {e}",
                "Make sure the file is readable and saved as UTF-8 text",
                start_time,
            )
            return BatchValidationResult(
                file_name=path.name,
                result=result,
                processing_time=(time.perf_counter() - start_time) * 1000,
            )

        batch_file = BatchFile(name=path.name, content=content)
        return self.validator.validate_batch([batch_file], self.schema_text)[0]

    def run(self, print_report: bool = False) -> BatchReport:
        """
        Validate every file in the data folder.

        Args:
            print_report: Whether to print a line per file and the summary

        Returns:
            BatchReport with all results
        """
        paths = self.collect_paths()
        logger.info("Validating %d files against %s", len(paths), self.schema_path)

        # Fail on a missing schema before touching any data file
        if not self.schema_text.strip():
            logger.warning("Schema file %s is empty", self.schema_path)

        report = BatchReport()
        for path in paths:
            entry = self.validate_path(path)
            report.add(entry)
            if print_report:
                print(f"{'VALID' if entry.result.is_valid else 'INVALID'}: {entry.file_name}")

        if print_report:
            report.print_summary()

        return report

    @classmethod
    def run_folder(
        cls,
        schema_path: str,
        data_folder: str,
        options: Optional[Union[ValidatorOptions, dict[str, Any]]] = None,
        print_report: bool = False
    ) -> BatchReport:
        """
        Convenience class method to validate a folder in one call.

        Example:
            report = BatchRunner.run_folder("schema.yaml", "data/")
        """
        return cls(schema_path, data_folder, options).run(print_report=print_report)
