"""Dataset runner: loads a YAML configuration and checks a folder of cases."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from .engine import Diff
from .exceptions import ConfigurationError, InvalidJsonError, JsonUnitError
from .matchers import Matcher
from .models import Configuration
from .values import read_json

logger = logging.getLogger(__name__)

DATASET_PATTERNS = ("*.json", "*.yaml", "*.yml")


def load_configuration(
    config_path: str | Path,
    matchers: Optional[Mapping[str, Matcher]] = None
) -> Configuration:
    """
    Load a configuration from a YAML or JSON file.

    Example file:
        options: [ignoring-array-order, ignoring-extra-fields]
        tolerance: 0.01
        ignored_paths:
          - meta.timestamp
          - $..id

    Args:
        config_path: Path to the YAML/JSON file
        matchers: Matchers to register (they cannot be declared in files)

    Raises:
        FileNotFoundError: if the file does not exist
        ConfigurationError: if the file does not parse or holds invalid values
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        content = f.read()

    # YAML also handles JSON since JSON is valid YAML
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Failed to parse configuration file: {e}")

    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration file must contain a mapping",
            {"type": type(data).__name__}
        )

    configuration = Configuration.from_dict(data, matchers)
    logger.debug("Loaded configuration from %s: %s", config_path, configuration.to_dict())
    return configuration


def load_document(document_file: str | Path) -> Any:
    """
    Load a JSON or YAML document. JSON files keep their numbers exact (Decimal).

    Raises:
        FileNotFoundError: if the file does not exist
        InvalidJsonError: if the file cannot be parsed
    """
    document_file = Path(document_file)
    with open(document_file, 'rb') as f:
        content = f.read()

    if document_file.suffix == ".json":
        return read_json(content).to_python()

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise InvalidJsonError(f"Invalid YAML: {e}")


@dataclass
class ScenarioResult:
    """Result of a single dataset case."""
    name: str
    dataset_path: str
    passed: bool
    expected_match: bool = True
    diff_report: Optional[dict] = None
    message: str = ""
    error: Optional[str] = None

    @property
    def outcome(self) -> str:
        """'errors', 'matching' or 'different'."""
        if self.error:
            return "errors"
        if self.diff_report and self.diff_report["is_match"]:
            return "matching"
        return "different"

    def to_dict(self) -> dict:
        result = {
            "name": self.name,
            "dataset_path": self.dataset_path,
            "passed": self.passed,
            "expected_match": self.expected_match,
            "outcome": self.outcome,
        }
        if self.diff_report:
            result["diff_report"] = self.diff_report
        if self.message:
            result["message"] = self.message
        if self.error:
            result["error"] = self.error
        return result


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z')


@dataclass
class GlobalReport:
    """
    Results of one dataset folder run.

    Counts and the outcome breakdown are derived from the scenarios, so a
    report can be rebuilt from any list of results.
    """
    scenarios: list[ScenarioResult] = field(default_factory=list)
    configuration: dict = field(default_factory=dict)
    timestamp: str = field(default_factory=_utc_now)

    @property
    def total(self) -> int:
        return len(self.scenarios)

    @property
    def passed(self) -> int:
        return sum(1 for s in self.scenarios if s.passed)

    @property
    def failed(self) -> int:
        return self.total - self.passed

    @property
    def breakdown(self) -> dict[str, list[str]]:
        """Scenario names grouped by outcome."""
        breakdown: dict[str, list[str]] = {"matching": [], "different": [], "errors": []}
        for scenario in self.scenarios:
            breakdown[scenario.outcome].append(scenario.name)
        return breakdown

    def failures(self) -> list[ScenarioResult]:
        return [s for s in self.scenarios if not s.passed]

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp,
            "configuration": self.configuration,
            "summary": {
                "total": self.total,
                "passed": self.passed,
                "failed": self.failed,
            },
            "breakdown": self.breakdown,
            "scenarios": [s.to_dict() for s in self.scenarios]
        }

    def print_summary(self):
        print(f"\n{self.passed} of {self.total} dataset(s) passed")
        for scenario in self.failures():
            if scenario.error:
                reason = scenario.error
            elif scenario.expected_match:
                reason = scenario.message.splitlines()[1] if scenario.message else "documents differ"
            else:
                reason = "expected differences, documents match"
            print(f"  {scenario.name}: {reason}")


class DatasetRunner:
    """
    Runs dataset cases against one configuration.

    A case is a mapping with:
        expected: the expected document (may use placeholders)
        actual: the actual document
        path: optional path within actual to compare against
        expected_match: whether the documents should match (default true)
        name: optional case name (defaults to the file name)
    """

    def __init__(self, configuration: Optional[Configuration] = None):
        self.configuration = configuration or Configuration()

    def run_dataset(self, dataset: Any, name: str, dataset_path: str) -> ScenarioResult:
        """Run a single dataset case."""
        if not isinstance(dataset, dict) or "expected" not in dataset or "actual" not in dataset:
            return ScenarioResult(
                name=name,
                dataset_path=dataset_path,
                passed=False,
                error="Dataset must be a mapping with 'expected' and 'actual'"
            )

        expected_match = bool(dataset.get("expected_match", True))
        try:
            diff = Diff(
                dataset["expected"],
                dataset["actual"],
                self.configuration,
                path=str(dataset.get("path") or "")
            )
            report = diff.report()
        except JsonUnitError as e:
            logger.info("Dataset %s failed with %s: %s", name, type(e).__name__, e)
            return ScenarioResult(
                name=name,
                dataset_path=dataset_path,
                passed=False,
                expected_match=expected_match,
                error=str(e)
            )

        return ScenarioResult(
            name=name,
            dataset_path=dataset_path,
            passed=report.is_match == expected_match,
            expected_match=expected_match,
            diff_report=report.to_dict(),
            message=report.message
        )

    def run_file(self, dataset_file: Path) -> ScenarioResult:
        """Load and run one case file; parse errors fail the case."""
        name = dataset_file.stem
        try:
            dataset = load_document(dataset_file)
        except InvalidJsonError as e:
            return ScenarioResult(name=name, dataset_path=str(dataset_file), passed=False, error=str(e))

        if isinstance(dataset, dict):
            name = str(dataset.get("name", name))
        return self.run_dataset(dataset, name, str(dataset_file))

    def run_folder(self, folder: str | Path, print_report: bool = True) -> GlobalReport:
        """Run all dataset files in a folder, in file name order."""
        folder_path = Path(folder)
        if not folder_path.is_dir():
            raise FileNotFoundError(f"Dataset folder not found: {folder_path}")

        report = GlobalReport(configuration=self.configuration.to_dict())
        for dataset_file in sorted({f for p in DATASET_PATTERNS for f in folder_path.glob(p)}):
            result = self.run_file(dataset_file)
            report.scenarios.append(result)
            logger.info("%s: %s (%s)", "PASS" if result.passed else "FAIL", result.name, result.outcome)
            if print_report:
                print(f"{'PASS' if result.passed else 'FAIL'}: {result.name}")

        if print_report:
            report.print_summary()

        return report


def run_datasets(
    config_path: Optional[str | Path],
    dataset_folder: str | Path,
    print_report: bool = True,
    matchers: Optional[Mapping[str, Matcher]] = None
) -> GlobalReport:
    """
    Run all dataset cases in a folder.

    This is the simplest way to run a folder of cases:

        from jsonunit.runner import run_datasets
        report = run_datasets("jsonunit.yaml", "datasets/")

    Args:
        config_path: Path to the YAML/JSON configuration (None for defaults)
        dataset_folder: Folder containing *.json / *.yaml case files
        print_report: Whether to print the summary report
        matchers: Matchers referenced by ${json-unit.matches:...} placeholders

    Returns:
        GlobalReport with all results
    """
    if config_path is not None:
        configuration = load_configuration(config_path, matchers)
    else:
        configuration = Configuration(matchers=matchers or {})
    return DatasetRunner(configuration).run_folder(dataset_folder, print_report)
