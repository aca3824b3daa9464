#!/usr/bin/env python3
"""
Preset Validation

Runs every preset sequence through a fresh engine and checks:
1. The preset is analysed successfully
2. The detected pattern matches the preset's expected pattern (if given)
3. Five predictions are produced
4. A repeated analysis is served from the cache with an identical payload

Exit status is 1 if any check fails.

Usage:
    python scripts/preset_validation.py [--presets FILE]
"""

import argparse
import sys
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from echo_chamber.presets import Preset, load_presets  # noqa: E402
from echo_chamber.sequence_analyzer import SequenceAnalyzer  # noqa: E402
from echo_chamber.sequence_model import PREDICTION_COUNT  # noqa: E402


@dataclass
class ValidationResult:
    test_name: str
    preset: str
    passed: bool
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_name": self.test_name,
            "preset": self.preset,
            "passed": self.passed,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class PresetValidator:
    """Checks each preset against a fresh SequenceAnalyzer."""

    def __init__(self, presets: List[Preset]):
        self.presets = presets
        self.analyzer = SequenceAnalyzer()
        self.results: List[ValidationResult] = []

    def add_result(
        self,
        test_name: str,
        preset: str,
        passed: bool,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.results.append(ValidationResult(
            test_name=test_name,
            preset=preset,
            passed=passed,
            message=message,
            details=details,
        ))
        status = "PASS" if passed else "FAIL"
        print(f"{status}: [{preset}] {test_name}")
        if not passed:
            print(f"       -> {message}")

    def validate_preset(self, preset: Preset):
        result = self.analyzer.analyze(list(preset.sequence))
        self.add_result(
            "analysis_succeeds",
            preset.name,
            result.success,
            "Analysis succeeded" if result.success else f"Analysis failed: {result.error_message}",
        )
        if not result.success:
            return

        if preset.expected_pattern is not None:
            self.add_result(
                "expected_pattern",
                preset.name,
                result.pattern == preset.expected_pattern,
                f"Detected {result.pattern}, expected {preset.expected_pattern}",
                {"confidence": result.confidence},
            )

        self.add_result(
            "prediction_count",
            preset.name,
            len(result.predicted_next) == PREDICTION_COUNT,
            f"{len(result.predicted_next)} predictions (expected {PREDICTION_COUNT})",
            {"predicted_next": list(result.predicted_next)},
        )

        hits_before = self.analyzer.get_metrics().cache_hits
        repeat = self.analyzer.analyze(list(preset.sequence))
        served_from_cache = self.analyzer.get_metrics().cache_hits == hits_before + 1
        self.add_result(
            "cached_repeat",
            preset.name,
            served_from_cache and repeat.payload() == result.payload(),
            "Repeat analysis served from cache with identical payload",
        )

    def generate_report(self) -> str:
        passed = [r for r in self.results if r.passed]
        failed = [r for r in self.results if not r.passed]

        report = ["", "=" * 70, "PRESET VALIDATION REPORT", "=" * 70]
        report.append(f"Presets:  {len(self.presets)}")
        report.append(f"Checks:   {len(self.results)}")
        report.append(f"Passed:   {len(passed)}")
        report.append(f"Failed:   {len(failed)}")
        if failed:
            report.append("")
            report.append("Failures:")
            for r in failed:
                report.append(f"- [{r.preset}] {r.test_name}: {r.message}")

        metrics = self.analyzer.get_metrics()
        report.append("")
        report.append(
            f"Engine: {metrics.total_analyses} analyses, {metrics.cache_hits} cache hits, "
            f"{metrics.average_analysis_duration_ms:.3f}ms average"
        )
        return "\n".join(report)

    def run_all_validations(self) -> List[ValidationResult]:
        print("=" * 70)
        print("ECHO CHAMBER - PRESET VALIDATION")
        print("=" * 70)
        for preset in self.presets:
            self.validate_preset(preset)
        print(self.generate_report())
        return self.results


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate preset sequences")
    parser.add_argument("--presets", type=Path, help="YAML presets file (default: built-in)")
    args = parser.parse_args(argv)

    validator = PresetValidator(load_presets(args.presets))
    results = validator.run_all_validations()

    # Exit with error code if any check failed
    return 1 if any(not r.passed for r in results) else 0


if __name__ == "__main__":
    sys.exit(main())
