"""
Echo Chamber CLI - Command Line Interface

Interactive menu around the sequence engine. Runs against an in-process
SequenceAnalyzer by default, or against a running server with --remote.

Usage:
    echo-chamber                          # interactive, local engine
    echo-chamber --remote http://host:3000
    echo-chamber --analyze "3, 6, 9, 12"  # one-shot, exit status 1 on error
"""

import argparse
import sys
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from . import __version__, SERVICE_NAME, SERVICE_DESCRIPTION
from .api_client import EchoChamberClient
from .logging_config import setup_logging
from .presets import load_presets
from .sequence_analyzer import SequenceAnalyzer
from .sequence_model import history_to_dicts

# ANSI Colors
COLORS = {
    "reset": "\x1b[0m",
    "bright": "\x1b[1m",
    "cyan": "\x1b[36m",
    "magenta": "\x1b[35m",
    "green": "\x1b[32m",
    "red": "\x1b[31m",
    "yellow": "\x1b[33m",
}

RULE = "-" * 70
HISTORY_DISPLAY_LIMIT = 10

MENU = """\
+- MENU ---------------------------------------------------------+
| 1. Analyze a sequence                                          |
| 2. Test with preset examples                                   |
| 3. Compare two sequences                                       |
| 4. View analysis history                                       |
| 5. View performance metrics                                    |
| 6. Clear history                                               |
| 7. Help                                                        |
| 8. Exit                                                        |
+----------------------------------------------------------------+"""

HELP_TEXT = """\
This tool analyzes mathematical sequences and predicts the next numbers.

Supported Patterns:
  * Arithmetic: Constant difference (e.g., 2, 4, 6, 8)
  * Geometric: Constant ratio (e.g., 2, 4, 8, 16)
  * Polynomial: Polynomial functions (e.g., 1, 4, 9, 16)
  * Fibonacci: Sum of previous two (e.g., 1, 1, 2, 3, 5)

Input Format:
  Enter numbers separated by commas: 3, 6, 9, 12

Tips:
  * Minimum 2 numbers required
  * Use presets to test different pattern types
  * Compare sequences to find similarities"""


def color(text: Any, name: str) -> str:
    return f"{COLORS[name]}{text}{COLORS['reset']}"


def parse_sequence(text: str) -> List[float]:
    """
    Parse comma-separated numbers.

    Integers stay integers so they render without a trailing .0. Raises
    ValueError naming the first token that is not a number.
    """
    values = []
    for token in text.split(","):
        token = token.strip()
        try:
            values.append(int(token))
        except ValueError:
            try:
                values.append(float(token))
            except ValueError:
                raise ValueError(f"Invalid number: {token!r}") from None
    return values


def format_sequence(sequence: List[Any]) -> str:
    return f"[{', '.join(str(v) for v in sequence)}]"


# -----------------------------------------------------------------------------
# Local Backend
# -----------------------------------------------------------------------------
class LocalBackend:
    """
    In-process engine with the same dict responses as the HTTP API, so the
    menu renders local and remote results the same way.
    """

    def __init__(self, analyzer: Optional[SequenceAnalyzer] = None):
        self.analyzer = analyzer or SequenceAnalyzer()

    def analyze(self, sequence: List[float]) -> Dict[str, Any]:
        return self.analyzer.analyze(sequence).to_dict()

    def compare(self, sequence_a: List[float], sequence_b: List[float]) -> Dict[str, Any]:
        return {"success": True, **self.analyzer.compare(sequence_a, sequence_b).to_dict()}

    def get_history(self, limit: Optional[int] = None) -> Dict[str, Any]:
        history = self.analyzer.get_history()
        if limit is not None:
            history = history[-limit:] if limit else []
        return {"success": True, "count": len(history), "history": history_to_dicts(history)}

    def get_metrics(self) -> Dict[str, Any]:
        metrics = self.analyzer.get_metrics()
        return {
            "success": True,
            "metrics": metrics.to_dict(),
            "cache_hit_rate": metrics.cache_hit_rate,
        }

    def clear_history(self) -> Dict[str, Any]:
        self.analyzer.clear()
        return {"success": True, "message": "All history and cache cleared"}

    def get_presets(self) -> Dict[str, Any]:
        return {"success": True, "presets": [p.to_dict() for p in load_presets()]}


# -----------------------------------------------------------------------------
# Interactive Menu
# -----------------------------------------------------------------------------
class EchoChamberCLI:
    """Menu loop. `backend` is a LocalBackend or an EchoChamberClient."""

    def __init__(
        self,
        backend: Any,
        input_func: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
    ):
        self.backend = backend
        self._input = input_func or input
        self._out = output or print
        self._actions = {
            "1": self.analyze_sequence,
            "2": self.run_presets,
            "3": self.compare_sequences,
            "4": self.view_history,
            "5": self.view_metrics,
            "6": self.clear_history,
            "7": self.display_help,
        }

    def run(self) -> None:
        """Show the menu until the user exits or input ends."""
        self.display_header()
        while True:
            self._out(color(MENU, "cyan"))
            try:
                choice = self._input(color("Select option (1-8): ", "cyan")).strip()
            except EOFError:
                break
            if choice == "8":
                break
            action = self._actions.get(choice)
            if action is None:
                self._out(color("Invalid option. Please select 1-8.", "red"))
                continue
            try:
                action()
            except EOFError:
                break
        self._out(color(f"\nThank you for using {SERVICE_NAME}! Goodbye!\n", "magenta"))

    # -------------------------------------------------------------------------
    # Menu Actions
    # -------------------------------------------------------------------------

    def display_header(self) -> None:
        self._out("\n" + "=" * 70)
        self._out(color(f"{SERVICE_NAME.upper()} - COMMAND LINE INTERFACE  v{__version__}", "magenta"))
        self._out("=" * 70)
        self._out(color(SERVICE_DESCRIPTION, "cyan") + "\n")

    def analyze_sequence(self) -> None:
        text = self._input(color("Enter sequence (comma-separated numbers): ", "cyan"))
        try:
            sequence = parse_sequence(text)
        except ValueError as e:
            self._out(color(f"Invalid format: {e}", "red"))
            return
        self.display_analysis_result(self.backend.analyze(sequence))

    def display_analysis_result(self, result: Dict[str, Any]) -> None:
        if not result.get("success"):
            self._out(color(f"\n{result.get('error_message') or result.get('error')}\n", "red"))
            return

        parameters = result.get("parameters") or {}
        self._out("\n" + RULE)
        self._out(color("ANALYSIS COMPLETE", "green"))
        self._out(RULE)
        self._out(f"\nPattern Type:  {color(result['pattern'].upper(), 'cyan')}")
        self._out(f"Confidence:    {color(str(result['confidence']) + '%', 'cyan')}")
        self._out(f"Sequence:      {format_sequence(result['sequence'])}")
        duration = "%.2fms" % result["analysis_duration_ms"]
        self._out(f"Analysis Time: {color(duration, 'cyan')}")

        if "common_difference" in parameters:
            self._out(f"Common Difference: {color(parameters['common_difference'], 'yellow')}")
        if "common_ratio" in parameters:
            ratio = parameters["common_ratio"]
            if isinstance(ratio, (int, float)):
                ratio = "%.4f" % ratio
            self._out(f"Common Ratio:      {color(ratio, 'yellow')}")
        if "degree" in parameters:
            self._out(f"Degree:            {color(parameters['degree'], 'yellow')}")

        self._out(f"\nFormula: {color(result['formula_description'], 'magenta')}")
        self._out(f"Explanation: {result['explanation']}")

        self._out("\nNext Predictions:")
        for i, value in enumerate(result["predicted_next"], start=1):
            self._out(f"  {i}. {color(value, 'green')}")
        self._out("\n" + RULE + "\n")

    def run_presets(self) -> None:
        response = self.backend.get_presets()
        if not response.get("success"):
            self._out(color(f"Presets unavailable: {response.get('error')}", "red"))
            return

        self._out(color("\nTesting Preset Examples:\n", "cyan"))
        for preset in response["presets"]:
            self._out(f"{preset['name']}: {', '.join(str(v) for v in preset['sequence'])}")
            result = self.backend.analyze(preset["sequence"])
            if result.get("success"):
                self._out(f"  -> Pattern: {color(result['pattern'], 'cyan')}")
                self._out(f"  -> Next number: {color(result['predicted_next'][0], 'green')}")
                self._out(f"  -> Confidence: {color(str(result['confidence']) + '%', 'cyan')}")
            else:
                self._out(f"  -> {color('Error', 'red')}")
            self._out("")

    def compare_sequences(self) -> None:
        first = self._input(color("Enter first sequence (comma-separated): ", "cyan"))
        second = self._input(color("Enter second sequence (comma-separated): ", "cyan"))
        try:
            sequence_a = parse_sequence(first)
            sequence_b = parse_sequence(second)
        except ValueError as e:
            self._out(color(f"Invalid format: {e}", "red"))
            return

        response = self.backend.compare(sequence_a, sequence_b)
        if not response.get("success"):
            self._out(color(f"Comparison failed: {response.get('error')}", "red"))
            return

        self._out("\n" + RULE)
        self._out(color("Comparison Results:", "cyan"))
        self._out(RULE)
        for label, key in (("Sequence 1", "result_a"), ("Sequence 2", "result_b")):
            result = response[key]
            self._out(f"{label}: {format_sequence(result['sequence'])}")
            if result.get("success"):
                self._out(f"  Pattern: {color(result['pattern'], 'cyan')}")
                self._out(f"  Confidence: {color(str(result['confidence']) + '%', 'cyan')}")
            else:
                self._out(f"  {color(result.get('error_message'), 'red')}")

        same = color("Yes", "green") if response["same_pattern"] else color("No", "red")
        self._out("\nComparison:")
        self._out(f"  Same Pattern: {same}")
        self._out(f"  Similarity: {color(str(response['similarity_score']) + '%', 'yellow')}")
        self._out("\n" + RULE + "\n")

    def view_history(self) -> None:
        response = self.backend.get_history()
        if not response.get("success"):
            self._out(color(f"History unavailable: {response.get('error')}", "red"))
            return

        history = response["history"]
        self._out("\n" + RULE)
        self._out(color(f"Analysis History ({len(history)} items)", "cyan"))
        self._out(RULE + "\n")

        if not history:
            self._out(color("No analyses yet. Start by analyzing a sequence!\n", "yellow"))
            return

        recent = history[-HISTORY_DISPLAY_LIMIT:]
        for offset, item in enumerate(reversed(recent)):
            self._out(f"#{len(history) - offset} {item['pattern'].upper()}")
            self._out(f"   Sequence: {format_sequence(item['sequence'])}")
            self._out(f"   Next: {color(item['predicted_next'][0], 'green')}")
            self._out(f"   Time: {_format_timestamp(item['timestamp'])}")
            self._out("")
        self._out(RULE + "\n")

    def view_metrics(self) -> None:
        response = self.backend.get_metrics()
        if not response.get("success"):
            self._out(color(f"Metrics unavailable: {response.get('error')}", "red"))
            return

        metrics = response["metrics"]
        self._out("\n" + RULE)
        self._out(color("Performance Metrics", "cyan"))
        self._out(RULE + "\n")
        self._out(f"Total Analyses:    {color(metrics['total_analyses'], 'yellow')}")
        self._out(f"Cache Hits:        {color(metrics['cache_hits'], 'yellow')}")
        self._out(f"Cache Size:        {color(metrics['cache_size'], 'yellow')}")
        average = f"{metrics['average_analysis_duration_ms']:.2f}ms"
        self._out(f"Avg Analysis Time: {color(average, 'yellow')}")
        if response.get("cache_hit_rate") is not None:
            hit_rate = "%.1f%%" % response["cache_hit_rate"]
            self._out(f"Cache Hit Rate:    {color(hit_rate, 'green')}")
        self._out("\n" + RULE + "\n")

    def clear_history(self) -> None:
        answer = self._input(color("Are you sure? (y/n): ", "yellow"))
        if answer.strip().lower() != "y":
            self._out(color("Cancelled\n", "yellow"))
            return
        response = self.backend.clear_history()
        if response.get("success"):
            self._out(color("History cleared\n", "green"))
        else:
            self._out(color(f"Clear failed: {response.get('error')}\n", "red"))

    def display_help(self) -> None:
        self._out(color(f"\nHELP - {SERVICE_NAME} CLI\n", "cyan"))
        self._out(HELP_TEXT + "\n")


def _format_timestamp(timestamp: str) -> str:
    try:
        return datetime.fromisoformat(timestamp).strftime("%Y-%m-%d %H:%M:%S")
    except (TypeError, ValueError):
        return str(timestamp)


# -----------------------------------------------------------------------------
# Entry Point
# -----------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="echo-chamber",
        description=f"{SERVICE_NAME}: {SERVICE_DESCRIPTION}",
    )
    parser.add_argument(
        "--remote",
        metavar="URL",
        help="Use a running Echo Chamber server instead of the local engine",
    )
    parser.add_argument(
        "--analyze",
        metavar="SEQUENCE",
        help="Analyze one comma-separated sequence and exit",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(console=False)

    backend = EchoChamberClient(base_url=args.remote) if args.remote else LocalBackend()
    cli = EchoChamberCLI(backend)

    if args.analyze is not None:
        try:
            sequence = parse_sequence(args.analyze)
        except ValueError as e:
            print(color(f"Invalid format: {e}", "red"), file=sys.stderr)
            return 1
        result = backend.analyze(sequence)
        cli.display_analysis_result(result)
        return 0 if result.get("success") else 1

    try:
        cli.run()
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
