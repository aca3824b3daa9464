"""
Preset Example Sequences

Built-in examples covering every pattern the detector recognises. A YAML
file named by ECHO_CHAMBER_PRESETS_FILE replaces the built-in list.

File format (either form):

    - name: Squares
      sequence: [1, 4, 9, 16]
      expected_pattern: polynomial

    presets:
      - name: Squares
        sequence: [1, 4, 9, 16]
"""

import logging
import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .sequence_model import PatternType
from .sequence_validator import validate_sequence

logger = logging.getLogger("presets")

PRESETS_FILE = os.getenv("ECHO_CHAMBER_PRESETS_FILE")


@dataclass(frozen=True)
class Preset:
    """A named example sequence."""
    name: str
    sequence: Tuple[float, ...]
    expected_pattern: Optional[str] = None  # PatternType value

    def __post_init__(self):
        if not self.name:
            raise ValueError("Preset name cannot be empty")
        if not isinstance(self.sequence, tuple):
            raise ValueError("sequence must be a tuple for immutability")
        validation = validate_sequence(self.sequence)
        if not validation.valid:
            raise ValueError(f"Preset {self.name}: {validation.error_message}")
        if (self.expected_pattern is not None
                and self.expected_pattern not in [p.value for p in PatternType]):
            raise ValueError(f"Invalid expected pattern: {self.expected_pattern}")

    @property
    def label(self) -> str:
        """Name with the sequence, e.g. 'Arithmetic: 3, 6, 9, 12'."""
        return f"{self.name}: {', '.join(str(v) for v in self.sequence)}"

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["sequence"] = list(self.sequence)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Preset":
        return cls(
            name=str(data["name"]),
            sequence=tuple(data["sequence"]),
            expected_pattern=data.get("expected_pattern"),
        )


DEFAULT_PRESETS: Tuple[Preset, ...] = (
    Preset("Arithmetic", (3, 6, 9, 12), PatternType.ARITHMETIC.value),
    Preset("Geometric", (2, 4, 8, 16), PatternType.GEOMETRIC.value),
    Preset("Fibonacci", (1, 1, 2, 3, 5, 8), PatternType.FIBONACCI.value),
    Preset("Polynomial", (1, 4, 9, 16, 25), PatternType.POLYNOMIAL.value),
    Preset("Negative", (20, 15, 10, 5, 0), PatternType.ARITHMETIC.value),
)


def load_presets(path: Optional[Path] = None) -> List[Preset]:
    """
    Load presets from YAML, falling back to DEFAULT_PRESETS.

    Malformed entries are skipped with a warning. A missing or unreadable
    file, or one with no usable entries, yields the defaults.
    """
    source = path or (Path(PRESETS_FILE) if PRESETS_FILE else None)
    if source is None:
        return list(DEFAULT_PRESETS)

    try:
        with open(source) as f:
            data = yaml.safe_load(f) or []
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Cannot load presets from {source}: {e}")
        return list(DEFAULT_PRESETS)

    if isinstance(data, dict):
        data = data.get("presets", [])
    if not isinstance(data, list):
        logger.warning(f"Presets file {source} is not a list, using defaults")
        return list(DEFAULT_PRESETS)

    presets = []
    for entry in data:
        try:
            presets.append(Preset.from_dict(entry))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed preset: {e}")
            continue

    if not presets:
        return list(DEFAULT_PRESETS)

    logger.info(f"Loaded {len(presets)} presets from {source}")
    return presets
