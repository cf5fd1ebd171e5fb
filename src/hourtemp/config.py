"""Reconstruction configuration.

ReconstructionConfig holds the tunable policies of the hourly reconstruction.
It is validated on construction and can be dumped to / loaded from JSON so a
run's settings can be stored next to its output.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


@dataclass
class ReconstructionConfig:
    """Configuration for one hourly reconstruction run.

    Attributes:
        min_equations: Minimum usable hourly equations before a daily extreme
            is solved from hourly data (default 5); fewer defers to patching
        joint_solve: Solve extremes entangled with each other jointly once
            coordinate-wise passes stop making progress
        interpolate_fallback: Linearly interpolate daily gaps that no proxy
            fills
        time_of_max_offset: Hours after solar noon of the daily maximum
        max_mean_bias: Reject proxies whose |mean bias| exceeds this (°C)
        max_sd_bias: Reject proxies whose sd of differences exceeds this (°C)
        proxy_priority: Order in which proxies are tried (default: the order
            they are supplied in)
        verbose: Print stage summaries
    """

    min_equations: int = 5
    joint_solve: bool = True
    interpolate_fallback: bool = True
    time_of_max_offset: float = 2.0
    max_mean_bias: float | None = None
    max_sd_bias: float | None = None
    proxy_priority: list[str] | None = None
    verbose: bool = False

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Validate all configuration parameters."""
        errors = []

        if self.min_equations < 1:
            errors.append(f"min_equations must be >= 1, got {self.min_equations}")

        if not 0 < self.time_of_max_offset < 12:
            errors.append(
                f"time_of_max_offset must be in (0, 12), got {self.time_of_max_offset}"
            )

        if self.max_mean_bias is not None and self.max_mean_bias < 0:
            errors.append(f"max_mean_bias must be >= 0, got {self.max_mean_bias}")

        if self.max_sd_bias is not None and self.max_sd_bias < 0:
            errors.append(f"max_sd_bias must be >= 0, got {self.max_sd_bias}")

        if self.proxy_priority is not None:
            dupes = sorted({p for p in self.proxy_priority if self.proxy_priority.count(p) > 1})
            if dupes:
                errors.append(f"proxy_priority has duplicates: {dupes}")

        if errors:
            raise ValueError(
                "ReconstructionConfig validation failed:\n  - " + "\n  - ".join(errors)
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize config to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def save(self, path: Path | str) -> Path:
        """Save config to JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json())
        return path

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ReconstructionConfig:
        """Create config from dictionary."""
        return cls(**d)

    @classmethod
    def from_json(cls, json_str: str) -> ReconstructionConfig:
        """Create config from JSON string."""
        return cls.from_dict(json.loads(json_str))

    @classmethod
    def load(cls, path: Path | str) -> ReconstructionConfig:
        """Load config from JSON file."""
        return cls.from_json(Path(path).read_text())
