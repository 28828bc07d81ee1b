from __future__ import annotations
from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict
import json
from pathlib import Path

from .distance import METRICS
from .errors import ConfigError
from .preprocessing import PreprocessConfig

@dataclass(frozen=True)
class SummarizerConfig:
    top_k: int = 3            # sentences in the summary
    neighbor_k: int = 3       # neighbours each sentence keeps in the graph
    min_terms: int = 2        # sentences with this many terms or fewer are dropped
    metric: str = "hellinger"  # "hellinger" | "cosine"
    similarity_scale: float = 100.0
    separator: str = " "
    max_iter: int = 1000
    tol: float = 1e-10
    preprocess: PreprocessConfig = field(default_factory=PreprocessConfig)

    def __post_init__(self):
        # bool is an int subclass, and JSON gives 2.5 as float
        for name in ("top_k", "neighbor_k", "min_terms", "max_iter"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
        for name in ("similarity_scale", "tol"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"{name} must be a number, got {value!r}")
        if self.top_k < 1:
            raise ConfigError(f"top_k must be at least 1, got {self.top_k}")
        if self.neighbor_k < 1:
            raise ConfigError(f"neighbor_k must be at least 1, got {self.neighbor_k}")
        if self.min_terms < 0:
            raise ConfigError(f"min_terms must be non-negative, got {self.min_terms}")
        if self.metric not in METRICS:
            raise ConfigError(f"Unknown metric: {self.metric!r} (expected one of {', '.join(METRICS)})")
        if self.similarity_scale <= 0:
            raise ConfigError("similarity_scale must be positive")
        if self.max_iter < 1 or self.tol <= 0:
            raise ConfigError("max_iter must be >= 1 and tol > 0")

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "SummarizerConfig":
        data = dict(data)
        known = set(SummarizerConfig.__dataclass_fields__)
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        pre = data.pop("preprocess", None) or {}
        try:
            return SummarizerConfig(preprocess=PreprocessConfig(**pre), **data)
        except TypeError as e:
            raise ConfigError(str(e)) from e

    @staticmethod
    def load(path: Path) -> "SummarizerConfig":
        try:
            data = json.loads(Path(path).read_text())
        except json.JSONDecodeError as e:
            raise ConfigError(f"{path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a JSON object")
        return SummarizerConfig.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def dump(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    def replace(self, **overrides: Any) -> "SummarizerConfig":
        """Copy with the non-None overrides applied (CLI options left unset are None)."""
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **overrides)
