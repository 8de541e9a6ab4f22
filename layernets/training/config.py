"""Trainer configuration and its loaders."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from ..core.errors import ConfigError
from .metrics import METRICS


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_real(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass
class TrainerConfig:
    """Options recognised by :class:`~layernets.training.trainer.BatchedTrainer`.

    Each field may be changed independently until ``train`` starts, at which
    point :meth:`validate` rejects the whole configuration if any value is out
    of range.
    """

    learning_rate: float = 0.1
    batch_size: int = 10
    momentum: float = 0.0
    epoch_count: int = 1
    samples_per_epoch: int = 100
    seed: Optional[int] = None
    workers: int = 1
    log_every: int = 0
    metrics: List[str] = field(default_factory=list)

    def validate(self) -> None:
        if not _is_real(self.learning_rate) or self.learning_rate <= 0:
            raise ConfigError(f"learning_rate must be a positive number, got {self.learning_rate!r}")
        if not _is_real(self.momentum) or self.momentum < 0:
            raise ConfigError(f"momentum must be non-negative, got {self.momentum!r}")
        for name in ("batch_size", "epoch_count", "samples_per_epoch", "workers"):
            value = getattr(self, name)
            if not _is_int(value) or value < 1:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if not _is_int(self.log_every) or self.log_every < 0:
            raise ConfigError(f"log_every must be a non-negative integer, got {self.log_every!r}")
        if self.seed is not None and not _is_int(self.seed):
            raise ConfigError(f"seed must be an integer or None, got {self.seed!r}")
        unknown = [name for name in self.metrics if name.lower() not in METRICS]
        if unknown:
            raise ConfigError(f"Unknown metrics: {', '.join(unknown)}")

    def replace(self, **overrides: object) -> "TrainerConfig":
        try:
            return replace(self, **overrides)
        except TypeError as exc:
            raise ConfigError(str(exc)) from exc

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> "TrainerConfig":
        """Build and validate a config; a nested ``train`` section is accepted."""

        section = mapping.get("train", mapping)
        if not isinstance(section, Mapping):
            raise ConfigError("train section must be a mapping")
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - known)
        if unknown:
            raise ConfigError(f"Unknown trainer options: {', '.join(unknown)}")
        options = dict(section)
        if "metrics" in options:
            metrics = options["metrics"]
            if isinstance(metrics, str):
                metrics = [m.strip() for m in metrics.split(",") if m.strip()]
            options["metrics"] = list(metrics)  # type: ignore[arg-type]
        config = cls(**options)  # type: ignore[arg-type]
        config.validate()
        return config


def _read_config_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load config files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise ConfigError(f"Config {path.name} must decode to a mapping")
    return data


def load_config(path: str | Path) -> TrainerConfig:
    """Read a JSON or YAML file into a validated :class:`TrainerConfig`."""

    return TrainerConfig.from_mapping(_read_config_file(Path(path)))


__all__ = ["TrainerConfig", "load_config"]
