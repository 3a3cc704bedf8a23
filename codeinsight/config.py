"""Configuration loading for codeinsight (.codeinsight.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .anomalies.smells import SmellThresholds
from .archetypes.library import template_from_mapping
from .errors import ConfigError
from .models import ArchetypeTemplate
from .synthesis.synthesizer import DEFAULT_WEIGHTS

CONFIG_FILENAME = ".codeinsight.yml"


@dataclass
class PurposeConfig:
    """Purpose classifier settings."""

    confidence_threshold: float = 0.0


@dataclass
class AlignmentConfig:
    """Goal alignment settings."""

    threshold: float = 0.5


@dataclass
class AnomalyConfig:
    """Anomaly detector settings."""

    threshold: float = 0.5


@dataclass
class SmellConfig:
    """Limits for the code smell pass; values above a limit are reported."""

    cyclomatic_threshold: int = 10
    cognitive_threshold: int = 15
    nesting_threshold: int = 4
    max_params: int = 4
    method_length: int = 300

    def thresholds(self) -> SmellThresholds:
        return SmellThresholds(
            cyclomatic=self.cyclomatic_threshold,
            cognitive=self.cognitive_threshold,
            nesting=self.nesting_threshold,
            parameters=self.max_params,
            method_length=self.method_length,
        )


@dataclass
class SynthesisConfig:
    """Holistic synthesis settings.

    ``weights`` fuse per-layer confidences into the overall score. Every layer
    defaults to 1.0, so the score is the plain mean of the primary purpose
    confidence, one minus the anomaly severity, the top archetype confidence
    and, once prototypes are trained, the prediction confidence. Layers that
    did not run drop out of both numerator and denominator.
    """

    weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    layers: Optional[List[str]] = None
    max_workers: Optional[int] = None
    low_confidence: float = 0.5


@dataclass
class LearningConfig:
    """Prototype persistence settings."""

    prototypes_path: Optional[Path] = None


@dataclass
class EngineConfig:
    """Represents the settings defined in .codeinsight.yml."""

    root: Path
    purpose: PurposeConfig = field(default_factory=PurposeConfig)
    alignment: AlignmentConfig = field(default_factory=AlignmentConfig)
    anomalies: AnomalyConfig = field(default_factory=AnomalyConfig)
    smells: SmellConfig = field(default_factory=SmellConfig)
    synthesis: SynthesisConfig = field(default_factory=SynthesisConfig)
    learning: LearningConfig = field(default_factory=LearningConfig)
    archetypes: List[ArchetypeTemplate] = field(default_factory=list)


def load_config(config_path: Path) -> EngineConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return EngineConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    purpose = PurposeConfig()
    purpose_data = _as_dict(data.get("purpose"))
    threshold = _as_unit(purpose_data.get("confidence_threshold"))
    if threshold is not None:
        purpose.confidence_threshold = threshold

    alignment = AlignmentConfig()
    threshold = _as_unit(_as_dict(data.get("alignment")).get("threshold"))
    if threshold is not None:
        alignment.threshold = threshold

    anomalies = AnomalyConfig()
    threshold = _as_unit(_as_dict(data.get("anomalies")).get("threshold"))
    if threshold is not None:
        anomalies.threshold = threshold

    smells = SmellConfig()
    for key, value in _as_dict(data.get("smells")).items():
        if str(key) not in {item.name for item in fields(SmellConfig)}:
            raise ConfigError(f"unknown smells setting '{key}'")
        limit = _as_int(value)
        if limit is None or limit < 0:
            raise ConfigError(f"smells.{key} must be a non-negative integer")
        setattr(smells, str(key), limit)

    synthesis = SynthesisConfig()
    synthesis_data = _as_dict(data.get("synthesis"))
    if synthesis_data:
        for name, value in _as_dict(synthesis_data.get("weights")).items():
            weight = _as_float(value)
            if weight is None or weight < 0:
                raise ConfigError(f"synthesis weight for '{name}' must be a non-negative number")
            synthesis.weights[str(name)] = weight
        if "layers" in synthesis_data:
            synthesis.layers = _as_str_list(synthesis_data.get("layers"))
        max_workers = _as_int(synthesis_data.get("max_workers"))
        if max_workers is not None and max_workers > 0:
            synthesis.max_workers = max_workers
        low_confidence = _as_unit(synthesis_data.get("low_confidence"))
        if low_confidence is not None:
            synthesis.low_confidence = low_confidence

    learning = LearningConfig()
    prototypes_path = _as_str(_as_dict(data.get("learning")).get("prototypes_path"))
    if prototypes_path:
        learning.prototypes_path = root / prototypes_path

    archetypes = [template_from_mapping(_as_dict(item)) for item in _as_list(data.get("archetypes"))]

    return EngineConfig(
        root=root,
        purpose=purpose,
        alignment=alignment,
        anomalies=anomalies,
        smells=smells,
        synthesis=synthesis,
        learning=learning,
        archetypes=archetypes,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, list) else []


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_unit(value: Any) -> Optional[float]:
    number = _as_float(value)
    if number is None:
        return None
    if not 0.0 <= number <= 1.0:
        raise ConfigError(f"thresholds must lie in [0, 1], got {number}")
    return number


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "AlignmentConfig",
    "AnomalyConfig",
    "CONFIG_FILENAME",
    "EngineConfig",
    "LearningConfig",
    "PurposeConfig",
    "SynthesisConfig",
    "load_config",
]
