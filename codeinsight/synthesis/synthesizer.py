"""Fan-out/fan-in of analysis layers into one synthesized report."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..errors import InsightError
from ..logging import get_logger
from ..models import AnalysisResult, FeatureSet, SynthesizedReport
from ..layers import Layer, LayerContext
from .metrics import SuiteMetrics
from .quality import estimate_quality
from .recommendations import build_recommendations

DEFAULT_WEIGHTS: Mapping[str, float] = {
    "purpose": 1.0,
    "anomalies": 1.0,
    "archetypes": 1.0,
    "prediction": 1.0,
}

_RESULT_FIELDS = {
    "purpose": "purposes",
    "goals": "goals",
    "anomalies": "anomalies",
    "archetypes": "archetype_matches",
    "prediction": "prediction",
    "smells": "smells",
}

LayerOutcome = Tuple[Any, Optional[float]]


class DependencyUnavailable(InsightError):
    """Raised inside a layer task when a layer it requires has failed."""


class Synthesizer:
    """Runs every layer as an independent task and fuses the results.

    Layers are submitted in dependency order, so a layer waiting on the
    result of one it requires never holds back that requirement. A failing
    layer is logged and reported in ``missing_layers``; its siblings keep
    running and layers that require it are reported missing too.
    """

    def __init__(
        self,
        layers: Sequence[Layer],
        *,
        metrics: SuiteMetrics | None = None,
        weights: Mapping[str, float] | None = None,
        max_workers: int | None = None,
        low_confidence: float = 0.5,
    ) -> None:
        self.layers = tuple(layers)
        self.metrics = metrics if metrics is not None else SuiteMetrics()
        self.weights = dict(DEFAULT_WEIGHTS if weights is None else weights)
        self.max_workers = max_workers or max(len(self.layers), 1)
        self.low_confidence = low_confidence
        self.logger = get_logger("synthesis")

    def synthesize(self, code: str, features: FeatureSet) -> SynthesizedReport:
        outcomes, missing = self._fan_out(code, features)

        confidences = {
            name: confidence for name, (_, confidence) in outcomes.items() if confidence is not None
        }
        overall, used_weights = self._overall_score(confidences)
        analysis = self._assemble(outcomes)
        quality = estimate_quality(analysis)
        recommendations = build_recommendations(
            analysis,
            features,
            overall_score=overall,
            quality=quality,
            missing_layers=missing,
            low_confidence=self.low_confidence,
        )
        report = SynthesizedReport(
            analysis=analysis,
            overall_score=overall,
            recommendations=recommendations,
            layer_confidences=confidences,
            missing_layers=tuple(missing),
            weights=used_weights,
            quality=quality,
        )
        # Metrics only ever see completed analyses.
        self.metrics.record(overall)
        self.logger.debug("Synthesized report with overall score %.4f", overall)
        return report

    # ------------------------------------------------------------------
    # Internal helpers

    def _fan_out(self, code: str, features: FeatureSet) -> Tuple[Dict[str, LayerOutcome], List[str]]:
        futures: Dict[str, Future] = {}
        with ThreadPoolExecutor(
            max_workers=self.max_workers, thread_name_prefix="codeinsight-layer"
        ) as pool:
            for layer in self.layers:
                requirements = {name: futures[name] for name in layer.requires}
                futures[layer.name] = pool.submit(self._run_layer, layer, code, features, requirements)
            wait(futures.values())

        outcomes: Dict[str, LayerOutcome] = {}
        missing: List[str] = []
        for layer in self.layers:
            try:
                outcomes[layer.name] = futures[layer.name].result()
            except DependencyUnavailable as exc:
                self.logger.warning("Layer %s skipped: %s", layer.name, exc)
                missing.append(layer.name)
            except Exception as exc:
                self.logger.warning("Layer %s failed: %s", layer.name, exc, exc_info=True)
                missing.append(layer.name)
        return outcomes, missing

    @staticmethod
    def _run_layer(
        layer: Layer,
        code: str,
        features: FeatureSet,
        requirements: Mapping[str, Future],
    ) -> LayerOutcome:
        results: Dict[str, Any] = {}
        for name, future in requirements.items():
            try:
                results[name] = future.result()[0]
            except Exception as exc:
                raise DependencyUnavailable(f"required layer '{name}' is unavailable") from exc
        context = LayerContext(code=code, features=features, results=results)
        result = layer.run(context)
        confidence = layer.confidence(result, context)
        if confidence is not None:
            confidence = min(max(float(confidence), 0.0), 1.0)
        return result, confidence

    def _overall_score(self, confidences: Mapping[str, float]) -> Tuple[float, Dict[str, float]]:
        used = {
            name: self.weights.get(name, 1.0)
            for name in confidences
            if self.weights.get(name, 1.0) > 0
        }
        total = sum(used.values())
        if total <= 0:
            return 0.0, used
        score = sum(confidences[name] * weight for name, weight in used.items()) / total
        return round(min(max(score, 0.0), 1.0), 4), used

    @staticmethod
    def _assemble(outcomes: Mapping[str, LayerOutcome]) -> AnalysisResult:
        fields: Dict[str, Any] = {field_name: None for field_name in _RESULT_FIELDS.values()}
        extras: Dict[str, Any] = {}
        for name, (result, _) in outcomes.items():
            field_name = _RESULT_FIELDS.get(name)
            if field_name is None:
                extras[name] = result
            else:
                fields[field_name] = result
        return AnalysisResult(**fields, extras=extras)


__all__ = ["DEFAULT_WEIGHTS", "DependencyUnavailable", "Synthesizer"]
