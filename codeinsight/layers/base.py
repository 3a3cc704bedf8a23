"""Base classes for analysis layer plugins."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from ..models import FeatureSet


@dataclass(frozen=True)
class LayerContext:
    """Input shared by every layer for one analysis call."""

    code: str
    features: FeatureSet
    results: Mapping[str, Any] = field(default_factory=dict)


class Layer(ABC):
    """Contract for layers fanned out by the synthesizer.

    ``requires`` names layers whose results must be available in
    ``context.results`` before :meth:`run` is called.
    """

    name: str = ""
    requires: Tuple[str, ...] = ()

    @abstractmethod
    def run(self, context: LayerContext) -> Any:
        """Produce this layer's result for the code unit."""

    def confidence(self, result: Any, context: LayerContext) -> Optional[float]:
        """Contribution to the overall score, or None when the layer has none."""
        return None
