"""Process-wide service state.

Created once after the model has loaded and held for the process lifetime.
Only the metric values and the engine's internal state change afterwards.
"""

from dataclasses import dataclass

from ..common.metrics import MetricsCollector
from .inference_gate import InferenceGate


@dataclass(frozen=True)
class ServiceState:
    """Everything request handlers share."""

    model_name: str
    gate: InferenceGate
    metrics: MetricsCollector
