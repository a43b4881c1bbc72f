"""Pydantic models for analysis configuration files."""
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bigo_mcp.constants import AnalysisDefaults, PropagationDefaults

DETECTOR_KEYS = (
    "factorial",
    "exponential",
    "cubic",
    "quadratic",
    "linearithmic",
    "logarithmic",
    "linear",
    "constant",
)


class AnalysisConfig(BaseModel):
    """Tunables for a classification run, loadable from bigo.yaml."""

    model_config = ConfigDict(extra="forbid")

    max_traversal_depth: int = Field(
        default=AnalysisDefaults.MAX_TRAVERSAL_DEPTH,
        ge=AnalysisDefaults.MIN_TRAVERSAL_DEPTH,
    )
    propagation_confidence_cap: int = Field(default=PropagationDefaults.CONFIDENCE_CAP, ge=0, le=100)
    constant_range_limit: int = Field(default=AnalysisDefaults.CONSTANT_RANGE_LIMIT, ge=0)
    default_confidence: int = Field(default=AnalysisDefaults.CHAIN_DEFAULT_CONFIDENCE, ge=0, le=100)
    result_default_confidence: int = Field(default=AnalysisDefaults.RESULT_DEFAULT_CONFIDENCE, ge=0, le=100)
    min_confidence: Dict[str, int] = Field(default_factory=dict)

    @field_validator("min_confidence")
    @classmethod
    def validate_min_confidence(cls, value: Dict[str, int]) -> Dict[str, int]:
        """Reject unknown detector keys and out-of-range thresholds."""
        for key, threshold in value.items():
            if key not in DETECTOR_KEYS:
                raise ValueError(f"Unknown detector '{key}'. Valid: {', '.join(DETECTOR_KEYS)}")
            if not 0 <= threshold <= 100:
                raise ValueError(f"Threshold for '{key}' must be between 0 and 100, got {threshold}")
        return value

    def threshold_for(self, key: str, default: int) -> int:
        """Return the configured minimum confidence for a detector."""
        return self.min_confidence.get(key, default)
