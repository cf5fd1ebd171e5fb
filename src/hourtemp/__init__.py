"""Hourly temperature reconstruction and agroclimatic accumulation."""

from hourtemp.config import ReconstructionConfig
from hourtemp.reconstruct.pipeline import ReconstructionResult, interpolate_gaps_hourly

__all__ = [
    "ReconstructionConfig",
    "ReconstructionResult",
    "interpolate_gaps_hourly",
]
