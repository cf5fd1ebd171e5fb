"""Chill and heat accumulation models over hourly temperature series."""

from hourtemp.accumulate.chill import (
    DynamicParams,
    DynamicState,
    chilling_hours,
    dynamic_model,
    run_dynamic,
    step_dynamic,
    utah_model,
)
from hourtemp.accumulate.heat import gdh, heat_hours

__all__ = [
    "DynamicParams",
    "DynamicState",
    "step_dynamic",
    "run_dynamic",
    "dynamic_model",
    "chilling_hours",
    "utah_model",
    "heat_hours",
    "gdh",
]
