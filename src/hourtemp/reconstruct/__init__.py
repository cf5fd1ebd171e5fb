"""Hourly temperature reconstruction stages."""

from hourtemp.reconstruct.patch_daily import PatchReport, ProxyStats, compute_bias, patch_daily
from hourtemp.reconstruct.pipeline import (
    ReconstructionResult,
    interpolate_gaps_hourly,
    print_reconstruction_stats,
    reconstruct_hourly_file,
)
from hourtemp.reconstruct.residuals import interpolate_residuals, reconstruct
from hourtemp.reconstruct.solve_extremes import (
    DEFAULT_MIN_EQUATIONS,
    SolveResult,
    build_equation_index,
    solve_unknowns,
)

__all__ = [
    "DEFAULT_MIN_EQUATIONS",
    "SolveResult",
    "build_equation_index",
    "solve_unknowns",
    "PatchReport",
    "ProxyStats",
    "compute_bias",
    "patch_daily",
    "interpolate_residuals",
    "reconstruct",
    "ReconstructionResult",
    "interpolate_gaps_hourly",
    "print_reconstruction_stats",
    "reconstruct_hourly_file",
]
