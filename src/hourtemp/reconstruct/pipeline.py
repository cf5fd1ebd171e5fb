"""End-to-end hourly reconstruction.

Stages (in order):
1. Solve missing daily extremes from the known hours
2. Patch what is left from proxy daily series, then by interpolation
3. Fill hourly gaps with idealized curve + interpolated residual

The daily table is passed explicitly from stage to stage; stage 3 only reads
it.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

import pandas as pd

from hourtemp.config import ReconstructionConfig
from hourtemp.reconstruct.patch_daily import PatchReport, patch_daily
from hourtemp.reconstruct.residuals import reconstruct
from hourtemp.reconstruct.solve_extremes import solve_unknowns


@dataclass
class ReconstructionResult:
    """Output of interpolate_gaps_hourly.

    Attributes:
        hourly: Reconstructed hourly table with per-hour source tags
        daily: Completed daily extremes with per-value source tags
        report: Daily provenance counts and proxy bias statistics
        equation_counts: Solver diagnostics per initially unknown extreme
    """
    hourly: pd.DataFrame
    daily: pd.DataFrame
    report: PatchReport
    equation_counts: pd.DataFrame

    @property
    def complete(self) -> bool:
        """True if no hour is left missing."""
        return bool(self.hourly["temp_c"].notna().all())


def interpolate_gaps_hourly(
    hourly: pd.DataFrame,
    latitude: float,
    daily: pd.DataFrame | None = None,
    proxies: Mapping[str, pd.DataFrame] | None = None,
    config: ReconstructionConfig | None = None,
) -> ReconstructionResult:
    """Reconstruct a continuous hourly temperature series.

    Args:
        hourly: Hourly table (hourly_temps schema) with gaps as NaN
        latitude: Station latitude in degrees
        daily: Optional daily Tmin/Tmax record for the same days
        proxies: Optional proxy daily tables by name
        config: Reconstruction settings (defaults if None)

    Returns:
        ReconstructionResult

    Raises:
        ValueError: If inputs fail validation or latitude is out of range
    """
    config = config or ReconstructionConfig()
    offset = config.time_of_max_offset

    solved = solve_unknowns(
        hourly,
        daily,
        latitude,
        min_equations=config.min_equations,
        offset=offset,
        joint=config.joint_solve,
        verbose=config.verbose,
    )

    patched, report = patch_daily(
        solved.daily,
        proxies=proxies,
        priority=config.proxy_priority,
        interpolate=config.interpolate_fallback,
        max_mean_bias=config.max_mean_bias,
        max_sd_bias=config.max_sd_bias,
        verbose=config.verbose,
    )

    hourly_out, _ = reconstruct(hourly, patched, latitude, offset=offset, verbose=config.verbose)

    result = ReconstructionResult(
        hourly=hourly_out,
        daily=patched,
        report=report,
        equation_counts=solved.equation_counts,
    )
    if config.verbose:
        print_reconstruction_stats(result)
    return result


def print_reconstruction_stats(result: ReconstructionResult) -> None:
    """Print summary statistics of a reconstruction."""
    hourly = result.hourly
    print("[pipeline] Reconstruction summary:")
    print(f"  Days: {len(result.daily)}, hours: {len(hourly)}")
    for var in ("tmin", "tmax"):
        print(
            f"  {var}: {result.report.total_unknowns(var)} unknown, "
            f"{result.report.still_missing(var)} still missing"
        )
    for stats in result.report.proxy_stats:
        state = "rejected" if stats.rejected else f"filled {stats.n_filled}"
        print(
            f"    proxy {stats.proxy} ({stats.var}): mean bias {stats.mean_bias:+.2f}C, "
            f"sd bias {stats.sd_bias:.2f}C, {state}"
        )
    valid = hourly["temp_c"].dropna()
    if len(valid) > 0:
        print(f"  Temp range: {valid.min():.1f}C to {valid.max():.1f}C")
    else:
        print("  Temp range: no temperatures")


def reconstruct_hourly_file(
    input_path: Path | str,
    output_path: Path | str,
    latitude: float,
    daily_path: Path | str | None = None,
    proxy_paths: Mapping[str, Path | str] | None = None,
    config: ReconstructionConfig | None = None,
) -> Path:
    """Read parquet inputs, reconstruct, write parquet output.

    Besides the hourly table, writes the completed daily table to
    <output>.daily.parquet and the patch report to <output>.report.json.

    Returns:
        Path to written hourly output file

    Raises:
        ValueError: If inputs fail validation
    """
    input_path = Path(input_path)
    output_path = Path(output_path)

    hourly = pd.read_parquet(input_path)
    daily = pd.read_parquet(daily_path) if daily_path is not None else None
    proxies = {name: pd.read_parquet(path) for name, path in (proxy_paths or {}).items()}

    result = interpolate_gaps_hourly(hourly, latitude, daily=daily, proxies=proxies, config=config)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    _write_parquet_atomic(result.hourly, output_path)
    _write_parquet_atomic(result.daily, output_path.with_suffix(".daily.parquet"))
    _write_json_atomic(result.report.to_dict(), output_path.with_suffix(".report.json"))

    print(f"[pipeline] wrote {len(result.hourly)} rows to {output_path}")
    return output_path


def _write_parquet_atomic(df: pd.DataFrame, path: Path) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    df.to_parquet(tmp_path, index=False)
    tmp_path.rename(path)


def _write_json_atomic(payload: dict, path: Path) -> None:
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(payload, indent=2))
    tmp_path.rename(path)
