"""Patch remaining daily Tmin/Tmax gaps from proxy stations and interpolation.

This stage:
- Computes, per proxy and variable, the bias of the proxy against the target
  over the days both have values (mean and standard deviation of
  proxy - target, plus the ratio of standard deviations)
- Fills gaps in caller priority order with the proxy value minus its mean
  bias; the spread difference is reported, never corrected
- Optionally rejects proxies whose bias exceeds configured limits
- Linearly interpolates what is still missing between known neighbours
  (Tmin and Tmax independently)
- Tags each filled value with its provenance and counts them in a PatchReport

Leading or trailing gaps with no anchor are not an error: they stay NaN and
are reported as still_missing. Polar-night Tmax without a daily record is
reported the same way; the hourly curve does not depend on it.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Sequence

import numpy as np
import pandas as pd

from hourtemp.schemas.daily_extremes import (
    DAILY_EXTREMES_FIELDS,
    EXTREME_COLUMNS,
    validate_daily_extremes,
    with_observed_sources,
)
from hourtemp.schemas.provenance import (
    SOURCE_INTERPOLATED,
    SOURCE_MISSING,
    SOURCE_SOLVED,
    is_proxy_source,
    proxy_name,
    proxy_source,
)


@dataclass
class ProxyStats:
    """Bias of one proxy series against the target for one variable.

    Attributes:
        proxy: Proxy name
        var: "tmin" or "tmax"
        n_overlap: Days where both target and proxy have values
        mean_bias: Mean of proxy - target (subtracted when patching)
        sd_bias: Standard deviation of proxy - target (reported only)
        sd_ratio: Standard deviation of proxy over that of target
        rejected: True if the proxy was not used for this variable
        n_filled: Values this proxy filled
    """
    proxy: str
    var: str
    n_overlap: int
    mean_bias: float
    sd_bias: float
    sd_ratio: float
    rejected: bool = False
    n_filled: int = 0


@dataclass
class PatchReport:
    """Provenance counts and proxy statistics for one reconstruction.

    Attributes:
        counts: var -> {"solved", "proxy:<name>"..., "interpolated",
            "still_missing"} -> number of daily values
        proxy_stats: Bias statistics per proxy and variable

    Under polar night the curve has no daytime and Tmax enters no hourly
    equation, so Tmax counts as still_missing for those days even though
    every hour reconstructs from Tmin alone.
    """
    counts: dict[str, dict[str, int]] = field(default_factory=dict)
    proxy_stats: list[ProxyStats] = field(default_factory=list)

    def total_unknowns(self, var: str) -> int:
        """Number of values of `var` that were not observed."""
        return sum(self.counts.get(var, {}).values())

    def still_missing(self, var: str) -> int:
        return self.counts.get(var, {}).get("still_missing", 0)

    def filled_by_proxy(self, var: str) -> dict[str, int]:
        """Values of `var` filled by each proxy, keyed by proxy name."""
        return {
            proxy_name(tag): n
            for tag, n in self.counts.get(var, {}).items()
            if is_proxy_source(tag)
        }

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "counts": {var: dict(c) for var, c in self.counts.items()},
            "proxy_stats": [
                {
                    k: (None if isinstance(v, float) and np.isnan(v) else v)
                    for k, v in asdict(s).items()
                }
                for s in self.proxy_stats
            ],
        }


def compute_bias(target: pd.Series, proxy: pd.Series) -> tuple[int, float, float, float]:
    """Bias statistics of proxy against target over their overlap.

    Both series must share an index (calendar days).

    Returns:
        (n_overlap, mean_bias, sd_bias, sd_ratio); statistics are NaN where
        the overlap is too short to define them
    """
    both = target.notna() & proxy.notna()
    n_overlap = int(both.sum())
    if n_overlap == 0:
        return 0, np.nan, np.nan, np.nan

    diff = proxy[both] - target[both]
    mean_bias = float(diff.mean())
    sd_bias = float(diff.std()) if n_overlap > 1 else np.nan
    sd_target = float(target[both].std()) if n_overlap > 1 else np.nan
    sd_proxy = float(proxy[both].std()) if n_overlap > 1 else np.nan
    sd_ratio = sd_proxy / sd_target if sd_target and not np.isnan(sd_target) else np.nan
    return n_overlap, mean_bias, sd_bias, sd_ratio


def _align_proxy(days: pd.DataFrame, proxy: pd.DataFrame, name: str) -> pd.DataFrame:
    """Proxy values on the target's calendar (NaN where the proxy has no row)."""
    validate_daily_extremes(proxy, dataset=f"proxy:{name}")
    cols = ["year", "month", "day"] + list(EXTREME_COLUMNS.values())
    return days[["year", "month", "day"]].merge(
        proxy[cols].astype({"year": int, "month": int, "day": int}),
        on=["year", "month", "day"],
        how="left",
    )


def _is_rejected(
    n_overlap: int,
    mean_bias: float,
    sd_bias: float,
    max_mean_bias: float | None,
    max_sd_bias: float | None,
) -> bool:
    if n_overlap == 0:
        return True
    if max_mean_bias is not None and abs(mean_bias) > max_mean_bias:
        return True
    if max_sd_bias is not None and not np.isnan(sd_bias) and sd_bias > max_sd_bias:
        return True
    return False


def _count_sources(days: pd.DataFrame, proxy_names: Sequence[str]) -> dict[str, dict[str, int]]:
    counts: dict[str, dict[str, int]] = {}
    for var in EXTREME_COLUMNS:
        tags = days[f"{var}_source"]
        var_counts = {"solved": int((tags == SOURCE_SOLVED).sum())}
        for name in proxy_names:
            var_counts[proxy_source(name)] = int((tags == proxy_source(name)).sum())
        var_counts["interpolated"] = int((tags == SOURCE_INTERPOLATED).sum())
        var_counts["still_missing"] = int((tags == SOURCE_MISSING).sum())
        counts[var] = var_counts
    return counts


def patch_daily(
    daily: pd.DataFrame,
    proxies: Mapping[str, pd.DataFrame] | None = None,
    priority: Sequence[str] | None = None,
    interpolate: bool = True,
    max_mean_bias: float | None = None,
    max_sd_bias: float | None = None,
    verbose: bool = False,
) -> tuple[pd.DataFrame, PatchReport]:
    """Fill missing daily extremes from proxies, then by interpolation.

    Args:
        daily: Daily table; *_source columns are derived if absent
        proxies: Proxy daily tables by name (read-only)
        priority: Order in which proxies are tried (default: mapping order).
            Names not in `proxies` raise ValueError.
        interpolate: Fill remaining anchored gaps by linear interpolation
        max_mean_bias: Reject a proxy whose |mean bias| exceeds this (°C)
        max_sd_bias: Reject a proxy whose sd bias exceeds this (°C)
        verbose: If True, print a summary

    Returns:
        (patched daily table, PatchReport)

    Raises:
        ValueError: If the daily table or a proxy fails validation
    """
    validate_daily_extremes(daily)
    days = with_observed_sources(daily).reset_index(drop=True)

    proxies = dict(proxies or {})
    order = list(priority) if priority is not None else list(proxies)
    unknown_names = [name for name in order if name not in proxies]
    if unknown_names:
        raise ValueError(f"Priority names not among proxies: {unknown_names}")

    report = PatchReport()
    # Bias is measured against the target as it enters this stage
    entering = {col: days[col].copy() for col in EXTREME_COLUMNS.values()}

    for name in order:
        aligned = _align_proxy(days, proxies[name], name)
        for var, col in EXTREME_COLUMNS.items():
            n_overlap, mean_bias, sd_bias, sd_ratio = compute_bias(entering[col], aligned[col])
            stats = ProxyStats(
                proxy=name,
                var=var,
                n_overlap=n_overlap,
                mean_bias=mean_bias,
                sd_bias=sd_bias,
                sd_ratio=sd_ratio,
                rejected=_is_rejected(n_overlap, mean_bias, sd_bias, max_mean_bias, max_sd_bias),
            )
            report.proxy_stats.append(stats)
            if stats.rejected:
                continue

            fill = days[col].isna() & aligned[col].notna()
            days.loc[fill, col] = aligned.loc[fill, col] - mean_bias
            days.loc[fill, f"{var}_source"] = proxy_source(name)
            stats.n_filled = int(fill.sum())

    if interpolate:
        for var, col in EXTREME_COLUMNS.items():
            before = days[col].isna()
            days[col] = days[col].interpolate(method="linear", limit_area="inside")
            filled = before & days[col].notna()
            days.loc[filled, f"{var}_source"] = SOURCE_INTERPOLATED

    report.counts = _count_sources(days, order)

    if verbose:
        for var in EXTREME_COLUMNS:
            c = report.counts[var]
            by_proxy = report.filled_by_proxy(var)
            detail = ", ".join(f"{name}={n}" for name, n in by_proxy.items())
            print(
                f"[patch] {var}: {report.total_unknowns(var)} unknown, "
                f"{c['solved']} solved, {sum(by_proxy.values())} from proxies ({detail}), "
                f"{c['interpolated']} interpolated, {c['still_missing']} still missing"
            )

    return days[DAILY_EXTREMES_FIELDS], report
