"""Solve missing daily Tmin/Tmax from known hourly temperatures.

Every known hour gives one linear equation in the daily extremes around it
(see diurnal.curve). This stage:
- Indexes equations by the (day, var) extremes they involve
- Solves each unknown by least squares from the equations in which every
  other extreme is already known (coordinate-wise passes, repeated while
  newly solved values unlock neighbours)
- Optionally solves the remaining entangled unknowns jointly
- Leaves an unknown missing when fewer than `min_equations` equations
  support it, or when its system is degenerate

Insufficient data is not an error: unsolved extremes stay NaN and are left
for the daily patcher.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

import numpy as np
import pandas as pd
from scipy import sparse
from scipy.sparse.linalg import splu

from hourtemp.diurnal.curve import (
    DEFAULT_TIME_OF_MAX_OFFSET,
    HOURS_PER_DAY,
    day_equations,
    sun_times_for_days,
)
from hourtemp.schemas.daily_extremes import (
    EXTREME_COLUMNS,
    align_to_hourly_calendar,
    daily_dates,
    validate_daily_extremes,
    with_observed_sources,
)
from hourtemp.schemas.hourly_temps import day_index, validate_hourly_temps
from hourtemp.schemas.provenance import SOURCE_SOLVED

DEFAULT_MIN_EQUATIONS = 5

# Solutions outside this range are treated as degenerate fits
_PLAUSIBLE_RANGE = (-90.0, 60.0)

# Smallest LU pivot of the normal matrix, relative to the largest, below
# which a joint system counts as rank deficient
_PIVOT_TOLERANCE = 1e-12

EQUATION_COUNT_FIELDS = [
    "year", "month", "day", "var", "n_equations", "solved", "fit_rmse",
]

Key = tuple[int, str]
# (absolute coefficients, observed temperature)
Equation = tuple[dict[Key, float], float]


@dataclass
class SolveResult:
    """Output of solve_unknowns.

    Attributes:
        daily: Daily table with solved values and *_source provenance
        equation_counts: One row per initially unknown extreme with the
            number of usable equations, whether it was solved and the RMS
            residual of the fit
    """
    daily: pd.DataFrame
    equation_counts: pd.DataFrame

    @property
    def n_solved(self) -> int:
        return int(self.equation_counts["solved"].sum())


def build_equation_index(
    temps: np.ndarray,
    suns: list,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
) -> dict[Key, list[Equation]]:
    """Map every (day, var) extreme to the known-hour equations it appears in.

    Args:
        temps: Hourly temperatures shaped (n_days, 24), NaN where unknown
        suns: SunTimes per day
        offset: Hours after solar noon of the daily maximum
    """
    n_days = len(suns)
    index: dict[Key, list[Equation]] = defaultdict(list)
    for day in range(n_days):
        for eq in day_equations(day, suns, offset):
            observed = temps[day, eq.hour]
            if np.isnan(observed):
                continue
            coefs = eq.resolve(day, n_days)
            target = observed - eq.intercept
            for key in coefs:
                index[key].append((coefs, target))
    return index


def _fit_rmse(design: np.ndarray, solution: np.ndarray, rhs: np.ndarray) -> float:
    return float(np.sqrt(np.mean((design @ solution - rhs) ** 2)))


def _plausible(values: np.ndarray) -> bool:
    lo, hi = _PLAUSIBLE_RANGE
    return bool(np.all(np.isfinite(values)) and np.all((values >= lo) & (values <= hi)))


def _solve_single(
    key: Key,
    equations: list[Equation],
    values: dict[Key, float],
) -> tuple[float, float] | None:
    """Least-squares estimate of one extreme with all co-predictors fixed."""
    design = np.empty((len(equations), 1))
    rhs = np.empty(len(equations))
    for row, (coefs, target) in enumerate(equations):
        design[row, 0] = coefs[key]
        rhs[row] = target - sum(c * values[k] for k, c in coefs.items() if k != key)

    try:
        solution, _, rank, _ = np.linalg.lstsq(design, rhs, rcond=None)
    except np.linalg.LinAlgError:
        return None
    if rank < 1 or not _plausible(solution):
        return None
    return float(solution[0]), _fit_rmse(design, solution, rhs)


def _solve_joint(
    unknowns: list[Key],
    equations: list[Equation],
    values: dict[Key, float],
) -> dict[Key, tuple[float, float]] | None:
    """Least-squares estimate of several entangled extremes at once.

    Every equation touches at most three neighbouring days, so the design
    matrix is sparse and its normal matrix banded. Both stay sparse, which
    keeps memory linear in the length of the series.
    """
    column = {key: i for i, key in enumerate(unknowns)}
    rows: list[int] = []
    cols: list[int] = []
    data: list[float] = []
    rhs = np.empty(len(equations))
    for row, (coefs, target) in enumerate(equations):
        fixed = 0.0
        for key, coef in coefs.items():
            if key in column:
                rows.append(row)
                cols.append(column[key])
                data.append(coef)
            else:
                fixed += coef * values[key]
        rhs[row] = target - fixed

    design = sparse.csc_matrix((data, (rows, cols)), shape=(len(equations), len(unknowns)))
    normal = (design.T @ design).tocsc()
    try:
        lu = splu(normal)
    except RuntimeError:
        # Exactly singular normal matrix
        return None
    pivots = np.abs(lu.U.diagonal())
    if pivots.min() <= _PIVOT_TOLERANCE * pivots.max():
        return None
    solution = lu.solve(design.T @ rhs)
    if not _plausible(solution):
        return None

    residual = design @ solution - rhs
    results = {}
    for key, col in column.items():
        rows_k = design.indices[design.indptr[col]:design.indptr[col + 1]]
        results[key] = (float(solution[col]), float(np.sqrt(np.mean(residual[rows_k] ** 2))))
    return results


def solve_extremes(
    temps: np.ndarray,
    values: dict[Key, float],
    suns: list,
    min_equations: int = DEFAULT_MIN_EQUATIONS,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
    joint: bool = True,
) -> tuple[dict[Key, float], dict[Key, int], dict[Key, float]]:
    """Array-level solver behind solve_unknowns.

    Args:
        temps: Hourly temperatures shaped (n_days, 24), NaN where unknown
        values: (day, var) -> extreme, NaN where unknown
        suns: SunTimes per day
        min_equations: Minimum usable equations to attempt a solve
        offset: Hours after solar noon of the daily maximum
        joint: If True, solve unknowns left after the coordinate-wise passes
            jointly from equations among themselves

    Returns:
        (values with solutions filled in, usable equation count per initial
        unknown, fit RMSE per solved unknown)
    """
    values = dict(values)
    index = build_equation_index(temps, suns, offset)
    unknown = {key for key, value in values.items() if np.isnan(value)}
    counts: dict[Key, int] = {key: 0 for key in unknown}
    fit_errors: dict[Key, float] = {}

    def is_fixed(k: Key) -> bool:
        return k not in unknown

    progress = True
    while progress:
        progress = False
        for key in sorted(unknown):
            usable = [
                (coefs, target)
                for coefs, target in index.get(key, [])
                if all(k == key or is_fixed(k) for k in coefs)
            ]
            counts[key] = len(usable)
            if len(usable) < min_equations:
                continue
            solved = _solve_single(key, usable, values)
            if solved is None:
                continue
            values[key], fit_errors[key] = solved
            unknown.discard(key)
            progress = True

    if joint and unknown:
        _solve_remaining_jointly(index, unknown, values, counts, fit_errors, min_equations)

    return values, counts, fit_errors


def _solve_remaining_jointly(
    index: dict[Key, list[Equation]],
    unknown: set[Key],
    values: dict[Key, float],
    counts: dict[Key, int],
    fit_errors: dict[Key, float],
    min_equations: int,
) -> None:
    """Jointly solve entangled unknowns that each have enough support.

    Unknowns with fewer than `min_equations` equations among the candidate
    set are dropped (and the equations they appear in with them) until the
    set is stable. Mutates values, counts, fit_errors and unknown.
    """
    candidates = set(unknown)
    while candidates:
        support = {
            key: [
                eq for eq in index.get(key, [])
                if all(k in candidates or k not in unknown for k in eq[0])
            ]
            for key in candidates
        }
        weak = {key for key, eqs in support.items() if len(eqs) < min_equations}
        if not weak:
            break
        candidates -= weak

    if not candidates:
        return

    # Deduplicate equations shared between unknowns (same object identity)
    seen: set[int] = set()
    equations: list[Equation] = []
    for key in sorted(candidates):
        counts[key] = len(support[key])
        for eq in support[key]:
            if id(eq) not in seen:
                seen.add(id(eq))
                equations.append(eq)

    results = _solve_joint(sorted(candidates), equations, values)
    if results is None:
        return
    for key, (value, rmse) in results.items():
        values[key] = value
        fit_errors[key] = rmse
        unknown.discard(key)


def solve_unknowns(
    hourly: pd.DataFrame,
    daily: pd.DataFrame | None,
    latitude: float,
    min_equations: int = DEFAULT_MIN_EQUATIONS,
    offset: float = DEFAULT_TIME_OF_MAX_OFFSET,
    joint: bool = True,
    verbose: bool = False,
) -> SolveResult:
    """Fill missing daily extremes that the hourly record determines.

    Args:
        hourly: Hourly table (hourly_temps schema)
        daily: Daily table over the same days, or None when no daily record
            exists (all extremes start unknown)
        latitude: Station latitude in degrees
        min_equations: Minimum usable equations per unknown (default 5)
        offset: Hours after solar noon of the daily maximum
        joint: Solve remaining entangled unknowns jointly
        verbose: If True, print a summary line

    Returns:
        SolveResult with the daily table and per-unknown diagnostics

    Raises:
        ValueError: If the inputs fail schema validation
    """
    validate_hourly_temps(hourly)
    if daily is not None:
        validate_daily_extremes(daily)

    days = with_observed_sources(align_to_hourly_calendar(daily, hourly))
    n_days = len(days)
    if n_days == 0:
        return SolveResult(days, pd.DataFrame(columns=EQUATION_COUNT_FIELDS))

    suns = sun_times_for_days(daily_dates(days), latitude)
    temps = np.full((n_days, HOURS_PER_DAY), np.nan)
    day_rows = day_index(hourly).to_numpy()
    temps[day_rows, hourly["hour"].to_numpy(dtype=int)] = hourly["temp_c"].to_numpy(dtype=float)

    values: dict[Key, float] = {}
    for var, col in EXTREME_COLUMNS.items():
        for day, value in enumerate(days[col].to_numpy(dtype=float)):
            values[(day, var)] = value

    solved_values, counts, fit_errors = solve_extremes(
        temps, values, suns, min_equations=min_equations, offset=offset, joint=joint,
    )

    rows = []
    for (day, var), n_eq in sorted(counts.items()):
        col = EXTREME_COLUMNS[var]
        solved = (day, var) in fit_errors
        if solved:
            days.loc[day, col] = solved_values[(day, var)]
            days.loc[day, f"{var}_source"] = SOURCE_SOLVED
        rows.append({
            "year": int(days.loc[day, "year"]),
            "month": int(days.loc[day, "month"]),
            "day": int(days.loc[day, "day"]),
            "var": var,
            "n_equations": n_eq,
            "solved": solved,
            "fit_rmse": fit_errors.get((day, var), np.nan),
        })

    equation_counts = pd.DataFrame(rows, columns=EQUATION_COUNT_FIELDS)
    result = SolveResult(days, equation_counts)

    if verbose:
        print(
            f"[solve] {len(counts)} unknown extremes, {result.n_solved} solved "
            f"(min_equations={min_equations})"
        )

    return result
