"""Affect Dynamics Parameters (ADP).

Per-series statistics over the daily valence and arousal values:

- mean
- sample standard deviation (n - 1)
- MSSD, mean squared successive difference: day-to-day instability
  (Jahng et al., 2008)
- lag-1 autocorrelation: emotional inertia (Kuppens et al., 2010)

The trait weights in ``personality`` are calibrated against these exact
formulas. Degenerate series yield ``UNDEFINED_STATISTIC`` instead of
raising or returning NaN.
"""

from __future__ import annotations

import statistics
from dataclasses import asdict, dataclass
from typing import Sequence

from moodlog.models.entry import DailyEntry

UNDEFINED_STATISTIC: float = 0.0


def mean(values: Sequence[float]) -> float:
    if not values:
        return UNDEFINED_STATISTIC
    return statistics.fmean(values)


def stddev(values: Sequence[float]) -> float:
    """Sample standard deviation, 0 for fewer than two values."""
    if len(values) < 2:
        return UNDEFINED_STATISTIC
    return statistics.stdev(values)


def mssd(values: Sequence[float]) -> float:
    """sum((x[i] - x[i-1])^2) / (n - 1), 0 for fewer than two values."""
    if len(values) < 2:
        return UNDEFINED_STATISTIC
    total = sum((values[i] - values[i - 1]) ** 2 for i in range(1, len(values)))
    return total / (len(values) - 1)


def autocorrelation(values: Sequence[float]) -> float:
    """Lag-1 autocorrelation around the series' own mean.

    0 for fewer than three values or a constant series.
    """
    if len(values) < 3:
        return UNDEFINED_STATISTIC
    # float rounding in the mean can leave a constant series with a tiny
    # nonzero variance
    if min(values) == max(values):
        return UNDEFINED_STATISTIC
    m = mean(values)
    num = sum((values[i] - m) * (values[i + 1] - m) for i in range(len(values) - 1))
    den = sum((v - m) ** 2 for v in values)
    if den == 0:
        return UNDEFINED_STATISTIC
    return num / den


@dataclass(frozen=True)
class AffectDynamics:
    valence_mean: float
    valence_sd: float
    valence_mssd: float
    valence_autocorr: float
    arousal_mean: float
    arousal_sd: float
    arousal_mssd: float
    arousal_autocorr: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def compute_adp(entries: Sequence[DailyEntry]) -> AffectDynamics:
    """Compute ADP over entries in the order given (callers sort by date)."""
    valences = [e.valence for e in entries]
    arousals = [e.arousal for e in entries]

    return AffectDynamics(
        valence_mean=mean(valences),
        valence_sd=stddev(valences),
        valence_mssd=mssd(valences),
        valence_autocorr=autocorrelation(valences),
        arousal_mean=mean(arousals),
        arousal_sd=stddev(arousals),
        arousal_mssd=mssd(arousals),
        arousal_autocorr=autocorrelation(arousals),
    )
