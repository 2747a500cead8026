from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class LogLogFit:
    """Descriptive fit of log10(y) = intercept + slope * log10(x)."""

    n: int
    correlation: float
    slope: float
    intercept: float

    def predict(self, x: np.ndarray | list[float]) -> np.ndarray:
        values = np.asarray(x, dtype=float)
        return np.power(10.0, self.intercept + self.slope * np.log10(values))


def _to_float_array(values: np.ndarray | list[float]) -> np.ndarray:
    return np.asarray(values, dtype=float)


def fit_log_log(x: np.ndarray | list[float], y: np.ndarray | list[float]) -> LogLogFit:
    """Pearson r and least-squares line on base-10 logs of paired positive values.

    Zero variance on either axis (including a single point) gives r = 0; zero
    variance on x gives slope 0, so the line sits at mean(log y).
    """
    x_values = _to_float_array(x)
    y_values = _to_float_array(y)
    if x_values.shape != y_values.shape:
        raise ValueError("x and y must have the same length")

    valid = np.isfinite(x_values) & np.isfinite(y_values) & (x_values > 0) & (y_values > 0)
    lx = np.log10(x_values[valid])
    ly = np.log10(y_values[valid])
    n = int(lx.size)
    if n == 0:
        return LogLogFit(n=0, correlation=0.0, slope=0.0, intercept=0.0)

    mean_x = float(lx.mean())
    mean_y = float(ly.mean())
    dx = lx - mean_x
    dy = ly - mean_y
    covariance = float(np.sum(dx * dy))
    ss_x = float(np.sum(dx * dx))
    ss_y = float(np.sum(dy * dy))

    spread = np.sqrt(ss_x) * np.sqrt(ss_y)
    correlation = covariance / spread if spread > 0 else 0.0
    slope = covariance / ss_x if ss_x > 0 else 0.0
    intercept = mean_y - slope * mean_x
    return LogLogFit(
        n=n,
        correlation=float(np.clip(correlation, -1.0, 1.0)),
        slope=slope,
        intercept=intercept,
    )
