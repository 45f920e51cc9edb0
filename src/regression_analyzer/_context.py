"""Fit context: arrays and model objects behind a regression result.

A :class:`FitContext` is filled in by
:func:`~regression_analyzer.regression.linear_regression` as the fit
proceeds and attached to the returned
:class:`~regression_analyzer._results.RegressionResult`.  It keeps the
intermediate artifacts (design matrix, response, fitted values,
residuals, the statsmodels results object) available for inspection
without re-fitting.

The context is **not** part of the serialisation API: it carries
NumPy arrays and an opaque statsmodels object.
:meth:`~regression_analyzer._results.RegressionResult.to_dict` skips
it automatically.

Lifecycle::

    ┌──────────────────────────────────────────────┐
    │  linear_regression()                         │
    │  ├─ ctx = FitContext(dependent, independents)│
    │  ├─ _build_design(…)                         │
    │  │   ├─ ctx.observation_indices = …          │
    │  │   ├─ ctx.X = [1 | x₁ … x_k]               │
    │  │   └─ ctx.y = …                            │
    │  ├─ ctx.rank = matrix_rank(ctx.X)            │
    │  ├─ ctx.sm_results = OLS(y, X).fit(…)        │
    │  │   ├─ ctx.fitted_values = …                │
    │  │   └─ ctx.residuals = …                    │
    │  └─ RegressionResult(…, context=ctx)         │
    └──────────────────────────────────────────────┘
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np


@dataclass
class FitContext:
    """Mutable accumulator for fit artifacts.

    Every array field defaults to ``None`` so the context can be
    created empty and populated incrementally.  A ``None`` field means
    that stage of the fit has not run.
    """

    # ---- Inputs --------------------------------------------------
    dependent: str | None = None
    """Name of the dependent variable."""

    independents: list[str] = field(default_factory=list)
    """Independent variable names in design-column order."""

    observation_indices: list[int] = field(default_factory=list)
    """Dataset row indices used, in design-row order (ascending)."""

    X: np.ndarray | None = None
    """Design matrix ``(n, k + 1)`` with the intercept column first."""

    y: np.ndarray | None = None
    """Response vector ``(n,)``."""

    # ---- Solve ---------------------------------------------------
    solver: str | None = None
    """Least-squares method used (``"qr"`` or ``"pinv"``)."""

    rank: int | None = None
    """Numerical rank of ``X``."""

    sm_results: Any = None
    """Fitted ``statsmodels`` ``RegressionResults`` object."""

    # ---- Outputs -------------------------------------------------
    fitted_values: np.ndarray | None = None
    """Predicted values ``(n,)``."""

    residuals: np.ndarray | None = None
    """Raw residuals ``y - ŷ``, shape ``(n,)``."""


__all__ = ["FitContext"]
