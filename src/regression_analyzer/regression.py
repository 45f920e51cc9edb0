"""Ordinary least-squares regression over a :class:`Dataset`.

Given a dependent variable Y and independent variables X₁ … X_k, the
engine fits

    Y = β₀ + β₁·X₁ + … + β_k·X_k + ε

by minimising the residual sum of squares.  With the design matrix
X = [1 | X₁ … X_k] the estimator is β̂ = (X'X)⁻¹X'Y, computed here by
``statsmodels.OLS`` through a QR decomposition (default) or the
Moore–Penrose pseudoinverse, never by forming (X'X)⁻¹ explicitly,
which squares the condition number of ill-conditioned designs.

Validation order
~~~~~~~~~~~~~~~~
Inputs are checked in a fixed order and each failure has its own
exception type (see :mod:`regression_analyzer.errors`):

1. At least one independent variable, no repeats, the dependent not
   among the independents, no independent named ``"Intercept"``
   → :class:`~regression_analyzer.errors.ConfigurationError`.
2. Dependent exists and is numeric-typed.
3. Every independent exists and is numeric-typed
   → :class:`~regression_analyzer.errors.VariableTypeError`.
4. More observations than independent variables
   → :class:`~regression_analyzer.errors.InsufficientDataError`.
5. Every required cell holds a finite number
   → :class:`~regression_analyzer.errors.DataQualityError`.
6. Full column rank → :class:`~regression_analyzer.errors.SingularDesignError`.

Rows are never dropped: one bad cell fails the whole fit.

Fit statistics
~~~~~~~~~~~~~~
With ŷ the fitted values and ȳ the mean response:

    SSE = Σ(yᵢ − ŷᵢ)²          residual sum of squares
    SSR = Σ(ŷᵢ − ȳ)²           regression sum of squares
    SST = SSE + SSR
    R²  = 1 − SSE / SST
    adj R² = 1 − (1 − R²)(n − 1)/(n − k − 1)
    σ   = √(SSE / (n − k − 1))

Quantities whose denominator is zero (constant response, or
n = k + 1) are reported as NaN rather than raising.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np
import statsmodels.api as sm

from ._config import get_solver
from ._context import FitContext
from ._results import INTERCEPT, RegressionResult
from ._validation import require_numeric, require_unique
from .dataset import Dataset
from .errors import (
    ConfigurationError,
    DataQualityError,
    InsufficientDataError,
    SingularDesignError,
)

logger = logging.getLogger(__name__)


def _safe_div(num: float, den: float) -> float:
    """``num / den``, or NaN when the denominator is zero."""
    if den == 0:
        return float("nan")
    return float(num / den)


# ------------------------------------------------------------------ #
# Design-matrix construction
# ------------------------------------------------------------------ #


def _build_design(
    dataset: Dataset,
    dependent: str,
    independents: Sequence[str],
    ctx: FitContext,
) -> tuple[np.ndarray, np.ndarray]:
    """Extract the intercept-augmented design matrix and response vector.

    Rows follow ascending observation index.  The first column of the
    returned design is all ones.

    Raises:
        DataQualityError: On the first missing, non-numeric or
            non-finite cell, naming its observation index and variable.
    """
    dep_key = dataset.require_variable(dependent).key
    ind_keys = [dataset.require_variable(name).key for name in independents]

    indices: list[int] = []
    y_rows: list[float] = []
    x_rows: list[list[float]] = []

    for index, obs in dataset.observations():
        columns = [(dependent, dep_key, "dependent")] + [
            (name, key, "independent") for name, key in zip(independents, ind_keys)
        ]
        values: list[float] = []
        for name, key, role in columns:
            cell = obs.get(key)
            if not cell.is_numeric:
                raise DataQualityError(index, name, role, found=cell.kind)
            if not np.isfinite(cell.value):
                raise DataQualityError(index, name, role, found=f"non-finite {cell.value}")
            values.append(cell.value)
        indices.append(index)
        y_rows.append(values[0])
        x_rows.append(values[1:])

    ctx.observation_indices = indices
    y = np.asarray(y_rows, dtype=float)
    X = np.asarray(x_rows, dtype=float).reshape(len(indices), len(independents))
    return np.column_stack([np.ones(len(indices)), X]), y


# ------------------------------------------------------------------ #
# Public entry point
# ------------------------------------------------------------------ #


def linear_regression(
    dataset: Dataset,
    dependent: str,
    independents: Sequence[str],
    *,
    solver: str | None = None,
) -> RegressionResult:
    """Fit ``dependent ~ independents`` by OLS with an intercept.

    The dataset is only read, never modified.

    Args:
        dataset: Source data.  Every stored observation is used, in
            ascending index order.
        dependent: Name of the numeric response variable.
        independents: Names of the numeric predictors, in the order
            their coefficients should be reported.
        solver: ``"qr"`` or ``"pinv"``.  ``None`` uses
            :func:`~regression_analyzer.get_solver`.

    Returns:
        A :class:`~regression_analyzer._results.RegressionResult` whose
        coefficients are named ``["Intercept", *independents]``.

    Raises:
        ConfigurationError: Empty, repeated or reserved names, or a
            name not present in the dataset
            (:class:`~regression_analyzer.errors.VariableNotFoundError`).
        VariableTypeError: A selected variable is not numeric-typed.
        InsufficientDataError: ``n <= k``.
        DataQualityError: A required cell is missing or non-numeric.
        SingularDesignError: The design matrix is rank deficient.
    """
    independents = list(independents)
    method = (solver or get_solver()).strip().lower()
    if method not in ("qr", "pinv"):
        raise ValueError(f"Unknown solver '{solver}'. Choose from: ['pinv', 'qr']")

    # 1. Selection shape.
    if not independents:
        raise ConfigurationError("At least one independent variable is required.")
    require_unique(independents, "an independent variable")
    if dependent in independents:
        raise ConfigurationError(
            f"The dependent variable '{dependent}' cannot also be an "
            f"independent variable."
        )
    if INTERCEPT in independents:
        raise ConfigurationError(
            f"'{INTERCEPT}' is reserved for the intercept term and cannot "
            f"name an independent variable."
        )

    # 2–3. Existence and declared types.
    require_numeric(dataset, dependent, "dependent variable")
    for name in independents:
        require_numeric(dataset, name, "independent variable")

    # 4. Degrees of freedom.
    n = dataset.n_observations
    k = len(independents)
    if n <= k:
        raise InsufficientDataError(n, k)

    # 5. Cells.
    ctx = FitContext(dependent=dependent, independents=independents, solver=method)
    X, y = _build_design(dataset, dependent, independents, ctx)
    ctx.X, ctx.y = X, y

    # 6. Identifiability.  A rank-deficient design has infinitely many
    # least-squares solutions; pinv would silently pick one of them.
    ctx.rank = int(np.linalg.matrix_rank(X))
    if ctx.rank < X.shape[1]:
        raise SingularDesignError(ctx.rank, X.shape[1], [INTERCEPT, *independents])

    logger.debug(
        "linear_regression: %s ~ %s (n=%d, k=%d, solver=%s)",
        dependent,
        " + ".join(independents),
        n,
        k,
        method,
    )

    # hasconst=True: the ones column is ours, statsmodels must not add
    # or hunt for another.
    sm_results = sm.OLS(y, X, hasconst=True).fit(method=method)
    params = np.asarray(sm_results.params, dtype=float)
    fitted = np.asarray(sm_results.fittedvalues, dtype=float)
    residuals = y - fitted
    ctx.sm_results = sm_results
    ctx.fitted_values = fitted
    ctx.residuals = residuals

    y_bar = float(np.mean(y))
    sse = float(np.sum(residuals**2))
    ssr = float(np.sum((fitted - y_bar) ** 2))
    sst = sse + ssr
    df_resid = n - k - 1
    # A constant response has nothing to explain; SSE + SSR is then only
    # rounding noise, so test the response itself.
    if np.ptp(y) == 0:
        r_squared = float("nan")
    else:
        r_squared = 1.0 - _safe_div(sse, sst)
    adj_r_squared = 1.0 - (1.0 - r_squared) * _safe_div(n - 1, df_resid)
    sigma = float(np.sqrt(_safe_div(sse, df_resid)))

    coefficients = dict(zip([INTERCEPT, *independents], params.tolist()))

    return RegressionResult(
        dependent=dependent,
        independents=independents,
        coefficients=coefficients,
        r_squared=r_squared,
        adj_r_squared=adj_r_squared,
        sigma=sigma,
        ssr=ssr,
        sse=sse,
        sst=sst,
        n_observations=n,
        n_independent=k,
        solver=method,
        observation_indices=list(ctx.observation_indices),
        context=ctx,
    )
