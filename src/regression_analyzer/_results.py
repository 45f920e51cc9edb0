"""Typed result objects for regression, mediation and moderation.

Frozen dataclasses that provide:

* **Attribute access**: ``result.r_squared``, ``report.a_path``, etc.
* **Dict-like access**: ``result["r_squared"]``, ``result.get("key")``,
  ``"key" in result`` for consumers that prefer bracket syntax.
* **Serialisation**: ``.to_dict()`` returns a plain ``dict[str, Any]``
  with all NumPy types converted to native Python and nested results
  expanded.

Three concrete result types mirror the three analyses:

* :class:`RegressionResult`: one OLS fit.
* :class:`MediationReport`: three fits combined into path effects.
* :class:`ModerationReport`: one fit with an interaction term.

All are frozen (immutable after construction): a result is a
snapshot of a completed analysis.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING, Any, ClassVar

import numpy as np

if TYPE_CHECKING:
    from ._context import FitContext

INTERCEPT = "Intercept"
"""Coefficient label of the intercept term."""

# ------------------------------------------------------------------ #
# Serialisation helper
# ------------------------------------------------------------------ #


def _numpy_to_python(obj: Any) -> Any:
    """Recursively convert NumPy scalars/arrays to Python-native types.

    Handles nested dicts, lists, result objects, np.ndarray,
    np.integer, and np.floating so that :meth:`to_dict` returns a
    fully JSON-serialisable structure.
    """
    if isinstance(obj, _DictAccessMixin):
        return obj.to_dict()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, np.bool_):
        return bool(obj)
    if isinstance(obj, np.integer):
        return int(obj)
    if isinstance(obj, np.floating):
        return float(obj)
    if isinstance(obj, dict):
        return {k: _numpy_to_python(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        converted = [_numpy_to_python(item) for item in obj]
        return type(obj)(converted)
    return obj


# ------------------------------------------------------------------ #
# Dict-compatibility mixin
# ------------------------------------------------------------------ #


class _DictAccessMixin:
    """Dict-like access convenience for result dataclasses.

    Supports three access patterns:

    1. ``result["key"]``: raises ``KeyError`` on miss
    2. ``result.get(key, d)``: returns *d* on miss (default ``None``)
    3. ``"key" in result``: membership test
    """

    # Fields to exclude from to_dict() serialisation.
    _EXCLUDE_FROM_DICT: ClassVar[frozenset[str]] = frozenset({"context"})

    def __getitem__(self, key: str) -> Any:
        """Attribute lookup via bracket syntax."""
        try:
            return getattr(self, key)
        except AttributeError:
            raise KeyError(key) from None

    def get(self, key: str, default: Any = None) -> Any:
        """Attribute lookup with a fallback default."""
        return getattr(self, key, default)

    def __contains__(self, key: object) -> bool:
        """Membership test: ``"key" in result``."""
        if not isinstance(key, str):
            return False
        return hasattr(self, key)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary.

        Runs :func:`_numpy_to_python` on every field value so the
        returned dict is fully JSON-serialisable.
        """
        result: dict[str, Any] = {}
        for f in fields(self):  # type: ignore[arg-type]
            if f.name in self._EXCLUDE_FROM_DICT:
                continue
            result[f.name] = _numpy_to_python(getattr(self, f.name))
        return result


# ------------------------------------------------------------------ #
# RegressionResult
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class RegressionResult(_DictAccessMixin):
    """Result of one OLS fit with an intercept.

    ``coefficients`` is an ordered mapping: ``"Intercept"`` first, then
    one entry per independent variable in call order.  Look terms up by
    name with :meth:`coefficient`; never rely on positions.
    """

    # ---- Model specification ---------------------------------------
    dependent: str
    """Dependent (response) variable name."""

    independents: list[str]
    """Independent variable names in call order."""

    # ---- Coefficients ----------------------------------------------
    coefficients: dict[str, float]
    """Ordered coefficient name → estimate, intercept first."""

    # ---- Fit statistics --------------------------------------------
    r_squared: float
    """Coefficient of determination, ``SSR / SST``."""

    adj_r_squared: float
    """``1 − (1 − R²)(n − 1)/(n − k − 1)``."""

    sigma: float
    """Residual standard error, ``√(SSE / (n − k − 1))``."""

    ssr: float
    """Regression (explained) sum of squares."""

    sse: float
    """Residual sum of squares."""

    sst: float
    """Total sum of squares, ``SSE + SSR``."""

    # ---- Sample metadata -------------------------------------------
    n_observations: int
    """Number of rows used."""

    n_independent: int
    """Number of independent variables ``k``."""

    solver: str
    """Least-squares method used (``"qr"`` or ``"pinv"``)."""

    observation_indices: list[int] = field(default_factory=list)
    """Dataset indices of the rows used, ascending."""

    # ---- Computation context (not serialised) ----------------------
    context: FitContext | None = field(default=None, repr=False, compare=False)
    """Design matrix, residuals and the statsmodels results object.
    Excluded from ``to_dict()`` serialisation."""

    @property
    def coefficient_names(self) -> list[str]:
        return list(self.coefficients)

    @property
    def coefficient_values(self) -> list[float]:
        return list(self.coefficients.values())

    @property
    def intercept(self) -> float:
        return self.coefficients[INTERCEPT]

    def coefficient(self, name: str) -> float:
        """Return the estimate for the term called *name*.

        Raises:
            KeyError: If the model has no such term; the message lists
                the terms it does have.
        """
        try:
            return self.coefficients[name]
        except KeyError:
            raise KeyError(
                f"No coefficient named '{name}'. Available: "
                f"{self.coefficient_names}"
            ) from None


# ------------------------------------------------------------------ #
# MediationReport
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class MediationReport(_DictAccessMixin):
    """Path decomposition of X → Y through a single mediator M.

    Point estimates only; no standard errors or intervals are
    computed, so the report is descriptive rather than inferential.
    """

    predictor: str
    """Predictor (X)."""

    mediator: str
    """Mediator (M)."""

    outcome: str
    """Outcome (Y)."""

    # ---- Path coefficients -----------------------------------------
    a_path: float
    """X → M: coefficient of X in ``M ~ X``."""

    b_path: float
    """M → Y | X: coefficient of M in ``Y ~ X + M``."""

    total_effect: float
    """c: coefficient of X in ``Y ~ X``."""

    direct_effect: float
    """c′: coefficient of X in ``Y ~ X + M``."""

    indirect_effect: float
    """a × b."""

    total_effect_check: float
    """c′ + a × b, reported next to c for comparison."""

    proportion_mediated: float
    """indirect / c, NaN when c is (numerically) zero."""

    interpretation: str
    """Plain-language summary of the decomposition."""

    # ---- Underlying fits -------------------------------------------
    mediator_model: RegressionResult
    """Regression 1: ``M ~ X``."""

    outcome_model: RegressionResult
    """Regression 2: ``Y ~ X + M``."""

    total_model: RegressionResult
    """Regression 3: ``Y ~ X``."""


# ------------------------------------------------------------------ #
# ModerationReport
# ------------------------------------------------------------------ #


@dataclass(frozen=True)
class ModerationReport(_DictAccessMixin):
    """Interaction-term test of whether W moderates X → Y.

    The verdict compares ``|interaction_coef|`` with a fixed threshold.
    It is a descriptive heuristic, not a significance test.
    """

    predictor: str
    """Predictor (X)."""

    moderator: str
    """Moderator (W)."""

    outcome: str
    """Outcome (Y)."""

    interaction_name: str
    """Name of the derived product column (``"X*W"``)."""

    interaction_coef: float
    """Coefficient of the product term."""

    threshold: float
    """Absolute-coefficient cut-off used for the verdict."""

    is_moderated: bool
    """``|interaction_coef| > threshold``."""

    verdict: str
    """``"moderation present"`` or ``"no significant moderation"``."""

    interpretation: str
    """Plain-language summary, flagged as descriptive."""

    model: RegressionResult
    """The fit ``Y ~ X + W + X*W``."""

    centered: bool = False
    """Whether X and W were mean-centred before forming the product."""


__all__ = [
    "INTERCEPT",
    "MediationReport",
    "ModerationReport",
    "RegressionResult",
]
