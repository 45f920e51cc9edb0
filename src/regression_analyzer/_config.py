"""Runtime configuration for the regression_analyzer package.

Two settings are configurable:

* **Solver**: the least-squares method handed to ``statsmodels``:
  ``"qr"`` (QR decomposition, the default) or ``"pinv"``
  (Moore–Penrose pseudoinverse).
* **Moderation threshold**: the absolute interaction coefficient
  above which :func:`~regression_analyzer.moderation.moderation_analysis`
  reports moderation (default ``0.001``).

Resolution order for each (first match wins):
    1. Programmatic override via :func:`set_solver` /
       :func:`set_moderation_threshold`.
    2. The ``REGRESSION_ANALYZER_SOLVER`` /
       ``REGRESSION_ANALYZER_MODERATION_THRESHOLD`` environment
       variables.
    3. The built-in default.

Examples:
    Use the pseudoinverse from the shell::

        export REGRESSION_ANALYZER_SOLVER=pinv

    Or programmatically::

        import regression_analyzer
        regression_analyzer.set_solver("pinv")

    Restore the default resolution order::

        regression_analyzer.set_solver("auto")
        regression_analyzer.set_moderation_threshold(None)
"""

from __future__ import annotations

import logging
import math
import os

logger = logging.getLogger(__name__)

_VALID_SOLVERS = {"qr", "pinv", "auto"}
DEFAULT_SOLVER = "qr"
DEFAULT_MODERATION_THRESHOLD = 0.001

SOLVER_ENV = "REGRESSION_ANALYZER_SOLVER"
THRESHOLD_ENV = "REGRESSION_ANALYZER_MODERATION_THRESHOLD"

# Sentinels indicating "no programmatic override has been set".
_solver_override: str | None = None
_threshold_override: float | None = None


def get_solver() -> str:
    """Return the active solver name (``"qr"`` or ``"pinv"``).

    Resolution order:
        1. Value set by :func:`set_solver` (unless ``"auto"``).
        2. ``REGRESSION_ANALYZER_SOLVER`` environment variable.
        3. ``"qr"``.
    """
    if _solver_override is not None and _solver_override != "auto":
        return _solver_override

    env = os.environ.get(SOLVER_ENV, "").strip().lower()
    if env in ("qr", "pinv"):
        return env

    return DEFAULT_SOLVER


def set_solver(name: str) -> None:
    """Override the solver selection.

    Args:
        name: One of ``"qr"``, ``"pinv"``, or ``"auto"``
            (case-insensitive).  ``"auto"`` restores the default
            resolution order.

    Raises:
        ValueError: If *name* is not a recognised solver.
    """
    global _solver_override
    normalised = name.strip().lower()
    if normalised not in _VALID_SOLVERS:
        raise ValueError(
            f"Unknown solver '{name}'. Choose from: {sorted(_VALID_SOLVERS)}"
        )
    _solver_override = normalised


def _validate_threshold(value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ValueError(
            f"Moderation threshold must be a finite non-negative number, got {value}."
        )
    return value


def get_moderation_threshold() -> float:
    """Return the active moderation threshold.

    An unparsable or invalid environment value is ignored (with a
    warning in the log) and the default is used.
    """
    if _threshold_override is not None:
        return _threshold_override

    env = os.environ.get(THRESHOLD_ENV, "").strip()
    if env:
        try:
            return _validate_threshold(float(env))
        except ValueError:
            logger.warning(
                "Ignoring invalid %s=%r; using default %s",
                THRESHOLD_ENV,
                env,
                DEFAULT_MODERATION_THRESHOLD,
            )

    return DEFAULT_MODERATION_THRESHOLD


def set_moderation_threshold(value: float | None) -> None:
    """Override the moderation threshold; ``None`` restores resolution.

    Raises:
        ValueError: If *value* is negative, NaN or infinite.
    """
    global _threshold_override
    _threshold_override = None if value is None else _validate_threshold(value)
