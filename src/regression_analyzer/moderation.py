"""Moderation via an X × W interaction term.

A moderator W changes the *strength* of the X → Y relationship.  The
test adds the element-wise product X·W as a third predictor:

    Y = β₀ + β₁·X + β₂·W + β₃·(X·W) + ε

so that the slope of X is β₁ + β₃·W.  A non-zero β₃ means the slope
of X depends on the level of W.

The product column is materialised on a private
:meth:`~regression_analyzer.dataset.Dataset.clone`; the caller's
dataset never gains the extra column.  Rows where X or W is not a
number get an empty product cell, which the regression engine then
rejects instead of treating it as zero.

The verdict is ``|β₃| > threshold`` (default 0.001).  No standard
error is available, so this is a descriptive heuristic and not a
significance test.

Optional mean-centring (``center=True``) subtracts the sample means
of X and W before forming the product.  β₃ is unchanged by centring;
β₁ and β₂ become the effects at the mean of the other variable.
"""

from __future__ import annotations

import logging

import numpy as np

from ._config import get_moderation_threshold
from ._results import ModerationReport
from ._validation import require_distinct, require_numeric
from .cells import MISSING
from .dataset import Dataset
from .errors import ConfigurationError, VariableTypeError
from .regression import linear_regression
from .variables import Variable, VariableType

logger = logging.getLogger(__name__)

MODERATION_PRESENT = "moderation present"
NO_MODERATION = "no significant moderation"


def interaction_name(predictor: str, moderator: str) -> str:
    """Column name of the X × W product term."""
    return f"{predictor}*{moderator}"


def _column_mean(dataset: Dataset, name: str) -> float:
    """Mean of the numeric cells of *name* (NaN when there are none)."""
    values = [
        dataset.get_value(index, name).value
        for index in dataset.observation_indices()
        if dataset.get_value(index, name).is_numeric
    ]
    return float(np.mean(values)) if values else float("nan")


def add_interaction_column(
    dataset: Dataset,
    predictor: str,
    moderator: str,
) -> str:
    """Add (or refill) the ``predictor*moderator`` column **in place**.

    Each row gets ``x · w`` when both cells are numbers and an empty
    cell otherwise.  An existing numeric column of that name is reused.

    Callers that must not modify their dataset pass a clone, as
    :func:`moderation_analysis` does.

    Returns:
        The interaction column name.

    Raises:
        VariableTypeError: A non-numeric column already uses the name.
    """
    name = interaction_name(predictor, moderator)
    existing = dataset.get_variable(name)
    if existing is not None and not existing.is_numeric:
        raise VariableTypeError(name, existing.type.value, role="interaction column")
    if existing is None:
        dataset.add_variable(Variable(name, VariableType.NUMERIC))

    for index in dataset.observation_indices():
        x_cell = dataset.get_value(index, predictor)
        w_cell = dataset.get_value(index, moderator)
        if x_cell.is_numeric and w_cell.is_numeric:
            dataset.set_value(index, name, x_cell.value * w_cell.value)
        else:
            dataset.set_value(index, name, MISSING)
    return name


def _center_in_place(dataset: Dataset, name: str) -> None:
    mean = _column_mean(dataset, name)
    for index in dataset.observation_indices():
        cell = dataset.get_value(index, name)
        if cell.is_numeric:
            dataset.set_value(index, name, cell.value - mean)


def moderation_analysis(
    dataset: Dataset,
    predictor: str,
    moderator: str,
    outcome: str,
    *,
    threshold: float | None = None,
    center: bool = False,
    solver: str | None = None,
) -> ModerationReport:
    """Fit ``Y ~ X + W + X*W`` and classify the interaction coefficient.

    Args:
        dataset: Source data; only read.  The interaction column is
            built on a clone.
        predictor: Predictor X.
        moderator: Moderator W.
        outcome: Outcome Y.
        threshold: Absolute-coefficient cut-off.  ``None`` uses
            :func:`~regression_analyzer.get_moderation_threshold`.
        center: Mean-centre X and W before forming the product.
        solver: Least-squares method passed to
            :func:`~regression_analyzer.regression.linear_regression`.

    Returns:
        A :class:`~regression_analyzer._results.ModerationReport`.

    Raises:
        ConfigurationError: X, W and Y are not pairwise distinct, one
            does not exist, or the interaction name collides with one
            of them.
        VariableTypeError: One of them is not numeric-typed, or a
            non-numeric column already uses the interaction name.
        InsufficientDataError, DataQualityError, SingularDesignError:
            Propagated from the regression.
    """
    require_distinct({"predictor": predictor, "moderator": moderator, "outcome": outcome})
    require_numeric(dataset, predictor, "predictor")
    require_numeric(dataset, moderator, "moderator")
    require_numeric(dataset, outcome, "outcome")

    term = interaction_name(predictor, moderator)
    if term in (predictor, moderator, outcome):
        raise ConfigurationError(
            f"Interaction column name '{term}' collides with a selected variable."
        )

    if threshold is None:
        threshold = get_moderation_threshold()
    elif not np.isfinite(threshold) or threshold < 0:
        raise ValueError(
            f"Moderation threshold must be a finite non-negative number, got {threshold}."
        )

    work = dataset.clone()
    if center:
        _center_in_place(work, predictor)
        _center_in_place(work, moderator)
    add_interaction_column(work, predictor, moderator)

    logger.debug(
        "moderation_analysis: %s ~ %s + %s + %s (center=%s) on clone of '%s'",
        outcome,
        predictor,
        moderator,
        term,
        center,
        dataset.name,
    )

    model = linear_regression(work, outcome, [predictor, moderator, term], solver=solver)
    interaction_coef = model.coefficient(term)
    is_moderated = bool(abs(interaction_coef) > threshold)
    verdict = MODERATION_PRESENT if is_moderated else NO_MODERATION

    if is_moderated:
        interpretation = (
            f"The interaction coefficient ({interaction_coef:.4f}) exceeds "
            f"{threshold:g} in absolute value: the relationship between "
            f"'{predictor}' and '{outcome}' appears to vary with "
            f"'{moderator}'."
        )
    else:
        interpretation = (
            f"The interaction coefficient ({interaction_coef:.4f}) is within "
            f"{threshold:g} of zero: no sign that '{moderator}' changes the "
            f"relationship between '{predictor}' and '{outcome}'."
        )
    interpretation += (
        " This is a descriptive threshold on the point estimate, not a "
        "significance test."
    )

    return ModerationReport(
        predictor=predictor,
        moderator=moderator,
        outcome=outcome,
        interaction_name=term,
        interaction_coef=interaction_coef,
        threshold=float(threshold),
        is_moderated=is_moderated,
        verdict=verdict,
        interpretation=interpretation,
        model=model,
        centered=center,
    )
