"""Single-mediator path decomposition (Baron & Kenny, 1986).

Decomposes the effect of a predictor X on an outcome Y into a direct
part and a part transmitted through a mediator M, using three OLS
fits:

    Regression 1   M = i₁ + a·X + e₁          → a-path
    Regression 2   Y = i₂ + c′·X + b·M + e₂   → direct effect c′, b-path
    Regression 3   Y = i₃ + c·X + e₃          → total effect c

The indirect effect is a·b.  For OLS with an intercept and a single
mediator the identity c = c′ + a·b holds algebraically, up to
floating-point error; both sides are reported rather than asserted.

No bootstrap or standard errors are computed, so the report describes
the sample decomposition without testing it.

References:
    Baron, R. M. & Kenny, D. A. (1986). The moderator–mediator
    variable distinction. *Journal of Personality and Social
    Psychology*, 51(6), 1173–1182.

    MacKinnon, D. P., Warsi, G. & Dwyer, J. H. (1995). A simulation
    study of mediated effect measures. *Multivariate Behavioral
    Research*, 30(1), 41–62.
"""

from __future__ import annotations

import logging

import numpy as np

from ._results import MediationReport
from ._validation import require_distinct, require_numeric
from .dataset import Dataset
from .regression import linear_regression

logger = logging.getLogger(__name__)

# |c| below this is treated as zero when forming indirect / c.
_ZERO_TOTAL_EFFECT = 1e-10


def _interpret(
    predictor: str,
    mediator: str,
    indirect: float,
    direct: float,
    total: float,
    proportion: float,
) -> str:
    if np.isnan(proportion):
        share = "the total effect is zero, so no proportion is defined"
    else:
        share = f"{proportion:.1%} of the total effect runs through '{mediator}'"
    return (
        f"Effect of '{predictor}' decomposes into a direct effect of "
        f"{direct:.4f} and an indirect effect through '{mediator}' of "
        f"{indirect:.4f} (total {total:.4f}); {share}. These are sample "
        f"point estimates without standard errors, not a significance test."
    )


def mediation_analysis(
    dataset: Dataset,
    predictor: str,
    mediator: str,
    outcome: str,
    *,
    solver: str | None = None,
) -> MediationReport:
    """Decompose the X → Y effect into direct and M-mediated parts.

    Args:
        dataset: Source data; only read.
        predictor: Predictor X.
        mediator: Mediator M.
        outcome: Outcome Y.
        solver: Least-squares method passed to
            :func:`~regression_analyzer.regression.linear_regression`.

    Returns:
        A :class:`~regression_analyzer._results.MediationReport` with the
        a, b, c and c′ paths, the indirect effect a·b, the check value
        c′ + a·b, and the three underlying regressions.

    Raises:
        ConfigurationError: X, M and Y are not pairwise distinct, or one
            of them does not exist.
        VariableTypeError: One of them is not numeric-typed.
        InsufficientDataError, DataQualityError, SingularDesignError:
            Propagated from the regressions.
    """
    require_distinct({"predictor": predictor, "mediator": mediator, "outcome": outcome})
    require_numeric(dataset, predictor, "predictor")
    require_numeric(dataset, mediator, "mediator")
    require_numeric(dataset, outcome, "outcome")

    logger.debug(
        "mediation_analysis: %s → %s → %s on dataset '%s'",
        predictor,
        mediator,
        outcome,
        dataset.name,
    )

    # Regression 1 (a path): how much a one-unit change in X shifts M.
    mediator_model = linear_regression(dataset, mediator, [predictor], solver=solver)
    a_path = mediator_model.coefficient(predictor)

    # Regression 2: with M held fixed, X's coefficient is the direct
    # effect c′ and M's coefficient is the b path.
    outcome_model = linear_regression(
        dataset, outcome, [predictor, mediator], solver=solver
    )
    direct_effect = outcome_model.coefficient(predictor)
    b_path = outcome_model.coefficient(mediator)

    # Regression 3 (c path): X's entire influence on Y.
    total_model = linear_regression(dataset, outcome, [predictor], solver=solver)
    total_effect = total_model.coefficient(predictor)

    indirect_effect = a_path * b_path
    total_effect_check = direct_effect + indirect_effect

    if abs(total_effect) > _ZERO_TOTAL_EFFECT:
        proportion_mediated = indirect_effect / total_effect
    else:
        proportion_mediated = float("nan")

    logger.debug(
        "mediation_analysis: a=%.6g b=%.6g c=%.6g c'=%.6g ab=%.6g",
        a_path,
        b_path,
        total_effect,
        direct_effect,
        indirect_effect,
    )

    return MediationReport(
        predictor=predictor,
        mediator=mediator,
        outcome=outcome,
        a_path=a_path,
        b_path=b_path,
        total_effect=total_effect,
        direct_effect=direct_effect,
        indirect_effect=indirect_effect,
        total_effect_check=total_effect_check,
        proportion_mediated=proportion_mediated,
        interpretation=_interpret(
            predictor,
            mediator,
            indirect_effect,
            direct_effect,
            total_effect,
            proportion_mediated,
        ),
        mediator_model=mediator_model,
        outcome_model=outcome_model,
        total_model=total_model,
    )
