"""Selection checks shared by the regression engine and the analyzers.

Each check reads only the dataset's variable list, never its cells,
so a bad selection is rejected before any data is touched.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .dataset import Dataset
from .errors import ConfigurationError, VariableTypeError
from .variables import Variable


def require_numeric(dataset: Dataset, name: str, role: str) -> Variable:
    """Return the variable *name*, checking it exists and is numeric.

    *role* is the full phrase used in messages, e.g.
    ``"dependent variable"`` or ``"mediator"``.

    Raises:
        ConfigurationError: If *name* is empty.
        VariableNotFoundError: If the dataset has no such variable.
        VariableTypeError: If its declared type is not numeric.
    """
    if not name:
        raise ConfigurationError(f"No {role} was selected.")
    variable = dataset.require_variable(name)
    if not variable.is_numeric:
        raise VariableTypeError(name, variable.type.value, role=role)
    return variable


def require_distinct(roles: Mapping[str, str]) -> None:
    """Check that every role (``{"predictor": "x", ...}``) names a different variable.

    Raises:
        ConfigurationError: If a role is empty or two roles share a name.
    """
    for role, name in roles.items():
        if not name:
            raise ConfigurationError(f"No {role} was selected.")
    seen: dict[str, str] = {}
    for role, name in roles.items():
        if name in seen:
            raise ConfigurationError(
                f"The {seen[name]} and {role} must be different variables "
                f"(both are '{name}')."
            )
        seen[name] = role


def require_unique(names: Sequence[str], what: str) -> None:
    """Reject repeated entries in *names*."""
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ConfigurationError(f"'{name}' is listed more than once as {what}.")
        seen.add(name)
