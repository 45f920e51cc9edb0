"""Exception taxonomy for dataset analysis.

Every failure raised by the analysis layer is a subclass of
:class:`AnalysisError`, which itself derives from :class:`ValueError`
so that callers who only catch ``ValueError`` keep working.

The hierarchy mirrors the order in which inputs are checked:

* :class:`ConfigurationError`: the variable selection itself is
  wrong (missing, duplicated, or colliding names).  Raised before any
  data is read.
* :class:`VariableTypeError`: a selected variable is declared with a
  non-numeric type.  Raised before any data is read.
* :class:`InsufficientDataError`: fewer observations than the model
  needs.  Raised before the design matrix is built.
* :class:`DataQualityError`: a required cell is missing or
  non-numeric.  Raised while the design matrix is built.
* :class:`SingularDesignError`: the design matrix is rank deficient,
  so the least-squares coefficients are not identified.
"""

from __future__ import annotations


class AnalysisError(ValueError):
    """Base class for all analysis failures."""


class ConfigurationError(AnalysisError):
    """Invalid variable selection (duplicated, missing, or reserved names)."""


class VariableNotFoundError(ConfigurationError, KeyError):
    """A variable name does not exist in the dataset."""

    def __init__(self, name: str, dataset_name: str | None = None) -> None:
        self.name = name
        self.dataset_name = dataset_name
        where = f" in dataset '{dataset_name}'" if dataset_name else ""
        super().__init__(f"Variable '{name}' not found{where}.")

    # KeyError.__str__ wraps the message in quotes; keep the plain text.
    def __str__(self) -> str:
        return str(self.args[0])


class VariableTypeError(AnalysisError):
    """A selected variable is not regression-eligible (not numeric)."""

    def __init__(self, name: str, declared_type: str, role: str = "variable") -> None:
        self.name = name
        self.declared_type = declared_type
        self.role = role
        super().__init__(
            f"The {role} '{name}' must be numeric (NUMERIC or QUANTITATIVE), "
            f"got {declared_type}."
        )


class InsufficientDataError(AnalysisError):
    """Not enough observations for the requested number of predictors."""

    def __init__(self, n_observations: int, n_independent: int) -> None:
        self.n_observations = n_observations
        self.n_required = n_independent + 1
        self.shortfall = self.n_required - n_observations
        super().__init__(
            f"Not enough observations ({n_observations}) for a regression "
            f"with {n_independent} independent variable(s). At least "
            f"{self.n_required} observations are required "
            f"({self.shortfall} more needed)."
        )


class DataQualityError(AnalysisError):
    """A required cell is missing or holds a non-numeric value."""

    def __init__(
        self,
        observation_index: int,
        variable: str,
        role: str,
        found: str,
    ) -> None:
        self.observation_index = observation_index
        self.variable = variable
        self.role = role
        self.found = found
        super().__init__(
            f"Non-numeric or missing value ({found}) in {role} variable "
            f"'{variable}' at observation {observation_index}."
        )


class SingularDesignError(AnalysisError):
    """The design matrix is singular or rank deficient."""

    def __init__(self, rank: int, n_columns: int, columns: list[str]) -> None:
        self.rank = rank
        self.n_columns = n_columns
        self.columns = columns
        super().__init__(
            f"Design matrix is rank deficient (rank {rank} < {n_columns} "
            f"columns: {', '.join(columns)}). Check for constant or "
            f"perfectly collinear independent variables."
        )


class CellParseError(AnalysisError):
    """Text entered for a cell cannot be converted to the variable's type."""

    def __init__(self, text: str, variable_type: str) -> None:
        self.text = text
        self.variable_type = variable_type
        super().__init__(
            f"The value '{text}' is not a valid number for a {variable_type} variable."
        )


class DatasetNotFoundError(LookupError):
    """No stored dataset has the requested id."""

    def __init__(self, dataset_id: int) -> None:
        self.dataset_id = dataset_id
        super().__init__(f"Dataset with id {dataset_id} not found.")
