"""regression_analyzer: OLS, mediation and moderation on typed datasets.

Holds tabular data as typed variables with sparse observations, fits
ordinary least-squares models with an intercept, decomposes an effect
through a single mediator (Baron & Kenny, 1986), and checks for
moderation through an X × W interaction term.  Datasets can be built
from pandas or Polars frames and stored in any SQLAlchemy database.

Public API:
    .. autosummary::
        Dataset
        Observation
        Variable
        VariableType
        linear_regression
        mediation_analysis
        moderation_analysis
        add_interaction_column
        dataset_from_frame
        dataset_to_frame
        format_regression_table
        format_mediation_table
        format_moderation_table
        print_regression_table
        print_mediation_table
        print_moderation_table
        SqlDatasetRepository
        DatasetRepository
        get_solver
        set_solver
        get_moderation_threshold
        set_moderation_threshold
        FitContext
        RegressionResult
        MediationReport
        ModerationReport
"""

from ._compat import dataset_from_frame, dataset_to_frame
from ._config import (
    get_moderation_threshold,
    get_solver,
    set_moderation_threshold,
    set_solver,
)
from ._context import FitContext
from ._results import INTERCEPT, MediationReport, ModerationReport, RegressionResult
from .cells import MISSING, Boolean, Cell, Missing, Number, Text, parse_cell, to_cell
from .dataset import Dataset, Observation
from .display import (
    format_mediation_table,
    format_moderation_table,
    format_regression_table,
    print_mediation_table,
    print_moderation_table,
    print_regression_table,
)
from .errors import (
    AnalysisError,
    CellParseError,
    ConfigurationError,
    DataQualityError,
    DatasetNotFoundError,
    InsufficientDataError,
    SingularDesignError,
    VariableNotFoundError,
    VariableTypeError,
)
from .mediation import mediation_analysis
from .moderation import (
    MODERATION_PRESENT,
    NO_MODERATION,
    add_interaction_column,
    interaction_name,
    moderation_analysis,
)
from .persistence import DatasetRepository, SqlDatasetRepository
from .regression import linear_regression
from .variables import Variable, VariableType

__version__ = "0.1.0"

__all__ = [
    "AnalysisError",
    "Boolean",
    "Cell",
    "CellParseError",
    "ConfigurationError",
    "DataQualityError",
    "Dataset",
    "DatasetNotFoundError",
    "DatasetRepository",
    "FitContext",
    "INTERCEPT",
    "InsufficientDataError",
    "MISSING",
    "MODERATION_PRESENT",
    "MediationReport",
    "Missing",
    "ModerationReport",
    "NO_MODERATION",
    "Number",
    "Observation",
    "RegressionResult",
    "SingularDesignError",
    "SqlDatasetRepository",
    "Text",
    "Variable",
    "VariableNotFoundError",
    "VariableType",
    "VariableTypeError",
    "add_interaction_column",
    "dataset_from_frame",
    "dataset_to_frame",
    "format_mediation_table",
    "format_moderation_table",
    "format_regression_table",
    "get_moderation_threshold",
    "get_solver",
    "interaction_name",
    "linear_regression",
    "mediation_analysis",
    "moderation_analysis",
    "parse_cell",
    "print_mediation_table",
    "print_moderation_table",
    "print_regression_table",
    "set_moderation_threshold",
    "set_solver",
    "to_cell",
]
