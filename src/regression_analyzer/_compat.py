"""DataFrame interop, with optional Polars support.

:func:`dataset_from_frame` builds a :class:`Dataset` from a
``pandas.DataFrame``; when a user passes a ``polars.DataFrame`` (or
``polars.LazyFrame``) it is converted to pandas at the boundary first.
:func:`dataset_to_frame` goes the other way.

Polars is **not** a required dependency.  If it is not installed, only
pandas objects are accepted.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, TypeAlias

import pandas as pd
from pandas.api import types as pdt

from .cells import MISSING, to_cell
from .dataset import Dataset, Observation
from .variables import Variable, VariableType

if TYPE_CHECKING:
    import polars as pl

    DataFrameLike: TypeAlias = pd.DataFrame | pl.DataFrame | pl.LazyFrame
else:
    DataFrameLike: TypeAlias = pd.DataFrame

# Runtime detection; Polars is optional.
try:
    import polars as pl

    _HAS_POLARS = True
except ImportError:
    _HAS_POLARS = False

logger = logging.getLogger(__name__)


def _ensure_pandas_df(obj: DataFrameLike, *, name: str = "input") -> pd.DataFrame:
    """Convert *obj* to a :class:`pandas.DataFrame` if necessary.

    Accepted types:
        * ``pandas.DataFrame``: returned as-is.
        * ``polars.DataFrame``: converted via ``.to_pandas()``.
        * ``polars.LazyFrame``: collected then converted.

    Raises:
        TypeError: If *obj* is not a recognised DataFrame type.
    """
    if isinstance(obj, pd.DataFrame):
        return obj

    if _HAS_POLARS:
        if isinstance(obj, pl.LazyFrame):
            return obj.collect().to_pandas()
        if isinstance(obj, pl.DataFrame):
            return obj.to_pandas()

    raise TypeError(
        f"'{name}' must be a pandas DataFrame"
        + (" or Polars DataFrame/LazyFrame" if _HAS_POLARS else "")
        + f", got {type(obj).__name__}."
    )


def _infer_type(series: pd.Series) -> VariableType:
    """BOOLEAN for bool columns, NUMERIC for numeric ones, TEXT otherwise."""
    if pdt.is_bool_dtype(series):
        return VariableType.BOOLEAN
    if pdt.is_numeric_dtype(series):
        return VariableType.NUMERIC
    return VariableType.TEXT


def dataset_from_frame(
    frame: DataFrameLike,
    name: str = "",
    types: Mapping[str, str | VariableType] | None = None,
) -> Dataset:
    """Build a dataset with one variable per column and one row per record.

    Rows become observations ``0 … n−1`` in frame order (the frame's
    own index is ignored).  NaN and ``None`` become empty cells.

    Args:
        frame: pandas or Polars DataFrame.  Column labels are converted
            to strings.
        name: Dataset name.
        types: Per-column type overrides; other columns are inferred.

    Raises:
        TypeError: If *frame* is not a DataFrame, or a cell holds a value
            with no cell representation.
        ValueError: If two column labels are equal as strings, or
            *types* names an unknown column or type.
    """
    df = _ensure_pandas_df(frame, name="frame")
    overrides = {str(k): VariableType.parse(v) for k, v in (types or {}).items()}
    columns = [str(c) for c in df.columns]
    duplicated = sorted({c for c in columns if columns.count(c) > 1})
    if duplicated:
        raise ValueError(f"Column labels are not unique as strings: {duplicated}")
    unknown = sorted(set(overrides) - set(columns))
    if unknown:
        raise ValueError(f"Type overrides name unknown columns: {unknown}")

    dataset = Dataset(name)
    keys: list[str] = []
    for label, column in zip(columns, df.columns):
        vtype = overrides.get(label, _infer_type(df[column]))
        keys.append(dataset.add_variable(Variable(label, vtype)).key)

    for row in df.itertuples(index=False, name=None):
        obs = Observation()
        for key, raw in zip(keys, row):
            cell = to_cell(raw)
            if cell is not MISSING:
                obs.set(key, cell)
        dataset.add_observation(obs)

    logger.debug(
        "dataset_from_frame: %d variables, %d observations",
        dataset.n_variables,
        dataset.n_observations,
    )
    return dataset


def dataset_to_frame(dataset: Dataset) -> pd.DataFrame:
    """Return the dataset as a pandas DataFrame.

    The index is the observation index (ascending, gaps preserved) and
    columns follow variable order.  Numeric columns whose cells are all
    numbers or empty are ``float64`` with NaN for empty cells; other
    columns hold Python objects with ``None`` for empty cells, so a
    boolean or text cell in a numeric column is never turned into a
    number.
    """
    indices = dataset.observation_indices()
    data: dict[str, pd.Series] = {}
    for variable in dataset.variables:
        cells = [dataset.get_value(i, variable.name) for i in indices]
        values = [cell.to_python() for cell in cells]
        # Text or booleans typed into a numeric column stay visible as object.
        if variable.is_numeric and all(c.is_numeric or c.is_missing for c in cells):
            series = pd.Series(values, index=indices, dtype="float64")
        else:
            series = pd.Series(values, index=indices, dtype=object)
        data[variable.name] = series
    return pd.DataFrame(data, index=pd.Index(indices, name="observation"))
