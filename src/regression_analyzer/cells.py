"""Cell values: a closed set of tagged value types.

An observation stores one cell per variable.  Rather than keeping raw
Python objects and re-checking ``isinstance`` wherever a number is
needed, every stored value is normalised into one of four frozen
types:

* :class:`Number`: a finite or infinite float.
* :class:`Text`: a string.
* :class:`Boolean`: ``True`` / ``False``.
* :class:`Missing`: an empty cell (singleton :data:`MISSING`).

``cell.is_numeric`` is then a total check: only :class:`Number`
answers ``True``.  A boolean is *not* numeric even though Python's
``bool`` subclasses ``int``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, ClassVar

import numpy as np
import pandas as pd

from .errors import CellParseError
from .variables import VariableType


@dataclass(frozen=True)
class Number:
    """A numeric cell."""

    value: float
    kind: ClassVar[str] = "number"

    @property
    def is_numeric(self) -> bool:
        return True

    @property
    def is_missing(self) -> bool:
        return False

    def to_python(self) -> float:
        return self.value


@dataclass(frozen=True)
class Text:
    """A text (or qualitative label) cell."""

    value: str
    kind: ClassVar[str] = "text"

    @property
    def is_numeric(self) -> bool:
        return False

    @property
    def is_missing(self) -> bool:
        return False

    def to_python(self) -> str:
        return self.value


@dataclass(frozen=True)
class Boolean:
    """A boolean cell."""

    value: bool
    kind: ClassVar[str] = "boolean"

    @property
    def is_numeric(self) -> bool:
        return False

    @property
    def is_missing(self) -> bool:
        return False

    def to_python(self) -> bool:
        return self.value


@dataclass(frozen=True)
class Missing:
    """An empty cell.  Use the :data:`MISSING` singleton."""

    kind: ClassVar[str] = "missing"

    @property
    def is_numeric(self) -> bool:
        return False

    @property
    def is_missing(self) -> bool:
        return True

    def to_python(self) -> None:
        return None

    def __repr__(self) -> str:
        return "MISSING"


MISSING = Missing()

Cell = Number | Text | Boolean | Missing

CELL_TYPES: tuple[type, ...] = (Number, Text, Boolean, Missing)


def to_cell(value: Any) -> Cell:
    """Normalise a raw Python value into a :data:`Cell`.

    ``None``, NaN and ``pandas.NA`` become :data:`MISSING`.  Booleans
    are checked before numbers because ``bool`` subclasses ``int``.

    Raises:
        TypeError: If *value* has no cell representation, including
            integers too large to convert to a float.
    """
    if isinstance(value, CELL_TYPES):
        return value
    if value is None or value is pd.NA or value is pd.NaT:
        return MISSING
    if isinstance(value, (bool, np.bool_)):
        return Boolean(bool(value))
    if isinstance(value, (int, float, np.integer, np.floating)):
        try:
            as_float = float(value)
        except OverflowError:
            raise TypeError(
                f"Cannot store {value!r} in a cell; it is too large for a float."
            ) from None
        if math.isnan(as_float):
            return MISSING
        return Number(as_float)
    if isinstance(value, str):
        return Text(value)
    raise TypeError(
        f"Cannot store a value of type {type(value).__name__} in a cell; "
        f"expected a number, string, boolean or None."
    )


def parse_cell(text: str | None, variable_type: Any) -> Cell:
    """Convert text typed into an editor into a cell for *variable_type*.

    Blank text is an empty cell.  Numeric types parse a float;
    BOOLEAN is ``True`` only for ``"true"`` (any case); text types
    keep the input verbatim.

    Raises:
        CellParseError: If a numeric variable receives non-numeric text.
    """
    vtype = VariableType.parse(variable_type)
    if text is None or not text.strip():
        return MISSING
    if vtype.is_numeric:
        try:
            return Number(float(text.strip()))
        except ValueError:
            raise CellParseError(text, vtype.value) from None
    if vtype is VariableType.BOOLEAN:
        return Boolean(text.strip().lower() == "true")
    return Text(text)
