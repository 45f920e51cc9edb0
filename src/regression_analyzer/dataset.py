"""In-memory dataset model: ordered variables and sparse observations.

A :class:`Dataset` is a named table made of

* an **ordered** list of :class:`~regression_analyzer.variables.Variable`
  columns (insertion order is display order, names are unique), and
* a **sparse** mapping from non-negative integer observation index to
  :class:`Observation` row.

Rows are sparse twice over: indices may have gaps (deleting a row
leaves its index vacant forever, and the next appended row gets
``max(index) + 1``), and a row need not hold a cell for every
variable; an absent cell reads back as
:data:`~regression_analyzer.cells.MISSING`.

Storage keys
~~~~~~~~~~~~
Observations store cells under :attr:`Variable.key`, not the display
name.  Name lookups go through the owning dataset, which is the only
place that maps names to keys::

    ┌───────────────┐ name  ┌──────────┐  key  ┌─────────────┐
    │ caller / UI   │ ────► │ Dataset  │ ────► │ Observation │
    └───────────────┘       └──────────┘       └─────────────┘

Thread safety
~~~~~~~~~~~~~
No internal locking.  Concurrent readers are safe as long as nobody
edits the structure at the same time; analyses that need extra
columns work on :meth:`Dataset.clone`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from .cells import MISSING, Cell, to_cell
from .errors import VariableNotFoundError
from .variables import Variable

logger = logging.getLogger(__name__)


class Observation:
    """One row: a mapping from variable key to cell.

    An observation has no identity of its own; it is identified by the
    index under which its dataset stores it.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Mapping[str, Cell] | None = None) -> None:
        self._cells: dict[str, Cell] = {}
        if cells:
            for key, value in cells.items():
                self._cells[key] = to_cell(value)

    def get(self, key: str) -> Cell:
        """Return the cell stored under *key*, or ``MISSING``."""
        return self._cells.get(key, MISSING)

    def set(self, key: str, value: Any) -> None:
        self._cells[key] = to_cell(value)

    def discard(self, key: str) -> None:
        """Remove the cell for *key* if present."""
        self._cells.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._cells)

    def items(self) -> list[tuple[str, Cell]]:
        return list(self._cells.items())

    def copy(self) -> Observation:
        """Return an independent copy (cells are immutable)."""
        clone = Observation()
        clone._cells = dict(self._cells)
        return clone

    def __contains__(self, key: object) -> bool:
        return key in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Observation):
            return NotImplemented
        return self._cells == other._cells

    def __repr__(self) -> str:
        return f"Observation({self._cells!r})"


class Dataset:
    """A named table of typed variables and sparse observations.

    Args:
        name: Display name.
        dataset_id: Storage id, assigned by the persistence layer on
            first save.  ``None`` for a dataset that was never stored.

    Examples:
        >>> ds = Dataset("study")
        >>> x = ds.add_variable(Variable("x", "NUMERIC"))
        >>> ds.add_observation({"x": 1.5})
        0
        >>> ds.get_value(0, "x")
        Number(value=1.5)
    """

    def __init__(self, name: str = "", dataset_id: int | None = None) -> None:
        self.name = name
        self.dataset_id = dataset_id
        self._variables: list[Variable] = []
        self._observations: dict[int, Observation] = {}

    # ---- Variables -------------------------------------------------

    @property
    def variables(self) -> tuple[Variable, ...]:
        """Variables in column order."""
        return tuple(self._variables)

    @property
    def variable_names(self) -> list[str]:
        return [v.name for v in self._variables]

    @property
    def n_variables(self) -> int:
        return len(self._variables)

    def add_variable(self, variable: Variable) -> Variable:
        """Append *variable* unless one with the same name already exists.

        Returns:
            The variable held by the dataset under that name: the
            argument itself, or the pre-existing column when the name
            was already taken.
        """
        existing = self.get_variable(variable.name)
        if existing is not None:
            logger.debug(
                "add_variable: '%s' already present in dataset '%s'; ignoring",
                variable.name,
                self.name,
            )
            return existing
        self._variables.append(variable)
        return variable

    def remove_variable(self, name: str) -> None:
        """Remove the variable *name* and its cell from every observation.

        Does nothing if no variable has that name.
        """
        variable = self.get_variable(name)
        if variable is None:
            return
        self._variables.remove(variable)
        for obs in self._observations.values():
            obs.discard(variable.key)

    def get_variable(self, name: str) -> Variable | None:
        """Return the variable called *name*, or ``None`` if absent."""
        for variable in self._variables:
            if variable.name == name:
                return variable
        return None

    def require_variable(self, name: str) -> Variable:
        """Like :meth:`get_variable` but raise when absent.

        Raises:
            VariableNotFoundError: If no variable has that name.
        """
        variable = self.get_variable(name)
        if variable is None:
            raise VariableNotFoundError(name, self.name or None)
        return variable

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_variable(name) is not None

    # ---- Observations ----------------------------------------------

    @property
    def n_observations(self) -> int:
        return len(self._observations)

    def __len__(self) -> int:
        return len(self._observations)

    @property
    def next_observation_index(self) -> int:
        """``max(index) + 1``, or ``0`` for an empty dataset."""
        if not self._observations:
            return 0
        return max(self._observations) + 1

    def observation_indices(self) -> list[int]:
        """Stored observation indices in ascending order."""
        return sorted(self._observations)

    def observations(self) -> Iterator[tuple[int, Observation]]:
        """Iterate ``(index, observation)`` pairs in ascending index order."""
        for index in sorted(self._observations):
            yield index, self._observations[index]

    def get_observation(self, index: int) -> Observation | None:
        return self._observations.get(index)

    def add_observation(
        self,
        values: Mapping[str, Any] | Observation | None = None,
    ) -> int:
        """Store a new row under the next free index and return that index.

        Args:
            values: Either a mapping from variable *name* to raw value,
                or a ready-made :class:`Observation` keyed by variable
                key.  ``None`` appends an empty row.

        Raises:
            VariableNotFoundError: If *values* names an unknown variable.
                Nothing is stored in that case.
        """
        if isinstance(values, Observation):
            obs = values
        else:
            obs = Observation()
            for name, raw in (values or {}).items():
                obs.set(self.require_variable(name).key, raw)
        index = self.next_observation_index
        self._observations[index] = obs
        return index

    def put_observation(self, index: int, observation: Observation) -> None:
        """Store *observation* under an explicit *index*, replacing any row there.

        Used when restoring stored data so that index gaps survive.

        Raises:
            ValueError: If *index* is negative.
        """
        if index < 0:
            raise ValueError(f"Observation index must be non-negative, got {index}.")
        self._observations[index] = observation

    def remove_observation(self, index: int) -> None:
        """Delete the row at *index*.  Remaining rows keep their indices."""
        self._observations.pop(index, None)

    def get_value(self, index: int, name: str) -> Cell:
        """Return the cell at (*index*, *name*).

        Absent rows, absent cells and unknown variable names all read
        as ``MISSING``; use :meth:`get_variable` to tell an unknown
        column apart from an empty cell.
        """
        obs = self._observations.get(index)
        variable = self.get_variable(name)
        if obs is None or variable is None:
            return MISSING
        return obs.get(variable.key)

    def set_value(self, index: int, name: str, value: Any) -> None:
        """Store *value* at (*index*, *name*).

        Creates the observation when *index* is new.  Never creates the
        variable.

        Raises:
            VariableNotFoundError: If *name* is not a variable of this
                dataset.
            ValueError: If *index* is negative.
        """
        variable = self.require_variable(name)
        if index < 0:
            raise ValueError(f"Observation index must be non-negative, got {index}.")
        cell = to_cell(value)
        self._observations.setdefault(index, Observation()).set(variable.key, cell)

    def observation_values(self, index: int) -> dict[str, Cell]:
        """Cells of observation *index* keyed by variable name.

        Only cells actually stored are included, in column order.
        """
        obs = self._observations.get(index)
        if obs is None:
            return {}
        return {v.name: obs.get(v.key) for v in self._variables if v.key in obs}

    # ---- Copying ---------------------------------------------------

    def clone(self, name: str | None = None) -> Dataset:
        """Deep copy: new variables, new observations, new cell maps.

        Structural edits on the clone (adding a column, setting a cell)
        never reach this dataset.  Variable keys and the dataset id are
        preserved so the copy describes the same logical data.

        Because the id is kept, saving a clone through a repository
        overwrites the stored original.  Set ``clone.dataset_id = None``
        before saving to store it as a new dataset.
        """
        clone = Dataset(
            name if name is not None else f"{self.name} (clone)",
            dataset_id=self.dataset_id,
        )
        clone._variables = [v.copy() for v in self._variables]
        clone._observations = {i: obs.copy() for i, obs in self._observations.items()}
        return clone

    def __repr__(self) -> str:
        return (
            f"Dataset(name={self.name!r}, variables={self.n_variables}, "
            f"observations={self.n_observations})"
        )
