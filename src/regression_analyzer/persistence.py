"""Relational storage for datasets via SQLAlchemy Core.

Four tables hold a dataset:

* ``datasets``: one row per dataset (id, name).
* ``variables``: columns with their position, type and key.
* ``observations``: one row per stored observation index.
* ``observation_values``: one row per stored cell, tagged with its
  kind so booleans and explicit empty cells come back as they went in.

Statements are plain ``text()`` SQL kept to the portable subset, so
the same repository works against SQLite, PostgreSQL or MySQL given
the right URL.  Every ``save`` / ``delete`` runs in a single
``engine.begin()`` transaction.

Examples:
    >>> repo = SqlDatasetRepository("sqlite:///analyses.db")
    >>> repo.initialize()
    >>> dataset_id = repo.save(ds)
    >>> restored = repo.load(dataset_id)
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from .cells import MISSING, Boolean, Cell, Number, Text
from .dataset import Dataset, Observation
from .errors import DatasetNotFoundError
from .variables import Variable

logger = logging.getLogger(__name__)


@runtime_checkable
class DatasetRepository(Protocol):
    """Anything that can store and fetch datasets by id."""

    def load(self, dataset_id: int) -> Dataset: ...

    def save(self, dataset: Dataset) -> int: ...


_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS datasets (
        id INTEGER PRIMARY KEY,
        name VARCHAR(255) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS variables (
        dataset_id INTEGER NOT NULL REFERENCES datasets (id),
        position INTEGER NOT NULL,
        var_key VARCHAR(64) NOT NULL,
        name VARCHAR(255) NOT NULL,
        var_type VARCHAR(32) NOT NULL,
        PRIMARY KEY (dataset_id, var_key)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS observations (
        dataset_id INTEGER NOT NULL REFERENCES datasets (id),
        obs_index INTEGER NOT NULL,
        PRIMARY KEY (dataset_id, obs_index)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS observation_values (
        dataset_id INTEGER NOT NULL,
        obs_index INTEGER NOT NULL,
        var_key VARCHAR(64) NOT NULL,
        kind VARCHAR(16) NOT NULL,
        value_numeric DOUBLE PRECISION,
        value_text TEXT,
        PRIMARY KEY (dataset_id, obs_index, var_key)
    )
    """,
)

# Child tables first so deletes never orphan rows mid-transaction.
_CHILD_TABLES = ("observation_values", "observations", "variables")


def _encode_cell(cell: Cell) -> tuple[str, float | None, str | None]:
    """``(kind, value_numeric, value_text)`` for one cell."""
    if isinstance(cell, Number):
        return cell.kind, cell.value, None
    if isinstance(cell, Boolean):
        return cell.kind, None, "true" if cell.value else "false"
    if isinstance(cell, Text):
        return cell.kind, None, cell.value
    return MISSING.kind, None, None


def _decode_cell(kind: str, value_numeric: float | None, value_text: str | None) -> Cell:
    if kind == Number.kind:
        return Number(float(value_numeric))  # type: ignore[arg-type]
    if kind == Boolean.kind:
        return Boolean(value_text == "true")
    if kind == Text.kind:
        return Text(value_text if value_text is not None else "")
    if kind == MISSING.kind:
        return MISSING
    raise ValueError(f"Unknown stored cell kind '{kind}'.")


class SqlDatasetRepository:
    """Dataset storage on any SQLAlchemy-supported database.

    Args:
        engine_or_url: An :class:`~sqlalchemy.engine.Engine` or a
            database URL string passed to
            :func:`~sqlalchemy.create_engine`.
    """

    def __init__(self, engine_or_url: Engine | str) -> None:
        if isinstance(engine_or_url, str):
            self.engine = create_engine(engine_or_url)
        else:
            self.engine = engine_or_url

    def initialize(self) -> None:
        """Create the tables if they do not exist yet."""
        with self.engine.begin() as cn:
            for ddl in _SCHEMA:
                cn.execute(text(ddl))
        logger.debug("initialize: schema ready on %s", self.engine.url)

    # ---- Writing ---------------------------------------------------

    def save(self, dataset: Dataset) -> int:
        """Insert or fully replace *dataset* and return its id.

        A dataset without an id is assigned the next free one, and
        ``dataset.dataset_id`` is set.  Otherwise its stored variables
        and observations are replaced wholesale.
        """
        with self.engine.begin() as cn:
            dataset_id = dataset.dataset_id
            if dataset_id is None:
                dataset_id = self._next_id(cn)
                exists = False
            else:
                exists = self._exists(cn, dataset_id)

            if exists:
                cn.execute(
                    text("UPDATE datasets SET name = :name WHERE id = :id"),
                    {"id": dataset_id, "name": dataset.name},
                )
                self._delete_children(cn, dataset_id)
            else:
                cn.execute(
                    text("INSERT INTO datasets (id, name) VALUES (:id, :name)"),
                    {"id": dataset_id, "name": dataset.name},
                )
            self._insert_children(cn, dataset_id, dataset)

        dataset.dataset_id = dataset_id
        logger.debug(
            "save: dataset %d '%s' (%d variables, %d observations)",
            dataset_id,
            dataset.name,
            dataset.n_variables,
            dataset.n_observations,
        )
        return dataset_id

    def delete(self, dataset_id: int) -> None:
        """Remove a stored dataset and everything it owns.

        Raises:
            DatasetNotFoundError: If no dataset has that id.
        """
        with self.engine.begin() as cn:
            if not self._exists(cn, dataset_id):
                raise DatasetNotFoundError(dataset_id)
            self._delete_children(cn, dataset_id)
            cn.execute(text("DELETE FROM datasets WHERE id = :id"), {"id": dataset_id})
        logger.debug("delete: dataset %d", dataset_id)

    # ---- Reading ---------------------------------------------------

    def load(self, dataset_id: int) -> Dataset:
        """Rebuild the stored dataset *dataset_id*.

        Raises:
            DatasetNotFoundError: If no dataset has that id.
        """
        params = {"id": dataset_id}
        with self.engine.connect() as cn:
            row = cn.execute(
                text("SELECT name FROM datasets WHERE id = :id"), params
            ).first()
            if row is None:
                raise DatasetNotFoundError(dataset_id)

            dataset = Dataset(row[0], dataset_id=dataset_id)
            for var_key, name, var_type in cn.execute(
                text(
                    "SELECT var_key, name, var_type FROM variables "
                    "WHERE dataset_id = :id ORDER BY position"
                ),
                params,
            ):
                dataset.add_variable(Variable(name, var_type, key=var_key))

            observations: dict[int, Observation] = {}
            for (obs_index,) in cn.execute(
                text(
                    "SELECT obs_index FROM observations "
                    "WHERE dataset_id = :id ORDER BY obs_index"
                ),
                params,
            ):
                observations[obs_index] = Observation()

            for obs_index, var_key, kind, value_numeric, value_text in cn.execute(
                text(
                    "SELECT obs_index, var_key, kind, value_numeric, value_text "
                    "FROM observation_values WHERE dataset_id = :id"
                ),
                params,
            ):
                obs = observations.setdefault(obs_index, Observation())
                obs.set(var_key, _decode_cell(kind, value_numeric, value_text))

        for obs_index in sorted(observations):
            dataset.put_observation(obs_index, observations[obs_index])

        logger.debug(
            "load: dataset %d '%s' (%d variables, %d observations)",
            dataset_id,
            dataset.name,
            dataset.n_variables,
            dataset.n_observations,
        )
        return dataset

    def list_datasets(self) -> list[tuple[int, str]]:
        """``(id, name)`` of every stored dataset, ordered by id."""
        with self.engine.connect() as cn:
            rows = cn.execute(text("SELECT id, name FROM datasets ORDER BY id"))
            return [(int(r[0]), r[1]) for r in rows]

    # ---- Internals -------------------------------------------------

    @staticmethod
    def _next_id(cn: Connection) -> int:
        return int(cn.execute(text("SELECT COALESCE(MAX(id), 0) + 1 FROM datasets")).scalar_one())

    @staticmethod
    def _exists(cn: Connection, dataset_id: int) -> bool:
        row = cn.execute(
            text("SELECT 1 FROM datasets WHERE id = :id"), {"id": dataset_id}
        ).first()
        return row is not None

    @staticmethod
    def _delete_children(cn: Connection, dataset_id: int) -> None:
        for table in _CHILD_TABLES:
            cn.execute(
                text(f"DELETE FROM {table} WHERE dataset_id = :id"), {"id": dataset_id}
            )

    @staticmethod
    def _insert_children(cn: Connection, dataset_id: int, dataset: Dataset) -> None:
        variable_rows = [
            {
                "dataset_id": dataset_id,
                "position": position,
                "var_key": v.key,
                "name": v.name,
                "var_type": v.type.value,
            }
            for position, v in enumerate(dataset.variables)
        ]
        if variable_rows:
            cn.execute(
                text(
                    "INSERT INTO variables (dataset_id, position, var_key, name, var_type) "
                    "VALUES (:dataset_id, :position, :var_key, :name, :var_type)"
                ),
                variable_rows,
            )

        # Only cells of current variables are written; keys left over
        # from removed columns are not part of the dataset.
        live_keys = {v.key for v in dataset.variables}
        observation_rows = []
        value_rows = []
        for index, obs in dataset.observations():
            observation_rows.append({"dataset_id": dataset_id, "obs_index": index})
            for key, cell in obs.items():
                if key not in live_keys:
                    continue
                kind, value_numeric, value_text = _encode_cell(cell)
                value_rows.append(
                    {
                        "dataset_id": dataset_id,
                        "obs_index": index,
                        "var_key": key,
                        "kind": kind,
                        "value_numeric": value_numeric,
                        "value_text": value_text,
                    }
                )

        if observation_rows:
            cn.execute(
                text(
                    "INSERT INTO observations (dataset_id, obs_index) "
                    "VALUES (:dataset_id, :obs_index)"
                ),
                observation_rows,
            )
        if value_rows:
            cn.execute(
                text(
                    "INSERT INTO observation_values "
                    "(dataset_id, obs_index, var_key, kind, value_numeric, value_text) "
                    "VALUES (:dataset_id, :obs_index, :var_key, :kind, "
                    ":value_numeric, :value_text)"
                ),
                value_rows,
            )
