"""Variable (column) definitions.

A :class:`Variable` is a named column with a declared
:class:`VariableType`.  Only ``NUMERIC`` and ``QUANTITATIVE`` columns
are eligible for regression; the two are interchangeable.

Identity
~~~~~~~~
Two variables compare equal when their *names* match, regardless of
type or key, so a dataset never holds two columns with the
same name.  Cell storage, however, is keyed by the opaque
:attr:`Variable.key` assigned at construction, so the value maps of
observations never depend on the display name.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum


class VariableType(str, Enum):
    """Declared type of a column."""

    NUMERIC = "NUMERIC"
    QUANTITATIVE = "QUANTITATIVE"
    TEXT = "TEXT"
    QUALITATIVE = "QUALITATIVE"
    BOOLEAN = "BOOLEAN"

    @property
    def is_numeric(self) -> bool:
        """``True`` for the regression-eligible types."""
        return self in (VariableType.NUMERIC, VariableType.QUANTITATIVE)

    @classmethod
    def parse(cls, value: str | VariableType) -> VariableType:
        """Resolve *value* (case-insensitive) to a member.

        Raises:
            ValueError: If *value* is not one of the five type names.
        """
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().upper()
        try:
            return cls(normalised)
        except ValueError:
            raise ValueError(
                f"Unknown variable type '{value}'. Choose from: "
                f"{[m.value for m in cls]}"
            ) from None


def _new_key() -> str:
    return uuid.uuid4().hex


@dataclass(eq=False)
class Variable:
    """A named, typed column.

    Args:
        name: Display name, unique within a dataset.
        type: Declared type; strings are parsed case-insensitively.
        key: Opaque storage identity.  Generated when omitted; only
            the persistence layer and :meth:`Dataset.clone` pass it
            explicitly.
    """

    name: str
    type: VariableType = VariableType.NUMERIC
    key: str = field(default_factory=_new_key)

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name:
            raise ValueError("Variable name must be a non-empty string.")
        self.type = VariableType.parse(self.type)

    @property
    def is_numeric(self) -> bool:
        return self.type.is_numeric

    def copy(self) -> Variable:
        """Return a new instance with the same name, type and key."""
        return Variable(self.name, self.type, key=self.key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Variable):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return f"{self.name} ({self.type.value})"
