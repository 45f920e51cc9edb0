"""Tests for cell normalisation and editor-text parsing."""

import numpy as np
import pandas as pd
import pytest

from regression_analyzer.cells import (
    MISSING,
    Boolean,
    Number,
    Text,
    parse_cell,
    to_cell,
)
from regression_analyzer.errors import CellParseError


class TestToCell:
    def test_none_and_nan_are_missing(self):
        assert to_cell(None) is MISSING
        assert to_cell(float("nan")) is MISSING
        assert to_cell(np.nan) is MISSING
        assert to_cell(pd.NA) is MISSING

    def test_bool_before_int(self):
        assert to_cell(True) == Boolean(True)
        assert to_cell(np.bool_(False)) == Boolean(False)

    def test_numbers_become_float(self):
        cell = to_cell(3)
        assert cell == Number(3.0)
        assert isinstance(cell.value, float)
        assert to_cell(np.int64(2)) == Number(2.0)
        assert to_cell(np.float32(0.5)) == Number(0.5)

    def test_strings(self):
        assert to_cell("abc") == Text("abc")

    def test_cells_pass_through(self):
        cell = Number(1.0)
        assert to_cell(cell) is cell
        assert to_cell(MISSING) is MISSING

    def test_unsupported_type_rejected(self):
        with pytest.raises(TypeError, match="Cannot store"):
            to_cell([1, 2])

    def test_huge_int_rejected(self):
        with pytest.raises(TypeError, match="too large"):
            to_cell(10**400)

    def test_infinity_kept_as_number(self):
        assert to_cell(float("inf")) == Number(float("inf"))

    def test_only_number_is_numeric(self):
        assert Number(1.0).is_numeric
        for cell in (Text("1"), Boolean(True), MISSING):
            assert not cell.is_numeric

    def test_to_python(self):
        assert Number(1.5).to_python() == 1.5
        assert Text("a").to_python() == "a"
        assert Boolean(False).to_python() is False
        assert MISSING.to_python() is None


class TestParseCell:
    def test_blank_is_missing(self):
        assert parse_cell("", "NUMERIC") is MISSING
        assert parse_cell("   ", "TEXT") is MISSING
        assert parse_cell(None, "BOOLEAN") is MISSING

    def test_numeric(self):
        assert parse_cell(" 2.5 ", "NUMERIC") == Number(2.5)
        assert parse_cell("1e3", "QUANTITATIVE") == Number(1000.0)

    def test_numeric_rejects_text(self):
        with pytest.raises(CellParseError, match="not a valid number"):
            parse_cell("abc", "NUMERIC")

    def test_boolean(self):
        assert parse_cell("TRUE", "BOOLEAN") == Boolean(True)
        assert parse_cell("yes", "BOOLEAN") == Boolean(False)

    def test_text_verbatim(self):
        assert parse_cell(" a b ", "QUALITATIVE") == Text(" a b ")
