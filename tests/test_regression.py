"""Tests for the OLS regression engine."""

import numpy as np
import pytest
from sklearn.linear_model import LinearRegression

from regression_analyzer.dataset import Dataset
from regression_analyzer.errors import (
    ConfigurationError,
    DataQualityError,
    InsufficientDataError,
    SingularDesignError,
    VariableNotFoundError,
    VariableTypeError,
)
from regression_analyzer.regression import linear_regression
from regression_analyzer.variables import Variable


def _dataset_from_columns(columns, types=None):
    types = types or {}
    ds = Dataset("test")
    for name in columns:
        ds.add_variable(Variable(name, types.get(name, "NUMERIC")))
    n = len(next(iter(columns.values())))
    for i in range(n):
        ds.add_observation({name: values[i] for name, values in columns.items()})
    return ds


def _make_linear_data(n=100, seed=42):
    rng = np.random.default_rng(seed)
    x1 = rng.standard_normal(n)
    x2 = rng.standard_normal(n)
    y = 1.5 + 2.0 * x1 - 1.0 * x2 + rng.standard_normal(n) * 0.5
    return {"y": y, "x1": x1, "x2": x2}


class TestPerfectFit:
    def test_recovers_exact_line(self):
        x = np.arange(10, dtype=float)
        ds = _dataset_from_columns({"x": x, "y": 2.0 + 3.0 * x})
        result = linear_regression(ds, "y", ["x"])
        assert result.intercept == pytest.approx(2.0, abs=1e-6)
        assert result.coefficient("x") == pytest.approx(3.0, abs=1e-6)
        assert result.r_squared == pytest.approx(1.0, abs=1e-6)
        assert result.sse == pytest.approx(0.0, abs=1e-12)

    def test_pinv_solver_agrees(self):
        x = np.arange(10, dtype=float)
        ds = _dataset_from_columns({"x": x, "y": 2.0 + 3.0 * x})
        result = linear_regression(ds, "y", ["x"], solver="pinv")
        assert result.solver == "pinv"
        assert result.coefficient("x") == pytest.approx(3.0, abs=1e-6)


class TestAgainstSklearn:
    def test_coefficients_match(self):
        data = _make_linear_data()
        ds = _dataset_from_columns(data)
        result = linear_regression(ds, "y", ["x1", "x2"])

        X = np.column_stack([data["x1"], data["x2"]])
        ref = LinearRegression().fit(X, data["y"])
        assert result.intercept == pytest.approx(ref.intercept_, rel=1e-8)
        np.testing.assert_allclose(
            [result.coefficient("x1"), result.coefficient("x2")],
            ref.coef_,
            rtol=1e-8,
        )
        assert result.r_squared == pytest.approx(ref.score(X, data["y"]), rel=1e-8)

    def test_fit_statistics_consistent(self):
        data = _make_linear_data()
        ds = _dataset_from_columns(data)
        result = linear_regression(ds, "y", ["x1", "x2"])
        n, k = 100, 2
        y = data["y"]
        assert result.sst == pytest.approx(np.sum((y - y.mean()) ** 2), rel=1e-10)
        assert result.sst == pytest.approx(result.sse + result.ssr, rel=1e-12)
        assert result.adj_r_squared == pytest.approx(
            1 - (1 - result.r_squared) * (n - 1) / (n - k - 1)
        )
        assert result.sigma == pytest.approx(np.sqrt(result.sse / (n - k - 1)))

    def test_matches_statsmodels_summary_values(self):
        data = _make_linear_data()
        ds = _dataset_from_columns(data)
        result = linear_regression(ds, "y", ["x1", "x2"])
        sm_res = result.context.sm_results
        assert result.r_squared == pytest.approx(sm_res.rsquared, rel=1e-10)
        assert result.adj_r_squared == pytest.approx(sm_res.rsquared_adj, rel=1e-10)
        assert result.sse == pytest.approx(sm_res.ssr, rel=1e-10)


class TestCoefficientNaming:
    def test_intercept_first_then_input_order(self):
        ds = _dataset_from_columns(_make_linear_data())
        result = linear_regression(ds, "y", ["x2", "x1"])
        assert result.coefficient_names == ["Intercept", "x2", "x1"]
        assert len(result.coefficient_values) == 3

    def test_lookup_by_unknown_name(self):
        ds = _dataset_from_columns(_make_linear_data())
        result = linear_regression(ds, "y", ["x1"])
        with pytest.raises(KeyError, match="Available"):
            result.coefficient("x2")

    def test_observation_indices_ascending(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        ds.remove_observation(3)
        result = linear_regression(ds, "y", ["x1"])
        assert result.observation_indices == [0, 1, 2, 4, 5, 6, 7, 8, 9]
        assert result.n_observations == 9


class TestPreconditions:
    def test_no_independents(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        with pytest.raises(ConfigurationError, match="At least one independent"):
            linear_regression(ds, "y", [])

    def test_empty_dependent_message(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        with pytest.raises(ConfigurationError) as excinfo:
            linear_regression(ds, "", ["x1"])
        assert str(excinfo.value) == "No dependent variable was selected."

    def test_missing_dependent(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        with pytest.raises(VariableNotFoundError, match="'z' not found"):
            linear_regression(ds, "z", ["x1"])

    def test_duplicate_independent(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        with pytest.raises(ConfigurationError, match="more than once"):
            linear_regression(ds, "y", ["x1", "x1"])

    def test_dependent_among_independents(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        with pytest.raises(ConfigurationError, match="cannot also be"):
            linear_regression(ds, "y", ["y", "x1"])

    def test_unknown_solver(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        with pytest.raises(ValueError, match="Unknown solver"):
            linear_regression(ds, "y", ["x1"], solver="svd")

    @pytest.mark.parametrize("vtype", ["TEXT", "QUALITATIVE", "BOOLEAN"])
    def test_non_numeric_type_rejected_before_reading_cells(self, vtype):
        # The cells are numbers; only the declared type is wrong.
        ds = _dataset_from_columns(_make_linear_data(n=10), types={"x2": vtype})
        with pytest.raises(VariableTypeError, match="must be numeric"):
            linear_regression(ds, "y", ["x1", "x2"])

    def test_non_numeric_dependent(self):
        ds = _dataset_from_columns(_make_linear_data(n=10), types={"y": "TEXT"})
        with pytest.raises(VariableTypeError, match="dependent"):
            linear_regression(ds, "y", ["x1"])

    def test_type_checked_before_data_sufficiency(self):
        ds = _dataset_from_columns({"y": [1.0], "x": [2.0]}, types={"x": "TEXT"})
        with pytest.raises(VariableTypeError):
            linear_regression(ds, "y", ["x"])

    @pytest.mark.parametrize("n, k", [(0, 1), (1, 1), (2, 2), (2, 3)])
    def test_insufficient_data(self, n, k):
        rng = np.random.default_rng(0)
        columns = {"y": rng.standard_normal(n)}
        for j in range(k):
            columns[f"x{j}"] = rng.standard_normal(n)
        if n == 0:
            ds = Dataset()
            for name in columns:
                ds.add_variable(Variable(name))
        else:
            ds = _dataset_from_columns(columns)
        with pytest.raises(InsufficientDataError) as excinfo:
            linear_regression(ds, "y", [f"x{j}" for j in range(k)])
        assert excinfo.value.n_required == k + 1
        assert excinfo.value.shortfall == k + 1 - n
        assert "more needed" in str(excinfo.value)

    def test_missing_cell_identifies_row_and_column(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        ds.set_value(4, "x2", None)
        with pytest.raises(DataQualityError, match="'x2' at observation 4") as excinfo:
            linear_regression(ds, "y", ["x1", "x2"])
        assert excinfo.value.observation_index == 4
        assert excinfo.value.variable == "x2"

    def test_text_cell_in_numeric_column(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        ds.set_value(2, "y", "n/a")
        with pytest.raises(DataQualityError, match="text"):
            linear_regression(ds, "y", ["x1"])

    def test_non_finite_cell(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        ds.set_value(0, "x1", float("inf"))
        with pytest.raises(DataQualityError, match="non-finite"):
            linear_regression(ds, "y", ["x1"])

    def test_collinear_design(self):
        x = np.arange(10, dtype=float)
        ds = _dataset_from_columns({"y": x**2, "a": x, "b": 2 * x})
        with pytest.raises(SingularDesignError, match="rank deficient"):
            linear_regression(ds, "y", ["a", "b"])

    def test_constant_predictor_is_singular(self):
        ds = _dataset_from_columns({"y": [1.0, 2.0, 3.0], "c": [5.0, 5.0, 5.0]})
        with pytest.raises(SingularDesignError):
            linear_regression(ds, "y", ["c"])

    def test_removed_variable_is_not_found(self):
        ds = _dataset_from_columns(_make_linear_data(n=10))
        ds.remove_variable("x2")
        with pytest.raises(ConfigurationError, match="not found"):
            linear_regression(ds, "y", ["x1", "x2"])


class TestDegenerateStatistics:
    def test_constant_response_gives_nan_r_squared(self):
        ds = _dataset_from_columns({"y": [4.0, 4.0, 4.0, 4.0], "x": [1.0, 2.0, 3.0, 4.0]})
        result = linear_regression(ds, "y", ["x"])
        assert result.coefficient("x") == pytest.approx(0.0, abs=1e-12)
        assert np.isnan(result.r_squared)

    def test_saturated_model_gives_nan_sigma(self):
        ds = _dataset_from_columns({"y": [1.0, 3.0], "x": [0.0, 1.0]})
        result = linear_regression(ds, "y", ["x"])
        assert result.coefficient("x") == pytest.approx(2.0)
        assert np.isnan(result.sigma)
        assert np.isnan(result.adj_r_squared)


class TestInputNotModified:
    def test_dataset_untouched(self):
        ds = _dataset_from_columns(_make_linear_data(n=20))
        before = {i: ds.observation_values(i) for i in ds.observation_indices()}
        linear_regression(ds, "y", ["x1", "x2"])
        after = {i: ds.observation_values(i) for i in ds.observation_indices()}
        assert before == after
        assert ds.variable_names == ["y", "x1", "x2"]
