"""Tests for the Baron–Kenny mediation analyzer."""

import numpy as np
import pytest
from scipy import stats

from regression_analyzer.dataset import Dataset
from regression_analyzer.errors import (
    ConfigurationError,
    DataQualityError,
    VariableNotFoundError,
    VariableTypeError,
)
from regression_analyzer.mediation import mediation_analysis
from regression_analyzer.variables import Variable


def _dataset_from_columns(columns, types=None):
    types = types or {}
    ds = Dataset("mediation")
    for name in columns:
        ds.add_variable(Variable(name, types.get(name, "NUMERIC")))
    n = len(next(iter(columns.values())))
    for i in range(n):
        ds.add_observation({name: values[i] for name, values in columns.items()})
    return ds


def _make_mediation_data(n=300, seed=42):
    """X -> M -> Y with a = 0.8, b = 0.5 and direct effect 0.3."""
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n)
    m = 0.8 * x + rng.standard_normal(n) * 0.5
    y = 0.3 * x + 0.5 * m + rng.standard_normal(n) * 0.5
    return {"x": x, "m": m, "y": y}


class TestPathRecovery:
    def test_paths_near_truth(self):
        report = mediation_analysis(_dataset_from_columns(_make_mediation_data()), "x", "m", "y")
        assert report.a_path == pytest.approx(0.8, abs=0.1)
        assert report.b_path == pytest.approx(0.5, abs=0.1)
        assert report.direct_effect == pytest.approx(0.3, abs=0.1)
        assert report.indirect_effect == pytest.approx(report.a_path * report.b_path)

    def test_a_path_matches_scipy_linregress(self):
        data = _make_mediation_data()
        report = mediation_analysis(_dataset_from_columns(data), "x", "m", "y")
        ref_a = stats.linregress(data["x"], data["m"]).slope
        ref_c = stats.linregress(data["x"], data["y"]).slope
        assert report.a_path == pytest.approx(ref_a, rel=1e-8)
        assert report.total_effect == pytest.approx(ref_c, rel=1e-8)

    def test_total_effect_check_reported(self):
        report = mediation_analysis(_dataset_from_columns(_make_mediation_data()), "x", "m", "y")
        assert report.total_effect_check == pytest.approx(
            report.direct_effect + report.indirect_effect
        )
        # For OLS with an intercept the decomposition is additive.
        assert report.total_effect_check == pytest.approx(report.total_effect, rel=1e-8)

    def test_uncorrelated_mediator_gives_exact_additivity(self):
        # Balanced +/-1 contrasts: X and M are exactly uncorrelated.
        x = np.tile([-1.0, 1.0], 4)
        m = np.tile([-1.0, -1.0, 1.0, 1.0], 2)
        z = np.array([1.0, -1.0, -1.0, 1.0, -1.0, 1.0, 1.0, -1.0])
        y = 1.0 + 2.0 * x + 3.0 * m + 0.5 * z
        report = mediation_analysis(_dataset_from_columns({"x": x, "m": m, "y": y}), "x", "m", "y")
        assert report.a_path == pytest.approx(0.0, abs=1e-12)
        assert report.direct_effect == pytest.approx(report.total_effect, abs=1e-12)
        assert report.total_effect_check == pytest.approx(report.total_effect, abs=1e-12)
        assert report.b_path == pytest.approx(3.0, abs=1e-12)

    def test_proportion_mediated(self):
        report = mediation_analysis(_dataset_from_columns(_make_mediation_data()), "x", "m", "y")
        assert report.proportion_mediated == pytest.approx(
            report.indirect_effect / report.total_effect
        )
        assert "not a significance test" in report.interpretation

    def test_zero_total_effect_gives_nan_proportion(self):
        x = np.tile([-1.0, 1.0], 4)
        m = np.tile([-1.0, -1.0, 1.0, 1.0], 2)
        y = 5.0 + m
        report = mediation_analysis(_dataset_from_columns({"x": x, "m": m, "y": y}), "x", "m", "y")
        assert np.isnan(report.proportion_mediated)
        assert "no proportion" in report.interpretation


class TestUnderlyingModels:
    def test_three_models_exposed(self):
        report = mediation_analysis(_dataset_from_columns(_make_mediation_data()), "x", "m", "y")
        assert report.mediator_model.dependent == "m"
        assert report.mediator_model.coefficient_names == ["Intercept", "x"]
        assert report.outcome_model.coefficient_names == ["Intercept", "x", "m"]
        assert report.total_model.coefficient_names == ["Intercept", "x"]
        assert report.a_path == report.mediator_model.coefficient("x")
        assert report.b_path == report.outcome_model.coefficient("m")

    def test_to_dict_nests_models(self):
        report = mediation_analysis(_dataset_from_columns(_make_mediation_data()), "x", "m", "y")
        d = report.to_dict()
        assert isinstance(d["outcome_model"], dict)
        assert "context" not in d["outcome_model"]
        assert d["a_path"] == report.a_path


class TestMediationPreconditions:
    @pytest.mark.parametrize(
        "x, m, y",
        [("x", "x", "y"), ("x", "m", "x"), ("x", "m", "m")],
    )
    def test_roles_must_be_distinct(self, x, m, y):
        ds = _dataset_from_columns(_make_mediation_data(n=20))
        with pytest.raises(ConfigurationError, match="must be different"):
            mediation_analysis(ds, x, m, y)

    def test_unknown_variable(self):
        ds = _dataset_from_columns(_make_mediation_data(n=20))
        with pytest.raises(VariableNotFoundError):
            mediation_analysis(ds, "x", "nope", "y")

    def test_empty_selection(self):
        ds = _dataset_from_columns(_make_mediation_data(n=20))
        with pytest.raises(ConfigurationError, match="No mediator"):
            mediation_analysis(ds, "x", "", "y")

    @pytest.mark.parametrize("vtype", ["TEXT", "QUALITATIVE", "BOOLEAN"])
    def test_non_numeric_mediator(self, vtype):
        ds = _dataset_from_columns(_make_mediation_data(n=20), types={"m": vtype})
        with pytest.raises(VariableTypeError, match="mediator"):
            mediation_analysis(ds, "x", "m", "y")

    def test_missing_cell_propagates(self):
        ds = _dataset_from_columns(_make_mediation_data(n=20))
        ds.set_value(7, "m", None)
        with pytest.raises(DataQualityError, match="observation 7"):
            mediation_analysis(ds, "x", "m", "y")
