"""Tests for result objects: dict access and serialisation."""

import json

import numpy as np
import pytest

from regression_analyzer._results import RegressionResult, _numpy_to_python
from regression_analyzer.dataset import Dataset
from regression_analyzer.moderation import moderation_analysis
from regression_analyzer.regression import linear_regression
from regression_analyzer.variables import Variable


def _make_result():
    rng = np.random.default_rng(3)
    ds = Dataset()
    for name in ("y", "x", "w"):
        ds.add_variable(Variable(name))
    for _ in range(40):
        x, w = rng.standard_normal(2)
        ds.add_observation({"x": x, "w": w, "y": 1 + x * w + rng.standard_normal() * 0.1})
    return ds


class TestNumpyToPython:
    def test_scalars_and_arrays(self):
        out = _numpy_to_python(
            {"a": np.float64(1.5), "b": np.int32(2), "c": np.array([1, 2]), "d": np.bool_(True)}
        )
        assert out == {"a": 1.5, "b": 2, "c": [1, 2], "d": True}
        assert type(out["a"]) is float
        assert type(out["b"]) is int

    def test_tuples_kept(self):
        assert _numpy_to_python((np.float64(1.0),)) == (1.0,)


class TestDictAccess:
    def test_getitem_get_contains(self):
        result = linear_regression(_make_result(), "y", ["x"])
        assert result["r_squared"] == result.r_squared
        assert result.get("nope", 5) == 5
        assert "coefficients" in result
        assert "nope" not in result
        assert 3 not in result
        with pytest.raises(KeyError):
            result["nope"]

    def test_frozen(self):
        result = linear_regression(_make_result(), "y", ["x"])
        with pytest.raises(AttributeError):
            result.r_squared = 0.0

    def test_context_excluded_from_dict(self):
        result = linear_regression(_make_result(), "y", ["x"])
        d = result.to_dict()
        assert "context" not in d
        assert result.context is not None
        assert result.context.X.shape == (40, 2)

    def test_regression_json_serialisable(self):
        result = linear_regression(_make_result(), "y", ["x", "w"])
        payload = json.loads(json.dumps(result.to_dict()))
        assert payload["coefficients"]["x"] == pytest.approx(result.coefficient("x"))
        assert payload["solver"] == "qr"

    def test_moderation_json_serialisable(self):
        report = moderation_analysis(_make_result(), "x", "w", "y")
        payload = json.loads(json.dumps(report.to_dict()))
        assert payload["verdict"] == report.verdict
        assert payload["model"]["coefficients"]["x*w"] == pytest.approx(report.interaction_coef)


class TestRegressionResult:
    def test_manual_construction(self):
        result = RegressionResult(
            dependent="y",
            independents=["x"],
            coefficients={"Intercept": 1.0, "x": 2.0},
            r_squared=0.5,
            adj_r_squared=0.4,
            sigma=1.0,
            ssr=1.0,
            sse=1.0,
            sst=2.0,
            n_observations=10,
            n_independent=1,
            solver="qr",
        )
        assert result.intercept == 1.0
        assert result.coefficient_values == [1.0, 2.0]
        assert result.observation_indices == []
        assert result.context is None
