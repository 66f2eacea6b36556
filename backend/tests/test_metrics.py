"""
tests/test_metrics.py
──────────────────────
Unit tests for the error / accuracy metrics and the backtest selector.
"""

import logging

import numpy as np
import pytest

from analytics.backtest import (
    MIN_BACKTEST_POINTS,
    backtest_all_models,
    select_best_model,
    split_history,
)
from analytics.metrics import (
    directional_accuracy,
    evaluate,
    mean_absolute_error,
    mean_squared_error,
    r_squared,
)
from schemas.forecast import MODEL_NAMES, AllModelMetrics, ModelMetrics


# ── Individual metrics ────────────────────────────────────────────────────────


class TestMetrics:
    """Scale-normalised MSE / MAE, raw R², directional accuracy."""

    def test_identical_series_scores_perfectly(self) -> None:
        series = [10.0, 12.0, 11.0, 15.0, 14.0]
        metrics = evaluate(series, series)
        assert metrics.mse == 0.0
        assert metrics.mae == 0.0
        assert metrics.r2 == pytest.approx(1.0)
        assert metrics.accuracy == pytest.approx(100.0)

    def test_known_values(self) -> None:
        actual = [1.0, 2.0, 3.0, 4.0]
        predicted = [1.0, 2.0, 3.0, 5.0]
        # Errors normalised by max(actual) = 4.
        assert mean_squared_error(actual, predicted) == pytest.approx((1 / 4) ** 2 / 4)
        assert mean_absolute_error(actual, predicted) == pytest.approx((1 / 4) / 4)
        # SS_tot = 5, SS_res = 1.
        assert r_squared(actual, predicted) == pytest.approx(0.8)
        assert directional_accuracy(actual, predicted) == pytest.approx(100.0)

    def test_opposite_directions(self) -> None:
        assert directional_accuracy([1.0, 2.0, 1.0], [1.0, 0.0, 1.0]) == 0.0

    def test_flat_step_counts_as_fall(self) -> None:
        assert directional_accuracy([1.0, 1.0], [1.0, 0.5]) == pytest.approx(100.0)

    def test_direction_needs_two_points(self) -> None:
        assert directional_accuracy([1.0], [1.0]) == 0.0

    def test_constant_actuals_give_zero_r2(self) -> None:
        assert r_squared([5.0, 5.0, 5.0], [4.0, 5.0, 6.0]) == 0.0

    def test_r2_can_be_negative(self) -> None:
        assert r_squared([1.0, 2.0, 3.0], [3.0, 2.0, 1.0]) < 0

    def test_mae_non_negative_for_negative_actuals(self) -> None:
        """max(actual) < 0 must not flip the sign of the absolute error."""
        metrics = evaluate([-3.0, -2.0, -1.0], [-2.0, -1.0, 0.0])
        assert metrics.mae >= 0.0
        assert metrics.mae == pytest.approx(1.0)
        assert metrics.mse == pytest.approx(1.0)

    def test_accepts_numpy_arrays(self) -> None:
        a = np.array([1.0, 2.0, 3.0])
        assert evaluate(a, a).r2 == pytest.approx(1.0)


class TestZeroMetricPaths:
    """"No data" and "perfect fit" both report zero error."""

    def test_empty_input_is_all_zero(self) -> None:
        assert evaluate([], []) == ModelMetrics(mse=0.0, r2=0.0, mae=0.0, accuracy=0.0)

    def test_length_mismatch_is_all_zero(self) -> None:
        metrics = evaluate([1.0, 2.0, 3.0], [1.0, 2.0])
        assert (metrics.mse, metrics.r2, metrics.mae, metrics.accuracy) == (0.0, 0.0, 0.0, 0.0)

    def test_perfect_fit_matches_no_data_on_error_metrics(self) -> None:
        """MSE / MAE alone cannot tell the two apart; R² and accuracy can."""
        empty = evaluate([], [])
        perfect = evaluate([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])
        assert (perfect.mse, perfect.mae) == (empty.mse, empty.mae)
        assert perfect.r2 != empty.r2
        assert perfect.accuracy != empty.accuracy


# ── Backtest selector ─────────────────────────────────────────────────────────


class TestBacktest:
    """80/20 split, expanding-horizon validation, best-by-R² election."""

    def test_nineteen_points_returns_defaults(self, make_history) -> None:
        history = make_history([100.0 + i for i in range(MIN_BACKTEST_POINTS - 1)])
        result = backtest_all_models(history)
        assert result.best_model == "lstm"
        for name in MODEL_NAMES:
            assert result.for_model(name) == ModelMetrics()

    def test_split_at_eighty_percent(self, make_history) -> None:
        train, validation = split_history(make_history([1.0] * 33))
        assert (len(train), len(validation)) == (26, 7)

    def test_best_model_is_known_name(self, random_walk_history, rng) -> None:
        result = backtest_all_models(random_walk_history, rng=rng)
        assert isinstance(result, AllModelMetrics)
        assert result.best_model in MODEL_NAMES

    def test_best_model_has_highest_r2(self, random_walk_history, rng) -> None:
        result = backtest_all_models(random_walk_history, rng=rng)
        best_r2 = result.for_model(result.best_model).r2
        assert all(best_r2 >= result.for_model(name).r2 for name in MODEL_NAMES)

    def test_accuracy_is_a_percentage(self, random_walk_history, rng) -> None:
        result = backtest_all_models(random_walk_history, rng=rng)
        for name in MODEL_NAMES:
            assert 0.0 <= result.for_model(name).accuracy <= 100.0

    def test_same_seed_same_scores(self, random_walk_history) -> None:
        a = backtest_all_models(random_walk_history, rng=np.random.default_rng(3))
        b = backtest_all_models(random_walk_history, rng=np.random.default_rng(3))
        assert a == b

    def test_linear_trend_favours_regression(self, make_history) -> None:
        """A perfectly linear series is extrapolated almost exactly by OLS."""
        history = make_history([100.0 + 2 * i for i in range(50)])
        result = backtest_all_models(history, rng=np.random.default_rng(0))
        assert result.linear_regression.r2 > 0.9
        assert result.linear_regression.r2 > result.arima.r2

    def test_logs_best_model_with_its_r2(self, random_walk_history, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="analytics.backtest"):
            result = backtest_all_models(random_walk_history, rng=np.random.default_rng(5))
        best_r2 = result.for_model(result.best_model).r2
        assert f"Best model by R²: {result.best_model} (r2={best_r2:.4f})" in caplog.text

    def test_tie_goes_to_first_declared(self) -> None:
        scores = {name: ModelMetrics(r2=0.5) for name in MODEL_NAMES}
        assert select_best_model(scores) == "linearRegression"

    def test_select_best_model(self) -> None:
        scores = {name: ModelMetrics(r2=0.1) for name in MODEL_NAMES}
        scores["randomForest"] = ModelMetrics(r2=0.7)
        scores["lstm"] = ModelMetrics(r2=0.7)
        assert select_best_model(scores) == "randomForest"

    def test_serialises_with_camel_case_keys(self) -> None:
        payload = AllModelMetrics().model_dump(by_alias=True)
        assert set(payload) == {"linearRegression", "arima", "randomForest", "lstm", "bestModel"}
