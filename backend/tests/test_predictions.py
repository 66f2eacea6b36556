"""
tests/test_predictions.py
──────────────────────────
Tests for the prediction entry point and the chart merge.
"""

from datetime import date

import numpy as np
import pytest

from analytics.predictions import (
    combine_with_predictions,
    confidence_for,
    generate_predictions,
    next_trading_date,
)
from schemas.forecast import MODEL_NAMES, PredictionResult


# ── Horizon length and preconditions ──────────────────────────────────────────


class TestGeneratePredictions:
    """Dated, confidence-scored horizon from one strategy."""

    @pytest.mark.parametrize("model_name", MODEL_NAMES)
    @pytest.mark.parametrize("days", [1, 7, 30])
    def test_length_equals_horizon(self, model_name, days, random_walk_history, rng) -> None:
        predictions = generate_predictions(random_walk_history, days, model_name, rng=rng)
        assert len(predictions) == days
        assert all(isinstance(p, PredictionResult) for p in predictions)

    def test_fifteen_points_is_enough(self, make_history) -> None:
        history = make_history([100.0 + i for i in range(15)])
        assert len(generate_predictions(history, 5)) == 5

    def test_fourteen_points_returns_empty(self, make_history) -> None:
        history = make_history([100.0 + i for i in range(14)])
        assert generate_predictions(history, 7) == []

    def test_default_horizon_is_seven(self, random_walk_history) -> None:
        assert len(generate_predictions(random_walk_history)) == 7

    def test_history_is_not_mutated(self, random_walk_history, rng) -> None:
        snapshot = list(random_walk_history)
        generate_predictions(random_walk_history, 10, "linearRegression", rng=rng)
        assert random_walk_history == snapshot

    def test_prices_rounded_to_cents(self, random_walk_history, rng) -> None:
        for p in generate_predictions(random_walk_history, 10, "arima", rng=rng):
            assert p.predicted_close == round(p.predicted_close, 2)

    def test_every_step_uses_the_full_history(self, random_walk_history) -> None:
        """Step i equals the strategy forecast at days_ahead=i, not a re-fit."""
        from analytics.forecasting import EnsembleTreeForecaster

        predictions = generate_predictions(random_walk_history, 5, "randomForest")
        forecaster = EnsembleTreeForecaster()
        expected = [round(forecaster.forecast(random_walk_history, i), 2) for i in range(1, 6)]
        assert [p.predicted_close for p in predictions] == expected

    def test_same_seed_same_predictions(self, random_walk_history) -> None:
        a = generate_predictions(random_walk_history, 7, "linearRegression", rng=np.random.default_rng(9))
        b = generate_predictions(random_walk_history, 7, "linearRegression", rng=np.random.default_rng(9))
        assert a == b

    def test_rising_series_trend_first_step(self, rising_history, rng) -> None:
        first = generate_predictions(rising_history, 1, "linearRegression", rng=rng)[0]
        assert first.predicted_close == pytest.approx(130.0, abs=0.35)
        assert first.model == "linearRegression"
        assert first.is_prediction is True


# ── Dates ─────────────────────────────────────────────────────────────────────


class TestTradingDates:
    """Weekend skipping, applied to each offset independently."""

    @pytest.mark.parametrize("model_name", MODEL_NAMES)
    def test_no_weekend_dates(self, model_name, random_walk_history, rng) -> None:
        predictions = generate_predictions(random_walk_history, 30, model_name, rng=rng)
        assert all(p.date.weekday() < 5 for p in predictions)

    def test_friday_offsets_collapse_onto_monday(self) -> None:
        friday = date(2024, 2, 9)
        assert next_trading_date(friday, 1) == date(2024, 2, 12)
        assert next_trading_date(friday, 2) == date(2024, 2, 12)
        assert next_trading_date(friday, 3) == date(2024, 2, 12)
        assert next_trading_date(friday, 4) == date(2024, 2, 13)

    def test_midweek_offsets(self) -> None:
        wednesday = date(2024, 2, 7)
        assert next_trading_date(wednesday, 1) == date(2024, 2, 8)
        assert next_trading_date(wednesday, 3) == date(2024, 2, 12)

    def test_prediction_dates_follow_policy(self, rising_history) -> None:
        """rising_history ends on Friday 2024-02-09."""
        assert rising_history[-1].date == date(2024, 2, 9)
        dates = [p.date for p in generate_predictions(rising_history, 5, "lstm")]
        assert dates == [
            date(2024, 2, 12),
            date(2024, 2, 12),
            date(2024, 2, 12),
            date(2024, 2, 13),
            date(2024, 2, 14),
        ]

    def test_dates_serialise_as_iso_days(self, rising_history) -> None:
        payload = generate_predictions(rising_history, 1)[0].model_dump(mode="json", by_alias=True)
        assert payload["date"] == "2024-02-12"
        assert set(payload) == {"date", "predictedClose", "confidence", "isPrediction", "model"}


# ── Confidence ────────────────────────────────────────────────────────────────


class TestConfidence:
    """Base confidence per model, −0.05 per day, floor 0.55."""

    @pytest.mark.parametrize(
        "model_name,base",
        [("lstm", 0.92), ("randomForest", 0.88), ("arima", 0.85), ("linearRegression", 0.82)],
    )
    def test_first_day_confidence(self, model_name, base) -> None:
        assert confidence_for(model_name, 1) == pytest.approx(base - 0.05)

    def test_floor(self) -> None:
        assert confidence_for("lstm", 30) == 0.55

    @pytest.mark.parametrize("model_name", MODEL_NAMES)
    def test_non_increasing_and_bounded(self, model_name, random_walk_history, rng) -> None:
        confidences = [
            p.confidence for p in generate_predictions(random_walk_history, 30, model_name, rng=rng)
        ]
        assert all(a >= b for a, b in zip(confidences, confidences[1:]))
        assert all(0.55 <= c <= 0.95 for c in confidences)


# ── Unknown model names ───────────────────────────────────────────────────────


class TestUnknownModel:
    """Unknown names run the sequence-memory strategy under their own label."""

    def test_falls_back_to_lstm_prices(self, random_walk_history) -> None:
        fallback = generate_predictions(random_walk_history, 5, "gru")
        lstm = generate_predictions(random_walk_history, 5, "lstm")
        assert [p.predicted_close for p in fallback] == [p.predicted_close for p in lstm]

    def test_keeps_label_and_default_confidence(self, random_walk_history) -> None:
        first = generate_predictions(random_walk_history, 1, "gru")[0]
        assert first.model == "gru"
        assert first.confidence == pytest.approx(0.82 - 0.05)


# ── Chart merge ───────────────────────────────────────────────────────────────


class TestCombine:
    """History followed by predictions, one non-null value per record."""

    def test_length_and_exclusive_values(self, random_walk_history) -> None:
        predictions = generate_predictions(random_walk_history, 7)
        combined = combine_with_predictions(random_walk_history, predictions)

        assert len(combined) == len(random_walk_history) + len(predictions)
        for point in combined:
            assert (point.actual is None) != (point.predicted is None)

    def test_order_and_fields(self, rising_history) -> None:
        predictions = generate_predictions(rising_history, 2)
        combined = combine_with_predictions(rising_history, predictions)

        assert combined[0].actual == combined[0].close == 100.0
        assert combined[0].is_prediction is False
        assert combined[29].date == rising_history[-1].date

        tail = combined[30:]
        assert [p.predicted for p in tail] == [p.predicted_close for p in predictions]
        assert all(p.is_prediction and p.close is None for p in tail)

    def test_empty_predictions(self, rising_history) -> None:
        combined = combine_with_predictions(rising_history, [])
        assert len(combined) == len(rising_history)
        assert all(not p.is_prediction for p in combined)
