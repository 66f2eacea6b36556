"""
analytics/forecasting/sequence_memory.py
────────────────────────────────────────
Gated-memory simulation blended with pattern matching and technical
indicators ("lstm").

There is no network here.  The "cell" is a left fold over the closes with
fixed forget / input gates; its hidden-to-cell ratio becomes one of four
price estimates:

    hidden_state_price   (hidden / cell) × last close
    pattern_price        move that followed the most similar past 5-day window
    momentum_price       5/10-session momentum, volume-weighted
    technical_price      RSI and Bollinger-band bias

The weighted blend is then pulled toward the last close as the horizon
grows.
"""

import math
from functools import reduce
from typing import NamedTuple, Sequence, Tuple

import numpy as np

from analytics.forecasting.base import EPSILON, BaseForecaster
from analytics.history import closes, volumes
from analytics.statistics import mean, safe_ratio, std_dev
from schemas.forecast import HistoricalDataPoint

SEQUENCE_MIN_POINTS = 15
SEQUENCE_FLOOR_RATIO = 0.70

# ── Gated memory ──────────────────────────────────────────────────────────────
FORGET_GATE = 0.9
INPUT_GATE = 0.3

# ── Pattern match ─────────────────────────────────────────────────────────────
PATTERN_LOOKBACK = 5
PATTERN_TAIL_GAP = 5
PATTERN_SIMILARITY_WEIGHT = 0.5

# ── Momentum ──────────────────────────────────────────────────────────────────
SHORT_MOMENTUM_WEIGHT = 0.6
LONG_MOMENTUM_WEIGHT = 0.4
MOMENTUM_SCALE = 0.3
VOLUME_HIGH_SIGNAL = 1.1
VOLUME_LOW_SIGNAL = 0.9

# ── Technical indicators ──────────────────────────────────────────────────────
RSI_PERIOD = 14
RSI_OVERBOUGHT = 70
RSI_OVERSOLD = 30
RSI_BIAS = 0.01
RSI_LOSS_FALLBACK = 0.001
BOLLINGER_WINDOW = 20
BOLLINGER_WIDTH = 2
BOLLINGER_EDGE = 0.1
BOLLINGER_BIAS = 0.005

# ── Blend ─────────────────────────────────────────────────────────────────────
HIDDEN_WEIGHT = 0.25
PATTERN_WEIGHT = 0.20
MOMENTUM_WEIGHT = 0.25
TECHNICAL_WEIGHT = 0.30
HORIZON_DECAY_PER_DAY = 0.01


class MemoryState(NamedTuple):
    cell: float
    hidden: float


class PatternMatch(NamedTuple):
    start: int
    similarity: float
    change: float


def _memory_step(state: MemoryState, close: float) -> MemoryState:
    cell = FORGET_GATE * state.cell + INPUT_GATE * close
    hidden = math.tanh(cell / (close + EPSILON)) * cell
    return MemoryState(cell, hidden)


def run_memory(prices: Sequence[float]) -> MemoryState:
    """Fold the gated-memory update over the series, seeded with the first close."""
    first = float(prices[0])
    return reduce(_memory_step, (float(p) for p in prices[1:]), MemoryState(first, first))


def _normalise(window: np.ndarray) -> np.ndarray:
    return window / (mean(window) + EPSILON)


def _cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b) + EPSILON))


def match_pattern(prices: np.ndarray, days_ahead: int) -> PatternMatch:
    """
    Find the past 5-day window most similar to the latest one.

    Candidate windows start at index 5 and stop early enough to leave a
    tail of ten bars before the end of the series.  The returned ``change``
    is the percentage move from the end of the matched window to
    ``days_ahead`` bars later (clamped to the last bar).

    Returns:
        ``PatternMatch(start=0, similarity=0.0, change=0.0)`` when the
        series is too short to hold a candidate window.
    """
    n = len(prices)
    recent = _normalise(prices[-PATTERN_LOOKBACK:])

    best_start, best_similarity = -1, -math.inf
    for start in range(PATTERN_LOOKBACK, n - PATTERN_LOOKBACK - PATTERN_TAIL_GAP):
        candidate = _normalise(prices[start : start + PATTERN_LOOKBACK])
        similarity = _cosine_similarity(recent, candidate)
        if similarity > best_similarity:
            best_start, best_similarity = start, similarity

    if best_start < 0:
        return PatternMatch(0, 0.0, 0.0)

    anchor = prices[best_start + PATTERN_LOOKBACK - 1]
    future_idx = min(best_start + PATTERN_LOOKBACK + days_ahead - 1, n - 1)
    change = safe_ratio(prices[future_idx] - anchor, anchor)
    return PatternMatch(best_start, best_similarity, change)


def rsi(prices: np.ndarray, period: int = RSI_PERIOD) -> float:
    """
    RSI over the last ``period`` changes.

    Flat sessions count toward losses; with no (or only zero) losses the
    average loss falls back to ``RSI_LOSS_FALLBACK``.
    """
    changes = np.diff(prices[-(period + 1) :])
    gains = changes[changes > 0]
    losses = np.abs(changes[changes <= 0])
    avg_gain = mean(gains)
    avg_loss = mean(losses) if losses.size else RSI_LOSS_FALLBACK
    if avg_loss == 0:
        avg_loss = RSI_LOSS_FALLBACK
    return 100 - 100 / (1 + avg_gain / avg_loss)


def bollinger_position(prices: np.ndarray) -> float:
    """Where the last close sits inside the 20-day ±2σ band (0 = lower, 1 = upper)."""
    window = prices[-BOLLINGER_WINDOW:]
    sma = mean(window)
    sigma = std_dev(window)
    upper = sma + BOLLINGER_WIDTH * sigma
    lower = sma - BOLLINGER_WIDTH * sigma
    return (prices[-1] - lower) / (upper - lower + EPSILON)


def technical_bias(prices: np.ndarray) -> Tuple[float, float]:
    """Return ``(rsi_signal, bollinger_signal)`` fractional price biases."""
    strength = rsi(prices)
    if strength > RSI_OVERBOUGHT:
        rsi_signal = -RSI_BIAS
    elif strength < RSI_OVERSOLD:
        rsi_signal = RSI_BIAS
    else:
        rsi_signal = 0.0

    position = bollinger_position(prices)
    if position > 1 - BOLLINGER_EDGE:
        bb_signal = -BOLLINGER_BIAS
    elif position < BOLLINGER_EDGE:
        bb_signal = BOLLINGER_BIAS
    else:
        bb_signal = 0.0
    return rsi_signal, bb_signal


class SequenceMemoryForecaster(BaseForecaster):
    """Gated-memory + pattern-match + indicator blend."""

    name = "lstm"
    min_points = SEQUENCE_MIN_POINTS
    floor_ratio = SEQUENCE_FLOOR_RATIO

    def _predict(self, history: Sequence[HistoricalDataPoint], days_ahead: int) -> float:
        prices = closes(history)
        vols = volumes(history)
        last = float(prices[-1])

        state = run_memory(prices)
        hidden_price = safe_ratio(state.hidden, state.cell) * last

        pattern = match_pattern(prices, days_ahead)
        pattern_price = last * (1 + pattern.change * pattern.similarity * PATTERN_SIMILARITY_WEIGHT)

        short_momentum = safe_ratio(last - prices[-5], prices[-5])
        long_momentum = safe_ratio(last - prices[-10], prices[-10])
        volume_signal = (
            VOLUME_HIGH_SIGNAL if mean(vols[-5:]) > mean(vols[-20:]) else VOLUME_LOW_SIGNAL
        )
        momentum = short_momentum * SHORT_MOMENTUM_WEIGHT + long_momentum * LONG_MOMENTUM_WEIGHT
        momentum_price = last * (1 + momentum * volume_signal * MOMENTUM_SCALE * days_ahead)

        rsi_signal, bb_signal = technical_bias(prices)
        technical_price = last * (1 + rsi_signal + bb_signal)

        blended = (
            hidden_price * HIDDEN_WEIGHT
            + pattern_price * PATTERN_WEIGHT
            + momentum_price * MOMENTUM_WEIGHT
            + technical_price * TECHNICAL_WEIGHT
        )

        decay = 1 - (days_ahead - 1) * HORIZON_DECAY_PER_DAY
        return float(blended * decay + last * (1 - decay))
