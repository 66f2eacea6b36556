"""
analytics/history.py
────────────────────
Accessors over an ordered ``HistoricalDataPoint`` sequence, plus the
adapter that turns an OHLCV ``pd.DataFrame`` into that sequence.

The forecasting strategies only ever read the history through
``closes`` / ``volumes`` / ``last_close``; the caller's sequence is
never mutated.
"""

from typing import List, Sequence

import numpy as np
import pandas as pd

from schemas.forecast import HistoricalDataPoint

_OHLCV_COLUMNS = ("open", "high", "low", "close", "volume")
_DATE_COLUMNS = ("date", "timestamp", "datetime")


def closes(history: Sequence[HistoricalDataPoint]) -> np.ndarray:
    """Closing prices as a float array, oldest → newest."""
    return np.fromiter((p.close for p in history), dtype=float, count=len(history))


def volumes(history: Sequence[HistoricalDataPoint]) -> np.ndarray:
    """Traded volumes as a float array, oldest → newest."""
    return np.fromiter((p.volume for p in history), dtype=float, count=len(history))


def last_close(history: Sequence[HistoricalDataPoint]) -> float:
    """Most recent close, or 0.0 when the history is empty."""
    if not history:
        return 0.0
    return float(history[-1].close)


def history_from_frame(df: pd.DataFrame) -> List[HistoricalDataPoint]:
    """
    Convert an OHLCV DataFrame into an ordered list of data points.

    Accepts the shapes produced by common market-data fetchers: a
    ``DatetimeIndex`` or a ``Date`` / ``date`` / ``timestamp`` column, and
    column names in any case (``Close`` and ``close`` are both fine).

    Args:
        df: OHLCV frame, one row per trading day.

    Returns:
        List of ``HistoricalDataPoint`` sorted oldest → newest.

    Raises:
        ValueError: If a date column or any OHLCV column is missing.
    """
    frame = df.copy()
    frame.columns = [str(col).lower().replace(" ", "_") for col in frame.columns]

    date_col = next((c for c in _DATE_COLUMNS if c in frame.columns), None)
    if date_col is None:
        if not isinstance(frame.index, pd.DatetimeIndex):
            raise ValueError("DataFrame needs a DatetimeIndex or a date/timestamp column")
        frame = frame.reset_index(names="date")
        date_col = "date"

    missing = [c for c in _OHLCV_COLUMNS if c not in frame.columns]
    if missing:
        raise ValueError(f"DataFrame is missing OHLCV columns: {', '.join(missing)}")

    frame[date_col] = pd.to_datetime(frame[date_col])
    frame = frame.sort_values(date_col)

    return [
        HistoricalDataPoint(
            date=row[date_col].date(),
            open=float(row["open"]),
            high=float(row["high"]),
            low=float(row["low"]),
            close=float(row["close"]),
            volume=float(row["volume"]),
        )
        for _, row in frame.iterrows()
    ]
