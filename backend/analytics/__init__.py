"""
analytics — Forecasting, backtesting and scoring logic.

Sub-packages / modules
----------------------
    analytics.forecasting   Trend, ARIMA-style, ensemble and sequence-memory strategies.
    analytics.metrics       MSE / R² / MAE / directional accuracy.
    analytics.backtest      80/20 backtest and best-model election.
    analytics.predictions   Dated prediction horizon and chart merge.
"""
