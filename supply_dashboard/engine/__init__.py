"""
Forecasting & recommendation engine: converts per-product sale histories
into predicted demand, confidence, stock status and guidance text, then
folds the results into a fleet-wide summary.

Every module is pure: no DB, no clock, no I/O.

Modules
-------
forecaster  : forecast() — bounded moving average of recent quantities.
confidence  : confidence() — saturating sample-size confidence curve.
classifier  : StockThresholds + days_of_stock() + classify().
recommender : Recommendation + recommend() — severity tag and guidance text.
aggregator  : InsightAggregator + aggregate() + summarize() + build_stock_views().
trend       : daily_sales_trend() — per-day unit/revenue buckets for charts.
"""

from supply_dashboard.engine.aggregator import InsightAggregator, aggregate

__all__ = ["InsightAggregator", "aggregate"]
