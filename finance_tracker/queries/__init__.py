"""Aggregation query package."""

from finance_tracker.queries.aggregation import AggregationEngine, MonthWindow

__all__ = ["AggregationEngine", "MonthWindow"]
