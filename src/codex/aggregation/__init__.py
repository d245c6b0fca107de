"""
Source tree aggregation module.
"""

from .aggregator import AggregationResult, Aggregator, VisitAction, format_header

__all__ = ["AggregationResult", "Aggregator", "VisitAction", "format_header"]
