"""Verdict aggregation"""

from .aggregator import VerdictAggregator

__all__ = ["VerdictAggregator"]
