"""Adapters for external services."""

from .aggregator import AggregatorClient, AggregatorError

__all__ = ["AggregatorClient", "AggregatorError"]
