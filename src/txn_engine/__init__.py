"""Transaction list aggregation and enrichment engine."""

__version__ = "0.1.0"
