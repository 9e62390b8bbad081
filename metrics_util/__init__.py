"""Helper types for metrics: keys, registries, buckets, histograms, summaries and recorder layers."""

__version__ = "0.1.0"