"""Recorder layers: stacks, prefixing, fanout, filtering and routing."""

__all__ = ["stack", "prefix", "fanout", "filter", "router"]