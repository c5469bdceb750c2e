"""Analyzer module."""

from .symbolic import BOTTLENECK_THRESHOLD_MS, WARNING_THRESHOLD_MS, analyze_trace

__all__ = ["analyze_trace", "BOTTLENECK_THRESHOLD_MS", "WARNING_THRESHOLD_MS"]
