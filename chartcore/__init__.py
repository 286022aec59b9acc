"""Chartcore - data to fully resolved pie/donut scene descriptions."""

__version__ = "0.1.0"
