"""Reporting utilities for layernets."""

from .plots import PlotAdapter
from .sinks import CsvSink, JsonlSink
from .summary import summarize, write_summary

__all__ = ["CsvSink", "JsonlSink", "PlotAdapter", "summarize", "write_summary"]
