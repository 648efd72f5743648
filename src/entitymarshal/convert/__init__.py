"""Converter strategies rendering object graphs to external representations."""

from entitymarshal.convert.base import ConverterStrategy, Convertible, GraphWalker
from entitymarshal.convert.dump import CYCLE_PLACEHOLDER, DEPTH_PLACEHOLDER, Dump
from entitymarshal.convert.flat import FlatArray

__all__ = [
    "ConverterStrategy",
    "Convertible",
    "GraphWalker",
    "FlatArray",
    "Dump",
    "DEPTH_PLACEHOLDER",
    "CYCLE_PLACEHOLDER",
]
