"""Guest list import pipeline: parse, map, validate, preview and submit guests."""

__version__ = "0.1.0"
