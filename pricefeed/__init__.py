"""Market data provider adapters for the personal finance backend."""

__version__ = "0.1.0"
