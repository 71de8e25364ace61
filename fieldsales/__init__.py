"""Field sales MSL achievement engine and CSV reconciliation engine."""

__version__ = "0.1.0"
