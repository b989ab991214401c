"""TPC-C data generation and load, the five transactions, and consistency checks."""

__version__ = "0.1.0"