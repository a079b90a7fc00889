"""Definition tables, record store, runtime operators and code generation for a small interpreter."""

__version__ = "0.1.0"