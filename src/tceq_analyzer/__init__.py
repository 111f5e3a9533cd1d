"""Analysis of TCEQ mobile monitoring and optical gas imaging investigation records."""

__version__ = "0.1.0"
