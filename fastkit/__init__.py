"""fast-kit: prompt template and specification management."""

__version__ = "0.1.0"
