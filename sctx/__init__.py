"""Service context, components, flags and structured logging for building services."""

__version__ = "0.1.0"