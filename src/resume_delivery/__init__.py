"""Resume rendering and transient delivery pipeline."""

__version__ = "0.1.0"
